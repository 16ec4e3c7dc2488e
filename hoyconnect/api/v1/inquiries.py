"""Inquiry endpoints for rental listings."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hoyconnect.api.deps import Actor, get_current_actor, get_db
from hoyconnect.core.exceptions import AuthorizationError
from hoyconnect.models.booking import Inquiry
from hoyconnect.schemas.inquiry import InquiryCreate, InquiryResponse
from hoyconnect.services.inquiry_service import inquiry_service

router = APIRouter()


@router.post("/", response_model=InquiryResponse, status_code=status.HTTP_201_CREATED)
async def create_inquiry(
    request: InquiryCreate,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Inquiry:
    """Send an inquiry to the host of a rental listing."""
    if actor.role != "guest":
        raise AuthorizationError("Only guests can send inquiries")
    return await inquiry_service.create_inquiry(
        db,
        guest_id=actor.id,
        listing_id=request.listing_id,
        message=request.message,
        contact_phone=request.contact_phone,
    )
