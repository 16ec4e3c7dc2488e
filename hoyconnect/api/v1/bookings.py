"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hoyconnect.api.deps import (
    Actor,
    get_current_actor,
    get_db,
    require_booking_access,
    require_guest_booking_access,
    require_host_booking_access,
)
from hoyconnect.core.exceptions import AuthorizationError
from hoyconnect.models.booking import Booking
from hoyconnect.schemas.booking import (
    BookingCancelRequest,
    BookingCreate,
    BookingRejectRequest,
    BookingResponse,
)
from hoyconnect.services.booking_service import booking_service, get_booking

router = APIRouter()


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Create a booking request (guest)."""
    if actor.role != "guest":
        raise AuthorizationError("Only guests can book")
    return await booking_service.create_booking(
        db,
        guest_id=actor.id,
        listing_id=booking_data.listing_id,
        room_id=booking_data.room_id,
        check_in=booking_data.check_in,
        check_out=booking_data.check_out,
        num_guests=booking_data.num_guests,
        special_requests=booking_data.special_requests,
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def read_booking(
    booking_id: UUID,
    actor: Annotated[Actor, Depends(require_booking_access)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Get a booking by ID."""
    return await get_booking(db, booking_id)


@router.post("/{booking_id}/confirm", response_model=BookingResponse)
async def confirm_booking(
    booking_id: UUID,
    actor: Annotated[Actor, Depends(require_host_booking_access)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Confirm a pending booking (host only)."""
    return await booking_service.confirm(db, booking_id)


@router.post("/{booking_id}/reject", response_model=BookingResponse)
async def reject_booking(
    booking_id: UUID,
    request: BookingRejectRequest,
    actor: Annotated[Actor, Depends(require_host_booking_access)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Reject a pending booking (host only)."""
    return await booking_service.reject(db, booking_id, reason=request.reason)


@router.post("/{booking_id}/complete", response_model=BookingResponse)
async def complete_booking(
    booking_id: UUID,
    actor: Annotated[Actor, Depends(require_host_booking_access)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Mark a confirmed booking as completed (host only)."""
    return await booking_service.complete(db, booking_id)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: UUID,
    request: BookingCancelRequest,
    actor: Annotated[Actor, Depends(require_guest_booking_access)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Cancel a pending booking (guest only)."""
    return await booking_service.cancel(db, booking_id, reason=request.reason)
