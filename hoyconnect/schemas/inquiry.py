"""Inquiry Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class InquiryCreate(BaseModel):
    """Schema for sending an inquiry about a rental listing."""

    listing_id: UUID
    message: str = Field(..., min_length=1, max_length=2000)
    contact_phone: str | None = Field(None, max_length=20)


class InquiryResponse(BaseModel):
    """Schema for inquiry response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    listing_id: UUID
    guest_id: UUID
    host_id: UUID
    message: str
    contact_phone: str | None
    status: str
    created_at: datetime
