"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    listing_id: UUID
    room_id: UUID | None = None
    check_in: date
    check_out: date
    num_guests: int = Field(default=1, ge=1, le=50)
    special_requests: str | None = Field(None, max_length=1000)

    @field_validator("check_out")
    @classmethod
    def validate_checkout(cls, v: date, info) -> date:
        check_in = info.data.get("check_in")
        if check_in and v <= check_in:
            raise ValueError("check_out must be after check_in")
        return v


class BookingRejectRequest(BaseModel):
    """Schema for a host rejecting a booking."""

    reason: str | None = Field(None, max_length=500)


class BookingCancelRequest(BaseModel):
    """Schema for a guest cancelling a booking."""

    reason: str | None = Field(None, max_length=500)


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    guest_id: UUID
    listing_id: UUID
    room_id: UUID | None
    host_id: UUID
    property_type: str

    # Dates
    check_in: date
    check_out: date
    nights: int
    num_guests: int

    # Pricing
    total_price: Decimal
    commission_amount: Decimal
    host_earnings: Decimal

    # Status
    status: str
    payment_status: str

    # Cancellation
    cancelled_by: str | None
    cancellation_reason: str | None

    special_requests: str | None

    # Timestamps
    confirmed_at: datetime | None
    cancelled_at: datetime | None
    completed_at: datetime | None
    paid_at: datetime | None
    created_at: datetime
