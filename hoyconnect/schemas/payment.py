"""Payment and wallet Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from hoyconnect.schemas.booking import BookingResponse


class PaymentProcessRequest(BaseModel):
    """Schema for confirming a booking payment."""

    booking_id: UUID
    payment_method: str = Field(..., pattern="^(evc_plus|card|bank_transfer)$")
    transaction_reference: str | None = Field(None, max_length=100)


class PaymentProcessResponse(BaseModel):
    """Schema for a payment confirmation result."""

    success: bool
    already_paid: bool
    host_earnings: Decimal
    transaction_reference: str | None = None
    booking: BookingResponse
    message: str


class PaymentFailureRequest(BaseModel):
    """Schema for recording a failed payment."""

    reason: str | None = Field(None, max_length=500)


class RefundRequest(BaseModel):
    """Schema for refunding a paid booking."""

    reason: str = Field(..., min_length=3, max_length=500)


class MobileMoneyInfoResponse(BaseModel):
    """Schema for EVC Plus payment instructions."""

    model_config = ConfigDict(from_attributes=True)

    booking_id: UUID
    total_amount: Decimal
    check_in: date
    check_out: date
    wallet_number: str
    ussd_code: str


class WalletCreate(BaseModel):
    """Schema for registering a host wallet."""

    wallet_number: str = Field(..., min_length=9, max_length=12)


class WalletUpdate(BaseModel):
    """Schema for updating a host wallet."""

    wallet_number: str | None = Field(None, min_length=9, max_length=12)
    verified: bool | None = None
    host_id: UUID | None = None  # admin only: wallet to update


class WalletResponse(BaseModel):
    """Schema for host wallet response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    host_id: UUID
    wallet_number: str | None
    verified: bool
    available_balance: Decimal
    total_earnings: Decimal
    total_commission_paid: Decimal
    updated_at: datetime | None = None
