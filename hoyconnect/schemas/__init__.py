"""Pydantic schemas for API validation."""

from hoyconnect.schemas.booking import (
    BookingCancelRequest,
    BookingCreate,
    BookingRejectRequest,
    BookingResponse,
)
from hoyconnect.schemas.commission import (
    CommissionBreakdownResponse,
    CommissionCalculateRequest,
    PropertyTypeRateResponse,
)
from hoyconnect.schemas.inquiry import InquiryCreate, InquiryResponse
from hoyconnect.schemas.payment import (
    MobileMoneyInfoResponse,
    PaymentFailureRequest,
    PaymentProcessRequest,
    PaymentProcessResponse,
    RefundRequest,
    WalletCreate,
    WalletResponse,
    WalletUpdate,
)

__all__ = [
    # Booking
    "BookingCancelRequest",
    "BookingCreate",
    "BookingRejectRequest",
    "BookingResponse",
    # Commission
    "CommissionBreakdownResponse",
    "CommissionCalculateRequest",
    "PropertyTypeRateResponse",
    # Inquiry
    "InquiryCreate",
    "InquiryResponse",
    # Payment
    "MobileMoneyInfoResponse",
    "PaymentFailureRequest",
    "PaymentProcessRequest",
    "PaymentProcessResponse",
    "RefundRequest",
    "WalletCreate",
    "WalletResponse",
    "WalletUpdate",
]
