"""Payment endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hoyconnect.api.deps import (
    Actor,
    get_current_actor,
    get_current_admin,
    get_db,
    require_guest_booking_access,
)
from hoyconnect.core.exceptions import AuthorizationError
from hoyconnect.models.booking import Booking
from hoyconnect.schemas.booking import BookingResponse
from hoyconnect.schemas.payment import (
    MobileMoneyInfoResponse,
    PaymentFailureRequest,
    PaymentProcessRequest,
    PaymentProcessResponse,
    RefundRequest,
)
from hoyconnect.services.booking_service import get_booking
from hoyconnect.services.payment_service import MobileMoneyInstructions, payment_service

router = APIRouter()


@router.get("/evc-info", response_model=MobileMoneyInfoResponse)
async def get_mobile_money_info(
    booking_id: Annotated[UUID, Query()],
    actor: Annotated[Actor, Depends(require_guest_booking_access)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MobileMoneyInstructions:
    """EVC Plus instructions (host wallet and USSD code) for a confirmed booking."""
    return await payment_service.payment_info(db, booking_id)


@router.post("/process", response_model=PaymentProcessResponse)
async def process_payment(
    request: PaymentProcessRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PaymentProcessResponse:
    """Confirm a booking payment ("I have paid", or a processor callback).

    Repeating the call for a paid booking succeeds without crediting the host again.
    """
    if not actor.is_admin:
        booking = await get_booking(db, request.booking_id)
        if booking.guest_id != actor.id:
            raise AuthorizationError("You can only pay for your own bookings")

    confirmation = await payment_service.confirm_payment(
        db,
        request.booking_id,
        method=request.payment_method,
        reference=request.transaction_reference,
    )
    return PaymentProcessResponse(
        success=confirmation.success,
        already_paid=confirmation.already_paid,
        host_earnings=confirmation.host_earnings,
        transaction_reference=confirmation.transaction_reference,
        booking=BookingResponse.model_validate(confirmation.booking),
        message=(
            "Payment was already processed"
            if confirmation.already_paid
            else "Payment processed successfully"
        ),
    )


@router.post("/{booking_id}/fail", response_model=BookingResponse)
async def mark_payment_failed(
    booking_id: UUID,
    request: PaymentFailureRequest,
    actor: Annotated[Actor, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Record a failed payment (admin only)."""
    return await payment_service.record_failure(db, booking_id, reason=request.reason)


@router.post("/{booking_id}/retry", response_model=BookingResponse)
async def retry_payment(
    booking_id: UUID,
    actor: Annotated[Actor, Depends(require_guest_booking_access)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Reopen a failed payment so it can be paid again."""
    return await payment_service.retry(db, booking_id)


@router.post("/{booking_id}/refund", response_model=BookingResponse)
async def refund_payment(
    booking_id: UUID,
    request: RefundRequest,
    actor: Annotated[Actor, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Refund a paid booking (admin only)."""
    return await payment_service.refund(db, booking_id, reason=request.reason)
