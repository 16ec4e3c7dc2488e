"""Payment confirmation service.

Confirming a payment flips the booking to ``paid``, records the payment and
credits the host wallet. All of it runs in one transaction (a SAVEPOINT when
the session is already inside one), and the booking update only matches rows
whose payment is still pending, so a second confirmation can never credit the
host twice.
"""

import logging
import time
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from hoyconnect.config import settings
from hoyconnect.core.exceptions import AlreadyPaid, InvalidPropertyType, InvalidState, ValidationError
from hoyconnect.domain import booking_state
from hoyconnect.domain.booking_state import BookingAction, PaymentStatus
from hoyconnect.models.booking import Booking
from hoyconnect.models.payment import BookingPayment
from hoyconnect.services.booking_service import apply_transition, get_booking, state_of
from hoyconnect.services.commission_service import CommissionService, commission_service
from hoyconnect.services.wallet_service import WalletService, wallet_service

logger = logging.getLogger(__name__)

PAYMENT_METHODS = ("evc_plus", "card", "bank_transfer")


@dataclass(frozen=True)
class PaymentConfirmation:
    """Outcome of a payment confirmation."""

    success: bool
    host_earnings: Decimal
    already_paid: bool
    booking: Booking
    transaction_reference: str | None = None


@dataclass(frozen=True)
class MobileMoneyInstructions:
    """What a guest needs to pay a booking over EVC Plus."""

    booking_id: UUID
    total_amount: Decimal
    check_in: date
    check_out: date
    wallet_number: str
    ussd_code: str


def generate_reference() -> str:
    return f"TXN-{int(time.time() * 1000)}"


def ussd_code_for(wallet_number: str, amount: Decimal) -> str:
    """USSD string a guest dials to send money to the host wallet."""
    return f"{settings.evc_ussd_prefix}{wallet_number}*{amount.normalize():f}#"


class PaymentService:
    """Service for confirming, failing and refunding booking payments."""

    def __init__(
        self,
        commission: CommissionService = commission_service,
        wallets: WalletService = wallet_service,
    ):
        self.commission = commission
        self.wallets = wallets

    def _assert_payable_type(self, booking: Booking) -> None:
        if not self.commission.registry.is_payable(booking.property_type):
            raise InvalidPropertyType(
                booking.property_type,
                detail=f'Property type "{booking.property_type}" does not support payments',
            )

    async def payment_info(self, db: AsyncSession, booking_id: UUID) -> MobileMoneyInstructions:
        """Mobile-money payment instructions for a confirmed, unpaid booking.

        Raises:
            BookingNotFound: Unknown booking
            InvalidState: Booking not confirmed yet or payment already processed
            ValidationError: Host wallet missing or not verified
        """
        booking = await get_booking(db, booking_id)
        state = state_of(booking)
        if state.status not in booking_state.PAYABLE_STATUSES:
            raise InvalidState("Booking must be confirmed by host first")
        if state.payment_status != PaymentStatus.PENDING:
            raise InvalidState("Payment is already processed")

        wallet = await self.wallets.get_wallet(db, booking.host_id)
        if wallet is None or not wallet.wallet_number:
            raise ValidationError("Host wallet number not set")
        if not wallet.verified:
            raise ValidationError("Host wallet not verified yet")

        return MobileMoneyInstructions(
            booking_id=booking.id,
            total_amount=booking.total_price,
            check_in=booking.check_in,
            check_out=booking.check_out,
            wallet_number=wallet.wallet_number,
            ussd_code=ussd_code_for(wallet.wallet_number, booking.total_price),
        )

    async def confirm_payment(
        self,
        db: AsyncSession,
        booking_id: UUID,
        method: str,
        reference: str | None = None,
    ) -> PaymentConfirmation:
        """Mark a booking paid and credit the host, at most once.

        Args:
            db: Database session
            booking_id: Booking being paid
            method: Payment method (evc_plus, card, bank_transfer)
            reference: Payment rail reference; generated when missing

        Returns:
            PaymentConfirmation: ``already_paid`` is True for a repeated confirmation

        Raises:
            BookingNotFound: Unknown booking
            ValidationError: Unsupported payment method
            InvalidState: Booking pending or cancelled, or payment failed/refunded
        """
        booking = await get_booking(db, booking_id)
        if method not in PAYMENT_METHODS:
            raise ValidationError(f"Unsupported payment method: {method}")
        reference = reference or generate_reference()
        host_earnings = self.commission.host_earnings_for(
            booking.total_price, booking.commission_amount
        )

        try:
            target = booking_state.confirm_payment(state_of(booking))
        except AlreadyPaid:
            logger.info("Duplicate payment confirmation for booking %s ignored", booking.id)
            return PaymentConfirmation(
                success=True, host_earnings=host_earnings, already_paid=True, booking=booking
            )
        self._assert_payable_type(booking)

        paid_at = datetime.now(UTC)
        async with db.begin_nested():
            result = await db.execute(
                update(Booking)
                .where(
                    Booking.id == booking.id,
                    Booking.status.in_([s.value for s in booking_state.PAYABLE_STATUSES]),
                    Booking.payment_status == PaymentStatus.PENDING.value,
                )
                .values(payment_status=target.payment_status.value, paid_at=paid_at)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                # Lost a race with another confirmation (or a state change)
                await db.refresh(booking)
                if booking.payment_status == PaymentStatus.PAID.value:
                    logger.info("Concurrent payment confirmation for booking %s ignored", booking.id)
                    return PaymentConfirmation(
                        success=True, host_earnings=host_earnings, already_paid=True, booking=booking
                    )
                raise InvalidState(
                    f"Booking {booking.id} can no longer be paid "
                    f"({booking.status}/{booking.payment_status})"
                )

            commission_rate = self.commission.registry.rate(booking.property_type)
            db.add(
                BookingPayment(
                    booking_id=booking.id,
                    guest_id=booking.guest_id,
                    host_id=booking.host_id,
                    amount=booking.total_price,
                    commission_rate=commission_rate,
                    commission_amount=booking.commission_amount,
                    host_earnings=host_earnings,
                    currency=settings.default_currency,
                    payment_method=method,
                    transaction_reference=reference,
                    status="completed",
                    paid_at=paid_at,
                )
            )
            await self.wallets.credit(
                db, booking.host_id, host_earnings, booking.commission_amount
            )
            self.wallets.record_payment_entries(db, booking, commission_rate, host_earnings)
            await db.flush()

        await db.refresh(booking)
        logger.info(
            "Payment confirmed for booking %s via %s (%s): host earnings %s",
            booking.id,
            method,
            reference,
            host_earnings,
        )
        return PaymentConfirmation(
            success=True,
            host_earnings=host_earnings,
            already_paid=False,
            booking=booking,
            transaction_reference=reference,
        )

    async def record_failure(
        self, db: AsyncSession, booking_id: UUID, reason: str | None = None
    ) -> Booking:
        """Payment rail reported that the payment did not go through."""
        booking = await get_booking(db, booking_id)
        booking = await apply_transition(db, booking, BookingAction.FAIL_PAYMENT)
        logger.warning("Payment failed for booking %s: %s", booking.id, reason or "no reason given")
        return booking

    async def retry(self, db: AsyncSession, booking_id: UUID) -> Booking:
        """Reopen a failed payment so the guest can pay again."""
        booking = await get_booking(db, booking_id)
        return await apply_transition(db, booking, BookingAction.RETRY_PAYMENT)

    async def refund(
        self, db: AsyncSession, booking_id: UUID, reason: str | None = None
    ) -> Booking:
        """Refund a paid booking and take the earnings back from the host."""
        booking = await get_booking(db, booking_id)
        host_earnings = self.commission.host_earnings_for(
            booking.total_price, booking.commission_amount
        )

        async with db.begin_nested():
            booking = await apply_transition(db, booking, BookingAction.REFUND)
            await db.execute(
                update(BookingPayment)
                .where(BookingPayment.booking_id == booking.id)
                .values(status="refunded", refunded_at=datetime.now(UTC))
                .execution_options(synchronize_session=False)
            )
            await self.wallets.debit(
                db, booking.host_id, host_earnings, booking.commission_amount
            )
            self.wallets.record_refund_entries(db, booking, host_earnings, reason)
            await db.flush()

        logger.info("Booking %s refunded: %s", booking.id, reason or "no reason given")
        return booking


payment_service = PaymentService()
