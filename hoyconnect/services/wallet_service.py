"""Host wallet ledger.

Balances are changed with in-database arithmetic (``balance = balance + x``)
so concurrent credits for the same host never overwrite each other. Callers
own the transaction: a credit only becomes visible together with whatever
else the caller commits.
"""

import logging
import re
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hoyconnect.core.exceptions import NotFoundError, ValidationError
from hoyconnect.models.booking import Booking
from hoyconnect.models.payment import HostWallet, Transaction

logger = logging.getLogger(__name__)

WALLET_NUMBER_PATTERN = re.compile(r"^[0-9]{9,12}$")


def assert_positive_amount(amount: Decimal, context: str) -> None:
    """Guard: Prevent negative ledger movements."""
    if amount < 0:
        raise ValidationError(f"{context}: amount must not be negative, got {amount}")


def validate_wallet_number(wallet_number: str) -> str:
    wallet_number = wallet_number.strip()
    if not WALLET_NUMBER_PATTERN.match(wallet_number):
        raise ValidationError("Invalid wallet number format. Must be 9-12 digits.")
    return wallet_number


class WalletService:
    """Service for host wallets and the transaction ledger."""

    async def get_wallet(self, db: AsyncSession, host_id: UUID) -> HostWallet | None:
        # Balances move through SQL arithmetic; reload over any cached copy
        result = await db.execute(
            select(HostWallet)
            .where(HostWallet.host_id == host_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create_wallet(
        self, db: AsyncSession, host_id: UUID, wallet_number: str
    ) -> HostWallet:
        """Register a host's mobile-money wallet number (unverified)."""
        wallet_number = validate_wallet_number(wallet_number)
        existing = await self.get_wallet(db, host_id)
        if existing is not None:
            if existing.wallet_number:
                raise ValidationError("Wallet already exists. Use PUT to update.")
            # Created implicitly by an earlier credit
            existing.wallet_number = wallet_number
            existing.verified = False
            await db.flush()
            await db.refresh(existing)
            return existing

        wallet = HostWallet(host_id=host_id, wallet_number=wallet_number, verified=False)
        db.add(wallet)
        await db.flush()
        await db.refresh(wallet)
        return wallet

    async def update_wallet(
        self,
        db: AsyncSession,
        host_id: UUID,
        wallet_number: str | None = None,
        verified: bool | None = None,
    ) -> HostWallet:
        """Change the wallet number (resets verification) or the verified flag."""
        wallet = await self.get_wallet(db, host_id)
        if wallet is None:
            raise NotFoundError("Wallet for host", str(host_id))

        if wallet_number is not None:
            wallet.wallet_number = validate_wallet_number(wallet_number)
            wallet.verified = False
        if verified is not None:
            wallet.verified = verified
        await db.flush()
        await db.refresh(wallet)
        return wallet

    async def _add_to_balance(
        self, db: AsyncSession, host_id: UUID, earnings: Decimal, commission: Decimal
    ) -> int:
        result = await db.execute(
            update(HostWallet)
            .where(HostWallet.host_id == host_id)
            .values(
                available_balance=HostWallet.available_balance + earnings,
                total_earnings=HostWallet.total_earnings + earnings,
                total_commission_paid=HostWallet.total_commission_paid + commission,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def _open_wallet(
        self, db: AsyncSession, host_id: UUID, earnings: Decimal, commission: Decimal
    ) -> bool:
        """Create the wallet holding the first credit. False if it already exists."""
        try:
            async with db.begin_nested():
                db.add(
                    HostWallet(
                        host_id=host_id,
                        available_balance=earnings,
                        total_earnings=earnings,
                        total_commission_paid=commission,
                    )
                )
                await db.flush()
        except IntegrityError:
            return False
        return True

    async def credit(
        self,
        db: AsyncSession,
        host_id: UUID,
        earnings: Decimal,
        commission: Decimal,
    ) -> None:
        """Credit host earnings and track the commission retained.

        Args:
            db: Database session (transaction owned by the caller)
            host_id: Host to credit
            earnings: Amount added to the available balance
            commission: Commission retained by the platform
        """
        assert_positive_amount(earnings, "Host credit")
        assert_positive_amount(commission, "Commission")

        if not await self._add_to_balance(db, host_id, earnings, commission):
            # First earnings for this host: open the wallet with the credit
            if not await self._open_wallet(db, host_id, earnings, commission):
                # Another payment opened it in between
                logger.info("Wallet for host %s opened concurrently, retrying credit", host_id)
                if not await self._add_to_balance(db, host_id, earnings, commission):
                    raise NotFoundError("Wallet for host", str(host_id))
        logger.info("Credited host %s with %s (commission %s)", host_id, earnings, commission)

    async def debit(
        self,
        db: AsyncSession,
        host_id: UUID,
        earnings: Decimal,
        commission: Decimal,
    ) -> None:
        """Reverse a previous credit. The balance may go negative (clawback)."""
        assert_positive_amount(earnings, "Host debit")
        assert_positive_amount(commission, "Commission reversal")

        result = await db.execute(
            update(HostWallet)
            .where(HostWallet.host_id == host_id)
            .values(
                available_balance=HostWallet.available_balance - earnings,
                total_earnings=HostWallet.total_earnings - earnings,
                total_commission_paid=HostWallet.total_commission_paid - commission,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("Wallet for host", str(host_id))
        logger.info("Debited host %s by %s (commission %s)", host_id, earnings, commission)

    def record_payment_entries(
        self,
        db: AsyncSession,
        booking: Booking,
        commission_rate: Decimal,
        host_earnings: Decimal,
    ) -> list[Transaction]:
        """Ledger lines for a paid booking: guest payment, host earning, commission."""
        entries = [
            Transaction(
                user_id=booking.guest_id,
                type="booking_payment",
                amount=-booking.total_price,
                reference_id=booking.id,
                description=f"Payment for booking #{booking.id}",
            ),
            Transaction(
                user_id=booking.host_id,
                type="host_earning",
                amount=host_earnings,
                reference_id=booking.id,
                description=f"Earnings from booking #{booking.id}",
            ),
            Transaction(
                user_id=booking.host_id,
                type="commission",
                amount=-booking.commission_amount,
                reference_id=booking.id,
                description=f"Platform commission ({commission_rate.normalize():f}%)",
            ),
        ]
        db.add_all(entries)
        return entries

    def record_refund_entries(
        self,
        db: AsyncSession,
        booking: Booking,
        host_earnings: Decimal,
        reason: str | None,
    ) -> list[Transaction]:
        """Ledger lines for a refunded booking."""
        entries = [
            Transaction(
                user_id=booking.guest_id,
                type="refund",
                amount=booking.total_price,
                reference_id=booking.id,
                description=f"Refund for booking #{booking.id}: {reason or 'no reason given'}",
            ),
            Transaction(
                user_id=booking.host_id,
                type="host_earning_reversal",
                amount=-host_earnings,
                reference_id=booking.id,
                description=f"Earnings reversed for booking #{booking.id}",
            ),
        ]
        db.add_all(entries)
        return entries


wallet_service = WalletService()
