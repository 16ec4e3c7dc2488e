"""Payment, wallet and ledger database models."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from hoyconnect.database import Base

if TYPE_CHECKING:
    from hoyconnect.models.booking import Booking


class BookingPayment(Base):
    """Completed payment for a booking, with its commission split.

    At most one row per booking.
    """

    __tablename__ = "booking_payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bookings.id"), nullable=False, unique=True
    )
    guest_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    host_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    # Amounts
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
    commission_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    commission_amount: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    host_earnings: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="USD")

    # Method
    payment_method: Mapped[str] = mapped_column(
        String(30), nullable=False
    )  # evc_plus, card, bank_transfer
    transaction_reference: Mapped[str] = mapped_column(String(100), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), default="completed"
    )  # completed, refunded

    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    refunded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    booking: Mapped["Booking"] = relationship("Booking", back_populates="payment")


class HostWallet(Base):
    """Host mobile-money wallet and earnings balance."""

    __tablename__ = "host_wallets"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    host_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, unique=True)
    wallet_number: Mapped[str | None] = mapped_column(String(12))
    verified: Mapped[bool] = mapped_column(Boolean, default=False)

    # Balances
    available_balance: Mapped[Decimal] = mapped_column(Numeric(20, 8), default=Decimal("0"))
    total_earnings: Mapped[Decimal] = mapped_column(Numeric(20, 8), default=Decimal("0"))
    total_commission_paid: Mapped[Decimal] = mapped_column(
        Numeric(20, 8), default=Decimal("0")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class Transaction(Base):
    """Ledger line for a money movement.

    Amount sign gives the direction from the user's point of view.
    """

    __tablename__ = "transactions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    type: Mapped[str] = mapped_column(
        String(30), nullable=False
    )  # booking_payment, host_earning, commission, refund, host_earning_reversal
    amount: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="completed")
    reference_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    reference_type: Mapped[str] = mapped_column(String(20), default="booking")
    description: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
