"""Booking-related database models."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from hoyconnect.database import Base

if TYPE_CHECKING:
    from hoyconnect.models.listing import Listing
    from hoyconnect.models.payment import BookingPayment


class Booking(Base):
    """Booking model."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("check_out > check_in", name="ck_bookings_dates"),
        CheckConstraint("num_guests >= 1", name="ck_bookings_num_guests"),
        CheckConstraint("total_price >= 0", name="ck_bookings_total_price"),
        CheckConstraint("commission_amount >= 0", name="ck_bookings_commission"),
        # No payment before the host accepts the booking
        CheckConstraint(
            "payment_status = 'pending' OR status IN ('confirmed', 'completed')",
            name="ck_bookings_paid_after_confirm",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    guest_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    listing_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("listings.id"), nullable=False, index=True
    )
    room_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    host_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    property_type: Mapped[str] = mapped_column(
        String(30), nullable=False
    )  # hotel, fully_furnished

    # Dates
    check_in: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    num_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Pricing, fixed at creation
    total_price: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
    # Whole-percent rate times a 6-place total needs 8 places
    commission_amount: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default="pending", index=True
    )  # pending, confirmed, cancelled, completed
    payment_status: Mapped[str] = mapped_column(
        String(20), default="pending", index=True
    )  # pending, paid, failed, refunded

    # Cancellation
    cancelled_by: Mapped[str | None] = mapped_column(String(10))  # guest, host, admin
    cancellation_reason: Mapped[str | None] = mapped_column(Text)

    special_requests: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    listing: Mapped["Listing"] = relationship("Listing", back_populates="bookings")
    payment: Mapped["BookingPayment | None"] = relationship(
        "BookingPayment", back_populates="booking", uselist=False
    )

    @property
    def nights(self) -> int:
        """Calculate number of nights."""
        return (self.check_out - self.check_in).days

    @property
    def host_earnings(self) -> Decimal:
        return self.total_price - self.commission_amount


class Inquiry(Base):
    """Guest inquiry for an inquiry-only (rental) listing."""

    __tablename__ = "inquiries"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    listing_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("listings.id"), nullable=False, index=True
    )
    guest_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    host_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    contact_phone: Mapped[str | None] = mapped_column(String(20))
    status: Mapped[str] = mapped_column(String(20), default="new")  # new, contacted, closed
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    listing: Mapped["Listing"] = relationship("Listing", back_populates="inquiries")
