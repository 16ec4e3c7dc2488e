"""Listing-related database models."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from hoyconnect.database import Base

if TYPE_CHECKING:
    from hoyconnect.models.booking import Booking, Inquiry


class Listing(Base):
    """Property listing owned by a host."""

    __tablename__ = "listings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    host_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    # Raw category: hotel, fully_furnished, furnished, guesthouse, rental
    listing_type: Mapped[str] = mapped_column(String(30), nullable=False)

    approval_status: Mapped[str] = mapped_column(
        String(20), default="pending", index=True
    )  # pending, approved, rejected
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)

    price_per_night: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
    max_guests: Mapped[int] = mapped_column(Integer, default=1)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="listing")
    inquiries: Mapped[list["Inquiry"]] = relationship("Inquiry", back_populates="listing")
