"""Booking lifecycle service.

Every transition reads the booking, asks the state machine for the next
state, then writes it with an UPDATE guarded on the state that was read.
A zero-row update means someone else moved the booking in between.
"""

import logging
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hoyconnect.core.exceptions import (
    BookingNotFound,
    InvalidPropertyType,
    InvalidState,
    ListingNotAvailable,
    NotFoundError,
    ValidationError,
)
from hoyconnect.domain import booking_state
from hoyconnect.domain.booking_state import BookingAction, BookingState
from hoyconnect.domain.property_types import PropertyType
from hoyconnect.models.booking import Booking
from hoyconnect.models.listing import Listing
from hoyconnect.services.commission_service import CommissionService, commission_service

logger = logging.getLogger(__name__)


def state_of(booking: Booking) -> BookingState:
    """Validated status pair of a stored booking."""
    return BookingState(booking.status, booking.payment_status)


async def get_booking(db: AsyncSession, booking_id: UUID) -> Booking:
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()
    if booking is None:
        raise BookingNotFound(booking_id)
    return booking


async def apply_transition(
    db: AsyncSession,
    booking: Booking,
    action: BookingAction,
    **values,
) -> Booking:
    """Persist a state-machine transition with a conditional update.

    Args:
        db: Database session
        booking: Booking as read in this request
        action: Lifecycle action to apply
        **values: Extra columns to write with the new state

    Returns:
        Booking: The refreshed booking

    Raises:
        InvalidState: If the action is not allowed, or the booking changed concurrently
    """
    current = state_of(booking)
    target = booking_state.apply_action(current, action)

    result = await db.execute(
        update(Booking)
        .where(
            Booking.id == booking.id,
            Booking.status == current.status.value,
            Booking.payment_status == current.payment_status.value,
        )
        .values(
            status=target.status.value,
            payment_status=target.payment_status.value,
            **values,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        still_there = await db.scalar(select(Booking.id).where(Booking.id == booking.id))
        if still_there is None:
            raise BookingNotFound(booking.id)
        raise InvalidState(f"Booking {booking.id} was modified concurrently; reload and retry")

    await db.refresh(booking)
    logger.info(
        "Booking %s: %s (%s/%s -> %s/%s)",
        booking.id,
        BookingAction(action).value,
        current.status.value,
        current.payment_status.value,
        target.status.value,
        target.payment_status.value,
    )
    return booking


class BookingService:
    """Service for creating bookings and moving them through their lifecycle."""

    def __init__(self, commission: CommissionService = commission_service):
        self.commission = commission
        self.registry = commission.registry

    def property_type_of(self, listing: Listing) -> PropertyType:
        return self.registry.resolve_listing_type(listing.listing_type)

    def quote(self, listing: Listing, check_in: date, check_out: date) -> Decimal:
        """Total price for a stay."""
        nights = (check_out - check_in).days
        return Decimal(listing.price_per_night) * nights

    async def create_booking(
        self,
        db: AsyncSession,
        guest_id: UUID,
        listing_id: UUID,
        check_in: date,
        check_out: date,
        num_guests: int = 1,
        room_id: UUID | None = None,
        special_requests: str | None = None,
        today: date | None = None,
    ) -> Booking:
        """Create a pending booking with its commission fixed at the current price.

        Raises:
            NotFoundError: Unknown listing
            InvalidPropertyType: Listing is inquiry only
            ListingNotAvailable: Listing not approved or not available
            ValidationError: Bad dates, too many guests or own listing
        """
        result = await db.execute(select(Listing).where(Listing.id == listing_id))
        listing = result.scalar_one_or_none()
        if listing is None:
            raise NotFoundError("Listing", str(listing_id))

        property_type = self.property_type_of(listing)
        if not self.registry.is_bookable(property_type):
            raise InvalidPropertyType(
                property_type.value,
                detail=f"{self.registry.label(property_type)} listings accept inquiries, not bookings",
            )
        if listing.approval_status != "approved" or not listing.is_available:
            raise ListingNotAvailable()
        if listing.host_id == guest_id:
            raise ValidationError("You cannot book your own listing")

        today = today or datetime.now(UTC).date()
        if check_in >= check_out:
            raise ValidationError("check_out must be after check_in")
        if check_in < today:
            raise ValidationError("check_in cannot be in the past")
        if num_guests < 1:
            raise ValidationError("At least one guest is required")
        if num_guests > listing.max_guests:
            raise ValidationError(f"Maximum {listing.max_guests} guests allowed")

        total_price = self.quote(listing, check_in, check_out)
        breakdown = self.commission.compute_commission(total_price, property_type)

        initial = BookingState.initial()
        booking = Booking(
            guest_id=guest_id,
            listing_id=listing.id,
            room_id=room_id,
            host_id=listing.host_id,
            property_type=property_type.value,
            check_in=check_in,
            check_out=check_out,
            num_guests=num_guests,
            total_price=breakdown.subtotal,
            commission_amount=breakdown.commission_amount,
            status=initial.status.value,
            payment_status=initial.payment_status.value,
            special_requests=special_requests,
        )
        db.add(booking)
        await db.flush()
        await db.refresh(booking)

        logger.info(
            "Booking %s created for listing %s: total=%s commission=%s",
            booking.id,
            listing.id,
            breakdown.subtotal,
            breakdown.commission_amount,
        )
        return booking

    async def confirm(self, db: AsyncSession, booking_id: UUID) -> Booking:
        """Host accepts a pending booking."""
        booking = await get_booking(db, booking_id)
        return await apply_transition(
            db, booking, BookingAction.CONFIRM, confirmed_at=datetime.now(UTC)
        )

    async def reject(self, db: AsyncSession, booking_id: UUID, reason: str | None = None) -> Booking:
        """Host declines a pending booking."""
        booking = await get_booking(db, booking_id)
        return await apply_transition(
            db,
            booking,
            BookingAction.REJECT,
            cancelled_by="host",
            cancellation_reason=reason,
            cancelled_at=datetime.now(UTC),
        )

    async def complete(self, db: AsyncSession, booking_id: UUID) -> Booking:
        """Host marks a confirmed stay as completed."""
        booking = await get_booking(db, booking_id)
        return await apply_transition(
            db, booking, BookingAction.COMPLETE, completed_at=datetime.now(UTC)
        )

    async def cancel(self, db: AsyncSession, booking_id: UUID, reason: str | None = None) -> Booking:
        """Guest withdraws a booking the host has not answered yet."""
        booking = await get_booking(db, booking_id)
        return await apply_transition(
            db,
            booking,
            BookingAction.CANCEL,
            cancelled_by="guest",
            cancellation_reason=reason,
            cancelled_at=datetime.now(UTC),
        )


booking_service = BookingService()
