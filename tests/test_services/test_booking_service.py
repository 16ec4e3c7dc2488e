"""Tests for BookingService."""

import uuid
from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import delete, update

from hoyconnect.core.exceptions import (
    BookingNotFound,
    InvalidPropertyType,
    InvalidState,
    ListingNotAvailable,
    NotFoundError,
    ValidationError,
)
from hoyconnect.domain.booking_state import BookingAction
from hoyconnect.models import Booking
from hoyconnect.services.booking_service import apply_transition, booking_service, get_booking, state_of


# --- create_booking ---


async def test_create_hotel_booking(db, make_listing, stay):
    listing = await make_listing(listing_type="hotel", price_per_night=Decimal("100"))
    guest_id = uuid.uuid4()
    check_in, check_out = stay

    booking = await booking_service.create_booking(
        db, guest_id=guest_id, listing_id=listing.id, check_in=check_in, check_out=check_out
    )

    assert booking.status == "pending"
    assert booking.payment_status == "pending"
    assert booking.property_type == "hotel"
    assert booking.host_id == listing.host_id
    assert booking.guest_id == guest_id
    assert booking.nights == 3
    assert booking.total_price == Decimal("300")
    assert booking.commission_amount == Decimal("45")
    assert booking.host_earnings == Decimal("255")


async def test_guesthouse_books_as_fully_furnished(db, make_booking):
    booking = await make_booking(listing_type="guesthouse", price_per_night=Decimal("100"))
    assert booking.property_type == "fully_furnished"
    assert booking.commission_amount == Decimal("36")


async def test_commission_keeps_full_precision(db, make_booking):
    booking = await make_booking(listing_type="hotel", price_per_night=Decimal("99.999999"))

    await db.refresh(booking)

    assert booking.total_price == Decimal("299.999997")
    assert booking.commission_amount == Decimal("44.99999955")
    assert booking.host_earnings == Decimal("254.99999745")


async def test_rental_cannot_be_booked(db, make_listing, stay):
    listing = await make_listing(listing_type="rental")
    with pytest.raises(InvalidPropertyType):
        await booking_service.create_booking(
            db, guest_id=uuid.uuid4(), listing_id=listing.id, check_in=stay[0], check_out=stay[1]
        )


async def test_unknown_listing_type_cannot_be_booked(db, make_listing, stay):
    listing = await make_listing(listing_type="apartment")
    with pytest.raises(InvalidPropertyType):
        await booking_service.create_booking(
            db, guest_id=uuid.uuid4(), listing_id=listing.id, check_in=stay[0], check_out=stay[1]
        )


async def test_unknown_listing(db, stay):
    with pytest.raises(NotFoundError):
        await booking_service.create_booking(
            db, guest_id=uuid.uuid4(), listing_id=uuid.uuid4(), check_in=stay[0], check_out=stay[1]
        )


@pytest.mark.parametrize(
    "overrides", [{"approval_status": "pending"}, {"is_available": False}]
)
async def test_unavailable_listing(db, make_listing, stay, overrides):
    listing = await make_listing(**overrides)
    with pytest.raises(ListingNotAvailable):
        await booking_service.create_booking(
            db, guest_id=uuid.uuid4(), listing_id=listing.id, check_in=stay[0], check_out=stay[1]
        )


async def test_host_cannot_book_own_listing(db, make_listing, stay):
    listing = await make_listing()
    with pytest.raises(ValidationError):
        await booking_service.create_booking(
            db, guest_id=listing.host_id, listing_id=listing.id, check_in=stay[0], check_out=stay[1]
        )


async def test_check_in_in_the_past(db, make_listing):
    listing = await make_listing()
    yesterday = date.today() - timedelta(days=1)
    with pytest.raises(ValidationError):
        await booking_service.create_booking(
            db,
            guest_id=uuid.uuid4(),
            listing_id=listing.id,
            check_in=yesterday,
            check_out=yesterday + timedelta(days=2),
        )


async def test_check_out_before_check_in(db, make_listing, stay):
    listing = await make_listing()
    with pytest.raises(ValidationError):
        await booking_service.create_booking(
            db, guest_id=uuid.uuid4(), listing_id=listing.id, check_in=stay[1], check_out=stay[0]
        )


async def test_too_many_guests(db, make_listing, stay):
    listing = await make_listing(max_guests=2)
    with pytest.raises(ValidationError):
        await booking_service.create_booking(
            db,
            guest_id=uuid.uuid4(),
            listing_id=listing.id,
            check_in=stay[0],
            check_out=stay[1],
            num_guests=3,
        )


# --- lifecycle ---


async def test_get_unknown_booking(db):
    with pytest.raises(BookingNotFound):
        await get_booking(db, uuid.uuid4())


async def test_host_confirms(db, make_booking):
    booking = await make_booking()
    booking = await booking_service.confirm(db, booking.id)
    assert booking.status == "confirmed"
    assert booking.payment_status == "pending"
    assert booking.confirmed_at is not None


async def test_host_rejects(db, make_booking):
    booking = await make_booking()
    booking = await booking_service.reject(db, booking.id, reason="Fully booked")
    assert booking.status == "cancelled"
    assert booking.cancelled_by == "host"
    assert booking.cancellation_reason == "Fully booked"
    assert booking.cancelled_at is not None


async def test_host_completes_confirmed(db, make_booking):
    booking = await make_booking()
    await booking_service.confirm(db, booking.id)
    booking = await booking_service.complete(db, booking.id)
    assert booking.status == "completed"
    assert booking.completed_at is not None


async def test_complete_pending_is_rejected(db, make_booking):
    booking = await make_booking()
    with pytest.raises(InvalidState):
        await booking_service.complete(db, booking.id)


async def test_guest_cancels_pending(db, make_booking):
    booking = await make_booking()
    booking = await booking_service.cancel(db, booking.id, reason="Plans changed")
    assert booking.status == "cancelled"
    assert booking.cancelled_by == "guest"


async def test_guest_cannot_cancel_confirmed(db, make_booking):
    booking = await make_booking()
    await booking_service.confirm(db, booking.id)
    with pytest.raises(InvalidState):
        await booking_service.cancel(db, booking.id)
    assert state_of(booking).status.value == "confirmed"


async def test_cannot_confirm_twice(db, make_booking):
    booking = await make_booking()
    await booking_service.confirm(db, booking.id)
    with pytest.raises(InvalidState):
        await booking_service.confirm(db, booking.id)


async def test_concurrent_change_is_detected(db, make_booking):
    booking = await make_booking()
    # Another request confirms the booking behind this session's back
    await db.execute(
        update(Booking)
        .where(Booking.id == booking.id)
        .values(status="confirmed")
        .execution_options(synchronize_session=False)
    )

    with pytest.raises(InvalidState, match="concurrently"):
        await booking_service.cancel(db, booking.id)

    await db.refresh(booking)
    assert booking.status == "confirmed"


async def test_transition_on_deleted_booking(db, make_booking):
    booking = await make_booking()
    await db.execute(
        delete(Booking).where(Booking.id == booking.id).execution_options(synchronize_session=False)
    )

    with pytest.raises(BookingNotFound):
        await apply_transition(db, booking, BookingAction.CONFIRM)
