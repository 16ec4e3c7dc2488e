"""Tests for the booking endpoints."""

import uuid
from decimal import Decimal
from types import SimpleNamespace

import pytest

BOOKINGS = "/api/v1/bookings"


def as_user(user_id, role="guest"):
    return {"X-User-Id": str(user_id), "X-User-Role": role}


@pytest.fixture
async def hotel(db, make_listing):
    listing = await make_listing(listing_type="hotel", price_per_night=Decimal("100"))
    await db.commit()
    # Plain ids: a failed request rolls the session back and expires ORM objects
    return SimpleNamespace(id=listing.id, host_id=listing.host_id)


async def create_booking(client, listing, guest_id, stay):
    check_in, check_out = stay
    return await client.post(
        f"{BOOKINGS}/",
        json={
            "listing_id": str(listing.id),
            "check_in": check_in.isoformat(),
            "check_out": check_out.isoformat(),
            "num_guests": 2,
        },
        headers=as_user(guest_id),
    )


# --- create ---


async def test_create_booking(client, hotel, stay):
    guest_id = uuid.uuid4()
    response = await create_booking(client, hotel, guest_id, stay)

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["payment_status"] == "pending"
    assert data["guest_id"] == str(guest_id)
    assert data["nights"] == 3
    assert Decimal(data["total_price"]) == Decimal("300")
    assert Decimal(data["commission_amount"]) == Decimal("45")
    assert Decimal(data["host_earnings"]) == Decimal("255")
    assert "X-Request-ID" in response.headers


async def test_create_booking_requires_identity(client, hotel, stay):
    response = await client.post(
        f"{BOOKINGS}/",
        json={
            "listing_id": str(hotel.id),
            "check_in": stay[0].isoformat(),
            "check_out": stay[1].isoformat(),
        },
    )
    assert response.status_code == 401


async def test_malformed_identity(client, hotel, stay):
    response = await client.post(
        f"{BOOKINGS}/",
        json={"listing_id": str(hotel.id), "check_in": stay[0].isoformat(), "check_out": stay[1].isoformat()},
        headers={"X-User-Id": "not-a-uuid"},
    )
    assert response.status_code == 401


async def test_hosts_cannot_book(client, hotel, stay):
    response = await client.post(
        f"{BOOKINGS}/",
        json={"listing_id": str(hotel.id), "check_in": stay[0].isoformat(), "check_out": stay[1].isoformat()},
        headers=as_user(uuid.uuid4(), role="host"),
    )
    assert response.status_code == 403


async def test_dates_are_validated(client, hotel, stay):
    response = await client.post(
        f"{BOOKINGS}/",
        json={"listing_id": str(hotel.id), "check_in": stay[1].isoformat(), "check_out": stay[0].isoformat()},
        headers=as_user(uuid.uuid4()),
    )
    assert response.status_code == 422


async def test_rental_cannot_be_booked(client, db, make_listing, stay):
    rental = await make_listing(listing_type="rental")
    await db.commit()

    response = await create_booking(client, rental, uuid.uuid4(), stay)

    assert response.status_code == 400
    assert "inquiries" in response.json()["detail"]


# --- lifecycle ---


async def test_host_confirms_and_completes(client, hotel, stay):
    booking = (await create_booking(client, hotel, uuid.uuid4(), stay)).json()
    host = as_user(hotel.host_id, role="host")

    response = await client.post(f"{BOOKINGS}/{booking['id']}/confirm", headers=host)
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"

    response = await client.post(f"{BOOKINGS}/{booking['id']}/complete", headers=host)
    assert response.status_code == 200
    assert response.json()["status"] == "completed"


async def test_host_rejects(client, hotel, stay):
    booking = (await create_booking(client, hotel, uuid.uuid4(), stay)).json()

    response = await client.post(
        f"{BOOKINGS}/{booking['id']}/reject",
        json={"reason": "Closed for renovation"},
        headers=as_user(hotel.host_id, role="host"),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "cancelled"
    assert data["cancelled_by"] == "host"
    assert data["cancellation_reason"] == "Closed for renovation"


async def test_guest_cannot_confirm(client, hotel, stay):
    guest_id = uuid.uuid4()
    booking = (await create_booking(client, hotel, guest_id, stay)).json()

    response = await client.post(f"{BOOKINGS}/{booking['id']}/confirm", headers=as_user(guest_id))

    assert response.status_code == 403


async def test_other_host_cannot_confirm(client, hotel, stay):
    booking = (await create_booking(client, hotel, uuid.uuid4(), stay)).json()

    response = await client.post(
        f"{BOOKINGS}/{booking['id']}/confirm", headers=as_user(uuid.uuid4(), role="host")
    )

    assert response.status_code == 403


async def test_guest_cancels_pending_only(client, hotel, stay):
    guest_id = uuid.uuid4()
    first = (await create_booking(client, hotel, guest_id, stay)).json()
    second = (await create_booking(client, hotel, guest_id, stay)).json()

    response = await client.post(f"{BOOKINGS}/{first['id']}/cancel", json={}, headers=as_user(guest_id))
    assert response.status_code == 200
    assert response.json()["cancelled_by"] == "guest"

    await client.post(
        f"{BOOKINGS}/{second['id']}/confirm", headers=as_user(hotel.host_id, role="host")
    )
    response = await client.post(f"{BOOKINGS}/{second['id']}/cancel", json={}, headers=as_user(guest_id))
    assert response.status_code == 409


async def test_read_booking(client, hotel, stay):
    guest_id = uuid.uuid4()
    booking = (await create_booking(client, hotel, guest_id, stay)).json()

    assert (await client.get(f"{BOOKINGS}/{booking['id']}", headers=as_user(guest_id))).status_code == 200
    assert (
        await client.get(f"{BOOKINGS}/{booking['id']}", headers=as_user(uuid.uuid4()))
    ).status_code == 403
    assert (
        await client.get(f"{BOOKINGS}/{booking['id']}", headers=as_user(uuid.uuid4(), role="admin"))
    ).status_code == 200


async def test_unknown_booking(client):
    response = await client.post(
        f"{BOOKINGS}/{uuid.uuid4()}/confirm", headers=as_user(uuid.uuid4(), role="host")
    )
    assert response.status_code == 404
