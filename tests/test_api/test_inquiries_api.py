"""Tests for the inquiry endpoints."""

import uuid
from types import SimpleNamespace

import pytest

INQUIRIES = "/api/v1/inquiries"


def as_user(user_id, role="guest"):
    return {"X-User-Id": str(user_id), "X-User-Role": role}


@pytest.fixture
async def rental(db, make_listing):
    listing = await make_listing(listing_type="rental")
    await db.commit()
    return SimpleNamespace(id=listing.id, host_id=listing.host_id)


async def send_inquiry(client, listing, headers):
    return await client.post(
        f"{INQUIRIES}/",
        json={"listing_id": str(listing.id), "message": "Is the flat free in March?"},
        headers=headers,
    )


async def test_guest_sends_inquiry(client, rental):
    guest_id = uuid.uuid4()

    response = await send_inquiry(client, rental, as_user(guest_id))

    assert response.status_code == 201
    data = response.json()
    assert data["guest_id"] == str(guest_id)
    assert data["host_id"] == str(rental.host_id)
    assert data["status"] == "new"


@pytest.mark.parametrize("role", ["host", "admin"])
async def test_only_guests_send_inquiries(client, rental, role):
    response = await send_inquiry(client, rental, as_user(uuid.uuid4(), role=role))

    assert response.status_code == 403
    assert "guests" in response.json()["detail"]


async def test_hotel_takes_bookings_not_inquiries(client, db, make_listing):
    hotel = await make_listing(listing_type="hotel")
    await db.commit()

    response = await send_inquiry(client, hotel, as_user(uuid.uuid4()))

    assert response.status_code == 400
