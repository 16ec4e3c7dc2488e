"""API dependencies for caller identity and booking permissions.

Authentication happens upstream: the auth provider's gateway forwards the
verified caller in ``X-User-Id`` and ``X-User-Role``.
"""

from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from hoyconnect.core.exceptions import AuthenticationError, AuthorizationError
from hoyconnect.database import get_db
from hoyconnect.services.booking_service import get_booking

ROLES = ("guest", "host", "admin")


@dataclass(frozen=True)
class Actor:
    """Authenticated caller."""

    id: UUID
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


async def get_current_actor(
    x_user_id: Annotated[str | None, Header()] = None,
    x_user_role: Annotated[str | None, Header()] = None,
) -> Actor:
    """Get the caller forwarded by the auth gateway."""
    if not x_user_id:
        raise AuthenticationError("Missing caller identity")
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise AuthenticationError("Malformed caller identity") from None

    role = (x_user_role or "guest").lower()
    if role not in ROLES:
        raise AuthenticationError(f"Unknown role: {role}")
    return Actor(id=user_id, role=role)


async def get_current_host(
    actor: Annotated[Actor, Depends(get_current_actor)],
) -> Actor:
    """Get current caller and verify they are a host."""
    if actor.role not in ("host", "admin"):
        raise AuthorizationError("Host access required")
    return actor


async def get_current_admin(
    actor: Annotated[Actor, Depends(get_current_actor)],
) -> Actor:
    """Get current caller and verify they are an admin."""
    if not actor.is_admin:
        raise AuthorizationError("Admin access required")
    return actor


class BookingPermissionChecker:
    """Check if the caller may act on a booking."""

    def __init__(self, allow_guest: bool = True, allow_host: bool = True):
        self.allow_guest = allow_guest
        self.allow_host = allow_host

    async def __call__(
        self,
        booking_id: UUID,
        actor: Annotated[Actor, Depends(get_current_actor)],
        db: Annotated[AsyncSession, Depends(get_db)],
    ) -> Actor:
        # Admin always has access
        if actor.is_admin:
            return actor

        booking = await get_booking(db, booking_id)

        if self.allow_guest and booking.guest_id == actor.id:
            return actor
        if self.allow_host and booking.host_id == actor.id:
            return actor

        raise AuthorizationError("You don't have permission to access this booking")


# Convenience instances
require_booking_access = BookingPermissionChecker(allow_guest=True, allow_host=True)
require_host_booking_access = BookingPermissionChecker(allow_guest=False, allow_host=True)
require_guest_booking_access = BookingPermissionChecker(allow_guest=True, allow_host=False)
