"""Core utilities: exceptions and HTTP middleware."""

from hoyconnect.core.exceptions import (
    AlreadyPaid,
    AppException,
    AuthenticationError,
    AuthorizationError,
    BookingNotFound,
    InvalidPropertyType,
    InvalidState,
    ListingNotAvailable,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "AlreadyPaid",
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "BookingNotFound",
    "InvalidPropertyType",
    "InvalidState",
    "ListingNotAvailable",
    "NotFoundError",
    "ValidationError",
]
