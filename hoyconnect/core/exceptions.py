"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Validation error exception."""

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BookingNotFound(NotFoundError):
    """Booking id is unknown."""

    def __init__(self, booking_id: Any) -> None:
        self.booking_id = booking_id
        super().__init__("Booking", str(booking_id))


class AuthenticationError(AppException):
    """Caller identity missing or malformed."""

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class AuthorizationError(AppException):
    """Authorization denied exception."""

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class InvalidPropertyType(AppException):
    """A booking or payment was attempted for a type that does not support it."""

    def __init__(self, property_type: Any, detail: str | None = None) -> None:
        self.property_type = property_type
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail or f'Property type "{property_type}" does not support bookings',
        )


class InvalidState(AppException):
    """Lifecycle precondition violated for the current booking state."""

    def __init__(self, detail: str = "This operation is not allowed for the current booking status") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class AlreadyPaid(AppException):
    """Booking payment was already confirmed.

    Payment confirmation catches this and reports an idempotent success.
    """

    def __init__(self, booking_id: Any = None) -> None:
        self.booking_id = booking_id
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail="Booking is already paid")


class ListingNotAvailable(AppException):
    """Listing not available exception."""

    def __init__(self, detail: str = "This listing is not available") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
