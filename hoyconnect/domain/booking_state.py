"""Booking lifecycle state machine.

A booking carries two coupled axes: its ``status`` (driven by the guest and
host) and its ``payment_status`` (driven by payment confirmation). Every
transition is a function from the full state to the next state, and states
where money moved before the host accepted the booking cannot be built.
"""

from dataclasses import dataclass, replace
from enum import Enum

from hoyconnect.core.exceptions import AlreadyPaid, InvalidState


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class BookingAction(str, Enum):
    """Actions that move a booking through its lifecycle."""

    CONFIRM = "confirm"  # host
    REJECT = "reject"  # host
    COMPLETE = "complete"  # host
    CANCEL = "cancel"  # guest
    CONFIRM_PAYMENT = "confirm_payment"  # payment collaborator
    FAIL_PAYMENT = "fail_payment"  # payment collaborator
    RETRY_PAYMENT = "retry_payment"  # guest
    REFUND = "refund"  # admin


BOOKING_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}

PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PENDING},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),
}

# Payment can only move once the host has accepted the booking
PAYABLE_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.COMPLETED})


@dataclass(frozen=True)
class BookingState:
    """Status pair of a booking."""

    status: BookingStatus
    payment_status: PaymentStatus

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", BookingStatus(self.status))
        object.__setattr__(self, "payment_status", PaymentStatus(self.payment_status))
        if self.status not in PAYABLE_STATUSES and self.payment_status != PaymentStatus.PENDING:
            raise InvalidState(
                f"Illegal booking state: status={self.status.value}, "
                f"payment_status={self.payment_status.value}"
            )

    @classmethod
    def initial(cls) -> "BookingState":
        return cls(BookingStatus.PENDING, PaymentStatus.PENDING)


def assert_booking_transition(current: BookingStatus, target: BookingStatus) -> None:
    current, target = BookingStatus(current), BookingStatus(target)
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidState(f"Invalid booking transition: {current.value} → {target.value}")


def assert_payment_transition(current: PaymentStatus, target: PaymentStatus) -> None:
    current, target = PaymentStatus(current), PaymentStatus(target)
    allowed = PAYMENT_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidState(f"Invalid payment transition: {current.value} → {target.value}")


def _move_status(state: BookingState, target: BookingStatus) -> BookingState:
    assert_booking_transition(state.status, target)
    return replace(state, status=target)


def _move_payment(state: BookingState, target: PaymentStatus) -> BookingState:
    if state.status not in PAYABLE_STATUSES:
        raise InvalidState(
            f"Booking must be confirmed by host first (status is {state.status.value})"
        )
    assert_payment_transition(state.payment_status, target)
    return replace(state, payment_status=target)


def confirm(state: BookingState) -> BookingState:
    return _move_status(state, BookingStatus.CONFIRMED)


def reject(state: BookingState) -> BookingState:
    return _move_status(state, BookingStatus.CANCELLED)


def complete(state: BookingState) -> BookingState:
    return _move_status(state, BookingStatus.COMPLETED)


def cancel(state: BookingState) -> BookingState:
    """Guest cancellation, only while the host has not answered."""
    if state.status != BookingStatus.PENDING:
        raise InvalidState(
            f"Only pending bookings can be cancelled by the guest (status is {state.status.value})"
        )
    return replace(state, status=BookingStatus.CANCELLED)


def confirm_payment(state: BookingState) -> BookingState:
    """Mark paid. Raises AlreadyPaid when the payment was confirmed before."""
    if state.status in PAYABLE_STATUSES and state.payment_status == PaymentStatus.PAID:
        raise AlreadyPaid()
    return _move_payment(state, PaymentStatus.PAID)


def fail_payment(state: BookingState) -> BookingState:
    return _move_payment(state, PaymentStatus.FAILED)


def retry_payment(state: BookingState) -> BookingState:
    if state.payment_status != PaymentStatus.FAILED:
        raise InvalidState(
            f"Only failed payments can be retried (payment is {state.payment_status.value})"
        )
    return _move_payment(state, PaymentStatus.PENDING)


def refund(state: BookingState) -> BookingState:
    return _move_payment(state, PaymentStatus.REFUNDED)


_ACTIONS = {
    BookingAction.CONFIRM: confirm,
    BookingAction.REJECT: reject,
    BookingAction.COMPLETE: complete,
    BookingAction.CANCEL: cancel,
    BookingAction.CONFIRM_PAYMENT: confirm_payment,
    BookingAction.FAIL_PAYMENT: fail_payment,
    BookingAction.RETRY_PAYMENT: retry_payment,
    BookingAction.REFUND: refund,
}


def apply_action(state: BookingState, action: BookingAction) -> BookingState:
    """Apply an action, raising InvalidState (or AlreadyPaid) when not allowed."""
    return _ACTIONS[BookingAction(action)](state)
