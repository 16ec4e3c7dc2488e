"""Tests for the booking lifecycle state machine."""

import itertools

import pytest

from hoyconnect.core.exceptions import AlreadyPaid, InvalidState
from hoyconnect.domain import booking_state
from hoyconnect.domain.booking_state import (
    PAYABLE_STATUSES,
    BookingAction,
    BookingState,
    BookingStatus,
    PaymentStatus,
    apply_action,
)


def state(status, payment_status="pending"):
    return BookingState(BookingStatus(status), PaymentStatus(payment_status))


# --- construction ---


def test_initial_state():
    initial = BookingState.initial()
    assert initial.status == BookingStatus.PENDING
    assert initial.payment_status == PaymentStatus.PENDING


def test_coerces_strings():
    assert BookingState("confirmed", "paid") == state("confirmed", "paid")


@pytest.mark.parametrize("status", ["pending", "cancelled"])
@pytest.mark.parametrize("payment_status", ["paid", "failed", "refunded"])
def test_money_cannot_move_before_host_confirms(status, payment_status):
    with pytest.raises(InvalidState):
        BookingState(status, payment_status)


# --- host and guest actions ---


def test_host_confirms_pending():
    assert booking_state.confirm(state("pending")) == state("confirmed")


def test_host_rejects_pending():
    assert booking_state.reject(state("pending")) == state("cancelled")


def test_host_completes_confirmed():
    assert booking_state.complete(state("confirmed", "paid")) == state("completed", "paid")


def test_complete_requires_confirmed():
    with pytest.raises(InvalidState):
        booking_state.complete(state("pending"))


def test_guest_cancels_pending():
    assert booking_state.cancel(state("pending")) == state("cancelled")


@pytest.mark.parametrize("status", ["confirmed", "completed", "cancelled"])
def test_guest_cannot_cancel_after_host_answered(status):
    with pytest.raises(InvalidState):
        booking_state.cancel(state(status))


@pytest.mark.parametrize(
    "action",
    [BookingAction.CONFIRM, BookingAction.REJECT, BookingAction.COMPLETE, BookingAction.CANCEL],
)
def test_cancelled_is_terminal_for_status_actions(action):
    with pytest.raises(InvalidState):
        apply_action(state("cancelled"), action)


# --- payment ---


@pytest.mark.parametrize("status", ["confirmed", "completed"])
def test_confirm_payment(status):
    assert booking_state.confirm_payment(state(status)) == state(status, "paid")


@pytest.mark.parametrize("status", ["pending", "cancelled"])
def test_confirm_payment_requires_host_confirmation(status):
    with pytest.raises(InvalidState):
        booking_state.confirm_payment(state(status))


def test_second_payment_confirmation_reports_already_paid():
    paid = booking_state.confirm_payment(state("confirmed"))
    with pytest.raises(AlreadyPaid):
        booking_state.confirm_payment(paid)


@pytest.mark.parametrize("payment_status", ["failed", "refunded"])
def test_confirm_payment_rejects_failed_or_refunded(payment_status):
    with pytest.raises(InvalidState):
        booking_state.confirm_payment(state("confirmed", payment_status))


def test_failed_payment_can_be_retried_then_paid():
    failed = booking_state.fail_payment(state("confirmed"))
    assert failed == state("confirmed", "failed")

    retried = booking_state.retry_payment(failed)
    assert retried == state("confirmed")
    assert booking_state.confirm_payment(retried) == state("confirmed", "paid")


def test_retry_requires_failed_payment():
    with pytest.raises(InvalidState):
        booking_state.retry_payment(state("confirmed"))


def test_refund_requires_paid():
    assert booking_state.refund(state("completed", "paid")) == state("completed", "refunded")
    with pytest.raises(InvalidState):
        booking_state.refund(state("confirmed"))


# --- every reachable path ---


def reachable(max_depth=5):
    seen = {BookingState.initial()}
    frontier = [BookingState.initial()]
    for _ in range(max_depth):
        next_frontier = []
        for current, action in itertools.product(frontier, BookingAction):
            try:
                target = apply_action(current, action)
            except (InvalidState, AlreadyPaid):
                continue
            if target not in seen:
                seen.add(target)
                next_frontier.append(target)
        frontier = next_frontier
    return seen


def test_no_reachable_state_has_money_before_confirmation():
    for reached in reachable():
        if reached.payment_status != PaymentStatus.PENDING:
            assert reached.status in PAYABLE_STATUSES


def test_paid_is_reachable_only_through_confirmation():
    paid_states = {s for s in reachable() if s.payment_status == PaymentStatus.PAID}
    assert paid_states == {state("confirmed", "paid"), state("completed", "paid")}


def test_action_sequences_never_pay_twice():
    for actions in itertools.product(BookingAction, repeat=4):
        current = BookingState.initial()
        payments = 0
        for action in actions:
            try:
                target = apply_action(current, action)
            except (InvalidState, AlreadyPaid):
                continue
            if action == BookingAction.CONFIRM_PAYMENT:
                payments += 1
            current = target
        assert payments <= 1
