"""Refund tiers and booking status derivation."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from cardnd.core.exceptions import PreconditionError
from cardnd.domain.booking_state import (
    assert_booking_transition,
    can_cancel_booking,
    derive_booking_status,
)
from cardnd.domain.cancellation_policy import (
    NO_REFUND_LABEL,
    calculate_refund_percentage,
    compute_refund,
)

START = datetime(2026, 7, 1, 9, 0, tzinfo=UTC)


def quote_at(hours_before: float, total="5000"):
    return compute_refund(START - timedelta(hours=hours_before), START, Decimal(total))


@pytest.mark.parametrize(
    "hours_before, expected_pct",
    [
        (72, 100),
        (24, 100),
        (23.99, 50),
        (15, 50),
        (10, 50),
        (9.99, 0),
        (8, 0),
        (0, 0),
        (-3, 0),
    ],
)
def test_refund_percentage_tiers(hours_before, expected_pct):
    assert quote_at(hours_before).refund_percentage == expected_pct


def test_refund_amount_is_exact_share_of_total():
    quote = quote_at(15, total="1234.57")
    assert quote.refund_amount == Decimal("1234.57") * 50 / 100


def test_hours_until_booking_is_floored_for_display_only():
    quote = quote_at(23.5)
    assert quote.hours_until_booking == 23
    assert quote.refund_percentage == 50


def test_policy_labels_distinguish_no_refund_windows():
    assert calculate_refund_percentage(7)[1] == "No refund (5-10 hours before booking)"
    assert calculate_refund_percentage(2) == (0, NO_REFUND_LABEL)


def test_derived_status():
    end = START + timedelta(days=2)
    assert derive_booking_status("confirmed", START, end, START - timedelta(hours=1)) == "confirmed"
    assert derive_booking_status("confirmed", START, end, START) == "ongoing"
    assert derive_booking_status("confirmed", START, end, end + timedelta(seconds=1)) == "completed"
    assert derive_booking_status("cancelled", START, end, end + timedelta(days=1)) == "cancelled"


def test_cannot_cancel_started_or_completed_booking():
    end = START + timedelta(days=2)
    ok, error = can_cancel_booking("confirmed", START, end, START + timedelta(hours=1))
    assert not ok and "started" in error
    ok, error = can_cancel_booking("confirmed", START, end, end + timedelta(hours=1))
    assert not ok and "completed" in error
    assert can_cancel_booking("pending", START, end, START - timedelta(hours=1)) == (True, None)


def test_cancelled_is_terminal():
    with pytest.raises(PreconditionError):
        assert_booking_transition("cancelled", "confirmed")
