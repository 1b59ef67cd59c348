"""Cancellation policy domain logic.

One policy applies to every vehicle, based on hours left until the booking
starts:
- 24h or more: full refund
- 10h to 24h: 50% refund
- under 10h (including already started): no refund
"""

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

# Refund rules: list of (min_hours_before_start, refund_percentage, label)
# Evaluated in order - first match wins. Bounds are inclusive.
REFUND_RULES: list[tuple[int, int, str]] = [
    (24, 100, "Full refund (24+ hours before booking)"),
    (10, 50, "50% refund (10-24 hours before booking)"),
    (5, 0, "No refund (5-10 hours before booking)"),
]
NO_REFUND_LABEL = "No refund (less than 5 hours before booking)"


@dataclass(frozen=True)
class RefundQuote:
    """Refund a cancellation at a given moment would produce."""

    refund_percentage: int
    refund_amount: Decimal
    policy_label: str
    # Whole hours, floored; display only
    hours_until_booking: int


def hours_until(start_date: datetime, now: datetime) -> float:
    """Fractional hours from ``now`` to ``start_date`` (negative once started)."""
    return (start_date - now).total_seconds() / 3600


def calculate_refund_percentage(hours_until_booking: float) -> tuple[int, str]:
    """Refund percentage and policy label for the unfloored hour count."""
    for min_hours, refund_pct, label in REFUND_RULES:
        if hours_until_booking >= min_hours:
            return refund_pct, label
    return 0, NO_REFUND_LABEL


def compute_refund(
    now: datetime,
    start_date: datetime,
    total_price: Decimal | int | str,
) -> RefundQuote:
    """Calculate the refund for cancelling at ``now``.

    Args:
        now: Moment of cancellation
        start_date: Booking start
        total_price: What the guest paid

    Returns:
        RefundQuote: percentage, amount, applied policy and hours left
    """
    hours = hours_until(start_date, now)
    refund_pct, label = calculate_refund_percentage(hours)
    refund_amount = Decimal(str(total_price)) * refund_pct / Decimal("100")
    return RefundQuote(
        refund_percentage=refund_pct,
        refund_amount=refund_amount,
        policy_label=label,
        hours_until_booking=math.floor(hours),
    )


def get_policy_description() -> str:
    """Get human-readable policy description."""
    return (
        "Full refund if cancelled 24 hours or more before the booking starts. "
        "50% refund if cancelled 10 to 24 hours before. "
        "No refund if cancelled less than 10 hours before."
    )
