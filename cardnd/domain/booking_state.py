"""Booking state machine.

Stored states are pending, confirmed and cancelled. Ongoing and completed
are derived from the clock and never written back.
"""

from datetime import datetime

from cardnd.core.exceptions import PreconditionError

BOOKING_TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"cancelled"},
    "cancelled": set(),
}


def assert_booking_transition(current: str, target: str) -> None:
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise PreconditionError(
            f"Invalid booking transition: {current} → {target}"
        )


def derive_booking_status(
    status: str | None,
    start_date: datetime,
    end_date: datetime,
    now: datetime,
) -> str:
    """Status as shown to users at ``now``."""
    if status == "cancelled":
        return "cancelled"
    if now > end_date:
        return "completed"
    if start_date <= now <= end_date:
        return "ongoing"
    return status or "pending"


def can_cancel_booking(
    status: str | None,
    start_date: datetime,
    end_date: datetime,
    now: datetime,
) -> tuple[bool, str | None]:
    """Check whether a booking may still be cancelled.

    Returns:
        Tuple of (can_cancel, error_message)
    """
    derived = derive_booking_status(status, start_date, end_date, now)
    if derived == "cancelled":
        return False, "This booking is already cancelled"
    if derived == "completed":
        return False, "This booking has already been completed"
    if now >= start_date:
        return False, "This booking has already started and can no longer be cancelled"
    return True, None
