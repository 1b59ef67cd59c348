"""Payout and refund settlement rules.

Refund status on a cancellation:
- not_applicable: nothing to refund (terminal)
- pending: refund owed, waiting for an admin to send it
- processed: refund sent and recorded (terminal)
"""

from decimal import Decimal

from cardnd.core.exceptions import PreconditionError

REFUND_TRANSITIONS = {
    "not_applicable": set(),
    "pending": {"processed"},
    "processed": set(),
}


def assert_refund_transition(current: str, target: str) -> None:
    """Validate refund status transition.

    Raises:
        PreconditionError: If transition is not allowed
    """
    allowed = REFUND_TRANSITIONS.get(current, set())
    if target not in allowed:
        if current == "processed":
            raise PreconditionError("This refund has already been processed")
        raise PreconditionError(
            f"Invalid refund transition: {current} → {target}"
        )


def initial_refund_status(refund_amount: Decimal) -> str:
    return "pending" if refund_amount > 0 else "not_applicable"


def can_settle_refund(refund_status: str, refund_amount: Decimal) -> tuple[bool, str | None]:
    """Check if a cancellation's refund can be settled."""
    if refund_status == "processed":
        return False, "This refund has already been processed"
    if refund_status != "pending":
        return False, f"No refund is owed for this cancellation (status: {refund_status})"
    if refund_amount <= 0:
        return False, "No refund amount to process"
    return True, None


def can_process_payout(method_verified: bool, unpaid_booking_count: int) -> tuple[bool, str | None]:
    """Check if a payout can be sent to a host's payout method.

    Args:
        method_verified: Whether an admin verified the payout account
        unpaid_booking_count: Unpaid confirmed bookings found at call time

    Returns:
        Tuple of (can_process, error_message)
    """
    if not method_verified:
        return False, "This payout account is not yet verified"
    if unpaid_booking_count == 0:
        return False, "Nothing to pay: this host has no unpaid confirmed bookings"
    return True, None
