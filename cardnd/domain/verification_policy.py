"""ID verification policy.

Booking, listing a vehicle and messaging hosts are only open to users whose
ID has been approved. There are no partial privileges.
"""

from dataclasses import dataclass

from cardnd.models.user import User

RESTRICTED_ACTIONS = ("book", "add_vehicle", "message_host")

_ACTION_MESSAGES = {
    "book": {
        "pending": (
            "You cannot book vehicles while your ID verification is pending. "
            "This usually takes 24-48 hours."
        ),
        "not_verified": "You need to verify your ID before booking vehicles.",
        "rejected": "Your ID verification was rejected. Please submit a new ID to book vehicles.",
    },
    "add_vehicle": {
        "pending": (
            "You cannot list vehicles while your ID verification is pending. "
            "This usually takes 24-48 hours."
        ),
        "not_verified": "You need to verify your ID before listing vehicles on our platform.",
        "rejected": "Your ID verification was rejected. Please submit a new ID to list vehicles.",
    },
    "message_host": {
        "pending": "You cannot message hosts while your ID verification is pending.",
        "not_verified": "You need to verify your ID before messaging hosts.",
        "rejected": "Your ID verification was rejected. Please submit a new ID to message hosts.",
    },
}

_BADGES = {
    "approved": ("Verified", "✓"),
    "pending": ("Pending Review", "⏳"),
    "rejected": ("Rejected", "✗"),
    "not_verified": ("Not Verified", "!"),
    "not_logged_in": ("Guest", ""),
}


@dataclass(frozen=True)
class VerificationState:
    status: str
    can_book: bool
    can_add_vehicle: bool
    message: str
    requires_action: bool
    rejection_reason: str | None = None


def classify(user: User | None) -> VerificationState:
    """Map a user's verification field to what they may do."""
    if user is None:
        return VerificationState(
            status="not_logged_in",
            can_book=False,
            can_add_vehicle=False,
            message="Please log in to continue",
            requires_action=True,
        )

    status = user.id_verification_status
    if status == "approved":
        return VerificationState(
            status="approved",
            can_book=True,
            can_add_vehicle=True,
            message="Your ID is verified",
            requires_action=False,
        )
    if status == "pending":
        return VerificationState(
            status="pending",
            can_book=False,
            can_add_vehicle=False,
            message="Your ID verification is pending review (24-48 hours)",
            requires_action=False,
        )
    if status == "rejected":
        return VerificationState(
            status="rejected",
            can_book=False,
            can_add_vehicle=False,
            message="Your ID verification was rejected. Please try again.",
            requires_action=True,
            rejection_reason=user.id_rejection_reason,
        )
    # idle or never set
    return VerificationState(
        status="not_verified",
        can_book=False,
        can_add_vehicle=False,
        message="Please verify your ID to continue",
        requires_action=True,
    )


def can_perform_action(user: User | None, action: str) -> bool:
    """Whether ``user`` may perform ``action``. Anonymous users may do nothing."""
    if user is None:
        return False
    if action not in RESTRICTED_ACTIONS:
        return True
    return user.id_verification_status == "approved"


def action_error_message(user: User | None, action: str) -> str:
    """Explain why ``action`` is refused for this user's verification state."""
    state = classify(user)
    if state.status == "not_logged_in":
        return state.message
    return _ACTION_MESSAGES.get(action, {}).get(state.status) or state.message


def status_badge(user: User | None) -> dict[str, str]:
    text, icon = _BADGES[classify(user).status]
    return {"text": text, "icon": icon}


def should_prompt_verification(user: User | None) -> bool:
    """Whether the ID submission prompt should be shown."""
    if user is None:
        return False
    status = user.id_verification_status
    return status in (None, "idle", "rejected")
