"""Custom validation utilities."""

import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# ASCII digits only, whole string
PHILIPPINE_PHONE_PATTERN = re.compile(r"(\+63|0)?9[0-9]{9}")
GCASH_NUMBER_PATTERN = re.compile(r"09[0-9]{9}")


def is_valid_email(email: str) -> bool:
    """Loose email shape check: something@something.tld, no whitespace."""
    return bool(EMAIL_PATTERN.match(email))


def is_valid_phone_number(phone: str) -> bool:
    """Validate Philippine mobile number.

    Accepted formats (spaces ignored):
    - +639171234567 (international)
    - 09171234567 (local)
    - 9171234567 (no prefix)

    Args:
        phone: Phone number to validate

    Returns:
        bool: True if valid Philippine mobile format
    """
    cleaned = re.sub(r"\s", "", phone)
    return bool(PHILIPPINE_PHONE_PATTERN.fullmatch(cleaned))


def is_valid_gcash_number(mobile_number: str) -> bool:
    """GCash account numbers are exactly 11 digits starting with 09."""
    return bool(GCASH_NUMBER_PATTERN.fullmatch(mobile_number))


def normalize_phone(phone: str) -> str:
    """Normalize phone number to international format.

    Args:
        phone: Phone number in any format

    Returns:
        str: Phone number in +63XXXXXXXXXX format
    """
    # Remove non-digits except +
    cleaned = re.sub(r"[^\d+]", "", phone)

    # Already international format
    if cleaned.startswith("+63"):
        return cleaned

    # Local format starting with 0
    if cleaned.startswith("09") and len(cleaned) == 11:
        return "+63" + cleaned[1:]

    # Just digits starting with 9
    if cleaned.startswith("9") and len(cleaned) == 10:
        return "+63" + cleaned

    return phone  # Return as-is if can't normalize


def mask_sensitive_data(data: str, visible_chars: int = 4) -> str:
    """Mask sensitive data showing only last few characters.

    Args:
        data: Sensitive data to mask
        visible_chars: Number of characters to show at end

    Returns:
        str: Masked string like '*******4567'
    """
    if len(data) <= visible_chars:
        return "*" * len(data)

    masked_length = len(data) - visible_chars
    return "*" * masked_length + data[-visible_chars:]
