"""Display formatting helpers shared by API responses and scripts."""

import math
import re
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo

from cardnd.config import settings

CENTAVO = Decimal("0.01")
FILE_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def to_local(value: datetime) -> datetime:
    """Convert a timestamp to the platform's display timezone."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(ZoneInfo(settings.display_timezone))


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return to_local(value).date()
    return value


def format_currency(amount: Decimal | int | float, symbol: str | None = None) -> str:
    """Format an amount like '₱1,500' or '₱1,234.5' (0-2 decimals)."""
    symbol = settings.currency_symbol if symbol is None else symbol
    value = Decimal(str(amount)).quantize(CENTAVO, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    text = f"{abs(value):,.2f}".rstrip("0").rstrip(".")
    return f"{sign}{symbol}{text}"


def format_date(value: date | datetime, style: str = "short") -> str:
    """Format a date.

    Styles:
    - short: 'Jan 5, 2026'
    - long: 'Monday, January 5, 2026'
    - anything else: '1/5/2026'
    """
    d = _as_date(value)
    if style == "short":
        return f"{d:%b} {d.day}, {d.year}"
    if style == "long":
        return f"{d:%A}, {d:%B} {d.day}, {d.year}"
    return f"{d.month}/{d.day}/{d.year}"


def format_date_range(start: date | datetime, end: date | datetime) -> str:
    """'Jan 5 - Jan 8, 2026'"""
    s, e = _as_date(start), _as_date(end)
    return f"{s:%b} {s.day} - {e:%b} {e.day}, {e.year}"


def calculate_days(start: datetime, end: datetime) -> int:
    """Rental days between two instants, rounding partial days up."""
    seconds = abs((end - start).total_seconds())
    return math.ceil(seconds / 86400)


def calculate_rental_total(
    price_per_day: Decimal | int,
    start: datetime,
    end: datetime,
    service_fee_percent: Decimal = Decimal("0.05"),
) -> dict:
    """Price preview shown to guests before booking."""
    days = calculate_days(start, end)
    subtotal = Decimal(str(price_per_day)) * days
    service_fee = (subtotal * service_fee_percent).quantize(CENTAVO, rounding=ROUND_HALF_UP)
    return {
        "days": days,
        "subtotal": subtotal,
        "service_fee": service_fee,
        "total": subtotal + service_fee,
    }


def format_phone_number(phone: str) -> str:
    """'639171234567' -> '+63 917 123 4567'; anything else is returned as-is."""
    cleaned = re.sub(r"\D", "", str(phone))
    match = re.fullmatch(r"(\d{2})(\d{3})(\d{3})(\d{4})", cleaned)
    if match:
        return "+{} {} {} {}".format(*match.groups())
    return phone


def truncate_text(text: str, max_length: int = 100) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def slugify(text: str) -> str:
    """'Toyota Vios 2020 (Manual)' -> 'toyota-vios-2020-manual'"""
    slug = str(text).lower().strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^\w\-]+", "", slug, flags=re.ASCII)
    return re.sub(r"\-\-+", "-", slug)


def format_file_size(size: int) -> str:
    """'1.5 KB', '2 MB'"""
    if size <= 0:
        return "0 Bytes"
    i = 0
    while i < len(FILE_SIZE_UNITS) - 1 and size >= 1024 ** (i + 1):
        i += 1
    value = round(size / 1024**i, 2)
    return f"{value:g} {FILE_SIZE_UNITS[i]}"


def time_ago(value: datetime, now: datetime | None = None) -> str:
    """'3 days ago', '1 hour ago'"""
    now = now or datetime.now(UTC)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    seconds = math.floor((now - value).total_seconds())

    for unit, length in (
        ("year", 31536000),
        ("month", 2592000),
        ("day", 86400),
        ("hour", 3600),
        ("minute", 60),
    ):
        interval = seconds / length
        if interval > 1:
            count = math.floor(interval)
            return f"{count} {unit}{'s' if count > 1 else ''} ago"

    return f"{seconds} second{'s' if seconds > 1 else ''} ago"
