"""Formatting and validation helpers."""

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

import pytest

from cardnd.utils.formatters import (
    calculate_days,
    calculate_rental_total,
    format_currency,
    format_date,
    format_date_range,
    format_file_size,
    format_phone_number,
    slugify,
    time_ago,
    truncate_text,
)
from cardnd.utils.validators import (
    is_valid_email,
    is_valid_gcash_number,
    is_valid_phone_number,
    mask_sensitive_data,
    normalize_phone,
)


@pytest.mark.parametrize(
    "amount, expected",
    [
        (1500, "₱1,500"),
        (Decimal("1234.5"), "₱1,234.5"),
        (Decimal("0.125"), "₱0.13"),
        (0, "₱0"),
        (Decimal("-55"), "-₱55"),
    ],
)
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected


def test_format_date():
    d = date(2026, 1, 5)
    assert format_date(d) == "Jan 5, 2026"
    assert format_date(d, "long") == "Monday, January 5, 2026"
    assert format_date(d, "numeric") == "1/5/2026"
    # 20:00 UTC is already the next day in Manila
    assert format_date(datetime(2026, 1, 4, 20, 0, tzinfo=UTC)) == "Jan 5, 2026"
    assert format_date_range(date(2026, 1, 5), date(2026, 1, 8)) == "Jan 5 - Jan 8, 2026"


def test_rental_days_round_up():
    start = datetime(2026, 1, 5, 9, 0, tzinfo=UTC)
    assert calculate_days(start, start + timedelta(days=2)) == 2
    assert calculate_days(start, start + timedelta(days=2, hours=1)) == 3
    total = calculate_rental_total(Decimal("1000"), start, start + timedelta(days=3))
    assert total == {
        "days": 3,
        "subtotal": Decimal("3000"),
        "service_fee": Decimal("150.00"),
        "total": Decimal("3150.00"),
    }


def test_text_helpers():
    assert format_phone_number("639171234567") == "+63 917 123 4567"
    assert format_phone_number("12345") == "12345"
    assert truncate_text("a" * 5, 10) == "aaaaa"
    assert truncate_text("a" * 12, 10) == "a" * 10 + "..."
    assert slugify("Toyota Vios 2020 (Manual)") == "toyota-vios-2020-manual"
    assert format_file_size(0) == "0 Bytes"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(2 * 1024 * 1024) == "2 MB"


def test_time_ago():
    now = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)
    assert time_ago(now - timedelta(days=3), now) == "3 days ago"
    assert time_ago(now - timedelta(hours=1, minutes=30), now) == "1 hour ago"
    assert time_ago(now - timedelta(seconds=30), now) == "30 seconds ago"


def test_validators():
    assert is_valid_email("guest@example.com")
    assert not is_valid_email("guest@example")
    assert is_valid_phone_number("+63 917 123 4567")
    assert is_valid_phone_number("09171234567")
    assert not is_valid_phone_number("08171234567")
    assert is_valid_gcash_number("09171234567")
    assert not is_valid_gcash_number("+639171234567")
    assert not is_valid_gcash_number("09171234567\n")
    assert not is_valid_gcash_number("09\uff11\uff17\uff11\uff12\uff13\uff14\uff15\uff16\uff17")
    assert not is_valid_phone_number("09\u0661\u0662\u0663\u0664\u0665\u0666\u0667\u0668\u0669")
    assert normalize_phone("0917 123 4567") == "+639171234567"
    assert mask_sensitive_data("09171234567") == "*******4567"
    assert mask_sensitive_data("123") == "***"
