from decimal import Decimal

import pytest

from quell_core.formatting import (
    format_amount,
    format_currency,
    format_date,
    format_percentage,
    month_name,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (Decimal("999"), "999"),
        (Decimal("1000"), "1,000"),
        (Decimal("100000"), "1,00,000"),
        (Decimal("1234567.5"), "12,34,567.5"),
        (Decimal("4.50"), "4.5"),
        (Decimal("0.005"), "0.01"),
        (Decimal("-2500.25"), "-2,500.25"),
    ],
)
def test_format_amount_uses_indian_grouping(value, expected):
    assert format_amount(value) == expected


def test_format_currency():
    assert format_currency(Decimal("-500")) == "-₹500"
    assert format_currency(Decimal("12.3"), "usd") == "$12.3"
    assert format_currency(10, "CHF") == "CHF 10"


def test_format_percentage():
    assert format_percentage(Decimal("50.0")) == "50"
    assert format_percentage(Decimal("80.2")) == "80.2"
    assert format_percentage(Decimal("100")) == "100"


def test_format_date_labels(today):
    assert format_date("2026-03-15", today) == "Today"
    assert format_date("2026-03-14", today) == "Yesterday"
    assert format_date("2026-02-05", today) == "5 Feb"
    assert format_date("2025-12-31", today) == "31 Dec 2025"
    assert format_date("not-a-date", today) == "not-a-date"


def test_month_name():
    assert month_name("2026-02") == "February 2026"
    with pytest.raises(ValueError):
        month_name("2026-13")
