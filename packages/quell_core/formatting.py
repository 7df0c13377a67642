"""Display formatting with a fixed ``en-IN`` style.

Amounts use Indian digit grouping (``12,34,567.5``) with zero to two fraction
digits. Month and day names are fixed English strings so output never depends
on the process locale.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from .dates import MONTH_YEAR_RE, parse_iso_date
from .models import quantize_amount
from .settings import DEFAULT_CURRENCY

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

CURRENCY_SYMBOLS: dict[str, str] = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join([*groups, tail])


def format_amount(value: Decimal | int) -> str:
    q = quantize_amount(abs(Decimal(value)))
    whole, _, frac = f"{q:.2f}".partition(".")
    frac = frac.rstrip("0")
    text = _group_indian(whole) + (f".{frac}" if frac else "")
    return f"-{text}" if value < 0 and q != 0 else text


def format_currency(value: Decimal | int, currency: str = DEFAULT_CURRENCY) -> str:
    """``format_currency(Decimal("-1234.5"))`` -> ``"-₹1,234.5"``."""

    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    text = format_amount(value)
    if text.startswith("-"):
        return f"-{symbol}{text[1:]}"
    return f"{symbol}{text}"


def format_percentage(value: Decimal) -> str:
    """One decimal at most, with a trailing ``.0`` dropped (``50.0`` -> ``50``)."""

    text = f"{value.quantize(Decimal('0.1')):f}"
    return text[:-2] if text.endswith(".0") else text


def format_date(value: str, today: date | None = None) -> str:
    """Relative label for recent dates, ``"5 Feb"`` otherwise.

    The year is appended only when it differs from ``today``'s year. Strings
    that are not valid ISO dates are returned unchanged.
    """

    day = parse_iso_date(value)
    if day is None:
        return value
    ref = today or date.today()
    if day == ref:
        return "Today"
    if day == ref - timedelta(days=1):
        return "Yesterday"
    label = f"{day.day} {_MONTHS[day.month - 1][:3]}"
    return label if day.year == ref.year else f"{label} {day.year}"


def month_name(month_year: str) -> str:
    """``"2026-02"`` -> ``"February 2026"``."""

    if not MONTH_YEAR_RE.match(month_year) or not 1 <= int(month_year[5:]) <= 12:
        raise ValueError(f"month must be YYYY-MM: {month_year!r}")
    return f"{_MONTHS[int(month_year[5:]) - 1]} {month_year[:4]}"


__all__ = [
    "CURRENCY_SYMBOLS",
    "format_amount",
    "format_currency",
    "format_date",
    "format_percentage",
    "month_name",
]
