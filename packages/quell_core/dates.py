"""Calendar helpers over plain ``YYYY-MM-DD`` / ``YYYY-MM`` strings.

Dates stay strings at the engine boundary so they compare lexically; these
helpers convert to :class:`datetime.date` only where arithmetic is needed.
There is no timezone handling anywhere in the engine.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MONTH_YEAR_RE = re.compile(r"^\d{4}-\d{2}$")


def parse_iso_date(value: str | None) -> date | None:
    """Return the calendar date for a strict ``YYYY-MM-DD`` string, else ``None``.

    Shape and calendar validity are both checked, so ``2026-02-30`` is
    rejected even though it matches the pattern.
    """

    if value is None:
        return None
    s = value.strip()
    if not ISO_DATE_RE.match(s):
        return None
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        return None


def is_iso_date(value: str | None) -> bool:
    return parse_iso_date(value) is not None


def shift_days(day: date, days: int) -> str:
    return (day + timedelta(days=days)).isoformat()


def month_bounds(month_year: str) -> tuple[str, str]:
    """Return ``(first_day, last_day)`` of ``YYYY-MM`` as ISO strings.

    Raises ``ValueError`` for a malformed month.
    """

    s = month_year.strip()
    if not MONTH_YEAR_RE.match(s):
        raise ValueError(f"month must be YYYY-MM: {month_year!r}")
    year, month = int(s[:4]), int(s[5:])
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range: {month_year!r}")
    last = calendar.monthrange(year, month)[1]
    return f"{s}-01", f"{s}-{last:02d}"


def current_month(today: date | None = None) -> str:
    return (today or date.today()).isoformat()[:7]


__all__ = [
    "ISO_DATE_RE",
    "MONTH_YEAR_RE",
    "current_month",
    "is_iso_date",
    "month_bounds",
    "parse_iso_date",
    "shift_days",
]
