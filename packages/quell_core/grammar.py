"""Shorthand entry grammar: one line of text -> one transaction draft.

Grammar (tokens may appear anywhere in the line)::

    <description words> <amount> [today|yesterday|YYYY-MM-DD] [@category] [#tag ...]

Examples
--------
- ``"Coffee 4.50 today @Food #office #friends"``
- ``"Salary 50000 2026-02-01 @Income"``
- ``"Room 204 rent 15000"`` (the rightmost number is the amount)

Extraction is an ordered pipeline of pure steps. Each step takes an
:class:`Extraction` and returns a new one with its token removed from
``remaining``; later steps only see what earlier steps left behind:

1. tags (``#word``, every occurrence, case-folded)
2. category (first ``@word``; any further ``@word`` is dropped unread)
3. date (``today`` > ``yesterday`` > ``YYYY-MM-DD`` > default today)
4. amount (rightmost standalone number)
5. description (whatever is left, whitespace collapsed)

:func:`parse_entry` runs on every keystroke for the live preview, so it does
no I/O and mutates nothing.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal

from .dates import parse_iso_date, shift_days
from .errors import ErrorKind, ParseResult
from .models import (
    Category,
    ParsedEntry,
    Tag,
    TransactionDraft,
    TransactionType,
    to_amount,
)
from .names import NameIndex, normalize_name
from .settings import INCOME_CATEGORY_NAME, MAX_AMOUNT

TAG_RE = re.compile(r"#(\w+)")
CATEGORY_RE = re.compile(r"@(\w+)")
TODAY_RE = re.compile(r"\btoday\b", re.IGNORECASE)
YESTERDAY_RE = re.compile(r"\byesterday\b", re.IGNORECASE)
DATE_TOKEN_RE = re.compile(r"\b\d{4}-\d{2}-\d{2}\b")
# Digits with an optional 1-2 digit fraction, not glued to a word or another
# number. A leading minus is kept so "-5" is read as a negative amount.
AMOUNT_RE = re.compile(r"(?<![\w.])-?\d+(?:\.\d{1,2})?(?!\w|\.\d)")


@dataclass(frozen=True, slots=True)
class Extraction:
    """Working state threaded through the pipeline."""

    remaining: str
    tag_names: tuple[str, ...] = ()
    category_name: str | None = None
    date: str | None = None
    amount: Decimal | None = None
    description: str | None = None


def _cut(text: str, start: int, end: int) -> str:
    return f"{text[:start]} {text[end:]}"


def extract_tags(state: Extraction) -> Extraction:
    names = tuple(m.group(1).casefold() for m in TAG_RE.finditer(state.remaining))
    return replace(state, remaining=TAG_RE.sub(" ", state.remaining), tag_names=names)


def extract_category(state: Extraction) -> Extraction:
    m = CATEGORY_RE.search(state.remaining)
    name = m.group(1) if m else None
    return replace(state, remaining=CATEGORY_RE.sub(" ", state.remaining), category_name=name)


def extract_date(state: Extraction, today: date) -> ParseResult[Extraction]:
    text = state.remaining
    for pattern, offset in ((TODAY_RE, 0), (YESTERDAY_RE, -1)):
        m = pattern.search(text)
        if m:
            return ParseResult.success(
                replace(state, remaining=_cut(text, *m.span()), date=shift_days(today, offset))
            )

    m = DATE_TOKEN_RE.search(text)
    if m is None:
        return ParseResult.success(replace(state, date=today.isoformat()))

    token = m.group(0)
    if parse_iso_date(token) is None:
        return ParseResult.failure(
            ErrorKind.INVALID_DATE,
            f'Invalid date format: {token}. Use YYYY-MM-DD, "today", or "yesterday".',
        )
    return ParseResult.success(replace(state, remaining=_cut(text, *m.span()), date=token))


def extract_amount(state: Extraction) -> ParseResult[Extraction]:
    matches = list(AMOUNT_RE.finditer(state.remaining))
    if not matches:
        return ParseResult.failure(
            ErrorKind.MISSING_AMOUNT,
            'Amount is required. Add a number like "Coffee 50" or "Lunch 125.50".',
        )

    # Rightmost number wins: "Room 204 rent 15000" -> 15000.
    last = matches[-1]
    amount = to_amount(last.group(0))
    if amount is None:
        return ParseResult.failure(
            ErrorKind.INVALID_AMOUNT, f"Amount is too large. The maximum is {MAX_AMOUNT}."
        )
    if amount <= 0:
        return ParseResult.failure(
            ErrorKind.NON_POSITIVE_AMOUNT, "Amount must be greater than zero."
        )
    return ParseResult.success(
        replace(state, remaining=_cut(state.remaining, *last.span()), amount=amount)
    )


def extract_description(state: Extraction) -> ParseResult[Extraction]:
    description = " ".join(state.remaining.split())
    if not description:
        return ParseResult.failure(
            ErrorKind.MISSING_DESCRIPTION,
            'Description is required. Example: "Coffee 50 @Food"',
        )
    return ParseResult.success(replace(state, remaining="", description=description))


def parse_entry(
    text: str,
    categories: Sequence[Category] = (),
    tags: Sequence[Tag] = (),
    *,
    today: date | None = None,
    income_category: str = INCOME_CATEGORY_NAME,
) -> ParseResult[ParsedEntry]:
    """Parse one shorthand line into a :class:`~quell_core.models.ParsedEntry`.

    Category and tag names resolve case-insensitively against the given
    lookups. An unknown category leaves ``category_id`` unset but keeps the
    typed name; unknown tags are left out of ``tag_ids`` but stay in
    ``tag_names``. The entry is ``INCOME`` only when the resolved category is
    named ``income_category``; everything else is an ``EXPENSE``.
    """

    if not text or not text.strip():
        return ParseResult.failure(ErrorKind.MISSING_DESCRIPTION, "Input cannot be empty")

    state = extract_category(extract_tags(Extraction(remaining=text.strip())))
    for step in (
        lambda s: extract_date(s, today or date.today()),
        extract_amount,
        extract_description,
    ):
        outcome = step(state)
        if not outcome.ok:
            return ParseResult(False, None, outcome.error)
        state = outcome.value

    category = NameIndex(categories).resolve(state.category_name)
    tag_index = NameIndex(tags)
    tag_ids: list[str] = []
    for name in state.tag_names:
        tag = tag_index.resolve(name)
        if tag is not None and tag.id not in tag_ids:
            tag_ids.append(tag.id)

    is_income = category is not None and normalize_name(category.name) == normalize_name(
        income_category
    )
    draft = TransactionDraft(
        type=TransactionType.INCOME if is_income else TransactionType.EXPENSE,
        amount=state.amount,
        description=state.description,
        date=state.date,
        category_id=category.id if category is not None else None,
        tag_ids=tuple(tag_ids),
    )
    return ParseResult.success(
        ParsedEntry(
            draft=draft,
            category_name=category.name if category is not None else state.category_name,
            tag_names=state.tag_names,
        )
    )


__all__ = [
    "Extraction",
    "extract_amount",
    "extract_category",
    "extract_date",
    "extract_description",
    "extract_tags",
    "parse_entry",
]
