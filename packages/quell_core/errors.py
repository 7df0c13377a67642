"""Value-level parse outcomes.

Parsers in this package never raise for bad user input. They return a
:class:`ParseResult` (shorthand entries) or :class:`RowError` values (CSV rows)
whose ``message`` is safe to show verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(StrEnum):
    MISSING_DESCRIPTION = "MissingDescription"
    MISSING_AMOUNT = "MissingAmount"
    NON_POSITIVE_AMOUNT = "NonPositiveAmount"
    INVALID_DATE = "InvalidDate"
    INVALID_TYPE = "InvalidType"
    INVALID_AMOUNT = "InvalidAmount"
    DESCRIPTION_REQUIRED = "DescriptionRequired"
    MISSING_REQUIRED_HEADERS = "MissingRequiredHeaders"
    EMPTY_DOCUMENT = "EmptyDocument"
    ROW_PARSE_FAILURE = "RowParseFailure"


@dataclass(frozen=True, slots=True)
class ParseError:
    kind: ErrorKind
    message: str


@dataclass(frozen=True, slots=True)
class ParseResult(Generic[T]):
    """Discriminated success/failure outcome.

    Exactly one of ``value`` / ``error`` is set, matching ``ok``.
    """

    ok: bool
    value: T | None = None
    error: ParseError | None = None

    @classmethod
    def success(cls, value: T) -> ParseResult[T]:
        return cls(True, value, None)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> ParseResult[T]:
        return cls(False, None, ParseError(kind, message))


@dataclass(frozen=True, slots=True)
class RowError:
    """A CSV problem tied to a 1-based line number (header is row 1, file-level is 0)."""

    row: int
    kind: ErrorKind
    message: str


__all__ = ["ErrorKind", "ParseError", "ParseResult", "RowError"]
