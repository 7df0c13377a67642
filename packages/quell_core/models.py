"""Data models for ``quell_core``.

Two families live here:

- Records owned by the persistence collaborator (``Category``, ``Tag``,
  ``Transaction``, ``Budget``, ``Goal``, ``RecurringTransaction``). These are
  pydantic models so rows coming back from storage or a JSON file are
  validated once at the boundary.
- Values produced by the engine (drafts and derived view models). These are
  frozen dataclasses: cheap to build on every keystroke and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

from .dates import MONTH_YEAR_RE, is_iso_date
from .settings import MAX_AMOUNT

_CENT = Decimal("0.01")


def quantize_amount(value: Decimal) -> Decimal:
    """Round to two fractional digits (half-up), the precision amounts carry."""

    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def to_amount(raw: str | None) -> Decimal | None:
    """Parse a plain decimal string.

    ``None`` when it is not a finite number or its magnitude exceeds
    ``MAX_AMOUNT``.
    """

    if raw is None:
        return None
    s = raw.strip()
    if not s:
        return None
    try:
        d = Decimal(s)
    except InvalidOperation:
        return None
    if not d.is_finite() or abs(d) > MAX_AMOUNT:
        return None
    return quantize_amount(d)


def _bounded(v: Decimal, field: str) -> Decimal:
    if v > MAX_AMOUNT:
        raise ValueError(f"{field} must not exceed {MAX_AMOUNT}")
    return v


class TransactionType(StrEnum):
    EXPENSE = "EXPENSE"
    INCOME = "INCOME"


class Frequency(StrEnum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


# ---------------------------------------------------------------------------
# Collaborator-owned records
# ---------------------------------------------------------------------------


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)


class Category(_Record):
    """A user category. Names are unique per user, compared case-insensitively."""

    id: str
    name: str
    icon: str | None = None
    color: str | None = None
    parent_id: str | None = None

    @field_validator("name")
    @classmethod
    def _name_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("category name must be non-empty")
        return v


class Tag(_Record):
    id: str
    name: str

    @field_validator("name")
    @classmethod
    def _name_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("tag name must be non-empty")
        return v


class Transaction(_Record):
    """A persisted transaction as read back from the store."""

    id: str
    type: TransactionType
    amount: Decimal
    description: str
    transaction_date: str
    category_id: str | None = None
    notes: str | None = None
    tag_ids: tuple[str, ...] = ()

    @field_validator("amount")
    @classmethod
    def _amount_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("amount must be non-negative")
        return quantize_amount(_bounded(v, "amount"))

    @field_validator("transaction_date")
    @classmethod
    def _iso_date(cls, v: str) -> str:
        if not is_iso_date(v):
            raise ValueError(f"transaction_date must be YYYY-MM-DD: {v!r}")
        return v


class Budget(_Record):
    """A monthly spending limit, optionally bound to a category."""

    id: str | None = None
    category_id: str | None = None
    monthly_limit: Decimal
    month_year: str

    @field_validator("monthly_limit")
    @classmethod
    def _limit_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("monthly_limit must be positive")
        return _bounded(v, "monthly_limit")

    @field_validator("month_year")
    @classmethod
    def _month_shape(cls, v: str) -> str:
        if not MONTH_YEAR_RE.match(v):
            raise ValueError(f"month_year must be YYYY-MM: {v!r}")
        return v


class Goal(_Record):
    """A savings goal. ``target_date`` is optional."""

    id: str | None = None
    name: str = ""
    target_amount: Decimal
    current_amount: Decimal = Decimal(0)
    target_date: str | None = None

    @field_validator("target_amount")
    @classmethod
    def _target_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("target_amount must be positive")
        return _bounded(v, "target_amount")

    @field_validator("current_amount")
    @classmethod
    def _current_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("current_amount must be non-negative")
        return _bounded(v, "current_amount")

    @field_validator("target_date")
    @classmethod
    def _target_date_shape(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return None
        if not is_iso_date(v):
            raise ValueError(f"target_date must be YYYY-MM-DD: {v!r}")
        return v


class RecurringTransaction(_Record):
    """A scheduled transaction template. Paused schedules never run."""

    id: str
    type: TransactionType
    amount: Decimal
    description: str
    category_id: str | None = None
    frequency: Frequency
    next_run_date: str
    is_paused: bool = False

    @field_validator("amount")
    @classmethod
    def _amount_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("amount must be positive")
        return quantize_amount(_bounded(v, "amount"))

    @field_validator("next_run_date")
    @classmethod
    def _iso_date(cls, v: str) -> str:
        if not is_iso_date(v):
            raise ValueError(f"next_run_date must be YYYY-MM-DD: {v!r}")
        return v


# ---------------------------------------------------------------------------
# Engine-produced values
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TransactionDraft:
    """A structurally valid, not-yet-persisted transaction.

    Both the shorthand grammar and the CSV importer produce this shape. The
    constructor rejects invalid combinations, so a draft is either fully valid
    or does not exist.
    """

    type: TransactionType
    amount: Decimal
    description: str
    date: str
    category_id: str | None = None
    tag_ids: tuple[str, ...] = ()
    notes: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, TransactionType):
            raise ValueError(f"TransactionDraft.type must be a TransactionType: {self.type!r}")
        amount = self.amount
        if not isinstance(amount, Decimal) or not amount.is_finite() or not 0 < amount <= MAX_AMOUNT:
            raise ValueError(
                f"TransactionDraft.amount must be a positive Decimal up to {MAX_AMOUNT}"
            )
        if not self.description.strip():
            raise ValueError("TransactionDraft.description must be non-empty")
        if not is_iso_date(self.date):
            raise ValueError(f"TransactionDraft.date must be YYYY-MM-DD: {self.date!r}")


@dataclass(frozen=True, slots=True)
class ParsedEntry:
    """A draft plus the display names the user typed.

    ``category_name`` is kept even when it did not resolve to a category id;
    ``tag_names`` keeps every tag typed, resolved or not.
    """

    draft: TransactionDraft
    category_name: str | None = None
    tag_names: tuple[str, ...] = ()


class BudgetState(StrEnum):
    OK = "OK"
    AT_RISK = "AT_RISK"
    OVERSPENT = "OVERSPENT"


@dataclass(frozen=True, slots=True)
class BudgetStatus:
    budget: Budget
    spent: Decimal
    remaining: Decimal
    # Clamped to [0, 100]; overspending shows in ``status``/``remaining``.
    percentage: Decimal
    status: BudgetState


@dataclass(frozen=True, slots=True)
class BudgetTotals:
    """All budgets of a month taken together."""

    total_limit: Decimal
    total_spent: Decimal
    # Floored at 0.
    remaining: Decimal
    percentage: Decimal


@dataclass(frozen=True, slots=True)
class GoalProgress:
    goal: Goal
    percentage: Decimal
    days_remaining: int | None
    required_monthly_pace: Decimal | None


@dataclass(frozen=True, slots=True)
class CategorySpend:
    category: str
    amount: Decimal
    percentage: Decimal


@dataclass(frozen=True, slots=True)
class MonthlySummary:
    total_income: Decimal
    total_expenses: Decimal
    net_balance: Decimal
    top_categories: tuple[CategorySpend, ...]
    transaction_count: int


@dataclass(frozen=True, slots=True)
class RecurringOutflow:
    active_count: int
    monthly_outflow: Decimal


__all__ = [
    "Budget",
    "BudgetState",
    "BudgetStatus",
    "BudgetTotals",
    "Category",
    "CategorySpend",
    "Frequency",
    "Goal",
    "GoalProgress",
    "MonthlySummary",
    "ParsedEntry",
    "RecurringOutflow",
    "RecurringTransaction",
    "Tag",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "quantize_amount",
    "to_amount",
]
