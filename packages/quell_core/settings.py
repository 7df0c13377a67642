"""Policy constants and environment-driven settings for ``quell_core``.

The thresholds below are product policy, not derived values. Tests assert on
their exact values; change them here and nowhere else.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal

# Budget status cutoffs, in percent of the monthly limit.
BUDGET_AT_RISK_THRESHOLD = Decimal(90)
BUDGET_OVERSPENT_THRESHOLD = Decimal(100)

# Goal pacing uses a flat month, not calendar months.
GOAL_PACE_DAYS_PER_MONTH = 30

# Monthly summary / insight rules.
TOP_CATEGORY_LIMIT = 5
BUSY_MONTH_TRANSACTION_COUNT = 30
TARGET_SAVINGS_RATE = Decimal(20)

# Recurring schedules, normalized to a month with the same flat-month rule.
DAILY_RUNS_PER_MONTH = 30
WEEKLY_RUNS_PER_MONTH = 4
MONTHLY_RUNS_PER_MONTH = 1

# Largest accepted amount; anything above is rejected, never rounded.
MAX_AMOUNT = Decimal("999999999999.99")

INCOME_CATEGORY_NAME = "Income"
UNCATEGORIZED_LABEL = "Other"
DEFAULT_CURRENCY = "INR"

# Import/export file format. Column order is the export order.
CSV_HEADERS: tuple[str, ...] = ("description", "amount", "type", "date", "category", "notes")
REQUIRED_CSV_HEADERS: tuple[str, ...] = ("description", "amount", "type", "date")

_MAX_CSV_WORKERS = 32


def _resolve_csv_workers(raw: str | None) -> int:
    """Parse ``QUELL_CSV_WORKERS`` into a worker count within ``1..32``."""

    try:
        workers = int(raw) if raw else 1
    except ValueError:
        workers = 1
    return max(1, min(workers, _MAX_CSV_WORKERS))


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Per-deployment knobs that callers may override through the environment."""

    currency: str = DEFAULT_CURRENCY
    income_category: str = INCOME_CATEGORY_NAME
    csv_workers: int = 1

    @classmethod
    def from_env(cls) -> EngineSettings:
        currency = (os.getenv("QUELL_CURRENCY") or "").strip().upper() or DEFAULT_CURRENCY
        income = (os.getenv("QUELL_INCOME_CATEGORY") or "").strip() or INCOME_CATEGORY_NAME
        return cls(
            currency=currency,
            income_category=income,
            csv_workers=_resolve_csv_workers(os.getenv("QUELL_CSV_WORKERS")),
        )


__all__ = [
    "BUDGET_AT_RISK_THRESHOLD",
    "BUDGET_OVERSPENT_THRESHOLD",
    "BUSY_MONTH_TRANSACTION_COUNT",
    "CSV_HEADERS",
    "DAILY_RUNS_PER_MONTH",
    "DEFAULT_CURRENCY",
    "EngineSettings",
    "GOAL_PACE_DAYS_PER_MONTH",
    "INCOME_CATEGORY_NAME",
    "MAX_AMOUNT",
    "MONTHLY_RUNS_PER_MONTH",
    "REQUIRED_CSV_HEADERS",
    "TARGET_SAVINGS_RATE",
    "TOP_CATEGORY_LIMIT",
    "UNCATEGORIZED_LABEL",
    "WEEKLY_RUNS_PER_MONTH",
]
