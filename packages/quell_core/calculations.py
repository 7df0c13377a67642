"""Derived financial state: budget status, goal pacing, monthly summary.

All functions are pure. Inputs are already-persisted records read back
through the store; outputs are ephemeral view models that are recomputed on
every query and never written back.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from .dates import current_month, month_bounds, parse_iso_date
from .models import (
    Budget,
    BudgetState,
    BudgetStatus,
    BudgetTotals,
    Category,
    CategorySpend,
    Frequency,
    Goal,
    GoalProgress,
    MonthlySummary,
    RecurringOutflow,
    RecurringTransaction,
    Transaction,
    TransactionType,
    quantize_amount,
)
from .settings import (
    BUDGET_AT_RISK_THRESHOLD,
    BUDGET_OVERSPENT_THRESHOLD,
    DAILY_RUNS_PER_MONTH,
    GOAL_PACE_DAYS_PER_MONTH,
    MONTHLY_RUNS_PER_MONTH,
    TOP_CATEGORY_LIMIT,
    UNCATEGORIZED_LABEL,
    WEEKLY_RUNS_PER_MONTH,
)

_HUNDRED = Decimal(100)
_ZERO = Decimal(0)


def _clamp_percentage(value: Decimal) -> Decimal:
    return max(_ZERO, min(value, _HUNDRED))


def filter_month(transactions: Iterable[Transaction], month_year: str) -> list[Transaction]:
    """Keep transactions dated inside ``month_year`` (inclusive bounds)."""

    start, end = month_bounds(month_year)
    return [t for t in transactions if start <= t.transaction_date <= end]


# ---------------------------------------------------------------------------
# Budgets
# ---------------------------------------------------------------------------


def budget_state(spent: Decimal, limit: Decimal) -> BudgetState:
    """Classify spend against a limit.

    ``OVERSPENT`` needs spend strictly above the limit; reaching exactly the
    limit is still ``AT_RISK``.
    """

    ratio = spent / limit * _HUNDRED
    if ratio > BUDGET_OVERSPENT_THRESHOLD:
        return BudgetState.OVERSPENT
    if ratio >= BUDGET_AT_RISK_THRESHOLD:
        return BudgetState.AT_RISK
    return BudgetState.OK


def compute_budget_statuses(
    budgets: Iterable[Budget], transactions: Iterable[Transaction]
) -> list[BudgetStatus]:
    """Spend-vs-limit status per budget for one month of transactions.

    Only ``EXPENSE`` transactions count. A budget without a category, or whose
    category has no spend, reports ``spent == 0``.
    """

    spent_by_category: dict[str, Decimal] = defaultdict(Decimal)
    for tx in transactions:
        if tx.type is TransactionType.EXPENSE and tx.category_id:
            spent_by_category[tx.category_id] += tx.amount

    statuses: list[BudgetStatus] = []
    for budget in budgets:
        limit = budget.monthly_limit
        spent = spent_by_category.get(budget.category_id, _ZERO) if budget.category_id else _ZERO
        statuses.append(
            BudgetStatus(
                budget=budget,
                spent=spent,
                remaining=limit - spent,
                percentage=_clamp_percentage(spent / limit * _HUNDRED),
                status=budget_state(spent, limit),
            )
        )
    return statuses


def budget_totals(statuses: Iterable[BudgetStatus]) -> BudgetTotals:
    """Sum limits and spend across one month's budget statuses."""

    total_limit = _ZERO
    total_spent = _ZERO
    for item in statuses:
        total_limit += item.budget.monthly_limit
        total_spent += item.spent
    percentage = (
        _clamp_percentage(total_spent / total_limit * _HUNDRED) if total_limit > 0 else _ZERO
    )
    return BudgetTotals(
        total_limit=total_limit,
        total_spent=total_spent,
        remaining=max(_ZERO, total_limit - total_spent),
        percentage=percentage,
    )


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------


def compute_goal_progress(goals: Iterable[Goal], today: date | None = None) -> list[GoalProgress]:
    """Completion and pacing per goal as of ``today``.

    ``required_monthly_pace`` spreads the outstanding amount over the days
    left using a flat ``GOAL_PACE_DAYS_PER_MONTH``-day month, and is ``None``
    when the goal has no target date, the date has passed, or the goal is
    already met.
    """

    day = today or date.today()
    out: list[GoalProgress] = []
    for goal in goals:
        percentage = _clamp_percentage(goal.current_amount / goal.target_amount * _HUNDRED)
        days_remaining: int | None = None
        pace: Decimal | None = None

        target_day = parse_iso_date(goal.target_date)
        if target_day is not None:
            days_remaining = max(0, (target_day - day).days)
            outstanding = goal.target_amount - goal.current_amount
            if days_remaining > 0 and outstanding > 0:
                pace = quantize_amount(outstanding * GOAL_PACE_DAYS_PER_MONTH / days_remaining)

        out.append(
            GoalProgress(
                goal=goal,
                percentage=percentage,
                days_remaining=days_remaining,
                required_monthly_pace=pace,
            )
        )
    return out


# ---------------------------------------------------------------------------
# Recurring schedules
# ---------------------------------------------------------------------------

_RUNS_PER_MONTH: dict[Frequency, int] = {
    Frequency.DAILY: DAILY_RUNS_PER_MONTH,
    Frequency.WEEKLY: WEEKLY_RUNS_PER_MONTH,
    Frequency.MONTHLY: MONTHLY_RUNS_PER_MONTH,
}


def recurring_monthly_outflow(recurring: Iterable[RecurringTransaction]) -> RecurringOutflow:
    """Estimated monthly spend from active (non-paused) expense schedules.

    Income schedules count as active but add nothing to the outflow.
    """

    active = [r for r in recurring if not r.is_paused]
    outflow = sum(
        (
            r.amount * _RUNS_PER_MONTH[r.frequency]
            for r in active
            if r.type is TransactionType.EXPENSE
        ),
        _ZERO,
    )
    return RecurringOutflow(active_count=len(active), monthly_outflow=outflow)


# ---------------------------------------------------------------------------
# Monthly summary
# ---------------------------------------------------------------------------


def _share(amount: Decimal, total: Decimal) -> Decimal:
    if total <= 0:
        return Decimal("0.0")
    return (amount / total * _HUNDRED).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def summarize(
    transactions: Sequence[Transaction], categories: Iterable[Category] = ()
) -> MonthlySummary:
    """Aggregate one month of transactions.

    Expenses are grouped by category display name; transactions whose
    category is missing or unknown fall into ``UNCATEGORIZED_LABEL``. The top
    ``TOP_CATEGORY_LIMIT`` groups are returned by descending amount, ties kept
    in first-seen order.
    """

    names = {c.id: c.name for c in categories}
    total_income = _ZERO
    total_expenses = _ZERO
    by_category: dict[str, Decimal] = {}

    for tx in transactions:
        if tx.type is TransactionType.INCOME:
            total_income += tx.amount
            continue
        total_expenses += tx.amount
        label = names.get(tx.category_id or "", UNCATEGORIZED_LABEL)
        by_category[label] = by_category.get(label, _ZERO) + tx.amount

    ranked = sorted(by_category.items(), key=lambda kv: kv[1], reverse=True)
    top = tuple(
        CategorySpend(category=name, amount=amount, percentage=_share(amount, total_expenses))
        for name, amount in ranked[:TOP_CATEGORY_LIMIT]
    )
    return MonthlySummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_balance=total_income - total_expenses,
        top_categories=top,
        transaction_count=len(transactions),
    )


__all__ = [
    "budget_state",
    "budget_totals",
    "compute_budget_statuses",
    "compute_goal_progress",
    "current_month",
    "filter_month",
    "month_bounds",
    "recurring_monthly_outflow",
    "summarize",
]
