"""Read-model orchestration over a :class:`~quell_core.store.FinanceStore`.

The store calls happen here, up front; everything after that is the pure
calculator and insight layer. This is the one place where the engine's
functions are wired together for a dashboard-style view.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .alerts import BudgetAlert, budget_alerts
from .calculations import (
    budget_totals,
    compute_budget_statuses,
    compute_goal_progress,
    recurring_monthly_outflow,
    summarize,
)
from .dates import current_month, month_bounds
from .insights import generate_insights
from .logging_setup import get_logger
from .models import BudgetStatus, BudgetTotals, GoalProgress, MonthlySummary, RecurringOutflow
from .settings import EngineSettings
from .store import FinanceStore

logger = get_logger("quell_core.api")


@dataclass(frozen=True, slots=True)
class DashboardView:
    month_year: str
    summary: MonthlySummary
    insights: tuple[str, ...]
    budgets: tuple[BudgetStatus, ...]
    budget_totals: BudgetTotals
    alerts: tuple[BudgetAlert, ...]
    goals: tuple[GoalProgress, ...]
    recurring: RecurringOutflow


def build_dashboard(
    store: FinanceStore,
    month_year: str | None = None,
    *,
    today: date | None = None,
    settings: EngineSettings | None = None,
) -> DashboardView:
    """Compose the dashboard read model for one month.

    ``month_year`` defaults to the month containing ``today``.
    """

    cfg = settings or EngineSettings()
    day = today or date.today()
    month = month_year or current_month(day)
    start, end = month_bounds(month)

    categories = store.list_categories()
    transactions = store.list_transactions(start, end)
    logger.debug("dashboard %s: %d transactions in [%s, %s]", month, len(transactions), start, end)

    summary = summarize(transactions, categories)
    statuses = compute_budget_statuses(store.list_budgets(month), transactions)
    names = {c.id: c.name for c in categories}
    return DashboardView(
        month_year=month,
        summary=summary,
        insights=tuple(generate_insights(summary, currency=cfg.currency)),
        budgets=tuple(statuses),
        budget_totals=budget_totals(statuses),
        alerts=tuple(budget_alerts(statuses, names, currency=cfg.currency)),
        goals=tuple(compute_goal_progress(store.list_goals(), day)),
        recurring=recurring_monthly_outflow(store.list_recurring()),
    )


__all__ = ["DashboardView", "build_dashboard"]
