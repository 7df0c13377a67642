"""Budget alerts derived from :class:`~quell_core.models.BudgetStatus` values.

Only budgets that need attention produce an alert; ``OK`` budgets are skipped.
Persisting or de-duplicating alerts is the caller's job.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum

from .formatting import format_currency
from .models import BudgetState, BudgetStatus
from .settings import DEFAULT_CURRENCY, UNCATEGORIZED_LABEL


class AlertType(StrEnum):
    BUDGET_OVERSPENT = "BUDGET_OVERSPENT"
    BUDGET_AT_RISK = "BUDGET_AT_RISK"


class Severity(StrEnum):
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True, slots=True)
class BudgetAlert:
    type: AlertType
    severity: Severity
    message: str
    category_id: str | None
    month_year: str


def budget_alerts(
    statuses: Iterable[BudgetStatus],
    category_names: Mapping[str, str] | None = None,
    *,
    currency: str = DEFAULT_CURRENCY,
) -> list[BudgetAlert]:
    names = category_names or {}
    alerts: list[BudgetAlert] = []
    for item in statuses:
        if item.status is BudgetState.OK:
            continue
        budget = item.budget
        label = names.get(budget.category_id or "", UNCATEGORIZED_LABEL)
        if item.status is BudgetState.OVERSPENT:
            alert_type, severity = AlertType.BUDGET_OVERSPENT, Severity.CRITICAL
            detail = f"Over budget by {format_currency(abs(item.remaining), currency)}"
        else:
            alert_type, severity = AlertType.BUDGET_AT_RISK, Severity.WARNING
            left = format_currency(item.remaining, currency) if item.remaining > 0 else "0"
            detail = f"{left} remaining"
        alerts.append(
            BudgetAlert(
                type=alert_type,
                severity=severity,
                message=f"{label}: {detail}",
                category_id=budget.category_id,
                month_year=budget.month_year,
            )
        )
    return alerts


__all__ = ["AlertType", "BudgetAlert", "Severity", "budget_alerts"]
