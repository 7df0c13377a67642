"""Rule-based monthly insight messages.

Rules run independently, in a fixed order, and every rule that matches emits
one message. Same summary in, same list out.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .formatting import format_currency, format_percentage
from .models import MonthlySummary
from .settings import BUSY_MONTH_TRANSACTION_COUNT, DEFAULT_CURRENCY, TARGET_SAVINGS_RATE


def savings_rate(summary: MonthlySummary) -> Decimal | None:
    """Percent of income left after expenses; ``None`` without income."""

    if summary.total_income <= 0:
        return None
    return (summary.total_income - summary.total_expenses) / summary.total_income * 100


def generate_insights(summary: MonthlySummary, *, currency: str = DEFAULT_CURRENCY) -> list[str]:
    def money(value: Decimal) -> str:
        return format_currency(value, currency)

    insights: list[str] = []

    if summary.net_balance > 0:
        insights.append(
            f"Great job! You saved {money(summary.net_balance)} this month. "
            "Consider allocating some to your goals."
        )
    elif summary.net_balance < 0:
        insights.append(
            f"You spent {money(abs(summary.net_balance))} more than you earned this month. "
            "Review your spending in top categories."
        )

    if summary.top_categories:
        top = summary.top_categories[0]
        insights.append(
            f"Your highest spending category is {top.category} at {money(top.amount)} "
            f"({format_percentage(top.percentage)}% of expenses)."
        )

    if summary.transaction_count > BUSY_MONTH_TRANSACTION_COUNT:
        insights.append(
            f"You made {summary.transaction_count} transactions this month. "
            "Consider batching small purchases to reduce impulse spending."
        )

    rate = savings_rate(summary)
    if rate is not None and rate > 0:
        shown = f"{rate.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP):f}"
        if rate >= TARGET_SAVINGS_RATE:
            insights.append(
                f"Excellent! Your savings rate is {shown}%. You're on track for financial health."
            )
        else:
            insights.append(
                f"Your savings rate is {shown}%. "
                f"Aim for at least {TARGET_SAVINGS_RATE}% for long-term financial security."
            )

    return insights


__all__ = ["generate_insights", "savings_rate"]
