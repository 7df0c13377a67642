"""Public interface for the ``quell_core`` package.

Transaction intake (shorthand grammar and CSV import) and the derived
financial state engine (budget status, goal pacing, monthly summary and
insights). This module only re-exports symbols; there is no runtime logic
here.
"""

from .alerts import AlertType, BudgetAlert, Severity, budget_alerts
from .api import DashboardView, build_dashboard
from .calculations import (
    budget_totals,
    compute_budget_statuses,
    compute_goal_progress,
    filter_month,
    month_bounds,
    recurring_monthly_outflow,
    summarize,
)
from .csv_import import (
    CsvImportResult,
    ImportStatus,
    export_csv,
    generate_sample_csv,
    parse_csv,
)
from .errors import ErrorKind, ParseError, ParseResult, RowError
from .grammar import parse_entry
from .insights import generate_insights
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
    ParsedEntry,
    RecurringOutflow,
    RecurringTransaction,
    Tag,
    Transaction,
    TransactionDraft,
    TransactionType,
)
from .store import BulkImportResult, FinanceStore, InMemoryStore, import_drafts

__all__ = [
    # Intake
    "parse_entry",
    "parse_csv",
    "generate_sample_csv",
    "export_csv",
    # Read models
    "compute_budget_statuses",
    "compute_goal_progress",
    "summarize",
    "budget_totals",
    "recurring_monthly_outflow",
    "generate_insights",
    "budget_alerts",
    "build_dashboard",
    "filter_month",
    "month_bounds",
    # Persistence collaborator
    "FinanceStore",
    "InMemoryStore",
    "import_drafts",
    "BulkImportResult",
    # Models / results
    "AlertType",
    "Budget",
    "BudgetAlert",
    "BudgetState",
    "BudgetStatus",
    "BudgetTotals",
    "Category",
    "CategorySpend",
    "CsvImportResult",
    "DashboardView",
    "ErrorKind",
    "Frequency",
    "Goal",
    "GoalProgress",
    "ImportStatus",
    "MonthlySummary",
    "ParseError",
    "ParseResult",
    "ParsedEntry",
    "RecurringOutflow",
    "RecurringTransaction",
    "RowError",
    "Severity",
    "Tag",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
]
