"""Typer console interface for ``quell_core``.

Commands
--------
- ``parse ENTRY``: preview how one shorthand line would be recorded.
- ``import-csv PATH``: validate a CSV for bulk import and list row errors.
- ``sample-csv``: print (or write) a sample import document.
- ``report PATH --month YYYY-MM``: load a CSV into an in-memory store and show
  the monthly summary, insights, budget status, goal pacing and the
  recurring outflow.

Lookups (categories, tags, budgets, goals, recurring schedules) come from optional JSON files, each
holding a list of objects shaped like the corresponding model. A local
``.env`` is loaded before any command runs; see ``quell_core.settings`` for
the environment variables read.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from dotenv import load_dotenv
from pydantic import BaseModel, TypeAdapter, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .api import build_dashboard
from .csv_import import ImportStatus, generate_sample_csv, parse_csv
from .dates import parse_iso_date
from .formatting import format_currency, format_percentage, month_name
from .grammar import parse_entry
from .logging_setup import configure_logging, get_logger
from .models import Budget, Category, Goal, RecurringTransaction, Tag
from .settings import EngineSettings
from .store import InMemoryStore, import_drafts

logger = get_logger("quell_core.cli")

M = TypeVar("M", bound=BaseModel)

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Parse shorthand entries, validate CSV imports and report monthly finances.",
)
console = Console()


# ---- Small helpers -----------------------------------------------------------


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(1)


def _load_records(path: Path | None, model: type[M]) -> list[M]:
    if path is None:
        return []
    try:
        return TypeAdapter(list[model]).validate_json(path.read_bytes())
    except FileNotFoundError:
        raise _fail(f"File not found: {path}") from None
    except ValidationError as e:
        raise _fail(f"Invalid {model.__name__} file {path}: {e}") from None


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise _fail(f"File not found: {path}") from None
    except PermissionError:
        raise _fail(f"Permission denied: {path}") from None


def _resolve_today(raw: str | None) -> date:
    if raw is None:
        return date.today()
    day = parse_iso_date(raw)
    if day is None:
        raise _fail(f"--today must be YYYY-MM-DD: {raw}")
    return day


CategoriesOption = Annotated[
    Path | None, typer.Option("--categories", help="JSON list of categories {id, name}.")
]
TodayOption = Annotated[
    str | None, typer.Option("--today", help="Override today's date (YYYY-MM-DD).")
]


# ---- Commands ----------------------------------------------------------------


@app.command("parse")
def parse_cmd(
    entry: Annotated[str, typer.Argument(help='Shorthand entry, e.g. "Coffee 50 today @Food".')],
    categories: CategoriesOption = None,
    tags: Annotated[
        Path | None, typer.Option("--tags", help="JSON list of tags {id, name}.")
    ] = None,
    today: TodayOption = None,
) -> None:
    """Show how a shorthand entry would be recorded."""

    settings = EngineSettings.from_env()
    result = parse_entry(
        entry,
        _load_records(categories, Category),
        _load_records(tags, Tag),
        today=_resolve_today(today),
        income_category=settings.income_category,
    )
    if not result.ok:
        console.print(f"[red]{result.error.kind}[/red]: {escape(result.error.message)}")
        raise typer.Exit(1)

    parsed = result.value
    draft = parsed.draft
    table = Table(show_header=False)
    table.add_row("type", str(draft.type))
    table.add_row("amount", format_currency(draft.amount, settings.currency))
    table.add_row("description", escape(draft.description))
    table.add_row("date", draft.date)
    table.add_row("category", escape(parsed.category_name or "-"))
    table.add_row("category id", draft.category_id or "-")
    table.add_row("tags", escape(", ".join(parsed.tag_names) or "-"))
    console.print(table)


@app.command("import-csv")
def import_csv_cmd(
    csv_path: Annotated[Path, typer.Argument(help="CSV file to validate.", dir_okay=False)],
    categories: CategoriesOption = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", min=1, max=32, help="Row validation threads."),
    ] = None,
) -> None:
    """Validate a CSV and report accepted rows and row errors."""

    settings = EngineSettings.from_env()
    result = parse_csv(
        _read_text(csv_path),
        _load_records(categories, Category),
        concurrency=workers or settings.csv_workers,
    )

    if result.errors:
        table = Table(title="Row errors")
        table.add_column("row", justify="right")
        table.add_column("kind")
        table.add_column("message")
        for err in result.errors:
            table.add_row(str(err.row), str(err.kind), escape(err.message))
        console.print(table)

    colour = {"SUCCESS": "green", "PARTIAL": "yellow", "FAILED": "red"}[result.status]
    console.print(
        f"[{colour}]{result.status}[/{colour}]: "
        f"{len(result.accepted)} accepted, {len(result.errors)} rejected"
    )
    if result.status is ImportStatus.FAILED:
        raise typer.Exit(1)


@app.command("sample-csv")
def sample_csv_cmd(
    out: Annotated[
        Path | None, typer.Option("--out", help="Write to this file instead of stdout.")
    ] = None,
    today: TodayOption = None,
) -> None:
    """Emit a sample import document."""

    text = generate_sample_csv(_resolve_today(today))
    if out is None:
        typer.echo(text, nl=False)
        return
    out.write_text(text, encoding="utf-8")
    console.print(f"Wrote sample CSV to {escape(str(out))}")


@app.command("report")
def report_cmd(
    csv_path: Annotated[Path, typer.Argument(help="CSV of transactions.", dir_okay=False)],
    month: Annotated[str | None, typer.Option("--month", help="Month as YYYY-MM.")] = None,
    categories: CategoriesOption = None,
    budgets: Annotated[
        Path | None, typer.Option("--budgets", help="JSON list of budgets.")
    ] = None,
    goals: Annotated[Path | None, typer.Option("--goals", help="JSON list of goals.")] = None,
    recurring: Annotated[
        Path | None, typer.Option("--recurring", help="JSON list of recurring schedules.")
    ] = None,
    today: TodayOption = None,
) -> None:
    """Import a CSV into memory and print the monthly dashboard."""

    settings = EngineSettings.from_env()
    category_rows = _load_records(categories, Category)
    parsed = parse_csv(
        _read_text(csv_path), category_rows, concurrency=settings.csv_workers
    )
    if not parsed.ok:
        for err in parsed.errors:
            console.print(f"row {err.row}: {escape(err.message)}")
        raise _fail("CSV import failed")
    if parsed.errors:
        console.print(f"[yellow]Skipped {len(parsed.errors)} invalid row(s)[/yellow]")

    store = InMemoryStore(
        categories=category_rows,
        budgets=_load_records(budgets, Budget),
        goals=_load_records(goals, Goal),
        recurring=_load_records(recurring, RecurringTransaction),
    )
    stored = import_drafts(store, parsed.accepted)
    logger.info("report: %d transactions loaded", stored.successful)

    try:
        view = build_dashboard(store, month, today=_resolve_today(today), settings=settings)
    except ValueError as e:
        raise _fail(str(e)) from None

    def money(value) -> str:
        return format_currency(value, settings.currency)

    summary = view.summary
    console.print(f"[bold]{month_name(view.month_year)}[/bold]")
    console.print(
        f"Income {money(summary.total_income)}  Expenses {money(summary.total_expenses)}  "
        f"Net {money(summary.net_balance)}  ({summary.transaction_count} transactions)"
    )

    if summary.top_categories:
        table = Table(title="Top categories")
        table.add_column("category")
        table.add_column("amount", justify="right")
        table.add_column("share", justify="right")
        for row in summary.top_categories:
            table.add_row(
                escape(row.category), money(row.amount), f"{format_percentage(row.percentage)}%"
            )
        console.print(table)

    for line in view.insights:
        console.print(f"- {escape(line)}")

    if view.budgets:
        names = {c.id: c.name for c in category_rows}
        table = Table(title="Budgets")
        for col in ("category", "spent", "limit", "used", "status"):
            table.add_column(col)
        for item in view.budgets:
            table.add_row(
                escape(names.get(item.budget.category_id or "", "-")),
                money(item.spent),
                money(item.budget.monthly_limit),
                f"{format_percentage(item.percentage)}%",
                str(item.status),
            )
        console.print(table)
        totals = view.budget_totals
        console.print(
            f"Budgeted {money(totals.total_limit)}, spent {money(totals.total_spent)}, "
            f"{money(totals.remaining)} remaining"
        )
    for alert in view.alerts:
        console.print(f"[yellow]{alert.severity}[/yellow] {escape(alert.message)}")

    for progress in view.goals:
        pace = (
            f", {money(progress.required_monthly_pace)}/month needed"
            if progress.required_monthly_pace is not None
            else ""
        )
        days = (
            f", {progress.days_remaining} days left" if progress.days_remaining is not None else ""
        )
        console.print(
            f"Goal {escape(progress.goal.name or '-')}: "
            f"{format_percentage(progress.percentage)}%{days}{pace}"
        )

    if view.recurring.active_count:
        console.print(
            f"Recurring: {view.recurring.active_count} active, "
            f"about {money(view.recurring.monthly_outflow)}/month out"
        )


@app.callback()
def _root() -> None:
    """Load ``.env`` from the working directory and configure logging once."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


if __name__ == "__main__":  # pragma: no cover
    app()
