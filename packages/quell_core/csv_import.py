"""Bulk CSV import/export for transaction drafts.

File format
-----------
Header row (case-insensitive, any order)::

    description,amount,type,date,category,notes

``description``, ``amount``, ``type`` and ``date`` are required columns;
``category`` and ``notes`` are optional. Fields are comma-separated and may be
double-quoted to contain commas; ``""`` inside a quoted field is a literal
quote. Splitting is line-oriented, so a quoted field cannot span lines.

Row numbers in errors are 1-based with the header as row 1 (the first data row
is row 2). Blank lines before the header are ignored; blank lines after it are
skipped but still counted. File-level problems are reported as row 0.

Validation is per row and independent: one bad row never blocks its siblings.
An unknown category name is not an error; the row imports uncategorized.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from .dates import parse_iso_date, shift_days
from .errors import ErrorKind, RowError
from .logging_setup import get_logger
from .models import Category, Transaction, TransactionDraft, TransactionType, to_amount
from .names import NameIndex
from .pmap import p_map
from .settings import CSV_HEADERS, REQUIRED_CSV_HEADERS

logger = get_logger("quell_core.csv_import")


class ImportStatus(StrEnum):
    SUCCESS = "SUCCESS"
    PARTIAL = "PARTIAL"
    FAILED = "FAILED"


@dataclass(frozen=True, slots=True)
class CsvImportResult:
    """Accepted drafts plus per-row errors (ascending by row)."""

    accepted: tuple[TransactionDraft, ...]
    errors: tuple[RowError, ...]
    status: ImportStatus

    @property
    def ok(self) -> bool:
        return self.status is not ImportStatus.FAILED


_EMPTY_MESSAGE = "CSV must have at least a header and one data row"


def _failed(row: int, kind: ErrorKind, message: str) -> CsvImportResult:
    return CsvImportResult((), (RowError(row, kind, message),), ImportStatus.FAILED)


def tokenize_line(line: str) -> list[str]:
    """Split one CSV line into raw field values.

    Raises ``csv.Error`` on malformed quoting (e.g. an unterminated quote).
    """

    reader = csv.reader([line], strict=True, skipinitialspace=True)
    return next(reader, [])


def _split_lines(text: str) -> list[str]:
    return [line.strip() for line in text.strip().split("\n")]


@dataclass(frozen=True, slots=True)
class _RowValidator:
    columns: dict[str, int]
    categories: NameIndex[Category]

    def _field(self, values: Sequence[str], name: str) -> str:
        idx = self.columns.get(name)
        if idx is None or idx >= len(values):
            return ""
        return values[idx].strip()

    def __call__(self, numbered: tuple[int, str]) -> TransactionDraft | RowError:
        row, line = numbered
        try:
            values = tokenize_line(line)
        except csv.Error as e:
            return RowError(row, ErrorKind.ROW_PARSE_FAILURE, f"Failed to parse row: {e}")

        description = self._field(values, "description")
        if not description:
            return RowError(row, ErrorKind.DESCRIPTION_REQUIRED, "Description is required")

        amount = to_amount(self._field(values, "amount"))
        if amount is None or amount <= 0:
            return RowError(row, ErrorKind.INVALID_AMOUNT, "Amount must be a positive number")

        raw_type = self._field(values, "type").upper()
        if raw_type not in TransactionType.__members__:
            return RowError(row, ErrorKind.INVALID_TYPE, "Type must be EXPENSE or INCOME")

        tx_date = self._field(values, "date")
        if parse_iso_date(tx_date) is None:
            return RowError(row, ErrorKind.INVALID_DATE, "Date must be in YYYY-MM-DD format")

        category = self.categories.resolve(self._field(values, "category"))
        return TransactionDraft(
            type=TransactionType(raw_type),
            amount=amount,
            description=description,
            date=tx_date,
            category_id=category.id if category is not None else None,
            notes=self._field(values, "notes") or None,
        )


def parse_csv(
    text: str,
    categories: Sequence[Category] = (),
    *,
    concurrency: int = 1,
) -> CsvImportResult:
    """Validate a CSV document into drafts and row errors.

    Missing required headers abort the whole import with one row-0 error. A
    document without data rows, or where every row fails, is ``FAILED``; a
    mix of accepted and rejected rows is ``PARTIAL``. ``concurrency > 1``
    validates rows on a thread pool; output order is unaffected.
    """

    lines = _split_lines(text or "")
    if not lines[0]:
        return _failed(0, ErrorKind.EMPTY_DOCUMENT, _EMPTY_MESSAGE)

    try:
        header = [h.strip().lstrip("\ufeff").lower() for h in tokenize_line(lines[0])]
    except csv.Error as e:
        return _failed(1, ErrorKind.ROW_PARSE_FAILURE, f"Failed to parse header row: {e}")

    missing = [h for h in REQUIRED_CSV_HEADERS if h not in header]
    if missing:
        return _failed(
            0,
            ErrorKind.MISSING_REQUIRED_HEADERS,
            f"CSV must have headers: {', '.join(REQUIRED_CSV_HEADERS)} "
            f"(missing: {', '.join(missing)})",
        )

    columns: dict[str, int] = {}
    for idx, name in enumerate(header):
        columns.setdefault(name, idx)

    numbered = [(i, line) for i, line in enumerate(lines[1:], start=2) if line]
    if not numbered:
        return _failed(0, ErrorKind.EMPTY_DOCUMENT, _EMPTY_MESSAGE)

    validate = _RowValidator(columns, NameIndex(categories))
    outcomes = p_map(numbered, validate, concurrency=concurrency)

    accepted: list[TransactionDraft] = []
    errors: list[RowError] = []
    for outcome in outcomes:
        if isinstance(outcome, RowError):
            logger.debug("row %d rejected: %s (%s)", outcome.row, outcome.message, outcome.kind)
            errors.append(outcome)
        else:
            accepted.append(outcome)

    if not accepted:
        status = ImportStatus.FAILED
    elif errors:
        status = ImportStatus.PARTIAL
    else:
        status = ImportStatus.SUCCESS
    logger.info(
        "csv import: %d accepted, %d rejected (%s)", len(accepted), len(errors), status
    )
    return CsvImportResult(tuple(accepted), tuple(errors), status)


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def _one_line(value: str | None) -> str:
    return " ".join((value or "").split())


def _write_rows(rows: Iterable[Sequence[str]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_HEADERS)
    writer.writerows(rows)
    return buf.getvalue()


_SAMPLE_ROWS: tuple[tuple[str, str, str, int, str, str], ...] = (
    ("Coffee", "4.50", "EXPENSE", 0, "Food", "Morning coffee"),
    ("Grocery Shopping", "125.00", "EXPENSE", -1, "Groceries", "Weekly groceries"),
    ("Freelance Project", "500.00", "INCOME", -2, "Income", "Client payment, March invoice"),
    ("Gas", "45.75", "EXPENSE", -3, "Transport", "Monthly fuel"),
)
SAMPLE_ROW_COUNT = len(_SAMPLE_ROWS)


def generate_sample_csv(today: date | None = None) -> str:
    """Return a sample import document dated relative to ``today``."""

    day = today or date.today()
    return _write_rows(
        (desc, amount, tx_type, shift_days(day, offset), category, notes)
        for desc, amount, tx_type, offset, category, notes in _SAMPLE_ROWS
    )


def export_csv(
    transactions: Iterable[TransactionDraft | Transaction],
    categories: Sequence[Category] = (),
) -> str:
    """Serialize drafts or stored transactions in the import format.

    Embedded newlines are collapsed to spaces so the output re-imports.
    """

    names = {c.id: c.name for c in categories}
    rows: list[tuple[str, ...]] = []
    for tx in transactions:
        tx_date = tx.date if isinstance(tx, TransactionDraft) else tx.transaction_date
        rows.append(
            (
                _one_line(tx.description),
                f"{tx.amount:.2f}",
                str(tx.type),
                tx_date,
                names.get(tx.category_id, "") if tx.category_id else "",
                _one_line(tx.notes),
            )
        )
    return _write_rows(rows)


__all__ = [
    "CsvImportResult",
    "ImportStatus",
    "SAMPLE_ROW_COUNT",
    "export_csv",
    "generate_sample_csv",
    "parse_csv",
    "tokenize_line",
]
