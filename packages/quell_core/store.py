"""Persistence collaborator contract and an in-memory implementation.

The engine never performs I/O itself. Callers fetch lookups and transactions
through a :class:`FinanceStore` before calling the pure functions, and hand
accepted drafts back to it afterwards (see :func:`import_drafts`).
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from .logging_setup import get_logger
from .models import (
    Budget,
    Category,
    Goal,
    RecurringTransaction,
    Tag,
    Transaction,
    TransactionDraft,
    TransactionType,
)

logger = get_logger("quell_core.store")


class FinanceStore(Protocol):
    def list_categories(self) -> list[Category]: ...

    def list_tags(self) -> list[Tag]: ...

    def list_transactions(
        self,
        start: str,
        end: str,
        *,
        category_id: str | None = None,
        type: TransactionType | None = None,
    ) -> list[Transaction]: ...

    def list_budgets(self, month_year: str) -> list[Budget]: ...

    def list_goals(self) -> list[Goal]: ...

    def list_recurring(self) -> list[RecurringTransaction]: ...

    def add_transaction(self, draft: TransactionDraft) -> Transaction: ...


class InMemoryStore:
    """Dict-backed :class:`FinanceStore` for tests, the CLI, and prototyping."""

    def __init__(
        self,
        *,
        categories: Iterable[Category] = (),
        tags: Iterable[Tag] = (),
        transactions: Iterable[Transaction] = (),
        budgets: Iterable[Budget] = (),
        goals: Iterable[Goal] = (),
        recurring: Iterable[RecurringTransaction] = (),
    ) -> None:
        self._categories = list(categories)
        self._tags = list(tags)
        self._transactions = list(transactions)
        self._budgets = list(budgets)
        self._goals = list(goals)
        self._recurring = list(recurring)
        self._ids = itertools.count(len(self._transactions) + 1)

    def list_categories(self) -> list[Category]:
        return list(self._categories)

    def list_tags(self) -> list[Tag]:
        return list(self._tags)

    def list_transactions(
        self,
        start: str,
        end: str,
        *,
        category_id: str | None = None,
        type: TransactionType | None = None,
    ) -> list[Transaction]:
        out = [t for t in self._transactions if start <= t.transaction_date <= end]
        if category_id is not None:
            out = [t for t in out if t.category_id == category_id]
        if type is not None:
            out = [t for t in out if t.type is type]
        return sorted(out, key=lambda t: t.transaction_date, reverse=True)

    def list_budgets(self, month_year: str) -> list[Budget]:
        return [b for b in self._budgets if b.month_year == month_year]

    def list_goals(self) -> list[Goal]:
        return list(self._goals)

    def list_recurring(self) -> list[RecurringTransaction]:
        return list(self._recurring)

    def add_transaction(self, draft: TransactionDraft) -> Transaction:
        tx = Transaction(
            id=f"tx-{next(self._ids)}",
            type=draft.type,
            amount=draft.amount,
            description=draft.description,
            transaction_date=draft.date,
            category_id=draft.category_id,
            notes=draft.notes,
            tag_ids=draft.tag_ids,
        )
        self._transactions.append(tx)
        return tx


@dataclass(frozen=True, slots=True)
class ImportFailure:
    index: int
    description: str
    error: str


@dataclass(frozen=True, slots=True)
class BulkImportResult:
    successful: int = 0
    failed: int = 0
    errors: tuple[ImportFailure, ...] = field(default_factory=tuple)


def import_drafts(store: FinanceStore, drafts: Sequence[TransactionDraft]) -> BulkImportResult:
    """Persist drafts one by one; a failing draft does not stop the rest.

    Store errors are collected per draft (by position in ``drafts``) and
    logged, not raised.
    """

    successful = 0
    failures: list[ImportFailure] = []
    for i, draft in enumerate(drafts):
        try:
            store.add_transaction(draft)
        except Exception as e:  # noqa: BLE001
            logger.warning("failed to store draft %d (%s): %s", i, draft.description, e)
            failures.append(ImportFailure(i, draft.description, str(e)))
        else:
            successful += 1
    logger.info("bulk import: %d stored, %d failed", successful, len(failures))
    return BulkImportResult(successful=successful, failed=len(failures), errors=tuple(failures))


__all__ = [
    "BulkImportResult",
    "FinanceStore",
    "ImportFailure",
    "InMemoryStore",
    "import_drafts",
]
