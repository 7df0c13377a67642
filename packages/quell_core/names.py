"""Case-insensitive name lookup for categories and tags.

An index is built once per parse call and then queried per token or row, so
CSV import stays linear in the number of rows.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Generic, Protocol, TypeVar


class _Named(Protocol):
    @property
    def id(self) -> str: ...

    @property
    def name(self) -> str: ...


N = TypeVar("N", bound=_Named)


def normalize_name(name: str) -> str:
    """Trimmed, case-folded key. Inner whitespace must match exactly."""

    return name.strip().casefold()


class NameIndex(Generic[N]):
    """Normalized name -> record. The first record for a key wins."""

    __slots__ = ("_by_key",)

    def __init__(self, items: Iterable[N] = ()) -> None:
        self._by_key: dict[str, N] = {}
        for item in items:
            self._by_key.setdefault(normalize_name(item.name), item)

    def __len__(self) -> int:
        return len(self._by_key)

    def resolve(self, name: str | None) -> N | None:
        if not name:
            return None
        return self._by_key.get(normalize_name(name))


__all__ = ["NameIndex", "normalize_name"]
