"""Pytest configuration and shared fixtures.

Settings are read from ``QUELL_*`` environment variables at call time, so a
developer's shell (or a local ``.env`` loaded by an earlier CLI test) could
leak into assertions. An autouse fixture clears them for every test.
"""

from __future__ import annotations

import os
from datetime import date

import pytest

from quell_core import Category, Tag

TODAY = date(2026, 3, 15)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("QUELL_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def categories() -> list[Category]:
    return [
        Category(id="c-food", name="Food"),
        Category(id="c-income", name="Income"),
        Category(id="c-rent", name="Rent"),
    ]


@pytest.fixture
def tags() -> list[Tag]:
    return [Tag(id="t-office", name="Office"), Tag(id="t-weekly", name="weekly")]
