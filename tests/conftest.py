"""Pytest configuration and shared fixtures for HabitPulse tests.

This module provides clock, store and database fixtures plus small factories
for building habits and history without touching the real data directory.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import date
from pathlib import Path
from typing import Mapping

import pytest
from sqlmodel import SQLModel, create_engine

from habitpulse import models  # noqa: F401  # register tables with SQLModel metadata
from habitpulse.clock import FixedClock
from habitpulse.infra.database import create_session_factory
from habitpulse.infra.repositories import InMemoryKeyValueStore
from habitpulse.models.habit import Habit
from habitpulse.models.history import HistoryLog
from habitpulse.services.habit_store import HabitStore

TODAY = date(2024, 1, 10)


# =============================================================================
# Environment isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point the data directory at a temp folder and clear HabitPulse overrides."""

    for name in (
        "HABITPULSE_DATABASE_URL",
        "HABITPULSE_USER",
        "HABITPULSE_STORAGE",
        "HABITPULSE_DEV_MODE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HABITPULSE_DATA_DIR", str(tmp_path / "data"))
    yield


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers added by setup_logging so tests do not leak file handles."""

    yield
    logger = logging.getLogger("habitpulse")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Clock / store fixtures
# =============================================================================


@pytest.fixture
def clock() -> FixedClock:
    """A clock pinned to 2024-01-10 (a Wednesday)."""

    return FixedClock(TODAY)


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def store(kv_store, clock) -> HabitStore:
    """An empty, loaded habit store backed by the in-memory key/value store."""

    return HabitStore(kv_store, clock=clock).load()


@pytest.fixture
def habit_factory(store, clock):
    """Factory that adds habits through the store, optionally backdated.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        category: str = "health",
        created_at: date | None = None,
    ) -> Habit:
        """Create a habit, moving the clock to ``created_at`` for the call.

        Args:
            name: Habit name
            category: One of the fixed categories
            created_at: Creation day (defaults to the clock's today)

        Returns:
            Habit: The habit as stored
        """
        original_day = clock.day
        if created_at is not None:
            clock.day = created_at
        try:
            return store.add_habit(name, category)
        finally:
            clock.day = original_day

    return _create_habit


def mark(store: HabitStore, entries: Mapping[date, Mapping[str, bool]]) -> None:
    """Write raw history entries straight into the store's log (test setup only)."""

    for day, values in entries.items():
        for habit_id, completed in values.items():
            store.history.set_entry(day, habit_id, completed)


def history_from(entries: Mapping[str, Mapping[str, bool]]) -> HistoryLog:
    """Build a HistoryLog from ISO-keyed test data."""

    return HistoryLog.from_dict(entries)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with all tables created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one the application builds."""

    return create_session_factory(db_engine)
