"""Pytest configuration and shared fixtures for habitstreak tests.

Provides an isolated SQLite database per test, repositories and store built on
it, and a controllable clock so nothing depends on the real date.
"""

from __future__ import annotations

import tempfile
from datetime import date, timedelta
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from habitstreak.domain.habit import TrackedHabit
from habitstreak.infra.database import create_session_factory
from habitstreak.infra.repositories import SQLModelHabitRepository, SQLModelSettingsRepository
from habitstreak.infra.store import HabitStore
from habitstreak.models import Habit  # noqa: F401  registers tables
from habitstreak.services.dates import Calendar
from habitstreak.services.rollover import RolloverMonitor
from habitstreak.services.tracker import HabitTracker

TODAY = date(2026, 3, 15)


def days_ago(n: int, *, today: date = TODAY) -> date:
    """Return the date ``n`` days before ``today``."""
    return today - timedelta(days=n)


class FixedClock:
    """Callable clock whose date only moves when a test says so."""

    def __init__(self, today: date = TODAY):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int = 1) -> date:
        self.today += timedelta(days=days)
        return self.today


# =============================================================================
# Clock Fixtures
# =============================================================================


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to TODAY."""
    return FixedClock()


@pytest.fixture
def calendar(clock) -> Calendar:
    return Calendar(clock)


@pytest.fixture
def monitor(calendar) -> RolloverMonitor:
    return RolloverMonitor(calendar)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with all tables created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Transactional session factory matching the application's."""
    return create_session_factory(db_engine)


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def settings_repo(session_factory) -> SQLModelSettingsRepository:
    return SQLModelSettingsRepository(session_factory)


@pytest.fixture
def store(habit_repo, settings_repo) -> HabitStore:
    return HabitStore(habit_repo, settings_repo)


@pytest.fixture
def tracker(store, monitor) -> HabitTracker:
    """Tracker backed by the test database, already loaded."""
    tracker = HabitTracker(store, monitor)
    tracker.load()
    return tracker


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(store):
    """Factory persisting habits with a given check-in log.

    Returns:
        Callable: Function that saves and returns a TrackedHabit
    """

    def _create_habit(
        name: str = "Test Habit",
        check_ins: set[date] | None = None,
        current_streak: int = 0,
        longest_streak: int = 0,
    ) -> TrackedHabit:
        habit = TrackedHabit(
            name=name,
            check_ins=set(check_ins or ()),
            current_streak=current_streak,
            longest_streak=longest_streak,
        )
        existing = store.load_habits()
        store.save_habits([*existing, habit])
        return habit

    return _create_habit
