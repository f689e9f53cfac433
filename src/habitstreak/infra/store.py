"""Persistence facade used by the tracker.

Maps between the SQLModel rows and :class:`TrackedHabit` and turns any
database failure into :class:`PersistenceUnavailable`.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import Iterable, Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..domain.habit import TrackedHabit
from ..domain.repositories import HabitRepository, SettingsRepository
from ..errors import InvalidDateFormat, PersistenceUnavailable
from ..logging_config import get_logger
from ..models.habit import Habit
from ..models.settings import LAST_RECONCILED_DATE_KEY
from ..services.dates import parse_calendar_date, to_iso

logger = get_logger("store")


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Storage %s failed: %s", operation, exc, exc_info=True)
        raise PersistenceUnavailable(f"Could not {operation}: {exc}") from exc


class HabitStore:
    """Loads and saves the habit list and the last reconciled date."""

    def __init__(self, habit_repo: HabitRepository, settings_repo: SettingsRepository):
        self.habit_repo = habit_repo
        self.settings_repo = settings_repo

    def load_habits(self) -> list[TrackedHabit]:
        """Return every stored habit with its check-in set.

        Streak values come from the display cache; callers recompute them.
        """
        with _storage_errors("load habits"):
            rows = self.habit_repo.list_all()
            check_ins = self.habit_repo.check_ins_by_habit()

        return [
            TrackedHabit(
                id=row.id,
                name=row.name,
                check_ins=set(check_ins.get(row.id, ())),
                current_streak=row.current_streak,
                longest_streak=row.longest_streak,
                created_at=row.created_at,
            )
            for row in rows
        ]

    def save_habits(self, habits: Iterable[TrackedHabit]) -> None:
        """Persist ``habits`` as the complete list.

        New habits get their ``id`` assigned; stored habits missing from the
        list are deleted. Either the whole list is written or nothing is.
        """
        habits = list(habits)
        entries = [
            (
                Habit(
                    id=habit.id,
                    name=habit.name,
                    current_streak=habit.current_streak,
                    longest_streak=habit.longest_streak,
                    created_at=habit.created_at,
                ),
                set(habit.check_ins),
            )
            for habit in habits
        ]
        with _storage_errors("save habits"):
            saved_ids = self.habit_repo.save_all(entries)

        for habit, habit_id in zip(habits, saved_ids):
            habit.id = habit_id
        logger.debug("Saved habits", extra={"habit_count": len(saved_ids)})

    def load_last_reconciled_date(self) -> Optional[date]:
        with _storage_errors("load last reconciled date"):
            setting = self.settings_repo.get(LAST_RECONCILED_DATE_KEY)
        if setting is None:
            return None
        try:
            return parse_calendar_date(setting.value)
        except InvalidDateFormat:
            logger.warning(
                "Ignoring unreadable last reconciled date",
                extra={"stored_value": setting.value},
            )
            return None

    def save_last_reconciled_date(self, day: date) -> None:
        with _storage_errors("save last reconciled date"):
            self.settings_repo.set(
                LAST_RECONCILED_DATE_KEY,
                to_iso(day),
                description="Date streaks were last reconciled",
            )


__all__ = ["HabitStore"]
