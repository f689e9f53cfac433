"""Habit list management: CRUD, check-in toggling and reconciliation.

The tracker owns the in-memory habit list and the rollover state. Every
mutation recomputes streaks from the log, saves the list and stamps the
rollover state with today's date. Storage failures are logged and the
in-memory list stays authoritative for the session. A failed load turns
off writes until the next successful load.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

from ..domain.habit import TrackedHabit
from ..errors import HabitNotFound, PersistenceUnavailable
from ..logging_config import get_logger
from .dates import Calendar, DateLike
from .habits import add_check_in, refresh_streaks, toggle_check_in
from .rollover import ReconcileResult, RolloverMonitor, RolloverState

if TYPE_CHECKING:
    from ..infra.store import HabitStore

logger = get_logger("tracker")

ReconcileListener = Callable[[ReconcileResult], None]


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("Habit name cannot be empty")
    return cleaned


class HabitTracker:
    """In-memory habit list backed by a :class:`HabitStore`.

    Args:
        store: Persistence collaborator; None runs fully in memory
        monitor: Rollover monitor whose lock guards the habit list
        state: Rollover state, normally filled in by :meth:`load`
    """

    def __init__(
        self,
        store: Optional[HabitStore] = None,
        monitor: Optional[RolloverMonitor] = None,
        state: Optional[RolloverState] = None,
    ):
        self.store = store
        self.monitor = monitor or RolloverMonitor()
        self.state = state or RolloverState()
        self._habits: list[TrackedHabit] = []
        self._listeners: list[ReconcileListener] = []
        self._persistent = store is not None

    @property
    def calendar(self) -> Calendar:
        return self.monitor.calendar

    @property
    def lock(self):
        return self.monitor.lock

    @property
    def persistent(self) -> bool:
        """False when storage is absent or the last load failed."""
        return self._persistent

    # Loading and persistence
    def load(self) -> list[TrackedHabit]:
        """Load habits and rollover state, then recompute every streak."""

        habits: list[TrackedHabit] = []
        last_reconciled = None
        self._persistent = self.store is not None
        if self.store is not None:
            try:
                habits = self.store.load_habits()
            except PersistenceUnavailable:
                # Saving this list would wipe the stored habits.
                logger.warning("Starting with an empty, unpersisted habit list")
                self._persistent = False
        if self._persistent:
            try:
                last_reconciled = self.store.load_last_reconciled_date()
            except PersistenceUnavailable:
                logger.warning("Last reconciled date unavailable; reconciling from scratch")

        with self.lock:
            today = self.calendar.today()
            for habit in habits:
                refresh_streaks(habit, today=today)
            self._habits = habits
            self.state.last_reconciled_date = last_reconciled

        logger.info(
            "Loaded habits",
            extra={
                "habit_count": len(habits),
                "last_reconciled_date": last_reconciled.isoformat() if last_reconciled else None,
            },
        )
        return self.habits()

    def _save(self) -> None:
        # Caller holds the lock.
        reconciled_on = self.monitor.mark_reconciled(self.state)
        if not self._persistent:
            return
        try:
            self.store.save_habits(self._habits)
            self.store.save_last_reconciled_date(reconciled_on)
        except PersistenceUnavailable:
            logger.warning("Changes kept in memory only; storage is unavailable")

    # Queries
    def habits(self) -> list[TrackedHabit]:
        with self.lock:
            return list(self._habits)

    def get(self, habit_id: int) -> TrackedHabit:
        with self.lock:
            for habit in self._habits:
                if habit.id == habit_id:
                    return habit
        raise HabitNotFound(habit_id)

    # Mutations
    def add_habit(self, name: str) -> TrackedHabit:
        """Create a habit with an empty log and zero streaks."""

        habit = TrackedHabit(name=_clean_name(name))
        with self.lock:
            self._habits.append(habit)
            self._save()
            if habit.id is None:
                # Not persisted; hand out a session-local id.
                habit.id = max((h.id or 0 for h in self._habits), default=0) + 1
        logger.info("Added habit", extra={"habit_id": habit.id, "habit_name": habit.name})
        return habit

    def rename_habit(self, habit_id: int, name: str) -> TrackedHabit:
        cleaned = _clean_name(name)
        with self.lock:
            habit = self.get(habit_id)
            habit.name = cleaned
            self._save()
        logger.info("Renamed habit", extra={"habit_id": habit_id, "habit_name": cleaned})
        return habit

    def delete_habit(self, habit_id: int) -> None:
        """Remove a habit; unknown ids are ignored."""

        with self.lock:
            remaining = [habit for habit in self._habits if habit.id != habit_id]
            if len(remaining) == len(self._habits):
                return
            self._habits = remaining
            self._save()
        logger.info("Deleted habit", extra={"habit_id": habit_id})

    def toggle_check_in(self, habit_id: int, day: Optional[DateLike] = None) -> TrackedHabit:
        """Flip the check-in for ``day`` (default today) and refresh streaks."""

        with self.lock:
            habit = self.get(habit_id)
            target = day if day is not None else self.calendar.today()
            habit.check_ins = toggle_check_in(habit.check_ins, target)
            refresh_streaks(habit, today=self.calendar.today())
            self._save()
        logger.info(
            "Toggled check-in",
            extra={
                "habit_id": habit_id,
                "current_streak": habit.current_streak,
                "longest_streak": habit.longest_streak,
            },
        )
        return habit

    def check_in(self, habit_id: int, day: Optional[DateLike] = None) -> TrackedHabit:
        """Record a check-in for ``day`` (default today); repeating it is a no-op."""

        with self.lock:
            habit = self.get(habit_id)
            target = day if day is not None else self.calendar.today()
            habit.check_ins = add_check_in(habit.check_ins, target)
            refresh_streaks(habit, today=self.calendar.today())
            self._save()
        return habit

    # Rollover
    def add_listener(self, listener: ReconcileListener) -> None:
        """Call ``listener`` after every reconciliation that ran."""

        self._listeners.append(listener)

    def reconcile(self) -> ReconcileResult:
        """Run the rollover check over the current list and persist if it ran."""

        with self.lock:
            result = self.monitor.check_and_reconcile(self._habits, self.state)
            if result.changed:
                self._save()

        if result.changed:
            for listener in list(self._listeners):
                listener(result)
        return result


__all__ = ["HabitTracker", "ReconcileListener"]
