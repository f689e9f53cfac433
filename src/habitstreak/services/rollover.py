"""Date-rollover detection and streak reconciliation.

Streaks depend on "today", so they go stale the moment the local date moves
on, even when no check-in changed. :class:`RolloverMonitor` compares the
calendar against the last reconciled date and, on a mismatch, recomputes every
habit from its log.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from ..domain.habit import TrackedHabit
from ..logging_config import get_logger
from .dates import Calendar
from .habits import refresh_streaks

logger = get_logger("rollover")


@dataclass
class RolloverState:
    """Last date streaks were reconciled; None means never."""

    last_reconciled_date: Optional[date] = None

    def is_stale(self, today: date) -> bool:
        return self.last_reconciled_date != today


@dataclass
class ReconcileResult:
    """Outcome of one :meth:`RolloverMonitor.check_and_reconcile` call."""

    changed: bool
    habits: list[TrackedHabit]
    changed_habits: list[TrackedHabit] = field(default_factory=list)

    @property
    def changed_ids(self) -> list[Optional[int]]:
        return [habit.id for habit in self.changed_habits]


class RolloverMonitor:
    """Reconciles streaks when the calendar date moves past the last run.

    Args:
        calendar: Source of today's date
        lock: Lock shared with whatever mutates the habit list; held for the
            whole reconciliation pass
    """

    def __init__(
        self,
        calendar: Optional[Calendar] = None,
        *,
        lock: Optional[threading.RLock] = None,
    ):
        self.calendar = calendar or Calendar()
        self.lock = lock or threading.RLock()

    def is_stale(self, state: RolloverState) -> bool:
        return state.is_stale(self.calendar.today())

    def mark_reconciled(self, state: RolloverState) -> date:
        """Stamp ``state`` with today's date and return it."""

        with self.lock:
            state.last_reconciled_date = self.calendar.today()
            return state.last_reconciled_date

    def check_and_reconcile(
        self, habits: Iterable[TrackedHabit], state: RolloverState
    ) -> ReconcileResult:
        """Recompute every habit's streaks if the date changed since the last run.

        ``changed`` is True whenever reconciliation ran, even if no value
        moved; ``changed_habits`` lists the habits whose streaks differ.
        """
        with self.lock:
            habit_list = list(habits)
            today = self.calendar.today()
            if not state.is_stale(today):
                return ReconcileResult(changed=False, habits=habit_list)

            previous = state.last_reconciled_date
            changed_habits = [
                habit for habit in habit_list if refresh_streaks(habit, today=today)
            ]
            state.last_reconciled_date = today

            logger.info(
                "Reconciled streaks for %s",
                today.isoformat(),
                extra={
                    "previous_date": previous.isoformat() if previous else None,
                    "habit_count": len(habit_list),
                    "changed_count": len(changed_habits),
                },
            )
            return ReconcileResult(changed=True, habits=habit_list, changed_habits=changed_habits)


__all__ = ["ReconcileResult", "RolloverMonitor", "RolloverState"]
