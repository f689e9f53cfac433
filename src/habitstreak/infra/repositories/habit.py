"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Sequence

from sqlmodel import Session, select

from ...models.habit import Habit, HabitCheckIn
from ..database import SessionFactory


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def list_all(self) -> list[Habit]:
        """List all habits in creation order."""
        with self.session_factory() as session:
            rows = list(session.exec(select(Habit).order_by(Habit.id)).all())  # type: ignore[arg-type]
            session.expunge_all()
            return rows

    def check_ins_by_habit(self) -> dict[int, set[date]]:
        """All check-in dates grouped by habit id."""
        grouped: dict[int, set[date]] = defaultdict(set)
        with self.session_factory() as session:
            for row in session.exec(select(HabitCheckIn)).all():
                grouped[row.habit_id].add(row.occurred_on)
        return dict(grouped)

    def save_all(self, entries: Sequence[tuple[Habit, Iterable[date]]]) -> list[int]:
        """Make the stored habits and check-ins match ``entries``.

        Rows whose id is already stored are updated, the rest inserted, and
        stored habits missing from ``entries`` are deleted. Everything runs in
        one transaction, so a failure leaves storage as it was.

        Returns:
            The habit ids in the order of ``entries``
        """
        with self.session_factory() as session:
            stored_ids = set(session.exec(select(Habit.id)).all())
            saved_ids: list[int] = []
            for row, days in entries:
                if row.id is not None and row.id in stored_ids:
                    habit_id = self._update(session, row)
                else:
                    habit_id = self._insert(session, row)
                self._sync_check_ins(session, habit_id, days)
                saved_ids.append(habit_id)

            for habit_id in stored_ids - set(saved_ids):
                self._delete(session, habit_id)
        return saved_ids

    # Per-session helpers
    def _insert(self, session: Session, habit: Habit) -> int:
        session.add(habit)
        session.flush()
        return habit.id

    def _update(self, session: Session, habit: Habit) -> int:
        existing = session.get(Habit, habit.id)
        if existing is None:
            raise LookupError(f"Habit {habit.id} does not exist")
        existing.name = habit.name
        existing.current_streak = habit.current_streak
        existing.longest_streak = habit.longest_streak
        session.add(existing)
        return existing.id

    def _sync_check_ins(self, session: Session, habit_id: int, days: Iterable[date]) -> None:
        wanted = set(days)
        rows = session.exec(select(HabitCheckIn).where(HabitCheckIn.habit_id == habit_id)).all()
        stored = set()
        for row in rows:
            if row.occurred_on in wanted:
                stored.add(row.occurred_on)
            else:
                session.delete(row)
        for day in sorted(wanted - stored):
            session.add(HabitCheckIn(habit_id=habit_id, occurred_on=day))

    def _delete(self, session: Session, habit_id: int) -> None:
        for check_in in session.exec(
            select(HabitCheckIn).where(HabitCheckIn.habit_id == habit_id)
        ).all():
            session.delete(check_in)
        habit = session.get(Habit, habit_id)
        if habit:
            session.delete(habit)


__all__ = ["SQLModelHabitRepository"]
