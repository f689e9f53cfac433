"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Protocol, Sequence

from ...models.habit import Habit


class HabitRepository(Protocol):
    """Repository for habits and their check-in rows."""

    def list_all(self) -> list[Habit]:
        """List all habits in creation order."""
        ...

    def check_ins_by_habit(self) -> dict[int, set[date]]:
        """All check-in dates grouped by habit id."""
        ...

    def save_all(self, entries: Sequence[tuple[Habit, Iterable[date]]]) -> list[int]:
        """Replace stored habits and check-ins with ``entries`` atomically."""
        ...
