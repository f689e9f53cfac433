"""Exception classes for habitstreak."""

from __future__ import annotations

from typing import Any


class HabitStreakError(Exception):
    """Base exception for all habitstreak errors."""


class InvalidDateFormat(HabitStreakError, ValueError):
    """Raised when a value cannot be read as a calendar date."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Invalid calendar date: {value!r} (expected YYYY-MM-DD)")


class PersistenceUnavailable(HabitStreakError, RuntimeError):
    """Raised when the habit store cannot be read or written."""


class HabitNotFound(HabitStreakError, KeyError):
    """Raised when a habit id is not in the tracker."""

    def __init__(self, habit_id: int):
        self.habit_id = habit_id
        super().__init__(habit_id)

    def __str__(self) -> str:
        return f"Habit {self.habit_id} not found"


__all__ = ["HabitNotFound", "HabitStreakError", "InvalidDateFormat", "PersistenceUnavailable"]
