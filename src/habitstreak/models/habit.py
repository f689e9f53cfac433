"""Habit tracking tables."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Habit(SQLModel, table=True):
    """A daily habit. Streak columns are a display cache, never authoritative."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    current_streak: int = Field(default=0, nullable=False)
    longest_streak: int = Field(default=0, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )


class HabitCheckIn(SQLModel, table=True):
    """One check-in for a habit on a calendar day."""

    __tablename__: ClassVar[str] = "habit_check_in"

    # Composite key: at most one check-in per habit per day.
    habit_id: int = Field(foreign_key="habit.id", primary_key=True)
    occurred_on: date = Field(primary_key=True, index=True)
