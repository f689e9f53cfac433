"""In-memory habit record the tracker and rollover monitor operate on."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional


@dataclass
class TrackedHabit:
    """A daily habit with its check-in log and cached streak values.

    ``current_streak`` and ``longest_streak`` are derived from ``check_ins``
    and must be refreshed through the streak engine whenever the log or the
    current date changes.
    """

    name: str
    id: Optional[int] = None
    check_ins: set[date] = field(default_factory=set)
    current_streak: int = 0
    longest_streak: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


__all__ = ["TrackedHabit"]
