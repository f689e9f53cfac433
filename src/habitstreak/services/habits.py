"""Streak engine: current and longest streak from a habit's check-in log."""

from __future__ import annotations

from datetime import date
from typing import Iterable, NamedTuple, Optional

from ..domain.habit import TrackedHabit
from ..errors import InvalidDateFormat
from ..logging_config import get_logger
from .dates import Calendar, DateLike, days_between, parse_calendar_date, predecessor

logger = get_logger("streaks")


class StreakSummary(NamedTuple):
    """(current_streak, longest_streak) for one habit."""

    current_streak: int = 0
    longest_streak: int = 0


def normalize_check_ins(entries: Iterable[DateLike]) -> list[date]:
    """Return the distinct calendar dates in ``entries``, most recent first.

    Entries that cannot be read as dates are logged and skipped so a single
    corrupt value does not wipe out the rest of the history.
    """
    unique: set[date] = set()
    for entry in entries:
        try:
            unique.add(parse_calendar_date(entry))
        except InvalidDateFormat:
            logger.warning("Dropping malformed check-in", extra={"value": repr(entry)})
    return sorted(unique, reverse=True)


def _current_streak(ordered: list[date], today: date) -> int:
    # Anchored on today: a run that ends yesterday does not count.
    if not ordered or ordered[0] != today:
        return 0

    current = 1
    expected = predecessor(today)
    for day in ordered[1:]:
        if day != expected:
            break
        current += 1
        expected = predecessor(expected)
    return current


def _longest_streak(ordered: list[date]) -> int:
    if not ordered:
        return 0

    longest = 0
    run = 1
    for previous, day in zip(ordered, ordered[1:]):
        if days_between(previous, day) == 1:
            run += 1
        else:
            longest = max(longest, run)
            run = 1
    return max(longest, run)


def compute_streaks(
    check_ins: Iterable[DateLike], *, today: Optional[DateLike] = None
) -> StreakSummary:
    """Return the current and longest streak for a check-in log.

    The two values come from separate passes: the current streak must include
    ``today``; the longest streak looks at the whole history and ignores it.
    """
    ordered = normalize_check_ins(check_ins)
    if not ordered:
        return StreakSummary(0, 0)

    anchor = parse_calendar_date(today) if today is not None else Calendar().today()
    return StreakSummary(
        current_streak=_current_streak(ordered, anchor),
        longest_streak=_longest_streak(ordered),
    )


def last_check_in(check_ins: Iterable[DateLike]) -> Optional[date]:
    """Most recent valid check-in date, or None for an empty log."""

    ordered = normalize_check_ins(check_ins)
    return ordered[0] if ordered else None


def toggle_check_in(check_ins: Iterable[DateLike], day: DateLike) -> set[date]:
    """Return a new log with ``day`` removed if present, added otherwise."""

    log = set(normalize_check_ins(check_ins))
    target = parse_calendar_date(day)
    if target in log:
        log.remove(target)
    else:
        log.add(target)
    return log


def add_check_in(check_ins: Iterable[DateLike], day: DateLike) -> set[date]:
    """Return a new log that includes ``day``; a no-op if it is already there."""

    log = set(normalize_check_ins(check_ins))
    log.add(parse_calendar_date(day))
    return log


def refresh_streaks(habit: TrackedHabit, *, today: DateLike) -> bool:
    """Recompute ``habit``'s streak fields in place.

    Returns:
        True when either streak value changed
    """
    summary = compute_streaks(habit.check_ins, today=today)
    changed = (habit.current_streak, habit.longest_streak) != tuple(summary)
    habit.current_streak, habit.longest_streak = summary
    return changed


__all__ = [
    "StreakSummary",
    "add_check_in",
    "compute_streaks",
    "last_check_in",
    "normalize_check_ins",
    "refresh_streaks",
    "toggle_check_in",
]
