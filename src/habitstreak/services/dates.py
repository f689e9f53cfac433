"""Calendar-date helpers.

Every streak calculation works on local calendar days, never on instants. This
module is the only place that reads the wall clock; everything else receives
``today`` from a :class:`Calendar` so tests can pin it.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Union

from ..errors import InvalidDateFormat

DateLike = Union[date, str]

_ISO_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_ONE_DAY = timedelta(days=1)


def parse_calendar_date(value: DateLike) -> date:
    """Reduce ``value`` to a calendar date.

    Accepts ``date``/``datetime`` objects and ISO strings. A trailing time
    component (``2024-03-01T08:15:00Z`` or ``2024-03-01 08:15``) is dropped.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateFormat(value)

    day_part = value.strip().split("T", 1)[0].split(" ", 1)[0]
    if not _ISO_DAY.match(day_part):
        raise InvalidDateFormat(value)
    try:
        return date.fromisoformat(day_part)
    except ValueError as exc:
        raise InvalidDateFormat(value) from exc


def to_iso(value: DateLike) -> str:
    """Canonical ``YYYY-MM-DD`` form."""
    return parse_calendar_date(value).isoformat()


def is_equal(a: DateLike, b: DateLike) -> bool:
    return parse_calendar_date(a) == parse_calendar_date(b)


def days_between(a: DateLike, b: DateLike) -> int:
    """Absolute number of calendar days separating ``a`` and ``b``."""
    return abs((parse_calendar_date(a) - parse_calendar_date(b)).days)


def predecessor(value: DateLike) -> date:
    return parse_calendar_date(value) - _ONE_DAY


class Calendar:
    """Source of "today" for the whole application.

    Args:
        clock: Zero-argument callable returning the current local date (or
            datetime). Defaults to :meth:`datetime.date.today`.
    """

    def __init__(self, clock: Optional[Callable[[], DateLike]] = None):
        self._clock = clock or date.today

    def today(self) -> date:
        return parse_calendar_date(self._clock())

    def yesterday(self) -> date:
        return predecessor(self.today())

    def is_today(self, value: DateLike) -> bool:
        return parse_calendar_date(value) == self.today()

    def is_yesterday(self, value: DateLike) -> bool:
        return parse_calendar_date(value) == self.yesterday()


def describe_last_check_in(value: Optional[DateLike], calendar: Calendar) -> str:
    """Label for "Last checked in": Never, Today, Yesterday or ``Jan 29, 2026``."""

    if value is None:
        return "Never"
    day = parse_calendar_date(value)
    if calendar.is_today(day):
        return "Today"
    if calendar.is_yesterday(day):
        return "Yesterday"
    return f"{day:%b} {day.day}, {day.year}"


__all__ = [
    "Calendar",
    "DateLike",
    "days_between",
    "describe_last_check_in",
    "is_equal",
    "parse_calendar_date",
    "predecessor",
    "to_iso",
]
