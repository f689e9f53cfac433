"""Service module exports."""

from . import dates, habits, rollover, tracker

__all__ = [
    "dates",
    "habits",
    "rollover",
    "tracker",
]
