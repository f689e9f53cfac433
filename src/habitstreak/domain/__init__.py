"""Domain objects and repository protocols."""

from .habit import TrackedHabit

__all__ = ["TrackedHabit"]
