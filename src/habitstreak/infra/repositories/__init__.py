"""Concrete repository implementations using SQLModel."""

from .habit import SQLModelHabitRepository
from .settings import SQLModelSettingsRepository

__all__ = ["SQLModelHabitRepository", "SQLModelSettingsRepository"]
