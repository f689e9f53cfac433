"""SQLModel table exports."""

from .habit import Habit, HabitCheckIn
from .settings import LAST_RECONCILED_DATE_KEY, AppSetting

__all__ = [
    "AppSetting",
    "Habit",
    "HabitCheckIn",
    "LAST_RECONCILED_DATE_KEY",
]
