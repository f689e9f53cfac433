"""Storage infrastructure: engine, repositories and the habit store."""

from .database import bootstrap_database, create_db_engine, create_session_factory, init_database
from .store import HabitStore

__all__ = [
    "HabitStore",
    "bootstrap_database",
    "create_db_engine",
    "create_session_factory",
    "init_database",
]
