"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from sqlalchemy.pool import StaticPool

load_dotenv()

MAX_ROLLOVER_INTERVAL_SECONDS = 24 * 60 * 60


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, rejecting junk early."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HabitStreak"
    DB_FILENAME = "habitstreak.db"
    ENV_PREFIX = "HABITSTREAK_"
    DEFAULT_ROLLOVER_INTERVAL_SECONDS = 60

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool(f"{self.ENV_PREFIX}DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv(f"{self.ENV_PREFIX}DATABASE_URL", self._build_sqlite_url())
        self.SCHEDULER_ENABLED = _env_bool(f"{self.ENV_PREFIX}SCHEDULER_ENABLED", default=True)
        self.ROLLOVER_INTERVAL_SECONDS = _env_int(
            f"{self.ENV_PREFIX}ROLLOVER_INTERVAL_SECONDS",
            self.DEFAULT_ROLLOVER_INTERVAL_SECONDS,
        )
        if not 1 <= self.ROLLOVER_INTERVAL_SECONDS <= MAX_ROLLOVER_INTERVAL_SECONDS:
            raise ValueError(
                "HABITSTREAK_ROLLOVER_INTERVAL_SECONDS must be between 1 and "
                f"{MAX_ROLLOVER_INTERVAL_SECONDS}, got {self.ROLLOVER_INTERVAL_SECONDS}"
            )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv(f"{self.ENV_PREFIX}DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to per-user storage.
            fallback_path = Path.home() / f".{self.APP_NAME.lower()}"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside DATA_DIR."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        # The scheduler polls from a worker thread.
        connect_args: dict[str, Any] = {"check_same_thread": False}
        return {"connect_args": connect_args}


class TestConfig(BaseConfig):
    """In-memory database, no background polling."""

    __test__ = False  # not a pytest class

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = "sqlite://"
        self.SCHEDULER_ENABLED = False

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        options = super().sqlalchemy_engine_options()
        # One shared connection keeps the in-memory schema alive across sessions.
        options["poolclass"] = StaticPool
        return options
