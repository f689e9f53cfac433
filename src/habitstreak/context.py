"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelHabitRepository, SQLModelSettingsRepository
from .infra.store import HabitStore
from .logging_config import get_logger, setup_logging
from .scheduler import RolloverScheduler, create_scheduler
from .services.dates import Calendar, DateLike
from .services.rollover import ReconcileResult, RolloverMonitor
from .services.tracker import HabitTracker

logger = get_logger("context")


@dataclass
class AppContext:
    """Everything a front end needs, wired together."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory

    habit_repo: SQLModelHabitRepository
    settings_repo: SQLModelSettingsRepository
    store: HabitStore

    calendar: Calendar
    monitor: RolloverMonitor
    tracker: HabitTracker
    scheduler: RolloverScheduler

    startup_result: Optional[ReconcileResult] = None

    def shutdown(self) -> None:
        """Stop background polling and release database connections."""
        self.scheduler.stop()
        self.engine.dispose()
        logger.info("Application context shut down")


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    clock: Optional[Callable[[], DateLike]] = None,
    start_scheduler: bool = False,
    configure_logging: bool = True,
) -> AppContext:
    """Create the context, load habits and run the startup rollover check.

    Args:
        config: Configuration; defaults to :class:`BaseConfig`
        clock: Override for "today", mainly for tests
        start_scheduler: Start background polling when the config allows it
        configure_logging: Install console and rotating file handlers
    """

    if config is None:
        config = BaseConfig()

    if configure_logging:
        setup_logging(config)

    engine, session_factory = bootstrap_database(config)

    habit_repo = SQLModelHabitRepository(session_factory)
    settings_repo = SQLModelSettingsRepository(session_factory)
    store = HabitStore(habit_repo, settings_repo)

    calendar = Calendar(clock)
    monitor = RolloverMonitor(calendar)
    tracker = HabitTracker(store, monitor)

    tracker.load()
    # A day may have passed while the app was closed.
    startup_result = tracker.reconcile()

    scheduler = create_scheduler(
        tracker,
        interval_seconds=config.ROLLOVER_INTERVAL_SECONDS,
        auto_start=start_scheduler and config.SCHEDULER_ENABLED,
    )

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        habit_repo=habit_repo,
        settings_repo=settings_repo,
        store=store,
        calendar=calendar,
        monitor=monitor,
        tracker=tracker,
        scheduler=scheduler,
        startup_result=startup_result,
    )
