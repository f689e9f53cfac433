"""Background polling for date rollover."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .logging_config import get_logger

if TYPE_CHECKING:
    from .services.tracker import HabitTracker

logger = get_logger("scheduler")


class RolloverScheduler:
    """Runs :meth:`HabitTracker.reconcile` on a fixed interval."""

    JOB_ID = "rollover_check"

    def __init__(self, tracker: HabitTracker, *, interval_seconds: int = 60):
        """Initialize the scheduler.

        Args:
            tracker: Tracker whose habits are reconciled on each tick
            interval_seconds: Seconds between rollover checks
        """
        self.tracker = tracker
        self.interval_seconds = interval_seconds
        self.scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    def start(self) -> None:
        """Start polling in a background thread."""
        if self.scheduler is not None:
            logger.warning("Scheduler already running")
            return

        self.scheduler = BackgroundScheduler()
        self.scheduler.add_job(
            func=self.run_rollover_check,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=self.JOB_ID,
            name="Date rollover check",
            replace_existing=True,
            # A late tick only delays a refresh; never stack them.
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        logger.info(
            "Scheduled rollover check every %s seconds",
            self.interval_seconds,
        )

    def stop(self) -> None:
        """Stop the background scheduler gracefully."""
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=True)
            self.scheduler = None
            logger.info("Background scheduler stopped")

    def run_rollover_check(self) -> None:
        """Job body; failures are logged so the next tick still runs."""
        try:
            result = self.tracker.reconcile()
        except Exception as exc:
            logger.error(f"Rollover check failed: {exc}", exc_info=True)
            return

        if result.changed:
            logger.info(
                "Date rollover handled",
                extra={"changed_ids": result.changed_ids},
            )


def create_scheduler(
    tracker: HabitTracker, *, interval_seconds: int = 60, auto_start: bool = False
) -> RolloverScheduler:
    """Create and optionally start a rollover scheduler.

    Args:
        tracker: Tracker to reconcile
        interval_seconds: Poll interval in seconds
        auto_start: Whether to start the scheduler immediately

    Returns:
        RolloverScheduler instance
    """
    scheduler = RolloverScheduler(tracker, interval_seconds=interval_seconds)
    if auto_start:
        scheduler.start()
    return scheduler
