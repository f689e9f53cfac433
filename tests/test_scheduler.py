"""Tests for the background rollover scheduler."""

from __future__ import annotations

import logging

import pytest
from apscheduler.triggers.interval import IntervalTrigger

from habitstreak.scheduler import RolloverScheduler, create_scheduler
from habitstreak.services.tracker import HabitTracker


@pytest.fixture
def memory_tracker(monitor):
    tracker = HabitTracker(monitor=monitor)
    tracker.load()
    return tracker


def test_start_registers_interval_job(memory_tracker):
    scheduler = RolloverScheduler(memory_tracker, interval_seconds=3600)
    scheduler.start()
    try:
        assert scheduler.running
        job = scheduler.scheduler.get_job(RolloverScheduler.JOB_ID)
        assert isinstance(job.trigger, IntervalTrigger)
        assert job.trigger.interval.total_seconds() == 3600
        assert job.max_instances == 1
        assert job.coalesce is True
    finally:
        scheduler.stop()

    assert not scheduler.running
    assert scheduler.scheduler is None


def test_double_start_is_ignored(memory_tracker, caplog):
    scheduler = RolloverScheduler(memory_tracker, interval_seconds=3600)
    scheduler.start()
    first = scheduler.scheduler
    try:
        with caplog.at_level(logging.WARNING, logger="habitstreak.scheduler"):
            scheduler.start()
        assert scheduler.scheduler is first
        assert "Scheduler already running" in caplog.text
    finally:
        scheduler.stop()


def test_stop_without_start_is_safe(memory_tracker):
    RolloverScheduler(memory_tracker).stop()


def test_run_rollover_check_reconciles(memory_tracker, clock):
    memory_tracker.toggle_check_in(memory_tracker.add_habit("Read").id)
    scheduler = create_scheduler(memory_tracker, interval_seconds=60)
    assert not scheduler.running

    clock.advance()
    scheduler.run_rollover_check()

    assert memory_tracker.habits()[0].current_streak == 0
    assert memory_tracker.state.last_reconciled_date == clock.today


def test_run_rollover_check_logs_failures(caplog):
    class ExplodingTracker:
        def reconcile(self):
            raise RuntimeError("clock went backwards")

    scheduler = RolloverScheduler(ExplodingTracker())
    with caplog.at_level(logging.ERROR, logger="habitstreak.scheduler"):
        scheduler.run_rollover_check()

    assert "Rollover check failed: clock went backwards" in caplog.text


def test_create_scheduler_auto_start(memory_tracker):
    scheduler = create_scheduler(memory_tracker, interval_seconds=3600, auto_start=True)
    try:
        assert scheduler.running
    finally:
        scheduler.stop()
