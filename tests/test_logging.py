"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from habitstreak.config import BaseConfig
from habitstreak.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITSTREAK_DATA_DIR", str(tmp_path))
    return BaseConfig()


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("habitstreak")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


def _record(msg="Test message", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        name="habitstreak.test",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter():
    """JSONFormatter emits the core fields."""
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "habitstreak.test"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(JSONFormatter().format(_record(level=logging.ERROR, exc_info=exc_info)))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_json_formatter_includes_extra_fields():
    record = _record(habit_id=7, changed_ids=[1, 2])
    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"habit_id": 7, "changed_ids": [1, 2]}


def test_setup_logging(config):
    logger = setup_logging(config)

    assert logger.name == "habitstreak"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2
    assert (config.DATA_DIR / "logs" / "habitstreak.log").exists()


def test_setup_logging_is_repeatable(config):
    setup_logging(config)
    logger = setup_logging(config)
    assert len(logger.handlers) == 2


def test_console_level_follows_dev_mode(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITSTREAK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HABITSTREAK_DEV_MODE", "false")
    logger = setup_logging(BaseConfig())

    console = [h for h in logger.handlers if type(h) is logging.StreamHandler]
    assert console[0].level == logging.WARNING


def test_file_handler_writes_json(config):
    logger = setup_logging(config)
    get_logger("rollover").info("Reconciled", extra={"habit_count": 3})
    for handler in logger.handlers:
        handler.flush()

    lines = (config.DATA_DIR / "logs" / "habitstreak.log").read_text(encoding="utf-8").splitlines()
    entries = [json.loads(line) for line in lines]
    reconciled = [e for e in entries if e["message"] == "Reconciled"]
    assert reconciled[0]["logger"] == "habitstreak.rollover"
    assert reconciled[0]["extra"] == {"habit_count": 3}


def test_get_logger():
    assert get_logger("tracker").name == "habitstreak.tracker"
    assert get_logger("habitstreak.store").name == "habitstreak.store"


def test_modules_log_under_package_logger():
    from habitstreak import context, scheduler
    from habitstreak.infra import store
    from habitstreak.services import habits, rollover, tracker

    names = {m.logger.name for m in (context, scheduler, store, habits, rollover, tracker)}
    assert names == {
        "habitstreak.context",
        "habitstreak.scheduler",
        "habitstreak.store",
        "habitstreak.streaks",
        "habitstreak.rollover",
        "habitstreak.tracker",
    }
