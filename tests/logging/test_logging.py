"""Tests for centralized logging behavior and configuration."""

import logging
from io import StringIO

import pytest

from splfl.logging import (
    LOG_LEVEL_ENV,
    ProgressLogger,
    apply_env_log_level,
    disable_debug_logging,
    enable_debug_logging,
    export_log_level,
    get_logger,
    reset_logging,
    set_global_log_level,
    setup_root_logger,
)


@pytest.fixture(autouse=True)
def _reset_logging_each_test():
    """Reset logging state before and after each test to avoid cross-test bleed."""
    reset_logging()
    yield
    reset_logging()


def test_effective_levels_enable_disable():
    """INFO by default, DEBUG after enable, back to INFO after disable."""
    logger = get_logger("splfl.test")

    capture = StringIO()
    handler = logging.StreamHandler(capture)
    handler.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.addHandler(handler)

    logger.info("info-1")
    assert "info-1" in capture.getvalue()

    capture.seek(0)
    capture.truncate(0)
    logger.debug("debug-1")
    assert "debug-1" not in capture.getvalue()

    enable_debug_logging()
    logger.debug("debug-2")
    assert "debug-2" in capture.getvalue()

    capture.seek(0)
    capture.truncate(0)
    disable_debug_logging()
    logger.debug("debug-3")
    assert "debug-3" not in capture.getvalue()
    logger.removeHandler(handler)


def test_global_level_propagates_to_children_and_new_loggers():
    logger1 = get_logger("splfl.engine.one")
    logger2 = get_logger("splfl.engine.two")
    assert logger1.getEffectiveLevel() == logging.INFO
    assert logger2.getEffectiveLevel() == logging.INFO

    set_global_log_level(logging.WARNING)
    assert logger1.getEffectiveLevel() == logging.WARNING
    assert logger2.getEffectiveLevel() == logging.WARNING

    logger3 = get_logger("splfl.engine.three")
    assert logger3.getEffectiveLevel() == logging.WARNING


def test_setup_root_logger_idempotent_no_duplicate_handlers():
    capture = StringIO()
    handler = logging.StreamHandler(capture)
    setup_root_logger(level=logging.INFO, handler=handler)

    root_logger = logging.getLogger("splfl")
    assert len(root_logger.handlers) == 1

    setup_root_logger(level=logging.DEBUG)
    assert len(root_logger.handlers) == 1

    set_global_log_level(logging.ERROR)
    assert root_logger.level == logging.ERROR


def test_custom_format_string_applied():
    capture = StringIO()
    handler = logging.StreamHandler(capture)
    fmt = "LEVEL:%(levelname)s|NAME:%(name)s|MSG:%(message)s"
    setup_root_logger(level=logging.INFO, format_string=fmt, handler=handler)

    logger = get_logger("splfl.test.format")
    logger.info("hello")
    out = capture.getvalue()
    assert "LEVEL:INFO" in out
    assert "NAME:splfl.test.format" in out
    assert "MSG:hello" in out


def test_strategy_run_logs_start_and_completion(caplog, taxonomy_f2_m8):
    from splfl.engine import isolate

    setup_root_logger()
    with caplog.at_level(logging.INFO, logger="splfl"):
        isolate(taxonomy_f2_m8, "closed_form")
    messages = [r.getMessage() for r in caplog.records]
    assert any("Starting closed_form isolation for F=2 M=8" in m for m in messages)
    assert any(
        m.startswith("Completed closed_form isolation: 6 features") for m in messages
    )


def test_log_level_round_trips_through_environment(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "")
    assert apply_env_log_level() is None

    set_global_log_level(logging.WARNING)
    assert export_log_level() == "WARNING"

    set_global_log_level(logging.INFO)
    assert apply_env_log_level() == logging.WARNING
    assert logging.getLogger("splfl").level == logging.WARNING

    monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")
    assert apply_env_log_level() == logging.INFO


def test_progress_logger_reports_about_every_tenth(caplog):
    logger = get_logger("splfl.test.progress")
    progress = ProgressLogger(logger, "Search", 100, "IDs evaluated")
    with caplog.at_level(logging.INFO, logger="splfl"):
        for done in range(5, 101, 5):
            progress.update(done)
    messages = [r.getMessage() for r in caplog.records]
    assert messages[0] == "Search progress: 10/100 IDs evaluated"
    assert messages[-1] == "Search progress: 100/100 IDs evaluated"
    assert len(messages) == 10


def test_serial_exhaustive_search_logs_progress(caplog, taxonomy_f2_m8):
    from splfl.engine import isolate

    with caplog.at_level(logging.INFO, logger="splfl"):
        isolate(taxonomy_f2_m8, "exhaustive")
    messages = [r.getMessage() for r in caplog.records]
    assert "Serial search progress: 15/15 IDs evaluated" in messages
