"""Tests for structured console logging."""

from __future__ import annotations

import json
import logging

from reminder_weather.log_setup import JsonConsoleFormatter, setup_logger


def test_json_formatter_emits_one_object_per_record() -> None:
    record = logging.LogRecord(
        name="reminder_weather.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Cached forecasts for %d areas",
        args=(47,),
        exc_info=None,
    )
    event = json.loads(JsonConsoleFormatter().format(record))
    assert event["level"] == "WARNING"
    assert event["logger"] == "reminder_weather.test"
    assert event["message"] == "Cached forecasts for 47 areas"
    assert "exception" not in event


def test_setup_logger_is_idempotent() -> None:
    first = setup_logger("reminder_weather.test_idempotent")
    second = setup_logger("reminder_weather.test_idempotent")
    assert first is second
    assert len(second.handlers) == 1
    assert second.propagate is False


def test_json_formatter_includes_refresh_context_fields() -> None:
    record = logging.LogRecord(
        name="reminder_weather",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg="Forecast refresh failed",
        args=(),
        exc_info=None,
    )
    record.error_kind = "unreachable"
    record.area_count = 12
    event = json.loads(JsonConsoleFormatter().format(record))
    assert event["error_kind"] == "unreachable"
    assert event["area_count"] == 12
    assert "area" not in event
