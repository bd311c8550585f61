"""JSON console logging for the weather refresh loop and CLI."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

# Structured fields callers may attach with ``extra=`` on refresh/lookup logs.
CONTEXT_FIELDS: tuple[str, ...] = ("area", "area_count", "error_kind", "observed_at")


class JsonConsoleFormatter(logging.Formatter):
    """One JSON object per record, carrying any refresh/lookup context fields."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                event[field] = value
        if record.exc_info:
            event["exception"] = self.formatException(record.exc_info)
        return json.dumps(event, default=str, ensure_ascii=False)


def setup_logger(name: str = "reminder_weather", level: int | str = logging.INFO) -> logging.Logger:
    """Configure the service logger once; later calls return it unchanged."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(JsonConsoleFormatter())
    logger.addHandler(handler)
    return logger
