"""
Structured logging: JSON for log aggregators, readable lines for development.
Configured from env (LOG_LEVEL, LOG_JSON). Credentials never reach the output.
"""

import json
import logging
import sys
from typing import Any

from core.config import get_settings

_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}

_REDACTED_KEYS = ("password", "token", "authorization", "secret")


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger with app-level config applied.
    Use logger.info("event", extra={"key": "value"}) for structured fields.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    settings = get_settings()
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logger.level)
    if settings.LOG_JSON:
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(_KeyValueFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def structured_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Return the fields passed via ``extra``, with sensitive values masked."""
    fields: dict[str, Any] = {}
    for key, value in record.__dict__.items():
        if key in _RECORD_ATTRS or key.startswith("_"):
            continue
        if any(marker in key.lower() for marker in _REDACTED_KEYS):
            value = "(redacted)"
        fields[key] = value
    return fields


class _KeyValueFormatter(logging.Formatter):
    """Readable dev format with extras appended as key=value pairs."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = structured_fields(record)
        if fields:
            line += " | " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


class _JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON for CloudWatch, Datadog, etc."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        log_obj.update(structured_fields(record))
        return json.dumps(log_obj, default=str)
