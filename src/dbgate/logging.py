"""
dbgate Structured Logging

Provides a configured logger for dbgate using stdlib logging
with structured context.

Usage:
    from dbgate.logging import get_logger

    logger = get_logger("dbgate.gateway")
    logger.info("Statement classified", extra={"resource": "analytics"})

When a DbGateError is logged (``exc_info`` or ``extra={"details": ...}``)
its ``details`` dict is folded into the record, so the resource name and
driver message reach the log line. Statement text (the ``sql`` detail) is
only kept on DEBUG records; SQL can carry literals that should not end
up in routine logs.

For production, configure with JSON output:
    from dbgate.logging import configure_logging
    configure_logging(json_output=True, level="INFO")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from dbgate.exceptions import DbGateError

_CONTEXT_KEYS = ("resource", "statement_kind", "tool_name", "action", "duration_ms")
_SQL_DETAIL_KEYS = ("sql",)


def _error_details(record: logging.LogRecord) -> dict[str, Any]:
    details: dict[str, Any] = {}
    if record.exc_info and isinstance(record.exc_info[1], DbGateError):
        details.update(record.exc_info[1].details)
        details["error"] = type(record.exc_info[1]).__name__
    extra = getattr(record, "details", None)
    if isinstance(extra, dict):
        details.update(extra)
    if record.levelno > logging.DEBUG:
        for key in _SQL_DETAIL_KEYS:
            details.pop(key, None)
    return details


class DbGateFormatter(logging.Formatter):
    """Structured log formatter for dbgate.

    Outputs either human-readable or JSON format depending on configuration.
    Context keys from ``extra`` win over the same keys in error details.
    """

    def __init__(self, json_output: bool = False):
        super().__init__()
        self._json_output = json_output

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = _error_details(record)
        for key in _CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                context[key] = value

        if self._json_output:
            log_data.update(context)
            if record.exc_info:
                log_data["exception"] = self.formatException(record.exc_info)
            return json.dumps(log_data, default=str)

        line = f"[{log_data['timestamp']}] {record.levelname:8s} {record.name}: {log_data['message']}"
        if context:
            line += " | " + " ".join(f"{k}={v}" for k, v in context.items())
        # Expected gate outcomes are logged without a traceback
        if record.exc_info and not isinstance(record.exc_info[1], DbGateError):
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
) -> None:
    """Configure dbgate logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: If True, output JSON format (for log shipping).
    """
    root_logger = logging.getLogger("dbgate")
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(DbGateFormatter(json_output=json_output))
    root_logger.addHandler(handler)

    root_logger.propagate = False


def get_logger(name: str = "dbgate") -> logging.Logger:
    """Get a dbgate logger instance.

    Args:
        name: Logger name (usually module path like "dbgate.gateway").
    """
    return logging.getLogger(name)


# Auto-configure with sensible defaults on import
configure_logging()
