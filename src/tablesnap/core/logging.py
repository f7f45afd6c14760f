"""
Logging utilities for the table snapshot tool.

Log records may carry a `table` and a `run_id` via the `extra` parameter;
both formatters render them when present.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

CONTEXT_FIELDS = ("table", "run_id")


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs JSON-structured log lines.

    Each log line includes:
    - Standard log fields (timestamp, level, message, logger)
    - Context fields if present (table, run_id)
    """

    def __init__(self, include_timestamp: bool = True):
        super().__init__()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_entry = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_timestamp:
            log_entry["timestamp"] = datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat()

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Formatter that outputs human-readable log lines with context.

    Format: TIMESTAMP - LOGGER - LEVEL - MESSAGE [table=X run_id=Y]
    """

    def __init__(self, include_timestamp: bool = True):
        if include_timestamp:
            fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            fmt = "%(name)s - %(levelname)s - %(message)s"
        super().__init__(fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with context suffix."""
        base = super().format(record)

        context_parts = []
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                context_parts.append(f"{field}={value}")

        if context_parts:
            return f"{base} [{' '.join(context_parts)}]"
        return base


def configure_logging(
    level: int = logging.INFO,
    structured: bool = False,
    include_timestamp: bool = True,
    stream=None,
) -> logging.Logger:
    """
    Configure logging for the tablesnap package.

    Installs a single stream handler on the package logger. Calling this
    again replaces the handler instead of adding a duplicate.

    Args:
        level: Logging level (default: INFO)
        structured: If True, output JSON lines; if False, human-readable
        include_timestamp: Whether to include timestamps
        stream: Output stream (default: stdout)

    Returns:
        The configured package logger
    """
    package_logger = logging.getLogger("tablesnap")
    package_logger.setLevel(level)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    if structured:
        handler.setFormatter(StructuredFormatter(include_timestamp=include_timestamp))
    else:
        handler.setFormatter(HumanReadableFormatter(include_timestamp=include_timestamp))

    package_logger.addHandler(handler)
    return package_logger


def parse_level(name: Optional[str], default: int = logging.INFO) -> int:
    """Translate a level name such as 'debug' into a logging level."""
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default
