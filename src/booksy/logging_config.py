"""Logging setup for booksy.

Modules log through ``logging.getLogger(__name__)``; this installs a single
handler on the ``booksy`` package logger.

Usage:
    from booksy.logging_config import setup_logging
    setup_logging("INFO")
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

ROOT_LOGGER = "booksy"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


class TextFormatter(logging.Formatter):
    """Plain formatter: ``2026-01-26 19:45:00 - INFO - booksy.reader - Message``."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging(
    level: str = "WARNING",
    fmt: str = "text",
    stream: Optional[object] = None,
) -> logging.Logger:
    """Configure the booksy package logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...)
        fmt: "text" or "json"
        stream: Output stream (default: stderr, so CLI output stays clean)

    Returns:
        The configured ``booksy`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    # Clear any existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    return logger
