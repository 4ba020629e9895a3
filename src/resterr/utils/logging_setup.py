"""Logging configuration for resterr.

The dispatcher logs through the standard library with key/value attributes
passed as ``extra``. The formatters here make those attributes visible:
TextFormatter appends them as ``key=value`` pairs, JsonFormatter emits one
JSON object per record.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, IO, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord has; anything else came in through ``extra``.
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}


def record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    """Return the ``extra`` attributes attached to a record."""
    return {k: v for k, v in vars(record).items() if k not in _RESERVED}


class TextFormatter(logging.Formatter):
    """Standard text lines followed by the record's extra attributes."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        if not extras:
            return line
        # keep tracebacks last
        head, sep, tail = line.partition("\n")
        pairs = " ".join(f"{k}={v}" for k, v in extras.items())
        return f"{head} {pairs}{sep}{tail}"


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(record_extras(record))
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """Install a single stream handler on the root logger.

    Args:
        level: The log level name (DEBUG, INFO, WARNING, ERROR)
        json_format: Emit JSON lines instead of text
        stream: Output stream, stdout by default

    Returns:
        The installed handler
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(TextFormatter(LOG_FORMAT, LOG_DATE_FORMAT))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )
    return handler
