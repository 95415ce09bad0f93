"""Structured Logging — JSON or text output on the root logger.

Invariants:
    - Every JSON line has timestamp, level, logger and message
    - Known extra keys (record_id, error_code, path, method, ...) are copied when set
    - setup_logging is idempotent: calling it again replaces its own handler
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_KEYS = (
    "record_id", "error_code", "operation", "path", "method",
    "status_code", "database", "environment",
)

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            key: record.__dict__[key]
            for key in EXTRA_KEYS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


_handler: logging.Handler | None = None


def _formatter(fmt: str) -> logging.Formatter:
    return JSONFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT)


def setup_logging(level: str = "INFO", fmt: str = "text") -> logging.Handler:
    """Install the application handler on the root logger."""
    global _handler
    if _handler is not None:
        logging.root.removeHandler(_handler)

    _handler = logging.StreamHandler()
    _handler.setFormatter(_formatter(fmt.lower()))
    logging.root.addHandler(_handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return _handler
