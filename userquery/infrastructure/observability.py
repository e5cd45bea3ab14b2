"""Structured Logging - JSON formatter and setup for pipeline observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (event, limit, offset, cache_key, error_code...) surfaced when present
    - JSON format in production, human-readable in development
    - setup_logging is idempotent: calling it twice installs one handler

Design Decisions:
    - JSONFormatter over third-party libs: stdlib logging already carries extras on the record
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "event", "limit", "offset", "user_filter", "options", "count",
    "duration_ms", "cache_key", "error", "error_code", "parameters",
)

_HANDLER_NAME = "userquery"


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure root logging for the pipeline. Returns the installed handler."""
    for existing in logging.root.handlers:
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
