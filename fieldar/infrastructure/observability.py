"""Structured Logging - JSON formatter and setup for the machine store.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Store fields (machine_id, error_code, operation, path, file_name) surfaced
      when present; FieldARError.log_extra() produces exactly these keys
    - Timestamps come from the record, not from format time
    - setup_logging is idempotent: calling it again replaces its own handler

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - "file_name", not "filename": LogRecord already owns `filename` (the
      source file of the log call) and logging refuses extras that collide
    - setup_logging called once on startup via lifespan; tests and reloads may
      run the lifespan more than once, so the previous handler is swapped out
"""

import logging
import json
from datetime import datetime, timezone

STORE_FIELDS = ("machine_id", "error_code", "operation", "path", "file_name")

_HANDLER_NAME = "fieldar"


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update(
            (key, record.__dict__[key]) for key in STORE_FIELDS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s [%(machine_id)s] - %(message)s",
            defaults={"machine_id": "-"},
        ))
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
