"""Structured Logging — one JSON line per record for the article API and upload gateway.

Invariants:
    - Every line carries timestamp, level, logger name and message
    - Article and upload context (article_id, error_code, category, path, upload_bytes,
      storage, status_code) copied from `extra` only when set; unknown extras are dropped
    - log_format="text" switches to a plain formatter for local runs

Design Decisions:
    - stdlib logging with a custom Formatter, no logging dependency
    - setup_logging called once from the lifespan, after settings load
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_KEYS = (
    "article_id", "error_code", "category", "path", "upload_bytes", "storage", "status_code",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
