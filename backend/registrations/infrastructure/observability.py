"""Structured Logging - JSON formatter, setup and timing for the registration API.

Invariants:
    - Every line carries timestamp (event time, UTC), level, logger, service and message
    - Portal extras (record_id, operation, path, error_code, ...) appear only when set
    - setup_logging installs exactly one portal handler, however often it is called

Design Decisions:
    - stdlib logging with a JSON formatter, no logging framework dependency
    - Timing is a context manager emitting duration_ms, so slow dataset writes and
      export renders show up in the same stream as everything else
"""

import logging
import json
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

SERVICE_NAME = "registration-portal-api"

_EXTRA_FIELDS = (
    "record_id", "operation", "path", "error_code", "record_count",
    "field", "export_format", "duration_ms",
)
_HANDLER_FLAG = "_registration_portal_handler"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": SERVICE_NAME,
            "message": record.getMessage(),
        }
        log.update({
            key: record.__dict__[key]
            for key in _EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Attach the portal handler to the root logger, replacing a previous one."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if getattr(h, _HANDLER_FLAG, False)]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    setattr(handler, _HANDLER_FLAG, True)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler


@contextmanager
def log_duration(logger: logging.Logger, message: str, **extra) -> Iterator[None]:
    """Log `message` at DEBUG with duration_ms once the block completes."""
    started = time.perf_counter()
    yield
    elapsed = round((time.perf_counter() - started) * 1000, 2)
    logger.debug(message, extra={**extra, "duration_ms": elapsed})
