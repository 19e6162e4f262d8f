"""Structured Logging — JSON formatter and setup for client observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (method, path, attempt, idempotency_key, ...) surfaced when present
    - API keys are never logged; only request metadata is

Design Decisions:
    - JSONFormatter on stdlib logging: no extra dependency for the embedding app
    - setup_logging is opt-in (StripeClient(configure_logging=True) or a direct
      call); a library never configures the root logger on import
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "method", "path", "attempt", "idempotency_key", "status_code",
    "error_code", "category", "delay_ms", "retries",
)

_HANDLER_MARK = "_stripe_typed_handler"


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Attach one handler to the `stripe_typed` logger.

    Calling it again replaces the handler from the previous call.
    """
    logger = logging.getLogger("stripe_typed")
    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_MARK, False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler()
    setattr(handler, _HANDLER_MARK, True)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
