"""
Logging Configuration

Plain text lines in development, one JSON object per line elsewhere.
Anything passed through `extra=` (user ids, security event details)
ends up as top-level keys in the JSON output.
"""
import logging
import sys
from typing import Any, Dict
import json
from datetime import datetime, timezone

# Attributes every LogRecord has; anything else came in through extra=
_RECORD_ATTRS = set(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {"message", "asctime"}

QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "passlib")


class JSONFormatter(logging.Formatter):
    """Serialize a record and its extras as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        payload.update(
            (key, value) for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def setup_logging(log_level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure the root logger.

    NOTE: Replaces existing root handlers, so calling it twice is harmless.
    """
    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(log_level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_security_event(event_type: str, details: Dict[str, Any], logger: logging.Logger) -> None:
    """
    Record an authentication or authorization event at WARNING.

    Event types in use: failed_login, failed_password_change,
    password_reset_requested, password_reset_completed and forbidden_action.
    """
    summary = " ".join(f"{key}={value}" for key, value in details.items())
    logger.warning(
        f"SECURITY EVENT: {event_type} {summary}".rstrip(),
        extra={"security_event": True, "event_type": event_type, **details},
    )
