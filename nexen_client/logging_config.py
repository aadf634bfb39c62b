"""Structured JSON logging configuration.

Configures Python logging to emit JSON-formatted log entries with required
fields: request_id, level, timestamp. Request and cache fields are added
contextually (method, path, status_code, duration_ms for HTTP calls;
query_key and mutation for cache activity).

SECURITY: Never logs passwords, session tokens or Authorization headers.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone

# Patterns that should be redacted from log output
_SENSITIVE_PATTERNS = re.compile(
    r"(password|token|secret|authorization|api.key)[\s\"']*[=:]\s*(?:bearer\s+)?\S+"
    r"|bearer\s+[A-Za-z0-9\-._~+/|]+=*",
    re.IGNORECASE,
)

_CONTEXT_FIELDS = ("method", "path", "status_code", "duration_ms", "query_key", "mutation")


class JsonFormatter(logging.Formatter):
    """Formats log records as JSON with structured fields.

    Each entry contains at minimum: request_id, level, timestamp, message.
    Additional fields can be attached via the ``extra`` dict on log calls.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": self._sanitize(record.getMessage()),
            "request_id": getattr(record, "request_id", None),
        }

        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                value = getattr(record, field)
                # Keys are tuples; render them the way they are written in code.
                entry[field] = repr(value) if isinstance(value, tuple) else value

        if hasattr(record, "error_reason"):
            entry["error_reason"] = self._sanitize(str(getattr(record, "error_reason")))

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self._sanitize(self.formatException(record.exc_info))

        return json.dumps(entry, default=str)

    @staticmethod
    def _sanitize(text: str) -> str:
        """Remove sensitive values from log text."""
        return _SENSITIVE_PATTERNS.sub("[REDACTED]", text)


def configure_logging(level: str = "INFO") -> None:
    """Configure the ``nexen_client`` logger with JSON formatting.

    Only the library's own logger is touched so that embedding applications
    keep control of the root logger.

    Parameters
    ----------
    level:
        Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    logger = logging.getLogger("nexen_client")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
