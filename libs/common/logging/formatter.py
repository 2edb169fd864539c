"""JSON log formatter for structured logging.

Example log output:
    {
        "timestamp": "2025-10-21T10:30:00.000Z",
        "level": "DEBUG",
        "service": "dex_console",
        "logger": "libs.order_input.quote_refresh",
        "session_id": "5f0c0d4e9c7b4a4e8f0e2b9b3c1d2a10",
        "message": "Dropping stale quote",
        "context": {"pair_address": "component_rdx1...", "side": "BUY"}
    }
"""

import json
import logging
import traceback
from datetime import UTC, datetime
from typing import Any

# LogRecord attributes that are never copied into "context"
_RESERVED_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "context",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "session_id",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Context comes from ``extra={"context": {...}}`` when present; otherwise
    any non-standard attributes passed through ``extra`` are collected.

    Attributes:
        service_name: Name of the emitting service
        include_context: Whether to include the context dict
    """

    def __init__(
        self, service_name: str, include_context: bool = True, *args: Any, **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "session_id": getattr(record, "session_id", None),
            "message": record.getMessage(),
        }

        if self.include_context:
            context = self._extract_context(record)
            if context:
                entry["context"] = context

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
            }

        return json.dumps(entry, default=str)

    def _format_timestamp(self, created: float) -> str:
        """ISO 8601 in UTC with millisecond precision and a Z suffix."""
        dt = datetime.fromtimestamp(created, tz=UTC)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    def _extract_context(self, record: logging.LogRecord) -> dict[str, Any] | None:
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            return dict(context) or None

        extra = {
            key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS
        }
        return extra or None
