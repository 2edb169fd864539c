"""Logging setup shared by the order input engine and the console app.

Example:
    >>> from libs.common.logging.config import configure_logging
    >>> logger = configure_logging(service_name="dex_console", log_level="INFO")
    >>> logger.info("Console started", extra={"context": {"gateway": "http://..."}})
"""

import logging
import sys

from libs.common.logging.context import get_session_id
from libs.common.logging.formatter import JSONFormatter


class SessionIDFilter(logging.Filter):
    """Copy the context-bound session ID onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = get_session_id()
        return True


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    include_context: bool = True,
) -> logging.Logger:
    """Install a single JSON stdout handler on the root logger.

    Existing root handlers are removed so repeated calls do not duplicate
    output.

    Args:
        service_name: Value of the "service" field on every record
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        include_context: Whether to emit the "context" field

    Returns:
        The configured root logger

    Raises:
        ValueError: If log_level is not a known level name
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter(service_name=service_name, include_context=include_context))
    handler.addFilter(SessionIDFilter())
    root_logger.addHandler(handler)

    return root_logger


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context_fields: object,
) -> None:
    """Log ``message`` with ``context_fields`` under the "context" key.

    Example:
        >>> log_with_context(logger, "WARNING", "Quote failed", pair_address="...", error="timeout")
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra={"context": context_fields})
