"""Structured JSON logging with per-session correlation.

Usage:
    # At application startup
    from libs.common.logging import configure_logging
    configure_logging(service_name="dex_console", log_level="INFO")

    # Around work done for one order input session
    from libs.common.logging import SessionContext
    with SessionContext(session.session_id):
        await session.submit()
"""

from libs.common.logging.config import (
    SessionIDFilter,
    configure_logging,
    log_with_context,
)
from libs.common.logging.context import (
    SESSION_ID_HEADER,
    SessionContext,
    clear_session_id,
    generate_session_id,
    get_session_id,
    set_session_id,
)
from libs.common.logging.formatter import JSONFormatter

__all__ = [
    "configure_logging",
    "log_with_context",
    "SessionIDFilter",
    "generate_session_id",
    "get_session_id",
    "set_session_id",
    "clear_session_id",
    "SessionContext",
    "SESSION_ID_HEADER",
    "JSONFormatter",
]
