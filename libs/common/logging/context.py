"""Session ID propagation for order input logs.

Every order input session (one trading pair selected in one browser tab) gets
a session ID. It is stored in a context variable so that log records emitted
from quote refresh tasks, debounced slider commits and submissions can all be
grouped by the session that caused them, even though they run in separate
asyncio tasks (tasks copy the context they were created in).

Example:
    >>> from libs.common.logging.context import SessionContext, get_session_id
    >>> with SessionContext("tab-42"):
    ...     get_session_id()
    'tab-42'
"""

import contextvars
import uuid
from types import TracebackType

_session_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "order_input_session_id", default=None
)

# Header used when the session ID is forwarded to the DEX gateway
SESSION_ID_HEADER = "X-Session-ID"


def generate_session_id() -> str:
    """Return a new random session ID (UUID4 hex, 32 chars)."""
    return uuid.uuid4().hex


def get_session_id() -> str | None:
    """Return the session ID bound to the current context, if any."""
    return _session_id_var.get()


def set_session_id(session_id: str) -> None:
    """Bind a session ID to the current context.

    Raises:
        ValueError: If session_id is empty
    """
    if not session_id:
        raise ValueError("Session ID cannot be empty")
    _session_id_var.set(session_id)


def clear_session_id() -> None:
    """Unbind the session ID from the current context."""
    _session_id_var.set(None)


class SessionContext:
    """Context manager that binds a session ID for the enclosed block.

    The previously bound ID (or none) is restored on exit, so contexts nest.

    Args:
        session_id: ID to bind. A new one is generated when omitted.
    """

    def __init__(self, session_id: str | None = None) -> None:
        self.session_id = session_id or generate_session_id()
        self._token: contextvars.Token[str | None] | None = None

    def __enter__(self) -> str:
        self._token = _session_id_var.set(self.session_id)
        return self.session_id

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._token is not None:
            _session_id_var.reset(self._token)
            self._token = None
