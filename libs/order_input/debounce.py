"""Last-write-wins debouncing for asyncio callbacks.

Used for quote refreshes (every keystroke changes the quote key) and for the
percentage slider (every drag step changes the amount). Scheduling again
before the delay expires cancels the previous attempt, so only the latest
request runs.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

DebouncedCallback = Callable[[], Awaitable[None]]


class Debouncer:
    """Run the most recently scheduled callback once ``delay`` has elapsed."""

    def __init__(self, delay: float, *, name: str = "debounce") -> None:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self.delay = delay
        self.name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        """True while a scheduled callback has not finished."""
        return self._task is not None and not self._task.done()

    def schedule(self, callback: DebouncedCallback) -> asyncio.Task[None]:
        """Replace any pending callback with ``callback``.

        Must be called from a running event loop.
        """
        self.cancel()
        task = asyncio.create_task(self._run_after_delay(callback), name=self.name)
        task.add_done_callback(self._on_done)
        self._task = task
        return task

    def cancel(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Wait until no callback is pending, following any rescheduling."""
        while self._task is not None:
            task = self._task
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
            if self._task is task:
                self._task = None

    async def _run_after_delay(self, callback: DebouncedCallback) -> None:
        await asyncio.sleep(self.delay)
        await callback()

    def _on_done(self, task: asyncio.Task[None]) -> None:
        if self._task is task:
            self._task = None
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Debounced callback failed",
                extra={"debouncer": self.name, "error": str(exc)},
                exc_info=exc,
            )


__all__ = ["DebouncedCallback", "Debouncer"]
