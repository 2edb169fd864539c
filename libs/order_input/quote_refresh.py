"""Quote refresh controller.

Reacts to ``Effect.REFRESH_QUOTE`` transitions with a debounced quote fetch.
The quote key is captured before the fetch is awaited and compared again when
the result arrives; a result for a superseded key is dropped instead of being
merged.

The debouncer only owns the quiescence delay. Once it fires, the fetch runs in
its own task (tracked in ``_in_flight``), so a later order change cancels the
next delay but never an in-flight fetch; the superseded result is ignored on
arrival.
"""

from __future__ import annotations

import asyncio
import logging
import time

from libs.order_input.collaborators import QuoteFetcher, quote_request_from_state
from libs.order_input.debounce import Debouncer
from libs.order_input.metrics import record_quote_outcome
from libs.order_input.models import QuoteResult, Transition
from libs.order_input.store import OrderInputStore
from libs.order_input.validation import order_is_well_formed

logger = logging.getLogger(__name__)

DEFAULT_QUOTE_DEBOUNCE_SECONDS = 0.3


class QuoteRefreshController:
    """Keep the store's quote in step with the order shape."""

    def __init__(
        self,
        store: OrderInputStore,
        fetcher: QuoteFetcher,
        *,
        debounce_seconds: float = DEFAULT_QUOTE_DEBOUNCE_SECONDS,
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._debouncer = Debouncer(debounce_seconds, name="quote_refresh")
        self._in_flight: set[asyncio.Task[bool]] = set()

    @property
    def pending(self) -> bool:
        """True while a refresh is scheduled or a fetch is in flight."""
        return self._debouncer.pending or bool(self._in_flight)

    def on_transition(self, transition: Transition) -> None:
        """Store listener: schedule a refresh when the transition asks for one."""
        if transition.refresh_quote:
            self.schedule()

    def schedule(self) -> None:
        self._debouncer.schedule(self._start_fetch)

    def cancel(self) -> None:
        """Drop the scheduled refresh; fetches already in flight keep running."""
        self._debouncer.cancel()

    def close(self) -> None:
        """Drop the scheduled refresh and abandon in-flight fetches (teardown only)."""
        self._debouncer.cancel()
        for task in list(self._in_flight):
            task.cancel()
        self._in_flight.clear()

    async def wait(self) -> None:
        """Wait until nothing is scheduled and every in-flight fetch has settled."""
        while self._debouncer.pending or self._in_flight:
            await self._debouncer.wait()
            if self._in_flight:
                await asyncio.wait(set(self._in_flight))

    async def _start_fetch(self) -> None:
        task = asyncio.create_task(self.refresh_now(), name="quote_fetch")
        self._in_flight.add(task)
        task.add_done_callback(self._on_fetch_done)

    def _on_fetch_done(self, task: asyncio.Task[bool]) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Quote refresh failed",
                extra={"error": str(exc)},
                exc_info=exc,
            )

    async def refresh_now(self) -> bool:
        """Fetch a quote for the current order shape and merge it if still current.

        Returns:
            True if the result was applied to the store.
        """
        state = self._store.state
        if not order_is_well_formed(state):
            return False

        key = state.quote_key
        request = quote_request_from_state(state)
        started = time.perf_counter()
        try:
            result = await self._fetcher.fetch_quote(request)
        except Exception as exc:
            logger.warning(
                "Quote fetch failed",
                extra={"pair_address": request.pair_address, "error": str(exc)},
                exc_info=True,
            )
            result = QuoteResult(error=str(exc) or type(exc).__name__)
        duration = time.perf_counter() - started

        # State may have moved on while the fetch was in flight
        if not self._store.receive_quote(key, result):
            record_quote_outcome("stale", duration)
            logger.debug(
                "Dropping stale quote",
                extra={"pair_address": request.pair_address, "side": request.side.value},
            )
            return False

        if result.error is not None:
            record_quote_outcome("error", duration)
            logger.warning(
                "Quote returned error",
                extra={"pair_address": request.pair_address, "error": result.error},
            )
        else:
            record_quote_outcome("applied", duration)
        return True


__all__ = ["DEFAULT_QUOTE_DEBOUNCE_SECONDS", "QuoteRefreshController"]
