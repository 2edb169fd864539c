from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

import pytest

from libs.order_input.debounce import Debouncer


@pytest.mark.asyncio()
async def test_only_last_scheduled_callback_runs() -> None:
    debouncer = Debouncer(0.01)
    calls: list[str] = []

    def _make(label: str) -> Callable[[], Awaitable[None]]:
        async def _callback() -> None:
            calls.append(label)

        return _callback

    debouncer.schedule(_make("a"))
    debouncer.schedule(_make("b"))
    debouncer.schedule(_make("c"))
    assert debouncer.pending is True

    await debouncer.wait()

    assert calls == ["c"]
    assert debouncer.pending is False


@pytest.mark.asyncio()
async def test_cancel_drops_pending_callback() -> None:
    debouncer = Debouncer(0.01)
    calls: list[int] = []

    async def _callback() -> None:
        calls.append(1)

    debouncer.schedule(_callback)
    debouncer.cancel()
    await asyncio.sleep(0.03)

    assert calls == []
    assert debouncer.pending is False


@pytest.mark.asyncio()
async def test_wait_follows_rescheduling() -> None:
    debouncer = Debouncer(0.02)
    calls: list[str] = []

    async def _first() -> None:
        calls.append("first")

    async def _second() -> None:
        calls.append("second")

    debouncer.schedule(_first)
    waiter = asyncio.create_task(debouncer.wait())
    await asyncio.sleep(0)
    debouncer.schedule(_second)

    await waiter

    assert calls == ["second"]


@pytest.mark.asyncio()
async def test_zero_delay_keeps_last_write_wins() -> None:
    debouncer = Debouncer(0)
    calls: list[int] = []

    for value in range(5):

        async def _callback(value: int = value) -> None:
            calls.append(value)

        debouncer.schedule(_callback)

    await debouncer.wait()

    assert calls == [4]


@pytest.mark.asyncio()
async def test_callback_failure_is_logged_and_raised_from_wait(
    caplog: pytest.LogCaptureFixture,
) -> None:
    debouncer = Debouncer(0, name="quote_refresh")

    async def _boom() -> None:
        raise RuntimeError("boom")

    debouncer.schedule(_boom)

    with caplog.at_level(logging.ERROR, logger="libs.order_input.debounce"):
        with pytest.raises(RuntimeError, match="boom"):
            await debouncer.wait()

    assert "Debounced callback failed" in caplog.text


@pytest.mark.asyncio()
async def test_wait_without_pending_returns() -> None:
    await Debouncer(0.5).wait()


def test_negative_delay_rejected() -> None:
    with pytest.raises(ValueError, match="delay"):
        Debouncer(-0.1)
