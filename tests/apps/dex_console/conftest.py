"""Shared fixtures for dex_console tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest

from apps.dex_console.config import Settings, get_settings
from apps.dex_console.core import retry
from apps.dex_console.core.client import AsyncDexClient


@pytest.fixture()
def no_retry_sleep(monkeypatch: pytest.MonkeyPatch) -> None:
    async def _sleep(_: float) -> None:
        return None

    monkeypatch.setattr(retry.asyncio, "sleep", _sleep)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        gateway_url="http://testserver",
        quote_debounce_seconds=0,
        slider_debounce_seconds=0,
    )


@pytest.fixture()
async def dex_client(
    settings: Settings, no_retry_sleep: None
) -> AsyncIterator[AsyncDexClient]:
    client = AsyncDexClient(settings)
    await client.startup()
    try:
        yield client
    finally:
        await client.shutdown()
