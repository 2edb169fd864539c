from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from apps.dex_console import main
from apps.dex_console.components.order_input_session import OrderInputSession
from apps.dex_console.config import Settings
from apps.dex_console.core.client import AsyncDexClient
from libs.order_input.models import TradingPair


@pytest.fixture(autouse=True)
def _fresh_client(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    monkeypatch.setattr(AsyncDexClient, "_instance", None)
    configure = MagicMock()
    monkeypatch.setattr(main, "configure_logging", configure)
    return configure


@pytest.mark.asyncio()
async def test_startup_configures_logging_and_client(
    settings: Settings, _fresh_client: MagicMock
) -> None:
    client = await main.startup(settings)
    try:
        assert client is AsyncDexClient.get()
        assert client.settings is settings
        assert client._http_client is not None
        _fresh_client.assert_called_once_with(
            service_name="dex_console", log_level="INFO"
        )
    finally:
        await main.shutdown()

    assert client._http_client is None


@pytest.mark.asyncio()
async def test_create_session_uses_shared_client(
    settings: Settings, pair: TradingPair
) -> None:
    client = await main.startup(settings)
    try:
        session = main.create_session(pair, settings=settings)

        assert isinstance(session, OrderInputSession)
        assert session.state.pair_address == pair.address
        assert session.quotes._fetcher is client
        await session.close()
    finally:
        await main.shutdown()
