"""Entry points for hosting the DEX console order input.

The presentation layer calls ``startup()`` once, creates one
``OrderInputSession`` per connected user with ``create_session()``, and calls
``shutdown()`` on exit.
"""

from __future__ import annotations

import logging

from apps.dex_console.components.order_input_session import OrderInputSession
from apps.dex_console.config import Settings, get_settings
from apps.dex_console.core.client import AsyncDexClient
from libs.common.logging import configure_logging
from libs.order_input.models import TradingPair

logger = logging.getLogger(__name__)


async def startup(settings: Settings | None = None) -> AsyncDexClient:
    """Configure logging and open the gateway client."""
    settings = settings or get_settings()
    configure_logging(service_name=settings.service_name, log_level=settings.log_level)
    client = AsyncDexClient.get(settings)
    await client.startup()
    logger.info("DEX console started", extra={"gateway_url": settings.gateway_url})
    return client


async def shutdown() -> None:
    await AsyncDexClient.get().shutdown()
    logger.info("DEX console stopped")


def create_session(
    pair: TradingPair | None = None, settings: Settings | None = None
) -> OrderInputSession:
    """New order input session backed by the shared gateway client."""
    client = AsyncDexClient.get()
    return OrderInputSession(client, client, client, pair=pair, settings=settings)


__all__ = ["create_session", "shutdown", "startup"]
