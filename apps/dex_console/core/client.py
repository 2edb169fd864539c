"""Async HTTP client for the DEX gateway.

Implements the engine's ``BalanceFetcher``, ``QuoteFetcher`` and
``OrderSubmitter`` collaborators. Payloads are validated with the schemas in
``apps.dex_console.schemas``; a malformed payload raises a typed error rather
than reaching the engine.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, cast

import httpx
from pydantic import ValidationError

from apps.dex_console.config import Settings, get_settings
from apps.dex_console.core.retry import with_retry
from apps.dex_console.schemas import (
    BalancesResponse,
    OrderRequestBody,
    QuoteRequestBody,
    QuoteResponse,
    SubmitOrderResponse,
)
from libs.common.exceptions import (
    CollaboratorError,
    ConfigurationError,
    QuoteError,
    SubmissionError,
)
from libs.common.logging.context import SESSION_ID_HEADER, get_session_id
from libs.order_input.collaborators import OrderSubmission, SubmitOrderResult
from libs.order_input.models import QuoteRequest, QuoteResult

logger = logging.getLogger(__name__)


class AsyncDexClient:
    """Async HTTP client for DEX gateway calls."""

    _instance: AsyncDexClient | None = None

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._http_client: httpx.AsyncClient | None = None

    @classmethod
    def get(cls, settings: Settings | None = None) -> AsyncDexClient:
        if cls._instance is None:
            cls._instance = cls(settings)
        elif settings is not None and cls._instance._http_client is None:
            cls._instance._settings = settings
        return cls._instance

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            raise RuntimeError("Client not initialized - call startup() first")
        return self._http_client

    async def startup(self) -> None:
        """Initialize client on app startup.

        Raises:
            ConfigurationError: If no gateway URL is configured.
        """
        if self._http_client is not None:
            return
        gateway_url = self.settings.gateway_url.strip()
        if not gateway_url:
            raise ConfigurationError("DEX_CONSOLE_GATEWAY_URL is not set")
        self._http_client = httpx.AsyncClient(
            base_url=gateway_url,
            timeout=httpx.Timeout(self.settings.request_timeout_seconds, connect=2.0),
            headers={"Content-Type": "application/json"},
        )
        logger.info("DEX gateway client started", extra={"gateway_url": gateway_url})

    async def shutdown(self) -> None:
        """Close client on app shutdown."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def _headers(self) -> dict[str, str]:
        session_id = get_session_id()
        return {SESSION_ID_HEADER: session_id} if session_id else {}

    def _json_dict(self, response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise CollaboratorError(f"Gateway returned non-JSON body for {response.url}") from exc
        if not isinstance(payload, dict):
            raise CollaboratorError("Expected JSON object response")
        return cast(dict[str, Any], payload)

    @with_retry(max_attempts=3, backoff_base=0.5, method="GET")
    async def fetch_balances(self, account: str) -> dict[str, Decimal]:
        """Fetch wallet balances keyed by token address (GET - idempotent)."""
        resp = await self._client.get(
            "/api/v1/balances", params={"account": account}, headers=self._headers()
        )
        resp.raise_for_status()
        try:
            parsed = BalancesResponse.model_validate(self._json_dict(resp))
        except ValidationError as exc:
            raise CollaboratorError(f"Malformed balances payload: {exc}") from exc
        return dict(parsed.balances)

    @with_retry(max_attempts=3, backoff_base=0.5, method="POST")
    async def fetch_quote(self, request: QuoteRequest) -> QuoteResult:
        """Request a quote for a prospective order (POST).

        An error reported by the gateway comes back as ``QuoteResult.error``;
        HTTP failures raise.
        """
        body = QuoteRequestBody.from_engine(request)
        resp = await self._client.post(
            "/api/v1/quotes", json=body.model_dump(mode="json"), headers=self._headers()
        )
        resp.raise_for_status()
        try:
            parsed = QuoteResponse.model_validate(self._json_dict(resp))
        except ValidationError as exc:
            raise QuoteError(f"Malformed quote payload: {exc}") from exc
        return parsed.to_engine()

    @with_retry(max_attempts=3, backoff_base=0.5, method="POST")
    async def submit_order(self, order: OrderSubmission) -> SubmitOrderResult:
        """Hand an order to the wallet through the gateway (POST - not idempotent)."""
        body = OrderRequestBody.from_engine(order)
        resp = await self._client.post(
            "/api/v1/orders", json=body.model_dump(mode="json"), headers=self._headers()
        )
        resp.raise_for_status()
        try:
            parsed = SubmitOrderResponse.model_validate(self._json_dict(resp))
        except ValidationError as exc:
            raise SubmissionError(f"Malformed order result payload: {exc}") from exc
        return parsed.to_engine()


__all__ = ["AsyncDexClient"]
