"""Tests for AsyncDexClient payload handling, retry policy and lifecycle."""

from __future__ import annotations

import json
from decimal import Decimal

import httpx
import pytest
import respx
from httpx import Response

from apps.dex_console.config import Settings
from apps.dex_console.core.client import AsyncDexClient
from libs.common.exceptions import (
    CollaboratorError,
    ConfigurationError,
    QuoteError,
    SubmissionError,
)
from libs.common.logging.context import SESSION_ID_HEADER, SessionContext
from libs.order_input.collaborators import OrderSubmission
from libs.order_input.models import (
    OrderSide,
    OrderType,
    QuoteRequest,
    SpecifiedToken,
    TokenInfo,
)

QUOTE_REQUEST = QuoteRequest(
    pair_address="component_xrd_xusdc",
    side=OrderSide.BUY,
    type=OrderType.LIMIT,
    price=Decimal("0.05"),
    specified_token=SpecifiedToken.TOKEN_1,
    amount=Decimal("100"),
    post_only=True,
)

ORDER = OrderSubmission(
    account="account_rdx1abc",
    pair_address="component_xrd_xusdc",
    side=OrderSide.SELL,
    type=OrderType.MARKET,
    price=Decimal("0"),
    specified_token=SpecifiedToken.TOKEN_2,
    amount=Decimal("12.5"),
)


class TestFetchBalances:
    @pytest.mark.asyncio()
    @respx.mock
    async def test_parses_balances(self, dex_client: AsyncDexClient) -> None:
        route = respx.get("http://testserver/api/v1/balances").mock(
            return_value=Response(
                200, json={"balances": {"resource_xrd": "100.5", "resource_xusdc": 50}}
            )
        )

        balances = await dex_client.fetch_balances("account_rdx1abc")

        assert balances == {"resource_xrd": Decimal("100.5"), "resource_xusdc": Decimal("50")}
        assert route.calls.last.request.url.params["account"] == "account_rdx1abc"

    @pytest.mark.asyncio()
    @respx.mock
    async def test_negative_balance_is_rejected(self, dex_client: AsyncDexClient) -> None:
        respx.get("http://testserver/api/v1/balances").mock(
            return_value=Response(200, json={"balances": {"resource_xrd": "-1"}})
        )

        with pytest.raises(CollaboratorError, match="Malformed balances"):
            await dex_client.fetch_balances("account_rdx1abc")

    @pytest.mark.asyncio()
    @respx.mock
    async def test_non_object_body_is_rejected(self, dex_client: AsyncDexClient) -> None:
        respx.get("http://testserver/api/v1/balances").mock(
            return_value=Response(200, json=["resource_xrd"])
        )

        with pytest.raises(CollaboratorError, match="JSON object"):
            await dex_client.fetch_balances("account_rdx1abc")

    @pytest.mark.asyncio()
    @respx.mock
    async def test_forwards_session_id(self, dex_client: AsyncDexClient) -> None:
        route = respx.get("http://testserver/api/v1/balances").mock(
            return_value=Response(200, json={"balances": {}})
        )

        with SessionContext("session-42"):
            await dex_client.fetch_balances("account_rdx1abc")

        assert route.calls.last.request.headers[SESSION_ID_HEADER] == "session-42"


class TestFetchQuote:
    @pytest.mark.asyncio()
    @respx.mock
    async def test_request_body_and_quote(self, dex_client: AsyncDexClient) -> None:
        route = respx.post("http://testserver/api/v1/quotes").mock(
            return_value=Response(
                200,
                json={
                    "quote": {
                        "to_amount": "5",
                        "to_token": {"address": "resource_xusdc", "symbol": "xUSDC"},
                        "exchange_fees": "0.01",
                        "platform_fees": "0.002",
                        "liquidity_fees": "0",
                    },
                    "description": "Buy 100 XRD for 5 xUSDC",
                    "error": None,
                },
            )
        )

        result = await dex_client.fetch_quote(QUOTE_REQUEST)

        body = json.loads(route.calls.last.request.content)
        assert body == {
            "pair_address": "component_xrd_xusdc",
            "side": "BUY",
            "type": "LIMIT",
            "price": "0.05",
            "specified_token": "TOKEN_1",
            "amount": "100",
            "post_only": True,
        }
        assert result.error is None
        assert result.description == "Buy 100 XRD for 5 xUSDC"
        assert result.quote is not None
        assert result.quote.to_amount == Decimal("5")
        assert result.quote.to_token == TokenInfo("resource_xusdc", "xUSDC")
        assert result.quote.platform_fees == Decimal("0.002")

    @pytest.mark.asyncio()
    @respx.mock
    async def test_error_payload(self, dex_client: AsyncDexClient) -> None:
        respx.post("http://testserver/api/v1/quotes").mock(
            return_value=Response(
                200, json={"quote": None, "description": None, "error": "Not enough liquidity"}
            )
        )

        result = await dex_client.fetch_quote(QUOTE_REQUEST)

        assert result.quote is None
        assert result.error == "Not enough liquidity"

    @pytest.mark.asyncio()
    @respx.mock
    async def test_malformed_quote_raises_quote_error(self, dex_client: AsyncDexClient) -> None:
        respx.post("http://testserver/api/v1/quotes").mock(
            return_value=Response(200, json={"quote": {"to_amount": "abc"}})
        )

        with pytest.raises(QuoteError):
            await dex_client.fetch_quote(QUOTE_REQUEST)


class TestSubmitOrder:
    @pytest.mark.asyncio()
    @respx.mock
    async def test_tagged_result(self, dex_client: AsyncDexClient) -> None:
        route = respx.post("http://testserver/api/v1/orders").mock(
            return_value=Response(200, json={"type": "fulfilled", "payload": {"status": "OK"}})
        )

        result = await dex_client.submit_order(ORDER)

        body = json.loads(route.calls.last.request.content)
        assert body["account"] == "account_rdx1abc"
        assert body["side"] == "SELL"
        assert body["amount"] == "12.5"
        assert result.fulfilled is True
        assert result.status == "OK"

    @pytest.mark.asyncio()
    @respx.mock
    async def test_malformed_result_raises_submission_error(
        self, dex_client: AsyncDexClient
    ) -> None:
        respx.post("http://testserver/api/v1/orders").mock(
            return_value=Response(200, json={"payload": {"status": "OK"}})
        )

        with pytest.raises(SubmissionError):
            await dex_client.submit_order(ORDER)


class TestRetryPolicy:
    @pytest.mark.asyncio()
    @respx.mock
    async def test_retry_transport_error_get(self, dex_client: AsyncDexClient) -> None:
        route = respx.get("http://testserver/api/v1/balances").mock(
            side_effect=[
                httpx.ConnectError(
                    "boom",
                    request=httpx.Request("GET", "http://testserver/api/v1/balances"),
                ),
                Response(200, json={"balances": {}}),
            ]
        )

        assert await dex_client.fetch_balances("account_rdx1abc") == {}
        assert route.call_count == 2

    @pytest.mark.asyncio()
    @respx.mock
    async def test_retry_transport_error_post(self, dex_client: AsyncDexClient) -> None:
        route = respx.post("http://testserver/api/v1/orders").mock(
            side_effect=[
                httpx.ConnectError(
                    "boom",
                    request=httpx.Request("POST", "http://testserver/api/v1/orders"),
                ),
                Response(200, json={"type": "fulfilled", "payload": {"status": "OK"}}),
            ]
        )

        result = await dex_client.submit_order(ORDER)

        assert result.fulfilled is True
        assert route.call_count == 2

    @pytest.mark.asyncio()
    @respx.mock
    async def test_retry_on_5xx_for_get_only(self, dex_client: AsyncDexClient) -> None:
        route = respx.get("http://testserver/api/v1/balances").mock(
            side_effect=[
                Response(503, json={"error": "unavailable"}),
                Response(200, json={"balances": {"resource_xrd": "1"}}),
            ]
        )

        assert await dex_client.fetch_balances("account_rdx1abc") == {
            "resource_xrd": Decimal("1")
        }
        assert route.call_count == 2

    @pytest.mark.asyncio()
    @respx.mock
    async def test_no_retry_on_5xx_for_post(self, dex_client: AsyncDexClient) -> None:
        route = respx.post("http://testserver/api/v1/orders").mock(
            return_value=Response(500, json={"error": "boom"})
        )

        with pytest.raises(httpx.HTTPStatusError):
            await dex_client.submit_order(ORDER)

        assert route.call_count == 1

    @pytest.mark.asyncio()
    @respx.mock
    async def test_no_retry_on_4xx(self, dex_client: AsyncDexClient) -> None:
        route = respx.get("http://testserver/api/v1/balances").mock(
            return_value=Response(404, json={"error": "unknown account"})
        )

        with pytest.raises(httpx.HTTPStatusError):
            await dex_client.fetch_balances("account_rdx1abc")

        assert route.call_count == 1

    @pytest.mark.asyncio()
    @respx.mock
    async def test_gives_up_after_max_attempts(self, dex_client: AsyncDexClient) -> None:
        route = respx.get("http://testserver/api/v1/balances").mock(
            return_value=Response(500, json={"error": "boom"})
        )

        with pytest.raises(httpx.HTTPStatusError):
            await dex_client.fetch_balances("account_rdx1abc")

        assert route.call_count == 3


class TestLifecycle:
    @pytest.mark.asyncio()
    async def test_requires_startup(self, settings: Settings) -> None:
        client = AsyncDexClient(settings)

        with pytest.raises(RuntimeError, match="startup"):
            await client.fetch_balances("account_rdx1abc")

    @pytest.mark.asyncio()
    async def test_missing_gateway_url(self) -> None:
        client = AsyncDexClient(Settings(gateway_url="  "))

        with pytest.raises(ConfigurationError):
            await client.startup()

    @pytest.mark.asyncio()
    async def test_startup_is_idempotent(self, settings: Settings) -> None:
        client = AsyncDexClient(settings)
        await client.startup()
        http_client = client._http_client

        await client.startup()

        assert client._http_client is http_client
        await client.shutdown()
        assert client._http_client is None
