from __future__ import annotations

from decimal import Decimal

from libs.order_input.fees import EstimatedTotal, FeeSummary, estimated_total, summarize_fees
from libs.order_input.models import (
    OrderInputState,
    OrderSide,
    OrderType,
    Quote,
    TokenInfo,
    TokenLeg,
)


def _state(side: OrderSide = OrderSide.BUY, **overrides: object) -> OrderInputState:
    fields: dict[str, object] = {
        "pair_address": "component_xrd_xusdc",
        "side": side,
        "token1": TokenLeg("resource_xrd", "XRD", Decimal("0")),
        "token2": TokenLeg("resource_xusdc", "xUSDC", Decimal("0")),
    }
    fields.update(overrides)
    return OrderInputState(**fields)  # type: ignore[arg-type]


QUOTE = Quote(
    to_amount=Decimal("12.3456"),
    to_token=TokenInfo("resource_xusdc", "xUSDC"),
    exchange_fees=Decimal("0.12345"),
    platform_fees=Decimal("0.00005"),
    liquidity_fees=Decimal("1"),
)


def test_fees_are_rounded_half_up_to_four_decimals() -> None:
    summary = summarize_fees(_state(quote=QUOTE))

    assert summary == FeeSummary(
        total=Decimal("1.1235"),
        exchange=Decimal("0.1235"),
        platform=Decimal("0.0001"),
        liquidity=Decimal("1.0000"),
        currency="XRD",
    )


def test_total_is_rounded_after_summing() -> None:
    quote = Quote(
        to_amount=Decimal("1"),
        exchange_fees=Decimal("0.00004"),
        platform_fees=Decimal("0.00004"),
        liquidity_fees=Decimal("0"),
    )

    summary = summarize_fees(_state(quote=quote))

    assert summary.exchange == Decimal("0.0000")
    assert summary.platform == Decimal("0.0000")
    assert summary.total == Decimal("0.0001")


def test_sell_fees_are_in_token2() -> None:
    assert summarize_fees(_state(OrderSide.SELL, quote=QUOTE)).currency == "xUSDC"


def test_fees_without_quote_are_zero() -> None:
    summary = summarize_fees(_state())

    assert summary.total == Decimal("0")
    assert summary.exchange == Decimal("0")


def test_estimated_total_truncates_to_two_decimals() -> None:
    state = _state(type=OrderType.MARKET, quote=QUOTE)

    assert estimated_total(state) == EstimatedTotal(amount=Decimal("12.34"), symbol="xUSDC")


def test_estimated_total_only_for_market_orders_with_quote() -> None:
    assert estimated_total(_state(type=OrderType.LIMIT, quote=QUOTE)) is None
    assert estimated_total(_state(type=OrderType.MARKET)) is None
