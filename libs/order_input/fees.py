"""Fee breakdown and estimated total derived from the current quote."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from libs.order_input.decimal_math import truncate_with_precision
from libs.order_input.models import ZERO, OrderInputState, OrderSide, OrderType

FEE_DISPLAY_EXPONENT = Decimal("0.0001")
ESTIMATED_TOTAL_DECIMALS = 2


@dataclass(frozen=True)
class FeeSummary:
    """Fees shown under the order form, each rounded to 4 decimals."""

    total: Decimal
    exchange: Decimal
    platform: Decimal
    liquidity: Decimal
    currency: str


@dataclass(frozen=True)
class EstimatedTotal:
    amount: Decimal
    symbol: str


def _round_fee(value: Decimal) -> Decimal:
    return value.quantize(FEE_DISPLAY_EXPONENT, rounding=ROUND_HALF_UP)


def summarize_fees(state: OrderInputState) -> FeeSummary:
    """Break down the quote's fees (all zero without a quote).

    Fees are charged in TOKEN_1 when buying and in TOKEN_2 when selling.
    """
    quote = state.quote
    exchange = quote.exchange_fees if quote else ZERO
    platform = quote.platform_fees if quote else ZERO
    liquidity = quote.liquidity_fees if quote else ZERO
    currency = state.token1.symbol if state.side is OrderSide.BUY else state.token2.symbol
    return FeeSummary(
        total=_round_fee(exchange + platform + liquidity),
        exchange=_round_fee(exchange),
        platform=_round_fee(platform),
        liquidity=_round_fee(liquidity),
        currency=currency,
    )


def estimated_total(state: OrderInputState) -> EstimatedTotal | None:
    """What a MARKET order is expected to receive, truncated to 2 decimals.

    Returns ``None`` for LIMIT orders and while no quote is available.
    """
    if state.type is not OrderType.MARKET or state.quote is None:
        return None
    to_token = state.quote.to_token
    symbol = to_token.symbol if to_token is not None else ""
    return EstimatedTotal(
        amount=truncate_with_precision(state.quote.to_amount, ESTIMATED_TOTAL_DECIMALS),
        symbol=symbol,
    )


__all__ = ["EstimatedTotal", "FeeSummary", "estimated_total", "summarize_fees"]
