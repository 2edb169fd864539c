"""Data model for the order input engine.

All models are frozen dataclasses: every store transition builds a new
``OrderInputState`` with ``dataclasses.replace`` instead of mutating fields in
place, so a state captured by an in-flight quote fetch can never change under
it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

ZERO = Decimal("0")


class OrderSide(Enum):
    """Order side."""

    BUY = "BUY"
    SELL = "SELL"


class OrderType(Enum):
    """Order type. MARKET prices come from the order book, LIMIT from the user."""

    MARKET = "MARKET"
    LIMIT = "LIMIT"


class SpecifiedToken(Enum):
    """Which token leg is the source of truth for the amount."""

    TOKEN_1 = "TOKEN_1"
    TOKEN_2 = "TOKEN_2"
    NONE = "NONE"


class Effect(Enum):
    """Follow-up work requested by a store transition."""

    REFRESH_QUOTE = "REFRESH_QUOTE"


@dataclass(frozen=True)
class TokenInfo:
    """Token identity without an amount."""

    address: str
    symbol: str


@dataclass(frozen=True)
class TradingPair:
    """A selectable trading pair: TOKEN_1 is the base, TOKEN_2 the quote token."""

    address: str
    token1: TokenInfo
    token2: TokenInfo


@dataclass(frozen=True)
class TokenLeg:
    """One side of the order.

    ``amount`` is ``None`` when the user cleared the input field, which is
    distinct from an explicit zero.
    """

    address: str = ""
    symbol: str = ""
    amount: Decimal | None = ZERO

    @property
    def effective_amount(self) -> Decimal:
        """Amount used for arithmetic and validation (cleared counts as 0)."""
        return self.amount if self.amount is not None else ZERO


@dataclass(frozen=True)
class ValidationResult:
    """Per-field validation outcome. ``message`` is a locale-agnostic key."""

    valid: bool
    message: str = ""


VALID = ValidationResult(valid=True)


@dataclass(frozen=True)
class Quote:
    """Estimated outcome of a prospective order, as returned by the DEX."""

    to_amount: Decimal
    to_token: TokenInfo | None = None
    from_amount: Decimal | None = None
    exchange_fees: Decimal = ZERO
    platform_fees: Decimal = ZERO
    liquidity_fees: Decimal = ZERO


@dataclass(frozen=True)
class QuoteRequest:
    """Order shape sent to the quote collaborator."""

    pair_address: str
    side: OrderSide
    type: OrderType
    price: Decimal
    specified_token: SpecifiedToken
    amount: Decimal
    post_only: bool = False


@dataclass(frozen=True)
class QuoteResult:
    """Quote collaborator response: a quote and/or an error description."""

    quote: Quote | None = None
    description: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class QuoteKey:
    """Everything a quote depends on. A quote is current only while its key is."""

    pair_address: str
    side: OrderSide
    type: OrderType
    price: Decimal
    specified_token: SpecifiedToken
    token1_amount: Decimal | None
    token2_amount: Decimal | None


@dataclass(frozen=True)
class OrderInputState:
    """Canonical order-in-progress."""

    pair_address: str = ""
    side: OrderSide = OrderSide.BUY
    type: OrderType = OrderType.LIMIT
    token1: TokenLeg = field(default_factory=TokenLeg)
    token2: TokenLeg = field(default_factory=TokenLeg)
    price: Decimal = ZERO
    specified_token: SpecifiedToken = SpecifiedToken.NONE
    post_only: bool = False
    quote: Quote | None = None
    quote_description: str | None = None
    quote_error: str | None = None
    validation_price: ValidationResult = VALID
    validation_token1: ValidationResult = VALID
    validation_token2: ValidationResult = VALID

    @property
    def quote_key(self) -> QuoteKey:
        return QuoteKey(
            pair_address=self.pair_address,
            side=self.side,
            type=self.type,
            price=self.price,
            specified_token=self.specified_token,
            token1_amount=self.token1.amount,
            token2_amount=self.token2.amount,
        )

    @property
    def specified_leg(self) -> TokenLeg | None:
        if self.specified_token is SpecifiedToken.TOKEN_1:
            return self.token1
        if self.specified_token is SpecifiedToken.TOKEN_2:
            return self.token2
        return None

    @property
    def specified_amount(self) -> Decimal:
        leg = self.specified_leg
        return leg.effective_amount if leg is not None else ZERO


@dataclass(frozen=True)
class MarketSnapshot:
    """Balances and best bid/ask read once for a single transition."""

    balance_token1: Decimal = ZERO
    balance_token2: Decimal = ZERO
    best_buy: Decimal = ZERO
    best_sell: Decimal = ZERO


@dataclass(frozen=True)
class Transition:
    """Result of a store action: the new state and the effects it requests."""

    state: OrderInputState
    effects: tuple[Effect, ...] = ()

    @property
    def refresh_quote(self) -> bool:
        return Effect.REFRESH_QUOTE in self.effects


__all__ = [
    "Effect",
    "MarketSnapshot",
    "OrderInputState",
    "OrderSide",
    "OrderType",
    "Quote",
    "QuoteKey",
    "QuoteRequest",
    "QuoteResult",
    "SpecifiedToken",
    "TokenInfo",
    "TokenLeg",
    "TradingPair",
    "Transition",
    "VALID",
    "ValidationResult",
    "ZERO",
]
