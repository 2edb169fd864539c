"""
Pydantic schemas for the DEX gateway API.

Request bodies are built from engine types and response payloads are
validated here before being converted back, so the engine never sees raw
JSON.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from libs.order_input.collaborators import OrderSubmission, SubmitOrderResult
from libs.order_input.models import Quote, QuoteRequest, QuoteResult, TokenInfo

Side = Literal["BUY", "SELL"]
OrderTypeName = Literal["MARKET", "LIMIT"]
SpecifiedTokenName = Literal["TOKEN_1", "TOKEN_2"]

# ============================================================================
# Balances
# ============================================================================


class BalancesResponse(BaseModel):
    """Balances keyed by token address."""

    balances: dict[str, Decimal] = Field(default_factory=dict)

    @field_validator("balances")
    @classmethod
    def balances_non_negative(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        for address, amount in v.items():
            if not amount.is_finite() or amount < 0:
                raise ValueError(f"Invalid balance for {address}: {amount}")
        return v


# ============================================================================
# Quotes
# ============================================================================


class TokenSchema(BaseModel):
    address: str
    symbol: str

    def to_engine(self) -> TokenInfo:
        return TokenInfo(address=self.address, symbol=self.symbol)


class QuoteSchema(BaseModel):
    """Quote as returned by the gateway."""

    to_amount: Decimal = Field(..., ge=0)
    to_token: TokenSchema | None = None
    from_amount: Decimal | None = None
    exchange_fees: Decimal = Decimal("0")
    platform_fees: Decimal = Decimal("0")
    liquidity_fees: Decimal = Decimal("0")

    def to_engine(self) -> Quote:
        return Quote(
            to_amount=self.to_amount,
            to_token=self.to_token.to_engine() if self.to_token else None,
            from_amount=self.from_amount,
            exchange_fees=self.exchange_fees,
            platform_fees=self.platform_fees,
            liquidity_fees=self.liquidity_fees,
        )


class QuoteRequestBody(BaseModel):
    """
    Request for a quote on a prospective order.

    Example:
        >>> body = QuoteRequestBody(
        ...     pair_address="pair_1",
        ...     side="BUY",
        ...     type="LIMIT",
        ...     price=Decimal("1.5"),
        ...     specified_token="TOKEN_1",
        ...     amount=Decimal("10"),
        ... )
    """

    pair_address: str = Field(..., min_length=1)
    side: Side
    type: OrderTypeName
    price: Decimal
    specified_token: SpecifiedTokenName
    amount: Decimal = Field(..., gt=0)
    post_only: bool = False

    @classmethod
    def from_engine(cls, request: QuoteRequest) -> QuoteRequestBody:
        return cls(
            pair_address=request.pair_address,
            side=request.side.value,
            type=request.type.value,
            price=request.price,
            specified_token=request.specified_token.value,
            amount=request.amount,
            post_only=request.post_only,
        )


class QuoteResponse(BaseModel):
    quote: QuoteSchema | None = None
    description: str | None = None
    error: str | None = None

    def to_engine(self) -> QuoteResult:
        return QuoteResult(
            quote=self.quote.to_engine() if self.quote else None,
            description=self.description,
            error=self.error,
        )


# ============================================================================
# Orders
# ============================================================================


class OrderRequestBody(BaseModel):
    """Order handed to the gateway for wallet signing."""

    account: str = Field(..., min_length=1)
    pair_address: str = Field(..., min_length=1)
    side: Side
    type: OrderTypeName
    price: Decimal
    specified_token: SpecifiedTokenName
    amount: Decimal = Field(..., gt=0)
    post_only: bool = False

    @classmethod
    def from_engine(cls, order: OrderSubmission) -> OrderRequestBody:
        return cls(
            account=order.account,
            pair_address=order.pair_address,
            side=order.side.value,
            type=order.type.value,
            price=order.price,
            specified_token=order.specified_token.value,
            amount=order.amount,
            post_only=order.post_only,
        )


class SubmitOrderResponse(BaseModel):
    """Tagged wallet action result: ``type`` is ``fulfilled`` on completion."""

    type: str
    payload: dict[str, Any] = Field(default_factory=dict)

    def to_engine(self) -> SubmitOrderResult:
        return SubmitOrderResult(type=self.type, payload=dict(self.payload))


__all__ = [
    "BalancesResponse",
    "OrderRequestBody",
    "QuoteRequestBody",
    "QuoteResponse",
    "QuoteSchema",
    "SubmitOrderResponse",
    "TokenSchema",
]
