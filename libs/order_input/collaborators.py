"""Protocol definitions for the engine's external collaborators.

Defines the quote, balance and order-submission interfaces so the engine is
decoupled from any particular transport (HTTP gateway, wallet SDK, fakes in
tests).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

from libs.order_input.models import (
    OrderInputState,
    OrderSide,
    OrderType,
    QuoteRequest,
    QuoteResult,
    SpecifiedToken,
)

FULFILLED = "fulfilled"
LEDGER_ERROR_STATUS = "ERROR"


@dataclass(frozen=True)
class OrderSubmission:
    """The order handed to the submission collaborator."""

    account: str
    pair_address: str
    side: OrderSide
    type: OrderType
    price: Decimal
    specified_token: SpecifiedToken
    amount: Decimal
    post_only: bool = False


@dataclass(frozen=True)
class SubmitOrderResult:
    """Tagged result of a wallet action.

    ``type`` is ``"fulfilled"`` when the wallet completed the action; any
    other value means the user rejected or cancelled it. ``payload["status"]``
    is the on-ledger status of a fulfilled action.
    """

    type: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    @property
    def fulfilled(self) -> bool:
        return self.type == FULFILLED

    @property
    def status(self) -> str | None:
        status = self.payload.get("status")
        return str(status) if status is not None else None

    @property
    def ledger_error(self) -> bool:
        return self.status is not None and self.status.upper() == LEDGER_ERROR_STATUS


def quote_request_from_state(state: OrderInputState) -> QuoteRequest:
    """Build the quote collaborator request for the current order shape."""
    return QuoteRequest(
        pair_address=state.pair_address,
        side=state.side,
        type=state.type,
        price=state.price,
        specified_token=state.specified_token,
        amount=state.specified_amount,
        post_only=state.post_only,
    )


def order_submission_from_state(state: OrderInputState, account: str) -> OrderSubmission:
    return OrderSubmission(
        account=account,
        pair_address=state.pair_address,
        side=state.side,
        type=state.type,
        price=state.price,
        specified_token=state.specified_token,
        amount=state.specified_amount,
        post_only=state.post_only,
    )


@runtime_checkable
class QuoteFetcher(Protocol):
    """Protocol for the price quote source."""

    async def fetch_quote(self, request: QuoteRequest) -> QuoteResult:
        """Return a quote or an error description for ``request``."""
        ...


@runtime_checkable
class BalanceFetcher(Protocol):
    """Protocol for wallet balance lookups."""

    async def fetch_balances(self, account: str) -> Mapping[str, Decimal]:
        """Return balances keyed by token address."""
        ...


@runtime_checkable
class OrderSubmitter(Protocol):
    """Protocol for the wallet-backed order submission."""

    async def submit_order(self, order: OrderSubmission) -> SubmitOrderResult:
        """Ask the wallet to sign and send ``order``."""
        ...


__all__ = [
    "FULFILLED",
    "LEDGER_ERROR_STATUS",
    "BalanceFetcher",
    "OrderSubmission",
    "OrderSubmitter",
    "QuoteFetcher",
    "SubmitOrderResult",
    "order_submission_from_state",
    "quote_request_from_state",
]
