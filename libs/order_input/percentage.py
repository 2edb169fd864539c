"""Percentage-of-balance controller.

Turns a slider percentage of the spendable balance into a specified amount:
BUY orders spend TOKEN_2 and SELL orders spend TOKEN_1. When the spent token
is the network fee asset and the whole balance is requested, a fixed fee
allowance stays in the wallet.

Slider drags are debounced; label clicks and the "use max" shortcut commit
immediately.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal

from libs.common.exceptions import InvalidAmountError
from libs.order_input.debounce import Debouncer
from libs.order_input.decimal_math import (
    NumberLike,
    divide,
    multiply,
    to_decimal,
    truncate_with_precision,
)
from libs.order_input.models import (
    ZERO,
    MarketSnapshot,
    OrderSide,
    SpecifiedToken,
    Transition,
)
from libs.order_input.store import OrderInputStore

logger = logging.getLogger(__name__)

DEFAULT_SLIDER_DEBOUNCE_SECONDS = 0.35
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class PercentagePolicy:
    """Fee reservation and truncation applied to percentage-derived amounts.

    Attributes:
        fee_asset_symbol: Symbol of the token that pays network fees.
        fee_allowance: Amount of the fee asset kept back at 100%.
        truncate_decimals: Fractional digits kept in the committed amount.
            ``None`` commits the exact amount. The default of 8 matches the
            precision the transaction builder accepts.
    """

    fee_asset_symbol: str = "XRD"
    fee_allowance: Decimal = Decimal("3")
    truncate_decimals: int | None = 8


DEFAULT_PERCENTAGE_POLICY = PercentagePolicy()


def compute_percentage_amount(
    percentage: NumberLike,
    balance: NumberLike,
    *,
    is_fee_asset: bool,
    policy: PercentagePolicy = DEFAULT_PERCENTAGE_POLICY,
) -> Decimal:
    """Amount corresponding to ``percentage`` of ``balance``.

    Example:
        >>> compute_percentage_amount(100, 100, is_fee_asset=True)
        Decimal('97.00000000')
        >>> compute_percentage_amount(25, 50, is_fee_asset=False)
        Decimal('12.50000000')

    Raises:
        ValueError: If ``percentage`` is outside [0, 100].
    """
    pct = to_decimal(percentage)
    if pct < 0 or pct > HUNDRED:
        raise ValueError(f"percentage must be within [0, 100], got {percentage}")

    available = to_decimal(balance)
    if available <= 0:
        return ZERO
    if is_fee_asset and pct == HUNDRED:
        available = max(available - policy.fee_allowance, ZERO)

    amount = divide(multiply(available, pct), HUNDRED)
    if policy.truncate_decimals is not None:
        amount = truncate_with_precision(amount, policy.truncate_decimals)
    return amount


def percentage_leg(side: OrderSide) -> SpecifiedToken:
    """Leg a percentage applies to: the one the order spends."""
    return SpecifiedToken.TOKEN_2 if side is OrderSide.BUY else SpecifiedToken.TOKEN_1


class PercentageOfBalanceController:
    """Commit percentage-of-balance amounts into the store.

    Args:
        store: Order state store to commit into.
        snapshot: Returns the current balances and best bid/ask; called once
            per commit so the transition sees one consistent snapshot.
        policy: Fee reservation and truncation policy.
        debounce_seconds: Quiescence window for slider input.
    """

    def __init__(
        self,
        store: OrderInputStore,
        snapshot: Callable[[], MarketSnapshot],
        *,
        policy: PercentagePolicy = DEFAULT_PERCENTAGE_POLICY,
        debounce_seconds: float = DEFAULT_SLIDER_DEBOUNCE_SECONDS,
    ) -> None:
        self._store = store
        self._snapshot = snapshot
        self.policy = policy
        self._debouncer = Debouncer(debounce_seconds, name="percentage_slider")
        self._percentage = ZERO

    @property
    def percentage(self) -> Decimal:
        """Last slider value, shown by the slider while a commit is pending."""
        return self._percentage

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def set_percentage(self, percentage: NumberLike) -> None:
        """Debounced slider input; only the last value in the window commits."""
        pct = self._checked_percentage(percentage)
        if pct is None:
            return
        self._percentage = pct

        async def _commit() -> None:
            self._commit(pct)

        self._debouncer.schedule(_commit)

    def apply_percentage(self, percentage: NumberLike) -> Transition | None:
        """Commit ``percentage`` now, dropping any pending slider value."""
        pct = self._checked_percentage(percentage)
        if pct is None:
            return None
        self._debouncer.cancel()
        self._percentage = pct
        return self._commit(pct)

    def use_max(self) -> Transition | None:
        return self.apply_percentage(HUNDRED)

    def reset(self) -> None:
        """Drop any pending commit and move the slider back to 0."""
        self._debouncer.cancel()
        self._percentage = ZERO

    async def wait(self) -> None:
        await self._debouncer.wait()

    def _checked_percentage(self, percentage: NumberLike) -> Decimal | None:
        try:
            pct = to_decimal(percentage)
        except InvalidAmountError as exc:
            logger.warning("Ignoring malformed percentage", extra={"error": str(exc)})
            return None
        if pct < 0 or pct > HUNDRED:
            logger.warning(
                "Ignoring out-of-range percentage",
                extra={"percentage": str(pct)},
            )
            return None
        return pct

    def _commit(self, percentage: Decimal) -> Transition:
        state = self._store.state
        snapshot = self._snapshot()
        leg = percentage_leg(state.side)
        if leg is SpecifiedToken.TOKEN_1:
            balance, symbol = snapshot.balance_token1, state.token1.symbol
        else:
            balance, symbol = snapshot.balance_token2, state.token2.symbol

        amount = compute_percentage_amount(
            percentage,
            balance,
            is_fee_asset=symbol == self.policy.fee_asset_symbol,
            policy=self.policy,
        )
        logger.debug(
            "Committing percentage of balance",
            extra={"percentage": str(percentage), "amount": str(amount), "leg": leg.value},
        )
        return self._store.set_token_amount(
            amount,
            leg,
            best_buy=snapshot.best_buy,
            best_sell=snapshot.best_sell,
            balance_token1=snapshot.balance_token1,
            balance_token2=snapshot.balance_token2,
        )


__all__ = [
    "DEFAULT_PERCENTAGE_POLICY",
    "DEFAULT_SLIDER_DEBOUNCE_SECONDS",
    "PercentageOfBalanceController",
    "PercentagePolicy",
    "compute_percentage_amount",
    "percentage_leg",
]
