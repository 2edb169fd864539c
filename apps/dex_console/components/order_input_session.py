"""Order input session: one user's order form, end to end.

OWNERSHIP MODEL:

OrderInputSession is the SINGLE OWNER of the order state store and of the
controllers acting on it. The presentation layer never mutates the store
directly; it calls the session's actions and renders ``state``,
``display_amounts()``, ``fees()`` and ``availability()``.

Balances and best bid/ask are held here and read once per action into a
``MarketSnapshot`` that is passed into the store, so each transition sees a
consistent view.

Balance fetches use a version counter (``_balance_version``): after each
await the version is compared again and a result for a superseded account is
dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from decimal import Decimal

from apps.dex_console.config import Settings, get_settings
from libs.common.logging.context import SessionContext, generate_session_id
from libs.order_input.collaborators import BalanceFetcher, OrderSubmitter, QuoteFetcher
from libs.order_input.decimal_math import NumberLike, to_decimal
from libs.order_input.derivation import DisplayAmounts, derive_display_amounts
from libs.order_input.fees import EstimatedTotal, FeeSummary, estimated_total, summarize_fees
from libs.order_input.models import (
    ZERO,
    MarketSnapshot,
    OrderInputState,
    OrderSide,
    OrderType,
    SpecifiedToken,
    TradingPair,
    Transition,
)
from libs.order_input.percentage import PercentageOfBalanceController
from libs.order_input.quote_refresh import QuoteRefreshController
from libs.order_input.store import OrderInputStore
from libs.order_input.submission import (
    SubmissionController,
    SubmissionResult,
    SubmitAvailability,
)

logger = logging.getLogger(__name__)


class OrderInputSession:
    """Wire the order input engine to its collaborators for one user session.

    Args:
        quote_fetcher: Quote source (usually ``AsyncDexClient``).
        balance_fetcher: Wallet balance source.
        submitter: Wallet-backed order submitter.
        pair: Initially selected trading pair, if any.
        settings: Debounce and percentage policy settings.
        session_id: Correlation ID stamped on this session's log records.

    Example:
        client = AsyncDexClient.get()
        session = OrderInputSession(client, client, client, pair=pair)
        await session.on_wallet_changed("account_rdx1...")
        session.set_token_amount(SpecifiedToken.TOKEN_1, Decimal("10"))
        result = await session.submit()
    """

    def __init__(
        self,
        quote_fetcher: QuoteFetcher,
        balance_fetcher: BalanceFetcher,
        submitter: OrderSubmitter,
        *,
        pair: TradingPair | None = None,
        settings: Settings | None = None,
        session_id: str | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self.session_id = session_id or generate_session_id()
        self._balance_fetcher = balance_fetcher

        self._account: str | None = None
        self._balances: dict[str, Decimal] = {}
        self._balance_version = 0
        self._best_buy = ZERO
        self._best_sell = ZERO

        self.store = OrderInputStore.for_pair(pair) if pair else OrderInputStore()
        self.quotes = QuoteRefreshController(
            self.store,
            quote_fetcher,
            debounce_seconds=self._settings.quote_debounce_seconds,
        )
        self.percentage = PercentageOfBalanceController(
            self.store,
            self.snapshot,
            policy=self._settings.percentage_policy(),
            debounce_seconds=self._settings.slider_debounce_seconds,
        )
        self.submission = SubmissionController(
            self.store, submitter, on_success=self.refresh_balances
        )
        self._unsubscribe: Callable[[], None] | None = self.store.subscribe(
            self.quotes.on_transition
        )

    # =========================================================================
    # Read side
    # =========================================================================

    @property
    def state(self) -> OrderInputState:
        return self.store.state

    @property
    def account(self) -> str | None:
        return self._account

    @property
    def balances(self) -> Mapping[str, Decimal]:
        return dict(self._balances)

    def snapshot(self) -> MarketSnapshot:
        state = self.store.state
        return MarketSnapshot(
            balance_token1=self._balances.get(state.token1.address, ZERO),
            balance_token2=self._balances.get(state.token2.address, ZERO),
            best_buy=self._best_buy,
            best_sell=self._best_sell,
        )

    def display_amounts(self) -> DisplayAmounts:
        return derive_display_amounts(self.store.state)

    def fees(self) -> FeeSummary:
        return summarize_fees(self.store.state)

    def estimated_total(self) -> EstimatedTotal | None:
        return estimated_total(self.store.state)

    def availability(self) -> SubmitAvailability:
        return self.submission.availability(self._account)

    # =========================================================================
    # Pair / wallet lifecycle
    # =========================================================================

    async def select_pair(self, pair: TradingPair) -> Transition:
        """Start a fresh order for ``pair`` and reload balances."""
        with SessionContext(self.session_id):
            self.percentage.reset()
            transition = self.store.select_pair(pair)
            await self.refresh_balances()
            return transition

    async def on_wallet_changed(self, account: str | None) -> Transition:
        """Switch to ``account`` (``None`` = disconnected) and empty the form."""
        with SessionContext(self.session_id):
            logger.info("Wallet changed", extra={"connected": account is not None})
            self._account = account
            self._balances = {}
            await self.refresh_balances()
            self.percentage.reset()
            return self.store.reset_user_input()

    async def refresh_balances(self) -> None:
        """Reload balances; on failure the last known balances stay in place."""
        account = self._account
        self._balance_version += 1
        version = self._balance_version
        if account is None:
            self._balances = {}
            return

        try:
            balances = await self._balance_fetcher.fetch_balances(account)
        except Exception as exc:
            logger.warning(
                "Balance refresh failed; keeping last known balances",
                extra={"error": str(exc)},
                exc_info=True,
            )
            return

        if version != self._balance_version or account != self._account:
            logger.debug("Dropping stale balances", extra={"version": version})
            return
        self._balances = {address: to_decimal(amount) for address, amount in balances.items()}

    # =========================================================================
    # Order book
    # =========================================================================

    def update_order_book(
        self, best_buy: NumberLike | None, best_sell: NumberLike | None
    ) -> None:
        """Record best bid/ask; missing sides read as 0."""
        self._best_buy = to_decimal(best_buy) if best_buy is not None else ZERO
        self._best_sell = to_decimal(best_sell) if best_sell is not None else ZERO

    # =========================================================================
    # Form actions
    # =========================================================================

    def set_side(self, side: OrderSide) -> Transition:
        self.percentage.reset()
        return self.store.set_side(side)

    def set_type(self, order_type: OrderType) -> Transition:
        self.percentage.reset()
        return self.store.set_type(order_type)

    def set_price(self, price: NumberLike | None) -> Transition:
        snapshot = self.snapshot()
        return self.store.set_price(
            price,
            balance_token1=snapshot.balance_token1,
            balance_token2=snapshot.balance_token2,
        )

    def set_token_amount(
        self, specified_token: SpecifiedToken, amount: NumberLike | None
    ) -> Transition:
        snapshot = self.snapshot()
        return self.store.set_token_amount(
            amount,
            specified_token,
            best_buy=snapshot.best_buy,
            best_sell=snapshot.best_sell,
            balance_token1=snapshot.balance_token1,
            balance_token2=snapshot.balance_token2,
        )

    def set_percentage(self, percentage: NumberLike) -> None:
        self.percentage.set_percentage(percentage)

    def use_max_balance(self) -> Transition | None:
        return self.percentage.use_max()

    def use_best_price(self) -> Transition | None:
        """Copy the best bid (BUY) or best ask (SELL) into the limit price.

        Returns ``None`` when the order book has no price for that side.
        """
        price = self._best_buy if self.store.state.side is OrderSide.BUY else self._best_sell
        if price <= 0:
            return None
        return self.set_price(price)

    def toggle_post_only(self) -> Transition:
        return self.store.toggle_post_only()

    # =========================================================================
    # Submission / teardown
    # =========================================================================

    async def submit(self) -> SubmissionResult:
        with SessionContext(self.session_id):
            return await self.submission.submit(self._account)

    async def wait_idle(self) -> None:
        """Wait for pending slider commits and quote refreshes to finish."""
        await self.percentage.wait()
        await self.quotes.wait()

    async def close(self) -> None:
        """Cancel pending debounced work and detach from the store."""
        self.percentage.reset()
        self.quotes.close()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


__all__ = ["OrderInputSession"]
