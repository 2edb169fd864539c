"""Order state store.

The store owns the single ``OrderInputState`` of one order input session and
is the only place it changes. Each action:

1. builds the next state with a pure reducer (``reduce_*`` functions below),
   recomputing every validation that depends on the fields it touched;
2. clears the quote when the quote key changed;
3. decides the follow-up effects (currently only ``Effect.REFRESH_QUOTE``);
4. notifies listeners synchronously and returns the ``Transition``.

Balances and best bid/ask are passed into the actions that need them, so a
transition is always computed against one consistent snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from decimal import Decimal

from libs.common.exceptions import InvalidAmountError
from libs.order_input.decimal_math import NumberLike, to_decimal
from libs.order_input.models import (
    VALID,
    ZERO,
    Effect,
    OrderInputState,
    OrderSide,
    OrderType,
    QuoteKey,
    QuoteResult,
    SpecifiedToken,
    TokenLeg,
    TradingPair,
    Transition,
)
from libs.order_input.validation import (
    order_is_well_formed,
    price_is_valid,
    validate_token_amounts,
)

logger = logging.getLogger(__name__)

TransitionListener = Callable[[Transition], None]


def normalize_amount_input(amount: NumberLike | None) -> Decimal | None:
    """Map widget input to a leg amount.

    ``None`` and negative values (numeric-only widgets send ``-1`` for an
    emptied field) both mean "cleared". Malformed input (``"abc"``, ``"1,5"``,
    NaN) is logged and also reads as cleared.
    """
    if amount is None:
        return None
    try:
        value = to_decimal(amount)
    except InvalidAmountError as exc:
        logger.warning("Ignoring malformed amount input", extra={"error": str(exc)})
        return None
    if value < 0:
        return None
    return value


def effective_price(
    state: OrderInputState, *, best_buy: Decimal, best_sell: Decimal
) -> Decimal:
    """Price used for cross-leg arithmetic.

    LIMIT orders use the limit price. MARKET orders without an explicit price
    use the best opposing quote: ``best_sell`` when buying, ``best_buy`` when
    selling.
    """
    if state.type is OrderType.LIMIT or state.price > 0:
        return state.price
    return best_sell if state.side is OrderSide.BUY else best_buy


# =============================================================================
# Pure reducers
# =============================================================================


def empty_state_for_pair(
    pair: TradingPair,
    *,
    side: OrderSide = OrderSide.BUY,
    order_type: OrderType = OrderType.LIMIT,
    post_only: bool = False,
) -> OrderInputState:
    return OrderInputState(
        pair_address=pair.address,
        side=side,
        type=order_type,
        token1=TokenLeg(address=pair.token1.address, symbol=pair.token1.symbol),
        token2=TokenLeg(address=pair.token2.address, symbol=pair.token2.symbol),
        post_only=post_only,
    )


def reduce_reset_user_input(state: OrderInputState) -> OrderInputState:
    """Empty every user-entered field; pair, side, type and post-only stay."""
    return replace(
        state,
        token1=replace(state.token1, amount=ZERO),
        token2=replace(state.token2, amount=ZERO),
        price=ZERO,
        specified_token=SpecifiedToken.NONE,
        quote=None,
        quote_description=None,
        quote_error=None,
        validation_price=VALID,
        validation_token1=VALID,
        validation_token2=VALID,
    )


def reduce_set_side(state: OrderInputState, side: OrderSide) -> OrderInputState:
    return replace(reduce_reset_user_input(state), side=side)


def reduce_set_type(state: OrderInputState, order_type: OrderType) -> OrderInputState:
    return replace(reduce_reset_user_input(state), type=order_type)


def reduce_set_price(
    state: OrderInputState,
    price: NumberLike | None,
    *,
    balance_token1: Decimal,
    balance_token2: Decimal,
) -> OrderInputState:
    """Set the limit price and revalidate.

    For LIMIT orders the derived leg moves with the price, so the amount
    validation is recomputed against it. MARKET amount validation does not
    depend on the price and is left as is.
    """
    normalized = normalize_amount_input(price)
    new_price = normalized if normalized is not None else ZERO
    next_state = replace(
        state,
        price=new_price,
        validation_price=price_is_valid(new_price, state.type),
    )
    if next_state.type is OrderType.LIMIT:
        validation_token1, validation_token2 = validate_token_amounts(
            next_state,
            balance_token1=balance_token1,
            balance_token2=balance_token2,
            effective_price=new_price,
        )
        next_state = replace(
            next_state,
            validation_token1=validation_token1,
            validation_token2=validation_token2,
        )
    return next_state


def reduce_set_token_amount(
    state: OrderInputState,
    amount: NumberLike | None,
    specified_token: SpecifiedToken,
    *,
    best_buy: Decimal,
    best_sell: Decimal,
    balance_token1: Decimal,
    balance_token2: Decimal,
) -> OrderInputState:
    """Make ``specified_token`` the authoritative leg with ``amount``.

    The other leg's stored amount is zeroed: from now on it is only ever
    derived for display.

    Raises:
        ValueError: If ``specified_token`` is ``SpecifiedToken.NONE``.
    """
    if specified_token is SpecifiedToken.NONE:
        raise ValueError("specified_token must be TOKEN_1 or TOKEN_2")

    new_amount = normalize_amount_input(amount)
    if specified_token is SpecifiedToken.TOKEN_1:
        next_state = replace(
            state,
            specified_token=specified_token,
            token1=replace(state.token1, amount=new_amount),
            token2=replace(state.token2, amount=ZERO),
        )
    else:
        next_state = replace(
            state,
            specified_token=specified_token,
            token1=replace(state.token1, amount=ZERO),
            token2=replace(state.token2, amount=new_amount),
        )

    validation_token1, validation_token2 = validate_token_amounts(
        next_state,
        balance_token1=balance_token1,
        balance_token2=balance_token2,
        effective_price=effective_price(next_state, best_buy=best_buy, best_sell=best_sell),
    )
    return replace(
        next_state,
        validation_price=price_is_valid(next_state.price, next_state.type),
        validation_token1=validation_token1,
        validation_token2=validation_token2,
    )


def reduce_receive_quote(state: OrderInputState, result: QuoteResult) -> OrderInputState:
    if result.error is not None:
        return replace(
            state,
            quote=None,
            quote_description=result.description,
            quote_error=result.error,
        )
    return replace(
        state,
        quote=result.quote,
        quote_description=result.description,
        quote_error=None,
    )


# =============================================================================
# Store
# =============================================================================


class OrderInputStore:
    """Single owner of the order-in-progress for one session.

    Example:
        store = OrderInputStore.for_pair(pair)
        transition = store.set_token_amount(
            Decimal("2"),
            SpecifiedToken.TOKEN_1,
            best_buy=Decimal("0.9"),
            best_sell=Decimal("1.1"),
            balance_token1=Decimal("10"),
            balance_token2=Decimal("50"),
        )
        if transition.refresh_quote:
            quote_controller.schedule()
    """

    def __init__(self, state: OrderInputState | None = None) -> None:
        self._state = state or OrderInputState()
        self._version = 0
        self._listeners: list[TransitionListener] = []

    @classmethod
    def for_pair(cls, pair: TradingPair) -> OrderInputStore:
        return cls(empty_state_for_pair(pair))

    @property
    def state(self) -> OrderInputState:
        return self._state

    @property
    def version(self) -> int:
        """Incremented on every committed transition."""
        return self._version

    @property
    def quote_key(self) -> QuoteKey:
        return self._state.quote_key

    def subscribe(self, listener: TransitionListener) -> Callable[[], None]:
        """Register ``listener`` for every transition; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def select_pair(self, pair: TradingPair) -> Transition:
        """Start over with empty input for ``pair`` (side, type and post-only are kept)."""
        return self._commit(
            "select_pair",
            empty_state_for_pair(
                pair,
                side=self._state.side,
                order_type=self._state.type,
                post_only=self._state.post_only,
            ),
        )

    def set_side(self, side: OrderSide) -> Transition:
        return self._commit("set_side", reduce_set_side(self._state, side))

    def set_type(self, order_type: OrderType) -> Transition:
        return self._commit("set_type", reduce_set_type(self._state, order_type))

    def set_price(
        self,
        price: NumberLike | None,
        *,
        balance_token1: Decimal,
        balance_token2: Decimal,
    ) -> Transition:
        return self._commit(
            "set_price",
            reduce_set_price(
                self._state,
                price,
                balance_token1=balance_token1,
                balance_token2=balance_token2,
            ),
        )

    def set_token_amount(
        self,
        amount: NumberLike | None,
        specified_token: SpecifiedToken,
        *,
        best_buy: Decimal,
        best_sell: Decimal,
        balance_token1: Decimal,
        balance_token2: Decimal,
    ) -> Transition:
        return self._commit(
            "set_token_amount",
            reduce_set_token_amount(
                self._state,
                amount,
                specified_token,
                best_buy=best_buy,
                best_sell=best_sell,
                balance_token1=balance_token1,
                balance_token2=balance_token2,
            ),
        )

    def toggle_post_only(self) -> Transition:
        return self._commit(
            "toggle_post_only", replace(self._state, post_only=not self._state.post_only)
        )

    def reset_user_input(self) -> Transition:
        return self._commit("reset_user_input", reduce_reset_user_input(self._state))

    def receive_quote(self, key: QuoteKey, result: QuoteResult) -> bool:
        """Merge a quote fetched for ``key``.

        Returns:
            False (and leaves state untouched) when ``key`` is no longer the
            current quote key.
        """
        if key != self._state.quote_key:
            return False
        self._commit("receive_quote", reduce_receive_quote(self._state, result))
        return True

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _commit(self, action: str, next_state: OrderInputState) -> Transition:
        previous = self._state
        key_changed = next_state.quote_key != previous.quote_key
        if key_changed and (
            next_state.quote is not None
            or next_state.quote_description is not None
            or next_state.quote_error is not None
        ):
            next_state = replace(
                next_state, quote=None, quote_description=None, quote_error=None
            )

        effects: tuple[Effect, ...] = ()
        if key_changed and order_is_well_formed(next_state):
            effects = (Effect.REFRESH_QUOTE,)

        self._state = next_state
        self._version += 1
        transition = Transition(state=next_state, effects=effects)

        logger.debug(
            "order_input_transition",
            extra={
                "context": {
                    "action": action,
                    "version": self._version,
                    "side": next_state.side.value,
                    "type": next_state.type.value,
                    "specified_token": next_state.specified_token.value,
                    "effects": [effect.value for effect in effects],
                }
            },
        )

        for listener in list(self._listeners):
            listener(transition)
        return transition


__all__ = [
    "OrderInputStore",
    "TransitionListener",
    "effective_price",
    "empty_state_for_pair",
    "normalize_amount_input",
    "reduce_receive_quote",
    "reduce_reset_user_input",
    "reduce_set_price",
    "reduce_set_side",
    "reduce_set_token_amount",
    "reduce_set_type",
]
