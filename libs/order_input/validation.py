"""Validation rules for the order input form.

Every rule is a pure function returning a ``ValidationResult``; none of them
raise. A failing result carries a message key that the presentation layer
translates, so the engine stays locale-agnostic.
"""

from __future__ import annotations

from decimal import Decimal

from libs.order_input.decimal_math import divide, multiply
from libs.order_input.models import (
    VALID,
    ZERO,
    OrderInputState,
    OrderSide,
    OrderType,
    SpecifiedToken,
    TokenLeg,
    ValidationResult,
)

# Message keys
PAIR_NOT_SELECTED = "pair_not_selected"
PRICE_MUST_BE_POSITIVE = "price_must_be_positive"
TOKEN_NOT_SPECIFIED = "token_not_specified"
AMOUNT_MUST_BE_POSITIVE = "amount_must_be_positive"
INSUFFICIENT_BALANCE = "insufficient_balance"


def pair_address_is_set(pair_address: str | None) -> ValidationResult:
    if pair_address and pair_address.strip():
        return VALID
    return ValidationResult(valid=False, message=PAIR_NOT_SELECTED)


def price_is_valid(price: Decimal, order_type: OrderType) -> ValidationResult:
    """MARKET prices are not user-controlled and always pass."""
    if order_type is OrderType.MARKET:
        return VALID
    if price > 0:
        return VALID
    return ValidationResult(valid=False, message=PRICE_MUST_BE_POSITIVE)


def token_is_specified(specified_token: SpecifiedToken) -> ValidationResult:
    if specified_token is not SpecifiedToken.NONE:
        return VALID
    return ValidationResult(valid=False, message=TOKEN_NOT_SPECIFIED)


def amount_is_positive(
    specified_token: SpecifiedToken, token1: TokenLeg, token2: TokenLeg
) -> ValidationResult:
    """Check the amount of whichever leg is specified."""
    if specified_token is SpecifiedToken.TOKEN_1:
        amount = token1.effective_amount
    elif specified_token is SpecifiedToken.TOKEN_2:
        amount = token2.effective_amount
    else:
        amount = ZERO
    if amount > 0:
        return VALID
    return ValidationResult(valid=False, message=AMOUNT_MUST_BE_POSITIVE)


def no_validation_errors(*results: ValidationResult) -> bool:
    return all(result.valid for result in results)


def amount_within_balance(amount: Decimal, balance: Decimal) -> ValidationResult:
    if amount <= balance:
        return VALID
    return ValidationResult(valid=False, message=INSUFFICIENT_BALANCE)


def spent_token(side: OrderSide) -> SpecifiedToken:
    """The leg an order pays with: BUY spends TOKEN_2, SELL spends TOKEN_1."""
    return SpecifiedToken.TOKEN_2 if side is OrderSide.BUY else SpecifiedToken.TOKEN_1


def estimate_spent_amount(state: OrderInputState, effective_price: Decimal) -> Decimal:
    """Amount of the spent leg implied by the specified leg.

    The stored amount is used when the spent leg is itself specified;
    otherwise it is derived through ``effective_price``. A non-positive price
    implies a spend of 0.
    """
    spent = spent_token(state.side)
    if state.specified_token is SpecifiedToken.NONE:
        return ZERO
    if state.specified_token is spent:
        return state.specified_amount
    if effective_price <= 0:
        return ZERO
    if spent is SpecifiedToken.TOKEN_2:
        return multiply(state.token1.effective_amount, effective_price)
    return divide(state.token2.effective_amount, effective_price)


def validate_token_amounts(
    state: OrderInputState,
    *,
    balance_token1: Decimal,
    balance_token2: Decimal,
    effective_price: Decimal,
) -> tuple[ValidationResult, ValidationResult]:
    """Return ``(validation_token1, validation_token2)`` for ``state``.

    Only the spent leg is checked against its balance; the received leg is
    always valid.
    """
    spent_amount = estimate_spent_amount(state, effective_price)
    if spent_token(state.side) is SpecifiedToken.TOKEN_1:
        return amount_within_balance(spent_amount, balance_token1), VALID
    return VALID, amount_within_balance(spent_amount, balance_token2)


def order_is_well_formed(state: OrderInputState) -> bool:
    """Whether the order shape is complete enough to ask for a quote.

    Balance checks are not part of this: a user whose balance is short still
    gets a quote.
    """
    return no_validation_errors(
        pair_address_is_set(state.pair_address),
        price_is_valid(state.price, state.type),
        token_is_specified(state.specified_token),
        amount_is_positive(state.specified_token, state.token1, state.token2),
    )


def order_is_valid(state: OrderInputState) -> bool:
    """Well-formed and every stored field validation passes."""
    return order_is_well_formed(state) and no_validation_errors(
        state.validation_price, state.validation_token1, state.validation_token2
    )


__all__ = [
    "AMOUNT_MUST_BE_POSITIVE",
    "INSUFFICIENT_BALANCE",
    "PAIR_NOT_SELECTED",
    "PRICE_MUST_BE_POSITIVE",
    "TOKEN_NOT_SPECIFIED",
    "amount_is_positive",
    "amount_within_balance",
    "estimate_spent_amount",
    "no_validation_errors",
    "order_is_valid",
    "order_is_well_formed",
    "pair_address_is_set",
    "price_is_valid",
    "spent_token",
    "token_is_specified",
    "validate_token_amounts",
]
