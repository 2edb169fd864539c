"""Display amounts for the two token legs.

Only one leg is ever authoritative. The other one is computed here, on every
read, and is never written back into the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from libs.order_input.decimal_math import divide, multiply
from libs.order_input.models import ZERO, OrderInputState, OrderType, SpecifiedToken


@dataclass(frozen=True)
class DisplayAmounts:
    """Values shown in the quantity (TOKEN_1) and total (TOKEN_2) fields.

    ``None`` renders as an empty field.
    """

    token1: Decimal | None
    token2: Decimal | None


def derive_display_amounts(state: OrderInputState) -> DisplayAmounts:
    """Compute both display amounts from the specified leg.

    LIMIT orders derive the other leg through the limit price (a non-positive
    price derives a TOKEN_1 amount of 0). MARKET orders do not derive; the
    non-specified leg shows the quote's ``to_amount`` once a quote is present.
    """
    token1 = state.token1.amount
    token2 = state.token2.amount

    if state.type is OrderType.LIMIT:
        if state.specified_token is SpecifiedToken.TOKEN_1 and token1 is not None:
            token2 = multiply(token1, state.price)
        elif state.specified_token is SpecifiedToken.TOKEN_2:
            if state.price <= 0:
                token1 = ZERO
            else:
                token1 = divide(state.token2.effective_amount, state.price)
        return DisplayAmounts(token1=token1, token2=token2)

    if state.quote is not None:
        if state.specified_token is SpecifiedToken.TOKEN_1:
            token2 = state.quote.to_amount
        elif state.specified_token is SpecifiedToken.TOKEN_2:
            token1 = state.quote.to_amount
    return DisplayAmounts(token1=token1, token2=token2)


__all__ = ["DisplayAmounts", "derive_display_amounts"]
