"""Precision-safe arithmetic for order amounts and prices.

All order values are ``Decimal``. Inputs may arrive as ``int``, ``float`` or
numeric ``str`` from widgets and collaborators; floats are converted through
``str()`` so that ``0.1`` is read as ``Decimal("0.1")`` rather than its binary
approximation.

Division by zero raises ``DivisionByZeroError``. The engine never divides by a
non-positive price: callers special-case that to 0 before calling ``divide``.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext

from libs.common.exceptions import DivisionByZeroError, InvalidAmountError

# Enough for two 18-significant-digit operands without rounding the product
ARITHMETIC_PRECISION = 40

ZERO = Decimal("0")

NumberLike = Decimal | int | float | str


def to_decimal(value: NumberLike) -> Decimal:
    """Convert a widget/collaborator value to a finite ``Decimal``.

    Raises:
        InvalidAmountError: For booleans, malformed strings, NaN or infinity.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Boolean is not an amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip() if isinstance(value, str) else str(value))
        except (InvalidOperation, ValueError) as exc:
            raise InvalidAmountError(f"Not a decimal amount: {value!r}") from exc
    if not result.is_finite():
        raise InvalidAmountError(f"Amount must be finite: {value!r}")
    return result


def multiply(a: NumberLike, b: NumberLike) -> Decimal:
    """Return ``a * b`` without binary floating point error."""
    with localcontext() as ctx:
        ctx.prec = ARITHMETIC_PRECISION
        return to_decimal(a) * to_decimal(b)


def divide(a: NumberLike, b: NumberLike) -> Decimal:
    """Return ``a / b``.

    Raises:
        DivisionByZeroError: If ``b`` is zero.
    """
    numerator = to_decimal(a)
    denominator = to_decimal(b)
    if denominator == 0:
        raise DivisionByZeroError(f"Cannot divide {numerator} by zero")
    with localcontext() as ctx:
        ctx.prec = ARITHMETIC_PRECISION
        return numerator / denominator


def truncate_with_precision(value: NumberLike, decimals: int) -> Decimal:
    """Cut ``value`` to ``decimals`` fractional digits, never rounding up.

    Truncation is toward zero, matching the precision limit enforced when the
    order transaction is built (e.g. ``1.999999999`` with 8 decimals becomes
    ``1.99999999``).

    Raises:
        ValueError: If ``decimals`` is negative.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")
    amount = to_decimal(value)
    exponent = Decimal(1).scaleb(-decimals)
    with localcontext() as ctx:
        ctx.prec = ARITHMETIC_PRECISION
        return amount.quantize(exponent, rounding=ROUND_DOWN)


__all__ = [
    "ARITHMETIC_PRECISION",
    "NumberLike",
    "ZERO",
    "divide",
    "multiply",
    "to_decimal",
    "truncate_with_precision",
]
