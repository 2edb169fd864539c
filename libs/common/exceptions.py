"""
Exception hierarchy for the DEX order input engine.

Only arithmetic and configuration problems are raised as exceptions inside the
engine. Validation failures are reported as ``ValidationResult`` values and
network failures (quote, submission) are converted into typed outcomes before
they reach the presentation layer.
"""


class OrderInputError(Exception):
    """
    Base exception for all order input errors.

    Example:
        >>> try:
        ...     multiply("abc", 2)
        ... except OrderInputError as e:
        ...     logger.warning(f"Rejected input: {e}")
    """

    pass


class OrderInputArithmeticError(OrderInputError, ArithmeticError):
    """
    Raised by the decimal arithmetic helpers for inputs they cannot handle.

    Callers inside the engine guard against these before writing to state,
    so they never surface as stored values (no NaN/Infinity in state).
    """

    pass


class DivisionByZeroError(OrderInputArithmeticError, ZeroDivisionError):
    """
    Raised when ``divide`` is called with a zero divisor.

    Example:
        >>> divide(Decimal("10"), Decimal("0"))
        Traceback (most recent call last):
        ...
        DivisionByZeroError: Cannot divide 10 by zero
    """

    pass


class InvalidAmountError(OrderInputArithmeticError, ValueError):
    """
    Raised when a value cannot be interpreted as a finite decimal amount.

    This covers malformed numeric strings, NaN, infinities and booleans.
    """

    pass


class QuoteError(OrderInputError):
    """
    Raised by a quote collaborator when a quote cannot be produced.

    The quote refresh controller catches it and records the message on
    ``OrderInputState.quote_error``; the order stays editable.
    """

    pass


class SubmissionError(OrderInputError):
    """
    Raised by a submission collaborator when the order could not be handed
    to the wallet/gateway at all.

    The submission controller maps it to a user-action failure outcome.
    """

    pass


class CollaboratorError(OrderInputError):
    """
    Raised when an external collaborator returns a payload the engine
    cannot interpret (unexpected shape, missing fields).
    """

    pass


class ConfigurationError(OrderInputError):
    """
    Raised when required configuration is missing or inconsistent.

    Example:
        >>> if not settings.gateway_url:
        ...     raise ConfigurationError("DEX_CONSOLE_GATEWAY_URL not configured")
    """

    pass
