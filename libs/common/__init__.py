"""Common utilities and exceptions."""

from libs.common.exceptions import (
    CollaboratorError,
    ConfigurationError,
    DivisionByZeroError,
    InvalidAmountError,
    OrderInputArithmeticError,
    OrderInputError,
    QuoteError,
    SubmissionError,
)

__all__ = [
    "OrderInputError",
    "OrderInputArithmeticError",
    "DivisionByZeroError",
    "InvalidAmountError",
    "QuoteError",
    "SubmissionError",
    "CollaboratorError",
    "ConfigurationError",
]
