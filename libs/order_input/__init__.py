"""
Order input engine for a DEX trading interface.

This module provides:
- OrderInputStore: Canonical order-in-progress with pure transitions
- derive_display_amounts: Display values for the non-specified leg
- QuoteRefreshController: Debounced quote fetch with stale-result rejection
- PercentageOfBalanceController: Balance-percentage amounts with fee reservation
- SubmissionController: Precondition checks and wallet outcome mapping
- summarize_fees / estimated_total: Quote-derived fee table and total

All amounts are Decimal; validation never raises.
"""

from libs.order_input.collaborators import (
    BalanceFetcher,
    OrderSubmission,
    OrderSubmitter,
    QuoteFetcher,
    SubmitOrderResult,
)
from libs.order_input.debounce import Debouncer
from libs.order_input.decimal_math import divide, multiply, truncate_with_precision
from libs.order_input.derivation import DisplayAmounts, derive_display_amounts
from libs.order_input.fees import EstimatedTotal, FeeSummary, estimated_total, summarize_fees
from libs.order_input.models import (
    Effect,
    MarketSnapshot,
    OrderInputState,
    OrderSide,
    OrderType,
    Quote,
    QuoteKey,
    QuoteRequest,
    QuoteResult,
    SpecifiedToken,
    TokenInfo,
    TokenLeg,
    TradingPair,
    Transition,
    ValidationResult,
)
from libs.order_input.percentage import (
    PercentageOfBalanceController,
    PercentagePolicy,
    compute_percentage_amount,
)
from libs.order_input.quote_refresh import QuoteRefreshController
from libs.order_input.store import OrderInputStore
from libs.order_input.submission import (
    RefusalReason,
    SubmissionController,
    SubmissionOutcome,
    SubmissionResult,
    SubmitAvailability,
    submit_availability,
)

__all__ = [
    # Collaborators
    "BalanceFetcher",
    "OrderSubmission",
    "OrderSubmitter",
    "QuoteFetcher",
    "SubmitOrderResult",
    # Arithmetic
    "divide",
    "multiply",
    "truncate_with_precision",
    # Model
    "Effect",
    "MarketSnapshot",
    "OrderInputState",
    "OrderSide",
    "OrderType",
    "Quote",
    "QuoteKey",
    "QuoteRequest",
    "QuoteResult",
    "SpecifiedToken",
    "TokenInfo",
    "TokenLeg",
    "TradingPair",
    "Transition",
    "ValidationResult",
    # Engine
    "Debouncer",
    "DisplayAmounts",
    "EstimatedTotal",
    "FeeSummary",
    "OrderInputStore",
    "PercentageOfBalanceController",
    "PercentagePolicy",
    "QuoteRefreshController",
    "RefusalReason",
    "SubmissionController",
    "SubmissionOutcome",
    "SubmissionResult",
    "SubmitAvailability",
    "compute_percentage_amount",
    "derive_display_amounts",
    "estimated_total",
    "submit_availability",
    "summarize_fees",
]
