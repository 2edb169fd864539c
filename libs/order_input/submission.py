"""Submission controller.

Checks the submit preconditions, hands the order to the wallet-backed
submitter and maps the tagged result to exactly one outcome:

- not fulfilled (user rejected or cancelled in the wallet): USER_ACTION_FAILURE
- fulfilled with an on-ledger ``ERROR`` status: LEDGER_FAILURE
- fulfilled otherwise: SUCCEEDED, after which the input is reset and balances
  are refreshed

Only SUCCEEDED changes the store.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from libs.order_input.collaborators import (
    OrderSubmission,
    OrderSubmitter,
    order_submission_from_state,
)
from libs.order_input.derivation import derive_display_amounts
from libs.order_input.metrics import record_submission
from libs.order_input.models import OrderInputState
from libs.order_input.store import OrderInputStore
from libs.order_input.validation import order_is_valid

logger = logging.getLogger(__name__)

BalanceRefresh = Callable[[], Awaitable[None]]


class SubmissionOutcome(Enum):
    SUCCEEDED = "SUCCEEDED"
    USER_ACTION_FAILURE = "USER_ACTION_FAILURE"
    LEDGER_FAILURE = "LEDGER_FAILURE"
    REFUSED = "REFUSED"


class RefusalReason(Enum):
    """Why a submit was refused before reaching the wallet."""

    WALLET_NOT_CONNECTED = "wallet_not_connected"
    SUBMISSION_IN_PROGRESS = "submission_in_progress"
    VALIDATION_FAILED = "validation_failed"
    ZERO_AMOUNT = "zero_amount"
    QUOTE_MISSING = "quote_missing"
    QUOTE_ERROR = "quote_error"


@dataclass(frozen=True)
class SubmitAvailability:
    """Whether the submit affordance should be enabled, and if not, why."""

    allowed: bool
    reason: RefusalReason | None = None


@dataclass(frozen=True)
class SubmissionResult:
    outcome: SubmissionOutcome
    refusal_reason: RefusalReason | None = None
    status: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is SubmissionOutcome.SUCCEEDED


def submit_availability(
    state: OrderInputState,
    wallet_connected: bool,
    *,
    in_progress: bool = False,
) -> SubmitAvailability:
    """Check every submit precondition, wallet connection first.

    Zero amounts are checked on the displayed legs, so a LIMIT order whose
    derived leg rounds to nothing, or a MARKET order whose quote returns
    nothing, cannot be sent.
    """
    if not wallet_connected:
        return SubmitAvailability(False, RefusalReason.WALLET_NOT_CONNECTED)
    if in_progress:
        return SubmitAvailability(False, RefusalReason.SUBMISSION_IN_PROGRESS)
    if not order_is_valid(state):
        return SubmitAvailability(False, RefusalReason.VALIDATION_FAILED)
    if state.quote_error is not None:
        return SubmitAvailability(False, RefusalReason.QUOTE_ERROR)
    if state.quote is None:
        return SubmitAvailability(False, RefusalReason.QUOTE_MISSING)

    display = derive_display_amounts(state)
    if not display.token1 or not display.token2:
        return SubmitAvailability(False, RefusalReason.ZERO_AMOUNT)
    return SubmitAvailability(True)


class SubmissionController:
    """Submit the current order through an ``OrderSubmitter``.

    Args:
        store: Order state store; reset after a successful submission.
        submitter: Wallet-backed order submitter.
        on_success: Awaited after a successful submission to refresh
            balances. Its failure is logged and does not change the outcome.
    """

    def __init__(
        self,
        store: OrderInputStore,
        submitter: OrderSubmitter,
        *,
        on_success: BalanceRefresh | None = None,
    ) -> None:
        self._store = store
        self._submitter = submitter
        self._on_success = on_success
        self._in_progress = False

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    def availability(self, account: str | None) -> SubmitAvailability:
        return submit_availability(
            self._store.state, account is not None, in_progress=self._in_progress
        )

    async def submit(self, account: str | None) -> SubmissionResult:
        """Submit the current order on behalf of ``account`` (``None`` = no wallet)."""
        availability = self.availability(account)
        if not availability.allowed:
            reason = availability.reason
            logger.info(
                "Submission refused",
                extra={"reason": reason.value if reason else None},
            )
            record_submission(
                SubmissionOutcome.REFUSED.value, reason.value if reason else None
            )
            return SubmissionResult(SubmissionOutcome.REFUSED, refusal_reason=reason)

        order = order_submission_from_state(self._store.state, account or "")
        self._in_progress = True
        try:
            result = await self._submit(order)
        finally:
            self._in_progress = False

        record_submission(result.outcome.value)
        if result.succeeded:
            logger.info(
                "Order submitted",
                extra={"pair_address": order.pair_address, "side": order.side.value},
            )
            self._store.reset_user_input()
            await self._refresh_balances()
        else:
            logger.warning(
                "Order submission failed",
                extra={
                    "outcome": result.outcome.value,
                    "status": result.status,
                    "error": result.error,
                },
            )
        return result

    async def _submit(self, order: OrderSubmission) -> SubmissionResult:
        try:
            response = await self._submitter.submit_order(order)
        except Exception as exc:
            logger.warning(
                "Order submitter raised",
                extra={"pair_address": order.pair_address, "error": str(exc)},
                exc_info=True,
            )
            return SubmissionResult(
                SubmissionOutcome.USER_ACTION_FAILURE,
                error=str(exc) or type(exc).__name__,
            )

        if not response.fulfilled:
            return SubmissionResult(
                SubmissionOutcome.USER_ACTION_FAILURE, status=response.status
            )
        if response.ledger_error:
            return SubmissionResult(SubmissionOutcome.LEDGER_FAILURE, status=response.status)
        return SubmissionResult(SubmissionOutcome.SUCCEEDED, status=response.status)

    async def _refresh_balances(self) -> None:
        if self._on_success is None:
            return
        try:
            await self._on_success()
        except Exception as exc:
            logger.warning(
                "Balance refresh after submission failed",
                extra={"error": str(exc)},
                exc_info=True,
            )


__all__ = [
    "BalanceRefresh",
    "RefusalReason",
    "SubmissionController",
    "SubmissionOutcome",
    "SubmissionResult",
    "SubmitAvailability",
    "submit_availability",
]
