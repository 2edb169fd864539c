"""Prometheus metrics for the order input engine."""

from __future__ import annotations

import re

from prometheus_client import Counter, Histogram

quote_requests_total = Counter(
    "order_input_quote_requests_total",
    "Quote requests by outcome (applied, stale, error)",
    ["outcome"],
)

quote_latency_seconds = Histogram(
    "order_input_quote_latency_seconds",
    "Quote collaborator latency",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

submissions_total = Counter(
    "order_input_submissions_total",
    "Order submissions by outcome",
    ["outcome"],
)

submission_refusals_total = Counter(
    "order_input_submission_refusals_total",
    "Submissions refused before reaching the wallet",
    ["reason"],
)


def _sanitize_label_value(value: str, *, fallback: str = "unknown") -> str:
    """Normalize label values to avoid raw exception messages."""
    if not value:
        return fallback
    normalized = value.strip().lower()
    normalized = re.sub(r"[^a-z0-9_-]+", "_", normalized)
    normalized = normalized.strip("_")
    return normalized or fallback


def record_quote_outcome(outcome: str, duration_seconds: float | None = None) -> None:
    quote_requests_total.labels(outcome=_sanitize_label_value(outcome)).inc()
    if duration_seconds is not None:
        quote_latency_seconds.observe(duration_seconds)


def record_submission(outcome: str, refusal_reason: str | None = None) -> None:
    submissions_total.labels(outcome=_sanitize_label_value(outcome)).inc()
    if refusal_reason is not None:
        submission_refusals_total.labels(reason=_sanitize_label_value(refusal_reason)).inc()


__all__ = [
    "quote_latency_seconds",
    "quote_requests_total",
    "record_quote_outcome",
    "record_submission",
    "submission_refusals_total",
    "submissions_total",
]
