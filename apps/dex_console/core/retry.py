"""Retry utilities for DEX gateway calls."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = {"GET", "HEAD"}

_T = TypeVar("_T")


def _should_retry(exc: Exception, method: str) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500 and method in IDEMPOTENT_METHODS
    return False


def with_retry(
    max_attempts: int = 3,
    backoff_base: float = 0.5,
    method: str = "GET",
) -> Callable[[Callable[..., Awaitable[_T]]], Callable[..., Awaitable[_T]]]:
    """Return an idempotency-aware async retry decorator.

    - Idempotent methods (GET, HEAD): retry on transport errors and 5xx.
    - Non-idempotent methods: retry on transport errors only, so a wallet
      action is never sent twice after the gateway accepted it.
    - Never retry on 4xx.

    Backoff doubles per attempt starting at ``backoff_base`` seconds.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    method_upper = method.upper()

    def decorator(func: Callable[..., Awaitable[_T]]) -> Callable[..., Awaitable[_T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> _T:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except (httpx.TransportError, httpx.HTTPStatusError) as exc:
                    attempt += 1
                    if attempt >= max_attempts or not _should_retry(exc, method_upper):
                        raise
                    delay = backoff_base * (2 ** (attempt - 1))
                    logger.warning(
                        "Retrying gateway call",
                        extra={
                            "call": func.__name__,
                            "attempt": attempt,
                            "delay_seconds": delay,
                            "error": type(exc).__name__,
                        },
                    )
                    await asyncio.sleep(delay)

        return wrapper

    return decorator


__all__ = ["IDEMPOTENT_METHODS", "with_retry"]
