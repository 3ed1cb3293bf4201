# -*- coding: utf-8 -*-
"""Bounded retry with exponential backoff for async operations."""

from __future__ import annotations

import asyncio
import structlog
from typing import Any, Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_SECONDS = 1.0


def backoff_delay(attempt: int, base_delay: float = DEFAULT_BASE_DELAY_SECONDS) -> float:
    """Delay after the given failed attempt (1-based): base, 2*base, 4*base, ..."""
    return base_delay * (2 ** (attempt - 1))


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    *,
    base_delay: float = DEFAULT_BASE_DELAY_SECONDS,
    logger: Optional[Any] = None,
) -> T:
    """Run operation up to max_attempts times, sleeping between failed attempts.

    Each attempt calls operation() from scratch. Every Exception is retried the
    same way; the last one propagates once attempts are exhausted.

    Args:
        operation: Zero-argument coroutine factory.
        max_attempts: Total attempts, first one included (>= 1).
        base_delay: Seconds to wait after the first failure; doubles each time.
        logger: Optional structlog logger (defaults to this module's logger).

    Returns:
        The first successful result.

    Raises:
        ValueError: If max_attempts < 1.
        Exception: The final attempt's failure.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    log = logger or structlog.get_logger(__name__)

    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as e:
            if attempt >= max_attempts:
                log.debug(
                    "retry_exhausted",
                    retry_attempt=attempt,
                    retry_max_attempts=max_attempts,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise
            delay = backoff_delay(attempt, base_delay)
            log.debug(
                "retry_scheduled",
                retry_attempt=attempt,
                retry_max_attempts=max_attempts,
                retry_delay_seconds=delay,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            await asyncio.sleep(delay)
            attempt += 1
