"""Resilience – RetryPolicy with exponential backoff.

Used at startup while the database may still be coming up. Inside
``consume`` nothing is retried: a failed save is logged and left to the
next persist cycle.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

from order_views.observability.logging import get_logger

T = TypeVar("T")
log = get_logger(__name__)


class ExponentialBackoff:
    """Delay doubles after each failure: ``initial * 2^(attempt-1)``, capped at ``maximum``."""

    def __init__(self, initial: float = 2.0, maximum: float = 30.0) -> None:
        self._initial = initial
        self._maximum = maximum

    def compute(self, attempt: int) -> float:
        return min(self._initial * (2 ** (attempt - 1)), self._maximum)


class RetryPolicy:
    """Retry an async callable a bounded number of times."""

    def __init__(
        self,
        max_attempts: int = 10,
        backoff: ExponentialBackoff | None = None,
        retryable_exceptions: tuple[type[Exception], ...] = (Exception,),
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.max_attempts = max_attempts
        self.backoff = backoff or ExponentialBackoff()
        self.retryable_exceptions = retryable_exceptions
        self._sleep = sleep

    async def execute_async(self, func: Callable[[], Awaitable[T]]) -> T:
        """Await *func* until it succeeds; re-raise the last error when attempts run out."""
        attempt = 1
        while True:
            try:
                return await func()
            except self.retryable_exceptions as exc:
                if attempt >= self.max_attempts:
                    raise
                delay = self.backoff.compute(attempt)
                log.warning(
                    "retry_attempt_failed",
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    delay_s=delay,
                    error=str(exc),
                )
                await self._sleep(delay)
                attempt += 1


__all__ = ["ExponentialBackoff", "RetryPolicy"]
