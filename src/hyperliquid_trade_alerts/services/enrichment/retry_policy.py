# -*- coding: utf-8 -*-
"""Retry schedule for lookups: a pacing delay before the first attempt, then exponential backoff."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from hyperliquid_trade_alerts.exceptions import EnrichmentLookupError, RetryExhaustedError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """How many times to try an operation and how long to wait before each try.

    Attempt 0 waits pacing_delay_seconds (smooths the request rate even when
    nothing fails). Attempt n >= 1 waits base_delay_seconds * 2 ** (n - 1).
    One initial attempt plus up to max_retries retries.
    """

    max_retries: int = 3
    pacing_delay_seconds: float = 0.5
    base_delay_seconds: float = 1.0

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait before the given zero-based attempt."""
        if attempt <= 0:
            return self.pacing_delay_seconds
        return self.base_delay_seconds * (2 ** (attempt - 1))

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        retry_on: tuple[type[BaseException], ...] = (EnrichmentLookupError,),
        on_failure: Callable[[int, BaseException], Any] | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> T:
        """Call operation until it succeeds or attempts run out. Attempts are sequential.

        Args:
            operation: Zero-argument coroutine factory; called once per attempt.
            retry_on: Exception types that count as a failed attempt. Anything
                else propagates immediately.
            on_failure: Called with (attempt, error) after each failed attempt.
            sleep: Sleep function (injected for tests).

        Returns:
            The operation's result.

        Raises:
            RetryExhaustedError: If every attempt failed.
        """
        last_error: BaseException | None = None
        for attempt in range(self.max_attempts):
            delay = self.delay_for(attempt)
            if delay > 0:
                await sleep(delay)
            try:
                return await operation()
            except retry_on as e:
                last_error = e
                if on_failure is not None:
                    on_failure(attempt, e)
        raise RetryExhaustedError(
            self.max_attempts,
            last_error if isinstance(last_error, Exception) else None,
        ) from last_error
