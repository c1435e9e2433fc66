"""Bounded retry with exponential backoff for async calls."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExhaustedError(Exception):
    """Every attempt failed; ``last_error`` is the final cause."""

    def __init__(self, attempts: int, last_error: BaseException):
        super().__init__(f"gave up after {attempts} attempt(s): {last_error}")
        self.attempts = attempts
        self.last_error = last_error


@dataclass
class RetryPolicy:
    """Retry ``retry_on`` exceptions with delays base, 2*base, 4*base, ...

    No sleep follows the last attempt.  ``sleep`` is injectable so tests
    can run without waiting.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    retry_on: tuple[type[BaseException], ...] = (Exception,)
    sleep: Callable[[float], Awaitable[Any]] = field(default=asyncio.sleep, repr=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay < 0:
            raise ValueError(f"base_delay must be >= 0, got {self.base_delay}")

    def delay_for(self, attempt: int) -> float:
        """Delay after the zero-based ``attempt``."""
        return self.base_delay * 2 ** attempt

    async def call(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        last_error: BaseException | None = None
        for attempt in range(self.max_attempts):
            try:
                return await func(*args, **kwargs)
            except self.retry_on as exc:
                last_error = exc
                if attempt < self.max_attempts - 1:
                    delay = self.delay_for(attempt)
                    logger.warning(
                        "Attempt %d/%d failed (%s), retrying in %.1fs",
                        attempt + 1, self.max_attempts, exc, delay,
                    )
                    await self.sleep(delay)

        assert last_error is not None
        raise RetryExhaustedError(self.max_attempts, last_error) from last_error
