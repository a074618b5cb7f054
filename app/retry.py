"""Bounded retry with exponential backoff for transient provider failures."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from app.errors import RetriesExhaustedError, TransientError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class RetryPolicy:
    """Retry only :class:`TransientError`; everything else propagates at once.

    ``attempts`` counts the first try, so ``attempts=3`` means up to two
    retries, waiting ``backoff``, then ``2 * backoff`` seconds.
    """

    attempts: int = 3
    backoff: float = 0.5
    sleep: Sleep = field(default=asyncio.sleep, repr=False)

    async def run(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        last_error: TransientError | None = None
        for attempt in range(1, self.attempts + 1):
            try:
                return await call()
            except TransientError as exc:
                last_error = exc
                logger.warning(
                    "%s failed: %s",
                    operation,
                    exc.message,
                    extra={"attempt": f"{attempt}/{self.attempts}", "status": exc.status},
                )
                if attempt == self.attempts:
                    break
                delay = self.backoff * (2 ** (attempt - 1))
                logger.info("Retrying %s", operation, extra={"delay": delay})
                await self.sleep(delay)

        if self.attempts == 1 and last_error is not None:
            raise last_error
        raise RetriesExhaustedError(operation, self.attempts) from last_error
