"""
Rolling-window rate limiter for outbound calls.

At most ``max_calls`` acquisitions complete within any ``period``-second
window. Waiters are served in arrival order: they queue on a single
asyncio.Lock, which wakes waiters FIFO.

A permit is recorded only at the moment it is granted, so a caller cancelled
while waiting consumes nothing.
"""

import asyncio
import logging
import time
from collections import deque
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Async rate limiter shared by every outbound call of a gateway.

    Example:
        limiter = RateLimiter(max_calls=5, period=1.0)

        await limiter.acquire()
        # or
        async with limiter:
            ...
    """

    def __init__(
        self,
        max_calls: int,
        period: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_calls < 1:
            raise ValueError("max_calls must be at least 1")
        if period <= 0:
            raise ValueError("period must be positive")
        self.max_calls = max_calls
        self.period = period
        self._clock = clock
        self._grants: deque[float] = deque()
        self._lock = asyncio.Lock()

    def _prune(self, now: float) -> None:
        window_start = now - self.period
        while self._grants and self._grants[0] <= window_start:
            self._grants.popleft()

    async def acquire(self) -> None:
        """Wait until a permit is available, then take it."""
        async with self._lock:
            while True:
                now = self._clock()
                self._prune(now)
                if len(self._grants) < self.max_calls:
                    self._grants.append(now)
                    return
                wait_time = self._grants[0] + self.period - now
                logger.debug(f"Rate limit reached, waiting {wait_time:.3f}s")
                await asyncio.sleep(wait_time)

    @property
    def in_window(self) -> int:
        """Permits granted within the current window."""
        self._prune(self._clock())
        return len(self._grants)

    async def __aenter__(self) -> "RateLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None
