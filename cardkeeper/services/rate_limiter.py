"""
Minimum-spacing throttle for outbound catalog calls.

A leaky bucket of one: each call waits until at least `min_interval`
seconds have passed since the previous call fired. It bounds rate, not
burst. Each client owns its own limiter, so unrelated clients never share
a budget.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable


class RateLimiter:
    """
    Serializes callers and spaces them `min_interval` seconds apart.

    Args:
        min_interval: Minimum seconds between consecutive calls
        clock: Monotonic clock, injectable for tests
        sleep: Async sleep, injectable for tests
    """

    def __init__(
        self,
        min_interval: float = 0.1,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request: float | None = None
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        """Block until the next call may fire, then record it as fired."""
        async with self._lock:
            if self._last_request is not None:
                elapsed = self._clock() - self._last_request
                if elapsed < self.min_interval:
                    await self._sleep(self.min_interval - elapsed)
            self._last_request = self._clock()

    def reset(self) -> None:
        """Forget the last call time."""
        self._last_request = None
