"""Minimum-spacing rate limiter for upstream API calls."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

DEFAULT_MIN_INTERVAL_SECONDS = 1.2


class RateLimiter:
    """Delay callers so consecutive requests are at least ``min_interval`` apart.

    The last request time is plain shared state. This is safe because every
    caller runs on the same event loop; do not share an instance across
    threads.

    Args:
        min_interval: Minimum spacing between requests, in seconds.
        clock: Monotonic clock returning seconds.
        sleep: Coroutine used to wait.
    """

    def __init__(
        self,
        min_interval: float = DEFAULT_MIN_INTERVAL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request_time: float | None = None

    @property
    def min_interval(self) -> float:
        return self._min_interval

    async def wait(self) -> None:
        """Wait until the next request is allowed, then claim the slot."""
        if self._last_request_time is not None:
            elapsed = self._clock() - self._last_request_time
            if elapsed < self._min_interval:
                wait_time = self._min_interval - elapsed
                logger.debug("Rate limit: waiting %.3fs", wait_time)
                self._last_request_time = self._clock() + wait_time
                await self._sleep(wait_time)
                return
        self._last_request_time = self._clock()
