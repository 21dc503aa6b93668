"""Token bucket rate limiter for market data API calls."""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class ThrottleStats:
    """Counts of requests passed through a limiter."""

    total_requests: int = 0
    throttled_requests: int = 0
    total_wait_seconds: float = 0.0

    def record(self, wait_seconds: float = 0.0) -> None:
        self.total_requests += 1
        if wait_seconds > 0:
            self.throttled_requests += 1
            self.total_wait_seconds += wait_seconds


class RateLimiter:
    """Token bucket limiter.

    The bucket starts full (``burst_size`` tokens) and refills at
    ``requests_per_second``. ``acquire()`` waits when the bucket is empty.
    """

    def __init__(
        self,
        requests_per_second: float = 1.0,
        burst_size: int = 30,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
    ):
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        self._rate = requests_per_second
        self._burst_size = burst_size
        self._name = name
        self._clock = clock
        self._tokens = float(burst_size)
        self._last_refill = clock()
        self._lock = asyncio.Lock()
        self._stats = ThrottleStats()

    @property
    def name(self) -> str:
        return self._name

    @property
    def stats(self) -> ThrottleStats:
        return self._stats

    @property
    def tokens_remaining(self) -> float:
        self._refill()
        return self._tokens

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self._last_refill
        if elapsed > 0:
            self._tokens = min(self._tokens + elapsed * self._rate, float(self._burst_size))
            self._last_refill = now

    async def acquire(self) -> float:
        """Take one token. Returns the seconds spent waiting."""
        async with self._lock:
            self._refill()
            if self._tokens >= 1.0:
                self._tokens -= 1.0
                self._stats.record()
                return 0.0
            wait_seconds = (1.0 - self._tokens) / self._rate

        # Wait outside the lock so other coroutines can check
        await asyncio.sleep(wait_seconds)

        async with self._lock:
            self._refill()
            self._tokens = max(0.0, self._tokens - 1.0)
            self._stats.record(wait_seconds)
            logger.debug(
                "rate_limiter_throttled",
                limiter=self._name,
                wait_ms=round(wait_seconds * 1000, 1),
            )
        return wait_seconds
