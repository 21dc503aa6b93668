"""Tests for the token bucket rate limiter."""

import asyncio
from unittest.mock import patch

import pytest

from tracker.market import RateLimiter
from tracker.market.rate_limiter import ThrottleStats


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestThrottleStats:
    def test_record(self):
        stats = ThrottleStats()
        stats.record()
        stats.record(0.5)
        assert stats.total_requests == 2
        assert stats.throttled_requests == 1
        assert stats.total_wait_seconds == 0.5


class TestRateLimiter:
    def test_invalid_rate(self):
        with pytest.raises(ValueError):
            RateLimiter(requests_per_second=0)

    async def test_burst_without_wait(self):
        limiter = RateLimiter(requests_per_second=1.0, burst_size=3, clock=FakeClock())
        for _ in range(3):
            assert await limiter.acquire() == 0.0
        assert limiter.stats.total_requests == 3
        assert limiter.stats.throttled_requests == 0

    async def test_waits_when_empty(self):
        clock = FakeClock()
        limiter = RateLimiter(requests_per_second=2.0, burst_size=1, clock=clock)
        await limiter.acquire()

        sleeps = []

        async def fake_sleep(seconds):
            sleeps.append(seconds)
            clock.now += seconds

        with patch("tracker.market.rate_limiter.asyncio.sleep", fake_sleep):
            waited = await limiter.acquire()

        assert waited == pytest.approx(0.5)
        assert sleeps == [pytest.approx(0.5)]
        assert limiter.stats.throttled_requests == 1

    async def test_refills_over_time(self):
        clock = FakeClock()
        limiter = RateLimiter(requests_per_second=1.0, burst_size=2, clock=clock)
        await limiter.acquire()
        await limiter.acquire()
        assert limiter.tokens_remaining == pytest.approx(0.0)
        clock.now += 1.5
        assert limiter.tokens_remaining == pytest.approx(1.5)
        clock.now += 10
        assert limiter.tokens_remaining == pytest.approx(2.0)

    async def test_real_sleep_small_rate(self):
        limiter = RateLimiter(requests_per_second=100.0, burst_size=1)
        await limiter.acquire()
        waited = await asyncio.wait_for(limiter.acquire(), timeout=1.0)
        assert 0.0 < waited <= 0.011
