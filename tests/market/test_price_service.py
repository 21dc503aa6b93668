"""Tests for PriceService."""

from unittest.mock import AsyncMock

import pytest

from tracker.market import MarketDataError, PriceCache, PriceProvider, PriceService
from tracker.models import PriceQuote, PriceSource
from tracker.storage import MemoryKeyValueStore


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _quote(ticker: str = "AAPL", price: float = 175.5) -> PriceQuote:
    return PriceQuote(ticker=ticker, current_price=price)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider():
    p = AsyncMock(spec=PriceProvider)
    p.get_quote.side_effect = lambda ticker: _quote(ticker)
    return p


@pytest.fixture
def service(provider, clock):
    return PriceService(provider, PriceCache(MemoryKeyValueStore(), 600.0, clock=clock))


class TestGetQuote:
    async def test_fetches_and_caches(self, service, provider):
        assert (await service.get_quote("AAPL")).current_price == 175.5
        assert (await service.get_quote("AAPL")).current_price == 175.5
        provider.get_quote.assert_awaited_once_with("AAPL")

    async def test_refetches_after_ttl(self, service, provider, clock):
        await service.get_quote("AAPL")
        clock.now += 601
        await service.get_quote("AAPL")
        assert provider.get_quote.await_count == 2

    async def test_failure_returns_none(self, service, provider):
        provider.get_quote.side_effect = MarketDataError("down")
        assert await service.get_quote("AAPL") is None

    async def test_failure_not_cached(self, service, provider):
        provider.get_quote.side_effect = MarketDataError("down")
        await service.get_quote("AAPL")
        provider.get_quote.side_effect = lambda ticker: _quote(ticker, 180.0)
        assert (await service.get_quote("AAPL")).current_price == 180.0

    async def test_ticker_upper_cased(self, service, provider):
        await service.get_quote("aapl")
        provider.get_quote.assert_awaited_once_with("AAPL")


class TestResolve:
    async def test_live(self, service):
        res = await service.resolve("AAPL", 150.0)
        assert res.source == PriceSource.LIVE
        assert res.price == 175.5
        assert res.quote.current_price == 175.5

    async def test_fallback_on_failure(self, service, provider):
        provider.get_quote.side_effect = MarketDataError("no data")
        res = await service.resolve("AAPL", 150.0)
        assert res.source == PriceSource.FALLBACK
        assert res.price == 150.0
        assert res.error == "no data"
        assert res.quote is None

    async def test_fallback_on_unexpected_error(self, service, provider):
        provider.get_quote.side_effect = RuntimeError()
        res = await service.resolve("AAPL", 99.0)
        assert res.is_fallback
        assert res.error == "RuntimeError"

    async def test_served_from_cache(self, service, provider):
        await service.resolve("AAPL", 150.0)
        provider.get_quote.side_effect = MarketDataError("down")
        res = await service.resolve("AAPL", 150.0)
        assert res.source == PriceSource.LIVE
