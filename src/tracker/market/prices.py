"""PriceService - cached price lookups with an explicit fallback result."""

from __future__ import annotations

import structlog

from tracker.market.base import PriceProvider
from tracker.market.cache import PriceCache
from tracker.models import PriceQuote, PriceResolution

logger = structlog.get_logger(__name__)


class PriceService:
    """Looks up quotes through a TTL cache.

    There is no single-flight: two concurrent misses for the same ticker
    both reach the provider.
    """

    def __init__(self, provider: PriceProvider, cache: PriceCache):
        self._provider = provider
        self._cache = cache

    @property
    def cache(self) -> PriceCache:
        return self._cache

    async def _lookup(self, ticker: str) -> PriceQuote:
        """Cached quote or a fresh one from the provider. Propagates failures."""
        cached = await self._cache.get(ticker)
        if cached is not None:
            return cached
        quote = await self._provider.get_quote(ticker)
        await self._cache.put(quote)
        return quote

    async def get_quote(self, ticker: str) -> PriceQuote | None:
        """Return the current quote, or None when the lookup fails."""
        try:
            return await self._lookup(ticker.upper())
        except Exception as e:
            logger.warning("price_lookup_failed", ticker=ticker, error=str(e))
            return None

    async def resolve(self, ticker: str, fallback_price: float) -> PriceResolution:
        """Live price for ``ticker``, or ``fallback_price`` marked as a fallback."""
        ticker = ticker.upper()
        try:
            quote = await self._lookup(ticker)
        except Exception as e:
            logger.warning(
                "price_lookup_failed",
                ticker=ticker,
                fallback_price=fallback_price,
                error=str(e),
            )
            return PriceResolution.fallback(ticker, fallback_price, str(e) or type(e).__name__)
        return PriceResolution.live(quote)
