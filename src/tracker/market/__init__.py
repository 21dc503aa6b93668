"""Market data lookups: providers, cache and price service."""

from tracker.market.base import (
    CategoryProvider,
    IndicatorProvider,
    MarketDataError,
    PriceProvider,
)
from tracker.market.cache import PriceCache
from tracker.market.categories import CATEGORY_RULES, classify
from tracker.market.prices import PriceService
from tracker.market.rate_limiter import RateLimiter

__all__ = [
    "CATEGORY_RULES",
    "CategoryProvider",
    "IndicatorProvider",
    "MarketDataError",
    "PriceCache",
    "PriceProvider",
    "PriceService",
    "RateLimiter",
    "classify",
]
