"""Per-ticker price cache with a freshness window."""

from __future__ import annotations

import json
import time
from collections.abc import Callable

import structlog
from pydantic import ValidationError

from tracker.models import PriceQuote
from tracker.storage import KeyValueStore

logger = structlog.get_logger(__name__)

CACHE_KEY_PREFIX = "price-cache-"


class PriceCache:
    """Stores ``{"price": quote, "timestamp": seconds}`` under ``price-cache-<TICKER>``.

    Entries older than ``ttl_seconds`` read as absent. The clock is injected
    so tests can move time without sleeping.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        ttl_seconds: float = 600.0,
        clock: Callable[[], float] = time.time,
    ):
        self._kv = kv
        self._ttl = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @staticmethod
    def key_for(ticker: str) -> str:
        return CACHE_KEY_PREFIX + ticker.upper()

    async def get(self, ticker: str) -> PriceQuote | None:
        raw = await self._kv.get(self.key_for(ticker))
        if not raw:
            return None
        try:
            entry = json.loads(raw)
            timestamp = float(entry["timestamp"])
            quote = PriceQuote.model_validate(entry["price"])
        except (ValueError, KeyError, TypeError, ValidationError):
            logger.warning("price_cache_entry_corrupt", ticker=ticker)
            return None
        if self._clock() - timestamp >= self._ttl:
            return None
        return quote

    async def put(self, quote: PriceQuote) -> None:
        entry = {"price": quote.model_dump(mode="json"), "timestamp": self._clock()}
        await self._kv.set(self.key_for(quote.ticker), json.dumps(entry))

    async def invalidate(self, ticker: str) -> None:
        await self._kv.delete(self.key_for(ticker))
