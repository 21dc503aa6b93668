"""Finnhub client for scanner inputs."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from tracker.market.base import IndicatorProvider, MarketDataError
from tracker.market.http import JsonHttpClient
from tracker.market.rate_limiter import RateLimiter
from tracker.models import IndicatorSnapshot

logger = structlog.get_logger(__name__)

# profile2 reports market capitalization in millions
_MARKET_CAP_UNIT = 1_000_000


class FinnhubIndicatorProvider(IndicatorProvider):
    """Combines /quote, /stock/profile2 and the SMA indicator for one symbol.

    Three requests per symbol; all go through the shared rate limiter.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://finnhub.io/api/v1",
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        rate_limiter: RateLimiter | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._http = JsonHttpClient(
            client=client, timeout=timeout, rate_limiter=rate_limiter
        )

    async def _get(self, path: str, **params: Any) -> dict:
        data = await self._http.get_json(
            f"{self._base_url}{path}", params={**params, "token": self._api_key}
        )
        if not isinstance(data, dict):
            raise MarketDataError(f"Unexpected response from {path}")
        return data

    async def get_snapshot(self, symbol: str, ma_period: int = 150) -> IndicatorSnapshot:
        quote = await self._get("/quote", symbol=symbol)
        profile = await self._get("/stock/profile2", symbol=symbol)
        indicator = await self._get(
            "/indicator", symbol=symbol, indicator="sma", timeperiod=ma_period
        )

        price = quote.get("c") or None
        cap_millions = profile.get("marketCapitalization") or None
        sma = indicator.get("sma")
        moving_average = sma[-1] if isinstance(sma, list) and sma else None

        if not price or not cap_millions or not moving_average:
            logger.debug(
                "scanner_data_missing",
                symbol=symbol,
                price=price,
                market_cap=cap_millions,
                moving_average=moving_average,
            )
            raise MarketDataError(f"Incomplete scanner data for {symbol}")

        return IndicatorSnapshot(
            symbol=symbol,
            name=profile.get("name") or symbol,
            sector=profile.get("finnhubIndustry") or "unknown",
            price=float(price),
            market_cap=float(cap_millions) * _MARKET_CAP_UNIT,
            moving_average=float(moving_average),
        )

    async def close(self) -> None:
        await self._http.close()
