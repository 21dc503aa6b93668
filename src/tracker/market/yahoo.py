"""Yahoo Finance clients for prices, sector classification and names."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from tracker.market.base import CategoryProvider, MarketDataError, PriceProvider
from tracker.market.categories import classify
from tracker.market.http import JsonHttpClient
from tracker.models import Category, PriceQuote

logger = structlog.get_logger(__name__)


class YahooPriceProvider(PriceProvider):
    """Derives quotes from the daily close series of the chart endpoint."""

    def __init__(
        self,
        chart_url: str = "https://query1.finance.yahoo.com/v8/finance/chart",
        chart_range: str = "3mo",
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        self._chart_url = chart_url.rstrip("/")
        self._range = chart_range
        self._http = JsonHttpClient(client=client, timeout=timeout)

    async def get_quote(self, ticker: str) -> PriceQuote:
        data = await self._http.get_json(
            f"{self._chart_url}/{ticker}",
            params={"interval": "1d", "range": self._range},
        )
        closes = _extract_closes(data)
        if not closes:
            raise MarketDataError(f"No close prices for {ticker}")
        return PriceQuote.from_closes(ticker, closes)

    async def close(self) -> None:
        await self._http.close()


def _extract_closes(data: Any) -> list[float]:
    """Pull non-null closes out of a chart response, oldest first."""
    try:
        result = (data.get("chart") or {}).get("result") or []
        if not result:
            return []
        raw = result[0]["indicators"]["quote"][0]["close"] or []
    except (AttributeError, KeyError, IndexError, TypeError) as e:
        raise MarketDataError("Malformed chart response") from e
    return [float(c) for c in raw if c is not None]


class YahooProfileProvider(CategoryProvider):
    """Sector/industry from quoteSummary and display names from search."""

    def __init__(
        self,
        summary_url: str = "https://query2.finance.yahoo.com/v10/finance/quoteSummary",
        search_url: str = "https://query1.finance.yahoo.com/v1/finance/search",
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        self._summary_url = summary_url.rstrip("/")
        self._search_url = search_url
        self._http = JsonHttpClient(client=client, timeout=timeout)

    async def get_category(self, ticker: str) -> Category:
        data = await self._http.get_json(
            f"{self._summary_url}/{ticker}", params={"modules": "assetProfile"}
        )
        try:
            result = (data.get("quoteSummary") or {}).get("result") or []
            profile = (result[0].get("assetProfile") or {}) if result else {}
        except (AttributeError, IndexError, TypeError) as e:
            raise MarketDataError(f"Malformed profile response for {ticker}") from e
        return classify(profile.get("sector"), profile.get("industry"))

    async def get_name(self, ticker: str) -> str:
        data = await self._http.get_json(self._search_url, params={"q": ticker})
        quotes = data.get("quotes") if isinstance(data, dict) else None
        for quote in quotes or []:
            if str(quote.get("symbol", "")).upper() == ticker.upper():
                name = quote.get("shortname") or quote.get("longname")
                if name:
                    return name
        raise MarketDataError(f"No name found for {ticker}")

    async def close(self) -> None:
        await self._http.close()
