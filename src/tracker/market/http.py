"""Shared async JSON fetching for the market data clients."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from tracker.market.base import MarketDataError
from tracker.market.rate_limiter import RateLimiter

logger = structlog.get_logger(__name__)

_USER_AGENT = "Mozilla/5.0 (compatible; stock-portfolio-tracker)"


class JsonHttpClient:
    """Thin wrapper over ``httpx.AsyncClient`` with uniform error mapping.

    Any transport error, non-2xx status or non-JSON body is raised as
    MarketDataError. No retries are attempted.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        rate_limiter: RateLimiter | None = None,
    ):
        self._owns_client = client is None
        if client is None:
            kwargs: dict[str, Any] = {"headers": {"User-Agent": _USER_AGENT}}
            if timeout is not None:
                kwargs["timeout"] = timeout
            client = httpx.AsyncClient(**kwargs)
        self._client = client
        self._rate_limiter = rate_limiter

    async def get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        if self._rate_limiter is not None:
            await self._rate_limiter.acquire()
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise MarketDataError(
                f"{url} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise MarketDataError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise MarketDataError(f"{url} returned invalid JSON") from e

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
