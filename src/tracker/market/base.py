"""Abstract market data provider interfaces."""

from abc import ABC, abstractmethod

from tracker.models import Category, IndicatorSnapshot, PriceQuote


class MarketDataError(Exception):
    """A market data lookup failed or returned unusable data."""


class PriceProvider(ABC):
    """Source of current prices."""

    @abstractmethod
    async def get_quote(self, ticker: str) -> PriceQuote:
        """Return the latest quote. Raises MarketDataError on failure."""

    async def close(self) -> None:
        """Clean up resources. Override if needed."""


class CategoryProvider(ABC):
    """Source of sector classifications and display names."""

    @abstractmethod
    async def get_category(self, ticker: str) -> Category:
        """Return the ticker's category. Raises MarketDataError on failure."""

    @abstractmethod
    async def get_name(self, ticker: str) -> str:
        """Return the ticker's display name. Raises MarketDataError on failure."""

    async def close(self) -> None:
        """Clean up resources. Override if needed."""


class IndicatorProvider(ABC):
    """Source of scanner inputs: quote, company profile and moving average."""

    @abstractmethod
    async def get_snapshot(self, symbol: str, ma_period: int = 150) -> IndicatorSnapshot:
        """Return the scanner snapshot. Raises MarketDataError on failure."""

    async def close(self) -> None:
        """Clean up resources. Override if needed."""
