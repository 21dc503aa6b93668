"""Market data models: quotes, price resolutions and indicator snapshots."""

from collections.abc import Sequence

from pydantic import Field

from tracker.models.base import FrozenModel, PriceSource


class PriceQuote(FrozenModel):
    """Latest price for a ticker and its change from the previous close."""

    ticker: str
    current_price: float
    change: float = 0.0
    change_percent: float = 0.0

    @classmethod
    def from_closes(cls, ticker: str, closes: Sequence[float]) -> "PriceQuote":
        """Build a quote from a daily close series, oldest first.

        The change is measured against the prior close; a single-close series
        has no change.
        """
        if not closes:
            raise ValueError(f"No closes for {ticker}")
        last = closes[-1]
        previous = closes[-2] if len(closes) > 1 else last
        change = last - previous
        change_percent = change / previous * 100 if previous else 0.0
        return cls(
            ticker=ticker,
            current_price=last,
            change=change,
            change_percent=change_percent,
        )


class PriceResolution(FrozenModel):
    """Price used to value a ticker, either live or the purchase-price fallback."""

    ticker: str
    price: float
    source: PriceSource
    quote: PriceQuote | None = None
    error: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.source == PriceSource.FALLBACK

    @classmethod
    def live(cls, quote: PriceQuote) -> "PriceResolution":
        return cls(
            ticker=quote.ticker,
            price=quote.current_price,
            source=PriceSource.LIVE,
            quote=quote,
        )

    @classmethod
    def fallback(cls, ticker: str, price: float, error: str) -> "PriceResolution":
        return cls(
            ticker=ticker,
            price=price,
            source=PriceSource.FALLBACK,
            error=error,
        )


class IndicatorSnapshot(FrozenModel):
    """Scanner inputs for one ticker."""

    symbol: str
    name: str
    sector: str
    price: float = Field(gt=0)
    market_cap: float = Field(gt=0)
    moving_average: float = Field(gt=0)
