"""Moving-average scanner over a fixed list of large-cap tickers.

For every symbol the scanner compares the price to its moving average and
keeps the symbol when the deviation is small and the company is large
enough. Symbols whose data cannot be fetched are left out of the report.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timezone

import structlog
from pydantic import Field

from tracker.market.base import IndicatorProvider
from tracker.models import FrozenModel, IndicatorSnapshot

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[int, int], None]


class ScanResult(FrozenModel):
    """A symbol that passed the filter."""

    symbol: str
    name: str
    sector: str
    price: float
    market_cap: float
    moving_average: float
    price_to_ma_pct: float


class ScanReport(FrozenModel):
    """Outcome of one scan."""

    results: list[ScanResult] = Field(default_factory=list)
    scanned: int = 0
    failed: list[str] = Field(default_factory=list)
    completed_at: datetime


def deviation_pct(price: float, moving_average: float) -> float:
    """Percentage distance of ``price`` from ``moving_average``."""
    return (price - moving_average) / moving_average * 100


class MovingAverageScanner:
    """Filters symbols by distance from their moving average and market cap."""

    def __init__(
        self,
        provider: IndicatorProvider,
        symbols: Sequence[str],
        ma_period: int = 150,
        max_deviation_pct: float = 5.0,
        min_market_cap: float = 1e9,
    ):
        self._provider = provider
        self._symbols = list(symbols)
        self._ma_period = ma_period
        self._max_deviation_pct = max_deviation_pct
        self._min_market_cap = min_market_cap
        self._last_report: ScanReport | None = None

    @property
    def symbols(self) -> list[str]:
        return list(self._symbols)

    @property
    def last_report(self) -> ScanReport | None:
        return self._last_report

    def evaluate(self, snapshot: IndicatorSnapshot) -> ScanResult | None:
        """Return a result when ``snapshot`` passes the filter."""
        deviation = deviation_pct(snapshot.price, snapshot.moving_average)
        if abs(deviation) > self._max_deviation_pct:
            return None
        if snapshot.market_cap < self._min_market_cap:
            return None
        return ScanResult(
            symbol=snapshot.symbol,
            name=snapshot.name,
            sector=snapshot.sector,
            price=snapshot.price,
            market_cap=snapshot.market_cap,
            moving_average=snapshot.moving_average,
            price_to_ma_pct=round(deviation, 2),
        )

    async def scan(self, on_progress: ProgressCallback | None = None) -> ScanReport:
        """Scan every symbol in order, one at a time."""
        results: list[ScanResult] = []
        failed: list[str] = []
        total = len(self._symbols)

        for i, symbol in enumerate(self._symbols, start=1):
            try:
                snapshot = await self._provider.get_snapshot(symbol, self._ma_period)
            except Exception as e:
                failed.append(symbol)
                logger.debug("scanner_symbol_failed", symbol=symbol, error=str(e))
            else:
                result = self.evaluate(snapshot)
                if result is not None:
                    results.append(result)
            if on_progress is not None:
                on_progress(i, total)

        report = ScanReport(
            results=results,
            scanned=total,
            failed=failed,
            completed_at=datetime.now(timezone.utc),
        )
        self._last_report = report
        logger.info(
            "scan_complete",
            scanned=total,
            matched=len(results),
            failed=len(failed),
        )
        return report

    def find(self, symbol: str) -> ScanResult | None:
        """Look up a symbol in the last report."""
        if self._last_report is None:
            return None
        symbol = symbol.upper()
        return next((r for r in self._last_report.results if r.symbol == symbol), None)
