"""Main entry point for the portfolio tracker."""

import asyncio
from datetime import date

import structlog

from tracker.config import Settings, load_settings
from tracker.ledger import LedgerStore, PositionLifecycleManager
from tracker.market import (
    CategoryProvider,
    IndicatorProvider,
    PriceCache,
    PriceProvider,
    PriceService,
    RateLimiter,
)
from tracker.market.finnhub import FinnhubIndicatorProvider
from tracker.market.yahoo import YahooPriceProvider, YahooProfileProvider
from tracker.models import (
    Category,
    Insight,
    PortfolioSummary,
    Position,
    PositionValuation,
    SectorSlice,
)
from tracker.monitoring.logger import setup_logging
from tracker.scanner import MovingAverageScanner, ScanResult
from tracker.storage import KeyValueStore, SqlKeyValueStore
from tracker.valuation import SummaryRefresher, ValuationEngine, build_insights

logger = structlog.get_logger()


class PortfolioTracker:
    """Wires the ledger, market data, valuation and scanner together.

    Collaborators can be injected; anything left out is built from settings.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        kv: KeyValueStore | None = None,
        price_provider: PriceProvider | None = None,
        category_provider: CategoryProvider | None = None,
        indicator_provider: IndicatorProvider | None = None,
    ):
        self._settings = settings or load_settings()
        s = self._settings
        self._kv = kv or SqlKeyValueStore(database_url=s.database_url)
        self._price_provider = price_provider or YahooPriceProvider(
            chart_url=s.yahoo_chart_url,
            chart_range=s.yahoo_chart_range,
            timeout=s.http_timeout_seconds,
        )
        self._category_provider = category_provider or YahooProfileProvider(
            summary_url=s.yahoo_summary_url,
            search_url=s.yahoo_search_url,
            timeout=s.http_timeout_seconds,
        )
        self._indicator_provider = indicator_provider or FinnhubIndicatorProvider(
            api_key=s.finnhub_api_key,
            base_url=s.finnhub_base_url,
            timeout=s.http_timeout_seconds,
            rate_limiter=RateLimiter(
                requests_per_second=s.finnhub_requests_per_second,
                burst_size=s.finnhub_burst_size,
                name="finnhub",
            ),
        )

        self._store = LedgerStore(self._kv, storage_key=s.storage_key)
        self._lifecycle = PositionLifecycleManager(self._store, self._category_provider)
        self._prices = PriceService(
            self._price_provider,
            PriceCache(self._kv, ttl_seconds=s.price_cache_ttl_seconds),
        )
        self._valuation = ValuationEngine(self._prices)
        self._scanner = MovingAverageScanner(
            self._indicator_provider,
            symbols=s.scanner_symbols,
            ma_period=s.scanner_ma_period,
            max_deviation_pct=s.scanner_max_deviation_pct,
            min_market_cap=s.scanner_min_market_cap,
        )
        self._refresher = SummaryRefresher(
            self.compute_summary, interval_seconds=s.refresh_interval_seconds
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def lifecycle(self) -> PositionLifecycleManager:
        return self._lifecycle

    @property
    def prices(self) -> PriceService:
        return self._prices

    @property
    def valuation(self) -> ValuationEngine:
        return self._valuation

    @property
    def scanner(self) -> MovingAverageScanner:
        return self._scanner

    @property
    def refresher(self) -> SummaryRefresher:
        return self._refresher

    async def initialize(self) -> None:
        await self._kv.initialize()
        logger.info("tracker_initialized", storage_key=self._settings.storage_key)

    async def close(self) -> None:
        await self._refresher.stop()
        for provider in (
            self._price_provider,
            self._category_provider,
            self._indicator_provider,
        ):
            await provider.close()
        await self._kv.close()

    # ------------------------------------------------------------------
    # Read models
    # ------------------------------------------------------------------

    async def compute_summary(self) -> PortfolioSummary:
        open_positions = await self._lifecycle.list_open()
        closed_positions = await self._lifecycle.list_closed()
        return await self._valuation.compute_summary(open_positions, closed_positions)

    async def summary(self) -> PortfolioSummary:
        """Fresh summary, or the newer one if another refresh already landed."""
        applied = await self._refresher.refresh()
        if applied is not None:
            return applied
        latest = self._refresher.latest
        return latest if latest is not None else await self.compute_summary()

    async def valuations(
        self, category: Category | None = None
    ) -> list[PositionValuation]:
        positions = await self._lifecycle.list_open(category)
        return await self._valuation.value_positions(positions)

    async def sectors(self) -> list[SectorSlice]:
        return self._valuation.sector_distribution(await self._lifecycle.list_open())

    async def insights(self, today: date | None = None) -> list[Insight]:
        summary = await self.summary()
        return build_insights(
            summary,
            await self.sectors(),
            await self._lifecycle.list_closed(),
            today or date.today(),
        )

    # ------------------------------------------------------------------
    # Scanner
    # ------------------------------------------------------------------

    async def add_scan_result(
        self, result: ScanResult, purchase_date: date | None = None
    ) -> Position:
        """Open a single-share position at the scanned price."""
        return await self._lifecycle.open_position(
            ticker=result.symbol,
            name=result.name,
            purchase_date=purchase_date or date.today(),
            purchase_price=result.price,
            quantity=1,
        )


async def serve(settings: Settings | None = None) -> None:
    """Run the dashboard API with the periodic summary refresh."""
    import uvicorn

    from tracker.dashboard import app as dashboard_module

    settings = settings or load_settings()
    setup_logging(settings.log_level)

    tracker = PortfolioTracker(settings)
    await tracker.initialize()
    dashboard_module.set_tracker(tracker)
    dashboard_module.configure_cors(settings.allowed_origins)
    tracker.refresher.start()

    config = uvicorn.Config(
        app=dashboard_module.app,
        host=settings.dashboard_host,
        port=settings.dashboard_port,
        log_level="warning",
    )
    server = uvicorn.Server(config)
    logger.info("dashboard_started", port=settings.dashboard_port)
    try:
        await server.serve()
    finally:
        await tracker.close()
        logger.info("tracker_stopped")


if __name__ == "__main__":
    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        pass
