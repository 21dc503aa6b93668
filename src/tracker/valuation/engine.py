"""Valuation engine - prices open positions and aggregates the portfolio summary."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from tracker.market.prices import PriceService
from tracker.models import (
    Category,
    ClosedPosition,
    PortfolioSummary,
    Position,
    PositionValuation,
    PriceResolution,
    SectorSlice,
)

logger = structlog.get_logger(__name__)


def value_position(position: Position, resolution: PriceResolution) -> PositionValuation:
    """Value one position at the resolved price."""
    invested = position.invested
    current_value = resolution.price * position.quantity
    profit = current_value - invested
    return PositionValuation(
        position=position,
        resolution=resolution,
        invested=invested,
        current_value=current_value,
        profit=profit,
        profit_percentage=profit / invested * 100 if invested > 0 else 0.0,
    )


def summarize(
    valuations: Sequence[PositionValuation],
    closed: Sequence[ClosedPosition],
) -> PortfolioSummary:
    """Aggregate priced open positions and the realized history.

    Realized profit is added in full regardless of when the sale happened.
    """
    total_invested = sum(v.invested for v in valuations)
    current_value = sum(v.current_value for v in valuations)
    unrealized = sum(v.profit for v in valuations)
    realized = sum(c.total_profit for c in closed)
    total_profit = unrealized + realized

    fallback_tickers: list[str] = []
    for v in valuations:
        if v.resolution.is_fallback and v.position.ticker not in fallback_tickers:
            fallback_tickers.append(v.position.ticker)

    return PortfolioSummary(
        total_invested=total_invested,
        current_value=current_value,
        total_profit=total_profit,
        total_profit_percentage=(
            total_profit / total_invested * 100 if total_invested > 0 else 0.0
        ),
        active_positions=len(valuations),
        closed_positions=len(closed),
        fallback_tickers=fallback_tickers,
    )


def sector_distribution(positions: Sequence[Position]) -> list[SectorSlice]:
    """Share of purchase notional per category, largest first.

    Uses purchase price rather than live price. Sectors with equal shares
    keep the order in which they were first seen.
    """
    totals: dict[Category, list[float]] = {}
    for p in positions:
        bucket = totals.setdefault(p.category, [0, 0.0])
        bucket[0] += 1
        bucket[1] += p.invested

    grand_total = sum(value for _, value in totals.values())
    slices = [
        SectorSlice(
            category=category,
            count=int(count),
            total_value=value,
            percentage=value / grand_total * 100 if grand_total > 0 else 0.0,
        )
        for category, (count, value) in totals.items()
    ]
    # sorted() is stable, so ties stay in first-seen order
    return sorted(slices, key=lambda s: s.percentage, reverse=True)


class ValuationEngine:
    """Combines the ledger with live prices. Never mutates the ledger."""

    def __init__(self, price_service: PriceService):
        self._prices = price_service

    async def resolve_prices(
        self, positions: Sequence[Position]
    ) -> list[PriceResolution]:
        """One resolution per position, falling back to its purchase price.

        Each distinct ticker is looked up once; positions sharing a ticker
        share the live price but keep their own fallback price.
        """
        first_price: dict[str, float] = {}
        for p in positions:
            first_price.setdefault(p.ticker, p.purchase_price)
        tickers = list(first_price)
        resolved = await asyncio.gather(
            *(self._prices.resolve(t, first_price[t]) for t in tickers)
        )
        by_ticker = dict(zip(tickers, resolved))

        resolutions = []
        for p in positions:
            res = by_ticker[p.ticker]
            if res.is_fallback and res.price != p.purchase_price:
                res = PriceResolution.fallback(p.ticker, p.purchase_price, res.error or "")
            resolutions.append(res)
        return resolutions

    async def value_positions(
        self, positions: Sequence[Position]
    ) -> list[PositionValuation]:
        resolutions = await self.resolve_prices(positions)
        return [value_position(p, r) for p, r in zip(positions, resolutions)]

    async def compute_summary(
        self,
        open_positions: Sequence[Position],
        closed_positions: Sequence[ClosedPosition],
    ) -> PortfolioSummary:
        valuations = await self.value_positions(open_positions)
        summary = summarize(valuations, closed_positions)
        logger.debug(
            "summary_computed",
            invested=round(summary.total_invested, 2),
            value=round(summary.current_value, 2),
            profit=round(summary.total_profit, 2),
            fallbacks=len(summary.fallback_tickers),
        )
        return summary

    @staticmethod
    def sector_distribution(positions: Sequence[Position]) -> list[SectorSlice]:
        return sector_distribution(positions)
