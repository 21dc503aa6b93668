"""Portfolio valuation: summary, sector distribution, insights and refresh."""

from tracker.valuation.engine import (
    ValuationEngine,
    sector_distribution,
    summarize,
    value_position,
)
from tracker.valuation.insights import build_insights
from tracker.valuation.refresher import SummaryRefresher

__all__ = [
    "SummaryRefresher",
    "ValuationEngine",
    "build_insights",
    "sector_distribution",
    "summarize",
    "value_position",
]
