"""Portfolio summary, per-position valuation and dashboard models."""

from datetime import datetime, timezone

from pydantic import Field

from tracker.models.base import Category, FrozenModel
from tracker.models.position import Position
from tracker.models.quote import PriceResolution


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PositionValuation(FrozenModel):
    """A single open position priced for display."""

    position: Position
    resolution: PriceResolution
    invested: float
    current_value: float
    profit: float
    profit_percentage: float


class PortfolioSummary(FrozenModel):
    """Aggregate view of the whole ledger.

    ``total_profit`` is cumulative: unrealized profit on open positions plus
    every realized profit ever booked.
    """

    total_invested: float = 0.0
    current_value: float = 0.0
    total_profit: float = 0.0
    total_profit_percentage: float = 0.0
    active_positions: int = 0
    closed_positions: int = 0
    fallback_tickers: list[str] = Field(default_factory=list)
    computed_at: datetime = Field(default_factory=_utcnow)


class SectorSlice(FrozenModel):
    """One sector's share of the open positions' purchase notional."""

    category: Category
    count: int
    total_value: float
    percentage: float


class Insight(FrozenModel):
    """Dashboard recommendation derived from the portfolio state."""

    code: str
    message: str
    severity: str = "info"
