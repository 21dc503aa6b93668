"""Core data models for the portfolio tracker."""

from tracker.models.base import Category, FrozenModel, PriceSource
from tracker.models.position import ClosedPosition, Position
from tracker.models.quote import IndicatorSnapshot, PriceQuote, PriceResolution
from tracker.models.summary import (
    Insight,
    PortfolioSummary,
    PositionValuation,
    SectorSlice,
)

__all__ = [
    "Category",
    "ClosedPosition",
    "FrozenModel",
    "IndicatorSnapshot",
    "Insight",
    "PortfolioSummary",
    "Position",
    "PositionValuation",
    "PriceQuote",
    "PriceResolution",
    "PriceSource",
    "SectorSlice",
]
