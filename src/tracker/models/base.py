"""Base model and common enums for the portfolio tracker."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class FrozenModel(BaseModel):
    """Immutable base model."""

    model_config = ConfigDict(frozen=True)


class Category(str, Enum):
    """Sector classification of a holding."""

    TECHNOLOGY = "technology"
    FINANCIALS = "financials"
    ENERGY = "energy"
    HEALTHCARE = "healthcare"
    INDUSTRIALS = "industrials"
    CONSUMER = "consumer"
    OTHER = "other"
    UNKNOWN = "unknown"


class PriceSource(str, Enum):
    """Where the price used for a valuation came from."""

    LIVE = "live"
    FALLBACK = "fallback"
