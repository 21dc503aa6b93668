"""Open and closed position models."""

from datetime import date

from pydantic import Field, field_validator

from tracker.models.base import Category, FrozenModel


class Position(FrozenModel):
    """A holding currently in the open collection."""

    id: str = Field(min_length=1)
    ticker: str = Field(min_length=1)
    name: str = ""
    purchase_date: date
    purchase_price: float = Field(gt=0)
    quantity: int = Field(gt=0)
    category: Category = Category.UNKNOWN
    is_active: bool = True

    @field_validator("ticker")
    @classmethod
    def normalize_ticker(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def invested(self) -> float:
        return self.purchase_price * self.quantity


class ClosedPosition(Position):
    """A sold holding with its realized result."""

    is_active: bool = False
    sale_date: date
    sale_price: float = Field(ge=0)
    total_profit: float
    profit_percentage: float
    holding_days: int
    learning: str | None = None

    @classmethod
    def from_sale(
        cls, position: Position, sale_date: date, sale_price: float
    ) -> "ClosedPosition":
        """Derive the closed record for selling ``position`` at ``sale_price``."""
        delta = sale_price - position.purchase_price
        return cls(
            **position.model_dump(exclude={"is_active"}),
            is_active=False,
            sale_date=sale_date,
            sale_price=sale_price,
            total_profit=delta * position.quantity,
            profit_percentage=delta / position.purchase_price * 100,
            holding_days=(sale_date - position.purchase_date).days,
        )
