"""Tests for Position and ClosedPosition models."""

from datetime import date

import pytest
from pydantic import ValidationError

from tracker.models import Category, ClosedPosition, Position


def make_position(**overrides) -> Position:
    fields = {
        "id": "p1",
        "ticker": "AAPL",
        "name": "Apple Inc.",
        "purchase_date": date(2024, 1, 1),
        "purchase_price": 150.0,
        "quantity": 10,
    }
    fields.update(overrides)
    return Position(**fields)


class TestPosition:
    def test_valid_position(self):
        pos = make_position()
        assert pos.ticker == "AAPL"
        assert pos.category == Category.UNKNOWN
        assert pos.is_active is True
        assert pos.invested == 1500.0

    def test_ticker_normalized(self):
        assert make_position(ticker=" msft ").ticker == "MSFT"

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            make_position(quantity=0)

    def test_fractional_quantity_rejected(self):
        with pytest.raises(ValidationError):
            make_position(quantity=1.5)

    def test_zero_price_rejected(self):
        with pytest.raises(ValidationError):
            make_position(purchase_price=0)

    def test_frozen(self):
        pos = make_position()
        with pytest.raises(ValidationError):
            pos.quantity = 5

    def test_json_round_trip_keeps_dates(self):
        pos = make_position(category=Category.TECHNOLOGY)
        restored = Position.model_validate_json(pos.model_dump_json())
        assert restored == pos
        assert restored.purchase_date == date(2024, 1, 1)


class TestClosedPositionFromSale:
    def test_profit_fields(self):
        closed = ClosedPosition.from_sale(make_position(), date(2024, 2, 1), 160.0)
        assert closed.total_profit == pytest.approx(100.0)
        assert closed.profit_percentage == pytest.approx(6.6667, rel=1e-4)
        assert closed.holding_days == 31
        assert closed.is_active is False
        assert closed.learning is None

    def test_carries_identity_and_category(self):
        pos = make_position(category=Category.TECHNOLOGY)
        closed = ClosedPosition.from_sale(pos, date(2024, 2, 1), 160.0)
        assert closed.id == pos.id
        assert closed.ticker == pos.ticker
        assert closed.category == Category.TECHNOLOGY
        assert closed.purchase_price == 150.0

    def test_sale_at_purchase_price_is_flat(self):
        closed = ClosedPosition.from_sale(make_position(), date(2024, 1, 1), 150.0)
        assert closed.total_profit == 0.0
        assert closed.profit_percentage == 0.0
        assert closed.holding_days == 0

    def test_holding_days_thirty(self):
        closed = ClosedPosition.from_sale(make_position(), date(2024, 1, 31), 150.0)
        assert closed.holding_days == 30

    def test_loss(self):
        closed = ClosedPosition.from_sale(make_position(), date(2024, 3, 1), 120.0)
        assert closed.total_profit == pytest.approx(-300.0)
        assert closed.profit_percentage == pytest.approx(-20.0)

    def test_sale_at_zero_allowed(self):
        closed = ClosedPosition.from_sale(make_position(), date(2024, 3, 1), 0.0)
        assert closed.total_profit == pytest.approx(-1500.0)
        assert closed.profit_percentage == pytest.approx(-100.0)

    def test_negative_sale_price_rejected(self):
        with pytest.raises(ValidationError):
            ClosedPosition.from_sale(make_position(), date(2024, 3, 1), -1.0)
