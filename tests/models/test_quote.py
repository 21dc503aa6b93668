"""Tests for quote and price resolution models."""

import pytest
from pydantic import ValidationError

from tracker.models import IndicatorSnapshot, PriceQuote, PriceResolution, PriceSource


class TestPriceQuoteFromCloses:
    def test_change_from_previous_close(self):
        quote = PriceQuote.from_closes("AAPL", [170.0, 172.0, 175.5])
        assert quote.current_price == 175.5
        assert quote.change == pytest.approx(3.5)
        assert quote.change_percent == pytest.approx(3.5 / 172.0 * 100)

    def test_single_close_has_no_change(self):
        quote = PriceQuote.from_closes("AAPL", [175.5])
        assert quote.current_price == 175.5
        assert quote.change == 0.0
        assert quote.change_percent == 0.0

    def test_zero_previous_close(self):
        quote = PriceQuote.from_closes("X", [0.0, 5.0])
        assert quote.change == 5.0
        assert quote.change_percent == 0.0

    def test_empty_series_rejected(self):
        with pytest.raises(ValueError):
            PriceQuote.from_closes("AAPL", [])


class TestPriceResolution:
    def test_live(self):
        quote = PriceQuote(ticker="AAPL", current_price=175.5)
        res = PriceResolution.live(quote)
        assert res.price == 175.5
        assert res.source == PriceSource.LIVE
        assert res.quote is quote
        assert res.is_fallback is False

    def test_fallback(self):
        res = PriceResolution.fallback("AAPL", 150.0, "timeout")
        assert res.price == 150.0
        assert res.source == PriceSource.FALLBACK
        assert res.quote is None
        assert res.error == "timeout"
        assert res.is_fallback is True


class TestIndicatorSnapshot:
    def test_requires_positive_values(self):
        with pytest.raises(ValidationError):
            IndicatorSnapshot(
                symbol="AAPL",
                name="Apple",
                sector="Technology",
                price=100.0,
                market_cap=0.0,
                moving_average=100.0,
            )
