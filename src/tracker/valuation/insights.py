"""Dashboard recommendations derived from the portfolio state."""

from collections.abc import Sequence
from datetime import date

from tracker.models import ClosedPosition, Insight, PortfolioSummary, SectorSlice

CONCENTRATION_THRESHOLD_PCT = 40.0
MIN_DIVERSIFIED_POSITIONS = 5
STRONG_PORTFOLIO_PCT = 10.0
RECENT_SALES_DAYS = 90
STRONG_EXITS_PCT = 15.0
WEAK_EXITS_PCT = -5.0


def recent_sales(
    closed: Sequence[ClosedPosition], today: date, days: int = RECENT_SALES_DAYS
) -> list[ClosedPosition]:
    """Sales at most ``days`` ago; future-dated sales count as recent."""
    return [c for c in closed if (today - c.sale_date).days <= days]


def build_insights(
    summary: PortfolioSummary,
    sectors: Sequence[SectorSlice],
    closed: Sequence[ClosedPosition],
    today: date,
) -> list[Insight]:
    insights: list[Insight] = []

    if sectors and sectors[0].percentage > CONCENTRATION_THRESHOLD_PCT:
        top = sectors[0]
        insights.append(Insight(
            code="sector_concentration",
            message=(
                f"High concentration in {top.category.value} "
                f"({top.percentage:.1f}%) - consider diversifying"
            ),
            severity="warning",
        ))

    if summary.active_positions < MIN_DIVERSIFIED_POSITIONS:
        insights.append(Insight(
            code="small_portfolio",
            message="Portfolio is small - consider adding positions to diversify",
        ))

    if summary.total_profit_percentage < 0:
        insights.append(Insight(
            code="portfolio_losing",
            message="Portfolio is at a loss - consider reviewing the strategy",
            severity="warning",
        ))
    elif summary.total_profit_percentage > STRONG_PORTFOLIO_PCT:
        insights.append(Insight(
            code="portfolio_strong",
            message="Portfolio is well in profit - consider taking partial profits",
        ))

    sales = recent_sales(closed, today)
    if sales:
        avg_profit = sum(c.profit_percentage for c in sales) / len(sales)
        if avg_profit > STRONG_EXITS_PCT:
            insights.append(Insight(
                code="strong_exits",
                message="Recent sales performed very well - keep the current exit strategy",
            ))
        elif avg_profit < WEAK_EXITS_PCT:
            insights.append(Insight(
                code="weak_exits",
                message="Recent sales underperformed - consider improving the exit strategy",
                severity="warning",
            ))

    return insights
