"""FastAPI JSON dashboard for the portfolio tracker."""

from datetime import date, datetime, timezone

import structlog
from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from tracker.ledger import LedgerCorruptError
from tracker.models import Category

logger = structlog.get_logger()

app = FastAPI(title="Stock Portfolio Tracker")


@app.exception_handler(LedgerCorruptError)
async def ledger_corrupt_handler(request: Request, exc: LedgerCorruptError):
    logger.error("ledger_corrupt", path=request.url.path, key=exc.key)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


_default_origins = ["http://localhost", "http://localhost:8000", "http://localhost:5173"]


def configure_cors(allowed_origins: list[str] | None = None) -> None:
    """Configure CORS middleware with the given origins."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or _default_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# PortfolioTracker instance, set by main.py via set_tracker()
_tracker = None


def set_tracker(tracker) -> None:
    """Set the PortfolioTracker backing the API."""
    global _tracker
    _tracker = tracker


def get_tracker():
    """Get the current PortfolioTracker, or 503 if none is configured."""
    if _tracker is None:
        raise HTTPException(status_code=503, detail="Tracker not configured")
    return _tracker


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class OpenPositionRequest(BaseModel):
    ticker: str = Field(min_length=1)
    name: str = ""
    purchase_date: date
    purchase_price: float = Field(gt=0)
    quantity: int = Field(gt=0)


class SellRequest(BaseModel):
    sale_date: date
    sale_price: float = Field(ge=0)


class LearningRequest(BaseModel):
    learning: str


class AddScanResultRequest(BaseModel):
    purchase_date: date | None = None


api_router = APIRouter(prefix="/api")


# ---------------------------------------------------------------------------
# Positions
# ---------------------------------------------------------------------------


@api_router.get("/positions")
async def list_positions(category: Category | None = None):
    """Open positions valued at live prices."""
    tracker = get_tracker()
    valuations = await tracker.valuations(category)
    return {"positions": [v.model_dump(mode="json") for v in valuations]}


@api_router.post("/positions", status_code=201)
async def open_position(body: OpenPositionRequest):
    tracker = get_tracker()
    try:
        position = await tracker.lifecycle.open_position(
            ticker=body.ticker,
            name=body.name,
            purchase_date=body.purchase_date,
            purchase_price=body.purchase_price,
            quantity=body.quantity,
        )
    except ValueError as e:
        logger.warning("open_position_rejected", ticker=body.ticker, error=str(e))
        raise HTTPException(status_code=422, detail=str(e))
    return position.model_dump(mode="json")


@api_router.post("/positions/{position_id}/sell")
async def sell_position(position_id: str, body: SellRequest):
    tracker = get_tracker()
    try:
        closed = await tracker.lifecycle.sell_position(
            position_id, body.sale_date, body.sale_price
        )
    except ValueError as e:
        logger.warning("sell_position_rejected", position_id=position_id, error=str(e))
        raise HTTPException(status_code=422, detail=str(e))
    if closed is None:
        logger.info("sell_position_missing", position_id=position_id)
        raise HTTPException(status_code=404, detail="Position not found")
    return closed.model_dump(mode="json")


@api_router.delete("/positions/{position_id}")
async def delete_position(position_id: str):
    removed = await get_tracker().lifecycle.delete_position(position_id)
    return {"deleted": removed}


# ---------------------------------------------------------------------------
# Closed positions
# ---------------------------------------------------------------------------


@api_router.get("/closed")
async def list_closed(category: Category | None = None):
    closed = await get_tracker().lifecycle.list_closed(category)
    return {"positions": [c.model_dump(mode="json") for c in closed]}


@api_router.delete("/closed/{position_id}")
async def delete_closed(position_id: str):
    removed = await get_tracker().lifecycle.delete_closed_position(position_id)
    return {"deleted": removed}


@api_router.put("/closed/{position_id}/learning")
async def update_learning(position_id: str, body: LearningRequest):
    updated = await get_tracker().lifecycle.annotate(position_id, body.learning)
    if updated is None:
        logger.info("annotate_position_missing", position_id=position_id)
        raise HTTPException(status_code=404, detail="Closed position not found")
    return updated.model_dump(mode="json")


# ---------------------------------------------------------------------------
# Summary & dashboard aids
# ---------------------------------------------------------------------------


@api_router.get("/summary")
async def get_summary():
    summary = await get_tracker().summary()
    return summary.model_dump(mode="json")


@api_router.post("/summary/refresh")
async def refresh_summary():
    tracker = get_tracker()
    summary = await tracker.summary()
    return {"version": tracker.refresher.version, "summary": summary.model_dump(mode="json")}


@api_router.get("/sectors")
async def get_sectors():
    sectors = await get_tracker().sectors()
    return {"sectors": [s.model_dump(mode="json") for s in sectors]}


@api_router.get("/insights")
async def get_insights():
    insights = await get_tracker().insights()
    return {"insights": [i.model_dump(mode="json") for i in insights]}


@api_router.get("/quotes/{ticker}")
async def get_quote(ticker: str):
    quote = await get_tracker().prices.get_quote(ticker)
    if quote is None:
        raise HTTPException(status_code=404, detail=f"No quote available for {ticker}")
    return quote.model_dump(mode="json")


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


@api_router.post("/scanner/run")
async def run_scanner():
    report = await get_tracker().scanner.scan()
    return report.model_dump(mode="json")


@api_router.get("/scanner")
async def get_scanner_report():
    report = get_tracker().scanner.last_report
    if report is None:
        return {"results": [], "scanned": 0, "failed": [], "completed_at": None}
    return report.model_dump(mode="json")


@api_router.post("/scanner/{symbol}/add", status_code=201)
async def add_scanned_symbol(symbol: str, body: AddScanResultRequest | None = None):
    tracker = get_tracker()
    result = tracker.scanner.find(symbol)
    if result is None:
        logger.info("scan_result_missing", symbol=symbol)
        raise HTTPException(status_code=404, detail=f"{symbol} is not in the last scan")
    position = await tracker.add_scan_result(
        result, purchase_date=body.purchase_date if body else None
    )
    return position.model_dump(mode="json")


app.include_router(api_router)


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "tracker_configured": _tracker is not None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
