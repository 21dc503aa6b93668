"""Position lifecycle: open, sell, delete and annotate.

A position is either open or closed, never both. Selling moves it from the
open collection into the closed one; deleting removes it from whichever
collection holds it without a trace. There is no reopening.
"""

from __future__ import annotations

import uuid
from datetime import date

import structlog

from tracker.ledger.store import LedgerStore
from tracker.market.base import CategoryProvider
from tracker.models import Category, ClosedPosition, Position

logger = structlog.get_logger(__name__)


class PositionLifecycleManager:
    """Applies lifecycle rules to the ledger.

    Every read-modify-write runs under the store's lock so that a sell
    updates both collections before any other mutation can observe them.
    Mutations raise LedgerCorruptError instead of overwriting a stored
    collection that fails validation.
    """

    def __init__(
        self,
        store: LedgerStore,
        category_provider: CategoryProvider | None = None,
    ):
        self._store = store
        self._category_provider = category_provider

    @property
    def store(self) -> LedgerStore:
        return self._store

    # ------------------------------------------------------------------
    # Lookups (fail soft)
    # ------------------------------------------------------------------

    async def resolve_category(self, ticker: str) -> Category:
        """Sector for ``ticker``; UNKNOWN on any lookup failure."""
        if self._category_provider is None:
            return Category.UNKNOWN
        try:
            return await self._category_provider.get_category(ticker)
        except Exception as e:
            logger.warning("category_lookup_failed", ticker=ticker, error=str(e))
            return Category.UNKNOWN

    async def resolve_name(self, ticker: str) -> str:
        """Display name for ``ticker``; the ticker itself on failure."""
        if self._category_provider is None:
            return ticker
        try:
            return await self._category_provider.get_name(ticker) or ticker
        except Exception as e:
            logger.warning("name_lookup_failed", ticker=ticker, error=str(e))
            return ticker

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_open(self, category: Category | None = None) -> list[Position]:
        positions = await self._store.load_open()
        if category is None:
            return positions
        return [p for p in positions if p.category == category]

    async def list_closed(
        self, category: Category | None = None
    ) -> list[ClosedPosition]:
        positions = await self._store.load_closed()
        if category is None:
            return positions
        return [p for p in positions if p.category == category]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def open_position(
        self,
        ticker: str,
        name: str,
        purchase_date: date,
        purchase_price: float,
        quantity: int,
    ) -> Position:
        """Record a purchase and return the new position.

        Raises:
            ValueError: If the ticker is blank, the price is not positive or
                the quantity is not a positive integer.
        """
        ticker = ticker.strip().upper()
        if not ticker:
            raise ValueError("ticker is required")
        if purchase_price <= 0:
            raise ValueError("purchase_price must be positive")
        if isinstance(quantity, bool) or int(quantity) != quantity or quantity <= 0:
            raise ValueError("quantity must be a positive integer")

        category = await self.resolve_category(ticker)
        name = name.strip() if name else ""
        if not name:
            name = await self.resolve_name(ticker)

        async with self._store.lock:
            positions = await self._store.load_open(strict=True)
            existing_ids = {p.id for p in positions}
            position_id = uuid.uuid4().hex
            while position_id in existing_ids:
                position_id = uuid.uuid4().hex

            position = Position(
                id=position_id,
                ticker=ticker,
                name=name,
                purchase_date=purchase_date,
                purchase_price=purchase_price,
                quantity=int(quantity),
                category=category,
            )
            positions.append(position)
            await self._store.save_open(positions)

        logger.info(
            "position_opened",
            position_id=position.id,
            ticker=ticker,
            quantity=position.quantity,
            price=purchase_price,
            category=category.value,
        )
        return position

    async def sell_position(
        self, position_id: str, sale_date: date, sale_price: float
    ) -> ClosedPosition | None:
        """Move an open position to the closed collection.

        Returns the closed record, or None when ``position_id`` is not open
        (both collections are left untouched).

        Raises:
            ValueError: If ``sale_price`` is negative.
        """
        if sale_price < 0:
            raise ValueError("sale_price must be non-negative")

        async with self._store.lock:
            positions = await self._store.load_open(strict=True)
            index = next(
                (i for i, p in enumerate(positions) if p.id == position_id), None
            )
            if index is None:
                logger.info("sell_position_not_found", position_id=position_id)
                return None

            closed = ClosedPosition.from_sale(positions[index], sale_date, sale_price)
            del positions[index]
            closed_positions = await self._store.load_closed(strict=True)
            closed_positions.append(closed)

            # closed first: a failed second write leaves a duplicate, not a loss
            await self._store.save_closed(closed_positions)
            await self._store.save_open(positions)

        logger.info(
            "position_sold",
            position_id=position_id,
            ticker=closed.ticker,
            total_profit=round(closed.total_profit, 2),
            holding_days=closed.holding_days,
        )
        return closed

    async def delete_position(self, position_id: str) -> bool:
        """Remove an open position. Returns True if one was removed."""
        async with self._store.lock:
            positions = await self._store.load_open(strict=True)
            remaining = [p for p in positions if p.id != position_id]
            await self._store.save_open(remaining)
        removed = len(remaining) != len(positions)
        if removed:
            logger.info("position_deleted", position_id=position_id)
        return removed

    async def delete_closed_position(self, position_id: str) -> bool:
        """Remove a closed position. Returns True if one was removed."""
        async with self._store.lock:
            positions = await self._store.load_closed(strict=True)
            remaining = [p for p in positions if p.id != position_id]
            await self._store.save_closed(remaining)
        removed = len(remaining) != len(positions)
        if removed:
            logger.info("closed_position_deleted", position_id=position_id)
        return removed

    async def annotate(self, position_id: str, learning: str) -> ClosedPosition | None:
        """Overwrite the lesson-learned note on a closed position."""
        async with self._store.lock:
            positions = await self._store.load_closed(strict=True)
            for i, p in enumerate(positions):
                if p.id == position_id:
                    updated = p.model_copy(update={"learning": learning})
                    positions[i] = updated
                    await self._store.save_closed(positions)
                    return updated
        return None
