"""LedgerStore - load/save the open and closed position collections."""

from __future__ import annotations

import asyncio

import structlog
from pydantic import TypeAdapter, ValidationError

from tracker.models import ClosedPosition, Position
from tracker.storage import KeyValueStore

logger = structlog.get_logger(__name__)

_OPEN_ADAPTER = TypeAdapter(list[Position])
_CLOSED_ADAPTER = TypeAdapter(list[ClosedPosition])

CLOSED_SUFFIX = "-sold"


class LedgerCorruptError(Exception):
    """A stored collection failed validation and must not be overwritten."""

    def __init__(self, key: str):
        super().__init__(f"Stored ledger under {key!r} is corrupt")
        self.key = key


class LedgerStore:
    """Persists each collection as one JSON blob in a KeyValueStore.

    The two collections are written independently; there is no transaction
    spanning them. Callers that read-modify-write must hold ``lock`` and
    load with ``strict=True`` so a corrupt blob is never replaced.
    """

    def __init__(self, kv: KeyValueStore, storage_key: str = "stock-portfolio-data"):
        self._kv = kv
        self._open_key = storage_key
        self._closed_key = storage_key + CLOSED_SUFFIX
        self._lock = asyncio.Lock()

    @property
    def lock(self) -> asyncio.Lock:
        return self._lock

    @property
    def open_key(self) -> str:
        return self._open_key

    @property
    def closed_key(self) -> str:
        return self._closed_key

    async def load_open(self, strict: bool = False) -> list[Position]:
        """Open positions. A corrupt blob reads as empty unless ``strict``."""
        return await self._load(self._open_key, _OPEN_ADAPTER, strict)

    async def load_closed(self, strict: bool = False) -> list[ClosedPosition]:
        """Closed positions. A corrupt blob reads as empty unless ``strict``."""
        return await self._load(self._closed_key, _CLOSED_ADAPTER, strict)

    async def _load(self, key: str, adapter: TypeAdapter, strict: bool) -> list:
        raw = await self._kv.get(key)
        if not raw:
            return []
        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            logger.error("ledger_load_failed", key=key, strict=strict, error=str(e))
            if strict:
                raise LedgerCorruptError(key) from e
            return []

    async def save_open(self, positions: list[Position]) -> None:
        await self._kv.set(self._open_key, _OPEN_ADAPTER.dump_json(positions).decode())

    async def save_closed(self, positions: list[ClosedPosition]) -> None:
        await self._kv.set(
            self._closed_key, _CLOSED_ADAPTER.dump_json(positions).decode()
        )
