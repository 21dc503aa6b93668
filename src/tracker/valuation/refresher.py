"""Periodic summary refresh with out-of-order result rejection."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from tracker.models import PortfolioSummary

logger = structlog.get_logger(__name__)

SummaryCallback = Callable[[PortfolioSummary], Awaitable[None]]


class SummaryRefresher:
    """Recomputes the summary on a fixed cadence and on demand.

    Each run takes a sequence number when it starts. A finished run is
    applied only if no later-started run has already been applied, so a slow
    stale computation can never overwrite a newer summary.
    """

    def __init__(
        self,
        compute: Callable[[], Awaitable[PortfolioSummary]],
        interval_seconds: float = 10.0,
        on_update: SummaryCallback | None = None,
    ):
        self._compute = compute
        self._interval = interval_seconds
        self._on_update = on_update
        self._issued = 0
        self._applied = 0
        self._latest: PortfolioSummary | None = None
        self._running = False
        self._task: asyncio.Task | None = None
        self._discarded = 0

    @property
    def latest(self) -> PortfolioSummary | None:
        return self._latest

    @property
    def version(self) -> int:
        """Sequence number of the currently applied summary (0 if none)."""
        return self._applied

    @property
    def discarded(self) -> int:
        return self._discarded

    @property
    def running(self) -> bool:
        return self._running

    async def refresh(self) -> PortfolioSummary | None:
        """Run one computation; return the summary if it was applied."""
        self._issued += 1
        seq = self._issued
        summary = await self._compute()
        if seq <= self._applied:
            self._discarded += 1
            logger.debug("summary_stale_discarded", seq=seq, applied=self._applied)
            return None
        self._applied = seq
        self._latest = summary
        if self._on_update is not None:
            await self._on_update(summary)
        return summary

    async def run(self) -> None:
        """Refresh loop - intended to run as an asyncio task."""
        self._running = True
        try:
            while self._running:
                try:
                    await self.refresh()
                except Exception as e:
                    logger.error("summary_refresh_error", error=str(e), exc_info=True)
                await asyncio.sleep(self._interval)
        finally:
            self._running = False

    def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.ensure_future(self.run())
        logger.info("summary_refresher_started", interval=self._interval)

    async def stop(self) -> None:
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("summary_refresher_stopped")
