"""Tests for SummaryRefresher."""

import asyncio

import pytest

from tracker.models import PortfolioSummary
from tracker.valuation import SummaryRefresher


class ControlledCompute:
    """Compute function whose calls finish only when released."""

    def __init__(self):
        self.calls: list[asyncio.Event] = []

    async def __call__(self) -> PortfolioSummary:
        gate = asyncio.Event()
        n = len(self.calls) + 1
        self.calls.append(gate)
        await gate.wait()
        return PortfolioSummary(active_positions=n)


async def _wait_for_calls(compute: ControlledCompute, n: int) -> None:
    while len(compute.calls) < n:
        await asyncio.sleep(0)


class TestRefresh:
    async def test_applies_result(self):
        async def compute():
            return PortfolioSummary(active_positions=3)

        updates = []

        async def on_update(summary):
            updates.append(summary)

        refresher = SummaryRefresher(compute, on_update=on_update)
        summary = await refresher.refresh()
        assert summary.active_positions == 3
        assert refresher.latest == summary
        assert refresher.version == 1
        assert updates == [summary]

    async def test_stale_result_discarded(self):
        compute = ControlledCompute()
        refresher = SummaryRefresher(compute)

        first = asyncio.ensure_future(refresher.refresh())
        await _wait_for_calls(compute, 1)
        second = asyncio.ensure_future(refresher.refresh())
        await _wait_for_calls(compute, 2)

        # the later-started computation finishes first
        compute.calls[1].set()
        newer = await second
        compute.calls[0].set()
        stale = await first

        assert newer.active_positions == 2
        assert stale is None
        assert refresher.latest.active_positions == 2
        assert refresher.version == 2
        assert refresher.discarded == 1

    async def test_in_order_results_both_applied(self):
        compute = ControlledCompute()
        refresher = SummaryRefresher(compute)

        first = asyncio.ensure_future(refresher.refresh())
        await _wait_for_calls(compute, 1)
        second = asyncio.ensure_future(refresher.refresh())
        await _wait_for_calls(compute, 2)

        compute.calls[0].set()
        assert (await first).active_positions == 1
        compute.calls[1].set()
        assert (await second).active_positions == 2
        assert refresher.discarded == 0

    async def test_compute_error_propagates(self):
        async def compute():
            raise RuntimeError("boom")

        refresher = SummaryRefresher(compute)
        with pytest.raises(RuntimeError):
            await refresher.refresh()
        assert refresher.latest is None


class TestLoop:
    async def test_start_and_stop(self):
        calls = 0

        async def compute():
            nonlocal calls
            calls += 1
            return PortfolioSummary()

        refresher = SummaryRefresher(compute, interval_seconds=0.01)
        refresher.start()
        for _ in range(100):
            if calls >= 2:
                break
            await asyncio.sleep(0.01)
        assert refresher.running
        await refresher.stop()
        assert calls >= 2
        assert not refresher.running

    async def test_loop_survives_errors(self):
        calls = 0

        async def compute():
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("transient")
            return PortfolioSummary()

        refresher = SummaryRefresher(compute, interval_seconds=0.01)
        refresher.start()
        for _ in range(100):
            if refresher.latest is not None:
                break
            await asyncio.sleep(0.01)
        await refresher.stop()
        assert refresher.latest is not None

    async def test_stop_without_start(self):
        refresher = SummaryRefresher(lambda: None)
        await refresher.stop()
        assert not refresher.running
