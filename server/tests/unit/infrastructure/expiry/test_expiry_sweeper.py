"""Unit tests for the ExpirySweeper background task."""

import asyncio
from unittest.mock import MagicMock

import pytest

from foundrelay.domain.listing.service.store import ListingStore
from foundrelay.infrastructure.expiry.sweeper import ExpirySweeper


def make_store(return_value: int = 0) -> MagicMock:
    store = MagicMock(spec=ListingStore)
    store.sweep.return_value = return_value
    return store


class TestExpirySweeperLifecycle:
    @pytest.mark.asyncio
    async def test_sweeps_immediately_on_start(self):
        store = make_store()
        sweeper = ExpirySweeper(store, interval=60.0)

        sweeper.start()
        try:
            store.sweep.assert_called_once()
        finally:
            await sweeper.stop()

    @pytest.mark.asyncio
    async def test_sweeps_periodically(self):
        store = make_store()

        async with ExpirySweeper(store, interval=0.01):
            await asyncio.sleep(0.1)

        # Initial sweep plus several periodic ones
        assert store.sweep.call_count >= 3

    @pytest.mark.asyncio
    async def test_no_sweep_after_stop(self):
        store = make_store()
        sweeper = ExpirySweeper(store, interval=0.01)

        sweeper.start()
        await asyncio.sleep(0.05)
        await sweeper.stop()
        calls_at_stop = store.sweep.call_count

        await asyncio.sleep(0.05)

        assert store.sweep.call_count == calls_at_stop
        assert not sweeper.running

    @pytest.mark.asyncio
    async def test_stop_is_idempotent(self):
        sweeper = ExpirySweeper(make_store(), interval=0.01)

        await sweeper.stop()  # never started
        sweeper.start()
        await sweeper.stop()
        await sweeper.stop()

        assert not sweeper.running

    @pytest.mark.asyncio
    async def test_cannot_start_twice(self):
        sweeper = ExpirySweeper(make_store(), interval=60.0)
        sweeper.start()
        try:
            with pytest.raises(RuntimeError):
                sweeper.start()
        finally:
            await sweeper.stop()

    @pytest.mark.asyncio
    async def test_can_restart_after_stop(self):
        store = make_store()
        sweeper = ExpirySweeper(store, interval=60.0)

        sweeper.start()
        await sweeper.stop()
        sweeper.start()
        try:
            assert sweeper.running
            assert store.sweep.call_count == 2
        finally:
            await sweeper.stop()

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            ExpirySweeper(make_store(), interval=0)


class TestExpirySweeperErrors:
    @pytest.mark.asyncio
    async def test_failed_sweep_is_logged_and_loop_continues(self, caplog):
        store = make_store()
        outcomes = iter([RuntimeError("boom")])

        def sweep():
            outcome = next(outcomes, 0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        store.sweep.side_effect = sweep

        async with ExpirySweeper(store, interval=0.01) as sweeper:
            await asyncio.sleep(0.05)
            assert sweeper.running

        assert "Expiry sweep failed" in caplog.text
        assert store.sweep.call_count >= 2

    def test_sweep_once_logs_removed_count(self, caplog):
        caplog.set_level("INFO")
        sweeper = ExpirySweeper(make_store(return_value=3), interval=1.0)

        assert sweeper.sweep_once() == 3
        assert "Removed 3 expired server(s)" in caplog.text


class TestExpirySweeperWithRealStore:
    @pytest.mark.asyncio
    async def test_expires_records_in_background(self):
        from foundrelay.domain.listing.model.server import ServerDraft

        now = [0]
        store = ListingStore(ttl_ms=100, clock=lambda: now[0])
        store.insert(ServerDraft(display_name="x", job_id="j"))

        async with ExpirySweeper(store, interval=0.01):
            now[0] = 100
            await asyncio.sleep(0.05)

        stats = store.stats()
        assert stats.total_expired == 1
        assert stats.active == 0
