"""Background task that expires stale found servers."""

import asyncio
import logging

from foundrelay.domain.listing.service.store import ListingStore

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """Calls ``ListingStore.sweep`` once at start and then every interval.

    The sweeper owns nothing but its task. ``stop()`` may be called any
    number of times; once it returns, no further sweep runs. A sweep is
    synchronous, so one already in progress always finishes.

    Usage:
        sweeper = ExpirySweeper(store, interval=30.0)
        async with sweeper:
            await serve_requests()
    """

    def __init__(self, store: ListingStore, interval: float = 30.0) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._store = store
        self._interval = interval
        self._task: asyncio.Task | None = None
        self._shutdown = False

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep_once(self) -> int:
        """Run one sweep, logging the outcome. Returns the removed count."""
        if self._shutdown:
            return 0
        try:
            removed = self._store.sweep()
        except Exception:
            logger.exception("Expiry sweep failed")
            return 0
        if removed > 0:
            logger.info("Removed %d expired server(s)", removed)
        return removed

    def start(self) -> asyncio.Task:
        """Sweep immediately, then keep sweeping in a background task."""
        if self.running:
            raise RuntimeError("Sweeper already running")

        self._shutdown = False
        self.sweep_once()
        self._task = asyncio.create_task(self._run(), name="expiry-sweeper")
        logger.info("Expiry sweeper started (interval: %.1fs)", self._interval)
        return self._task

    async def stop(self) -> None:
        """Cancel the schedule and wait for the task to finish."""
        self._shutdown = True
        task, self._task = self._task, None
        if task is None:
            return

        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Expiry sweeper stopped")

    async def _run(self) -> None:
        while not self._shutdown:
            await asyncio.sleep(self._interval)
            if self._shutdown:
                break
            self.sweep_once()

    async def __aenter__(self) -> "ExpirySweeper":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.stop()
