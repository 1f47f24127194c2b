"""Fire-and-forget delivery of new-server notifications."""

import asyncio
import logging

from foundrelay.domain.listing.model.server import FoundServer
from foundrelay.domain.listing.port.notifier import Notifier

logger = logging.getLogger(__name__)


class NotificationRelay:
    """Spawns one detached delivery task per stored server.

    ``dispatch`` returns immediately; the request that stored the server
    never waits on the sink. Each delivery gets a hard timeout and a single
    attempt. Failures end up in the log and nowhere else.

    Usage:
        relay = NotificationRelay(notifier, timeout=5.0)
        async with relay:
            relay.dispatch(server)
        # in-flight deliveries drained (or cancelled) here
    """

    def __init__(
        self,
        notifier: Notifier,
        timeout: float = 5.0,
        drain_timeout: float = 5.0,
    ) -> None:
        self._notifier = notifier
        self._timeout = timeout
        self._drain_timeout = drain_timeout
        self._pending: set[asyncio.Task[None]] = set()
        self._closed = False

    @property
    def pending(self) -> int:
        """Number of deliveries still in flight."""
        return len(self._pending)

    def dispatch(self, server: FoundServer) -> None:
        """Schedule delivery for ``server`` and return without awaiting it."""
        if self._closed:
            logger.warning("Relay closed; dropping notification for %s", server.job_id)
            return

        task = asyncio.get_running_loop().create_task(
            self._deliver(server), name=f"notify-{server.id}"
        )
        # The loop only keeps weak references to tasks
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, server: FoundServer) -> None:
        try:
            await asyncio.wait_for(self._notifier.notify(server), timeout=self._timeout)
        except asyncio.CancelledError:
            logger.warning("Notification for %s cancelled", server.job_id)
            raise
        except TimeoutError:
            logger.error(
                "Notification for %s timed out after %.1fs", server.job_id, self._timeout
            )
        except Exception as e:
            logger.error("Failed to send notification for %s: %s", server.job_id, e)

    async def close(self) -> None:
        """Stop accepting work and wait briefly for in-flight deliveries."""
        self._closed = True
        tasks = list(self._pending)
        if not tasks:
            return

        done, pending = await asyncio.wait(tasks, timeout=self._drain_timeout)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning("Cancelled %d undelivered notifications", len(pending))

    async def __aenter__(self) -> "NotificationRelay":
        self._closed = False
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.close()
