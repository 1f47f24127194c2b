"""ListingStore - the in-memory, time-bounded collection of found servers."""

import logging
import threading
import time
from collections.abc import Callable

from foundrelay.domain.listing.model.server import FoundServer, ServerDraft
from foundrelay.domain.listing.model.stats import StoreStats

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 300_000

Clock = Callable[[], int]


def wall_clock_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


class ListingStore:
    """Single source of truth for found servers and their counters.

    Records are kept in insertion order and are never edited, only removed,
    either by key (``remove_by_key``) or by expiry (``sweep``). Duplicate
    job ids are kept side by side.

    Every operation takes the same lock, so callers on the event loop, in
    FastAPI's threadpool, and in the sweeper task all see either the state
    before or after a mutation. Nothing under the lock does I/O.
    """

    def __init__(self, ttl_ms: int = DEFAULT_TTL_MS, clock: Clock = wall_clock_ms) -> None:
        if ttl_ms <= 0:
            raise ValueError(f"ttl_ms must be positive, got {ttl_ms}")
        self._ttl_ms = ttl_ms
        self._clock = clock
        self._lock = threading.Lock()
        self._servers: list[FoundServer] = []
        self._total_inserted = 0
        self._total_expired = 0
        self._started_at = clock()

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    def insert(self, draft: ServerDraft) -> FoundServer:
        """Store a new record and return it with id and expiry assigned."""
        with self._lock:
            now = self._clock()
            sequence = self._total_inserted + 1
            server = FoundServer(
                **draft.model_dump(),
                id=f"{now}-{draft.job_id}-{sequence}",
                inserted_at=now,
                expires_at=now + self._ttl_ms,
            )
            self._servers.append(server)
            self._total_inserted = sequence

        logger.info("Added server entry: %s (%s)", server.display_name, server.job_id)
        return server

    def active_records(self, now: int | None = None) -> list[FoundServer]:
        """All records whose expiry is still ahead of ``now``, oldest first."""
        with self._lock:
            now = self._clock() if now is None else now
            return [s for s in self._servers if s.is_active(now)]

    def records_by_key(self, job_id: str, now: int | None = None) -> list[FoundServer]:
        """Active records reported for ``job_id``; empty when there are none."""
        with self._lock:
            now = self._clock() if now is None else now
            return [s for s in self._servers if s.job_id == job_id and s.is_active(now)]

    def filter_by_min_value(self, min_value: int, now: int | None = None) -> list[FoundServer]:
        """Active records worth at least ``min_value``."""
        with self._lock:
            now = self._clock() if now is None else now
            return [s for s in self._servers if s.is_active(now) and s.value >= min_value]

    def remove_by_key(self, job_id: str) -> list[FoundServer]:
        """Remove every record for ``job_id``, expired or not.

        Does not count towards ``total_expired``. Removing an unknown key
        returns an empty list.
        """
        with self._lock:
            removed: list[FoundServer] = []
            remaining: list[FoundServer] = []
            for server in self._servers:
                (removed if server.job_id == job_id else remaining).append(server)
            self._servers = remaining

        if removed:
            noun = "entry" if len(removed) == 1 else "entries"
            logger.info("Removed %d server %s for job %s", len(removed), noun, job_id)
        return removed

    def sweep(self, now: int | None = None) -> int:
        """Drop records with ``expires_at <= now`` and count them as expired.

        Returns the number removed. The partition and the counter update
        happen under one lock acquisition, so overlapping sweeps cannot
        count a record twice and concurrent inserts are never dropped.
        """
        with self._lock:
            now = self._clock() if now is None else now
            retained = [s for s in self._servers if s.is_active(now)]
            removed = len(self._servers) - len(retained)
            self._servers = retained
            self._total_expired += removed
        return removed

    def stats(self, now: int | None = None) -> StoreStats:
        """Snapshot of the counters; ``active`` and uptime are derived."""
        with self._lock:
            now = self._clock() if now is None else now
            active = sum(1 for s in self._servers if s.is_active(now))
            return StoreStats(
                total_inserted=self._total_inserted,
                total_expired=self._total_expired,
                active=active,
                started_at=self._started_at,
                uptime_ms=max(0, now - self._started_at),
            )
