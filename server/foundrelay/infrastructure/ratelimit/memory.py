"""In-memory sliding-window rate limiter.

Single-process only: counts live in this process and vanish on restart,
which matches the rest of the service's state.
"""

import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class RateDecision:
    allowed: bool
    remaining: int
    retry_after: float  # seconds until the oldest hit leaves the window


class SlidingWindowRateLimiter:
    """Allows ``max_requests`` hits per ``window`` seconds for each client key.

    Keys whose hits have all left the window are dropped by a full pass
    at most once per window, so the map only holds clients seen within
    the last two windows.
    """

    def __init__(
        self,
        max_requests: int = 60,
        window: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_requests = max_requests
        self._window = window
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._last_purge = clock()

    def hit(self, key: str) -> RateDecision:
        """Record a request for ``key`` if the window has room for it."""
        with self._lock:
            now = self._clock()
            cutoff = now - self._window
            if self._last_purge <= cutoff:
                self._purge(cutoff)
                self._last_purge = now

            hits = self._hits.get(key)
            if hits is None:
                hits = self._hits[key] = deque()
            while hits and hits[0] <= cutoff:
                hits.popleft()

            if len(hits) >= self._max_requests:
                retry_after = max(0.0, hits[0] + self._window - now)
                return RateDecision(allowed=False, remaining=0, retry_after=retry_after)

            hits.append(now)
            return RateDecision(
                allowed=True,
                remaining=self._max_requests - len(hits),
                retry_after=0.0,
            )

    def _purge(self, cutoff: float) -> None:
        # Newest hit at or before the cutoff means the whole deque is stale
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]
