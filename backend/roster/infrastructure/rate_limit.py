"""In-Memory Rate Limiter — fixed budget of requests per client key per sliding window.

Invariants:
    - A key may make at most max_requests requests within any window_seconds span
    - Rejected requests are not recorded (they do not extend the lockout)
    - retry_after() is >= 1 second whenever the key is limited

Design Decisions:
    - In-process dict, not Redis: single-process uvicorn, limits reset on restart
    - clock injectable so tests can advance time without sleeping
"""

from collections import defaultdict, deque
from collections.abc import Callable
import math
import time

MAX_TRACKED_KEYS = 10_000


class RateLimiter:
    """Sliding-window limiter keyed by client address."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = defaultdict(deque)

    def _prune(self, key: str, now: float) -> deque[float]:
        hits = self._hits[key]
        cutoff = now - self.window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()
        return hits

    def check(self, key: str) -> bool:
        """Record a hit for key. Returns False (without recording) when over budget."""
        now = self._clock()
        if len(self._hits) > MAX_TRACKED_KEYS:
            self.cleanup()
        hits = self._prune(key, now)
        if len(hits) >= self.max_requests:
            return False
        hits.append(now)
        return True

    def remaining(self, key: str) -> int:
        hits = self._prune(key, self._clock())
        return max(0, self.max_requests - len(hits))

    def retry_after(self, key: str) -> int:
        """Seconds until the oldest hit in the window expires."""
        now = self._clock()
        hits = self._prune(key, now)
        if len(hits) < self.max_requests:
            return 0
        return max(1, math.ceil(hits[0] + self.window_seconds - now))

    def cleanup(self) -> None:
        """Drop keys with no hits left in the window."""
        now = self._clock()
        for key in list(self._hits):
            if not self._prune(key, now):
                del self._hits[key]
