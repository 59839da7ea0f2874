"""In-memory rate limiting for link generation."""

from __future__ import annotations

import time
from collections import deque
from typing import Callable, Deque, Dict, Optional

from fastapi import Request

WINDOW_SECONDS = 60


class RateLimiter:
    """Sliding one-minute window per client key.

    Buckets whose hits have all aged out are dropped, so memory follows the
    number of clients seen in the last minute rather than all clients ever.
    """

    def __init__(self, per_minute: int = 30, clock: Callable[[], float] = time.monotonic) -> None:
        self.per_minute = per_minute
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()

    def allow(self, key: str) -> bool:
        now = self._clock()
        window_start = now - WINDOW_SECONDS
        if now - self._last_sweep >= WINDOW_SECONDS:
            self._sweep(window_start)
            self._last_sweep = now

        bucket = self._hits.get(key)
        if bucket is None:
            bucket = self._hits[key] = deque()

        while bucket and bucket[0] < window_start:
            bucket.popleft()

        if len(bucket) >= self.per_minute:
            return False

        bucket.append(now)
        return True

    def _sweep(self, window_start: float) -> None:
        stale = [key for key, bucket in self._hits.items() if not bucket or bucket[-1] < window_start]
        for key in stale:
            del self._hits[key]

    def tracked_clients(self) -> int:
        return len(self._hits)

    def reset(self, key: Optional[str] = None) -> None:
        if key is None:
            self._hits.clear()
        else:
            self._hits.pop(key, None)


def get_rate_limiter(app) -> RateLimiter:
    limiter: RateLimiter = getattr(app.state, "rate_limiter", None)
    if limiter is None:
        limiter = RateLimiter()
        app.state.rate_limiter = limiter
    return limiter


def client_key(request: Request) -> str:
    # Forwarding headers are client-controlled; key on the socket peer only
    return request.client.host if request.client else "anonymous"
