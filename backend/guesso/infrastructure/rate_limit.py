"""Rate Limiter: in-process sliding-window request throttling per client key.

Invariants:
    - A key may make at most max_requests within any window_seconds span
    - Rejected requests are not recorded (they do not extend the penalty)
    - Keys with no timestamps inside the window are dropped on the next sweep

Design Decisions:
    - In-memory deque per key (ADR: single-process uvicorn, no multi-worker; swap for a
      shared store before scaling out)
    - Clock injectable so tests never sleep
    - No lock: check() has no await points, so it is atomic within the event loop
"""

import time
from collections import deque
from typing import Callable

from starlette.requests import Request

_SWEEP_EVERY = 500


class SlidingWindowRateLimiter:
    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._calls = 0

    def check(self, key: str) -> bool:
        """Record a hit for key. False means the key is over the limit."""
        now = self._clock()
        self._calls += 1
        if self._calls % _SWEEP_EVERY == 0:
            self.sweep(now)

        hits = self._hits.setdefault(key, deque())
        self._evict(hits, now)
        if len(hits) >= self.max_requests:
            return False
        hits.append(now)
        return True

    def retry_after_ms(self, key: str) -> int:
        """Milliseconds until key may succeed again (0 if it already can)."""
        hits = self._hits.get(key)
        if not hits or len(hits) < self.max_requests:
            return 0
        wait = hits[0] + self.window_seconds - self._clock()
        return max(0, int(wait * 1000))

    def sweep(self, now: float | None = None) -> None:
        now = self._clock() if now is None else now
        for key in list(self._hits):
            hits = self._hits[key]
            self._evict(hits, now)
            if not hits:
                del self._hits[key]

    def reset(self) -> None:
        self._hits.clear()
        self._calls = 0

    def __len__(self) -> int:
        return len(self._hits)

    def _evict(self, hits: deque[float], now: float) -> None:
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()


def client_key(request: Request) -> str:
    """Client IP: first X-Forwarded-For hop, then X-Real-IP, then the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
