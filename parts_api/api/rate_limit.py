"""
Per-client fixed-window rate limiting for every route.
"""
from __future__ import annotations

import threading
import time
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse

from parts_api.config import RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS


class RateLimiter:
    """Counts requests per client in fixed windows of `window` seconds."""

    def __init__(
        self,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        window: float = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._hits: dict[str, tuple[float, int]] = {}
        self._lock = threading.Lock()

    def hit(self, client: str) -> tuple[bool, float]:
        """Record one request. Returns (allowed, seconds until the window resets)."""
        now = self._clock()
        with self._lock:
            start, count = self._hits.get(client, (now, 0))
            if now - start >= self.window:
                start, count = now, 0
            count += 1
            self._hits[client] = (start, count)
            if len(self._hits) > 10_000:
                self._prune(now)
        return count <= self.max_requests, max(0.0, start + self.window - now)

    def _prune(self, now: float) -> None:
        expired = [c for c, (start, _) in self._hits.items() if now - start >= self.window]
        for c in expired:
            del self._hits[c]


def rate_limit_middleware(limiter: RateLimiter):
    """Build an http middleware answering 429 once a client exceeds its window."""

    async def _middleware(request: Request, call_next):
        client = request.client.host if request.client else "unknown"
        allowed, reset_in = limiter.hit(client)
        if not allowed:
            return JSONResponse(
                status_code=429,
                content={"error": "too_many_requests"},
                headers={"Retry-After": str(int(reset_in) + 1)},
            )
        return await call_next(request)

    return _middleware
