"""In-memory sliding-window rate limiting for the outbound-heavy endpoints.

Each optimisation fans out to twelve archive requests and each report
additionally renders charts, so both are throttled per client IP.
"""

from __future__ import annotations

import math
import time
from collections import deque
from collections.abc import Callable

from fastapi import HTTPException, Request, status


def client_key(request: Request) -> str:
    """First hop of ``X-Forwarded-For``, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimiter:
    """At most ``max_requests`` hits per client in any ``window_seconds`` span.

    Clients whose window has emptied are forgotten, so memory is bounded
    by the clients active within the last window.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}

    @property
    def tracked_clients(self) -> int:
        return len(self._hits)

    def _expire(self, now: float) -> None:
        cutoff = now - self.window_seconds
        for key in list(self._hits):
            hits = self._hits[key]
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if not hits:
                del self._hits[key]

    def hit(self, key: str) -> None:
        """Record one request for ``key`` or raise 429 with ``Retry-After``."""
        now = self._clock()
        self._expire(now)

        hits = self._hits.setdefault(key, deque())
        if len(hits) >= self.max_requests:
            retry_after = max(1, math.ceil(hits[0] + self.window_seconds - now))
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=(
                    f"Too many requests: limit is {self.max_requests} "
                    f"per {self.window_seconds:g}s."
                ),
                headers={"Retry-After": str(retry_after)},
            )
        hits.append(now)

    def check(self, request: Request) -> None:
        self.hit(client_key(request))

    def reset(self) -> None:
        self._hits.clear()


optimize_limiter = RateLimiter(max_requests=10, window_seconds=60)
report_limiter = RateLimiter(max_requests=5, window_seconds=60)
