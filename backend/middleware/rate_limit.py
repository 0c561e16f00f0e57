"""
In-memory rate limiting for abuse-prone endpoints (login, signup,
uploads, feedback, payment verification).

Sliding window of request timestamps per (client IP, route). State is
per process; a multi-worker deployment needs a shared store instead.
"""
import logging
import time
from collections import deque

from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)


class RateLimiter:
    """Sliding-window counter keyed by an arbitrary string."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._hits: dict[str, deque] = {}

    def _evict(self, key: str, window_seconds: int) -> deque:
        """Drop expired hits; keys whose window empties are forgotten."""
        hits = self._hits.get(key)
        if hits is None:
            return deque()
        cutoff = self._clock() - window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()
        if not hits:
            del self._hits[key]
        return hits

    def check(self, key: str, max_requests: int, window_seconds: int) -> bool:
        """Record a hit and return True, or return False if the window is full."""
        hits = self._evict(key, window_seconds)
        if len(hits) >= max_requests:
            return False
        self._hits.setdefault(key, hits).append(self._clock())
        return True

    def remaining(self, key: str, max_requests: int, window_seconds: int) -> int:
        hits = self._evict(key, window_seconds)
        return max(0, max_requests - len(hits))

    def reset(self) -> None:
        self._hits.clear()

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        return len(self._hits)


limiter = RateLimiter()


def rate_limit(max_requests: int = 10, window_seconds: int = 60):
    """
    FastAPI dependency factory.

    Usage:
        @router.post("/login")
        async def login(..., _rate=Depends(rate_limit(10, 60))):
    """
    async def _check_rate_limit(request: Request):
        client_ip = request.client.host if request.client else "unknown"
        key = f"{client_ip}:{request.url.path}"

        if not limiter.check(key, max_requests, window_seconds):
            logger.warning(
                f"Rate limit exceeded: {client_ip} on {request.url.path} "
                f"({max_requests}/{window_seconds}s)"
            )
            raise HTTPException(
                status_code=429,
                detail=f"Rate limit exceeded. Maximum {max_requests} requests "
                       f"per {window_seconds} seconds.",
                headers={
                    "Retry-After": str(window_seconds),
                    "X-RateLimit-Limit": str(max_requests),
                    "X-RateLimit-Remaining": "0",
                },
            )

    return _check_rate_limit
