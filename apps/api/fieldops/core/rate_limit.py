"""
In-memory, per-process rate limiting.

One limiter instance is created at startup and stored on ``app.state``;
routers reach it through a dependency instead of module globals.
"""

import logging
import time
from threading import Lock
from typing import Callable, Optional

from fastapi import HTTPException, Request, status

logger = logging.getLogger(__name__)


class InMemoryRateLimiter:
    """Fixed-window counter keyed by an arbitrary string (worker id, IP, ...)."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        cleanup_interval: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1 or window_seconds < 1:
            raise ValueError("max_requests and window_seconds must be positive")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.cleanup_interval = cleanup_interval
        self._clock = clock
        # key -> (count, reset_at)
        self._entries: dict[str, tuple[int, float]] = {}
        self._lock = Lock()
        self._last_cleanup = clock()

    def hit(self, key: str) -> bool:
        """Record one request for ``key``; False once the window budget is spent."""
        now = self._clock()
        with self._lock:
            if now - self._last_cleanup >= self.cleanup_interval:
                self._sweep_locked(now)

            count, reset_at = self._entries.get(key, (0, now + self.window_seconds))
            if now >= reset_at:
                count, reset_at = 0, now + self.window_seconds

            if count >= self.max_requests:
                return False

            self._entries[key] = (count + 1, reset_at)
            return True

    def remaining(self, key: str) -> int:
        now = self._clock()
        with self._lock:
            count, reset_at = self._entries.get(key, (0, now))
            if now >= reset_at:
                return self.max_requests
            return max(0, self.max_requests - count)

    def sweep(self) -> int:
        """Drop expired windows. Returns how many keys were removed."""
        with self._lock:
            return self._sweep_locked(self._clock())

    def _sweep_locked(self, now: float) -> int:
        expired = [k for k, (_, reset_at) in self._entries.items() if now >= reset_at]
        for k in expired:
            del self._entries[k]
        self._last_cleanup = now
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


def enforce(limiter: Optional[InMemoryRateLimiter], key: str) -> None:
    if limiter is None:
        return
    if not limiter.hit(key):
        logger.warning(f"Rate limit exceeded for {key}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests. Please try again shortly.",
        )


def get_check_in_limiter(request: Request) -> Optional[InMemoryRateLimiter]:
    return getattr(request.app.state, "check_in_limiter", None)
