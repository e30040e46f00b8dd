"""Per-client request rate limiting gate.

Counters live in a ``RateLimiter`` shared by every gate instance the
registry factory builds, so limits hold across requests. The limiter is
in-memory and per-process.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from roost.http.request import Request
from roost.http.response import Response


@dataclass(slots=True)
class _Window:
    count: int
    started: float


class RateLimiter:
    """Fixed-window counter keyed by client identity.

    ``hit()`` counts one request and reports whether it is within
    ``max_requests`` for the current ``window`` (seconds).
    """

    __slots__ = ("_clock", "_lock", "_windows", "max_requests", "window")

    def __init__(
        self,
        max_requests: int = 100,
        window: int = 3600,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, _Window] = {}

    def hit(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            current = self._windows.get(key)
            if current is None or now - current.started > self.window:
                current = _Window(count=0, started=now)
                self._windows[key] = current
            current.count += 1
            return current.count <= self.max_requests

    def retry_after(self, key: str) -> int:
        """Seconds until *key*'s window resets (at least 1)."""
        now = self._clock()
        with self._lock:
            current = self._windows.get(key)
            if current is None:
                return 1
            return max(1, int(self.window - (now - current.started)))

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


_default_limiter = RateLimiter()


class RateLimitMiddleware:
    """Reject clients that exceed their request budget with a 429.

    Without an explicit limiter, all instances share a process-wide
    default of 100 requests per hour.
    """

    __slots__ = ("limiter",)

    def __init__(self, limiter: RateLimiter | None = None) -> None:
        self.limiter = limiter or _default_limiter

    def handle(self, request: Request) -> bool:
        return self.limiter.hit(request.client_ip)

    def on_failure(self, request: Request) -> Response:
        retry_after = self.limiter.retry_after(request.client_ip)
        return Response.json(
            {
                "error": "Rate limit exceeded",
                "message": f"Please try again after {retry_after} seconds.",
                "retry_after": retry_after,
            },
            status=429,
        ).with_header("Retry-After", str(retry_after))
