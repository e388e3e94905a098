"""
In-memory sliding window rate limiting, keyed by client IP.

State lives in the process, so limits are per worker.
"""
import logging
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, List, Optional

from fastapi import HTTPException, Request, status

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """Client IP, honouring the first hop of X-Forwarded-For behind a proxy."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RateLimiter:
    """Allows ``max_requests`` hits per key within any ``window_seconds`` span."""

    def __init__(self, max_requests: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)

    def hit(self, key: str) -> bool:
        """Record a request for ``key``. Returns False when it is over the limit."""
        now = self.clock()
        hits = self._hits[key]
        while hits and hits[0] <= now - self.window_seconds:
            hits.popleft()

        if len(hits) >= self.max_requests:
            return False

        hits.append(now)
        return True

    def reset(self) -> None:
        self._hits.clear()


_limiters: List[RateLimiter] = []


def rate_limited(
    max_requests: int = 10,
    window_seconds: int = 60,
    exc_factory: Optional[Callable[[str], Exception]] = None,
):
    """
    Dependency factory. Each call creates an independent limiter for one route.

    ``exc_factory`` builds the exception raised on excess from the message,
    for routes with their own error body.

    Raises:
        HTTPException: 429 once the caller exceeds the limit
    """
    limiter = RateLimiter(max_requests, window_seconds)
    _limiters.append(limiter)

    def check(request: Request) -> None:
        ip = get_client_ip(request)
        if not limiter.hit(ip):
            logger.warning(f"Rate limit exceeded: ip={ip}, path={request.url.path}")
            message = f"Rate limit exceeded. Maximum {max_requests} requests per {window_seconds} seconds."
            if exc_factory is not None:
                raise exc_factory(message)
            raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=message)

    return check


def reset_rate_limits() -> None:
    """Forget all recorded hits on every route limiter."""
    for limiter in _limiters:
        limiter.reset()
