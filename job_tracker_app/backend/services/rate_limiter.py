"""
Sliding-window rate limiter.

Advisory throttling only: it protects against accidental double submits and
runaway clients, and does not stand in for limits enforced by the database or
a gateway.
"""
import logging
import threading
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, Optional

from ..config.settings import get_settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """Allow at most ``max_requests`` calls per key in any trailing window."""

    def __init__(
        self,
        max_requests: int = 10,
        time_window_ms: int = 60000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.time_window_ms = time_window_ms
        self._clock = clock
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    def can_make_request(self, key: str) -> bool:
        now = self._now_ms()
        with self._lock:
            timestamps = self._requests[key]
            # Evict everything that fell out of the trailing window
            while timestamps and now - timestamps[0] >= self.time_window_ms:
                timestamps.popleft()

            if len(timestamps) >= self.max_requests:
                logger.debug("Rate limit hit for %s (%d in window)", key, len(timestamps))
                return False

            timestamps.append(now)
            return True

    def reset(self, key: Optional[str] = None) -> None:
        with self._lock:
            if key is None:
                self._requests.clear()
            else:
                self._requests.pop(key, None)


_settings = get_settings()
api_rate_limiter = RateLimiter(
    max_requests=_settings.rate_limit_max_requests,
    time_window_ms=_settings.rate_limit_window_ms,
)


def get_rate_limiter() -> RateLimiter:
    """FastAPI dependency returning the shared limiter."""
    return api_rate_limiter
