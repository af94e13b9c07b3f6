# invitation_service/rate_limit.py

# =================================================================================
# 🚦 Lightweight in-memory rate limit
# ---------------------------------------------------------------------------------
# - Sliding window per key (e.g. "login:<ip>").
# - Good enough for a single uvicorn process; multi-instance deployments should
#   rate-limit at the reverse proxy instead.
# - One limiter instance lives on app.state so tests get a fresh one per app.
# =================================================================================

import threading
import time
from collections import deque
from typing import Callable, Deque, Dict

from fastapi import Request
from loguru import logger


class SlidingWindowLimiter:
    def __init__(self, max_req: int, window_s: int, clock: Callable[[], float] = time.monotonic):
        self.max_req = max_req
        self.window_s = window_s
        self._clock = clock
        self._buckets: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def is_allowed(self, key: str) -> bool:
        """True if one more action for `key` fits in the current window."""
        if self.max_req <= 0:
            return True

        with self._lock:
            bucket = self._buckets.setdefault(key, deque())
            now = self._clock()

            cutoff = now - self.window_s
            while bucket and bucket[0] <= cutoff:
                bucket.popleft()

            if len(bucket) >= self.max_req:
                logger.warning(
                    "Rate limit hit for key='{}' ({}/{} in {}s)",
                    key, len(bucket), self.max_req, self.window_s,
                )
                return False

            bucket.append(now)
            return True

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()


def client_ip(request: Request) -> str:
    """Real client IP, honouring X-Forwarded-For from proxies / CDNs."""
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    return request.client.host if request.client else "unknown"
