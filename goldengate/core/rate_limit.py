"""In-memory fixed-window rate limiting for form submissions.

Counters live in process memory, so they reset on restart and are not
shared between workers.
"""

import logging
import math
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict

from fastapi import HTTPException, Request

from .http import get_client_ip


logger = logging.getLogger(__name__)

CLEANUP_INTERVAL_SECONDS = 60


@dataclass
class RateLimitResult:
    success: bool
    remaining: int
    reset_at: float


class RateLimiter:
    def __init__(self, clock=time.time):
        self._clock = clock
        self._records: Dict[str, list] = {}  # key -> [count, reset_at]
        self._lock = threading.Lock()
        self._last_cleanup = clock()

    def _cleanup(self, now: float) -> None:
        if now - self._last_cleanup < CLEANUP_INTERVAL_SECONDS:
            return
        self._last_cleanup = now
        for key in [k for k, (_, reset_at) in self._records.items() if now > reset_at]:
            del self._records[key]

    def check(self, ip: str, *, identifier: str, limit: int, window_seconds: int) -> RateLimitResult:
        key = f"{identifier}:{ip}"
        now = self._clock()
        with self._lock:
            self._cleanup(now)
            record = self._records.get(key)

            if record is None or now > record[1]:
                reset_at = now + window_seconds
                self._records[key] = [1, reset_at]
                return RateLimitResult(True, limit - 1, reset_at)

            if record[0] >= limit:
                return RateLimitResult(False, 0, record[1])

            record[0] += 1
            return RateLimitResult(True, limit - record[0], record[1])

    def reset(self) -> None:
        with self._lock:
            self._records.clear()


limiter = RateLimiter()


def enforce_rate_limit(request: Request, *, identifier: str, limit: int, window_seconds: int) -> None:
    """Raise 429 when the caller exceeded `limit` requests in the window."""
    ip = get_client_ip(request)
    result = limiter.check(ip, identifier=identifier, limit=limit, window_seconds=window_seconds)
    if result.success:
        return

    retry_after = max(1, math.ceil(result.reset_at - time.time()))
    reset_iso = datetime.fromtimestamp(result.reset_at, tz=timezone.utc).isoformat()
    logger.warning(f"Rate limit exceeded for {identifier} from {ip}")
    raise HTTPException(
        status_code=429,
        detail="Too many requests. Please try again later.",
        headers={"Retry-After": str(retry_after), "X-RateLimit-Reset": reset_iso},
    )
