"""Fixed-window request counter keyed by an arbitrary string.

Used as an abuse deterrent on unauthenticated flows, not as a strict quota:
up to twice the limit can pass across a window boundary.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta

from utils.clock import Clock, utc_now

logger = logging.getLogger(__name__)

DEFAULT_EVICTION_INTERVAL = timedelta(minutes=5)


@dataclass
class RateLimitRecord:
    count: int
    reset_at: datetime


class RateLimiter:
    """Process-local, thread-safe rate limiter.

    Records live in memory only and are lost on restart. Records whose
    window has elapsed are evicted periodically so idle keys do not
    accumulate.
    """

    def __init__(
        self,
        clock: Clock = utc_now,
        eviction_interval: timedelta = DEFAULT_EVICTION_INTERVAL,
    ):
        self._clock = clock
        self._eviction_interval = eviction_interval
        self._records: dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()
        self._next_eviction = clock() + eviction_interval

    def allow(self, key: str, max_requests: int, window_ms: int) -> bool:
        """Count one request for key and report whether it is within the limit."""
        now = self._clock()
        with self._lock:
            if now >= self._next_eviction:
                self._evict_locked(now)
                self._next_eviction = now + self._eviction_interval

            record = self._records.get(key)
            if record is None or now > record.reset_at:
                record = RateLimitRecord(
                    count=0, reset_at=now + timedelta(milliseconds=window_ms)
                )
                self._records[key] = record

            record.count += 1
            allowed = record.count <= max_requests

        if not allowed:
            logger.warning("Rate limit exceeded", extra={"rateLimitKey": key})
        return allowed

    def retry_after(self, key: str) -> int | None:
        """Seconds until the key's current window resets, or None if untracked."""
        with self._lock:
            record = self._records.get(key)
            if record is None:
                return None
            remaining = (record.reset_at - self._clock()).total_seconds()
        return max(0, int(remaining) + 1)

    def evict_expired(self) -> int:
        """Drop records whose window has elapsed. Return the number removed."""
        with self._lock:
            return self._evict_locked(self._clock())

    def _evict_locked(self, now: datetime) -> int:
        expired = [key for key, record in self._records.items() if now > record.reset_at]
        for key in expired:
            del self._records[key]
        if expired:
            logger.debug("Evicted rate limit records", extra={"count": len(expired)})
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
