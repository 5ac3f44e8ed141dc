"""
ClaimIQ Token Bucket Rate Limiter

Per-key token buckets refilled continuously at limit/window tokens per
second. Expiry is lazy: buckets idle for longer than a full window are
evicted during lookups, so no background timer is needed.
"""
from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from .ports import RateLimitDecision


@dataclass
class _Bucket:
    tokens: float
    updated_at: float


class TokenBucketRateLimiter:
    """
    In-process token buckets keyed by principal.

    Usage:
        limiter = TokenBucketRateLimiter()
        decision = limiter.check("alice", limit=60, window=60.0)
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._buckets: dict[str, _Bucket] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)

    def _evict_idle(self, now: float, window: float) -> None:
        idle = [k for k, b in self._buckets.items() if now - b.updated_at >= window]
        for key in idle:
            del self._buckets[key]

    def check(self, key: str, limit: int, window: float) -> RateLimitDecision:
        """
        Take one token from key's bucket.

        Raises:
            ValueError: window is not positive
        """
        if window <= 0:
            raise ValueError(f"Rate limit window must be positive, got {window}")
        if limit <= 0:
            return RateLimitDecision(allowed=False, remaining=0, retry_after=window)

        now = self._clock()
        refill_rate = limit / window
        with self._lock:
            # An idle bucket would be full again anyway
            self._evict_idle(now, window)
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = _Bucket(tokens=float(limit), updated_at=now)
                self._buckets[key] = bucket
            else:
                elapsed = now - bucket.updated_at
                bucket.tokens = min(float(limit), bucket.tokens + elapsed * refill_rate)
                bucket.updated_at = now

            if bucket.tokens >= 1.0:
                bucket.tokens -= 1.0
                return RateLimitDecision(allowed=True, remaining=int(bucket.tokens))

            retry_after = (1.0 - bucket.tokens) / refill_rate
            return RateLimitDecision(
                allowed=False,
                remaining=0,
                retry_after=math.ceil(retry_after * 1000) / 1000,
            )
