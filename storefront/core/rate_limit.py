"""
Fixed-window rate limiting

Counters live in the limiter instance owned by the application, keyed by
``<scope>:<client-ip>``. A bucket is reset lazily on the first hit after its
window expires. Every ``sweep_interval`` checks, expired buckets of clients
that never came back are dropped. Counts are per process; a multi-instance
deployment needs a shared store behind the same interface.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Request

from .errors import ApiError, get_client_ip

logger = logging.getLogger(__name__)

SWEEP_INTERVAL = 1000


@dataclass
class RateLimitResult:
    """Outcome of a single rate-limit check"""
    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after: int


@dataclass
class _Bucket:
    count: int
    reset_at: float


class FixedWindowRateLimiter:
    """In-memory fixed-window counter"""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: int = SWEEP_INTERVAL,
    ):
        self._clock = clock
        self._buckets: dict[str, _Bucket] = {}
        self._sweep_interval = sweep_interval
        self._checks = 0

    def check(self, key: str, limit: int, window_seconds: float) -> RateLimitResult:
        """Count one hit against ``key`` and report whether it is allowed"""
        now = self._clock()
        self._checks += 1
        if self._checks >= self._sweep_interval:
            self._checks = 0
            self.sweep(now)

        bucket = self._buckets.get(key)

        if bucket is None or bucket.reset_at <= now:
            reset_at = now + window_seconds
            self._buckets[key] = _Bucket(count=1, reset_at=reset_at)
            return RateLimitResult(
                allowed=True,
                limit=limit,
                remaining=max(0, limit - 1),
                reset_at=reset_at,
                retry_after=math.ceil(window_seconds),
            )

        if bucket.count >= limit:
            return RateLimitResult(
                allowed=False,
                limit=limit,
                remaining=0,
                reset_at=bucket.reset_at,
                retry_after=math.ceil(max(0.0, bucket.reset_at - now)),
            )

        bucket.count += 1
        return RateLimitResult(
            allowed=True,
            limit=limit,
            remaining=max(0, limit - bucket.count),
            reset_at=bucket.reset_at,
            retry_after=math.ceil(bucket.reset_at - now),
        )

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop buckets whose window has ended; returns how many were removed"""
        now = self._clock() if now is None else now
        expired = [key for key, bucket in self._buckets.items() if bucket.reset_at <= now]
        for key in expired:
            del self._buckets[key]
        if expired:
            logger.debug(f"Swept {len(expired)} expired rate-limit buckets")
        return len(expired)

    def __len__(self) -> int:
        return len(self._buckets)

    def reset(self) -> None:
        """Drop every bucket"""
        self._buckets.clear()


class RateLimit:
    """
    FastAPI dependency that throttles a route per client address.

    Usage:
        @router.post("", dependencies=[Depends(RateLimit("orders", limit=5))])
    """

    def __init__(self, scope: str, limit: int, window_seconds: float = 60):
        self.scope = scope
        self.limit = limit
        self.window_seconds = window_seconds

    async def __call__(self, request: Request) -> None:
        settings = request.app.state.settings
        if not settings.rate_limit_enabled:
            return

        limiter: FixedWindowRateLimiter = request.app.state.rate_limiter
        key = f"{self.scope}:{get_client_ip(request)}"
        result = limiter.check(key, self.limit, self.window_seconds)

        if not result.allowed:
            logger.warning(f"Rate limit exceeded for {key}")
            raise ApiError(
                status_code=429,
                code="RATE_LIMITED",
                message="Too many requests. Please try again shortly.",
                headers={"Retry-After": str(result.retry_after)},
            )
