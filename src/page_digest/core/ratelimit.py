from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from time import monotonic

from aiolimiter import AsyncLimiter

from page_digest.core.errors import RateLimitError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Deadline:
    """An absolute point on the monotonic clock shared by every wait in one page fetch."""

    expires_at: float

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        return cls(expires_at=monotonic() + float(seconds))

    def remaining(self) -> float:
        return max(0.0, self.expires_at - monotonic())

    @property
    def expired(self) -> bool:
        return monotonic() >= self.expires_at


class TokenBucket:
    """Token bucket admitting ``rate`` requests per second with bursts up to ``burst``.

    aiolimiter models a leaky bucket of size ``max_rate`` that drains
    ``max_rate`` units every ``time_period`` seconds. Sizing it to ``burst``
    and draining it over ``burst / rate`` seconds is the same thing as a token
    bucket of capacity ``burst`` refilling at ``rate`` tokens per second.
    """

    def __init__(self, rate: float, burst: int) -> None:
        rate = float(rate)
        burst = int(burst)
        if rate <= 0:
            raise ValueError("rate must be > 0")
        if burst < 1:
            raise ValueError("burst must be >= 1")
        self._rate = rate
        self._burst = burst
        self._limiter = AsyncLimiter(max_rate=burst, time_period=burst / rate)

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def burst(self) -> int:
        return self._burst

    def has_capacity(self) -> bool:
        return self._limiter.has_capacity()

    async def acquire(self, deadline: Deadline | None = None) -> None:
        """Consume one token, waiting for it to accrue if necessary.

        Raises RateLimitError when ``deadline`` passes before a token is granted.
        """

        if deadline is None:
            await self._limiter.acquire()
            return
        if deadline.expired:
            raise RateLimitError("deadline expired before rate limiter admission")
        try:
            await asyncio.wait_for(self._limiter.acquire(), timeout=deadline.remaining())
        except asyncio.TimeoutError as e:
            logger.debug("Rate limiter wait hit deadline (rate=%s burst=%s)", self._rate, self._burst)
            raise RateLimitError("deadline expired while waiting for rate limiter admission") from e
