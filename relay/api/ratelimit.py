from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable

from cachetools import TTLCache


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after_seconds: int


class FixedWindowRateLimiter:
    """Counts hits per client key in fixed windows starting at the first hit.

    The window start is stored with the count; the cache TTL only evicts
    idle clients.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: int,
        max_clients: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._max_clients = max_clients
        self._clock = clock
        self._windows: TTLCache[str, tuple[float, int]] = self._new_cache()

    def _new_cache(self) -> TTLCache[str, tuple[float, int]]:
        return TTLCache(maxsize=self._max_clients, ttl=self.window_seconds, timer=self._clock)

    def hit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        window_start, count = self._windows.get(key, (now, 0))
        if now - window_start >= self.window_seconds:
            window_start, count = now, 0
        count += 1
        self._windows[key] = (window_start, count)
        reset_after = max(0, math.ceil(window_start + self.window_seconds - now))
        return RateLimitDecision(
            allowed=count <= self.limit,
            limit=self.limit,
            remaining=max(0, self.limit - count),
            reset_after_seconds=reset_after,
        )

    def reset(self) -> None:
        self._windows = self._new_cache()
