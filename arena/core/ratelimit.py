"""Request rate limiting.

``RateLimiter`` is the interface the API layer depends on; the in-process
``FixedWindowRateLimiter`` is enough for a single instance. Multi-instance
deployments should provide an implementation backed by a shared store.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Protocol, Tuple


@dataclass(frozen=True)
class RateLimitRule:
    max_requests: int
    window_seconds: float


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: int


class RateLimiter(Protocol):
    def check(self, key: str, rule: RateLimitRule) -> RateLimitDecision:
        ...

    def reset(self, key: str) -> None:
        ...


RATE_LIMITS: Dict[str, RateLimitRule] = {
    "score_submission": RateLimitRule(max_requests=30, window_seconds=5 * 60),
    "bookmarklet": RateLimitRule(max_requests=60, window_seconds=5 * 60),
    "image_upload": RateLimitRule(max_requests=20, window_seconds=10 * 60),
}


class FixedWindowRateLimiter:
    """Counts requests per key inside a fixed window."""

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: float = 5 * 60,
    ) -> None:
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._entries: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()
        self._next_sweep = clock() + sweep_interval

    def check(self, key: str, rule: RateLimitRule) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)

            count, reset_at = self._entries.get(key, (0, 0.0))
            if now >= reset_at:
                reset_at = now + rule.window_seconds
                count = 0

            retry_after = max(1, math.ceil(reset_at - now))
            if count >= rule.max_requests:
                return RateLimitDecision(False, 0, retry_after)

            count += 1
            self._entries[key] = (count, reset_at)
            return RateLimitDecision(True, rule.max_requests - count, retry_after)

    def reset(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def _sweep(self, now: float) -> None:
        expired = [key for key, (_, reset_at) in self._entries.items() if now >= reset_at]
        for key in expired:
            del self._entries[key]
        self._next_sweep = now + self._sweep_interval

    def __len__(self) -> int:
        return len(self._entries)


__all__ = [
    "FixedWindowRateLimiter",
    "RATE_LIMITS",
    "RateLimitDecision",
    "RateLimitRule",
    "RateLimiter",
]
