"""Fixed-window request counting per client address."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass(slots=True, frozen=True)
class RateLimitRule:
    name: str
    limit: int
    window_seconds: int


@dataclass(slots=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    retry_after: int


@dataclass(slots=True)
class _Window:
    started_at: float
    window_seconds: int
    count: int = 0

    def expired(self, now: float) -> bool:
        return now - self.started_at >= self.window_seconds


@dataclass
class RateLimiter:
    """Counts hits per (rule, key) inside the rule's current window."""

    clock: Callable[[], float] = time.monotonic
    _windows: dict[tuple[str, str], _Window] = field(default_factory=dict)

    def hit(self, rule: RateLimitRule, key: str) -> RateLimitDecision:
        now = self.clock()
        bucket = (rule.name, key)
        window = self._windows.get(bucket)
        if window is None or window.expired(now):
            window = _Window(started_at=now, window_seconds=rule.window_seconds)
            self._windows[bucket] = window
            self._prune(now)

        window.count += 1
        remaining = max(rule.limit - window.count, 0)
        retry_after = max(math.ceil(window.started_at + rule.window_seconds - now), 0)
        return RateLimitDecision(
            allowed=window.count <= rule.limit,
            limit=rule.limit,
            remaining=remaining,
            retry_after=retry_after,
        )

    def reset(self) -> None:
        self._windows.clear()

    def _prune(self, now: float) -> None:
        stale = [key for key, window in self._windows.items() if window.expired(now)]
        for key in stale:
            del self._windows[key]


__all__ = ["RateLimitDecision", "RateLimitRule", "RateLimiter"]
