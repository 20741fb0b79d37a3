"""Per-host request pacing for the content API.

Responsibilities:
- Space consecutive requests to one host by a minimum interval.
- Derive the pacing key from the request URL so both API roots share a budget
  when they live on the same host.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from time import monotonic, sleep
from typing import Callable
from urllib.parse import urlparse


@dataclass(slots=True)
class RateLimiter:
    """Minimum-interval limiter keyed by host name."""

    min_interval_seconds: float = 0.05
    clock: Callable[[], float] = monotonic
    sleeper: Callable[[float], None] = sleep
    _last_request_at: dict[str, float] = field(default_factory=dict)

    def remaining(self, key: str) -> float:
        """Return seconds left before `key` may send again (0 when ready)."""

        last = self._last_request_at.get(key)
        if last is None or self.min_interval_seconds <= 0.0:
            return 0.0
        return max(0.0, last + self.min_interval_seconds - self.clock())

    def acquire(self, key: str) -> None:
        """Sleep until `key` is ready, then record the request time."""

        wait_seconds = self.remaining(key)
        if wait_seconds > 0.0:
            self.sleeper(wait_seconds)
        self._last_request_at[key] = self.clock()

    def acquire_for(self, url: str) -> None:
        """Pace a request by the host part of its URL."""

        self.acquire(urlparse(url).netloc or url)
