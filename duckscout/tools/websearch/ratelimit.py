"""Fixed-window request limiter keyed by client identity."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from duckscout.tools.websearch.errors import RateLimited


@dataclass(frozen=True, slots=True)
class RateRecord:
    """Requests admitted in the current window."""

    count: int
    reset_at: float


class RateLimiter:
    """Admit at most `max_requests` per client in each `window_seconds` window."""

    def __init__(
        self,
        max_requests: int = 3,
        window_seconds: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max(0, max_requests)
        self.window_seconds = window_seconds
        self._clock = clock
        self._records: dict[str, RateRecord] = {}

    def acquire(self, client_id: str) -> None:
        """Count one request for the client or raise RateLimited."""
        now = self._clock()
        record = self._current(client_id, now)
        if record.count >= self.max_requests:
            raise RateLimited(
                f"Rate limit: {self.max_requests} requests per "
                f"{self.window_seconds:g}s per client"
            )
        self._records[client_id] = RateRecord(count=record.count + 1, reset_at=record.reset_at)

    def remaining(self, client_id: str) -> int:
        record = self._current(client_id, self._clock())
        return max(0, self.max_requests - record.count)

    def prune(self) -> int:
        """Drop records whose window has passed. Returns how many were removed."""
        now = self._clock()
        stale = [key for key, record in self._records.items() if now > record.reset_at]
        for key in stale:
            del self._records[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._records)

    def _current(self, client_id: str, now: float) -> RateRecord:
        record = self._records.get(client_id)
        if record is not None and now > record.reset_at:
            del self._records[client_id]
            record = None
        return record or RateRecord(count=0, reset_at=now + self.window_seconds)
