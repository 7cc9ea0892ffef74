"""Sliding-window limiter for chat messages."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable, Deque

DEFAULT_SWEEP_INTERVAL = 5 * 60.0


class MessageRateLimiter:
    """Allow at most ``limit`` hits per ``(user, thread)`` within ``window_seconds``.

    Keys whose hits have all expired are swept out of memory at most once per
    ``sweep_interval`` seconds, piggybacking on :meth:`hit`.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.limit = limit
        self.window_seconds = window_seconds
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._hits: dict[tuple[int, int], Deque[float]] = {}
        self._last_sweep = clock()
        # Request handlers run in a thread pool.
        self._lock = threading.Lock()

    def hit(self, user_id: int, thread_id: int) -> bool:
        """Record an attempt and return ``False`` when it exceeds the limit."""

        now = self._clock()
        key = (user_id, thread_id)
        with self._lock:
            if now - self._last_sweep >= self.sweep_interval:
                self._sweep(now)
            timestamps = self._hits.setdefault(key, deque())
            self._expire(timestamps, now)
            if len(timestamps) >= self.limit:
                return False
            timestamps.append(now)
            return True

    def cleanup(self) -> None:
        """Drop keys whose hits have all expired."""

        now = self._clock()
        with self._lock:
            self._sweep(now)

    def _sweep(self, now: float) -> None:
        for key in list(self._hits):
            timestamps = self._hits[key]
            self._expire(timestamps, now)
            if not timestamps:
                del self._hits[key]
        self._last_sweep = now

    def _expire(self, timestamps: Deque[float], now: float) -> None:
        while timestamps and now - timestamps[0] >= self.window_seconds:
            timestamps.popleft()

    def __len__(self) -> int:
        return len(self._hits)


__all__ = ["DEFAULT_SWEEP_INTERVAL", "MessageRateLimiter"]
