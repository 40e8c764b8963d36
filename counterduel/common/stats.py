from __future__ import annotations

import threading
import time


class RateCounter:
    """Thread-safe event counter with a resettable measurement interval."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._start = time.monotonic()
        self._interval_start = self._start
        self.total = 0
        self._interval_total = 0

    def increment(self, count: int = 1) -> None:
        with self._lock:
            self.total += count
            self._interval_total += count

    def snapshot(self, reset_interval: bool = True) -> dict:
        now = time.monotonic()
        with self._lock:
            interval = now - self._interval_start
            rate = self._interval_total / interval if interval > 0 else 0.0
            snapshot = {
                "total": self.total,
                "elapsed_sec": now - self._start,
                "interval_sec": interval,
                "interval_count": self._interval_total,
                "rate_hz": rate,
            }
            if reset_interval:
                self._interval_start = now
                self._interval_total = 0
        return snapshot
