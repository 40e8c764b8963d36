from __future__ import annotations

import logging
import threading
import time
from typing import NamedTuple

from counterduel.common.errors import CounterStartError
from counterduel.common.stats import RateCounter

MAX_VALUE = 100


class CounterSnapshot(NamedTuple):
    value: int
    miss: int
    running: bool


class CounterReading(NamedTuple):
    value: int
    miss: int


def validate_interval_ms(interval_ms: int, label: str = "tick interval") -> int:
    if isinstance(interval_ms, bool) or not isinstance(interval_ms, int):
        raise ValueError(f"{label} must be an integer number of milliseconds, got {interval_ms!r}")
    if interval_ms <= 0:
        raise ValueError(f"{label} must be positive, got {interval_ms}ms")
    return interval_ms


class CounterState:
    """Value, miss count and running flag behind a single lock.

    The increment loop is the only writer of ``value`` and ``miss``. Every run
    gets a new epoch so a loop thread left over from an earlier run cannot
    advance the counter of the current one.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0
        self._miss = 0
        self._running = False
        self._epoch = 0

    def begin(self) -> int:
        with self._lock:
            self._value = 0
            self._miss = 0
            self._running = True
            self._epoch += 1
            return self._epoch

    def advance(self, epoch: int | None = None) -> bool:
        """Apply one tick. Returns False when the run it belongs to is over."""
        with self._lock:
            if not self._running:
                return False
            if epoch is not None and epoch != self._epoch:
                return False
            self._value += 1
            # Wrap and count the miss before releasing the lock.
            if self._value > MAX_VALUE:
                self._value = 0
                self._miss += 1
            return True

    def halt(self) -> CounterReading:
        with self._lock:
            self._running = False
            return CounterReading(self._value, self._miss)

    def snapshot(self) -> CounterSnapshot:
        with self._lock:
            return CounterSnapshot(self._value, self._miss, self._running)


class CounterEngine:
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    STOPPING = "STOPPING"

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("duel.counter")
        self.state = CounterState()
        self.ticks = RateCounter()
        self._thread: threading.Thread | None = None

    @property
    def phase(self) -> str:
        if self.state.snapshot().running:
            return self.RUNNING
        if self._thread is not None and self._thread.is_alive():
            return self.STOPPING
        return self.IDLE

    def start(self, tick_interval_ms: int) -> None:
        interval_ms = validate_interval_ms(tick_interval_ms)
        epoch = self.state.begin()
        # Each run counts into its own counter; a stale loop keeps the old one.
        ticks = RateCounter()
        self.ticks = ticks
        thread = threading.Thread(
            target=self._run,
            args=(epoch, interval_ms / 1000.0, ticks),
            name=f"counter-{epoch}",
            daemon=True,
        )
        try:
            thread.start()
        except RuntimeError as exc:
            self.state.halt()
            raise CounterStartError(f"Failed to start counter thread: {exc}") from exc
        self._thread = thread
        self.logger.debug("Counter started: epoch=%d interval=%dms", epoch, interval_ms)

    def stop(self) -> CounterReading:
        """Request the loop to stop and return the value and miss count right now.

        The loop thread may still be asleep and exits on its next wake; use
        ``join`` when no further activity must be guaranteed.
        """
        reading = self.state.halt()
        self.logger.debug("Counter stop requested: value=%d miss=%d", reading.value, reading.miss)
        return reading

    def snapshot(self) -> CounterSnapshot:
        return self.state.snapshot()

    def join(self, timeout: float | None = None) -> bool:
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _run(self, epoch: int, interval_sec: float, ticks: RateCounter) -> None:
        while True:
            time.sleep(interval_sec)
            if not self.state.advance(epoch):
                break
            ticks.increment()
        self.logger.debug("Counter loop exited: epoch=%d", epoch)
