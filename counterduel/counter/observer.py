from __future__ import annotations

import logging
import threading
import time
from typing import Callable, NamedTuple, Protocol

from counterduel.common.errors import ObserverError
from counterduel.common.stats import RateCounter
from counterduel.counter.engine import CounterSnapshot, validate_interval_ms

DEFAULT_POLL_INTERVAL_MS = 30


class Frame(NamedTuple):
    target: int
    miss: int
    value: int


class SnapshotSource(Protocol):
    def snapshot(self) -> CounterSnapshot: ...


class LiveObserver:
    """Polls a counter on its own thread and hands each reading to ``render``.

    The observer only reads. A render failure ends the loop and is raised
    from ``join`` as ``ObserverError``.
    """

    def __init__(
        self,
        source: SnapshotSource,
        target: int,
        render: Callable[[Frame], None],
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.source = source
        self.target = target
        self.render = render
        self.poll_interval_ms = validate_interval_ms(poll_interval_ms, "poll interval")
        self.logger = logger or logging.getLogger("duel.observer")
        self.frames = RateCounter()
        self.last_frame: Frame | None = None
        self._error: Exception | None = None
        self._thread = threading.Thread(target=self._run, name=f"observer-{target}", daemon=True)

    def start(self) -> None:
        try:
            self._thread.start()
        except RuntimeError as exc:
            raise ObserverError(f"Failed to start observer thread: {exc}") from exc

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)
        if self._thread.is_alive():
            raise ObserverError(f"Observer for objective {self.target} did not exit within {timeout}s")
        if self._error is not None:
            raise ObserverError(f"Render loop failed: {self._error}") from self._error

    def _run(self) -> None:
        try:
            self._poll()
        except Exception as exc:
            self._error = exc
            self.logger.error("Observer for objective %d failed: %s", self.target, exc)

    def _poll(self) -> None:
        interval = self.poll_interval_ms / 1000.0
        while True:
            snap = self.source.snapshot()
            if not snap.running:
                break
            frame = Frame(self.target, snap.miss, snap.value)
            self.render(frame)
            self.last_frame = frame
            self.frames.increment()
            time.sleep(interval)


def observe(
    source: SnapshotSource,
    target: int,
    render: Callable[[Frame], None],
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    logger: logging.Logger | None = None,
) -> LiveObserver:
    observer = LiveObserver(source, target, render, poll_interval_ms=poll_interval_ms, logger=logger)
    observer.start()
    return observer
