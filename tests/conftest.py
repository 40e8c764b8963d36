"""
Pytest fixtures for the counter duel test suite.
"""
from __future__ import annotations

import io
import itertools
import logging
import sys
import tempfile
from pathlib import Path
from typing import Generator, Iterable

import pytest

# Add repo root to path
repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from apps.duel.config_utils import DuelSettings  # noqa: E402
from apps.duel.console import Console  # noqa: E402
from counterduel.common.stats import RateCounter  # noqa: E402
from counterduel.counter.engine import CounterReading, CounterSnapshot  # noqa: E402


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def duel_config() -> dict:
    """Duel configuration as it would be read from YAML."""
    return {
        "players": {"name1": "Alice", "name2": "Bob"},
        "attributes": {"vitality": 100, "speed": 40, "strength": 20},
        "turn": {"objectives": 3, "observer_poll_ms": 10, "result_pause_ms": 0},
        "penalty": {"amount": 5},
        "logging": {"level": "DEBUG", "dir": "logs"},
    }


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("tests.duel")


def make_settings(**overrides) -> DuelSettings:
    values = {
        "name1": "Player 1",
        "name2": "Player 2",
        "vitality": 50,
        "speed": 50,
        "strength": 50,
        "objectives": 1,
        "observer_poll_ms": 5,
        "result_pause_ms": 0,
        "penalty_amount": 5,
        "log_level": "DEBUG",
        "log_dir": Path("logs"),
        "seed": 7,
    }
    values.update(overrides)
    return DuelSettings(**values)


def make_console(lines: Iterable[str] = ()) -> Console:
    """Console fed with scripted input lines and capturing its output."""
    text = "".join(line if line.endswith("\n") else line + "\n" for line in lines)
    return Console(stdin=io.StringIO(text), stdout=io.StringIO())


class FixedRng:
    """Stand-in for random.Random that always draws the same target."""

    def __init__(self, value: int) -> None:
        self.value = value

    def randint(self, low: int, high: int) -> int:
        return self.value


class FakeCounterEngine:
    """Counter engine double that stops at a preset reading."""

    def __init__(self, value: int = 0, miss: int = 0) -> None:
        self.value = value
        self.miss = miss
        self.started_with: int | None = None
        self.stopped = False
        self.joined = False
        self.ticks = RateCounter()
        self._running = False

    def start(self, tick_interval_ms: int) -> None:
        self.started_with = tick_interval_ms
        self._running = True

    def stop(self) -> CounterReading:
        self._running = False
        self.stopped = True
        return CounterReading(self.value, self.miss)

    def join(self, timeout: float | None = None) -> bool:
        self.joined = True
        return True

    def snapshot(self) -> CounterSnapshot:
        return CounterSnapshot(self.value, self.miss, self._running)


class FakeEngineFactory:
    """Hands out fake engines whose readings cycle through ``readings``."""

    def __init__(self, readings: Iterable[tuple[int, int]]) -> None:
        self._readings = itertools.cycle(list(readings))
        self.engines: list[FakeCounterEngine] = []

    def __call__(self) -> FakeCounterEngine:
        value, miss = next(self._readings)
        engine = FakeCounterEngine(value, miss)
        self.engines.append(engine)
        return engine


@pytest.fixture
def recorder():
    """Render callback that keeps every frame it receives."""

    class Recorder:
        def __init__(self) -> None:
            self.frames: list = []

        def __call__(self, frame) -> None:
            self.frames.append(frame)

    return Recorder()
