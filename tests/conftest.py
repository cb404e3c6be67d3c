"""Shared pytest fixtures for the status_checker package tests.

Provides scripted fake probers and configuration objects so tests stay
deterministic and never touch the network.
"""

import threading
import time
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pytest

from status_checker.config import AppConfig
from status_checker.network import AttemptOutcome


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """Application config fixture.

    Points logging and output to a temporary directory.
    """
    return AppConfig(
        log_directory=tmp_path,
        log_level="INFO",
        output_path=tmp_path / "status.json",
    )


Step = Union[int, str]


class FakeProber:
    """Prober returning scripted outcomes per URL.

    Each script entry is either an int (status code) or a str (error). The last
    entry repeats once the script runs out. ``delay`` makes each probe block
    for that many seconds so concurrency can be observed.
    """

    def __init__(
        self,
        scripts: Optional[Dict[str, Sequence[Step]]] = None,
        *,
        default: Step = 200,
        delay: float = 0.0,
        elapsed_ms: Optional[Dict[str, Sequence[int]]] = None,
    ) -> None:
        self._scripts = {url: list(steps) for url, steps in (scripts or {}).items()}
        self._default = default
        self._delay = delay
        self._elapsed = {url: list(values) for url, values in (elapsed_ms or {}).items()}
        self._lock = threading.Lock()
        self.calls: Dict[str, int] = defaultdict(int)
        self.order: List[str] = []
        self.active = 0
        self.max_active = 0
        self.closed = False

    def _step(self, url: str, index: int) -> Step:
        steps = self._scripts.get(url)
        if not steps:
            return self._default
        return steps[min(index, len(steps) - 1)]

    def _elapsed_for(self, url: str, index: int) -> int:
        values = self._elapsed.get(url)
        if not values:
            return 10 * (index + 1)
        return values[min(index, len(values) - 1)]

    def probe(self, url: str, timeout: float) -> AttemptOutcome:
        with self._lock:
            index = self.calls[url]
            self.calls[url] += 1
            self.order.append(url)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self._delay:
                time.sleep(self._delay)
            step = self._step(url, index)
            elapsed = self._elapsed_for(url, index)
            if isinstance(step, int):
                return AttemptOutcome(url=url, status_code=step, error=None, elapsed_ms=elapsed)
            return AttemptOutcome(url=url, status_code=None, error=step, elapsed_ms=elapsed)
        finally:
            with self._lock:
                self.active -= 1

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def no_sleep():
    """Sleep replacement recording requested delays instead of waiting."""
    delays: List[float] = []

    def _sleep(seconds: float) -> None:
        delays.append(seconds)

    _sleep.delays = delays  # type: ignore[attr-defined]
    return _sleep


@pytest.fixture
def make_prober():
    """Factory fixture building ``FakeProber`` instances."""
    return FakeProber
