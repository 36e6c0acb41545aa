"""Startup step timing.

Records how long each bootstrap step takes so slow startups can be traced to
a step (database migration, session check, sound loading). Steps cannot
nest: one step must finish before the next starts, matching the strictly
sequential bootstrap.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from time import perf_counter
from typing import Iterator, List

__all__ = ["StepTiming", "TimingLogger"]

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepTiming:
    name: str
    start: float
    end: float
    ok: bool = True

    @property
    def duration(self) -> float:  # seconds
        return self.end - self.start


class TimingLogger:
    """Collects timing records for labelled startup steps.

    Usage:
        timing = TimingLogger()
        with timing.measure("open_database"):
            open_db(path)
        timing.stop()
    """

    def __init__(self) -> None:
        self._started_at = perf_counter()
        self._steps: List[StepTiming] = []
        self._active: str | None = None
        self._stopped_at: float | None = None

    @contextmanager
    def measure(self, name: str) -> Iterator[None]:
        if self._stopped_at is not None:
            raise RuntimeError("TimingLogger already stopped")
        if self._active is not None:
            raise RuntimeError(f"Cannot start step '{name}' while '{self._active}' is running")
        self._active = name
        start = perf_counter()
        ok = False
        try:
            yield
            ok = True
        finally:
            # Failed steps are still recorded so the abort point is visible.
            step = StepTiming(name=name, start=start, end=perf_counter(), ok=ok)
            self._steps.append(step)
            self._active = None
            _log.debug("Startup step %s took %.1f ms%s", name, step.duration * 1000, "" if ok else " (failed)")

    def stop(self) -> None:
        if self._stopped_at is None:
            self._stopped_at = perf_counter()

    @property
    def steps(self) -> List[StepTiming]:
        return list(self._steps)

    @property
    def total_duration(self) -> float:
        end = self._stopped_at if self._stopped_at is not None else perf_counter()
        return end - self._started_at

    def as_dict(self) -> dict:
        return {
            "total_duration": self.total_duration,
            "steps": [
                {"name": s.name, "duration": s.duration, "ok": s.ok} for s in self._steps
            ],
        }

    def __iter__(self) -> Iterator[StepTiming]:
        return iter(self._steps)
