# src/analyzer/utils/run_timers.py
import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional


class RunTimers:
    """
    Wall-clock stopwatch for one run or phase. Usable as a context manager;
    reading `duration` while it runs gives the time elapsed so far.
    """

    def __init__(self):
        self.started_at: Optional[float] = None
        self.stopped_at: Optional[float] = None

    def start(self) -> "RunTimers":
        self.started_at, self.stopped_at = time.perf_counter(), None
        return self

    def stop(self) -> None:
        if self.started_at is not None and self.stopped_at is None:
            self.stopped_at = time.perf_counter()

    def __enter__(self) -> "RunTimers":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    @property
    def duration(self) -> float:
        if self.started_at is None:
            return 0.0
        end = self.stopped_at if self.stopped_at is not None else time.perf_counter()
        return end - self.started_at

    @property
    def duration_ms(self) -> float:
        return round(self.duration * 1000, 3)

    def __repr__(self) -> str:
        state = "running" if self.stopped_at is None and self.started_at is not None else "stopped"
        return f"<RunTimers {state} {self.duration_ms:.1f}ms>"


class PhaseTimers:
    """Keeps one RunTimers per named phase of a run, in execution order."""

    def __init__(self):
        self._timers: Dict[str, RunTimers] = {}

    @contextmanager
    def measure(self, phase: str) -> Iterator[RunTimers]:
        with RunTimers() as timer:
            self._timers[phase] = timer
            yield timer

    def as_ms(self) -> Dict[str, float]:
        return {name: t.duration_ms for name, t in self._timers.items()}
