"""Progress accounting and observer callbacks for long-running scrape jobs."""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressEvent:
    phase: str
    completed: int
    total: Optional[int]
    elapsed: float
    eta: Optional[float]
    label: str = ""

    @property
    def percentage(self) -> Optional[float]:
        if not self.total:
            return None
        return self.completed / self.total * 100


Observer = Callable[[ProgressEvent], None]


def format_duration(seconds: float) -> str:
    """Render seconds as ``"1h 2m 3s"``, dropping leading zero units."""
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes or hours:
        parts.append(f"{minutes}m")
    parts.append(f"{secs}s")
    return " ".join(parts)


class ProgressTracker:
    """Completed-count and ETA bookkeeping.

    Not thread-safe: it is meant to be driven from the single thread that
    collects task completions.
    """

    def __init__(self, phase: str, total: Optional[int] = None, clock: Callable[[], float] = time.monotonic) -> None:
        self.phase = phase
        self.total = total
        self.completed = 0
        self._clock = clock
        self._started = clock()

    @property
    def elapsed(self) -> float:
        return self._clock() - self._started

    def eta(self, elapsed: float) -> Optional[float]:
        if not self.total or not self.completed:
            return None
        return max(0.0, elapsed / self.completed * self.total - elapsed)

    def record(self, label: str = "") -> ProgressEvent:
        self.completed += 1
        elapsed = self.elapsed
        return ProgressEvent(
            phase=self.phase,
            completed=self.completed,
            total=self.total,
            elapsed=elapsed,
            eta=self.eta(elapsed),
            label=label,
        )


def log_progress(event: ProgressEvent) -> None:
    if event.total:
        logger.info(
            "%s progress: %.2f%% (%d/%d) estimated time left: %s %s",
            event.phase,
            event.percentage,
            event.completed,
            event.total,
            format_duration(event.eta or 0),
            event.label,
        )
    else:
        logger.info("%s progress: %d done after %s %s", event.phase, event.completed, format_duration(event.elapsed), event.label)


def log_memory_usage(event: ProgressEvent) -> None:
    import resource

    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # ru_maxrss is bytes on macOS and kilobytes elsewhere.
    peak_mb = peak / (1024 * 1024) if sys.platform == "darwin" else peak / 1024
    logger.info("Memory usage after %s #%d: peak rss %.2f MB", event.phase, event.completed, peak_mb)


def combine_observers(*observers: Optional[Observer]) -> Observer:
    active = [observer for observer in observers if observer is not None]

    def _notify(event: ProgressEvent) -> None:
        for observer in active:
            observer(event)

    return _notify
