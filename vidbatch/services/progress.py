"""Progress and ETA tracking for a batch run."""
from __future__ import annotations

import time
from typing import Callable, Optional

from ..core.models import ProgressState, ProgressSnapshot, format_time


# Rough pre-run estimate: seconds per MB at frame-skip 10
SECONDS_PER_MB = 2.0

__all__ = [
    "SECONDS_PER_MB",
    "format_time",
    "estimate_batch_seconds",
    "ProgressTracker",
]


def estimate_batch_seconds(total_mb: float, frame_skip: int) -> float:
    """Rough time estimate for analyzing ``total_mb`` of video.

    Larger frame-skip strides analyze fewer frames, so the estimate scales
    down linearly with ``frame_skip / 10``.
    """
    adjustment = frame_skip / 10
    return total_mb * SECONDS_PER_MB / adjustment


class ProgressTracker:
    """Tracks completed items against a known total and computes an ETA.

    Owned by the run loop and only mutated from it.
    """

    def __init__(self, total: int, clock: Callable[[], float] = time.monotonic):
        """Initialize with the total number of items.

        Args:
            total: Number of items in the batch.
            clock: Monotonic time source in seconds.
        """
        if total < 0:
            raise ValueError("Total must not be negative")
        self._clock = clock
        self._state = ProgressState(total=total, started_at=clock())

    @property
    def total(self) -> int:
        return self._state.total

    @property
    def current(self) -> int:
        return self._state.current

    @property
    def average_duration(self) -> Optional[float]:
        if not self._state.durations:
            return None
        return sum(self._state.durations) / len(self._state.durations)

    def eta_seconds(self) -> Optional[float]:
        """Estimated seconds remaining, None until the first item completes."""
        state = self._state
        if state.current <= 0:
            return None
        elapsed = self._clock() - state.started_at
        average = elapsed / state.current
        return (state.total - state.current) * average

    def update(self, current: int, message: str = "") -> ProgressSnapshot:
        """Record progress and return a snapshot for display.

        ``current`` is clamped to [0, total] and never moves backwards.
        """
        state = self._state
        current = min(max(current, 0), state.total)
        state.current = max(state.current, current)
        return ProgressSnapshot(
            current=state.current,
            total=state.total,
            label=message,
            eta_seconds=self.eta_seconds(),
        )

    def advance(self, message: str = "") -> ProgressSnapshot:
        return self.update(self._state.current + 1, message)

    def record_completion(self, duration: float) -> None:
        """Record a successful item's duration."""
        self._state.durations.append(duration)
