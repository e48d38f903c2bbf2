"""Elapsed-time source for the estimation loop.

Provides the per-sample timestep fed to the estimators and statistics for
monitoring the achieved sample rate.
"""

import time
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np


@dataclass
class TimingStatistics:
    """Statistics for timestep measurements.

    Attributes:
        mean_s: Mean timestep in seconds
        max_s: Maximum timestep in seconds
        min_s: Minimum timestep in seconds
        std_s: Standard deviation in seconds
        count: Number of measurements
    """

    mean_s: float
    max_s: float
    min_s: float
    std_s: float
    count: int

    @property
    def mean_rate_hz(self) -> float:
        """Average sample rate implied by the mean timestep."""
        if self.mean_s <= 0:
            return 0.0
        return 1.0 / self.mean_s


class SampleClock:
    """Measures seconds elapsed between consecutive samples.

    Call start() when the seeding sample is read, then lap() once per
    processed sample. A skipped sample should not lap, so the next timestep
    spans the gap.
    """

    def __init__(
        self,
        history_length: int = 100,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        """Initialize the sample clock.

        Args:
            history_length: Number of timesteps to keep for statistics
            clock: Monotonic time source in seconds
        """
        if history_length <= 0:
            raise ValueError(
                f"history_length must be positive, got {history_length}"
            )

        self._history_length = history_length
        self._clock = clock
        self._last_time_s: Optional[float] = None
        self._timestep_history: List[float] = []

    def start(self) -> None:
        """Mark the reference instant for the first lap."""
        self._last_time_s = self._clock()

    def lap(self) -> float:
        """Return seconds since the previous lap (or start) and restart.

        Returns:
            Elapsed seconds; may be zero if the clock did not advance

        Raises:
            RuntimeError: If start() was not called
        """
        now = self._clock()
        if self._last_time_s is None:
            raise RuntimeError("start() was not called")

        elapsed = now - self._last_time_s
        self._last_time_s = now

        self._timestep_history.append(elapsed)
        if len(self._timestep_history) > self._history_length:
            self._timestep_history.pop(0)

        return elapsed

    def compute_statistics(self) -> Optional[TimingStatistics]:
        """Compute timestep statistics from history.

        Returns:
            Statistics if history is not empty, None otherwise
        """
        if not self._timestep_history:
            return None

        timesteps = np.array(self._timestep_history)

        return TimingStatistics(
            mean_s=float(np.mean(timesteps)),
            max_s=float(np.max(timesteps)),
            min_s=float(np.min(timesteps)),
            std_s=float(np.std(timesteps)),
            count=len(timesteps),
        )

    @property
    def is_started(self) -> bool:
        """Whether start() has been called."""
        return self._last_time_s is not None

    @property
    def lap_count(self) -> int:
        """Number of timesteps currently kept in history."""
        return len(self._timestep_history)
