"""Polling loop that feeds the MPU6050 into the fusion cycle.

This module provides the main loop that integrates:
- I2C reads from the MPU6050
- The fusion cycle
- Elapsed-time measurement
- Terminal column output
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from fusion_pipeline import (
    ColumnReporter,
    CycleOutput,
    FusionCycle,
    SampleClock,
    SensorSample,
)
from tilt_estimation import InvalidTimestepError


logger = logging.getLogger(__name__)

ROW_DELAY_S = 0.005


class SampleSource(Protocol):
    """Anything that delivers raw samples, e.g. MPU6050Interface."""

    def read_sample(self) -> Optional[SensorSample]:
        ...


@dataclass
class MonitorStats:
    """Statistics from monitor execution.

    Attributes:
        cycles: Samples processed by the fusion cycle
        skipped_samples: Reads that returned no sample
        invalid_timesteps: Cycles dropped because of a non-positive timestep
        reseeds: Cycles in which the continuous axis was reseeded
        mean_rate_hz: Average achieved sample rate
    """
    cycles: int = 0
    skipped_samples: int = 0
    invalid_timesteps: int = 0
    reseeds: int = 0
    mean_rate_hz: float = 0.0


class TiltMonitor:
    """Runs poll -> estimate -> print until stopped.

    Example:
        >>> imu = MPU6050Interface(bus=1)
        >>> monitor = TiltMonitor(imu, FusionCycle(EstimatorConfig()))
        >>> stats = monitor.run(duration_s=10.0)
    """

    def __init__(
        self,
        source: SampleSource,
        cycle: FusionCycle,
        clock: Optional[SampleClock] = None,
        reporter: Optional[ColumnReporter] = None,
        row_delay_s: float = ROW_DELAY_S,
    ) -> None:
        """Initialize the monitor.

        Args:
            source: Sample source (MPU6050 or a replay)
            cycle: Fusion cycle to drive
            clock: Elapsed-time source
            reporter: Column printer; None disables printing
            row_delay_s: Pause after each processed sample
        """
        self._source = source
        self._cycle = cycle
        self._clock = clock if clock is not None else SampleClock()
        self._reporter = reporter
        self._row_delay_s = row_delay_s

        self.stats = MonitorStats()
        self._running = False

    def run(
        self,
        duration_s: Optional[float] = None,
        max_cycles: Optional[int] = None,
    ) -> MonitorStats:
        """Execute the monitor loop.

        Args:
            duration_s: Run duration in seconds (None = until stop() or
                KeyboardInterrupt)
            max_cycles: Stop after this many processed samples

        Returns:
            MonitorStats from loop execution
        """
        self._running = True
        start_time = time.monotonic()

        try:
            while self._running:
                if duration_s is not None and time.monotonic() - start_time >= duration_s:
                    logger.info("Reached duration limit (%.1fs)", duration_s)
                    break
                if max_cycles is not None and self.stats.cycles >= max_cycles:
                    break

                output = self.poll_once()
                if output is not None and self._row_delay_s > 0:
                    time.sleep(self._row_delay_s)
        except KeyboardInterrupt:
            logger.info("Monitor interrupted by user")
        finally:
            self._running = False

        statistics = self._clock.compute_statistics()
        if statistics is not None:
            self.stats.mean_rate_hz = statistics.mean_rate_hz
        return self.stats

    def poll_once(self) -> Optional[CycleOutput]:
        """Read one sample and push it through the fusion cycle.

        Returns:
            Cycle output, or None if nothing was processed
        """
        sample = self._source.read_sample()
        if sample is None:
            self.stats.skipped_samples += 1
            return None

        if not self._cycle.is_initialized:
            output = self._cycle.step(sample, None)
            if output is not None:
                self._clock.start()
                self._record(output)
            return output

        timestep_s = self._clock.lap()
        try:
            output = self._cycle.step(sample, timestep_s)
        except InvalidTimestepError as exc:
            self.stats.invalid_timesteps += 1
            logger.warning("Dropping sample: %s", exc)
            return None

        self._record(output)
        return output

    def stop(self) -> None:
        """Request the loop to exit after the current iteration."""
        self._running = False

    def _record(self, output: CycleOutput) -> None:
        self.stats.cycles += 1
        if output.decision.reseed_roll or output.decision.reseed_pitch:
            self.stats.reseeds += 1
        if self._reporter is not None:
            self._reporter.report(output)
