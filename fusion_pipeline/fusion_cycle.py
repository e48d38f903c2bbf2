"""One estimation cycle for roll and pitch.

This module provides the orchestrator that, for each sample:
1. Converts the accelerometer vector to roll and pitch
2. Applies the pole-crossing policy to the continuous axis
3. Advances both Kalman filters
4. Integrates the raw gyroscope angles and re-anchors drift
5. Advances both complementary filters
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from tilt_estimation import (
    AxisEstimate,
    ComplementaryEstimator,
    DegenerateAccelerationError,
    DiscontinuityGuard,
    EstimatorConfig,
    GuardDecision,
    KalmanEstimator,
    RestrictedAxis,
    angles_from_accelerometer,
)
from tilt_estimation._internal.imu_fusion import (
    gyro_rate_dps,
    integrate_gyroscope,
    temperature_degc,
)
from tilt_estimation._internal.validation import validate_timestep


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SensorSample:
    """Raw MPU6050 reading, one per polling cycle.

    Attributes:
        accel_x: Accelerometer X output (signed 16-bit)
        accel_y: Accelerometer Y output
        accel_z: Accelerometer Z output
        gyro_x: Gyroscope X output (roll rate)
        gyro_y: Gyroscope Y output (pitch rate)
        gyro_z: Gyroscope Z output (unused by the tilt estimators)
        temperature_raw: Raw temperature register
    """

    accel_x: int
    accel_y: int
    accel_z: int
    gyro_x: int
    gyro_y: int
    gyro_z: int
    temperature_raw: int = 0


@dataclass(frozen=True)
class CycleOutput:
    """Estimates emitted once per cycle.

    Attributes:
        roll: Roll estimates (copy, safe to keep)
        pitch: Pitch estimates (copy, safe to keep)
        temperature_degc: Die temperature in degrees Celsius
        decision: Pole-crossing and drift decisions of this cycle
        timestep_s: Elapsed time used, None on the seeding cycle
        accel_held: Accelerometer was degenerate and the previous
            accelerometer angles were reused
    """

    roll: AxisEstimate
    pitch: AxisEstimate
    temperature_degc: float
    decision: GuardDecision
    timestep_s: Optional[float] = None
    accel_held: bool = False

    def as_row(self) -> Tuple[float, ...]:
        """Values in presentation order.

        Per axis: accelerometer, gyro, complementary, Kalman angle; then the
        temperature.
        """
        return (
            self.roll.accel_angle_deg,
            self.roll.gyro_angle_deg,
            self.roll.complementary_angle_deg,
            self.roll.kalman_angle_deg,
            self.pitch.accel_angle_deg,
            self.pitch.gyro_angle_deg,
            self.pitch.complementary_angle_deg,
            self.pitch.kalman_angle_deg,
            self.temperature_degc,
        )


class FusionCycle:
    """Runs the three parallel estimators for roll and pitch.

    The instance owns one Kalman filter, one complementary filter and one
    AxisEstimate per axis. The first usable sample seeds every estimator
    from the accelerometer angles.

    Example:
        >>> cycle = FusionCycle(EstimatorConfig())
        >>> cycle.step(first_sample, None)        # seeds
        >>> output = cycle.step(sample, 0.01)
    """

    def __init__(self, config: EstimatorConfig) -> None:
        """Initialize the cycle.

        Args:
            config: Estimator configuration
        """
        self._config = config
        self._guard = DiscontinuityGuard(
            restricted_axis=config.restricted_axis,
            pole_threshold_deg=config.pole_threshold_deg,
            drift_limit_deg=config.drift_limit_deg,
        )

        self._kalman_roll = KalmanEstimator(config.kalman)
        self._kalman_pitch = KalmanEstimator(config.kalman)
        self._complementary_roll = ComplementaryEstimator(
            alpha=config.complementary_weight
        )
        self._complementary_pitch = ComplementaryEstimator(
            alpha=config.complementary_weight
        )

        self._roll = AxisEstimate()
        self._pitch = AxisEstimate()
        self._last_output: Optional[CycleOutput] = None
        self._initialized = False

    def step(
        self,
        sample: Optional[SensorSample],
        timestep_s: Optional[float],
    ) -> Optional[CycleOutput]:
        """Process one sample.

        Args:
            sample: Raw reading, or None when the I/O layer had no sample
            timestep_s: Seconds since the previous sample; ignored on the
                seeding cycle

        Returns:
            Estimates for this cycle, or None if the sample was skipped

        Raises:
            InvalidTimestepError: If timestep_s is not positive after seeding;
                no estimator state is modified
        """
        if sample is None:
            logger.debug("No sample delivered; cycle skipped")
            return None

        if not self._initialized:
            return self.seed(sample)

        validate_timestep(timestep_s)

        roll_rate = gyro_rate_dps(
            sample.gyro_x, self._config.gyro_sensitivity_lsb_per_dps
        )
        pitch_rate = gyro_rate_dps(
            sample.gyro_y, self._config.gyro_sensitivity_lsb_per_dps
        )

        accel_angles = self._accelerometer_angles(sample)
        accel_held = accel_angles is None
        if accel_held:
            roll_accel = self._roll.accel_angle_deg
            pitch_accel = self._pitch.accel_angle_deg
        else:
            roll_accel, pitch_accel = accel_angles

        # Snapshot both axes before any update
        decision = self._guard.assess(
            self._roll.copy(), self._pitch.copy(), roll_accel, pitch_accel
        )

        if self._config.restricted_axis is RestrictedAxis.PITCH:
            pitch_rate, inverted = self._update_axis_pair(
                continuous=(self._roll, self._kalman_roll, self._complementary_roll),
                restricted=(self._pitch, self._kalman_pitch),
                continuous_accel=roll_accel,
                restricted_accel=pitch_accel,
                continuous_rate=roll_rate,
                restricted_rate=pitch_rate,
                reseed=decision.reseed_roll,
                timestep_s=timestep_s,
            )
        else:
            roll_rate, inverted = self._update_axis_pair(
                continuous=(self._pitch, self._kalman_pitch, self._complementary_pitch),
                restricted=(self._roll, self._kalman_roll),
                continuous_accel=pitch_accel,
                restricted_accel=roll_accel,
                continuous_rate=pitch_rate,
                restricted_rate=roll_rate,
                reseed=decision.reseed_pitch,
                timestep_s=timestep_s,
            )

        # Raw gyro angles, no filtering
        self._roll.gyro_angle_deg, roll_anchored = self._guard.anchor_gyro_angle(
            integrate_gyroscope(self._roll.gyro_angle_deg, roll_rate, timestep_s),
            self._roll.kalman_angle_deg,
        )
        self._pitch.gyro_angle_deg, pitch_anchored = self._guard.anchor_gyro_angle(
            integrate_gyroscope(self._pitch.gyro_angle_deg, pitch_rate, timestep_s),
            self._pitch.kalman_angle_deg,
        )

        self._roll.complementary_angle_deg = self._complementary_roll.step(
            roll_rate, timestep_s, roll_accel
        )
        self._pitch.complementary_angle_deg = self._complementary_pitch.step(
            pitch_rate, timestep_s, pitch_accel
        )

        decision = replace(
            decision,
            restricted_rate_inverted=inverted,
            roll_gyro_anchored=roll_anchored,
            pitch_gyro_anchored=pitch_anchored,
        )
        if roll_anchored or pitch_anchored:
            logger.debug(
                "Gyro drift re-anchored (roll=%s, pitch=%s)",
                roll_anchored,
                pitch_anchored,
            )

        return self._emit(sample, decision, timestep_s, accel_held)

    def seed(self, sample: SensorSample) -> Optional[CycleOutput]:
        """Seed every estimator from the sample's accelerometer angles.

        Returns:
            Seeded estimates, or None if the accelerometer is degenerate
        """
        accel_angles = self._accelerometer_angles(sample)
        if accel_angles is None:
            logger.warning("Cannot seed estimators from a degenerate sample")
            return None

        roll_accel, pitch_accel = accel_angles
        self._reseed_axis(
            self._roll, self._kalman_roll, self._complementary_roll, roll_accel
        )
        self._reseed_axis(
            self._pitch, self._kalman_pitch, self._complementary_pitch, pitch_accel
        )
        self._initialized = True
        logger.debug(
            "Estimators seeded at roll %.2f deg, pitch %.2f deg",
            roll_accel,
            pitch_accel,
        )
        return self._emit(sample, GuardDecision(), None, False)

    def reset(self) -> None:
        """Forget all state; the next sample seeds again."""
        self._roll = AxisEstimate()
        self._pitch = AxisEstimate()
        self._kalman_roll.set_angle(0.0)
        self._kalman_pitch.set_angle(0.0)
        self._complementary_roll.reset(0.0)
        self._complementary_pitch.reset(0.0)
        self._last_output = None
        self._initialized = False

    def _update_axis_pair(
        self,
        continuous: Tuple[AxisEstimate, KalmanEstimator, ComplementaryEstimator],
        restricted: Tuple[AxisEstimate, KalmanEstimator],
        continuous_accel: float,
        restricted_accel: float,
        continuous_rate: float,
        restricted_rate: float,
        reseed: bool,
        timestep_s: float,
    ) -> Tuple[float, bool]:
        """Kalman step for both axes, continuous axis first.

        Returns:
            (restricted axis rate to use downstream, whether it was inverted)
        """
        estimate, kalman, complementary = continuous
        estimate.accel_angle_deg = continuous_accel
        if reseed:
            logger.debug(
                "%s past +/-%.0f deg; reseeding at %.2f deg",
                self._guard.continuous_axis.value,
                self._guard.pole_threshold_deg,
                continuous_accel,
            )
            self._reseed_axis(estimate, kalman, complementary, continuous_accel)
        else:
            estimate.kalman_angle_deg = kalman.update(
                continuous_accel, continuous_rate, timestep_s
            )
            estimate.kalman_bias_dps = kalman.bias_dps

        rate, inverted = self._guard.restricted_rate(
            restricted_rate, estimate.kalman_angle_deg
        )

        estimate, kalman = restricted
        estimate.accel_angle_deg = restricted_accel
        estimate.kalman_angle_deg = kalman.update(restricted_accel, rate, timestep_s)
        estimate.kalman_bias_dps = kalman.bias_dps
        return rate, inverted

    @staticmethod
    def _reseed_axis(
        estimate: AxisEstimate,
        kalman: KalmanEstimator,
        complementary: ComplementaryEstimator,
        angle_deg: float,
    ) -> None:
        kalman.set_angle(angle_deg)
        complementary.reset(angle_deg)
        estimate.accel_angle_deg = angle_deg
        estimate.kalman_angle_deg = angle_deg
        estimate.kalman_bias_dps = 0.0
        estimate.complementary_angle_deg = angle_deg
        estimate.gyro_angle_deg = angle_deg

    def _accelerometer_angles(
        self, sample: SensorSample
    ) -> Optional[Tuple[float, float]]:
        try:
            return angles_from_accelerometer(
                sample.accel_x,
                sample.accel_y,
                sample.accel_z,
                restricted_axis=self._config.restricted_axis,
                min_magnitude=self._config.min_acceleration_magnitude,
            )
        except DegenerateAccelerationError as exc:
            logger.warning("Holding previous accelerometer angles: %s", exc)
            return None

    def _emit(
        self,
        sample: SensorSample,
        decision: GuardDecision,
        timestep_s: Optional[float],
        accel_held: bool,
    ) -> CycleOutput:
        self._last_output = CycleOutput(
            roll=self._roll.copy(),
            pitch=self._pitch.copy(),
            temperature_degc=temperature_degc(sample.temperature_raw),
            decision=decision,
            timestep_s=timestep_s,
            accel_held=accel_held,
        )
        return self._last_output

    @property
    def roll(self) -> AxisEstimate:
        """Copy of the current roll estimates."""
        return self._roll.copy()

    @property
    def pitch(self) -> AxisEstimate:
        """Copy of the current pitch estimates."""
        return self._pitch.copy()

    @property
    def last_output(self) -> Optional[CycleOutput]:
        """Output of the most recent processed sample."""
        return self._last_output

    @property
    def is_initialized(self) -> bool:
        """Whether the estimators have been seeded."""
        return self._initialized

    @property
    def config(self) -> EstimatorConfig:
        return self._config
