"""Complementary filter for tilt angle estimation.

Fuses accelerometer and gyroscope data for one axis. The accelerometer
provides a noisy but drift-free angle, while the gyroscope provides a smooth
but drifting one. The complementary filter blends them with a fixed weight.

Filter equation:
    angle_est = alpha * angle_gyro + (1 - alpha) * angle_accel

where:
    angle_gyro = previous_angle + rate * dt   (integrated gyroscope)
    alpha = complementary weight              (0.93 by default)

No covariance and no bias estimation: it reacts faster than the Kalman
filter to large single-axis steps and serves as a comparison baseline.
"""

from tilt_estimation._internal.imu_fusion import integrate_gyroscope
from tilt_estimation._internal.validation import (
    validate_open_unit_interval,
    validate_timestep,
)


def complementary_update(
    previous_angle_deg: float,
    rate_dps: float,
    timestep_s: float,
    accel_angle_deg: float,
    alpha: float,
) -> float:
    """Blend one gyroscope step with the accelerometer angle.

    Args:
        previous_angle_deg: Angle estimate from the previous cycle
        rate_dps: Gyroscope rate in deg/s
        timestep_s: Seconds since the previous cycle
        accel_angle_deg: Instantaneous accelerometer angle
        alpha: Gyroscope trust factor in (0, 1)

    Returns:
        New angle estimate in degrees

    Raises:
        InvalidTimestepError: If timestep_s is not positive
    """
    validate_timestep(timestep_s)
    angle_gyro = integrate_gyroscope(previous_angle_deg, rate_dps, timestep_s)
    return alpha * angle_gyro + (1.0 - alpha) * accel_angle_deg


class ComplementaryEstimator:
    """First-order complementary filter for one axis.

    The single carried value is the angle estimate.

    Attributes:
        alpha: Gyroscope trust factor
        angle_deg: Current angle estimate
    """

    def __init__(
        self,
        alpha: float = 0.93,
        initial_angle_deg: float = 0.0,
    ) -> None:
        """Initialize the complementary filter.

        Args:
            alpha: Gyroscope trust factor in (0, 1)
            initial_angle_deg: Initial angle estimate in degrees
        """
        validate_open_unit_interval(alpha, 'alpha')
        self._alpha = alpha
        self._angle_deg = initial_angle_deg

    def update(
        self,
        previous_angle_deg: float,
        rate_dps: float,
        timestep_s: float,
        accel_angle_deg: float,
    ) -> float:
        """Stateless blend using this filter's weight.

        Returns:
            alpha * (previous + rate * dt) + (1 - alpha) * accel
        """
        return complementary_update(
            previous_angle_deg, rate_dps, timestep_s, accel_angle_deg,
            self._alpha,
        )

    def step(
        self,
        rate_dps: float,
        timestep_s: float,
        accel_angle_deg: float,
    ) -> float:
        """Advance the carried angle by one sample.

        Args:
            rate_dps: Gyroscope rate in deg/s
            timestep_s: Seconds since the previous sample
            accel_angle_deg: Instantaneous accelerometer angle

        Returns:
            Updated angle estimate in degrees
        """
        self._angle_deg = self.update(
            self._angle_deg, rate_dps, timestep_s, accel_angle_deg
        )
        return self._angle_deg

    def reset(self, angle_deg: float) -> None:
        """Reseed the carried angle."""
        self._angle_deg = angle_deg

    @property
    def angle_deg(self) -> float:
        """Current angle estimate in degrees."""
        return self._angle_deg

    @property
    def alpha(self) -> float:
        """Filter coefficient (gyroscope trust factor)."""
        return self._alpha
