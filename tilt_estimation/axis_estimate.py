"""Per-axis estimate record shared by the guard and the fusion cycle."""

from dataclasses import dataclass, replace


@dataclass
class AxisEstimate:
    """Outputs of the three parallel estimators for one axis.

    All angles share the degree convention of accel_angle_deg at the moment
    of update.

    Attributes:
        gyro_angle_deg: Raw gyroscope integration (unbounded, drifts)
        complementary_angle_deg: Complementary filter output
        kalman_angle_deg: Kalman filter output
        kalman_bias_dps: Kalman gyroscope bias estimate
        accel_angle_deg: Instantaneous accelerometer angle (no filtering)
    """

    gyro_angle_deg: float = 0.0
    complementary_angle_deg: float = 0.0
    kalman_angle_deg: float = 0.0
    kalman_bias_dps: float = 0.0
    accel_angle_deg: float = 0.0

    @classmethod
    def seeded(cls, angle_deg: float) -> 'AxisEstimate':
        """Every estimator starting from the same accelerometer angle."""
        return cls(
            gyro_angle_deg=angle_deg,
            complementary_angle_deg=angle_deg,
            kalman_angle_deg=angle_deg,
            kalman_bias_dps=0.0,
            accel_angle_deg=angle_deg,
        )

    def copy(self) -> 'AxisEstimate':
        return replace(self)
