"""Pole-crossing and drift policy for the roll/pitch pair.

The restricted axis's formula folds at +/-90 degrees. Once the continuous
axis has rotated past +/-90, the restricted representation flips by 180
degrees even though the body moves continuously. Three rules keep the three
estimators consistent across that fold:

1. Reseed: when both the continuous axis's instantaneous accelerometer angle
   and its prior Kalman angle lie beyond the pole threshold, the continuous
   axis's Kalman, complementary and gyro angles are reseeded to the
   accelerometer angle instead of being updated.
2. Rate inversion: the restricted axis's gyro rate changes sign whenever the
   continuous axis's latest Kalman angle lies beyond the pole threshold.
3. Drift anchor: a raw gyro angle beyond the drift limit is snapped to the
   Kalman angle of the same axis.

All rules run before the complementary filter update.
"""

from dataclasses import dataclass
from typing import Tuple

from tilt_estimation.axis_estimate import AxisEstimate
from tilt_estimation.config import RestrictedAxis
from tilt_estimation._internal.validation import validate_positive


@dataclass(frozen=True)
class GuardDecision:
    """Decisions taken for one cycle.

    Attributes:
        reseed_roll: Roll estimators were reseeded from the accelerometer
        reseed_pitch: Pitch estimators were reseeded from the accelerometer
        restricted_rate_inverted: The restricted axis's gyro rate was negated
        roll_gyro_anchored: Roll gyro angle was snapped to its Kalman angle
        pitch_gyro_anchored: Pitch gyro angle was snapped to its Kalman angle
    """

    reseed_roll: bool = False
    reseed_pitch: bool = False
    restricted_rate_inverted: bool = False
    roll_gyro_anchored: bool = False
    pitch_gyro_anchored: bool = False

    def reseeds(self, axis: RestrictedAxis) -> bool:
        """Whether the given axis was reseeded this cycle."""
        if axis is RestrictedAxis.ROLL:
            return self.reseed_roll
        return self.reseed_pitch


class DiscontinuityGuard:
    """Cross-axis policy for the restricted/continuous axis pair."""

    def __init__(
        self,
        restricted_axis: RestrictedAxis = RestrictedAxis.PITCH,
        pole_threshold_deg: float = 90.0,
        drift_limit_deg: float = 180.0,
    ) -> None:
        validate_positive(pole_threshold_deg, 'pole_threshold_deg')
        validate_positive(drift_limit_deg, 'drift_limit_deg')
        self._restricted_axis = restricted_axis
        self._pole_threshold_deg = pole_threshold_deg
        self._drift_limit_deg = drift_limit_deg

    def is_past_pole(self, angle_deg: float) -> bool:
        """Whether an angle lies outside [-threshold, threshold]."""
        return abs(angle_deg) > self._pole_threshold_deg

    def assess(
        self,
        roll_prior: AxisEstimate,
        pitch_prior: AxisEstimate,
        roll_accel_deg: float,
        pitch_accel_deg: float,
    ) -> GuardDecision:
        """Decide which axis must be reseeded this cycle.

        Reads only the prior-cycle estimates of both axes, so it can run
        before either axis is updated.

        Args:
            roll_prior: Roll estimates from the previous cycle
            pitch_prior: Pitch estimates from the previous cycle
            roll_accel_deg: Current roll accelerometer angle
            pitch_accel_deg: Current pitch accelerometer angle

        Returns:
            GuardDecision with at most the continuous axis reseeded
        """
        if self._restricted_axis is RestrictedAxis.PITCH:
            continuous_prior, continuous_accel = roll_prior, roll_accel_deg
        else:
            continuous_prior, continuous_accel = pitch_prior, pitch_accel_deg

        reseed = (
            self.is_past_pole(continuous_accel)
            and self.is_past_pole(continuous_prior.kalman_angle_deg)
        )

        if self._restricted_axis is RestrictedAxis.PITCH:
            return GuardDecision(reseed_roll=reseed)
        return GuardDecision(reseed_pitch=reseed)

    def restricted_rate(
        self,
        rate_dps: float,
        continuous_kalman_angle_deg: float,
    ) -> Tuple[float, bool]:
        """Compensate the restricted axis's rate for the frame inversion.

        Args:
            rate_dps: Restricted axis gyroscope rate
            continuous_kalman_angle_deg: Latest Kalman angle of the
                continuous axis

        Returns:
            (rate to use, whether it was inverted)
        """
        if self.is_past_pole(continuous_kalman_angle_deg):
            return -rate_dps, True
        return rate_dps, False

    def anchor_gyro_angle(
        self,
        gyro_angle_deg: float,
        kalman_angle_deg: float,
    ) -> Tuple[float, bool]:
        """Snap a drifting gyro angle back to the Kalman angle.

        Returns:
            (angle to keep, whether it was snapped)
        """
        if gyro_angle_deg < -self._drift_limit_deg or gyro_angle_deg > self._drift_limit_deg:
            return kalman_angle_deg, True
        return gyro_angle_deg, False

    @property
    def restricted_axis(self) -> RestrictedAxis:
        return self._restricted_axis

    @property
    def continuous_axis(self) -> RestrictedAxis:
        return self._restricted_axis.continuous_axis

    @property
    def pole_threshold_deg(self) -> float:
        return self._pole_threshold_deg

    @property
    def drift_limit_deg(self) -> float:
        return self._drift_limit_deg
