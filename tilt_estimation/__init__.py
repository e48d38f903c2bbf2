"""Tilt estimation module.

This module provides the angle estimators used to compare raw gyroscope
integration, a complementary filter and a Kalman filter on roll and pitch.

Public API:
    - EstimatorConfig: Configuration dataclass for estimator parameters
    - FilterParameters: Kalman noise model
    - RestrictedAxis: Which axis is confined to +/-90 degrees
    - angles_from_accelerometer: Roll and pitch from the gravity vector
    - KalmanEstimator: Two-state angle/bias Kalman filter
    - ComplementaryEstimator: First-order complementary filter
    - DiscontinuityGuard: Pole-crossing and drift policy
    - AxisEstimate: Per-axis estimator outputs
"""

from tilt_estimation.config import (
    EstimatorConfig,
    FilterParameters,
    RestrictedAxis,
)
from tilt_estimation.accelerometer_angles import (
    DegenerateAccelerationError,
    angles_from_accelerometer,
)
from tilt_estimation.axis_estimate import AxisEstimate
from tilt_estimation.kalman_filter import KalmanEstimator, KalmanState
from tilt_estimation.complementary_filter import (
    ComplementaryEstimator,
    complementary_update,
)
from tilt_estimation.discontinuity_guard import DiscontinuityGuard, GuardDecision
from tilt_estimation._internal.validation import InvalidTimestepError

__all__ = [
    'EstimatorConfig',
    'FilterParameters',
    'RestrictedAxis',
    'DegenerateAccelerationError',
    'angles_from_accelerometer',
    'AxisEstimate',
    'KalmanEstimator',
    'KalmanState',
    'ComplementaryEstimator',
    'complementary_update',
    'DiscontinuityGuard',
    'GuardDecision',
    'InvalidTimestepError',
]
