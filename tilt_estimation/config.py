"""Tilt estimator configuration parameters.

Single source of truth for estimator tuning.
See config/estimator_params.yaml for parameter values.
"""

from dataclasses import dataclass, field
from enum import Enum

import yaml

from tilt_estimation._internal.validation import (
    validate_positive,
    validate_non_negative,
    validate_open_unit_interval,
)


class RestrictedAxis(Enum):
    """Axis whose accelerometer angle is confined to +/-90 degrees.

    The other axis (the continuous axis) spans +/-180 degrees.
    """

    PITCH = 'pitch'
    ROLL = 'roll'

    @property
    def continuous_axis(self) -> 'RestrictedAxis':
        """The companion axis that spans +/-180 degrees."""
        if self is RestrictedAxis.PITCH:
            return RestrictedAxis.ROLL
        return RestrictedAxis.PITCH


@dataclass(frozen=True)
class FilterParameters:
    """Noise model for one Kalman estimator.

    All parameters immutable after construction (frozen=True).

    Attributes:
        angle_process_noise: Process noise variance of the angle (Q_angle)
        bias_process_noise: Process noise variance of the gyro bias (Q_bias)
        measurement_noise: Variance of the accelerometer angle (R_measure)
        angle_bias_cross_noise: Off-diagonal process noise coupling angle and
            bias. Zero reproduces the classic two-state tilt filter.
    """

    angle_process_noise: float = 0.001
    bias_process_noise: float = 0.003
    measurement_noise: float = 0.03
    angle_bias_cross_noise: float = 0.0

    def __post_init__(self) -> None:
        """Validate parameters satisfy constraints."""
        validate_non_negative(self.angle_process_noise, 'angle_process_noise')
        validate_non_negative(self.bias_process_noise, 'bias_process_noise')
        validate_positive(self.measurement_noise, 'measurement_noise')
        # Q must stay positive semi-definite
        if self.angle_bias_cross_noise ** 2 > (
            self.angle_process_noise * self.bias_process_noise
        ):
            raise ValueError(
                f"angle_bias_cross_noise squared must not exceed "
                f"angle_process_noise * bias_process_noise, "
                f"got {self.angle_bias_cross_noise}"
            )


@dataclass(frozen=True)
class EstimatorConfig:
    """Configuration parameters for the tilt estimation engine.

    Units encoded in parameter names.

    Attributes:
        restricted_axis: Which axis uses the +/-90 degree formula
        complementary_weight: Gyroscope trust factor alpha of the
            complementary filter, in (0, 1)
        pole_threshold_deg: Magnitude beyond which the continuous axis is
            considered past the pole of the restricted representation
        drift_limit_deg: Magnitude beyond which a raw gyro angle is snapped
            back to the Kalman angle
        gyro_sensitivity_lsb_per_dps: Raw gyroscope counts per deg/s
        min_acceleration_magnitude: Accelerometer vectors shorter than this
            (raw counts) are treated as degenerate
        kalman: Noise model shared by both Kalman estimators
    """

    restricted_axis: RestrictedAxis = RestrictedAxis.PITCH
    complementary_weight: float = 0.93
    pole_threshold_deg: float = 90.0
    drift_limit_deg: float = 180.0
    gyro_sensitivity_lsb_per_dps: float = 131.0
    min_acceleration_magnitude: float = 1.0
    kalman: FilterParameters = field(default_factory=FilterParameters)

    def __post_init__(self) -> None:
        """Validate parameters satisfy constraints."""
        if not isinstance(self.restricted_axis, RestrictedAxis):
            raise ValueError(
                f"restricted_axis must be a RestrictedAxis, "
                f"got {self.restricted_axis!r}"
            )
        validate_open_unit_interval(
            self.complementary_weight, 'complementary_weight'
        )
        validate_positive(self.pole_threshold_deg, 'pole_threshold_deg')
        validate_positive(self.drift_limit_deg, 'drift_limit_deg')
        validate_positive(
            self.gyro_sensitivity_lsb_per_dps, 'gyro_sensitivity_lsb_per_dps'
        )
        validate_non_negative(
            self.min_acceleration_magnitude, 'min_acceleration_magnitude'
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'EstimatorConfig':
        """Load configuration from YAML file.

        Keys missing from the file fall back to the dataclass defaults.

        Args:
            yaml_path: Path to YAML file containing estimator parameters

        Returns:
            EstimatorConfig instance

        Raises:
            FileNotFoundError: If YAML file does not exist
            ValueError: If parameters are invalid
        """
        with open(yaml_path, 'r') as file:
            config = yaml.safe_load(file) or {}

        return cls.from_dict(config)

    @classmethod
    def from_dict(cls, config: dict) -> 'EstimatorConfig':
        """Build configuration from a parsed mapping.

        Args:
            config: Mapping with the same keys as the YAML file

        Returns:
            EstimatorConfig instance

        Raises:
            ValueError: If restricted_axis is unknown or parameters invalid
        """
        kwargs = dict(config)

        if 'restricted_axis' in kwargs:
            try:
                kwargs['restricted_axis'] = RestrictedAxis(
                    str(kwargs['restricted_axis']).lower()
                )
            except ValueError:
                raise ValueError(
                    f"restricted_axis must be 'pitch' or 'roll', "
                    f"got {config['restricted_axis']!r}"
                ) from None

        if 'kalman' in kwargs:
            kwargs['kalman'] = FilterParameters(**(kwargs['kalman'] or {}))

        return cls(**kwargs)
