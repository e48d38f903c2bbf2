"""Two-state Kalman filter for a single tilt axis.

Fuses the accelerometer angle (measurement) with the gyroscope rate
(control input) while estimating the gyroscope bias.

State and model:
    x = [angle, bias]
    x_k = F x_{k-1} + B * rate,   F = [[1, -dt], [0, 1]],  B = [dt, 0]
    z_k = H x_k + v,              H = [1, 0]

Predict:
    x = F x + B * rate
    P = F P F^T + Q * dt,         Q = [[q_angle, q_cross], [q_cross, q_bias]]

Correct:
    y = z - H x
    S = H P H^T + R
    K = P H^T / S
    x = x + K y
    P = (I - K H) P
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from tilt_estimation.config import FilterParameters
from tilt_estimation._internal.validation import (
    is_valid_covariance,
    validate_timestep,
)


logger = logging.getLogger(__name__)

_MEASUREMENT_MATRIX = np.array([[1.0, 0.0]])


@dataclass
class KalmanState:
    """State owned by one KalmanEstimator.

    Attributes:
        angle_deg: Filtered angle estimate
        bias_dps: Estimated gyroscope bias
        covariance: Error covariance matrix P, shape (2, 2)
    """

    angle_deg: float = 0.0
    bias_dps: float = 0.0
    covariance: np.ndarray = field(default_factory=lambda: np.zeros((2, 2)))

    def copy(self) -> 'KalmanState':
        """Deep copy, safe to hand to callers."""
        return KalmanState(
            angle_deg=self.angle_deg,
            bias_dps=self.bias_dps,
            covariance=self.covariance.copy(),
        )


class KalmanEstimator:
    """Angle/bias Kalman filter for one axis.

    Example:
        >>> estimator = KalmanEstimator(FilterParameters())
        >>> estimator.set_angle(10.0)
        >>> angle = estimator.update(10.0, 0.0, 0.01)
    """

    def __init__(
        self,
        parameters: FilterParameters,
        initial_angle_deg: float = 0.0,
    ) -> None:
        """Initialize the estimator.

        Args:
            parameters: Noise model, shared and never mutated
            initial_angle_deg: Starting angle estimate
        """
        self._parameters = parameters
        self._process_noise = np.array([
            [parameters.angle_process_noise, parameters.angle_bias_cross_noise],
            [parameters.angle_bias_cross_noise, parameters.bias_process_noise],
        ])
        self._state = KalmanState(angle_deg=initial_angle_deg)
        self._rate_dps = 0.0

    def set_angle(self, angle_deg: float) -> None:
        """Hard reset: angle := angle_deg, bias := 0, P := 0."""
        self._state = KalmanState(angle_deg=float(angle_deg))
        self._rate_dps = 0.0

    def update(
        self,
        measured_angle_deg: float,
        measured_rate_dps: float,
        timestep_s: float,
    ) -> float:
        """Run one predict and correct cycle.

        Args:
            measured_angle_deg: Accelerometer angle (measurement)
            measured_rate_dps: Gyroscope rate (control input)
            timestep_s: Seconds since the previous update

        Returns:
            Corrected angle estimate in degrees

        Raises:
            InvalidTimestepError: If timestep_s is not positive; state is
                left untouched
        """
        validate_timestep(timestep_s)

        angle = self._state.angle_deg
        bias = self._state.bias_dps
        covariance = self._state.covariance

        # Predict
        rate = measured_rate_dps - bias
        angle = angle + timestep_s * rate

        transition = np.array([[1.0, -timestep_s], [0.0, 1.0]])
        covariance = (
            transition @ covariance @ transition.T
            + self._process_noise * timestep_s
        )

        # Correct
        innovation = measured_angle_deg - angle
        innovation_covariance = covariance[0, 0] + self._parameters.measurement_noise
        gain = covariance[:, 0] / innovation_covariance

        angle = angle + gain[0] * innovation
        bias = bias + gain[1] * innovation

        covariance = (np.eye(2) - np.outer(gain, _MEASUREMENT_MATRIX)) @ covariance
        covariance = 0.5 * (covariance + covariance.T)

        if not (is_valid_covariance(covariance) and np.isfinite(angle)
                and np.isfinite(bias)):
            logger.warning(
                "Kalman covariance lost positive semi-definiteness "
                "(P=%s); reseeding at %.3f deg",
                covariance.tolist(),
                measured_angle_deg,
            )
            self.set_angle(measured_angle_deg)
            return self._state.angle_deg

        self._state = KalmanState(
            angle_deg=float(angle),
            bias_dps=float(bias),
            covariance=covariance,
        )
        self._rate_dps = float(rate)
        return self._state.angle_deg

    @property
    def angle_deg(self) -> float:
        """Current angle estimate in degrees."""
        return self._state.angle_deg

    @property
    def bias_dps(self) -> float:
        """Current gyroscope bias estimate in deg/s."""
        return self._state.bias_dps

    @property
    def rate_dps(self) -> float:
        """Gyroscope rate of the last update with the bias removed."""
        return self._rate_dps

    @property
    def covariance(self) -> np.ndarray:
        """Copy of the error covariance matrix P."""
        return self._state.covariance.copy()

    @property
    def state(self) -> KalmanState:
        """Copy of the full filter state."""
        return self._state.copy()

    @property
    def parameters(self) -> FilterParameters:
        """Noise model used by this estimator."""
        return self._parameters
