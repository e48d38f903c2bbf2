"""Runtime contract validation utilities.

Internal module for parameter and input validation of the tilt estimators.
"""

import numpy as np


class InvalidTimestepError(ValueError):
    """Raised when an estimator receives a non-positive or non-finite timestep."""


def validate_positive(value: float, name: str) -> None:
    """Validate that a value is strictly positive.

    Args:
        value: Value to validate
        name: Parameter name for error message

    Raises:
        ValueError: If value <= 0
    """
    if value <= 0:
        raise ValueError(
            f"{name} must be positive, got {value}"
        )


def validate_non_negative(value: float, name: str) -> None:
    """Validate that a value is non-negative.

    Args:
        value: Value to validate
        name: Parameter name for error message

    Raises:
        ValueError: If value < 0
    """
    if value < 0:
        raise ValueError(
            f"{name} must be non-negative, got {value}"
        )


def validate_open_unit_interval(value: float, name: str) -> None:
    """Validate that a value lies strictly between 0 and 1.

    Args:
        value: Value to validate
        name: Parameter name for error message

    Raises:
        ValueError: If value is outside (0, 1)
    """
    if not 0.0 < value < 1.0:
        raise ValueError(
            f"{name} must be in the open interval (0, 1), got {value}"
        )


def validate_timestep(timestep_s: float) -> None:
    """Validate an elapsed time delivered to an estimator.

    Args:
        timestep_s: Seconds since the previous sample

    Raises:
        InvalidTimestepError: If timestep is zero, negative or non-finite
    """
    if timestep_s is None or not np.isfinite(timestep_s) or timestep_s <= 0:
        raise InvalidTimestepError(
            f"timestep_s must be positive and finite, got {timestep_s}"
        )


def is_valid_covariance(covariance: np.ndarray, tolerance: float = 1e-12) -> bool:
    """Check that a 2x2 covariance matrix is finite and positive semi-definite.

    Args:
        covariance: Error covariance matrix P, shape (2, 2)
        tolerance: Slack allowed for floating point round-off

    Returns:
        True if P is usable, False if it has lost positive semi-definiteness
    """
    if covariance.shape != (2, 2) or not np.all(np.isfinite(covariance)):
        return False
    if covariance[0, 0] < -tolerance or covariance[1, 1] < -tolerance:
        return False
    return bool(np.linalg.det(covariance) >= -tolerance)
