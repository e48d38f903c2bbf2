"""IMU sensor fusion mathematics.

Provides low-level functions for turning raw MPU6050 readings into angles
and rates. The sensor coordinate frame is assumed to be:
    - X-axis: forward
    - Y-axis: left
    - Z-axis: up (reads +1 g when the board lies flat)

All angles are in degrees, all rates in degrees per second.
"""

import math

RAD_TO_DEG = 180.0 / math.pi

# MPU6050 datasheet: TEMP_degC = TEMP_OUT / 340 + 36.53
TEMPERATURE_SCALE_LSB_PER_DEGC = 340.0
TEMPERATURE_OFFSET_DEGC = 36.53


def continuous_angle_deg(numerator: float, denominator: float) -> float:
    """Four-quadrant arctangent in degrees, spanning +/-180.

    Args:
        numerator: Gravity component along the tilt direction
        denominator: Gravity component along the reference axis

    Returns:
        atan2(numerator, denominator) in degrees
    """
    return math.atan2(numerator, denominator) * RAD_TO_DEG


def restricted_angle_deg(
    numerator: float,
    first_component: float,
    second_component: float,
) -> float:
    """Arctangent against the magnitude of two other components, in degrees.

    Equivalent to atan(numerator / sqrt(a^2 + b^2)), which by construction
    stays within +/-90. Evaluated as atan2 against a non-negative hypotenuse
    so a zero denominator yields +/-90 rather than a division error.

    Args:
        numerator: Gravity component along the tilt direction
        first_component: First remaining gravity component
        second_component: Second remaining gravity component

    Returns:
        Angle in degrees within [-90, 90]
    """
    return math.atan2(
        numerator, math.hypot(first_component, second_component)
    ) * RAD_TO_DEG


def gyro_rate_dps(raw_rate: float, sensitivity_lsb_per_dps: float) -> float:
    """Convert a raw gyroscope reading to degrees per second.

    Args:
        raw_rate: Signed 16-bit gyroscope output
        sensitivity_lsb_per_dps: LSB per deg/s (131 at the +/-250 deg/s range)

    Returns:
        Angular rate in deg/s
    """
    return raw_rate / sensitivity_lsb_per_dps


def integrate_gyroscope(
    previous_angle_deg: float,
    rate_dps: float,
    timestep_s: float,
) -> float:
    """Integrate gyroscope rate to update an angle.

    Simple Euler integration: angle_new = angle_old + rate * dt

    Note:
        This estimate is smooth but drifts over time due to gyroscope bias.
    """
    return previous_angle_deg + rate_dps * timestep_s


def temperature_degc(raw_temperature: float) -> float:
    """Convert the raw MPU6050 temperature register to degrees Celsius."""
    return raw_temperature / TEMPERATURE_SCALE_LSB_PER_DEGC + TEMPERATURE_OFFSET_DEGC


def acceleration_magnitude(
    acceleration_x: float,
    acceleration_y: float,
    acceleration_z: float,
) -> float:
    """Euclidean norm of the accelerometer vector (raw units)."""
    return math.sqrt(
        acceleration_x * acceleration_x
        + acceleration_y * acceleration_y
        + acceleration_z * acceleration_z
    )
