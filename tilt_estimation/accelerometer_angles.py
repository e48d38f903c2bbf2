"""Roll and pitch from the gravity vector sensed by the accelerometer.

Two conventions are supported (Freescale AN3461, eq. 25/26 and 28/29):

Pitch restricted to +/-90 degrees:
    roll  = atan2(a_y, a_z)
    pitch = atan(-a_x / sqrt(a_y^2 + a_z^2))

Roll restricted to +/-90 degrees:
    roll  = atan(a_y / sqrt(a_x^2 + a_z^2))
    pitch = atan2(-a_x, a_z)

The estimate is noisy but drift-free, and only meaningful while the body
is quasi-static.
"""

import math
from typing import Tuple

from tilt_estimation.config import RestrictedAxis
from tilt_estimation._internal.imu_fusion import (
    acceleration_magnitude,
    continuous_angle_deg,
    restricted_angle_deg,
)


class DegenerateAccelerationError(ValueError):
    """Raised when the accelerometer vector carries no usable gravity direction."""


def angles_from_accelerometer(
    acceleration_x: float,
    acceleration_y: float,
    acceleration_z: float,
    restricted_axis: RestrictedAxis = RestrictedAxis.PITCH,
    min_magnitude: float = 1.0,
) -> Tuple[float, float]:
    """Compute roll and pitch from one accelerometer triplet.

    Args:
        acceleration_x: Accelerometer X reading (any unit proportional to g)
        acceleration_y: Accelerometer Y reading
        acceleration_z: Accelerometer Z reading
        restricted_axis: Axis whose formula is confined to +/-90 degrees
        min_magnitude: Vectors shorter than this are rejected

    Returns:
        (roll_deg, pitch_deg)

    Raises:
        DegenerateAccelerationError: If a component is non-finite or the
            vector magnitude is below min_magnitude
    """
    components = (acceleration_x, acceleration_y, acceleration_z)
    if not all(math.isfinite(c) for c in components):
        raise DegenerateAccelerationError(
            f"accelerometer reading is not finite: {components}"
        )

    magnitude = acceleration_magnitude(*components)
    if magnitude == 0.0 or magnitude < min_magnitude:
        raise DegenerateAccelerationError(
            f"accelerometer magnitude {magnitude} below {min_magnitude}, "
            f"angle undefined"
        )

    if restricted_axis is RestrictedAxis.PITCH:
        roll_deg = continuous_angle_deg(acceleration_y, acceleration_z)
        pitch_deg = restricted_angle_deg(
            -acceleration_x, acceleration_y, acceleration_z
        )
    else:
        roll_deg = restricted_angle_deg(
            acceleration_y, acceleration_x, acceleration_z
        )
        pitch_deg = continuous_angle_deg(-acceleration_x, acceleration_z)

    return roll_deg, pitch_deg
