"""Synthetic MPU6050 samples for offline estimator comparison.

Generates raw accelerometer/gyroscope counts from a roll/pitch trajectory,
with Gaussian noise and a constant gyroscope bias, and replays them through
a FusionCycle.

Gravity in the sensor frame for roll phi and pitch theta:
    a = g * [-sin(theta), sin(phi) cos(theta), cos(phi) cos(theta)]

Body rates assume zero yaw rate (ZYX Euler angles):
    p = d(phi)/dt
    q = d(theta)/dt * cos(phi)
    r = -d(theta)/dt * sin(phi)
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from fusion_pipeline import CycleOutput, FusionCycle, SensorSample
from tilt_estimation._internal.imu_fusion import (
    TEMPERATURE_OFFSET_DEGC,
    TEMPERATURE_SCALE_LSB_PER_DEGC,
)


logger = logging.getLogger(__name__)

# +/-2 g accelerometer range
ACCEL_LSB_PER_G = 16384.0
# +/-250 deg/s gyroscope range
GYRO_LSB_PER_DPS = 131.0

INT16_MIN = -32768
INT16_MAX = 32767


@dataclass
class EstimateHistory:
    """Estimator outputs over a replayed sequence.

    Every array has shape (N,) with one entry per processed sample.
    """

    time_s: np.ndarray
    roll_accel_deg: np.ndarray
    roll_gyro_deg: np.ndarray
    roll_complementary_deg: np.ndarray
    roll_kalman_deg: np.ndarray
    roll_bias_dps: np.ndarray
    pitch_accel_deg: np.ndarray
    pitch_gyro_deg: np.ndarray
    pitch_complementary_deg: np.ndarray
    pitch_kalman_deg: np.ndarray
    pitch_bias_dps: np.ndarray
    reseeded: np.ndarray

    @classmethod
    def from_outputs(
        cls,
        time_s: List[float],
        outputs: List[CycleOutput],
    ) -> 'EstimateHistory':
        """Stack per-cycle outputs into arrays."""
        def column(getter):
            return np.array([getter(o) for o in outputs], dtype=float)

        return cls(
            time_s=np.asarray(time_s, dtype=float),
            roll_accel_deg=column(lambda o: o.roll.accel_angle_deg),
            roll_gyro_deg=column(lambda o: o.roll.gyro_angle_deg),
            roll_complementary_deg=column(lambda o: o.roll.complementary_angle_deg),
            roll_kalman_deg=column(lambda o: o.roll.kalman_angle_deg),
            roll_bias_dps=column(lambda o: o.roll.kalman_bias_dps),
            pitch_accel_deg=column(lambda o: o.pitch.accel_angle_deg),
            pitch_gyro_deg=column(lambda o: o.pitch.gyro_angle_deg),
            pitch_complementary_deg=column(lambda o: o.pitch.complementary_angle_deg),
            pitch_kalman_deg=column(lambda o: o.pitch.kalman_angle_deg),
            pitch_bias_dps=column(lambda o: o.pitch.kalman_bias_dps),
            reseeded=np.array(
                [o.decision.reseed_roll or o.decision.reseed_pitch for o in outputs],
                dtype=bool,
            ),
        )


def _to_int16(values: np.ndarray) -> np.ndarray:
    return np.clip(np.round(values), INT16_MIN, INT16_MAX).astype(int)


def generate_samples(
    roll_deg: np.ndarray,
    pitch_deg: np.ndarray,
    sampling_period_s: float,
    accel_noise_lsb: float = 0.0,
    gyro_noise_lsb: float = 0.0,
    gyro_bias_dps: Optional[np.ndarray] = None,
    temperature_degc: float = 25.0,
    seed: Optional[int] = None,
) -> List[SensorSample]:
    """Synthesize raw samples along a roll/pitch trajectory.

    Args:
        roll_deg: True roll angle per sample, shape (N,)
        pitch_deg: True pitch angle per sample, shape (N,)
        sampling_period_s: Time between samples
        accel_noise_lsb: Standard deviation of accelerometer noise (counts)
        gyro_noise_lsb: Standard deviation of gyroscope noise (counts)
        gyro_bias_dps: Constant gyroscope bias [x, y, z] in deg/s
        temperature_degc: Constant die temperature
        seed: Random seed for reproducible noise

    Returns:
        List of N SensorSample

    Raises:
        ValueError: If trajectories differ in shape or the period is not positive
    """
    roll_deg = np.asarray(roll_deg, dtype=float)
    pitch_deg = np.asarray(pitch_deg, dtype=float)
    if roll_deg.shape != pitch_deg.shape or roll_deg.ndim != 1:
        raise ValueError(
            f"roll_deg and pitch_deg must be 1-D with equal shape, "
            f"got {roll_deg.shape} and {pitch_deg.shape}"
        )
    if sampling_period_s <= 0:
        raise ValueError(
            f"sampling_period_s must be positive, got {sampling_period_s}"
        )
    if gyro_bias_dps is None:
        gyro_bias_dps = np.zeros(3)
    gyro_bias_dps = np.asarray(gyro_bias_dps, dtype=float)

    rng = np.random.default_rng(seed)
    count = roll_deg.shape[0]

    roll_rad = np.deg2rad(roll_deg)
    pitch_rad = np.deg2rad(pitch_deg)
    accel = ACCEL_LSB_PER_G * np.stack([
        -np.sin(pitch_rad),
        np.sin(roll_rad) * np.cos(pitch_rad),
        np.cos(roll_rad) * np.cos(pitch_rad),
    ], axis=1)
    if accel_noise_lsb > 0:
        accel += rng.normal(0.0, accel_noise_lsb, size=accel.shape)

    if count > 1:
        roll_rate = np.gradient(roll_deg, sampling_period_s)
        pitch_rate = np.gradient(pitch_deg, sampling_period_s)
    else:
        roll_rate = np.zeros(count)
        pitch_rate = np.zeros(count)
    rates = np.stack([
        roll_rate,
        pitch_rate * np.cos(roll_rad),
        -pitch_rate * np.sin(roll_rad),
    ], axis=1) + gyro_bias_dps
    gyro = GYRO_LSB_PER_DPS * rates
    if gyro_noise_lsb > 0:
        gyro += rng.normal(0.0, gyro_noise_lsb, size=gyro.shape)

    accel_raw = _to_int16(accel)
    gyro_raw = _to_int16(gyro)
    temperature_raw = int(round(
        (temperature_degc - TEMPERATURE_OFFSET_DEGC) * TEMPERATURE_SCALE_LSB_PER_DEGC
    ))

    return [
        SensorSample(
            accel_x=int(accel_raw[k, 0]),
            accel_y=int(accel_raw[k, 1]),
            accel_z=int(accel_raw[k, 2]),
            gyro_x=int(gyro_raw[k, 0]),
            gyro_y=int(gyro_raw[k, 1]),
            gyro_z=int(gyro_raw[k, 2]),
            temperature_raw=temperature_raw,
        )
        for k in range(count)
    ]


def run_estimators(
    cycle: FusionCycle,
    samples: List[SensorSample],
    sampling_period_s: float,
) -> EstimateHistory:
    """Replay samples through a fusion cycle at a fixed period.

    The first sample seeds the cycle (unless it is already seeded).

    Args:
        cycle: Fusion cycle to drive
        samples: Raw samples in time order
        sampling_period_s: Timestep passed for every sample after seeding

    Returns:
        EstimateHistory of every processed sample
    """
    time_s: List[float] = []
    outputs: List[CycleOutput] = []

    for index, sample in enumerate(samples):
        output = cycle.step(sample, sampling_period_s)
        if output is None:
            continue
        time_s.append(index * sampling_period_s)
        outputs.append(output)

    history = EstimateHistory.from_outputs(time_s, outputs)
    logger.info(
        "Replayed %d samples, %d reseeds",
        len(outputs),
        int(np.sum(history.reseeded)),
    )
    return history


def tilt_sweep(
    duration_s: float,
    sampling_period_s: float,
    roll_amplitude_deg: float = 120.0,
    pitch_amplitude_deg: float = 30.0,
    period_s: float = 8.0,
) -> np.ndarray:
    """Sinusoidal roll/pitch trajectory used by the demo script.

    Returns:
        Array of shape (N, 2): columns roll_deg, pitch_deg
    """
    time_s = np.arange(0.0, duration_s, sampling_period_s)
    phase = 2.0 * np.pi * time_s / period_s
    roll = roll_amplitude_deg * np.sin(phase)
    pitch = pitch_amplitude_deg * np.sin(0.5 * phase)
    return np.stack([roll, pitch], axis=1)
