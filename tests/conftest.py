from __future__ import annotations

import math
from pathlib import Path

import pytest

from fusion_pipeline import SensorSample
from tilt_estimation import EstimatorConfig, RestrictedAxis

ACCEL_LSB_PER_G = 16384.0
GYRO_LSB_PER_DPS = 131.0
CONFIG_PATH = Path(__file__).resolve().parents[1] / 'config' / 'estimator_params.yaml'


def sample_from_angles(
    roll_deg: float,
    pitch_deg: float,
    gyro_x: int = 0,
    gyro_y: int = 0,
    temperature_raw: int = 0,
) -> SensorSample:
    """Noise-free raw sample for a body at the given roll and pitch."""
    roll = math.radians(roll_deg)
    pitch = math.radians(pitch_deg)
    return SensorSample(
        accel_x=int(round(-ACCEL_LSB_PER_G * math.sin(pitch))),
        accel_y=int(round(ACCEL_LSB_PER_G * math.sin(roll) * math.cos(pitch))),
        accel_z=int(round(ACCEL_LSB_PER_G * math.cos(roll) * math.cos(pitch))),
        gyro_x=gyro_x,
        gyro_y=gyro_y,
        gyro_z=0,
        temperature_raw=temperature_raw,
    )


@pytest.fixture
def make_sample():
    """Factory for noise-free samples at a given orientation."""
    return sample_from_angles


@pytest.fixture
def pitch_restricted_config():
    return EstimatorConfig(restricted_axis=RestrictedAxis.PITCH)


@pytest.fixture
def roll_restricted_config():
    return EstimatorConfig(restricted_axis=RestrictedAxis.ROLL)


@pytest.fixture
def config_path():
    """Path to the shipped estimator parameters."""
    return str(CONFIG_PATH)
