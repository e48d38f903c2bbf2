"""Hardware interface module for the MPU6050 tilt bench.

This module provides the hardware abstraction layer for running the
estimators on a Raspberry Pi, including:
- I2C register access to the MPU6050
- The polling monitor loop
"""

from .mpu6050_interface import MPU6050Interface, to_signed_word
from .monitor import TiltMonitor, MonitorStats

__all__ = [
    'MPU6050Interface',
    'to_signed_word',
    'TiltMonitor',
    'MonitorStats',
]
