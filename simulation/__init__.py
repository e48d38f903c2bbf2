"""Simulation module for offline estimator comparison.

This module synthesizes raw MPU6050 samples from a known orientation
trajectory so the estimators can be compared without hardware.

Public API:
    - generate_samples: Raw samples from a roll/pitch trajectory
    - run_estimators: Replay samples through a FusionCycle
    - EstimateHistory: Estimator outputs as numpy arrays
    - tilt_sweep: Sinusoidal demo trajectory
"""

from simulation.synthetic_imu import (
    EstimateHistory,
    generate_samples,
    run_estimators,
    tilt_sweep,
)

__all__ = [
    'EstimateHistory',
    'generate_samples',
    'run_estimators',
    'tilt_sweep',
]
