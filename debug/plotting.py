"""Matplotlib plotting utilities for estimator comparison.

Provides reusable plotting functions for analyzing the three tilt
estimators side by side.
"""

from typing import Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from simulation.synthetic_imu import EstimateHistory

# (attribute prefix, title)
AXIS_LABELS = [
    ('roll', 'Roll'),
    ('pitch', 'Pitch'),
]


def plot_estimator_comparison(
    history: EstimateHistory,
    true_angles_deg: Optional[np.ndarray] = None,
    title: str = "Gyro vs Complementary vs Kalman",
    save_path: Optional[str] = None,
) -> Figure:
    """Plot the three estimators against the accelerometer angle.

    Args:
        history: Replayed estimator outputs
        true_angles_deg: Optional true orientation (N, 2) - [roll, pitch]
        title: Figure title
        save_path: Optional path to save figure

    Returns:
        Matplotlib Figure object
    """
    fig, axes = plt.subplots(2, 1, figsize=(12, 8), sharex=True)
    fig.suptitle(title, fontsize=14)
    time_s = history.time_s

    for idx, (prefix, name) in enumerate(AXIS_LABELS):
        ax = axes[idx]

        ax.plot(time_s, getattr(history, f'{prefix}_accel_deg'), color='0.7',
                linewidth=1.0, label='Accelerometer')
        ax.plot(time_s, getattr(history, f'{prefix}_gyro_deg'), 'g-',
                linewidth=1.0, label='Gyro')
        ax.plot(time_s, getattr(history, f'{prefix}_complementary_deg'), 'm-',
                linewidth=1.5, label='Complementary')
        ax.plot(time_s, getattr(history, f'{prefix}_kalman_deg'), 'r-',
                linewidth=1.5, label='Kalman')
        if true_angles_deg is not None:
            ax.plot(time_s, true_angles_deg[:len(time_s), idx], 'b--',
                    linewidth=1.5, label='True')

        reseed_times = time_s[history.reseeded]
        if reseed_times.size:
            ax.plot(reseed_times, np.zeros_like(reseed_times), 'k|',
                    markersize=8, label='Reseed')

        ax.set_ylabel(f'{name} (deg)')
        ax.set_title(name)
        ax.legend(loc='best')
        ax.grid(True, alpha=0.3)

    axes[-1].set_xlabel('Time (s)')
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig


def plot_kalman_bias(
    history: EstimateHistory,
    true_bias_dps: Optional[np.ndarray] = None,
    title: str = "Kalman Gyro Bias Estimate",
    save_path: Optional[str] = None,
) -> Figure:
    """Plot the Kalman bias estimates of both axes.

    Args:
        history: Replayed estimator outputs
        true_bias_dps: Optional true gyro bias [x, y, z] in deg/s
        title: Figure title
        save_path: Optional path to save figure

    Returns:
        Matplotlib Figure object
    """
    fig, ax = plt.subplots(1, 1, figsize=(12, 4))
    fig.suptitle(title, fontsize=14)

    ax.plot(history.time_s, history.roll_bias_dps, 'b-', linewidth=1.5, label='Roll bias')
    ax.plot(history.time_s, history.pitch_bias_dps, 'r-', linewidth=1.5, label='Pitch bias')
    if true_bias_dps is not None:
        ax.axhline(y=true_bias_dps[0], color='b', linestyle='--', alpha=0.5)
        ax.axhline(y=true_bias_dps[1], color='r', linestyle='--', alpha=0.5)

    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Bias (deg/s)')
    ax.legend(loc='best')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig
