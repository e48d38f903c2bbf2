"""Debug module for estimator visualization.

Provides tools for comparing the tilt estimators:
- plot_estimator_comparison: Gyro vs complementary vs Kalman per axis
- plot_kalman_bias: Kalman gyro bias estimates over time
"""

from debug.plotting import (
    plot_estimator_comparison,
    plot_kalman_bias,
)

__all__ = [
    'plot_estimator_comparison',
    'plot_kalman_bias',
]
