"""Fusion pipeline module for roll/pitch comparison.

This module provides the per-sample orchestration of the tilt estimators
and the thin timing and presentation helpers around it.

Public API:
    - FusionCycle: Runs the three estimators for roll and pitch
    - SensorSample: Raw sensor reading dataclass
    - CycleOutput: Estimates emitted each cycle
    - AxisEstimate: Per-axis estimator outputs
    - SampleClock: Elapsed-time source
    - TimingStatistics: Timestep statistics dataclass
    - ColumnReporter: Terminal column printer
"""

from tilt_estimation import AxisEstimate
from fusion_pipeline.fusion_cycle import (
    FusionCycle,
    SensorSample,
    CycleOutput,
)
from fusion_pipeline.timing import (
    SampleClock,
    TimingStatistics,
)
from fusion_pipeline.reporting import (
    ColumnReporter,
    format_header,
    format_row,
)

__all__ = [
    'AxisEstimate',
    'FusionCycle',
    'SensorSample',
    'CycleOutput',
    'SampleClock',
    'TimingStatistics',
    'ColumnReporter',
    'format_header',
    'format_row',
]
