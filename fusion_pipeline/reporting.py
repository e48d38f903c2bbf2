"""Tab-separated terminal columns for side-by-side comparison."""

import sys
from typing import Optional, TextIO

from fusion_pipeline.fusion_cycle import CycleOutput

COLUMN_LABELS = (
    'roll',
    'roll_gyro',
    'roll_complementary',
    'roll_kalman',
    'pitch',
    'pitch_gyro',
    'pitch_complementary',
    'pitch_kalman',
    'temp/*C',
)

LABEL_REPEAT_RATE = 30


def format_header() -> str:
    """Column labels, one tab between labels."""
    return '\t'.join(COLUMN_LABELS)


def format_row(output: CycleOutput) -> str:
    """One output row, values to one decimal place."""
    return '\t'.join(f"{value:.1f}" for value in output.as_row())


class ColumnReporter:
    """Writes estimator outputs as rows, repeating the header periodically."""

    def __init__(
        self,
        label_repeat_rate: int = LABEL_REPEAT_RATE,
        stream: Optional[TextIO] = None,
    ) -> None:
        if label_repeat_rate <= 0:
            raise ValueError(
                f"label_repeat_rate must be positive, got {label_repeat_rate}"
            )
        self._label_repeat_rate = label_repeat_rate
        self._stream = stream
        self._rows_written = 0

    def report(self, output: CycleOutput) -> None:
        """Print one row, preceded by the header every label_repeat_rate rows."""
        stream = self._stream if self._stream is not None else sys.stdout
        if self._rows_written % self._label_repeat_rate == 0:
            print(format_header(), file=stream)
        print(format_row(output), file=stream)
        self._rows_written += 1

    @property
    def rows_written(self) -> int:
        return self._rows_written
