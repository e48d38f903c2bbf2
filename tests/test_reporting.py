"""Unit tests for column reporting."""

import io

import pytest

from fusion_pipeline import ColumnReporter, FusionCycle, format_header, format_row
from tilt_estimation import EstimatorConfig


@pytest.fixture
def output(make_sample):
    cycle = FusionCycle(EstimatorConfig())
    return cycle.step(make_sample(12.34, -5.67, temperature_raw=-3740), None)


def test_header_labels():
    assert format_header() == (
        'roll\troll_gyro\troll_complementary\troll_kalman\t'
        'pitch\tpitch_gyro\tpitch_complementary\tpitch_kalman\ttemp/*C'
    )


def test_row_one_decimal(output):
    fields = format_row(output).split('\t')
    assert len(fields) == 9
    assert fields[0] == '12.3'
    assert fields[4] == '-5.7'
    assert fields[8] == '25.5'


class TestColumnReporter:
    """Tests for ColumnReporter."""

    def test_header_repeats(self, output):
        """Test that labels precede rows 0, 30 and 60."""
        stream = io.StringIO()
        reporter = ColumnReporter(stream=stream)

        for _ in range(61):
            reporter.report(output)

        lines = stream.getvalue().splitlines()
        header_lines = [i for i, line in enumerate(lines) if line == format_header()]
        assert header_lines == [0, 31, 62]
        assert len(lines) == 61 + 3
        assert reporter.rows_written == 61

    def test_custom_repeat_rate(self, output):
        stream = io.StringIO()
        reporter = ColumnReporter(label_repeat_rate=2, stream=stream)
        for _ in range(4):
            reporter.report(output)
        assert stream.getvalue().count(format_header()) == 2

    def test_defaults_to_stdout(self, output, capsys):
        ColumnReporter().report(output)
        captured = capsys.readouterr()
        assert captured.out.startswith('roll\t')

    def test_invalid_repeat_rate(self):
        with pytest.raises(ValueError, match="label_repeat_rate"):
            ColumnReporter(label_repeat_rate=0)
