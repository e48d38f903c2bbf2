"""Unit tests for the fusion cycle orchestration."""

import numpy as np
import pytest

from fusion_pipeline import FusionCycle, SensorSample
from tilt_estimation import EstimatorConfig, InvalidTimestepError, RestrictedAxis

DT = 0.01
RATE_100_DPS = 13100  # raw counts at 131 LSB per deg/s


class TestSeeding:
    """Tests for the first sample."""

    def test_first_sample_seeds_all_estimators(self, pitch_restricted_config, make_sample):
        """Test that every estimator starts at the accelerometer angle."""
        cycle = FusionCycle(pitch_restricted_config)
        assert not cycle.is_initialized

        output = cycle.step(make_sample(20.0, -10.0), None)

        assert cycle.is_initialized
        assert output.timestep_s is None
        for estimate, expected in ((output.roll, 20.0), (output.pitch, -10.0)):
            assert np.isclose(estimate.accel_angle_deg, expected, atol=0.01)
            assert estimate.gyro_angle_deg == estimate.accel_angle_deg
            assert estimate.complementary_angle_deg == estimate.accel_angle_deg
            assert estimate.kalman_angle_deg == estimate.accel_angle_deg
            assert estimate.kalman_bias_dps == 0.0

    def test_degenerate_first_sample_not_seeded(self, pitch_restricted_config):
        """Test that a zero accelerometer vector cannot seed."""
        cycle = FusionCycle(pitch_restricted_config)
        output = cycle.step(SensorSample(0, 0, 0, 0, 0, 0), None)
        assert output is None
        assert not cycle.is_initialized

    def test_reset_requires_new_seed(self, pitch_restricted_config, make_sample):
        """Test that reset() forgets the seeded state."""
        cycle = FusionCycle(pitch_restricted_config)
        cycle.step(make_sample(20.0, 0.0), None)
        cycle.reset()
        assert not cycle.is_initialized
        output = cycle.step(make_sample(-30.0, 5.0), None)
        assert np.isclose(output.roll.kalman_angle_deg, -30.0, atol=0.01)


class TestSkipsAndErrors:
    """Tests for missing samples, invalid timesteps and degenerate vectors."""

    @pytest.fixture
    def seeded_cycle(self, pitch_restricted_config, make_sample):
        cycle = FusionCycle(pitch_restricted_config)
        cycle.step(make_sample(20.0, 5.0), None)
        cycle.step(make_sample(21.0, 5.0, gyro_x=RATE_100_DPS), DT)
        return cycle

    def test_no_sample_is_skipped(self, seeded_cycle):
        """Test that None leaves the state untouched."""
        before = (seeded_cycle.roll, seeded_cycle.pitch)
        assert seeded_cycle.step(None, DT) is None
        assert (seeded_cycle.roll, seeded_cycle.pitch) == before

    @pytest.mark.parametrize('timestep_s', [0.0, -0.01, None])
    def test_invalid_timestep_raises_without_mutation(
        self, seeded_cycle, make_sample, timestep_s
    ):
        """Test that a bad timestep changes nothing."""
        before = (seeded_cycle.roll, seeded_cycle.pitch)
        with pytest.raises(InvalidTimestepError):
            seeded_cycle.step(make_sample(40.0, 5.0, gyro_x=RATE_100_DPS), timestep_s)
        assert (seeded_cycle.roll, seeded_cycle.pitch) == before

    def test_invalid_timestep_does_not_affect_next_cycle(
        self, pitch_restricted_config, make_sample
    ):
        """Test that a rejected cycle leaves no trace in later outputs."""
        samples = [make_sample(20.0 + k, 5.0, gyro_x=RATE_100_DPS) for k in range(5)]

        clean = FusionCycle(pitch_restricted_config)
        interrupted = FusionCycle(pitch_restricted_config)
        clean.step(samples[0], None)
        interrupted.step(samples[0], None)

        for sample in samples[1:]:
            expected = clean.step(sample, DT)
            with pytest.raises(InvalidTimestepError):
                interrupted.step(sample, 0.0)
            actual = interrupted.step(sample, DT)
            assert actual.as_row() == expected.as_row()

    def test_degenerate_accel_holds_previous_angle(self, seeded_cycle):
        """Test that a zero vector reuses the previous accelerometer angles."""
        previous = seeded_cycle.roll.accel_angle_deg
        output = seeded_cycle.step(SensorSample(0, 0, 0, 0, 0, 0), DT)

        assert output.accel_held
        assert output.roll.accel_angle_deg == previous
        assert all(np.isfinite(value) for value in output.as_row())


class TestOutput:
    """Tests for the emitted record."""

    def test_temperature(self, pitch_restricted_config, make_sample):
        """Test raw / 340 + 36.53."""
        cycle = FusionCycle(pitch_restricted_config)
        output = cycle.step(make_sample(0.0, 0.0, temperature_raw=-3740), None)
        assert np.isclose(output.temperature_degc, 25.53)

    def test_row_order(self, pitch_restricted_config, make_sample):
        """Test accel, gyro, complementary, Kalman per axis, then temperature."""
        cycle = FusionCycle(pitch_restricted_config)
        cycle.step(make_sample(10.0, 20.0), None)
        output = cycle.step(make_sample(11.0, 21.0, gyro_x=RATE_100_DPS), DT)

        row = output.as_row()
        assert len(row) == 9
        assert row[0] == output.roll.accel_angle_deg
        assert row[1] == output.roll.gyro_angle_deg
        assert row[2] == output.roll.complementary_angle_deg
        assert row[3] == output.roll.kalman_angle_deg
        assert row[4] == output.pitch.accel_angle_deg
        assert row[7] == output.pitch.kalman_angle_deg
        assert row[8] == output.temperature_degc

    def test_output_is_a_copy(self, pitch_restricted_config, make_sample):
        """Test that mutating an output does not touch the cycle."""
        cycle = FusionCycle(pitch_restricted_config)
        output = cycle.step(make_sample(10.0, 0.0), None)
        output.roll.kalman_angle_deg = 999.0
        assert cycle.roll.kalman_angle_deg != 999.0

    def test_gyro_integration(self, pitch_restricted_config, make_sample):
        """Test that raw gyro angles integrate the converted rate."""
        cycle = FusionCycle(pitch_restricted_config)
        seed = cycle.step(make_sample(0.0, 0.0), None)
        output = cycle.step(
            make_sample(0.0, 0.0, gyro_x=RATE_100_DPS, gyro_y=-RATE_100_DPS), DT
        )
        assert np.isclose(output.roll.gyro_angle_deg, seed.roll.gyro_angle_deg + 1.0)
        assert np.isclose(output.pitch.gyro_angle_deg, seed.pitch.gyro_angle_deg - 1.0)


class TestPoleHandling:
    """Tests for the continuous axis crossing +/-90 degrees."""

    def _sweep(self, config, make_sample, continuous='roll'):
        cycle = FusionCycle(config)
        outputs = []
        for k, angle in enumerate(np.arange(80.0, 101.0, 1.0)):
            if continuous == 'roll':
                sample = make_sample(angle, 0.0, gyro_x=RATE_100_DPS, gyro_y=655)
            else:
                sample = make_sample(0.0, angle, gyro_x=655, gyro_y=RATE_100_DPS)
            outputs.append(cycle.step(sample, None if k == 0 else DT))
        return outputs

    def test_reseed_fires_exactly_past_pole(self, pitch_restricted_config, make_sample):
        """Test reseed iff accel and prior Kalman roll are both beyond 90."""
        outputs = self._sweep(pitch_restricted_config, make_sample)

        for previous, output in zip(outputs, outputs[1:]):
            expected = (
                abs(output.roll.accel_angle_deg) > 90.0
                and abs(previous.roll.kalman_angle_deg) > 90.0
            )
            assert output.decision.reseed_roll == expected
            assert not output.decision.reseed_pitch
            if expected:
                assert output.roll.kalman_angle_deg == output.roll.accel_angle_deg

        reseeds = [o.decision.reseed_roll for o in outputs]
        assert any(reseeds)
        assert not any(
            o.decision.reseed_roll for o in outputs if o.roll.accel_angle_deg <= 90.0
        )

    def test_rate_sign_flips_at_crossing(self, pitch_restricted_config, make_sample):
        """Test that pitch rate inverts exactly when roll Kalman exceeds 90."""
        outputs = self._sweep(pitch_restricted_config, make_sample)

        for previous, output in zip(outputs, outputs[1:]):
            inverted = abs(output.roll.kalman_angle_deg) > 90.0
            assert output.decision.restricted_rate_inverted == inverted
            # 655 counts = 5 deg/s, integrated with the sign actually used
            step = output.pitch.gyro_angle_deg - previous.pitch.gyro_angle_deg
            assert np.isclose(step, -0.05 if inverted else 0.05)

        flags = [o.decision.restricted_rate_inverted for o in outputs[1:]]
        assert flags[0] is False
        assert flags[-1] is True

    def test_no_jump_larger_than_rotation(self, pitch_restricted_config, make_sample):
        """Test that roll estimates move about one degree per sample."""
        outputs = self._sweep(pitch_restricted_config, make_sample)
        kalman = np.array([o.roll.kalman_angle_deg for o in outputs])
        complementary = np.array([o.roll.complementary_angle_deg for o in outputs])
        assert np.max(np.abs(np.diff(kalman))) < 2.0
        assert np.max(np.abs(np.diff(complementary))) < 2.0

    def test_roll_restricted_reseeds_pitch(self, roll_restricted_config, make_sample):
        """Test the symmetric convention on the pitch axis."""
        outputs = self._sweep(roll_restricted_config, make_sample, continuous='pitch')

        assert any(o.decision.reseed_pitch for o in outputs)
        assert not any(o.decision.reseed_roll for o in outputs)
        for output in outputs[1:]:
            assert output.decision.restricted_rate_inverted == (
                abs(output.pitch.kalman_angle_deg) > 90.0
            )


class TestDriftAnchor:
    """Tests for raw gyro re-anchoring inside the cycle."""

    def test_snaps_on_crossing_cycle_only(self, pitch_restricted_config, make_sample):
        """Test that the gyro angle snaps when it first exceeds 180."""
        cycle = FusionCycle(pitch_restricted_config)
        cycle.step(make_sample(0.0, 0.0), None)

        for k in range(1, 182):
            output = cycle.step(make_sample(0.0, 0.0, gyro_y=RATE_100_DPS), DT)
            if k <= 180:
                assert not output.decision.pitch_gyro_anchored
                assert np.isclose(output.pitch.gyro_angle_deg, float(k))
            else:
                assert output.decision.pitch_gyro_anchored
                assert output.pitch.gyro_angle_deg == output.pitch.kalman_angle_deg
            assert not output.decision.roll_gyro_anchored

    def test_custom_drift_limit(self, make_sample):
        """Test a retuned drift limit."""
        cycle = FusionCycle(EstimatorConfig(drift_limit_deg=10.0))
        cycle.step(make_sample(0.0, 0.0), None)
        anchored = [
            cycle.step(make_sample(0.0, 0.0, gyro_x=RATE_100_DPS), DT).decision.roll_gyro_anchored
            for _ in range(11)
        ]
        assert anchored == [False] * 10 + [True]


class TestConvergence:
    """Tests for a stationary body."""

    @pytest.mark.parametrize('restricted', [RestrictedAxis.PITCH, RestrictedAxis.ROLL])
    def test_stationary_with_gyro_bias(self, make_sample, restricted):
        """Test Kalman and complementary outputs settle on the accelerometer angle."""
        cycle = FusionCycle(EstimatorConfig(restricted_axis=restricted))
        sample = make_sample(25.0, -15.0, gyro_x=131, gyro_y=-131)
        cycle.step(sample, None)

        for _ in range(3000):
            output = cycle.step(sample, DT)

        for estimate, bias in ((output.roll, 1.0), (output.pitch, -1.0)):
            assert np.isclose(
                estimate.kalman_angle_deg, estimate.accel_angle_deg, atol=0.05
            )
            assert np.isclose(estimate.kalman_bias_dps, bias, atol=0.05)
            # Complementary keeps a constant lag of alpha * bias * dt / (1 - alpha)
            assert np.isclose(
                estimate.complementary_angle_deg, estimate.accel_angle_deg, atol=0.2
            )
            assert abs(estimate.gyro_angle_deg - estimate.accel_angle_deg) > 10.0
