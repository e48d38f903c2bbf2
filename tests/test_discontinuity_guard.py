"""Unit tests for the pole-crossing and drift policy."""

import pytest

from tilt_estimation import (
    AxisEstimate,
    DiscontinuityGuard,
    GuardDecision,
    RestrictedAxis,
)


def prior(kalman_angle_deg: float) -> AxisEstimate:
    return AxisEstimate.seeded(kalman_angle_deg)


class TestReseed:
    """Tests for the continuous-axis reseed rule."""

    @pytest.fixture
    def guard(self):
        return DiscontinuityGuard(RestrictedAxis.PITCH)

    def test_inside_band_no_reseed(self, guard):
        """Test normal operation away from the pole."""
        decision = guard.assess(prior(30.0), prior(10.0), 31.0, 10.0)
        assert decision == GuardDecision()

    def test_accel_past_pole_kalman_inside(self, guard):
        """Test that the crossing cycle still gets a normal update."""
        decision = guard.assess(prior(89.5), prior(0.0), 91.0, 0.0)
        assert not decision.reseed_roll

    def test_kalman_past_pole_accel_inside(self, guard):
        """Test that returning inside the band is not reseeded."""
        decision = guard.assess(prior(91.0), prior(0.0), 89.0, 0.0)
        assert not decision.reseed_roll

    @pytest.mark.parametrize('kalman, accel', [(92.0, 95.0), (-92.0, -95.0), (170.0, -175.0)])
    def test_both_past_pole_reseeds(self, guard, kalman, accel):
        """Test reseed once both readings are beyond +/-90."""
        decision = guard.assess(prior(kalman), prior(0.0), accel, 0.0)
        assert decision.reseed_roll
        assert not decision.reseed_pitch
        assert decision.reseeds(RestrictedAxis.ROLL)

    def test_exactly_at_threshold_is_inside(self, guard):
        """Test that +/-90 itself is not past the pole."""
        decision = guard.assess(prior(90.0), prior(0.0), 90.0, 0.0)
        assert not decision.reseed_roll

    def test_restricted_axis_never_reseeded(self, guard):
        """Test that pitch values beyond 90 do not reseed pitch."""
        decision = guard.assess(prior(0.0), prior(120.0), 0.0, 120.0)
        assert decision == GuardDecision()

    def test_roll_restricted_reseeds_pitch(self):
        """Test the symmetric convention."""
        guard = DiscontinuityGuard(RestrictedAxis.ROLL)
        decision = guard.assess(prior(0.0), prior(100.0), 0.0, 105.0)
        assert decision.reseed_pitch
        assert not decision.reseed_roll
        assert guard.continuous_axis is RestrictedAxis.PITCH

    def test_custom_threshold(self):
        """Test a retuned pole threshold."""
        guard = DiscontinuityGuard(RestrictedAxis.PITCH, pole_threshold_deg=60.0)
        assert guard.assess(prior(61.0), prior(0.0), 62.0, 0.0).reseed_roll


class TestRestrictedRate:
    """Tests for the restricted-axis rate inversion."""

    @pytest.fixture
    def guard(self):
        return DiscontinuityGuard(RestrictedAxis.PITCH)

    def test_inside_band_unchanged(self, guard):
        assert guard.restricted_rate(10.0, 45.0) == (10.0, False)

    def test_at_threshold_unchanged(self, guard):
        assert guard.restricted_rate(10.0, 90.0) == (10.0, False)

    @pytest.mark.parametrize('continuous_kalman', [90.5, -90.5, 179.0])
    def test_past_pole_inverted(self, guard, continuous_kalman):
        assert guard.restricted_rate(10.0, continuous_kalman) == (-10.0, True)


class TestDriftAnchor:
    """Tests for raw gyro drift re-anchoring."""

    @pytest.fixture
    def guard(self):
        return DiscontinuityGuard(RestrictedAxis.PITCH)

    def test_within_limit_kept(self, guard):
        assert guard.anchor_gyro_angle(180.0, 5.0) == (180.0, False)
        assert guard.anchor_gyro_angle(-180.0, 5.0) == (-180.0, False)

    def test_beyond_limit_snapped(self, guard):
        assert guard.anchor_gyro_angle(180.5, 5.0) == (5.0, True)
        assert guard.anchor_gyro_angle(-181.0, -3.0) == (-3.0, True)

    def test_custom_limit(self):
        guard = DiscontinuityGuard(drift_limit_deg=45.0)
        assert guard.anchor_gyro_angle(46.0, 1.0) == (1.0, True)

    def test_invalid_limits_raise(self):
        with pytest.raises(ValueError, match="drift_limit_deg"):
            DiscontinuityGuard(drift_limit_deg=0.0)
        with pytest.raises(ValueError, match="pole_threshold_deg"):
            DiscontinuityGuard(pole_threshold_deg=-1.0)
