"""Tests for the amplification ramp."""

import pytest

from stableswap.amplification import AmplificationRamp
from stableswap.config import EngineConfig
from stableswap.errors import InvalidAmplification, InvalidRampWindow
from tests.helpers import ONE_DAY


class TestEffectiveAmp:
    """Tests for effective_amp interpolation."""

    def test_fixed_ramp(self) -> None:
        ramp = AmplificationRamp.fixed(100)
        assert ramp.effective_amp(0) == 100
        assert ramp.effective_amp(10**9) == 100

    def test_exact_at_window_boundaries(self) -> None:
        """Initial at start, target at stop, exactly."""
        ramp = AmplificationRamp(100, 200, 1_000, 2_000)
        assert ramp.effective_amp(1_000) == 100
        assert ramp.effective_amp(2_000) == 200

    def test_clamped_outside_window(self) -> None:
        ramp = AmplificationRamp(100, 200, 1_000, 2_000)
        assert ramp.effective_amp(0) == 100
        assert ramp.effective_amp(999) == 100
        assert ramp.effective_amp(2_001) == 200
        assert ramp.effective_amp(10**9) == 200

    def test_linear_ramp_up(self) -> None:
        ramp = AmplificationRamp(100, 200, 1_000, 2_000)
        assert ramp.effective_amp(1_500) == 150
        assert ramp.effective_amp(1_250) == 125

    def test_interpolation_truncates(self) -> None:
        ramp = AmplificationRamp(100, 200, 1_000, 2_000)
        # 100 + 100 * 1 / 1000 = 100.1
        assert ramp.effective_amp(1_001) == 100

    def test_linear_ramp_down(self) -> None:
        ramp = AmplificationRamp(200, 100, 0, 1_000)
        assert ramp.effective_amp(500) == 150
        assert ramp.effective_amp(250) == 175

    def test_monotonic_up(self) -> None:
        ramp = AmplificationRamp(10, 1_000, 0, 7 * ONE_DAY)
        values = [ramp.effective_amp(t) for t in range(0, 7 * ONE_DAY + 1, 3_600)]
        assert values == sorted(values)
        assert values[0] == 10
        assert values[-1] == 1_000

    def test_monotonic_down(self) -> None:
        ramp = AmplificationRamp(1_000, 10, 0, 7 * ONE_DAY)
        values = [ramp.effective_amp(t) for t in range(0, 7 * ONE_DAY + 1, 3_600)]
        assert values == sorted(values, reverse=True)

    def test_continuous_at_boundaries(self) -> None:
        """One second into or out of the window moves A by at most one step."""
        ramp = AmplificationRamp(100, 200, 0, 100)
        assert ramp.effective_amp(1) - ramp.effective_amp(0) <= 1
        assert ramp.effective_amp(100) - ramp.effective_amp(99) <= 1

    def test_is_ramping(self) -> None:
        ramp = AmplificationRamp(100, 200, 1_000, 2_000)
        assert not ramp.is_ramping(1_000)
        assert ramp.is_ramping(1_500)
        assert not ramp.is_ramping(2_000)
        assert not AmplificationRamp.fixed(100).is_ramping(5)


class TestRampValidation:
    """Tests for ramp construction invariants."""

    def test_inverted_window_raises(self) -> None:
        with pytest.raises(InvalidRampWindow):
            AmplificationRamp(100, 200, 2_000, 1_000)

    def test_zero_length_window_with_change_raises(self) -> None:
        with pytest.raises(InvalidRampWindow):
            AmplificationRamp(100, 200, 1_000, 1_000)

    def test_zero_length_window_without_change_is_fixed(self) -> None:
        ramp = AmplificationRamp(100, 100, 1_000, 1_000)
        assert ramp.effective_amp(1_000) == 100
        assert ramp == AmplificationRamp.fixed(100, ts=1_000)
        assert not ramp.is_ramping(1_000)

    def test_non_positive_amp_raises(self) -> None:
        with pytest.raises(InvalidAmplification):
            AmplificationRamp.fixed(0)


class TestStartRamp:
    """Tests for start_ramp."""

    def test_start_from_fixed(self) -> None:
        ramp = AmplificationRamp.fixed(100).start_ramp(200, now=1_000, stop_ts=1_000 + ONE_DAY)
        assert ramp == AmplificationRamp(100, 200, 1_000, 1_000 + ONE_DAY)

    def test_restart_uses_current_effective_value(self) -> None:
        """Re-ramping mid-window starts from the interpolated A, not the old initial."""
        ramp = AmplificationRamp(100, 200, 0, 2 * ONE_DAY)
        restarted = ramp.start_ramp(300, now=ONE_DAY, stop_ts=3 * ONE_DAY)
        assert restarted.initial_amp == 150
        assert restarted.effective_amp(ONE_DAY) == ramp.effective_amp(ONE_DAY)

    def test_zero_duration_raises(self) -> None:
        with pytest.raises(InvalidRampWindow):
            AmplificationRamp.fixed(100).start_ramp(200, now=1_000, stop_ts=1_000)

    def test_inverted_duration_raises(self) -> None:
        with pytest.raises(InvalidRampWindow):
            AmplificationRamp.fixed(100).start_ramp(200, now=1_000, stop_ts=999)

    def test_shorter_than_minimum_raises(self) -> None:
        with pytest.raises(InvalidRampWindow):
            AmplificationRamp.fixed(100).start_ramp(200, now=0, stop_ts=ONE_DAY - 1)

    def test_minimum_duration_is_configurable(self) -> None:
        config = EngineConfig(min_ramp_duration=1)
        ramp = AmplificationRamp.fixed(100).start_ramp(200, now=0, stop_ts=10, config=config)
        assert ramp.effective_amp(5) == 150

    def test_change_factor_bound_up(self) -> None:
        base = AmplificationRamp.fixed(100)
        assert base.start_ramp(1_000, now=0, stop_ts=ONE_DAY).target_amp == 1_000
        with pytest.raises(InvalidAmplification):
            base.start_ramp(1_001, now=0, stop_ts=ONE_DAY)

    def test_change_factor_bound_down(self) -> None:
        base = AmplificationRamp.fixed(100)
        assert base.start_ramp(10, now=0, stop_ts=ONE_DAY).target_amp == 10
        with pytest.raises(InvalidAmplification):
            base.start_ramp(9, now=0, stop_ts=ONE_DAY)

    def test_target_out_of_bounds(self) -> None:
        with pytest.raises(InvalidAmplification):
            AmplificationRamp.fixed(1).start_ramp(0, now=0, stop_ts=ONE_DAY)
        config = EngineConfig(max_amp=150)
        with pytest.raises(InvalidAmplification):
            AmplificationRamp.fixed(100).start_ramp(200, now=0, stop_ts=ONE_DAY, config=config)


class TestStopRamp:
    """Tests for stop_ramp."""

    def test_stop_pins_current_value(self) -> None:
        ramp = AmplificationRamp(100, 200, 0, ONE_DAY)
        stopped = ramp.stop_ramp(ONE_DAY // 2)
        assert stopped == AmplificationRamp(150, 150, ONE_DAY // 2, ONE_DAY // 2)
        assert stopped.effective_amp(ONE_DAY) == 150
        assert stopped.effective_amp(10 * ONE_DAY) == 150

    def test_stop_after_window_keeps_target(self) -> None:
        ramp = AmplificationRamp(100, 200, 0, ONE_DAY)
        assert ramp.stop_ramp(2 * ONE_DAY).effective_amp(3 * ONE_DAY) == 200
