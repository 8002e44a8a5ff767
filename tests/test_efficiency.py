"""Tests for the shared efficiency primitives and the boiler tail-off curve."""

from __future__ import annotations

import pytest

from heat_advisor.engine.boiler_efficiency import efficiency_series_pct
from heat_advisor.engine.efficiency import (
    clamp_pct,
    compute_current_efficiency_pct,
    load_penalty_pct,
    resolve_nominal_efficiency_pct,
)


class TestClamp:
    @pytest.mark.parametrize("value,expected", [(-20.0, 50.0), (49.9, 50.0), (75.0, 75.0), (99.0, 99.0), (140.0, 99.0)])
    def test_bounds(self, value, expected):
        assert clamp_pct(value) == expected

    @pytest.mark.parametrize("nominal", [0.0, 30.0, 50.0, 80.0, 92.0, 99.0, 120.0])
    @pytest.mark.parametrize("decay", [-50.0, -5.0, 0.0, 3.2, 20.0, 80.0])
    def test_current_efficiency_never_leaves_bounds(self, nominal, decay):
        assert 50.0 <= compute_current_efficiency_pct(nominal, decay) <= 99.0

    def test_uplift_capped_at_ceiling(self):
        assert compute_current_efficiency_pct(98.0, -10.0) == 99.0

    def test_decay_floored(self):
        assert compute_current_efficiency_pct(60.0, 30.0) == 50.0


class TestNominal:
    def test_default(self):
        assert resolve_nominal_efficiency_pct() == 92.0
        assert resolve_nominal_efficiency_pct(None) == 92.0

    def test_clamped(self):
        assert resolve_nominal_efficiency_pct(120.0) == 99.0
        assert resolve_nominal_efficiency_pct(40.0) == 50.0
        assert resolve_nominal_efficiency_pct(89.0) == 89.0


class TestLoadPenalty:
    def test_off_has_no_penalty(self):
        assert load_penalty_pct(0.0) == 0.0

    def test_low_load_cycles(self):
        assert load_penalty_pct(0.05) == 2.0
        assert load_penalty_pct(0.19) == 2.0

    def test_threshold_and_above(self):
        assert load_penalty_pct(0.2) == 0.0
        assert load_penalty_pct(0.8) == 0.0


class TestEfficiencySeries:
    def test_shape_and_bounds(self):
        demand = [0.5 * (i % 10) for i in range(96)]
        series = efficiency_series_pct(90.0, 4.0, demand, 24.0)
        assert len(series) == 96
        assert all(50.0 <= v <= 99.0 for v in series)

    def test_tail_off_at_low_load(self):
        series = efficiency_series_pct(90.0, 4.0, [0.0, 2.4, 12.0] + [0.0] * 93, 24.0)
        assert series[0] == 86.0   # off
        assert series[1] == 84.0   # 10 % load
        assert series[2] == 86.0   # 50 % load

    def test_negative_decay_capped(self):
        assert max(efficiency_series_pct(97.0, -10.0, [12.0] * 96, 24.0)) == 99.0
