"""Tests for the gated boiler modules — SEDBUK lookup, sizing and the
efficiency model."""

from __future__ import annotations

import pytest

from heat_advisor.config import BoilerConfig, ReferenceTables
from heat_advisor.engine.boiler_efficiency import age_factor, build_boiler_efficiency_model
from heat_advisor.engine.boiler_sizing import classify_sizing_band, compute_boiler_sizing
from heat_advisor.engine.sedbuk import band_key, format_gc_number, lookup_sedbuk
from heat_advisor.errors import EngineError
from heat_advisor.models.results import SedbukResult


FLAT_DEMAND = [2.0] * 96


# ═══════════════════════════════════════════════════════════════════════════
# SEDBUK
# ═══════════════════════════════════════════════════════════════════════════


class TestSedbuk:
    @pytest.mark.parametrize("raw,formatted", [
        ("4758301", "47-583-01"),
        ("47-583-01", "47-583-01"),
        ("47 583 01", "47-583-01"),
        ("123", "123"),
    ])
    def test_format_gc_number(self, raw, formatted):
        assert format_gc_number(raw) == formatted

    def test_gc_match(self, boiler):
        result = lookup_sedbuk(boiler)
        assert result.source == "gc_lookup"
        assert result.seasonal_efficiency == 0.91
        assert "47-583-01" in result.notes[0]

    def test_unlisted_gc_falls_back_to_band(self, boiler):
        result = lookup_sedbuk(boiler.model_copy(update={"gc_number": "12-345-67"}))
        assert result.source == "band_fallback"
        assert result.band_key == "modern_condensing_mid"
        assert result.seasonal_efficiency == 0.90
        assert "not found" in result.notes[0]

    def test_gc_without_digits(self, boiler):
        result = lookup_sedbuk(boiler.model_copy(update={"gc_number": "n/a"}))
        assert result.source == "band_fallback"
        assert "invalid format" in result.notes[0]

    @pytest.mark.parametrize("condensing,age,key", [
        ("no", 3, "non_condensing_recent"),
        ("no", 10, "non_condensing_mid"),
        ("no", 16, "non_condensing_old"),
        ("yes", None, "modern_condensing_recent"),
        ("yes", 12, "modern_condensing_mid"),
        ("yes", 20, "modern_condensing_old"),
        ("yes", 21, "early_condensing_old"),
        ("unknown", 12, "unknown"),
    ])
    def test_band_key(self, condensing, age, key):
        assert band_key(BoilerConfig(condensing=condensing, age_years=age)) == key

    def test_no_matching_band(self):
        result = lookup_sedbuk(BoilerConfig(), ReferenceTables(sedbuk_bands={}))
        assert result.source == "unknown"
        assert result.seasonal_efficiency is None

    def test_requires_boiler(self):
        with pytest.raises(EngineError):
            lookup_sedbuk(None)


# ═══════════════════════════════════════════════════════════════════════════
# Sizing
# ═══════════════════════════════════════════════════════════════════════════


class TestSizing:
    @pytest.mark.parametrize("ratio,band", [
        (None, "well_matched"),
        (1.3, "well_matched"),
        (1.31, "mild_oversize"),
        (1.8, "mild_oversize"),
        (2.5, "oversized"),
        (2.6, "aggressive"),
    ])
    def test_bands(self, ratio, band):
        assert classify_sizing_band(ratio) == band

    def test_ratio(self, boiler):
        result = compute_boiler_sizing(boiler, 10.0)
        assert result.oversize_ratio == pytest.approx(3.0)
        assert result.sizing_band == "aggressive"
        assert result.nominal_kw_defaulted is False

    def test_nominal_fallback_by_type(self):
        result = compute_boiler_sizing(BoilerConfig(type="system"), 10.0)
        assert result.nominal_kw == 18.0
        assert result.nominal_kw_defaulted is True
        assert result.sizing_band == "mild_oversize"

    def test_unknown_heat_loss(self, boiler):
        result = compute_boiler_sizing(boiler, None)
        assert result.oversize_ratio is None
        assert result.sizing_band == "well_matched"

    def test_requires_boiler(self):
        with pytest.raises(EngineError):
            compute_boiler_sizing(None, 8.0)


# ═══════════════════════════════════════════════════════════════════════════
# Efficiency model
# ═══════════════════════════════════════════════════════════════════════════


def _model(boiler, heat_loss_kw=9.5, demand=FLAT_DEMAND, sedbuk=None):
    sizing = compute_boiler_sizing(boiler, heat_loss_kw)
    return build_boiler_efficiency_model(boiler, sizing, sedbuk or lookup_sedbuk(boiler), demand)


class TestEfficiencyModel:
    @pytest.mark.parametrize("age,factor", [
        (None, 1.0), (5, 1.0), (8, 0.97), (15, 0.94), (20, 0.91), (30, 0.88),
    ])
    def test_age_factor(self, age, factor):
        assert age_factor(age) == factor

    def test_measured_combi(self, boiler):
        model = _model(boiler)
        assert model.baseline_source == "SEDBUK database (GC number match)"
        assert model.baseline_pct == pytest.approx(91.0)
        assert model.age_factor == 0.97
        # 30 kW on 9.5 kW is aggressive oversizing
        assert model.oversize_penalty_pct == 9.0
        assert model.age_adjusted_pct == pytest.approx(91.0 * 0.97)
        assert model.in_home_pct == pytest.approx(91.0 * 0.97 - 9.0)
        # 2 kW on a 30 kW boiler is in the low-load band
        assert model.efficiency_pct_96 == pytest.approx([91.0 * 0.97 - 11.0] * 96)
        assert "Modelled estimate (not measured)." in model.notes

    def test_baseline_from_surveyed_pct(self):
        model = _model(BoilerConfig(sedbuk_pct=89.0, condensing="yes", age_years=3))
        assert model.baseline_pct == 89.0
        assert model.baseline_source == "ErP / SEDBUK % entered by surveyor"

    def test_baseline_from_erp_class(self):
        model = _model(BoilerConfig(erp_class="C", condensing="yes"))
        assert model.baseline_pct == 84.0

    def test_baseline_from_band(self):
        model = _model(BoilerConfig(condensing="no", age_years=18))
        assert model.baseline_pct == pytest.approx(62.0)
        assert model.baseline_source.startswith("SEDBUK band estimate")

    def test_industry_fallback(self):
        boiler = BoilerConfig()
        sedbuk = SedbukResult(source="unknown", label="SEDBUK (unknown)")
        model = _model(boiler, sedbuk=sedbuk)
        assert model.baseline_pct == 92.0

    def test_unrealistic_age_ignored(self, boiler):
        model = _model(boiler.model_copy(update={"age_years": 150}))
        assert model.age_is_unrealistic is True
        assert model.age_factor == 1.0
        assert "unrealistic" in model.notes[0]

    def test_oversize_only_for_combi(self, boiler):
        model = _model(boiler.model_copy(update={"type": "system"}))
        assert model.oversize_penalty_pct == 0.0

    def test_unknown_heat_loss_skips_oversize(self, boiler):
        model = _model(boiler, heat_loss_kw=None)
        assert model.oversize_penalty_pct == 0.0
        assert any("oversize penalty not applied" in n for n in model.notes)

    def test_load_tail_off_follows_demand(self, boiler):
        demand = [0.0] * 48 + [12.0] * 48
        series = _model(boiler, demand=demand).efficiency_pct_96
        assert series[0] == series[47]
        assert series[48] == series[95]
        # off and high-load points carry no cycling penalty
        assert series[0] == series[48]

    def test_always_clamped(self):
        old = BoilerConfig(type="combi", condensing="no", age_years=40, nominal_output_kw=60.0)
        model = _model(old, heat_loss_kw=5.0, demand=[1.0] * 96)
        assert all(50.0 <= v <= 99.0 for v in model.efficiency_pct_96)

    def test_requires_boiler(self, boiler):
        sizing = compute_boiler_sizing(boiler, 9.5)
        with pytest.raises(EngineError):
            build_boiler_efficiency_model(None, sizing, lookup_sedbuk(boiler), FLAT_DEMAND)
