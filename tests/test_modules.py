"""Tests for the unconditional calculation modules and the fabric / grid
flex modules."""

from __future__ import annotations

import pytest

from heat_advisor.config import (
    DEFAULT_TABLES,
    BuildingFabric,
    GridFlexConfig,
    InfrastructureConfig,
    OccupancyConfig,
    PropertyConfig,
    RetrofitConfig,
    ServicesConfig,
)
from heat_advisor.engine.combi_stress import compute_combi_stress
from heat_advisor.engine.cws_supply import compute_cws_supply
from heat_advisor.engine.fabric import classify_heat_loss, compute_fabric_model
from heat_advisor.engine.grid_flex import compute_grid_flex
from heat_advisor.engine.heat_pump_regime import compute_ashp_cop, compute_heat_pump_regime
from heat_advisor.engine.hydraulic import compute_hydraulic_flow, compute_hydraulic_safety
from heat_advisor.engine.legacy_infrastructure import compute_legacy_infrastructure, friction_loss_per_metre_pa
from heat_advisor.engine.mixergy import compute_mixergy_volumetrics
from heat_advisor.engine.normalizer import normalize
from heat_advisor.engine.red_flags import compute_red_flags
from heat_advisor.engine.sludge_scale import compute_sludge_vs_scale, sludge_penalty_pct
from heat_advisor.engine.system_optimization import compute_system_optimization
from heat_advisor.errors import EngineError


def _with(survey, **sections):
    return survey.model_copy(update=sections)


def _services(**readings):
    return ServicesConfig(**readings)


# ═══════════════════════════════════════════════════════════════════════════
# Hydraulics
# ═══════════════════════════════════════════════════════════════════════════


class TestHydraulicSafety:
    def test_default_survey_has_no_bottleneck(self, survey):
        result = compute_hydraulic_safety(survey)
        assert result.is_bottleneck is False
        assert result.is_safety_cutoff_risk is False
        assert result.flow_rate_ls == pytest.approx(8 / (20 * 4.19))

    def test_bottleneck_above_19kw_on_22mm(self, survey):
        s = _with(survey, property=PropertyConfig(heat_loss_kw=20.0))
        result = compute_hydraulic_safety(s)
        assert result.is_bottleneck is True
        assert result.notes[0].startswith("Hydraulic Bottleneck")

    def test_28mm_clears_bottleneck(self, survey):
        s = _with(
            survey,
            property=PropertyConfig(heat_loss_kw=20.0),
            infrastructure=InfrastructureConfig(primary_pipe_diameter_mm=28),
        )
        assert compute_hydraulic_safety(s).is_bottleneck is False

    def test_low_pressure_cutoff(self, survey):
        s = _with(survey, services=_services(dynamic_mains_pressure_bar=0.8))
        result = compute_hydraulic_safety(s)
        assert result.is_safety_cutoff_risk is True
        assert any(n.startswith("Safety Cut-off Risk") for n in result.notes)

    def test_ashp_velocity_on_22mm(self, survey):
        small = _with(survey, property=PropertyConfig(heat_loss_kw=6.0))
        large = _with(survey, property=PropertyConfig(heat_loss_kw=12.0))
        assert compute_hydraulic_safety(small).ashp_requires_28mm is False
        assert compute_hydraulic_safety(large).ashp_requires_28mm is True


class TestHydraulicFlow:
    def test_ashp_needs_four_times_boiler_flow(self, survey):
        result = compute_hydraulic_flow(survey)
        assert result.ashp_flow_lpm / result.boiler_flow_lpm == pytest.approx(4.0)
        assert result.pipe_diameter_mm == 22

    @pytest.mark.parametrize("diameter,heat_loss,ashp_risk", [
        (22, 6.0, "pass"),
        (22, 8.0, "warn"),
        (22, 14.0, "fail"),
        (28, 8.0, "pass"),
        (15, 3.0, "warn"),
    ])
    def test_ashp_risk(self, survey, diameter, heat_loss, ashp_risk):
        s = _with(
            survey,
            property=PropertyConfig(heat_loss_kw=heat_loss),
            infrastructure=InfrastructureConfig(primary_pipe_diameter_mm=diameter),
        )
        assert compute_hydraulic_flow(s).ashp_risk == ashp_risk

    def test_velocity_penalty_reduces_cop(self, survey):
        calm = compute_hydraulic_flow(survey)
        assert calm.velocity_penalty == 0.0
        assert calm.effective_cop == 3.2

        fast = compute_hydraulic_flow(_with(survey, property=PropertyConfig(heat_loss_kw=14.0)))
        assert 0 < fast.velocity_penalty <= 1.0
        assert fast.effective_cop < 3.2


# ═══════════════════════════════════════════════════════════════════════════
# Combi stress and Mixergy
# ═══════════════════════════════════════════════════════════════════════════


class TestCombiStress:
    def test_default_return_temp_loses_condensing(self, survey):
        result = compute_combi_stress(survey)
        assert result.is_condensing_compromised is True
        assert result.condensing_efficiency_pct == 89.0
        assert result.total_penalty_kwh == pytest.approx(600 + 8 * 1800 * 0.11)

    def test_low_return_temp_condenses(self, survey):
        s = _with(survey, infrastructure=InfrastructureConfig(return_water_temp_c=50.0))
        result = compute_combi_stress(s)
        assert result.is_condensing_compromised is False
        assert result.total_penalty_kwh == 600.0
        assert result.short_draw_efficiency_pct == 28.0


class TestMixergy:
    def test_volumetrics(self):
        result = compute_mixergy_volumetrics()
        assert result.mixergy_litres == 150.0
        assert result.equivalent_conventional_litres == 210.0
        assert result.footprint_saving_pct == 29
        assert len(result.notes) == 3


# ═══════════════════════════════════════════════════════════════════════════
# Legacy pipework
# ═══════════════════════════════════════════════════════════════════════════


class TestLegacyInfrastructure:
    def test_one_pipe_cascade(self, survey):
        s = _with(survey, infrastructure=InfrastructureConfig(piping_topology="one_pipe", radiator_count=5))
        one_pipe = compute_legacy_infrastructure(s).one_pipe
        inlets = [r.inlet_temp_c for r in one_pipe.radiator_profiles]
        assert inlets == pytest.approx([70.0, 66.0, 62.0, 58.0, 54.0])
        assert one_pipe.average_return_temp_c == pytest.approx(50.0)
        assert one_pipe.cool_radiator_effect is True
        assert one_pipe.is_condensing_compatible is True

    def test_one_pipe_blocks_heat_pump(self, survey):
        s = _with(survey, infrastructure=InfrastructureConfig(piping_topology="one_pipe", radiator_count=5))
        notes = compute_legacy_infrastructure(s).notes
        assert any(n.startswith("Heat Pump Incompatible") for n in notes)

    def test_microbore_risks(self, survey):
        s = _with(survey, infrastructure=InfrastructureConfig(piping_topology="microbore"))
        micro = compute_legacy_infrastructure(s).microbore
        assert micro.internal_diameter_mm == 10
        assert micro.is_noise_risk is True
        assert micro.is_erosion_risk is True
        assert micro.requires_buffer_tank is True
        assert micro.friction_loss_per_metre_pa > 0

    def test_narrower_bore_is_faster(self, survey):
        ten = compute_legacy_infrastructure(_with(
            survey, infrastructure=InfrastructureConfig(piping_topology="microbore"),
        )).microbore
        eight = compute_legacy_infrastructure(_with(
            survey, infrastructure=InfrastructureConfig(piping_topology="microbore", microbore_internal_diameter_mm=8),
        )).microbore
        assert eight.velocity_ms > ten.velocity_ms

    @pytest.mark.parametrize("topology", ["two_pipe", "unknown"])
    def test_two_pipe_has_no_analysis(self, survey, topology):
        s = _with(survey, infrastructure=InfrastructureConfig(piping_topology=topology))
        result = compute_legacy_infrastructure(s)
        assert result.one_pipe is None
        assert result.microbore is None
        assert result.notes[0].startswith("Two-Pipe System")

    def test_friction_at_rest(self):
        assert friction_loss_per_metre_pa(0.0, 10) == 0.0


# ═══════════════════════════════════════════════════════════════════════════
# Sludge and scale
# ═══════════════════════════════════════════════════════════════════════════


class TestSludgeScale:
    @pytest.mark.parametrize("filtered,age,penalty", [
        (True, 20, 0.0),
        (False, 0, 0.0),
        (False, 14, 7.0),
        (False, 40, 15.0),
    ])
    def test_sludge_penalty(self, filtered, age, penalty):
        assert sludge_penalty_pct(filtered, age) == penalty

    def test_legacy_circuit_without_filter_derates_flow(self, survey):
        s = _with(survey, infrastructure=InfrastructureConfig(piping_topology="one_pipe", system_age_years=15))
        result = compute_sludge_vs_scale(s, normalize(s, DEFAULT_TABLES))
        assert result.flow_derate_pct == pytest.approx(0.2)
        assert result.cycling_loss_pct == pytest.approx(0.05)

    def test_filter_removes_derate(self, survey):
        s = _with(survey, infrastructure=InfrastructureConfig(
            piping_topology="one_pipe", system_age_years=15, has_magnetic_filter=True,
        ))
        result = compute_sludge_vs_scale(s, normalize(s, DEFAULT_TABLES))
        assert result.flow_derate_pct == 0.0
        assert result.sludge_penalty_pct == 0.0

    def test_hard_water_scale(self, survey):
        s = _with(
            survey,
            property=PropertyConfig(postcode="SW19 2AB"),
            infrastructure=InfrastructureConfig(system_age_years=14),
        )
        result = compute_sludge_vs_scale(s, normalize(s, DEFAULT_TABLES))
        assert result.estimated_scale_thickness_mm == pytest.approx(1.82)
        assert result.dhw_capacity_derate_pct > 0
        assert any(n.startswith("DHW Capacity Derate") for n in result.notes)

    def test_new_system_has_no_scale(self, survey, facts):
        result = compute_sludge_vs_scale(survey, facts)
        assert result.estimated_scale_thickness_mm == 0.0
        assert "DHW Circuit: Negligible scale accumulation detected." in result.notes


# ═══════════════════════════════════════════════════════════════════════════
# Retrofit regime
# ═══════════════════════════════════════════════════════════════════════════


class TestSystemOptimization:
    def test_high_temp_by_default(self, survey):
        result = compute_system_optimization(survey)
        assert result.installation_policy == "high_temp"
        assert result.design_flow_temp_c == 50.0
        assert result.spf_midpoint == pytest.approx(3.0)
        assert any(n.startswith("Undersized Emitters Risk") for n in result.notes)

    def test_full_job(self, survey):
        s = _with(survey, retrofit=RetrofitConfig(emitter_upgrade_appetite="full_job"))
        result = compute_system_optimization(s)
        assert result.installation_policy == "full_job"
        assert result.design_flow_temp_c == 37.0
        assert result.spf_range == (3.8, 4.4)


class TestHeatPumpRegime:
    @pytest.mark.parametrize("appetite,band,flag_count", [
        ("none", 50, 3),
        ("some", 45, 2),
        ("full_job", 35, 0),
    ])
    def test_bands(self, survey, appetite, band, flag_count):
        s = _with(survey, retrofit=RetrofitConfig(emitter_upgrade_appetite=appetite))
        result = compute_heat_pump_regime(s)
        assert result.design_flow_temp_band == band
        assert len(result.flags) == flag_count

    @pytest.mark.parametrize("outdoor,flow,cop", [
        (7.0, 35.0, 4.1),
        (-3.0, 50.0, 2.05),
        (30.0, 20.0, 5.0),
        (-20.0, 70.0, 1.5),
    ])
    def test_cop(self, outdoor, flow, cop):
        assert compute_ashp_cop(outdoor, flow) == pytest.approx(cop)


# ═══════════════════════════════════════════════════════════════════════════
# Red flags and mains supply
# ═══════════════════════════════════════════════════════════════════════════


class TestRedFlags:
    def test_clean_default(self, survey):
        result = compute_red_flags(survey)
        assert result.reasons == []
        assert not (result.reject_combi or result.reject_stored or result.flag_ashp or result.reject_ashp)

    def test_simultaneous_demand_rejects_combi(self, survey):
        s = _with(survey, occupancy=OccupancyConfig(bathroom_count=2, high_occupancy=True))
        result = compute_red_flags(s)
        assert result.reject_combi is True
        assert result.reasons[0].startswith("Combi Rejected")

    def test_two_bathrooms_alone_is_fine(self, survey):
        s = _with(survey, occupancy=OccupancyConfig(bathroom_count=2))
        assert compute_red_flags(s).reject_combi is False

    def test_loft_conversion_rejects_stored(self, survey):
        result = compute_red_flags(_with(survey, property=PropertyConfig(has_loft_conversion=True)))
        assert result.reject_stored is True
        assert result.reject_vented is True

    def test_one_pipe_hard_fails_ashp(self, survey):
        result = compute_red_flags(_with(survey, infrastructure=InfrastructureConfig(piping_topology="one_pipe")))
        assert result.reject_ashp is True
        assert result.flag_ashp is True

    def test_high_heat_loss_on_small_pipes_flags_ashp(self, measured_survey):
        result = compute_red_flags(measured_survey)
        assert result.flag_ashp is True
        assert result.reject_ashp is False

    def test_low_pressure_rejects_combi(self, survey):
        result = compute_red_flags(_with(survey, services=_services(dynamic_mains_pressure_bar=0.5)))
        assert result.reject_combi is True
        assert "0.5bar" in result.reasons[0]


class TestCwsSupply:
    def test_nothing_recorded(self, survey):
        result = compute_cws_supply(survey)
        assert result.has_measurements is False
        assert result.meets_unvented_requirement is False
        assert result.notes[0].startswith("No mains measurements")

    @pytest.mark.parametrize("readings,meets", [
        (dict(mains_dynamic_flow_lpm=10.0, dynamic_mains_pressure_bar=1.0), True),
        (dict(mains_dynamic_flow_lpm=9.5, dynamic_mains_pressure_bar=2.0), False),
        (dict(mains_dynamic_flow_lpm=16.0, dynamic_mains_pressure_bar=0.0), False),
        (dict(mains_dynamic_flow_lpm=12.0), True),
        (dict(mains_dynamic_flow_lpm=11.0), False),
    ])
    def test_unvented_gate(self, survey, readings, meets):
        result = compute_cws_supply(_with(survey, services=_services(**readings)))
        assert result.has_measurements is True
        assert result.meets_unvented_requirement is meets

    def test_pressure_drop(self, measured_survey):
        result = compute_cws_supply(measured_survey)
        assert result.drop_bar == pytest.approx(1.1)
        assert result.source == "mains_true"

    def test_inconsistent_readings_reported_not_raised(self, survey):
        s = _with(survey, services=_services(
            static_mains_pressure_bar=1.5, dynamic_mains_pressure_bar=2.5, mains_dynamic_flow_lpm=20.0,
        ))
        result = compute_cws_supply(s)
        assert result.inconsistent is True
        assert result.drop_bar is None
        assert result.meets_unvented_requirement is False
        assert [f.id for f in result.flags] == ["cws-readings-inconsistent"]

    def test_small_excess_is_tolerated(self, survey):
        s = _with(survey, services=_services(
            static_mains_pressure_bar=2.0, dynamic_mains_pressure_bar=2.1, mains_dynamic_flow_lpm=14.0,
        ))
        assert compute_cws_supply(s).inconsistent is False


# ═══════════════════════════════════════════════════════════════════════════
# Fabric and grid flex
# ═══════════════════════════════════════════════════════════════════════════


class TestFabric:
    def test_heavy_masonry_house(self, building):
        result = compute_fabric_model(building)
        assert result.loss_index == pytest.approx(0.485)
        assert result.heat_loss_band == "moderate"
        assert result.drift_tau_hours == 55.0
        assert result.thermal_mass_band == "heavy"

    def test_passivhaus(self):
        building = BuildingFabric(thermal_mass="light", insulation_level="exceptional", air_tightness="passive")
        assert compute_fabric_model(building).drift_tau_hours == 190.5

    def test_unknown_fabric_still_runs(self):
        result = compute_fabric_model(BuildingFabric())
        assert result.heat_loss_band == "moderate"
        assert result.drift_tau_hours is None

    @pytest.mark.parametrize("index,band", [
        (0.80, "very_high"), (0.60, "high"), (0.45, "moderate"), (0.30, "low"), (0.10, "very_low"),
    ])
    def test_bands(self, index, band):
        assert classify_heat_loss(index) == band

    def test_requires_building(self):
        with pytest.raises(EngineError):
            compute_fabric_model(None)


class TestGridFlex:
    def test_combi_cannot_shift(self):
        result = compute_grid_flex(GridFlexConfig(tank_type="combi", dhw_annual_kwh=2000))
        assert result.shifting_potential_fraction == 0.0
        assert result.annual_load_shift_saving_gbp == 0.0

    def test_cheapest_reference_slot(self):
        result = compute_grid_flex(GridFlexConfig(dhw_annual_kwh=2000))
        assert result.optimal_slot_index == 6
        assert result.optimal_slot_price_pence == 2.9
        assert result.annual_load_shift_saving_gbp > 0

    def test_custom_prices(self):
        prices = (20.0, 10.0, 30.0, 20.0)
        result = compute_grid_flex(GridFlexConfig(dhw_annual_kwh=1000, agile_prices_pence=prices))
        assert result.optimal_slot_index == 1
        assert result.daily_avg_price_pence == 20.0
        assert result.annual_load_shift_saving_gbp == pytest.approx(100.0)

    def test_no_dhw_energy(self):
        result = compute_grid_flex(GridFlexConfig())
        assert result.total_annual_saving_gbp == 0.0
        assert any(n.startswith("Insufficient data") for n in result.notes)

    @pytest.mark.parametrize("volume,fraction", [(210.0, 0.35), (300.0, 0.40)])
    def test_solar_x(self, volume, fraction):
        config = GridFlexConfig(tank_type="mixergy", dhw_annual_kwh=2400, mixergy_solar_x=True, tank_volume_l=volume)
        assert compute_grid_flex(config).mixergy_solar_x_saving_kwh == pytest.approx(2400 * fraction)

    def test_british_gas_rebate(self):
        config = GridFlexConfig(tank_type="mixergy", dhw_annual_kwh=2400, provider="british_gas")
        result = compute_grid_flex(config)
        assert result.bg_rebate_gbp == 40.0
        assert result.total_annual_saving_gbp == pytest.approx(result.annual_load_shift_saving_gbp + 40.0)

    def test_solar_self_consumption(self):
        config = GridFlexConfig(dhw_annual_kwh=2400, annual_solar_surplus_kwh=1200)
        assert compute_grid_flex(config).solar_self_consumption_fraction == 0.5

    def test_requires_section(self):
        with pytest.raises(EngineError):
            compute_grid_flex(None)
