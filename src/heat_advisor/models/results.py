"""Result types — the contract between the calculation modules, the
orchestrator and the output builder.

Every module returns one frozen result object. Modules gated on an optional
survey section (boiler, building, grid flex) leave their slot in
``EngineResult`` as ``None`` when the section is absent.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from heat_advisor.config.tables import HardnessCategory
from heat_advisor.models.timeline import TimelinePayload


Severity = Literal["info", "warn", "fail"]
Risk = Literal["pass", "warn", "fail"]


class Flag(BaseModel):
    """Structured diagnostic raised by a module."""

    model_config = ConfigDict(frozen=True)

    id: str
    severity: Severity
    title: str
    detail: str


# ═══════════════════════════════════════════════════════════════════════════
# Normalizer
# ═══════════════════════════════════════════════════════════════════════════

class NormalizedFacts(BaseModel):
    """Cross-cutting facts derived once per run from raw survey fields."""

    model_config = ConfigDict(frozen=True)

    postcode_prefix: str
    water_hardness_category: HardnessCategory
    hardness_from_default: bool
    """True when the postcode did not match any known area."""

    cac_o3_mg_l: float
    silica_mg_l: float
    high_silica: bool
    scaling_scaffold_coefficient: float

    system_volume_l: float
    """radiators × 10 L, or heat loss × 6 L/kW when radiators were not counted."""

    can_use_vented_system: bool
    scale_rf: float
    scale_growth_mm_per_year: float
    ten_year_efficiency_decay_pct: float
    sludge_potential: float
    scaling_potential: float


# ═══════════════════════════════════════════════════════════════════════════
# Independent calculation modules
# ═══════════════════════════════════════════════════════════════════════════

class HydraulicSafetyResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    flow_rate_ls: float
    """Primary flow (kg/s ≈ L/s) at boiler ΔT 20 °C."""
    velocity_ms: float
    is_bottleneck: bool
    is_safety_cutoff_risk: bool
    ashp_requires_28mm: bool
    notes: list[str] = Field(default_factory=list)


class HydraulicFlowResult(BaseModel):
    """Boiler vs heat-pump primary flow requirement and pipe risk."""

    model_config = ConfigDict(frozen=True)

    pipe_diameter_mm: int
    boiler_delta_t: float
    boiler_flow_lpm: float
    ashp_delta_t: float
    ashp_flow_lpm: float
    ashp_velocity_ms: float
    boiler_risk: Risk
    ashp_risk: Risk
    velocity_penalty: float
    effective_cop: float
    notes: list[str] = Field(default_factory=list)


class CombiStressResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    annual_purge_loss_kwh: float
    short_draw_efficiency_pct: float
    condensing_efficiency_pct: float
    is_condensing_compromised: bool
    total_penalty_kwh: float
    notes: list[str] = Field(default_factory=list)


class MixergyResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    equivalent_conventional_litres: float
    mixergy_litres: float
    footprint_saving_pct: int
    heat_pump_cop_multiplier_pct: float
    notes: list[str] = Field(default_factory=list)


class RadiatorTemperature(BaseModel):
    model_config = ConfigDict(frozen=True)

    position: int
    inlet_temp_c: float
    outlet_temp_c: float
    mean_water_temp_c: float
    is_condensing_compatible: bool


class OnePipeAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    radiator_profiles: list[RadiatorTemperature]
    average_return_temp_c: float
    is_condensing_compatible: bool
    last_radiator_inlet_temp_c: float
    cool_radiator_effect: bool


class MicroboreAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    internal_diameter_mm: int
    velocity_ms: float
    friction_loss_per_metre_pa: float
    is_noise_risk: bool
    is_erosion_risk: bool
    requires_buffer_tank: bool


class LegacyInfrastructureResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    piping_topology: str
    one_pipe: OnePipeAnalysis | None = None
    microbore: MicroboreAnalysis | None = None
    notes: list[str] = Field(default_factory=list)


class SludgeScaleResult(BaseModel):
    """Primary-circuit sludge vs DHW-side scale."""

    model_config = ConfigDict(frozen=True)

    flow_derate_pct: float
    """Fraction (0–0.2) of primary flow lost to magnetite."""
    cycling_loss_pct: float
    sludge_penalty_pct: float
    """Efficiency points lost to sludge: 0 with a filter, else min(15, age × 0.5)."""
    estimated_scale_thickness_mm: float
    dhw_capacity_derate_pct: float
    dhw_recovery_latency_increase_sec: float
    notes: list[str] = Field(default_factory=list)


class SystemOptimizationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    installation_policy: Literal["full_job", "high_temp"]
    design_flow_temp_c: float
    spf_range: tuple[float, float]
    spf_midpoint: float
    radiator_type: str
    condensing_mode_available: bool
    notes: list[str] = Field(default_factory=list)


class RedFlagResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    reject_combi: bool
    reject_stored: bool
    reject_vented: bool
    flag_ashp: bool
    reject_ashp: bool
    reasons: list[str] = Field(default_factory=list)


class CwsSupplyResult(BaseModel):
    """Cold-water supply characterisation."""

    model_config = ConfigDict(frozen=True)

    source: str
    has_measurements: bool
    dynamic_pressure_bar: float | None = None
    dynamic_flow_lpm: float | None = None
    static_pressure_bar: float | None = None
    drop_bar: float | None = None
    inconsistent: bool
    meets_unvented_requirement: bool
    notes: list[str] = Field(default_factory=list)
    flags: list[Flag] = Field(default_factory=list)


class HeatPumpRegimeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    design_flow_temp_band: Literal[35, 45, 50]
    spf_band: Literal["good", "ok", "poor"]
    design_cop_estimate: float
    cold_morning_cop_estimate: float
    flags: list[Flag] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════
# Conditional modules
# ═══════════════════════════════════════════════════════════════════════════

class SedbukResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: Literal["gc_lookup", "band_fallback", "unknown"]
    seasonal_efficiency: float | None = None
    """Fraction (0–1), None when nothing could be inferred."""
    band_key: str | None = None
    label: str
    notes: list[str] = Field(default_factory=list)


class BoilerSizingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    nominal_kw: float
    nominal_kw_defaulted: bool
    peak_heat_loss_kw: float | None = None
    oversize_ratio: float | None = None
    sizing_band: Literal["well_matched", "mild_oversize", "oversized", "aggressive"]
    notes: list[str] = Field(default_factory=list)


class BoilerEfficiencyResult(BaseModel):
    """Decay-adjusted, load-dependent efficiency of the installed boiler.

    All values are percentages already passed through the shared clamp.
    """

    model_config = ConfigDict(frozen=True)

    baseline_pct: float
    baseline_source: str
    nominal_pct: float
    age_factor: float
    age_is_unrealistic: bool
    oversize_penalty_pct: float
    decay_pct: float
    age_adjusted_pct: float
    in_home_pct: float
    nominal_output_kw: float
    efficiency_pct_96: list[float]
    """Per-point efficiency over the 96-point grid (SEDBUK tail-off)."""

    notes: list[str] = Field(default_factory=list)


class FabricResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    heat_loss_band: Literal["very_high", "high", "moderate", "low", "very_low"]
    loss_index: float
    drift_tau_hours: float | None = None
    thermal_mass_band: Literal["light", "medium", "heavy", "unknown"]
    notes: list[str] = Field(default_factory=list)


class GridFlexResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    optimal_slot_index: int
    optimal_slot_price_pence: float
    daily_avg_price_pence: float
    shifting_potential_fraction: float
    annual_load_shift_saving_gbp: float
    mixergy_solar_x_saving_kwh: float
    mixergy_solar_x_saving_gbp: float
    solar_self_consumption_fraction: float
    bg_rebate_gbp: float
    total_annual_saving_gbp: float
    notes: list[str] = Field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════
# Lifestyle simulation
# ═══════════════════════════════════════════════════════════════════════════

class HourlyDemand(BaseModel):
    model_config = ConfigDict(frozen=True)

    hour: int
    label: str
    demand_factor: float
    demand_kw: float
    boiler_temp_c: float
    heat_pump_temp_c: float
    stored_water_temp_c: float


class LifestyleResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    signature: str
    recommended_system: Literal["boiler", "ashp", "stored_water"]
    hourly: list[HourlyDemand]
    notes: list[str] = Field(default_factory=list)

    @property
    def hourly_demand_kw(self) -> list[float]:
        return [h.demand_kw for h in self.hourly]


# ═══════════════════════════════════════════════════════════════════════════
# Aggregate
# ═══════════════════════════════════════════════════════════════════════════

class EngineResult(BaseModel):
    """Everything one engine invocation produced."""

    model_config = ConfigDict(frozen=True)

    survey_version: str
    peak_heat_loss_kw: float
    heat_loss_assumed: bool

    normalized: NormalizedFacts
    hydraulic_safety: HydraulicSafetyResult
    hydraulic_flow: HydraulicFlowResult
    combi_stress: CombiStressResult
    mixergy: MixergyResult
    legacy_infrastructure: LegacyInfrastructureResult
    sludge_scale: SludgeScaleResult
    system_optimization: SystemOptimizationResult
    red_flags: RedFlagResult
    cws_supply: CwsSupplyResult
    heat_pump_regime: HeatPumpRegimeResult
    lifestyle: LifestyleResult

    # --- Conditional (None = gating section absent) ---
    sedbuk: SedbukResult | None = None
    boiler_sizing: BoilerSizingResult | None = None
    boiler_efficiency: BoilerEfficiencyResult | None = None
    fabric: FabricResult | None = None
    grid_flex: GridFlexResult | None = None

    demand_heat_kw_96: list[float]
    timeline: TimelinePayload
