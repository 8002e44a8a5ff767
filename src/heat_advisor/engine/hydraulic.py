"""Primary-circuit hydraulics.

Two views of the same pipework:

``compute_hydraulic_safety``
    Boiler-era checks: 19 kW bottleneck on sub-28 mm primaries, mains
    pressure lock-out below 1 bar, and whether a heat pump's low ΔT pushes
    22 mm velocity over 1.5 m/s.

``compute_hydraulic_flow``
    Boiler (ΔT 20 °C) vs heat pump (ΔT 5 °C) flow requirement, pipe risk
    classes and the continuous velocity penalty on heat-pump COP.

Flow: ṁ = P / (Cp × ΔT) with Cp = 4.19 kJ/(kg·K), 1 kg ≈ 1 L.
"""

from __future__ import annotations

import math

from heat_advisor.config.survey import SurveyInput
from heat_advisor.engine.normalizer import peak_heat_loss_kw
from heat_advisor.models.results import HydraulicFlowResult, HydraulicSafetyResult, Risk


SPECIFIC_HEAT_WATER = 4.19
BOILER_DELTA_T = 20.0
ASHP_DELTA_T = 5.0

DEFAULT_PIPE_MM = 22
DEFAULT_DYNAMIC_PRESSURE_BAR = 1.5
MIN_MAINS_PRESSURE_BAR = 1.0

BOTTLENECK_THRESHOLD_KW = 19.0
MAX_VELOCITY_22MM = 1.5
VELOCITY_LOWER_M_S = 0.8
VELOCITY_UPPER_M_S = 1.5
BASE_ASHP_COP = 3.2

# Safety view: copper primaries, inner radius (m).
_SAFETY_PIPE_AREA_M2 = {
    15: math.pi * 0.006 ** 2,
    22: math.pi * 0.009 ** 2,
    28: math.pi * 0.014 ** 2,
}

# Flow view: nominal bore, inner radius (m).
_BORE_AREA_M2 = {
    15: math.pi * 0.006 ** 2,
    22: math.pi * 0.010 ** 2,
    28: math.pi * 0.013 ** 2,
    35: math.pi * 0.016 ** 2,
}

# Pipe size → (boiler warn, boiler fail, ashp warn, ashp fail) in kW.
PIPE_THRESHOLDS_KW = {
    15: (4.0, 6.0, 2.0, 4.0),
    22: (19.0, 26.0, 8.0, 14.0),
    28: (30.0, 40.0, 15.0, 22.0),
    35: (40.0, 55.0, 20.0, 30.0),
}


def calc_flow_rate_ls(power_kw: float, delta_t: float) -> float:
    return power_kw / (delta_t * SPECIFIC_HEAT_WATER)


def calc_flow_lpm(power_kw: float, delta_t: float) -> float:
    return power_kw * 60 / (delta_t * SPECIFIC_HEAT_WATER)


def _pipe_key(diameter_mm: int, table: dict[int, float]) -> int:
    for key in sorted(table, reverse=True):
        if diameter_mm >= key:
            return key
    return min(table)


def _classify(power_kw: float, warn_kw: float, fail_kw: float) -> Risk:
    if power_kw >= fail_kw:
        return "fail"
    if power_kw >= warn_kw:
        return "warn"
    return "pass"


def dynamic_pressure_bar(survey: SurveyInput) -> float:
    p = survey.services.dynamic_mains_pressure_bar
    return DEFAULT_DYNAMIC_PRESSURE_BAR if p is None else p


def pipe_diameter_mm(survey: SurveyInput) -> int:
    d = survey.infrastructure.primary_pipe_diameter_mm
    return DEFAULT_PIPE_MM if d is None else d


# ═══════════════════════════════════════════════════════════════════════════
# Safety checks
# ═══════════════════════════════════════════════════════════════════════════

def compute_hydraulic_safety(survey: SurveyInput) -> HydraulicSafetyResult:
    heat_loss_kw = peak_heat_loss_kw(survey)
    diameter = pipe_diameter_mm(survey)
    pressure = dynamic_pressure_bar(survey)
    notes: list[str] = []

    area = _SAFETY_PIPE_AREA_M2[_pipe_key(diameter, _SAFETY_PIPE_AREA_M2)]
    flow_rate_ls = calc_flow_rate_ls(heat_loss_kw, BOILER_DELTA_T)
    velocity_ms = (flow_rate_ls / 1000) / area

    is_bottleneck = diameter < 28 and heat_loss_kw > BOTTLENECK_THRESHOLD_KW
    if is_bottleneck:
        notes.append(
            f"Hydraulic Bottleneck: {heat_loss_kw:.1f}kW load on {diameter}mm pipework "
            f"exceeds {BOTTLENECK_THRESHOLD_KW:.1f}kW threshold. Velocity {velocity_ms:.2f}m/s. "
            f"Upgrade to 28mm primary pipework required."
        )

    is_cutoff = pressure < MIN_MAINS_PRESSURE_BAR
    if is_cutoff:
        notes.append(
            f"Safety Cut-off Risk: Dynamic mains pressure {pressure:.1f}bar "
            f"< {MIN_MAINS_PRESSURE_BAR:.1f}bar minimum. Combination boiler will lock out "
            f"during simultaneous hot water draws."
        )

    ashp_flow_ls = calc_flow_rate_ls(heat_loss_kw, ASHP_DELTA_T)
    ashp_velocity_22mm = (ashp_flow_ls / 1000) / _SAFETY_PIPE_AREA_M2[22]
    ashp_requires_28mm = ashp_velocity_22mm > MAX_VELOCITY_22MM
    if ashp_requires_28mm:
        notes.append(
            f"ASHP ΔT Reality: heat pumps run at 5–7°C ΔT (vs 20°C for boilers), demanding "
            f"{ashp_flow_ls * 60:.1f} L/min. That exceeds 22mm capacity; "
            f"28mm primary pipework required."
        )

    return HydraulicSafetyResult(
        flow_rate_ls=flow_rate_ls,
        velocity_ms=velocity_ms,
        is_bottleneck=is_bottleneck,
        is_safety_cutoff_risk=is_cutoff,
        ashp_requires_28mm=ashp_requires_28mm,
        notes=notes,
    )


# ═══════════════════════════════════════════════════════════════════════════
# Boiler vs heat-pump flow
# ═══════════════════════════════════════════════════════════════════════════

def compute_hydraulic_flow(survey: SurveyInput) -> HydraulicFlowResult:
    heat_loss_kw = peak_heat_loss_kw(survey)
    diameter = pipe_diameter_mm(survey)

    boiler_flow = calc_flow_lpm(heat_loss_kw, BOILER_DELTA_T)
    ashp_flow = calc_flow_lpm(heat_loss_kw, ASHP_DELTA_T)
    area = _BORE_AREA_M2[_pipe_key(diameter, _BORE_AREA_M2)]
    ashp_velocity = (ashp_flow / 1000 / 60) / area

    velocity_penalty = min(1.0, max(0.0, ashp_velocity - VELOCITY_UPPER_M_S))
    effective_cop = round(BASE_ASHP_COP * (1 - 0.25 * velocity_penalty), 2)

    boiler_warn, boiler_fail, ashp_warn, ashp_fail = PIPE_THRESHOLDS_KW[_pipe_key(diameter, PIPE_THRESHOLDS_KW)]
    boiler_risk = _classify(heat_loss_kw, boiler_warn, boiler_fail)
    ashp_risk = _classify(heat_loss_kw, ashp_warn, ashp_fail)

    notes: list[str] = []
    if boiler_risk == "fail":
        notes.append(
            f"Hydraulic Warning: {heat_loss_kw:.1f}kW heat loss exceeds the safe boiler flow capacity "
            f"of {diameter}mm primary pipework ({boiler_flow:.1f} L/min at ΔT {BOILER_DELTA_T:.0f}°C). "
            f"Pipe upgrade recommended."
        )
    elif boiler_risk == "warn":
        notes.append(
            f"Hydraulic Warning: {heat_loss_kw:.1f}kW approaches the safe capacity for {diameter}mm "
            f"primaries ({boiler_flow:.1f} L/min). Monitor for noise and erosion."
        )

    safe_ashp_flow = calc_flow_lpm(ashp_warn, ASHP_DELTA_T)
    if ashp_risk == "fail":
        notes.append(
            f"ASHP at ΔT {ASHP_DELTA_T:.0f}°C requires {ashp_flow:.1f} L/min; {diameter}mm pipe max safe "
            f"flow is ~{safe_ashp_flow:.0f} L/min ({ashp_flow / safe_ashp_flow:.1f}× limit). "
            f"Upgrade to 28mm would enable this option."
        )
    elif ashp_risk == "warn":
        notes.append(
            f"ASHP at ΔT {ASHP_DELTA_T:.0f}°C demands {ashp_flow:.1f} L/min "
            f"(~{ashp_flow / boiler_flow:.1f}× boiler flow). {diameter}mm primary pipework is marginal; "
            f"consider upgrading to 28mm."
        )

    if velocity_penalty > 0:
        notes.append(
            f"Velocity Penalty: ASHP circuit velocity {ashp_velocity:.2f} m/s exceeds the "
            f"{VELOCITY_LOWER_M_S}–{VELOCITY_UPPER_M_S} m/s band; effective COP reduced to "
            f"{effective_cop} (from base {BASE_ASHP_COP})."
        )

    return HydraulicFlowResult(
        pipe_diameter_mm=diameter,
        boiler_delta_t=BOILER_DELTA_T,
        boiler_flow_lpm=boiler_flow,
        ashp_delta_t=ASHP_DELTA_T,
        ashp_flow_lpm=ashp_flow,
        ashp_velocity_ms=ashp_velocity,
        boiler_risk=boiler_risk,
        ashp_risk=ashp_risk,
        velocity_penalty=velocity_penalty,
        effective_cop=effective_cop,
        notes=notes,
    )
