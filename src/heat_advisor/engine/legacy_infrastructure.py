"""Legacy distribution pipework: one-pipe loops and microbore.

One-pipe
    Radiators are tapped off a single ring main, so each one receives water
    already cooled by the one before it. Worst case modelled: all flow
    passes through every radiator, equal heat extraction per radiator.

Microbore
    8/10 mm branches fed from a 22 mm primary. Velocity, Darcy-Weisbach
    friction (Blasius above Re 4000, laminar below), noise and erosion
    thresholds, and whether a heat pump retrofit needs a buffer vessel.
"""

from __future__ import annotations

import math

from heat_advisor.config.survey import SurveyInput
from heat_advisor.engine.hydraulic import BOILER_DELTA_T, SPECIFIC_HEAT_WATER, calc_flow_rate_ls
from heat_advisor.engine.normalizer import peak_heat_loss_kw
from heat_advisor.models.results import (
    LegacyInfrastructureResult,
    MicroboreAnalysis,
    OnePipeAnalysis,
    RadiatorTemperature,
)


CONDENSING_RETURN_THRESHOLD_C = 55.0
HEAT_PUMP_RETURN_LIMIT_C = 45.0
COOL_RADIATOR_DROP_C = 10.0

_MICROBORE_AREA_M2 = {
    8: math.pi * 0.004 ** 2,
    10: math.pi * 0.005 ** 2,
}
MICROBORE_NOISE_VELOCITY_M_S = 0.75
MICROBORE_EROSION_VELOCITY_M_S = 1.0
BUFFER_TANK_HEAT_LOSS_KW = 5.0

# Water at ~60 °C
WATER_DENSITY_KG_M3 = 980.0
WATER_VISCOSITY_PA_S = 4.7e-4


def friction_loss_per_metre_pa(velocity_ms: float, internal_diameter_mm: float) -> float:
    """Darcy-Weisbach pressure drop (Pa/m) for water at ~60 °C."""
    if velocity_ms <= 0:
        return 0.0
    d = internal_diameter_mm / 1000
    reynolds = WATER_DENSITY_KG_M3 * velocity_ms * d / WATER_VISCOSITY_PA_S
    if reynolds > 4000:
        friction = 0.316 * reynolds ** -0.25
    else:
        friction = 64 / reynolds
    return friction * WATER_DENSITY_KG_M3 * velocity_ms ** 2 / (2 * d)


def _one_pipe_cascade(
    supply_temp_c: float,
    heat_loss_kw: float,
    radiator_count: int,
    flow_rate_ls: float,
) -> list[RadiatorTemperature]:
    delta_t_per_rad = (heat_loss_kw / radiator_count) / (flow_rate_ls * SPECIFIC_HEAT_WATER)
    profiles = []
    inlet = supply_temp_c
    for position in range(1, radiator_count + 1):
        outlet = inlet - delta_t_per_rad
        profiles.append(RadiatorTemperature(
            position=position,
            inlet_temp_c=round(inlet, 2),
            outlet_temp_c=round(outlet, 2),
            mean_water_temp_c=round((inlet + outlet) / 2, 2),
            is_condensing_compatible=outlet < CONDENSING_RETURN_THRESHOLD_C,
        ))
        inlet = outlet
    return profiles


def _analyse_one_pipe(survey: SurveyInput, notes: list[str]) -> OnePipeAnalysis:
    infra = survey.infrastructure
    heat_loss_kw = peak_heat_loss_kw(survey)
    supply = infra.supply_temp_c
    radiators = max(1, infra.radiator_count)

    profiles = _one_pipe_cascade(
        supply, heat_loss_kw, radiators, calc_flow_rate_ls(heat_loss_kw, BOILER_DELTA_T)
    )
    last = profiles[-1]
    return_temp = last.outlet_temp_c
    condensing_ok = return_temp < CONDENSING_RETURN_THRESHOLD_C
    cool_radiator = last.inlet_temp_c <= supply - COOL_RADIATOR_DROP_C

    notes.append(
        f"One-Pipe Loop: {radiators} radiators connected sequentially. Supply {supply:g}°C "
        f"cascades to {return_temp:.1f}°C at the last radiator outlet."
    )
    if cool_radiator:
        notes.append(
            f"Cool Radiator Effect: Last radiator in the loop receives only {last.inlet_temp_c:.1f}°C "
            f"inlet temperature ({supply - last.inlet_temp_c:.1f}°C below supply). Radiators at the "
            f"end of a single-pipe loop typically output ≤30% of design capacity."
        )
    if not condensing_ok:
        notes.append(
            f"Condensing Mode Blocked: One-pipe return temperature {return_temp:.1f}°C exceeds the "
            f"55°C condensing threshold. The boiler cannot recover latent heat, negating the "
            f"efficiency benefit of a condensing appliance."
        )
    if return_temp > HEAT_PUMP_RETURN_LIMIT_C:
        notes.append(
            f"Heat Pump Incompatible: One-pipe return of {return_temp:.1f}°C is too high for ASHP "
            f"low-temperature operation (target return ≤35°C). Conversion to two-pipe "
            f"distribution is required before heat pump installation."
        )

    return OnePipeAnalysis(
        radiator_profiles=profiles,
        average_return_temp_c=round(return_temp, 2),
        is_condensing_compatible=condensing_ok,
        last_radiator_inlet_temp_c=last.inlet_temp_c,
        cool_radiator_effect=cool_radiator,
    )


def _analyse_microbore(survey: SurveyInput, notes: list[str]) -> MicroboreAnalysis:
    bore = survey.infrastructure.microbore_internal_diameter_mm
    heat_loss_kw = peak_heat_loss_kw(survey)
    flow_ls = calc_flow_rate_ls(heat_loss_kw, BOILER_DELTA_T)

    velocity = (flow_ls / 1000) / _MICROBORE_AREA_M2[bore]
    friction = friction_loss_per_metre_pa(velocity, bore)
    noise = velocity > MICROBORE_NOISE_VELOCITY_M_S
    erosion = velocity > MICROBORE_EROSION_VELOCITY_M_S
    buffer_tank = heat_loss_kw > BUFFER_TANK_HEAT_LOSS_KW or erosion

    notes.append(
        f"Microbore System ({bore}mm bore): Calculated velocity {velocity:.3f} m/s, friction loss "
        f"{friction:.0f} Pa/m. Standard 22mm primary feeding {bore}mm branch circuits."
    )
    if noise:
        notes.append(
            f"Flow Noise Risk: Velocity {velocity:.3f} m/s exceeds the {MICROBORE_NOISE_VELOCITY_M_S} m/s "
            f"threshold for audible flow noise in {bore}mm bore pipework."
        )
    if erosion:
        notes.append(
            f"Erosion Risk: Velocity {velocity:.3f} m/s exceeds the {MICROBORE_EROSION_VELOCITY_M_S} m/s "
            f"erosion threshold for microbore pipe. Accelerated wall thinning likely over 5–10 years."
        )
    if buffer_tank:
        notes.append(
            f"Buffer Tank Required: ASHP retrofits on {bore}mm microbore systems need a buffer "
            f"vessel to decouple the heat pump primary from the high-resistance distribution circuit."
        )

    return MicroboreAnalysis(
        internal_diameter_mm=bore,
        velocity_ms=round(velocity, 4),
        friction_loss_per_metre_pa=round(friction, 2),
        is_noise_risk=noise,
        is_erosion_risk=erosion,
        requires_buffer_tank=buffer_tank,
    )


def compute_legacy_infrastructure(survey: SurveyInput) -> LegacyInfrastructureResult:
    # Unrecorded topology is analysed as the common two-pipe layout.
    topology = survey.infrastructure.piping_topology
    notes: list[str] = []

    if topology == "one_pipe":
        return LegacyInfrastructureResult(
            piping_topology=topology, one_pipe=_analyse_one_pipe(survey, notes), notes=notes
        )
    if topology == "microbore":
        return LegacyInfrastructureResult(
            piping_topology=topology, microbore=_analyse_microbore(survey, notes), notes=notes
        )

    notes.append(
        "Two-Pipe System: Standard parallel distribution. Each radiator receives supply "
        "temperature directly. No one-pipe temperature cascade or microbore pressure concerns apply."
    )
    return LegacyInfrastructureResult(piping_topology=topology, notes=notes)
