"""Full-job vs high-temperature heat pump retrofit.

A full job resizes emitters (oversized Type 22) for 35–40 °C flow and an
SPF of 3.8–4.4. Keeping the existing radiators forces ~50 °C flow and an
SPF of 2.9–3.1.
"""

from __future__ import annotations

from heat_advisor.config.survey import SurveyInput
from heat_advisor.engine.normalizer import peak_heat_loss_kw
from heat_advisor.models.results import SystemOptimizationResult


FULL_JOB_FLOW_TEMP_C = 37.0
FULL_JOB_SPF = (3.8, 4.4)
FULL_JOB_RAD_TYPE = "Type 22 double-panel convector (oversized)"

HIGH_TEMP_FLOW_TEMP_C = 50.0
HIGH_TEMP_SPF = (2.9, 3.1)
HIGH_TEMP_RAD_TYPE = "Existing radiators (retained, not resized)"

CONDENSING_RETURN_THRESHOLD_C = 55.0
SYSTEM_DELTA_T = 20.0
UNDERSIZED_W_PER_RADIATOR = 800.0


def compute_system_optimization(survey: SurveyInput) -> SystemOptimizationResult:
    full_job = survey.retrofit.emitter_upgrade_appetite == "full_job"
    flow_temp = FULL_JOB_FLOW_TEMP_C if full_job else HIGH_TEMP_FLOW_TEMP_C
    spf_lo, spf_hi = FULL_JOB_SPF if full_job else HIGH_TEMP_SPF
    notes: list[str] = []

    if full_job:
        notes.append(
            f"Full System Optimisation: New, oversized Type 22 radiators sized for full heat load "
            f"at {flow_temp:.0f}°C flow temperature. SPF modelled at {spf_lo}–{spf_hi}; the heat "
            f"pump operates in its efficiency sweet spot throughout the heating season."
        )
        notes.append(
            f"Low Flow Temperature Advantage: {flow_temp:.0f}°C design flow keeps heat pump COP "
            f"high even on the coldest design day (−3°C external)."
        )
    else:
        notes.append(
            f"High-Temp Retrofit: Existing radiators retained. Flow temperature raised to "
            f"{flow_temp:.0f}°C to compensate for undersized emitters. SPF modelled at "
            f"{spf_lo}–{spf_hi}, significantly below full-job performance on cold days."
        )
        notes.append(
            f"SPF Penalty: Operating at {flow_temp:.0f}°C flow instead of 35–40°C reduces the heat "
            f"pump SPF by ~{FULL_JOB_SPF[0] - HIGH_TEMP_SPF[1]:.1f} points over a heating season."
        )

    heat_loss_w = peak_heat_loss_kw(survey) * 1000
    radiators = survey.infrastructure.radiator_count
    w_per_rad = heat_loss_w / max(1, radiators)
    if not full_job and w_per_rad > UNDERSIZED_W_PER_RADIATOR:
        notes.append(
            f"Undersized Emitters Risk: {w_per_rad:.0f} W/radiator at {heat_loss_w:.0f} W total heat "
            f"loss across {radiators} radiators. At {flow_temp:.0f}°C flow this property will "
            f"struggle to hold design room temperature on peak days. Radiator upgrade recommended."
        )

    return SystemOptimizationResult(
        installation_policy="full_job" if full_job else "high_temp",
        design_flow_temp_c=flow_temp,
        spf_range=(spf_lo, spf_hi),
        spf_midpoint=round((spf_lo + spf_hi) / 2, 2),
        radiator_type=FULL_JOB_RAD_TYPE if full_job else HIGH_TEMP_RAD_TYPE,
        condensing_mode_available=flow_temp - SYSTEM_DELTA_T < CONDENSING_RETURN_THRESHOLD_C,
        notes=notes,
    )
