"""Heat-pump operating regime from emitter upgrade appetite.

    full_job → 35 °C flow, good SPF
    some     → 45 °C flow, ok SPF
    none     → 50 °C flow, poor SPF

COP is a bilinear fit anchored at EN14511 conditions (+7 °C outdoor,
35 °C flow → 4.1):

    COP = 4.1 + 0.10 (T_out − 7) − 0.07 (T_flow − 35), clamped to [1.5, 5.0]
"""

from __future__ import annotations

from heat_advisor.config.survey import SurveyInput
from heat_advisor.models.results import Flag, HeatPumpRegimeResult


REF_COP = 4.1
REF_OUTDOOR_TEMP_C = 7.0
REF_FLOW_TEMP_C = 35.0
OUTDOOR_TEMP_SENSITIVITY = 0.10
FLOW_TEMP_SENSITIVITY = 0.07
COLD_MORNING_OUTDOOR_TEMP_C = -3.0
MIN_COP = 1.5
MAX_COP = 5.0

_REGIME = {
    "full_job": (35, "good"),
    "some": (45, "ok"),
    "none": (50, "poor"),
}

_FULL_JOB_FLAG = Flag(
    id="regime-full-job-unlocks-low-temp",
    severity="info",
    title="Full job unlocks low-temp + higher SPF",
    detail="Upgrading all emitters to low-temperature radiators or underfloor heating enables "
           "35°C design flow, which is the optimal operating point for an ASHP.",
)


def compute_ashp_cop(outdoor_temp_c: float, flow_temp_c: float) -> float:
    raw = (
        REF_COP
        + OUTDOOR_TEMP_SENSITIVITY * (outdoor_temp_c - REF_OUTDOOR_TEMP_C)
        - FLOW_TEMP_SENSITIVITY * (flow_temp_c - REF_FLOW_TEMP_C)
    )
    return round(min(MAX_COP, max(MIN_COP, raw)), 2)


def compute_heat_pump_regime(survey: SurveyInput) -> HeatPumpRegimeResult:
    band, spf_band = _REGIME[survey.retrofit.emitter_upgrade_appetite]

    flags: list[Flag] = []
    if band == 50:
        flags.append(Flag(
            id="regime-flow-temp-elevated",
            severity="warn",
            title="Elevated flow temperature",
            detail="Operating at 50°C flow significantly reduces heat pump efficiency. "
                   "Consider upgrading emitters to unlock lower flow temps and higher SPF.",
        ))
        flags.append(Flag(
            id="regime-cop-penalty",
            severity="warn",
            title="COP penalty at high flow temp",
            detail="Every 1°C rise in flow temperature above 35°C costs approximately 2–3% COP. "
                   "At 50°C vs 35°C, seasonal SPF can drop from ~3.5 to ~2.5.",
        ))
        flags.append(_FULL_JOB_FLAG)
    elif band == 45:
        flags.append(Flag(
            id="regime-cop-penalty",
            severity="info",
            title="Moderate COP at 45°C flow",
            detail="Partial emitter upgrades allow 45°C flow. SPF will be moderate (~3.0–3.2). "
                   "Full emitter upgrade would unlock 35°C and better SPF.",
        ))
        flags.append(_FULL_JOB_FLAG)

    notes = [
        "Lower flow temps increase SPF; high flow temps collapse COP.",
        "SPF estimated at design conditions; actual performance varies with climate and occupancy.",
        f"Bilinear COP model: REF_COP={REF_COP} at +{REF_OUTDOOR_TEMP_C:.0f}°C outdoor / "
        f"{REF_FLOW_TEMP_C:.0f}°C flow. Sensitivity: +{OUTDOOR_TEMP_SENSITIVITY}/°C outdoor, "
        f"−{FLOW_TEMP_SENSITIVITY}/°C flow.",
    ]

    return HeatPumpRegimeResult(
        design_flow_temp_band=band,
        spf_band=spf_band,
        design_cop_estimate=compute_ashp_cop(REF_OUTDOOR_TEMP_C, band),
        cold_morning_cop_estimate=compute_ashp_cop(COLD_MORNING_OUTDOOR_TEMP_C, band),
        flags=flags,
        notes=notes,
    )
