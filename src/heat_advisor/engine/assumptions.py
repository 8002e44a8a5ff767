"""Assumptions and confidence.

Every default the engine substituted for a missing survey fact becomes an
``Assumption``. Five of them are material and downgrade confidence:

    missing GC number, boiler age, nominal kW, peak heat loss, dynamic flow

    0 missing → high · 1–2 → medium · 3 or more → low

The rest (static pressure, default DHW schedule, derived τ) are ``info``
and never move the level.
"""

from __future__ import annotations

import re

from heat_advisor.config.survey import SurveyInput
from heat_advisor.config.tables import DEFAULT_TABLES, ReferenceTables
from heat_advisor.models.output import Assumption, Confidence, ConfidenceLevel


GC_MISSING = "boiler.gc_missing"
GC_INVALID = "boiler.gc_invalid"
AGE_MISSING = "boiler.age_missing"
NOMINAL_OUTPUT_DEFAULTED = "boiler.nominal_output_defaulted"
PEAK_HEAT_LOSS_MISSING = "boiler.peak_heatloss_missing"
FLOW_MISSING = "water.flow_missing"
STATIC_MISSING = "water.static_missing"
DEFAULT_DHW_SCHEDULE = "timeline.default_dhw_schedule"
TAU_DERIVED = "timeline.tau_slider_derived"

# id → (title, detail, improve_by)
CATALOG: dict[str, tuple[str, str, str]] = {
    GC_MISSING: (
        "GC number not provided",
        "Boiler efficiency is estimated from manufacturer band defaults, not a direct SEDBUK database lookup.",
        "Add the GC number from the boiler data plate.",
    ),
    GC_INVALID: (
        "GC number not recognised",
        "The GC number provided could not be matched in the SEDBUK database. "
        "Manufacturer band defaults are used instead.",
        "Check the GC number on the boiler data plate and re-enter it.",
    ),
    AGE_MISSING: (
        "Boiler age not provided",
        "Age-related efficiency degradation could not be applied; the boiler is modelled as new.",
        "Enter the boiler installation year or approximate age.",
    ),
    NOMINAL_OUTPUT_DEFAULTED: (
        "Boiler nominal output not provided",
        "A type-default output (24 kW for combi, 18 kW for system/regular) has been assumed for sizing calculations.",
        "Enter the rated kW output from the boiler data plate or manual.",
    ),
    PEAK_HEAT_LOSS_MISSING: (
        "Peak heat loss not provided",
        "An 8 kW design heat loss is assumed. The oversize ratio between boiler output and building "
        "demand cannot be calculated, so cycling loss modelling is weaker.",
        "Run a heat loss calculation or enter the estimated peak demand in kW.",
    ),
    FLOW_MISSING: (
        "Flow-at-pressure measurement missing",
        "Cold-water supply quality is unknown without a dynamic flow measurement (L/min at pressure). "
        "Combi and unvented eligibility relies on modelled estimates.",
        "Measure mains flow rate at the stopcock (L/min) using a flow bag.",
    ),
    STATIC_MISSING: (
        "Static mains pressure not measured",
        "Pressure drop between static and dynamic conditions cannot be determined. "
        "Supply quality classification is based on dynamic pressure alone.",
        "Measure static pressure at the stopcock with flow closed off.",
    ),
    DEFAULT_DHW_SCHEDULE: (
        "Default daily hot-water schedule used",
        "Hot-water events (morning draw, evening bath) follow a typical UK household day. Dishwasher and "
        "washing machine are modelled as cold-mains flow events, not thermal loads. Your actual pattern may differ.",
        "Paint your actual daily schedule to improve timeline accuracy.",
    ),
    TAU_DERIVED: (
        "Thermal response (τ) inferred from building mass",
        "The thermal time constant is estimated from the selected building mass rather than measured "
        "from real thermostat telemetry.",
        "Connect smart thermostat telemetry to derive τ from measured temperature decay.",
    ),
}

CONFIDENCE_BADGE: dict[ConfidenceLevel, str] = {
    "high": "High confidence (measured)",
    "medium": "Medium confidence (assumed mains stability)",
    "low": "Low confidence (no flow test)",
}


def _assumption(assumption_id: str, affects: list[str], severity: str) -> Assumption:
    title, detail, improve_by = CATALOG[assumption_id]
    return Assumption(
        id=assumption_id,
        title=title,
        detail=detail,
        improve_by=improve_by,
        affects=affects,
        severity=severity,
    )


def confidence_level(missing_count: int) -> ConfidenceLevel:
    if missing_count == 0:
        return "high"
    if missing_count <= 2:
        return "medium"
    return "low"


def build_assumptions(
    survey: SurveyInput,
    tables: ReferenceTables = DEFAULT_TABLES,
) -> tuple[list[Assumption], Confidence]:
    """Collect the assumptions behind a run and grade overall confidence."""
    boiler = survey.current_system.boiler
    assumptions: list[Assumption] = []
    missing = 0

    # ── 1. Boiler ──────────────────────────────────────────────────────
    gc_number = boiler.gc_number if boiler is not None else None
    if not gc_number:
        missing += 1
        assumptions.append(_assumption(GC_MISSING, ["options", "recommendation", "context"], "warn"))
    elif re.sub(r"\D", "", gc_number) not in tables.sedbuk_gc:
        assumptions.append(_assumption(GC_INVALID, ["options", "context"], "warn"))

    if boiler is None or boiler.age_years is None:
        missing += 1
        assumptions.append(_assumption(AGE_MISSING, ["options", "context"], "warn"))

    if boiler is None or boiler.nominal_output_kw is None:
        missing += 1
        assumptions.append(_assumption(NOMINAL_OUTPUT_DEFAULTED, ["options", "recommendation"], "warn"))

    if survey.property.heat_loss_kw is None:
        missing += 1
        assumptions.append(_assumption(PEAK_HEAT_LOSS_MISSING, ["options", "recommendation"], "warn"))

    # ── 2. Water supply ────────────────────────────────────────────────
    flow = survey.services.mains_dynamic_flow_lpm
    if not flow:
        missing += 1
        assumptions.append(_assumption(FLOW_MISSING, ["options", "recommendation"], "warn"))

    if survey.services.static_mains_pressure_bar is None:
        assumptions.append(_assumption(STATIC_MISSING, ["options", "context"], "info"))

    # ── 3. Timeline ────────────────────────────────────────────────────
    lifestyle = survey.occupancy.lifestyle
    if lifestyle is None:
        assumptions.append(_assumption(DEFAULT_DHW_SCHEDULE, ["timeline_24h"], "info"))
    assumptions.append(_assumption(TAU_DERIVED, ["timeline_24h", "context"], "info"))

    # ── 4. Confidence ──────────────────────────────────────────────────
    reasons = [
        "Boiler efficiency is modelled from SEDBUK + age/cycling."
        if gc_number else
        "Boiler efficiency is estimated from manufacturer band defaults (no GC number).",
        "Cold-water supply characterised by a flow-at-pressure measurement (L/min @ bar)."
        if flow else
        "Cold-water supply lacks a flow-at-pressure measurement (L/min @ bar).",
        "Daily hot-water schedule derived from your lifestyle profile."
        if lifestyle is not None else
        "Daily hot-water schedule uses defaults (no painted user schedule).",
    ]

    return assumptions, Confidence(level=confidence_level(missing), reasons=reasons)
