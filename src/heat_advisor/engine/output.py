"""Output builder — turns an ``EngineResult`` into what a survey front end
renders: per-option eligibility, red flags, a primary recommendation,
explainers, evidence, confidence and visuals.
"""

from __future__ import annotations

import logging

from heat_advisor.config.survey import SurveyInput
from heat_advisor.config.tables import DEFAULT_TABLES, ReferenceTables
from heat_advisor.engine.assumptions import build_assumptions
from heat_advisor.engine.hydraulic import dynamic_pressure_bar
from heat_advisor.models.output import (
    EligibilityItem,
    EngineOutput,
    EvidenceItem,
    Explainer,
    OutputMeta,
    Recommendation,
    RedFlagItem,
    VisualSpec,
)
from heat_advisor.models.results import EngineResult

logger = logging.getLogger(__name__)


ENGINE_VERSION = "0.3.0"
CONTRACT_VERSION = "1.0"

ALL_OPTIONS = ["on_demand", "stored_vented", "stored_unvented", "ashp"]
STORED_OPTIONS = ["stored_vented", "stored_unvented"]

_FAIL_MARKERS = ("Rejected", "Hard Fail", "Cut-off")

_HEAT_SOURCE_LABELS = {
    "combi": "Combi boiler",
    "system": "System boiler",
    "regular": "Regular (heat-only) boiler",
    "ashp": "Air source heat pump",
    "other": "Other heat source",
}

_SIZING_DESCRIPTIONS = {
    "well_matched": "well matched",
    "mild_oversize": "mildly oversized, some cycling losses",
    "oversized": "oversized, increased cycling losses",
    "aggressive": "aggressive oversizing, increased cycling losses",
}


def _joined(reasons: list[str], *needles: str) -> str | None:
    picked = [r for r in reasons if any(n in r for n in needles)]
    return " ".join(picked) or None


# ═══════════════════════════════════════════════════════════════════════════
# Eligibility and recommendation
# ═══════════════════════════════════════════════════════════════════════════

def build_eligibility(result: EngineResult, survey: SurveyInput) -> list[EligibilityItem]:
    flags = result.red_flags
    items: list[EligibilityItem] = []

    # ── On demand (combi) ──────────────────────────────────────────────
    if flags.reject_combi:
        status, reason = "rejected", _joined(flags.reasons, "Combi")
    elif result.combi_stress.is_condensing_compromised:
        status, reason = "caution", "Return temperature keeps the combi out of condensing mode."
    else:
        status, reason = "viable", None
    items.append(EligibilityItem(id="on_demand", label="On Demand (Combi)", status=status, reason=reason))

    # ── Stored, vented ─────────────────────────────────────────────────
    space = survey.dhw.available_space
    if flags.reject_vented:
        status, reason = "rejected", _joined(flags.reasons, "Stored", "Cylinder", "Loft")
    elif space in ("tight", "none"):
        status, reason = "caution", "Limited space for a cylinder and header tank."
    else:
        status, reason = "viable", None
    items.append(EligibilityItem(
        id="stored_vented", label="Stored hot water — Vented cylinder", status=status, reason=reason,
    ))

    # ── Stored, unvented: gated on measured mains supply ───────────────
    cws = result.cws_supply
    if cws.inconsistent:
        status, reason = "caution", "Pressure readings inconsistent (dynamic > static); recheck measurements."
    elif not cws.has_measurements:
        status, reason = "caution", "Mains supply not characterised; need L/min @ bar measurement."
    elif cws.meets_unvented_requirement:
        status, reason = "viable", None
    else:
        status, reason = "caution", (
            "Mains supply does not meet unvented requirement "
            "(10 L/min @ 1 bar, or 12 L/min flow-only with pressure not recorded)."
        )
    items.append(EligibilityItem(
        id="stored_unvented", label="Stored hot water — Unvented cylinder", status=status, reason=reason,
    ))

    # ── Heat pump ──────────────────────────────────────────────────────
    flow = result.hydraulic_flow
    if flags.reject_ashp or flow.ashp_risk == "fail":
        status = "rejected"
    elif flow.ashp_risk == "warn" or flags.flag_ashp:
        status = "caution"
    else:
        status = "viable"
    reason = None
    if status != "viable":
        reason = " ".join(
            [r for r in flags.reasons if "ASHP" in r] + [n for n in flow.notes if "ASHP" in n]
        ) or None
    items.append(EligibilityItem(id="ashp", label="Air Source Heat Pump", status=status, reason=reason))

    return items


def primary_recommendation(result: EngineResult) -> str:
    combi_rejected = result.red_flags.reject_combi
    ashp_viable = not result.red_flags.reject_ashp and result.hydraulic_flow.ashp_risk != "fail"

    if combi_rejected:
        return "Stored hot water — unvented cylinder"
    if ashp_viable and result.lifestyle.signature == "steady_home":
        return "Air Source Heat Pump"
    if result.lifestyle.notes:
        return result.lifestyle.notes[0]
    return result.lifestyle.recommended_system


# ═══════════════════════════════════════════════════════════════════════════
# Flags, explainers, evidence
# ═══════════════════════════════════════════════════════════════════════════

def parse_red_flags(reasons: list[str]) -> list[RedFlagItem]:
    """``"Title: detail"`` strings → flag items, ``fail`` for hard rejections."""
    items = []
    for i, reason in enumerate(reasons):
        title, sep, detail = reason.partition(":")
        if not sep:
            title, detail = reason, reason
        severity = "fail" if any(m in reason for m in _FAIL_MARKERS) else "warn"
        items.append(RedFlagItem(id=f"flag-{i}", severity=severity, title=title.strip(), detail=detail.strip()))
    return items


def build_red_flags(result: EngineResult) -> list[RedFlagItem]:
    items = parse_red_flags(result.red_flags.reasons + result.hydraulic_safety.notes)
    for flag in result.cws_supply.flags + result.heat_pump_regime.flags:
        items.append(RedFlagItem(id=flag.id, severity=flag.severity, title=flag.title, detail=flag.detail))
    return items


def build_explainers(result: EngineResult, survey: SurveyInput) -> list[Explainer]:
    items: list[Explainer] = []

    safety = result.hydraulic_safety
    if safety.is_bottleneck:
        tail = " Upgrade to 28mm required for ASHP installation." if safety.ashp_requires_28mm \
            else " Pipe upgrade recommended."
        items.append(Explainer(
            id="hydraulic-bottleneck",
            title="Hydraulic Bottleneck Detected",
            body=f"Primary pipework is undersized. Flow rate {safety.flow_rate_ls * 60:.1f} L/min at "
                 f"{safety.velocity_ms:.2f} m/s exceeds safe limits.{tail}",
        ))

    flow = result.hydraulic_flow
    if flow.ashp_risk != "pass":
        items.append(Explainer(
            id="hydraulic-ashp-flow",
            title="Heat pump primary circuit flow requirement",
            body=f"Heat pumps operate at ΔT {flow.ashp_delta_t:.0f}°C versus ΔT {flow.boiler_delta_t:.0f}°C "
                 f"for a boiler, requiring {flow.ashp_flow_lpm:.1f} L/min, about "
                 f"{flow.ashp_flow_lpm / flow.boiler_flow_lpm:.1f}× the boiler requirement of "
                 f"{flow.boiler_flow_lpm:.1f} L/min. Primary pipework smaller than 28mm may restrict "
                 f"heat pump performance, cause pipe erosion and increase noise.",
        ))

    stress = result.combi_stress
    if stress.is_condensing_compromised:
        items.append(Explainer(
            id="condensing-compromised",
            title="Condensing Mode Compromised",
            body=f"Short-draw efficiency at {stress.short_draw_efficiency_pct:g}% with "
                 f"{stress.total_penalty_kwh:.0f} kWh/yr total penalty. Frequent short draws prevent "
                 f"return temperature dropping below dew point.",
        ))

    facts = result.normalized
    if facts.water_hardness_category in ("hard", "very_hard"):
        items.append(Explainer(
            id="water-hardness",
            title="Hard Water Area",
            body=f"{facts.water_hardness_category.replace('_', ' ').capitalize()} water detected "
                 f"({facts.cac_o3_mg_l:g} mg/L CaCO₃). Scale accumulation can reduce DHW heat-exchanger "
                 f"efficiency by up to 8% per mm of deposit.",
        ))

    if survey.dhw.available_space in ("tight", "unknown") or survey.dhw.architecture == "stored_mixergy":
        mixergy = result.mixergy
        items.append(Explainer(
            id="stored-mixergy-suggested",
            title="Mixergy Cylinder Suggested",
            body=f"A {mixergy.mixergy_litres:.0f} L Mixergy cylinder heats only the top of the tank that is "
                 f"needed and matches a {mixergy.equivalent_conventional_litres:.0f} L conventional "
                 f"cylinder, a {mixergy.footprint_saving_pct}% smaller footprint.",
        ))

    return items


def build_evidence(result: EngineResult, survey: SurveyInput) -> list[EvidenceItem]:
    services = survey.services
    infra = survey.infrastructure
    items: list[EvidenceItem] = []

    measured = services.dynamic_mains_pressure_bar is not None
    items.append(EvidenceItem(
        id="ev-mains-pressure-dynamic",
        field_path="services.dynamic_mains_pressure_bar",
        label="Mains pressure (dynamic)",
        value=f"{dynamic_pressure_bar(survey):.1f} bar",
        source="manual" if measured else "assumed",
        confidence="high" if measured else "low",
        affects_option_ids=["on_demand", "stored_unvented"],
    ))

    if result.cws_supply.drop_bar is not None:
        items.append(EvidenceItem(
            id="ev-mains-pressure-drop",
            field_path="services.static_mains_pressure_bar",
            label="Mains pressure drop (static → dynamic)",
            value=f"{result.cws_supply.drop_bar:.1f} bar drop",
            source="manual",
            confidence="high",
            affects_option_ids=["on_demand", "stored_unvented"],
        ))

    pipe = infra.primary_pipe_diameter_mm
    items.append(EvidenceItem(
        id="ev-primary-pipe",
        field_path="infrastructure.primary_pipe_diameter_mm",
        label="Primary pipe diameter",
        value=f"{pipe} mm" if pipe is not None else "unknown (assumed 22 mm)",
        source="manual" if pipe is not None else "assumed",
        confidence="high" if pipe is not None else "low",
        affects_option_ids=["ashp"],
    ))

    flow = result.hydraulic_flow
    items.append(EvidenceItem(
        id="ev-ashp-flow",
        field_path="hydraulic_flow.ashp_flow_lpm",
        label="ASHP required flow rate",
        value=f"{flow.ashp_flow_lpm:.1f} L/min (~{flow.ashp_flow_lpm / flow.boiler_flow_lpm:.1f}× boiler)",
        source="derived",
        confidence="high",
        affects_option_ids=["ashp"],
    ))

    bathrooms = survey.occupancy.bathroom_count
    items.append(EvidenceItem(
        id="ev-combi-simultaneity",
        field_path="occupancy.bathroom_count",
        label="Peak simultaneous DHW outlets",
        value=f"{bathrooms} bathroom{'s' if bathrooms != 1 else ''}",
        source="manual",
        confidence="high",
        affects_option_ids=["on_demand"],
    ))

    space = survey.dhw.available_space
    items.append(EvidenceItem(
        id="ev-available-space",
        field_path="dhw.available_space",
        label="Available space for cylinder",
        value=space,
        source="placeholder" if space == "unknown" else "manual",
        confidence="low" if space == "unknown" else "high",
        affects_option_ids=STORED_OPTIONS + ["ashp"],
    ))

    assumed = result.heat_loss_assumed
    items.append(EvidenceItem(
        id="ev-heat-loss",
        field_path="property.heat_loss_kw",
        label="Design heat loss",
        value=f"{result.peak_heat_loss_kw:.1f} kW" + (" (assumed)" if assumed else ""),
        source="assumed" if assumed else "manual",
        confidence="medium" if assumed else "high",
        affects_option_ids=list(ALL_OPTIONS),
    ))

    return items


# ═══════════════════════════════════════════════════════════════════════════
# Context summary and visuals
# ═══════════════════════════════════════════════════════════════════════════

def build_context_summary(result: EngineResult, survey: SurveyInput) -> list[str]:
    """Warnings first, then facts about the household and installed system."""
    warnings: list[str] = []
    facts: list[str] = []
    occupancy = survey.occupancy

    count, bedrooms = occupancy.occupancy_count, survey.property.bedrooms
    people = f"{count} {'person' if count == 1 else 'people'}" if count is not None else None
    if people and bedrooms is not None:
        facts.append(f"{people} in a {bedrooms}-bed property.")
    elif people:
        facts.append(f"{people} in the household.")
    elif bedrooms is not None:
        facts.append(f"{bedrooms}-bedroom property.")

    if occupancy.bathroom_count >= 2:
        facts.append(f"{occupancy.bathroom_count} bathrooms: simultaneous DHW demand is a factor.")
    else:
        facts.append("Single bathroom: simultaneous demand is low.")

    cws = result.cws_supply
    if cws.inconsistent:
        warnings.append(
            "Mains pressure readings inconsistent (dynamic > static). Recheck before specifying a system."
        )
    facts += [n for n in cws.notes if not n.startswith("Readings inconsistent")]

    source = survey.current_system.heat_source_type
    if source in _HEAT_SOURCE_LABELS:
        facts.append(f"Current system: {_HEAT_SOURCE_LABELS[source]}.")
    if survey.dhw.available_space == "tight":
        facts.append("Limited space for a cylinder: compact or Mixergy option preferred.")
    elif survey.dhw.available_space == "ok":
        facts.append("Adequate space available for a standard cylinder.")

    model = result.boiler_efficiency
    if model is not None:
        if model.age_is_unrealistic:
            warnings.append("Boiler age input appears unrealistic and was treated as unknown. Check survey data.")
        facts.append(f"Current boiler baseline seasonal efficiency: {model.baseline_pct:.0f}% (modelled estimate).")
        if not model.age_is_unrealistic:
            facts.append(f"Age-adjusted boiler efficiency: {model.age_adjusted_pct:.0f}% (modelled estimate).")
        facts.append(f"Modelled in-home efficiency: {model.in_home_pct:.0f}% (not measured).")

    sizing = result.boiler_sizing
    if sizing is not None:
        facts.append(f"Boiler nominal output: {sizing.nominal_kw:g} kW.")
        if sizing.oversize_ratio is not None:
            facts.append(
                f"Oversize ratio: {sizing.oversize_ratio:.1f}× ({_SIZING_DESCRIPTIONS[sizing.sizing_band]})."
            )

    fabric = result.fabric
    if fabric is not None:
        facts.append(f"Fabric heat-loss estimate: {fabric.heat_loss_band.replace('_', ' ')} (modelled estimate).")
        if fabric.drift_tau_hours is not None:
            facts.append(f"Thermal time constant τ ≈ {fabric.drift_tau_hours:.0f} h ({fabric.thermal_mass_band} mass).")

    if result.grid_flex is not None:
        facts.append(f"Smart-tariff saving potential: £{result.grid_flex.total_annual_saving_gbp:.0f}/yr.")

    return warnings + facts


def build_visuals(result: EngineResult) -> list[VisualSpec]:
    timeline = result.timeline
    flow = result.hydraulic_flow
    cws = result.cws_supply
    mixergy = result.mixergy

    return [
        VisualSpec(
            id="timeline_24h",
            type="timeline_24h",
            title="24-hour comparison: " + " vs ".join(s.label for s in timeline.series),
            data=timeline.model_dump(),
            affects_option_ids=list(ALL_OPTIONS),
        ),
        VisualSpec(
            id="pressure_drop",
            type="pressure_drop",
            title="Mains Pressure",
            data={
                "static_bar": cws.static_pressure_bar,
                "dynamic_bar": cws.dynamic_pressure_bar,
                "drop_bar": cws.drop_bar,
                "inconsistent_reading": cws.inconsistent,
            },
            affects_option_ids=["on_demand", "stored_unvented"],
        ),
        VisualSpec(
            id="ashp_flow",
            type="ashp_flow",
            title="System flow requirement at design ΔT",
            data={
                "boiler_flow_lpm": flow.boiler_flow_lpm,
                "ashp_flow_lpm": flow.ashp_flow_lpm,
                "multiplier": round(flow.ashp_flow_lpm / flow.boiler_flow_lpm, 1),
                "ashp_risk": flow.ashp_risk,
            },
            affects_option_ids=["ashp"],
        ),
        VisualSpec(
            id="space_footprint",
            type="space_footprint",
            title="Cylinder Space Footprint",
            data={
                "mixergy_litres": mixergy.mixergy_litres,
                "conventional_litres": mixergy.equivalent_conventional_litres,
                "footprint_saving_pct": mixergy.footprint_saving_pct,
            },
            affects_option_ids=STORED_OPTIONS + ["ashp"],
        ),
    ]


def build_engine_output(
    result: EngineResult,
    survey: SurveyInput,
    tables: ReferenceTables = DEFAULT_TABLES,
) -> EngineOutput:
    """Presentation view of one engine run.

    Pass the same ``tables`` the run used so the GC check agrees with the
    SEDBUK lookup.
    """
    assumptions, confidence = build_assumptions(survey, tables)
    logger.debug("confidence %s with %d assumptions", confidence.level, len(assumptions))

    return EngineOutput(
        eligibility=build_eligibility(result, survey),
        red_flags=build_red_flags(result),
        recommendation=Recommendation(primary=primary_recommendation(result)),
        explainers=build_explainers(result, survey),
        evidence=build_evidence(result, survey),
        context_summary=build_context_summary(result, survey),
        meta=OutputMeta(
            engine_version=ENGINE_VERSION,
            contract_version=CONTRACT_VERSION,
            confidence=confidence,
            assumptions=assumptions,
        ),
        visuals=build_visuals(result),
    )
