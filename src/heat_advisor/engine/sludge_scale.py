"""Sludge vs scale: the two waters.

Primary circuit (sealed)
    Magnetite sludge restricts flow and adds low-load cycling loss. Scale
    does not form here.
DHW circuit (open)
    Every draw brings fresh mains water, so CaCO₃ / silicate scale builds on
    the heat exchanger and caps deliverable hot-water power.
"""

from __future__ import annotations

from heat_advisor.config.survey import SurveyInput
from heat_advisor.models.results import NormalizedFacts, SludgeScaleResult


MAX_FLOW_DERATE = 0.20
FLOW_DERATE_YEARS = 15.0
CYCLING_LOSS_PER_DERATE = 0.25

DHW_SCALE_GROWTH_MM_PER_YEAR = {
    "soft": 0.01,
    "moderate": 0.05,
    "hard": 0.13,
    "very_hard": 0.20,
}
DHW_DERATE_MAX_THICKNESS_MM = 3.2
MAX_DHW_CAPACITY_DERATE = 0.20
DHW_SCALE_WARNING_THRESHOLD_MM = 1.6
DHW_LATENCY_SEC_PER_MM = 18.0

SLUDGE_PENALTY_PCT_PER_YEAR = 0.5
MAX_SLUDGE_PENALTY_PCT = 15.0

_LEGACY_TOPOLOGIES = frozenset({"one_pipe", "microbore"})


def sludge_penalty_pct(has_magnetic_filter: bool, system_age_years: float) -> float:
    """Efficiency points lost to magnetite: 0.5 %/yr, capped at 15, zero with a filter."""
    if has_magnetic_filter:
        return 0.0
    return round(min(MAX_SLUDGE_PENALTY_PCT, system_age_years * SLUDGE_PENALTY_PCT_PER_YEAR), 1)


def compute_sludge_vs_scale(survey: SurveyInput, facts: NormalizedFacts) -> SludgeScaleResult:
    infra = survey.infrastructure
    age = infra.system_age_years
    topology = infra.piping_topology
    notes: list[str] = []

    # ── 1. Primary circuit ─────────────────────────────────────────────
    legacy = topology in _LEGACY_TOPOLOGIES
    sludge_applies = legacy and not infra.has_magnetic_filter
    if sludge_applies:
        flow_derate = round(min(MAX_FLOW_DERATE, min(age, FLOW_DERATE_YEARS) / FLOW_DERATE_YEARS * MAX_FLOW_DERATE), 3)
    else:
        flow_derate = 0.0
    cycling_loss = round(flow_derate * CYCLING_LOSS_PER_DERATE, 3)

    if sludge_applies:
        notes.append(
            f"CH Flow Derate ({flow_derate * 100:.1f}%): {topology} topology without a magnetic "
            f"filter. Magnetite sludge restricts primary circuit flow; required flow increases by "
            f"{flow_derate / (1 - flow_derate) * 100:.1f}%. Cycling loss at low load: "
            f"{cycling_loss * 100:.1f}%. Fit a magnetic filter and power-flush to restore performance."
        )
    elif legacy:
        notes.append(
            f"Magnetic Filter Active: Magnetite sludge in the {topology} primary circuit is being "
            f"captured. No flow derate or cycling penalty applied."
        )
    else:
        advice = "Magnetic filter fitted." if infra.has_magnetic_filter else \
            "Consider fitting a magnetic filter as a precaution."
        notes.append(f"Primary Circuit: Two-pipe topology. Magnetite sludge risk is standard. {advice}")

    # ── 2. DHW circuit ─────────────────────────────────────────────────
    category = facts.water_hardness_category
    thickness = round(DHW_SCALE_GROWTH_MM_PER_YEAR[category] * age, 2)
    dhw_derate = round(
        min(MAX_DHW_CAPACITY_DERATE, thickness / DHW_DERATE_MAX_THICKNESS_MM * MAX_DHW_CAPACITY_DERATE), 3
    )
    latency = float(round(thickness * DHW_LATENCY_SEC_PER_MM))
    water = category.replace("_", " ")

    if thickness >= DHW_SCALE_WARNING_THRESHOLD_MM:
        notes.append(
            f"DHW Capacity Derate ({dhw_derate * 100:.1f}%): Estimated {thickness}mm CaCO3/silicate "
            f"layer on the DHW heat exchanger in a {water} water area. Expect flow droop during peak "
            f"draw; recovery is ~{latency:.0f}s slower per draw."
        )
    elif thickness > 0:
        notes.append(
            f"DHW Scale Building: {thickness}mm estimated scale on DHW circuit ({water} water). "
            f"Scale inhibitor or softener treatment recommended."
        )
    else:
        notes.append("DHW Circuit: Negligible scale accumulation detected.")

    return SludgeScaleResult(
        flow_derate_pct=flow_derate,
        cycling_loss_pct=cycling_loss,
        sludge_penalty_pct=sludge_penalty_pct(infra.has_magnetic_filter, age),
        estimated_scale_thickness_mm=thickness,
        dhw_capacity_derate_pct=dhw_derate,
        dhw_recovery_latency_increase_sec=latency,
        notes=notes,
    )
