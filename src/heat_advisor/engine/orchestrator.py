"""Engine orchestrator — one survey in, one ``EngineResult`` out.

Order of work:
  1. Normalizer             cross-cutting facts, passed explicitly onward
  2. Unconditional modules  hydraulics, combi stress, Mixergy, legacy pipework,
                            sludge/scale, optimisation, red flags, mains supply,
                            heat-pump regime, lifestyle
  3. Gated modules          boiler → SEDBUK, sizing, efficiency model
                            building → fabric
                            grid_flex → grid flex
  4. Demand                 24 hourly lifestyle values → 96-point grid
  5. Timeline               the configured pair, else current vs primary

Any exception is fatal to the run. There is no partial result.

Entry point: ``run_engine(survey, tables=DEFAULT_TABLES)``
"""

from __future__ import annotations

import logging

from heat_advisor.config.survey import SurveyInput, TimelineSystemId
from heat_advisor.config.tables import DEFAULT_TABLES, ReferenceTables
from heat_advisor.engine.boiler_efficiency import build_boiler_efficiency_model
from heat_advisor.engine.boiler_sizing import compute_boiler_sizing
from heat_advisor.engine.combi_stress import compute_combi_stress
from heat_advisor.engine.cws_supply import compute_cws_supply
from heat_advisor.engine.fabric import compute_fabric_model
from heat_advisor.engine.grid_flex import compute_grid_flex
from heat_advisor.engine.heat_pump_regime import compute_heat_pump_regime
from heat_advisor.engine.hydraulic import compute_hydraulic_flow, compute_hydraulic_safety
from heat_advisor.engine.legacy_infrastructure import compute_legacy_infrastructure
from heat_advisor.engine.lifestyle import simulate_lifestyle
from heat_advisor.engine.mixergy import compute_mixergy_volumetrics
from heat_advisor.engine.normalizer import normalize, peak_heat_loss_kw
from heat_advisor.engine.red_flags import compute_red_flags
from heat_advisor.engine.sedbuk import lookup_sedbuk
from heat_advisor.engine.sludge_scale import compute_sludge_vs_scale
from heat_advisor.engine.system_optimization import compute_system_optimization
from heat_advisor.engine.timeline import build_timeline, resample_hourly_demand
from heat_advisor.models.results import EngineResult

logger = logging.getLogger(__name__)


# Lifestyle recommendation → timeline system id for the primary option.
_PRIMARY_TIMELINE_ID: dict[str, TimelineSystemId] = {
    "ashp": "ashp",
    "stored_water": "stored_unvented",
    "boiler": "on_demand",
}


# ═══════════════════════════════════════════════════════════════════════════
# Public entry point
# ═══════════════════════════════════════════════════════════════════════════

def run_engine(survey: SurveyInput, tables: ReferenceTables = DEFAULT_TABLES) -> EngineResult:
    """Run every module for ``survey`` and assemble the aggregate result.

    Raises whatever a module raises, after logging it.
    """
    try:
        return _run(survey, tables)
    except Exception:
        logger.exception("engine run failed (survey version %s)", survey.version)
        raise


def _run(survey: SurveyInput, tables: ReferenceTables) -> EngineResult:
    # ── 1. Normalizer ──────────────────────────────────────────────────
    facts = normalize(survey, tables)

    # ── 2. Unconditional modules ───────────────────────────────────────
    hydraulic_safety = compute_hydraulic_safety(survey)
    hydraulic_flow = compute_hydraulic_flow(survey)
    combi_stress = compute_combi_stress(survey)
    mixergy = compute_mixergy_volumetrics()
    legacy = compute_legacy_infrastructure(survey)
    sludge = compute_sludge_vs_scale(survey, facts)
    optimization = compute_system_optimization(survey)
    red_flags = compute_red_flags(survey)
    cws = compute_cws_supply(survey)
    regime = compute_heat_pump_regime(survey)
    lifestyle = simulate_lifestyle(survey)

    # ── 3. Demand on the 96-point grid ─────────────────────────────────
    demand_96 = resample_hourly_demand(lifestyle.hourly_demand_kw)

    # ── 4. Gated modules ───────────────────────────────────────────────
    boiler = survey.current_system.boiler
    sedbuk = sizing = efficiency = None
    if boiler is not None:
        sedbuk = lookup_sedbuk(boiler, tables)
        sizing = compute_boiler_sizing(boiler, survey.property.heat_loss_kw)
        efficiency = build_boiler_efficiency_model(boiler, sizing, sedbuk, demand_96, tables)
    else:
        logger.debug("no boiler details: SEDBUK, sizing and efficiency model skipped")

    building = survey.property.building
    fabric = compute_fabric_model(building) if building is not None else None

    grid_flex = compute_grid_flex(survey.grid_flex, tables) if survey.grid_flex is not None else None

    # ── 5. Timeline ────────────────────────────────────────────────────
    pair = survey.engine.timeline_pair
    if pair is None:
        pair = ("current", _PRIMARY_TIMELINE_ID[lifestyle.recommended_system])
    logger.debug("timeline pair %s", pair)

    timeline = build_timeline(
        survey,
        demand_96,
        pair,
        facts=facts,
        design_flow_band=regime.design_flow_temp_band,
        boiler_efficiency=efficiency,
        tables=tables,
        tau_hours=fabric.drift_tau_hours if fabric is not None else None,
        sedbuk=sedbuk,
        debug=survey.engine.physics_debug,
    )

    return EngineResult(
        survey_version=survey.version,
        peak_heat_loss_kw=peak_heat_loss_kw(survey),
        heat_loss_assumed=survey.property.heat_loss_kw is None,
        normalized=facts,
        hydraulic_safety=hydraulic_safety,
        hydraulic_flow=hydraulic_flow,
        combi_stress=combi_stress,
        mixergy=mixergy,
        legacy_infrastructure=legacy,
        sludge_scale=sludge,
        system_optimization=optimization,
        red_flags=red_flags,
        cws_supply=cws,
        heat_pump_regime=regime,
        lifestyle=lifestyle,
        sedbuk=sedbuk,
        boiler_sizing=sizing,
        boiler_efficiency=efficiency,
        fabric=fabric,
        grid_flex=grid_flex,
        demand_heat_kw_96=demand_96,
        timeline=timeline,
    )
