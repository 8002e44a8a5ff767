"""Tests for the presentation output builder."""

from __future__ import annotations

from heat_advisor.config import (
    InfrastructureConfig,
    ReferenceTables,
    OccupancyConfig,
    PropertyConfig,
    ServicesConfig,
)
from heat_advisor.engine.assumptions import CONFIDENCE_BADGE, GC_INVALID
from heat_advisor.engine.orchestrator import run_engine
from heat_advisor.engine.output import (
    CONTRACT_VERSION,
    ENGINE_VERSION,
    build_engine_output,
    parse_red_flags,
)


def _output(survey):
    return build_engine_output(run_engine(survey), survey)


def _eligibility(output):
    return {item.id: item for item in output.eligibility}


class TestEligibility:
    def test_all_options_listed(self, survey):
        assert [e.id for e in _output(survey).eligibility] == [
            "on_demand", "stored_vented", "stored_unvented", "ashp",
        ]

    def test_combi_rejected_by_simultaneous_demand(self, survey):
        s = survey.model_copy(update={"occupancy": OccupancyConfig(bathroom_count=2, high_occupancy=True)})
        output = _output(s)
        on_demand = _eligibility(output)["on_demand"]
        assert on_demand.status == "rejected"
        assert "Combi Rejected" in on_demand.reason
        assert output.recommendation.primary == "Stored hot water — unvented cylinder"

    def test_loft_conversion_rejects_vented(self, survey):
        s = survey.model_copy(update={"property": PropertyConfig(has_loft_conversion=True)})
        assert _eligibility(_output(s))["stored_vented"].status == "rejected"

    def test_unvented_needs_measurements(self, survey, measured_survey):
        assert _eligibility(_output(survey))["stored_unvented"].status == "caution"
        assert _eligibility(_output(measured_survey))["stored_unvented"].status == "viable"

    def test_inconsistent_readings_caution_unvented(self, survey):
        s = survey.model_copy(update={"services": ServicesConfig(
            static_mains_pressure_bar=1.5, dynamic_mains_pressure_bar=2.5, mains_dynamic_flow_lpm=20.0,
        )})
        unvented = _eligibility(_output(s))["stored_unvented"]
        assert unvented.status == "caution"
        assert "inconsistent" in unvented.reason

    def test_one_pipe_rejects_ashp(self, survey):
        s = survey.model_copy(update={"infrastructure": InfrastructureConfig(piping_topology="one_pipe")})
        ashp = _eligibility(_output(s))["ashp"]
        assert ashp.status == "rejected"
        assert "ASHP Hard Fail" in ashp.reason


class TestRecommendation:
    def test_steady_home_gets_heat_pump(self, survey):
        s = survey.model_copy(update={"occupancy": OccupancyConfig(signature="steady_home")})
        assert _output(s).recommendation.primary == "Air Source Heat Pump"

    def test_professional_falls_back_to_lifestyle_note(self, survey):
        assert _output(survey).recommendation.primary.startswith("Boiler Recommended")


class TestRedFlags:
    def test_parse_titles_and_severity(self):
        flags = parse_red_flags([
            "Combi Rejected: too many bathrooms",
            "ASHP Flagged: small pipes",
            "Safety Cut-off Risk: low pressure",
        ])
        assert [(f.title, f.severity) for f in flags] == [
            ("Combi Rejected", "fail"),
            ("ASHP Flagged", "warn"),
            ("Safety Cut-off Risk", "fail"),
        ]
        assert flags[0].detail == "too many bathrooms"

    def test_regime_flags_included(self, survey):
        ids = [f.id for f in _output(survey).red_flags]
        assert "regime-flow-temp-elevated" in ids


class TestMetaAndVisuals:
    def test_meta(self, survey, measured_survey):
        bare = _output(survey)
        assert bare.meta.engine_version == ENGINE_VERSION
        assert bare.meta.contract_version == CONTRACT_VERSION
        assert bare.meta.confidence.level == "low"
        assert _output(measured_survey).meta.confidence.level == "high"

    def test_timeline_visual_first(self, survey):
        visuals = _output(survey).visuals
        assert visuals[0].type == "timeline_24h"
        assert len(visuals[0].data["time_minutes"]) == 96
        assert {v.type for v in visuals} == {"timeline_24h", "pressure_drop", "ashp_flow", "space_footprint"}

    def test_evidence_sources(self, survey, measured_survey):
        bare = {e.id: e for e in _output(survey).evidence}
        full = {e.id: e for e in _output(measured_survey).evidence}
        assert bare["ev-heat-loss"].source == "assumed"
        assert full["ev-heat-loss"].source == "manual"
        assert bare["ev-primary-pipe"].value == "unknown (assumed 22 mm)"
        assert "ev-mains-pressure-drop" in full
        assert "ev-mains-pressure-drop" not in bare

    def test_context_summary_mentions_boiler_model(self, measured_survey):
        summary = _output(measured_survey).context_summary
        assert any(line.startswith("Modelled in-home efficiency") for line in summary)
        assert "4 people in a 3-bed property." in summary


# ═══════════════════════════════════════════════════════════════════════════
# Injected reference tables
# ═══════════════════════════════════════════════════════════════════════════

def _with_gc(survey, gc_number):
    current = survey.current_system
    boiler = current.boiler.model_copy(update={"gc_number": gc_number})
    return survey.model_copy(update={"current_system": current.model_copy(update={"boiler": boiler})})


class TestInjectedTables:
    TABLES = ReferenceTables(sedbuk_gc={"1234567": (0.89, "Test boiler")})

    def test_custom_gc_is_not_reported_invalid(self, measured_survey):
        s = _with_gc(measured_survey, "12-345-67")
        result = run_engine(s, self.TABLES)
        output = build_engine_output(result, s, self.TABLES)
        assert result.sedbuk.source == "gc_lookup"
        assert GC_INVALID not in {a.id for a in output.meta.assumptions}

    def test_default_tables_still_flag_unknown_gc(self, measured_survey):
        s = _with_gc(measured_survey, "12-345-67")
        output = _output(s)
        assert GC_INVALID in {a.id for a in output.meta.assumptions}

    def test_timeline_badge_matches_output_confidence(self, measured_survey):
        s = _with_gc(measured_survey, "12-345-67")
        result = run_engine(s, self.TABLES)
        output = build_engine_output(result, s, self.TABLES)
        assert result.timeline.legend_notes[0] == CONFIDENCE_BADGE[output.meta.confidence.level]
