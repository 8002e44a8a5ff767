"""Tests for assumptions and the confidence grade."""

from __future__ import annotations

import pytest

from heat_advisor.config import BoilerConfig, CurrentSystemConfig, ServicesConfig
from heat_advisor.engine.assumptions import (
    AGE_MISSING,
    DEFAULT_DHW_SCHEDULE,
    FLOW_MISSING,
    GC_INVALID,
    GC_MISSING,
    NOMINAL_OUTPUT_DEFAULTED,
    PEAK_HEAT_LOSS_MISSING,
    STATIC_MISSING,
    TAU_DERIVED,
    build_assumptions,
    confidence_level,
)


def _ids(assumptions):
    return [a.id for a in assumptions]


class TestConfidenceLevel:
    @pytest.mark.parametrize("missing,level", [(0, "high"), (1, "medium"), (2, "medium"), (3, "low"), (5, "low")])
    def test_thresholds(self, missing, level):
        assert confidence_level(missing) == level


class TestBuildAssumptions:
    def test_bare_survey_is_low_confidence(self, survey):
        assumptions, confidence = build_assumptions(survey)
        assert confidence.level == "low"
        ids = _ids(assumptions)
        for expected in (GC_MISSING, AGE_MISSING, NOMINAL_OUTPUT_DEFAULTED, PEAK_HEAT_LOSS_MISSING,
                         FLOW_MISSING, STATIC_MISSING, DEFAULT_DHW_SCHEDULE, TAU_DERIVED):
            assert expected in ids
        assert len([a for a in assumptions if a.severity == "warn"]) == 5

    def test_fully_measured_survey_is_high_confidence(self, measured_survey):
        assumptions, confidence = build_assumptions(measured_survey)
        assert confidence.level == "high"
        assert all(a.severity == "info" for a in assumptions)
        assert _ids(assumptions) == [TAU_DERIVED]

    def test_one_missing_is_medium(self, measured_survey):
        services = measured_survey.services.model_copy(update={"mains_dynamic_flow_lpm": None})
        s = measured_survey.model_copy(update={"services": services})
        assumptions, confidence = build_assumptions(s)
        assert confidence.level == "medium"
        assert FLOW_MISSING in _ids(assumptions)

    def test_info_assumptions_do_not_downgrade(self, measured_survey):
        s = measured_survey.model_copy(update={
            "services": ServicesConfig(dynamic_mains_pressure_bar=2.0, mains_dynamic_flow_lpm=15.0),
            "occupancy": measured_survey.occupancy.model_copy(update={"lifestyle": None}),
        })
        assumptions, confidence = build_assumptions(s)
        assert confidence.level == "high"
        assert STATIC_MISSING in _ids(assumptions)
        assert DEFAULT_DHW_SCHEDULE in _ids(assumptions)

    def test_unrecognised_gc_is_flagged_but_not_missing(self, measured_survey):
        boiler = measured_survey.current_system.boiler.model_copy(update={"gc_number": "12-345-67"})
        s = measured_survey.model_copy(update={
            "current_system": CurrentSystemConfig(heat_source_type="combi", boiler=boiler),
        })
        assumptions, confidence = build_assumptions(s)
        assert GC_INVALID in _ids(assumptions)
        assert GC_MISSING not in _ids(assumptions)
        assert confidence.level == "high"

    def test_partial_boiler_details(self, measured_survey):
        s = measured_survey.model_copy(update={
            "current_system": CurrentSystemConfig(heat_source_type="combi", boiler=BoilerConfig(type="combi")),
        })
        assumptions, confidence = build_assumptions(s)
        assert {GC_MISSING, AGE_MISSING, NOMINAL_OUTPUT_DEFAULTED} <= set(_ids(assumptions))
        assert confidence.level == "low"

    def test_reasons_describe_sources(self, survey, measured_survey):
        _, bare = build_assumptions(survey)
        _, full = build_assumptions(measured_survey)
        assert "no GC number" in bare.reasons[0]
        assert "SEDBUK" in full.reasons[0]
        assert len(full.reasons) == 3
