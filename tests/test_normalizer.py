"""Tests for the normalizer — hardness, system volume and decay facts."""

from __future__ import annotations

import pytest

from heat_advisor.config import DEFAULT_TABLES, InfrastructureConfig, PropertyConfig
from heat_advisor.engine.normalizer import (
    MAX_TEN_YEAR_DECAY_PCT,
    normalize,
    peak_heat_loss_kw,
    postcode_prefix,
)


def _facts(survey, **sections):
    return normalize(survey.model_copy(update=sections), DEFAULT_TABLES)


class TestPostcode:
    @pytest.mark.parametrize("postcode,prefix", [
        ("SW19 2AB", "SW"),
        ("sw1a 1aa", "SW"),
        ("  E1 6AN", "E"),
        ("M1 1AE", "M"),
        ("", ""),
        ("12345", ""),
    ])
    def test_prefix(self, postcode, prefix):
        assert postcode_prefix(postcode) == prefix

    def test_london_is_hard_and_high_silica(self, survey):
        facts = _facts(survey, property=PropertyConfig(postcode="SW19 2AB"))
        assert facts.water_hardness_category == "hard"
        assert facts.hardness_from_default is False
        assert facts.high_silica is True
        assert facts.scaling_scaffold_coefficient == 10.0
        assert facts.cac_o3_mg_l == 200.0
        assert facts.scaling_potential == 1.0

    def test_chalk_area_is_very_hard(self, survey):
        facts = _facts(survey, property=PropertyConfig(postcode="RG1 1AA"))
        assert facts.water_hardness_category == "very_hard"
        assert facts.ten_year_efficiency_decay_pct == pytest.approx(12.8)

    def test_soft_area(self, survey):
        facts = _facts(survey, property=PropertyConfig(postcode="M1 1AE"))
        assert facts.water_hardness_category == "soft"
        assert facts.high_silica is False

    @pytest.mark.parametrize("postcode", ["", "ZZ9 9ZZ"])
    def test_unknown_area_defaults_to_moderate(self, survey, postcode):
        facts = _facts(survey, property=PropertyConfig(postcode=postcode))
        assert facts.water_hardness_category == "moderate"
        assert facts.hardness_from_default is True


class TestDerivedFacts:
    def test_volume_from_radiators(self, survey):
        facts = _facts(survey, infrastructure=InfrastructureConfig(radiator_count=9))
        assert facts.system_volume_l == 90.0

    def test_volume_from_heat_loss_when_uncounted(self, facts):
        assert facts.system_volume_l == 48.0

    def test_loft_conversion_rules_out_vented(self, survey, facts):
        assert facts.can_use_vented_system is True
        converted = _facts(survey, property=PropertyConfig(has_loft_conversion=True))
        assert converted.can_use_vented_system is False

    def test_decay_never_exceeds_cap(self, survey):
        for postcode in ("RG1", "SW19", "M1", "DE1", ""):
            facts = _facts(survey, property=PropertyConfig(postcode=postcode))
            assert 0 <= facts.ten_year_efficiency_decay_pct <= MAX_TEN_YEAR_DECAY_PCT

    def test_sludge_potential(self, survey):
        two_pipe = _facts(survey, infrastructure=InfrastructureConfig(system_age_years=14))
        assert two_pipe.sludge_potential == pytest.approx(0.49)
        one_pipe = _facts(survey, infrastructure=InfrastructureConfig(
            piping_topology="one_pipe", system_age_years=30,
        ))
        assert one_pipe.sludge_potential == 1.0

    def test_deterministic(self, survey):
        assert normalize(survey, DEFAULT_TABLES) == normalize(survey, DEFAULT_TABLES)


class TestPeakHeatLoss:
    def test_assumed_when_missing(self, survey):
        assert peak_heat_loss_kw(survey) == 8.0

    def test_surveyed_value_used(self, measured_survey):
        assert peak_heat_loss_kw(measured_survey) == 9.5
