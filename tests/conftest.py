"""Shared test fixtures — sample surveys matching example_survey.yaml."""

from __future__ import annotations

import pytest

from heat_advisor.config import (
    BoilerConfig,
    BuildingFabric,
    CurrentSystemConfig,
    InfrastructureConfig,
    LifestyleProfile,
    OccupancyConfig,
    PropertyConfig,
    ServicesConfig,
    SurveyInput,
    DEFAULT_TABLES,
)
from heat_advisor.engine.normalizer import normalize
from heat_advisor.models.results import NormalizedFacts


@pytest.fixture
def survey() -> SurveyInput:
    """Bare survey: every optional section absent, every default in force."""
    return SurveyInput()


@pytest.fixture
def facts(survey: SurveyInput) -> NormalizedFacts:
    return normalize(survey, DEFAULT_TABLES)


@pytest.fixture
def boiler() -> BoilerConfig:
    return BoilerConfig(
        gc_number="47-583-01",
        age_years=8,
        type="combi",
        condensing="yes",
        nominal_output_kw=30.0,
    )


@pytest.fixture
def building() -> BuildingFabric:
    return BuildingFabric(
        wall_type="solid_masonry",
        insulation_level="moderate",
        glazing="double",
        roof_insulation="good",
        air_tightness="average",
        thermal_mass="heavy",
    )


@pytest.fixture
def measured_survey(boiler: BoilerConfig, building: BuildingFabric) -> SurveyInput:
    """Fully surveyed house: every material measurement recorded."""
    return SurveyInput(
        infrastructure=InfrastructureConfig(
            primary_pipe_diameter_mm=22,
            piping_topology="two_pipe",
            has_magnetic_filter=True,
            radiator_count=9,
            return_water_temp_c=50.0,
            system_age_years=14,
        ),
        property=PropertyConfig(postcode="SW19 2AB", heat_loss_kw=9.5, bedrooms=3, building=building),
        occupancy=OccupancyConfig(
            signature="professional",
            occupancy_count=4,
            lifestyle=LifestyleProfile(has_bath=True, has_dishwasher=True, has_washing_machine=True),
        ),
        services=ServicesConfig(
            static_mains_pressure_bar=3.2,
            dynamic_mains_pressure_bar=2.1,
            mains_dynamic_flow_lpm=16.0,
            cold_water_source="mains_true",
        ),
        current_system=CurrentSystemConfig(heat_source_type="combi", boiler=boiler),
    )


def profile(**flags) -> LifestyleProfile:
    """Lifestyle profile with both peaks and every appliance off unless set."""
    base = dict(
        morning_peak_enabled=False,
        evening_peak_enabled=False,
        has_bath=False,
        has_dishwasher=False,
        has_washing_machine=False,
        two_simultaneous_bathrooms=False,
    )
    base.update(flags)
    return LifestyleProfile(**base)


def with_lifestyle(survey: SurveyInput, lifestyle: LifestyleProfile | None) -> SurveyInput:
    occupancy = survey.occupancy.model_copy(update={"lifestyle": lifestyle})
    return survey.model_copy(update={"occupancy": occupancy})
