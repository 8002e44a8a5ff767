"""Configuration models — survey input sections and reference tables."""

from heat_advisor.config.infrastructure import InfrastructureConfig
from heat_advisor.config.property import BuildingFabric, PropertyConfig
from heat_advisor.config.occupancy import LifestyleProfile, OccupancyConfig
from heat_advisor.config.dhw import DhwConfig
from heat_advisor.config.services import ServicesConfig
from heat_advisor.config.current_system import BoilerConfig, CurrentSystemConfig
from heat_advisor.config.retrofit import RetrofitConfig
from heat_advisor.config.grid_flex import GridFlexConfig
from heat_advisor.config.survey import EngineSettings, SurveyInput
from heat_advisor.config.tables import DEFAULT_TABLES, ReferenceTables

__all__ = [
    "InfrastructureConfig",
    "BuildingFabric",
    "PropertyConfig",
    "LifestyleProfile",
    "OccupancyConfig",
    "DhwConfig",
    "ServicesConfig",
    "BoilerConfig",
    "CurrentSystemConfig",
    "RetrofitConfig",
    "GridFlexConfig",
    "EngineSettings",
    "SurveyInput",
    "ReferenceTables",
    "DEFAULT_TABLES",
]
