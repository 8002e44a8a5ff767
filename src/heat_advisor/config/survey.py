"""Top-level survey input — bundles every section of one property survey."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from heat_advisor.config.infrastructure import InfrastructureConfig
from heat_advisor.config.property import PropertyConfig
from heat_advisor.config.occupancy import OccupancyConfig
from heat_advisor.config.dhw import DhwConfig
from heat_advisor.config.services import ServicesConfig
from heat_advisor.config.current_system import CurrentSystemConfig
from heat_advisor.config.retrofit import RetrofitConfig
from heat_advisor.config.grid_flex import GridFlexConfig


TimelineSystemId = Literal[
    "current",
    "on_demand",
    "stored_vented",
    "stored_unvented",
    "ashp",
    "regular_vented",
    "system_unvented",
]


class EngineSettings(BaseModel):
    """Engine-level settings that do not describe the property."""

    model_config = ConfigDict(frozen=True)

    timeline_pair: tuple[TimelineSystemId, TimelineSystemId] | None = Field(
        default=None,
        description="Two systems compared on the 24h timeline. "
                    "None = current system vs the primary recommendation.",
    )
    physics_debug: bool = Field(
        default=False,
        description="Attach the efficiency inputs behind the current-system series to the timeline.",
    )


class SurveyInput(BaseModel):
    """Complete input for one engine run.

    Sub-objects left as ``None`` (boiler, building, lifestyle, grid_flex)
    are meaningful: the modules they gate are skipped, and the missing
    facts show up as assumptions in the output.
    """

    model_config = ConfigDict(frozen=True)

    version: str = Field(default="2.3", description="Input contract version")
    infrastructure: InfrastructureConfig = Field(default_factory=InfrastructureConfig)
    property: PropertyConfig = Field(default_factory=PropertyConfig)
    occupancy: OccupancyConfig = Field(default_factory=OccupancyConfig)
    dhw: DhwConfig = Field(default_factory=DhwConfig)
    services: ServicesConfig = Field(default_factory=ServicesConfig)
    current_system: CurrentSystemConfig = Field(default_factory=CurrentSystemConfig)
    retrofit: RetrofitConfig = Field(default_factory=RetrofitConfig)
    grid_flex: GridFlexConfig | None = Field(default=None)
    engine: EngineSettings = Field(default_factory=EngineSettings)
