"""Primary heating circuit — pipework, emitters and circuit condition."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


PipingTopology = Literal["two_pipe", "one_pipe", "microbore", "unknown"]


class InfrastructureConfig(BaseModel):
    """Existing primary circuit as found on survey."""

    model_config = ConfigDict(frozen=True)

    # --- Pipework ---
    primary_pipe_diameter_mm: Literal[15, 22, 28, 35] | None = Field(
        default=None,
        description="Primary flow/return pipe diameter (mm). None = not surveyed; "
                    "hydraulic checks assume 22 mm.",
    )
    piping_topology: PipingTopology = Field(
        default="unknown",
        description="Distribution layout: two-pipe, one-pipe ring, microbore, or unknown",
    )
    microbore_internal_diameter_mm: Literal[8, 10] = Field(
        default=10,
        description="Bore of microbore branch pipework (mm). Only used for microbore systems.",
    )

    # --- Emitters ---
    radiator_count: int = Field(default=0, ge=0, description="Number of radiators (0 = not counted)")
    return_water_temp_c: float = Field(
        default=60.0, ge=0, le=100,
        description="Measured or estimated primary return temperature (°C)",
    )
    supply_temp_c: float = Field(
        default=70.0, gt=0, le=100,
        description="Boiler flow temperature (°C), used for the one-pipe cascade",
    )

    # --- Condition ---
    has_magnetic_filter: bool = Field(default=False, description="Magnetic sludge filter fitted on the return")
    system_age_years: float = Field(default=0.0, ge=0, description="Age of the primary circuit (years)")
