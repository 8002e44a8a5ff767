"""Incoming services — cold mains measurements."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ServicesConfig(BaseModel):
    """Mains water readings taken at the stopcock.

    All readings are optional. A dynamic reading above the static one is
    kept as-is and reported as inconsistent by the cold-water supply module.
    """

    model_config = ConfigDict(frozen=True)

    static_mains_pressure_bar: float | None = Field(default=None, ge=0, description="No-flow pressure (bar)")
    dynamic_mains_pressure_bar: float | None = Field(
        default=None, ge=0,
        description="Pressure under flow (bar). None = not recorded; "
                    "safety checks assume 1.5 bar.",
    )
    mains_dynamic_flow_lpm: float | None = Field(default=None, ge=0, description="Flow at the dynamic pressure (L/min)")
    cold_water_source: Literal["mains_true", "mains_shared", "loft_tank", "unknown"] = Field(
        default="unknown",
        description="Where the cold supply comes from",
    )
