"""Current heat source — and, optionally, the boiler data plate."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


BoilerType = Literal["combi", "system", "regular", "back_boiler", "unknown"]
HeatSourceType = Literal["combi", "system", "regular", "ashp", "other", "unknown"]


class BoilerConfig(BaseModel):
    """Boiler data plate. When present, SEDBUK lookup, sizing and the
    efficiency model run."""

    model_config = ConfigDict(frozen=True)

    gc_number: str | None = Field(default=None, description="Gas Council number from the data plate")
    age_years: float | None = Field(default=None, description="Approximate boiler age (years)")
    type: BoilerType = Field(default="unknown", description="Boiler type")
    condensing: Literal["yes", "no", "unknown"] = Field(default="unknown", description="Condensing appliance")
    nominal_output_kw: float | None = Field(default=None, gt=0, description="Rated output (kW)")
    sedbuk_pct: float | None = Field(default=None, gt=0, le=100, description="SEDBUK / ErP seasonal efficiency (%)")
    erp_class: Literal["A", "B", "C", "D", "E", "F", "G"] | None = Field(
        default=None,
        description="ErP / SEDBUK band letter, used when no percentage is known",
    )


class CurrentSystemConfig(BaseModel):
    """What is installed today."""

    model_config = ConfigDict(frozen=True)

    heat_source_type: HeatSourceType = Field(default="unknown", description="Current heat source")
    boiler: BoilerConfig | None = Field(default=None, description="Optional boiler details")
