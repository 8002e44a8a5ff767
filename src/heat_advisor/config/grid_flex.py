"""Optional grid-flexibility inputs (agile tariff load shifting)."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class GridFlexConfig(BaseModel):
    """Tariff and storage facts for demand-side response estimates."""

    model_config = ConfigDict(frozen=True)

    tank_type: Literal["combi", "mixergy", "standard"] = Field(default="standard", description="DHW store type")
    dhw_annual_kwh: float = Field(default=0.0, ge=0, description="Annual DHW energy (kWh)")
    mixergy_solar_x: bool = Field(default=False, description="Mixergy Solar X diverter fitted")
    tank_volume_l: float | None = Field(default=None, gt=0, description="Tank volume (L)")
    cylinder_capacity_kwh: float = Field(default=0.0, ge=0, description="Usable store per day (kWh); 0 = uncapped")
    annual_solar_surplus_kwh: float | None = Field(default=None, ge=0, description="Exported PV surplus (kWh/yr)")
    provider: Literal["octopus", "british_gas", "other"] = Field(default="other", description="Energy supplier")
    agile_prices_pence: tuple[float, ...] | None = Field(
        default=None,
        description="Half-hourly prices (p/kWh). None = reference agile day.",
    )
