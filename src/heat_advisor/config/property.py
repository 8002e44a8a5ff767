"""Property facts — location, heat loss and building fabric."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class BuildingFabric(BaseModel):
    """Optional fabric description. When present, the fabric model runs.

    Every field accepts ``"unknown"`` — the fabric model substitutes an
    average score for unknown elements rather than failing.
    """

    model_config = ConfigDict(frozen=True)

    wall_type: Literal["solid_masonry", "cavity_unfilled", "cavity_filled", "timber_frame", "unknown"] = "unknown"
    insulation_level: Literal["poor", "moderate", "good", "exceptional", "unknown"] = "unknown"
    glazing: Literal["single", "double", "triple", "unknown"] = "unknown"
    roof_insulation: Literal["poor", "moderate", "good", "unknown"] = "unknown"
    air_tightness: Literal["leaky", "average", "tight", "passive", "unknown"] = "unknown"
    thermal_mass: Literal["light", "medium", "heavy", "unknown"] = "unknown"


class PropertyConfig(BaseModel):
    """The dwelling itself."""

    model_config = ConfigDict(frozen=True)

    postcode: str = Field(default="", description="Full or outward postcode; drives water hardness")
    heat_loss_kw: float | None = Field(
        default=None, gt=0,
        description="Peak design heat loss (kW). None = not calculated; "
                    "8 kW is assumed and surfaced as an assumption.",
    )
    bedrooms: int | None = Field(default=None, ge=0, description="Bedroom count")
    has_loft_conversion: bool = Field(
        default=False,
        description="Loft converted — removes the head height needed by a vented F&E tank",
    )
    building: BuildingFabric | None = Field(
        default=None,
        description="Optional fabric description; gates the fabric model",
    )
