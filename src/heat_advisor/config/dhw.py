"""Domestic hot water arrangement."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class DhwConfig(BaseModel):
    """Existing DHW architecture and space for a cylinder."""

    model_config = ConfigDict(frozen=True)

    architecture: Literal["on_demand", "stored_standard", "stored_mixergy", "unknown"] = Field(
        default="unknown",
        description="How hot water is produced today",
    )
    available_space: Literal["ok", "tight", "none", "unknown"] = Field(
        default="unknown",
        description="Space available for a cylinder",
    )
    cylinder_volume_l: float | None = Field(default=None, gt=0, description="Existing cylinder volume (L)")
