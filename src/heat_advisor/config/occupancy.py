"""Occupancy — who lives there and how they use hot water."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


OccupancySignature = Literal["professional", "steady_home", "shift_worker"]

# Legacy spellings accepted at the boundary.
SIGNATURE_ALIASES: dict[str, OccupancySignature] = {
    "steady": "steady_home",
    "shift": "shift_worker",
}


class LifestyleProfile(BaseModel):
    """Painted daily hot-water routine.

    When supplied, the timeline uses events generated from these flags
    instead of the default household day.
    """

    model_config = ConfigDict(frozen=True)

    morning_peak_enabled: bool = Field(default=True, description="Shower/wash around 07:00")
    evening_peak_enabled: bool = Field(default=True, description="Hot-water use around 19:00")
    has_bath: bool = Field(default=False, description="Peaks are baths rather than sink/shower draws")
    has_dishwasher: bool = Field(default=False, description="Dishwasher (cold-fill) in use")
    has_washing_machine: bool = Field(default=False, description="Washing machine (cold-fill) in use")
    two_simultaneous_bathrooms: bool = Field(
        default=False,
        description="Two outlets drawing at the same time during peaks",
    )


class OccupancyConfig(BaseModel):
    """Household occupancy pattern."""

    model_config = ConfigDict(frozen=True)

    signature: OccupancySignature = Field(
        default="professional",
        description="Occupancy archetype: 'professional' (double peak), "
                    "'steady_home' (occupied all day), 'shift_worker' (offset peaks). "
                    "Legacy aliases 'steady' and 'shift' are accepted.",
    )
    occupancy_count: int | None = Field(default=None, ge=0, description="Number of occupants")
    bathroom_count: int = Field(default=1, ge=0, description="Number of bathrooms")
    high_occupancy: bool = Field(default=False, description="Household with frequent simultaneous draws")
    lifestyle: LifestyleProfile | None = Field(
        default=None,
        description="Optional painted hot-water routine; defaults used when absent",
    )

    @field_validator("signature", mode="before")
    @classmethod
    def _canonical_signature(cls, value: object) -> object:
        if isinstance(value, str):
            return SIGNATURE_ALIASES.get(value, value)
        return value
