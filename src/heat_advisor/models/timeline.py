"""Timeline types — the 96-point, 15-minute simulation payload."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator


EventKind = Literal["sink", "bath", "dishwasher", "washing_machine"]
Intensity = Literal["low", "med", "high"]

THERMAL_KINDS: frozenset[str] = frozenset({"sink", "bath"})
COLD_FILL_KINDS: frozenset[str] = frozenset({"dishwasher", "washing_machine"})


class DemandEvent(BaseModel):
    """One water draw during the day, in minutes from midnight."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    start_min: int
    end_min: int
    intensity: Intensity

    @model_validator(mode="after")
    def _check_window(self) -> DemandEvent:
        if self.end_min <= self.start_min:
            raise ValueError(
                f"event end_min ({self.end_min}) must be after start_min ({self.start_min})"
            )
        return self

    @property
    def is_thermal(self) -> bool:
        """Draws hot water (sink, bath). Cold-fill appliances never are."""
        return self.kind in THERMAL_KINDS

    def is_active(self, minute: int) -> bool:
        return self.start_min <= minute < self.end_min


class DhwEventEntry(BaseModel):
    """A thermal event active at one grid point, with its own draw."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    draw_kw: float
    start_min: int
    end_min: int


class Series(BaseModel):
    """Performance of one system archetype across the day."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    performance_kind: Literal["eta", "cop"]
    """``eta`` (≤ 1) for combustion systems, ``cop`` (> 1) for heat pumps."""

    heat_delivered_kw: list[float]
    efficiency: list[float]
    comfort_temp_c: list[float]
    dhw_outlet_temp_c: list[float]
    dhw_total_kw: list[float]
    """Sum of every thermal draw active at each point."""

    dhw_events_active: list[list[DhwEventEntry]]

    # Room model, present only when the surveyed heat loss is known.
    room_temp_c: list[float] | None = None
    input_power_kw: list[float] | None = None
    dhw_state: list[float] | None = None
    """0–100: cylinder charge for stored systems, share of the draw served for combis."""

    heat_demand_kw: list[float] | None = None

    @model_validator(mode="after")
    def _check_lengths(self) -> Series:
        n = len(self.heat_delivered_kw)
        for name in ("room_temp_c", "input_power_kw", "dhw_state", "heat_demand_kw"):
            values = getattr(self, name)
            if values is not None and len(values) != n:
                raise ValueError(f"{name} has {len(values)} points, expected {n}")
        return self


class Band(BaseModel):
    """Contiguous interval during which a condition holds."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["sh_on", "dhw_on"]
    start_min: int
    end_min: int
    series_id: str | None = None
    """Set for ``dhw_on`` bands; ``sh_on`` bands are shared by all series."""


class PhysicsDebug(BaseModel):
    """Efficiency inputs behind the current-system series."""

    model_config = ConfigDict(frozen=True)

    erp_class: str | None = None
    nominal_efficiency_pct: float
    ten_year_decay_pct: float
    current_efficiency_pct: float
    sedbuk_source: str | None = None
    timeline_points: int


class TimelinePayload(BaseModel):
    """Complete 24h simulation output."""

    model_config = ConfigDict(frozen=True)

    time_minutes: list[int]
    demand_heat_kw: list[float]
    series: list[Series]
    events: list[DemandEvent]
    bands: list[Band]
    cold_flow_lpm: list[float] | None = None
    """Only present when a cold-fill appliance is modelled somewhere in the day."""

    legend_notes: list[str]
    uses_lifestyle_profile: bool
    physics_debug: PhysicsDebug | None = None
