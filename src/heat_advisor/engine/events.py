"""Daily water-draw events.

Thermal events (sink, bath) draw hot water. Cold-fill appliances
(dishwasher, washing machine) heat their own water and only ever load the
cold mains.
"""

from __future__ import annotations

from heat_advisor.config.occupancy import LifestyleProfile
from heat_advisor.models.timeline import DemandEvent


# Typical UK household day, used when no lifestyle profile was painted.
DEFAULT_EVENTS: tuple[DemandEvent, ...] = (
    DemandEvent(kind="sink", start_min=420, end_min=435, intensity="med"),          # 07:00 wash
    DemandEvent(kind="bath", start_min=1140, end_min=1170, intensity="high"),       # 19:00 bath
    DemandEvent(kind="dishwasher", start_min=1200, end_min=1245, intensity="low"),  # 20:00
)


def generate_events_from_profile(profile: LifestyleProfile) -> list[DemandEvent]:
    """Deterministic event list for a painted lifestyle profile.

    With ``two_simultaneous_bathrooms`` a second sink draw is placed inside
    each enabled peak so the two overlap.
    """
    events: list[DemandEvent] = []

    if profile.morning_peak_enabled:
        if profile.has_bath:
            events.append(DemandEvent(kind="bath", start_min=420, end_min=450, intensity="high"))
        else:
            events.append(DemandEvent(kind="sink", start_min=420, end_min=435, intensity="med"))
        if profile.two_simultaneous_bathrooms:
            # Overlaps the 07:00 sink only between grid points; the 07:00 bath
            # shares the 07:15 point with it.
            events.append(DemandEvent(kind="sink", start_min=425, end_min=445, intensity="med"))

    if profile.evening_peak_enabled:
        if profile.has_bath:
            events.append(DemandEvent(kind="bath", start_min=1140, end_min=1170, intensity="high"))
        else:
            events.append(DemandEvent(kind="sink", start_min=1140, end_min=1155, intensity="med"))
        if profile.two_simultaneous_bathrooms:
            events.append(DemandEvent(kind="sink", start_min=1145, end_min=1165, intensity="med"))

    if profile.has_dishwasher:
        # After dinner, or at lunchtime when there is no evening peak.
        if profile.evening_peak_enabled:
            events.append(DemandEvent(kind="dishwasher", start_min=1200, end_min=1245, intensity="low"))
        else:
            events.append(DemandEvent(kind="dishwasher", start_min=780, end_min=825, intensity="low"))

    if profile.has_washing_machine:
        # Two fill pulses
        events.append(DemandEvent(kind="washing_machine", start_min=540, end_min=550, intensity="low"))
        events.append(DemandEvent(kind="washing_machine", start_min=595, end_min=605, intensity="low"))

    return events


# Hot-water flow per intensity (L/min).
DRAW_FLOW_LPM: dict[str, dict[str, float]] = {
    "bath": {"low": 6.0, "med": 9.0, "high": 12.0},
    "sink": {"low": 2.0, "med": 4.0, "high": 6.0},
}

# Cold-mains flow of the cold-fill appliances (L/min).
COLD_FILL_FLOW_LPM: dict[str, float] = {
    "dishwasher": 10.0,
    "washing_machine": 7.0,
}

WATER_CP_KJ_PER_KG_K = 4.186
DHW_TEMP_RISE_K = 35.0  # 10 °C mains → 45 °C outlet


def draw_kw(event: DemandEvent) -> float:
    """Thermal power of a hot-water draw; 0 for cold-fill appliances."""
    if not event.is_thermal:
        return 0.0
    lpm = DRAW_FLOW_LPM[event.kind][event.intensity]
    return lpm / 60 * WATER_CP_KJ_PER_KG_K * DHW_TEMP_RISE_K
