"""Room-temperature solver — one-node RC building model over the 96-point grid.

The building is a single thermal node: conductance ``UA`` to outdoors and
capacitance ``C = UA · τ``. Each 15-minute step the plant is asked for the
space heat that holds (or recovers) the setpoint plus any hot-water draw,
delivers what its rating allows, and the room temperature integrates the
net gain.

Dispatch
--------
- Heat pump: output capped at ``max_kw``; performance is the COP for the
  design flow band at the outdoor temperature.
- Boiler: below ``min_kw`` the burner cycles and loses
  ``CYCLING_PENALTY`` of efficiency, never below ``CYCLING_ETA_FLOOR``.

Hot-water state is a cylinder state of charge for stored systems and heat
pumps, and the share of the draw actually served for combis.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from heat_advisor.errors import EngineError
from heat_advisor.models.timeline import DemandEvent

logger = logging.getLogger(__name__)


POINTS = 96
STEP_MIN = 15
STEP_HOURS = STEP_MIN / 60

DESIGN_DELTA_T_C = 16.0
OUTDOOR_TEMP_C = 5.0
SETPOINT_HOME_C = 21.0
SETPOINT_AWAY_C = 17.0
HOME_FROM_MIN = 6 * 60
HOME_UNTIL_MIN = 23 * 60
RECOVERY_GAIN = 4.0
DEFAULT_TAU_HOURS = 35.0

CYLINDER_CAPACITY_KWH = 5.0

BOILER_MIN_KW = 4.0
BOILER_BASE_ETA = 0.85
CYCLING_PENALTY = 0.07
CYCLING_ETA_FLOOR = 0.60

ON_DEMAND_MAX_KW = 24.0
STORED_MAX_KW = 18.0
ASHP_SIZING_MARGIN = 1.1

# flow band °C → COP at (≤ 2 °C, ≤ 7 °C, > 7 °C) outdoors
COP_BY_FLOW_BAND: dict[int, tuple[float, float, float]] = {
    35: (3.2, 3.8, 4.5),
    45: (2.5, 3.0, 3.6),
    50: (2.1, 2.6, 3.2),
}

# Plant-side reheat rate per thermal draw, kW by intensity.
DRAW_KW: dict[str, dict[str, float]] = {
    "sink": {"low": 0.4, "med": 0.6, "high": 0.8},
    "bath": {"low": 1.2, "med": 2.0, "high": 3.0},
}


def cop(flow_band: int, outdoor_c: float) -> float:
    try:
        cold, mild, warm = COP_BY_FLOW_BAND[flow_band]
    except KeyError:
        raise EngineError(f"no COP data for flow band {flow_band} °C") from None
    if outdoor_c <= 2:
        return cold
    if outdoor_c <= 7:
        return mild
    return warm


def setpoint_schedule(home_c: float = SETPOINT_HOME_C, away_c: float = SETPOINT_AWAY_C) -> np.ndarray:
    """Home setpoint 06:00–23:00, away setpoint otherwise."""
    minutes = np.arange(POINTS) * STEP_MIN
    home = (minutes >= HOME_FROM_MIN) & (minutes < HOME_UNTIL_MIN)
    return np.where(home, home_c, away_c)


def plant_draw_kw(events: Sequence[DemandEvent]) -> np.ndarray:
    """Hot-water reheat load on the plant at each grid point.

    Overlapping thermal draws add; cold-fill appliances contribute nothing.
    """
    load = np.zeros(POINTS)
    minutes = np.arange(POINTS) * STEP_MIN
    for e in events:
        if not e.is_thermal:
            continue
        load += np.where((minutes >= e.start_min) & (minutes < e.end_min), DRAW_KW[e.kind][e.intensity], 0.0)
    return load


# ═══════════════════════════════════════════════════════════════════════════
# Inputs and outputs
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BuildingCore:
    """Thermal parameters shared by every plant compared on one day."""

    peak_heat_loss_kw: float
    tau_hours: float = DEFAULT_TAU_HOURS
    outdoor_c: float = OUTDOOR_TEMP_C
    setpoint_home_c: float = SETPOINT_HOME_C
    setpoint_away_c: float = SETPOINT_AWAY_C

    @property
    def ua_kw_per_k(self) -> float:
        return self.peak_heat_loss_kw / DESIGN_DELTA_T_C

    @property
    def capacity_kwh_per_k(self) -> float:
        return self.ua_kw_per_k * self.tau_hours


@dataclass(frozen=True)
class Plant:
    max_kw: float
    heat_pump: bool = False
    has_cylinder: bool = False
    min_kw: float = BOILER_MIN_KW
    base_eta: float = BOILER_BASE_ETA
    flow_band: int = 50


@dataclass(frozen=True)
class DayResult:
    room_temp_c: list[float]
    heat_delivered_kw: list[float]
    heat_demand_kw: list[float]
    """Space heat needed to hold or recover the setpoint."""

    efficiency: list[float]
    input_power_kw: list[float]
    dhw_state: list[float]
    """0–100: cylinder charge, or share of a combi draw served."""


def ashp_plant(peak_heat_loss_kw: float, flow_band: int) -> Plant:
    return Plant(
        max_kw=peak_heat_loss_kw * ASHP_SIZING_MARGIN,
        heat_pump=True,
        has_cylinder=True,
        flow_band=flow_band,
    )


def boiler_plant(has_cylinder: bool, base_eta: float = BOILER_BASE_ETA, max_kw: float | None = None) -> Plant:
    if max_kw is None:
        max_kw = STORED_MAX_KW if has_cylinder else ON_DEMAND_MAX_KW
    return Plant(max_kw=max_kw, has_cylinder=has_cylinder, base_eta=base_eta)


# ═══════════════════════════════════════════════════════════════════════════
# Solver
# ═══════════════════════════════════════════════════════════════════════════

def _dispatch(plant: Plant, required_kw: float, heat_pump_cop: float) -> tuple[float, float]:
    """(delivered kW, efficiency or COP) for one step."""
    if plant.heat_pump:
        return min(required_kw, plant.max_kw), heat_pump_cop
    if required_kw <= 0:
        return 0.0, plant.base_eta
    delivered = min(required_kw, plant.max_kw)
    if required_kw < plant.min_kw:
        return delivered, max(CYCLING_ETA_FLOOR, plant.base_eta - CYCLING_PENALTY)
    return delivered, plant.base_eta


def solve_day(core: BuildingCore, plant: Plant, dhw_kw: Sequence[float]) -> DayResult:
    """Step the room temperature through one day under ``plant``.

    Parameters
    ----------
    core : BuildingCore
        Peak heat loss, time constant and the day's temperatures.
    plant : Plant
        Rating and efficiency model of the heat source.
    dhw_kw : sequence of float
        Hot-water load on the plant at each of the 96 points.

    Returns
    -------
    DayResult
        Room temperature is recorded at the end of each step and starts
        from the home setpoint at midnight.
    """
    if core.peak_heat_loss_kw <= 0 or core.tau_hours <= 0:
        raise EngineError(
            f"solver needs positive heat loss and τ, got {core.peak_heat_loss_kw} kW / {core.tau_hours} h"
        )
    dhw = np.asarray(dhw_kw, dtype=float)
    if dhw.shape != (POINTS,):
        raise EngineError(f"expected {POINTS} hot-water points, got {dhw.size}")

    ua = core.ua_kw_per_k
    capacity = core.capacity_kwh_per_k
    setpoint = setpoint_schedule(core.setpoint_home_c, core.setpoint_away_c)
    hp_cop = cop(plant.flow_band, core.outdoor_c) if plant.heat_pump else 0.0

    room = np.empty(POINTS)
    delivered = np.empty(POINTS)
    demand = np.empty(POINTS)
    eta = np.empty(POINTS)
    state = np.empty(POINTS)

    temp = core.setpoint_home_c
    cylinder_kwh = CYLINDER_CAPACITY_KWH

    for i in range(POINTS):
        loss = ua * (temp - core.outdoor_c)
        recovery = max(0.0, setpoint[i] - temp) * ua * RECOVERY_GAIN
        space_kw = max(0.0, loss + recovery)
        required = space_kw + dhw[i]

        out, perf = _dispatch(plant, required, hp_cop)
        space_out = min(out, space_kw)
        temp = max(core.outdoor_c, temp + (space_out - loss) * STEP_HOURS / capacity)

        if plant.has_cylinder:
            cylinder_kwh = max(0.0, cylinder_kwh - dhw[i] * STEP_HOURS)
            cylinder_kwh = min(CYLINDER_CAPACITY_KWH, cylinder_kwh + max(0.0, out - space_out) * STEP_HOURS)
            state[i] = cylinder_kwh / CYLINDER_CAPACITY_KWH * 100
        elif dhw[i] > 0:
            state[i] = 100.0 if out >= required else min(100.0, max(0.0, out / required * 100))
        else:
            state[i] = 100.0

        room[i] = temp
        delivered[i] = out
        demand[i] = space_kw
        eta[i] = perf

    input_kw = np.divide(delivered, eta, out=np.zeros(POINTS), where=eta > 0)
    logger.debug(
        "solver: UA=%.3f kW/K C=%.1f kWh/K room %.2f–%.2f °C",
        ua, capacity, room.min(), room.max(),
    )
    return DayResult(
        room_temp_c=np.round(room, 2).tolist(),
        heat_delivered_kw=np.round(delivered, 3).tolist(),
        heat_demand_kw=np.round(demand, 3).tolist(),
        efficiency=np.round(eta, 3).tolist(),
        input_power_kw=np.round(input_kw, 3).tolist(),
        dhw_state=np.round(state, 1).tolist(),
    )
