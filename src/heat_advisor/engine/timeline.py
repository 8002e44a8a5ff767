"""24-hour timeline — 96 points at 15-minute resolution.

Pipeline
--------
1. Time axis        ``0, 15, … 1425``
2. Demand           hourly lifestyle demand → 96 points (wrap-around lerp)
3. Events           default household day, or generated from the profile
4. Series           one per compared system, built by its archetype
5. Room model       RC solver per series, when the surveyed heat loss is known
6. Bands            ``sh_on`` / ``dhw_on`` runs
7. Legend           confidence badge, performance and schedule notes

Cold-fill appliances only ever reach ``cold_flow_lpm``. Demand, delivered
heat and efficiency are computed without looking at them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

import numpy as np

from heat_advisor.config.survey import SurveyInput, TimelineSystemId
from heat_advisor.config.tables import DEFAULT_TABLES, ReferenceTables
from heat_advisor.engine.assumptions import CONFIDENCE_BADGE, build_assumptions
from heat_advisor.engine.boiler_efficiency import efficiency_series_pct
from heat_advisor.engine.efficiency import compute_current_efficiency_pct, resolve_nominal_efficiency_pct
from heat_advisor.engine.events import (
    COLD_FILL_FLOW_LPM,
    DEFAULT_EVENTS,
    draw_kw,
    generate_events_from_profile,
)
from heat_advisor.engine.normalizer import peak_heat_loss_kw
from heat_advisor.engine.solver import (
    DEFAULT_TAU_HOURS,
    BuildingCore,
    Plant,
    ashp_plant,
    boiler_plant,
    plant_draw_kw,
    solve_day,
)
from heat_advisor.errors import EngineError
from heat_advisor.models.results import BoilerEfficiencyResult, NormalizedFacts, SedbukResult
from heat_advisor.models.timeline import (
    Band,
    DemandEvent,
    DhwEventEntry,
    PhysicsDebug,
    Series,
    TimelinePayload,
)

logger = logging.getLogger(__name__)


POINTS = 96
STEP_MIN = 15
TIME_MINUTES = np.arange(POINTS) * STEP_MIN

SH_ON_FRACTION = 0.25

DEFAULT_COMBI_NOMINAL_KW = 24.0
STORED_BASE_ETA = 0.88
COMBI_DRAW_ETA_DROP = 0.05
COMBI_DRAW_ETA_FLOOR = 0.55

ASHP_COP_BY_FLOW_BAND: dict[int, float] = {35: 3.8, 45: 3.0, 50: 2.6}


def resample_hourly_demand(hourly_kw: Sequence[float]) -> list[float]:
    """Interpolate 24 hourly values onto the 96-point grid.

    Hour 23 interpolates toward hour 0. Points on an hour boundary return
    the hourly value unchanged.
    """
    d = np.asarray(hourly_kw, dtype=float)
    if d.shape != (24,):
        raise EngineError(f"expected 24 hourly demand values, got {d.size}")

    hour = (TIME_MINUTES // 60) % 24
    next_hour = (hour + 1) % 24
    frac = (TIME_MINUTES % 60) / 60
    return np.maximum(0.0, d[hour] + (d[next_hour] - d[hour]) * frac).tolist()


# ═══════════════════════════════════════════════════════════════════════════
# Shared grid
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TimelineGrid:
    """Everything the archetype builders share for one day."""

    demand_kw: np.ndarray
    events: tuple[DemandEvent, ...]
    dhw_total_kw: np.ndarray
    dhw_events_active: list[list[DhwEventEntry]]
    design_flow_band: int

    @property
    def dhw_active(self) -> np.ndarray:
        return self.dhw_total_kw > 0

    @property
    def demand_fraction(self) -> np.ndarray:
        peak = float(self.demand_kw.max())
        return self.demand_kw / (peak or 1.0)


def _active_matrix(events: Sequence[DemandEvent]) -> np.ndarray:
    """(points × events) boolean: event active at each grid minute."""
    if not events:
        return np.zeros((POINTS, 0), dtype=bool)
    starts = np.array([e.start_min for e in events])
    ends = np.array([e.end_min for e in events])
    minutes = TIME_MINUTES[:, None]
    return (minutes >= starts) & (minutes < ends)


def build_grid(
    demand_kw_96: Sequence[float],
    events: Sequence[DemandEvent],
    design_flow_band: int,
) -> TimelineGrid:
    demand = np.asarray(demand_kw_96, dtype=float)
    if demand.shape != (POINTS,):
        raise EngineError(f"expected {POINTS} demand points, got {demand.size}")

    thermal = [e for e in events if e.is_thermal]
    draws = np.array([draw_kw(e) for e in thermal])
    active = _active_matrix(thermal)

    dhw_total = np.round(active @ draws, 3) if thermal else np.zeros(POINTS)
    entries = [
        [
            DhwEventEntry(kind=e.kind, draw_kw=round(float(kw), 3), start_min=e.start_min, end_min=e.end_min)
            for e, kw, on in zip(thermal, draws, row) if on
        ]
        for row in active
    ]

    return TimelineGrid(
        demand_kw=demand,
        events=tuple(events),
        dhw_total_kw=dhw_total,
        dhw_events_active=entries,
        design_flow_band=design_flow_band,
    )


def cold_flow_lpm(events: Sequence[DemandEvent]) -> list[float] | None:
    """Cold-mains flow from cold-fill appliances, or None when there are none.

    An appliance covers grid indices ``floor(start/15)`` to
    ``ceil(end/15) - 1``; overlapping appliances take the larger flow.
    """
    cold = [e for e in events if not e.is_thermal]
    if not cold:
        return None

    flow = np.zeros(POINTS)
    for e in cold:
        lo = e.start_min // STEP_MIN
        hi = min(POINTS, math.ceil(e.end_min / STEP_MIN))
        flow[lo:hi] = np.maximum(flow[lo:hi], COLD_FILL_FLOW_LPM[e.kind])
    return flow.tolist()


# ═══════════════════════════════════════════════════════════════════════════
# Archetypes
# ═══════════════════════════════════════════════════════════════════════════

class SeriesKind(str, Enum):
    COMBI = "combi"
    STORED_VENTED = "stored_vented"
    STORED_UNVENTED = "stored_unvented"
    ASHP = "ashp"


def _series(
    series_id: str,
    label: str,
    grid: TimelineGrid,
    performance_kind: str,
    delivered: np.ndarray,
    performance: np.ndarray,
    perf_decimals: int,
    comfort: np.ndarray,
    outlet: np.ndarray,
) -> Series:
    return Series(
        id=series_id,
        label=label,
        performance_kind=performance_kind,
        heat_delivered_kw=np.round(delivered, 3).tolist(),
        efficiency=np.round(performance, perf_decimals).tolist(),
        comfort_temp_c=np.round(comfort, 1).tolist(),
        dhw_outlet_temp_c=outlet.astype(float).tolist(),
        dhw_total_kw=grid.dhw_total_kw.tolist(),
        dhw_events_active=grid.dhw_events_active,
    )


def _combi(series_id: str, label: str, grid: TimelineGrid, eta: np.ndarray | None) -> Series:
    if eta is None:
        raise EngineError("combi series needs an efficiency curve")
    active = grid.dhw_active
    eta = np.where(active, np.maximum(COMBI_DRAW_ETA_FLOOR, eta - COMBI_DRAW_ETA_DROP), eta)
    comfort = 18 + grid.demand_fraction * 4
    outlet = np.where(active, 42, 50)
    return _series(series_id, label, grid, "eta", grid.demand_kw * eta, eta, 3, comfort, outlet)


def _stored(unvented: bool) -> Callable[..., Series]:
    draw_c, idle_c = (57, 62) if unvented else (53, 58)

    def build(series_id: str, label: str, grid: TimelineGrid, eta: np.ndarray | None) -> Series:
        if eta is None:
            eta = np.full(POINTS, STORED_BASE_ETA)
        comfort = 19 + np.where(grid.demand_fraction > 0.6, 1.5, 0.0)
        outlet = np.where(grid.dhw_active, draw_c, idle_c)
        return _series(series_id, label, grid, "eta", grid.demand_kw * eta, eta, 3, comfort, outlet)

    return build


def _ashp(series_id: str, label: str, grid: TimelineGrid, eta: np.ndarray | None) -> Series:
    # Output tracks demand; performance is a flat COP for the design flow band.
    cop = np.full(POINTS, ASHP_COP_BY_FLOW_BAND[grid.design_flow_band])
    comfort = 19.5 + np.sin(np.arange(POINTS) / POINTS * np.pi) * 0.5
    outlet = np.full(POINTS, 55)
    return _series(series_id, label, grid, "cop", grid.demand_kw.copy(), cop, 2, comfort, outlet)


_BUILDERS: dict[SeriesKind, Callable[..., Series]] = {
    SeriesKind.COMBI: _combi,
    SeriesKind.STORED_VENTED: _stored(unvented=False),
    SeriesKind.STORED_UNVENTED: _stored(unvented=True),
    SeriesKind.ASHP: _ashp,
}


def compute_series(
    kind: SeriesKind,
    grid: TimelineGrid,
    series_id: str,
    label: str,
    eta: Sequence[float] | None = None,
) -> Series:
    """Build one series. ``eta`` is a 96-point efficiency fraction curve;
    required for combi, optional for stored, ignored for heat pumps."""
    curve = None if eta is None else np.asarray(eta, dtype=float)
    return _BUILDERS[kind](series_id, label, grid, curve)


# ═══════════════════════════════════════════════════════════════════════════
# System ids
# ═══════════════════════════════════════════════════════════════════════════

_KIND_BY_ID: dict[str, SeriesKind] = {
    "on_demand": SeriesKind.COMBI,
    "stored_vented": SeriesKind.STORED_VENTED,
    "stored_unvented": SeriesKind.STORED_UNVENTED,
    "ashp": SeriesKind.ASHP,
    "regular_vented": SeriesKind.STORED_VENTED,
    "system_unvented": SeriesKind.STORED_UNVENTED,
}

_LABELS: dict[str, str] = {
    "on_demand": "Combi Boiler",
    "stored_vented": "Stored — Vented Cylinder",
    "stored_unvented": "Stored — Unvented Cylinder",
    "ashp": "Air Source Heat Pump",
    "regular_vented": "Regular Vented Boiler",
    "system_unvented": "System Unvented Boiler",
}

_CURRENT_LABELS: dict[SeriesKind, str] = {
    SeriesKind.COMBI: "Current Combi Boiler",
    SeriesKind.STORED_VENTED: "Current Stored System",
    SeriesKind.ASHP: "Current Heat Pump",
}


def current_kind(survey: SurveyInput) -> SeriesKind:
    source = survey.current_system.heat_source_type
    if source == "ashp":
        return SeriesKind.ASHP
    if source in ("system", "regular"):
        return SeriesKind.STORED_VENTED
    return SeriesKind.COMBI


def _resolve(system_id: str, survey: SurveyInput) -> tuple[SeriesKind, str]:
    if system_id == "current":
        kind = current_kind(survey)
        return kind, _CURRENT_LABELS[kind]
    try:
        return _KIND_BY_ID[system_id], _LABELS[system_id]
    except KeyError:
        raise EngineError(f"unknown timeline system id: {system_id!r}") from None


def _eta_curve(
    system_id: str,
    kind: SeriesKind,
    survey: SurveyInput,
    facts: NormalizedFacts,
    demand_kw_96: Sequence[float],
    boiler_efficiency: BoilerEfficiencyResult | None,
) -> list[float] | None:
    """Efficiency fractions for a combustion series, or None for the
    stored-cylinder default."""
    if kind is SeriesKind.ASHP:
        return None

    if system_id == "current" and boiler_efficiency is not None:
        if kind is SeriesKind.COMBI:
            return [pct / 100 for pct in boiler_efficiency.efficiency_pct_96]
        return [boiler_efficiency.age_adjusted_pct / 100] * POINTS

    if kind is SeriesKind.COMBI:
        boiler = survey.current_system.boiler
        nominal = resolve_nominal_efficiency_pct(boiler.sedbuk_pct if boiler is not None else None)
        pct = efficiency_series_pct(
            nominal, facts.ten_year_efficiency_decay_pct, demand_kw_96, DEFAULT_COMBI_NOMINAL_KW,
        )
        return [p / 100 for p in pct]
    return None


# ═══════════════════════════════════════════════════════════════════════════
# Room model
# ═══════════════════════════════════════════════════════════════════════════

def _plant(
    kind: SeriesKind,
    grid: TimelineGrid,
    eta: Sequence[float] | None,
    peak_kw: float,
    nominal_kw: float | None,
) -> Plant:
    if kind is SeriesKind.ASHP:
        return ashp_plant(peak_kw, grid.design_flow_band)
    base_eta = float(np.mean(eta)) if eta is not None else STORED_BASE_ETA
    return boiler_plant(kind is not SeriesKind.COMBI, base_eta, nominal_kw)


def with_room_model(
    series: Series,
    kind: SeriesKind,
    grid: TimelineGrid,
    core: BuildingCore,
    eta: Sequence[float] | None = None,
    nominal_kw: float | None = None,
) -> Series:
    """Attach room temperature, input power, DHW state and heat demand."""
    day = solve_day(core, _plant(kind, grid, eta, core.peak_heat_loss_kw, nominal_kw), plant_draw_kw(grid.events))
    return Series(**{
        **dict(series),
        "room_temp_c": day.room_temp_c,
        "input_power_kw": day.input_power_kw,
        "dhw_state": day.dhw_state,
        "heat_demand_kw": day.heat_demand_kw,
    })


def _erp_class(survey: SurveyInput, nominal_pct: float, tables: ReferenceTables) -> str | None:
    boiler = survey.current_system.boiler
    if boiler is not None and boiler.erp_class is not None:
        return boiler.erp_class
    for label, pct in sorted(tables.erp_band_pct.items(), key=lambda kv: -kv[1]):
        if nominal_pct >= pct:
            return label
    return None


def physics_debug(
    survey: SurveyInput,
    facts: NormalizedFacts,
    sedbuk: SedbukResult | None,
    tables: ReferenceTables = DEFAULT_TABLES,
) -> PhysicsDebug:
    boiler = survey.current_system.boiler
    nominal = resolve_nominal_efficiency_pct(boiler.sedbuk_pct if boiler is not None else None)
    decay = facts.ten_year_efficiency_decay_pct
    return PhysicsDebug(
        erp_class=_erp_class(survey, nominal, tables),
        nominal_efficiency_pct=nominal,
        ten_year_decay_pct=decay,
        current_efficiency_pct=compute_current_efficiency_pct(nominal, decay),
        sedbuk_source=sedbuk.source if sedbuk is not None else None,
        timeline_points=POINTS,
    )


# ═══════════════════════════════════════════════════════════════════════════
# Bands and legend
# ═══════════════════════════════════════════════════════════════════════════

def _runs(mask: np.ndarray) -> list[tuple[int, int]]:
    """Maximal True runs as (first index, index after last)."""
    padded = np.concatenate(([0], mask.astype(np.int8), [0]))
    edges = np.flatnonzero(np.diff(padded))
    return [(int(a), int(b)) for a, b in zip(edges[::2], edges[1::2])]


def extract_bands(demand_kw: np.ndarray, threshold_kw: float, series: Sequence[Series]) -> list[Band]:
    bands = [
        Band(kind="sh_on", start_min=a * STEP_MIN, end_min=b * STEP_MIN)
        for a, b in _runs(demand_kw > threshold_kw)
    ]
    for s in series:
        bands += [
            Band(kind="dhw_on", start_min=a * STEP_MIN, end_min=b * STEP_MIN, series_id=s.id)
            for a, b in _runs(np.asarray(s.dhw_total_kw) > 0)
        ]
    return bands


def _legend(
    survey: SurveyInput,
    has_cold_flow: bool,
    boiler_efficiency: BoilerEfficiencyResult | None,
    tables: ReferenceTables,
) -> list[str]:
    _, confidence = build_assumptions(survey, tables)
    notes = [
        CONFIDENCE_BADGE[confidence.level],
        "Performance: η (efficiency fraction) for boilers; COP for ASHP.",
        "DHW events: shaded bands indicate hot-water draw periods.",
    ]
    if has_cold_flow:
        notes.append("Dishwasher / washing machine: cold-fill only — no DHW thermal load.")
    if boiler_efficiency is not None:
        notes.append(
            f"Current boiler baseline: {boiler_efficiency.baseline_pct:.0f}% "
            f"({boiler_efficiency.baseline_source}), in-home {boiler_efficiency.in_home_pct:.0f}%."
        )
        notes.append("Boiler efficiency is modelled, not measured; cycling losses rise at low load.")
    if survey.occupancy.lifestyle is not None:
        notes.append("DHW schedule: derived from your lifestyle profile (morning/evening peaks).")
    else:
        notes.append("DHW schedule: typical UK household defaults (no user profile provided).")
    return notes


# ═══════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════

def build_timeline(
    survey: SurveyInput,
    demand_kw_96: Sequence[float],
    system_ids: Sequence[TimelineSystemId],
    *,
    facts: NormalizedFacts,
    design_flow_band: int,
    boiler_efficiency: BoilerEfficiencyResult | None = None,
    tables: ReferenceTables = DEFAULT_TABLES,
    tau_hours: float | None = None,
    sedbuk: SedbukResult | None = None,
    debug: bool = False,
) -> TimelinePayload:
    """Simulate one day for each requested system.

    Parameters
    ----------
    survey : SurveyInput
        Source of the lifestyle profile and current heat source.
    demand_kw_96 : sequence of float
        Space-heating demand already resampled to the grid.
    system_ids : sequence of str
        Systems to compare, usually two.
    facts : NormalizedFacts
        Supplies scale decay for the default combi curve.
    design_flow_band : int
        Heat-pump design flow temperature (35 / 45 / 50 °C).
    boiler_efficiency : BoilerEfficiencyResult, optional
        Installed boiler model; drives the ``current`` series when present.
    tables : ReferenceTables
        Reference data for the confidence badge and the debug ErP class.
    tau_hours : float, optional
        Building time constant from the fabric model; 35 h when unknown.
    sedbuk : SedbukResult, optional
        Reported in the debug block.
    debug : bool
        Attach ``physics_debug`` to the payload.

    Returns
    -------
    TimelinePayload
    """
    # ── 1. Events ──────────────────────────────────────────────────────
    profile = survey.occupancy.lifestyle
    events = list(DEFAULT_EVENTS) if profile is None else generate_events_from_profile(profile)

    # ── 2. Series ──────────────────────────────────────────────────────
    grid = build_grid(demand_kw_96, events, design_flow_band)
    core = None
    if survey.property.heat_loss_kw is not None:
        core = BuildingCore(
            peak_heat_loss_kw=peak_heat_loss_kw(survey),
            tau_hours=tau_hours or DEFAULT_TAU_HOURS,
        )

    series: list[Series] = []
    for system_id in system_ids:
        kind, label = _resolve(system_id, survey)
        eta = _eta_curve(system_id, kind, survey, facts, demand_kw_96, boiler_efficiency)
        s = compute_series(kind, grid, system_id, label, eta)
        # ── 3. Room model ──────────────────────────────────────────────
        if core is not None and core.peak_heat_loss_kw > 0:
            nominal_kw = None
            if system_id == "current" and boiler_efficiency is not None:
                nominal_kw = boiler_efficiency.nominal_output_kw
            s = with_room_model(s, kind, grid, core, eta, nominal_kw)
        series.append(s)

    # ── 4. Bands, cold flow, legend ────────────────────────────────────
    bands = extract_bands(grid.demand_kw, SH_ON_FRACTION * peak_heat_loss_kw(survey), series)
    cold = cold_flow_lpm(events)
    logger.debug("timeline %s: %d events, %d bands", list(system_ids), len(events), len(bands))

    return TimelinePayload(
        time_minutes=TIME_MINUTES.tolist(),
        demand_heat_kw=grid.demand_kw.tolist(),
        series=series,
        events=events,
        bands=bands,
        cold_flow_lpm=cold,
        legend_notes=_legend(survey, cold is not None, boiler_efficiency, tables),
        uses_lifestyle_profile=profile is not None,
        physics_debug=physics_debug(survey, facts, sedbuk, tables) if debug else None,
    )
