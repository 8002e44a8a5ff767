"""Boiler efficiency model — decay-adjusted, load-dependent.

Builds a time-varying efficiency curve for the installed boiler rather than
a single scalar:

  1. Baseline %   GC match → surveyed SEDBUK % → ErP class → SEDBUK band → 92 %
  2. Age decay    nominal × (1 − age factor); ages outside 0–100 are ignored
  3. Oversize     combi only: +3 / +6 / +9 points for mild / over / aggressive
  4. Tail-off     +2 points wherever demand sits under 20 % of rated output

Every value passes through ``efficiency.clamp_pct`` (50–99 %).
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from heat_advisor.config.current_system import BoilerConfig
from heat_advisor.config.tables import DEFAULT_TABLES, ReferenceTables
from heat_advisor.engine.efficiency import (
    DEFAULT_NOMINAL_EFFICIENCY_PCT,
    clamp_pct,
    compute_current_efficiency_pct,
    load_penalty_pct,
    resolve_nominal_efficiency_pct,
)
from heat_advisor.errors import EngineError
from heat_advisor.models.results import BoilerEfficiencyResult, BoilerSizingResult, SedbukResult


MAX_PLAUSIBLE_BOILER_AGE = 100.0

_OVERSIZE_PENALTY_PCT = {
    "well_matched": 0.0,
    "mild_oversize": 3.0,
    "oversized": 6.0,
    "aggressive": 9.0,
}


def age_factor(age_years: float | None) -> float:
    """Piecewise age multiplier on the baseline efficiency."""
    age = age_years or 0.0
    if age <= 5:
        return 1.00
    if age <= 10:
        return 0.97
    if age <= 15:
        return 0.94
    if age <= 20:
        return 0.91
    return 0.88


def efficiency_series_pct(
    nominal_pct: float,
    decay_pct: float,
    demand_kw_96: Sequence[float],
    nominal_kw: float,
) -> list[float]:
    """Per-point efficiency (%) with SEDBUK low-load tail-off.

    Parameters
    ----------
    nominal_pct : float
        Baseline seasonal efficiency (%).
    decay_pct : float
        Points lost to age and sizing. Negative values are an uplift.
    demand_kw_96 : sequence of float
        Space-heating demand on the 96-point grid (kW).
    nominal_kw : float
        Rated boiler output (kW). Must be positive.

    Returns
    -------
    list[float]
        96 values, each within the shared 50–99 % clamp.
    """
    fractions = np.asarray(demand_kw_96, dtype=np.float64) / nominal_kw
    base = nominal_pct - decay_pct
    return [clamp_pct(base - load_penalty_pct(float(f))) for f in fractions]


def _baseline(
    boiler: BoilerConfig,
    sedbuk: SedbukResult,
    tables: ReferenceTables,
) -> tuple[float, str]:
    if sedbuk.source == "gc_lookup" and sedbuk.seasonal_efficiency is not None:
        return sedbuk.seasonal_efficiency * 100, "SEDBUK database (GC number match)"
    if boiler.sedbuk_pct is not None:
        return boiler.sedbuk_pct, "ErP / SEDBUK % entered by surveyor"
    if boiler.erp_class is not None and boiler.erp_class in tables.erp_band_pct:
        return tables.erp_band_pct[boiler.erp_class], f"ErP class {boiler.erp_class} label"
    if sedbuk.seasonal_efficiency is not None:
        return sedbuk.seasonal_efficiency * 100, "SEDBUK band estimate (condensing + age)"
    return DEFAULT_NOMINAL_EFFICIENCY_PCT, "industry fallback (no boiler data)"


def build_boiler_efficiency_model(
    boiler: BoilerConfig | None,
    sizing: BoilerSizingResult,
    sedbuk: SedbukResult,
    demand_kw_96: Sequence[float],
    tables: ReferenceTables = DEFAULT_TABLES,
) -> BoilerEfficiencyResult:
    if boiler is None:
        raise EngineError("Boiler efficiency model requires current_system.boiler")

    # ── 1. Baseline ────────────────────────────────────────────────────
    baseline_pct, baseline_source = _baseline(boiler, sedbuk, tables)
    nominal_pct = resolve_nominal_efficiency_pct(baseline_pct)

    # ── 2. Age ─────────────────────────────────────────────────────────
    age = boiler.age_years
    unrealistic = age is not None and (age < 0 or age > MAX_PLAUSIBLE_BOILER_AGE)
    factor = age_factor(None if unrealistic else age)
    age_decay = nominal_pct * (1 - factor)
    notes: list[str] = []
    if unrealistic:
        notes.append(
            f"Boiler age input ({age:g} years) is unrealistic; treated as unknown. "
            f"Age decay not applied. Check survey data."
        )
    else:
        shown = "unknown" if age is None else f"{age:g}"
        notes.append(f"Age degradation factor {factor:.2f} applied from boiler age ({shown} years).")

    # ── 3. Oversize (combi cycling) ────────────────────────────────────
    oversize = _OVERSIZE_PENALTY_PCT[sizing.sizing_band] if boiler.type == "combi" else 0.0
    if boiler.type == "combi":
        if sizing.oversize_ratio is None:
            notes.append("Peak heat loss unknown; oversize penalty not applied.")
        else:
            notes.append(f"Oversize ratio {sizing.oversize_ratio:.2f}x ({sizing.sizing_band}): -{oversize:g} points.")

    decay_pct = age_decay + oversize

    # ── 4. Load-dependent series ───────────────────────────────────────
    series = efficiency_series_pct(nominal_pct, decay_pct, demand_kw_96, sizing.nominal_kw)

    notes += [
        "Modelled estimate (not measured).",
        f"Baseline efficiency source: {baseline_source}.",
        "In-home efficiency is inferred from SEDBUK baseline, age and sizing assumptions.",
    ]

    return BoilerEfficiencyResult(
        baseline_pct=baseline_pct,
        baseline_source=baseline_source,
        nominal_pct=nominal_pct,
        age_factor=factor,
        age_is_unrealistic=unrealistic,
        oversize_penalty_pct=oversize,
        decay_pct=round(decay_pct, 4),
        age_adjusted_pct=compute_current_efficiency_pct(nominal_pct, age_decay),
        in_home_pct=compute_current_efficiency_pct(nominal_pct, decay_pct),
        nominal_output_kw=sizing.nominal_kw,
        efficiency_pct_96=series,
        notes=notes,
    )
