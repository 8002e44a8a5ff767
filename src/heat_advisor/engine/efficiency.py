"""Shared efficiency primitives.

Every efficiency percentage the engine produces passes through
``clamp_pct``, so no result can sit below the 50 % floor or above the
99 % ceiling regardless of how much decay (or negative-decay uplift) is
applied.
"""

from __future__ import annotations

EFFICIENCY_FLOOR_PCT = 50.0
EFFICIENCY_CEILING_PCT = 99.0
DEFAULT_NOMINAL_EFFICIENCY_PCT = 92.0

# SEDBUK tail-off: below 20 % of rated output the boiler short-cycles.
LOW_LOAD_FRACTION = 0.2
LOW_LOAD_PENALTY_PCT = 2.0


def clamp_pct(value: float, lo: float = EFFICIENCY_FLOOR_PCT, hi: float = EFFICIENCY_CEILING_PCT) -> float:
    return min(hi, max(lo, value))


def resolve_nominal_efficiency_pct(sedbuk_pct: float | None = None) -> float:
    """Surveyed SEDBUK % or the 92 % fallback, clamped."""
    return clamp_pct(DEFAULT_NOMINAL_EFFICIENCY_PCT if sedbuk_pct is None else sedbuk_pct)


def compute_current_efficiency_pct(nominal_pct: float, decay_pct: float) -> float:
    """Nominal minus decay, clamped. Negative decay is an uplift."""
    return clamp_pct(nominal_pct - decay_pct)


def load_penalty_pct(demand_fraction: float) -> float:
    """Cycling loss at a given fraction of rated output.

    Zero when the boiler is off (fraction ≤ 0) or running above the
    low-load threshold.
    """
    if 0.0 < demand_fraction < LOW_LOAD_FRACTION:
        return LOW_LOAD_PENALTY_PCT
    return 0.0
