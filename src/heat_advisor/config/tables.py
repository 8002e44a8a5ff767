"""Reference tables — read-only lookup data shared by every engine run.

Built once at import into ``DEFAULT_TABLES``. Mappings are wrapped in
``MappingProxyType`` and sequences are tuples, so a table cannot be written
after construction. Pass a different ``ReferenceTables`` to ``run_engine``
to calibrate against another dataset.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping


HardnessCategory = Literal["soft", "moderate", "hard", "very_hard"]


# ═══════════════════════════════════════════════════════════════════════════
# Water hardness by postcode area
# ═══════════════════════════════════════════════════════════════════════════

_HARD_PREFIXES = (
    "AL", "CB", "CM", "CO", "EN", "HP", "IP", "LU", "MK", "NN",
    "NR", "OX", "PE", "RG", "SG", "SL", "SO", "SP", "SS", "TN",
    "GU", "KT", "RH", "TW", "BR", "CR", "DA", "SE", "SW", "EC",
    "WC", "N", "NW", "E", "W", "HA", "UB", "IG", "RM", "SM", "WD",
    "ME", "CT", "LS", "BD", "HG", "LN", "B", "WV", "CV", "DY", "BN",
)

# Chalk aquifers: south-east, East Anglia, Chilterns.
_VERY_HARD_PREFIXES = (
    "HP", "MK", "OX", "RG", "SL", "TW", "GU", "KT",
    "ME", "CT", "TN", "DA", "AL", "LU", "NR", "IP", "CB",
)

_MODERATE_PREFIXES = ("DE", "DN", "HD", "HU", "HX", "S", "WF", "YO")

# Upland catchments: Scotland, Wales, the north-west and north-east.
_SOFT_PREFIXES = (
    "M", "SK", "OL", "BL", "WN", "PR", "BB", "LA", "FY", "CA",
    "G", "EH", "KA", "PA", "AB", "DD", "PH", "IV", "HS", "ZE", "KY", "FK", "ML", "DG", "TD", "KW",
    "CF", "SA", "LD", "SY", "LL", "NP", "HR",
    "NE", "SR", "DH", "TS", "DL",
    "PL", "TR", "EX", "TQ",
)

_HIGH_SILICA_PREFIXES = (
    "E", "EC", "N", "NW", "SE", "SW", "W", "WC",
    "BR", "CR", "DA", "EN", "HA", "IG", "KT", "RM", "SM", "TW", "UB", "WD",
    "SS", "CM", "CO",
)


def _hardness_table() -> dict[str, HardnessCategory]:
    table: dict[str, HardnessCategory] = {}
    for prefix in _SOFT_PREFIXES:
        table[prefix] = "soft"
    for prefix in _MODERATE_PREFIXES:
        table[prefix] = "moderate"
    for prefix in _HARD_PREFIXES:
        table[prefix] = "hard"
    for prefix in _VERY_HARD_PREFIXES:
        table[prefix] = "very_hard"
    return table


# ═══════════════════════════════════════════════════════════════════════════
# Boiler efficiency data
# ═══════════════════════════════════════════════════════════════════════════

# SEDBUK 2005 band letters → representative seasonal efficiency (%).
_ERP_BAND_PCT = {"A": 92.0, "B": 88.0, "C": 84.0, "D": 80.0, "E": 76.0, "F": 72.0, "G": 68.0}

# GC number (digits only) → (seasonal efficiency fraction, description).
_SEDBUK_GC = {
    "4758301": (0.91, "Worcester Bosch Greenstar 30i combi"),
}

# Band key → (seasonal efficiency fraction, description).
_SEDBUK_BANDS = {
    "non_condensing_recent": (0.76, "non-condensing, under 6 years"),
    "non_condensing_mid": (0.72, "non-condensing, 6–15 years"),
    "non_condensing_old": (0.62, "non-condensing, 16+ years"),
    "modern_condensing_recent": (0.92, "modern condensing, under 6 years"),
    "modern_condensing_mid": (0.90, "modern condensing, 6–15 years"),
    "modern_condensing_old": (0.88, "modern condensing, 16–20 years"),
    "early_condensing_old": (0.80, "early condensing, over 20 years"),
    "unknown": (0.88, "condensing status unknown, typical installed stock"),
}


# ═══════════════════════════════════════════════════════════════════════════
# Agile reference day (48 half-hour slots, p/kWh)
# ═══════════════════════════════════════════════════════════════════════════

_AGILE_DAY_PENCE = (
    8.5, 7.8, 7.2, 6.5, 4.2, 3.8, 2.9, 3.1, 3.5, 4.0, 4.8, 9.2,         # 00:00–05:30
    12.4, 15.1, 17.8, 19.2, 20.5, 21.0, 20.8, 19.5, 18.2, 17.0, 16.5, 15.8,  # 06:00–11:30
    14.5, 14.2, 14.8, 15.5, 16.8, 18.0, 19.8, 22.5, 28.4, 32.1, 35.8, 38.2,  # 12:00–17:30
    36.5, 33.0, 29.8, 26.2, 22.0, 19.5, 17.8, 16.2, 15.0, 13.8, 12.5, 11.2,  # 18:00–23:30
)


@dataclass(frozen=True)
class ReferenceTables:
    """Immutable lookup data injected into the engine."""

    hardness_by_prefix: Mapping[str, HardnessCategory] = field(
        default_factory=lambda: MappingProxyType(_hardness_table())
    )
    hardness_levels_mg_l: Mapping[HardnessCategory, tuple[float, float]] = field(
        default_factory=lambda: MappingProxyType({
            "very_hard": (300.0, 25.0),
            "hard": (200.0, 15.0),
            "moderate": (120.0, 8.0),
            "soft": (50.0, 3.0),
        })
    )
    """Category → (CaCO₃ mg/L, silica mg/L)."""

    high_silica_prefixes: frozenset[str] = field(default_factory=lambda: frozenset(_HIGH_SILICA_PREFIXES))
    erp_band_pct: Mapping[str, float] = field(default_factory=lambda: MappingProxyType(dict(_ERP_BAND_PCT)))
    sedbuk_gc: Mapping[str, tuple[float, str]] = field(default_factory=lambda: MappingProxyType(dict(_SEDBUK_GC)))
    sedbuk_bands: Mapping[str, tuple[float, str]] = field(
        default_factory=lambda: MappingProxyType(dict(_SEDBUK_BANDS))
    )
    agile_day_pence: tuple[float, ...] = _AGILE_DAY_PENCE
    default_hardness: HardnessCategory = "moderate"


DEFAULT_TABLES = ReferenceTables()
