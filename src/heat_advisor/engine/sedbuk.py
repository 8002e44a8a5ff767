"""SEDBUK seasonal efficiency: GC number lookup, else a band inferred from
condensing status and age."""

from __future__ import annotations

import logging
import re

from heat_advisor.config.current_system import BoilerConfig
from heat_advisor.config.tables import DEFAULT_TABLES, ReferenceTables
from heat_advisor.errors import EngineError
from heat_advisor.models.results import SedbukResult

logger = logging.getLogger(__name__)

# Pre-2005 condensing stock, as of the mid-2020s.
EARLY_CONDENSING_AGE_YEARS = 20

_NON_DIGITS = re.compile(r"\D")


def format_gc_number(gc_number: str) -> str:
    """``"4758301"`` → ``"47-583-01"``. Anything not 7 digits is returned unchanged."""
    digits = _NON_DIGITS.sub("", gc_number)
    if len(digits) != 7:
        return gc_number
    return f"{digits[:2]}-{digits[2:5]}-{digits[5:]}"


def band_key(boiler: BoilerConfig) -> str:
    age = boiler.age_years or 0.0
    if boiler.condensing == "no":
        if age >= 16:
            return "non_condensing_old"
        if age >= 6:
            return "non_condensing_mid"
        return "non_condensing_recent"
    if boiler.condensing == "yes":
        if age > EARLY_CONDENSING_AGE_YEARS:
            return "early_condensing_old"
        if age >= 16:
            return "modern_condensing_old"
        if age >= 6:
            return "modern_condensing_mid"
        return "modern_condensing_recent"
    return "unknown"


def lookup_sedbuk(boiler: BoilerConfig | None, tables: ReferenceTables = DEFAULT_TABLES) -> SedbukResult:
    if boiler is None:
        raise EngineError("SEDBUK lookup requires current_system.boiler")

    notes: list[str] = []

    # ── 1. GC number ───────────────────────────────────────────────────
    if boiler.gc_number:
        digits = _NON_DIGITS.sub("", boiler.gc_number)
        if not digits:
            notes.append("GC not provided / invalid format; using band fallback.")
        elif digits in tables.sedbuk_gc:
            efficiency, description = tables.sedbuk_gc[digits]
            notes.append(f"SEDBUK GC lookup: {description} ({format_gc_number(digits)}).")
            return SedbukResult(
                source="gc_lookup",
                seasonal_efficiency=efficiency,
                label="SEDBUK (GC lookup)",
                notes=notes,
            )
        else:
            notes.append(f"GC number '{boiler.gc_number}' not found in SEDBUK table; using band fallback.")

    # ── 2. Band fallback ───────────────────────────────────────────────
    key = band_key(boiler)
    band = tables.sedbuk_bands.get(key)
    if band is not None:
        efficiency, description = band
        notes.append(f"SEDBUK band: {description}.")
        return SedbukResult(
            source="band_fallback",
            seasonal_efficiency=efficiency,
            band_key=key,
            label="SEDBUK (band estimate)",
            notes=notes,
        )

    logger.debug("No SEDBUK band %r in reference tables", key)
    notes.append("Insufficient boiler data; SEDBUK efficiency unknown.")
    return SedbukResult(source="unknown", label="SEDBUK (unknown)", notes=notes)
