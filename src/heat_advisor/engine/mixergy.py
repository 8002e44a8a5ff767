"""Mixergy volumetrics.

Active top-down stratification means a 150 L Mixergy delivers the usable
hot water of a 210 L conventional cylinder. Paired with a heat pump via an
external plate exchanger it draws the coldest water from the base of the
tank, which is worth 5–10 % on COP.
"""

from __future__ import annotations

from heat_advisor.models.results import MixergyResult


MIXERGY_LITRES = 150.0
CONVENTIONAL_EQUIVALENT_LITRES = 210.0
FOOTPRINT_SAVING_PCT = round(
    (CONVENTIONAL_EQUIVALENT_LITRES - MIXERGY_LITRES) / CONVENTIONAL_EQUIVALENT_LITRES * 100
)
COP_IMPROVEMENT_MIN_PCT = 5.0
COP_IMPROVEMENT_MAX_PCT = 10.0


def compute_mixergy_volumetrics() -> MixergyResult:
    notes = [
        f"Volumetric Advantage: A {MIXERGY_LITRES:.0f}L Mixergy replaces a "
        f"{CONVENTIONAL_EQUIVALENT_LITRES:.0f}L conventional cylinder ({FOOTPRINT_SAVING_PCT}% "
        f"footprint saving) through active top-down stratification that eliminates "
        f"cold-water dilution at the hot outlet.",
        "Stratification: Unlike mixed-mass cylinders, Mixergy heats from the top down, "
        "ensuring a full layer of ready-to-use hot water is always available at the outlet "
        "without mixing with cold supply water.",
        f"Heat Pump COP Multiplier: When paired with an ASHP via external plate heat exchanger, "
        f"Mixergy draws the coldest water from the very base of the tank, maximising ΔT for the "
        f"heat pump and preventing coil lock-out, delivering a {COP_IMPROVEMENT_MIN_PCT:.0f}–"
        f"{COP_IMPROVEMENT_MAX_PCT:.0f}% COP improvement.",
    ]
    return MixergyResult(
        equivalent_conventional_litres=CONVENTIONAL_EQUIVALENT_LITRES,
        mixergy_litres=MIXERGY_LITRES,
        footprint_saving_pct=FOOTPRINT_SAVING_PCT,
        heat_pump_cop_multiplier_pct=COP_IMPROVEMENT_MIN_PCT,
        notes=notes,
    )
