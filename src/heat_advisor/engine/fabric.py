"""Fabric model — two independent building-physics readings.

Heat-loss driver
    Weighted loss index (0–1, higher leaks more) from wall, insulation,
    glazing, roof and air tightness, mapped to a band.
Thermal inertia
    Drift τ (hours): how slowly the house cools with the heating off,
    from thermal mass × insulation × air tightness.

A long τ does not mean a cheap house to heat; the loss band drives bills.
"""

from __future__ import annotations

from heat_advisor.config.property import BuildingFabric
from heat_advisor.errors import EngineError
from heat_advisor.models.results import FabricResult


WALL_LOSS = {"solid_masonry": 0.65, "cavity_unfilled": 0.70, "cavity_filled": 0.35, "timber_frame": 0.30, "unknown": 0.50}
INSULATION_LOSS = {"poor": 0.85, "moderate": 0.55, "good": 0.30, "exceptional": 0.10, "unknown": 0.55}
GLAZING_LOSS = {"single": 0.85, "double": 0.40, "triple": 0.15, "unknown": 0.45}
ROOF_LOSS = {"poor": 0.80, "moderate": 0.45, "good": 0.15, "unknown": 0.45}
AIR_LOSS = {"leaky": 0.85, "average": 0.50, "tight": 0.25, "passive": 0.08, "unknown": 0.50}

WEIGHTS = {"wall": 0.30, "insulation": 0.25, "glazing": 0.20, "roof": 0.15, "air": 0.10}

# Thermal mass × insulation → base τ (hours)
BASE_TAU_HOURS = {
    "heavy": {"poor": 45, "moderate": 55, "good": 70, "exceptional": 90},
    "medium": {"poor": 22, "moderate": 35, "good": 48, "exceptional": 65},
    "light": {"poor": 10, "moderate": 15, "good": 22, "exceptional": 35},
}
AIR_TIGHTNESS_TAU_FACTOR = {"leaky": 0.75, "average": 1.00, "tight": 1.15, "passive": 1.40, "unknown": 1.00}
PASSIVHAUS_TAU_HOURS = 190.5

_MASS_DESCRIPTION = {
    "light": "fast temperature swings when heating cycles off",
    "medium": "moderate temperature drift when unheated",
    "heavy": "slow to cool, holds warmth through unheated periods",
}


def classify_heat_loss(loss_index: float) -> str:
    if loss_index >= 0.75:
        return "very_high"
    if loss_index >= 0.60:
        return "high"
    if loss_index >= 0.45:
        return "moderate"
    if loss_index >= 0.30:
        return "low"
    return "very_low"


def drift_tau_hours(building: BuildingFabric) -> float | None:
    """Cooling time constant, or None when thermal mass is unknown."""
    mass = building.thermal_mass
    if mass == "unknown":
        return None
    insulation = "moderate" if building.insulation_level == "unknown" else building.insulation_level
    air = building.air_tightness
    if mass == "light" and insulation == "exceptional" and air == "passive":
        return PASSIVHAUS_TAU_HOURS
    return float(round(BASE_TAU_HOURS[mass][insulation] * AIR_TIGHTNESS_TAU_FACTOR[air]))


def compute_fabric_model(building: BuildingFabric | None) -> FabricResult:
    if building is None:
        raise EngineError("Fabric model requires property.building")

    weighted = (
        WALL_LOSS[building.wall_type] * WEIGHTS["wall"]
        + INSULATION_LOSS[building.insulation_level] * WEIGHTS["insulation"]
        + GLAZING_LOSS[building.glazing] * WEIGHTS["glazing"]
        + ROOF_LOSS[building.roof_insulation] * WEIGHTS["roof"]
        + AIR_LOSS[building.air_tightness] * WEIGHTS["air"]
    )
    loss_index = round(weighted / sum(WEIGHTS.values()), 3)
    band = classify_heat_loss(loss_index)
    tau = drift_tau_hours(building)

    notes = [f"Fabric heat-loss estimate: {band.replace('_', ' ')} (modelled estimate, not a measured survey value)."]
    if building.wall_type == "solid_masonry" and building.insulation_level in ("poor", "unknown"):
        notes.append(
            "Solid masonry without insulation is one of the highest heat-loss wall types: heavy mass "
            "retains warmth but does not reduce leakage."
        )
    if tau is not None:
        notes.append(
            f"Thermal mass: {building.thermal_mass}, drift time τ ≈ {tau:g}h "
            f"({_MASS_DESCRIPTION[building.thermal_mass]}) (modelled estimate)."
        )
        notes.append("High thermal mass does not mean low running cost; the heat-loss band drives energy bills.")

    return FabricResult(
        heat_loss_band=band,
        loss_index=loss_index,
        drift_tau_hours=tau,
        thermal_mass_band=building.thermal_mass,
        notes=notes,
    )
