"""Boiler oversize ratio (nameplate kW / peak heat loss) and sizing band.

    ≤ 1.3 well_matched · ≤ 1.8 mild_oversize · ≤ 2.5 oversized · above: aggressive

An unknown heat loss gives no ratio and the ``well_matched`` band, so no
cycling penalty is applied on a guess.
"""

from __future__ import annotations

from heat_advisor.config.current_system import BoilerConfig
from heat_advisor.errors import EngineError
from heat_advisor.models.results import BoilerSizingResult


NOMINAL_KW_FALLBACK = {
    "combi": 24.0,
    "system": 18.0,
    "regular": 18.0,
    "back_boiler": 18.0,
    "unknown": 24.0,
}


def classify_sizing_band(ratio: float | None) -> str:
    if ratio is None or ratio <= 1.3:
        return "well_matched"
    if ratio <= 1.8:
        return "mild_oversize"
    if ratio <= 2.5:
        return "oversized"
    return "aggressive"


def compute_boiler_sizing(boiler: BoilerConfig | None, peak_heat_loss_kw: float | None) -> BoilerSizingResult:
    if boiler is None:
        raise EngineError("Boiler sizing requires current_system.boiler")

    defaulted = boiler.nominal_output_kw is None
    nominal_kw = NOMINAL_KW_FALLBACK[boiler.type] if defaulted else boiler.nominal_output_kw
    notes: list[str] = []
    if defaulted:
        notes.append(f"Nominal output not recorded; assuming {nominal_kw:.0f} kW for a {boiler.type} boiler.")

    if peak_heat_loss_kw is None or peak_heat_loss_kw <= 0:
        notes.append("Peak heat loss unknown; oversize ratio not computed.")
        return BoilerSizingResult(
            nominal_kw=nominal_kw,
            nominal_kw_defaulted=defaulted,
            sizing_band=classify_sizing_band(None),
            notes=notes,
        )

    ratio = nominal_kw / peak_heat_loss_kw
    band = classify_sizing_band(ratio)
    notes.append(f"Oversize ratio {ratio:.2f}x ({band}).")
    return BoilerSizingResult(
        nominal_kw=nominal_kw,
        nominal_kw_defaulted=defaulted,
        peak_heat_loss_kw=peak_heat_loss_kw,
        oversize_ratio=ratio,
        sizing_band=band,
        notes=notes,
    )
