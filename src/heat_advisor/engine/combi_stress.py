"""Combi boiler stress: purge losses, short draws and lost condensing."""

from __future__ import annotations

from heat_advisor.config.survey import SurveyInput
from heat_advisor.engine.normalizer import peak_heat_loss_kw
from heat_advisor.models.results import CombiStressResult


SAP_PURGE_PENALTY_KWH = 600.0      # pre-purge and fan overrun, per year
SHORT_DRAW_EFFICIENCY_PCT = 28.0   # draws under 15 s never reach steady state
CONDENSING_RETURN_TEMP_C = 55.0
CONDENSING_ADVANTAGE_PCT = 11.0
FULL_LOAD_HOURS_PER_YEAR = 1800.0


def compute_combi_stress(survey: SurveyInput) -> CombiStressResult:
    return_temp = survey.infrastructure.return_water_temp_c
    notes = [
        f"Combi Purge Loss: {SAP_PURGE_PENALTY_KWH:.0f} kWh/year discarded via flue during "
        f"pre-purge cycles and fan overrun (SAP standard penalty).",
        f"Short-Draw Decay: For draws < 15 seconds, boiler efficiency collapses to "
        f"~{SHORT_DRAW_EFFICIENCY_PCT:.0f}%. Unit never reaches steady-state condensing mode "
        f"before the draw ends.",
    ]

    compromised = return_temp > CONDENSING_RETURN_TEMP_C
    if compromised:
        condensing_pct = 100.0 - CONDENSING_ADVANTAGE_PCT
        notes.append(
            f"Condensing Mode Lost: Return temperature {return_temp:g}°C exceeds "
            f"{CONDENSING_RETURN_TEMP_C:.0f}°C threshold. Boiler cannot recover latent heat, "
            f"losing {CONDENSING_ADVANTAGE_PCT:.0f}% efficiency advantage. "
            f"Radiators are likely undersized for condensing operation."
        )
        annual_kwh = peak_heat_loss_kw(survey) * FULL_LOAD_HOURS_PER_YEAR
        condensing_penalty_kwh = annual_kwh * CONDENSING_ADVANTAGE_PCT / 100
    else:
        condensing_pct = 100.0
        notes.append(
            f"Condensing Mode Active: Return temperature {return_temp:g}°C < "
            f"{CONDENSING_RETURN_TEMP_C:.0f}°C. Full latent heat recovery active."
        )
        condensing_penalty_kwh = 0.0

    return CombiStressResult(
        annual_purge_loss_kwh=SAP_PURGE_PENALTY_KWH,
        short_draw_efficiency_pct=SHORT_DRAW_EFFICIENCY_PCT,
        condensing_efficiency_pct=condensing_pct,
        is_condensing_compromised=compromised,
        total_penalty_kwh=SAP_PURGE_PENALTY_KWH + condensing_penalty_kwh,
        notes=notes,
    )
