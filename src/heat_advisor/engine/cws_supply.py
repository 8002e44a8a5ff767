"""Cold-water supply evidence from the mains readings.

Flow alone counts as a measurement. Pressure that was not recorded stays
``None``; a recorded 0 bar is a real reading and fails the 1 bar gate.

Unvented eligibility:
  - flow ≥ 10 L/min at ≥ 1.0 bar (operating point), or
  - flow ≥ 12 L/min with no pressure recorded (flow-cup test).

A dynamic reading above static + 0.2 bar is physically inconsistent. It is
reported, never raised, and blocks the unvented gate.
"""

from __future__ import annotations

from heat_advisor.config.survey import SurveyInput
from heat_advisor.models.results import CwsSupplyResult, Flag


INCONSISTENCY_TOLERANCE_BAR = 0.2
UNVENTED_FLOW_AT_PRESSURE_LPM = 10.0
UNVENTED_MIN_PRESSURE_BAR = 1.0
UNVENTED_FLOW_ONLY_LPM = 12.0


def compute_cws_supply(survey: SurveyInput) -> CwsSupplyResult:
    services = survey.services
    flow = services.mains_dynamic_flow_lpm
    dynamic = services.dynamic_mains_pressure_bar
    static = services.static_mains_pressure_bar
    notes: list[str] = []
    flags: list[Flag] = []

    inconsistent = (
        static is not None
        and dynamic is not None
        and dynamic > static + INCONSISTENCY_TOLERANCE_BAR
    )
    if inconsistent:
        notes.append("Readings inconsistent (dynamic > static): likely swapped or measured at different points.")
        flags.append(Flag(
            id="cws-readings-inconsistent",
            severity="warn",
            title="Mains readings inconsistent",
            detail=f"Dynamic {dynamic:.1f} bar exceeds static {static:.1f} bar by more than "
                   f"{INCONSISTENCY_TOLERANCE_BAR} bar. Re-measure before relying on the supply.",
        ))

    if flow is None or flow <= 0:
        if dynamic is not None:
            notes.append(f"Mains supply: {dynamic:.1f} bar (dynamic only). Add L/min @ bar to judge stability.")
        else:
            notes.append("No mains measurements recorded. Add flow (L/min) and pressure (bar) to characterise supply.")
        return CwsSupplyResult(
            source=services.cold_water_source,
            has_measurements=False,
            dynamic_pressure_bar=dynamic,
            static_pressure_bar=static,
            inconsistent=inconsistent,
            meets_unvented_requirement=False,
            notes=notes,
            flags=flags,
        )

    drop = None
    if static is not None and dynamic is not None and not inconsistent:
        drop = static - dynamic

    if dynamic is not None:
        notes.append(f"Mains supply (dynamic): {flow:.1f} L/min @ {dynamic:.1f} bar.")
    else:
        notes.append(f"Mains supply (dynamic): {flow:.1f} L/min (pressure not recorded).")
    if drop is not None:
        notes.append(f"Pressure: {static:.1f} → {dynamic:.1f} bar (drop {drop:.1f} bar).")
    elif dynamic is not None and static is None:
        notes.append("Static pressure not measured: pressure drop unknown.")

    if dynamic is not None:
        meets = flow >= UNVENTED_FLOW_AT_PRESSURE_LPM and dynamic >= UNVENTED_MIN_PRESSURE_BAR
    else:
        meets = flow >= UNVENTED_FLOW_ONLY_LPM

    return CwsSupplyResult(
        source=services.cold_water_source,
        has_measurements=True,
        dynamic_pressure_bar=dynamic,
        dynamic_flow_lpm=flow,
        static_pressure_bar=static,
        drop_bar=drop,
        inconsistent=inconsistent,
        meets_unvented_requirement=meets and not inconsistent,
        notes=notes,
        flags=flags,
    )
