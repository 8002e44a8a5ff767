"""Red-flag rules: hard rejections and warnings per system family.

Each triggered rule appends one reason string of the form
``"<Title>: <detail>"``. The output builder splits on the first colon and
grades the flag ``fail`` when the title says Rejected / Hard Fail.
"""

from __future__ import annotations

from heat_advisor.config.survey import SurveyInput
from heat_advisor.engine.hydraulic import MIN_MAINS_PRESSURE_BAR, dynamic_pressure_bar, pipe_diameter_mm
from heat_advisor.engine.normalizer import peak_heat_loss_kw
from heat_advisor.models.results import RedFlagResult


ASHP_FLAG_HEAT_LOSS_KW = 8.0


def compute_red_flags(survey: SurveyInput) -> RedFlagResult:
    reasons: list[str] = []
    reject_combi = reject_stored = flag_ashp = reject_ashp = False

    occupancy = survey.occupancy
    if occupancy.bathroom_count >= 2 and occupancy.high_occupancy:
        reject_combi = True
        reasons.append(
            f"Combi Rejected: {occupancy.bathroom_count} bathrooms + high occupancy creates "
            f"simultaneous draw scenarios that exceed combi on-demand flow capacity. "
            f"Hot water starvation likely."
        )

    if survey.property.has_loft_conversion:
        reject_stored = True
        reasons.append(
            'Stored Cylinder Rejected: Loft conversion has eliminated the gravity "head" '
            "required for a vented F&E tank and cold water storage. Sealed system required."
        )

    if survey.infrastructure.piping_topology == "one_pipe":
        reject_ashp = flag_ashp = True
        reasons.append(
            "ASHP Hard Fail: One-pipe ring main detected. Return temperature to the last "
            "radiator exceeds 55°C, preventing ASHP low-temperature operation and condensing "
            "mode. Full system re-pipe to two-pipe or microbore is required before ASHP installation."
        )

    heat_loss_kw = peak_heat_loss_kw(survey)
    diameter = pipe_diameter_mm(survey)
    if diameter < 28 and heat_loss_kw > ASHP_FLAG_HEAT_LOSS_KW:
        flag_ashp = True
        reasons.append(
            f"ASHP Flagged: {diameter}mm primary pipework with {heat_loss_kw:.1f}kW heat loss. "
            f"ASHP's low ΔT (5–7°C) demands high flow rates incompatible with {diameter}mm "
            f"diameter; expect pipe noise, erosion and reduced efficiency."
        )

    pressure = dynamic_pressure_bar(survey)
    if pressure < MIN_MAINS_PRESSURE_BAR:
        reject_combi = True
        reasons.append(
            f"Combi Rejected: Dynamic mains pressure {pressure:.1f}bar is below the "
            f"{MIN_MAINS_PRESSURE_BAR:.1f}bar minimum. Combi will lock out during simultaneous draws."
        )

    return RedFlagResult(
        reject_combi=reject_combi,
        reject_stored=reject_stored,
        reject_vented=reject_stored,
        flag_ashp=flag_ashp,
        reject_ashp=reject_ashp,
        reasons=reasons,
    )
