"""Normalizer — cross-cutting facts derived from raw survey fields.

Pure and total: every missing input has a documented fallback.
  - hardness      postcode area → category, unknown areas → ``moderate``
  - volume        radiators × 10 L, else heat loss × 6 L/kW
  - vented        not possible after a loft conversion
  - scale decay   growth mm/yr × 10 yr × 8 %/mm, capped at 15 %
"""

from __future__ import annotations

import re

from heat_advisor.config.survey import SurveyInput
from heat_advisor.config.tables import HardnessCategory, ReferenceTables
from heat_advisor.models.results import NormalizedFacts


DEFAULT_HEAT_LOSS_KW = 8.0

LITRES_PER_RADIATOR = 10.0
VOLUME_PROXY_L_PER_KW = 6.0

HIGH_SILICA_SCAFFOLD_COEFFICIENT = 10.0
SCALE_EFFICIENCY_LOSS_PCT_PER_MM = 8.0
MAX_TEN_YEAR_DECAY_PCT = 15.0

_SCALE_GROWTH_MM_PER_YEAR: dict[HardnessCategory, float] = {
    "very_hard": 0.16,
    "hard": 0.10,
    "moderate": 0.04,
    "soft": 0.04,
}

_LEGACY_TOPOLOGIES = frozenset({"one_pipe", "microbore"})

_PREFIX_RE = re.compile(r"^[A-Z]+")


def postcode_prefix(postcode: str) -> str:
    """Leading letters of the postcode area: ``"sw1a 1aa"`` → ``"SW"``."""
    match = _PREFIX_RE.match(postcode.strip().upper())
    return match.group(0) if match else ""


def peak_heat_loss_kw(survey: SurveyInput) -> float:
    """Surveyed peak heat loss, or the 8 kW typical-dwelling assumption."""
    kw = survey.property.heat_loss_kw
    return DEFAULT_HEAT_LOSS_KW if kw is None else kw


def normalize(survey: SurveyInput, tables: ReferenceTables) -> NormalizedFacts:
    """Derive the normalized facts for one survey."""
    prefix = postcode_prefix(survey.property.postcode)

    # ── 1. Water hardness ──────────────────────────────────────────────
    known = tables.hardness_by_prefix.get(prefix)
    category: HardnessCategory = known if known is not None else tables.default_hardness
    cac_o3, silica = tables.hardness_levels_mg_l[category]
    high_silica = prefix in tables.high_silica_prefixes
    coefficient = HIGH_SILICA_SCAFFOLD_COEFFICIENT if high_silica else 1.0

    # ── 2. System volume ───────────────────────────────────────────────
    radiators = survey.infrastructure.radiator_count
    if radiators > 0:
        system_volume_l = radiators * LITRES_PER_RADIATOR
    else:
        system_volume_l = peak_heat_loss_kw(survey) * VOLUME_PROXY_L_PER_KW

    # ── 3. Scale and efficiency decay ──────────────────────────────────
    scale_rf = (cac_o3 / 1000) * 0.001 + (silica / 1000) * 0.001 * coefficient
    growth = _SCALE_GROWTH_MM_PER_YEAR[category]
    ten_year_decay = min(growth * 10 * SCALE_EFFICIENCY_LOSS_PCT_PER_MM, MAX_TEN_YEAR_DECAY_PCT)

    # ── 4. Sludge / scaling potentials (0–1) ───────────────────────────
    age = survey.infrastructure.system_age_years
    legacy = survey.infrastructure.piping_topology in _LEGACY_TOPOLOGIES
    sludge_potential = round(min(1.0, (age / 20) * (1.0 if legacy else 0.7)), 3)
    scaling_potential = round(min(1.0, (cac_o3 / 300) * (1.5 if high_silica else 1.0)), 3)

    return NormalizedFacts(
        postcode_prefix=prefix,
        water_hardness_category=category,
        hardness_from_default=known is None,
        cac_o3_mg_l=cac_o3,
        silica_mg_l=silica,
        high_silica=high_silica,
        scaling_scaffold_coefficient=coefficient,
        system_volume_l=system_volume_l,
        can_use_vented_system=not survey.property.has_loft_conversion,
        scale_rf=scale_rf,
        scale_growth_mm_per_year=growth,
        ten_year_efficiency_decay_pct=round(ten_year_decay, 3),
        sludge_potential=sludge_potential,
        scaling_potential=scaling_potential,
    )
