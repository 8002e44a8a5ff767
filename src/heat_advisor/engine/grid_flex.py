"""Grid flexibility — the hot-water cylinder as a demand-side asset.

Savings from three sources:
  1. Shifting the daily DHW reheat into the cheapest agile half-hour
     (stored cylinders only; a combi must fire when the tap opens).
  2. Mixergy Solar X grid-import reduction: 35 %, or 40 % from 300 L.
  3. British Gas "Mixergy Extra" rebate (£40/yr).
"""

from __future__ import annotations

from heat_advisor.config.grid_flex import GridFlexConfig
from heat_advisor.config.tables import DEFAULT_TABLES, ReferenceTables
from heat_advisor.errors import EngineError
from heat_advisor.models.results import GridFlexResult


SOLAR_X_SAVING_FRACTION = 0.35
SOLAR_X_SAVING_FRACTION_LARGE = 0.40
SOLAR_X_LARGE_TANK_L = 300.0
BASELINE_ELECTRICITY_PENCE = 24.5
BG_MIXERGY_REBATE_GBP = 40.0


def compute_grid_flex(
    config: GridFlexConfig | None,
    tables: ReferenceTables = DEFAULT_TABLES,
) -> GridFlexResult:
    if config is None:
        raise EngineError("Grid flex requires the grid_flex section")

    prices = config.agile_prices_pence if config.agile_prices_pence is not None else tables.agile_day_pence
    shifting = 0.0 if config.tank_type == "combi" else 1.0
    notes: list[str] = []

    # ── 0. Shifting potential ──────────────────────────────────────────
    if config.tank_type == "combi":
        notes.append(
            "Combi Boiler detected: shifting potential = 0%. Combi boilers must fire when the tap "
            "opens, so no agile load-shifting is possible."
        )
    elif config.tank_type == "mixergy":
        notes.append(
            "Mixergy Tank detected: shifting potential = 100%. The daily reheat can be pre-loaded "
            "in the cheapest overnight window."
        )

    if not prices or config.dhw_annual_kwh <= 0:
        notes.append("Insufficient data: agile prices and annual DHW kWh are required for DSR calculation.")
        return GridFlexResult(
            optimal_slot_index=0,
            optimal_slot_price_pence=0.0,
            daily_avg_price_pence=0.0,
            shifting_potential_fraction=shifting,
            annual_load_shift_saving_gbp=0.0,
            mixergy_solar_x_saving_kwh=0.0,
            mixergy_solar_x_saving_gbp=0.0,
            solar_self_consumption_fraction=0.0,
            bg_rebate_gbp=0.0,
            total_annual_saving_gbp=0.0,
            notes=notes,
        )

    # ── 1. Cheapest slot ───────────────────────────────────────────────
    slot = min(range(len(prices)), key=prices.__getitem__)
    cheapest = prices[slot]
    average = sum(prices) / len(prices)

    # ── 2. Load shift ──────────────────────────────────────────────────
    saving_per_kwh = max(average - cheapest, 0.0)
    load_shift_gbp = round(config.dhw_annual_kwh * saving_per_kwh * shifting / 100, 2)
    notes.append(
        f"Optimal agile slot: index {slot} at {cheapest:.1f} p/kWh vs. daily average {average:.1f} p/kWh. "
        f"Annual load-shift saving: £{load_shift_gbp:.2f}."
    )

    # ── 3. Solar X ─────────────────────────────────────────────────────
    solar_x_kwh = solar_x_gbp = 0.0
    if config.mixergy_solar_x:
        large = (config.tank_volume_l or 0.0) >= SOLAR_X_LARGE_TANK_L
        fraction = SOLAR_X_SAVING_FRACTION_LARGE if large else SOLAR_X_SAVING_FRACTION
        solar_x_kwh = round(config.dhw_annual_kwh * fraction, 2)
        solar_x_gbp = round(solar_x_kwh * BASELINE_ELECTRICITY_PENCE / 100, 2)
        notes.append(
            f"Mixergy Solar X: {fraction * 100:.0f}% grid-import reduction = {solar_x_kwh:.1f} kWh/yr "
            f"saved (£{solar_x_gbp:.2f}/yr at {BASELINE_ELECTRICITY_PENCE} p/kWh baseline)."
        )

    # ── 4. Solar self-consumption ──────────────────────────────────────
    if config.cylinder_capacity_kwh > 0:
        capped_kwh = min(config.cylinder_capacity_kwh * 365, config.dhw_annual_kwh)
    else:
        capped_kwh = config.dhw_annual_kwh
    self_consumption = 0.0
    if config.annual_solar_surplus_kwh is not None:
        self_consumption = round(min(config.annual_solar_surplus_kwh / capped_kwh, 1.0), 3)
        notes.append(
            f"Solar self-consumption: {self_consumption * 100:.0f}% of DHW demand covered by "
            f"{config.annual_solar_surplus_kwh:.0f} kWh/yr solar surplus."
        )

    # ── 5. Rebate ──────────────────────────────────────────────────────
    rebate = BG_MIXERGY_REBATE_GBP if config.tank_type == "mixergy" and config.provider == "british_gas" else 0.0
    if rebate:
        notes.append(f'British Gas "Mixergy Extra" rebate: £{rebate:.0f}/yr applied.')

    total = round(load_shift_gbp + solar_x_gbp + rebate, 2)
    notes.append(f"Total annual grid-flexibility saving: £{total:.2f}.")

    return GridFlexResult(
        optimal_slot_index=slot,
        optimal_slot_price_pence=round(cheapest, 2),
        daily_avg_price_pence=round(average, 2),
        shifting_potential_fraction=shifting,
        annual_load_shift_saving_gbp=load_shift_gbp,
        mixergy_solar_x_saving_kwh=solar_x_kwh,
        mixergy_solar_x_saving_gbp=solar_x_gbp,
        solar_self_consumption_fraction=self_consumption,
        bg_rebate_gbp=rebate,
        total_annual_saving_gbp=total,
        notes=notes,
    )
