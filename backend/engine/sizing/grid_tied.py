"""Grid-tied PV system sizing from annual consumption and annual yield."""

from __future__ import annotations

import math
from dataclasses import dataclass

PERFORMANCE_RATIO = 0.80
DC_AC_RATIO = 1.0


@dataclass(frozen=True)
class GridTiedSizing:
    peak_power_kwp: float
    module_count: int
    inverter_power_kw: float
    annual_peak_sun_hours: float    # kWh/m^2/yr
    optimal_tilt_deg: float | None


def peak_power_kwp(
    annual_consumption_kwh: float,
    annual_peak_sun_hours: float,
    performance_ratio: float = PERFORMANCE_RATIO,
) -> float:
    """kWp = annual consumption / (annual HSP * PR)."""
    if annual_peak_sun_hours <= 0 or performance_ratio <= 0:
        raise ValueError("Annual peak sun hours and performance ratio must be > 0.")
    return annual_consumption_kwh / (annual_peak_sun_hours * performance_ratio)


def module_count(peak_kwp: float, module_wp: float) -> int:
    if module_wp <= 0:
        raise ValueError(f"module_wp must be > 0, got {module_wp}")
    return math.ceil(peak_kwp * 1000.0 / module_wp)


def inverter_power_kw(peak_kwp: float, dc_ac_ratio: float = DC_AC_RATIO) -> float:
    return peak_kwp * dc_ac_ratio


def size_grid_tied_system(
    annual_consumption_kwh: float,
    annual_yield_mwh: float,
    performance_ratio: float = PERFORMANCE_RATIO,
    module_wp: float = 450.0,
    optimal_tilt_deg: float | None = None,
) -> GridTiedSizing:
    """Size array and inverter for a grid-connected system.

    ``annual_yield_mwh`` is the optimiser's annual tilted irradiation in
    MWh/m^2/yr; multiplying by 1000 gives the yearly peak sun hours.
    """
    if annual_yield_mwh <= 0:
        raise ValueError(
            f"annual_yield_mwh must be > 0, got {annual_yield_mwh}; "
            "irradiation data is unavailable for this site."
        )
    annual_hsp = annual_yield_mwh * 1000.0
    kwp = peak_power_kwp(annual_consumption_kwh, annual_hsp, performance_ratio)

    return GridTiedSizing(
        peak_power_kwp=round(kwp, 2),
        module_count=module_count(kwp, module_wp),
        inverter_power_kw=round(inverter_power_kw(kwp), 2),
        annual_peak_sun_hours=round(annual_hsp, 2),
        optimal_tilt_deg=optimal_tilt_deg,
    )
