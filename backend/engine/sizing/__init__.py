"""Component sizing for off-grid and grid-tied PV systems."""

from .off_grid import (
    CableLosses,
    OffGridInputs,
    OffGridSizing,
    battery_capacity_ah,
    cable_losses,
    consumed_current,
    generated_current,
    generator_peak_power,
    inverter_nominal_power,
    panels_in_series,
    parallel_strings,
    regulator_current,
    size_off_grid_system,
    total_panels,
)
from .grid_tied import (
    GridTiedSizing,
    inverter_power_kw,
    module_count,
    peak_power_kwp,
    size_grid_tied_system,
)

__all__ = [
    "CableLosses",
    "OffGridInputs",
    "OffGridSizing",
    "battery_capacity_ah",
    "cable_losses",
    "consumed_current",
    "generated_current",
    "generator_peak_power",
    "inverter_nominal_power",
    "panels_in_series",
    "parallel_strings",
    "regulator_current",
    "size_off_grid_system",
    "total_panels",
    "GridTiedSizing",
    "inverter_power_kw",
    "module_count",
    "peak_power_kwp",
    "size_grid_tied_system",
]
