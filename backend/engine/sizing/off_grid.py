"""
Off-grid (battery-based) PV system sizing.

Straight-line design formulas fed by the daily energy requirement ET and
the worst-month peak sun hours (HSP, the minimum monthly Gi from the tilt
optimiser).  Individual formulas return 0 for non-positive inputs, which
is how an incomplete form is reported; :func:`size_off_grid_system`
validates its inputs and raises instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Design defaults
# ---------------------------------------------------------------------------
GENERATOR_LOSS_FACTOR = 0.8      # Cp, system performance factor
GLOBAL_LOSS_FACTOR = 0.8         # Pg, array losses for the panel count
SAFETY_FACTOR = 1.25             # regulator and inverter margin
AC_VOLTAGE = 220.0               # V, AC load circuit
COPPER_RESISTIVITY = 0.0172      # Ohm*mm^2/m
CABLE_LENGTH_M = 5.0             # one-way run
CABLE_SECTION_MM2 = 4.0


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CableLosses:
    resistance_ohm: float
    power_loss_w: float
    voltage_drop_v: float
    relative_drop_pct: float


@dataclass
class OffGridInputs:
    daily_energy_wh: float              # ET
    peak_sun_hours: float               # HSP, kWh/m^2/day of the worst month
    panel_wp: float
    panel_voltage: float
    battery_voltage: float
    dc_power_w: float = 0.0
    ac_power_w: float = 0.0
    generator_loss_factor: float = GENERATOR_LOSS_FACTOR
    global_loss_factor: float = GLOBAL_LOSS_FACTOR
    autonomy_days: float = 2.0
    depth_of_discharge: float = 0.5
    cable_length_m: float = CABLE_LENGTH_M
    cable_section_mm2: float = CABLE_SECTION_MM2
    resistivity: float = COPPER_RESISTIVITY
    ac_voltage: float = AC_VOLTAGE


@dataclass
class OffGridSizing:
    generator_peak_w: float
    panels_energy_balance: int
    panels_in_series: int
    parallel_strings: int
    panel_count: int
    installed_peak_w: float
    daily_generation_kwh: float
    battery_capacity_ah: int
    autonomy_energy_kwh: float
    generated_current_a: float
    consumed_current_a: float
    regulator_current_a: int
    inverter_power_w: float
    cable: CableLosses
    warnings: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Generator and array
# ---------------------------------------------------------------------------

def generator_peak_power(
    daily_energy_wh: float,
    peak_sun_hours: float,
    loss_factor: float = GENERATOR_LOSS_FACTOR,
) -> float:
    """Required array peak power (Wp) = ET / (HSP * Cp)."""
    if peak_sun_hours <= 0 or loss_factor <= 0:
        return 0.0
    return daily_energy_wh / (peak_sun_hours * loss_factor)


def total_panels(
    daily_energy_wh: float,
    peak_sun_hours: float,
    panel_wp: float,
    loss_factor: float = GLOBAL_LOSS_FACTOR,
) -> int:
    """Panels needed by energy balance, ceil(ET / (HSP * Pp * Pg))."""
    if peak_sun_hours <= 0 or panel_wp <= 0 or loss_factor <= 0:
        return 0
    return math.ceil(daily_energy_wh / (peak_sun_hours * panel_wp * loss_factor))


def panels_in_series(battery_voltage: float, panel_voltage: float) -> int:
    if panel_voltage <= 0:
        return 0
    return math.ceil(battery_voltage / panel_voltage)


def parallel_strings(total: int, in_series: int) -> int:
    if in_series <= 0:
        return total
    return math.ceil(total / in_series)


# ---------------------------------------------------------------------------
# Battery bank
# ---------------------------------------------------------------------------

def battery_capacity_ah(
    daily_energy_wh: float,
    autonomy_days: float,
    battery_voltage: float,
    depth_of_discharge: float,
) -> int:
    """Nominal bank capacity, ceil(D * ET / (Vbat * Pd))."""
    if battery_voltage <= 0 or depth_of_discharge <= 0:
        return 0
    return math.ceil(autonomy_days * daily_energy_wh / (battery_voltage * depth_of_discharge))


# ---------------------------------------------------------------------------
# Charge regulator and inverter
# ---------------------------------------------------------------------------

def generated_current(panel_wp: float, panel_voltage: float, strings: int) -> float:
    """Array current IG = Np * Pp / Vp (Vp stands in for Vmpp)."""
    if panel_voltage <= 0:
        return 0.0
    return panel_wp / panel_voltage * strings


def consumed_current(
    dc_power_w: float,
    battery_voltage: float,
    ac_power_w: float,
    ac_voltage: float = AC_VOLTAGE,
) -> float:
    """Load current IC = Pdc / Vbat + Pac / Vac."""
    if battery_voltage <= 0 or ac_voltage <= 0:
        return 0.0
    return dc_power_w / battery_voltage + ac_power_w / ac_voltage


def regulator_current(
    generated_a: float, consumed_a: float, safety_factor: float = SAFETY_FACTOR
) -> int:
    return math.ceil(max(generated_a, consumed_a) * safety_factor)


def inverter_nominal_power(ac_power_w: float, safety_factor: float = SAFETY_FACTOR) -> float:
    if ac_power_w <= 0:
        return 0.0
    return ac_power_w * safety_factor


# ---------------------------------------------------------------------------
# Cabling
# ---------------------------------------------------------------------------

def cable_losses(
    current_a: float,
    length_m: float = CABLE_LENGTH_M,
    section_mm2: float = CABLE_SECTION_MM2,
    resistivity: float = COPPER_RESISTIVITY,
    system_voltage: float = 0.0,
) -> CableLosses:
    """Joule losses and voltage drop of a two-conductor DC run.

    Rc = rho * 2L / S, Pr = I^2 * Rc, dV = I * Rc.  The relative drop is
    reported against ``system_voltage`` (0 when it is not given).
    """
    if current_a <= 0 or length_m <= 0 or section_mm2 <= 0 or resistivity <= 0:
        return CableLosses(0.0, 0.0, 0.0, 0.0)

    resistance = resistivity * 2.0 * length_m / section_mm2
    drop = current_a * resistance
    relative = drop / system_voltage * 100.0 if system_voltage > 0 else 0.0
    return CableLosses(
        resistance_ohm=resistance,
        power_loss_w=current_a ** 2 * resistance,
        voltage_drop_v=drop,
        relative_drop_pct=relative,
    )


# ---------------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------------

def size_off_grid_system(inputs: OffGridInputs) -> OffGridSizing:
    """Size array, battery bank, regulator, inverter and DC cabling."""
    if inputs.daily_energy_wh <= 0:
        raise ValueError(f"daily_energy_wh must be > 0, got {inputs.daily_energy_wh}")
    if inputs.peak_sun_hours <= 0:
        raise ValueError(f"peak_sun_hours must be > 0, got {inputs.peak_sun_hours}")
    for name in ("panel_wp", "panel_voltage", "battery_voltage", "autonomy_days"):
        if getattr(inputs, name) <= 0:
            raise ValueError(f"{name} must be > 0, got {getattr(inputs, name)}")
    if not 0 < inputs.depth_of_discharge <= 1:
        raise ValueError(
            f"depth_of_discharge must be within (0, 1], got {inputs.depth_of_discharge}"
        )

    et = inputs.daily_energy_wh
    hsp = inputs.peak_sun_hours

    nt = total_panels(et, hsp, inputs.panel_wp, inputs.global_loss_factor)
    ns = panels_in_series(inputs.battery_voltage, inputs.panel_voltage)
    np_ = parallel_strings(nt, ns)
    count = ns * np_

    ig = generated_current(inputs.panel_wp, inputs.panel_voltage, np_)
    ic = consumed_current(
        inputs.dc_power_w, inputs.battery_voltage, inputs.ac_power_w, inputs.ac_voltage
    )

    warnings: list[str] = []
    if inputs.ac_power_w <= 0:
        warnings.append("No AC loads: inverter not required.")
    cable = cable_losses(
        ig, inputs.cable_length_m, inputs.cable_section_mm2,
        inputs.resistivity, inputs.battery_voltage,
    )
    if cable.relative_drop_pct > 3.0:
        warnings.append(
            f"DC cable voltage drop {cable.relative_drop_pct:.1f}% exceeds 3%; "
            "increase the conductor section."
        )

    return OffGridSizing(
        generator_peak_w=generator_peak_power(et, hsp, inputs.generator_loss_factor),
        panels_energy_balance=nt,
        panels_in_series=ns,
        parallel_strings=np_,
        panel_count=count,
        installed_peak_w=count * inputs.panel_wp,
        daily_generation_kwh=count * inputs.panel_wp * hsp * inputs.global_loss_factor / 1000.0,
        battery_capacity_ah=battery_capacity_ah(
            et, inputs.autonomy_days, inputs.battery_voltage, inputs.depth_of_discharge
        ),
        autonomy_energy_kwh=inputs.autonomy_days * et / 1000.0,
        generated_current_a=ig,
        consumed_current_a=ic,
        regulator_current_a=regulator_current(ig, ic),
        inverter_power_w=inverter_nominal_power(inputs.ac_power_w),
        cable=cable,
        warnings=warnings,
    )
