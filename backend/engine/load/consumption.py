"""Consumption table bookkeeping for PV system sizing.

Each row of the table is one kind of device.  Daily energies are split by
circuit (DC loads fed from the battery bus, AC loads fed through the
inverter) and corrected by battery and inverter efficiencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

Circuit = Literal["AC", "DC"]

DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class Device:
    """One consumption-table row."""

    name: str
    power_w: float
    hours_per_day: float
    quantity: int = 1
    circuit: Circuit = "AC"

    def __post_init__(self) -> None:
        if self.power_w < 0:
            raise ValueError(f"{self.name}: power_w must be >= 0, got {self.power_w}")
        if not 0 <= self.hours_per_day <= 24:
            raise ValueError(
                f"{self.name}: hours_per_day must be within [0, 24], got {self.hours_per_day}"
            )
        if self.quantity < 1:
            raise ValueError(f"{self.name}: quantity must be >= 1, got {self.quantity}")
        if self.circuit not in ("AC", "DC"):
            raise ValueError(f"{self.name}: circuit must be 'AC' or 'DC', got {self.circuit!r}")

    @property
    def daily_energy_wh(self) -> float:
        return self.power_w * self.hours_per_day * self.quantity

    @property
    def instantaneous_power_w(self) -> float:
        return self.power_w * self.quantity


@dataclass(frozen=True)
class DailyConsumption:
    dc_wh: float
    ac_wh: float
    total_wh: float          # ET, efficiency adjusted


@dataclass(frozen=True)
class InstantaneousPower:
    dc_w: float
    ac_w: float


def daily_consumption(
    devices: Iterable[Device],
    battery_efficiency: float,
    inverter_efficiency: float,
) -> DailyConsumption:
    """Efficiency-adjusted daily energy requirement ET (Wh/day).

    ET = EDC / eta_bat + EAC / (eta_bat * eta_inv)
    """
    for label, eta in (("battery_efficiency", battery_efficiency),
                       ("inverter_efficiency", inverter_efficiency)):
        if not 0 < eta <= 1:
            raise ValueError(f"{label} must be within (0, 1], got {eta}")

    dc_wh = 0.0
    ac_wh = 0.0
    for device in devices:
        if device.circuit == "DC":
            dc_wh += device.daily_energy_wh
        else:
            ac_wh += device.daily_energy_wh

    total = dc_wh / battery_efficiency + ac_wh / (battery_efficiency * inverter_efficiency)
    return DailyConsumption(dc_wh=dc_wh, ac_wh=ac_wh, total_wh=total)


def instantaneous_power(devices: Iterable[Device]) -> InstantaneousPower:
    """Sum of connected power per circuit, used as the concurrent-peak proxy."""
    dc_w = 0.0
    ac_w = 0.0
    for device in devices:
        if device.circuit == "DC":
            dc_w += device.instantaneous_power_w
        else:
            ac_w += device.instantaneous_power_w
    return InstantaneousPower(dc_w=dc_w, ac_w=ac_w)


def annual_consumption_kwh(devices: Iterable[Device]) -> float:
    """Annual consumption (kWh/yr) for grid-tied sizing, without efficiency terms."""
    daily_wh = sum(
        d.daily_energy_wh for d in devices if d.power_w > 0 and d.quantity > 0
    )
    return daily_wh * DAYS_PER_YEAR / 1000.0
