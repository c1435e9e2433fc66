from typing import Literal

from pydantic import BaseModel, Field, model_validator


class DeviceIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    power_w: float = Field(ge=0, description="Rated power per unit, W")
    hours_per_day: float = Field(ge=0, le=24)
    quantity: int = Field(default=1, ge=1)
    circuit: Literal["AC", "DC"] = "AC"

    model_config = {"allow_inf_nan": False}


class CableIn(BaseModel):
    length_m: float = Field(default=5.0, gt=0, description="One-way run length")
    section_mm2: float = Field(default=4.0, gt=0)
    resistivity: float = Field(default=0.0172, gt=0, description="Ohm*mm2/m, copper by default")

    model_config = {"allow_inf_nan": False}


# ---------------------------------------------------------------------------
# Off-grid
# ---------------------------------------------------------------------------

class OffGridSystemIn(BaseModel):
    """Consumption table and component choices; the solar resource comes separately."""

    devices: list[DeviceIn] = Field(min_length=1)
    panel_wp: float = Field(gt=0)
    panel_voltage: float = Field(gt=0, description="Panel voltage, stands in for Vmpp")
    battery_voltage: float = Field(gt=0)
    battery_efficiency: float = Field(default=0.95, gt=0, le=1)
    inverter_efficiency: float = Field(default=0.90, gt=0, le=1)
    generator_loss_factor: float = Field(default=0.8, gt=0, le=1)
    global_loss_factor: float = Field(default=0.8, gt=0, le=1)
    autonomy_days: float = Field(default=2.0, gt=0)
    depth_of_discharge: float = Field(default=0.5, gt=0, le=1)
    cable: CableIn = Field(default_factory=CableIn)

    model_config = {"allow_inf_nan": False}


class OffGridRequest(OffGridSystemIn):
    peak_sun_hours: float = Field(
        gt=0, description="Worst-month Gi from the optimiser, kWh/m2/day"
    )


class CableLossesResponse(BaseModel):
    resistance_ohm: float
    power_loss_w: float
    voltage_drop_v: float
    relative_drop_pct: float


class OffGridResponse(BaseModel):
    dc_energy_wh: float
    ac_energy_wh: float
    daily_energy_wh: float
    dc_power_w: float
    ac_power_w: float
    peak_sun_hours: float
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
    cable: CableLossesResponse
    warnings: list[str] = []


# ---------------------------------------------------------------------------
# Grid-tied
# ---------------------------------------------------------------------------

class GridTiedSystemIn(BaseModel):
    devices: list[DeviceIn] | None = Field(
        default=None, description="Consumption table; alternative to annual_consumption_kwh"
    )
    annual_consumption_kwh: float | None = Field(default=None, gt=0)
    performance_ratio: float = Field(default=0.80, gt=0, le=1)
    module_wp: float = Field(default=450.0, gt=0)

    model_config = {"allow_inf_nan": False}

    @model_validator(mode="after")
    def _consumption_given(self):
        if self.annual_consumption_kwh is None and not self.devices:
            raise ValueError("Provide either devices or annual_consumption_kwh")
        return self


class GridTiedRequest(GridTiedSystemIn):
    annual_yield_mwh: float = Field(description="Annual tilted irradiation, MWh/m2/yr")
    optimal_tilt_deg: float | None = Field(default=None, ge=0, le=90)


class GridTiedResponse(BaseModel):
    annual_consumption_kwh: float
    annual_peak_sun_hours: float
    peak_power_kwp: float
    module_count: int
    inverter_power_kw: float
    optimal_tilt_deg: float | None = None
