"""Glue between request schemas and the engine.

Runs the tilt optimisation alongside the country lookup, maps engine
dataclasses onto response models, and assembles sizing and report inputs.
"""

import asyncio
import logging
import math
from io import BytesIO

from app.config import settings
from app.core.deps import CountryLookup
from app.schemas.irradiance import (
    MonthlyIrradianceResponse,
    OptimizeResponse,
    SiteRequest,
    SkippedMonthResponse,
    TiltSweepPointResponse,
)
from app.schemas.report import ReportRequest
from app.schemas.sizing import (
    CableLossesResponse,
    DeviceIn,
    GridTiedRequest,
    GridTiedResponse,
    GridTiedSystemIn,
    OffGridRequest,
    OffGridResponse,
    OffGridSystemIn,
)
from engine.load.consumption import (
    DailyConsumption,
    Device,
    annual_consumption_kwh,
    daily_consumption,
    instantaneous_power,
)
from engine.reporting.pdf_report import generate_pdf_report
from engine.sizing import (
    GridTiedSizing,
    OffGridInputs,
    OffGridSizing,
    size_grid_tied_system,
    size_off_grid_system,
)
from engine.solar import OptimizationResult, Unavailable, optimize_tilt
from engine.weather import IrradianceSource

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Irradiance
# ---------------------------------------------------------------------------

async def run_optimization(
    site: SiteRequest,
    source: IrradianceSource,
    country_lookup: CountryLookup,
) -> tuple[OptimizationResult, str | None]:
    """Optimise the tilt and resolve the country name concurrently."""
    result, country = await asyncio.gather(
        optimize_tilt(
            site.latitude,
            site.longitude,
            site.representative_day,
            source=source,
            min_valid_months=settings.min_valid_months,
        ),
        country_lookup(site.latitude, site.longitude),
    )
    return result, country


def optimization_to_response(
    result: OptimizationResult,
    site_name: str | None = None,
    country: str | None = None,
) -> OptimizeResponse:
    monthly = []
    for m in result.monthly_results:
        astro = m.radiation.astro
        h = m.radiation.horizontal
        t = m.tilted
        monthly.append(MonthlyIrradianceResponse(
            month=m.month_name,
            days_in_month=m.days_in_month,
            day_of_year=astro.day_of_year,
            declination_deg=math.degrees(astro.declination_rad),
            extraterrestrial_kwh=astro.extraterrestrial_kwh,
            global_horizontal_kwh=h.global_kwh,
            clearness_index=h.clearness_index,
            diffuse_kwh=h.diffuse_kwh,
            direct_kwh=h.direct_kwh,
            beam_transfer_factor=t.beam_transfer_factor,
            direct_tilted_kwh=t.direct_tilted_kwh,
            diffuse_tilted_kwh=t.diffuse_tilted_kwh,
            reflected_kwh=t.reflected_kwh,
            global_tilted_kwh=t.global_tilted_kwh,
        ))

    skipped = [
        SkippedMonthResponse(
            month=o.month.name,
            day_of_year=o.astro.day_of_year,
            reason=o.horizontal.reason,
        )
        for o in result.observations
        if isinstance(o.horizontal, Unavailable)
    ]

    return OptimizeResponse(
        latitude=result.latitude_deg,
        longitude=result.longitude_deg,
        representative_day=result.representative_day,
        site_name=site_name,
        country=country,
        available=result.available,
        optimal_tilt_deg=result.optimal_tilt_deg,
        min_monthly_irradiance=result.min_monthly_irradiance,
        annual_yield_mwh=result.annual_yield_mwh,
        annual_yield_kwh=result.annual_yield_kwh,
        valid_months=result.valid_month_count,
        monthly=monthly,
        tilt_sweep=[
            TiltSweepPointResponse(
                tilt_deg=p.tilt_deg,
                annual_yield_mwh=p.annual_yield_mwh,
                min_monthly_irradiance=p.min_monthly_irradiance,
            )
            for p in result.tilt_sweep
        ],
        skipped_months=skipped,
    )


# ---------------------------------------------------------------------------
# Sizing
# ---------------------------------------------------------------------------

def _to_devices(devices: list[DeviceIn]) -> list[Device]:
    return [
        Device(
            name=d.name,
            power_w=d.power_w,
            hours_per_day=d.hours_per_day,
            quantity=d.quantity,
            circuit=d.circuit,
        )
        for d in devices
    ]


def size_off_grid(
    body: OffGridSystemIn, peak_sun_hours: float
) -> tuple[DailyConsumption, OffGridSizing]:
    devices = _to_devices(body.devices)
    consumption = daily_consumption(devices, body.battery_efficiency, body.inverter_efficiency)
    power = instantaneous_power(devices)

    sizing = size_off_grid_system(OffGridInputs(
        daily_energy_wh=consumption.total_wh,
        peak_sun_hours=peak_sun_hours,
        panel_wp=body.panel_wp,
        panel_voltage=body.panel_voltage,
        battery_voltage=body.battery_voltage,
        dc_power_w=power.dc_w,
        ac_power_w=power.ac_w,
        generator_loss_factor=body.generator_loss_factor,
        global_loss_factor=body.global_loss_factor,
        autonomy_days=body.autonomy_days,
        depth_of_discharge=body.depth_of_discharge,
        cable_length_m=body.cable.length_m,
        cable_section_mm2=body.cable.section_mm2,
        resistivity=body.cable.resistivity,
    ))
    return consumption, sizing


def off_grid_response(body: OffGridRequest) -> OffGridResponse:
    consumption, sizing = size_off_grid(body, body.peak_sun_hours)
    power = instantaneous_power(_to_devices(body.devices))
    cable = sizing.cable
    return OffGridResponse(
        dc_energy_wh=consumption.dc_wh,
        ac_energy_wh=consumption.ac_wh,
        daily_energy_wh=consumption.total_wh,
        dc_power_w=power.dc_w,
        ac_power_w=power.ac_w,
        peak_sun_hours=body.peak_sun_hours,
        generator_peak_w=sizing.generator_peak_w,
        panels_energy_balance=sizing.panels_energy_balance,
        panels_in_series=sizing.panels_in_series,
        parallel_strings=sizing.parallel_strings,
        panel_count=sizing.panel_count,
        installed_peak_w=sizing.installed_peak_w,
        daily_generation_kwh=sizing.daily_generation_kwh,
        battery_capacity_ah=sizing.battery_capacity_ah,
        autonomy_energy_kwh=sizing.autonomy_energy_kwh,
        generated_current_a=sizing.generated_current_a,
        consumed_current_a=sizing.consumed_current_a,
        regulator_current_a=sizing.regulator_current_a,
        inverter_power_w=sizing.inverter_power_w,
        cable=CableLossesResponse(
            resistance_ohm=cable.resistance_ohm,
            power_loss_w=cable.power_loss_w,
            voltage_drop_v=cable.voltage_drop_v,
            relative_drop_pct=cable.relative_drop_pct,
        ),
        warnings=sizing.warnings,
    )


def _annual_consumption(body: GridTiedSystemIn) -> float:
    if body.annual_consumption_kwh is not None:
        return body.annual_consumption_kwh
    return annual_consumption_kwh(_to_devices(body.devices or []))


def size_grid_tied(
    body: GridTiedSystemIn, annual_yield_mwh: float, optimal_tilt_deg: float | None
) -> tuple[float, GridTiedSizing]:
    consumption = _annual_consumption(body)
    sizing = size_grid_tied_system(
        consumption,
        annual_yield_mwh,
        performance_ratio=body.performance_ratio,
        module_wp=body.module_wp,
        optimal_tilt_deg=optimal_tilt_deg,
    )
    return consumption, sizing


def grid_tied_response(body: GridTiedRequest) -> GridTiedResponse:
    consumption, sizing = size_grid_tied(body, body.annual_yield_mwh, body.optimal_tilt_deg)
    return GridTiedResponse(
        annual_consumption_kwh=round(consumption, 2),
        annual_peak_sun_hours=sizing.annual_peak_sun_hours,
        peak_power_kwp=sizing.peak_power_kwp,
        module_count=sizing.module_count,
        inverter_power_kw=sizing.inverter_power_kw,
        optimal_tilt_deg=sizing.optimal_tilt_deg,
    )


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

async def build_report(
    body: ReportRequest,
    source: IrradianceSource,
    country_lookup: CountryLookup,
) -> BytesIO:
    """Optimise the site, size what was requested, and render the PDF.

    Sizing sections are left out when the optimisation is unavailable.
    """
    result, country = await run_optimization(body.site, source, country_lookup)

    consumption = off_grid = grid_tied = None
    if result.available:
        if body.off_grid is not None:
            consumption, off_grid = size_off_grid(body.off_grid, result.min_monthly_irradiance)
        if body.grid_tied is not None:
            _, grid_tied = size_grid_tied(
                body.grid_tied, result.annual_yield_mwh, float(result.optimal_tilt_deg)
            )
    elif body.off_grid is not None or body.grid_tied is not None:
        logger.info("Sizing omitted from report: irradiation unavailable for site")

    return generate_pdf_report(
        result,
        site_name=body.site.site_name,
        country=country,
        off_grid=off_grid,
        consumption=consumption,
        grid_tied=grid_tied,
    )
