"""
Annual tilt-angle optimisation from 12 representative days.

For each calendar month one representative day is evaluated: the
astronomical context is computed locally and the measured global
horizontal irradiation is requested from an :class:`IrradianceSource`.
All requests run concurrently and are joined before any aggregation.
Candidate tilts 0-90 degrees in 5 degree steps are then scored by their
annual yield (monthly Gi weighted by the number of days in the month) and
the best candidate is re-evaluated month by month.

A month whose data cannot be fetched, for whatever reason, is logged and
excluded.  If fewer than ``min_valid_months`` months remain, the result is
explicitly unavailable rather than an error.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass

import numpy as np

from engine.weather.base import IrradianceDataError, IrradianceSource

from .astronomy import MONTHS, AstronomicalContext, MonthSample, astronomical_context
from .decomposition import HorizontalComponents, Unavailable, split_horizontal
from .irradiance import MonthlyRadiation, TiltedRadiationResult, tilted_irradiance

logger = logging.getLogger(__name__)

# Below this many valid months the annual picture is considered unreliable.
MIN_VALID_MONTHS: int = 10

TILT_CANDIDATES_DEG: tuple[int, ...] = tuple(range(0, 91, 5))


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MonthObservation:
    """One attempted month, valid or not."""

    month: MonthSample
    astro: AstronomicalContext
    global_horizontal_kwh: float | None
    horizontal: HorizontalComponents | Unavailable

    @property
    def is_valid(self) -> bool:
        return isinstance(self.horizontal, HorizontalComponents)


@dataclass(frozen=True)
class TiltSearchPoint:
    """Aggregate score of one candidate tilt."""

    tilt_deg: int
    annual_yield_mwh: float
    min_monthly_irradiance: float


@dataclass(frozen=True)
class MonthlyResult:
    """Tilted irradiation of one valid month at the chosen angle."""

    radiation: MonthlyRadiation
    tilted: TiltedRadiationResult

    @property
    def month_name(self) -> str:
        return self.radiation.month.name

    @property
    def days_in_month(self) -> int:
        return self.radiation.month.days_in_month


@dataclass(frozen=True)
class OptimizationResult:
    """Outcome of :func:`optimize_tilt`.

    ``optimal_tilt_deg`` is None when too few months had usable data; in
    that case the yield is 0 and no monthly results are given.
    """

    optimal_tilt_deg: int | None
    min_monthly_irradiance: float
    annual_yield_mwh: float
    monthly_results: tuple[MonthlyResult, ...] = ()
    tilt_sweep: tuple[TiltSearchPoint, ...] = ()
    observations: tuple[MonthObservation, ...] = ()
    latitude_deg: float = 0.0
    longitude_deg: float = 0.0
    representative_day: int = 15

    @property
    def available(self) -> bool:
        return self.optimal_tilt_deg is not None

    @property
    def valid_month_count(self) -> int:
        return sum(1 for o in self.observations if o.is_valid)

    @property
    def annual_yield_kwh(self) -> float:
        """Annual yield expressed as yearly peak sun hours (kWh/m^2/yr)."""
        return self.annual_yield_mwh * 1000.0


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

def validate_site(latitude_deg: float, longitude_deg: float, representative_day: int) -> None:
    """Reject inputs the optimisation cannot use."""
    for name, value in (
        ("latitude", latitude_deg),
        ("longitude", longitude_deg),
        ("representative_day", representative_day),
    ):
        if value is None or not math.isfinite(value):
            raise ValueError(f"{name} must be a finite number, got {value!r}")
    if not -90.0 <= latitude_deg <= 90.0:
        raise ValueError(f"latitude must be within [-90, 90], got {latitude_deg}")
    if not -180.0 <= longitude_deg <= 180.0:
        raise ValueError(f"longitude must be within [-180, 180], got {longitude_deg}")
    if int(representative_day) != representative_day or not 1 <= representative_day <= 31:
        raise ValueError(
            f"representative_day must be an integer in 1-31, got {representative_day}"
        )


# ---------------------------------------------------------------------------
# Data collection
# ---------------------------------------------------------------------------

async def _observe_month(
    source: IrradianceSource,
    month: MonthSample,
    astro: AstronomicalContext,
    latitude_deg: float,
    longitude_deg: float,
) -> MonthObservation:
    try:
        value = await source.fetch_daily_horizontal_irradiation(
            latitude_deg, longitude_deg, astro.day_of_year
        )
    except IrradianceDataError as exc:
        logger.warning(
            "No irradiation data for %s (day %d): %s", month.name, astro.day_of_year, exc
        )
        return MonthObservation(month, astro, None, Unavailable(str(exc)))
    except Exception as exc:
        # A broken source only costs its own month.
        logger.exception(
            "Irradiation source failed for %s (day %d)", month.name, astro.day_of_year
        )
        return MonthObservation(
            month, astro, None, Unavailable(f"{type(exc).__name__}: {exc}")
        )

    horizontal = split_horizontal(value, astro.extraterrestrial_kwh)
    if isinstance(horizontal, Unavailable):
        logger.warning("%s excluded: %s", month.name, horizontal.reason)
    return MonthObservation(month, astro, value, horizontal)


async def collect_observations(
    latitude_deg: float,
    longitude_deg: float,
    representative_day: int,
    source: IrradianceSource,
) -> list[MonthObservation]:
    """Fetch and split the representative day of every month concurrently.

    Months shorter than ``representative_day`` are skipped entirely.
    """
    latitude_rad = math.radians(latitude_deg)
    pending = []
    for month in MONTHS:
        day_of_year = month.day_of_year(representative_day)
        if day_of_year is None:
            continue
        astro = astronomical_context(latitude_rad, day_of_year)
        pending.append(_observe_month(source, month, astro, latitude_deg, longitude_deg))

    return list(await asyncio.gather(*pending))


# ---------------------------------------------------------------------------
# Tilt search
# ---------------------------------------------------------------------------

def search_tilt(
    months: list[MonthlyRadiation],
    latitude_rad: float,
    candidates_deg: tuple[int, ...] = TILT_CANDIDATES_DEG,
) -> tuple[int, list[TiltSearchPoint]]:
    """Score every candidate and pick the one with the greatest annual yield.

    The first candidate wins a tie, so equal yields keep the flatter angle.
    """
    if not months:
        raise ValueError("search_tilt needs at least one valid month")

    sweep: list[TiltSearchPoint] = []
    for tilt_deg in candidates_deg:
        tilt_rad = math.radians(tilt_deg)
        gi_list: list[float] = []
        days_list: list[int] = []
        for month in months:
            tilted = tilted_irradiance(tilt_rad, month, latitude_rad)
            if isinstance(tilted, TiltedRadiationResult):
                gi_list.append(tilted.global_tilted_kwh)
                days_list.append(month.month.days_in_month)
        gi = np.array(gi_list, dtype=np.float64)
        days = np.array(days_list, dtype=np.float64)
        annual_mwh = float(gi @ days) / 1000.0
        sweep.append(TiltSearchPoint(
            tilt_deg=tilt_deg,
            annual_yield_mwh=annual_mwh,
            min_monthly_irradiance=float(gi.min()),
        ))

    best = int(np.argmax([p.annual_yield_mwh for p in sweep]))
    return candidates_deg[best], sweep


async def optimize_tilt(
    latitude_deg: float,
    longitude_deg: float,
    representative_day: int = 15,
    *,
    source: IrradianceSource,
    min_valid_months: int = MIN_VALID_MONTHS,
) -> OptimizationResult:
    """Find the tilt that maximises annual irradiation at a site.

    Parameters
    ----------
    latitude_deg, longitude_deg : float
        Site coordinates in degrees (signed).
    representative_day : int
        Day of month (1-31) evaluated for every month; months with fewer
        days are skipped.
    source : IrradianceSource
        Supplier of measured daily global horizontal irradiation.
    min_valid_months : int
        Minimum number of months with usable data for a result.

    Returns
    -------
    OptimizationResult
        Recomputed from scratch on every call.

    Raises
    ------
    ValueError
        If the coordinates or the day are not usable.
    """
    validate_site(latitude_deg, longitude_deg, representative_day)
    representative_day = int(representative_day)
    latitude_rad = math.radians(latitude_deg)

    observations = await collect_observations(
        latitude_deg, longitude_deg, representative_day, source
    )
    valid = [
        MonthlyRadiation(month=o.month, astro=o.astro, horizontal=o.horizontal)
        for o in observations
        if o.is_valid
    ]

    base = dict(
        observations=tuple(observations),
        latitude_deg=latitude_deg,
        longitude_deg=longitude_deg,
        representative_day=representative_day,
    )

    if len(valid) < max(min_valid_months, 1):
        logger.warning(
            "Only %d of %d months have irradiation data (need %d); no optimum",
            len(valid), len(observations), min_valid_months,
        )
        return OptimizationResult(
            optimal_tilt_deg=None,
            min_monthly_irradiance=0.0,
            annual_yield_mwh=0.0,
            **base,
        )

    optimal_deg, sweep = search_tilt(valid, latitude_rad)
    at_optimum = next(p for p in sweep if p.tilt_deg == optimal_deg)

    optimal_rad = math.radians(optimal_deg)
    monthly = []
    for month in valid:
        tilted = tilted_irradiance(optimal_rad, month, latitude_rad)
        if isinstance(tilted, TiltedRadiationResult):
            monthly.append(MonthlyResult(radiation=month, tilted=tilted))

    logger.info(
        "Optimal tilt %d deg at (%.4f, %.4f): %.3f MWh/m2/yr, worst month %.2f kWh/m2/day",
        optimal_deg, latitude_deg, longitude_deg,
        at_optimum.annual_yield_mwh, at_optimum.min_monthly_irradiance,
    )

    return OptimizationResult(
        optimal_tilt_deg=optimal_deg,
        min_monthly_irradiance=at_optimum.min_monthly_irradiance,
        annual_yield_mwh=at_optimum.annual_yield_mwh,
        monthly_results=tuple(monthly),
        tilt_sweep=tuple(sweep),
        **base,
    )
