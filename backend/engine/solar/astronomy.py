"""
Astronomical model for daily solar radiation studies.

Pure, deterministic functions for the quantities that depend only on the
site latitude and the day of the year: solar declination, Earth-orbit
eccentricity correction, sunset hour angle and the extraterrestrial daily
irradiation on a horizontal surface.

References
----------
- Spencer J.W., "Fourier series representation of the position of
  the sun", Search, 2(5):172, 1971.
- Duffie J.A., Beckman W.A., "Solar Engineering of Thermal Processes",
  4th ed., Wiley, 2013, sections 1.6-1.10.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Physical constants
# ---------------------------------------------------------------------------
SOLAR_CONSTANT: float = 1367.0          # W/m^2
DAILY_FACTOR: float = 24.0 / math.pi    # h/rad, integrates over the day
DAYS_PER_YEAR: int = 365


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MonthSample:
    """One calendar month and where it starts in a non-leap year."""

    name: str
    days_in_month: int
    first_day_of_year: int

    def day_of_year(self, day_of_month: int) -> int | None:
        """Day of year for ``day_of_month``, or None if the month is too short."""
        if day_of_month < 1 or day_of_month > self.days_in_month:
            return None
        return self.first_day_of_year + day_of_month - 1


MONTHS: tuple[MonthSample, ...] = (
    MonthSample("January", 31, 1),
    MonthSample("February", 28, 32),
    MonthSample("March", 31, 60),
    MonthSample("April", 30, 91),
    MonthSample("May", 31, 121),
    MonthSample("June", 30, 152),
    MonthSample("July", 31, 182),
    MonthSample("August", 31, 213),
    MonthSample("September", 30, 244),
    MonthSample("October", 31, 274),
    MonthSample("November", 30, 305),
    MonthSample("December", 31, 335),
)


@dataclass(frozen=True)
class AstronomicalContext:
    """Day-level astronomical quantities for one site and day of year."""

    day_of_year: int
    declination_rad: float
    sunset_hour_angle_rad: float       # [0, pi]
    eccentricity_factor: float
    extraterrestrial_kwh: float        # kWh/m^2/day on a horizontal plane

    @property
    def is_polar_night(self) -> bool:
        return self.sunset_hour_angle_rad == 0.0

    @property
    def is_polar_day(self) -> bool:
        return self.sunset_hour_angle_rad == math.pi


@dataclass(frozen=True)
class ExtraterrestrialDay:
    sunset_hour_angle_rad: float
    eccentricity_factor: float
    daily_irradiation_kwh: float


# ---------------------------------------------------------------------------
# Formulas
# ---------------------------------------------------------------------------

def declination(day_of_year: int | float) -> float:
    """Solar declination (radians) from Spencer's three-harmonic series.

    Valid for ``day_of_year`` in [1, 366]; the caller guarantees the range.
    """
    gamma = 2.0 * math.pi * (day_of_year - 1) / DAYS_PER_YEAR
    return (
        0.006918
        - 0.399912 * math.cos(gamma)
        + 0.070257 * math.sin(gamma)
        - 0.006758 * math.cos(2.0 * gamma)
        + 0.000907 * math.sin(2.0 * gamma)
        - 0.002697 * math.cos(3.0 * gamma)
        + 0.00148 * math.sin(3.0 * gamma)
    )


def eccentricity_factor(day_of_year: int | float) -> float:
    """Earth-Sun distance correction, 1 + 0.033 cos(2*pi*n/365)."""
    return 1.0 + 0.033 * math.cos(2.0 * math.pi * day_of_year / DAYS_PER_YEAR)


def extraterrestrial_daily(
    latitude_rad: float,
    declination_rad: float,
    day_of_year: int | float,
) -> ExtraterrestrialDay:
    """Sunset hour angle and top-of-atmosphere daily irradiation.

    Parameters
    ----------
    latitude_rad : float
        Site latitude in radians (positive north).
    declination_rad : float
        Solar declination in radians.
    day_of_year : int
        Day of year (1-365).

    Returns
    -------
    ExtraterrestrialDay
        ``sunset_hour_angle_rad`` is pi during polar day, 0 during polar
        night and ``acos(-tan(phi) tan(delta))`` otherwise.
        ``daily_irradiation_kwh`` is in kWh/m^2/day and is 0 during polar
        night.
    """
    e0 = eccentricity_factor(day_of_year)
    arccos_arg = -math.tan(latitude_rad) * math.tan(declination_rad)

    if -1.0 <= arccos_arg <= 1.0:
        omega_s = math.acos(arccos_arg)
        irradiation_wh = DAILY_FACTOR * SOLAR_CONSTANT * e0 * (
            omega_s * math.sin(declination_rad) * math.sin(latitude_rad)
            + math.cos(declination_rad) * math.cos(latitude_rad) * math.sin(omega_s)
        )
    elif arccos_arg < -1.0:
        # Midnight sun: the hour-angle term vanishes at omega_s = pi.
        omega_s = math.pi
        irradiation_wh = DAILY_FACTOR * SOLAR_CONSTANT * e0 * (
            omega_s * math.sin(declination_rad) * math.sin(latitude_rad)
        )
    else:
        omega_s = 0.0
        irradiation_wh = 0.0

    return ExtraterrestrialDay(
        sunset_hour_angle_rad=omega_s,
        eccentricity_factor=e0,
        daily_irradiation_kwh=irradiation_wh / 1000.0,
    )


def astronomical_context(latitude_rad: float, day_of_year: int) -> AstronomicalContext:
    """Bundle declination and extraterrestrial quantities for one day."""
    delta = declination(day_of_year)
    day = extraterrestrial_daily(latitude_rad, delta, day_of_year)
    return AstronomicalContext(
        day_of_year=day_of_year,
        declination_rad=delta,
        sunset_hour_angle_rad=day.sunset_hour_angle_rad,
        eccentricity_factor=day.eccentricity_factor,
        extraterrestrial_kwh=day.daily_irradiation_kwh,
    )
