"""
Daily irradiation on a tilted plane.

Converts the horizontal direct/diffuse split of one representative day
into plane-of-array components:

- beam, scaled by the daily beam transfer factor Rb (Liu & Jordan);
- sky diffuse, split by an anisotropy index between a circumsolar part
  that follows the beam geometry and an isotropic part (Hay & Davies);
- ground reflected, with a fixed albedo.

References
----------
- Liu B.Y.H., Jordan R.C., "Daily insolation on surfaces tilted toward
  the equator", ASHRAE Journal, 3(10):53-59, 1961.
- Hay J.E., Davies J.A., "Calculation of the solar radiation incident on
  an inclined surface", Proc. First Canadian Solar Radiation Data
  Workshop, 59-72, 1980.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .astronomy import AstronomicalContext, MonthSample
from .decomposition import HorizontalComponents, Unavailable

ALBEDO: float = 0.2  # default ground reflectance


@dataclass(frozen=True)
class MonthlyRadiation:
    """Everything known about one representative day before tilting."""

    month: MonthSample
    astro: AstronomicalContext
    horizontal: HorizontalComponents | Unavailable

    @property
    def is_valid(self) -> bool:
        return (
            isinstance(self.horizontal, HorizontalComponents)
            and self.astro.extraterrestrial_kwh > 0.0
        )


@dataclass(frozen=True)
class TiltedRadiationResult:
    """Daily irradiation components on the tilted plane (kWh/m^2/day)."""

    tilt_angle_rad: float
    beam_transfer_factor: float
    direct_tilted_kwh: float
    diffuse_tilted_kwh: float
    reflected_kwh: float
    global_tilted_kwh: float   # Gi, the peak-sun-hours equivalent

    @property
    def tilt_angle_deg(self) -> float:
        return math.degrees(self.tilt_angle_rad)


def _daily_beam_term(
    phi: float, declination_rad: float, sunset_hour_angle_rad: float
) -> float:
    w = sunset_hour_angle_rad
    return (
        w * math.sin(declination_rad) * math.sin(phi)
        + math.cos(declination_rad) * math.cos(phi) * math.sin(w)
    )


def beam_transfer_factor(
    latitude_rad: float,
    declination_rad: float,
    sunset_hour_angle_rad: float,
    tilt_rad: float,
) -> float:
    """Ratio of daily beam irradiation on the tilted plane to the horizontal.

    The tilted plane is evaluated at the equivalent latitude ``phi - beta``
    for every site, whatever its hemisphere.  Returns 0 when the horizontal term is exactly zero (no beam on the
    horizontal, e.g. polar night).
    """
    numerator = _daily_beam_term(latitude_rad - tilt_rad, declination_rad, sunset_hour_angle_rad)
    denominator = _daily_beam_term(latitude_rad, declination_rad, sunset_hour_angle_rad)
    if denominator == 0.0:
        return 0.0
    return numerator / denominator


def tilted_irradiance(
    tilt_rad: float,
    month: MonthlyRadiation,
    latitude_rad: float,
    albedo: float = ALBEDO,
) -> TiltedRadiationResult | Unavailable:
    """Global tilted irradiation (Gi) and its components for one month.

    Parameters
    ----------
    tilt_rad : float
        Surface tilt from horizontal in radians. The caller keeps it in
        [0, pi/2]; no clamping is applied here.
    month : MonthlyRadiation
        Astronomical context and horizontal split of the representative day.
    latitude_rad : float
        Site latitude in radians.
    albedo : float
        Ground reflectance.

    Returns
    -------
    TiltedRadiationResult or Unavailable
        Unavailable when the horizontal split is missing or the
        extraterrestrial irradiation is not positive.
    """
    if isinstance(month.horizontal, Unavailable):
        return month.horizontal
    if month.astro.extraterrestrial_kwh <= 0.0:
        return Unavailable("no extraterrestrial irradiation (polar night)")

    h = month.horizontal
    rb = beam_transfer_factor(
        latitude_rad,
        month.astro.declination_rad,
        month.astro.sunset_hour_angle_rad,
        tilt_rad,
    )

    direct = max(0.0, h.direct_kwh * rb)

    anisotropy = min(1.0, max(0.0, h.direct_kwh / month.astro.extraterrestrial_kwh))
    sky_view = 0.5 * (1.0 + math.cos(tilt_rad))
    diffuse = max(
        0.0,
        h.diffuse_kwh * anisotropy * rb + h.diffuse_kwh * (1.0 - anisotropy) * sky_view,
    )

    reflected = albedo * h.global_kwh * 0.5 * (1.0 - math.cos(tilt_rad))

    return TiltedRadiationResult(
        tilt_angle_rad=tilt_rad,
        beam_transfer_factor=rb,
        direct_tilted_kwh=direct,
        diffuse_tilted_kwh=diffuse,
        reflected_kwh=reflected,
        global_tilted_kwh=direct + diffuse + reflected,
    )
