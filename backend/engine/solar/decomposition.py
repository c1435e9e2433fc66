"""
Diffuse / direct decomposition of daily global horizontal irradiation.

The daily clearness index drives a cubic diffuse-fraction correlation in
the style of Orgill and Hollands (1977).  Missing or non-physical inputs
produce an explicit :class:`Unavailable` result instead of NaN so callers
cannot confuse a data gap with a real zero.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# Diffuse fraction polynomial coefficients for powers 0..3 of Kt
DIFFUSE_COEFFS: tuple[float, float, float, float] = (1.39, -4.027, 5.531, -3.108)


@dataclass(frozen=True)
class Unavailable:
    """No usable value; ``reason`` says why."""

    reason: str


@dataclass(frozen=True)
class HorizontalComponents:
    """Daily irradiation on the horizontal plane (kWh/m^2/day)."""

    global_kwh: float
    clearness_index: float
    diffuse_kwh: float
    direct_kwh: float


def diffuse_fraction(clearness_index: float) -> float:
    """Cubic correlation for the diffuse share of global irradiation."""
    c0, c1, c2, c3 = DIFFUSE_COEFFS
    kt = clearness_index
    return c0 + c1 * kt + c2 * kt ** 2 + c3 * kt ** 3


def split_horizontal(
    global_kwh: float | None,
    extraterrestrial_kwh: float,
) -> HorizontalComponents | Unavailable:
    """Split measured global horizontal irradiation into diffuse and direct.

    Parameters
    ----------
    global_kwh : float or None
        Measured daily global horizontal irradiation (kWh/m^2/day).
    extraterrestrial_kwh : float
        Extraterrestrial daily irradiation for the same day (kWh/m^2/day).

    Returns
    -------
    HorizontalComponents or Unavailable
        Diffuse is bounded to [0, global] and direct is the remainder, so
        ``direct + diffuse`` reproduces ``global``.
    """
    if global_kwh is None or not isinstance(global_kwh, (int, float)):
        return Unavailable("no global horizontal value")
    if not math.isfinite(global_kwh) or global_kwh <= 0.0:
        return Unavailable(f"non-positive global horizontal value ({global_kwh})")
    if not math.isfinite(extraterrestrial_kwh) or extraterrestrial_kwh <= 0.0:
        return Unavailable("no extraterrestrial irradiation (polar night)")

    kt = min(1.0, global_kwh / extraterrestrial_kwh)
    diffuse = global_kwh * diffuse_fraction(kt)
    diffuse = min(max(diffuse, 0.0), global_kwh)
    direct = max(0.0, global_kwh - diffuse)

    return HorizontalComponents(
        global_kwh=float(global_kwh),
        clearness_index=kt,
        diffuse_kwh=diffuse,
        direct_kwh=direct,
    )
