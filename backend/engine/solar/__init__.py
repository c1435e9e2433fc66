"""
Solar irradiance engine module.

Provides the astronomical model (declination, extraterrestrial daily
irradiation), the horizontal diffuse/direct split, daily tilted-plane
irradiation, and the annual tilt-angle optimiser.
"""

from .astronomy import (
    MONTHS,
    AstronomicalContext,
    ExtraterrestrialDay,
    MonthSample,
    astronomical_context,
    declination,
    eccentricity_factor,
    extraterrestrial_daily,
)
from .decomposition import (
    HorizontalComponents,
    Unavailable,
    diffuse_fraction,
    split_horizontal,
)
from .irradiance import (
    ALBEDO,
    MonthlyRadiation,
    TiltedRadiationResult,
    beam_transfer_factor,
    tilted_irradiance,
)
from .tilt_optimizer import (
    MIN_VALID_MONTHS,
    TILT_CANDIDATES_DEG,
    MonthlyResult,
    MonthObservation,
    OptimizationResult,
    TiltSearchPoint,
    collect_observations,
    optimize_tilt,
    search_tilt,
    validate_site,
)

__all__ = [
    # astronomy
    "MONTHS",
    "AstronomicalContext",
    "ExtraterrestrialDay",
    "MonthSample",
    "astronomical_context",
    "declination",
    "eccentricity_factor",
    "extraterrestrial_daily",
    # decomposition
    "HorizontalComponents",
    "Unavailable",
    "diffuse_fraction",
    "split_horizontal",
    # irradiance
    "ALBEDO",
    "MonthlyRadiation",
    "TiltedRadiationResult",
    "beam_transfer_factor",
    "tilted_irradiance",
    # tilt_optimizer
    "MIN_VALID_MONTHS",
    "TILT_CANDIDATES_DEG",
    "MonthlyResult",
    "MonthObservation",
    "OptimizationResult",
    "TiltSearchPoint",
    "collect_observations",
    "optimize_tilt",
    "search_tilt",
    "validate_site",
]
