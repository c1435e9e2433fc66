"""Weather data module (irradiation sources, retry policy, reverse geocoding)."""

from .base import IrradianceDataError, IrradianceSource
from .retry import RetryExhaustedError, RetryPolicy
from .open_meteo import (
    MJ_TO_KWH,
    OPEN_METEO_ARCHIVE_URL,
    OpenMeteoArchiveSource,
    parse_shortwave_sum,
    reference_date,
)
from .geocoding import reverse_geocode

__all__ = [
    "IrradianceDataError",
    "IrradianceSource",
    "RetryExhaustedError",
    "RetryPolicy",
    "MJ_TO_KWH",
    "OPEN_METEO_ARCHIVE_URL",
    "OpenMeteoArchiveSource",
    "parse_shortwave_sum",
    "reference_date",
    "reverse_geocode",
]
