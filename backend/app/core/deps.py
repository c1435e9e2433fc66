"""FastAPI dependencies for external data sources.

Both are plain factories so tests can swap them through
``app.dependency_overrides``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from app.config import settings
from engine.weather import (
    IrradianceDataError,
    IrradianceSource,
    OpenMeteoArchiveSource,
    RetryPolicy,
    reverse_geocode,
)

CountryLookup = Callable[[float, float], Awaitable[str | None]]


def get_irradiance_source() -> IrradianceSource:
    return OpenMeteoArchiveSource(
        base_url=settings.open_meteo_archive_url,
        year=settings.irradiance_reference_year,
        timeout=settings.irradiance_timeout_seconds,
        retry=RetryPolicy(
            max_attempts=settings.irradiance_max_attempts,
            base_delay=settings.irradiance_retry_base_delay,
            retry_on=(IrradianceDataError,),
        ),
    )


def get_country_lookup() -> CountryLookup:
    async def lookup(lat: float, lon: float) -> str | None:
        return await reverse_geocode(
            lat, lon, settings.locationiq_api_key, base_url=settings.locationiq_reverse_url
        )

    return lookup
