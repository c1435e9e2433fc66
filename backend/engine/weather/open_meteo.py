"""Open-Meteo historical archive client for daily horizontal irradiation."""

from __future__ import annotations

import logging
from datetime import date, timedelta

import httpx

from engine.weather.base import IrradianceDataError
from engine.weather.retry import RetryExhaustedError, RetryPolicy

logger = logging.getLogger(__name__)

OPEN_METEO_ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/archive"

# Requests use one fixed, complete year of the archive.
REFERENCE_YEAR = 2023

MJ_TO_KWH = 0.277778


def reference_date(day_of_year: int, year: int = REFERENCE_YEAR) -> date:
    """Calendar date of ``day_of_year`` in ``year``."""
    return date(year, 1, 1) + timedelta(days=day_of_year - 1)


class OpenMeteoArchiveSource:
    """Daily ``shortwave_radiation_sum`` for a point, converted to kWh/m^2.

    Args:
        base_url: Archive endpoint.
        year: Reference year used to build the request date.
        timeout: Per-request timeout in seconds.
        retry: Backoff policy applied around each single-day request.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str = OPEN_METEO_ARCHIVE_URL,
        year: int = REFERENCE_YEAR,
        timeout: float = 30.0,
        retry: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.year = year
        self.timeout = timeout
        self.retry = retry or RetryPolicy(
            max_attempts=3, base_delay=1.0, retry_on=(IrradianceDataError,)
        )
        self._transport = transport

    async def fetch_daily_horizontal_irradiation(
        self, lat: float, lon: float, day_of_year: int
    ) -> float:
        day = reference_date(day_of_year, self.year)
        try:
            return await self.retry.call(self._fetch_once, lat, lon, day)
        except RetryExhaustedError as exc:
            raise IrradianceDataError(
                f"Open-Meteo archive unavailable for ({lat}, {lon}) on {day.isoformat()}: {exc}"
            ) from exc

    async def _fetch_once(self, lat: float, lon: float, day: date) -> float:
        params = {
            "latitude": lat,
            "longitude": lon,
            "start_date": day.isoformat(),
            "end_date": day.isoformat(),
            "daily": "shortwave_radiation_sum",
            "timezone": "auto",
        }
        logger.debug("Open-Meteo request %s params=%s", self.base_url, params)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.base_url, params=params)
        except httpx.HTTPError as exc:
            raise IrradianceDataError(f"connection error: {exc}") from exc

        if response.is_error:
            raise IrradianceDataError(
                f"HTTP {response.status_code} {response.reason_phrase} from Open-Meteo"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise IrradianceDataError("malformed JSON payload from Open-Meteo") from exc

        return parse_shortwave_sum(data)


def parse_shortwave_sum(data: object) -> float:
    """Extract the first daily shortwave sum (MJ/m^2) and convert to kWh/m^2."""
    if not isinstance(data, dict):
        raise IrradianceDataError("unexpected payload shape from Open-Meteo")
    if data.get("reason"):
        raise IrradianceDataError(f"Open-Meteo error: {data['reason']}")

    daily = data.get("daily") or {}
    if not isinstance(daily, dict):
        raise IrradianceDataError(f"unexpected daily block from Open-Meteo: {daily!r}")
    values = daily.get("shortwave_radiation_sum")
    if values is not None and not isinstance(values, list):
        raise IrradianceDataError(
            f"shortwave_radiation_sum is not a list: {type(values).__name__}"
        )
    if not values:
        raise IrradianceDataError("no shortwave_radiation_sum in Open-Meteo response")

    value_mj = values[0]
    if value_mj is None:
        raise IrradianceDataError("shortwave_radiation_sum is null for this date")
    try:
        return float(value_mj) * MJ_TO_KWH
    except (TypeError, ValueError) as exc:
        raise IrradianceDataError(f"non-numeric shortwave_radiation_sum: {value_mj!r}") from exc
