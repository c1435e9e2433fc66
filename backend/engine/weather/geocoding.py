"""Reverse geocoding of site coordinates (LocationIQ)."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

LOCATIONIQ_REVERSE_URL = "https://us1.locationiq.com/v1/reverse.php"


async def reverse_geocode(
    lat: float,
    lon: float,
    api_key: str,
    base_url: str = LOCATIONIQ_REVERSE_URL,
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str | None:
    """Return the country name for a coordinate, or None if unknown.

    Lookup failures are logged and reported as None; the country name is
    informational and never blocks a calculation.
    """
    if not api_key:
        return None

    params = {"key": api_key, "lat": lat, "lon": lon, "format": "json"}
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.get(base_url, params=params)
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Reverse geocoding failed for (%s, %s): %s", lat, lon, exc)
        return None

    if not isinstance(data, dict):
        return None
    if data.get("error"):
        logger.warning("LocationIQ error for (%s, %s): %s", lat, lon, data["error"])
        return None

    address = data.get("address") or {}
    return address.get("country")
