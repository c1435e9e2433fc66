"""Contract for sources of daily horizontal irradiation."""

from __future__ import annotations

from typing import Protocol


class IrradianceDataError(Exception):
    """A source could not deliver a usable irradiation value."""


class IrradianceSource(Protocol):
    async def fetch_daily_horizontal_irradiation(
        self, lat: float, lon: float, day_of_year: int
    ) -> float:
        """Daily global horizontal irradiation in kWh/m^2/day.

        Raises :class:`IrradianceDataError` when no value can be obtained.
        """
        ...
