"""Shared test fixtures for SolarCalc engine and API tests."""

from __future__ import annotations

import asyncio

import pytest

from engine.solar import MONTHS, OptimizationResult, optimize_tilt
from engine.weather import IrradianceDataError

# Daily global horizontal irradiation per calendar month, kWh/m^2/day.
SYNTHETIC_GHI: tuple[float, ...] = (4.0, 4.5, 5.0, 5.5, 6.0, 6.5, 6.5, 6.0, 5.5, 5.0, 4.5, 4.0)


def month_index(day_of_year: int) -> int:
    for i, month in enumerate(MONTHS):
        if month.first_day_of_year <= day_of_year < month.first_day_of_year + month.days_in_month:
            return i
    raise ValueError(f"day_of_year out of range: {day_of_year}")


# ======================================================================
# Irradiance source fakes
# ======================================================================

class FakeIrradianceSource:
    """In-memory irradiance source keyed by calendar month.

    Months listed in ``failing_months`` (0-based) raise IrradianceDataError.
    """

    def __init__(
        self,
        values: tuple[float, ...] = SYNTHETIC_GHI,
        failing_months: tuple[int, ...] = (),
    ) -> None:
        self.values = values
        self.failing_months = set(failing_months)
        self.calls: list[tuple[float, float, int]] = []

    async def fetch_daily_horizontal_irradiation(
        self, lat: float, lon: float, day_of_year: int
    ) -> float:
        self.calls.append((lat, lon, day_of_year))
        idx = month_index(day_of_year)
        if idx in self.failing_months:
            raise IrradianceDataError(f"no data for {MONTHS[idx].name}")
        return self.values[idx]


@pytest.fixture
def source_factory() -> type[FakeIrradianceSource]:
    """The fake source class, so tests can build one with failing months."""
    return FakeIrradianceSource


@pytest.fixture
def lat10_result() -> OptimizationResult:
    """Full-year optimisation at 10 N, 66 W with the synthetic series."""
    return asyncio.run(
        optimize_tilt(10.0, -66.0, 15, source=FakeIrradianceSource())
    )


@pytest.fixture
def unavailable_result() -> OptimizationResult:
    """Optimisation where four months have no data."""
    return asyncio.run(
        optimize_tilt(
            10.0, -66.0, 15, source=FakeIrradianceSource(failing_months=(0, 1, 2, 3))
        )
    )
