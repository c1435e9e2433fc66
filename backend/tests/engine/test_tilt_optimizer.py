"""Tests for the annual tilt-angle optimiser."""

from __future__ import annotations

import asyncio
import math

import pytest

from engine.solar import tilt_optimizer
from engine.solar.astronomy import MONTHS
from engine.solar.irradiance import TiltedRadiationResult
from engine.solar.tilt_optimizer import (
    TILT_CANDIDATES_DEG,
    optimize_tilt,
    search_tilt,
    validate_site,
)

pytestmark = pytest.mark.asyncio


# ======================================================================
# Validation
# ======================================================================


class TestValidateSite:
    @pytest.mark.parametrize(
        "lat,lon,day",
        [
            (91.0, 0.0, 15),
            (-90.5, 0.0, 15),
            (10.0, 181.0, 15),
            (float("nan"), 0.0, 15),
            (10.0, float("inf"), 15),
            (10.0, 0.0, 0),
            (10.0, 0.0, 32),
            (10.0, 0.0, 15.5),
        ],
    )
    async def test_rejects(self, lat, lon, day):
        with pytest.raises(ValueError):
            validate_site(lat, lon, day)

    async def test_accepts_bounds(self):
        validate_site(90.0, -180.0, 1)
        validate_site(-90.0, 180.0, 31)

    async def test_optimize_raises_before_fetching(self, source_factory):
        source = source_factory()
        with pytest.raises(ValueError):
            await optimize_tilt(120.0, 0.0, 15, source=source)
        assert source.calls == []


# ======================================================================
# Full optimisation
# ======================================================================


class TestOptimizeTilt:
    async def test_full_year_low_latitude(self, source_factory):
        source = source_factory()
        result = await optimize_tilt(10.0, -66.0, 15, source=source)

        assert result.available
        assert result.optimal_tilt_deg in TILT_CANDIDATES_DEG
        assert result.optimal_tilt_deg <= 45
        assert len(result.monthly_results) == 12
        assert result.valid_month_count == 12
        assert len(source.calls) == 12
        assert result.min_monthly_irradiance > 0.0
        assert result.annual_yield_mwh > 0.0

    async def test_requests_representative_day_of_each_month(self, source_factory):
        source = source_factory()
        await optimize_tilt(10.0, -66.0, 15, source=source)
        requested = sorted(call[2] for call in source.calls)
        assert requested == [m.first_day_of_year + 14 for m in MONTHS]
        assert all(call[:2] == (10.0, -66.0) for call in source.calls)

    async def test_aggregates_match_monthly_results(self, source_factory):
        result = await optimize_tilt(10.0, -66.0, 15, source=source_factory())
        gi = [m.tilted.global_tilted_kwh for m in result.monthly_results]
        days = [m.days_in_month for m in result.monthly_results]

        assert result.min_monthly_irradiance == pytest.approx(min(gi))
        assert result.annual_yield_mwh == pytest.approx(
            sum(g * d for g, d in zip(gi, days)) / 1000.0
        )
        assert result.annual_yield_kwh == pytest.approx(result.annual_yield_mwh * 1000.0)
        for m in result.monthly_results:
            assert m.tilted.tilt_angle_deg == pytest.approx(result.optimal_tilt_deg)

    async def test_optimum_has_greatest_annual_yield(self, source_factory):
        result = await optimize_tilt(10.0, -66.0, 15, source=source_factory())
        assert len(result.tilt_sweep) == len(TILT_CANDIDATES_DEG)
        best = max(p.annual_yield_mwh for p in result.tilt_sweep)
        at_optimum = next(p for p in result.tilt_sweep if p.tilt_deg == result.optimal_tilt_deg)
        assert at_optimum.annual_yield_mwh == best

    async def test_deterministic(self, source_factory):
        a = await optimize_tilt(10.0, -66.0, 15, source=source_factory())
        b = await optimize_tilt(10.0, -66.0, 15, source=source_factory())
        assert a.optimal_tilt_deg == b.optimal_tilt_deg
        assert a.annual_yield_mwh == b.annual_yield_mwh
        assert a.min_monthly_irradiance == b.min_monthly_irradiance

    async def test_southern_site_keeps_flat_panel(self, source_factory):
        result = await optimize_tilt(-35.0, 150.0, 15, source=source_factory())
        assert result.available
        assert result.optimal_tilt_deg == 0
        sweep = {p.tilt_deg: p.annual_yield_mwh for p in result.tilt_sweep}
        assert sweep[30] < sweep[0]
        june = next(m for m in result.monthly_results if m.month_name == "June")
        assert june.tilted.beam_transfer_factor == pytest.approx(1.0)

    async def test_all_months_requested_concurrently(self):
        class GaugedSource:
            def __init__(self) -> None:
                self.in_flight = 0
                self.peak = 0

            async def fetch_daily_horizontal_irradiation(self, lat, lon, day_of_year):
                self.in_flight += 1
                self.peak = max(self.peak, self.in_flight)
                await asyncio.sleep(0)
                self.in_flight -= 1
                return 5.0

        source = GaugedSource()
        result = await optimize_tilt(10.0, -66.0, 15, source=source)

        assert result.available
        assert source.peak == 12
        assert source.in_flight == 0


# ======================================================================
# Missing data
# ======================================================================


class TestUnavailable:
    async def test_eight_valid_months(self, source_factory):
        source = source_factory(failing_months=(0, 1, 2, 3))
        result = await optimize_tilt(10.0, -66.0, 15, source=source)

        assert not result.available
        assert result.optimal_tilt_deg is None
        assert result.annual_yield_mwh == 0.0
        assert result.min_monthly_irradiance == 0.0
        assert result.monthly_results == ()
        assert result.valid_month_count == 8
        assert len(result.observations) == 12

    async def test_ten_valid_months_is_enough(self, source_factory):
        source = source_factory(failing_months=(0, 6))
        result = await optimize_tilt(10.0, -66.0, 15, source=source)

        assert result.available
        assert len(result.monthly_results) == 10
        names = {m.month_name for m in result.monthly_results}
        assert "January" not in names and "July" not in names

    async def test_threshold_is_tunable(self, source_factory):
        source = source_factory(failing_months=(0, 1, 2, 3))
        result = await optimize_tilt(10.0, -66.0, 15, source=source, min_valid_months=8)
        assert result.available
        assert len(result.monthly_results) == 8

    async def test_unexpected_source_error_excludes_month(self):
        class BrokenMarchSource:
            async def fetch_daily_horizontal_irradiation(self, lat, lon, day_of_year):
                if day_of_year == MONTHS[2].day_of_year(15):
                    raise KeyError(0)
                return 5.0

        result = await optimize_tilt(10.0, -66.0, 15, source=BrokenMarchSource())

        assert result.available
        assert result.valid_month_count == 11
        march = next(o for o in result.observations if o.month.name == "March")
        assert not march.is_valid
        assert "KeyError" in march.horizontal.reason

    async def test_day_31_skips_short_months(self, source_factory):
        source = source_factory()
        result = await optimize_tilt(10.0, -66.0, 31, source=source)

        # Only the seven 31-day months are requested
        assert len(source.calls) == 7
        assert len(result.observations) == 7
        assert not result.available
        assert result.optimal_tilt_deg is None

    async def test_non_positive_value_excluded(self, source_factory):
        values = (0.0,) + (5.0,) * 11
        result = await optimize_tilt(10.0, -66.0, 15, source=source_factory(values=values))
        assert result.available
        assert result.valid_month_count == 11
        assert "January" not in {m.month_name for m in result.monthly_results}

    async def test_polar_night_months_excluded(self, source_factory):
        source = source_factory()
        result = await optimize_tilt(89.0, 0.0, 15, source=source)

        # The source is still asked; the dark months fail the decomposition
        assert len(source.calls) == 12
        assert not result.available
        dark = {o.month.name for o in result.observations if not o.is_valid}
        assert {"January", "December", "November"} <= dark
        assert "June" not in dark

    async def test_polar_site_with_relaxed_threshold(self, source_factory):
        result = await optimize_tilt(
            89.0, 0.0, 15, source=source_factory(), min_valid_months=4
        )
        assert result.available
        names = {m.month_name for m in result.monthly_results}
        assert "December" not in names
        assert "June" in names
        for m in result.monthly_results:
            assert m.radiation.astro.extraterrestrial_kwh > 0.0


# ======================================================================
# Search
# ======================================================================


class TestSearchTilt:
    async def test_tie_keeps_first_candidate(self, monkeypatch, source_factory):
        def flat(tilt_rad, month, latitude_rad, albedo=0.2):
            return TiltedRadiationResult(tilt_rad, 1.0, 1.0, 1.0, 1.0, 3.0)

        monkeypatch.setattr(tilt_optimizer, "tilted_irradiance", flat)
        result = await optimize_tilt(10.0, -66.0, 15, source=source_factory())
        assert result.optimal_tilt_deg == 0

    async def test_empty_months(self):
        with pytest.raises(ValueError):
            search_tilt([], math.radians(10))
