"""Tests for daily irradiation on the tilted plane."""

import math

import pytest

from engine.solar.astronomy import MONTHS, astronomical_context
from engine.solar.decomposition import Unavailable, split_horizontal
from engine.solar.irradiance import (
    ALBEDO,
    MonthlyRadiation,
    TiltedRadiationResult,
    beam_transfer_factor,
    tilted_irradiance,
)


def _month(lat_deg: float, month_idx: int, ghi: float, day: int = 15) -> MonthlyRadiation:
    month = MONTHS[month_idx]
    astro = astronomical_context(math.radians(lat_deg), month.day_of_year(day))
    return MonthlyRadiation(
        month=month, astro=astro, horizontal=split_horizontal(ghi, astro.extraterrestrial_kwh)
    )


class TestBeamTransferFactor:
    def test_flat_plane_is_unity(self):
        astro = astronomical_context(math.radians(40), 46)
        rb = beam_transfer_factor(
            math.radians(40), astro.declination_rad, astro.sunset_hour_angle_rad, 0.0
        )
        assert rb == pytest.approx(1.0)

    def test_winter_tilt_gains_beam(self):
        astro = astronomical_context(math.radians(40), 355)
        rb = beam_transfer_factor(
            math.radians(40), astro.declination_rad, astro.sunset_hour_angle_rad,
            math.radians(40),
        )
        assert rb > 1.5

    def test_southern_site_uses_latitude_minus_tilt(self):
        lat = math.radians(-35)
        tilt = math.radians(30)
        astro = astronomical_context(lat, 172)
        d, w = astro.declination_rad, astro.sunset_hour_angle_rad

        def term(phi):
            return w * math.sin(d) * math.sin(phi) + math.cos(d) * math.cos(phi) * math.sin(w)

        rb = beam_transfer_factor(lat, d, w, tilt)
        assert rb == pytest.approx(term(lat - tilt) / term(lat))
        assert rb == pytest.approx(-0.2007, abs=5e-3)

    def test_zero_denominator(self):
        assert beam_transfer_factor(math.radians(80), math.radians(-23), 0.0, 0.5) == 0.0


class TestTiltedIrradiance:
    def test_horizontal_plane_reproduces_global(self):
        month = _month(10, 0, 5.0)
        result = tilted_irradiance(0.0, month, math.radians(10))
        assert isinstance(result, TiltedRadiationResult)
        assert result.reflected_kwh == 0.0
        assert result.global_tilted_kwh == pytest.approx(5.0)

    def test_vertical_reflected_component(self):
        month = _month(10, 5, 6.0)
        result = tilted_irradiance(math.pi / 2, month, math.radians(10))
        assert result.reflected_kwh == pytest.approx(ALBEDO * 6.0 * 0.5)

    def test_components_non_negative(self):
        for lat in (-45, -10, 0, 10, 45, 65):
            for idx in range(12):
                month = _month(lat, idx, 3.0)
                if not month.is_valid:
                    continue
                for tilt_deg in range(0, 91, 5):
                    r = tilted_irradiance(math.radians(tilt_deg), month, math.radians(lat))
                    assert r.direct_tilted_kwh >= 0.0
                    assert r.diffuse_tilted_kwh >= 0.0
                    assert r.reflected_kwh >= 0.0
                    assert r.global_tilted_kwh == pytest.approx(
                        r.direct_tilted_kwh + r.diffuse_tilted_kwh + r.reflected_kwh
                    )

    def test_unavailable_horizontal_passes_through(self):
        month = _month(10, 0, float("nan"))
        result = tilted_irradiance(0.3, month, math.radians(10))
        assert isinstance(result, Unavailable)

    def test_polar_night_unavailable(self):
        month = _month(85, 11, 0.2)
        assert not month.is_valid
        assert isinstance(tilted_irradiance(0.5, month, math.radians(85)), Unavailable)

    def test_tilt_angle_deg(self):
        month = _month(10, 2, 5.5)
        result = tilted_irradiance(math.radians(15), month, math.radians(10))
        assert result.tilt_angle_deg == pytest.approx(15.0)

    def test_deterministic(self):
        month = _month(25, 4, 6.2)
        a = tilted_irradiance(math.radians(20), month, math.radians(25))
        b = tilted_irradiance(math.radians(20), month, math.radians(25))
        assert a == b

    def test_summer_gain_rises_with_tilt(self):
        # 45 N in mid-August: latitude minus declination is about 31 degrees
        month = _month(45, 7, 7.0)
        gi = [
            tilted_irradiance(math.radians(t), month, math.radians(45)).global_tilted_kwh
            for t in range(0, 20, 5)
        ]
        assert gi == sorted(gi)
        assert gi[-1] > gi[0]
