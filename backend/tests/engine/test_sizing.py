"""Tests for off-grid and grid-tied system sizing."""

import math

import pytest

from engine.sizing import (
    OffGridInputs,
    battery_capacity_ah,
    cable_losses,
    consumed_current,
    generated_current,
    generator_peak_power,
    inverter_nominal_power,
    module_count,
    panels_in_series,
    parallel_strings,
    peak_power_kwp,
    regulator_current,
    size_grid_tied_system,
    size_off_grid_system,
    total_panels,
)


# ======================================================================
# Off-grid formulas
# ======================================================================


class TestOffGridFormulas:
    def test_generator_peak_power(self):
        assert generator_peak_power(2000, 4.0) == pytest.approx(625.0)
        assert generator_peak_power(2000, 0.0) == 0.0

    def test_total_panels(self):
        assert total_panels(2000, 4.0, 300, 0.8) == 3
        assert total_panels(2000, 4.0, 0, 0.8) == 0

    def test_series_and_parallel(self):
        assert panels_in_series(24, 12) == 2
        assert panels_in_series(48, 36) == 2
        assert panels_in_series(24, 0) == 0
        assert parallel_strings(3, 2) == 2
        assert parallel_strings(3, 0) == 3

    def test_battery_capacity(self):
        assert battery_capacity_ah(2000, 2, 24, 0.5) == 334
        assert battery_capacity_ah(2000, 2, 0, 0.5) == 0

    def test_currents(self):
        assert generated_current(300, 12, 2) == pytest.approx(50.0)
        assert consumed_current(100, 24, 440) == pytest.approx(100 / 24 + 2.0)
        assert regulator_current(50.0, 6.2) == 63

    def test_inverter(self):
        assert inverter_nominal_power(440) == pytest.approx(550.0)
        assert inverter_nominal_power(0) == 0.0

    def test_cable_losses(self):
        c = cable_losses(50.0, length_m=5, section_mm2=4, resistivity=0.0172, system_voltage=24)
        assert c.resistance_ohm == pytest.approx(0.043)
        assert c.voltage_drop_v == pytest.approx(2.15)
        assert c.power_loss_w == pytest.approx(107.5)
        assert c.relative_drop_pct == pytest.approx(2.15 / 24 * 100)

    def test_cable_losses_without_current(self):
        c = cable_losses(0.0)
        assert (c.resistance_ohm, c.power_loss_w, c.voltage_drop_v) == (0.0, 0.0, 0.0)


class TestSizeOffGridSystem:
    @pytest.fixture
    def inputs(self) -> OffGridInputs:
        return OffGridInputs(
            daily_energy_wh=2000,
            peak_sun_hours=4.0,
            panel_wp=300,
            panel_voltage=12,
            battery_voltage=24,
            dc_power_w=100,
            ac_power_w=440,
        )

    def test_full_sizing(self, inputs):
        s = size_off_grid_system(inputs)
        assert s.generator_peak_w == pytest.approx(625.0)
        assert s.panels_energy_balance == 3
        assert (s.panels_in_series, s.parallel_strings, s.panel_count) == (2, 2, 4)
        assert s.installed_peak_w == 1200
        assert s.daily_generation_kwh == pytest.approx(3.84)
        assert s.battery_capacity_ah == 334
        assert s.autonomy_energy_kwh == pytest.approx(4.0)
        assert s.regulator_current_a == 63
        assert s.inverter_power_w == pytest.approx(550.0)

    def test_excessive_voltage_drop_warns(self, inputs):
        s = size_off_grid_system(inputs)
        assert s.cable.relative_drop_pct > 3.0
        assert any("voltage drop" in w for w in s.warnings)

    def test_dc_only_system(self, inputs):
        inputs.ac_power_w = 0
        s = size_off_grid_system(inputs)
        assert s.inverter_power_w == 0.0
        assert any("inverter not required" in w for w in s.warnings)

    def test_generation_covers_demand(self, inputs):
        s = size_off_grid_system(inputs)
        assert s.daily_generation_kwh * 1000 >= inputs.daily_energy_wh

    @pytest.mark.parametrize(
        "field,value",
        [
            ("daily_energy_wh", 0),
            ("peak_sun_hours", 0),
            ("panel_wp", -300),
            ("battery_voltage", 0),
            ("depth_of_discharge", 1.5),
        ],
    )
    def test_invalid_inputs(self, inputs, field, value):
        setattr(inputs, field, value)
        with pytest.raises(ValueError):
            size_off_grid_system(inputs)


# ======================================================================
# Grid-tied
# ======================================================================


class TestGridTied:
    def test_sizing(self):
        s = size_grid_tied_system(3650, 1.8, performance_ratio=0.8, module_wp=450, optimal_tilt_deg=10)
        assert s.annual_peak_sun_hours == 1800.0
        assert s.peak_power_kwp == pytest.approx(2.53)
        assert s.module_count == math.ceil(3650 / 1440 * 1000 / 450)
        assert s.inverter_power_kw == pytest.approx(2.53)
        assert s.optimal_tilt_deg == 10

    def test_results_rounded(self):
        s = size_grid_tied_system(1000, 1.7)
        assert s.peak_power_kwp == round(s.peak_power_kwp, 2)
        assert s.inverter_power_kw == round(s.inverter_power_kw, 2)

    @pytest.mark.parametrize("yield_mwh", [0.0, -1.0])
    def test_non_positive_yield(self, yield_mwh):
        with pytest.raises(ValueError, match="unavailable"):
            size_grid_tied_system(3650, yield_mwh)

    def test_invalid_module_power(self):
        with pytest.raises(ValueError):
            module_count(2.5, 0)

    def test_invalid_performance_ratio(self):
        with pytest.raises(ValueError):
            peak_power_kwp(3650, 1800, 0)
