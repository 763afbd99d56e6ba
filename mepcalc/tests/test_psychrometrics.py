"""
Tests for psychrometric calculations.

Validates:
1. Saturation pressure within 1% of reference values
2. State point properties at 25 °C / 50% RH
3. Wet-bulb solver bounds and saturation limit
4. Process energy balances and analysis text
5. Chart curves and AHU-family NaN propagation
"""

import math
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from mepcalc.psychrometrics import (
    KW_PER_TON,
    chart_curves,
    dew_point,
    enthalpy_ahu,
    humidity_ratio,
    humidity_ratio_rh,
    moist_air_density,
    pressure_at_altitude,
    pressure_from_altitude,
    process,
    rh_from_wet_bulb,
    saturation_pressure_buck,
    saturation_pressure_magnus,
    state_point,
    wet_bulb,
)


# Saturation pressure reference values (kPa)
SATURATION_REFERENCE = {
    0: 0.6112,
    20: 2.339,
    40: 7.384,
}


class TestSaturationPressure:
    """Test saturation vapour pressure correlations."""

    def test_buck_reference_values(self):
        """Buck correlation within 1% of tabulated values."""
        for t, expected in SATURATION_REFERENCE.items():
            assert saturation_pressure_buck(t) == pytest.approx(expected, rel=0.01)

    def test_magnus_matches_buck(self):
        """Magnus (Pa) and Buck (kPa) agree within 1% at 20 °C."""
        assert saturation_pressure_magnus(20) / 1000 == pytest.approx(saturation_pressure_buck(20), rel=0.01)

    def test_below_freezing_branch(self):
        assert saturation_pressure_buck(-10) == pytest.approx(0.2599, rel=0.01)


class TestStatePoint:
    """Test full state point at 25 °C / 50% RH, sea level."""

    def test_humidity_and_enthalpy(self):
        state = state_point(25, 50)
        assert state['humidity_ratio'] == pytest.approx(9.88, abs=0.05)
        assert state['enthalpy'] == pytest.approx(50.3, abs=0.3)

    def test_dew_point(self):
        state = state_point(25, 50)
        assert state['dew_point'] == pytest.approx(13.9, abs=0.3)

    def test_wet_bulb(self):
        state = state_point(25, 50)
        assert state['wet_bulb'] == pytest.approx(17.9, abs=0.5)
        assert state['dew_point'] < state['wet_bulb'] < state['dry_bulb']

    def test_specific_volume(self):
        assert state_point(25, 50)['specific_volume'] == pytest.approx(0.858, abs=0.003)

    def test_saturated_wet_bulb_equals_dry_bulb(self):
        state = state_point(20, 100)
        assert state['wet_bulb'] == pytest.approx(20.0, abs=0.3)
        assert state['dew_point'] == pytest.approx(20.0, abs=0.3)

    def test_invalid_rh_raises(self):
        with pytest.raises(ValueError):
            state_point(25, 120)

    def test_dew_point_invalid_vapour_pressure(self):
        assert dew_point(0) == -999.0


class TestWetBulbSolver:
    """Test the secant wet-bulb solver."""

    def test_never_exceeds_dry_bulb(self):
        for db in [5, 15, 30, 45]:
            w = humidity_ratio(saturation_pressure_buck(db) * 0.3)
            assert wet_bulb(db, w) <= db

    def test_dry_air(self):
        """Very dry air has a wet bulb well below dry bulb."""
        assert wet_bulb(30, 0.001) < 15


class TestProcess:
    """Test process energy balances."""

    START = {'dry_bulb': 10, 'relative_humidity': 60, 'name': 'Outdoor'}
    END = {'dry_bulb': 30, 'relative_humidity': 20, 'name': 'Supply'}

    def test_heating_energy(self):
        result = process(self.START, self.END, 'heating', mass_flow=2.0)
        expected = 2.0 * (result['end']['enthalpy'] - result['start']['enthalpy'])
        assert result['energy'] == pytest.approx(expected)
        assert result['analysis'].startswith("This heating process requires")

    def test_cooling_tons(self):
        result = process(self.END, self.START, 'cooling', mass_flow=1.5)
        assert result['refrigeration_tons'] == pytest.approx(abs(result['energy']) / KW_PER_TON)
        assert "refrigeration tons" in result['analysis']

    def test_mixing_between_states(self):
        result = process(self.START, self.END, 'mixing', mixing_ratio=0.5)
        mixed = result['mixed']
        assert 10 < mixed['dry_bulb'] < 30
        assert "combines 50% of Outdoor with 50% of Supply" in result['analysis']

    def test_mixing_identical_states(self):
        result = process(self.START, self.START, 'mixing', mixing_ratio=0.3)
        assert result['mixed']['dry_bulb'] == pytest.approx(10.0, abs=0.05)

    def test_humidification_water(self):
        start = {'dry_bulb': 20, 'relative_humidity': 20}
        end = {'dry_bulb': 20, 'relative_humidity': 50}
        result = process(start, end, 'humidification', mass_flow=1.0)
        assert result['water_added'] > 0
        assert "kg/s of water to be added" in result['analysis']

    def test_unknown_process_raises(self):
        with pytest.raises(ValueError, match="Unknown process type"):
            process(self.START, self.END, 'evaporation')

    def test_zero_mass_flow_raises(self):
        with pytest.raises(ValueError):
            process(self.START, self.END, 'heating', mass_flow=0)


class TestChart:
    """Test chart curve generation."""

    def test_axes(self):
        chart = chart_curves()
        assert len(chart['temperature']) == 51
        assert len(chart['curves']) == 11

    def test_curves_ordered(self):
        chart = chart_curves(rh_values=[0, 50, 100])
        dry, half, saturated = (c['humidity_ratio'] for c in chart['curves'])
        assert all(v == 0 for v in dry)
        assert all(h < s for h, s in zip(half[1:], saturated[1:]))
        assert saturated == sorted(saturated)


class TestAltitude:
    """Test barometric pressure models."""

    def test_isa(self):
        assert pressure_at_altitude(0) == pytest.approx(101.325)
        assert pressure_at_altitude(1000) == pytest.approx(89.87, abs=0.1)

    def test_isa_floor(self):
        assert pressure_at_altitude(20000) == 10.0

    def test_exponential(self):
        assert pressure_from_altitude(0) == pytest.approx(101325)
        assert pressure_from_altitude(1000) < 101325


class TestAHUFamily:
    """Test the Pa-based correlations used by AHU sizing."""

    def test_dry_air_density(self):
        assert moist_air_density(20, 101325, 0.0) == pytest.approx(1.204, rel=0.002)

    def test_impossible_state_is_nan(self):
        w = humidity_ratio_rh(100, 100, 50000)
        assert math.isnan(w)
        assert math.isnan(enthalpy_ahu(100, w))
        assert math.isnan(moist_air_density(100, 50000, w))

    def test_rh_from_wet_bulb_clamped(self):
        assert rh_from_wet_bulb(25, 25, 101325) == pytest.approx(100.0)
        assert rh_from_wet_bulb(25, 30, 101325) == pytest.approx(100.0)
        assert rh_from_wet_bulb(30, 10, 101325) == 0.0

    def test_rh_from_wet_bulb_typical(self):
        """35 °C DB / 29 °C WB is roughly 64% RH."""
        assert rh_from_wet_bulb(35, 29, 101325) == pytest.approx(64, abs=3)
