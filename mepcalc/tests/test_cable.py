"""
Tests for LV cable sizing and circuit protection.

Validates:
1. Temperature and grouping correction factors
2. Capacity selection from the derated current
3. Upsizing for voltage drop, and the non-compliant fallback
4. Fault current, trip time and thermal withstand
5. Rejected options and inputs
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from mepcalc.cable import (
    cable_sizing,
    circuit_protection,
    grouping_factor,
    temperature_factor,
    trip_time,
)
from mepcalc.validation import InputValidationError


class TestCorrectionFactors:
    """Test Ca and Cg lookups."""

    def test_temperature_reference(self):
        assert temperature_factor(30, 'pvc') == 1.0
        assert temperature_factor(31, 'pvc') == 0.94
        assert temperature_factor(40, 'xlpe') == 0.91

    def test_temperature_beyond_table(self):
        assert temperature_factor(60, 'pvc') == 0.5

    def test_grouping(self):
        assert grouping_factor(1, 'C') == 1.0
        assert grouping_factor(3, 'C') == 0.79
        assert grouping_factor(10, 'C') == 0.68
        assert grouping_factor(12, 'A') == 0.52

    def test_unknown_options(self):
        with pytest.raises(ValueError, match="Unknown insulation"):
            temperature_factor(30, 'rubber')
        with pytest.raises(ValueError, match="Unknown installation method"):
            grouping_factor(2, 'F')


class TestCableSizing:
    """Test cable selection."""

    def test_sized_on_capacity(self):
        result = cable_sizing(32, 20)
        assert result['minimum_rating'] == pytest.approx(32.0)
        assert result['capacity_size'] == 4
        assert result['selected_size'] == 4
        assert result['rating'] == 32
        assert result['voltage_drop'] == pytest.approx(6.08)
        assert result['voltage_drop_percent'] == pytest.approx(1.52)
        assert result['voltage_drop_compliant']

    def test_upsized_for_voltage_drop(self):
        result = cable_sizing(32, 100)
        assert result['capacity_size'] == 4
        assert result['selected_size'] == 10
        assert result['voltage_drop_size'] == 10
        assert result['voltage_drop_percent'] == pytest.approx(3.04)

    def test_derating(self):
        result = cable_sizing(32, 20, ambient_temperature=40, circuits=3)
        assert result['temperature_factor'] == 0.87
        assert result['grouping_factor'] == 0.79
        assert result['minimum_rating'] == pytest.approx(32 / (0.87 * 0.79))
        assert result['capacity_size'] == 10
        assert result['derated_rating'] == pytest.approx(57 * 0.87 * 0.79)

    def test_every_size_reported(self):
        assert len(cable_sizing(32, 20)['sizes']) == 16

    def test_voltage_drop_never_met(self):
        result = cable_sizing(400, 1000)
        assert result['capacity_size'] == 240
        assert result['selected_size'] == 300
        assert result['voltage_drop_size'] is None
        assert not result['voltage_drop_compliant']
        assert result['voltage_drop_percent'] == pytest.approx(18.5)
        assert len(result['warnings']) == 1

    def test_no_size_carries_current(self):
        with pytest.raises(ValueError, match="No PVC cable up to 300 mm² carries"):
            cable_sizing(600, 10)

    def test_dc_uses_two_conductors(self):
        result = cable_sizing(20, 50, loaded_conductors=2, system_type='dc', system_voltage=110)
        assert result['capacity_size'] == 2.5
        with pytest.raises(ValueError, match="DC circuits"):
            cable_sizing(20, 50, system_type='dc')

    def test_invalid_inputs(self):
        with pytest.raises(InputValidationError) as exc:
            cable_sizing(0, -5)
        assert exc.value.errors == ["Design current must be a positive number",
                                    "Cable length must be a positive number"]


class TestProtection:
    """Test disconnection and thermal withstand."""

    def test_trip_bands(self):
        assert trip_time('mcb', 600, 100) == 0.01
        assert trip_time('mcb', 400, 100) == 0.1
        assert trip_time('mcb', 250, 100) == 10.0
        assert trip_time('fuse', 1000, 100) == 0.01

    def test_defaults(self):
        result = circuit_protection()
        assert result['cable_impedance'] == pytest.approx(0.0163083, rel=1e-4)
        assert result['fault_current_at_end'] == pytest.approx(13490, rel=1e-3)
        assert result['operating_time'] == 0.02
        assert result['disconnects_in_time']
        assert result['k_factor'] == 143
        assert result['thermal_withstand_current'] == pytest.approx(27132.6, rel=1e-4)
        assert result['thermally_protected']

    def test_long_small_cable(self):
        result = circuit_protection(fault_level=10000, device_rating=63, device_type='mcb',
                                    cable_csa=2.5, cable_length=200, insulation='pvc')
        # 220 V over 1.8 Ω is about 122 A, under 3 × In
        assert result['operating_time'] == 10.0
        assert not result['disconnects_in_time']
        assert not result['thermally_protected']

    def test_unknown_device(self):
        with pytest.raises(ValueError, match="Unknown protective device"):
            circuit_protection(device_type='rcd')
