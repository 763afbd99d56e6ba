"""
Tests for medical gas design flows.

Validates:
1. Linear, fixed and per-terminal diversity rules per department
2. Ward rule for multiple ward units
3. AGSS rules scale with the disposal flow V
4. Surgical air counts rooms as terminals and warns on the wrong band
5. Excluded vacuum departments and the system safety factor
6. Input checks (counts, department, gas, V)
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from mepcalc.gas_flow import (
    GASES,
    GAS_SAFETY_FACTOR,
    design_flow,
    get_gas,
    list_departments,
    room_flow,
)
from mepcalc.validation import InputValidationError


class TestDiversityRules:
    """Test single-room flows."""

    def test_linear_rule(self):
        """Oxygen operating rooms: Q = 100 + (n-1)×10."""
        result = room_flow('oxygen', {'department': 'operating_rooms', 'terminals': 3})
        assert result['flow_per_room'] == pytest.approx(120.0)

    def test_fractional_increment(self):
        """Oxygen A&E post-anaesthesia: Q = 10 + (n-1)×6/8."""
        result = room_flow('oxygen', {'department': 'ae_recovery', 'terminals': 5})
        assert result['flow_per_room'] == pytest.approx(13.0)
        assert result['formula'] == "Q = 10 + (n-1)×6/8"

    def test_fixed_rule_ignores_count(self):
        one = room_flow('oxygen', {'department': 'operating_anaesthetic', 'terminals': 1})
        many = room_flow('oxygen', {'department': 'operating_anaesthetic', 'terminals': 6})
        assert one['flow_per_room'] == many['flow_per_room'] == 100

    def test_per_terminal_rule(self):
        """CPAP: Q = 75 × n × 0.75."""
        result = room_flow('oxygen', {'department': 'cpap', 'terminals': 4})
        assert result['flow_per_room'] == pytest.approx(225.0)

    def test_rooms_multiply(self):
        result = room_flow('nitrous_oxide', {'department': 'operating', 'terminals': 2, 'rooms': 3})
        assert result['flow_per_room'] == pytest.approx(21.0)
        assert result['total_flow'] == pytest.approx(63.0)
        assert result['diversity'] == 'none'


class TestWardRule:
    """Test the ward unit combination."""

    def test_ward_units(self):
        """Qw = 10 + 3×6/4 = 14.5; three wards give 14.5×[1+(3-1)/2] = 29."""
        result = room_flow('oxygen', {'department': 'ward_4_bed', 'terminals': 4, 'rooms': 3})
        assert result['flow_per_room'] == pytest.approx(14.5)
        assert result['total_flow'] == pytest.approx(29.0)
        assert result['diversity'] == 'Qd = Qw×[1+(nW-1)/2]'

    def test_single_ward_unchanged(self):
        result = room_flow('medical_air', {'department': 'ward_rooms', 'terminals': 1, 'rooms': 1})
        assert result['total_flow'] == pytest.approx(20.0)

    def test_ward_block_has_no_ward_rule(self):
        result = room_flow('medical_air', {'department': 'ward_block', 'terminals': 5, 'rooms': 2})
        assert result['total_flow'] == pytest.approx(2 * (20 + 4 * 10 / 4))


class TestAGSS:
    """Test disposal-flow scaling."""

    def test_operating_departments(self):
        assert room_flow('agss', {'department': 'operating', 'terminals': 3})['flow_per_room'] == 390
        assert room_flow('agss', {'department': 'operating', 'terminals': 3}, 80)['flow_per_room'] == 240

    def test_other_departments(self):
        result = room_flow('agss', {'department': 'other', 'terminals': 9})
        assert result['flow_per_room'] == pytest.approx(260.0)
        assert result['formula'] == "Q = V + (n-1)×V/8"

    def test_invalid_disposal_flow(self):
        with pytest.raises(ValueError, match="disposal flow"):
            design_flow('agss', [{'department': 'operating'}], disposal_flow=100)

    def test_disposal_flow_reported(self):
        assert design_flow('agss', [{'department': 'operating'}], disposal_flow=80)['disposal_flow'] == 80
        assert design_flow('oxygen', [{'department': 'renal'}])['disposal_flow'] is None


class TestSurgicalAir:
    """Test room-count rules."""

    def test_rooms_are_terminals(self):
        """Three theatres: Q = 350 + 2×350/2 = 700, not multiplied again."""
        result = room_flow('surgical_air', {'department': 'theatres_up_to_4', 'rooms': 3})
        assert result['terminals'] == 3
        assert result['total_flow'] == pytest.approx(700.0)
        assert result['warnings'] == []

    def test_wrong_band_warns(self):
        result = design_flow('surgical_air', [{'department': 'theatres_up_to_4', 'rooms': 6}])
        assert result['rooms'][0]['total_flow'] == pytest.approx(350 + 5 * 350 / 2)
        assert len(result['warnings']) == 1
        assert "1-4" in result['warnings'][0]

    def test_large_band_warns_below_five(self):
        result = room_flow('surgical_air', {'department': 'theatres_over_4', 'rooms': 2})
        assert "5 or more" in result['warnings'][0]


class TestSystem:
    """Test the system design flow."""

    def test_total_with_safety_factor(self):
        rooms = [
            {'name': 'Theatre', 'department': 'operating_rooms', 'terminals': 2},
            {'name': 'Recovery', 'department': 'operating_recovery', 'terminals': 4},
        ]
        result = design_flow('oxygen', rooms)
        assert result['total_flow'] == pytest.approx(110 + 28)
        assert result['safety_factor'] == GAS_SAFETY_FACTOR
        assert result['design_flow'] == pytest.approx(138 * 1.3)
        assert result['design_flow_m3h'] == pytest.approx(138 * 1.3 * 0.06)
        assert result['rooms'][0]['name'] == 'Theatre'

    def test_excluded_vacuum_department(self):
        result = design_flow('vacuum', [{'department': 'oral_type1', 'terminals': 4},
                                        {'department': 'critical_care', 'terminals': 5}])
        assert result['rooms'][0]['excluded']
        assert result['rooms'][0]['total_flow'] == 0.0
        assert result['rooms'][0]['note'] == 'dental vacuum only'
        assert result['total_flow'] == pytest.approx(40 + 4 * 40 / 4)

    def test_every_department_computes(self):
        for gas_id, gas in GASES.items():
            for department in gas.departments:
                result = room_flow(gas_id, {'department': department, 'terminals': 2, 'rooms': 2})
                assert result['total_flow'] >= 0


class TestInputs:
    """Test rejected inputs."""

    def test_zero_terminals(self):
        with pytest.raises(InputValidationError) as exc:
            room_flow('oxygen', {'department': 'renal', 'terminals': 0})
        assert exc.value.errors == ["Number of beds must be at least 1"]

    def test_fractional_rooms(self):
        with pytest.raises(InputValidationError, match="whole number"):
            room_flow('vacuum', {'department': 'renal', 'rooms': 1.5})

    def test_unknown_department(self):
        with pytest.raises(ValueError, match="Unknown Oxygen department 'kitchen'"):
            room_flow('oxygen', {'department': 'kitchen'})

    def test_unknown_gas(self):
        with pytest.raises(ValueError, match="Unknown medical gas"):
            get_gas('helium')

    def test_no_rooms(self):
        with pytest.raises(ValueError, match="At least one room"):
            design_flow('oxygen', [])

    def test_safety_factor_below_one(self):
        with pytest.raises(InputValidationError, match="Safety factor"):
            design_flow('oxygen', [{'department': 'renal'}], safety_factor=0.5)

    def test_department_listing(self):
        departments = list_departments('agss')
        assert {'id': 'operating', 'name': 'Operating departments', 'formula': "Q = V + (n-1)×V"} in departments
