"""
Tests for AHU sizing.

Validates:
1. Space defaults and effective air change rates
2. Fresh air by ACH vs occupancy, with boost
3. Cooling load methods (manual, standard, calculated)
4. Airflow, capacities and fan power carry the safety factor
5. CO₂ estimate, filter choice and casing size
6. CIBSE compliance issues and input validation errors
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from mepcalc.ahu import (
    SPACE_DEFAULTS,
    co2_concentration,
    cooling_load,
    effective_fresh_ach,
    effective_total_ach,
    estimate_ahu_size,
    heating_load,
    recommend_filter,
    size_ahu,
    space_fresh_air,
)
from mepcalc.validation import InputValidationError


OFFICE = {'name': 'Office', 'area': 100, 'height': 3, 'occupants': 10}
EXTERNAL = {'dry_bulb': 30, 'wet_bulb': 22, 'altitude': 0}
INTERNAL = {'dry_bulb': 22, 'rel_humidity': 50, 'fresh_air_boost': 0}


def space(**overrides):
    return dict(SPACE_DEFAULTS, **dict(OFFICE, **overrides))


class TestAirChanges:
    """Test per-space ventilation rates."""

    def test_standard_space_type_rates(self):
        s = space()
        assert effective_total_ach(s) == 6
        assert effective_fresh_ach(s) == 1.3

    def test_override_only_raises_standard_rate(self):
        assert effective_total_ach(space(minimum_total_ach=4)) == 6
        assert effective_total_ach(space(minimum_total_ach=9)) == 9

    def test_custom_space_uses_override(self):
        assert effective_fresh_ach(space(space_type='custom', minimum_fresh_ach=3)) == 3

    def test_fresh_air_by_ach(self):
        """300 m³ × 1.3 ACH = 390 m³/h beats 10 people × 36."""
        assert space_fresh_air(space(), 0) == pytest.approx(390)

    def test_fresh_air_by_occupancy_with_boost(self):
        assert space_fresh_air(space(occupants=20), 10) == pytest.approx(20 * 36 * 1.1)


class TestLoads:
    """Test cooling and heating loads."""

    def test_manual_cooling_load(self):
        spaces = [space(cooling_load_method='manual', manual_cooling_load=5000)]
        assert cooling_load(spaces, EXTERNAL, INTERNAL) == pytest.approx(5000)

    def test_standard_cooling_load(self):
        spaces = [space(cooling_load_method='standard')]
        assert cooling_load(spaces, EXTERNAL, INTERNAL) == pytest.approx(120 * 100)

    def test_calculated_load_rises_with_orientation(self):
        north = cooling_load([space(orientation='north')], EXTERNAL, INTERNAL)
        south = cooling_load([space(orientation='south')], EXTERNAL, INTERNAL)
        assert south > north > 0

    def test_heat_recovery_reduces_heating(self):
        spaces = [space()]
        without = heating_load(spaces, INTERNAL)
        recovered = heating_load(spaces, INTERNAL, heat_recovery_efficiency=75)
        assert 0 < recovered < without

    def test_unknown_insulation_raises(self):
        with pytest.raises(ValueError, match="Unknown insulation level"):
            cooling_load([space(insulation_level='straw')], EXTERNAL, INTERNAL)


class TestHelpers:
    """Test CO₂, filter and casing helpers."""

    def test_co2(self):
        """10 people at 0.005 l/s in 100 l/s → 400 + 500 ppm."""
        assert co2_concentration(10, 360) == pytest.approx(900)

    def test_co2_without_occupants(self):
        assert co2_concentration(0, 500) == 400

    def test_filter_follows_most_demanding_space(self):
        spaces = [space(), space(space_type='operatingTheater')]
        assert recommend_filter(spaces) == 'ISO ePM2.5 95% (E11)'

    def test_casing_size_text(self):
        text = estimate_ahu_size(10000)
        assert text.startswith("Approx. ")
        assert "m W × " in text and text.endswith("m D")


class TestSizeAHU:
    """Test the complete sizing run."""

    def test_office(self):
        result = size_ahu([OFFICE], EXTERNAL, INTERNAL, safety_factor=1.2, sfp_target=1.8)
        assert result['required_total_airflow'] >= 300 * 6 / 0.8 * 1.2
        assert result['required_fresh_airflow'] == pytest.approx(390 / 0.8)
        assert result['recirculation_airflow'] == pytest.approx(
            result['required_total_airflow'] - result['required_fresh_airflow'])
        assert result['fan_power'] == pytest.approx(result['required_total_airflow'] / 3.6 * 1.8 / 1000)
        assert result['total_ach'] == pytest.approx(result['required_total_airflow'] / 300)
        assert result['ventilation_effectiveness'] == pytest.approx(0.8)
        assert result['cooling_capacity'] > 0
        assert result['heating_capacity'] > 0
        assert result['is_compliant']
        assert result['compliance_issues'] == []

    def test_capacities_scale_with_safety_factor(self):
        low = size_ahu([OFFICE], EXTERNAL, INTERNAL, safety_factor=1.0)
        high = size_ahu([OFFICE], EXTERNAL, INTERNAL, safety_factor=1.5)
        assert high['cooling_capacity'] == pytest.approx(low['cooling_capacity'] * 1.5)
        assert high['heating_capacity'] == pytest.approx(low['heating_capacity'] * 1.5)

    def test_displacement_reduces_fresh_air(self):
        mixing = size_ahu([OFFICE], EXTERNAL, INTERNAL)
        displacement = size_ahu([dict(OFFICE, ventilation_strategy='displacement')], EXTERNAL, INTERNAL)
        assert displacement['required_fresh_airflow'] < mixing['required_fresh_airflow']

    def test_high_sfp_flagged(self):
        result = size_ahu([OFFICE], EXTERNAL, INTERNAL, sfp_target=2.5)
        assert not result['is_compliant']
        assert any(issue.startswith("Specific Fan Power (2.5") for issue in result['compliance_issues'])

    def test_large_system_without_heat_recovery(self):
        hall = {'area': 2000, 'height': 4, 'occupants': 0}
        result = size_ahu([hall], EXTERNAL, INTERNAL, heat_recovery=False)
        assert "Heat recovery should be considered" in result['compliance_issues'][-1]

    def test_crowded_room_co2(self):
        crowded = dict(OFFICE, occupants=60)
        result = size_ahu([crowded], EXTERNAL, dict(INTERNAL, fresh_air_boost=0))
        assert result['co2_concentration'] == pytest.approx(
            co2_concentration(60, result['required_fresh_airflow']))


class TestValidation:
    """Test rejected inputs."""

    def test_no_spaces(self):
        with pytest.raises(InputValidationError) as exc:
            size_ahu([], EXTERNAL, INTERNAL)
        assert exc.value.errors == ["At least one space is required"]

    def test_invalid_space(self):
        with pytest.raises(InputValidationError) as exc:
            size_ahu([dict(OFFICE, area=0, occupants=-1)], EXTERNAL, INTERNAL)
        assert "Space 1: Area must be a positive number" in exc.value.errors
        assert "Space 1: Occupants must be at least 0" in exc.value.errors

    def test_wet_bulb_above_dry_bulb(self):
        with pytest.raises(InputValidationError, match="Wet Bulb"):
            size_ahu([OFFICE], dict(EXTERNAL, wet_bulb=35), INTERNAL)

    def test_custom_space_negative_ach(self):
        custom = dict(OFFICE, space_type='custom', minimum_total_ach=-2)
        with pytest.raises(InputValidationError) as exc:
            size_ahu([custom], EXTERNAL, INTERNAL)
        assert exc.value.errors == ["Space 1: Minimum Total ACH must be at least 0"]

    def test_errors_numbered_per_space(self):
        with pytest.raises(InputValidationError) as exc:
            size_ahu([OFFICE, dict(OFFICE, height=0)], EXTERNAL, INTERNAL)
        assert exc.value.errors == ["Space 2: Height must be a positive number"]

    def test_safety_factor_below_one(self):
        with pytest.raises(InputValidationError, match="Safety factor must be at least 1"):
            size_ahu([OFFICE], EXTERNAL, INTERNAL, safety_factor=0.9)

    def test_external_temperature_out_of_range(self):
        with pytest.raises(InputValidationError, match="outside typical HVAC range"):
            size_ahu([OFFICE], dict(EXTERNAL, dry_bulb=120, wet_bulb=30), INTERNAL)

    def test_unknown_space_type(self):
        with pytest.raises(ValueError, match="Unknown space type"):
            size_ahu([dict(OFFICE, space_type='spaceship')], EXTERNAL, INTERNAL)

    def test_validation_error_is_value_error(self):
        assert issubclass(InputValidationError, ValueError)
