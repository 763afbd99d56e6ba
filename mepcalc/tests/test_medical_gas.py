"""
Tests for medical gas pipeline pressure loss.

Validates:
1. Pressure class selection
2. Nearest-flow lookup ignoring zero flows
3. Distance bracketing and the (L/L_t)(Q/Q_t)² scaling rule
4. Fitting equivalent length lookup
5. Section results, validation warnings and design notes
6. System total and error wrapping
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from mepcalc.medical_gas import (
    GENERAL_RECOMMENDATIONS,
    design_recommendations,
    find_flow_for_distance,
    fittings_equivalent_length,
    interpolate_table,
    medical_gas_pressure_drop,
    pipe_velocity,
    section_pressure_drop,
    select_pressure_table,
    validate_parameters,
)


# {distance (m): {pressure loss (kPa): flow (L/min)}}, JSON-style keys
DN22_400 = {
    '10': {'5': 200, '10': 300, '20': 0},
    '50': {'5': 100, '10': 150},
}

TABLES = {'400': {'22': DN22_400}}

FITTINGS = {'elbow': {'22': 0.5, '28': 0.6}}

SECTION = {
    'name': 'Ward A',
    'diameter': 22,
    'length': 18,
    'flow_rate': 280,
    'pressure': 400,
    'fittings': [{'type': 'elbow', 'diameter': 22, 'quantity': 4}],
}


class TestLookup:
    """Test table lookups."""

    def test_pressure_classes(self):
        assert select_pressure_table(40) == 'vacuum'
        assert select_pressure_table(59) == 'vacuum'
        assert select_pressure_table(400) == '400'
        assert select_pressure_table(700) == '700'
        assert select_pressure_table(900) == '1100'

    def test_nearest_flow(self):
        assert find_flow_for_distance(DN22_400['10'], 280) == {'nearest_flow': 300, 'pressure_loss': 10.0}
        assert find_flow_for_distance(DN22_400['10'], 0) == {'nearest_flow': 200, 'pressure_loss': 5.0}

    def test_no_usable_flow(self):
        assert find_flow_for_distance({'5': 0}, 100) is None


class TestInterpolation:
    """Test distance bracketing and scaling."""

    def test_nearer_lower_distance(self):
        result = interpolate_table(DN22_400, 20, 280)
        assert result['details']['table_distance_used'] == 10
        assert result['pressure_drop'] == pytest.approx((20 / 10) * (280 / 300) ** 2 * 10)

    def test_nearer_upper_distance(self):
        result = interpolate_table(DN22_400, 45, 280)
        assert result['details']['table_distance_used'] == 50
        assert result['details']['table_flow_used'] == 150
        assert result['pressure_drop'] == pytest.approx((45 / 50) * (280 / 150) ** 2 * 10)

    def test_below_table_range(self):
        result = interpolate_table(DN22_400, 5, 280)
        assert result['details']['table_distance_used'] == 10
        assert result['pressure_drop'] == pytest.approx(0.5 * (280 / 300) ** 2 * 10)

    def test_above_table_range(self):
        result = interpolate_table(DN22_400, 100, 280)
        assert result['details']['table_distance_used'] == 50
        assert result['pressure_drop'] == pytest.approx(2 * (280 / 150) ** 2 * 10)

    def test_empty_table(self):
        assert interpolate_table({}, 20, 280) is None


class TestChecks:
    """Test validation and design notes."""

    def test_fittings_equivalent_length(self):
        fittings = [{'type': 'elbow', 'diameter': 22, 'quantity': 4},
                    {'type': 'elbow', 'diameter': 54, 'quantity': 1},
                    {'type': 'tee', 'diameter': 22, 'quantity': 2}]
        assert fittings_equivalent_length(fittings, FITTINGS) == pytest.approx(2.0)

    def test_valid_parameters(self):
        assert validate_parameters(22, 18, 280, 400) == {'is_valid': True, 'warnings': []}

    def test_out_of_range_parameters(self):
        result = validate_parameters(20, 5, 10, 1200)
        assert not result['is_valid']
        assert len(result['warnings']) == 4
        assert result['warnings'][0] == "Diameter 20mm is not in standard sizes. Use nearest standard size."

    def test_ambiguous_pressure(self):
        result = validate_parameters(22, 18, 280, 200)
        assert "Verify which table to use" in result['warnings'][0]

    def test_excessive_drop_is_critical(self):
        design = design_recommendations(50, 5, 400)
        assert design['critical_issues'][0].startswith("Pressure drop is 12.5% of system pressure")
        assert design['recommendations'][-3:] == GENERAL_RECOMMENDATIONS

    def test_high_velocity_is_critical(self):
        design = design_recommendations(1, 20, 400)
        assert any("Velocity is very high" in c for c in design['critical_issues'])

    def test_non_positive_system_pressure_raises(self):
        with pytest.raises(ValueError):
            design_recommendations(1, 5, 0)

    def test_velocity(self):
        assert pipe_velocity(280, 22) == pytest.approx(280 / 60000 / (3.141592653589793 * 0.011 ** 2))


class TestSection:
    """Test one pipeline section."""

    def test_section_result(self):
        result = section_pressure_drop(SECTION, TABLES, FITTINGS, safety_factor=1.3)
        expected = (20 / 10) * (280 / 300) ** 2 * 10
        assert result['pressure_table'] == '400'
        assert result['equivalent_length'] == pytest.approx(2.0)
        assert result['total_length'] == pytest.approx(20.0)
        assert result['total_pressure_drop'] == pytest.approx(expected)
        assert result['total_pressure_drop_with_safety'] == pytest.approx(expected * 1.3)
        assert result['base_pressure_drop'] == pytest.approx(expected / 20)
        assert result['validation']['is_valid']

    def test_design_notes_for_section(self):
        result = section_pressure_drop(SECTION, TABLES, FITTINGS)
        notes = result['design']['recommendations']
        assert any(n.startswith("Velocity is high (>10 m/s)") for n in notes)

    def test_missing_class_raises(self):
        with pytest.raises(ValueError, match="No pressure loss table"):
            section_pressure_drop(dict(SECTION, pressure=700), TABLES)

    def test_missing_diameter_raises(self):
        with pytest.raises(ValueError, match="No data available for 28mm diameter pipe"):
            section_pressure_drop(dict(SECTION, diameter=28), TABLES)


class TestSystem:
    """Test the pipeline total."""

    def test_total(self):
        second = dict(SECTION, name='Ward B', length=45, fittings=[])
        result = medical_gas_pressure_drop([SECTION, second], TABLES, FITTINGS)
        assert result['total_pressure_drop'] == pytest.approx(
            sum(s['total_pressure_drop_with_safety'] for s in result['sections']))
        assert result['safety_factor'] == 1.3
        units = result['total_pressure_drop_units']
        assert units['kpa'] == result['total_pressure_drop']
        assert units['bar'] == pytest.approx(result['total_pressure_drop'] / 100)

    def test_failure_names_section(self):
        broken = dict(SECTION, name='Theatre', diameter=28)
        with pytest.raises(ValueError, match="Failed to calculate pressure drop for section: Theatre"):
            medical_gas_pressure_drop([SECTION, broken], TABLES)

    def test_safety_factor_below_one_raises(self):
        with pytest.raises(ValueError):
            medical_gas_pressure_drop([SECTION], TABLES, safety_factor=0.5)
