"""
Tests for input validation.

Validates:
1. Required, number, positive, integer and string rules
2. Min/max bounds and the unusually-high warning
3. Custom error and warning hooks, HVAC range checks
4. Form validation with display labels and InputValidationError
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from mepcalc.validation import (
    COMMON_RULES,
    InputValidationError,
    check_airflow,
    check_temperature,
    require_valid,
    validate_field,
    validate_form,
)


class TestValidateField:
    """Test single-value rules."""

    def test_required(self):
        result = validate_field('', 'Length', {'required': True})
        assert result == {'is_valid': False, 'errors': ["Length is required"], 'warnings': []}

    def test_optional_empty_is_valid(self):
        assert validate_field(None, 'Length', {'type': 'positive'})['is_valid']

    def test_number(self):
        assert validate_field('abc', 'Flow', {'type': 'number'})['errors'] == ["Flow must be a valid number"]
        assert validate_field('12.5', 'Flow', {'type': 'number'})['is_valid']

    def test_positive(self):
        assert validate_field(-3, 'Area', {'type': 'positive'})['errors'] == ["Area must be a positive number"]
        assert validate_field(0, 'Area', {'type': 'positive'})['errors']

    def test_bool_is_not_a_number(self):
        assert not validate_field(True, 'Area', {'type': 'positive'})['is_valid']

    def test_integer(self):
        assert validate_field(2.5, 'Occupants', {'type': 'integer'})['errors'] == ["Occupants must be a whole number"]
        assert validate_field(4, 'Occupants', {'type': 'integer'})['is_valid']

    def test_string(self):
        assert validate_field(5, 'Name', {'type': 'string'})['errors'] == ["Name must be text"]

    def test_bounds(self):
        rules = COMMON_RULES['percentage']
        assert validate_field(120, 'Glycol', rules)['errors'] == ["Glycol must be no more than 100"]
        assert validate_field(-1, 'Glycol', rules)['errors'] == ["Glycol must be at least 0"]

    def test_unusually_high_warning(self):
        result = validate_field(25000, 'Length', {'type': 'positive'})
        assert result['is_valid']
        assert result['warnings'] == ["Length value (25000) seems unusually high"]

    def test_high_threshold_override(self):
        assert validate_field(25000, 'Flow', {'type': 'positive', 'high': None})['warnings'] == []
        assert validate_field(60, 'Flow', {'type': 'positive', 'high': 50})['warnings']

    def test_custom_rule(self):
        result = validate_field(150, 'Dry Bulb', COMMON_RULES['temperature'])
        assert not result['is_valid']
        assert "outside typical HVAC range" in result['errors'][0]

    def test_custom_rule_skipped_after_type_error(self):
        result = validate_field('hot', 'Dry Bulb', COMMON_RULES['temperature'])
        assert result['errors'] == ["Dry Bulb must be a valid number"]

    def test_warn_rule(self):
        result = validate_field(200000, 'Supply Air', COMMON_RULES['airflow_lps'])
        assert result['is_valid']
        assert "Air flow rate above 100,000 L/s is very high. Please verify." in result['warnings']

    def test_integer_bounds(self):
        assert validate_field(0, 'Rooms', COMMON_RULES['count'])['errors'] == ["Rooms must be at least 1"]
        assert validate_field(3, 'Rooms', COMMON_RULES['count'])['is_valid']


class TestHVACChecks:
    """Test typical-range checks."""

    def test_temperature(self):
        assert check_temperature(25) is None
        assert check_temperature(150) == "Temperature 150°C is outside typical HVAC range (-50°C to 100°C)"
        assert check_temperature(150, 'F') is None
        assert check_temperature(230, 'F') == "Temperature 230°F is outside typical HVAC range (-58°F to 212°F)"

    def test_airflow(self):
        assert check_airflow(500) is None
        assert check_airflow(200000)


class TestForm:
    """Test form validation."""

    RULES = {
        'Length': COMMON_RULES['positive_number'],
        'Temperature': COMMON_RULES['temperature'],
    }

    def test_valid_form(self):
        assert validate_form({'Length': 10, 'Temperature': 20}, self.RULES)['is_valid']

    def test_errors_merged(self):
        result = validate_form({'Length': -1, 'Temperature': 200}, self.RULES)
        assert len(result['errors']) == 2

    def test_labels_name_the_fields(self):
        rules = {'dry_bulb': COMMON_RULES['temperature']}
        result = validate_form({}, rules, {'dry_bulb': 'External Dry Bulb'})
        assert result['errors'] == ["External Dry Bulb is required"]

    def test_require_valid_returns_warnings(self):
        result = require_valid({'Length': 20000, 'Temperature': 20}, self.RULES)
        assert result['warnings'] == ["Length value (20000) seems unusually high"]

    def test_require_valid_raises(self):
        with pytest.raises(InputValidationError) as exc:
            require_valid({'Temperature': 20}, self.RULES)
        assert exc.value.errors == ["Length is required"]
        assert str(exc.value) == "Length is required"
