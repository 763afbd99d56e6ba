"""
Tests for the calculator registry.

Validates:
1. Every discipline has calculators
2. Lookup and listing
3. Running a calculator through the registry matches a direct call
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from mepcalc.psychrometrics import state_point
from mepcalc.registry import (
    CALCULATORS,
    DISCIPLINES,
    get_calculator,
    list_calculators,
    run_calculator,
)


class TestRegistry:
    """Test calculator catalogue."""

    def test_disciplines_covered(self):
        for discipline in DISCIPLINES:
            assert list_calculators(discipline)

    def test_names_match_keys(self):
        for name, calc in CALCULATORS.items():
            assert calc.name == name
            assert calc.discipline in DISCIPLINES
            assert callable(calc.function)

    def test_filter(self):
        fire = list_calculators('fire')
        assert [c['name'] for c in fire] == ['sprinkler_pipe', 'sprinkler_tank', 'fire_service_supply']
        assert fire[0]['standards'] == ['BS EN 12845']

    def test_electrical(self):
        names = [c['name'] for c in list_calculators('electrical')]
        assert names == ['cable_sizing', 'circuit_protection', 'power_factor_correction',
                         'transformer_sizing', 'generator_sizing', 'ups_sizing']

    def test_run_with_loads(self):
        result = run_calculator('transformer_sizing', {'loads': [{'power': 400, 'power_factor': 0.8}]})
        assert result['total_apparent_power'] == pytest.approx(500)

    def test_list_all(self):
        assert len(list_calculators()) == len(CALCULATORS)

    def test_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown calculator"):
            get_calculator('boiler_flue')

    def test_run(self):
        params = {'dry_bulb': 25, 'relative_humidity': 50}
        assert run_calculator('psychrometric_state', params) == state_point(25, 50)

    def test_run_bad_params(self):
        with pytest.raises(TypeError):
            run_calculator('psychrometric_state', {'temperature': 25})
