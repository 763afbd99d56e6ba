"""
Tests for chilled water pipe sizing.

Validates:
1. System flow from cooling load and ΔT
2. Inner diameter schedule lookup and estimation
3. Size-dependent fitting K values
4. Section major/minor losses and system pump head/power
5. Flow distribution when sections omit their own flow
6. Nominal size selection against velocity limits
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from mepcalc.fluids import water_density, water_specific_heat
from mepcalc.hydronic import (
    GRAVITY_HYDRONIC,
    chilled_water_flow,
    chilled_water_pipe_sizing,
    fitting_k,
    inner_diameter,
    pump_power,
    select_pipe_size,
)


MAIN = {'name': 'Main', 'type': 'main', 'length': 30, 'diameter': 2, 'material': 'steel', 'flow_rate': 4.0}


class TestFlow:
    """Test load-to-flow conversion."""

    def test_flow_from_load(self):
        rho = water_density(7)
        expected = 100 / (water_specific_heat() * 5.5 * rho / 1000)
        result = chilled_water_flow(100, 5.5)
        assert result['flow_rate'] == pytest.approx(expected)
        assert result['flow_rate'] == pytest.approx(4.34, abs=0.02)
        assert result['warnings'] == []

    def test_small_delta_t_warns(self):
        assert chilled_water_flow(100, 0.5)['warnings']

    def test_zero_delta_t_raises(self):
        with pytest.raises(ValueError):
            chilled_water_flow(100, 0)


class TestScheduleAndFittings:
    """Test pipe schedule and fitting data."""

    def test_scheduled_size(self):
        assert inner_diameter(1.5, 'steel') == {'inner_diameter': 40.9, 'estimated': False}

    def test_unscheduled_size_estimated(self):
        result = inner_diameter(5, 'steel')
        assert result['estimated']
        assert result['inner_diameter'] == pytest.approx(5 * 25.4 * 0.85)

    def test_unknown_material_raises(self):
        with pytest.raises(ValueError, match="Unknown"):
            inner_diameter(2, 'unobtainium')

    def test_size_dependent_k(self):
        assert fitting_k('elbow90stdThreaded', 2) == pytest.approx(1.0)
        assert fitting_k('elbow90stdThreaded', 8) == pytest.approx(0.7)
        assert fitting_k('elbow90stdThreaded', None) == pytest.approx(0.9)

    def test_unknown_fitting_default(self):
        assert fitting_k('mysteryValve', 2) == 0.5


class TestPump:
    """Test pump power."""

    def test_pump_power(self):
        """5 l/s at 20 m head, 1000 kg/m³, η 0.7 → 1.401 kW."""
        assert pump_power(5, 20, 1000, 0.7) == pytest.approx(5 / 1000 * 20 * 1000 * 9.81 / 700)

    def test_zero_inputs(self):
        assert pump_power(0, 20, 1000) == 0.0
        assert pump_power(5, 0, 1000) == 0.0


class TestSystem:
    """Test the chilled water circuit."""

    def test_section_losses(self):
        fittings = [{'type': 'elbow90stdFlanged', 'quantity': 4}]
        result = chilled_water_pipe_sizing([dict(MAIN, fittings=fittings)])
        section = result['sections'][0]
        assert section['inner_diameter'] == 52.5
        assert section['minor_loss'] == pytest.approx(4 * 0.38 * section['dynamic_pressure'])
        assert section['section_loss'] == pytest.approx(section['major_loss'] + section['minor_loss'])
        assert section['pressure_gradient'] == pytest.approx(section['major_loss'] / 30)

    def test_pump_head_and_power(self):
        result = chilled_water_pipe_sizing([MAIN], safety_factor=1.2, pump_efficiency=0.7)
        raw = result['sections'][0]['section_loss']
        assert result['total_pressure_drop'] == pytest.approx(raw * 1.2)
        head = result['total_pressure_drop'] / (result['density'] * GRAVITY_HYDRONIC)
        assert result['pump_head'] == pytest.approx(head)
        assert result['pump_head_ft'] == pytest.approx(head * 3.28084)
        assert result['pump_power'] == pytest.approx(pump_power(4.0, head, result['density'], 0.7))

    def test_cooling_load_fills_missing_flows(self):
        sections = [{'name': 'A', 'type': 'main', 'length': 10, 'diameter': 2},
                    {'name': 'B', 'type': 'branch', 'length': 5, 'diameter': 1.5, 'flow_rate': 1.0}]
        result = chilled_water_pipe_sizing(sections, cooling_load=100, temperature_drop=5.5)
        assert result['sections'][0]['flow_rate'] == pytest.approx(result['system_flow_rate'])
        assert result['sections'][1]['flow_rate'] == 1.0

    def test_system_flow_overrides_load(self):
        sections = [{'type': 'main', 'length': 10, 'diameter': 2}]
        result = chilled_water_pipe_sizing(sections, cooling_load=100, system_flow_rate=2.5)
        assert result['sections'][0]['flow_rate'] == 2.5

    def test_missing_flow_without_load_raises(self):
        with pytest.raises(ValueError, match="flow rate is required"):
            chilled_water_pipe_sizing([{'type': 'main', 'length': 10, 'diameter': 2}])

    def test_system_flow_defaults_to_largest_section(self):
        sections = [MAIN, dict(MAIN, flow_rate=1.5, type='branch')]
        assert chilled_water_pipe_sizing(sections)['system_flow_rate'] == 4.0

    def test_over_velocity(self):
        result = chilled_water_pipe_sizing([dict(MAIN, diameter=1, flow_rate=4.0)])
        assert not result['is_system_compliant']

    def test_glycol_raises_drop(self):
        water = chilled_water_pipe_sizing([MAIN])['total_pressure_drop']
        glycol = chilled_water_pipe_sizing([MAIN], glycol_percentage=30)['total_pressure_drop']
        assert glycol > water

    def test_estimated_diameter_warning(self):
        result = chilled_water_pipe_sizing([dict(MAIN, diameter=5)])
        assert any("estimated" in w for w in result['warnings'])

    def test_invalid_glycol_raises(self):
        with pytest.raises(ValueError):
            chilled_water_pipe_sizing([MAIN], glycol_percentage=120)


class TestPipeSelection:
    """Test nominal size selection."""

    def test_select_for_load(self):
        """4.34 l/s at 3 m/s needs ID ≥ 42.9 mm → 2" steel."""
        chosen = select_pipe_size(4.34, 'steel', 'main')
        assert chosen['nominal_size'] == 2
        assert chosen['velocity'] <= 3.0

    def test_connection_needs_larger_pipe(self):
        main = select_pipe_size(4.34, 'steel', 'main')
        connection = select_pipe_size(4.34, 'steel', 'connection')
        assert connection['nominal_size'] > main['nominal_size']

    def test_none_when_too_large(self):
        assert select_pipe_size(1000, 'steel', 'main') is None

    def test_none_just_past_largest_size(self):
        """12" copper (304.8 mm) carries at most ≈ 87.6 l/s at 1.2 m/s."""
        assert select_pipe_size(87.0, 'copper', 'connection')['nominal_size'] == 12
        assert select_pipe_size(88.0, 'copper', 'connection') is None
