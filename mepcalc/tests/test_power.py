"""
Tests for power factor correction, transformer and generator sizing.

Validates:
1. Capacitor kVAr and bank rounding
2. Harmonic distortion raising the displacement power factor needed
3. Transformer totals, regulation, starting dip and derating
4. Generator step, transient and voltage dip checks
5. Per-load validation messages
"""

import math

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from mepcalc.power import (
    generator_sizing,
    power_factor_correction,
    transformer_derating,
    transformer_sizing,
)
from mepcalc.validation import InputValidationError


class TestPowerFactor:
    """Test capacitor sizing."""

    def test_no_distortion(self):
        result = power_factor_correction(1000, 0.7, 0.95, harmonic_distortion=0)
        assert result['kvar_required'] == pytest.approx(691.52, rel=1e-4)
        assert result['capacitor_bank'] == 700
        assert result['initial_kva'] == pytest.approx(1428.57, rel=1e-5)
        assert result['corrected_kva'] == pytest.approx(1052.63, rel=1e-5)
        assert result['kva_reduction'] == pytest.approx(375.94, rel=1e-4)
        assert result['initial_angle'] == pytest.approx(45.573, abs=1e-3)

    def test_distortion_raises_displacement_target(self):
        result = power_factor_correction()
        assert result['required_displacement_power_factor'] == pytest.approx(0.85 * math.sqrt(1.0025))
        assert result['achieved_true_power_factor'] == pytest.approx(0.85)
        assert result['kvar_required'] == pytest.approx(403.25, rel=1e-3)
        assert result['capacitor_bank'] == 425

    def test_unreachable_target_capped(self):
        result = power_factor_correction(1000, 0.7, 1.0, harmonic_distortion=5)
        assert result['required_displacement_power_factor'] == 1.0
        assert result['kvar_required'] == pytest.approx(1000 * math.tan(math.acos(0.7)))
        assert "harmonic filtering" in result['warnings'][0]

    def test_already_corrected(self):
        result = power_factor_correction(500, 0.95, 0.9, harmonic_distortion=0)
        assert result['kvar_required'] == 0
        assert result['capacitor_bank'] == 0
        assert result['kva_reduction'] == 0
        assert result['warnings'] == ["Power factor already meets the target"]

    def test_invalid_power_factor(self):
        with pytest.raises(InputValidationError) as exc:
            power_factor_correction(initial_power_factor=1.2)
        assert exc.value.errors == ["Initial power factor must be no more than 1"]


class TestTransformer:
    """Test transformer loading."""

    CHILLER = {'name': 'Chiller', 'power': 400, 'power_factor': 0.8}

    def test_single_load(self):
        result = transformer_sizing([self.CHILLER])
        assert result['total_active_power'] == pytest.approx(400)
        assert result['total_reactive_power'] == pytest.approx(300)
        assert result['total_apparent_power'] == pytest.approx(500)
        assert result['utilisation'] == pytest.approx(50)
        assert result['power_factor'] == pytest.approx(0.8)
        assert result['voltage_regulation'] == pytest.approx(9.5)
        assert result['motor_starting_dip'] == pytest.approx(2.5)
        assert result['inrush_current'] == pytest.approx(524.86, rel=1e-4)
        assert result['losses'] == pytest.approx(400 / 0.985 - 400)
        assert result['adequate']
        assert result['warnings'] == []

    def test_factors_and_quantity(self):
        load = {'power': 10, 'quantity': 4, 'load_factor': 0.5, 'demand_factor': 0.5, 'power_factor': 1.0}
        result = transformer_sizing([load])
        assert result['total_active_power'] == pytest.approx(10)
        assert result['total_reactive_power'] == pytest.approx(0)

    def test_dol_motor_sets_starting_dip(self):
        motor = {'name': 'Pump', 'power': 200, 'power_factor': 0.8, 'starting_method': 'dol'}
        result = transformer_sizing([self.CHILLER, motor])
        assert result['loads'][1]['starting_kva'] == pytest.approx(1500)
        assert result['motor_starting_dip'] == pytest.approx(7.5)
        assert result['peak_starting_current'] == pytest.approx(1500e3 / (math.sqrt(3) * 380))

    def test_overloaded(self):
        result = transformer_sizing([{'power': 900, 'power_factor': 0.8}])
        assert not result['adequate']
        assert "exceeds the derated rating" in result['warnings'][0]

    def test_no_load_losses(self):
        result = transformer_sizing([{'power': 0}])
        assert result['losses'] == pytest.approx(3.0)
        assert result['power_factor'] == 0.0

    def test_derating(self):
        factors = transformer_derating(20, 2000, 50)
        assert factors['harmonic'] == pytest.approx(0.97)
        assert factors['altitude'] == pytest.approx(0.96)
        assert factors['temperature'] == pytest.approx(0.9)
        assert factors['overall'] == pytest.approx(0.97 * 0.96 * 0.9)

    def test_derating_floors(self):
        factors = transformer_derating(100, 10000, 80)
        assert factors['harmonic'] == pytest.approx(0.925)
        assert factors['altitude'] == 0.8
        assert factors['temperature'] == 0.75

    def test_k_rated_not_derated(self):
        assert transformer_derating(30, 0, 40, k_factor=4)['overall'] == 1.0

    def test_load_messages_numbered(self):
        with pytest.raises(InputValidationError) as exc:
            transformer_sizing([{'power': 10}, {'power': 10, 'power_factor': 0}])
        assert exc.value.errors == ["Load 2: Power factor must be a positive number"]

    def test_missing_power(self):
        with pytest.raises(InputValidationError) as exc:
            transformer_sizing([{'name': 'Lighting'}])
        assert exc.value.errors == ["Load 1: Power is required"]


class TestGenerator:
    """Test generator step loading."""

    LOADS = [
        {'name': 'Lighting', 'steady_kw': 100, 'power_factor': 1.0, 'step': 1},
        {'name': 'Chiller', 'steady_kw': 200, 'power_factor': 0.85, 'starting_method': 'star_delta', 'step': 2},
        {'name': 'Pump', 'steady_kw': 50, 'power_factor': 0.8, 'starting_method': 'dol', 'step': 3},
    ]

    def test_steps(self):
        result = generator_sizing(self.LOADS)
        assert result['rated_kw'] == pytest.approx(800)
        assert result['max_step_load'] == pytest.approx(480)
        assert [s['transient_kw'] for s in result['steps']] == pytest.approx([100, 600, 600])
        assert result['total_steady_kw'] == pytest.approx(350)
        assert result['max_step_starting_kw'] == pytest.approx(500)
        assert result['voltage_dip'] == pytest.approx(200 / 0.85 * 2.5 / 1000 * 20)

    def test_step_acceptance_fails(self):
        result = generator_sizing(self.LOADS)
        assert result['checks'] == {
            'steady_kw': True,
            'steady_kva': True,
            'step_load': False,
            'overload': True,
            'voltage_dip': True,
        }
        assert not result['passed']

    def test_passes_with_higher_acceptance(self):
        assert generator_sizing(self.LOADS, step_acceptance=70)['passed']

    def test_steady_check_is_strict(self):
        result = generator_sizing([{'steady_kw': 800, 'power_factor': 1.0}])
        assert not result['checks']['steady_kw']

    def test_no_loads(self):
        with pytest.raises(ValueError, match="At least one load"):
            generator_sizing([])

    def test_unknown_starting_method(self):
        with pytest.raises(ValueError, match="Unknown starting method"):
            generator_sizing([{'steady_kw': 10, 'starting_method': 'autotransformer'}])
