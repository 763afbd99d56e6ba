"""
Tests for vibration isolator sizing and transmissibility.

Validates:
1. Transmissibility formula and the closed-form frequency ratio
2. Static deflection from natural frequency
3. Isolator sizing: stiffness, achieved efficiency, feasibility, suggestion
4. Transmission sweep and operating point ratings
5. Input checks
"""

import math
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from mepcalc.tables import GRAVITY
from mepcalc.validation import InputValidationError
from mepcalc.vibration import (
    performance_rating,
    required_frequency_ratio,
    size_isolators,
    static_deflection,
    suggest_isolator,
    transmission_analysis,
    transmissibility,
)


class TestTransmissibility:
    """Test the single degree of freedom model."""

    def test_undamped_ratio(self):
        """ζ = 0: TR = 1/(r² − 1), so 90% needs r² = 11."""
        assert required_frequency_ratio(90, 0) == pytest.approx(math.sqrt(11))
        assert transmissibility(math.sqrt(11), 0) == pytest.approx(0.1)

    def test_damped_ratio_hits_target(self):
        for efficiency in (70, 85, 95, 99):
            r = required_frequency_ratio(efficiency, 0.05)
            assert r > math.sqrt(2)
            assert transmissibility(r, 0.05) == pytest.approx(1 - efficiency / 100)

    def test_damping_raises_required_ratio(self):
        assert required_frequency_ratio(90, 0.15) > required_frequency_ratio(90, 0.02)

    def test_unity_at_root_two(self):
        assert transmissibility(math.sqrt(2), 0.1) == pytest.approx(1.0)

    def test_undamped_resonance(self):
        assert math.isinf(transmissibility(1.0, 0.0))

    def test_array_input(self):
        tr = transmissibility([0.0, 2.0], 0.0)
        assert list(tr) == pytest.approx([1.0, 1 / 3])

    def test_efficiency_out_of_range(self):
        with pytest.raises(ValueError, match="between 0 and 100"):
            required_frequency_ratio(100, 0.05)


class TestDeflection:
    """Test static deflection."""

    def test_five_hertz(self):
        assert static_deflection(5) == pytest.approx(GRAVITY / (100 * math.pi ** 2) * 1000)

    def test_suggestions(self):
        assert suggest_isolator(8)['type'] == 'rubber'
        assert suggest_isolator(15)['type'] == 'spring'
        assert suggest_isolator(100)['type'] == 'air_spring'


class TestSizing:
    """Test isolator sizing."""

    def test_default_fan(self):
        """1200 rpm on steel springs at 90%: about 6.9 mm, too soft a duty for springs."""
        result = size_isolators()
        assert result['disturbing_frequency'] == pytest.approx(20.0)
        assert result['damping_ratio'] == 0.02
        assert result['static_deflection'] == pytest.approx(6.885, abs=0.01)
        assert result['isolation_efficiency'] == pytest.approx(90.0)
        assert result['meets_target']
        assert not result['deflection_feasible']
        assert result['suggested_isolator']['type'] == 'rubber'

    def test_high_efficiency_spring(self):
        result = size_isolators('centrifugal_fan', weight=800, efficiency=98)
        assert result['static_deflection'] == pytest.approx(32.97, abs=0.05)
        assert result['deflection_feasible']
        assert result['performance_good']
        assert not result['resonance_risk']

    def test_stiffness_per_mount(self):
        result = size_isolators('ahu', weight=1200, isolators=6, efficiency=95)
        load = 1200 * GRAVITY / 6
        assert result['load_per_isolator'] == pytest.approx(load)
        assert result['spring_constant'] == pytest.approx(load / (result['static_deflection'] / 1000))
        assert result['spring_constant_lbf_in'] == pytest.approx(result['spring_constant'] * 0.00571, rel=1e-3)
        assert result['actual_natural_frequency'] == pytest.approx(result['required_natural_frequency'])

    def test_default_speed_from_equipment(self):
        assert size_isolators('cooling_tower')['disturbing_frequency'] == pytest.approx(15.0)
        assert size_isolators('cooling_tower', rpm=600)['disturbing_frequency'] == pytest.approx(10.0)

    def test_damping_override(self):
        assert size_isolators(isolator_type='rubber')['damping_ratio'] == 0.15
        assert size_isolators(isolator_type='rubber', damping_ratio=0.1)['damping_ratio'] == 0.1

    def test_scenarios(self):
        scenarios = size_isolators()['scenarios']
        assert [s['efficiency'] for s in scenarios] == [80, 85, 90, 95]
        deflections = [s['deflection'] for s in scenarios]
        assert deflections == sorted(deflections)

    def test_invalid_inputs(self):
        with pytest.raises(InputValidationError) as exc:
            size_isolators(weight=0, isolators=0)
        assert exc.value.errors == ["Equipment weight must be a positive number",
                                    "Number of isolators must be at least 1"]
        with pytest.raises(InputValidationError, match="Isolation efficiency must be no more than 99.9"):
            size_isolators(efficiency=100)

    def test_unknown_types(self):
        with pytest.raises(ValueError, match="Unknown equipment type"):
            size_isolators('turbine')
        with pytest.raises(ValueError, match="Unknown isolator type"):
            size_isolators(isolator_type='cork')


class TestTransmissionAnalysis:
    """Test the frequency sweep."""

    def test_sweep(self):
        result = transmission_analysis()
        response = result['frequency_response']
        assert len(response) == 101
        assert response[0]['frequency'] == pytest.approx(1.0)
        assert response[-1]['frequency'] == pytest.approx(50.0)
        assert result['isolation_threshold'] == pytest.approx(5 * math.sqrt(2))

    def test_operating_points(self):
        """fn = 5 Hz, ζ = 0.05 at 10, 20 and 30 Hz."""
        points = transmission_analysis()['operating_points']
        assert points[0]['transmission_ratio'] == pytest.approx(math.sqrt(1.04 / 9.04))
        assert points[0]['rating'] == 'Fair'
        assert [p['rating'] for p in points[1:]] == ['Excellent', 'Excellent']

    def test_resonance_warning(self):
        result = transmission_analysis(operating_frequencies=[5.5, 20])
        assert result['operating_points'][0]['resonance_risk']
        assert result['operating_points'][0]['rating'] == 'Poor'
        assert len(result['warnings']) == 1

    def test_ratings(self):
        assert performance_rating(91) == 'Excellent'
        assert performance_rating(85) == 'Good'
        assert performance_rating(61) == 'Fair'
        assert performance_rating(60) == 'Poor'

    def test_no_operating_points(self):
        assert transmission_analysis(operating_frequencies=[])['average_efficiency'] is None

    def test_bad_range(self):
        with pytest.raises(ValueError, match="Frequency range"):
            transmission_analysis(f_min=10, f_max=5)
