"""
Tests for fire service water supplies.

Validates:
1. Supply tank volume by largest floor area band
2. Fixed and booster pump criteria per building category
3. Sprinkler tank capacity, density and area of operation (BS EN 12845)
4. Table 16 pump duties and height banding
5. Rejected combinations and inputs
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from mepcalc.fire_supply import (
    fire_service_supply,
    height_band,
    sprinkler_tank,
    supply_tank_volume,
)
from mepcalc.validation import InputValidationError


class TestSupplyTank:
    """Test the hydrant supply tank."""

    def test_bands(self):
        assert supply_tank_volume(100)['required_volume'] == 9
        assert supply_tank_volume(230)['required_volume'] == 9
        assert supply_tank_volume(231)['required_volume'] == 18
        assert supply_tank_volume(920)['required_volume'] == 27
        assert supply_tank_volume(5000)['required_volume'] == 36

    def test_band_label(self):
        assert supply_tank_volume(500)['floor_area_band'] == 'Over 460 m² but not exceeding 920 m²'

    def test_standard_tank(self):
        result = fire_service_supply(largest_floor_area=400)
        assert result['selected_tank_size'] == 18
        assert result['compliance']


class TestPumps:
    """Test fixed and booster pump criteria."""

    def test_industrial_fixed_pump(self):
        pump = fire_service_supply(building_type='industrial')['fixed_pump']
        assert pump['hydrants'] == 3
        assert pump['min_flow'] == 1350
        assert pump['flow_per_hydrant'] == 450
        assert pump['pressure_range'] == (350, 850)

    def test_booster_not_required_when_height_unknown(self):
        booster = fire_service_supply()['booster_pump']
        assert booster['required'] is None
        assert booster['duty'] is None
        assert booster['multiple_risers'] == {'hydrants': 4, 'min_flow': 1800}

    def test_booster_above_60m(self):
        booster = fire_service_supply(building_type='industrial', building_height=75, risers=2)['booster_pump']
        assert booster['required']
        assert booster['duty'] == {'hydrants': 6, 'min_flow': 2700}

    def test_booster_at_threshold(self):
        assert not fire_service_supply(building_height=60)['booster_pump']['required']

    def test_single_riser_duty(self):
        booster = fire_service_supply(building_type='domestic', building_height=90)['booster_pump']
        assert booster['duty'] == {'hydrants': 2, 'min_flow': 900}

    def test_invalid_inputs(self):
        with pytest.raises(InputValidationError) as exc:
            fire_service_supply(largest_floor_area=0, risers=0)
        assert exc.value.errors == ["Largest floor area must be a positive number",
                                    "Number of risers must be at least 1"]

    def test_unknown_category(self):
        with pytest.raises(ValueError, match="Unknown building category"):
            fire_service_supply(building_type='hospital')


class TestSprinklerTank:
    """Test BS EN 12845 pre-calculated supplies."""

    def test_oh3_wet(self):
        result = sprinkler_tank('OH3', 'wet', 15)
        assert result['tank_capacity'] == 135
        assert result['pump_suction_capacity'] == 75
        assert result['design_density'] == 5.0
        assert result['area_of_operation'] == 216
        assert result['system_flow'] == 1100
        assert result['pressure_at_control_valve'] == 1.7

    def test_height_banding(self):
        assert height_band(0) == 15
        assert height_band(15) == 15
        assert height_band(15.1) == 30
        assert height_band(45) == 45
        assert sprinkler_tank('OH1', 'dry', 22)['tank_capacity'] == 125

    def test_pre_action_matches_wet(self):
        wet = sprinkler_tank('OH2', 'wet', 30)
        pre_action = sprinkler_tank('OH2', 'pre-action', 30)
        assert wet['tank_capacity'] == pre_action['tank_capacity'] == 125

    def test_pump_characteristics(self):
        result = sprinkler_tank('LH', 'wet', 40)
        assert result['pump_height_band'] == 45
        assert result['pump_nominal'] == {'pressure': 2.3, 'pressure_kpa': pytest.approx(230.0), 'flow': 375}
        assert result['pump_additional'] is None

    def test_oh3_wet_pump_starts_at_30m(self):
        result = sprinkler_tank('OH3', 'wet', 10)
        assert result['pump_height_band'] == 30
        assert result['pump_nominal']['flow'] == 2700
        assert result['warnings'] == []

    def test_oh2_dry_pump_capped_at_15m(self):
        result = sprinkler_tank('OH2', 'dry', 25)
        assert result['tank_capacity'] == 160
        assert result['pump_height_band'] == 15
        assert result['pump_characteristic']['flow'] == 1350
        assert len(result['warnings']) == 1

    def test_spacing(self):
        spacing = sprinkler_tank('LH', 'wet', 15)['spacing']
        assert spacing['max_area'] == {'sidewall': 17, 'others': 21, 'special_area': 9}
        assert spacing['min_distance'] == 2.0

    def test_dry_not_permitted(self):
        for hazard in ('LH', 'OH4'):
            with pytest.raises(ValueError, match="not permitted"):
                sprinkler_tank(hazard, 'dry', 15)

    def test_above_45m(self):
        with pytest.raises(ValueError, match="exceeds 45 m"):
            sprinkler_tank('OH1', 'wet', 50)

    def test_unknown_classes(self):
        with pytest.raises(ValueError, match="Unknown hazard group"):
            sprinkler_tank('HHP1', 'wet', 15)
        with pytest.raises(ValueError, match="Unknown installation type"):
            sprinkler_tank('OH1', 'deluge', 15)
