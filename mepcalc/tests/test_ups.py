"""
Tests for UPS battery sizing.

Validates:
1. Watts per cell and DC breaker current
2. Charging current
3. Hydrogen ventilation per battery type and charge mode
4. Room rate for large installations
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from mepcalc.ups import (
    battery_sizing,
    battery_ventilation,
    charging_current,
    get_battery_type,
    ups_sizing,
)
from mepcalc.validation import InputValidationError

# v · q · t · s for 4 % LEL
VENT_CONSTANT = 24 * 0.42e-3 * 1.095 * 5


class TestBattery:
    """Test discharge duty and breaker."""

    def test_defaults(self):
        result = battery_sizing()
        assert result['dc_power'] == pytest.approx(100000 * 0.85 / 0.95)
        assert result['cells_per_string'] == 204
        assert result['watts_per_cell'] == pytest.approx(504.39, rel=1e-4)
        assert result['string_voltage'] == 408
        assert result['end_of_discharge_voltage'] == pytest.approx(357)
        assert result['breaker_current'] == pytest.approx(250.63, rel=1e-4)

    def test_parallel_strings_share_duty(self):
        single = battery_sizing(strings=1)['watts_per_cell']
        assert battery_sizing(strings=2)['watts_per_cell'] == pytest.approx(single / 2)

    def test_invalid(self):
        with pytest.raises(InputValidationError) as exc:
            battery_sizing(efficiency=1.5, strings=0)
        assert exc.value.errors == ["Inverter efficiency must be no more than 1",
                                    "Number of strings must be at least 1"]


class TestCharging:
    """Test charger current."""

    def test_current(self):
        assert charging_current()['charging_current'] == pytest.approx(100 / 10 / 0.85)


class TestVentilation:
    """Test battery room air flow."""

    def test_vrla_boost(self):
        result = battery_ventilation()
        assert result['gas_current'] == 8.0
        assert result['dilution_factor'] == 24
        assert result['required_airflow'] == pytest.approx(VENT_CONSTANT * 120 * 8 * 100 * 0.001)
        assert result['recommended_airflow'] == result['required_airflow']
        assert result['air_changes_basis'] == 'hydrogen'

    def test_float_lower_than_boost(self):
        boost = battery_ventilation('vented', 'boost')['required_airflow']
        float_ = battery_ventilation('vented', 'float')['required_airflow']
        assert boost == pytest.approx(4 * float_)

    def test_large_installation_uses_room_rate(self):
        result = battery_ventilation(capacity=200, strings=2)
        assert result['required_airflow'] == pytest.approx(VENT_CONSTANT * 120 * 8 * 200 * 2 * 0.001)
        assert result['recommended_airflow'] == pytest.approx(18.36 * 20)
        assert result['air_changes_basis'] == 'room'

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown battery type"):
            get_battery_type('lithium')
        with pytest.raises(ValueError, match="Unknown charge mode"):
            battery_ventilation(charge_mode='equalise')


class TestUPS:
    """Test the combined UPS calculation."""

    def test_combined(self):
        result = ups_sizing()
        assert result['battery']['cells_per_string'] == 204
        assert result['charging_current'] == pytest.approx(100 / 10 / 0.85)
        assert result['ventilation']['required_airflow'] == pytest.approx(VENT_CONSTANT * 204 * 8 * 100 * 0.001)

    def test_charger_covers_all_strings(self):
        assert ups_sizing(strings=2)['charging_current'] == pytest.approx(200 / 10 / 0.85)

    def test_part_cell_block(self):
        with pytest.raises(ValueError, match="not a whole number of 2 V cells"):
            ups_sizing(block_voltage=3, blocks_per_string=3)
