"""
UPS battery sizing, battery breaker, charging current and battery room
ventilation.

Battery discharge power per cell:
    W = (kVA · 1000 · PF / η) / (strings · blocks · Vblock / 2) · 1.15
    (1.15 ageing allowance; 2 V per cell)

DC breaker (end of discharge at 1.75 V/cell):
    I = (kVA · PF / η) · 1000 / 1.75 / (blocks · Vblock / 2)

Charging current:
    I = (C / t) / η_charge

Ventilation (EN 50272-2 / IEC 62485-2):
    Q = v · q · t · s · n · Igas · C · 10⁻³   with v = (100 − 4)/4, q = 0.42 l/Ah,
    t = 1.095, s = 5, n cells in all strings and Igas in mA per Ah, giving m³/h
"""

import logging
from dataclasses import dataclass
from typing import Dict

from mepcalc.validation import COMMON_RULES, require_valid

logger = logging.getLogger(__name__)

CELL_VOLTAGE = 2.0
END_CELL_VOLTAGE = 1.75
AGEING_FACTOR = 1.15
HYDROGEN_LEL = 4.0            # % by volume
HYDROGEN_PER_AH = 0.42e-3     # m³ per Ah
HYDROGEN_TEMPERATURE = 1.095  # 20 °C gas volume correction
VENTILATION_SAFETY = 5.0
LARGE_INSTALLATION = 400      # Ah across all strings
ROOM_AIR_RATE = 18.36         # m³/h per m² floor


@dataclass
class BatteryType:
    """Battery technology and its gas emission currents (mA/Ah)."""
    id: str
    name: str
    float_gas_current: float
    boost_gas_current: float


BATTERY_TYPES: Dict[str, BatteryType] = {
    'vented': BatteryType('vented', 'Vented lead-acid', 5.0, 20.0),
    'vrla': BatteryType('vrla', 'Valve regulated lead-acid', 1.0, 8.0),
    'nicd': BatteryType('nicd', 'Vented nickel-cadmium', 5.0, 50.0),
}

CHARGE_MODES = ('float', 'boost')

UPS_RULES = {
    'rating': COMMON_RULES['positive_number'],
    'power_factor': {'required': True, 'type': 'positive', 'max': 1},
    'efficiency': {'required': True, 'type': 'positive', 'max': 1},
    'block_voltage': COMMON_RULES['positive_number'],
    'strings': COMMON_RULES['count'],
    'blocks_per_string': COMMON_RULES['count'],
}

UPS_LABELS = {
    'rating': 'UPS rating',
    'power_factor': 'Power factor',
    'efficiency': 'Inverter efficiency',
    'block_voltage': 'Battery block voltage',
    'strings': 'Number of strings',
    'blocks_per_string': 'Blocks per string',
}

VENTILATION_RULES = {
    'cells': COMMON_RULES['count'],
    'capacity': COMMON_RULES['positive_number'],
    'strings': COMMON_RULES['count'],
    'room_area': COMMON_RULES['area'],
}

VENTILATION_LABELS = {
    'cells': 'Number of cells',
    'capacity': 'Battery capacity',
    'strings': 'Number of strings',
    'room_area': 'Battery room area',
}

CHARGING_RULES = {
    'capacity': COMMON_RULES['positive_number'],
    'charging_efficiency': {'required': True, 'type': 'positive', 'max': 1},
    'recharge_time': COMMON_RULES['positive_number'],
}


def get_battery_type(battery_type: str) -> BatteryType:
    if battery_type not in BATTERY_TYPES:
        raise ValueError(f"Unknown battery type '{battery_type}'. Available: {list(BATTERY_TYPES.keys())}")
    return BATTERY_TYPES[battery_type]


def battery_sizing(
    rating: float = 100.0,
    power_factor: float = 0.85,
    efficiency: float = 0.95,
    block_voltage: float = 12.0,
    strings: int = 1,
    blocks_per_string: int = 34,
) -> Dict:
    """Battery discharge duty and DC breaker current for a UPS.

    Args:
        rating: UPS output (kVA)
        power_factor: output power factor
        efficiency: inverter efficiency (0-1)
        block_voltage: nominal volts per battery block
        strings: parallel strings
        blocks_per_string: series blocks in each string

    Returns:
        Dict with DC power, cells per string, watts per cell (with ageing
        allowance), end of discharge voltage and breaker current.
    """
    require_valid(
        {'rating': rating, 'power_factor': power_factor, 'efficiency': efficiency,
         'block_voltage': block_voltage, 'strings': strings, 'blocks_per_string': blocks_per_string},
        UPS_RULES, UPS_LABELS)

    dc_power = rating * 1000 * power_factor / efficiency
    cells_per_string = blocks_per_string * block_voltage / CELL_VOLTAGE
    per_cell = dc_power / (strings * cells_per_string) * AGEING_FACTOR
    breaker = dc_power / END_CELL_VOLTAGE / cells_per_string
    return {
        'dc_power': dc_power,
        'cells_per_string': cells_per_string,
        'watts_per_cell': per_cell,
        'string_voltage': blocks_per_string * block_voltage,
        'end_of_discharge_voltage': cells_per_string * END_CELL_VOLTAGE,
        'breaker_current': breaker,
    }


def charging_current(capacity: float = 100.0, charging_efficiency: float = 0.85,
                     recharge_time: float = 10.0) -> Dict:
    """Charger current to restore ``capacity`` Ah in ``recharge_time`` hours."""
    require_valid(
        {'capacity': capacity, 'charging_efficiency': charging_efficiency, 'recharge_time': recharge_time},
        CHARGING_RULES,
        {'capacity': 'Battery capacity', 'charging_efficiency': 'Charging efficiency',
         'recharge_time': 'Recharge time'})
    return {'charging_current': capacity / recharge_time / charging_efficiency}


def battery_ventilation(
    battery_type: str = 'vrla',
    charge_mode: str = 'boost',
    cells: int = 120,
    capacity: float = 100.0,
    strings: int = 1,
    room_area: float = 20.0,
) -> Dict:
    """Air flow needed to keep hydrogen below a safe concentration.

    Args:
        battery_type: 'vented', 'vrla' or 'nicd'
        charge_mode: 'float' or 'boost'
        cells: cells per string
        capacity: Ah per string
        strings: parallel strings
        room_area: battery room floor area (m²)

    Returns:
        Dict with the dilution factor, gas current, required air flow
        (m³/h) and the recommended flow, which for installations of
        400 Ah or more is at least the room based rate.
    """
    kind = get_battery_type(battery_type)
    if charge_mode not in CHARGE_MODES:
        raise ValueError(f"Unknown charge mode '{charge_mode}'. Available: {list(CHARGE_MODES)}")
    require_valid(
        {'cells': cells, 'capacity': capacity, 'strings': strings, 'room_area': room_area},
        VENTILATION_RULES, VENTILATION_LABELS)

    gas_current = kind.boost_gas_current if charge_mode == 'boost' else kind.float_gas_current
    dilution = (100 - HYDROGEN_LEL) / HYDROGEN_LEL
    required = (dilution * HYDROGEN_PER_AH * HYDROGEN_TEMPERATURE * VENTILATION_SAFETY
                * cells * gas_current * capacity * strings * 0.001)

    total_capacity = capacity * strings
    recommended = required
    if total_capacity >= LARGE_INSTALLATION:
        recommended = max(required, ROOM_AIR_RATE * room_area)
        logger.debug("Battery installation of %.0f Ah sized on room air rate", total_capacity)

    return {
        'battery_type': kind.name,
        'gas_current': gas_current,
        'dilution_factor': dilution,
        'required_airflow': required,
        'recommended_airflow': recommended,
        'air_changes_basis': 'room' if recommended > required else 'hydrogen',
    }


def ups_sizing(
    rating: float = 100.0,
    power_factor: float = 0.85,
    efficiency: float = 0.95,
    block_voltage: float = 12.0,
    strings: int = 1,
    blocks_per_string: int = 34,
    battery_type: str = 'vrla',
    charge_mode: str = 'boost',
    capacity: float = 100.0,
    room_area: float = 20.0,
    charging_efficiency: float = 0.85,
    recharge_time: float = 10.0,
) -> Dict:
    """Battery duty, breaker, charger and ventilation for one UPS."""
    battery = battery_sizing(rating, power_factor, efficiency, block_voltage, strings, blocks_per_string)
    cells = battery['cells_per_string']
    if not cells.is_integer():
        raise ValueError(f"Block voltage {block_voltage:g} V is not a whole number of 2 V cells")
    ventilation = battery_ventilation(battery_type, charge_mode, int(cells), capacity, strings, room_area)
    charger = charging_current(capacity * strings, charging_efficiency, recharge_time)
    return {
        'battery': battery,
        'charging_current': charger['charging_current'],
        'ventilation': ventilation,
        'standards': ['IEC 62040-3', 'EN 50272-2'],
    }
