"""
LV cable sizing and circuit protection checks.

Cable sizing (BS 7671 Appendix 4, copper multicore cables):
    I'z = Ib / (Ca · Cg)                       minimum tabulated rating
    Vd  = (mV/A/m) · Ib · L / 1000             volts
    Vd% = Vd / U · 100

The smallest size whose tabulated rating carries I'z is the capacity size;
if its voltage drop is over the limit, larger sizes are tried until one
passes.

Protection (simplified end-of-line fault):
    R = 22.5 / S mΩ/m, X = 0.08 mΩ/m, Z = √(R² + X²) · L / 1000 Ω
    If = U0 / Z with U0 = 220 V
    Adiabatic withstand I = √(k² S² / t)
"""

import math
from typing import Dict, List, Tuple

from mepcalc.sizing import select_smallest
from mepcalc.tables import (
    CABLE_CCC,
    CABLE_GROUPING_FACTORS,
    CABLE_K_FACTORS,
    CABLE_SIZES,
    CABLE_TEMPERATURE_FACTORS,
    CABLE_VOLTAGE_DROP,
    INSTALLATION_METHODS,
)
from mepcalc.validation import COMMON_RULES, require_valid

COPPER_RESISTANCE = 22.5      # mΩ·mm²/m at operating temperature
CABLE_REACTANCE = 0.08        # mΩ/m
PHASE_VOLTAGE = 220.0         # V, phase to neutral

CABLE_RULES = {
    'design_current': COMMON_RULES['positive_number'],
    'length': COMMON_RULES['positive_number'],
    'ambient_temperature': {'required': True, 'type': 'number', 'min': -10, 'max': 90},
    'circuits': COMMON_RULES['count'],
    'system_voltage': COMMON_RULES['positive_number'],
    'max_voltage_drop': {'required': True, 'type': 'positive', 'max': 100},
}

CABLE_LABELS = {
    'design_current': 'Design current',
    'length': 'Cable length',
    'ambient_temperature': 'Ambient temperature',
    'circuits': 'Number of circuits',
    'system_voltage': 'System voltage',
    'max_voltage_drop': 'Maximum voltage drop',
}

PROTECTION_RULES = {
    'fault_level': COMMON_RULES['positive_number'],
    'device_rating': COMMON_RULES['positive_number'],
    'cable_csa': COMMON_RULES['positive_number'],
    'cable_length': COMMON_RULES['positive_number'],
    'disconnection_time': COMMON_RULES['positive_number'],
}

PROTECTION_LABELS = {
    'fault_level': 'Prospective fault current',
    'device_rating': 'Device rating',
    'cable_csa': 'Cable size',
    'cable_length': 'Cable length',
    'disconnection_time': 'Disconnection time',
}

# (multiple of In above which, operating time s), slowest time last
TRIP_BANDS: Dict[str, Tuple[List[Tuple[float, float]], float]] = {
    'mcb': ([(5, 0.01), (3, 0.1)], 10.0),
    'mccb': ([(10, 0.02), (1.5, 0.2)], 20.0),
    'fuse': ([(6, 0.01), (2, 0.1)], 10.0),
}


def _step(bands: Tuple[List[Tuple[float, float]], float], value: float) -> float:
    steps, beyond = bands
    for limit, factor in steps:
        if value <= limit:
            return factor
    return beyond


def _check_insulation(insulation: str) -> None:
    if insulation not in CABLE_CCC:
        raise ValueError(f"Unknown insulation '{insulation}'. Available: {list(CABLE_CCC.keys())}")


def temperature_factor(ambient: float, insulation: str = 'pvc') -> float:
    """Ambient temperature correction Ca."""
    _check_insulation(insulation)
    return _step(CABLE_TEMPERATURE_FACTORS[insulation], ambient)


def grouping_factor(circuits: int, method: str = 'C') -> float:
    """Grouping correction Cg for circuits run together."""
    if method not in CABLE_GROUPING_FACTORS:
        raise ValueError(f"Unknown installation method '{method}'. Available: {INSTALLATION_METHODS}")
    return _step(CABLE_GROUPING_FACTORS[method], circuits)


def cable_sizing(
    design_current: float,
    length: float,
    ambient_temperature: float = 30.0,
    insulation: str = 'pvc',
    installation_method: str = 'C',
    loaded_conductors: int = 3,
    circuits: int = 1,
    system_voltage: float = 400.0,
    max_voltage_drop: float = 4.0,
    system_type: str = 'ac',
) -> Dict:
    """Size a copper multicore cable for current and voltage drop.

    Args:
        design_current: Ib (A)
        length: route length (m)
        ambient_temperature: °C
        insulation: 'pvc' (70 °C) or 'xlpe' (90 °C)
        installation_method: reference method 'A', 'B', 'C' or 'E'
        loaded_conductors: 2 (single phase or DC) or 3 (three phase)
        circuits: circuits grouped together
        system_voltage: U for the percentage drop (V)
        max_voltage_drop: limit (%)
        system_type: 'ac' or 'dc'

    Returns:
        Dict with correction factors, minimum rating, the capacity size,
        the voltage drop size and the selected size with its rating and
        drop. Sizes in mm².

    Raises:
        InputValidationError: for non-positive current, length or voltage.
        ValueError: for unknown options, or when no size carries the current.
    """
    checked = require_valid(
        {'design_current': design_current, 'length': length, 'ambient_temperature': ambient_temperature,
         'circuits': circuits, 'system_voltage': system_voltage, 'max_voltage_drop': max_voltage_drop},
        CABLE_RULES, CABLE_LABELS)
    _check_insulation(insulation)
    if installation_method not in INSTALLATION_METHODS:
        raise ValueError(f"Unknown installation method '{installation_method}'. Available: {INSTALLATION_METHODS}")
    if system_type not in ('ac', 'dc'):
        raise ValueError(f"Unknown system type '{system_type}'. Available: ['ac', 'dc']")
    if loaded_conductors not in (2, 3):
        raise ValueError("Loaded conductors must be 2 or 3")
    if system_type == 'dc' and loaded_conductors != 2:
        raise ValueError("DC circuits have 2 loaded conductors")

    conductors = '2' if loaded_conductors == 2 else '3_4'
    drop_column = 'dc' if system_type == 'dc' else conductors
    ca = temperature_factor(ambient_temperature, insulation)
    cg = grouping_factor(circuits, installation_method)
    minimum_rating = design_current / (ca * cg)

    ratings = CABLE_CCC[insulation][installation_method][conductors]
    drops = CABLE_VOLTAGE_DROP[insulation][drop_column]

    def evaluate(size: float) -> Dict:
        drop = drops[size] * design_current * length / 1000
        return {
            'size': size,
            'rating': ratings[size],
            'derated_rating': ratings[size] * ca * cg,
            'mv_per_a_m': drops[size],
            'voltage_drop': drop,
            'voltage_drop_percent': drop / system_voltage * 100,
        }

    by_capacity, evaluations = select_smallest(CABLE_SIZES, evaluate, lambda e: e['rating'] >= minimum_rating)
    if by_capacity is None:
        raise ValueError(f"No {insulation.upper()} cable up to {CABLE_SIZES[-1]:g} mm² carries "
                         f"{minimum_rating:.1f} A in method {installation_method}; use parallel cables")
    selected = next((e for e in evaluations
                     if e['size'] >= by_capacity['size'] and e['voltage_drop_percent'] <= max_voltage_drop), None)

    warnings = list(checked['warnings'])
    if selected is None:
        selected = evaluations[-1]
        warnings.append(f"Voltage drop {selected['voltage_drop_percent']:.2f}% exceeds {max_voltage_drop:g}% "
                        f"even at {CABLE_SIZES[-1]:g} mm²")

    return {
        'temperature_factor': ca,
        'grouping_factor': cg,
        'minimum_rating': minimum_rating,
        'capacity_size': by_capacity['size'],
        'voltage_drop_size': selected['size'] if selected['voltage_drop_percent'] <= max_voltage_drop else None,
        'selected_size': selected['size'],
        'rating': selected['rating'],
        'derated_rating': selected['derated_rating'],
        'voltage_drop': selected['voltage_drop'],
        'voltage_drop_percent': selected['voltage_drop_percent'],
        'voltage_drop_compliant': selected['voltage_drop_percent'] <= max_voltage_drop,
        'sizes': evaluations,
        'warnings': warnings,
        'standards': ['BS 7671'],
    }


def trip_time(device: str, fault_current: float, rating: float) -> float:
    """Operating time (s) from a banded trip characteristic."""
    if device not in TRIP_BANDS:
        raise ValueError(f"Unknown protective device '{device}'. Available: {list(TRIP_BANDS.keys())}")
    bands, slowest = TRIP_BANDS[device]
    multiple = fault_current / rating
    for threshold, seconds in bands:
        if multiple > threshold:
            return seconds
    return slowest


def circuit_protection(
    fault_level: float = 5000.0,
    device_rating: float = 400.0,
    device_type: str = 'mccb',
    cable_csa: float = 120.0,
    cable_length: float = 80.0,
    disconnection_time: float = 0.4,
    insulation: str = 'xlpe',
) -> Dict:
    """Check disconnection time and cable thermal withstand.

    Args:
        fault_level: prospective fault current at the source (A)
        device_rating: In (A)
        device_type: 'mcb', 'mccb' or 'fuse'
        cable_csa: conductor size (mm²)
        cable_length: m
        disconnection_time: required maximum (s)
        insulation: 'pvc' or 'xlpe', sets k
    """
    require_valid(
        {'fault_level': fault_level, 'device_rating': device_rating, 'cable_csa': cable_csa,
         'cable_length': cable_length, 'disconnection_time': disconnection_time},
        PROTECTION_RULES, PROTECTION_LABELS)
    _check_insulation(insulation)

    r = COPPER_RESISTANCE / cable_csa
    impedance = math.hypot(r, CABLE_REACTANCE) * cable_length / 1000
    fault_at_end = PHASE_VOLTAGE / impedance
    operating = trip_time(device_type, fault_at_end, device_rating)

    k = CABLE_K_FACTORS[insulation]
    withstand = math.sqrt(k ** 2 * cable_csa ** 2 / disconnection_time)

    return {
        'cable_impedance': impedance,
        'fault_current_at_end': fault_at_end,
        'operating_time': operating,
        'disconnects_in_time': operating <= disconnection_time,
        'k_factor': k,
        'thermal_withstand_current': withstand,
        'thermally_protected': fault_level <= withstand,
        'standards': ['BS 7671'],
    }
