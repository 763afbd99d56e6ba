"""
Medical gas pipeline pressure loss (ISO 7396 / HTM 02-01).

Pressure drop is scaled from manufacturer lookup tables of the form
{diameter: {distance: {pressure_loss: flow}}}:

    Δp = (L / L_table) · (Q / Q_table)² · Δp_table

where the table distance is the tabulated distance nearest the design
length and Q_table the tabulated flow nearest the design flow. Tables are
supplied by the caller, one per pressure class (vacuum, 400, 700 and
1100 kPa); JSON string keys are accepted.
"""

import logging
import math
from typing import Dict, List, Optional

from mepcalc.tables import (
    MEDICAL_GAS_FLOW_RANGE,
    MEDICAL_GAS_LENGTH_RANGE,
    MEDICAL_GAS_PIPE_SIZES,
    MEDICAL_GAS_SAFETY_FACTOR,
)
from mepcalc.units import lpm_to_m3s, mm_to_m, pressure_equivalents

logger = logging.getLogger(__name__)

PRESSURE_CLASSES = ['vacuum', '400', '700', '1100']

GENERAL_RECOMMENDATIONS = [
    "Add 25-30% to calculated pressure drop for conservative design.",
    "Consider pressure drops through additional system components (filters, regulators, etc.).",
    "Verify compliance with relevant medical gas standards (ISO 7396, HTM 02-01).",
]


def _numeric(table: Dict) -> Dict[float, object]:
    return {float(k): v for k, v in table.items()}


def select_pressure_table(pressure: float) -> str:
    """Pressure class for a system pressure (kPa)."""
    if pressure <= 59:
        return 'vacuum'
    if pressure <= 400:
        return '400'
    if pressure <= 700:
        return '700'
    return '1100'


def find_flow_for_distance(distance_data: Dict, target_flow: float) -> Optional[Dict]:
    """Tabulated (flow, pressure loss) pair whose flow is nearest the target.

    Zero flows are ignored. Returns None when the row has no usable flow.
    """
    best = None
    min_difference = math.inf
    for loss, flow in sorted(_numeric(distance_data).items()):
        if flow > 0:
            difference = abs(flow - target_flow)
            if difference < min_difference:
                min_difference = difference
                best = {'nearest_flow': flow, 'pressure_loss': loss}
    return best


def interpolate_table(diameter_data: Dict, length: float, flow: float) -> Optional[Dict]:
    """Pressure drop (kPa) for a design length (m) and flow (L/min).

    Returns:
        {'pressure_drop': kPa, 'details': {...}} or None if the table has no
        usable data.
    """
    data = _numeric(diameter_data)
    distances = sorted(data)
    if not distances:
        return None

    lower, upper = distances[0], distances[-1]
    if length < distances[0]:
        upper = distances[0]
    elif length > distances[-1]:
        lower = distances[-1]
    else:
        for a, b in zip(distances, distances[1:]):
            if a <= length <= b:
                lower, upper = a, b
                break

    lower_match = find_flow_for_distance(data[lower], flow)
    upper_match = find_flow_for_distance(data[upper], flow)
    if lower_match is None or upper_match is None:
        return None

    if lower == upper or (length - lower) / (upper - lower) < 0.5:
        used_distance, used = lower, lower_match
    else:
        used_distance, used = upper, upper_match

    pressure_drop = (length / used_distance) * (flow / used['nearest_flow']) ** 2 * used['pressure_loss']
    return {
        'pressure_drop': pressure_drop,
        'details': {
            'lower_flow': lower_match['nearest_flow'],
            'upper_flow': upper_match['nearest_flow'],
            'lower_distance': lower,
            'upper_distance': upper,
            'lower_pressure_drop': lower_match['pressure_loss'],
            'upper_pressure_drop': upper_match['pressure_loss'],
            'table_flow_used': used['nearest_flow'],
            'table_pressure_drop_used': used['pressure_loss'],
            'table_distance_used': used_distance,
        },
    }


def validate_parameters(diameter: float, length: float, flow: float, pressure: float) -> Dict:
    """Check inputs against the range covered by the lookup tables."""
    warnings = []
    if diameter not in MEDICAL_GAS_PIPE_SIZES:
        warnings.append(f"Diameter {diameter:g}mm is not in standard sizes. Use nearest standard size.")

    min_length, max_length = MEDICAL_GAS_LENGTH_RANGE
    if length < min_length:
        warnings.append("Pipe length is less than minimum table range (8m). Results may be less accurate.")
    elif length > max_length:
        warnings.append("Pipe length exceeds maximum table range (457m). Consider using additional factors.")

    min_flow, max_flow = MEDICAL_GAS_FLOW_RANGE
    if flow < min_flow:
        warnings.append("Flow rate is very low. Verify minimum flow requirements.")
    elif flow > max_flow:
        warnings.append("Flow rate is very high. Verify system requirements and consider multiple pipes.")

    if 59 < pressure < 400:
        warnings.append("Pressure is between vacuum and 400 kPa ranges. Verify which table to use.")
    elif pressure > 1100:
        warnings.append("Pressure exceeds maximum table range (1100 kPa). "
                        "Consider higher pressure tables or custom calculations.")

    return {'is_valid': not warnings, 'warnings': warnings}


def design_recommendations(pressure_drop: float, velocity: float, system_pressure: float) -> Dict:
    """Advisory and critical notes for a calculated pipeline."""
    if system_pressure <= 0:
        raise ValueError("System pressure must be positive")
    recommendations: List[str] = []
    critical: List[str] = []

    percentage = pressure_drop / system_pressure * 100
    if percentage > 10:
        critical.append(f"Pressure drop is {percentage:.1f}% of system pressure. "
                        f"This is excessive and may affect performance.")
        recommendations.append("Consider increasing pipe diameter or reducing length.")
    elif percentage > 5:
        recommendations.append(f"Pressure drop is {percentage:.1f}% of system pressure. "
                               f"Consider if this is acceptable for your application.")

    if velocity > 15:
        critical.append("Velocity is very high (>15 m/s). This may cause noise and excessive pressure drop.")
        recommendations.append("Increase pipe diameter to reduce velocity.")
    elif velocity > 10:
        recommendations.append("Velocity is high (>10 m/s). Consider increasing pipe diameter for quieter operation.")
    elif velocity < 1:
        recommendations.append("Velocity is very low (<1 m/s). Verify this meets minimum flow requirements.")

    recommendations.extend(GENERAL_RECOMMENDATIONS)
    return {'recommendations': recommendations, 'critical_issues': critical}


def pipe_velocity(flow: float, diameter: float) -> float:
    """Free-air velocity (m/s) for a flow in L/min through a bore in mm."""
    if diameter <= 0:
        raise ValueError("Pipe diameter must be positive")
    return lpm_to_m3s(flow) / (math.pi * (mm_to_m(diameter) / 2) ** 2)


def fittings_equivalent_length(fittings: List[Dict], fittings_data: Dict) -> float:
    """Total equivalent length (m) from {type: {diameter: length}} data.

    Fittings or sizes missing from the data contribute nothing.
    """
    total = 0.0
    for fitting in fittings:
        row = fittings_data.get(fitting['type'])
        if not row:
            continue
        total += _numeric(row).get(float(fitting['diameter']), 0.0) * fitting.get('quantity', 1)
    return total


def section_pressure_drop(section: Dict, tables: Dict, fittings_data: Optional[Dict] = None,
                          safety_factor: float = MEDICAL_GAS_SAFETY_FACTOR) -> Dict:
    """Pressure drop for one pipeline section.

    Args:
        section: {'name', 'diameter' (mm), 'length' (m), 'flow_rate' (L/min),
            'pressure' (kPa), 'fittings': [{'type', 'diameter', 'quantity'}]}
        tables: {pressure class: {diameter: {distance: {loss: flow}}}}
        fittings_data: {fitting type: {diameter: equivalent length (m)}}
        safety_factor: multiplier on the interpolated drop

    Raises:
        ValueError: if no table covers the section.
    """
    table_class = select_pressure_table(section['pressure'])
    table = tables.get(table_class)
    if table is None:
        raise ValueError(f"No pressure loss table supplied for the {table_class} class")
    diameter_data = _numeric(table).get(float(section['diameter']))
    if not diameter_data:
        raise ValueError(f"No data available for {section['diameter']:g}mm diameter pipe")

    equivalent = fittings_equivalent_length(section.get('fittings', []), fittings_data or {})
    total_length = section['length'] + equivalent
    if total_length <= 0:
        raise ValueError("Total pipe length must be positive")
    result = interpolate_table(diameter_data, total_length, section['flow_rate'])
    if result is None:
        raise ValueError("Unable to interpolate pressure drop from available data")

    drop = result['pressure_drop']
    velocity = pipe_velocity(section['flow_rate'], section['diameter'])
    return {
        'name': section.get('name', ''),
        'pressure_table': table_class,
        'equivalent_length': equivalent,
        'total_length': total_length,
        'base_pressure_drop': drop / total_length,
        'total_pressure_drop': drop,
        'total_pressure_drop_with_safety': drop * safety_factor,
        'safety_factor': safety_factor,
        'velocity': velocity,
        'interpolation_details': result['details'],
        'validation': validate_parameters(section['diameter'], section['length'],
                                          section['flow_rate'], section['pressure']),
        'design': design_recommendations(drop * safety_factor, velocity, section['pressure']),
    }


def medical_gas_pressure_drop(sections: List[Dict], tables: Dict, fittings_data: Optional[Dict] = None,
                              safety_factor: float = MEDICAL_GAS_SAFETY_FACTOR) -> Dict:
    """System pressure drop (kPa, with safety factor) over all sections."""
    if safety_factor < 1.0:
        raise ValueError("Safety factor must be at least 1.0")
    results = []
    for section in sections:
        try:
            results.append(section_pressure_drop(section, tables, fittings_data, safety_factor))
        except ValueError as e:
            logger.warning("Medical gas section %r failed: %s", section.get('name'), e)
            raise ValueError(f"Failed to calculate pressure drop for section: {section.get('name', '')}: {e}") from e
    total = sum(r['total_pressure_drop_with_safety'] for r in results)
    return {
        'sections': results,
        'total_pressure_drop': total,
        'total_pressure_drop_units': pressure_equivalents(total),
        'safety_factor': safety_factor,
    }
