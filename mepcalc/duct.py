"""
Duct static pressure.

For each section:
    v    = Q / A
    Re   = v·Dh / ν
    f    = Haaland (laminar 64/Re below Re 2000)
    Δp_s = f (L/Dh) ½ρv²
    Δp_f = Σ K·½ρv²·n  (or a direct Δp per fitting)

System total is the sum of section drops times the safety factor. Air
properties come from the barometric formula at the site elevation.

Domain problems in a section (zero area, bad log argument) are recorded
as an 'error' on that section and make the system non-compliant.
"""

import math
from typing import Dict, List, Optional

from mepcalc.fluids import (
    air_density_at_elevation,
    circular_area,
    dynamic_pressure,
    haaland_friction,
    rectangular_section,
)
from mepcalc.sizing import smallest_size_for_velocity
from mepcalc.tables import (
    CUSTOM_FITTING_K,
    DUCT_FITTINGS_K,
    DUCT_ROUND_SIZES,
    DUCT_SAFETY_FACTOR,
    DUCT_VELOCITY_LIMITS,
    get_duct_material,
)
from mepcalc.units import convert_pressure, m3h_to_m3s, m3s_to_lps, mm_to_m
from mepcalc.validation import check_airflow, require_valid

OPTIMAL_RATIO_RANGE = (0.57, 0.77)

SECTION_RULES = {
    'flow_rate': {'required': True, 'type': 'positive', 'high': None,
                  'warn': lambda q: check_airflow(m3s_to_lps(m3h_to_m3s(float(q))))},
    'length': {'type': 'number', 'min': 0},
}
SECTION_LABELS = {'flow_rate': 'Section flow rate', 'length': 'Section length'}


def format_aspect_ratio(ratio: float) -> str:
    """Human-readable aspect ratio (height/width)."""
    if ratio == 1:
        return "1:1 (Square)"
    if ratio > 1:
        return f"{round(ratio, 2):g}:1 (H:W)"
    return f"1:{round(1 / ratio, 2):g} (W:H)"


def suggest_optimal_ratio(width: float, height: float) -> str:
    """Suggest dimensions near a 1.5:1 rectangle of the same area."""
    ratio = height / width
    lo, hi = OPTIMAL_RATIO_RANGE
    if lo <= ratio <= hi:
        return "Current ratio is good for airflow efficiency"
    area = width * height
    optimal_width = math.sqrt(area * 1.5)
    optimal_height = area / optimal_width
    return (f"Consider adjusting to {round(optimal_width)}mm × {round(optimal_height)}mm "
            f"for better efficiency")


def _section_roughness(section: Dict) -> float:
    if section.get('material_roughness') is not None:
        return section['material_roughness']
    return get_duct_material(section.get('material', 'galvanizedSteel')).roughness


def _fitting_drop(fitting: Dict, pd: float) -> Dict:
    qty = fitting.get('quantity', 1)
    if qty < 1:
        raise ValueError("Fitting quantity must be at least 1")
    if fitting.get('method', 'kValue') == 'direct':
        per_unit = fitting.get('direct_pressure_drop', 0.0)
        k = None
    else:
        k = fitting.get('loss_coefficient')
        if k is None:
            k = DUCT_FITTINGS_K.get(fitting.get('type'), CUSTOM_FITTING_K)
        per_unit = k * pd
    return {
        'type': fitting.get('type', 'custom'),
        'method': fitting.get('method', 'kValue'),
        'loss_coefficient': k,
        'quantity': qty,
        'drop_per_unit': per_unit,
        'total_drop': per_unit * qty,
    }


def _error_section(section: Dict, message: str, velocity_limit: float, **extra) -> Dict:
    result = {
        'name': section.get('name', ''),
        'flow_area': 0.0,
        'hydraulic_diameter': 0.0,
        'velocity': 0.0,
        'velocity_limit': velocity_limit,
        'is_section_compliant': False,
        'reynolds': 0.0,
        'friction_factor': 0.0,
        'straight_drop': 0.0,
        'fittings_drop': 0.0,
        'dynamic_pressure': 0.0,
        'section_total_drop': 0.0,
        'fitting_details': [],
        'error': message,
    }
    result.update(extra)
    return result


def calculate_section(section: Dict, density: float, kinematic_viscosity: float) -> Dict:
    """Pressure drop for one duct section.

    Args:
        section: {'type': 'main'|'branch', 'length' (m), 'flow_rate' (m³/h),
            'is_circular', 'diameter' or 'width'/'height' (mm),
            'material' or 'material_roughness' (mm), 'fittings': [...]}
        density: air density (kg/m³)
        kinematic_viscosity: air ν (m²/s)

    Raises:
        InputValidationError: if the flow rate is missing or not positive,
            or the length is negative.
    """
    checked = require_valid(section, SECTION_RULES, SECTION_LABELS)
    duct_type = section.get('type', 'main')
    if duct_type not in DUCT_VELOCITY_LIMITS:
        raise ValueError(f"Unknown duct type '{duct_type}'. Available: {list(DUCT_VELOCITY_LIMITS)}")
    limit = DUCT_VELOCITY_LIMITS[duct_type]
    extra = {}

    if section.get('is_circular', True):
        diameter = section.get('diameter', 0)
        area = circular_area(diameter)
        dh = mm_to_m(diameter)
    else:
        width = section.get('width', 0)
        height = section.get('height', 0)
        if width <= 0 or height <= 0:
            return _error_section(section, "Invalid dimensions for rectangular duct.", limit)
        rect = rectangular_section(width, height)
        area = rect['area']
        dh = rect['hydraulic_diameter']
        extra = {
            'aspect_ratio': rect['aspect_ratio'],
            'aspect_ratio_label': format_aspect_ratio(rect['aspect_ratio']),
            'ratio_suggestion': suggest_optimal_ratio(width, height),
        }

    if area <= 0:
        return _error_section(section, "Flow area is zero, cannot calculate velocity.", limit, **extra)
    if dh <= 0:
        return _error_section(section, "Hydraulic diameter is zero.", limit, **extra)

    v = m3h_to_m3s(section['flow_rate']) / area
    re = v * dh / kinematic_viscosity
    pd = dynamic_pressure(density, v)
    error = None

    f, fallback = haaland_friction(re, mm_to_m(_section_roughness(section)) / dh)
    if fallback:
        error = "Invalid input for friction factor calculation (log argument)."

    straight = f * (section.get('length', 0) / dh) * pd
    details = [_fitting_drop(fitting, pd) for fitting in section.get('fittings', [])]
    fittings_drop = sum(d['total_drop'] for d in details)

    result = {
        'name': section.get('name', ''),
        'flow_area': area,
        'hydraulic_diameter': dh,
        'velocity': v,
        'velocity_limit': limit,
        'is_section_compliant': v <= limit and error is None,
        'reynolds': re,
        'friction_factor': f,
        'straight_drop': straight,
        'fittings_drop': fittings_drop,
        'dynamic_pressure': pd,
        'section_total_drop': straight + fittings_drop,
        'fitting_details': details,
    }
    if error:
        result['error'] = error
    if checked['warnings']:
        result['warnings'] = checked['warnings']
    result.update(extra)
    return result


def duct_static_pressure(sections: List[Dict], air_temperature: float = 20.0,
                         elevation: float = 0.0,
                         safety_factor: float = DUCT_SAFETY_FACTOR) -> Dict:
    """Total static pressure for a duct run.

    Returns:
        Dict with air properties, per-section results, total_pressure_drop
        (Pa, with safety factor) and its mmH₂O/inH₂O equivalents,
        max_velocity and is_system_compliant.
    """
    if safety_factor < 1.0:
        raise ValueError("Safety factor must be at least 1.0")
    air = air_density_at_elevation(air_temperature, elevation)
    results = [calculate_section(s, air['density'], air['kinematic_viscosity']) for s in sections]

    total = sum(r['section_total_drop'] for r in results) * safety_factor
    return {
        'air': air,
        'sections': results,
        'total_pressure_drop': total,
        'total_pressure_drop_mmwg': convert_pressure(total, 'mmwg'),
        'total_pressure_drop_inwg': convert_pressure(total, 'inwg'),
        'max_velocity': max((r['velocity'] for r in results), default=0.0),
        'is_system_compliant': all(r['is_section_compliant'] for r in results),
    }


def select_duct_diameter(flow_rate: float, duct_type: str = 'main',
                         diameters: Optional[List[float]] = None) -> Optional[float]:
    """Smallest round duct (mm) within the velocity limit for its type."""
    if duct_type not in DUCT_VELOCITY_LIMITS:
        raise ValueError(f"Unknown duct type '{duct_type}'. Available: {list(DUCT_VELOCITY_LIMITS)}")
    sizes = diameters or DUCT_ROUND_SIZES
    return smallest_size_for_velocity(m3h_to_m3s(flow_rate), sizes, DUCT_VELOCITY_LIMITS[duct_type])

