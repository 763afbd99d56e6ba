"""
Chilled water pipe sizing and pump selection.

Water (or glycol) properties at the supply temperature drive:
    Q   = P / (cp · ΔT · ρ/1000)                      l/s
    Δp  = f (L/D) ½ρv² + Σ K ½ρv² n                   Pa per section
    H   = Δp_total / (ρ g)                            m
    W   = Q · H · ρ · g / (1000 η)                    kW

Sections reference a nominal size (inches) and a material; the inner
diameter comes from the material schedule.
"""

import logging
from typing import Dict, List, Optional

from mepcalc.fluids import (
    circular_area,
    dynamic_pressure,
    haaland_friction,
    water_density,
    water_specific_heat,
    water_viscosity,
)
from mepcalc.sizing import smallest_size_for_velocity
from mepcalc.tables import (
    CUSTOM_FITTING_K,
    HYDRONIC_SAFETY_FACTOR,
    NOMINAL_SIZE_LABELS,
    NOMINAL_SIZES,
    PIPE_FITTINGS,
    PIPE_VELOCITY_LIMITS,
    PUMP_EFFICIENCY,
    get_pipe_material,
)
from mepcalc.units import lps_to_m3s, m_to_ft, mm_to_m

logger = logging.getLogger(__name__)

GRAVITY_HYDRONIC = 9.81


def chilled_water_flow(cooling_load: float, temperature_drop: float, water_temperature: float = 7.0,
                       glycol_percentage: float = 0.0) -> Dict:
    """System flow rate (l/s) for a cooling load (kW) and design ΔT (K)."""
    if cooling_load < 0:
        raise ValueError("Cooling load cannot be negative")
    if temperature_drop <= 0:
        raise ValueError("Temperature drop must be positive")
    rho = water_density(water_temperature, glycol_percentage)
    cp = water_specific_heat(glycol_percentage)
    warnings = []
    if temperature_drop < 1:
        warnings.append("Temperature difference below 1 K gives very high flow rates.")
    return {
        'flow_rate': cooling_load / (cp * temperature_drop * (rho / 1000)),
        'density': rho,
        'specific_heat': cp,
        'warnings': warnings,
    }


def inner_diameter(nominal: float, material: str = 'steel') -> Dict:
    """Inner diameter (mm) for a nominal size.

    Sizes missing from the schedule are estimated as 85% of the nominal
    bore and flagged.
    """
    schedule = get_pipe_material(material).inner_diameters
    if nominal in schedule:
        return {'inner_diameter': schedule[nominal], 'estimated': False}
    if nominal <= 0:
        raise ValueError("Nominal pipe size must be positive")
    logger.warning("No %s schedule entry for %s\", estimating inner diameter", material, nominal)
    return {'inner_diameter': nominal * 25.4 * 0.85, 'estimated': True}


def fitting_k(fitting_id: str, nominal: Optional[float] = None) -> float:
    """Loss coefficient for a standard fitting at a nominal size."""
    fitting = PIPE_FITTINGS.get(fitting_id)
    if fitting is None:
        return CUSTOM_FITTING_K
    return fitting.k_for_size(nominal)


def pump_power(flow_rate: float, pump_head: float, density: float,
               efficiency: float = PUMP_EFFICIENCY) -> float:
    """Pump shaft power (kW). Zero if any input is not positive."""
    if flow_rate <= 0 or pump_head <= 0 or density <= 0 or efficiency <= 0:
        return 0.0
    return (lps_to_m3s(flow_rate) * pump_head * density * GRAVITY_HYDRONIC) / (1000 * efficiency)


def _fitting_loss(fitting: Dict, nominal: float, pd: float) -> Dict:
    qty = fitting.get('quantity', 1)
    method = fitting.get('method', 'kValue')
    if method == 'direct':
        per_unit = fitting.get('direct_pressure_drop', 0.0)
        k = None
    else:
        k = fitting.get('loss_coefficient')
        if k is None:
            k = fitting_k(fitting.get('type', ''), nominal)
        per_unit = k * pd
    return {
        'type': fitting.get('type', 'custom'),
        'method': method,
        'quantity': qty,
        'loss_coefficient': k,
        'loss_per_unit': per_unit,
        'total_loss': per_unit * qty,
    }


def calculate_section(section: Dict, density: float, viscosity: float) -> Dict:
    """Losses for one pipe section.

    Args:
        section: {'type': 'main'|'branch'|'connection', 'length' (m),
            'diameter' (nominal inch), 'material', optional
            'material_roughness' (mm) or 'inner_diameter' (mm),
            'flow_rate' (l/s), 'fittings': [...]}
        density: kg/m³
        viscosity: dynamic, Pa·s
    """
    pipe_type = section.get('type', 'main')
    if pipe_type not in PIPE_VELOCITY_LIMITS:
        raise ValueError(f"Unknown pipe type '{pipe_type}'. Available: {list(PIPE_VELOCITY_LIMITS)}")
    material = get_pipe_material(section.get('material', 'steel'))
    nominal = section.get('diameter', 1.5)
    roughness = section.get('material_roughness')
    if roughness is None:
        roughness = material.roughness

    estimated = False
    id_mm = section.get('inner_diameter')
    if not id_mm or id_mm <= 0:
        lookup = inner_diameter(nominal, material.id)
        id_mm, estimated = lookup['inner_diameter'], lookup['estimated']

    d = mm_to_m(id_mm)
    area = circular_area(id_mm)
    v = lps_to_m3s(section.get('flow_rate', 0)) / area
    limit = PIPE_VELOCITY_LIMITS[pipe_type]
    re = density * v * d / viscosity
    if re > 0:
        f, fallback = haaland_friction(re, mm_to_m(roughness) / d)
    else:
        f, fallback = 0.0, False
    length = section.get('length', 0)
    major = f * (length / d) * (density * v ** 2 / 2)
    pd = dynamic_pressure(density, v)

    details = [_fitting_loss(fitting, nominal, pd) for fitting in section.get('fittings', [])]
    minor = sum(item['total_loss'] for item in details)

    return {
        'name': section.get('name', ''),
        'pipe_type': pipe_type,
        'nominal_size': nominal,
        'size_label': NOMINAL_SIZE_LABELS.get(nominal, f'{nominal}"'),
        'inner_diameter': id_mm,
        'inner_diameter_estimated': estimated,
        'flow_rate': section.get('flow_rate', 0),
        'flow_area': area,
        'velocity': v,
        'velocity_limit': limit,
        'is_section_compliant': v <= limit,
        'dynamic_pressure': pd,
        'reynolds': re,
        'friction_factor': f,
        'friction_fallback': fallback,
        'major_loss': major,
        'minor_loss': minor,
        'section_loss': major + minor,
        'fitting_details': details,
        'pressure_gradient': major / length if length > 0 else 0.0,
    }


def chilled_water_pipe_sizing(sections: List[Dict], water_temperature: float = 7.0,
                              glycol_percentage: float = 0.0,
                              safety_factor: float = HYDRONIC_SAFETY_FACTOR,
                              pump_efficiency: float = PUMP_EFFICIENCY,
                              cooling_load: Optional[float] = None,
                              temperature_drop: float = 5.5,
                              system_flow_rate: Optional[float] = None) -> Dict:
    """Pressure drop, pump head and pump power for a chilled water circuit.

    Args:
        sections: pipe sections (see calculate_section)
        water_temperature: supply temperature (°C)
        glycol_percentage: glycol concentration (%)
        safety_factor: multiplier on the total drop
        pump_efficiency: 0-1
        cooling_load: system load (kW); sets the flow of every section
            without an explicit flow_rate
        temperature_drop: design ΔT (K)
        system_flow_rate: manual system flow (l/s), overrides cooling_load

    Returns:
        Dict with fluid properties, section results, total_pressure_drop (Pa),
        pump_head (m, and pump_head_ft), pump_power (kW), max_velocity, is_system_compliant
        and warnings.
    """
    if safety_factor < 1.0:
        raise ValueError("Safety factor must be at least 1.0")
    if not 0 <= glycol_percentage <= 100:
        raise ValueError("Glycol percentage must be between 0 and 100")

    rho = water_density(water_temperature, glycol_percentage)
    mu = water_viscosity(water_temperature, glycol_percentage)
    cp = water_specific_heat(glycol_percentage)
    warnings: List[str] = []

    flow = system_flow_rate
    if flow is None and cooling_load:
        calc = chilled_water_flow(cooling_load, temperature_drop, water_temperature, glycol_percentage)
        flow = calc['flow_rate']
        warnings.extend(calc['warnings'])

    results = []
    for section in sections:
        if section.get('flow_rate') is None:
            if flow is None:
                raise ValueError("Section flow rate is required when no cooling load or system flow is given")
            section = dict(section, flow_rate=flow)
        results.append(calculate_section(section, rho, mu))

    if flow is None:
        flow = max((r['flow_rate'] for r in results), default=0.0)

    if any(r['inner_diameter_estimated'] for r in results):
        warnings.append("One or more inner diameters were estimated from the nominal size.")
    if any(r['friction_fallback'] for r in results):
        warnings.append("Invalid input for friction factor calculation (log argument).")

    total = sum(r['section_loss'] for r in results) * safety_factor
    head = total / (rho * GRAVITY_HYDRONIC)
    return {
        'density': rho,
        'viscosity': mu,
        'specific_heat': cp,
        'system_flow_rate': flow,
        'sections': results,
        'total_pressure_drop': total,
        'pump_head': head,
        'pump_head_ft': m_to_ft(head),
        'pump_power': pump_power(flow, head, rho, pump_efficiency),
        'max_velocity': max((r['velocity'] for r in results), default=0.0),
        'is_system_compliant': all(r['is_section_compliant'] for r in results),
        'warnings': warnings,
    }


def select_pipe_size(flow_rate: float, material: str = 'steel', pipe_type: str = 'main') -> Optional[Dict]:
    """Smallest nominal size whose velocity is within the limit for the pipe type.

    Args:
        flow_rate: l/s
        material: pipe material id
        pipe_type: 'main', 'branch' or 'connection'

    Returns:
        {'nominal_size', 'size_label', 'inner_diameter', 'velocity'} or None
        if even the largest size is too small.
    """
    if pipe_type not in PIPE_VELOCITY_LIMITS:
        raise ValueError(f"Unknown pipe type '{pipe_type}'. Available: {list(PIPE_VELOCITY_LIMITS)}")
    schedule = get_pipe_material(material).inner_diameters
    ids = [schedule[n] for n in NOMINAL_SIZES]
    chosen = smallest_size_for_velocity(lps_to_m3s(flow_rate), ids, PIPE_VELOCITY_LIMITS[pipe_type])
    if chosen is None:
        return None
    nominal = NOMINAL_SIZES[ids.index(chosen)]
    return {
        'nominal_size': nominal,
        'size_label': NOMINAL_SIZE_LABELS[nominal],
        'inner_diameter': chosen,
        'velocity': lps_to_m3s(flow_rate) / circular_area(chosen),
    }
