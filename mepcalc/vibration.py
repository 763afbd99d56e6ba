"""
Vibration isolator sizing and transmissibility.

Single degree of freedom isolation with viscous damping ζ:

    TR = √[(1 + (2ζr)²) / ((1 − r²)² + (2ζr)²)],   r = f_d / f_n
    efficiency = (1 − TR) · 100 %
    δ = g / (4π² f_n²)                               static deflection

The frequency ratio needed for a target TR solves, with x = r²,

    TR² x² + (4ζ²TR² − 2TR² − 4ζ²) x + (TR² − 1) = 0

whose positive root always lies in the isolation region r > √2.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from mepcalc.tables import GRAVITY
from mepcalc.units import m_to_mm, mm_to_m
from mepcalc.validation import COMMON_RULES, require_valid

RESONANCE_BAND = 0.3           # |r − 1| below this is treated as near resonance
N_PER_MM_TO_LBF_PER_IN = 5.71015
SCENARIO_EFFICIENCIES = (80, 85, 90, 95)


@dataclass
class Equipment:
    """Vibrating plant with its usual running speed."""
    id: str
    name: str
    typical_rpm: float
    damping_ratio: float


@dataclass
class IsolatorType:
    """Isolator family and the static deflection range it can provide."""
    id: str
    name: str
    min_deflection: float   # mm
    max_deflection: float   # mm
    damping_ratio: float
    description: str


EQUIPMENT: Dict[str, Equipment] = {e.id: e for e in [
    Equipment('centrifugal_fan', 'Centrifugal Fan', 1200, 0.05),
    Equipment('axial_fan', 'Axial Fan', 1800, 0.05),
    Equipment('centrifugal_chiller', 'Centrifugal Chiller', 3600, 0.08),
    Equipment('screw_chiller', 'Screw Chiller', 2400, 0.06),
    Equipment('centrifugal_pump', 'Centrifugal Pump', 1800, 0.04),
    Equipment('cooling_tower', 'Cooling Tower', 900, 0.06),
    Equipment('ahu', 'Air Handling Unit', 1200, 0.05),
    Equipment('compressor', 'Reciprocating Compressor', 1200, 0.10),
    Equipment('custom', 'Custom Equipment', 1500, 0.05),
]}

ISOLATORS: Dict[str, IsolatorType] = {i.id: i for i in [
    IsolatorType('spring', 'Steel Spring Isolator', 25, 150, 0.02, 'Low natural frequency, minimal creep'),
    IsolatorType('rubber', 'Rubber/Neoprene Isolator', 2, 12, 0.15, 'Compact, integral damping'),
    IsolatorType('air_spring', 'Air Spring Isolator', 100, 250, 0.05, 'Very low natural frequency, adjustable'),
    IsolatorType('composite', 'Spring-Rubber Composite', 15, 75, 0.08, 'Combines spring and rubber benefits'),
]}

SIZING_RULES = {
    'weight': COMMON_RULES['positive_number'],
    'rpm': {'required': True, 'type': 'positive', 'high': 30000},
    'isolators': COMMON_RULES['count'],
    'efficiency': {'required': True, 'type': 'positive', 'max': 99.9},
    'damping_ratio': {'required': True, 'type': 'number', 'min': 0, 'max': 1},
}

SIZING_LABELS = {
    'weight': 'Equipment weight',
    'rpm': 'Operating speed',
    'isolators': 'Number of isolators',
    'efficiency': 'Isolation efficiency',
    'damping_ratio': 'Damping ratio',
}


def get_equipment(equipment_id: str) -> Equipment:
    if equipment_id not in EQUIPMENT:
        raise ValueError(f"Unknown equipment type '{equipment_id}'. Available: {list(EQUIPMENT.keys())}")
    return EQUIPMENT[equipment_id]


def get_isolator(isolator_id: str) -> IsolatorType:
    if isolator_id not in ISOLATORS:
        raise ValueError(f"Unknown isolator type '{isolator_id}'. Available: {list(ISOLATORS.keys())}")
    return ISOLATORS[isolator_id]


def transmissibility(frequency_ratio, damping_ratio: float):
    """TR for a frequency ratio or an array of them.

    Undamped resonance (r = 1, ζ = 0) gives inf.
    """
    r = np.asarray(frequency_ratio, dtype=float)
    damping = (2 * damping_ratio * r) ** 2
    with np.errstate(divide='ignore'):
        tr = np.sqrt((1 + damping) / ((1 - r ** 2) ** 2 + damping))
    return float(tr) if tr.ndim == 0 else tr


def required_frequency_ratio(efficiency: float, damping_ratio: float) -> float:
    """Frequency ratio f_d/f_n giving the target isolation efficiency (%)."""
    if not 0 < efficiency < 100:
        raise ValueError(f"Isolation efficiency must be between 0 and 100%, got {efficiency:g}")
    tr2 = (1 - efficiency / 100) ** 2
    z2 = 4 * damping_ratio ** 2
    a = tr2
    b = z2 * tr2 - 2 * tr2 - z2
    c = tr2 - 1
    x = (-b + math.sqrt(b * b - 4 * a * c)) / (2 * a)
    return math.sqrt(x)


def static_deflection(natural_frequency: float) -> float:
    """Static deflection (mm) giving a natural frequency (Hz)."""
    return m_to_mm(GRAVITY / (4 * math.pi ** 2 * natural_frequency ** 2))


def suggest_isolator(deflection: float) -> Dict:
    """Isolator family suited to a static deflection (mm)."""
    if deflection < 15:
        return {'type': 'rubber', 'name': 'Rubber/Neoprene',
                'reason': 'Low deflection requirement suits compact isolators'}
    if deflection < 100:
        return {'type': 'spring', 'name': 'Spring or Composite',
                'reason': 'Medium deflection range ideal for spring-based isolators'}
    return {'type': 'air_spring', 'name': 'Air Springs',
            'reason': 'High deflection requirement needs air spring technology'}


def size_isolators(
    equipment_type: str = 'centrifugal_fan',
    weight: float = 500.0,
    rpm: Optional[float] = None,
    isolators: int = 4,
    efficiency: float = 90.0,
    isolator_type: str = 'spring',
    damping_ratio: Optional[float] = None,
) -> Dict:
    """Size isolators for a target isolation efficiency.

    Args:
        equipment_type: key of EQUIPMENT
        weight: operating weight (kg)
        rpm: running speed, defaults to the equipment's typical speed
        isolators: number of mounts sharing the load equally
        efficiency: target isolation efficiency (%)
        isolator_type: key of ISOLATORS
        damping_ratio: defaults to the isolator family's damping

    Returns:
        Dict with frequencies (Hz), static deflection (mm), spring rate
        per mount (N/m), achieved efficiency, feasibility and resonance
        flags, a suggested isolator family and alternative efficiency
        scenarios.
    """
    equipment = get_equipment(equipment_type)
    isolator = get_isolator(isolator_type)
    params = {
        'weight': weight,
        'rpm': equipment.typical_rpm if rpm is None else rpm,
        'isolators': isolators,
        'efficiency': efficiency,
        'damping_ratio': isolator.damping_ratio if damping_ratio is None else damping_ratio,
    }
    checked = require_valid(params, SIZING_RULES, SIZING_LABELS)
    zeta = float(params['damping_ratio'])
    mounts = int(isolators)

    disturbing = float(params['rpm']) / 60
    ratio = required_frequency_ratio(efficiency, zeta)
    natural = disturbing / ratio
    deflection = static_deflection(natural)

    load = weight * GRAVITY / mounts
    stiffness = load / mm_to_m(deflection)
    actual_natural = math.sqrt(stiffness / (weight / mounts)) / (2 * math.pi)
    actual_ratio = disturbing / actual_natural
    tr = transmissibility(actual_ratio, zeta)
    achieved = max(0.0, (1 - tr) * 100)
    resonance = abs(actual_ratio - 1) < RESONANCE_BAND

    scenarios = []
    for target in SCENARIO_EFFICIENCIES:
        r = required_frequency_ratio(target, zeta)
        scenarios.append({
            'efficiency': target,
            'frequency_ratio': r,
            'natural_frequency': disturbing / r,
            'deflection': static_deflection(disturbing / r),
        })

    return {
        'equipment': equipment.name,
        'isolator': isolator.name,
        'disturbing_frequency': disturbing,
        'required_frequency_ratio': ratio,
        'required_natural_frequency': natural,
        'static_deflection': deflection,
        'static_deflection_in': deflection / 25.4,
        'total_load': weight * GRAVITY,
        'load_per_isolator': load,
        'spring_constant': stiffness,
        'spring_constant_lbf_in': stiffness / 1000 * N_PER_MM_TO_LBF_PER_IN,
        'actual_natural_frequency': actual_natural,
        'frequency_ratio': actual_ratio,
        'damping_ratio': zeta,
        'transmission_ratio': tr,
        'isolation_efficiency': achieved,
        'desired_efficiency': efficiency,
        'deflection_feasible': isolator.min_deflection <= deflection <= isolator.max_deflection,
        'meets_target': abs(achieved - efficiency) < 2,
        'resonance_risk': resonance,
        'performance_good': achieved >= efficiency - 5 and not resonance,
        'suggested_isolator': suggest_isolator(deflection),
        'scenarios': scenarios,
        'warnings': checked['warnings'],
    }


def performance_rating(efficiency: float) -> str:
    if efficiency > 90:
        return 'Excellent'
    if efficiency > 80:
        return 'Good'
    if efficiency > 60:
        return 'Fair'
    return 'Poor'


def transmission_analysis(
    natural_frequency: float = 5.0,
    damping_ratio: float = 0.05,
    f_min: float = 1.0,
    f_max: float = 50.0,
    operating_frequencies: Sequence[float] = (10.0, 20.0, 30.0),
    points: int = 101,
) -> Dict:
    """Frequency response of an isolated mount and checks at running speeds.

    Args:
        natural_frequency: mounted natural frequency (Hz)
        damping_ratio: ζ
        f_min, f_max: sweep range (Hz)
        operating_frequencies: disturbing frequencies to rate (Hz)
        points: sweep resolution
    """
    if natural_frequency <= 0:
        raise ValueError("Natural frequency must be positive")
    if not 0 <= damping_ratio <= 1:
        raise ValueError("Damping ratio must be between 0 and 1")
    if f_min <= 0 or f_max <= f_min:
        raise ValueError("Frequency range must be positive and increasing")

    frequencies = np.linspace(f_min, f_max, points)
    ratios = frequencies / natural_frequency
    tr = transmissibility(ratios, damping_ratio)
    efficiency = np.maximum(0.0, (1 - tr) * 100)
    response = [
        {'frequency': float(f), 'frequency_ratio': float(r),
         'transmission_ratio': float(t), 'isolation_efficiency': float(e)}
        for f, r, t, e in zip(frequencies, ratios, tr, efficiency)
    ]

    operating: List[Dict] = []
    for f in operating_frequencies:
        r = f / natural_frequency
        t = transmissibility(r, damping_ratio)
        e = max(0.0, (1 - t) * 100)
        operating.append({
            'frequency': f,
            'frequency_ratio': r,
            'transmission_ratio': t,
            'isolation_efficiency': e,
            'resonance_risk': abs(r - 1) < RESONANCE_BAND,
            'rating': performance_rating(e),
        })

    warnings = [f"{p['frequency']:g} Hz is close to resonance (r = {p['frequency_ratio']:.2f})"
                for p in operating if p['resonance_risk']]
    return {
        'natural_frequency': natural_frequency,
        'damping_ratio': damping_ratio,
        'isolation_threshold': natural_frequency * math.sqrt(2),
        'frequency_response': response,
        'operating_points': operating,
        'average_efficiency': (sum(p['isolation_efficiency'] for p in operating) / len(operating)
                               if operating else None),
        'warnings': warnings,
    }
