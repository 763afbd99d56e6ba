"""
Power supply sizing: power factor correction, transformers, generators.

Power factor correction:
    true PF = displacement PF / √(1 + THD²)
    Qc = P (tan φ1 − tan φ2)        φ2 from the displacement PF needed
                                     to reach the target true PF
    capacitor bank rounded up to 25 kVAr steps

Transformer loading:
    P = rated kW · qty · load factor · demand factor,  Q = P tan(acos PF)
    S = √(ΣP² + ΣQ²)
    regulation ΔV = Z% · S/Sr · U2,  motor start dip = S_start/Sr · Z%
    derating for harmonics, altitude above 1000 m and ambient above 40 °C

Generator step loading:
    transient kW = steady kW of earlier steps + starting kW of this step
    voltage dip ≈ 20 % per unit of starting kVA over the set rating
"""

import logging
import math
from typing import Dict, List, Optional

from mepcalc.validation import COMMON_RULES, InputValidationError, require_valid, validate_form

logger = logging.getLogger(__name__)

CAPACITOR_STEP = 25.0  # kVAr

# Starting kVA as a multiple of running kVA
STARTING_METHODS: Dict[str, float] = {
    'dol': 6.0,
    'star_delta': 2.5,
    'soft_starter': 2.0,
    'vsd': 1.8,
    'none': 1.0,
}

TRANSFORMER_REFERENCE_AMBIENT = 40.0  # °C
TRANSFORMER_INRUSH_MULTIPLE = 10.0
TRANSFORMER_NO_LOAD_LOSS = 0.003      # fraction of rating
GENERATOR_OVERLOAD = 1.1
GENERATOR_DIP_PER_UNIT = 20.0         # % dip per unit starting kVA / rating

PF_RULES = {
    'load_power': COMMON_RULES['positive_number'],
    'initial_power_factor': {'required': True, 'type': 'positive', 'max': 1},
    'target_power_factor': {'required': True, 'type': 'positive', 'max': 1},
    'harmonic_distortion': {'required': True, 'type': 'number', 'min': 0, 'max': 200},
}

PF_LABELS = {
    'load_power': 'Load power',
    'initial_power_factor': 'Initial power factor',
    'target_power_factor': 'Target power factor',
    'harmonic_distortion': 'Harmonic distortion',
}


def starting_multiple(method: str) -> float:
    if method not in STARTING_METHODS:
        raise ValueError(f"Unknown starting method '{method}'. Available: {list(STARTING_METHODS.keys())}")
    return STARTING_METHODS[method]


def power_factor_correction(
    load_power: float = 1000.0,
    initial_power_factor: float = 0.7,
    target_power_factor: float = 0.85,
    harmonic_distortion: float = 5.0,
) -> Dict:
    """Capacitor kVAr to raise a load's power factor.

    Args:
        load_power: active power (kW)
        initial_power_factor: present displacement power factor
        target_power_factor: required true power factor
        harmonic_distortion: current THD (%)

    Returns:
        Dict with the displacement power factor needed, angles (degrees),
        kVAr required, kVA before and after, and the capacitor bank size.
    """
    checked = require_valid(
        {'load_power': load_power, 'initial_power_factor': initial_power_factor,
         'target_power_factor': target_power_factor, 'harmonic_distortion': harmonic_distortion},
        PF_RULES, PF_LABELS)
    distortion = math.sqrt(1 + (harmonic_distortion / 100) ** 2)
    warnings = list(checked['warnings'])

    required_dpf = target_power_factor * distortion
    if required_dpf > 1:
        warnings.append(f"A true power factor of {target_power_factor:g} is not reachable with "
                        f"{harmonic_distortion:g}% THD by capacitors alone; harmonic filtering is needed")
        required_dpf = 1.0

    initial_angle = math.acos(initial_power_factor)
    target_angle = math.acos(required_dpf)
    kvar = load_power * (math.tan(initial_angle) - math.tan(target_angle))
    corrected_dpf = required_dpf
    if kvar <= 0:
        warnings.append("Power factor already meets the target")
        kvar = 0.0
        corrected_dpf = initial_power_factor

    initial_kva = load_power / (initial_power_factor / distortion)
    corrected_kva = load_power / (corrected_dpf / distortion)
    return {
        'initial_true_power_factor': initial_power_factor / distortion,
        'required_displacement_power_factor': required_dpf,
        'achieved_true_power_factor': corrected_dpf / distortion,
        'initial_angle': math.degrees(initial_angle),
        'target_angle': math.degrees(target_angle),
        'kvar_required': kvar,
        'initial_kva': initial_kva,
        'corrected_kva': corrected_kva,
        'kva_reduction': initial_kva - corrected_kva,
        'capacitor_bank': math.ceil(kvar / CAPACITOR_STEP) * CAPACITOR_STEP,
        'warnings': warnings,
    }


# --- Transformer ---

TRANSFORMER_LOAD_RULES = {
    'power': COMMON_RULES['non_negative'],
    'power_factor': {'required': True, 'type': 'positive', 'max': 1},
    'quantity': COMMON_RULES['count'],
    'load_factor': COMMON_RULES['fraction'],
    'demand_factor': COMMON_RULES['fraction'],
    'harmonic_content': COMMON_RULES['percentage'],
}

TRANSFORMER_LOAD_LABELS = {
    'power': 'Power',
    'power_factor': 'Power factor',
    'quantity': 'Quantity',
    'load_factor': 'Load factor',
    'demand_factor': 'Demand factor',
    'harmonic_content': 'Harmonic content',
}

LOAD_DEFAULTS = {
    'name': '',
    'power_factor': 0.85,
    'quantity': 1,
    'load_factor': 1.0,
    'demand_factor': 1.0,
    'harmonic_content': 0.0,
    'phase': 'three',
    'starting_method': 'none',
}

TRANSFORMER_RULES = {
    'rating': COMMON_RULES['positive_number'],
    'primary_voltage': {'required': True, 'type': 'positive', 'high': None},
    'secondary_voltage': {'required': True, 'type': 'positive', 'high': None},
    'impedance': {'required': True, 'type': 'positive', 'max': 25},
    'efficiency': {'required': True, 'type': 'positive', 'max': 100},
}


def _with_defaults(loads: List[Dict], defaults: Dict) -> List[Dict]:
    return [dict(defaults, **load) for load in loads]


def _check_loads(loads: List[Dict], rules: Dict, labels: Dict) -> None:
    errors = []
    for i, load in enumerate(loads, start=1):
        numbered = {key: f"Load {i}: {label}" for key, label in labels.items()}
        errors.extend(validate_form(load, rules, numbered)['errors'])
    if errors:
        raise InputValidationError(errors)


def transformer_derating(harmonic_content: float, altitude: float, ambient: float,
                         k_factor: float = 1.0) -> Dict:
    """Harmonic, altitude and temperature derating factors."""
    harmonic = 1.0
    if k_factor == 1 and harmonic_content > 0:
        harmonic = max(1.0 - min(harmonic_content, 50) / 100 * 0.15, 0.75)
    altitude_factor = 1.0
    if altitude > 1000:
        altitude_factor = max(1.0 - (altitude - 1000) / 100 * 0.004, 0.8)
    temperature = 1.0
    if ambient > TRANSFORMER_REFERENCE_AMBIENT:
        temperature = max(1.0 - (ambient - TRANSFORMER_REFERENCE_AMBIENT) * 0.01, 0.75)
    return {
        'harmonic': harmonic,
        'altitude': altitude_factor,
        'temperature': temperature,
        'overall': harmonic * altitude_factor * temperature,
    }


def transformer_sizing(
    loads: List[Dict],
    rating: float = 1000.0,
    primary_voltage: float = 11000.0,
    secondary_voltage: float = 380.0,
    impedance: float = 5.0,
    ambient_temperature: float = 40.0,
    altitude: float = 0.0,
    k_factor: float = 1.0,
    efficiency: float = 98.5,
) -> Dict:
    """Loading, regulation and derating of a distribution transformer.

    Args:
        loads: each {'name', 'power' (kW rated), 'power_factor', 'quantity',
            'load_factor', 'demand_factor', 'harmonic_content' (%),
            'phase' ('single' or 'three'), 'starting_method'}
        rating: kVA
        primary_voltage, secondary_voltage: line voltages (V)
        impedance: Z (%)
        ambient_temperature: °C
        altitude: m
        k_factor: 1 for a standard transformer; K-rated units are not
            derated for harmonics
        efficiency: % at the assessed load

    Returns:
        Dict with total kW, kVAr and kVA, utilisation of the nameplate and
        derated ratings, voltage regulation, motor start dip and current,
        energisation inrush, losses and per-load details.
    """
    require_valid(
        {'rating': rating, 'primary_voltage': primary_voltage, 'secondary_voltage': secondary_voltage,
         'impedance': impedance, 'efficiency': efficiency},
        TRANSFORMER_RULES,
        {'rating': 'Transformer rating', 'primary_voltage': 'Primary voltage',
         'secondary_voltage': 'Secondary voltage', 'impedance': 'Impedance', 'efficiency': 'Efficiency'})
    loads = _with_defaults(loads, LOAD_DEFAULTS)
    _check_loads(loads, TRANSFORMER_LOAD_RULES, TRANSFORMER_LOAD_LABELS)

    details = []
    total_p = total_q = 0.0
    max_start_kva = 0.0
    start_phase = 'three'
    for load in loads:
        pf = max(0.1, min(1.0, load['power_factor']))
        p = load['power'] * load['quantity'] * load['load_factor'] * load['demand_factor']
        q = p * math.tan(math.acos(pf))
        multiple = starting_multiple(load['starting_method'])
        start_kva = load['power'] * load['quantity'] / pf * multiple
        if start_kva > max_start_kva:
            max_start_kva, start_phase = start_kva, load['phase']
        total_p += p
        total_q += q
        details.append({
            'name': load['name'],
            'active_power': p,
            'reactive_power': q,
            'apparent_power': p / pf,
            'power_factor': pf,
            'starting_kva': start_kva,
            'starting_multiple': multiple,
        })

    apparent = math.hypot(total_p, total_q)
    harmonic = max((load['harmonic_content'] for load in loads), default=0.0)
    derating = transformer_derating(harmonic, altitude, ambient_temperature, k_factor)
    derated_rating = rating * derating['overall']

    phase_factor = math.sqrt(3) if start_phase == 'three' else 1.0
    if total_p > 0:
        losses = total_p / (efficiency / 100) - total_p
    else:
        losses = rating * TRANSFORMER_NO_LOAD_LOSS

    utilisation = apparent / rating * 100
    warnings = []
    if apparent > derated_rating:
        warnings.append(f"Load of {apparent:.0f} kVA exceeds the derated rating of {derated_rating:.0f} kVA")
    elif utilisation > 80:
        warnings.append(f"Transformer loaded to {utilisation:.0f}% of nameplate; little spare capacity")

    return {
        'total_active_power': total_p,
        'total_reactive_power': total_q,
        'total_apparent_power': apparent,
        'power_factor': total_p / apparent if apparent > 0 else 0.0,
        'utilisation': utilisation,
        'derating': derating,
        'derated_rating': derated_rating,
        'adequate': apparent <= derated_rating,
        'voltage_regulation': impedance / 100 * apparent / rating * secondary_voltage,
        'motor_starting_dip': max_start_kva / rating * impedance,
        'peak_starting_current': max_start_kva * 1000 / (phase_factor * secondary_voltage),
        'inrush_current': TRANSFORMER_INRUSH_MULTIPLE * rating * 1000 / (math.sqrt(3) * primary_voltage),
        'losses': losses,
        'loads': details,
        'warnings': warnings,
    }


# --- Generator ---

GENERATOR_LOAD_RULES = {
    'steady_kw': COMMON_RULES['non_negative'],
    'power_factor': {'required': True, 'type': 'positive', 'max': 1},
    'step': COMMON_RULES['count'],
}

GENERATOR_LOAD_LABELS = {'steady_kw': 'Steady kW', 'power_factor': 'Power factor', 'step': 'Step'}

GENERATOR_RULES = {
    'rating_kva': COMMON_RULES['positive_number'],
    'power_factor': {'required': True, 'type': 'positive', 'max': 1},
    'step_acceptance': {'required': True, 'type': 'positive', 'max': 100},
    'max_voltage_dip': {'required': True, 'type': 'positive', 'max': 100},
}


def generator_sizing(
    loads: List[Dict],
    rating_kva: float = 1000.0,
    power_factor: float = 0.8,
    step_acceptance: float = 60.0,
    max_voltage_dip: float = 20.0,
    steps: Optional[int] = None,
) -> Dict:
    """Check a generating set against steady, step and transient loading.

    Args:
        loads: each {'name', 'steady_kw', 'power_factor', 'starting_method',
            'step'}; steps are switched on in order
        rating_kva: set rating
        power_factor: set rated power factor
        step_acceptance: largest single step as % of rated kW
        max_voltage_dip: allowed transient dip (%)
        steps: number of steps, defaults to the highest step used

    Returns:
        Dict with per-load and per-step kW/kVA, the five pass/fail checks
        and an overall result.
    """
    require_valid(
        {'rating_kva': rating_kva, 'power_factor': power_factor, 'step_acceptance': step_acceptance,
         'max_voltage_dip': max_voltage_dip},
        GENERATOR_RULES,
        {'rating_kva': 'Generator rating', 'power_factor': 'Generator power factor',
         'step_acceptance': 'Step load acceptance', 'max_voltage_dip': 'Maximum voltage dip'})
    if not loads:
        raise ValueError("At least one load is required")
    loads = _with_defaults(loads, {'name': '', 'power_factor': 0.8, 'starting_method': 'none', 'step': 1})
    _check_loads(loads, GENERATOR_LOAD_RULES, GENERATOR_LOAD_LABELS)

    rated_kw = rating_kva * power_factor
    step_limit = rated_kw * step_acceptance / 100
    overload = rated_kw * GENERATOR_OVERLOAD

    details = []
    for load in loads:
        multiple = starting_multiple(load['starting_method'])
        steady_kva = load['steady_kw'] / load['power_factor']
        details.append({
            'name': load['name'],
            'step': int(load['step']),
            'steady_kw': load['steady_kw'],
            'steady_kva': steady_kva,
            'starting_kw': load['steady_kw'] * multiple,
            'starting_kva': steady_kva * multiple,
        })

    count = steps or max(d['step'] for d in details)
    if any(d['step'] > count for d in details):
        logger.warning("Loads assigned beyond step %d are ignored", count)

    step_totals = []
    cumulative_kw = 0.0
    max_transient = 0.0
    for step in range(1, count + 1):
        members = [d for d in details if d['step'] == step]
        totals = {
            'step': step,
            'steady_kw': sum(d['steady_kw'] for d in members),
            'steady_kva': sum(d['steady_kva'] for d in members),
            'starting_kw': sum(d['starting_kw'] for d in members),
            'starting_kva': sum(d['starting_kva'] for d in members),
        }
        totals['transient_kw'] = cumulative_kw + totals['starting_kw']
        max_transient = max(max_transient, totals['transient_kw'])
        cumulative_kw += totals['steady_kw']
        step_totals.append(totals)

    counted = [d for d in details if d['step'] <= count]
    total_kw = sum(d['steady_kw'] for d in counted)
    total_kva = sum(d['steady_kva'] for d in counted)
    max_step_kw = max(s['starting_kw'] for s in step_totals)
    max_step_kva = max(s['starting_kva'] for s in step_totals)
    voltage_dip = max_step_kva / rating_kva * GENERATOR_DIP_PER_UNIT

    checks = {
        'steady_kw': rated_kw > total_kw,
        'steady_kva': rating_kva > total_kva,
        'step_load': step_limit >= max_step_kw,
        'overload': overload > max_transient,
        'voltage_dip': voltage_dip <= max_voltage_dip,
    }
    return {
        'rated_kw': rated_kw,
        'max_step_load': step_limit,
        'overload_capacity': overload,
        'total_steady_kw': total_kw,
        'total_steady_kva': total_kva,
        'max_step_starting_kw': max_step_kw,
        'max_transient_kw': max_transient,
        'voltage_dip': voltage_dip,
        'loads': details,
        'steps': step_totals,
        'checks': checks,
        'passed': all(checks.values()),
    }
