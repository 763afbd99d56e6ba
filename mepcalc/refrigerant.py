"""
Refrigerant line sizing for DX systems.

Saturation curve (Antoine, P in kPa, T in °C):
    log10(P) = A - B / (C + T)
    T = B / (A - log10(P)) - C

Each line (suction, liquid, discharge) is evaluated at every standard
copper tube size; the recommended size is the smallest acceptable one.

Friction uses Blasius above Re 2300 (smooth drawn copper), laminar below.
"""

import math
from typing import Dict, Optional

from mepcalc.fluids import blasius_friction, circular_area
from mepcalc.sizing import select_smallest
from mepcalc.tables import COPPER_TUBE_SIZES, Refrigerant, TubeSize, get_refrigerant
from mepcalc.units import c_to_k, k_to_c, mm_to_m
from mepcalc.validation import COMMON_RULES, require_valid

GRAVITY_REFRIGERANT = 9.81
DEFAULT_SUPERHEAT = 5.0  # K


# --- Properties ---

def saturation_pressure(refrigerant: Refrigerant, temperature_c: float) -> float:
    """Saturation pressure (kPa)."""
    return 10 ** (refrigerant.antoine_a - refrigerant.antoine_b / (refrigerant.antoine_c + temperature_c))


def saturation_temperature(refrigerant: Refrigerant, pressure_kpa: float) -> float:
    """Saturation temperature (°C). Returns absolute zero for P ≤ 0."""
    if pressure_kpa <= 0:
        return k_to_c(0.0)
    return refrigerant.antoine_b / (refrigerant.antoine_a - math.log10(pressure_kpa)) - refrigerant.antoine_c


def liquid_density(refrigerant: Refrigerant, temperature_c: float) -> float:
    return refrigerant.liquid_density_25c * (1 - 0.002 * (temperature_c - 25))


def vapor_density(refrigerant: Refrigerant, temperature_c: float, pressure_kpa: float) -> float:
    """Ideal-gas scaling from the 5 °C saturated reference."""
    reference_pressure = saturation_pressure(refrigerant, 5)
    return (refrigerant.vapor_density_5c * (c_to_k(5) / c_to_k(temperature_c))
            * (pressure_kpa / reference_pressure))


def liquid_viscosity(refrigerant: Refrigerant, temperature_c: float) -> float:
    return refrigerant.liquid_viscosity * (c_to_k(25) / c_to_k(temperature_c)) ** 1.5


def vapor_viscosity(refrigerant: Refrigerant, temperature_c: float) -> float:
    return refrigerant.vapor_viscosity * (c_to_k(temperature_c) / c_to_k(5)) ** 0.7


def mass_flow_rate(refrigerant: Refrigerant, capacity_kw: float,
                   superheat: float = DEFAULT_SUPERHEAT) -> float:
    """Refrigerant mass flow (kg/s) from the evaporator enthalpy rise."""
    delta_h = refrigerant.enthalpy_vapor + superheat * 0.5 - refrigerant.enthalpy_liquid
    return capacity_kw * 1000 / (delta_h * 1000)


# --- Per-size evaluation ---

def _evaluate_tube(tube: TubeSize, volumetric_flow: float, density: float, viscosity: float,
                   total_length: float, vertical_rise: float) -> Dict:
    area = circular_area(tube.id)
    v = volumetric_flow / area
    d = mm_to_m(tube.id)
    re = density * v * d / viscosity
    f = blasius_friction(re)
    friction_pa = f * (total_length / d) * (density * v ** 2 / 2)
    static_pa = density * GRAVITY_REFRIGERANT * vertical_rise
    total_pa = friction_pa + static_pa
    return {
        'size': tube.label,
        'outer_diameter': tube.od,
        'inner_diameter': tube.id,
        'velocity': v,
        'reynolds': re,
        'friction_factor': f,
        'friction_drop_pa': friction_pa,
        'static_drop_pa': static_pa,
        'total_drop_pa': total_pa,
        'total_drop_kpa': total_pa / 1000,
    }


def _line_result(refrigerant: Refrigerant, m_dot: float, density: float, viscosity: float,
                 evaluations, selected: Optional[Dict], **extra) -> Dict:
    result = {
        'refrigerant': refrigerant.name,
        'mass_flow': m_dot,
        'volumetric_flow': m_dot / density,
        'density': density,
        'viscosity': viscosity,
        'sizes': evaluations,
        'recommended': selected,
    }
    result.update(extra)
    return result


LINE_RULES = {
    'capacity': COMMON_RULES['positive_number'],
    'pipe_length': COMMON_RULES['non_negative'],
    'equivalent_length': COMMON_RULES['non_negative'],
}
LINE_LABELS = {
    'capacity': 'System capacity',
    'pipe_length': 'Pipe length',
    'equivalent_length': 'Equivalent length',
}


def _check_line(capacity: float, pipe_length: float, equivalent_length: float) -> None:
    require_valid({'capacity': capacity, 'pipe_length': pipe_length,
                   'equivalent_length': equivalent_length}, LINE_RULES, LINE_LABELS)


def suction_line(refrigerant: str = 'R410A', capacity: float = 10.0, evaporating_temp: float = 5.0,
                 superheat: float = 5.0, pipe_length: float = 15.0, equivalent_length: float = 5.0,
                 vertical_rise: float = 0.0, max_temp_drop: float = 0.5,
                 max_velocity: float = 20.0, min_velocity: float = 7.0) -> Dict:
    """Size the suction line on velocity (oil return) and saturation-temperature loss.

    Args:
        refrigerant: refrigerant id (R410A, R134A, R22, R32)
        capacity: system capacity (kW)
        evaporating_temp: saturated suction temperature (°C)
        superheat: suction superheat (K)
        pipe_length: straight run (m)
        equivalent_length: fitting allowance (m)
        vertical_rise: riser height (m)
        max_temp_drop: allowable loss of saturation temperature (K)
        max_velocity, min_velocity: velocity window (m/s)

    Returns:
        Dict with flows, suction state, every evaluated size and the
        recommended (smallest acceptable) size or None.
    """
    _check_line(capacity, pipe_length, equivalent_length)
    ref = get_refrigerant(refrigerant)
    m_dot = mass_flow_rate(ref, capacity, superheat)
    suction_pressure = saturation_pressure(ref, evaporating_temp)
    suction_temp = evaporating_temp + superheat
    rho = vapor_density(ref, suction_temp, suction_pressure)
    mu = vapor_viscosity(ref, suction_temp)
    q = m_dot / rho

    def evaluate(tube: TubeSize) -> Dict:
        r = _evaluate_tube(tube, q, rho, mu, pipe_length + equivalent_length, vertical_rise)
        exit_pressure = suction_pressure - r['total_drop_kpa']
        exit_sat_temp = saturation_temperature(ref, exit_pressure)
        temp_drop = evaporating_temp - exit_sat_temp
        r.update({
            'pressure_at_exit': exit_pressure,
            'sat_temp_at_exit': exit_sat_temp,
            'temp_drop_equivalent': temp_drop,
            'is_velocity_ok': min_velocity <= r['velocity'] <= max_velocity,
            'is_temp_drop_ok': temp_drop <= max_temp_drop,
            'velocity_too_high': r['velocity'] > max_velocity,
            'velocity_too_low': r['velocity'] < min_velocity,
        })
        r['is_acceptable'] = r['is_velocity_ok'] and r['is_temp_drop_ok']
        return r

    selected, evaluations = select_smallest(COPPER_TUBE_SIZES, evaluate, lambda r: r['is_acceptable'])
    return _line_result(ref, m_dot, rho, mu, evaluations, selected,
                        suction_pressure=suction_pressure, suction_temperature=suction_temp)


def liquid_line(refrigerant: str = 'R410A', capacity: float = 10.0, condensing_temp: float = 40.0,
                evaporating_temp: float = 5.0, subcooling: float = 5.0, pipe_length: float = 15.0,
                equivalent_length: float = 5.0, vertical_rise: float = 0.0,
                max_velocity: float = 1.5) -> Dict:
    """Size the liquid line on velocity and flash-gas margin at the expansion valve.

    A size flashes if the pressure reaching the TXV drops to the evaporator
    saturation pressure, or if the subcooling the drop consumes exceeds the
    subcooling available.
    """
    _check_line(capacity, pipe_length, equivalent_length)
    ref = get_refrigerant(refrigerant)
    m_dot = mass_flow_rate(ref, capacity)
    liquid_temp = condensing_temp - subcooling
    rho = liquid_density(ref, liquid_temp)
    mu = liquid_viscosity(ref, liquid_temp)
    q = m_dot / rho
    evap_pressure = saturation_pressure(ref, evaporating_temp)
    liquid_sat_pressure = saturation_pressure(ref, liquid_temp)

    def evaluate(tube: TubeSize) -> Dict:
        r = _evaluate_tube(tube, q, rho, mu, pipe_length + equivalent_length, vertical_rise)
        txv_pressure = liquid_sat_pressure - r['total_drop_kpa']
        txv_sat_temp = saturation_temperature(ref, txv_pressure)
        required = liquid_temp - txv_sat_temp
        no_flashing = txv_pressure > evap_pressure and required <= subcooling
        r.update({
            'liquid_sat_pressure': liquid_sat_pressure,
            'pressure_at_txv': txv_pressure,
            'sat_temp_at_txv': txv_sat_temp,
            'required_subcooling': required,
            'no_flashing': no_flashing,
            'is_velocity_ok': r['velocity'] <= max_velocity,
        })
        r['is_acceptable'] = r['is_velocity_ok'] and no_flashing
        return r

    selected, evaluations = select_smallest(COPPER_TUBE_SIZES, evaluate, lambda r: r['is_acceptable'])
    return _line_result(ref, m_dot, rho, mu, evaluations, selected,
                        liquid_temperature=liquid_temp, evaporator_pressure=evap_pressure)


def discharge_line(refrigerant: str = 'R410A', capacity: float = 10.0, discharge_temp: float = 80.0,
                   condensing_temp: float = 40.0, evaporating_temp: float = 5.0,
                   pipe_length: float = 5.0, equivalent_length: float = 2.0,
                   vertical_rise: float = 0.0, max_velocity: float = 25.0,
                   min_velocity: float = 7.0) -> Dict:
    """Size the hot-gas discharge line on its velocity window."""
    _check_line(capacity, pipe_length, equivalent_length)
    ref = get_refrigerant(refrigerant)
    m_dot = mass_flow_rate(ref, capacity)
    discharge_pressure = saturation_pressure(ref, condensing_temp)
    rho = vapor_density(ref, discharge_temp, discharge_pressure)
    mu = vapor_viscosity(ref, discharge_temp)
    q = m_dot / rho

    def evaluate(tube: TubeSize) -> Dict:
        r = _evaluate_tube(tube, q, rho, mu, pipe_length + equivalent_length, vertical_rise)
        r.update({
            'is_velocity_ok': min_velocity <= r['velocity'] <= max_velocity,
            'velocity_too_high': r['velocity'] > max_velocity,
            'velocity_too_low': r['velocity'] < min_velocity,
        })
        r['is_acceptable'] = r['is_velocity_ok']
        return r

    selected, evaluations = select_smallest(COPPER_TUBE_SIZES, evaluate, lambda r: r['is_acceptable'])
    return _line_result(ref, m_dot, rho, mu, evaluations, selected,
                        discharge_pressure=discharge_pressure,
                        compression_ratio=discharge_pressure / saturation_pressure(ref, evaporating_temp))
