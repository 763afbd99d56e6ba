"""
Moist-air psychrometrics.

Two correlation families are kept because the calculators were calibrated
against them separately:

Chart family (kPa, Buck saturation pressure):
    ps = 0.61121 exp[(18.678 - T/234.5)(T/(257.14 + T))]     T ≥ 0 °C
    ps = 0.61115 exp[(23.036 - T/333.7)(T/(279.82 + T))]     T < 0 °C
    W  = 0.622 pv / (P - pv)
    h  = 1.005 T + W (2501 + 1.86 T)                         kJ/kg

AHU family (Pa, Magnus saturation pressure):
    ps = 610.78 exp[17.27 T / (T + 237.3)]
    W  = 0.621945 pv / (P - pv)
    h  = 1.006 T + W (2501 + 1.86 T)
    ρ  = pda/(Rda T) + pv/(Rv T)

Invalid states (P ≤ pv) propagate as NaN in the AHU family.
"""

import math
from typing import Dict, List, Optional

import numpy as np

from mepcalc.tables import AIR_MOLAR_MASS, GAS_CONSTANT, GRAVITY, STANDARD_PRESSURE_KPA
from mepcalc.units import c_to_k

R_DRY_AIR = 287.058   # J/(kg·K)
R_VAPOR = 461.52      # J/(kg·K)
CP_AIR = 1.005        # kJ/(kg·K), chart family
CP_AIR_AHU = 1.006    # kJ/(kg·K), AHU family
CP_VAPOR = 1.86       # kJ/(kg·K)
HFG = 2501.0          # kJ/kg at 0 °C
CP_WATER = 4.186      # kJ/(kg·K), liquid
EPSILON_AHU = 0.621945

KW_PER_TON = 3.517

PROCESS_TYPES = ['heating', 'cooling', 'humidification', 'dehumidification', 'mixing', 'custom']

# Chart axes
CHART_T_MIN = 0
CHART_T_MAX = 50
CHART_RH_CURVES = list(range(0, 101, 10))


# --- Chart family ---

def saturation_pressure_buck(temperature_c: float) -> float:
    """Saturation vapour pressure (kPa), Buck (1981)."""
    t = temperature_c
    if t >= 0:
        return 0.61121 * math.exp((18.678 - t / 234.5) * (t / (257.14 + t)))
    return 0.61115 * math.exp((23.036 - t / 333.7) * (t / (279.82 + t)))


def humidity_ratio(vapor_pressure: float, pressure: float = STANDARD_PRESSURE_KPA) -> float:
    """Humidity ratio (kg/kg dry air) from vapour pressure (kPa)."""
    return 0.622 * vapor_pressure / (pressure - vapor_pressure)


def specific_volume(temperature_c: float, vapor_pressure: float, pressure: float) -> float:
    """Specific volume (m³/kg dry air) from the dry air partial pressure."""
    t_k = c_to_k(temperature_c)
    return R_DRY_AIR * t_k / ((pressure - vapor_pressure) * 1000)


def enthalpy(temperature_c: float, w: float) -> float:
    """Moist air enthalpy (kJ/kg dry air)."""
    return CP_AIR * temperature_c + w * (HFG + CP_VAPOR * temperature_c)


def dew_point(vapor_pressure: float) -> float:
    """Dew point (°C) from vapour pressure (kPa) by the Magnus inverse.

    Frost point below 0.61121 kPa. Returns -999 when the vapour pressure
    is not positive.
    """
    if vapor_pressure <= 0:
        return -999.0
    x = math.log(vapor_pressure / 0.61121)
    if x >= 0:
        return 243.5 * x / (17.67 - x)
    return 272.62 * x / (22.46 - x)


def wet_bulb(dry_bulb: float, w: float, pressure: float = STANDARD_PRESSURE_KPA,
             tolerance: float = 0.01, max_iterations: int = 100) -> float:
    """Thermodynamic wet-bulb temperature by secant iteration.

    Solves the ASHRAE wet-bulb relation W(db, wb) = W for wb, clamped
    to [-50, db].
    """
    wb = dry_bulb - 2 if w > 0.01 else dry_bulb - 8
    wb = max(wb, 0.5)
    wb_prev = wb
    err_prev = 0.0
    delta = 1.0
    iteration = 0

    while abs(delta) > tolerance and iteration < max_iterations:
        ps_wb = saturation_pressure_buck(wb)
        ws = 0.622 * ps_wb / (pressure - ps_wb)
        w_calc = ((HFG - 2.326 * wb) * ws - CP_AIR * (dry_bulb - wb)) / \
                 (HFG + CP_VAPOR * dry_bulb - CP_WATER * wb)
        err = w - w_calc
        if abs(err) < 1e-4:
            break

        step_from = wb
        if iteration > 0 and wb != wb_prev:
            slope = (err - err_prev) / (wb - wb_prev)
            if abs(slope) < 1e-4:
                wb += 0.5 if err > 0 else -0.5
            else:
                wb -= err / slope
        else:
            wb += 1.0 if err > 0 else -1.0

        wb = min(max(wb, -50.0), dry_bulb)
        delta = wb - step_from
        wb_prev = step_from
        err_prev = err
        iteration += 1

    return wb


def pressure_at_altitude(altitude_m: float) -> float:
    """ISA barometric pressure (kPa), floored at 10 kPa."""
    lapse = 0.0065
    exponent = GRAVITY * AIR_MOLAR_MASS / (GAS_CONSTANT * lapse)
    p = STANDARD_PRESSURE_KPA * ((288.15 - lapse * altitude_m) / 288.15) ** exponent
    return max(p, 10.0)


def state_point(dry_bulb: float, relative_humidity: float,
                pressure: float = STANDARD_PRESSURE_KPA) -> Dict:
    """All chart properties at (dry bulb °C, RH %).

    Raises:
        ValueError: if RH is outside 0-100 %.
    """
    if not 0 <= relative_humidity <= 100:
        raise ValueError("Relative humidity must be between 0 and 100%")
    ps = saturation_pressure_buck(dry_bulb)
    pv = ps * relative_humidity / 100
    w = humidity_ratio(pv, pressure)
    return {
        'dry_bulb': dry_bulb,
        'relative_humidity': relative_humidity,
        'wet_bulb': wet_bulb(dry_bulb, w, pressure),
        'dew_point': dew_point(pv),
        'humidity_ratio': w * 1000,  # g/kg
        'enthalpy': enthalpy(dry_bulb, w),
        'specific_volume': specific_volume(dry_bulb, pv, pressure),
        'vapor_pressure': pv,
        'saturation_pressure': ps,
    }


def process(start: Dict, end: Dict, process_type: str, mass_flow: float = 1.0,
            mixing_ratio: float = 0.5, sensible_heat_ratio: Optional[float] = None,
            pressure: float = STANDARD_PRESSURE_KPA) -> Dict:
    """Analyse an air-conditioning process between two state points.

    Args:
        start, end: {'dry_bulb': °C, 'relative_humidity': %}
        process_type: one of PROCESS_TYPES
        mass_flow: dry air mass flow (kg/s)
        mixing_ratio: fraction of the start stream when mixing (0-1)
        sensible_heat_ratio: reported for custom processes

    Returns:
        Dict with both state points, energy (kW) and an analysis sentence.
        Mixing also returns the mixed state.
    """
    if process_type not in PROCESS_TYPES:
        raise ValueError(f"Unknown process type '{process_type}'. Available: {PROCESS_TYPES}")
    if mass_flow <= 0:
        raise ValueError("Mass flow rate must be positive")

    s1 = state_point(start['dry_bulb'], start['relative_humidity'], pressure)
    s2 = state_point(end['dry_bulb'], end['relative_humidity'], pressure)
    energy = mass_flow * (s2['enthalpy'] - s1['enthalpy'])
    result = {
        'start': s1,
        'end': s2,
        'process_type': process_type,
        'mass_flow': mass_flow,
        'energy': energy,
    }

    if process_type == 'heating':
        result['analysis'] = f"This heating process requires {abs(energy):.1f} kW of thermal energy."
    elif process_type == 'cooling':
        tons = abs(energy) / KW_PER_TON
        result['refrigeration_tons'] = tons
        result['analysis'] = (f"This cooling process requires {abs(energy):.1f} kW "
                              f"({tons:.1f} refrigeration tons) of cooling capacity.")
    elif process_type == 'humidification':
        water = mass_flow * (s2['humidity_ratio'] - s1['humidity_ratio']) / 1000
        result['water_added'] = water
        result['analysis'] = f"This humidification process requires {water:.4f} kg/s of water to be added."
    elif process_type == 'dehumidification':
        water = mass_flow * (s1['humidity_ratio'] - s2['humidity_ratio']) / 1000
        result['water_removed'] = water
        result['analysis'] = f"This dehumidification process removes {water:.4f} kg/s of water."
    elif process_type == 'mixing':
        if not 0 <= mixing_ratio <= 1:
            raise ValueError("Mixing ratio must be between 0 and 1")
        w_mix = (mixing_ratio * s1['humidity_ratio'] + (1 - mixing_ratio) * s2['humidity_ratio']) / 1000
        h_mix = mixing_ratio * s1['enthalpy'] + (1 - mixing_ratio) * s2['enthalpy']
        t_mix = (h_mix - HFG * w_mix) / (CP_AIR + CP_VAPOR * w_mix)
        pv_mix = w_mix * pressure / (0.622 + w_mix)
        rh_mix = min(100.0, pv_mix / saturation_pressure_buck(t_mix) * 100)
        result['mixed'] = state_point(t_mix, rh_mix, pressure)
        result['analysis'] = (f"This mixing process combines {mixing_ratio * 100:.0f}% of "
                              f"{start.get('name', 'State A')} with {100 - mixing_ratio * 100:.0f}% of "
                              f"{end.get('name', 'State B')}.")
    else:
        result['sensible_heat_ratio'] = sensible_heat_ratio
        shr = '' if sensible_heat_ratio is None else f" (SHR {sensible_heat_ratio:.2f})"
        result['analysis'] = f"This process involves {abs(energy):.1f} kW of energy transfer{shr}."

    return result


def chart_curves(pressure: float = STANDARD_PRESSURE_KPA, t_min: float = CHART_T_MIN,
                 t_max: float = CHART_T_MAX, rh_values: Optional[List[float]] = None) -> Dict:
    """Constant-RH curves for a psychrometric chart at 1 °C resolution.

    Returns:
        {'temperature': [...], 'curves': [{'rh': x, 'humidity_ratio': [...]}]}
        with humidity ratio in g/kg.
    """
    temps = np.arange(t_min, t_max + 1, 1.0)
    ps = np.array([saturation_pressure_buck(t) for t in temps])
    curves = []
    for rh in rh_values if rh_values is not None else CHART_RH_CURVES:
        pv = ps * rh / 100
        w = 0.622 * pv / (pressure - pv) * 1000
        curves.append({'rh': rh, 'humidity_ratio': w.tolist()})
    return {'temperature': temps.tolist(), 'curves': curves}


# --- AHU family ---

def saturation_pressure_magnus(temperature_c: float) -> float:
    """Saturation vapour pressure (Pa), Magnus-Tetens."""
    return 610.78 * math.exp(17.27 * temperature_c / (temperature_c + 237.3))


def humidity_ratio_rh(temperature_c: float, relative_humidity: float, pressure_pa: float) -> float:
    """Humidity ratio (kg/kg) from RH %, NaN if the state is impossible."""
    pv = relative_humidity / 100 * saturation_pressure_magnus(temperature_c)
    if pressure_pa <= pv:
        return float('nan')
    return EPSILON_AHU * pv / (pressure_pa - pv)


def enthalpy_ahu(temperature_c: float, w: float) -> float:
    """Enthalpy (kJ/kg) for the AHU family, NaN-propagating."""
    if math.isnan(w):
        return float('nan')
    return CP_AIR_AHU * temperature_c + w * (HFG + CP_VAPOR * temperature_c)


def moist_air_density(temperature_c: float, pressure_pa: float, w: float) -> float:
    """Moist air density (kg/m³) from partial pressures."""
    if math.isnan(w):
        return float('nan')
    t_k = c_to_k(temperature_c)
    pv = w * pressure_pa / (EPSILON_AHU + w)
    pda = pressure_pa - pv
    if pda <= 0:
        return float('nan')
    return pda / (R_DRY_AIR * t_k) + pv / (R_VAPOR * t_k)


def rh_from_wet_bulb(dry_bulb: float, wet_bulb_c: float, pressure_pa: float) -> float:
    """Relative humidity (%) from a psychrometer reading, clamped to 0-100."""
    wb = min(wet_bulb_c, dry_bulb)
    pv = saturation_pressure_magnus(wb) - 0.000660 * pressure_pa * (dry_bulb - wb)
    rh = pv / saturation_pressure_magnus(dry_bulb) * 100
    return min(max(rh, 0.0), 100.0)


def pressure_from_altitude(altitude_m: float) -> float:
    """Site pressure (Pa), simple exponential atmosphere."""
    return 101325 * math.exp(-0.00012 * altitude_m)
