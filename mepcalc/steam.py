"""
Steam distribution pipe sizing.

Steam state:
    P_abs = P_g + 1.013 bar
    T_sat from the water Antoine equation (A=7.96681, B=1668.21, C=228.0, P in mmHg)
    Superheated: v = Z·R·T/P with Z = 1 + 0.0005·P·(350 - T/1.8)/100
    Saturated/wet: v = v_f + x (v_g - v_f), v_g from a banded power fit

Sizing walks the DN list: smallest size under the velocity ceiling, then
up until the specific pressure drop is within band, then back down if the
velocity fell below the minimum for condensate carry.

Friction: Swamee-Jain. Pressure drops are reported in bar.
"""

import logging
import math
from typing import Dict, List, Optional

from mepcalc.fluids import swamee_jain_friction, water_viscosity
from mepcalc.tables import (
    STEAM_ALLOWABLE_DROP_PERCENT,
    STEAM_FITTINGS_LD,
    STEAM_PIPE_SIZES,
    STEAM_SAFETY_FACTOR,
    STEAM_VELOCITY_LIMITS,
    get_steam_material,
)
from mepcalc.units import c_to_k, gauge_to_absolute, mm_to_m

logger = logging.getLogger(__name__)

R_STEAM = 461.5          # J/(kg·K)
WATER_SPECIFIC_VOLUME = 0.001
GRAVITY_STEAM = 9.81


# --- Properties ---

def saturation_temperature(pressure_bar_abs: float) -> float:
    """Saturation temperature (°C) of water at an absolute pressure (bar)."""
    return 1668.21 / (7.96681 - math.log10(pressure_bar_abs * 750.062)) - 228.0


def saturated_vapor_volume(pressure_bar_abs: float) -> float:
    """Specific volume of dry saturated steam (m³/kg), banded power fit."""
    p = pressure_bar_abs
    if p <= 1:
        return 1.696 / p
    if p <= 5:
        return 0.3782 / p ** 0.89
    if p <= 25:
        return 0.24 / p ** 0.855
    return 0.18 / p ** 0.825


def steam_properties(pressure: float, temperature: Optional[float] = None, quality: float = 1.0,
                     superheated: bool = True) -> Dict:
    """Density and state of the steam supply.

    Args:
        pressure: gauge pressure (bar g)
        temperature: steam temperature (°C), used when superheated
        quality: dryness fraction 0-1, used when saturated
        superheated: requested state

    A superheated request at or below saturation temperature is treated as
    saturated at T_sat.

    Returns:
        Dict with absolute_pressure, saturation_temp, temperature,
        specific_volume, density, steam_type and superheated (effective).
    """
    if not 0 <= quality <= 1:
        raise ValueError("Steam quality must be between 0 and 1")
    p_abs = gauge_to_absolute(pressure)
    if p_abs <= 0:
        raise ValueError("Absolute steam pressure must be positive")
    t_sat = saturation_temperature(p_abs)

    effective_superheated = superheated and temperature is not None and temperature > t_sat
    if superheated and not effective_superheated:
        logger.warning("Steam at %.1f °C is not above saturation (%.1f °C), treating as saturated",
                       temperature if temperature is not None else float('nan'), t_sat)

    if effective_superheated:
        t_k = c_to_k(temperature)
        z = 1 + 0.0005 * p_abs * (350 - t_k / 1.8) / 100
        v = z * R_STEAM * t_k / (p_abs * 1e5)
        steam_type = 'Superheated'
        t_eff = temperature
    else:
        x = 1.0 if superheated and quality == 1 else quality
        vg = saturated_vapor_volume(p_abs)
        v = WATER_SPECIFIC_VOLUME + (vg - WATER_SPECIFIC_VOLUME) * x
        steam_type = 'Saturated' if x >= 0.98 else 'Wet Steam'
        t_eff = t_sat
        quality = x

    return {
        'gauge_pressure': pressure,
        'absolute_pressure': p_abs,
        'saturation_temp': t_sat,
        'temperature': t_eff,
        'quality': quality,
        'superheated': effective_superheated,
        'specific_volume': v,
        'density': 1 / v,
        'steam_type': steam_type,
    }


def steam_viscosity(props: Dict) -> float:
    """Dynamic viscosity (Pa·s) for the effective steam state."""
    t_k = c_to_k(props['temperature'])
    if props['superheated']:
        mu0, t0, c = 8.85e-6, 273.15, 120
        mu = mu0 * (t_k / t0) ** 1.5 * (t0 + c) / (t_k + c)
        if props['gauge_pressure'] > 5:
            mu *= 1 + 0.02 * props['gauge_pressure']
        return mu
    mu_steam = 1.26e-5 * (t_k / 300) ** 0.7
    x = props['quality']
    if x > 0.9:
        return mu_steam
    mu_water = water_viscosity(props['temperature'])
    return mu_water * (1 - x) + mu_steam * x


def pressure_drop_band(pressure: float) -> Dict[str, float]:
    """Recommended specific pressure drop (mbar/m) by gauge pressure."""
    if pressure <= 4:
        return {'low': 0.2, 'medium': 0.5, 'high': 0.8}
    if pressure <= 10:
        return {'low': 0.5, 'medium': 1.0, 'high': 1.5}
    return {'low': 1.0, 'medium': 2.0, 'high': 3.0}


# --- Sizing ---

def _evaluate_size(size_mm: float, volumetric_flow: float, density: float, viscosity: float,
                   roughness_mm: float, length: float) -> Dict:
    d = mm_to_m(size_mm)
    area = math.pi * (d / 2) ** 2
    v = volumetric_flow / area
    re = v * d / (viscosity / density)
    f = swamee_jain_friction(re, mm_to_m(roughness_mm) / d)
    straight = f * length * density * v ** 2 / (2 * d * 1e5)
    return {
        'diameter': size_mm,
        'area': area,
        'velocity': v,
        'reynolds': re,
        'friction_factor': f,
        'straight_drop': straight,
        'drop_per_meter': straight / length,
        'drop_mbar_per_m': straight / length * 1000,
    }


def size_segment(volumetric_flow: float, density: float, viscosity: float, roughness_mm: float,
                 length: float, velocity_limits: tuple, max_drop_mbar_m: float,
                 sizes: Optional[List[int]] = None) -> Dict:
    """Pick a DN for one segment.

    Returns the evaluated properties of the chosen size.
    """
    sizes = sizes or STEAM_PIPE_SIZES
    v_min, v_max = velocity_limits

    def evaluate(size):
        return _evaluate_size(size, volumetric_flow, density, viscosity, roughness_mm, length)

    index = next((i for i, s in enumerate(sizes) if evaluate(s)['velocity'] <= v_max), len(sizes) - 1)
    best = evaluate(sizes[index])

    if best['drop_mbar_per_m'] > max_drop_mbar_m:
        for i in range(index + 1, len(sizes)):
            props = evaluate(sizes[i])
            index, best = i, props
            if props['drop_mbar_per_m'] <= max_drop_mbar_m:
                break

    if best['velocity'] < v_min:
        for i in range(index - 1, -1, -1):
            props = evaluate(sizes[i])
            if props['velocity'] >= v_min and props['drop_mbar_per_m'] <= max_drop_mbar_m * 1.2:
                best = props
                break

    return best


def recommend_pipe_size(result: Dict, pressure: float) -> Optional[str]:
    """Advice sentence for a sized segment, or None if it has no flow."""
    if not result.get('drop_per_meter') or not result.get('velocity'):
        return None
    band = pressure_drop_band(pressure)
    v = result['velocity']
    v_min = result['min_velocity']
    v_max = result['velocity_limit']
    drop = result['drop_per_meter'] * 1000
    index = STEAM_PIPE_SIZES.index(result['diameter'])
    smaller = STEAM_PIPE_SIZES[index - 1] if index > 0 else None
    larger = STEAM_PIPE_SIZES[index + 1] if index < len(STEAM_PIPE_SIZES) - 1 else None

    if v < v_min:
        if smaller:
            return (f"Velocity ({v:.1f} m/s) is below minimum recommendation ({v_min:g} m/s). "
                    f"Consider DN {smaller} mm for better steam transportation.")
        return (f"Velocity ({v:.1f} m/s) is below minimum recommendation ({v_min:g} m/s), "
                f"but this is the smallest standard pipe size.")
    if v > v_max:
        if larger:
            return f"Velocity exceeds maximum limit. Increase to DN {larger} mm to reduce velocity."
        return "Velocity exceeds maximum limit. Consider reducing flow rate or using multiple pipes."
    if drop < band['low']:
        if smaller:
            return f"Pressure drop is very low. Consider DN {smaller} mm for better economics."
        return "Pressure drop is very low, but this is the smallest standard pipe size."
    if drop > band['high']:
        if larger:
            return f"Pressure drop exceeds recommended limit. Increase to DN {larger} mm."
        return "Pressure drop is too high. Consider reducing flow rate or using multiple pipes."
    if drop > band['medium']:
        return "Pressure drop is in upper acceptable range, suitable for short runs."
    return "Pipe size provides optimal balance between velocity and pressure drop."


def _segment_roughness(segment: Dict) -> float:
    if segment.get('roughness') is not None:
        return segment['roughness']
    return get_steam_material(segment.get('material', 'carbon_steel')).roughness


def _error_result(segment: Dict, props: Dict, v_min: float, v_max: float, message: str) -> Dict:
    return {
        'name': segment.get('name', ''),
        'diameter': 0,
        'velocity': 0.0,
        'pressure_drop': 0.0,
        'static_head_drop': 0.0,
        'total_drop': 0.0,
        'density': props['density'],
        'specific_volume': props['specific_volume'],
        'steam_type': props['steam_type'],
        'fitting_details': [],
        'velocity_limit': v_max,
        'min_velocity': v_min,
        'is_velocity_compliant': False,
        'error': message,
    }


def steam_pipe_sizing(segments: List[Dict], pressure: float = 5.0, temperature: float = 160.0,
                      quality: float = 1.0, superheated: bool = True,
                      allowable_pressure_drop: float = STEAM_ALLOWABLE_DROP_PERCENT,
                      safety_factor: float = STEAM_SAFETY_FACTOR) -> Dict:
    """Size every segment of a steam distribution run.

    Args:
        segments: list of {'name', 'flow_rate' (kg/h), 'length' (m), 'type'
            ('supply'|'return'), 'material' or 'roughness' (mm),
            'elevation_change' (m), 'fittings': [{'type', 'quantity',
            'is_custom', 'equivalent_length'}]}. Standard fittings take their
            equivalent length in diameters from the table; custom fittings
            give it in metres.
        pressure: steam gauge pressure (bar g)
        temperature: steam temperature (°C)
        quality: dryness fraction
        superheated: whether superheated steam is requested
        allowable_pressure_drop: friction drop limit (% of gauge pressure per 100 m)
        safety_factor: multiplier on the system total

    Returns:
        Dict with steam properties, per-segment results, total pressure drop
        (bar, with safety factor), max velocity and system compliance.
    """
    if pressure <= 0:
        raise ValueError("Steam pressure must be greater than zero (bar g)")
    if safety_factor < 1.0:
        raise ValueError("Safety factor must be at least 1.0")

    props = steam_properties(pressure, temperature, quality, superheated)
    mu = steam_viscosity(props)
    density = props['density']
    band = pressure_drop_band(pressure)

    results = []
    total = 0.0
    max_velocity = 0.0
    compliant = True

    for segment in segments:
        seg_type = segment.get('type', 'supply')
        if seg_type not in STEAM_VELOCITY_LIMITS:
            raise ValueError(f"Unknown segment type '{seg_type}'. Available: {list(STEAM_VELOCITY_LIMITS)}")
        v_min, v_max = STEAM_VELOCITY_LIMITS[seg_type]
        mass_flow = segment.get('flow_rate', 0) / 3600
        length = segment.get('length', 0)

        if mass_flow <= 0:
            results.append(_error_result(segment, props, v_min, v_max, "Flow rate must be greater than zero."))
            compliant = False
            continue
        if length <= 0:
            results.append(_error_result(segment, props, v_min, v_max, "Segment length must be greater than zero."))
            compliant = False
            continue

        q = mass_flow * props['specific_volume']
        best = size_segment(q, density, mu, _segment_roughness(segment), length,
                            (v_min, v_max), band['high'])
        d = mm_to_m(best['diameter'])
        v = best['velocity']
        f = best['friction_factor']

        static = density * GRAVITY_STEAM * segment.get('elevation_change', 0) / 1e5

        fitting_details = []
        fittings_drop = 0.0
        for fitting in segment.get('fittings', []):
            qty = fitting.get('quantity', 1)
            if fitting.get('is_custom'):
                eq_length = fitting.get('equivalent_length', 0) * qty
            else:
                ld = fitting.get('equivalent_length')
                if ld is None:
                    if fitting['type'] not in STEAM_FITTINGS_LD:
                        raise ValueError(f"Unknown steam fitting '{fitting['type']}'. "
                                         f"Available: {list(STEAM_FITTINGS_LD)}")
                    ld = STEAM_FITTINGS_LD[fitting['type']]
                eq_length = ld * d * qty
            drop = f * eq_length * density * v ** 2 / (2 * d * 1e5)
            fittings_drop += drop
            fitting_details.append({
                'type': fitting['type'],
                'quantity': qty,
                'equivalent_length': eq_length,
                'pressure_drop': drop,
                'is_custom': bool(fitting.get('is_custom')),
            })

        friction_drop = best['straight_drop'] + fittings_drop
        segment_total = friction_drop + static
        total += segment_total

        velocity_ok = v_min <= v <= v_max
        drop_percent = friction_drop / pressure * 100
        per_100m = drop_percent * 100 / length
        drop_ok = per_100m <= allowable_pressure_drop
        if not (velocity_ok and drop_ok):
            compliant = False
        max_velocity = max(max_velocity, v)

        result = {
            'name': segment.get('name', ''),
            'diameter': best['diameter'],
            'flow_area': best['area'],
            'velocity': v,
            'reynolds': best['reynolds'],
            'friction_factor': f,
            'pressure_drop': friction_drop,
            'static_head_drop': static,
            'total_drop': segment_total,
            'drop_per_meter': best['drop_per_meter'],
            'normalized_drop_per_100m': per_100m,
            'density': density,
            'specific_volume': props['specific_volume'],
            'dynamic_viscosity': mu,
            'steam_type': props['steam_type'],
            'fitting_details': fitting_details,
            'velocity_limit': v_max,
            'min_velocity': v_min,
            'is_velocity_compliant': velocity_ok,
            'is_pressure_drop_compliant': drop_ok,
            'elevation_change': segment.get('elevation_change', 0),
        }
        result['recommendation'] = recommend_pipe_size(result, pressure)
        results.append(result)

    return {
        'steam': props,
        'sections': results,
        'total_pressure_drop': total * safety_factor,
        'max_velocity': max_velocity,
        'is_system_compliant': compliant,
    }
