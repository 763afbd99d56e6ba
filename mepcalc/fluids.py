"""
Fluid mechanics primitives shared by the pipe and duct calculators.

Geometry:
    A = π (D/2)²                      circular
    A = w·h, Dh = 2wh/(w+h)           rectangular

Flow:
    Re = v·D/ν
    Δp = f · (L/D) · (ρ v² / 2)       Darcy-Weisbach

Friction factor:
    f = 64/Re                                              Re < 2000
    1/√f = -1.8 log10[(ε/D/3.7)^1.11 + 6.9/Re]             Haaland
    f = 0.25 / [log10(ε/D/3.7 + 5.74/Re^0.9)]²             Swamee-Jain
    f = 0.316 / Re^0.25                                    Blasius, Re > 2300

Both explicit forms approximate Colebrook-White within ~2%.
"""

import logging
from typing import Dict, Tuple

import numpy as np

from mepcalc.tables import AIR_MOLAR_MASS, GAS_CONSTANT, GRAVITY, STANDARD_PRESSURE_KPA
from mepcalc.units import c_to_k, mm_to_m

logger = logging.getLogger(__name__)

LAMINAR_LIMIT = 2000
FALLBACK_FRICTION_FACTOR = 0.02


# --- Geometry ---

def circular_area(diameter_mm: float) -> float:
    """Cross-sectional area (m²) of a round pipe or duct."""
    return float(np.pi * (diameter_mm / 2000) ** 2)


def rectangular_section(width_mm: float, height_mm: float) -> Dict:
    """Area, hydraulic diameter and aspect ratio (h/w) of a rectangular duct.

    Raises:
        ValueError: if either dimension is not positive.
    """
    if width_mm <= 0 or height_mm <= 0:
        raise ValueError("Invalid dimensions for rectangular duct.")
    w = mm_to_m(width_mm)
    h = mm_to_m(height_mm)
    return {
        'area': w * h,
        'hydraulic_diameter': 2 * w * h / (w + h),
        'aspect_ratio': height_mm / width_mm,
    }


# --- Flow ---

def velocity(flow_m3s: float, area_m2: float) -> float:
    if area_m2 <= 0:
        raise ValueError("Flow area is zero, cannot calculate velocity.")
    return flow_m3s / area_m2


def reynolds(velocity_ms: float, diameter_m: float, kinematic_viscosity: float) -> float:
    return velocity_ms * diameter_m / kinematic_viscosity


def dynamic_pressure(density: float, velocity_ms: float) -> float:
    """Velocity pressure ½ρv² (Pa)."""
    return 0.5 * density * velocity_ms ** 2


def darcy_weisbach(friction_factor: float, length_m: float, diameter_m: float,
                   density: float, velocity_ms: float) -> float:
    """Straight-run pressure drop (Pa)."""
    return friction_factor * (length_m / diameter_m) * dynamic_pressure(density, velocity_ms)


# --- Friction factor ---

def laminar_friction(re: float) -> float:
    return 64 / re


def haaland_friction(re: float, relative_roughness: float) -> Tuple[float, bool]:
    """Haaland friction factor.

    Args:
        re: Reynolds number (> 0)
        relative_roughness: ε/D (dimensionless)

    Returns:
        (f, fallback_used). When the log argument is not positive the
        fallback factor 0.02 is returned with fallback_used=True.
    """
    if re < LAMINAR_LIMIT:
        return laminar_friction(re), False
    if relative_roughness < 0:
        arg = float('nan')
    else:
        arg = (relative_roughness / 3.7) ** 1.11 + 6.9 / re
    if not arg > 0:
        logger.warning("Haaland log argument %.3g <= 0 (Re=%.0f), using f=%.2f",
                       arg, re, FALLBACK_FRICTION_FACTOR)
        return FALLBACK_FRICTION_FACTOR, True
    return float((-1.8 * np.log10(arg)) ** -2), False


def swamee_jain_friction(re: float, relative_roughness: float) -> float:
    if re < LAMINAR_LIMIT:
        return laminar_friction(re)
    return float(0.25 / np.log10(relative_roughness / 3.7 + 5.74 / re ** 0.9) ** 2)


def blasius_friction(re: float) -> float:
    """Smooth-tube friction factor, laminar below Re 2300."""
    if re > 2300:
        return 0.316 / re ** 0.25
    return laminar_friction(re)


# --- Air ---

def sutherland_viscosity(temperature_k: float, mu0: float = 1.716e-5,
                         t0: float = 273.15, c: float = 110.4) -> float:
    """Dynamic viscosity (Pa·s) by Sutherland's law. Defaults are for air."""
    return mu0 * ((t0 + c) / (temperature_k + c)) * (temperature_k / t0) ** 1.5


def air_density_at_elevation(temperature_c: float, elevation_m: float = 0.0) -> Dict:
    """Barometric air properties at a site elevation.

    Returns:
        Dict with pressure_kpa, density (kg/m³), dynamic_viscosity (Pa·s)
        and kinematic_viscosity (m²/s).
    """
    t_k = c_to_k(temperature_c)
    pressure_kpa = STANDARD_PRESSURE_KPA * np.exp(
        -(GRAVITY * AIR_MOLAR_MASS * elevation_m) / (GAS_CONSTANT * t_k))
    density = pressure_kpa * 1000 * AIR_MOLAR_MASS / (GAS_CONSTANT * t_k)
    mu = sutherland_viscosity(t_k)
    return {
        'pressure_kpa': float(pressure_kpa),
        'density': float(density),
        'dynamic_viscosity': mu,
        'kinematic_viscosity': float(mu / density),
    }


# --- Water / glycol ---

# Rational fit for pure water density, 0-100 °C
_WATER_DENSITY_NUM = [-2.8054253e-10, 1.0556302e-7, -4.6170461e-5, -0.0079870401, 16.945176, 999.83952]
_WATER_DENSITY_DEN = 0.01687985


def water_density(temperature_c: float, glycol_percent: float = 0.0) -> float:
    """Water (or glycol solution) density in kg/m³."""
    rho = np.polyval(_WATER_DENSITY_NUM, temperature_c) / (1 + _WATER_DENSITY_DEN * temperature_c)
    if glycol_percent > 0:
        rho *= 1 + 0.00386 * glycol_percent + 0.0000107 * glycol_percent ** 2
    return float(rho)


def water_viscosity(temperature_c: float, glycol_percent: float = 0.0) -> float:
    """Dynamic viscosity of water (or glycol solution) in Pa·s."""
    t_k = c_to_k(temperature_c)
    mu = 2.414e-5 * 10 ** (247.8 / (t_k - 140))
    if glycol_percent > 0:
        mu *= 1 + 0.028 * glycol_percent + 0.0005 * glycol_percent ** 2
    return mu


def water_specific_heat(glycol_percent: float = 0.0) -> float:
    """Specific heat in kJ/(kg·K)."""
    cp = 4.1868
    if glycol_percent > 0:
        cp *= 1 - 0.0057 * glycol_percent - 0.000036 * glycol_percent ** 2
    return cp
