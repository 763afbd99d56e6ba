"""
Unit conversions used across the calculators.

Pressure, flow, length and temperature. Plain float in, float out.
"""

import math
from typing import Dict

from mepcalc.tables import GRAVITY, KELVIN


PA_PER_INWG = 249.0889
KPA_PER_PSI = 6.894757
BAR_GAUGE_OFFSET = 1.013  # bar, atmospheric offset used by the steam tables


# --- Pressure ---

def pa_to_mmwg(pa: float) -> float:
    return pa / GRAVITY


def pa_to_inwg(pa: float) -> float:
    return pa / PA_PER_INWG


def kpa_to_bar(kpa: float) -> float:
    return kpa / 100


def bar_to_kpa(bar: float) -> float:
    return bar * 100


def kpa_to_psi(kpa: float) -> float:
    return kpa / KPA_PER_PSI


def kpa_to_mmhg(kpa: float) -> float:
    return kpa * 7.50062


def gauge_to_absolute(bar_g: float) -> float:
    return bar_g + BAR_GAUGE_OFFSET


def convert_pressure(pa: float, unit: str) -> float:
    """Convert a pressure in Pa to 'pa', 'mmwg' or 'inwg'.

    NaN inputs convert to 0 so result tables stay printable.
    """
    if pa is None or math.isnan(pa):
        return 0.0
    if unit == 'pa':
        return pa
    if unit == 'mmwg':
        return pa_to_mmwg(pa)
    if unit == 'inwg':
        return pa_to_inwg(pa)
    raise ValueError(f"Unknown pressure unit '{unit}'. Available: ['pa', 'mmwg', 'inwg']")


def pressure_equivalents(kpa: float) -> Dict:
    """A kPa figure restated in bar, psi and mmHg for result tables."""
    return {
        'kpa': kpa,
        'bar': kpa_to_bar(kpa),
        'psi': kpa_to_psi(kpa),
        'mmhg': kpa_to_mmhg(kpa),
    }


# --- Flow ---

def lpm_to_m3h(lpm: float) -> float:
    return lpm * 0.06


def lpm_to_m3s(lpm: float) -> float:
    return lpm / 60000


def m3h_to_m3s(m3h: float) -> float:
    return m3h / 3600


def lps_to_m3s(lps: float) -> float:
    return lps / 1000


def m3s_to_lps(m3s: float) -> float:
    return m3s * 1000


# --- Length ---

def m_to_ft(m: float) -> float:
    return m * 3.28084


def m_to_mm(m: float) -> float:
    return m * 1000


def mm_to_m(mm: float) -> float:
    return mm / 1000


# --- Temperature ---

def c_to_k(t: float) -> float:
    return t + KELVIN


def k_to_c(t: float) -> float:
    return t - KELVIN


def c_to_f(t: float) -> float:
    return t * 9 / 5 + 32


def f_to_c(t: float) -> float:
    return (t - 32) * 5 / 9
