"""
Sprinkler pipework friction loss to BS EN 12845.

Hazen-Williams form used by the standard:
    p = 6.05 × 10³ · L · Q^1.85 / (C^1.85 · d^4.87)     bar

where Q is in L/min, d is the internal diameter in mm and L the total
equivalent length in m. Fittings are converted to equivalent lengths with
Table 23, scaled for pipe materials other than C=120.
"""

import math
from typing import Dict, List

from mepcalc.tables import (
    C_CONVERSION_FACTORS,
    SPRINKLER_FITTINGS,
    SPRINKLER_MAX_PRESSURE_LOSS,
    SPRINKLER_PIPE_SIZES,
)
from mepcalc.units import bar_to_kpa, kpa_to_psi, lpm_to_m3s, mm_to_m

VALVE_VELOCITY_LIMIT = 6.0   # m/s, through valves and strainers
PIPE_VELOCITY_LIMIT = 10.0   # m/s, elsewhere
COMPLIANT_MESSAGE = "✓ System design complies with BS EN 12845 requirements"


def friction_loss(flow_rate: float, diameter: float, length: float, c: float) -> float:
    """Friction loss (bar) over an equivalent length.

    Args:
        flow_rate: L/min
        diameter: internal diameter (mm)
        length: total equivalent length (m)
        c: Hazen-Williams coefficient
    """
    if diameter <= 0:
        raise ValueError("Pipe diameter must be positive")
    if flow_rate <= 0 or length <= 0:
        return 0.0
    return (6.05e3 / (c ** 1.85 * diameter ** 4.87)) * length * flow_rate ** 1.85


def pipe_velocity(flow_rate: float, diameter: float) -> float:
    """Mean velocity (m/s) for a flow in L/min through a bore in mm."""
    if diameter <= 0:
        return 0.0
    return lpm_to_m3s(flow_rate) / (math.pi * (mm_to_m(diameter) / 2) ** 2)


def static_pressure(height: float) -> float:
    """Static head (bar) for a height difference (m)."""
    return 0.098 * height


def fitting_equivalent_length(fitting: str, diameter: float, c: float = 120) -> float:
    """Equivalent length (m) of one fitting.

    ``diameter`` must be one of the nominal sizes; a nominal size the fitting
    is not tabulated for gives 0.
    """
    if fitting not in SPRINKLER_FITTINGS:
        raise ValueError(f"Unknown sprinkler fitting '{fitting}'. Available: {list(SPRINKLER_FITTINGS)}")
    if diameter not in SPRINKLER_PIPE_SIZES:
        raise ValueError(f"{diameter:g}mm is not a nominal sprinkler pipe size. Available: {SPRINKLER_PIPE_SIZES}")
    base = SPRINKLER_FITTINGS[fitting].get(int(diameter), 0.0)
    return base * C_CONVERSION_FACTORS.get(c, 1.0)


def _has_valve(segment: Dict) -> bool:
    name = segment.get('name', '').lower()
    if 'valve' in name or 'strainer' in name:
        return True
    return any('valve' in f['type'].lower() for f in segment.get('fittings', []))


def sprinkler_pipe_sizing(segments: List[Dict],
                          max_allowable_pressure_loss: float = SPRINKLER_MAX_PRESSURE_LOSS) -> Dict:
    """Friction, static and velocity check for a sprinkler pipe run.

    Args:
        segments: list of {'name', 'length' (m), 'diameter' (mm),
            'flow_rate' (L/min), 'c' (Hazen-Williams), 'static_head' (m),
            'fittings': [{'type', 'quantity'}]}
        max_allowable_pressure_loss: friction limit for the run (bar)

    Returns:
        Dict with per-segment results, totals (bar), max_velocity,
        complies_with_limit and recommendations.
    """
    results = []
    for segment in segments:
        d = segment['diameter']
        c = segment.get('c', 120)
        fittings_length = sum(
            fitting_equivalent_length(f['type'], d, c) * f.get('quantity', 1)
            for f in segment.get('fittings', [])
        )
        total_length = segment['length'] + fittings_length
        valve = _has_valve(segment)
        results.append({
            'name': segment.get('name', ''),
            'diameter': d,
            'flow_rate': segment['flow_rate'],
            'c': c,
            'length': segment['length'],
            'fittings_equivalent_length': fittings_length,
            'total_equivalent_length': total_length,
            'pressure_loss': friction_loss(segment['flow_rate'], d, total_length, c),
            'velocity': pipe_velocity(segment['flow_rate'], d),
            'static_pressure': static_pressure(segment.get('static_head', 0)),
            'velocity_limit': VALVE_VELOCITY_LIMIT if valve else PIPE_VELOCITY_LIMIT,
        })

    total_friction = sum(r['pressure_loss'] for r in results)
    total_static = sum(r['static_pressure'] for r in results)
    max_velocity = max((r['velocity'] for r in results), default=0.0)
    complies = total_friction <= max_allowable_pressure_loss

    recommendations = []
    if not complies:
        recommendations.append(
            f"Total friction loss ({total_friction:.3f} bar) exceeds BS EN 12845 limit "
            f"({max_allowable_pressure_loss:g} bar per 1000 L/min)")
        recommendations.append("Consider increasing pipe diameters in segments with highest friction losses")

    system_limit = VALVE_VELOCITY_LIMIT if any(_has_valve(s) for s in segments) else PIPE_VELOCITY_LIMIT
    if max_velocity > system_limit:
        recommendations.append(
            f"Maximum velocity ({max_velocity:.2f} m/s) exceeds BS EN 12845 limit of {system_limit:g} m/s")
        recommendations.append("High velocities may cause noise and erosion - consider larger pipe diameters")

    for i, r in enumerate(results, start=1):
        if r['velocity'] > r['velocity_limit']:
            recommendations.append(
                f"Segment {i} ({r['name']}): Velocity {r['velocity']:.2f} m/s exceeds "
                f"{r['velocity_limit']:g} m/s limit")

    if complies and max_velocity <= system_limit:
        recommendations.append(COMPLIANT_MESSAGE)

    return {
        'segments': results,
        'total_friction_loss': total_friction,
        'total_static_pressure': total_static,
        'total_pressure_loss': total_friction + total_static,
        'total_pressure_loss_kpa': bar_to_kpa(total_friction + total_static),
        'total_pressure_loss_psi': kpa_to_psi(bar_to_kpa(total_friction + total_static)),
        'max_velocity': max_velocity,
        'complies_with_limit': complies,
        'recommendations': recommendations,
    }
