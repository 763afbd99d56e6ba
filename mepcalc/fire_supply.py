"""
Fire service water supplies.

Hydrant and hose reel supply (fire service installations):
    tank volume from the largest floor area, rounded up to a standard tank
    fixed pump: hydrants running at 450 L/min each, 350-850 kPa at outlets
    intermediate booster pumps once the building exceeds 60 m

Sprinkler supply (BS EN 12845, pre-calculated LH and OH systems):
    Table 9   water supply capacity by hazard, installation type and height
    Table 3   design density and area of operation
    Table 16  pump characteristics by height band
    Pump suction tank minimum capacity by hazard

Heights are banded up to the next of 15, 30 or 45 m; pre-calculated
systems are not tabulated above 45 m.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from mepcalc.units import bar_to_kpa
from mepcalc.validation import COMMON_RULES, require_valid

# --- Hydrant / hose reel supply ---

FLOOR_AREA_BANDS: List[Tuple[float, float, str]] = [
    (230, 9, 'Not exceeding 230 m²'),
    (460, 18, 'Over 230 m² but not exceeding 460 m²'),
    (920, 27, 'Over 460 m² but not exceeding 920 m²'),
    (float('inf'), 36, 'Over 920 m²'),
]
STANDARD_TANK_SIZES = [9, 18, 27, 36, 45, 54, 72, 90]  # m³
FLOW_PER_HYDRANT = 450             # L/min
OUTLET_PRESSURE_RANGE = (350, 850)  # kPa
BOOSTER_HEIGHT_THRESHOLD = 60       # m


@dataclass
class PumpDuty:
    hydrants: int
    min_flow: float  # L/min


@dataclass
class BuildingCategory:
    """Fixed and booster pump criteria for a building category."""
    id: str
    name: str
    fixed_pump: PumpDuty
    booster_single_riser: PumpDuty
    booster_multiple_risers: PumpDuty


BUILDING_CATEGORIES: Dict[str, BuildingCategory] = {b.id: b for b in [
    BuildingCategory('industrial', 'Industrial/Godown Buildings',
                     PumpDuty(3, 1350), PumpDuty(3, 1350), PumpDuty(6, 2700)),
    BuildingCategory('domestic', 'Domestic Buildings',
                     PumpDuty(2, 900), PumpDuty(2, 900), PumpDuty(2, 900)),
    BuildingCategory('other', 'Other Buildings',
                     PumpDuty(2, 900), PumpDuty(2, 900), PumpDuty(4, 1800)),
]}

SUPPLY_RULES = {
    'largest_floor_area': COMMON_RULES['area'],
    'building_height': {'type': 'number', 'min': 0},
    'risers': COMMON_RULES['count'],
}

SUPPLY_LABELS = {
    'largest_floor_area': 'Largest floor area',
    'building_height': 'Building height',
    'risers': 'Number of risers',
}


def get_building_category(category_id: str) -> BuildingCategory:
    if category_id not in BUILDING_CATEGORIES:
        raise ValueError(f"Unknown building category '{category_id}'. "
                         f"Available: {list(BUILDING_CATEGORIES.keys())}")
    return BUILDING_CATEGORIES[category_id]


def supply_tank_volume(largest_floor_area: float) -> Dict:
    """Required tank volume (m³) and the standard tank that holds it."""
    for limit, volume, band in FLOOR_AREA_BANDS:
        if largest_floor_area <= limit:
            break
    selected = next(size for size in STANDARD_TANK_SIZES if size >= volume)
    return {'required_volume': volume, 'selected_tank_size': selected, 'floor_area_band': band}


def fire_service_supply(
    largest_floor_area: float = 1000.0,
    building_type: str = 'other',
    building_height: Optional[float] = None,
    risers: int = 1,
) -> Dict:
    """Tank and pump criteria for a hydrant and hose reel installation.

    Args:
        largest_floor_area: area of the largest floor (m²), not the total
        building_type: 'industrial', 'domestic' or 'other'
        building_height: when given, decides whether booster pumps apply
        risers: number of risers served by a booster set

    Returns:
        Dict with tank volumes (m³), fixed pump duty, booster duties and
        whether boosters are required.
    """
    category = get_building_category(building_type)
    checked = require_valid(
        {'largest_floor_area': largest_floor_area, 'building_height': building_height, 'risers': risers},
        SUPPLY_RULES, SUPPLY_LABELS)
    tank = supply_tank_volume(float(largest_floor_area))

    fixed = category.fixed_pump
    booster = category.booster_single_riser if risers == 1 else category.booster_multiple_risers
    booster_required = None if building_height is None else building_height > BOOSTER_HEIGHT_THRESHOLD

    return {
        'largest_floor_area': largest_floor_area,
        'building_type': category.name,
        **tank,
        'fixed_pump': {
            'hydrants': fixed.hydrants,
            'min_flow': fixed.min_flow,
            'flow_per_hydrant': FLOW_PER_HYDRANT,
            'pressure_range': OUTLET_PRESSURE_RANGE,
        },
        'booster_pump': {
            'single_riser': {'hydrants': category.booster_single_riser.hydrants,
                             'min_flow': category.booster_single_riser.min_flow},
            'multiple_risers': {'hydrants': category.booster_multiple_risers.hydrants,
                                'min_flow': category.booster_multiple_risers.min_flow},
            'height_threshold': BOOSTER_HEIGHT_THRESHOLD,
            'required': booster_required,
            'duty': {'hydrants': booster.hydrants, 'min_flow': booster.min_flow} if booster_required else None,
        },
        'compliance': tank['selected_tank_size'] >= tank['required_volume'],
        'warnings': checked['warnings'],
    }


# --- Sprinkler supply (BS EN 12845) ---

HAZARD_GROUPS = ['LH', 'OH1', 'OH2', 'OH3', 'OH4']
INSTALLATION_TYPES = ['wet', 'pre-action', 'dry', 'alternate']
HEIGHT_BANDS = (15, 30, 45)

# Table 9, m³ per height band; None where the installation type is not permitted
_WET_AND_DRY = {
    'LH': ((9, 10, 11), None),
    'OH1': ((55, 70, 80), (105, 125, 140)),
    'OH2': ((105, 125, 140), (135, 160, 185)),
    'OH3': ((135, 160, 185), (160, 185, 200)),
    'OH4': ((160, 185, 200), None),
}

PUMP_SUCTION_CAPACITY = {'LH': 2.5, 'OH1': 25, 'OH2': 50, 'OH3': 75, 'OH4': 100}  # m³

DESIGN_DENSITY = {'LH': 2.25, 'OH1': 5.0, 'OH2': 5.0, 'OH3': 5.0, 'OH4': 5.0}  # mm/min

# m² as (wet/pre-action, dry/alternate)
AREA_OF_OPERATION = {'LH': (84, None), 'OH1': (72, 90), 'OH2': (144, 180), 'OH3': (216, 270), 'OH4': (360, None)}

# (flow L/min, pressure bar at the control valve, max demand flow, max demand pressure)
FLOW_PRESSURE = {
    'LH': ((225, 2.2, 540, 0.0), None),
    'OH1': ((375, 1.0, 540, 0.7), (725, 1.4, 1000, 1.0)),
    'OH2': ((725, 1.4, 1000, 1.0), (1100, 1.7, 1350, 1.4)),
    'OH3': ((1100, 1.7, 1350, 1.4), (1800, 2.0, 2100, 1.5)),
    'OH4': ((1800, 2.0, 2100, 1.5), None),
}

# Table 16, height band → ((bar, L/min) nominal, characteristic, additional)
_LH = {15: ((1.5, 300), (3.7, 225), None), 30: ((1.8, 340), (5.2, 225), None),
       45: ((2.3, 375), (6.7, 225), None)}
_OH1_WET = {15: ((1.2, 900), (2.2, 540), (2.5, 375)), 30: ((1.9, 1150), (3.7, 540), (4.0, 375)),
            45: ((2.7, 1360), (5.2, 540), (5.5, 375))}
_OH_1725 = {15: ((1.4, 1750), (2.5, 1000), (2.9, 725)), 30: ((2.0, 2050), (4.0, 1000), (4.4, 725)),
            45: ((2.6, 2350), (5.5, 1000), (5.9, 725))}
_OH2_DRY = {15: ((1.4, 2250), (2.9, 1350), (3.2, 1100))}
_OH3_WET = {30: ((2.0, 2700), (4.4, 1350), (4.7, 1100)), 45: ((2.5, 3100), (5.9, 1350), (6.2, 1100))}
_OH_2650 = {15: ((1.9, 2650), (3.0, 2100), (3.5, 1800)), 30: ((2.4, 3050), (4.5, 2100), (5.0, 1800)),
            45: ((3.0, 3350), (6.0, 2100), (6.5, 1800))}
PUMP_CHARACTERISTICS = {
    'LH': (_LH, None),
    'OH1': (_OH1_WET, _OH_1725),
    'OH2': (_OH_1725, _OH2_DRY),
    'OH3': (_OH3_WET, _OH_2650),
    'OH4': (_OH_2650, None),
}

# m² per sprinkler and m between sprinklers as (sidewall, others, special area)
SPRINKLER_SPACING = {
    'LH': {'max_area': (17, 21, 9), 'max_distance': (4.6, 4.6, 3.7)},
    'OH1': {'max_area': (9, 12, 9), 'max_distance': (3.7, 4.0, 3.0)},
    'OH2': {'max_area': (9, 12, 9), 'max_distance': (3.7, 4.0, 3.0)},
    'OH3': {'max_area': (9, 12, 9), 'max_distance': (3.7, 4.0, 3.0)},
    'OH4': {'max_area': (9, 9, 9), 'max_distance': (3.7, 3.7, 3.0)},
}
MIN_SPRINKLER_DISTANCE = 2.0  # m


def height_band(height: float) -> int:
    """Table band (15, 30 or 45 m) covering a sprinkler height."""
    if height < 0:
        raise ValueError("Height must be at least 0 m")
    for band in HEIGHT_BANDS:
        if height <= band:
            return band
    raise ValueError(f"Height {height:g} m exceeds {HEIGHT_BANDS[-1]} m; pre-calculated "
                     f"systems need a fully hydraulically calculated design")


def _pick(table: Dict[str, tuple], hazard: str, installation: str):
    wet, dry = table[hazard]
    return wet if installation in ('wet', 'pre-action') else dry


def _pump_point(point: Optional[Tuple[float, float]]) -> Optional[Dict]:
    if point is None:
        return None
    pressure, flow = point
    return {'pressure': pressure, 'pressure_kpa': bar_to_kpa(pressure), 'flow': flow}


def sprinkler_tank(hazard_group: str = 'OH3', installation_type: str = 'wet', height: float = 15.0) -> Dict:
    """Water supply and pump criteria for a pre-calculated LH/OH installation.

    Args:
        hazard_group: 'LH', 'OH1' ... 'OH4'
        installation_type: 'wet', 'pre-action', 'dry' or 'alternate'
        height: height of the highest sprinkler above the pump or valves (m)

    Raises:
        ValueError: for unknown classes, heights above 45 m, or dry and
            alternate installations in LH and OH4.
    """
    if hazard_group not in HAZARD_GROUPS:
        raise ValueError(f"Unknown hazard group '{hazard_group}'. Available: {HAZARD_GROUPS}")
    if installation_type not in INSTALLATION_TYPES:
        raise ValueError(f"Unknown installation type '{installation_type}'. Available: {INSTALLATION_TYPES}")
    band = height_band(height)

    capacities = _pick(_WET_AND_DRY, hazard_group, installation_type)
    if capacities is None:
        raise ValueError(f"{installation_type} installations are not permitted for {hazard_group}")
    capacity = capacities[HEIGHT_BANDS.index(band)]

    flow, pressure, demand_flow, demand_pressure = _pick(FLOW_PRESSURE, hazard_group, installation_type)

    pump_table = _pick(PUMP_CHARACTERISTICS, hazard_group, installation_type)
    available = sorted(pump_table)
    pump_band = next((b for b in available if height <= b), available[-1])
    nominal, characteristic, additional = pump_table[pump_band]
    warnings = []
    if pump_band < height:
        warnings.append(f"Table 16 gives {hazard_group} {installation_type} pumps up to {pump_band} m "
                        f"only; the {pump_band} m duty is shown")

    spacing = SPRINKLER_SPACING[hazard_group]
    return {
        'hazard_group': hazard_group,
        'installation_type': installation_type,
        'height': height,
        'height_band': band,
        'tank_capacity': capacity,
        'pump_suction_capacity': PUMP_SUCTION_CAPACITY[hazard_group],
        'design_density': DESIGN_DENSITY[hazard_group],
        'area_of_operation': _pick(AREA_OF_OPERATION, hazard_group, installation_type),
        'system_flow': flow,
        'pressure_at_control_valve': pressure,
        'max_demand_flow': demand_flow,
        'max_demand_pressure': demand_pressure,
        'pump_height_band': pump_band,
        'pump_nominal': _pump_point(nominal),
        'pump_characteristic': _pump_point(characteristic),
        'pump_additional': _pump_point(additional),
        'spacing': {
            'max_area': dict(zip(('sidewall', 'others', 'special_area'), spacing['max_area'])),
            'max_distance': dict(zip(('sidewall', 'others', 'special_area'), spacing['max_distance'])),
            'min_distance': MIN_SPRINKLER_DISTANCE,
        },
        'warnings': warnings,
        'standards': ['BS EN 12845'],
    }
