"""
Air handling unit sizing with CIBSE Guide A/B checks.

Per space:
    fresh air   = max(V · ACH_fresh, occupants · 36 m³/h) · (1 + boost)
    ACH airflow = V · ACH_total / ε_v

System:
    airflow     = max(Σ ACH airflow, cooling airflow / ε̄_v) · SF
    cooling air = Q_cool / (h_room − h_supply) / ρ_supply,  supply at T_room − 10 °C, 90 %RH
    fan power   = airflow (l/s) · SFP / 1000

where ε_v is the ventilation effectiveness of the air distribution
strategy and ε̄_v its area-weighted mean. Cooling and heating capacities
carry the safety factor.
"""

import math
from typing import Dict, List, Optional

from mepcalc.psychrometrics import (
    enthalpy_ahu,
    humidity_ratio_rh,
    moist_air_density,
    pressure_from_altitude,
    rh_from_wet_bulb,
)
from mepcalc.tables import (
    ACTIVITY_LEVELS,
    CO2_GENERATION_LPS,
    CO2_OUTDOOR_PPM,
    DEFAULT_VENTILATION_EFFECTIVENESS,
    FILTER_BY_SPACE_TYPE,
    FILTER_CLASSES,
    FRESH_AIR_PER_PERSON,
    INSULATION_U_VALUES,
    ORIENTATION_FACTORS,
    STANDARD_COOLING_LOADS,
    VENTILATION_EFFECTIVENESS,
    get_space_type,
)
from mepcalc.validation import COMMON_RULES, InputValidationError, validate_form

WINTER_DESIGN = (0.0, 90.0)     # °C, %RH
SUPPLY_DIFFERENTIAL = 10.0      # K below room
SUPPLY_RH = 90.0
FACE_VELOCITY = 2.2             # m/s across the coil
MIN_WINTER_HUMIDITY_RATIO = 0.003
CO2_LIMIT_PPM = 1000
SFP_LIMIT = 2.0                 # W/(l/s)
HEAT_RECOVERY_THRESHOLD = 10000  # m³/h

SPACE_DEFAULTS = {
    'name': 'Space',
    'occupants': 0,
    'space_type': 'officeOpen',
    'activity_level': 'lightOffice',
    'internal_gain': 25.0,
    'solar_gain': 40.0,
    'orientation': 'south',
    'glazing_percentage': 30.0,
    'insulation_level': 'medium',
    'ventilation_strategy': 'mixing',
    'cooling_load_method': 'calculated',
    'manual_cooling_load': 0.0,
    'minimum_total_ach': None,
    'minimum_fresh_ach': None,
}


def _effectiveness(space: Dict) -> float:
    return VENTILATION_EFFECTIVENESS.get(space['ventilation_strategy'], DEFAULT_VENTILATION_EFFECTIVENESS)


def _effective_ach(space: Dict, base: float, override: Optional[float]) -> float:
    if override is not None and override >= 0:
        if space['space_type'] == 'custom' or override > base:
            return max(base, override)
    return base


def effective_total_ach(space: Dict) -> float:
    base = get_space_type(space['space_type']).min_total_ach
    return _effective_ach(space, base, space.get('minimum_total_ach'))


def effective_fresh_ach(space: Dict) -> float:
    base = get_space_type(space['space_type']).min_fresh_ach
    return _effective_ach(space, base, space.get('minimum_fresh_ach'))


def space_fresh_air(space: Dict, fresh_air_boost: float) -> float:
    """Boosted fresh air (m³/h) for one space, before ventilation effectiveness."""
    by_ach = space['area'] * space['height'] * effective_fresh_ach(space)
    by_occupancy = space['occupants'] * FRESH_AIR_PER_PERSON
    return max(by_ach, by_occupancy) * (1 + fresh_air_boost / 100)


def _wall_areas(space: Dict) -> Dict:
    area = space['area']
    perimeter = 2 * (math.sqrt(area) + area / math.sqrt(area)) if area > 0 else 0.0
    wall = perimeter * space['height']
    glazing = wall * space['glazing_percentage'] / 100
    return {'wall': wall, 'glazing': glazing, 'solid': wall - glazing}


def _u_value(space: Dict) -> float:
    level = space['insulation_level']
    if level not in INSULATION_U_VALUES:
        raise ValueError(f"Unknown insulation level '{level}'. Available: {list(INSULATION_U_VALUES)}")
    return INSULATION_U_VALUES[level]


def _metabolic_gain(space: Dict) -> float:
    level = space['activity_level']
    if level not in ACTIVITY_LEVELS:
        raise ValueError(f"Unknown activity level '{level}'. Available: {list(ACTIVITY_LEVELS)}")
    return ACTIVITY_LEVELS[level]


SPACE_RULES = {
    'area': COMMON_RULES['area'],
    'height': {'required': True, 'type': 'positive', 'max': 50},
    'occupants': COMMON_RULES['non_negative'],
    'glazing_percentage': COMMON_RULES['percentage'],
}
CUSTOM_SPACE_RULES = {
    'minimum_total_ach': {'type': 'number', 'min': 0},
    'minimum_fresh_ach': {'type': 'number', 'min': 0},
}
SPACE_LABELS = {
    'area': 'Area',
    'height': 'Height',
    'occupants': 'Occupants',
    'glazing_percentage': 'Glazing percentage',
    'manual_cooling_load': 'Manual cooling load',
    'minimum_total_ach': 'Minimum Total ACH',
    'minimum_fresh_ach': 'Minimum Fresh ACH',
}
CONDITION_RULES = {
    'dry_bulb': COMMON_RULES['temperature'],
    'wet_bulb': COMMON_RULES['temperature'],
    'safety_factor': COMMON_RULES['safety_factor'],
}
CONDITION_LABELS = {
    'dry_bulb': 'External Dry Bulb Temp',
    'wet_bulb': 'External Wet Bulb Temp',
    'safety_factor': 'Safety factor',
}


def _validate(spaces: List[Dict], external: Dict, safety_factor: float) -> None:
    errors = []
    for i, space in enumerate(spaces, start=1):
        rules = dict(SPACE_RULES)
        if space['cooling_load_method'] == 'manual':
            rules['manual_cooling_load'] = COMMON_RULES['non_negative']
        if space['space_type'] == 'custom':
            rules.update(CUSTOM_SPACE_RULES)
        labels = {key: f"Space {i}: {label}" for key, label in SPACE_LABELS.items()}
        errors.extend(validate_form(space, rules, labels)['errors'])
    conditions = dict(external, safety_factor=safety_factor)
    errors.extend(validate_form(conditions, CONDITION_RULES, CONDITION_LABELS)['errors'])
    if not errors and external['wet_bulb'] > external['dry_bulb']:
        errors.append("External Wet Bulb Temp cannot exceed Dry Bulb Temp.")
    if errors:
        raise InputValidationError(errors)


def _state(temperature: float, rh: float, pressure: float) -> Dict:
    w = humidity_ratio_rh(temperature, rh, pressure)
    return {
        'humidity_ratio': w,
        'enthalpy': enthalpy_ahu(temperature, w),
        'density': moist_air_density(temperature, pressure, w),
    }


def _require(values: List[float], purpose: str) -> None:
    if any(math.isnan(v) for v in values):
        raise InputValidationError([f"Invalid psychrometric conditions for {purpose}."])


def cooling_load(spaces: List[Dict], external: Dict, internal: Dict) -> float:
    """Raw cooling load (W) without safety factor."""
    pressure = pressure_from_altitude(external.get('altitude', 0))
    outside_rh = rh_from_wet_bulb(external['dry_bulb'], external['wet_bulb'], pressure)
    outside = _state(external['dry_bulb'], outside_rh, pressure)
    room = _state(internal['dry_bulb'], internal['rel_humidity'], pressure)
    _require([outside['enthalpy'], room['enthalpy'], room['density']], 'cooling load')

    total = 0.0
    for space in spaces:
        method = space['cooling_load_method']
        if method == 'manual':
            load = space['manual_cooling_load']
        elif method == 'standard':
            load = STANDARD_COOLING_LOADS.get(space['space_type'], 100) * space['area']
        else:
            walls = _wall_areas(space)
            occupant_gain = space['occupants'] * _metabolic_gain(space)
            equipment_gain = space['internal_gain'] * space['area']
            solar = space['solar_gain'] * walls['glazing'] * ORIENTATION_FACTORS.get(space['orientation'], 1.0)
            fabric = walls['wall'] * _u_value(space) * (external['dry_bulb'] - internal['dry_bulb'])
            mass_flow = space_fresh_air(space, internal.get('fresh_air_boost', 0)) / 3600 * room['density']
            fresh_air = mass_flow * (outside['enthalpy'] - room['enthalpy']) * 1000
            load = occupant_gain + equipment_gain + solar + fabric + fresh_air
        total += load
    return total


def heating_load(spaces: List[Dict], internal: Dict, altitude: float = 0.0,
                 heat_recovery_efficiency: Optional[float] = None) -> float:
    """Raw heating load (W) against the winter design condition.

    Args:
        heat_recovery_efficiency: percent; None when no heat recovery is fitted
    """
    pressure = pressure_from_altitude(altitude)
    winter_t, winter_rh = WINTER_DESIGN
    winter = _state(winter_t, winter_rh, pressure)
    room = _state(internal['dry_bulb'], internal['rel_humidity'], pressure)
    _require([winter['enthalpy'], room['enthalpy'], room['density']], 'heating load')

    dt = internal['dry_bulb'] - winter_t
    total = 0.0
    for space in spaces:
        walls = _wall_areas(space)
        u = _u_value(space)
        fabric = (walls['solid'] * u + walls['glazing'] * u * 2
                  + space['area'] * u * 0.8 + space['area'] * u * 0.7) * dt
        mass_flow = space_fresh_air(space, internal.get('fresh_air_boost', 0)) / 3600 * room['density']
        ventilation = mass_flow * (room['enthalpy'] - winter['enthalpy']) * 1000
        if heat_recovery_efficiency is not None:
            ventilation *= 1 - heat_recovery_efficiency / 100
        total += fabric + ventilation
    return total


def area_weighted_effectiveness(spaces: List[Dict]) -> float:
    total_area = sum(s['area'] for s in spaces)
    if total_area <= 0:
        return DEFAULT_VENTILATION_EFFECTIVENESS
    return sum(s['area'] * _effectiveness(s) for s in spaces) / total_area


def required_airflow(spaces: List[Dict], internal: Dict, raw_cooling_load: float,
                     altitude: float = 0.0, safety_factor: float = 1.2) -> float:
    """Design supply airflow (m³/h) including the safety factor."""
    ach_airflow = sum(
        s['area'] * s['height'] * effective_total_ach(s) / _effectiveness(s) for s in spaces
    )

    pressure = pressure_from_altitude(altitude)
    supply_t = internal['dry_bulb'] - SUPPLY_DIFFERENTIAL
    supply = _state(supply_t, SUPPLY_RH, pressure)
    room = _state(internal['dry_bulb'], internal['rel_humidity'], pressure)
    dh = room['enthalpy'] - supply['enthalpy']

    cooling_airflow = 0.0
    if raw_cooling_load > 0:
        if math.isnan(supply['density']) or math.isnan(dh) or supply['density'] <= 0 or dh <= 0:
            raise InputValidationError(["Invalid psychrometric conditions for airflow calculation."])
        mass_flow = raw_cooling_load / 1000 / dh
        cooling_airflow = mass_flow / supply['density'] * 3600 / area_weighted_effectiveness(spaces)

    return max(ach_airflow, cooling_airflow) * safety_factor


def co2_concentration(total_occupants: float, fresh_airflow: float) -> float:
    """Steady-state CO₂ (ppm) for a fresh air supply in m³/h."""
    fresh_lps = fresh_airflow / 3.6
    if total_occupants == 0 or fresh_lps == 0:
        return CO2_OUTDOOR_PPM
    return CO2_OUTDOOR_PPM + total_occupants * CO2_GENERATION_LPS * 1e6 / fresh_lps


def humidity_control(total_airflow: float, external: Dict, internal: Dict) -> Dict:
    """Dehumidification and humidification duty (kg/h)."""
    pressure = pressure_from_altitude(external.get('altitude', 0))
    outside_rh = rh_from_wet_bulb(external['dry_bulb'], external['wet_bulb'], pressure)
    w_out = humidity_ratio_rh(external['dry_bulb'], outside_rh, pressure)
    rho_out = moist_air_density(external['dry_bulb'], pressure, w_out)
    w_room = humidity_ratio_rh(internal['dry_bulb'], internal['rel_humidity'], pressure)
    _require([w_out, rho_out, w_room], 'humidity control')

    mass_flow = total_airflow / 3600 * rho_out
    dehumidification = mass_flow * (w_out - w_room) * 3600 if w_out > w_room else 0.0
    humidification = 0.0
    if w_room > MIN_WINTER_HUMIDITY_RATIO:
        humidification = mass_flow * (w_room - MIN_WINTER_HUMIDITY_RATIO) * 3600 * 0.5
    return {'dehumidification': dehumidification, 'humidification': humidification}


def recommend_filter(spaces: List[Dict]) -> str:
    """Filter class for the space with the highest air change requirement."""
    highest = 0.0
    critical = ''
    for space in spaces:
        ach = effective_total_ach(space)
        if ach > highest:
            highest = ach
            critical = space['space_type']
    return FILTER_CLASSES[FILTER_BY_SPACE_TYPE.get(critical, 'ePM1_50')]


def estimate_ahu_size(airflow: float) -> str:
    """Approximate casing dimensions for a supply airflow in m³/h."""
    face_area = airflow / 3600 / FACE_VELOCITY
    width = math.sqrt(face_area * 1.5)
    height = face_area / width if width > 0 else 0.0
    w, h = width * 1.3, height * 1.3
    return f"Approx. {w:.1f}m W × {h:.1f}m H × {w * 2.5:.1f}m D"


def cibse_compliance(results: Dict, spaces: List[Dict], heat_recovery: bool) -> Dict:
    issues = []
    if results['co2_concentration'] > CO2_LIMIT_PPM:
        issues.append(f"CO2 concentration ({results['co2_concentration']:.0f}ppm) exceeds "
                      f"1000ppm CIBSE recommendation.")
    if results['specific_fan_power'] > SFP_LIMIT:
        issues.append(f"Specific Fan Power ({results['specific_fan_power']:.1f} W/(l/s)) exceeds "
                      f"CIBSE/Part L best practice of 2.0 W/(l/s).")

    min_ach = max((effective_total_ach(s) for s in spaces), default=0.0)
    total_volume = sum(s['area'] * s['height'] for s in spaces)
    if total_volume > 0 and min_ach > 0 and results['total_ach'] < min_ach:
        issues.append(f"Achieved Air Change Rate ({results['total_ach']:.1f} ACH) is below minimum "
                      f"requirement of {min_ach:.1f} ACH for at least one space type.")

    occupants = sum(s['occupants'] for s in spaces)
    if occupants > 0:
        per_person = results['required_fresh_airflow'] / occupants
        if per_person < FRESH_AIR_PER_PERSON:
            issues.append(f"Fresh air per person ({per_person:.1f} m³/h) is below CIBSE minimum "
                          f"of 36 m³/h (10 l/s/person).")

    if results['required_total_airflow'] > HEAT_RECOVERY_THRESHOLD and not heat_recovery:
        issues.append("Heat recovery should be considered for systems > 10,000 m³/h per CIBSE guidance.")
    return {'is_compliant': not issues, 'issues': issues}


def size_ahu(spaces: List[Dict], external: Dict, internal: Dict,
             sfp_target: float = 1.8, safety_factor: float = 1.2,
             heat_recovery: bool = True, heat_recovery_efficiency: float = 75.0) -> Dict:
    """Size an AHU serving one or more spaces.

    Args:
        spaces: list of space dicts with 'area' (m²) and 'height' (m); other
            keys default as in SPACE_DEFAULTS
        external: {'dry_bulb', 'wet_bulb' (°C), 'altitude' (m)}
        internal: {'dry_bulb' (°C), 'rel_humidity' (%), 'fresh_air_boost' (%)}
        sfp_target: specific fan power W/(l/s)
        safety_factor: applied to airflow and capacities
        heat_recovery: whether a heat recovery device is fitted
        heat_recovery_efficiency: percent

    Returns:
        Dict of airflows (m³/h), capacities (kW), humidity duties (kg/h),
        fan power (kW), filter and casing size, ACH, CO₂ and CIBSE
        compliance.

    Raises:
        InputValidationError: on invalid inputs or impossible psychrometric
            states.
    """
    if not spaces:
        raise InputValidationError(["At least one space is required"])
    spaces = [dict(SPACE_DEFAULTS, **s) for s in spaces]
    for space in spaces:
        get_space_type(space['space_type'])
    _validate(spaces, external, safety_factor)

    altitude = external.get('altitude', 0)
    raw_cooling = cooling_load(spaces, external, internal)
    raw_heating = heating_load(spaces, internal, altitude,
                               heat_recovery_efficiency if heat_recovery else None)

    boost = internal.get('fresh_air_boost', 0)
    fresh = sum(space_fresh_air(s, boost) / _effectiveness(s) for s in spaces)
    total = required_airflow(spaces, internal, raw_cooling, altitude, safety_factor)
    humidity = humidity_control(total, external, internal)
    volume = sum(s['area'] * s['height'] for s in spaces)

    results = {
        'required_total_airflow': total,
        'required_fresh_airflow': fresh,
        'recirculation_airflow': max(0.0, total - fresh),
        'cooling_capacity': raw_cooling * safety_factor / 1000,
        'heating_capacity': raw_heating * safety_factor / 1000,
        'humidification_capacity': humidity['humidification'],
        'dehumidification_capacity': humidity['dehumidification'],
        'fan_power': total / 3.6 * sfp_target / 1000,
        'recommended_filter_class': recommend_filter(spaces),
        'ahu_size': estimate_ahu_size(total),
        'specific_fan_power': sfp_target,
        'total_ach': total / volume if volume > 0 else 0.0,
        'co2_concentration': co2_concentration(sum(s['occupants'] for s in spaces), fresh),
        'ventilation_effectiveness': area_weighted_effectiveness(spaces),
    }
    compliance = cibse_compliance(results, spaces, heat_recovery)
    results['is_compliant'] = compliance['is_compliant']
    results['compliance_issues'] = compliance['issues']
    return results
