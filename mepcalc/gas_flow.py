"""
Medical gas design flows (HTM 02-01 Part A diversity rules).

Each department type carries a rule on its terminal (or bed) count n:

    linear        Q = base + (n − 1) · increment / divisor
    fixed         Q = base
    per terminal  Q = base · n · factor
    excluded      Q = 0, the service is sized elsewhere

Q is the diversified flow of one room (L/min). Rooms of a type multiply
it, except ward units which combine by

    Q_d = Q_w · (1 + (n_W − 1) / 2)

AGSS rules are written in multiples of the disposal flow V (130 or
80 L/min). Surgical air counts operating rooms directly, so n is the room
count and no further multiplication applies. The system design flow is
the summed room flow times the safety factor.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from mepcalc.units import lpm_to_m3h
from mepcalc.validation import COMMON_RULES, require_valid

GAS_SAFETY_FACTOR = 1.3
AGSS_DISPOSAL_FLOWS = (130, 80)  # L/min


@dataclass(frozen=True)
class DiversityRule:
    """Design flow rule for one department type."""
    id: str
    name: str
    base: float
    increment: float = 0.0
    divisor: float = 1.0
    kind: str = 'linear'          # 'linear', 'fixed', 'per_terminal', 'excluded'
    factor: float = 1.0
    ward: bool = False            # rooms combine by the ward rule
    terminal_range: Optional[Tuple[int, Optional[int]]] = None
    note: str = ''

    def flow(self, n: int, scale: float = 1.0) -> float:
        """Diversified flow (L/min) of one room with n terminals."""
        if self.kind == 'excluded':
            return 0.0
        if self.kind == 'fixed':
            return self.base * scale
        if self.kind == 'per_terminal':
            return self.base * n * self.factor * scale
        return (self.base + (n - 1) * self.increment / self.divisor) * scale

    def formula(self, symbol: Optional[str] = None) -> str:
        def term(value: float) -> str:
            if symbol is None:
                return f"{value:g}"
            return symbol if value == 1 else f"{value:g}{symbol}"

        if self.kind == 'excluded':
            return f"Q = 0 ({self.note})"
        if self.kind == 'fixed':
            return f"Q = {term(self.base)}"
        if self.kind == 'per_terminal':
            factor = f" × {self.factor:g}" if self.factor != 1 else ""
            return f"Q = {term(self.base)} × n{factor}"
        divisor = f"/{self.divisor:g}" if self.divisor != 1 else ""
        return f"Q = {term(self.base)} + (n-1)×{term(self.increment)}{divisor}"


@dataclass
class GasDefinition:
    """A medical gas service and its department rules."""
    id: str
    name: str
    departments: Dict[str, DiversityRule]
    count_label: str = 'terminals'
    rooms_are_terminals: bool = False
    scaled_by_disposal_flow: bool = False
    standards: List[str] = field(default_factory=lambda: ['HTM 02-01'])


def _rules(*rules: DiversityRule) -> Dict[str, DiversityRule]:
    return {r.id: r for r in rules}


def _linear(key: str, name: str, base: float, increment: float, divisor: float = 1, **kw) -> DiversityRule:
    return DiversityRule(key, name, base, increment, divisor, **kw)


def _fixed(key: str, name: str, base: float) -> DiversityRule:
    return DiversityRule(key, name, base, kind='fixed')


def _excluded(key: str, name: str, note: str) -> DiversityRule:
    return DiversityRule(key, name, 0.0, kind='excluded', note=note)


OXYGEN = _rules(
    _linear('ward_4_bed', 'In-patient accommodation (ward units) - Single 4-bed room', 10, 6, 4, ward=True),
    _linear('ae_resuscitation', 'Accident & Emergency - Resuscitation room', 100, 6, 4),
    _linear('ae_major_treatment', 'Accident & Emergency - Major treatment', 10, 6, 4),
    _linear('ae_recovery', 'Accident & Emergency - Post-anaesthesia', 10, 6, 8),
    _linear('ae_treatment', 'Accident & Emergency - Treatment room/cubicle', 10, 6, 10),
    _fixed('operating_anaesthetic', 'Operating - Anaesthetic rooms', 100),
    _linear('operating_rooms', 'Operating - Operating rooms', 100, 10),
    _linear('operating_recovery', 'Operating - Post-anaesthesia recovery', 10, 6),
    _linear('ldrp_mother', 'Maternity - LDRP Mother rooms', 10, 6, 4),
    _linear('ldrp_baby', 'Maternity - LDRP Baby rooms', 10, 3, 2),
    _linear('suite_anaesthetist', 'Operating suites - Anaesthetist', 100, 1, 6),
    _linear('suite_paediatrician', 'Operating suites - Paediatrician', 10, 1, 3),
    _linear('suite_recovery', 'Operating suites - Post-anaesthesia recovery', 10, 3, 4),
    _linear('bed_space', 'In-patient accommodation - Single/multi-bed space', 10, 6, 6),
    _linear('nursery', 'In-patient accommodation - Nursery', 10, 3, 2),
    _linear('special_care_baby', 'In-patient accommodation - Special care baby', 10, 6),
    _linear('radiological', 'Radiological', 10, 6, 3),
    _linear('critical_care', 'Critical care areas', 10, 6, 12),
    _linear('ccu', 'Coronary care unit (CCU)', 10, 6, 12),
    _linear('hdu', 'High-dependency unit (HDU)', 10, 6, 12),
    _linear('renal', 'Renal', 10, 6, 4),
    DiversityRule('cpap', 'CPAP ventilation', 75, kind='per_terminal', factor=0.75),
    _linear('mental_ect', 'Adult mental illness - Electro convulsive', 10, 6, 4),
    _linear('mental_recovery', 'Adult mental illness - Post-anaesthesia', 10, 6, 4),
    _linear('day_care_treatment', 'Adult acute day care - Treatment', 10, 6, 4),
    _linear('day_care_recovery', 'Adult acute day care - Post-anaesthesia', 10, 6, 4),
    _linear('outpatient_treatment', 'Out-patient - Treatment rooms', 10, 6, 4),
    _linear('oral_type1', 'Oral surgery/orthodontic - Consulting rooms type 1', 10, 6, 2),
    _linear('oral_type2_3', 'Oral surgery/orthodontic - Consulting rooms type 2 & 3', 10, 6, 3),
    _linear('oral_recovery', 'Oral surgery/orthodontic - Recovery room', 10, 6, 6),
    _fixed('equipment_service', 'Equipment service rooms', 100),
)

MEDICAL_AIR = _rules(
    _linear('ward_rooms', 'In-patient accommodation (ward units) - Single/multi-bed and treatment rooms',
            20, 10, 4, ward=True),
    _linear('ward_block', 'In-patient accommodation (ward units) - Ward block/department', 20, 10, 4),
    _linear('ae_resuscitation', 'Accident & Emergency - Resuscitation room', 40, 20, 4),
    _linear('ae_major_treatment', 'Accident & Emergency - Major treatment/plaster room', 40, 20, 4),
    _linear('ae_recovery', 'Accident & Emergency - Post-anaesthesia recovery', 40, 40, 4),
    _linear('ldrp_baby', 'Maternity - LDRP rooms Baby', 40, 40, 4),
    _linear('maternity_recovery', 'Maternity - Post-anaesthesia recovery', 40, 40, 4),
    _linear('radiological', 'Radiological - All anaesthetic and procedures rooms', 40, 40, 4),
    _fixed('operating_anaesthetic', 'Operating - Anaesthetic rooms', 40),
    _linear('operating_rooms', 'Operating - Operating rooms', 40, 40, 4),
    _linear('operating_recovery', 'Operating - Post-anaesthesia recovery', 40, 10, 4),
    _linear('suite_anaesthetist', 'Maternity - Operating suites Anaesthetist', 40, 10, 4),
    _linear('renal', 'Renal', 20, 10, 4),
    DiversityRule('scbu', 'Maternity - Neonatal unit (SCBU)', 40, kind='per_terminal'),
    _linear('critical_care', 'Critical care areas', 80, 80, 2),
    _linear('hdu', 'High-dependency units', 80, 80, 2),
    _linear('oral_major', 'Oral surgery/orthodontic - Major dental/oral surgery rooms', 40, 40, 2),
    _fixed('other', 'All other departments', 40),
    _fixed('equipment_service', 'Equipment service rooms', 40),
)

NITROUS_OXIDE = _rules(
    _linear('ae_resuscitation', 'Accident & Emergency - Resuscitation room', 10, 6, 4),
    _linear('operating', 'Operating', 15, 6),
    _linear('maternity_suites', 'Maternity - Operating suites', 15, 6),
    _linear('radiological', 'Radiological - All anaesthetic and procedures rooms', 10, 6, 4),
    _linear('critical_care', 'Critical care areas', 10, 6, 4),
    _linear('oral_type1', 'Oral surgery/orthodontic - Consulting rooms type 1', 10, 6, 4),
    _fixed('other', 'Other departments', 10),
    _fixed('equipment_service', 'Equipment service rooms - Nitrous oxide', 15),
    _linear('ldrp_small', 'Maternity - LDRP rooms (≤12 rooms), mother', 275, 6, 2),
    _linear('ldrp_large', 'Maternity - LDRP rooms (>12 rooms)', 550, 6, 2),
    _linear('mixture_other', 'Other areas - Nitrous oxide/oxygen mixture', 20, 10, 4),
    _fixed('mixture_equipment', 'Equipment service rooms - Nitrous oxide/oxygen mixture', 275),
)

VACUUM = _rules(
    _fixed('ward_unit', 'In-patient accommodation - Ward unit', 40),
    _linear('multiple_wards', 'In-patient accommodation - Multiple ward units', 40, 40, 4),
    _linear('multi_ward', 'In-patient accommodation - Multi-ward units', 40, 40, 2),
    _fixed('psychiatric_ward', 'In-patient accommodation - Psychiatric ward', 40),
    _fixed('nursery', 'In-patient accommodation - Nursery', 40),
    _linear('scbu', 'In-patient accommodation - SCBU', 40, 40, 4),
    _linear('ae_resuscitation', 'Accident & Emergency - Resuscitation room', 40, 40, 4),
    _linear('ae_major_treatment', 'Accident & Emergency - Major treatment/plaster room', 40, 40, 4),
    _linear('ae_recovery', 'Accident & Emergency - Post-anaesthesia recovery', 40, 40, 4),
    _linear('ae_treatment', 'Accident & Emergency - Treatment room/cubicle', 40, 40, 8),
    _fixed('operating_anaesthetic', 'Operating - Anaesthetic rooms', 40),
    _fixed('operating_anaesthetist', 'Operating - Operating rooms (Anaesthetist)', 40),
    _fixed('operating_surgeon', 'Operating - Operating rooms (Surgeon)', 40),
    _linear('operating_suites', 'Operating - Operating suites', 80, 80, 2),
    _linear('operating_recovery', 'Operating - Post-anaesthesia recovery', 40, 40, 4),
    _linear('ldrp_mother', 'Maternity - LDRP rooms (Mother)', 40, 40, 4),
    _fixed('ldrp_baby', 'Maternity - LDRP rooms (Baby)', 40),
    _fixed('suite_anaesthetist', 'Maternity - Operating suites (Anaesthetist)', 40),
    _fixed('suite_obstetrician', 'Maternity - Operating suites (Obstetrician)', 40),
    _linear('maternity_suites', 'Maternity - Operating suites', 80, 80, 2),
    _linear('maternity_recovery', 'Maternity - Post-anaesthesia recovery', 40, 40, 4),
    _linear('radiology', 'Radiology/diagnostic - All anaesthetic and procedures rooms', 40, 40, 8),
    _linear('critical_care', 'Critical care areas', 40, 40, 4),
    _linear('hdu', 'High-dependency units', 40, 40, 4),
    _linear('renal', 'Renal', 40, 40, 4),
    _linear('mental_ect', 'Adult mental illness - ECT room', 40, 40, 4),
    _linear('mental_recovery', 'Adult mental illness - Post-anaesthesia', 40, 40, 4),
    _linear('day_care_treatment', 'Adult acute day care - Treatment rooms', 40, 40, 4),
    _linear('day_care_recovery', 'Adult acute day care - Post-anaesthesia recovery', 40, 40, 8),
    _linear('oral_recovery', 'Oral surgery/orthodontic - Recovery room', 40, 40, 8),
    _linear('outpatient_treatment', 'Out-patient - Treatment rooms', 40, 40, 8),
    _excluded('day_patient', 'Day patient accommodation', 'refer to in-patient accommodation'),
    _excluded('oral_type1', 'Oral surgery/orthodontic - Consulting rooms type 1', 'dental vacuum only'),
    _excluded('oral_type2_3', 'Oral surgery/orthodontic - Consulting rooms type 2 & 3', 'dental vacuum only'),
    _excluded('equipment_service', 'Equipment service rooms', 'residual capacity is adequate'),
)

# base and increment in multiples of the disposal flow V
AGSS = _rules(
    _linear('ae_resuscitation', 'Accident & emergency resuscitation room', 1, 1, 4),
    _linear('radiodiagnostic', 'Radiodiagnostic (all anaesthetic and procedures room)', 1, 1, 4),
    _linear('oral_type1', 'Oral surgery/orthodontic consulting rooms (type 1)', 1, 1, 4),
    _linear('operating', 'Operating departments', 1, 1),
    _linear('maternity_suites', 'Maternity operating suites', 1, 1),
    _linear('other', 'Other departments', 1, 1, 8),
)

SURGICAL_AIR = _rules(
    _linear('theatres_up_to_4', 'Operating room (orthopaedic and neurosurgical) - ≤4 rooms',
            350, 350, 2, terminal_range=(1, 4)),
    _linear('theatres_over_4', 'Operating room (orthopaedic and neurosurgical) - >4 rooms',
            350, 350, 4, terminal_range=(5, None)),
    _fixed('other', 'Other departments (equipment workshops, fracture clinic)', 350),
    _fixed('equipment_service', 'Equipment service rooms', 350),
)

GASES: Dict[str, GasDefinition] = {g.id: g for g in [
    GasDefinition('oxygen', 'Oxygen', OXYGEN, count_label='beds'),
    GasDefinition('medical_air', 'Medical Air (400 kPa)', MEDICAL_AIR),
    GasDefinition('nitrous_oxide', 'Nitrous Oxide and N₂O/O₂ Mixture', NITROUS_OXIDE),
    GasDefinition('vacuum', 'Medical Vacuum', VACUUM),
    GasDefinition('agss', 'Anaesthetic Gas Scavenging (AGSS)', AGSS, count_label='units',
                  scaled_by_disposal_flow=True),
    GasDefinition('surgical_air', 'Surgical Air (700 kPa)', SURGICAL_AIR, count_label='rooms',
                  rooms_are_terminals=True),
]}

ROOM_RULES = {
    'department': {'required': True, 'type': 'string'},
    'terminals': COMMON_RULES['count'],
    'rooms': COMMON_RULES['count'],
}


def get_gas(gas_id: str) -> GasDefinition:
    """Get a gas service by id."""
    if gas_id not in GASES:
        raise ValueError(f"Unknown medical gas '{gas_id}'. Available: {list(GASES.keys())}")
    return GASES[gas_id]


def list_departments(gas_id: str) -> List[Dict]:
    """Department types of a gas with their diversity formulae."""
    gas = get_gas(gas_id)
    symbol = 'V' if gas.scaled_by_disposal_flow else None
    return [{'id': r.id, 'name': r.name, 'formula': r.formula(symbol)} for r in gas.departments.values()]


def _room_warnings(rule: DiversityRule, n: int, count_label: str) -> List[str]:
    if rule.terminal_range is None:
        return []
    low, high = rule.terminal_range
    if n < low or (high is not None and n > high):
        span = f"{low}-{high}" if high is not None else f"{low} or more"
        return [f"{n} {count_label} is outside the {span} range of '{rule.name}'; "
                f"check the department type"]
    return []


def room_flow(gas_id: str, room: Dict, disposal_flow: float = 130) -> Dict:
    """Diversified flow for one room entry.

    Args:
        gas_id: one of GASES
        room: {'department', 'terminals' (beds, units or rooms), 'rooms',
            'name'}; surgical air uses 'rooms' as its count
        disposal_flow: AGSS V (L/min)
    """
    gas = get_gas(gas_id)
    room = dict({'terminals': 1, 'rooms': 1, 'name': ''}, **room)
    labels = {'department': 'Department', 'terminals': f"Number of {gas.count_label}",
              'rooms': 'Number of rooms'}
    require_valid(room, ROOM_RULES, labels)
    if room['department'] not in gas.departments:
        raise ValueError(f"Unknown {gas.name} department '{room['department']}'. "
                         f"Available: {list(gas.departments.keys())}")
    rule = gas.departments[room['department']]
    scale = disposal_flow if gas.scaled_by_disposal_flow else 1.0
    rooms = int(room['rooms'])
    n = rooms if gas.rooms_are_terminals else int(room['terminals'])

    per_room = rule.flow(n, scale)
    if gas.rooms_are_terminals:
        total, diversity = per_room, 'rooms counted as terminals'
    elif rule.ward and rooms > 1:
        total, diversity = per_room * (1 + (rooms - 1) / 2), 'Qd = Qw×[1+(nW-1)/2]'
    else:
        total, diversity = per_room * rooms, 'none'

    return {
        'name': room['name'],
        'department': rule.id,
        'department_name': rule.name,
        'terminals': n,
        'rooms': rooms,
        'formula': rule.formula('V' if gas.scaled_by_disposal_flow else None),
        'flow_per_room': per_room,
        'total_flow': total,
        'diversity': diversity,
        'excluded': rule.kind == 'excluded',
        'note': rule.note,
        'warnings': _room_warnings(rule, n, gas.count_label),
    }


def design_flow(gas: str, rooms: List[Dict], safety_factor: float = GAS_SAFETY_FACTOR,
                disposal_flow: float = 130) -> Dict:
    """System design flow for a medical gas service.

    Args:
        gas: 'oxygen', 'medical_air', 'nitrous_oxide', 'vacuum', 'agss'
            or 'surgical_air'
        rooms: room entries, see room_flow
        safety_factor: applied to the summed room flow
        disposal_flow: AGSS V, 130 or 80 L/min

    Returns:
        Dict with per-room results, total_flow and design_flow (L/min),
        design_flow_m3h and warnings.
    """
    definition = get_gas(gas)
    require_valid({'safety_factor': safety_factor}, {'safety_factor': COMMON_RULES['safety_factor']},
                  {'safety_factor': 'Safety factor'})
    if definition.scaled_by_disposal_flow and disposal_flow not in AGSS_DISPOSAL_FLOWS:
        raise ValueError(f"AGSS disposal flow must be one of {list(AGSS_DISPOSAL_FLOWS)} L/min")
    if not rooms:
        raise ValueError("At least one room is required")

    results = [room_flow(gas, room, disposal_flow) for room in rooms]
    total = sum(r['total_flow'] for r in results)
    design = total * safety_factor
    return {
        'gas': definition.id,
        'gas_name': definition.name,
        'rooms': results,
        'total_flow': total,
        'safety_factor': safety_factor,
        'design_flow': design,
        'design_flow_m3h': lpm_to_m3h(design),
        'disposal_flow': disposal_flow if definition.scaled_by_disposal_flow else None,
        'warnings': [w for r in results for w in r['warnings']],
        'standards': definition.standards,
    }
