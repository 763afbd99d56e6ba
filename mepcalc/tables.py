"""
Shared engineering reference data.

One data set for every calculator: duct and pipe materials, fitting loss
coefficients, standard size schedules, refrigerant constants, steam and
sprinkler tables, and the CIBSE space-type data used by AHU sizing.

Sources: ASHRAE Fundamentals (duct/pipe fittings), Crane TP-410 (K by size),
CIBSE Guide A/B (space ventilation), BS EN 12845 Table 23 (sprinkler
equivalent lengths).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


# --- Physical constants ---

GRAVITY = 9.80665          # m/s²
GAS_CONSTANT = 8.31447     # J/(mol·K)
AIR_MOLAR_MASS = 0.0289644  # kg/mol
STANDARD_PRESSURE_KPA = 101.325
KELVIN = 273.15


# --- Duct system ---

@dataclass(frozen=True)
class Material:
    """Pipe or duct material with absolute roughness."""
    id: str
    name: str
    roughness: float  # mm


DUCT_MATERIALS: Dict[str, Material] = {
    'galvanizedSteel': Material('galvanizedSteel', 'Galvanized Steel', 0.15),
    'aluminum': Material('aluminum', 'Aluminum', 0.05),
    'flexibleSpiral': Material('flexibleSpiral', 'Flexible Spiral', 4.6),
    'concrete': Material('concrete', 'Concrete', 3.0),
    'fiberBoard': Material('fiberBoard', 'Fiber Board', 4.5),
}

DUCT_FITTINGS_K: Dict[str, float] = {
    'elbow90': 0.3,
    'elbow45': 0.2,
    'teePassThrough': 0.5,
    'teeBranch': 1.0,
    'entranceSharp': 0.5,
    'exitSharp': 1.0,
    'damper': 0.2,
    'contraction': 0.3,
    'expansion': 0.45,
}

DUCT_VELOCITY_LIMITS: Dict[str, float] = {'main': 7.5, 'branch': 6.0}  # m/s

# EN 1506 preferred circular duct diameters (mm)
DUCT_ROUND_SIZES: List[float] = [100, 125, 160, 200, 250, 315, 400, 500, 630, 800, 1000, 1250]

DUCT_SAFETY_FACTOR = 1.3
CUSTOM_FITTING_K = 0.5


# --- Hydronic (chilled water) piping ---

NOMINAL_SIZES: List[float] = [0.375, 0.5, 0.75, 1, 1.25, 1.5, 2, 2.5, 3, 4, 6, 8, 10, 12]

NOMINAL_SIZE_LABELS: Dict[float, str] = {
    0.375: 'DN10 (3/8")', 0.5: 'DN15 (1/2")', 0.75: 'DN20 (3/4")', 1: 'DN25 (1")',
    1.25: 'DN32 (1-1/4")', 1.5: 'DN40 (1-1/2")', 2: 'DN50 (2")', 2.5: 'DN65 (2-1/2")',
    3: 'DN80 (3")', 4: 'DN100 (4")', 6: 'DN150 (6")', 8: 'DN200 (8")',
    10: 'DN250 (10")', 12: 'DN300 (12")',
}


@dataclass(frozen=True)
class PipeMaterial:
    """Pipe material with roughness and inner-diameter schedule by nominal size."""
    id: str
    name: str
    roughness: float                  # mm
    inner_diameters: Dict[float, float]  # nominal inch → ID mm


def _schedule(ids: List[float]) -> Dict[float, float]:
    return dict(zip(NOMINAL_SIZES, ids))


_STEEL_SCH40 = [12.5, 15.8, 20.9, 26.6, 35.1, 40.9, 52.5, 62.7, 77.9, 102.3, 154.1, 202.7, 254.5, 303.2]

PIPE_MATERIALS: Dict[str, PipeMaterial] = {
    'steel': PipeMaterial('steel', 'Steel (Sch 40)', 0.045, _schedule(_STEEL_SCH40)),
    'copper': PipeMaterial('copper', 'Copper (Type L)', 0.0015, _schedule(
        [11.0, 13.8, 19.0, 25.6, 32.0, 38.1, 50.8, 63.5, 76.2, 101.6, 152.4, 203.2, 254.0, 304.8])),
    'pvc': PipeMaterial('pvc', 'PVC (Sch 40)', 0.0015, _schedule(
        [12.4, 15.3, 20.4, 26.2, 34.5, 40.9, 52.5, 62.1, 77.9, 102.3, 154.1, 202.7, 254.5, 304.8])),
    'stainlessSteel': PipeMaterial('stainlessSteel', 'Stainless Steel (Sch 40s)', 0.0015, _schedule(
        [12.6, 16.1, 22.3, 28.5, 34.0, 40.9, 52.5, 62.7, 77.9, 102.3, 154.1, 202.7, 254.5, 304.8])),
    'castIron': PipeMaterial('castIron', 'Cast Iron', 0.26, _schedule(
        [10.7, 13.8, 19.9, 25.4, 32.1, 38.1, 50.8, 63.5, 76.2, 101.6, 152.4, 203.2, 254.0, 304.8])),
    'galvanizedIron': PipeMaterial('galvanizedIron', 'Galvanized Iron', 0.15, _schedule(_STEEL_SCH40)),
    'hdpe': PipeMaterial('hdpe', 'HDPE (SDR 11)', 0.007, _schedule(
        [8.8, 11.4, 17.1, 22.9, 28.6, 34.5, 45.9, 57.4, 73.6, 93.3, 141.0, 187.6, 235.4, 281.0])),
}

PIPE_VELOCITY_LIMITS: Dict[str, float] = {'main': 3.0, 'branch': 2.4, 'connection': 1.2}  # m/s

HYDRONIC_SAFETY_FACTOR = 1.2
PUMP_EFFICIENCY = 0.7


@dataclass(frozen=True)
class PipeFitting:
    """Hydronic fitting: a default K, optionally refined by nominal size."""
    id: str
    name: str
    k: float
    k_by_size: Dict[float, float] = field(default_factory=dict)

    def k_for_size(self, nominal: Optional[float]) -> float:
        if nominal is not None and nominal in self.k_by_size:
            return self.k_by_size[nominal]
        return self.k


def _by_size(values: Dict[float, float], large: Optional[float] = None,
             sizes: Tuple[float, ...] = (4, 6, 8, 10, 12)) -> Dict[float, float]:
    """Expand a threaded-style table whose last value applies to 4" and above."""
    table = dict(values)
    if large is not None:
        for s in sizes:
            table.setdefault(s, large)
    return table


def _uniform(k: float) -> Dict[float, float]:
    return {s: k for s in NOMINAL_SIZES}


_ELBOW90_STD_THREADED = {0.375: 2.5, 0.5: 2.1, 0.75: 1.7, 1: 1.5, 1.25: 1.3, 1.5: 1.2, 2: 1.0, 2.5: 0.85, 3: 0.8}
_ELBOW90_STD_FLANGED = {1: 0.43, 1.25: 0.41, 1.5: 0.40, 2: 0.38, 2.5: 0.35, 3: 0.34,
                        4: 0.31, 6: 0.29, 8: 0.27, 10: 0.25, 12: 0.24}

PIPE_FITTINGS: Dict[str, PipeFitting] = {f.id: f for f in [
    # Threaded
    PipeFitting('elbow90stdThreaded', '90° Standard Elbow (Threaded)', 0.9,
                _by_size(_ELBOW90_STD_THREADED, 0.7)),
    PipeFitting('elbow90longThreaded', '90° Long Radius Elbow (Threaded)', 0.6,
                _by_size({0.75: 0.92, 1: 0.78, 1.25: 0.65, 1.5: 0.54, 2: 0.42, 2.5: 0.35, 3: 0.31}, 0.24)),
    PipeFitting('elbow45Threaded', '45° Elbow (Threaded)', 0.4,
                _by_size({0.375: 0.38, 0.5: 0.37, 0.75: 0.35, 1: 0.34, 1.25: 0.33, 1.5: 0.32,
                          2: 0.31, 2.5: 0.30, 3: 0.29}, 0.28)),
    PipeFitting('returnBendThreaded', 'Return Bend (Threaded)', 1.5,
                _by_size(_ELBOW90_STD_THREADED, 0.7)),
    PipeFitting('teeLineThreaded', 'Tee Line Flow (Threaded)', 0.9, _uniform(0.9)),
    PipeFitting('teeBranchThreaded', 'Tee Branch Flow (Threaded)', 1.8,
                _by_size({0.375: 2.7, 0.5: 2.4, 0.75: 2.1, 1: 1.8, 1.25: 1.7, 1.5: 1.6,
                          2: 1.4, 2.5: 1.3, 3: 1.2}, 1.1)),
    PipeFitting('globeValveThreaded', 'Globe Valve (Threaded)', 10,
                _by_size({0.375: 20, 0.5: 14, 0.75: 10, 1: 9, 1.25: 8.5, 1.5: 8, 2: 7, 2.5: 6.5, 3: 6}, 5.7)),
    PipeFitting('gateValveThreaded', 'Gate Valve (Threaded)', 0.2,
                _by_size({0.375: 0.40, 0.5: 0.33, 0.75: 0.28, 1: 0.24, 1.25: 0.22, 1.5: 0.19,
                          2: 0.17, 2.5: 0.16, 3: 0.14}, 0.12)),
    PipeFitting('angleValveThreaded', 'Angle Valve (Threaded)', 5,
                _by_size({0.75: 6.1, 1: 4.6, 1.25: 3.6, 1.5: 2.9, 2: 2.1, 2.5: 1.6, 3: 1.3}, 1.0)),
    PipeFitting('swingCheckValveThreaded', 'Swing Check Valve (Threaded)', 2.5,
                _by_size({0.375: 8.0, 0.5: 5.5, 0.75: 3.7, 1: 3.0, 1.25: 2.7, 1.5: 2.5,
                          2: 2.3, 2.5: 2.2, 3: 2.1}, 2.0)),
    PipeFitting('bellMouthInletThreaded', 'Bell Mouth Inlet (Threaded)', 0.05, _uniform(0.05)),
    PipeFitting('squareInletThreaded', 'Square Inlet (Threaded)', 0.5, _uniform(0.5)),
    PipeFitting('projectedInletThreaded', 'Projected Inlet (Threaded)', 1.0, _uniform(1.0)),
    # Flanged
    PipeFitting('elbow90stdFlanged', '90° Standard Elbow (Flanged)', 0.4, dict(_ELBOW90_STD_FLANGED)),
    PipeFitting('elbow90longFlanged', '90° Long Radius Elbow (Flanged)', 0.3,
                {1: 0.41, 1.25: 0.37, 1.5: 0.35, 2: 0.30, 2.5: 0.28, 3: 0.25,
                 4: 0.22, 6: 0.18, 8: 0.16, 10: 0.14, 12: 0.13}),
    PipeFitting('elbow45longFlanged', '45° Long Radius Elbow (Flanged)', 0.2,
                {1: 0.22, 1.25: 0.22, 1.5: 0.21, 2: 0.20, 2.5: 0.19, 3: 0.18,
                 4: 0.18, 6: 0.17, 8: 0.17, 10: 0.16, 12: 0.16}),
    PipeFitting('returnBendStdFlanged', 'Return Bend Standard (Flanged)', 0.4, dict(_ELBOW90_STD_FLANGED)),
    PipeFitting('returnBendLongFlanged', 'Return Bend Long Radius (Flanged)', 0.3,
                {1: 0.43, 1.25: 0.38, 1.5: 0.35, 2: 0.30, 2.5: 0.27, 3: 0.25,
                 4: 0.22, 6: 0.18, 8: 0.15, 10: 0.14, 12: 0.13}),
    PipeFitting('teeLineFlanged', 'Tee Line Flow (Flanged)', 0.2,
                {1: 0.26, 1.25: 0.25, 1.5: 0.23, 2: 0.20, 2.5: 0.18, 3: 0.17,
                 4: 0.15, 6: 0.12, 8: 0.10, 10: 0.09, 12: 0.08}),
    PipeFitting('teeBranchFlanged', 'Tee Branch Flow (Flanged)', 1.0,
                {1: 1.0, 1.25: 0.95, 1.5: 0.90, 2: 0.84, 2.5: 0.79, 3: 0.76,
                 4: 0.70, 6: 0.62, 8: 0.58, 10: 0.53, 12: 0.50}),
    PipeFitting('globeValveFlanged', 'Globe Valve (Flanged)', 10,
                _by_size({1: 13, 1.25: 12, 1.5: 10, 2: 9, 2.5: 8, 3: 7, 4: 6.5, 6: 6}, 5.7, sizes=(8, 10, 12))),
    PipeFitting('gateValveFlanged', 'Gate Valve (Flanged)', 0.3,
                {2: 0.34, 2.5: 0.27, 3: 0.22, 4: 0.16, 6: 0.10, 8: 0.08, 10: 0.06, 12: 0.05}),
    PipeFitting('angleValveFlanged', 'Angle Valve (Flanged)', 4,
                _by_size({1: 4.8, 1.25: 3.7, 1.5: 3.0, 2: 2.5, 2.5: 2.3, 3: 2.2}, 2.1)),
    PipeFitting('swingCheckValveFlanged', 'Swing Check Valve (Flanged)', 2.0, _uniform(2.0)),
    # Fixed K
    PipeFitting('reducer2x1-5', 'Reducer 2" x 1-1/2"', 0.22),
    PipeFitting('reducer4x3', 'Reducer 4" x 3"', 0.23),
    PipeFitting('reducer12x10', 'Reducer 12" x 10"', 0.14),
    PipeFitting('expansion1-5x2', 'Expansion 1-1/2" x 2"', 0.16),
    PipeFitting('expansion3x4', 'Expansion 3" x 4"', 0.11),
    PipeFitting('expansion10x12', 'Expansion 10" x 12"', 0.11),
    PipeFitting('butterflyValve', 'Butterfly Valve', 0.6),
    PipeFitting('balancingValve', 'Balancing Valve', 0.4),
    PipeFitting('expansion', 'Sudden Expansion', 1.0),
    PipeFitting('contraction', 'Sudden Contraction', 0.5),
    PipeFitting('entrance', 'Pipe Entrance', 0.5),
    PipeFitting('exit', 'Pipe Exit', 1.0),
]}


# --- Refrigerant piping ---

@dataclass(frozen=True)
class Refrigerant:
    """Antoine coefficients and reference properties for a refrigerant."""
    id: str
    name: str
    antoine_a: float
    antoine_b: float
    antoine_c: float
    liquid_density_25c: float     # kg/m³
    vapor_density_5c: float       # kg/m³
    liquid_viscosity: float       # Pa·s at 25 °C
    vapor_viscosity: float        # Pa·s at 5 °C
    enthalpy_liquid: float        # kJ/kg
    enthalpy_vapor: float         # kJ/kg
    typical_cop: float


REFRIGERANTS: Dict[str, Refrigerant] = {r.id: r for r in [
    # Antoine constants (log10 kPa, °C) are three-point fits to the saturation
    # pressures at -20, 5 and 40 °C in the ASHRAE Handbook Fundamentals (2017)
    # ch. 30 refrigerant property tables. Enthalpies are saturated
    # liquid at 40 °C and saturated vapour at 5 °C (IIR reference)
    Refrigerant('R410A', 'R-410A', 6.54727, 957.45, 262.66, 1060, 23.5, 0.00015, 0.000013, 267.3, 424.0, 3.5),
    Refrigerant('R134A', 'R-134a', 6.27615, 921.24, 241.81, 1200, 21.2, 0.00019, 0.000012, 256.4, 401.0, 3.2),
    Refrigerant('R22', 'R-22', 6.25216, 891.97, 250.88, 1180, 19.8, 0.00016, 0.000014, 249.7, 407.1, 3.0),
    Refrigerant('R32', 'R-32', 6.57819, 964.97, 263.06, 960, 26.1, 0.00012, 0.000011, 280.0, 515.0, 4.0),
]}


@dataclass(frozen=True)
class TubeSize:
    """Copper refrigerant tube (ACR) size."""
    od: float     # mm
    id: float     # mm
    label: str


COPPER_TUBE_SIZES: List[TubeSize] = [
    TubeSize(6.35, 4.83, '1/4"'), TubeSize(9.52, 7.75, '3/8"'), TubeSize(12.7, 10.93, '1/2"'),
    TubeSize(15.88, 14.11, '5/8"'), TubeSize(19.05, 17.28, '3/4"'), TubeSize(22.22, 20.45, '7/8"'),
    TubeSize(25.4, 23.63, '1"'), TubeSize(28.58, 26.81, '1-1/8"'), TubeSize(31.75, 29.98, '1-1/4"'),
    TubeSize(34.92, 33.15, '1-3/8"'), TubeSize(41.28, 39.51, '1-5/8"'), TubeSize(47.62, 45.85, '1-7/8"'),
    TubeSize(53.98, 52.21, '2-1/8"'), TubeSize(66.68, 64.91, '2-5/8"'), TubeSize(79.38, 77.61, '3-1/8"'),
    TubeSize(92.08, 90.31, '3-5/8"'), TubeSize(104.78, 103.01, '4-1/8"'),
]


# --- Steam piping ---

STEAM_PIPE_SIZES: List[int] = [15, 20, 25, 32, 40, 50, 65, 80, 100, 125, 150, 200,
                               250, 300, 350, 400, 450, 500, 600, 750]  # DN mm

STEAM_MATERIALS: Dict[str, Material] = {
    'carbon_steel': Material('carbon_steel', 'Carbon Steel', 0.045),
    'stainless_steel': Material('stainless_steel', 'Stainless Steel', 0.015),
    'cast_iron': Material('cast_iron', 'Cast Iron', 0.26),
    'copper': Material('copper', 'Copper', 0.0015),
    'aluminum': Material('aluminum', 'Aluminum', 0.0015),
}

# Equivalent length expressed in pipe diameters
STEAM_FITTINGS_LD: Dict[str, float] = {
    'elbow_90': 30,
    'elbow_45': 16,
    'tee_branch': 60,
    'tee_line': 20,
    'gate_valve': 7,
    'globe_valve': 300,
    'check_valve': 100,
    'entry': 20,
    'exit': 10,
}

STEAM_VELOCITY_LIMITS: Dict[str, Tuple[float, float]] = {
    'supply': (8.0, 35.0),
    'return': (5.0, 20.0),
}

STEAM_SAFETY_FACTOR = 1.2
STEAM_ALLOWABLE_DROP_PERCENT = 5.0


# --- Sprinkler (BS EN 12845) ---

SPRINKLER_PIPE_SIZES: List[int] = [20, 25, 32, 40, 50, 65, 80, 100, 150, 200, 250]

HAZEN_WILLIAMS_C: Dict[str, int] = {
    'Cast Iron': 100,
    'Ductile Iron': 110,
    'Mild Steel': 120,
    'Galvanized Steel': 120,
    'Spun Cement': 130,
    'Cement Lined Cast Iron': 130,
    'Stainless Steel': 140,
    'Copper': 140,
    'Reinforced Glass Fibre': 140,
}

# Table 23 values are for C=120; multiply for other materials
C_CONVERSION_FACTORS: Dict[int, float] = {100: 0.714, 110: 0.850, 120: 1.0, 130: 1.16, 140: 1.33}


def _sprinkler_row(values: List[float], sizes: Optional[List[int]] = None) -> Dict[int, float]:
    return dict(zip(sizes or SPRINKLER_PIPE_SIZES, values))


_VALVE_SIZES = [50, 65, 80, 100, 150, 200, 250]

SPRINKLER_FITTINGS: Dict[str, Dict[int, float]] = {
    '90° screwed elbow (standard)': _sprinkler_row(
        [0.76, 0.77, 1.0, 1.2, 1.5, 1.9, 2.4, 3.0, 4.3, 5.7, 7.4]),
    '90° welded elbow (r/d = 1.5)': _sprinkler_row(
        [0.30, 0.36, 0.49, 0.56, 0.69, 0.88, 1.1, 1.4, 2.0, 2.6, 3.4]),
    '45° screwed elbow (standard)': _sprinkler_row(
        [0.34, 0.40, 0.55, 0.66, 0.76, 1.0, 1.3, 1.6, 2.3, 3.1, 3.9]),
    'Standard screwed tee or cross (flow through branch)': _sprinkler_row(
        [1.3, 1.5, 2.1, 2.4, 2.9, 3.8, 4.8, 6.1, 8.6, 11.0, 14.0]),
    'Gate valve - straight way': _sprinkler_row(
        [0.38, 0.51, 0.63, 0.81, 1.1, 1.5, 2.0], _VALVE_SIZES),
    'Alarm or non-return valve (swinging type)': _sprinkler_row(
        [2.4, 3.2, 3.9, 5.1, 7.2, 9.4, 12.0], _VALVE_SIZES),
    'Alarm or non-return valve (mushroom type)': _sprinkler_row(
        [12.0, 19.0, 19.7, 25.0, 35.0, 47.0, 62.0], _VALVE_SIZES),
    'Butterfly valve': _sprinkler_row(
        [2.2, 2.9, 3.6, 4.6, 6.4, 8.6, 9.9], _VALVE_SIZES),
    'Globe valve': _sprinkler_row(
        [16.0, 21.0, 26.0, 34.0, 48.0, 64.0], [65, 80, 100, 150, 200, 250]),
}

SPRINKLER_MAX_PRESSURE_LOSS = 0.5  # bar


# --- AHU sizing (CIBSE) ---

@dataclass(frozen=True)
class SpaceType:
    """CIBSE space classification with minimum ventilation rates."""
    id: str
    name: str
    min_total_ach: float
    min_fresh_ach: float
    category: str


SPACE_TYPES: Dict[str, SpaceType] = {s.id: s for s in [
    SpaceType('custom', 'Custom Space', 0, 0, 'Custom'),
    SpaceType('officeOpen', 'Open Plan Office', 6, 1.3, 'Office'),
    SpaceType('officeCellular', 'Cellular Office', 6, 1.3, 'Office'),
    SpaceType('meetingRoom', 'Meeting Room', 8, 2, 'Office'),
    SpaceType('boardRoom', 'Board Room', 10, 2.5, 'Office'),
    SpaceType('reception', 'Reception Area', 6, 1.5, 'Office'),
    SpaceType('classroom', 'Classroom', 6, 3, 'Educational'),
    SpaceType('lecture', 'Lecture Theatre', 8, 3.5, 'Educational'),
    SpaceType('library', 'Library', 4, 1.5, 'Educational'),
    SpaceType('lab', 'Laboratory', 10, 4, 'Educational'),
    SpaceType('patientRoom', 'Patient Room', 6, 2, 'Healthcare'),
    SpaceType('operatingTheater', 'Operating Theater', 25, 5, 'Healthcare'),
    SpaceType('ward', 'Hospital Ward', 6, 2, 'Healthcare'),
    SpaceType('waitingArea', 'Waiting Area', 6, 2, 'Healthcare'),
    SpaceType('retailGeneral', 'Retail Space', 4, 1.5, 'Retail'),
    SpaceType('restaurant', 'Restaurant', 10, 3, 'Hospitality'),
    SpaceType('kitchen', 'Commercial Kitchen', 30, 5, 'Hospitality'),
    SpaceType('hotelRoom', 'Hotel Room', 3, 1, 'Hospitality'),
    SpaceType('workshop', 'Workshop', 8, 2, 'Industrial'),
    SpaceType('warehouse', 'Warehouse', 2, 0.5, 'Industrial'),
    SpaceType('dataCenter', 'Data Center', 15, 1, 'Industrial'),
    SpaceType('corridor', 'Corridor', 4, 1, 'Public'),
    SpaceType('lobby', 'Lobby', 4, 1.5, 'Public'),
    SpaceType('toilet', 'Toilet', 10, 2, 'Public'),
]}

ACTIVITY_LEVELS: Dict[str, float] = {  # W per person
    'sedentary': 70,
    'lightOffice': 120,
    'standing': 150,
    'lightManual': 200,
    'moderateManual': 300,
    'heavyManual': 400,
    'sportLight': 300,
    'sportHeavy': 600,
}

INSULATION_U_VALUES: Dict[str, float] = {  # W/m²K
    'poor': 1.5,
    'basic': 1.0,
    'medium': 0.7,
    'good': 0.4,
    'excellent': 0.25,
    'passiveHouse': 0.15,
}

VENTILATION_EFFECTIVENESS: Dict[str, float] = {
    'mixing': 0.8,
    'displacement': 1.2,
    'underfloor': 1.1,
    'naturalVent': 0.7,
}
DEFAULT_VENTILATION_EFFECTIVENESS = 0.8

STANDARD_COOLING_LOADS: Dict[str, float] = {  # W/m²
    'officeOpen': 120, 'officeCellular': 110, 'meetingRoom': 140, 'boardRoom': 150,
    'reception': 100, 'classroom': 120, 'lecture': 140, 'library': 100, 'lab': 180,
    'patientRoom': 90, 'operatingTheater': 250, 'ward': 100, 'waitingArea': 90,
    'retailGeneral': 150, 'restaurant': 170, 'kitchen': 350, 'hotelRoom': 80,
    'workshop': 140, 'warehouse': 70, 'dataCenter': 1200, 'corridor': 70,
    'lobby': 90, 'toilet': 80, 'custom': 100,
}

ORIENTATION_FACTORS: Dict[str, float] = {
    'north': 1.0, 'east': 1.3, 'south': 1.5, 'west': 1.3,
    'northeast': 1.1, 'southeast': 1.4, 'southwest': 1.4, 'northwest': 1.1,
}

FILTER_CLASSES: Dict[str, str] = {
    'ePM1_50': 'ePM1 50% (F7)',
    'ePM1_70': 'ePM1 70% (F8)',
    'ePM1_85': 'ePM1 85% (F9)',
    'ePM10_50': 'ePM10 50% (M5)',
    'ePM10_85': 'ePM10 85% (M6)',
    'ISO_15': 'ISO ePM2.5 95% (E11)',
    'ISO_16': 'ISO ePM1 99.5% (E12)',
}

FILTER_BY_SPACE_TYPE: Dict[str, str] = {
    'officeOpen': 'ePM1_50', 'officeCellular': 'ePM1_50', 'meetingRoom': 'ePM1_50',
    'boardRoom': 'ePM1_50', 'reception': 'ePM1_50', 'library': 'ePM1_50',
    'waitingArea': 'ePM1_50', 'hotelRoom': 'ePM1_50', 'custom': 'ePM1_50',
    'classroom': 'ePM1_70', 'lecture': 'ePM1_70', 'patientRoom': 'ePM1_70', 'ward': 'ePM1_70',
    'lab': 'ePM1_85',
    'operatingTheater': 'ISO_15',
    'retailGeneral': 'ePM10_85', 'restaurant': 'ePM10_85', 'kitchen': 'ePM10_85',
    'workshop': 'ePM10_85', 'dataCenter': 'ePM10_85',
    'warehouse': 'ePM10_50', 'corridor': 'ePM10_50', 'lobby': 'ePM10_50', 'toilet': 'ePM10_50',
}

FRESH_AIR_PER_PERSON = 36.0  # m³/h (10 l/s)
CO2_OUTDOOR_PPM = 400
CO2_GENERATION_LPS = 0.005   # l/s per person, sedentary


# --- Medical gas ---

MEDICAL_GAS_PIPE_SIZES: List[int] = [12, 15, 22, 28, 35, 42, 54, 76, 108]  # copper OD mm
MEDICAL_GAS_LENGTH_RANGE: Tuple[float, float] = (8.0, 457.0)   # m
MEDICAL_GAS_FLOW_RANGE: Tuple[float, float] = (30.0, 50000.0)  # L/min
MEDICAL_GAS_SAFETY_FACTOR = 1.3


# --- LV cables (BS 7671 Appendix 4, copper, multicore non-armoured) ---

CABLE_SIZES: List[float] = [1.5, 2.5, 4, 6, 10, 16, 25, 35, 50, 70, 95, 120, 150, 185, 240, 300]  # mm²
INSTALLATION_METHODS = ['A', 'B', 'C', 'E']

# Per size: A 2-core, A 3/4-core, B, B, C, C, E, E (amperes)
_PVC_CCC_ROWS = [
    (14.5, 13, 16.5, 15, 19.5, 17.5, 22, 18.5),
    (19.5, 17.5, 23, 20, 27, 24, 30, 25),
    (26, 23, 30, 27, 36, 32, 40, 34),
    (34, 29, 38, 34, 46, 41, 51, 43),
    (46, 39, 52, 46, 63, 57, 70, 60),
    (61, 52, 69, 62, 85, 76, 94, 80),
    (80, 68, 90, 80, 112, 96, 119, 101),
    (99, 83, 111, 99, 138, 119, 148, 126),
    (119, 99, 133, 118, 168, 144, 180, 153),
    (151, 125, 168, 149, 213, 184, 232, 196),
    (182, 150, 201, 179, 258, 223, 282, 238),
    (210, 172, 232, 206, 299, 259, 328, 276),
    (240, 196, 258, 225, 344, 299, 379, 319),
    (273, 223, 294, 255, 392, 341, 434, 364),
    (321, 261, 344, 297, 461, 403, 514, 430),
    (367, 298, 394, 339, 530, 464, 593, 497),
]

_XLPE_CCC_ROWS = [
    (19, 17, 22, 19.5, 24, 22, 26, 23),
    (26, 23, 30, 26, 33, 30, 36, 32),
    (35, 31, 40, 35, 45, 40, 49, 42),
    (45, 40, 51, 44, 58, 52, 63, 54),
    (61, 54, 69, 60, 80, 71, 86, 75),
    (81, 73, 91, 80, 107, 96, 115, 100),
    (106, 95, 119, 105, 138, 119, 149, 127),
    (131, 117, 146, 128, 171, 147, 185, 158),
    (158, 141, 175, 154, 209, 179, 225, 192),
    (200, 179, 221, 194, 269, 229, 289, 246),
    (241, 216, 265, 233, 328, 278, 352, 298),
    (278, 249, 305, 268, 382, 322, 410, 346),
    (318, 285, 334, 300, 441, 371, 473, 399),
    (362, 324, 384, 340, 506, 424, 542, 456),
    (424, 380, 459, 398, 599, 500, 641, 538),
    (486, 435, 532, 455, 693, 576, 741, 621),
]


def _ccc_table(rows: List[Tuple[float, ...]]) -> Dict[str, Dict[str, Dict[float, float]]]:
    table: Dict[str, Dict[str, Dict[float, float]]] = {}
    for i, method in enumerate(INSTALLATION_METHODS):
        table[method] = {
            '2': {size: row[2 * i] for size, row in zip(CABLE_SIZES, rows)},
            '3_4': {size: row[2 * i + 1] for size, row in zip(CABLE_SIZES, rows)},
        }
    return table


# Tables 4D2A (PVC 70 °C) and 4E2A (XLPE 90 °C)
CABLE_CCC = {'pvc': _ccc_table(_PVC_CCC_ROWS), 'xlpe': _ccc_table(_XLPE_CCC_ROWS)}

# Tables 4D2B and 4E2B, mV/A/m; three-phase values include √3
CABLE_VOLTAGE_DROP: Dict[str, Dict[str, Dict[float, float]]] = {
    'pvc': {
        '2': dict(zip(CABLE_SIZES, [29, 18, 11, 7.3, 4.4, 2.8, 1.75, 1.25, 0.93, 0.65, 0.49, 0.41,
                                    0.34, 0.29, 0.24, 0.21])),
        '3_4': dict(zip(CABLE_SIZES, [25, 15, 9.5, 6.4, 3.8, 2.4, 1.5, 1.1, 0.80, 0.55, 0.41, 0.35,
                                      0.29, 0.25, 0.21, 0.185])),
        'dc': dict(zip(CABLE_SIZES, [29, 18, 11, 7.3, 4.4, 2.8, 1.75, 1.25, 0.93, 0.63, 0.46, 0.36,
                                     0.29, 0.23, 0.18, 0.145])),
    },
    'xlpe': {
        '2': dict(zip(CABLE_SIZES, [31, 19, 12, 7.9, 4.7, 2.9, 1.85, 1.35, 1.0, 0.69, 0.52, 0.42,
                                    0.35, 0.29, 0.24, 0.21])),
        '3_4': dict(zip(CABLE_SIZES, [27, 16, 10, 6.8, 4.0, 2.5, 1.65, 1.15, 0.87, 0.60, 0.45, 0.37,
                                      0.30, 0.26, 0.21, 0.185])),
        'dc': dict(zip(CABLE_SIZES, [31, 19, 12, 7.9, 4.7, 2.9, 1.85, 1.35, 0.98, 0.67, 0.49, 0.39,
                                     0.31, 0.25, 0.195, 0.155])),
    },
}

# Ambient temperature factor Ca: (ambient up to °C, factor), then the factor beyond
CABLE_TEMPERATURE_FACTORS: Dict[str, Tuple[List[Tuple[float, float]], float]] = {
    'pvc': ([(10, 1.22), (15, 1.17), (20, 1.12), (25, 1.06), (30, 1.0), (35, 0.94), (40, 0.87),
             (45, 0.79), (50, 0.71), (55, 0.61)], 0.5),
    'xlpe': ([(10, 1.15), (15, 1.12), (20, 1.08), (25, 1.04), (30, 1.0), (35, 0.96), (40, 0.91),
              (45, 0.87), (50, 0.82), (55, 0.76), (60, 0.71), (65, 0.65), (70, 0.58), (75, 0.5),
              (80, 0.41)], 0.32),
}

# Grouping factor Cg: (circuits up to, factor), then the factor beyond
_ENCLOSED = ([(1, 1.0), (2, 0.80), (3, 0.70), (4, 0.65), (5, 0.60), (6, 0.57), (9, 0.54),
              (12, 0.52), (15, 0.50), (19, 0.48)], 0.45)
CABLE_GROUPING_FACTORS: Dict[str, Tuple[List[Tuple[float, float]], float]] = {
    'A': _ENCLOSED,
    'B': _ENCLOSED,
    'C': ([(1, 1.0), (2, 0.85), (3, 0.79), (4, 0.75), (5, 0.73), (6, 0.72), (9, 0.70)], 0.68),
    'E': ([(1, 1.0), (2, 0.88), (3, 0.82), (4, 0.77), (5, 0.75), (6, 0.73)], 0.70),
}

# Adiabatic k for copper conductors
CABLE_K_FACTORS: Dict[str, float] = {'pvc': 115, 'xlpe': 143}


# --- Lookups ---

def _lookup(table: Dict, key: str, kind: str):
    if key not in table:
        raise ValueError(f"Unknown {kind} '{key}'. Available: {list(table.keys())}")
    return table[key]


def get_duct_material(material_id: str) -> Material:
    return _lookup(DUCT_MATERIALS, material_id, 'duct material')


def get_pipe_material(material_id: str) -> PipeMaterial:
    return _lookup(PIPE_MATERIALS, material_id, 'pipe material')


def get_refrigerant(refrigerant_id: str) -> Refrigerant:
    return _lookup(REFRIGERANTS, refrigerant_id, 'refrigerant')


def get_steam_material(material_id: str) -> Material:
    return _lookup(STEAM_MATERIALS, material_id, 'steam pipe material')


def get_space_type(space_type_id: str) -> SpaceType:
    return _lookup(SPACE_TYPES, space_type_id, 'space type')


def list_space_types(category: Optional[str] = None) -> List[Dict]:
    """List CIBSE space types, optionally filtered by category."""
    result = []
    for s in SPACE_TYPES.values():
        if category and s.category != category:
            continue
        result.append({
            'id': s.id,
            'name': s.name,
            'min_total_ach': s.min_total_ach,
            'min_fresh_ach': s.min_fresh_ach,
            'category': s.category,
        })
    return result
