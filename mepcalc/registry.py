"""
Calculator catalogue.

Each calculator is registered with a name, a discipline and a function
called with keyword parameters, so callers (the API, exports) can list and
run calculators without importing each module.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from mepcalc.ahu import size_ahu
from mepcalc.cable import cable_sizing, circuit_protection
from mepcalc.duct import duct_static_pressure
from mepcalc.fire_supply import fire_service_supply, sprinkler_tank
from mepcalc.gas_flow import design_flow
from mepcalc.hydronic import chilled_water_pipe_sizing
from mepcalc.medical_gas import medical_gas_pressure_drop
from mepcalc.power import generator_sizing, power_factor_correction, transformer_sizing
from mepcalc.psychrometrics import process, state_point
from mepcalc.refrigerant import discharge_line, liquid_line, suction_line
from mepcalc.sprinkler import sprinkler_pipe_sizing
from mepcalc.steam import steam_pipe_sizing
from mepcalc.ups import ups_sizing
from mepcalc.vibration import size_isolators

DISCIPLINES = ['mvac', 'electrical', 'fire', 'medical_gas']


@dataclass
class CalculatorDefinition:
    """A runnable calculator."""
    name: str
    title: str
    discipline: str
    description: str
    function: Callable  # Function(**params) → Dict of results
    standards: Optional[List[str]] = None


CALCULATORS: Dict[str, CalculatorDefinition] = {
    'duct_static_pressure': CalculatorDefinition(
        name='duct_static_pressure',
        title='Duct Static Pressure',
        discipline='mvac',
        description='Darcy-Weisbach friction and fitting losses for circular and rectangular ductwork',
        function=duct_static_pressure,
        standards=['CIBSE Guide C'],
    ),
    'psychrometric_state': CalculatorDefinition(
        name='psychrometric_state',
        title='Psychrometric State Point',
        discipline='mvac',
        description='Moist air properties from dry bulb, relative humidity and pressure',
        function=state_point,
        standards=['ASHRAE Fundamentals'],
    ),
    'psychrometric_process': CalculatorDefinition(
        name='psychrometric_process',
        title='Psychrometric Process',
        discipline='mvac',
        description='Energy and moisture balance between two air states',
        function=process,
        standards=['ASHRAE Fundamentals'],
    ),
    'ahu_sizing': CalculatorDefinition(
        name='ahu_sizing',
        title='AHU Sizing',
        discipline='mvac',
        description='Airflow, capacities and fan power for an air handling unit',
        function=size_ahu,
        standards=['CIBSE Guide A', 'CIBSE Guide B'],
    ),
    'chilled_water_pipe': CalculatorDefinition(
        name='chilled_water_pipe',
        title='Chilled Water Pipe Sizing',
        discipline='mvac',
        description='Section losses, pump head and pump power for a chilled water circuit',
        function=chilled_water_pipe_sizing,
    ),
    'refrigerant_suction': CalculatorDefinition(
        name='refrigerant_suction',
        title='Refrigerant Suction Line',
        discipline='mvac',
        description='Copper suction line sizing for oil return and temperature penalty',
        function=suction_line,
        standards=['ASHRAE Refrigeration'],
    ),
    'refrigerant_liquid': CalculatorDefinition(
        name='refrigerant_liquid',
        title='Refrigerant Liquid Line',
        discipline='mvac',
        description='Copper liquid line sizing against flash gas and velocity limits',
        function=liquid_line,
        standards=['ASHRAE Refrigeration'],
    ),
    'refrigerant_discharge': CalculatorDefinition(
        name='refrigerant_discharge',
        title='Refrigerant Discharge Line',
        discipline='mvac',
        description='Copper hot gas line sizing for oil carry and noise',
        function=discharge_line,
        standards=['ASHRAE Refrigeration'],
    ),
    'steam_pipe': CalculatorDefinition(
        name='steam_pipe',
        title='Steam Pipe Sizing',
        discipline='mvac',
        description='Pressure drop and velocity checks for steam supply and condensate return',
        function=steam_pipe_sizing,
    ),
    'vibration_isolator': CalculatorDefinition(
        name='vibration_isolator',
        title='Vibration Isolator Sizing',
        discipline='mvac',
        description='Static deflection, spring rate and transmissibility for plant isolation mounts',
        function=size_isolators,
        standards=['ASHRAE Applications ch. 49'],
    ),
    'cable_sizing': CalculatorDefinition(
        name='cable_sizing',
        title='LV Cable Sizing',
        discipline='electrical',
        description='Copper cable size from derated current capacity and voltage drop',
        function=cable_sizing,
        standards=['BS 7671'],
    ),
    'circuit_protection': CalculatorDefinition(
        name='circuit_protection',
        title='Circuit Protection',
        discipline='electrical',
        description='End of line fault current, device disconnection time and cable thermal withstand',
        function=circuit_protection,
        standards=['BS 7671'],
    ),
    'power_factor_correction': CalculatorDefinition(
        name='power_factor_correction',
        title='Power Factor Correction',
        discipline='electrical',
        description='Capacitor kVAr to reach a target power factor allowing for harmonic distortion',
        function=power_factor_correction,
    ),
    'transformer_sizing': CalculatorDefinition(
        name='transformer_sizing',
        title='Transformer Sizing',
        discipline='electrical',
        description='Transformer loading, derating, regulation and motor starting dip',
        function=transformer_sizing,
        standards=['IEC 60076'],
    ),
    'generator_sizing': CalculatorDefinition(
        name='generator_sizing',
        title='Generator Sizing',
        discipline='electrical',
        description='Steady, step and transient loading checks for a standby generating set',
        function=generator_sizing,
        standards=['ISO 8528-5'],
    ),
    'ups_sizing': CalculatorDefinition(
        name='ups_sizing',
        title='UPS Battery Sizing',
        discipline='electrical',
        description='Battery watts per cell, DC breaker, charging current and battery room ventilation',
        function=ups_sizing,
        standards=['IEC 62040-3', 'EN 50272-2'],
    ),
    'sprinkler_pipe': CalculatorDefinition(
        name='sprinkler_pipe',
        title='Sprinkler Pipe Sizing',
        discipline='fire',
        description='Hazen-Williams friction loss and velocity limits for sprinkler pipework',
        function=sprinkler_pipe_sizing,
        standards=['BS EN 12845'],
    ),
    'sprinkler_tank': CalculatorDefinition(
        name='sprinkler_tank',
        title='Sprinkler Tank',
        discipline='fire',
        description='Water supply capacity, design density and pump characteristics for LH and OH installations',
        function=sprinkler_tank,
        standards=['BS EN 12845'],
    ),
    'fire_service_supply': CalculatorDefinition(
        name='fire_service_supply',
        title='Fire Service Supply Tank and Pumps',
        discipline='fire',
        description='Supply tank volume with fixed and intermediate booster pump criteria for hydrant systems',
        function=fire_service_supply,
    ),
    'medical_gas_pressure_drop': CalculatorDefinition(
        name='medical_gas_pressure_drop',
        title='Medical Gas Pressure Drop',
        discipline='medical_gas',
        description='Pressure loss from manufacturer tables for medical gas pipelines',
        function=medical_gas_pressure_drop,
        standards=['ISO 7396', 'HTM 02-01'],
    ),
    'medical_gas_design_flow': CalculatorDefinition(
        name='medical_gas_design_flow',
        title='Medical Gas Design Flow',
        discipline='medical_gas',
        description='Diversified design flows for oxygen, medical air, nitrous oxide, vacuum, AGSS and surgical air',
        function=design_flow,
        standards=['HTM 02-01'],
    ),
}


def get_calculator(name: str) -> CalculatorDefinition:
    """Get a calculator definition by name."""
    if name not in CALCULATORS:
        raise ValueError(f"Unknown calculator '{name}'. Available: {list(CALCULATORS.keys())}")
    return CALCULATORS[name]


def list_calculators(discipline: Optional[str] = None) -> List[Dict]:
    """List all calculators, optionally filtered by discipline."""
    result = []
    for calc in CALCULATORS.values():
        if discipline and calc.discipline != discipline:
            continue
        result.append({
            'name': calc.name,
            'title': calc.title,
            'discipline': calc.discipline,
            'description': calc.description,
            'standards': calc.standards or [],
        })
    return result


def run_calculator(name: str, params: Dict) -> Dict:
    """Run a calculator with keyword parameters."""
    return get_calculator(name).function(**params)
