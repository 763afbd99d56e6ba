"""
MEPCalc Compute Engine

Building services calculations: duct and pipe pressure drop,
psychrometrics, AHU sizing, vibration isolation, refrigerant and steam pipe
sizing, LV cables and power supplies, sprinkler friction loss and water
supplies, medical gas design flow and pressure loss.

Every calculation is a pure function of its inputs.
"""

from mepcalc.units import convert_pressure
from mepcalc.fluids import haaland_friction, swamee_jain_friction, air_density_at_elevation
from mepcalc.psychrometrics import state_point, process, chart_curves, wet_bulb
from mepcalc.duct import duct_static_pressure, select_duct_diameter
from mepcalc.hydronic import chilled_water_pipe_sizing, select_pipe_size
from mepcalc.refrigerant import suction_line, liquid_line, discharge_line
from mepcalc.steam import steam_pipe_sizing, steam_properties
from mepcalc.sprinkler import sprinkler_pipe_sizing
from mepcalc.fire_supply import fire_service_supply, sprinkler_tank
from mepcalc.medical_gas import medical_gas_pressure_drop, interpolate_table
from mepcalc.gas_flow import design_flow
from mepcalc.ahu import size_ahu
from mepcalc.vibration import size_isolators, transmission_analysis
from mepcalc.cable import cable_sizing, circuit_protection
from mepcalc.power import power_factor_correction, transformer_sizing, generator_sizing
from mepcalc.ups import ups_sizing, battery_ventilation
from mepcalc.validation import InputValidationError, require_valid, validate_field, validate_form
from mepcalc.export import ExportData, export_csv, export_json, export_text
from mepcalc.registry import CalculatorDefinition, get_calculator, list_calculators, run_calculator

__version__ = "0.1.0"
