"""Pydantic models for MEPCalc API requests and responses."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# --- Enums ---

class DuctType(str, Enum):
    MAIN = "main"
    BRANCH = "branch"


class PipeType(str, Enum):
    MAIN = "main"
    BRANCH = "branch"
    CONNECTION = "connection"


class FittingMethod(str, Enum):
    K_VALUE = "kValue"
    DIRECT = "direct"


class ProcessType(str, Enum):
    HEATING = "heating"
    COOLING = "cooling"
    HUMIDIFICATION = "humidification"
    DEHUMIDIFICATION = "dehumidification"
    MIXING = "mixing"
    CUSTOM = "custom"


class RefrigerantId(str, Enum):
    R410A = "R410A"
    R134A = "R134A"
    R22 = "R22"
    R32 = "R32"


class SteamSegmentType(str, Enum):
    SUPPLY = "supply"
    RETURN = "return"


class CoolingLoadMethod(str, Enum):
    CALCULATED = "calculated"
    STANDARD = "standard"
    MANUAL = "manual"


class MedicalGasId(str, Enum):
    OXYGEN = "oxygen"
    MEDICAL_AIR = "medical_air"
    NITROUS_OXIDE = "nitrous_oxide"
    VACUUM = "vacuum"
    AGSS = "agss"
    SURGICAL_AIR = "surgical_air"


class EquipmentType(str, Enum):
    CENTRIFUGAL_FAN = "centrifugal_fan"
    AXIAL_FAN = "axial_fan"
    CENTRIFUGAL_CHILLER = "centrifugal_chiller"
    SCREW_CHILLER = "screw_chiller"
    CENTRIFUGAL_PUMP = "centrifugal_pump"
    COOLING_TOWER = "cooling_tower"
    AHU = "ahu"
    COMPRESSOR = "compressor"
    CUSTOM = "custom"


class IsolatorKind(str, Enum):
    SPRING = "spring"
    RUBBER = "rubber"
    AIR_SPRING = "air_spring"
    COMPOSITE = "composite"


class BuildingCategory(str, Enum):
    INDUSTRIAL = "industrial"
    DOMESTIC = "domestic"
    OTHER = "other"


class HazardGroup(str, Enum):
    LH = "LH"
    OH1 = "OH1"
    OH2 = "OH2"
    OH3 = "OH3"
    OH4 = "OH4"


class InstallationType(str, Enum):
    WET = "wet"
    PRE_ACTION = "pre-action"
    DRY = "dry"
    ALTERNATE = "alternate"


class Insulation(str, Enum):
    PVC = "pvc"
    XLPE = "xlpe"


class InstallationMethod(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    E = "E"


class SystemType(str, Enum):
    AC = "ac"
    DC = "dc"


class ProtectiveDevice(str, Enum):
    MCB = "mcb"
    MCCB = "mccb"
    FUSE = "fuse"


class StartingMethod(str, Enum):
    DOL = "dol"
    STAR_DELTA = "star_delta"
    SOFT_STARTER = "soft_starter"
    VSD = "vsd"
    NONE = "none"


class Phase(str, Enum):
    SINGLE = "single"
    THREE = "three"


class BatteryKind(str, Enum):
    VENTED = "vented"
    VRLA = "vrla"
    NICD = "nicd"


class ChargeMode(str, Enum):
    FLOAT = "float"
    BOOST = "boost"


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
    TEXT = "text"


# --- Ductwork ---

class DuctFitting(BaseModel):
    type: str = Field("elbow90", description="Fitting id from the duct fitting library")
    method: FittingMethod = FittingMethod.K_VALUE
    loss_coefficient: Optional[float] = Field(None, ge=0, description="Override K value")
    direct_pressure_drop: float = Field(0.0, ge=0, description="Pressure drop per fitting (Pa)")
    quantity: int = Field(1, ge=1)


class DuctSection(BaseModel):
    name: str = ""
    type: DuctType = DuctType.MAIN
    length: float = Field(..., ge=0, description="Section length (m)")
    flow_rate: float = Field(..., gt=0, description="Air flow rate (m³/h)")
    is_circular: bool = True
    diameter: float = Field(0.0, ge=0, description="Round duct diameter (mm)")
    width: float = Field(0.0, ge=0, description="Rectangular duct width (mm)")
    height: float = Field(0.0, ge=0, description="Rectangular duct height (mm)")
    material: str = "galvanizedSteel"
    material_roughness: Optional[float] = Field(None, ge=0, description="Absolute roughness (mm)")
    fittings: List[DuctFitting] = []


class DuctRequest(BaseModel):
    sections: List[DuctSection] = Field(..., min_length=1)
    air_temperature: float = Field(20.0, ge=-50, le=100, description="Air temperature (°C)")
    elevation: float = Field(0.0, ge=-500, le=9000, description="Site elevation (m)")
    safety_factor: float = Field(1.3, ge=1.0)


# --- Psychrometrics ---

class StateRequest(BaseModel):
    dry_bulb: float = Field(..., ge=-50, le=100, description="Dry bulb temperature (°C)")
    relative_humidity: float = Field(..., ge=0, le=100, description="Relative humidity (%)")
    pressure: float = Field(101.325, gt=0, description="Barometric pressure (kPa)")


class AirState(BaseModel):
    dry_bulb: float = Field(..., ge=-50, le=100, description="Dry bulb temperature (°C)")
    relative_humidity: float = Field(..., ge=0, le=100, description="Relative humidity (%)")
    name: Optional[str] = None


class ProcessRequest(BaseModel):
    start: AirState
    end: AirState
    process_type: ProcessType
    mass_flow: float = Field(1.0, gt=0, description="Dry air mass flow (kg/s)")
    mixing_ratio: float = Field(0.5, ge=0, le=1, description="Fraction of the start stream")
    sensible_heat_ratio: Optional[float] = Field(None, ge=0, le=1)
    pressure: float = Field(101.325, gt=0, description="Barometric pressure (kPa)")


# --- AHU sizing ---

class Space(BaseModel):
    name: str = "Space"
    area: float = Field(..., description="Floor area (m²)")
    height: float = Field(..., description="Ceiling height (m)")
    occupants: int = 0
    space_type: str = "officeOpen"
    activity_level: str = "lightOffice"
    internal_gain: float = Field(25.0, ge=0, description="Equipment and lighting gain (W/m²)")
    solar_gain: float = Field(40.0, ge=0, description="Solar gain through glazing (W/m²)")
    orientation: str = "south"
    glazing_percentage: float = Field(30.0, ge=0, le=100)
    insulation_level: str = "medium"
    ventilation_strategy: str = "mixing"
    cooling_load_method: CoolingLoadMethod = CoolingLoadMethod.CALCULATED
    manual_cooling_load: float = Field(0.0, description="Manual cooling load (W)")
    minimum_total_ach: Optional[float] = None
    minimum_fresh_ach: Optional[float] = None


class ExternalConditions(BaseModel):
    dry_bulb: float = Field(..., description="Summer design dry bulb (°C)")
    wet_bulb: float = Field(..., description="Summer design wet bulb (°C)")
    altitude: float = Field(0.0, ge=-500, le=9000, description="Site altitude (m)")


class InternalConditions(BaseModel):
    dry_bulb: float = Field(22.0, description="Room dry bulb (°C)")
    rel_humidity: float = Field(50.0, ge=0, le=100, description="Room relative humidity (%)")
    fresh_air_boost: float = Field(0.0, ge=0, description="Fresh air allowance above minimum (%)")


class AHURequest(BaseModel):
    spaces: List[Space]
    external: ExternalConditions
    internal: InternalConditions = InternalConditions()
    sfp_target: float = Field(1.8, gt=0, description="Specific fan power (W/(l/s))")
    safety_factor: float = 1.2
    heat_recovery: bool = True
    heat_recovery_efficiency: float = Field(75.0, ge=0, le=100, description="Heat recovery efficiency (%)")


# --- Vibration ---

class IsolatorRequest(BaseModel):
    equipment_type: EquipmentType = EquipmentType.CENTRIFUGAL_FAN
    weight: float = Field(500.0, gt=0, description="Operating weight (kg)")
    rpm: Optional[float] = Field(None, gt=0, description="Running speed, defaults to the equipment type")
    isolators: int = Field(4, ge=1)
    efficiency: float = Field(90.0, gt=0, lt=100, description="Target isolation efficiency (%)")
    isolator_type: IsolatorKind = IsolatorKind.SPRING
    damping_ratio: Optional[float] = Field(None, ge=0, le=1)


class TransmissionRequest(BaseModel):
    natural_frequency: float = Field(5.0, gt=0, description="Mounted natural frequency (Hz)")
    damping_ratio: float = Field(0.05, ge=0, le=1)
    f_min: float = Field(1.0, gt=0, description="Sweep start (Hz)")
    f_max: float = Field(50.0, gt=0, description="Sweep end (Hz)")
    operating_frequencies: List[float] = Field([10.0, 20.0, 30.0], description="Disturbing frequencies (Hz)")


# --- Chilled water ---

class PipeFitting(BaseModel):
    type: str = Field("elbow90stdThreaded", description="Fitting id from the pipe fitting library")
    method: FittingMethod = FittingMethod.K_VALUE
    loss_coefficient: Optional[float] = Field(None, ge=0, description="Override K value")
    direct_pressure_drop: float = Field(0.0, ge=0, description="Pressure drop per fitting (Pa)")
    quantity: int = Field(1, ge=1)


class PipeSection(BaseModel):
    name: str = ""
    type: PipeType = PipeType.MAIN
    length: float = Field(..., ge=0, description="Section length (m)")
    diameter: float = Field(1.5, gt=0, description="Nominal pipe size (inch)")
    material: str = "steel"
    material_roughness: Optional[float] = Field(None, ge=0, description="Absolute roughness (mm)")
    inner_diameter: Optional[float] = Field(None, gt=0, description="Inner diameter override (mm)")
    flow_rate: Optional[float] = Field(None, ge=0, description="Section flow rate (l/s)")
    fittings: List[PipeFitting] = []


class ChilledWaterRequest(BaseModel):
    sections: List[PipeSection] = Field(..., min_length=1)
    water_temperature: float = Field(7.0, ge=-10, le=30, description="Supply temperature (°C)")
    glycol_percentage: float = Field(0.0, ge=0, le=100)
    safety_factor: float = Field(1.2, ge=1.0)
    pump_efficiency: float = Field(0.7, gt=0, le=1)
    cooling_load: Optional[float] = Field(None, ge=0, description="System cooling load (kW)")
    temperature_drop: float = Field(5.5, gt=0, description="Design ΔT (K)")
    system_flow_rate: Optional[float] = Field(None, gt=0, description="Manual system flow (l/s)")


# --- Refrigerant ---

class RefrigerantLineBase(BaseModel):
    refrigerant: RefrigerantId = RefrigerantId.R410A
    capacity: float = Field(10.0, gt=0, description="Cooling capacity (kW)")
    evaporating_temp: float = Field(5.0, description="Evaporating temperature (°C)")
    pipe_length: float = Field(15.0, ge=0, description="Straight length (m)")
    equivalent_length: float = Field(5.0, ge=0, description="Fittings equivalent length (m)")
    vertical_rise: float = Field(0.0, description="Vertical rise (m)")


class SuctionLineRequest(RefrigerantLineBase):
    superheat: float = Field(5.0, ge=0, description="Suction superheat (K)")
    max_temp_drop: float = Field(0.5, gt=0, description="Allowed saturation temperature loss (K)")
    max_velocity: float = Field(20.0, gt=0)
    min_velocity: float = Field(7.0, ge=0)


class LiquidLineRequest(RefrigerantLineBase):
    condensing_temp: float = Field(40.0, description="Condensing temperature (°C)")
    subcooling: float = Field(5.0, ge=0, description="Liquid subcooling (K)")
    max_velocity: float = Field(1.5, gt=0)


class DischargeLineRequest(RefrigerantLineBase):
    pipe_length: float = Field(5.0, ge=0, description="Straight length (m)")
    equivalent_length: float = Field(2.0, ge=0, description="Fittings equivalent length (m)")
    discharge_temp: float = Field(80.0, description="Compressor discharge temperature (°C)")
    condensing_temp: float = Field(40.0, description="Condensing temperature (°C)")
    max_velocity: float = Field(25.0, gt=0)
    min_velocity: float = Field(7.0, ge=0)


# --- Steam ---

class SteamFitting(BaseModel):
    type: str = Field("elbow_90", description="Fitting id, or a label for custom fittings")
    quantity: int = Field(1, ge=1)
    is_custom: bool = False
    equivalent_length: Optional[float] = Field(
        None, ge=0, description="L/D for standard fittings, metres for custom ones")


class SteamSegment(BaseModel):
    name: str = ""
    flow_rate: float = Field(..., ge=0, description="Steam mass flow (kg/h)")
    length: float = Field(..., ge=0, description="Segment length (m)")
    type: SteamSegmentType = SteamSegmentType.SUPPLY
    material: str = "carbon_steel"
    roughness: Optional[float] = Field(None, ge=0, description="Absolute roughness (mm)")
    elevation_change: float = Field(0.0, description="Rise along the segment (m)")
    fittings: List[SteamFitting] = []


class SteamRequest(BaseModel):
    segments: List[SteamSegment] = Field(..., min_length=1)
    pressure: float = Field(5.0, gt=0, description="Steam pressure (bar g)")
    temperature: float = Field(160.0, description="Steam temperature (°C)")
    quality: float = Field(1.0, ge=0, le=1, description="Dryness fraction")
    superheated: bool = True
    allowable_pressure_drop: float = Field(5.0, gt=0, description="% of gauge pressure per 100 m")
    safety_factor: float = Field(1.2, ge=1.0)


# --- Sprinkler ---

class SprinklerFitting(BaseModel):
    type: str = Field(..., description="BS EN 12845 Table 23 fitting name")
    quantity: int = Field(1, ge=1)


class SprinklerSegment(BaseModel):
    name: str = ""
    length: float = Field(..., ge=0, description="Pipe length (m)")
    diameter: float = Field(..., gt=0, description="Internal diameter (mm)")
    flow_rate: float = Field(..., ge=0, description="Flow rate (L/min)")
    c: int = Field(120, gt=0, description="Hazen-Williams C")
    static_head: float = Field(0.0, description="Height difference (m)")
    fittings: List[SprinklerFitting] = []


class SprinklerRequest(BaseModel):
    segments: List[SprinklerSegment] = Field(..., min_length=1)
    max_allowable_pressure_loss: float = Field(0.5, gt=0, description="Friction limit (bar)")


class FireSupplyRequest(BaseModel):
    largest_floor_area: float = Field(1000.0, gt=0, description="Largest single floor area (m²)")
    building_type: BuildingCategory = BuildingCategory.OTHER
    building_height: Optional[float] = Field(None, ge=0, description="Building height (m)")
    risers: int = Field(1, ge=1)


class SprinklerTankRequest(BaseModel):
    hazard_group: HazardGroup = HazardGroup.OH3
    installation_type: InstallationType = InstallationType.WET
    height: float = Field(15.0, ge=0, le=45, description="Height of the highest sprinkler (m)")


# --- Medical gas ---

class MedicalGasFitting(BaseModel):
    type: str
    diameter: float = Field(..., gt=0, description="Pipe OD (mm)")
    quantity: int = Field(1, ge=1)


class MedicalGasSection(BaseModel):
    name: str = ""
    diameter: float = Field(..., gt=0, description="Pipe OD (mm)")
    length: float = Field(..., gt=0, description="Pipe length (m)")
    flow_rate: float = Field(..., gt=0, description="Design flow (L/min)")
    pressure: float = Field(..., gt=0, description="System pressure (kPa)")
    fittings: List[MedicalGasFitting] = []


class MedicalGasRequest(BaseModel):
    sections: List[MedicalGasSection] = Field(..., min_length=1)
    tables: Dict[str, Dict[str, Dict[str, Dict[str, float]]]] = Field(
        ..., description="Pressure class → diameter → distance → {pressure loss: flow}")
    fittings_data: Optional[Dict[str, Dict[str, float]]] = Field(
        None, description="Fitting type → diameter → equivalent length (m)")
    safety_factor: float = Field(1.3, ge=1.0)


class GasRoom(BaseModel):
    name: str = ""
    department: str = Field(..., description="Department id, see /medical-gas/departments/{gas}")
    terminals: int = Field(1, ge=1, description="Terminals, beds or units in one room")
    rooms: int = Field(1, ge=1, description="Rooms of this type")


class GasDesignFlowRequest(BaseModel):
    gas: MedicalGasId
    rooms: List[GasRoom] = Field(..., min_length=1)
    safety_factor: float = Field(1.3, ge=1.0)
    disposal_flow: int = Field(130, description="AGSS disposal flow V, 130 or 80 L/min")


# --- Electrical ---

class CableRequest(BaseModel):
    design_current: float = Field(..., gt=0, description="Design current Ib (A)")
    length: float = Field(..., gt=0, description="Route length (m)")
    ambient_temperature: float = Field(30.0, ge=-10, le=90, description="Ambient temperature (°C)")
    insulation: Insulation = Insulation.PVC
    installation_method: InstallationMethod = InstallationMethod.C
    loaded_conductors: int = Field(3, ge=2, le=3)
    circuits: int = Field(1, ge=1, description="Circuits grouped together")
    system_voltage: float = Field(400.0, gt=0, description="Nominal voltage (V)")
    max_voltage_drop: float = Field(4.0, gt=0, le=100, description="Voltage drop limit (%)")
    system_type: SystemType = SystemType.AC


class ProtectionRequest(BaseModel):
    fault_level: float = Field(5000.0, gt=0, description="Prospective fault current (A)")
    device_rating: float = Field(400.0, gt=0, description="Device rating In (A)")
    device_type: ProtectiveDevice = ProtectiveDevice.MCCB
    cable_csa: float = Field(120.0, gt=0, description="Conductor size (mm²)")
    cable_length: float = Field(80.0, gt=0, description="Cable length (m)")
    disconnection_time: float = Field(0.4, gt=0, description="Maximum disconnection time (s)")
    insulation: Insulation = Insulation.XLPE


class PowerFactorRequest(BaseModel):
    load_power: float = Field(1000.0, gt=0, description="Active power (kW)")
    initial_power_factor: float = Field(0.7, gt=0, le=1)
    target_power_factor: float = Field(0.85, gt=0, le=1)
    harmonic_distortion: float = Field(5.0, ge=0, le=200, description="Current THD (%)")


class TransformerLoad(BaseModel):
    name: str = ""
    power: float = Field(..., ge=0, description="Rated power (kW)")
    power_factor: float = Field(0.85, gt=0, le=1)
    quantity: int = Field(1, ge=1)
    load_factor: float = Field(1.0, ge=0, le=1)
    demand_factor: float = Field(1.0, ge=0, le=1)
    harmonic_content: float = Field(0.0, ge=0, le=100, description="THD (%)")
    phase: Phase = Phase.THREE
    starting_method: StartingMethod = StartingMethod.NONE


class TransformerRequest(BaseModel):
    loads: List[TransformerLoad] = Field(..., min_length=1)
    rating: float = Field(1000.0, gt=0, description="Transformer rating (kVA)")
    primary_voltage: float = Field(11000.0, gt=0, description="Primary line voltage (V)")
    secondary_voltage: float = Field(380.0, gt=0, description="Secondary line voltage (V)")
    impedance: float = Field(5.0, gt=0, le=25, description="Impedance (%)")
    ambient_temperature: float = Field(40.0, description="Ambient temperature (°C)")
    altitude: float = Field(0.0, ge=0, description="Site altitude (m)")
    k_factor: float = Field(1.0, ge=1)
    efficiency: float = Field(98.5, gt=0, le=100, description="Efficiency (%)")


class GeneratorLoad(BaseModel):
    name: str = ""
    steady_kw: float = Field(..., ge=0, description="Running load (kW)")
    power_factor: float = Field(0.8, gt=0, le=1)
    starting_method: StartingMethod = StartingMethod.NONE
    step: int = Field(1, ge=1, description="Load step the item is switched on in")


class GeneratorRequest(BaseModel):
    loads: List[GeneratorLoad] = Field(..., min_length=1)
    rating_kva: float = Field(1000.0, gt=0, description="Generator rating (kVA)")
    power_factor: float = Field(0.8, gt=0, le=1)
    step_acceptance: float = Field(60.0, gt=0, le=100, description="Step load acceptance (% of kW)")
    max_voltage_dip: float = Field(20.0, gt=0, le=100, description="Allowed transient dip (%)")
    steps: Optional[int] = Field(None, ge=1)


class UPSRequest(BaseModel):
    rating: float = Field(100.0, gt=0, description="UPS rating (kVA)")
    power_factor: float = Field(0.85, gt=0, le=1)
    efficiency: float = Field(0.95, gt=0, le=1, description="Inverter efficiency")
    block_voltage: float = Field(12.0, gt=0, description="Battery block voltage (V)")
    strings: int = Field(1, ge=1)
    blocks_per_string: int = Field(34, ge=1)
    battery_type: BatteryKind = BatteryKind.VRLA
    charge_mode: ChargeMode = ChargeMode.BOOST
    capacity: float = Field(100.0, gt=0, description="Capacity per string (Ah)")
    room_area: float = Field(20.0, gt=0, description="Battery room floor area (m²)")
    charging_efficiency: float = Field(0.85, gt=0, le=1)
    recharge_time: float = Field(10.0, gt=0, description="Recharge time (h)")


# --- Library ---

class CalculatorInfo(BaseModel):
    name: str
    title: str
    discipline: str
    description: str
    standards: List[str] = []


class CalculatorListResponse(BaseModel):
    calculators: List[CalculatorInfo]
    total: int


# --- Export ---

class ExportRequest(BaseModel):
    title: str = Field(..., min_length=1)
    calculator: Optional[str] = Field(
        None, description="Registered calculator; runs it with inputs when results are omitted")
    calculator_name: Optional[str] = None
    discipline: Optional[str] = None
    inputs: Dict[str, Any] = {}
    results: Optional[Dict[str, Any]] = None
    project_name: Optional[str] = None
    notes: Optional[str] = None
