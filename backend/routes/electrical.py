"""Electrical routes: LV cables, protection, power factor, transformers, generators, UPS."""

from fastapi import APIRouter, Query

from backend.errors import run_engine
from backend.models import (
    BatteryKind,
    CableRequest,
    ChargeMode,
    GeneratorRequest,
    PowerFactorRequest,
    ProtectionRequest,
    TransformerRequest,
    UPSRequest,
)
from mepcalc.cable import cable_sizing, circuit_protection
from mepcalc.power import generator_sizing, power_factor_correction, transformer_sizing
from mepcalc.ups import battery_ventilation, ups_sizing

router = APIRouter()


@router.post("/electrical/cable-sizing")
async def size_cable(request: CableRequest):
    """Smallest copper cable meeting current capacity and voltage drop."""
    return run_engine("Cable sizing", cable_sizing, **request.model_dump(mode="json"))


@router.post("/electrical/circuit-protection")
async def protection(request: ProtectionRequest):
    return run_engine("Circuit protection", circuit_protection, **request.model_dump(mode="json"))


@router.post("/electrical/power-factor")
async def power_factor(request: PowerFactorRequest):
    """Capacitor bank for power factor correction."""
    return run_engine("Power factor correction", power_factor_correction, **request.model_dump(mode="json"))


@router.post("/electrical/transformer")
async def transformer(request: TransformerRequest):
    """Transformer loading, derating and regulation."""
    return run_engine("Transformer sizing", transformer_sizing, **request.model_dump(mode="json"))


@router.post("/electrical/generator")
async def generator(request: GeneratorRequest):
    """Generator steady, step and transient load checks."""
    return run_engine("Generator sizing", generator_sizing, **request.model_dump(mode="json"))


@router.post("/electrical/ups")
async def ups(request: UPSRequest):
    return run_engine("UPS sizing", ups_sizing, **request.model_dump(mode="json"))


@router.get("/electrical/battery-ventilation")
async def ventilation(
    battery_type: BatteryKind = Query(BatteryKind.VRLA),
    charge_mode: ChargeMode = Query(ChargeMode.BOOST),
    cells: int = Query(120, ge=1, description="Cells per string"),
    capacity: float = Query(100.0, gt=0, description="Capacity per string (Ah)"),
    strings: int = Query(1, ge=1),
    room_area: float = Query(20.0, gt=0, description="Battery room floor area (m²)"),
):
    """Battery room air flow for hydrogen dilution."""
    return run_engine("Battery ventilation", battery_ventilation, battery_type.value, charge_mode.value,
                      cells, capacity, strings, room_area)
