"""Air-side routes: duct static pressure, psychrometrics, AHU sizing, vibration isolation."""

from typing import List, Optional

from fastapi import APIRouter, Query

from backend.errors import run_engine
from backend.models import (
    AHURequest,
    DuctRequest,
    DuctType,
    IsolatorRequest,
    ProcessRequest,
    StateRequest,
    TransmissionRequest,
)
from mepcalc.ahu import size_ahu
from mepcalc.duct import duct_static_pressure, select_duct_diameter
from mepcalc.psychrometrics import chart_curves, process, state_point
from mepcalc.vibration import size_isolators, transmission_analysis

router = APIRouter()


@router.post("/air/duct-static-pressure")
async def calculate_duct_static_pressure(request: DuctRequest):
    """Section and system static pressure for a duct run."""
    params = request.model_dump(mode="json")
    return run_engine("Duct static pressure", duct_static_pressure, **params)


@router.get("/air/duct-size")
async def duct_size(
    flow_rate: float = Query(..., gt=0, description="Air flow rate (m³/h)"),
    duct_type: DuctType = Query(DuctType.MAIN),
):
    """Smallest standard round duct within the velocity limit."""
    diameter = run_engine("Duct selection", select_duct_diameter, flow_rate, duct_type.value)
    return {"flow_rate": flow_rate, "duct_type": duct_type.value, "diameter": diameter}


@router.post("/air/psychrometrics/state")
async def psychrometric_state(request: StateRequest):
    return run_engine("Psychrometric state", state_point, **request.model_dump(mode="json"))


@router.post("/air/psychrometrics/process")
async def psychrometric_process(request: ProcessRequest):
    """Energy and moisture balance between two air states."""
    return run_engine("Psychrometric process", process, **request.model_dump(mode="json"))


@router.get("/air/psychrometrics/chart")
async def psychrometric_chart(
    pressure: float = Query(101.325, gt=0, description="Barometric pressure (kPa)"),
    t_min: float = Query(0, ge=-50, le=100),
    t_max: float = Query(50, ge=-50, le=100),
    rh: Optional[List[float]] = Query(None, description="Relative humidity curves (%)"),
):
    """Constant-RH curves for drawing a chart."""
    return run_engine("Psychrometric chart", chart_curves, pressure, t_min, t_max, rh)


@router.post("/air/ahu-sizing")
async def ahu_sizing(request: AHURequest):
    """Airflow, capacities and CIBSE compliance for an AHU."""
    return run_engine("AHU sizing", size_ahu, **request.model_dump(mode="json"))


@router.post("/air/vibration/isolators")
async def vibration_isolators(request: IsolatorRequest):
    """Static deflection and spring rate for a target isolation efficiency."""
    return run_engine("Isolator sizing", size_isolators, **request.model_dump(mode="json"))


@router.post("/air/vibration/transmission")
async def vibration_transmission(request: TransmissionRequest):
    return run_engine("Transmission analysis", transmission_analysis, **request.model_dump(mode="json"))
