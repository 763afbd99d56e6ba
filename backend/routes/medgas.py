"""Medical gas routes."""

from fastapi import APIRouter, Query

from backend.errors import run_engine
from backend.models import GasDesignFlowRequest, MedicalGasId, MedicalGasRequest
from mepcalc.gas_flow import design_flow, list_departments
from mepcalc.medical_gas import medical_gas_pressure_drop, select_pressure_table

router = APIRouter()


@router.post("/medical-gas/pressure-drop")
async def pressure_drop(request: MedicalGasRequest):
    """Pipeline pressure drop scaled from the supplied loss tables."""
    return run_engine("Medical gas pressure drop", medical_gas_pressure_drop,
                      **request.model_dump(mode="json"))


@router.get("/medical-gas/pressure-class")
async def pressure_class(pressure: float = Query(..., gt=0, description="System pressure (kPa)")):
    return {"pressure": pressure, "pressure_table": select_pressure_table(pressure)}


@router.post("/medical-gas/design-flow")
async def gas_design_flow(request: GasDesignFlowRequest):
    """Diversified design flow for one gas service."""
    return run_engine("Medical gas design flow", design_flow, **request.model_dump(mode="json"))


@router.get("/medical-gas/departments/{gas}")
async def departments(gas: MedicalGasId):
    """Department types and diversity formulae for a gas."""
    return {"gas": gas.value, "departments": list_departments(gas.value)}
