"""Piping routes: chilled water, refrigerant lines and steam."""

from fastapi import APIRouter, HTTPException, Query

from backend.errors import run_engine
from backend.models import (
    ChilledWaterRequest,
    DischargeLineRequest,
    LiquidLineRequest,
    PipeType,
    SteamRequest,
    SuctionLineRequest,
)
from mepcalc.hydronic import chilled_water_pipe_sizing, select_pipe_size
from mepcalc.refrigerant import discharge_line, liquid_line, suction_line
from mepcalc.steam import steam_pipe_sizing

router = APIRouter()


@router.post("/piping/chilled-water")
async def chilled_water(request: ChilledWaterRequest):
    """Section losses, pump head and pump power."""
    params = request.model_dump(mode="json")
    return run_engine("Chilled water sizing", chilled_water_pipe_sizing, **params)


@router.get("/piping/chilled-water/pipe-size")
async def chilled_water_pipe_size(
    flow_rate: float = Query(..., gt=0, description="Flow rate (l/s)"),
    material: str = Query("steel"),
    pipe_type: PipeType = Query(PipeType.MAIN),
):
    """Smallest nominal size within the velocity limit."""
    chosen = run_engine("Pipe selection", select_pipe_size, flow_rate, material, pipe_type.value)
    if chosen is None:
        raise HTTPException(status_code=404, detail="No standard pipe size is large enough for this flow")
    return chosen


@router.post("/piping/refrigerant/suction")
async def refrigerant_suction(request: SuctionLineRequest):
    return run_engine("Suction line sizing", suction_line, **request.model_dump(mode="json"))


@router.post("/piping/refrigerant/liquid")
async def refrigerant_liquid(request: LiquidLineRequest):
    return run_engine("Liquid line sizing", liquid_line, **request.model_dump(mode="json"))


@router.post("/piping/refrigerant/discharge")
async def refrigerant_discharge(request: DischargeLineRequest):
    return run_engine("Discharge line sizing", discharge_line, **request.model_dump(mode="json"))


@router.post("/piping/steam")
async def steam(request: SteamRequest):
    """Size each steam segment and total the system pressure drop."""
    return run_engine("Steam pipe sizing", steam_pipe_sizing, **request.model_dump(mode="json"))
