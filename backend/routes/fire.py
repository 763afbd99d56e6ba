"""Fire protection routes."""

from fastapi import APIRouter

from backend.errors import run_engine
from backend.models import FireSupplyRequest, SprinklerRequest, SprinklerTankRequest
from mepcalc.fire_supply import fire_service_supply, sprinkler_tank
from mepcalc.sprinkler import sprinkler_pipe_sizing

router = APIRouter()


@router.post("/fire/sprinkler")
async def sprinkler(request: SprinklerRequest):
    """BS EN 12845 friction loss and velocity check for a sprinkler run."""
    return run_engine("Sprinkler pipe sizing", sprinkler_pipe_sizing, **request.model_dump(mode="json"))


@router.post("/fire/sprinkler-tank")
async def sprinkler_tank_sizing(request: SprinklerTankRequest):
    """Water supply, density and pump duty for a pre-calculated installation."""
    return run_engine("Sprinkler tank", sprinkler_tank, **request.model_dump(mode="json"))


@router.post("/fire/supply")
async def fire_supply(request: FireSupplyRequest):
    """Supply tank with fixed and booster pump criteria for hydrants and hose reels."""
    return run_engine("Fire service supply", fire_service_supply, **request.model_dump(mode="json"))
