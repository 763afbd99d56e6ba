"""Library routes: calculators and reference tables."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from backend.models import CalculatorInfo, CalculatorListResponse
from mepcalc.registry import DISCIPLINES, list_calculators
from mepcalc.tables import (
    COPPER_TUBE_SIZES,
    DUCT_FITTINGS_K,
    DUCT_MATERIALS,
    DUCT_ROUND_SIZES,
    HAZEN_WILLIAMS_C,
    NOMINAL_SIZE_LABELS,
    PIPE_FITTINGS,
    PIPE_MATERIALS,
    REFRIGERANTS,
    SPRINKLER_FITTINGS,
    STEAM_FITTINGS_LD,
    STEAM_MATERIALS,
    list_space_types,
)

router = APIRouter()


@router.get("/library/calculators", response_model=CalculatorListResponse)
async def calculators(discipline: Optional[str] = Query(None, description="mvac, electrical, fire or medical_gas")):
    """List the available calculators."""
    if discipline and discipline not in DISCIPLINES:
        raise HTTPException(status_code=400, detail=f"Unknown discipline. Available: {DISCIPLINES}")
    items = [CalculatorInfo(**c) for c in list_calculators(discipline)]
    return CalculatorListResponse(calculators=items, total=len(items))


@router.get("/library/calculators/{name}", response_model=CalculatorInfo)
async def calculator_detail(request: Request, name: str):
    calc = request.app.state.calculators.get(name)
    if calc is None:
        raise HTTPException(status_code=404, detail="Calculator not found")
    return CalculatorInfo(
        name=calc.name,
        title=calc.title,
        discipline=calc.discipline,
        description=calc.description,
        standards=calc.standards or [],
    )


@router.get("/library/duct")
async def duct_library():
    """Duct materials, fitting K values and standard round sizes."""
    return {
        "materials": [{"id": m.id, "name": m.name, "roughness": m.roughness} for m in DUCT_MATERIALS.values()],
        "fittings": [{"id": k, "loss_coefficient": v} for k, v in DUCT_FITTINGS_K.items()],
        "round_sizes": DUCT_ROUND_SIZES,
    }


@router.get("/library/pipe")
async def pipe_library():
    """Hydronic pipe materials with inner diameter schedules, and fittings."""
    materials = [
        {
            "id": m.id,
            "name": m.name,
            "roughness": m.roughness,
            "sizes": [
                {"nominal_size": n, "label": NOMINAL_SIZE_LABELS[n], "inner_diameter": d}
                for n, d in m.inner_diameters.items()
            ],
        }
        for m in PIPE_MATERIALS.values()
    ]
    fittings = [{"id": f.id, "name": f.name, "k": f.k} for f in PIPE_FITTINGS.values()]
    return {"materials": materials, "fittings": fittings}


@router.get("/library/refrigerants")
async def refrigerants():
    return {
        "refrigerants": [{"id": r.id, "name": r.name, "typical_cop": r.typical_cop} for r in REFRIGERANTS.values()],
        "tube_sizes": [{"label": t.label, "od": t.od, "id": t.id} for t in COPPER_TUBE_SIZES],
    }


@router.get("/library/steam")
async def steam_library():
    return {
        "materials": [{"id": m.id, "name": m.name, "roughness": m.roughness} for m in STEAM_MATERIALS.values()],
        "fittings": [{"id": k, "equivalent_diameters": v} for k, v in STEAM_FITTINGS_LD.items()],
    }


@router.get("/library/sprinkler")
async def sprinkler_library():
    """BS EN 12845 Table 23 fittings and Hazen-Williams C values."""
    return {
        "fittings": [
            {"type": name, "equivalent_length": {str(d): v for d, v in row.items()}}
            for name, row in SPRINKLER_FITTINGS.items()
        ],
        "hazen_williams_c": HAZEN_WILLIAMS_C,
    }


@router.get("/library/space-types")
async def space_types(category: Optional[str] = Query(None, description="e.g. Office, Healthcare")):
    items = list_space_types(category)
    return {"space_types": items, "total": len(items)}
