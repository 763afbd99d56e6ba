"""Export routes: calculation results as CSV, JSON or plain text."""

import inspect
import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

from backend.errors import run_engine
from backend.models import ExportFormat, ExportRequest
from mepcalc.export import ExportData, export

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/export/{fmt}")
async def export_results(request: Request, fmt: ExportFormat, body: ExportRequest):
    """Render results as a downloadable file.

    When ``results`` is omitted the named calculator is run with ``inputs``
    first.
    """
    calc = None
    if body.calculator:
        calc = request.app.state.calculators.get(body.calculator)
        if calc is None:
            raise HTTPException(status_code=404, detail="Calculator not found")

    results = body.results
    if results is None:
        if calc is None:
            raise HTTPException(status_code=400, detail="Either results or a calculator to run is required")
        try:
            inspect.signature(calc.function).bind(**body.inputs)
        except TypeError as e:
            raise HTTPException(status_code=400, detail=f"Invalid inputs for {calc.name}: {e}")
        results = run_engine(calc.title, calc.function, **body.inputs)

    data = ExportData(
        title=body.title,
        calculator_name=body.calculator_name or (calc.title if calc else body.title),
        discipline=body.discipline or (calc.discipline if calc else ""),
        inputs=body.inputs,
        results=results,
        project_name=body.project_name,
        notes=body.notes,
    )
    rendered = run_engine("Export", export, data, fmt.value)
    logger.info("Exported %r as %s", body.title, fmt.value)
    return Response(
        content=rendered["content"],
        media_type=rendered["media_type"],
        headers={"Content-Disposition": f'attachment; filename="{rendered["filename"]}"'},
    )
