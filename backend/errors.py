"""Run engine calculations and translate their errors into HTTP responses."""

import logging
from typing import Any, Callable

from fastapi import HTTPException

from mepcalc.validation import InputValidationError

logger = logging.getLogger(__name__)


def run_engine(label: str, fn: Callable[..., Any], *args, **kwargs) -> Any:
    """Call an engine function.

    InputValidationError becomes 422 with the message list, any other
    ValueError 400, and anything unexpected 500 with a generic detail.
    """
    try:
        return fn(*args, **kwargs)
    except InputValidationError as e:
        logger.info("%s rejected input: %s", label, e)
        raise HTTPException(status_code=422, detail=e.errors)
    except ValueError as e:
        logger.warning("%s failed: %s", label, e, exc_info=True)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.warning("%s raised unexpectedly", label, exc_info=True)
        raise HTTPException(status_code=500, detail=f"{label} failed")
