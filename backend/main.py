"""MEPCalc backend: FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend import config
from backend.middleware.rate_limit import RateLimitMiddleware
from backend.routes import air, electrical, export, fire, library, medgas, piping

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    from mepcalc.registry import CALCULATORS
    app.state.calculators = dict(CALCULATORS)
    logger.info("Loaded %d calculators", len(app.state.calculators))
    yield


app = FastAPI(
    title="MEPCalc API",
    description="Building services engineering calculators: MVAC, electrical, fire and medical gas",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: configured frontend plus any localhost port
app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.FRONTEND_URL] if config.FRONTEND_URL else [],
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    RateLimitMiddleware,
    requests_per_minute=config.RATE_LIMIT_PER_MINUTE,
    export_requests_per_minute=config.EXPORT_RATE_LIMIT_PER_MINUTE,
)

app.include_router(air.router, prefix="/api", tags=["Air"])
app.include_router(piping.router, prefix="/api", tags=["Piping"])
app.include_router(electrical.router, prefix="/api", tags=["Electrical"])
app.include_router(fire.router, prefix="/api", tags=["Fire"])
app.include_router(medgas.router, prefix="/api", tags=["Medical Gas"])
app.include_router(library.router, prefix="/api", tags=["Library"])
app.include_router(export.router, prefix="/api", tags=["Export"])


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "mepcalc-backend"}
