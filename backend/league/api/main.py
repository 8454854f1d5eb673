"""
FastAPI application entry point.

API server exposing the league's performance and ranking engine.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from league.core.config import settings
from league.core.exceptions import ContractViolationError, SeasonError, SeasonNotFoundError
from league.core.logging import get_logger, setup_logging

# Setup logging
setup_logging()
logger = get_logger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Portfolio League - group investment performance and rankings",
    debug=settings.DEBUG,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ContractViolationError)
async def contract_violation_handler(request: Request, exc: ContractViolationError) -> JSONResponse:
    logger.error(f"Contract violation on {request.url.path}: {exc}")
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(SeasonNotFoundError)
async def season_not_found_handler(request: Request, exc: SeasonNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(SeasonError)
async def season_error_handler(request: Request, exc: SeasonError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }


from league.api.metrics import router as metrics_router
from league.api.leaderboard import router as leaderboard_router
from league.api.performance import router as performance_router
from league.api.seasons import router as seasons_router

app.include_router(metrics_router, prefix="/api/v1/metrics", tags=["metrics"])
app.include_router(leaderboard_router, prefix="/api/v1/leaderboard", tags=["leaderboard"])
app.include_router(performance_router, prefix="/api/v1/performance", tags=["performance"])
app.include_router(seasons_router, prefix="/api/v1/seasons", tags=["seasons"])
