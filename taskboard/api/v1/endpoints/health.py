"""Health check endpoints. Liveness has no dependencies; readiness pings the database."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from taskboard.core.config import get_settings
from taskboard.infrastructure.persistence.database import get_engine
from taskboard.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database not reachable", "model": ReadinessErrorResponse}},
)
async def readiness_check() -> ReadinessResponse | JSONResponse:
    """Return 200 when the database answers SELECT 1; 503 otherwise."""
    engine = get_engine()
    if engine is None:
        return JSONResponse(
            status_code=503,
            content=ReadinessErrorResponse(message="Database not configured").model_dump(),
        )
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Readiness check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content=ReadinessErrorResponse(message="Database not reachable").model_dump(),
        )
    return ReadinessResponse()
