"""Health check endpoints for monitoring application status."""

import time

from fastapi import APIRouter, Depends, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from linkdeck.core.config import settings
from linkdeck.db.session import get_db

router = APIRouter(tags=["health"])


async def _database_latency_ms(db: AsyncSession) -> float:
    start_time = time.perf_counter()
    result = await db.execute(text("SELECT 1"))
    if result.scalar_one() != 1:
        raise RuntimeError("Unexpected database probe result")
    return round((time.perf_counter() - start_time) * 1000, 2)


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Get system health status",
    response_description="Health status of all system components"
)
async def health_check(db: AsyncSession = Depends(get_db)):
    """Check health of all system components."""
    health_status = {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
        "timestamp": time.time(),
        "components": {}
    }

    try:
        health_status["components"]["database"] = {
            "status": "healthy",
            "latency_ms": await _database_latency_ms(db),
        }
    except Exception as e:
        health_status["status"] = "degraded"
        health_status["components"]["database"] = {
            "status": "unhealthy",
            "error": str(e)
        }

    return health_status


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness probe",
    response_description="Application readiness status"
)
async def readiness_probe(db: AsyncSession = Depends(get_db)):
    """Check if application is ready to handle requests."""
    components_status = {"api": True, "database": False}

    try:
        await _database_latency_ms(db)
        components_status["database"] = True
    except Exception:
        components_status["database"] = False

    return {
        "ready": all(components_status.values()),
        "components": components_status
    }


@router.get(
    "/health/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    response_description="Application liveness status"
)
async def liveness_probe():
    """Simple check that application is running."""
    return {"alive": True}
