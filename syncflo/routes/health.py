"""
Health Check Endpoints

Liveness and readiness checks for the application.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from syncflo.config import settings
from syncflo.dependencies import get_database, get_nango_service
from syncflo.services.database import DatabaseService
from syncflo.services.nango_service import NangoService
from syncflo.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
async def root():
    return "SyncFlo Backend is running and configured correctly!"


@router.get("/health")
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if application is running.
    """
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.app_version,
        },
    )


@router.get("/health/ready")
async def readiness_check(
    database: DatabaseService = Depends(get_database),
    nango: NangoService = Depends(get_nango_service),
):
    """
    Readiness check endpoint.
    Verifies the database answers and Nango credentials are configured.
    """
    dependencies: Dict[str, Any] = {}
    overall_healthy = True

    try:
        await database.ping()
        dependencies["database"] = {"status": "healthy"}
    except Exception as e:
        logger.warning(f"Database readiness check failed: {e}")
        dependencies["database"] = {"status": "unhealthy", "error": str(e)}
        overall_healthy = False

    if nango.is_configured():
        dependencies["nango"] = {"status": "healthy", "base_url": nango.base_url}
    else:
        dependencies["nango"] = {"status": "unhealthy", "error": "secret key not configured"}
        overall_healthy = False

    return JSONResponse(
        status_code=200 if overall_healthy else 503,
        content={
            "status": "ready" if overall_healthy else "not_ready",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "dependencies": dependencies,
        },
    )
