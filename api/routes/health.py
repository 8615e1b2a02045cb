"""
Health check endpoints.

Used for monitoring and load balancer health checks.
"""
import logging
import platform

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from api.dependencies import get_db_session_factory
from core.utils.clock import utc_now

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness: the process is up."""
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": "storefront-orders",
        "version": "1.0.0",
        "python_version": platform.python_version(),
    }


@router.get("/health/ready")
async def readiness_check(session_factory: async_sessionmaker = Depends(get_db_session_factory)):
    """Readiness: the database answers."""
    database = "ok"
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Readiness database check failed: {e}")
        database = "unavailable"

    ready = database == "ok"
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if ready else "not_ready",
            "timestamp": utc_now().isoformat(),
            "checks": {"api": "ok", "database": database},
        },
    )
