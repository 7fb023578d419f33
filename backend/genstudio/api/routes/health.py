"""Health Probes — is the API process up, and can it reach the workspace database.

Invariants:
    - GET /health/ answers 200 whenever the event loop is serving requests
    - GET /health/ready answers 503 until a SELECT 1 against the snapshot database succeeds

Design Decisions:
    - Readiness checks only the database: the generation service is optional at startup
      (a missing key degrades into a failure turn, not an unready pod)
    - The manager is looked up per request so tests and the lifespan can swap it
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from genstudio.infrastructure.database import get_db_manager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "genstudio-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe — includes database connectivity."""
    manager = get_db_manager()
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
