"""Health & Readiness Probes.

Invariants:
    - GET /api/v1/health/ answers 200 whenever the process is serving
    - GET /api/v1/health/ready answers 503 until the database accepts queries
"""

import logging
import time

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from comic_site.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "comic-site"


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness():
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/ready")
async def readiness():
    manager = database.db_manager
    started = time.perf_counter()
    db_ok = manager is not None and await manager.health_check()
    if not db_ok:
        logger.warning("Readiness probe failed: database unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {
            "database": "healthy",
            "database_ms": round((time.perf_counter() - started) * 1000, 1),
        },
    }
