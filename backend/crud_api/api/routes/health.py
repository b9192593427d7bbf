"""Health & Readiness Probes.

Invariants:
    - GET /health always returns 200 if the process is up (liveness)
    - GET /health/ready returns 503 if the store is unreachable (readiness)
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Basic liveness probe."""
    return {
        "status": "healthy",
        "service": "crud-api",
        "version": request.app.version,
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe: includes store connectivity."""
    manager = getattr(request.app.state, "db_manager", None)
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "store_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
