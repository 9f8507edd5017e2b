"""Health & Readiness Checks - liveness and readiness endpoints.

Invariants:
    - GET /api/health always returns 200 if process is up (liveness)
    - GET /api/health/ready returns 503 until the record store is open (readiness)
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness check. Returns 200 if the process is up."""
    return {
        "success": True,
        "status": "healthy",
        "service": "registration-portal-api",
        "storage": "file-based (xlsx)",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness check: dataset loaded and its directory reachable."""
    store = getattr(request.app.state, "record_store", None)
    store_ok = await store.health_check() if store else False
    if not store_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "dataset_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {"dataset": "healthy"},
        "records": store.record_count,
    }
