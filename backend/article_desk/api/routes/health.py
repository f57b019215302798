"""Health & Readiness Probes — is the process up, and can it reach the article store.

Invariants:
    - GET /api/health answers 200 without touching the store (liveness)
    - GET /api/health/ready pings the store and answers 503 when the ping fails
      or the store was never initialized (readiness)

Design Decisions:
    - Readiness goes through ensure_connected(): after a failed connection attempt,
      the next probe is also the reconnect
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from article_desk.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "article-desk-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe — includes document store connectivity."""
    store = database.store_manager
    store_ok = await store.health_check() if store else False
    if not store_ok:
        logger.warning("Readiness check failed: document store unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "store_unavailable",
            },
        )
    return {"status": "ready", "checks": {"store": "healthy"}}
