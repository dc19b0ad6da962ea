"""Health Check — store connectivity check for container orchestration.

Invariants:
    - GET /health returns 200 only if SELECT 1 succeeds through the pool
    - Any store failure answers 503 with the store's message in "error"
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from users_api.core.errors import DatabaseError
from users_api.infrastructure.database import get_db_manager

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    """Liveness check including database connectivity."""
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        await get_db_manager(request).ping()
    except DatabaseError as e:
        logger.error(
            f"Health check failed: {e.detail}",
            extra={"error_code": e.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "timestamp": timestamp,
                "database": "disconnected",
                "error": e.detail,
            },
        )
    return {
        "status": "healthy",
        "timestamp": timestamp,
        "database": "connected",
    }
