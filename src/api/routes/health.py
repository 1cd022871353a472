"""Health check endpoint. Reports 503 while MongoDB is unreachable."""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from adapter.mongodb.connection import get_mongodb_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


def _check_mongodb() -> dict:
    try:
        client = get_mongodb_client()
        if client is None:
            return {"status": "unhealthy", "message": "Connection failed or not configured"}
        client.admin.command('ping')
    except Exception as e:
        logger.warning("MongoDB health check failed", extra={"error": str(e)[:200]})
        return {"status": "unhealthy", "message": "Connection error"}
    return {"status": "healthy", "message": "Connection successful"}


@router.get("")
async def health():
    mongodb = _check_mongodb()
    healthy = mongodb["status"] == "healthy"

    return JSONResponse(
        content={
            "status": "healthy" if healthy else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "services": {"mongodb": mongodb},
        },
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
