"""Health check endpoints for the YouTube Channel Dashboard API."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from redis.exceptions import RedisError

from dashboard.api.dependencies import get_redis

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def health_check():
    """Liveness: the process is up."""
    return {"ok": True}


@router.get("/readyz")
async def readiness_check(redis: Redis = Depends(get_redis)):
    """
    Readiness: the snapshot cache is reachable.

    Returns:
        {"ok": true}, or a 503 with {"ok": false} when Redis does not answer
    """
    try:
        await redis.ping()
    except (RedisError, OSError):
        logger.warning("Readiness check failed: Redis unreachable", exc_info=True)
        return JSONResponse(status_code=503, content={"ok": False})
    return {"ok": True}
