"""FastAPI dependencies for API routers."""

import re
from collections.abc import AsyncGenerator

from fastapi import HTTPException, Query
from redis.asyncio import Redis

from dashboard.config import get_settings
from dashboard.youtube.client import YouTubeClient

# YouTube channel IDs start with UC and are 24 characters (alphanumeric, -, _)
CHANNEL_ID_PATTERN = re.compile(r"^UC[\w-]{22}$")

_redis_client: Redis | None = None


async def get_redis() -> AsyncGenerator[Redis, None]:
    """Dependency for FastAPI routes to get an async Redis connection.

    Yields:
        Async Redis client instance
    """
    global _redis_client

    if _redis_client is None:
        settings = get_settings()
        _redis_client = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=False,
        )

    yield _redis_client


def get_youtube_client() -> YouTubeClient:
    """Dependency that builds a YouTube client from the configured API key."""
    settings = get_settings()
    return YouTubeClient(settings.youtube_api_key, timeout=settings.http_timeout_seconds)


def resolve_channel_id(
    channel_id: str | None = Query(
        default=None, description="Channel to show (defaults to the configured one)"
    ),
) -> str:
    """Dependency returning the requested channel, or the configured default.

    Raises:
        HTTPException: If channel_id is not a valid YouTube channel ID
    """
    if channel_id is None:
        return get_settings().channel_id
    if not CHANNEL_ID_PATTERN.match(channel_id):
        raise HTTPException(
            status_code=400,
            detail="Invalid channel_id format. Must be a valid YouTube channel ID (UC...)",
        )
    return channel_id
