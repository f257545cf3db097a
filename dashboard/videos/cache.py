"""Channel snapshot fetching and caching with Redis."""

import json
import logging
import random

from redis.asyncio import Redis
from redis.exceptions import RedisError

from dashboard.config import get_settings
from dashboard.youtube.client import YouTubeClient

from .aggregator import fetch_channel_videos
from .models import VideoSummary

logger = logging.getLogger(__name__)


def _key(channel_id: str) -> str:
    """Generate Redis key for a channel's video snapshot."""
    return f"yt:videos:{channel_id}"


async def fetch_and_cache_videos(
    redis: Redis,
    client: YouTubeClient,
    channel_id: str,
    refresh: bool = False,
) -> list[VideoSummary]:
    """
    Fetch and cache a channel's video snapshot.

    First checks Redis cache unless refresh is set. On a cache miss the
    snapshot is aggregated from the YouTube API and cached with
    TTL + randomized splay. A failed aggregation caches nothing. Redis
    errors are logged and never fail the request: a read error falls
    through to the API and a write error still returns the snapshot.

    Args:
        redis: Async Redis client
        client: YouTube client used on a cache miss
        channel_id: YouTube channel ID
        refresh: Skip the cache lookup and rebuild the snapshot

    Returns:
        Videos sorted newest first

    Raises:
        AggregationError: If the snapshot could not be fetched
    """
    settings = get_settings()
    ttl = settings.videos_ttl_seconds + random.randint(0, settings.videos_ttl_splay_max)

    key = _key(channel_id)

    if not refresh:
        try:
            cached_data = await redis.get(key)
        except RedisError:
            logger.error(f"Failed to read cached videos for channel {channel_id}", exc_info=True)
            cached_data = None
        if cached_data:
            return [VideoSummary(**item) for item in json.loads(cached_data)]

    videos = await fetch_channel_videos(
        client,
        channel_id,
        uploads_max_results=settings.uploads_max_results,
        search_max_results=settings.search_max_results,
    )

    # mode='json' handles datetime and enum serialization
    serialized = [video.model_dump(mode="json") for video in videos]
    try:
        await redis.setex(key, ttl, json.dumps(serialized))
    except RedisError:
        logger.error(f"Failed to cache videos for channel {channel_id}", exc_info=True)
    else:
        logger.info(f"Cached {len(videos)} videos for channel {channel_id} (ttl={ttl}s)")

    return videos
