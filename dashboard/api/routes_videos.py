"""Video table, calendar and statistics endpoints for the dashboard API."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from redis.asyncio import Redis
from slowapi import Limiter
from slowapi.util import get_remote_address

from dashboard.api.dependencies import get_redis, get_youtube_client, resolve_channel_id
from dashboard.config import get_settings
from dashboard.videos.aggregator import AggregationError
from dashboard.videos.cache import fetch_and_cache_videos
from dashboard.videos.display import group_by_local_date, render_video
from dashboard.videos.models import VideoSummary, VideoType
from dashboard.videos.stats import compute_stats
from dashboard.youtube.client import YouTubeClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["videos"])
limiter = Limiter(key_func=get_remote_address)


async def _load_snapshot(
    redis: Redis, youtube: YouTubeClient, channel_id: str, refresh: bool
) -> list[VideoSummary]:
    """Load the channel snapshot, mapping aggregation failures to 502."""
    try:
        return await fetch_and_cache_videos(redis, youtube, channel_id, refresh=refresh)
    except AggregationError:
        logger.error(f"Snapshot unavailable for channel {channel_id}", exc_info=True)
        raise HTTPException(
            status_code=502, detail="Failed to fetch videos. Check API key or quota."
        )


@router.get("/videos")
@limiter.limit("60/minute")
async def list_videos(
    request: Request,
    type: VideoType | None = Query(default=None, description="Only this video type"),
    sort: str = Query(
        default="published",
        pattern=r"^(published|views)$",
        description="Order by publish time or by view count, both descending",
    ),
    refresh: bool = Query(default=False, description="Bypass the snapshot cache"),
    channel_id: str = Depends(resolve_channel_id),
    redis: Redis = Depends(get_redis),
    youtube: YouTubeClient = Depends(get_youtube_client),
):
    """
    Table view of the channel's videos, newest first unless sort=views.

    Returns:
        JSON response with:
            - items: Videos with display fields (published_local, duration_label)
            - count: Number of items returned
    """
    tz = get_settings().tz
    videos = await _load_snapshot(redis, youtube, channel_id, refresh)

    if type is not None:
        videos = [v for v in videos if v.type is type]

    if sort == "views":
        # stable: equal view counts stay newest first
        videos = sorted(videos, key=lambda v: v.view_count, reverse=True)

    return {"items": [render_video(v, tz) for v in videos], "count": len(videos)}


@router.get("/calendar")
@limiter.limit("60/minute")
async def calendar(
    request: Request,
    month: str | None = Query(
        default=None,
        pattern=r"^\d{4}-(0[1-9]|1[0-2])$",
        description="Month to show as YYYY-MM (defaults to the current month)",
    ),
    refresh: bool = Query(default=False, description="Bypass the snapshot cache"),
    channel_id: str = Depends(resolve_channel_id),
    redis: Redis = Depends(get_redis),
    youtube: YouTubeClient = Depends(get_youtube_client),
):
    """
    Calendar view: videos grouped by their local publish date.

    Only days of the requested month that have at least one video appear.
    """
    settings = get_settings()
    tz = settings.tz
    if month is None:
        month = datetime.now(timezone.utc).astimezone(tz).strftime("%Y-%m")
    year, month_num = (int(part) for part in month.split("-"))

    videos = await _load_snapshot(redis, youtube, channel_id, refresh)

    days = {
        day.isoformat(): [render_video(v, tz) for v in items]
        for day, items in group_by_local_date(videos, tz).items()
        if day.year == year and day.month == month_num
    }

    return {"month": month, "timezone": settings.display_timezone, "days": days}


@router.get("/stats")
@limiter.limit("60/minute")
async def stats(
    request: Request,
    refresh: bool = Query(default=False, description="Bypass the snapshot cache"),
    channel_id: str = Depends(resolve_channel_id),
    redis: Redis = Depends(get_redis),
    youtube: YouTubeClient = Depends(get_youtube_client),
):
    """
    Statistics panel: totals, month/week-to-date figures, trends and the
    top video, computed in the display timezone.
    """
    tz = get_settings().tz
    videos = await _load_snapshot(redis, youtube, channel_id, refresh)

    result = compute_stats(videos, datetime.now(timezone.utc), tz)
    return result.model_dump(mode="json")
