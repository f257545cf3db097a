"""Channel information endpoint for the dashboard API."""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from dashboard.api.dependencies import get_youtube_client, resolve_channel_id
from dashboard.videos.aggregator import channel_info_from_item
from dashboard.youtube.client import YouTubeClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/channel", tags=["channel"])
limiter = Limiter(key_func=get_remote_address)


@router.get("")
@limiter.limit("30/minute")
async def get_channel(
    request: Request,
    channel_id: str = Depends(resolve_channel_id),
    youtube: YouTubeClient = Depends(get_youtube_client),
):
    """
    Channel header data: title, description, counts and branding keywords.

    Returns:
        The channel's ChannelInfo
    """
    try:
        item = await youtube.get_channel(channel_id)
    except PermissionError:
        raise HTTPException(
            status_code=502, detail="YouTube API key rejected or quota exceeded"
        )
    except httpx.HTTPError:
        logger.error(f"Failed to fetch channel {channel_id}", exc_info=True)
        raise HTTPException(status_code=502, detail="Failed to fetch channel")

    if item is None:
        raise HTTPException(status_code=404, detail="Channel not found")

    return channel_info_from_item(item).model_dump(mode="json")
