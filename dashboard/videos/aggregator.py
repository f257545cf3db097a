"""Video aggregation: classify, normalize and sort a channel's videos."""

import asyncio
import logging
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Sequence

import httpx

from dashboard.youtube.client import YouTubeClient

from .models import ChannelInfo, VideoSummary, VideoType

logger = logging.getLogger(__name__)

# Every component is optional: "PT1H2M3S", "PT45S", "PT10M", "PT"
DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")

# Thumbnail sizes in order of preference, highest resolution first
THUMBNAIL_PREFERENCE = ("maxres", "standard", "high", "medium", "default")

# Shorts are at most one minute long
SHORT_MAX_SECONDS = 60

WATCH_URL = "https://www.youtube.com/watch?v={}"


class AggregationError(Exception):
    """Raised when a channel's videos could not be fetched or normalized."""


def parse_duration(duration: str | None) -> int:
    """Parse an ISO-8601 duration ("PT#H#M#S") into whole seconds.

    Args:
        duration: Duration string from contentDetails.duration

    Returns:
        Total seconds, or 0 if the string is missing or does not match
    """
    if not duration:
        return 0
    match = DURATION_PATTERN.fullmatch(duration)
    if not match:
        return 0
    hours, minutes, seconds = (int(g or 0) for g in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def classify_video(
    broadcast_status: str | None, duration_seconds: int, has_live_details: bool
) -> VideoType:
    """Classify a video. The first matching rule wins.

    Args:
        broadcast_status: snippet.liveBroadcastContent ("none", "live", "upcoming")
        duration_seconds: Parsed duration
        has_live_details: Whether the item carries liveStreamingDetails

    Returns:
        The video's type
    """
    if broadcast_status == "live":
        return VideoType.LIVE
    if broadcast_status == "upcoming":
        return VideoType.UPCOMING
    if 0 < duration_seconds <= SHORT_MAX_SECONDS:
        return VideoType.SHORT
    if has_live_details:
        return VideoType.STREAM
    return VideoType.VIDEO


def best_thumbnail(thumbnails: dict[str, Any] | None) -> str:
    """Pick the highest-resolution thumbnail URL available, or ""."""
    thumbnails = thumbnails or {}
    for size in THUMBNAIL_PREFERENCE:
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return ""


def parse_count(value: Any) -> int:
    """Parse a numeric-string statistic, defaulting to 0."""
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def parse_timestamp(value: str) -> datetime:
    """Parse an API timestamp into an aware UTC datetime."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def normalize_video(item: dict[str, Any]) -> VideoSummary:
    """Turn a raw videos.list item into a VideoSummary.

    Raises:
        KeyError: If the id, snippet or publish timestamp is missing
        ValueError: If the snippet or publish timestamp is malformed
    """
    video_id = item["id"]
    snippet = item["snippet"]
    if not isinstance(snippet, dict):
        raise ValueError(f"Video {video_id} has a malformed snippet")
    published = snippet["publishedAt"]
    if not isinstance(published, str):
        raise ValueError(f"Video {video_id} has a malformed publishedAt")
    duration = (item.get("contentDetails") or {}).get("duration") or ""
    seconds = parse_duration(duration)

    return VideoSummary(
        id=video_id,
        title=snippet.get("title", ""),
        channel_title=snippet.get("channelTitle", ""),
        thumbnail=best_thumbnail(snippet.get("thumbnails")),
        link=WATCH_URL.format(video_id),
        published_at=parse_timestamp(published),
        view_count=parse_count((item.get("statistics") or {}).get("viewCount")),
        duration=duration,
        duration_seconds=seconds,
        type=classify_video(
            snippet.get("liveBroadcastContent"),
            seconds,
            item.get("liveStreamingDetails") is not None,
        ),
    )


def merge_video_ids(*sources: Iterable[str]) -> list[str]:
    """Merge id lists into one list of unique ids, first occurrence kept."""
    return list(dict.fromkeys(vid for source in sources for vid in source))


def summarize_videos(items: Sequence[dict[str, Any]]) -> list[VideoSummary]:
    """Normalize raw video items into a deduplicated, sorted snapshot.

    This function:
    1. Drops repeated ids, keeping the first record seen
    2. Normalizes and classifies each record
    3. Sorts by publish time descending, then by id descending for
       deterministic ordering

    Raises:
        KeyError, ValueError: If a record lacks required fields
    """
    seen: set[str] = set()
    videos: list[VideoSummary] = []
    for item in items:
        summary = normalize_video(item)
        if summary.id in seen:
            continue
        seen.add(summary.id)
        videos.append(summary)

    videos.sort(key=lambda v: (v.published_at, v.id), reverse=True)
    return videos


def channel_info_from_item(item: dict[str, Any]) -> ChannelInfo:
    """Build ChannelInfo from a raw channels.list item."""
    snippet = item.get("snippet") or {}
    stats = item.get("statistics") or {}
    branding = (item.get("brandingSettings") or {}).get("channel") or {}
    related = (item.get("contentDetails") or {}).get("relatedPlaylists") or {}
    published = snippet.get("publishedAt")

    return ChannelInfo(
        id=item["id"],
        title=snippet.get("title", ""),
        description=snippet.get("description", ""),
        custom_url=snippet.get("customUrl"),
        published_at=parse_timestamp(published) if published else None,
        country=snippet.get("country"),
        subscriber_count=parse_count(stats.get("subscriberCount")),
        video_count=parse_count(stats.get("videoCount")),
        view_count=parse_count(stats.get("viewCount")),
        keywords=branding.get("keywords"),
        uploads_playlist_id=related.get("uploads"),
    )


async def fetch_channel_videos(
    client: YouTubeClient,
    channel_id: str,
    uploads_max_results: int = 50,
    search_max_results: int = 10,
) -> list[VideoSummary]:
    """Fetch, classify and sort the recent videos of a channel.

    Discovery reads three sources concurrently: the uploads playlist,
    currently live broadcasts and upcoming broadcasts. Details are then
    fetched once for the union of the discovered ids.

    Args:
        client: Configured YouTube client (carries the API key)
        channel_id: YouTube channel ID
        uploads_max_results: Page size for the uploads playlist
        search_max_results: Page size for each live/upcoming search

    Returns:
        Videos sorted newest first; empty if the channel has no uploads
        playlist or nothing was discovered

    Raises:
        AggregationError: If any API call fails or a record is malformed
    """
    try:
        playlist_id = await client.get_uploads_playlist_id(channel_id)
        if not playlist_id:
            logger.warning(f"No uploads playlist for channel {channel_id}")
            return []

        uploads, live, upcoming = await asyncio.gather(
            client.list_playlist_video_ids(playlist_id, uploads_max_results),
            client.search_event_video_ids(channel_id, "live", search_max_results),
            client.search_event_video_ids(channel_id, "upcoming", search_max_results),
        )

        video_ids = merge_video_ids(uploads, live, upcoming)
        logger.info(
            f"Discovered {len(video_ids)} videos for channel {channel_id} "
            f"(uploads={len(uploads)}, live={len(live)}, upcoming={len(upcoming)})"
        )
        if not video_ids:
            return []

        items = await client.list_videos(video_ids)
        return summarize_videos(items)
    except (httpx.HTTPError, PermissionError, KeyError, ValueError) as exc:
        logger.warning(f"Aggregation failed for channel {channel_id}: {exc!r}")
        raise AggregationError(f"Failed to fetch videos for channel {channel_id}") from exc
