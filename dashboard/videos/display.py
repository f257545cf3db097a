"""Render-time helpers for the table and calendar views.

Snapshots store UTC; the display timezone is only applied here.
"""

from datetime import date, datetime, tzinfo
from typing import Any, Iterable

from .models import VideoSummary, VideoType


def to_local(dt: datetime, tz: tzinfo) -> datetime:
    """Convert an aware datetime to the display timezone."""
    return dt.astimezone(tz)


def format_published(dt: datetime, tz: tzinfo) -> str:
    """Format a publish time as DD/MM/YYYY HH:mm in the display timezone."""
    return to_local(dt, tz).strftime("%d/%m/%Y %H:%M")


def format_duration(seconds: int) -> str:
    """Format seconds as m:ss, or h:mm:ss from one hour up. 0 gives ""."""
    if not seconds:
        return ""
    h, rest = divmod(seconds, 3600)
    m, s = divmod(rest, 60)
    if h > 0:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def duration_label(video: VideoSummary) -> str:
    """Badge text shown over a thumbnail."""
    if video.type is VideoType.LIVE:
        return "LIVE"
    return format_duration(video.duration_seconds)


def render_video(video: VideoSummary, tz: tzinfo) -> dict[str, Any]:
    """Serialize a video for the dashboard with display-only fields added."""
    data = video.model_dump(mode="json")
    data["published_local"] = format_published(video.published_at, tz)
    data["duration_label"] = duration_label(video)
    return data


def group_by_local_date(
    videos: Iterable[VideoSummary], tz: tzinfo
) -> dict[date, list[VideoSummary]]:
    """Group videos by local publish date, keeping input order within a day."""
    days: dict[date, list[VideoSummary]] = {}
    for video in videos:
        days.setdefault(to_local(video.published_at, tz).date(), []).append(video)
    return days
