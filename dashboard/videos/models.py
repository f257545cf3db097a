"""Pydantic models for channel videos and dashboard statistics."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class VideoType(str, Enum):
    """Classification of a channel video."""

    VIDEO = "Video"
    SHORT = "Short"
    LIVE = "Live"
    STREAM = "Stream"
    UPCOMING = "Upcoming"


class VideoSummary(BaseModel):
    """A normalized, classified video from one channel snapshot."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    channel_title: str
    thumbnail: str
    link: str
    published_at: datetime  # always UTC
    view_count: int = 0
    duration: str = ""
    duration_seconds: int = 0
    type: VideoType


class ChannelInfo(BaseModel):
    """Channel metadata shown in the dashboard header."""

    id: str
    title: str
    description: str = ""
    custom_url: str | None = None
    published_at: datetime | None = None
    country: str | None = None
    subscriber_count: int = 0
    video_count: int = 0
    view_count: int = 0
    keywords: str | None = None
    uploads_playlist_id: str | None = None


class DailyBucket(BaseModel):
    """Views of videos published on one calendar day."""

    day: date
    label: str
    views: int = 0
    count: int = 0


def _per_type(factory):
    return lambda: {t: factory() for t in VideoType}


class WeeklyBucket(BaseModel):
    """Views and per-type output of videos published in one calendar week."""

    name: str
    start: date
    end: date
    views: int = 0
    count: int = 0
    counts: dict[VideoType, int] = Field(default_factory=_per_type(int))
    titles: dict[VideoType, list[str]] = Field(default_factory=_per_type(list))


class TypeShare(BaseModel):
    """One slice of the type distribution chart."""

    name: VideoType
    value: int


class ChannelStats(BaseModel):
    """Aggregate statistics over one channel snapshot."""

    total_views: int = 0
    video_count: int = 0
    monthly_views: int = 0
    monthly_videos: int = 0
    weekly_views: int = 0
    weekly_videos: int = 0
    type_distribution: dict[VideoType, int] = Field(default_factory=_per_type(int))
    pie_data: list[TypeShare] = Field(default_factory=list)
    daily_trend: list[DailyBucket] = Field(default_factory=list)
    weekly_trend: list[WeeklyBucket] = Field(default_factory=list)
    top_video: VideoSummary | None = None
