"""Channel video aggregation and statistics."""

from .aggregator import (
    AggregationError,
    classify_video,
    fetch_channel_videos,
    parse_duration,
    summarize_videos,
)
from .models import ChannelInfo, ChannelStats, VideoSummary, VideoType
from .stats import compute_stats

__all__ = [
    "AggregationError",
    "ChannelInfo",
    "ChannelStats",
    "VideoSummary",
    "VideoType",
    "classify_video",
    "compute_stats",
    "fetch_channel_videos",
    "parse_duration",
    "summarize_videos",
]
