"""Tests for render-time display helpers."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from dashboard.videos import VideoSummary, VideoType
from dashboard.videos.display import (
    duration_label,
    format_duration,
    format_published,
    group_by_local_date,
    render_video,
)

BANGKOK = ZoneInfo("Asia/Bangkok")


def make_video(
    video_id: str,
    published: datetime,
    seconds: int = 0,
    video_type: VideoType = VideoType.VIDEO,
) -> VideoSummary:
    """Helper to create a VideoSummary for testing."""
    return VideoSummary(
        id=video_id,
        title=f"Video {video_id}",
        channel_title="Test Channel",
        thumbnail="",
        link=f"https://www.youtube.com/watch?v={video_id}",
        published_at=published,
        duration_seconds=seconds,
        type=video_type,
    )


@pytest.mark.parametrize(
    "seconds,expected",
    [
        (0, ""),
        (5, "0:05"),
        (65, "1:05"),
        (600, "10:00"),
        (3600, "1:00:00"),
        (3661, "1:01:01"),
        (36000, "10:00:00"),
    ],
)
def test_format_duration(seconds, expected):
    """Durations render as m:ss or h:mm:ss."""
    assert format_duration(seconds) == expected


def test_duration_label_live():
    """Live videos show LIVE instead of a duration."""
    published = datetime(2024, 1, 15, tzinfo=timezone.utc)
    assert duration_label(make_video("l", published, 0, VideoType.LIVE)) == "LIVE"
    assert duration_label(make_video("v", published, 65)) == "1:05"


def test_format_published_applies_timezone_once():
    """UTC storage is shifted only for display."""
    published = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    assert format_published(published, BANGKOK) == "15/01/2024 17:30"
    assert format_published(published, timezone.utc) == "15/01/2024 10:30"


def test_render_video_adds_display_fields():
    """Rendered videos keep the summary and add display fields."""
    video = make_video("abc", datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc), 3661)
    data = render_video(video, BANGKOK)

    assert data["id"] == "abc"
    assert data["type"] == "Video"
    assert data["published_at"].startswith("2024-01-15T10:30:00")
    assert data["published_local"] == "15/01/2024 17:30"
    assert data["duration_label"] == "1:01:01"


def test_group_by_local_date():
    """Videos group under their local publish date, in input order."""
    late = make_video("late", datetime(2024, 1, 15, 20, 0, tzinfo=timezone.utc))
    early = make_video("early", datetime(2024, 1, 15, 2, 0, tzinfo=timezone.utc))
    same_day = make_video("same", datetime(2024, 1, 15, 1, 0, tzinfo=timezone.utc))

    groups = group_by_local_date([late, early, same_day], BANGKOK)

    assert list(groups) == [date(2024, 1, 16), date(2024, 1, 15)]
    assert [v.id for v in groups[date(2024, 1, 16)]] == ["late"]
    assert [v.id for v in groups[date(2024, 1, 15)]] == ["early", "same"]


def test_group_by_local_date_empty():
    """No videos, no days."""
    assert group_by_local_date([], BANGKOK) == {}
