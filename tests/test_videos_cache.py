"""Tests for channel snapshot caching."""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError

from dashboard.videos import AggregationError, VideoSummary, VideoType
from dashboard.videos.cache import fetch_and_cache_videos
from dashboard.youtube.client import YouTubeClient

CHANNEL_ID = "UCXT92S422lAnfBfsPrxpEFw"


def make_video(video_id: str, day: int) -> VideoSummary:
    """Helper to create a VideoSummary for testing."""
    return VideoSummary(
        id=video_id,
        title=f"Video {video_id}",
        channel_title="Test Channel",
        thumbnail=f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg",
        link=f"https://www.youtube.com/watch?v={video_id}",
        published_at=datetime(2024, 1, day, 12, 0, tzinfo=timezone.utc),
        view_count=day * 100,
        duration="PT45S",
        duration_seconds=45,
        type=VideoType.SHORT,
    )


@pytest.fixture
def mock_redis():
    """Create a mock Redis client."""
    redis = AsyncMock(spec=Redis)
    redis.get = AsyncMock(return_value=None)
    redis.setex = AsyncMock()
    return redis


@pytest.fixture
def youtube():
    """A YouTube client that must not be used directly by the cache."""
    return MagicMock(spec=YouTubeClient)


@pytest.fixture
def mock_settings():
    """Mock settings with test values."""
    with patch("dashboard.videos.cache.get_settings") as mock_get_settings:
        settings = MagicMock()
        settings.videos_ttl_seconds = 300
        settings.videos_ttl_splay_max = 60
        settings.uploads_max_results = 50
        settings.search_max_results = 10
        mock_get_settings.return_value = settings
        yield settings


@pytest.fixture
def mock_fetch():
    """Patch the aggregation entry point."""
    with patch(
        "dashboard.videos.cache.fetch_channel_videos", new_callable=AsyncMock
    ) as fetch:
        fetch.return_value = [make_video("new", 16), make_video("old", 15)]
        yield fetch


@pytest.mark.asyncio
async def test_cache_miss_fetches_and_stores(mock_redis, youtube, mock_settings, mock_fetch):
    """A miss aggregates the snapshot and stores it with a splayed TTL."""
    result = await fetch_and_cache_videos(mock_redis, youtube, CHANNEL_ID)

    assert [v.id for v in result] == ["new", "old"]

    mock_redis.get.assert_awaited_once_with(f"yt:videos:{CHANNEL_ID}")
    mock_fetch.assert_awaited_once_with(
        youtube, CHANNEL_ID, uploads_max_results=50, search_max_results=10
    )

    mock_redis.setex.assert_awaited_once()
    key, ttl, payload = mock_redis.setex.call_args[0]
    assert key == f"yt:videos:{CHANNEL_ID}"
    assert 300 <= ttl <= 360

    stored = json.loads(payload)
    assert stored[0]["id"] == "new"
    assert stored[0]["type"] == "Short"
    assert stored[0]["published_at"].startswith("2024-01-16T12:00:00")


@pytest.mark.asyncio
async def test_cache_hit_skips_api(mock_redis, youtube, mock_settings, mock_fetch):
    """A hit returns the cached snapshot without aggregating."""
    cached = [make_video("cached", 10).model_dump(mode="json")]
    mock_redis.get = AsyncMock(return_value=json.dumps(cached).encode())

    result = await fetch_and_cache_videos(mock_redis, youtube, CHANNEL_ID)

    assert len(result) == 1
    assert result[0] == make_video("cached", 10)
    assert result[0].type is VideoType.SHORT
    mock_fetch.assert_not_awaited()
    mock_redis.setex.assert_not_awaited()


@pytest.mark.asyncio
async def test_refresh_bypasses_cache(mock_redis, youtube, mock_settings, mock_fetch):
    """refresh=True rebuilds and replaces the snapshot."""
    mock_redis.get = AsyncMock(return_value=b"[]")

    result = await fetch_and_cache_videos(mock_redis, youtube, CHANNEL_ID, refresh=True)

    assert len(result) == 2
    mock_redis.get.assert_not_awaited()
    mock_redis.setex.assert_awaited_once()


@pytest.mark.asyncio
async def test_empty_snapshot_is_cached(mock_redis, youtube, mock_settings, mock_fetch):
    """An empty channel is a valid snapshot."""
    mock_fetch.return_value = []

    assert await fetch_and_cache_videos(mock_redis, youtube, CHANNEL_ID) == []
    assert mock_redis.setex.call_args[0][2] == "[]"


@pytest.mark.asyncio
async def test_failure_is_not_cached(mock_redis, youtube, mock_settings, mock_fetch):
    """A failed aggregation propagates and stores nothing."""
    mock_fetch.side_effect = AggregationError("quota")

    with pytest.raises(AggregationError):
        await fetch_and_cache_videos(mock_redis, youtube, CHANNEL_ID)

    mock_redis.setex.assert_not_awaited()


@pytest.mark.asyncio
async def test_cache_write_error_still_returns_snapshot(
    mock_redis, youtube, mock_settings, mock_fetch
):
    """A Redis outage on write does not lose the fetched snapshot."""
    mock_redis.setex = AsyncMock(side_effect=RedisConnectionError("down"))

    result = await fetch_and_cache_videos(mock_redis, youtube, CHANNEL_ID)

    assert [v.id for v in result] == ["new", "old"]
    mock_fetch.assert_awaited_once()


@pytest.mark.asyncio
async def test_cache_read_error_falls_through_to_api(
    mock_redis, youtube, mock_settings, mock_fetch
):
    """A Redis outage on read aggregates from the API instead."""
    mock_redis.get = AsyncMock(side_effect=RedisConnectionError("down"))

    result = await fetch_and_cache_videos(mock_redis, youtube, CHANNEL_ID)

    assert [v.id for v in result] == ["new", "old"]
    mock_fetch.assert_awaited_once()
    mock_redis.setex.assert_awaited_once()
