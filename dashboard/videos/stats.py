"""Dashboard statistics computed from a channel video snapshot.

All calendar boundaries (days, weeks, months) are taken in the display
timezone passed in; weeks start on Monday.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Sequence

from .models import (
    ChannelStats,
    DailyBucket,
    TypeShare,
    VideoSummary,
    VideoType,
    WeeklyBucket,
)

TREND_DAYS = 30
TREND_WEEKS = 4


def start_of_day(day: date, tz: tzinfo) -> datetime:
    """Midnight at the start of a local day."""
    return datetime.combine(day, time.min, tzinfo=tz)


def week_start(day: date) -> date:
    """Monday of the week containing day."""
    return day - timedelta(days=day.weekday())


def _week_name(start: date, end: date) -> str:
    return f"{start:%b %d} - {end:%b %d}"


def daily_buckets(today: date, days: int = TREND_DAYS) -> list[DailyBucket]:
    """Empty buckets for the trailing window ending today, oldest first."""
    buckets = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        buckets.append(DailyBucket(day=day, label=f"{day:%m-%d}"))
    return buckets


def weekly_buckets(today: date, weeks: int = TREND_WEEKS) -> list[WeeklyBucket]:
    """Empty buckets for the trailing weeks ending this week, oldest first."""
    current = week_start(today)
    buckets = []
    for offset in range(weeks - 1, -1, -1):
        start = current - timedelta(weeks=offset)
        end = start + timedelta(days=6)
        buckets.append(WeeklyBucket(name=_week_name(start, end), start=start, end=end))
    return buckets


def compute_stats(
    videos: Sequence[VideoSummary],
    now: datetime,
    tz: tzinfo = timezone.utc,
) -> ChannelStats:
    """Compute the dashboard rollup for a snapshot.

    Args:
        videos: Channel snapshot, in any order
        now: Reference instant; must be timezone-aware
        tz: Timezone that defines calendar days, weeks and months

    Returns:
        Totals, month-to-date and week-to-date figures, type distribution,
        a 30-day and a 4-week trend, and the most viewed video

    Raises:
        ValueError: If now is naive
    """
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")

    today = now.astimezone(tz).date()
    month_start = start_of_day(today.replace(day=1), tz)
    this_week_start = start_of_day(week_start(today), tz)

    stats = ChannelStats(video_count=len(videos))
    daily = daily_buckets(today)
    weekly = weekly_buckets(today)
    daily_by_day = {b.day: b for b in daily}

    for video in videos:
        views = video.view_count
        published = video.published_at
        local_day = published.astimezone(tz).date()

        stats.total_views += views
        stats.type_distribution[video.type] += 1

        # Strict comparison keeps the first of equally viewed videos
        if stats.top_video is None or views > stats.top_video.view_count:
            stats.top_video = video

        if month_start <= published <= now:
            stats.monthly_views += views
            stats.monthly_videos += 1
        if this_week_start <= published <= now:
            stats.weekly_views += views
            stats.weekly_videos += 1

        day_bucket = daily_by_day.get(local_day)
        if day_bucket is not None:
            day_bucket.views += views
            day_bucket.count += 1

        for week in weekly:
            if week.start <= local_day <= week.end:
                week.views += views
                week.count += 1
                week.counts[video.type] += 1
                week.titles[video.type].append(video.title)
                break

    stats.pie_data = [
        TypeShare(name=t, value=count)
        for t, count in stats.type_distribution.items()
        if count > 0
    ]
    stats.daily_trend = daily
    stats.weekly_trend = weekly
    return stats
