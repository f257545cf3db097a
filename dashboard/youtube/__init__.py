"""YouTube Data API access for the dashboard."""

from .client import YouTubeClient

__all__ = ["YouTubeClient"]
