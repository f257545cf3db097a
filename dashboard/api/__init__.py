"""API routers for the YouTube Channel Dashboard."""

from dashboard.api.routes_channel import router as channel_router
from dashboard.api.routes_health import router as health_router
from dashboard.api.routes_videos import router as videos_router

__all__ = [
    "channel_router",
    "health_router",
    "videos_router",
]
