"""Configuration management for the YouTube Channel Dashboard."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="YT_", extra="ignore")

    # YouTube Data API
    youtube_api_key: str
    channel_id: str

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Snapshot cache
    videos_ttl_seconds: int = 300  # 5 minutes
    videos_ttl_splay_max: int = 60

    # Discovery limits (the API caps a page at 50)
    uploads_max_results: int = Field(default=50, ge=1, le=50)
    search_max_results: int = Field(default=10, ge=1, le=50)
    http_timeout_seconds: float = 15

    # Rendering
    display_timezone: str = "Asia/Bangkok"

    # CORS
    frontend_origin: str = "http://localhost:5173"

    # Environment
    env: str = Field(default="dev", pattern="^(dev|prod)$")

    @field_validator("display_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @property
    def tz(self) -> ZoneInfo:
        """Display timezone as a tzinfo."""
        return ZoneInfo(self.display_timezone)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()  # type: ignore[call-arg]
    return _settings
