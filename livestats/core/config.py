"""
Configuration management using Pydantic Settings.
Loads from environment variables and .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application configuration loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Tracked community
    subreddit: str = Field(default="osengine", description="Subreddit to track")
    steam_app_id: str = Field(default="3984710", description="Steam app ID to track")

    # Upstream etiquette
    user_agent: str = Field(
        default="VisionAlgorithms:v1.0.0 (by /u/osengine)",
        description="Identification header sent to every upstream API"
    )
    request_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Upstream request timeout in seconds"
    )

    # Upstream endpoints
    reddit_base_url: str = Field(default="https://www.reddit.com")
    steam_store_base_url: str = Field(default="https://store.steampowered.com")
    steamspy_base_url: str = Field(default="https://steamspy.com")

    # Engagement query
    posts_timeframe: str = Field(default="all", description="Reddit top posts timeframe")
    posts_limit: int = Field(default=100, ge=1, le=100, description="Reddit top posts limit")

    # Aggregation
    proxy_base_url: str = Field(
        default="",
        description="Base URL of the proxy routes; empty means in-process"
    )
    update_interval: float = Field(
        default=300.0,
        gt=0,
        description="Seconds between automatic refresh cycles"
    )
    auto_update: bool = Field(
        default=True,
        description="Start the refresh scheduler with the app"
    )

    # Server
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )
    log_level: str = Field(default="INFO", description="Logging level")

    @property
    def cors_origin_list(self) -> list[str]:
        """Parsed CORS origins."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Global settings instance
settings = Settings()
