"""Configuration settings for the ride dashboard."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """Redis connection and ride channel configuration."""

    host: str = "localhost"
    port: int = 6379
    password: str | None = None
    db: int = 0
    channel: str = "ride-events"
    reconnect_delay_seconds: float = 5.0

    model_config = SettingsConfigDict(env_prefix="REDIS_")


class APISettings(BaseSettings):
    """HTTP API configuration."""

    host: str = "0.0.0.0"
    port: int = 8080

    model_config = SettingsConfigDict(env_prefix="API_")


class DashboardSettings(BaseSettings):
    """Per-session dashboard configuration."""

    # How often the card window is resampled and re-rendered
    refresh_interval_ms: int = Field(
        default=3000,
        ge=100,
        le=60000,
        description="Card refresh period in milliseconds",
    )

    max_ride_cards: int = Field(
        default=9,
        ge=1,
        le=100,
        description="Maximum number of ride cards displayed at once",
    )

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    @property
    def refresh_interval_seconds(self) -> float:
        return self.refresh_interval_ms / 1000.0


class Settings(BaseSettings):
    """Root settings container."""

    redis: RedisSettings = Field(default_factory=RedisSettings)
    dashboard: DashboardSettings = Field(default_factory=DashboardSettings)
    api: APISettings = Field(default_factory=APISettings)

    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
