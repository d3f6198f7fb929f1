"""
Configuration for MoodPlay.

All thresholds and timings are static configuration loaded from the
environment (or a ``.env`` file) through pydantic-settings.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmotionGateConfig(BaseSettings):
    """Confidence thresholds for the emotion gate (percent)."""

    model_config = SettingsConfigDict(env_prefix="GATE_")

    queue_threshold: float = Field(
        default=60.0,
        ge=0.0,
        le=100.0,
        description="Ticks below this confidence never touch the playback queue",
    )
    stats_threshold: float = Field(
        default=50.0,
        ge=0.0,
        le=100.0,
        description="Ticks above this confidence count towards emotion changes",
    )


class PlaybackConfig(BaseSettings):
    """Configuration for the playback queue controller."""

    model_config = SettingsConfigDict(env_prefix="PLAYBACK_")

    autoplay_delay_s: float = Field(
        default=1.0,
        ge=0.0,
        description="Delay between replacing the queue and starting playback",
    )
    auto_advance_resumes: bool = Field(
        default=True,
        description="Keep playing when a track ends and the queue advances",
    )
    progress_interval_s: float = Field(
        default=1.0,
        gt=0.0,
        description="Progress polling interval while playing",
    )
    default_volume: float = Field(default=0.7, ge=0.0, le=1.0)


class AnalyticsConfig(BaseSettings):
    """Configuration for session analytics."""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    clock_interval_s: float = Field(
        default=1.0,
        gt=0.0,
        description="Session duration refresh interval",
    )


class TrackProviderConfig(BaseSettings):
    """Configuration for the track search provider."""

    model_config = SettingsConfigDict(env_prefix="TRACKS_")

    base_url: str = Field(
        default="https://discoveryprovider.audius.co",
        description="Audius discovery provider",
    )
    timeout_s: float = Field(default=10.0, gt=0.0)
    tracks_per_mood: int = Field(default=3, ge=1, le=50)
    genres_per_search: int = Field(
        default=2,
        ge=1,
        description="Genre keywords queried concurrently per mood",
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    service_name: str = Field(default="moodplay", description="Service name")
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="pretty", description="json, pretty or simple")

    gate: EmotionGateConfig = Field(default_factory=EmotionGateConfig)
    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    tracks: TrackProviderConfig = Field(default_factory=TrackProviderConfig)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings()
