"""Runtime settings for the Telecare booking API."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings read from ``TELECARE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TELECARE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Telecare Booking API"
    log_level: str = "INFO"
    lock_timeout_seconds: float = 5.0
    default_duration_minutes: int = 30
    meeting_base_url: str = "https://meet.telecare.local"
    seed_demo_data: bool = True
    cors_origin_regex: str = r"https?://(localhost|127\.0\.0\.1)(:\d+)?$"


def get_settings() -> Settings:
    return Settings()
