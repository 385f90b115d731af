"""Central application settings using Pydantic."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # Core application
    log_level: str = Field("INFO", env="LOG_LEVEL")
    port: int = Field(8000, env="PORT")

    # Google Maps Platform
    google_maps_api_key: str | None = Field(None, env="GOOGLE_MAPS_API_KEY")
    geocode_url: str = Field(
        "https://maps.googleapis.com/maps/api/geocode/json", env="GEOCODE_URL"
    )
    places_base_url: str = Field(
        "https://places.googleapis.com/v1", env="PLACES_BASE_URL"
    )

    # Throttling
    rate_limit_window_seconds: float = Field(60.0, env="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_max_requests: int = Field(30, env="RATE_LIMIT_MAX_REQUESTS")
    rate_limit_max_clients: int = Field(10_000, env="RATE_LIMIT_MAX_CLIENTS")

    # Photo proxy
    photo_default_max_width_px: int = Field(400, env="PHOTO_DEFAULT_MAX_WIDTH_PX")
    photo_cache_max_age_seconds: int = Field(
        86_400, env="PHOTO_CACHE_MAX_AGE_SECONDS"
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("google_maps_api_key", mode="before")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = str(v).strip()
        return v or None


def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    return Settings()
