"""Configuration management for the project."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Open-Meteo APIs (no key required)
    open_meteo_base_url: str = Field(default="https://api.open-meteo.com/v1")
    air_quality_base_url: str = Field(
        default="https://air-quality-api.open-meteo.com/v1"
    )
    geocoding_base_url: str = Field(default="https://geocoding-api.open-meteo.com/v1")
    forecast_days: int = Field(default=6)
    search_result_count: int = Field(default=5)
    search_min_query_length: int = Field(default=2)

    # Nominatim reverse geocoding
    nominatim_base_url: str = Field(default="https://nominatim.openstreetmap.org")
    nominatim_user_agent: str = Field(default="SkyPulse Weather Dashboard/1.0")
    nominatim_rate_limit: int = Field(default=60)

    # HTTP
    request_timeout_seconds: float = Field(default=10.0)
    weather_cache_ttl_seconds: int = Field(default=600)
    geocode_cache_ttl_seconds: int = Field(default=86400)

    # Dashboard session
    api_base_url: str = Field(default="http://localhost:8000")
    search_debounce_seconds: float = Field(default=0.3)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    @property
    def weather_cache_control(self) -> str:
        """Cache-Control header for successful weather responses."""
        ttl = self.weather_cache_ttl_seconds
        return f"public, s-maxage={ttl}, stale-while-revalidate={ttl * 2}"

    @property
    def geocode_cache_control(self) -> str:
        """Cache-Control header for successful geocode responses."""
        ttl = self.geocode_cache_ttl_seconds
        return f"public, s-maxage={ttl}, stale-while-revalidate={ttl * 7}"


settings = Settings()
