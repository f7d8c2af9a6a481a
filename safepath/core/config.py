"""
SafePath - Configuration Management
Centralized configuration using pydantic-settings.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    ingestion_log_level: Optional[str] = None
    aggregation_log_level: Optional[str] = None

    # Google Maps Platform (Places + Directions)
    google_maps_api_key: Optional[str] = None

    # Provider endpoints
    usgs_url: str = "https://earthquake.usgs.gov/fdsnws/event/1/query"
    nws_alerts_url: str = "https://api.weather.gov/alerts/active"
    fema_url: str = "https://www.fema.gov/api/open/v2/DisasterDeclarationsSummaries"
    places_url: str = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
    directions_url: str = "https://maps.googleapis.com/maps/api/directions/json"
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    user_agent: str = "SafePath/1.0 (emergency-aggregation)"

    # Provider behaviour
    provider_timeout_seconds: float = 10.0
    usgs_min_magnitude: float = 2.5
    fema_lookback_days: int = 30
    fema_state: Optional[str] = None
    fema_page_size: int = 50
    places_max_radius_m: float = 50000.0
    overpass_max_bbox_degrees: float = 0.1

    # Aggregation
    default_radius_m: float = 25000.0
    max_routes: int = 5
    route_dedup_threshold_m: float = 300.0
    zone_dedup_threshold_m: float = 100.0
    safe_destination_min_m: float = 25000.0

    # Synthetic fallback
    synthetic_seed: Optional[int] = None
    synthetic_route_spread: str = "eight"  # eight | three

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    @property
    def google_configured(self) -> bool:
        return bool(self.google_maps_api_key)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
