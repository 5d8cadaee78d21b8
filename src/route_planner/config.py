"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTEPLANNER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Route Planner API"
    api_prefix: str = "/api"
    server_host: str = "0.0.0.0"
    server_port: int = Field(default=8000, ge=1, le=65535)
    data_root: Path = Field(default=Path("data"), description="Root directory for persisted route snapshots.")
    snapshot_key: str = Field(
        default="optimized_route",
        description="Well-known key of the single route snapshot slot.",
    )

    # External route ranking (SerpAPI Google Maps directions)
    external_ranking_enabled: Optional[bool] = Field(
        default=None,
        description="Use the external directions service to rank stops. None derives it from serpapi_key.",
    )
    serpapi_key: Optional[str] = Field(default=None, description="SerpAPI key for directions lookups.")
    serpapi_base_url: str = "https://serpapi.com/search"
    serpapi_engine: str = "google_maps"
    provider_timeout_seconds: float = Field(default=15.0, gt=0.0)
    provider_max_retries: int = Field(default=2, ge=0)
    provider_backoff_seconds: float = Field(default=0.5, ge=0.0)
    provider_max_parallel_requests: int = Field(default=8, ge=1)

    # Geocoding and detailed routes
    google_maps_api_key: Optional[str] = Field(default=None, description="Google Geocoding API key.")
    geocoding_base_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    rapidapi_key: Optional[str] = Field(default=None, description="RapidAPI key for the route planner service.")
    rapidapi_host: str = "route-planner2.p.rapidapi.com"

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @property
    def ranking_enabled(self) -> bool:
        """Resolved strategy switch for the external ranking path."""
        if self.external_ranking_enabled is not None:
            return self.external_ranking_enabled and bool(self.serpapi_key)
        return bool(self.serpapi_key)

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
