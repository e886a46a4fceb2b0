"""Application configuration loaded via Pydantic settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    LOG_PSEUDONYM_SECRET: str = Field(...)
    PSYCHIC_LOG_LEVEL: str = Field(default="info")
    PSYCHIC_LOG_DIR: Path | None = Field(default=None)
    PSYCHIC_LOG_SCHEMA_VERSION: str = Field(default="1.0.0")

    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8080)
    DATA_DIR: Path = Field(default=Path("/data"))

    # Google Maps Platform (reverse geocoding and the static map card)
    GOOGLE_MAPS_API_KEY: str | None = Field(default=None)
    GEOCODING_URL: str = Field(default="https://maps.googleapis.com/maps/api/geocode/json")
    GEOCODING_TIMEOUT_SECONDS: float = Field(default=10.0)
    STATIC_MAPS_URL: str = Field(default="https://maps.googleapis.com/maps/api/staticmap")
    STATIC_MAPS_SIZE: str = Field(default="640x640")

    # Which location permission the request_location intent asks for.
    LOCATION_PERMISSION: Literal["coarse", "precise"] = Field(default="coarse")
    # What request intents do when the user-record store cannot be read.
    STORE_READ_FAILURE_POLICY: Literal["request_permission", "apologize"] = Field(
        default="request_permission"
    )

    HEALTHCHECK_API_TOKEN: str | None = Field(default=None)
    ENABLE_HEALTHCHECK_AUTH: bool = Field(default=False)


settings = Settings()  # type: ignore[call-arg]
config = settings  # Alias used throughout the service layer


__all__ = ["Settings", "settings", "config"]
