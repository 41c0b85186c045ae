"""Configuration settings for the SACHET alert cache."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlencode

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SACHET_",
        extra="ignore",
        populate_by_name=True,
    )

    api_base_url: str = "https://sachet.ndma.gov.in/cap_public_website"
    alerts_endpoint: str = "FetchLocationWiseAlerts"
    latitude: float = 15.2993
    longitude: float = 74.1240
    radius_km: float = 100
    source_name: str = "SACHET NDMA"

    data_dir: Path = Field(default_factory=lambda: PACKAGE_DIR / "data")
    cache_filename: str = "goa-sachet-alerts.geojson"
    log_filename: str = "debug-log.txt"

    request_timeout_seconds: float | None = None
    log_format: Literal["text", "json"] = "text"

    @model_validator(mode="after")
    def _check_location(self) -> "Settings":
        if not self.api_base_url or not self.api_base_url.strip():
            raise ValueError("api_base_url must be configured")
        if not -90 <= self.latitude <= 90:
            raise ValueError("latitude must be between -90 and 90")
        if not -180 <= self.longitude <= 180:
            raise ValueError("longitude must be between -180 and 180")
        if self.radius_km <= 0:
            raise ValueError("radius_km must be positive")
        return self

    @property
    def alert_url(self) -> str:
        query = urlencode(
            {
                "lat": _format_number(self.latitude),
                "long": _format_number(self.longitude),
                "radius": _format_number(self.radius_km),
            }
        )
        base = self.api_base_url.rstrip("/")
        return f"{base}/{self.alerts_endpoint.lstrip('/')}?{query}"

    @property
    def cache_path(self) -> Path:
        return self.data_dir / self.cache_filename

    @property
    def log_path(self) -> Path:
        return self.data_dir / self.log_filename


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def _format_number(value: float) -> str:
    # 100.0 -> "100", 15.2993 -> "15.2993"
    return str(int(value)) if float(value).is_integer() else repr(float(value))
