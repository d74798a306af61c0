"""Static configuration, loaded once at startup from THUMBS_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import ClassVar

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CACHE_KEY_PLACEHOLDERS = ("{hash}", "{width}", "{height}", "{watermark}")


class ThumbnailSettings(BaseSettings):
    """Configuration for the thumbnail handler."""

    # Public assets
    public_dir: Path = Field(Path("public"), description="Filesystem root served at base_url")
    base_url: str = Field("http://localhost", description="Public URL of public_dir")
    thumbs_folder: str = Field("/thumbs/", description="Folder for derived assets, relative to public_dir")

    # Defaults used when neither width nor height is requested
    thumbs_width: int = Field(150, gt=0)
    thumbs_height: int = Field(150, gt=0)

    # Cache
    cache_key_format: str = Field(
        "thumb:{hash}:{width}x{height}:{watermark}",
        description="Cache key template with {hash}, {width}, {height} and {watermark} placeholders",
    )
    cache_minutes: int = Field(60, gt=0)

    # Fallback / watermark assets
    url_not_found: str = Field("/images/not-found.jpg", description="Image used when a source is invalid")
    watermark_file: str = Field("/images/watermark.png", description="Watermark image, relative to public_dir")

    # Processing
    fetch_timeout: float = Field(10.0, gt=0, description="Timeout in seconds for remote sources")
    jpeg_quality: int = Field(85, ge=1, le=100)
    keep_intermediates: bool = Field(False, description="Also write upscale intermediates to thumbs_folder")

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="THUMBS_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("cache_key_format")
    @classmethod
    def _check_placeholders(cls, value: str) -> str:
        missing = [p for p in CACHE_KEY_PLACEHOLDERS if p not in value]
        if missing:
            raise ValueError(f"cache_key_format is missing placeholders: {', '.join(missing)}")
        return value

    @field_validator("thumbs_folder")
    @classmethod
    def _normalize_folder(cls, value: str) -> str:
        return "/" + value.strip("/") + "/" if value.strip("/") else "/"

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_minutes * 60.0


@lru_cache
def get_settings() -> ThumbnailSettings:
    """Process-wide settings instance."""
    return ThumbnailSettings()
