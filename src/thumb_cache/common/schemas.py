"""Thumbnail request and result models."""

from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

SENTINEL_PREFIX = "image-not-found:"


class SourceStatus(StrEnum):
    EXISTS = "exists"
    UNREACHABLE = "unreachable"


class ThumbnailRequest(BaseModel):
    """A single thumbnail request. Created per call, discarded once a URL is produced."""

    source_url: str = Field(description="Source image URL, absolute or relative to the public root")
    width: int | None = Field(None, gt=0, description="Requested width in pixels")
    height: int | None = Field(None, gt=0, description="Requested height in pixels")
    watermark: bool = Field(False, description="Overlay the configured watermark")

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


class ResolvedDimensions(BaseModel):
    """Final crop target, both axes populated."""

    width: int = Field(ge=1)
    height: int = Field(ge=1)

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    def as_tuple(self) -> tuple[int, int]:
        return self.width, self.height


class WatermarkSpec(BaseModel):
    """Target box for a watermark scaled against a base image."""

    target_width: int = Field(ge=1)
    target_height: int = Field(ge=1)

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


class ThumbnailResult(BaseModel):
    """Response body of the thumbnails endpoint."""

    url: str = Field(description="Public URL of the derived asset, or the not-found sentinel")
    found: bool = Field(description="False when the sentinel was returned")


def make_sentinel(url: str) -> str:
    return f"{SENTINEL_PREFIX}{url}"


def is_sentinel(value: str) -> bool:
    """True when `value` is a not-found sentinel rather than an asset URL."""
    return value.startswith(SENTINEL_PREFIX)
