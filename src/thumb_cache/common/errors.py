"""Exception taxonomy for thumbnail derivation."""

from typing import override


class ThumbnailError(Exception):
    """Base class for thumbnail errors."""


class SourceUnavailableError(ThumbnailError):
    """Source could not be used; recoverable by substituting the fallback image."""

    def __init__(self, url: str, reason: str | None = None):
        self.url: str = url
        self.reason: str | None = reason
        super().__init__(url)

    @override
    def __str__(self) -> str:
        if self.reason:
            return f"{self.url}: {self.reason}"
        return self.url


class SourceUnreachableError(SourceUnavailableError):
    """Source URL is empty, the root path, or cannot be opened for reading."""


class NotAnImageError(SourceUnavailableError):
    """Source could be read but does not decode as an image."""


class FallbackInvalidError(ThumbnailError):
    """The configured not-found image is itself unusable."""

    def __init__(self, url: str, fallback_url: str):
        self.url: str = url
        self.fallback_url: str = fallback_url
        super().__init__(f"Fallback image '{fallback_url}' is invalid (requested '{url}')")


class AssetPathError(ThumbnailError, ValueError):
    """Asset path resolves outside the public directory."""


class WatermarkError(ThumbnailError):
    """Configured watermark file does not decode as an image."""

    def __init__(self, path: str, reason: str | None = None):
        self.path: str = path
        self.reason: str | None = reason
        message = f"Invalid watermark '{path}'"
        super().__init__(f"{message}: {reason}" if reason else message)
