"""Thumbnail derivation: dimension resolution, cache keys, derivation and watermarking."""

from .handler import ThumbnailHandler
from .routes import create_router

__all__ = ["ThumbnailHandler", "create_router"]
