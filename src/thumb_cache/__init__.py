"""thumb_cache - cached thumbnail and watermark derivation for image URLs."""

from .common.asset_storage import AssetStorage, LocalAssetStorage
from .common.cache_store import CacheStore, InMemoryCacheStore
from .common.errors import (
    FallbackInvalidError,
    NotAnImageError,
    SourceUnavailableError,
    SourceUnreachableError,
    ThumbnailError,
    WatermarkError,
)
from .common.schemas import SENTINEL_PREFIX, ThumbnailRequest, is_sentinel
from .config import ThumbnailSettings, get_settings
from .thumbnail.handler import ThumbnailHandler
from .thumbnail.routes import create_router

__version__ = "0.1.0"

__all__ = [
    "AssetStorage",
    "CacheStore",
    "FallbackInvalidError",
    "InMemoryCacheStore",
    "LocalAssetStorage",
    "NotAnImageError",
    "SENTINEL_PREFIX",
    "SourceUnavailableError",
    "SourceUnreachableError",
    "ThumbnailError",
    "ThumbnailHandler",
    "ThumbnailRequest",
    "ThumbnailSettings",
    "WatermarkError",
    "__version__",
    "create_router",
    "get_settings",
    "is_sentinel",
]
