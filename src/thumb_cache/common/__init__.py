"""Common module - protocols, schemas, and errors."""

from .asset_storage import AssetStorage, LocalAssetStorage
from .cache_store import CacheStore, InMemoryCacheStore
from .schemas import ResolvedDimensions, ThumbnailRequest, WatermarkSpec

__all__ = [
    "AssetStorage",
    "CacheStore",
    "InMemoryCacheStore",
    "LocalAssetStorage",
    "ResolvedDimensions",
    "ThumbnailRequest",
    "WatermarkSpec",
]
