"""Thumbnail handler - cached, fallback-aware entry point of the derivation pipeline."""

from loguru import logger

from ..common.asset_storage import AssetStorage, LocalAssetStorage, join_url
from ..common.cache_store import CacheStore, InMemoryCacheStore
from ..common.errors import FallbackInvalidError, SourceUnavailableError, SourceUnreachableError
from ..common.schemas import SourceStatus, ThumbnailRequest, make_sentinel
from ..config import ThumbnailSettings
from ..utils.image_io import get_pil_format
from ..utils.source_fetcher import SourceFetcher
from .algo.cache_key import build_asset_path, build_key, intermediate_path, split_source_name
from .algo.derivation import derive_thumbnail
from .algo.dimensions import infer_dimensions, resolve_dimensions
from .algo.source_validator import SourceValidator


class ThumbnailHandler:
    """
    Returns public URLs of resized, optionally watermarked, images.

    Example:
        handler = ThumbnailHandler(ThumbnailSettings(public_dir="./public"))
        url = handler.thumb("/uploads/cat.jpg", 200, 100)
        if is_sentinel(url):
            ...  # render a placeholder
    """

    def __init__(
        self,
        settings: ThumbnailSettings,
        cache: CacheStore | None = None,
        storage: AssetStorage | None = None,
        fetcher: SourceFetcher | None = None,
    ):
        self.settings: ThumbnailSettings = settings
        self.cache: CacheStore = cache if cache is not None else InMemoryCacheStore()
        self.storage: AssetStorage = (
            storage
            if storage is not None
            else LocalAssetStorage(settings.public_dir, settings.base_url)
        )
        self.fetcher: SourceFetcher = (
            fetcher
            if fetcher is not None
            else SourceFetcher(settings.public_dir, settings.base_url, timeout=settings.fetch_timeout)
        )
        self.validator: SourceValidator = SourceValidator(self.fetcher)

        _ = self.storage.ensure_directory(settings.thumbs_folder)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def thumb(
        self,
        url: str,
        width: object = None,
        height: object = None,
        watermark: bool = False,
    ) -> str:
        """
        Public URL of `url` cropped to width x height.

        Either dimension may be omitted and is then inferred from the source
        aspect ratio; when both are omitted the configured defaults apply.

        Returns:
            Asset URL, or ``image-not-found:<url>`` when neither the source
            nor the configured fallback image is usable.

        Raises:
            FileNotFoundError: If a watermark is requested and the configured
                watermark file is missing
            WatermarkError: If a watermark is requested and the configured
                watermark file does not decode
        """
        w, h = resolve_dimensions(
            width, height, self.settings.thumbs_width, self.settings.thumbs_height
        )
        absolute = self.asset_url(url)

        key = build_key(absolute, w, h, watermark, self.settings.cache_key_format)
        logger.info(f"Requesting image for {key}")

        try:
            return self.cache.remember(
                key,
                self.settings.cache_ttl_seconds,
                lambda: self._generate(key, absolute, w, h, watermark),
            )
        except FallbackInvalidError as e:
            logger.error(f"Image not found: {e}")
            return make_sentinel(absolute)

    def width(self, url: str, width: object = None, watermark: bool = False) -> str:
        """Thumbnail constrained by width only."""
        return self.thumb(url, width, None, watermark)

    def height(self, url: str, height: object = None, watermark: bool = False) -> str:
        """Thumbnail constrained by height only."""
        return self.thumb(url, None, height, watermark)

    def get(self, request: ThumbnailRequest) -> str:
        return self.thumb(request.source_url, request.width, request.height, request.watermark)

    def asset_url(self, path: str) -> str:
        """Absolute URL of a public path."""
        return join_url(self.settings.base_url, path)

    def close(self) -> None:
        self.fetcher.close()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _generate(
        self,
        key: str,
        url: str,
        width: int | None,
        height: int | None,
        watermark: bool,
    ) -> str:
        logger.info(
            f"Generating image for {key}. Caching it for {self.settings.cache_minutes} minutes."
        )

        # Source first, then the not-found image once; never the fallback twice
        fallback = self.asset_url(self.settings.url_not_found)
        candidates = [url]
        if url not in (fallback, self.settings.url_not_found):
            candidates.append(fallback)

        last_error: SourceUnavailableError | None = None
        for candidate in candidates:
            try:
                return self._attempt(candidate, width, height, watermark)
            except SourceUnavailableError as e:
                logger.warning(f"Source unusable, {type(e).__name__}: {e}")
                last_error = e

        raise FallbackInvalidError(url, fallback) from last_error

    def _attempt(
        self,
        url: str,
        width: int | None,
        height: int | None,
        watermark: bool,
    ) -> str:
        """
        Derive (or reuse) the asset for one source URL.

        Raises:
            SourceUnreachableError: If the source cannot be opened
            NotAnImageError: If the source does not decode
        """
        if self.validator.validate(url) is SourceStatus.UNREACHABLE:
            raise SourceUnreachableError(url)

        stem, extension = split_source_name(url)
        asset_path = build_asset_path(
            url, stem, width, height, watermark, extension, self.settings.thumbs_folder
        )
        if self.storage.exists(asset_path):
            return self.storage.url_for(asset_path)

        image = self.validator.load(url)
        dims = infer_dimensions(width, height, image.width, image.height)

        def keep_intermediate(axis: str, size: int, data: bytes) -> None:
            path = intermediate_path(
                stem, axis, size, watermark, extension, self.settings.thumbs_folder
            )
            _ = self.storage.write(path, data)

        data = derive_thumbnail(
            image=image,
            width=dims.width,
            height=dims.height,
            fmt=get_pil_format(extension),
            quality=self.settings.jpeg_quality,
            watermark_path=(
                self.storage.resolve_path(self.settings.watermark_file) if watermark else None
            ),
            intermediate_sink=keep_intermediate if self.settings.keep_intermediates else None,
        )

        if self.storage.write(asset_path, data):
            logger.info(f"Saved {dims.width}x{dims.height} thumbnail to {asset_path}")
        return self.storage.url_for(asset_path)
