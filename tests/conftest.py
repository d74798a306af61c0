"""Test configuration and fixtures for thumb_cache.

This module provides:
- Settings rooted in a temporary public directory
- Synthetic image factories (Pillow)
- Handler / storage / fetcher fixtures
"""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from PIL import Image

from thumb_cache.common.asset_storage import LocalAssetStorage
from thumb_cache.config import ThumbnailSettings
from thumb_cache.thumbnail.handler import ThumbnailHandler
from thumb_cache.utils.source_fetcher import SourceFetcher

BASE_URL = "http://x"

ImageFactory = Callable[..., Path]


# ============================================================================
# Synthetic media
# ============================================================================


@pytest.fixture
def make_image() -> ImageFactory:
    """Factory writing a solid-colour image and returning its path."""

    def _make(
        path: Path,
        size: tuple[int, int],
        color: tuple[int, ...] = (255, 255, 255),
        mode: str = "RGB",
        fmt: str | None = None,
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new(mode, size, color=color).save(path, format=fmt)
        return path

    return _make


@pytest.fixture
def public_dir(tmp_path: Path) -> Path:
    d = tmp_path / "public"
    d.mkdir()
    return d


@pytest.fixture
def settings(public_dir: Path, make_image: ImageFactory) -> ThumbnailSettings:
    """Settings with a valid not-found image and watermark in place."""
    _ = make_image(public_dir / "images" / "not-found.jpg", (300, 200), (128, 128, 128))
    _ = make_image(
        public_dir / "images" / "watermark.png", (246, 57), (0, 0, 0, 255), mode="RGBA"
    )
    return ThumbnailSettings(
        public_dir=public_dir,
        base_url=BASE_URL,
        thumbs_folder="/thumbs/",
        thumbs_width=150,
        thumbs_height=150,
        url_not_found="/images/not-found.jpg",
        watermark_file="/images/watermark.png",
    )


@pytest.fixture
def source_image(public_dir: Path, make_image: ImageFactory) -> Path:
    """1000x500 white JPEG served as http://x/a.jpg."""
    return make_image(public_dir / "a.jpg", (1000, 500))


# ============================================================================
# Services
# ============================================================================


@pytest.fixture
def storage(public_dir: Path) -> LocalAssetStorage:
    return LocalAssetStorage(public_dir, BASE_URL)


@pytest.fixture
def fetcher(public_dir: Path) -> Iterator[SourceFetcher]:
    f = SourceFetcher(public_dir, BASE_URL, timeout=1.0)
    yield f
    f.close()


@pytest.fixture
def handler(settings: ThumbnailSettings) -> Iterator[ThumbnailHandler]:
    h = ThumbnailHandler(settings)
    yield h
    h.close()


def asset_file(public_dir: Path, url: str) -> Path:
    """Filesystem path of an asset URL under BASE_URL."""
    assert url.startswith(BASE_URL + "/"), url
    return public_dir / url[len(BASE_URL) + 1 :]


@pytest.fixture
def open_asset(public_dir: Path) -> Callable[[str], Image.Image]:
    def _open(url: str) -> Image.Image:
        img = Image.open(asset_file(public_dir, url))
        img.load()
        return img

    return _open
