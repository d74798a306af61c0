"""Tests for LocalAssetStorage."""

from pathlib import Path

import pytest

from thumb_cache.common.asset_storage import AssetStorage, LocalAssetStorage, join_url
from thumb_cache.common.errors import AssetPathError


def test_implements_protocol(storage: LocalAssetStorage):
    assert isinstance(storage, AssetStorage)


def test_write_is_write_once(storage: LocalAssetStorage, public_dir: Path):
    assert storage.write("/thumbs/a.jpg", b"first") is True
    assert storage.write("/thumbs/a.jpg", b"second") is False

    assert (public_dir / "thumbs" / "a.jpg").read_bytes() == b"first"
    assert storage.exists("/thumbs/a.jpg")


def test_write_leaves_no_temporary_files(storage: LocalAssetStorage, public_dir: Path):
    _ = storage.write("/thumbs/a.jpg", b"data")

    assert [p.name for p in (public_dir / "thumbs").iterdir()] == ["a.jpg"]


def test_ensure_directory(storage: LocalAssetStorage, public_dir: Path):
    path = storage.ensure_directory("/thumbs/")

    assert path == (public_dir / "thumbs").resolve()
    assert path.is_dir()


def test_path_traversal_rejected(storage: LocalAssetStorage):
    with pytest.raises(AssetPathError):
        _ = storage.resolve_path("/../outside.jpg")
    with pytest.raises(AssetPathError):
        _ = storage.write("../../outside.jpg", b"x")


def test_url_for(storage: LocalAssetStorage):
    assert storage.url_for("/thumbs/a.jpg") == "http://x/thumbs/a.jpg"


@pytest.mark.parametrize(
    ("base", "path", "expected"),
    [
        ("http://x", "/a.jpg", "http://x/a.jpg"),
        ("http://x/", "a.jpg", "http://x/a.jpg"),
        ("http://x", "", "http://x/"),
        ("http://x", "https://cdn.example/a.jpg", "https://cdn.example/a.jpg"),
        ("http://x", "//cdn.example/a.jpg", "//cdn.example/a.jpg"),
    ],
)
def test_join_url(base: str, path: str, expected: str):
    assert join_url(base, path) == expected
