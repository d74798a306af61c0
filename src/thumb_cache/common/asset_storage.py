"""
AssetStorage Protocol - public-directory storage for derived images.

Asset paths are public-root-relative strings such as
``/thumbs/<hash>_<stem>_200x100.jpg``; the same string maps to a file under
the public directory and to a URL under the public base URL.
"""

from __future__ import annotations

import os
import tempfile
from os import PathLike
from pathlib import Path
from typing import Protocol, override, runtime_checkable

from .errors import AssetPathError


@runtime_checkable
class AssetStorage(Protocol):
    """
    Protocol for derived asset storage.

    Files are write-once: an existing file is authoritative and is never
    overwritten.
    """

    def ensure_directory(self, folder: str) -> Path:
        """Create `folder` (public-root-relative) if missing and return its path."""
        ...

    def exists(self, asset_path: str) -> bool:
        ...

    def resolve_path(self, asset_path: str) -> Path:
        """
        Resolve an asset path to an absolute filesystem path.

        Only for filesystem-bound libraries (PIL); callers should otherwise
        stay with asset paths.
        """
        ...

    def write(self, asset_path: str, data: bytes) -> bool:
        """
        Store `data` at `asset_path` unless a file is already there.

        Returns:
            True if written, False if an existing file was kept.
        """
        ...

    def url_for(self, asset_path: str) -> str:
        """Public URL of an asset path."""
        ...


def join_url(base_url: str, path: str) -> str:
    """Absolute URL for `path`; URLs that already carry a scheme are returned as-is."""
    if "://" in path or path.startswith("//"):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class LocalAssetStorage(AssetStorage):
    """
    Local filesystem implementation of AssetStorage.

    Layout:
        public_dir/
            <thumbs_folder>/
                <asset files>
    """

    def __init__(self, public_dir: str | PathLike[str], base_url: str):
        self._public_dir: Path = Path(public_dir).expanduser().resolve()
        self._public_dir.mkdir(parents=True, exist_ok=True)
        self._base_url: str = base_url

    @property
    def public_dir(self) -> Path:
        return self._public_dir

    def _safe_path(self, asset_path: str) -> Path:
        """
        Resolve and validate a public-root-relative path.
        Prevents path traversal.
        """
        resolved = (self._public_dir / asset_path.lstrip("/")).resolve()
        if self._public_dir not in resolved.parents and resolved != self._public_dir:
            raise AssetPathError(f"Invalid asset path (path traversal detected): {asset_path}")
        return resolved

    @override
    def ensure_directory(self, folder: str) -> Path:
        path = self._safe_path(folder)
        path.mkdir(parents=True, exist_ok=True)
        return path

    @override
    def exists(self, asset_path: str) -> bool:
        return self._safe_path(asset_path).is_file()

    @override
    def resolve_path(self, asset_path: str) -> Path:
        return self._safe_path(asset_path)

    @override
    def write(self, asset_path: str, data: bytes) -> bool:
        dst = self._safe_path(asset_path)
        if dst.exists():
            return False
        dst.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=dst.parent, prefix=".", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as f:
                _ = f.write(data)
            os.replace(tmp_name, dst)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return True

    @override
    def url_for(self, asset_path: str) -> str:
        return join_url(self._base_url, asset_path)
