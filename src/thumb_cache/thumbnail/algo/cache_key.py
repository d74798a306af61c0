"""Cache keys and asset paths for derived images."""

import hashlib
import re
from posixpath import basename, splitext
from urllib.parse import unquote, urlsplit

from PIL import Image

DEFAULT_EXTENSION = "jpg"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._=-]+")


def url_hash(url: str) -> str:
    """MD5 hex digest of an absolute source URL."""
    return hashlib.md5(url.encode("utf-8")).hexdigest()


def _fmt(value: int | None) -> str:
    return "" if value is None else str(value)


def build_key(
    url: str,
    width: int | None,
    height: int | None,
    watermark: bool,
    template: str,
) -> str:
    """
    Cache key for one (source, size, watermark) combination.

    `template` carries ``{hash}``, ``{width}``, ``{height}`` and
    ``{watermark}`` placeholders. A missing axis renders as an empty string.
    """
    return template.format(
        hash=url_hash(url),
        width=_fmt(width),
        height=_fmt(height),
        watermark="true" if watermark else "false",
    )


def split_source_name(url: str) -> tuple[str, str]:
    """
    File stem and extension of a source URL.

    Identifiers without an extension (``/show?id=1&uid=abc``) keep the last
    ``&`` segment as stem and default to ``jpg``, as do extensions Pillow
    does not know. Characters unsafe in a file name become ``_``.
    """
    parts = urlsplit(url)
    name = basename(unquote(parts.path))
    stem, ext = splitext(name)

    if not ext or ext == ".":
        # Query-only identifiers: take the last &-separated token
        tail = f"{name}?{parts.query}" if parts.query else name
        return _safe_stem(tail.split("&")[-1]), DEFAULT_EXTENSION

    ext = ext[1:].split("?")[0]
    if f".{ext.lower()}" not in Image.registered_extensions():
        return _safe_stem(stem), DEFAULT_EXTENSION
    return _safe_stem(stem), ext


def _safe_stem(stem: str) -> str:
    return _UNSAFE_CHARS.sub("_", stem) or "image"


def build_asset_path(
    url: str,
    stem: str,
    width: int | None,
    height: int | None,
    watermark: bool,
    extension: str,
    thumbs_folder: str,
) -> str:
    """Public-root-relative path of the derived asset."""
    suffix = "_watermarked" if watermark else ""
    ext = extension.split("?")[0]
    return f"{thumbs_folder}{url_hash(url)}_{stem}_{_fmt(width)}x{_fmt(height)}{suffix}.{ext}"


def intermediate_path(
    stem: str,
    axis: str,
    size: int,
    watermark: bool,
    extension: str,
    thumbs_folder: str,
) -> str:
    """
    Path of an upscale intermediate: ``<stem>_<w>x.<ext>`` or ``<stem>_x<h>.<ext>``.

    Carries no URL hash, so it never collides with a final asset path.
    """
    dims = f"{size}x" if axis == "width" else f"x{size}"
    suffix = "_watermarked" if watermark else ""
    return f"{thumbs_folder}{stem}_{dims}{suffix}.{extension}"
