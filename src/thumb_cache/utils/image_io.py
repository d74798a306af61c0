"""Pillow decode/encode helpers shared by the derivation algorithms."""

from io import BytesIO
from typing import BinaryIO

from PIL import Image, ImageFile, UnidentifiedImageError

from ..common.errors import NotAnImageError

ImageFile.LOAD_TRUNCATED_IMAGES = True

_FORMAT_MAP = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
    "gif": "GIF",
    "bmp": "BMP",
    "tiff": "TIFF",
}


def get_pil_format(extension: str) -> str:
    """Convert a file extension to a PIL format name (JPEG for unknown or read-only ones)."""
    ext = extension.lower().lstrip(".")
    if ext in _FORMAT_MAP:
        return _FORMAT_MAP[ext]
    fmt = Image.registered_extensions().get(f".{ext}", "JPEG")
    return fmt if fmt in Image.SAVE else "JPEG"


def decode_image(data: bytes | BinaryIO, url: str = "") -> Image.Image:
    """Decode and fully load an image.

    Raises:
        NotAnImageError: If the content is not a decodable image
    """
    stream = BytesIO(data) if isinstance(data, (bytes, bytearray)) else data
    try:
        with Image.open(stream) as img:
            img.load()
            return img.copy()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise NotAnImageError(url, str(e)) from e


def encode_image(img: Image.Image, fmt: str, quality: int = 85) -> bytes:
    """Encode `img` in PIL format `fmt`, converting modes the format cannot hold."""
    save_kwargs: dict[str, object] = {}

    if fmt == "JPEG":
        # JPEG does not support alpha channel
        if img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        save_kwargs["quality"] = quality
        save_kwargs["progressive"] = True
    elif fmt == "WEBP":
        save_kwargs["quality"] = quality
    elif fmt == "PNG":
        save_kwargs["optimize"] = True

    buf = BytesIO()
    img.save(buf, format=fmt, **save_kwargs)
    return buf.getvalue()
