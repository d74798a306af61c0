"""Watermark scaling, placement and overlay."""

import math
from pathlib import Path
from typing import BinaryIO

from PIL import Image

from ...common.errors import NotAnImageError, WatermarkError
from ...common.schemas import WatermarkSpec
from ...utils.image_io import decode_image, encode_image

# Native aspect ratio (height / width) of the watermark artwork
WATERMARK_ASPECT = 57 / 246


def watermark_box(base_width: int) -> WatermarkSpec:
    """Largest box a watermark may occupy on a base image `base_width` wide."""
    target_width = max(1, int(base_width / 5))
    target_height = max(1, int(WATERMARK_ASPECT * target_width))
    return WatermarkSpec(target_width=target_width, target_height=target_height)


def watermark_placement(
    base_size: tuple[int, int],
    watermark_size: tuple[int, int],
) -> tuple[int, int]:
    """
    Top-left corner of the watermark: left edge, a tenth of the height above
    the bottom, but never more than two watermark heights above the bottom.
    """
    base_height = base_size[1]
    mark_height = watermark_size[1]

    x = 0
    y = (base_height - mark_height) - math.floor(base_height / 10 + 0.5)
    if base_height - y > mark_height * 2:
        y = base_height - mark_height * 2
    return x, y


def _open(source: str | Path | BinaryIO) -> Image.Image:
    if isinstance(source, (str, Path)):
        return decode_image(Path(source).read_bytes(), str(source))
    return decode_image(source)


def apply_watermark(
    *,
    base: str | Path | BinaryIO,
    watermark: str | Path | BinaryIO,
    fmt: str = "JPEG",
    quality: int = 85,
) -> bytes:
    """
    Overlay a watermark on a base image.

    Args:
        base: Path or binary stream of the base image
        watermark: Path or binary stream of the watermark image
        fmt: PIL output format
        quality: JPEG/WEBP quality

    Returns:
        Encoded composited image

    Raises:
        NotAnImageError: If the base image does not decode
        WatermarkError: If the watermark does not decode
        FileNotFoundError: If a path does not exist
    """
    image = _open(base)
    try:
        mark = _open(watermark)
    except NotAnImageError as e:
        name = str(watermark) if isinstance(watermark, (str, Path)) else "<stream>"
        raise WatermarkError(name, e.reason) from e

    box = watermark_box(image.width)
    if mark.width > box.target_width:
        mark.thumbnail((box.target_width, box.target_height), Image.Resampling.LANCZOS)

    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA")
    if mark.mode != "RGBA":
        mark = mark.convert("RGBA")

    image.paste(mark, watermark_placement(image.size, mark.size), mark)
    return encode_image(image, fmt, quality)
