"""Scale, crop and watermark pipeline producing the final thumbnail bytes."""

from collections.abc import Callable
from io import BytesIO
from pathlib import Path

from loguru import logger
from PIL import Image

from ...utils.image_io import decode_image, encode_image
from .watermark import apply_watermark

# Receives (axis, size, encoded bytes) for every upscale intermediate
IntermediateSink = Callable[[str, int, bytes], None]


def scale_percent(current: int, target: int) -> int:
    """
    Integer percentage, rounded up, that makes `current` at least `target`.

    Equals ``ceil(100 + (target - current) / current * 100)`` computed without
    floating point error.
    """
    return 100 + -(-(target - current) * 100 // current)


def _scale(img: Image.Image, percent: int) -> Image.Image:
    new_size = (
        max(1, img.width * percent // 100),
        max(1, img.height * percent // 100),
    )
    return img.resize(new_size, Image.Resampling.LANCZOS)


def _upscale_pass(
    img: Image.Image,
    axis: str,
    target: int,
    fmt: str,
    quality: int,
    sink: IntermediateSink | None,
) -> Image.Image:
    current = img.width if axis == "width" else img.height
    if current >= target:
        return img

    percent = scale_percent(current, target)
    logger.debug(f"Upscaling {img.width}x{img.height} by {percent}% to reach {axis} {target}")
    data = encode_image(_scale(img, percent), fmt, quality)
    if sink is not None:
        sink(axis, target, data)

    # Reload so the next pass sees the size of the encoded intermediate
    return decode_image(data)


def derive_thumbnail(
    *,
    image: Image.Image,
    width: int,
    height: int,
    fmt: str = "JPEG",
    quality: int = 85,
    watermark_path: str | Path | None = None,
    intermediate_sink: IntermediateSink | None = None,
) -> bytes:
    """
    Produce an exactly `width` x `height` thumbnail of `image`.

    Images smaller than the target along an axis are first scaled up (width
    pass, then height pass on the updated size). The crop is anchored at the
    top-left corner; it does not centre.

    Args:
        image: Decoded source image
        width: Target width
        height: Target height
        fmt: PIL output format
        quality: JPEG/WEBP quality
        watermark_path: Watermark to overlay, if any
        intermediate_sink: Called with each encoded upscale intermediate

    Returns:
        Encoded thumbnail

    Raises:
        ValueError: If width or height is not positive
    """
    if width < 1 or height < 1:
        raise ValueError(f"Invalid thumbnail size {width}x{height}")

    img = _upscale_pass(image, "width", width, fmt, quality, intermediate_sink)
    img = _upscale_pass(img, "height", height, fmt, quality, intermediate_sink)

    cropped = img.crop((0, 0, width, height))
    data = encode_image(cropped, fmt, quality)

    if watermark_path is not None:
        data = apply_watermark(
            base=BytesIO(data),
            watermark=watermark_path,
            fmt=fmt,
            quality=quality,
        )
    return data
