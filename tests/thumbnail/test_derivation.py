"""Tests for the scale/crop/watermark pipeline."""

from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from thumb_cache.thumbnail.algo.derivation import derive_thumbnail, scale_percent

BLUE = (0, 0, 255)
RED = (255, 0, 0)


def _decode(data: bytes) -> Image.Image:
    img = Image.open(BytesIO(data))
    img.load()
    return img


# ============================================================================
# scale_percent
# ============================================================================


def test_scale_percent_examples():
    assert scale_percent(100, 150) == 150
    assert scale_percent(100, 300) == 300
    assert scale_percent(1000, 1001) == 101
    assert scale_percent(3, 4) == 134


@pytest.mark.parametrize(
    ("current", "target"),
    [(1, 1000), (3, 4), (7, 13), (150, 200), (999, 1000), (333, 1000)],
)
def test_scale_percent_reaches_target(current: int, target: int):
    percent = scale_percent(current, target)
    assert percent >= 100
    assert current * percent // 100 >= target


# ============================================================================
# derive_thumbnail
# ============================================================================


def test_derive_crops_large_image_to_exact_size():
    image = Image.new("RGB", (1000, 500), color=(255, 255, 255))

    out = _decode(derive_thumbnail(image=image, width=200, height=100))

    assert out.size == (200, 100)
    assert out.format == "JPEG"


def test_derive_crop_is_anchored_top_left():
    image = Image.new("RGB", (400, 400), color=RED)
    image.paste(BLUE, (0, 0, 100, 100))

    out = _decode(derive_thumbnail(image=image, width=100, height=100, fmt="PNG"))

    assert out.size == (100, 100)
    assert out.getpixel((0, 0)) == BLUE
    assert out.getpixel((99, 99)) == BLUE


def test_derive_upscales_both_axes_before_cropping():
    image = Image.new("RGB", (100, 50), color=(10, 20, 30))
    seen: list[tuple[str, int, tuple[int, int]]] = []

    def sink(axis: str, size: int, data: bytes) -> None:
        seen.append((axis, size, _decode(data).size))

    out = _decode(
        derive_thumbnail(image=image, width=300, height=200, intermediate_sink=sink)
    )

    assert out.size == (300, 200)
    # width pass: 300% of 100x50; height pass: 134% of 300x150
    assert seen == [("width", 300, (300, 150)), ("height", 200, (402, 201))]


def test_derive_height_pass_only():
    image = Image.new("RGB", (500, 100), color=(10, 20, 30))
    seen: list[str] = []

    out = _decode(
        derive_thumbnail(
            image=image,
            width=200,
            height=200,
            intermediate_sink=lambda axis, size, data: seen.append(axis),
        )
    )

    assert out.size == (200, 200)
    assert seen == ["height"]


def test_derive_skips_upscale_when_large_enough():
    image = Image.new("RGB", (300, 300))
    seen: list[str] = []

    _ = derive_thumbnail(
        image=image, width=300, height=300, intermediate_sink=lambda a, s, d: seen.append(a)
    )

    assert seen == []


def test_derive_rejects_non_positive_size():
    with pytest.raises(ValueError):
        _ = derive_thumbnail(image=Image.new("RGB", (10, 10)), width=0, height=10)


def test_derive_applies_watermark(tmp_path: Path):
    mark_path = tmp_path / "mark.png"
    Image.new("RGBA", (246, 57), color=(0, 0, 0, 255)).save(mark_path)
    image = Image.new("RGB", (500, 300), color=(255, 255, 255))

    out = _decode(
        derive_thumbnail(image=image, width=500, height=300, fmt="PNG", watermark_path=mark_path)
    )

    assert out.size == (500, 300)
    assert out.getpixel((10, 260)) == (0, 0, 0)
    assert out.getpixel((10, 10)) == (255, 255, 255)
