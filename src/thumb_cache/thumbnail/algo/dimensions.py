"""Requested-size normalisation and aspect-ratio inference."""

import math

from loguru import logger

from ...common.schemas import ResolvedDimensions


def _as_dimension(value: object) -> int | None:
    """Positive int for numeric input; None for empty, zero, negative or non-numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)  # pyright: ignore[reportArgumentType]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 1:
        return None
    return int(number)


def resolve_dimensions(
    width: object,
    height: object,
    default_width: int,
    default_height: int,
) -> tuple[int | None, int | None]:
    """
    Normalise a requested width/height pair.

    Args:
        width: Requested width (int, numeric string, or anything else for "absent")
        height: Requested height
        default_width: Used when both axes are absent
        default_height: Used when both axes are absent

    Returns:
        (width, height); one axis may still be None and is inferred once the
        source's intrinsic size is known.
    """
    w = _as_dimension(width)
    h = _as_dimension(height)
    if w is None and h is None:
        return default_width, default_height
    return w, h


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def infer_dimensions(
    width: int | None,
    height: int | None,
    intrinsic_width: int,
    intrinsic_height: int,
) -> ResolvedDimensions:
    """
    Complete a partial (width, height) pair from the source aspect ratio.

    A zero intrinsic dimension makes the ratio undefined; inference is then
    skipped and the missing axis copies the present one.
    """
    if width is None and height is None:
        raise ValueError("at least one of width/height is required")

    if height is None:
        assert width is not None
        if intrinsic_width > 0:
            height = max(1, _round_half_up(width * (intrinsic_height / intrinsic_width)))
        else:
            logger.warning(f"Cannot infer height from intrinsic size {intrinsic_width}x{intrinsic_height}")
            height = width

    if width is None:
        if intrinsic_height > 0:
            width = max(1, _round_half_up(height * (intrinsic_width / intrinsic_height)))
        else:
            logger.warning(f"Cannot infer width from intrinsic size {intrinsic_width}x{intrinsic_height}")
            width = height

    return ResolvedDimensions(width=width, height=height)
