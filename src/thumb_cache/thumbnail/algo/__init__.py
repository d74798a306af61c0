"""Pure thumbnail algorithms."""

from .cache_key import build_asset_path, build_key, split_source_name
from .derivation import derive_thumbnail, scale_percent
from .dimensions import infer_dimensions, resolve_dimensions
from .source_validator import SourceValidator
from .watermark import apply_watermark, watermark_box, watermark_placement

__all__ = [
    "SourceValidator",
    "apply_watermark",
    "build_asset_path",
    "build_key",
    "derive_thumbnail",
    "infer_dimensions",
    "resolve_dimensions",
    "scale_percent",
    "split_source_name",
    "watermark_box",
    "watermark_placement",
]
