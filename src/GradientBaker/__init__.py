"""Provide package metadata and the public API of `GradientBaker`."""

from .core import (
    AlphaKey,
    ColorKey,
    GradientDefinition,
    GradientMode,
    GradientSet,
    Orientation,
    PixelBuffer,
    StripLayout,
    decode_image,
    encode_image,
    evaluate,
    export_image,
    rasterize,
)

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "AlphaKey", "ColorKey", "GradientDefinition", "GradientMode", "GradientSet",
    "Orientation", "PixelBuffer", "StripLayout",
    "decode_image", "encode_image", "evaluate", "export_image", "rasterize",
]
