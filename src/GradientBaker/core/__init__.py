"""Core utilities -- re-exports all public symbols for convenience."""

from .errors import (
    GradientTextureError,
    InvalidLayoutError,
    UnsupportedOutputFormatError,
    MissingOutputDestinationError,
)
from .gradient import (
    AlphaKey, ColorKey, GradientDefinition, GradientMode, GradientSet,
    evaluate, evaluate_many, fallback_gradient,
)
from .raster import (
    Orientation, PixelBuffer, StripLayout,
    clamp_layout, rasterize, sample_times,
    MIN_LENGTH, MAX_LENGTH, MIN_THICKNESS, MAX_THICKNESS,
)
from .io import (
    SUPPORTED_OUTPUT_EXTENSIONS,
    decode_image,
    encode_image,
    export_image,
    format_from_path,
)
from .records import ImportResult
from .paths import get_output_path, resolve_output_texture, unique_path
from .scanning import DEFINITION_EXTENSION, is_definition_file, scan_definitions
from .logging import setup_logging

__all__ = [
    "GradientTextureError", "InvalidLayoutError",
    "UnsupportedOutputFormatError", "MissingOutputDestinationError",
    "AlphaKey", "ColorKey", "GradientDefinition", "GradientMode", "GradientSet",
    "evaluate", "evaluate_many", "fallback_gradient",
    "Orientation", "PixelBuffer", "StripLayout",
    "clamp_layout", "rasterize", "sample_times",
    "MIN_LENGTH", "MAX_LENGTH", "MIN_THICKNESS", "MAX_THICKNESS",
    "SUPPORTED_OUTPUT_EXTENSIONS",
    "decode_image", "encode_image", "export_image", "format_from_path",
    "ImportResult",
    "get_output_path", "resolve_output_texture", "unique_path",
    "DEFINITION_EXTENSION", "is_definition_file", "scan_definitions",
    "setup_logging",
]
