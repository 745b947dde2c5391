"""Rasterize gradient sets into RGBA8 strip textures.

Each gradient occupies one band of ``thickness`` pixels. Samples run along the
strip's length; every sample is evaluated once and replicated across the
band.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple, Union

import numpy as np

from .errors import InvalidLayoutError
from .gradient import GradientDefinition, GradientSet, evaluate_many

logger = logging.getLogger("gradient_baker.raster")

MIN_LENGTH = 2
MAX_LENGTH = 16 * 1024
MIN_THICKNESS = 1
MAX_THICKNESS = 16 * 1024


class Orientation(Enum):
    """Enumerate strip orientations."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class StripLayout:
    """Size and direction of a gradient strip.

    ``length`` is the number of samples along the gradient; ``thickness`` is
    the extent of each gradient's band across it.
    """

    orientation: Orientation = Orientation.HORIZONTAL
    length: int = 256
    thickness: int = 4
    reverse: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "orientation", Orientation(self.orientation))
        if int(self.length) < MIN_LENGTH:
            raise InvalidLayoutError(
                f"Strip length must be >= {MIN_LENGTH}, got {self.length}"
            )
        if int(self.thickness) < MIN_THICKNESS:
            raise InvalidLayoutError(
                f"Strip thickness must be >= {MIN_THICKNESS}, got {self.thickness}"
            )
        object.__setattr__(self, "length", int(self.length))
        object.__setattr__(self, "thickness", int(self.thickness))
        object.__setattr__(self, "reverse", bool(self.reverse))

    def dimensions(self, gradient_count: int) -> Tuple[int, int]:
        """Return ``(width, height)`` of a strip holding ``gradient_count`` bands."""
        across = self.thickness * gradient_count
        if self.orientation is Orientation.HORIZONTAL:
            return self.length, across
        return across, self.length


@dataclass(eq=False)
class PixelBuffer:
    """Row-major RGBA8 image stored as an (height, width, 4) uint8 array."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[-1] != 4:
            raise ValueError(
                f"PixelBuffer needs an HxWx4 array, got shape {self.pixels.shape}"
            )
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"PixelBuffer needs uint8 pixels, got {self.pixels.dtype}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        """Return the RGBA8 value at column ``x``, row ``y``."""
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.pixels.copy())


def clamp_layout(length: int, thickness: int) -> Tuple[int, int]:
    """Clamp strip length and thickness to the supported range."""
    length = min(max(int(length), MIN_LENGTH), MAX_LENGTH)
    thickness = min(max(int(thickness), MIN_THICKNESS), MAX_THICKNESS)
    return length, thickness


def _to_rgba8(colors: np.ndarray) -> np.ndarray:
    return np.round(np.clip(colors, 0.0, 1.0) * 255.0).astype(np.uint8)


def sample_times(layout: StripLayout) -> np.ndarray:
    """Return the gradient time for each sample index along the strip."""
    t = np.arange(layout.length, dtype=np.float64) / (layout.length - 1)
    # Vertical strips apply reverse with the opposite polarity.
    if layout.orientation is Orientation.HORIZONTAL:
        flip = layout.reverse
    else:
        flip = not layout.reverse
    return 1.0 - t if flip else t


def rasterize(gradients: Union[GradientSet, Sequence[GradientDefinition]],
              layout: StripLayout) -> PixelBuffer:
    """Rasterize ``gradients`` into a new pixel buffer.

    Horizontal strips place the last gradient in the first band (row 0) and
    stack earlier gradients after it. Vertical strips place the first gradient
    in the first band (column 0).
    """
    if not isinstance(gradients, GradientSet):
        gradients = GradientSet(tuple(gradients))
    effective = gradients.resolve()
    width, height = layout.dimensions(len(effective))
    times = sample_times(layout)
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    thick = layout.thickness

    if layout.orientation is Orientation.HORIZONTAL:
        for band, gradient in enumerate(reversed(effective)):
            row = _to_rgba8(evaluate_many(gradient, times))
            pixels[band * thick:(band + 1) * thick, :, :] = row[None, :, :]
    else:
        for band, gradient in enumerate(effective):
            column = _to_rgba8(evaluate_many(gradient, times))
            pixels[:, band * thick:(band + 1) * thick, :] = column[:, None, :]

    logger.debug(
        "Rasterized %d gradient(s) into %dx%d %s strip (reverse=%s)",
        len(effective), width, height, layout.orientation.value, layout.reverse,
    )
    return PixelBuffer(pixels)
