"""Image encoding utilities -- PNG/TGA bytes and atomic file export via Pillow."""

import io
import logging
import os
import threading
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image

from .errors import MissingOutputDestinationError, UnsupportedOutputFormatError
from .raster import PixelBuffer

logger = logging.getLogger("gradient_baker.io")

# Extension -> Pillow format name. JPG and EXR are deliberately absent.
_PILLOW_FORMATS = {
    "png": "PNG",
    "tga": "TGA",
}
SUPPORTED_OUTPUT_EXTENSIONS = tuple(f".{ext}" for ext in _PILLOW_FORMATS)


def _normalize_format(fmt: str) -> str:
    name = str(fmt or "").strip().lower().lstrip(".")
    if name not in _PILLOW_FORMATS:
        raise UnsupportedOutputFormatError(
            f"Cannot export as '{fmt}', only .png and .tga exports are supported."
        )
    return name


def format_from_path(path: str) -> str:
    """Return the export format implied by the file extension of ``path``."""
    ext = Path(path).suffix.lower()
    if ext not in SUPPORTED_OUTPUT_EXTENSIONS:
        raise UnsupportedOutputFormatError(
            f"Cannot export as '{ext}' ({path}), .png and .tga exports are supported only."
        )
    return ext.lstrip(".")


def encode_image(buffer: PixelBuffer, fmt: str) -> bytes:
    """Encode ``buffer`` as PNG or TGA and return the file bytes.

    Row 0 of the buffer becomes the first scanline of the image.
    """
    name = _normalize_format(fmt)
    out = io.BytesIO()
    with Image.fromarray(np.ascontiguousarray(buffer.pixels)) as img:
        if name == "png":
            img.save(out, format=_PILLOW_FORMATS[name], optimize=True)
        else:
            img.save(out, format=_PILLOW_FORMATS[name])
    data = out.getvalue()
    logger.debug(
        "Encoded %dx%d buffer as %s (%d bytes)",
        buffer.width, buffer.height, name.upper(), len(data),
    )
    return data


def decode_image(data: bytes) -> PixelBuffer:
    """Decode PNG/TGA bytes into an RGBA8 pixel buffer."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.mode != "RGBA":
                logger.debug("Converting decoded image from %s to RGBA", img.mode)
                with img.convert("RGBA") as converted:
                    arr = np.array(converted, dtype=np.uint8)
            else:
                arr = np.array(img, dtype=np.uint8)
    except Exception as e:
        logger.error("Failed to decode image bytes (%d bytes): %s", len(data), e)
        raise IOError(f"Failed to decode image: {e}") from e
    return PixelBuffer(arr)


def export_image(buffer: PixelBuffer, path: Optional[str]) -> str:
    """Encode ``buffer`` by the extension of ``path`` and write it atomically.

    Writes to a temporary file beside the destination, then ``os.replace``
    so a crash never leaves a truncated texture. Returns the written path.
    """
    if not path or not str(path).strip():
        raise MissingOutputDestinationError(
            "Cannot export color gradient texture, because the output texture "
            "path could not be found."
        )
    path = str(path)
    if os.path.isdir(path):
        raise MissingOutputDestinationError(
            f"Cannot export color gradient texture, output path is a directory: {path}"
        )
    fmt = format_from_path(path)
    data = encode_image(buffer, fmt)

    parent_dir = os.path.dirname(path) or "."
    os.makedirs(parent_dir, exist_ok=True)
    ext = Path(path).suffix.lower()
    tmp_path = f"{path}.tmp.{os.getpid()}.{threading.get_ident()}{ext}"

    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
        logger.debug("Saved: %s (%dx%d, %s)", path, buffer.width, buffer.height, fmt)
    finally:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                pass
    return path
