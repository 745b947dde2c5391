"""Definition, output and export path helpers."""

import os
import posixpath
from pathlib import Path
from typing import Optional


def _definition_parts(input_rel_path: str) -> list:
    """Split a relative definition path into clean components.

    Backslashes count as separators. Absolute paths and paths that climb
    above the scan root raise ValueError.
    """
    raw = str(input_rel_path).replace("\\", "/")
    if raw.startswith("/"):
        raise ValueError(f"Definition path must be relative, got absolute path: {input_rel_path}")
    norm = posixpath.normpath(raw)
    if norm == ".." or norm.startswith("../"):
        raise ValueError(f"Definition path escapes root via '..': {input_rel_path}")
    if norm in ("", "."):
        raise ValueError(f"Definition path is empty after normalization: {input_rel_path}")
    return norm.split("/")


def get_output_path(input_rel_path: str, output_dir: str, ext: str) -> str:
    """Return the texture path mirroring ``input_rel_path`` under ``output_dir``."""
    *folders, name = _definition_parts(input_rel_path)
    return os.path.join(output_dir, *folders, os.path.splitext(name)[0] + ext)


def resolve_output_texture(definition_path: Optional[str], output_texture: str) -> Optional[str]:
    """Resolve a definition's ``output_texture`` setting to a filesystem path.

    Relative paths are taken relative to the directory holding the
    definition file. Returns None when no output texture is configured.
    """
    if not output_texture or not str(output_texture).strip():
        return None
    target = Path(os.path.expanduser(str(output_texture).strip()))
    if not target.is_absolute() and definition_path:
        target = Path(definition_path).resolve().parent / target
    return str(target)


def unique_path(directory: str, filename: str) -> str:
    """Return ``directory/filename``, suffixing `` 1``, `` 2``... while taken."""
    stem, ext = os.path.splitext(filename)
    candidate = os.path.join(directory, filename)
    counter = 1
    while os.path.exists(candidate):
        candidate = os.path.join(directory, f"{stem} {counter}{ext}")
        counter += 1
    return candidate
