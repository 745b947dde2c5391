"""Discover gradient texture definition files."""

import logging
import os
from typing import List

logger = logging.getLogger("gradient_baker")

DEFINITION_EXTENSION = ".colorgradienttexture"


def is_definition_file(path: str) -> bool:
    """Return True when ``path`` carries the definition extension (any case)."""
    return str(path).lower().endswith(DEFINITION_EXTENSION)


def scan_definitions(input_dir: str) -> List[str]:
    """Return relative paths of all definition files under ``input_dir``.

    Results are sorted for deterministic batch order. Files reached through
    symlinks pointing outside ``input_dir`` are skipped.
    """
    found = []
    input_root_real = os.path.realpath(input_dir)

    for root, dirs, files in os.walk(input_dir):
        dirs.sort()
        for fname in sorted(files):
            if not is_definition_file(fname):
                continue
            fpath = os.path.join(root, fname)
            real_fpath = os.path.realpath(fpath)
            try:
                if os.path.commonpath([input_root_real, real_fpath]) != input_root_real:
                    logger.warning(
                        "Skipping definition outside input root via symlink/path traversal: %s",
                        fpath,
                    )
                    continue
            except ValueError:
                logger.warning("Skipping definition with incompatible path root: %s", fpath)
                continue
            found.append(os.path.relpath(fpath, input_dir).replace("\\", "/"))

    logger.info("Found %d gradient texture definition(s) in %s", len(found), input_dir)
    return found
