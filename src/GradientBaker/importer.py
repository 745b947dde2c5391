"""Import gradient texture definitions into textures and exports.

`GradientTextureImporter` turns definitions into pixel buffers, writes the
resulting textures, and forwards them to the optional external export
configured by each definition. Failures are reported on `ImportResult`
rather than raised, so one bad definition never aborts a batch.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional

from tqdm import tqdm

from .config import GradientTextureConfig, load_definition
from .core import (
    GradientTextureError, ImportResult,
    export_image, get_output_path, rasterize, resolve_output_texture,
    scan_definitions,
)

logger = logging.getLogger("gradient_baker")

MAX_WORKERS_LIMIT = 64


class GradientTextureImporter:
    """Rasterize definitions and write their textures.

    Steps per definition:
    1. Load and validate the definition, clamp its strip size
    2. Rasterize its gradient set
    3. Write the texture (when a texture path is given)
    4. Export to ``output_texture`` (when the definition names one)
    """

    def __init__(
        self,
        dry_run: bool = False,
        progress_callback: Optional[Callable[[str, int, int], None]] = None,
    ):
        """Initialize importer; ``dry_run`` rasterizes but skips every write."""
        self.dry_run = dry_run
        self.progress_callback = progress_callback

    def import_definition(
        self,
        config: GradientTextureConfig,
        source: str = "<definition>",
        definition_path: Optional[str] = None,
        texture_path: Optional[str] = None,
    ) -> ImportResult:
        """Rasterize an in-memory definition and write its outputs."""
        result = ImportResult(source=source)
        try:
            gradients = config.build_gradient_set()
            layout = config.build_layout()
            result.texture = rasterize(gradients, layout)
        except ValueError as exc:
            logger.error("Cannot import %s: %s", source, exc)
            result.errors.append(str(exc))
            return result
        result.texture_settings = config.texture_settings()
        logger.info(
            "Imported %s: %dx%d (%d gradient(s), %s)",
            source, result.texture.width, result.texture.height,
            max(len(gradients), 1), layout.orientation.value,
        )

        if texture_path:
            result.texture_path = texture_path
            self._write(result, texture_path, "texture")

        output_path = resolve_output_texture(definition_path, config.output_texture)
        if config.output_texture:
            result.output_path = output_path
            result.exported = self._write(result, output_path, "export")
        return result

    def _write(self, result: ImportResult, path: Optional[str], what: str) -> bool:
        if self.dry_run:
            logger.info("[dry-run] Would write %s for %s to %s", what, result.source, path)
            return False
        try:
            export_image(result.texture, path)
        except (GradientTextureError, OSError) as exc:
            # The texture stays valid; only this write is reported as failed.
            logger.error("Cannot write %s for %s: %s", what, result.source, exc)
            result.errors.append(str(exc))
            return False
        logger.debug("Wrote %s for %s to %s", what, result.source, path)
        return True

    def import_file(self, definition_path: str, texture_path: Optional[str] = None) -> ImportResult:
        """Load a definition file and import it."""
        try:
            config = load_definition(definition_path)
        except (OSError, ValueError) as exc:
            logger.error("Invalid definition '%s': %s", definition_path, exc)
            return ImportResult(source=definition_path, errors=[str(exc)])
        return self.import_definition(
            config,
            source=definition_path,
            definition_path=definition_path,
            texture_path=texture_path,
        )

    def import_directory(
        self,
        input_dir: str,
        output_dir: str,
        fmt: str = "png",
        max_workers: int = 4,
    ) -> List[ImportResult]:
        """Import every definition under ``input_dir`` into ``output_dir``.

        Output textures mirror the relative layout of the definitions.
        Results are returned in scan order.
        """
        if not 1 <= max_workers <= MAX_WORKERS_LIMIT:
            raise ValueError(f"max_workers must be in [1, {MAX_WORKERS_LIMIT}], got {max_workers}")
        ext = "." + str(fmt).lower().lstrip(".")
        rel_paths = scan_definitions(input_dir)
        total = len(rel_paths)
        results: List[Optional[ImportResult]] = [None] * total
        if not rel_paths:
            return []

        def _job(rel_path: str) -> ImportResult:
            return self.import_file(
                os.path.join(input_dir, rel_path),
                texture_path=get_output_path(rel_path, output_dir, ext),
            )

        done = 0
        with ThreadPoolExecutor(max_workers=min(max_workers, total)) as executor:
            futures = {executor.submit(_job, rel): i for i, rel in enumerate(rel_paths)}
            with tqdm(total=total, desc="Importing gradients", unit="tex") as bar:
                for future in as_completed(futures):
                    index = futures[future]
                    results[index] = future.result()
                    done += 1
                    bar.update(1)
                    if self.progress_callback:
                        self.progress_callback(rel_paths[index], done, total)

        failed = sum(1 for r in results if not r.ok)
        if failed:
            logger.warning("%d of %d definition(s) failed to import cleanly.", failed, total)
        else:
            logger.info("Imported %d definition(s) into %s", total, output_dir)
        return results
