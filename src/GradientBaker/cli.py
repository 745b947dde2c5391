"""Command-line interface for baking gradient textures."""

import argparse
import logging
import os
import sys

from .config import default_definition
from .core import (
    DEFINITION_EXTENSION, SUPPORTED_OUTPUT_EXTENSIONS,
    setup_logging, unique_path,
)

logger = logging.getLogger("gradient_baker")

NEW_DEFINITION_NAME = f"New Color Gradient Texture{DEFINITION_EXTENSION}"
_FORMATS = [ext.lstrip(".") for ext in SUPPORTED_OUTPUT_EXTENSIONS]


def _generate_definition(dest: str) -> str:
    if os.path.isdir(dest):
        dest = unique_path(dest, NEW_DEFINITION_NAME)
    elif os.path.exists(dest):
        raise FileExistsError(f"Refusing to overwrite existing file: {dest}")
    default_definition().to_yaml(dest)
    return dest


def main(argv=None):
    """Parse CLI arguments, import definitions, and exit non-zero on failure."""
    parser = argparse.ArgumentParser(
        description="Bake color gradient definitions into strip textures",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  GradientBaker ramp{DEFINITION_EXTENSION}
  GradientBaker ramp{DEFINITION_EXTENSION} -o ramp.tga
  GradientBaker --input ./gradients --output ./textures --format png
  GradientBaker --generate-config ./gradients
        """
    )
    parser.add_argument("definition", nargs="?",
                        help=f"Single definition file ({DEFINITION_EXTENSION})")
    parser.add_argument("--input", "-i", help="Directory of definitions to import")
    parser.add_argument("--output", "-o",
                        help="Output texture file (single mode) or directory (batch mode)")
    parser.add_argument("--format", "-f", choices=_FORMATS, default="png",
                        help="Texture format for batch outputs and default single output")
    parser.add_argument("--workers", type=int, default=4, help="Max parallel workers")
    parser.add_argument("--dry-run", action="store_true",
                        help="Rasterize but do not write any file")
    parser.add_argument("--generate-config", action="store_true",
                        help="Write a new default definition and exit")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])

    args = parser.parse_args(argv)

    if args.generate_config:
        dest = args.output or args.input or args.definition or "."
        try:
            dest = _generate_definition(dest)
        except OSError as e:
            print(f"Error: {e}")
            sys.exit(1)
        print(f"Generated default {dest}")
        return

    if bool(args.definition) == bool(args.input):
        parser.print_usage()
        print("Error: give either a definition file or --input DIR")
        sys.exit(1)

    from .importer import GradientTextureImporter, MAX_WORKERS_LIMIT

    if args.input:
        if not os.path.isdir(args.input):
            print(f"Error: Input directory not found: {args.input}")
            sys.exit(1)
        if not 1 <= args.workers <= MAX_WORKERS_LIMIT:
            print(f"Error: --workers must be in [1, {MAX_WORKERS_LIMIT}]")
            sys.exit(1)
        output_dir = args.output or args.input
        log_file = None
        if not args.dry_run:
            os.makedirs(output_dir, exist_ok=True)
            log_file = os.path.join(output_dir, "gradient_baker.log")
        setup_logging(args.log_level, log_file)

        importer = GradientTextureImporter(dry_run=args.dry_run)
        results = importer.import_directory(
            args.input, output_dir, fmt=args.format, max_workers=args.workers,
        )
        failed = [r for r in results if not r.ok]
        print(f"Imported {len(results) - len(failed)}/{len(results)} definition(s)")
        if failed:
            for r in failed:
                print(f"  {r.source}: {r.error}")
            sys.exit(1)
        return

    setup_logging(args.log_level)
    if not os.path.isfile(args.definition):
        logger.error("Definition file not found: %s", args.definition)
        print(f"Error: Definition file not found: {args.definition}")
        sys.exit(1)
    texture_path = args.output or (
        os.path.splitext(args.definition)[0] + "." + args.format
    )
    importer = GradientTextureImporter(dry_run=args.dry_run)
    result = importer.import_file(args.definition, texture_path=texture_path)
    if not result.ok:
        for err in result.errors:
            print(f"Error: {err}")
        sys.exit(1)
    if not args.dry_run:
        print(f"Wrote {result.texture_path}")
        if result.exported:
            print(f"Exported {result.output_path}")


if __name__ == "__main__":
    main()
