"""Entrypoint for `python -m GradientBaker`.

Usage:
  - Single definition: `python -m GradientBaker ramp.colorgradienttexture`
  - Batch:             `python -m GradientBaker --input DIR --output DIR`
"""
import logging

logger = logging.getLogger("gradient_baker")


def _run_cli():
    from .cli import main as cli_main
    logger.debug("Dispatching to CLI entrypoint.")
    cli_main()


if __name__ == "__main__":
    _run_cli()
