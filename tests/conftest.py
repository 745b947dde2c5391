"""Shared test fixtures."""

import os
import shutil
import tempfile

import pytest
import yaml

from GradientBaker.core import AlphaKey, ColorKey, GradientDefinition, GradientMode


RED_BLUE_DEFINITION = {
    "gradients": [
        {
            "mode": "blend",
            "color_keys": [
                {"time": 0.0, "color": [1.0, 0.0, 0.0]},
                {"time": 1.0, "color": [0.0, 0.0, 1.0]},
            ],
            "alpha_keys": [{"time": 0.0, "alpha": 1.0}],
        }
    ],
    "orientation": "horizontal",
    "length": 4,
    "thickness": 1,
    "reverse": False,
}


def solid_gradient(rgb, alpha=1.0):
    """Single-key gradient that evaluates to one color everywhere."""
    return GradientDefinition((ColorKey(0.5, rgb),), (AlphaKey(0.5, alpha),))


def red_blue_gradient(mode=GradientMode.BLEND):
    return GradientDefinition(
        (ColorKey(0.0, (1.0, 0.0, 0.0)), ColorKey(1.0, (0.0, 0.0, 1.0))),
        (AlphaKey(0.0, 1.0),),
        mode,
    )


def write_definition(path, data):
    """Write a definition mapping as YAML and return the path."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False)
    return path


@pytest.fixture
def tmp_dir():
    d = tempfile.mkdtemp()
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def red_blue_definition(tmp_dir):
    return write_definition(
        os.path.join(tmp_dir, "red_blue.colorgradienttexture"), RED_BLUE_DEFINITION,
    )
