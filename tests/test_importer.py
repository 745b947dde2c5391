"""Tests for the definition importer."""

import copy
import os
import shutil
import tempfile
import unittest
from unittest import mock

import numpy as np
from PIL import Image

from GradientBaker.config import GradientTextureConfig
from GradientBaker.core import decode_image
from GradientBaker.importer import GradientTextureImporter

from conftest import RED_BLUE_DEFINITION, write_definition


def _read_texture(path):
    with open(path, "rb") as f:
        return decode_image(f.read())


def test_import_definition_without_outputs():
    config = GradientTextureConfig.from_dict(copy.deepcopy(RED_BLUE_DEFINITION))
    result = GradientTextureImporter().import_definition(config, source="mem")
    assert result.ok
    assert (result.texture.width, result.texture.height) == (4, 1)
    assert result.texture.pixel(0, 0) == (255, 0, 0, 255)
    assert result.texture_settings == {
        "wrap_mode": "clamp", "filter_mode": "bilinear", "aniso_level": 1,
    }
    assert result.output_path is None
    assert not result.exported


def test_import_file_writes_texture(tmp_dir, red_blue_definition):
    texture_path = os.path.join(tmp_dir, "out", "red_blue.png")
    result = GradientTextureImporter().import_file(red_blue_definition, texture_path=texture_path)
    assert result.ok
    written = _read_texture(texture_path)
    np.testing.assert_array_equal(written.pixels, result.texture.pixels)


def test_output_texture_relative_to_definition(tmp_dir):
    data = dict(copy.deepcopy(RED_BLUE_DEFINITION), output_texture="exports/ramp.tga")
    path = write_definition(os.path.join(tmp_dir, "defs", "ramp.colorgradienttexture"), data)
    result = GradientTextureImporter().import_file(path)
    expected = os.path.join(os.path.realpath(tmp_dir), "defs", "exports", "ramp.tga")
    assert result.exported
    assert os.path.realpath(result.output_path) == expected
    with Image.open(expected) as img:
        assert img.format == "TGA"
        assert img.size == (4, 1)


def test_unsupported_export_keeps_texture(tmp_dir):
    data = dict(copy.deepcopy(RED_BLUE_DEFINITION), output_texture="ramp.jpg")
    path = write_definition(os.path.join(tmp_dir, "ramp.colorgradienttexture"), data)
    result = GradientTextureImporter().import_file(path)
    assert result.texture is not None
    assert not result.exported
    assert not result.ok
    assert ".jpg" in result.error
    assert not os.path.exists(os.path.join(tmp_dir, "ramp.jpg"))


def test_blank_output_texture_reports_missing_destination():
    config = GradientTextureConfig.from_dict(
        dict(copy.deepcopy(RED_BLUE_DEFINITION), output_texture="   ")
    )
    result = GradientTextureImporter().import_definition(config)
    assert result.texture is not None
    assert "output texture path could not be found" in result.error


def test_write_oserror_reported_not_raised(tmp_dir, red_blue_definition):
    with mock.patch("GradientBaker.importer.export_image", side_effect=OSError("read-only")):
        result = GradientTextureImporter().import_file(
            red_blue_definition, texture_path=os.path.join(tmp_dir, "x.png"),
        )
    assert result.texture is not None
    assert result.errors == ["read-only"]


def test_invalid_definition_reported(tmp_dir):
    path = write_definition(
        os.path.join(tmp_dir, "bad.colorgradienttexture"), {"orientation": "diagonal"},
    )
    result = GradientTextureImporter().import_file(path)
    assert result.texture is None
    assert "orientation" in result.error


def test_result_summary_omits_pixels():
    config = GradientTextureConfig.from_dict(copy.deepcopy(RED_BLUE_DEFINITION))
    summary = GradientTextureImporter().import_definition(config, source="mem").to_dict()
    assert summary["width"] == 4 and summary["height"] == 1
    assert summary["errors"] == []
    assert "texture" not in summary


def test_dry_run_writes_nothing(tmp_dir):
    data = dict(copy.deepcopy(RED_BLUE_DEFINITION), output_texture="ramp.png")
    path = write_definition(os.path.join(tmp_dir, "ramp.colorgradienttexture"), data)
    result = GradientTextureImporter(dry_run=True).import_file(
        path, texture_path=os.path.join(tmp_dir, "texture.png"),
    )
    assert result.ok
    assert not result.exported
    assert sorted(os.listdir(tmp_dir)) == ["ramp.colorgradienttexture"]


class TestImportDirectory(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.input_dir = os.path.join(self.tmpdir, "in")
        self.output_dir = os.path.join(self.tmpdir, "out")
        write_definition(
            os.path.join(self.input_dir, "a.colorgradienttexture"), RED_BLUE_DEFINITION,
        )
        vertical = dict(copy.deepcopy(RED_BLUE_DEFINITION), orientation="vertical", thickness=3)
        write_definition(
            os.path.join(self.input_dir, "sub", "b.COLORGRADIENTTEXTURE"), vertical,
        )
        write_definition(os.path.join(self.input_dir, "notes.yaml"), {"length": 8})

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_mirrors_layout_and_preserves_scan_order(self):
        calls = []
        importer = GradientTextureImporter(
            progress_callback=lambda name, done, total: calls.append((done, total)),
        )
        results = importer.import_directory(self.input_dir, self.output_dir, fmt="tga", max_workers=2)
        self.assertEqual(
            [r.source for r in results],
            [
                os.path.join(self.input_dir, "a.colorgradienttexture"),
                os.path.join(self.input_dir, "sub/b.COLORGRADIENTTEXTURE"),
            ],
        )
        self.assertTrue(all(r.ok for r in results))
        self.assertTrue(os.path.isfile(os.path.join(self.output_dir, "a.tga")))
        b = _read_texture(os.path.join(self.output_dir, "sub", "b.tga"))
        self.assertEqual((b.width, b.height), (3, 4))
        self.assertEqual(sorted(calls), [(1, 2), (2, 2)])

    def test_bad_definition_does_not_abort_batch(self):
        write_definition(
            os.path.join(self.input_dir, "c.colorgradienttexture"), {"orientation": "diagonal"},
        )
        results = GradientTextureImporter().import_directory(self.input_dir, self.output_dir)
        self.assertEqual(len(results), 3)
        self.assertEqual([r.ok for r in results], [True, False, True])

    def test_empty_directory(self):
        empty = os.path.join(self.tmpdir, "empty")
        os.makedirs(empty)
        self.assertEqual(GradientTextureImporter().import_directory(empty, self.output_dir), [])

    def test_invalid_worker_count(self):
        with self.assertRaises(ValueError):
            GradientTextureImporter().import_directory(self.input_dir, self.output_dir, max_workers=0)


if __name__ == "__main__":
    unittest.main(verbosity=2)
