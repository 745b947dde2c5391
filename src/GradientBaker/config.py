"""Define the typed configuration model of a gradient texture definition.

A definition file (``*.colorgradienttexture``) is a YAML mapping. Use
`GradientTextureConfig` to load, validate, and persist it, and to build the
gradient set and strip layout that the rasterizer consumes.
"""

import dataclasses
import os
import logging
import math
import threading
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, List, Optional, Tuple

import yaml
from PIL import ImageColor

from .core.gradient import (
    AlphaKey, ColorKey, GradientDefinition, GradientMode, GradientSet,
    fallback_gradient,
)
from .core.io import SUPPORTED_OUTPUT_EXTENSIONS
from .core.raster import (
    MAX_LENGTH, MAX_THICKNESS, MIN_LENGTH, MIN_THICKNESS,
    Orientation, StripLayout, clamp_layout,
)

logger = logging.getLogger("gradient_baker.config")

_SUPPORTED_CONFIG_VERSION = 1

VALID_ORIENTATIONS = {o.value for o in Orientation}
VALID_MODES = {m.value for m in GradientMode}
VALID_WRAP_MODES = {"repeat", "clamp", "mirror", "mirror_once"}
VALID_FILTER_MODES = {"point", "bilinear", "trilinear"}

# Serialized names used by older definitions -> current field names.
_LEGACY_KEYS = {
    "steps": "length",
    "width": "length",
    "height": "thickness",
}


@dataclass
class TextureSettingsConfig:
    """Store sampler settings handed to the texture consumer."""

    wrap_mode: str = "clamp"
    filter_mode: str = "bilinear"
    aniso_level: int = 1  # 0 = disabled, 1 = quality settings, 2..16 = level


@dataclass
class GradientTextureConfig:
    """One gradient texture definition."""

    config_version: int = 1
    gradients: List[Dict[str, Any]] = field(default_factory=list)
    orientation: str = "horizontal"
    length: int = 256
    thickness: int = 4
    reverse: bool = False
    texture: TextureSettingsConfig = field(default_factory=TextureSettingsConfig)
    output_texture: str = ""

    @classmethod
    def from_dict(cls, data: dict, source: str = "<dict>") -> "GradientTextureConfig":
        """Build a definition from a parsed mapping, without validating it."""
        if not isinstance(data, dict):
            raise ValueError(
                f"Definition '{source}' must contain a YAML mapping, "
                f"got {type(data).__name__}"
            )
        data = _apply_legacy_keys(dict(data), source)
        version = data.get("config_version", 1)
        if isinstance(version, int) and version > _SUPPORTED_CONFIG_VERSION:
            logger.warning(
                "Definition '%s' has config_version=%d, but this build only "
                "supports up to version %d. Some settings may be ignored.",
                source, version, _SUPPORTED_CONFIG_VERSION,
            )
        config = cls()
        _merge_dict_to_dataclass(config, data)
        return config

    @classmethod
    def from_yaml(cls, path: str) -> "GradientTextureConfig":
        """Load and validate a definition file."""
        if not os.path.exists(path):
            raise FileNotFoundError(f"Definition file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValueError(
                f"Failed to parse YAML definition '{path}': {exc}"
            ) from exc
        # An empty file is a valid definition: every field takes its default.
        config = cls.from_dict(data if data is not None else {}, source=path)
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{path}: {exc}") from exc
        return config

    def to_yaml(self, path: str):
        """Write the definition to a YAML file atomically."""
        data = dataclasses.asdict(self)
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        tmp_path = f"{path}.tmp.{os.getpid()}.{threading.get_ident()}"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, default_flow_style=None, sort_keys=False)
            os.replace(tmp_path, path)
        finally:
            if os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass
        logger.debug("Wrote definition %s", path)

    def validate(self):
        """Check every field and raise one ValueError listing all problems."""
        errors = []

        if not isinstance(self.config_version, int) or self.config_version < 1:
            errors.append("config_version must be an integer >= 1")

        if str(self.orientation).lower() not in VALID_ORIENTATIONS:
            errors.append(
                f"orientation must be one of {sorted(VALID_ORIENTATIONS)}, "
                f"got '{self.orientation}'"
            )
        if not isinstance(self.length, int) or isinstance(self.length, bool):
            errors.append("length must be an integer")
        elif not (MIN_LENGTH <= self.length <= MAX_LENGTH):
            logger.warning(
                "length=%d is outside [%d, %d] and will be clamped.",
                self.length, MIN_LENGTH, MAX_LENGTH,
            )
        if not isinstance(self.thickness, int) or isinstance(self.thickness, bool):
            errors.append("thickness must be an integer")
        elif not (MIN_THICKNESS <= self.thickness <= MAX_THICKNESS):
            logger.warning(
                "thickness=%d is outside [%d, %d] and will be clamped.",
                self.thickness, MIN_THICKNESS, MAX_THICKNESS,
            )

        # Texture sampler settings
        if str(self.texture.wrap_mode).lower() not in VALID_WRAP_MODES:
            errors.append(
                f"texture.wrap_mode must be one of {sorted(VALID_WRAP_MODES)}, "
                f"got '{self.texture.wrap_mode}'"
            )
        if str(self.texture.filter_mode).lower() not in VALID_FILTER_MODES:
            errors.append(
                f"texture.filter_mode must be one of {sorted(VALID_FILTER_MODES)}, "
                f"got '{self.texture.filter_mode}'"
            )
        if not (0 <= self.texture.aniso_level <= 16):
            errors.append("texture.aniso_level must be in [0, 16]")

        # Gradients
        if not isinstance(self.gradients, list):
            errors.append("gradients must be a list")
        else:
            for index, entry in enumerate(self.gradients):
                try:
                    parse_gradient(entry, f"gradients[{index}]")
                except ValueError as exc:
                    errors.append(str(exc))
            if not self.gradients:
                logger.info(
                    "No gradients specified; a placeholder RGB gradient will be generated."
                )

        # Export target problems are reported when exporting, not here, so
        # the texture itself still imports.
        if self.output_texture:
            ext = os.path.splitext(str(self.output_texture))[1].lower()
            if ext not in SUPPORTED_OUTPUT_EXTENSIONS:
                logger.warning(
                    "output_texture '%s' has unsupported extension '%s'; export will fail. "
                    "Supported: %s",
                    self.output_texture, ext, ", ".join(SUPPORTED_OUTPUT_EXTENSIONS),
                )

        if errors:
            raise ValueError(
                "Definition validation failed:\n" +
                "\n".join(f"  - {e}" for e in errors)
            )

    def apply_runtime_fixups(self):
        """Clamp strip dimensions into the supported range."""
        length, thickness = clamp_layout(self.length, self.thickness)
        if (length, thickness) != (self.length, self.thickness):
            logger.warning(
                "Clamped strip size from length=%d, thickness=%d to length=%d, thickness=%d",
                self.length, self.thickness, length, thickness,
            )
        self.length, self.thickness = length, thickness

    def build_gradient_set(self) -> GradientSet:
        """Parse the configured gradients into an immutable gradient set."""
        return GradientSet(tuple(
            parse_gradient(entry, f"gradients[{index}]")
            for index, entry in enumerate(self.gradients)
        ))

    def build_layout(self) -> StripLayout:
        """Return the strip layout described by this definition."""
        return StripLayout(
            orientation=Orientation(str(self.orientation).lower()),
            length=self.length,
            thickness=self.thickness,
            reverse=self.reverse,
        )

    def texture_settings(self) -> Dict[str, Any]:
        """Return sampler settings as a plain dictionary."""
        return {
            "wrap_mode": str(self.texture.wrap_mode).lower(),
            "filter_mode": str(self.texture.filter_mode).lower(),
            "aniso_level": self.texture.aniso_level,
        }


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def parse_color(value, where: str) -> Tuple[float, float, float]:
    """Parse ``[r, g, b]`` floats in [0, 1], ``#rrggbb`` or a color name."""
    if isinstance(value, str):
        try:
            rgb = ImageColor.getrgb(value)
        except ValueError as exc:
            raise ValueError(f"{where}: unknown color '{value}'") from exc
        return tuple(c / 255.0 for c in rgb[:3])
    if isinstance(value, (list, tuple)) and len(value) == 3 and all(_is_number(c) for c in value):
        if not all(0.0 <= c <= 1.0 for c in value):
            raise ValueError(f"{where}: color channels must be in [0, 1], got {list(value)}")
        return tuple(float(c) for c in value)
    raise ValueError(f"{where}: color must be [r, g, b] or a color string, got {value!r}")


def _parse_time(entry: dict, where: str) -> float:
    time = entry.get("time")
    if not _is_number(time):
        raise ValueError(f"{where}.time must be a number, got {time!r}")
    if not math.isfinite(time):
        raise ValueError(f"{where}.time must be finite, got {time!r}")
    return float(time)


def parse_gradient(data, where: str = "gradient") -> GradientDefinition:
    """Build a GradientDefinition from its YAML mapping."""
    if not isinstance(data, dict):
        raise ValueError(f"{where} must be a mapping, got {type(data).__name__}")

    mode = str(data.get("mode", GradientMode.BLEND.value)).lower()
    if mode not in VALID_MODES:
        raise ValueError(f"{where}.mode must be one of {sorted(VALID_MODES)}, got '{mode}'")

    color_entries = data.get("color_keys") or []
    alpha_entries = data.get("alpha_keys") or []
    if not isinstance(color_entries, list) or not color_entries:
        raise ValueError(f"{where}.color_keys must be a non-empty list")
    if not isinstance(alpha_entries, list) or not alpha_entries:
        raise ValueError(f"{where}.alpha_keys must be a non-empty list")

    color_keys = []
    for i, entry in enumerate(color_entries):
        key_where = f"{where}.color_keys[{i}]"
        if not isinstance(entry, dict):
            raise ValueError(f"{key_where} must be a mapping with time and color")
        color_keys.append(ColorKey(
            _parse_time(entry, key_where),
            parse_color(entry.get("color"), f"{key_where}.color"),
        ))

    alpha_keys = []
    for i, entry in enumerate(alpha_entries):
        key_where = f"{where}.alpha_keys[{i}]"
        if not isinstance(entry, dict):
            raise ValueError(f"{key_where} must be a mapping with time and alpha")
        alpha = entry.get("alpha")
        if not _is_number(alpha) or not (0.0 <= alpha <= 1.0):
            raise ValueError(f"{key_where}.alpha must be a number in [0, 1], got {alpha!r}")
        alpha_keys.append(AlphaKey(_parse_time(entry, key_where), float(alpha)))

    return GradientDefinition(tuple(color_keys), tuple(alpha_keys), GradientMode(mode))


def gradient_to_dict(gradient: GradientDefinition) -> Dict[str, Any]:
    """Serialize a gradient into the mapping accepted by `parse_gradient`."""
    return {
        "mode": gradient.mode.value,
        "color_keys": [
            {"time": k.time, "color": list(k.color)} for k in gradient.color_keys
        ],
        "alpha_keys": [
            {"time": k.time, "alpha": k.alpha} for k in gradient.alpha_keys
        ],
    }


def _apply_legacy_keys(data: dict, source: str) -> dict:
    for old, new in _LEGACY_KEYS.items():
        if old not in data:
            continue
        value = data.pop(old)
        if new in data:
            logger.warning(
                "Definition '%s' sets both '%s' and legacy '%s'; ignoring '%s'.",
                source, new, old, old,
            )
            continue
        logger.debug("Definition '%s': mapping legacy key '%s' to '%s'", source, old, new)
        data[new] = value
    return data


def _merge_dict_to_dataclass(obj, data: dict, _path: str = ""):
    for key, value in data.items():
        full_key = f"{_path}{key}"
        if not hasattr(obj, key):
            logger.warning("Unknown definition key ignored: '%s'", full_key)
            continue
        field_val = getattr(obj, key)
        if dataclasses.is_dataclass(field_val) and isinstance(value, dict):
            _merge_dict_to_dataclass(field_val, value, f"{full_key}.")
            continue
        if value is None:
            logger.warning(
                "Definition key '%s' is null but field default is %s. Using default value.",
                full_key, type(field_val).__name__,
            )
            continue
        expected_type = type(field_val)
        # Allow int->float, and exact-integer floats for int fields (YAML 4.0 -> 4).
        if (not isinstance(value, expected_type)
                and not (expected_type is float and isinstance(value, int))
                and not (expected_type is int
                         and isinstance(value, float)
                         and value == int(value))):
            logger.warning(
                "Definition type mismatch for '%s': expected %s, got %s (%r). "
                "Using default value.",
                full_key, expected_type.__name__, type(value).__name__, value,
            )
            continue
        if expected_type is int and isinstance(value, float):
            value = int(value)
        setattr(obj, key, value)


def default_definition() -> GradientTextureConfig:
    """Return a new definition holding the placeholder RGB gradient."""
    return GradientTextureConfig(gradients=[gradient_to_dict(fallback_gradient())])


def load_definition(path: str, output_texture: Optional[str] = None) -> GradientTextureConfig:
    """Load a definition, optionally overriding its export target, and clamp it."""
    config = GradientTextureConfig.from_yaml(path)
    if output_texture is not None:
        config.output_texture = output_texture
    config.apply_runtime_fixups()
    return config
