"""Gradient definitions and their evaluation.

A gradient is two independent piecewise curves: RGB color keys and alpha
keys. Both curves share one interpolation mode. Evaluation clamps the sample
time to [0, 1] and clamps to the boundary key outside the keyed range.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence, Tuple

import numpy as np

logger = logging.getLogger("gradient_baker.gradient")

RGB = Tuple[float, float, float]
RGBA = Tuple[float, float, float, float]


class GradientMode(Enum):
    """Enumerate supported key interpolation modes."""

    BLEND = "blend"
    FIXED = "fixed"


def _not_nan(value, name: str) -> float:
    value = float(value)
    if math.isnan(value):
        raise ValueError(f"{name} must not be NaN")
    return value


def _clamp_time(time: float) -> float:
    return min(max(time, 0.0), 1.0)


@dataclass(frozen=True)
class ColorKey:
    """RGB color pinned at a gradient time."""

    time: float
    color: RGB

    def __post_init__(self) -> None:
        color = tuple(_not_nan(c, "ColorKey.color") for c in self.color)
        if len(color) != 3:
            raise ValueError(f"ColorKey.color must have 3 channels, got {len(color)}")
        object.__setattr__(self, "time", _not_nan(self.time, "ColorKey.time"))
        object.__setattr__(self, "color", color)


@dataclass(frozen=True)
class AlphaKey:
    """Opacity pinned at a gradient time."""

    time: float
    alpha: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "time", _not_nan(self.time, "AlphaKey.time"))
        object.__setattr__(self, "alpha", _not_nan(self.alpha, "AlphaKey.alpha"))


def _sorted_keys(keys: Iterable, kind: str) -> tuple:
    # Ordered by clamped time; sorted() is stable, so keys that land on the
    # same time keep declaration order.
    ordered = tuple(sorted(keys, key=lambda k: _clamp_time(k.time)))
    if not ordered:
        raise ValueError(f"A gradient needs at least one {kind} key")
    return ordered


@dataclass(frozen=True)
class GradientDefinition:
    """Immutable gradient made of color keys, alpha keys and a mode.

    Key times are stored as given; out-of-range (even infinite) times are
    accepted and clamped to [0, 1] when the gradient is evaluated.
    """

    color_keys: Tuple[ColorKey, ...]
    alpha_keys: Tuple[AlphaKey, ...]
    mode: GradientMode = GradientMode.BLEND

    def __post_init__(self) -> None:
        object.__setattr__(self, "color_keys", _sorted_keys(self.color_keys, "color"))
        object.__setattr__(self, "alpha_keys", _sorted_keys(self.alpha_keys, "alpha"))
        object.__setattr__(self, "mode", GradientMode(self.mode))

    def evaluate(self, t: float) -> RGBA:
        """Return the RGBA color at time ``t``."""
        return evaluate(self, t)


@dataclass(frozen=True)
class GradientSet:
    """Ordered gradients stacked into one texture.

    Order determines band placement in the rasterized strip.
    """

    gradients: Tuple[GradientDefinition, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "gradients", tuple(self.gradients))

    def __len__(self) -> int:
        return len(self.gradients)

    def __iter__(self):
        return iter(self.gradients)

    def resolve(self) -> Tuple[GradientDefinition, ...]:
        """Return the gradients to rasterize, substituting the fallback when empty."""
        if self.gradients:
            return self.gradients
        logger.debug("Gradient set is empty; substituting the fallback RGB gradient.")
        return (fallback_gradient(),)


def fallback_gradient() -> GradientDefinition:
    """Build the placeholder red -> green -> blue gradient at full opacity."""
    return GradientDefinition(
        color_keys=(
            ColorKey(0.0, (1.0, 0.0, 0.0)),
            ColorKey(0.5, (0.0, 1.0, 0.0)),
            ColorKey(1.0, (0.0, 0.0, 1.0)),
        ),
        alpha_keys=(
            AlphaKey(0.0, 1.0),
            AlphaKey(0.5, 1.0),
            AlphaKey(1.0, 1.0),
        ),
        mode=GradientMode.BLEND,
    )


def _sample_curve(key_times: np.ndarray, key_values: np.ndarray,
                  t: np.ndarray, mode: GradientMode) -> np.ndarray:
    """Sample one keyed curve at every time in ``t``.

    ``key_times`` is sorted ascending with shape (K,), ``key_values`` has
    shape (K, C). Returns an (N, C) array.
    """
    last = len(key_times) - 1
    # Index of the first key strictly after t; the key before it is the
    # last key at or before t, so repeated times resolve to the last one.
    upper = np.searchsorted(key_times, t, side="right")
    left = np.clip(upper - 1, 0, last)
    if mode is GradientMode.FIXED:
        return key_values[left]

    right = np.clip(upper, 0, last)
    t0 = key_times[left]
    span = key_times[right] - t0
    has_span = span > 0
    frac = np.where(has_span, (t - t0) / np.where(has_span, span, 1.0), 1.0)
    v0 = key_values[left]
    v1 = key_values[right]
    return v0 + (v1 - v0) * frac[:, None]


def evaluate_many(gradient: GradientDefinition, times: Sequence[float]) -> np.ndarray:
    """Evaluate ``gradient`` at each time, returning an (N, 4) float64 RGBA array."""
    t = np.clip(np.asarray(times, dtype=np.float64).reshape(-1), 0.0, 1.0)

    color_times = np.clip(
        np.array([k.time for k in gradient.color_keys], dtype=np.float64), 0.0, 1.0)
    colors = np.array([k.color for k in gradient.color_keys], dtype=np.float64)
    alpha_times = np.clip(
        np.array([k.time for k in gradient.alpha_keys], dtype=np.float64), 0.0, 1.0)
    alphas = np.array([[k.alpha] for k in gradient.alpha_keys], dtype=np.float64)

    rgb = _sample_curve(color_times, colors, t, gradient.mode)
    alpha = _sample_curve(alpha_times, alphas, t, gradient.mode)
    return np.concatenate([rgb, alpha], axis=1)


def evaluate(gradient: GradientDefinition, t: float) -> RGBA:
    """Evaluate ``gradient`` at a single time ``t`` (clamped to [0, 1])."""
    r, g, b, a = evaluate_many(gradient, [t])[0]
    return (float(r), float(g), float(b), float(a))
