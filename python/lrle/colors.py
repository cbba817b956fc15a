"""Height-based color schemes and packed-color helpers.

The scheme set is closed: the three built-in :class:`ColorScheme` gradients
plus :class:`CustomGradient`, which carries three explicit RGB stops. Every
scheme is a piecewise-linear gradient over normalized height ``t`` in
``[0, 1]``; inputs outside that range saturate to the end colors.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence, Tuple, Union

import numpy as np

RGB = Tuple[float, float, float]


class ColorScheme(Enum):
    """Built-in gradients."""

    TERRAIN = "terrain"
    """blue (water) -> cyan -> green -> brown -> white (snow)"""
    HEATMAP = "heatmap"
    """blue (low) -> cyan -> green -> yellow -> red (high)"""
    MONOCHROME = "monochrome"
    """dark gray -> white, never fully black"""


def _to_rgb(value: Sequence[float], label: str) -> RGB:
    if isinstance(value, (list, tuple, np.ndarray)) and len(value) == 3:
        return (float(value[0]), float(value[1]), float(value[2]))
    raise ValueError(f"{label} must be a sequence of three numeric values")


@dataclass(frozen=True)
class CustomGradient:
    """User gradient through three stops at t = 0, 0.5 and 1."""

    low: RGB
    mid: RGB
    high: RGB

    def __post_init__(self) -> None:
        for name in ("low", "mid", "high"):
            object.__setattr__(self, name, _to_rgb(getattr(self, name), name))

    @classmethod
    def from_hex(cls, low: str, mid: str, high: str) -> "CustomGradient":
        return cls(
            tuple(rgb_to_normalized(hex_to_rgb(low))),
            tuple(rgb_to_normalized(hex_to_rgb(mid))),
            tuple(rgb_to_normalized(hex_to_rgb(high))),
        )


SchemeLike = Union[ColorScheme, CustomGradient]

# (position, (r, g, b)) knots; consecutive knots bound one linear segment
TERRAIN_STOPS: Tuple[Tuple[float, RGB], ...] = (
    (0.0, (0.0, 0.0, 0.8)),
    (0.3, (0.0, 0.5, 1.0)),
    (0.5, (0.2, 0.8, 0.4)),
    (0.8, (0.6, 0.4, 0.1)),
    (1.0, (1.0, 1.0, 1.0)),
)

HEATMAP_STOPS: Tuple[Tuple[float, RGB], ...] = (
    (0.0, (0.0, 0.0, 1.0)),
    (0.25, (0.0, 1.0, 1.0)),
    (0.5, (0.0, 1.0, 0.0)),
    (0.75, (1.0, 1.0, 0.0)),
    (1.0, (1.0, 0.0, 0.0)),
)

MONOCHROME_STOPS: Tuple[Tuple[float, RGB], ...] = (
    (0.0, (0.1, 0.1, 0.1)),
    (1.0, (1.0, 1.0, 1.0)),
)

_BUILTIN_STOPS = {
    ColorScheme.TERRAIN: TERRAIN_STOPS,
    ColorScheme.HEATMAP: HEATMAP_STOPS,
    ColorScheme.MONOCHROME: MONOCHROME_STOPS,
}

_SCHEME_NAMES: Dict[str, ColorScheme] = {
    "terrain": ColorScheme.TERRAIN,
    "natural": ColorScheme.TERRAIN,
    "heatmap": ColorScheme.HEATMAP,
    "heat": ColorScheme.HEATMAP,
    "thermal": ColorScheme.HEATMAP,
    "monochrome": ColorScheme.MONOCHROME,
    "mono": ColorScheme.MONOCHROME,
    "grayscale": ColorScheme.MONOCHROME,
    "greyscale": ColorScheme.MONOCHROME,
    "gray": ColorScheme.MONOCHROME,
}


def scheme_stops(scheme: SchemeLike) -> Tuple[Tuple[float, RGB], ...]:
    """Return the gradient knots for ``scheme``."""
    if isinstance(scheme, ColorScheme):
        return _BUILTIN_STOPS[scheme]
    if isinstance(scheme, CustomGradient):
        return ((0.0, scheme.low), (0.5, scheme.mid), (1.0, scheme.high))
    raise TypeError(f"Unsupported color scheme: {scheme!r}")


def _interp_stops(t: np.ndarray, stops) -> np.ndarray:
    xs = np.array([s[0] for s in stops], dtype=np.float64)
    cols = np.array([s[1] for s in stops], dtype=np.float64)
    return np.stack([np.interp(t, xs, cols[:, i]) for i in range(3)], axis=-1)


def heights_to_colors(t: Union[Sequence[float], np.ndarray], scheme: SchemeLike = ColorScheme.TERRAIN) -> np.ndarray:
    """Vectorized :func:`height_to_color`.

    Returns a float32 array of shape ``t.shape + (3,)``.
    """
    stops = scheme_stops(scheme)
    arr = np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0)
    return _interp_stops(arr, stops).astype(np.float32)


def height_to_color(t: float, scheme: SchemeLike = ColorScheme.TERRAIN) -> RGB:
    """Map normalized height ``t`` to an ``(r, g, b)`` tuple in ``[0, 1]``.

    ``t`` is clamped to ``[0, 1]`` first.

    Examples
    --------
    >>> height_to_color(0.0, ColorScheme.HEATMAP)
    (0.0, 0.0, 1.0)
    >>> height_to_color(1.5, ColorScheme.MONOCHROME)
    (1.0, 1.0, 1.0)
    """
    stops = scheme_stops(scheme)
    rgb = _interp_stops(np.clip(np.float64(t), 0.0, 1.0), stops)
    return (float(rgb[0]), float(rgb[1]), float(rgb[2]))


def parse_color_scheme(value: Union[str, SchemeLike]) -> SchemeLike:
    """Resolve a scheme name such as ``"heat-map"`` or ``"Mono"``."""
    if isinstance(value, (ColorScheme, CustomGradient)):
        return value
    key = "".join(c for c in str(value).strip().lower() if c not in {"-", "_", " ", "."})
    if key not in _SCHEME_NAMES:
        raise ValueError(f"Unknown color scheme: {value!r}")
    return _SCHEME_NAMES[key]


def available_schemes() -> List[str]:
    return [s.value for s in ColorScheme]


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to RGB tuple (0-255 range).

    Args:
        hex_color: Color in hex format, e.g. '#FF5500', 'FF5500' or '0xFF5500'

    Returns:
        Tuple of (R, G, B) values in 0-255 range

    Raises:
        ValueError: if the color is not six hex digits
    """
    h = hex_color.strip().lstrip('#')
    if h[:2] in ("0x", "0X"):
        h = h[2:]
    if len(h) != 6:
        raise ValueError(f"Invalid hex color: {hex_color}")
    return (
        int(h[0:2], 16),
        int(h[2:4], 16),
        int(h[4:6], 16),
    )


def rgb_to_normalized(rgb: Tuple[int, int, int]) -> List[float]:
    """Convert RGB (0-255) to normalized (0.0-1.0) values."""
    return [rgb[0] / 255.0, rgb[1] / 255.0, rgb[2] / 255.0]


def unpack_rgb(packed: int) -> RGB:
    """Split a packed 0xRRGGBB integer into normalized channels."""
    packed = int(packed)
    return (
        ((packed >> 16) & 0xFF) / 255.0,
        ((packed >> 8) & 0xFF) / 255.0,
        (packed & 0xFF) / 255.0,
    )


def unpack_rgb_array(packed: np.ndarray) -> np.ndarray:
    """Vectorized :func:`unpack_rgb`; returns float32 ``packed.shape + (3,)``."""
    p = np.asarray(packed, dtype=np.uint32)
    channels = np.stack([(p >> 16) & 0xFF, (p >> 8) & 0xFF, p & 0xFF], axis=-1)
    return (channels.astype(np.float32) / 255.0).astype(np.float32)


def pack_rgb(r: float, g: float, b: float) -> int:
    """Pack normalized channels into a 0xRRGGBB integer (rounded, clamped)."""
    def _byte(c: float) -> int:
        return int(round(min(max(float(c), 0.0), 1.0) * 255.0))

    return (_byte(r) << 16) | (_byte(g) << 8) | _byte(b)
