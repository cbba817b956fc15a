# python/lrle/heightfield.py
# In-memory height grid with optional packed RGB overrides
# Exists to give the loader and mesh generator one immutable terrain container
# RELEVANT FILES: python/lrle/loader.py, python/lrle/mesh.py, tests/test_heightfield.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr = np.ascontiguousarray(arr)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class HeightField:
    """Row-major grid of height samples.

    Attributes
    ----------
    samples : np.ndarray
        float32 heights, shape (height, width), indexed ``samples[row, col]``.
        Rows run along +Z, columns along +X.
    colors : Optional[np.ndarray]
        uint32 packed 0xRRGGBB values with the same shape as ``samples``, or
        None when the source carried no explicit colors.

    ``width`` and ``height`` are derived from ``samples`` and cannot be set.
    The arrays are read-only once the field is constructed.
    """

    samples: np.ndarray
    colors: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        samples = np.asarray(self.samples, dtype=np.float32)
        if samples.ndim < 2 and samples.size == 0:
            samples = np.zeros((0, 0), dtype=np.float32)
        if samples.ndim != 2:
            raise ValueError(f"samples must be 2D (height, width), got shape {samples.shape}")
        object.__setattr__(self, "samples", _readonly(samples))

        if self.colors is not None:
            colors = np.asarray(self.colors, dtype=np.uint32)
            if colors.shape != samples.shape:
                raise ValueError(
                    f"colors shape {colors.shape} does not match samples shape {samples.shape}"
                )
            object.__setattr__(self, "colors", _readonly(colors))

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[float]],
        colors: Optional[Sequence[Sequence[int]]] = None,
    ) -> "HeightField":
        """Build a field from nested row sequences.

        Every row must have the length of the first row; ragged input raises
        ValueError. An empty sequence yields a 0x0 field.
        """
        rows = [list(r) for r in rows]
        width = len(rows[0]) if rows else 0
        for i, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"row {i} has {len(row)} values, expected {width}")
        samples = np.array(rows, dtype=np.float32).reshape(len(rows), width)

        color_grid = None
        if colors is not None:
            color_rows = [list(r) for r in colors]
            if len(color_rows) != len(rows) or any(len(r) != width for r in color_rows):
                raise ValueError("colors must have the same dimensions as rows")
            color_grid = np.array(color_rows, dtype=np.uint32).reshape(len(rows), width)
        return cls(samples, color_grid)

    @property
    def width(self) -> int:
        return int(self.samples.shape[1])

    @property
    def height(self) -> int:
        return int(self.samples.shape[0])

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    @property
    def has_colors(self) -> bool:
        return self.colors is not None

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def height_bounds(self) -> Tuple[float, float]:
        """Return ``(min, max)`` over all samples, ``(0.0, 0.0)`` when empty."""
        if self.samples.size == 0:
            return 0.0, 0.0
        return float(self.samples.min()), float(self.samples.max())

    def sample(self, row: int, col: int) -> float:
        return float(self.samples[row, col])

    def color_at(self, row: int, col: int) -> Optional[int]:
        if self.colors is None:
            return None
        return int(self.colors[row, col])

    def copy(self) -> "HeightField":
        colors = None if self.colors is None else self.colors.copy()
        return HeightField(self.samples.copy(), colors)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeightField):
            return NotImplemented
        if self.shape != other.shape or not np.array_equal(self.samples, other.samples):
            return False
        if self.colors is None or other.colors is None:
            return self.colors is None and other.colors is None
        return bool(np.array_equal(self.colors, other.colors))

    def __repr__(self) -> str:
        lo, hi = self.height_bounds()
        return (
            f"HeightField(width={self.width}, height={self.height}, "
            f"range=({lo:g}, {hi:g}), colors={'yes' if self.has_colors else 'no'})"
        )
