"""
Terrain mesh generation

Converts a :class:`~lrle.heightfield.HeightField` into vertex and index
buffers ready for upload by a renderer:

1. Vertex positions centered at the origin, heights scaled on the Y axis
2. Per-vertex colors from a height color scheme (or the file's own colors)
3. Per-vertex normals, smooth (accumulated face normals) or flat (height gradient)
4. Line-list indices for the wireframe and triangle-list indices for solid fill
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, NamedTuple, Tuple, Union

import numpy as np

from .colors import ColorScheme, SchemeLike, heights_to_colors, unpack_rgb_array
from .heightfield import HeightField

if TYPE_CHECKING:
    from .config import RenderConfig

logger = logging.getLogger(__name__)

HEIGHT_RANGE_EPSILON = float(np.finfo(np.float32).eps)
_CROSS_EPSILON = 1e-12
_UP = np.array([0.0, 1.0, 0.0], dtype=np.float64)


class ShadingMode(Enum):
    """Normal computation strategy."""

    SMOOTH = "smooth"
    """accumulated face normals of the adjacent triangles"""
    FLAT = "flat"
    """per-vertex central-difference height gradient"""


_SHADING_NAMES = {
    "smooth": ShadingMode.SMOOTH,
    "gouraud": ShadingMode.SMOOTH,
    "flat": ShadingMode.FLAT,
    "gradient": ShadingMode.FLAT,
}


def parse_shading_mode(value: Union[str, ShadingMode]) -> ShadingMode:
    if isinstance(value, ShadingMode):
        return value
    key = str(value).strip().lower()
    if key not in _SHADING_NAMES:
        raise ValueError(f"Unknown shading mode: {value!r}")
    return _SHADING_NAMES[key]


class Vertex(NamedTuple):
    position: Tuple[float, float, float]
    color: Tuple[float, float, float]
    normal: Tuple[float, float, float]


@dataclass
class TerrainMesh:
    """Generated mesh ready for upload.

    Attributes
    ----------
    positions : np.ndarray
        (N, 3) float32, vertex ``row * width + col``
    colors : np.ndarray
        (N, 3) float32 RGB in [0, 1]
    normals : np.ndarray
        (N, 3) float32 unit vectors
    wireframe_indices : np.ndarray
        (E, 2) uint32 line segments (LineList topology)
    triangle_indices : np.ndarray
        (T, 3) uint32 triangles (TriangleList topology)
    width, height : int
        Grid dimensions the mesh was built from
    """

    positions: np.ndarray
    colors: np.ndarray
    normals: np.ndarray
    wireframe_indices: np.ndarray
    triangle_indices: np.ndarray
    width: int = 0
    height: int = 0

    @classmethod
    def empty(cls) -> "TerrainMesh":
        return cls(
            positions=np.empty((0, 3), dtype=np.float32),
            colors=np.empty((0, 3), dtype=np.float32),
            normals=np.empty((0, 3), dtype=np.float32),
            wireframe_indices=np.empty((0, 2), dtype=np.uint32),
            triangle_indices=np.empty((0, 3), dtype=np.uint32),
        )

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.vertex_count == 0

    @property
    def wireframe_index_count(self) -> int:
        return int(self.wireframe_indices.size)

    @property
    def triangle_index_count(self) -> int:
        return int(self.triangle_indices.size)

    @property
    def vertices(self) -> List[Vertex]:
        return [
            Vertex(tuple(p), tuple(c), tuple(n))
            for p, c, n in zip(self.positions.tolist(), self.colors.tolist(), self.normals.tolist())
        ]

    def interleaved(self) -> np.ndarray:
        """Return ``(N, 9)`` float32 rows of position, color, normal."""
        return np.ascontiguousarray(
            np.concatenate([self.positions, self.colors, self.normals], axis=1), dtype=np.float32
        )

    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """Axis-aligned ``(min_xyz, max_xyz)``; zeros for an empty mesh."""
        if self.is_empty:
            return np.zeros(3, dtype=np.float32), np.zeros(3, dtype=np.float32)
        return self.positions.min(axis=0), self.positions.max(axis=0)


def _grid_positions(field: HeightField, height_scale: float) -> np.ndarray:
    w, h = field.width, field.height
    offset_x = (w - 1) / 2.0
    offset_z = (h - 1) / 2.0
    zs, xs = np.meshgrid(np.arange(h, dtype=np.float64), np.arange(w, dtype=np.float64), indexing="ij")
    ys = field.samples.astype(np.float64) * float(height_scale)
    return np.stack([xs - offset_x, ys, zs - offset_z], axis=-1).reshape(-1, 3)


def _quad_corners(width: int, height: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    zs, xs = np.meshgrid(np.arange(height - 1), np.arange(width - 1), indexing="ij")
    top_left = (zs * width + xs).reshape(-1)
    top_right = top_left + 1
    bottom_left = top_left + width
    bottom_right = bottom_left + 1
    return top_left, top_right, bottom_left, bottom_right


def triangle_indices(width: int, height: int) -> np.ndarray:
    """Two triangles per quad: (tl, bl, tr) and (tr, bl, br), quads in row-major order."""
    if width < 2 or height < 2:
        return np.empty((0, 3), dtype=np.uint32)
    tl, tr, bl, br = _quad_corners(width, height)
    tris = np.stack([tl, bl, tr, tr, bl, br], axis=1).reshape(-1, 3)
    return tris.astype(np.uint32)


def wireframe_indices(width: int, height: int) -> np.ndarray:
    """Horizontal edges of every row, then vertical edges of every column."""
    if width == 0 or height == 0:
        return np.empty((0, 2), dtype=np.uint32)
    idx = np.arange(width * height).reshape(height, width)
    horizontal = np.stack([idx[:, :-1].reshape(-1), idx[:, 1:].reshape(-1)], axis=1)
    vertical = np.stack([idx[:-1, :].reshape(-1), idx[1:, :].reshape(-1)], axis=1)
    return np.concatenate([horizontal, vertical], axis=0).astype(np.uint32).reshape(-1, 2)


def _face_normals(positions: np.ndarray, tris: np.ndarray) -> np.ndarray:
    a = positions[tris[:, 0]]
    b = positions[tris[:, 1]]
    c = positions[tris[:, 2]]
    cross = np.cross(b - a, c - a)
    length = np.linalg.norm(cross, axis=1)
    out = np.zeros_like(cross)
    ok = length > _CROSS_EPSILON
    out[ok] = cross[ok] / length[ok, None]
    return out


def smooth_normals(positions: np.ndarray, width: int, height: int) -> np.ndarray:
    """Sum adjacent face normals per vertex, then normalize in a separate pass.

    Zero-area triangles contribute nothing. Vertices with no contribution get
    +Y. Normals with a negative Y component are flipped so terrain always
    faces up.
    """
    accum = np.zeros((width * height, 3), dtype=np.float64)
    tris = triangle_indices(width, height).astype(np.int64)
    if tris.size:
        faces = _face_normals(positions, tris)
        for corner in range(3):
            np.add.at(accum, tris[:, corner], faces)

    length = np.linalg.norm(accum, axis=1)
    normals = np.tile(_UP, (accum.shape[0], 1))
    ok = length > _CROSS_EPSILON
    normals[ok] = accum[ok] / length[ok, None]
    normals[normals[:, 1] < 0.0] *= -1.0
    return normals


def _gradient(values: np.ndarray, axis: int) -> np.ndarray:
    if values.shape[axis] < 2:
        return np.zeros_like(values)
    # central differences inside, one-sided at the borders
    return np.gradient(values, axis=axis, edge_order=1)


def flat_normals(scaled_heights: np.ndarray) -> np.ndarray:
    """Normals from the height gradient: normalize(-dh/dx, 1, -dh/dz)."""
    h = np.asarray(scaled_heights, dtype=np.float64)
    dhdx = _gradient(h, axis=1)
    dhdz = _gradient(h, axis=0)
    n = np.stack([-dhdx, np.ones_like(h), -dhdz], axis=-1).reshape(-1, 3)
    return n / np.linalg.norm(n, axis=1)[:, None]


def generate_mesh(
    field: HeightField,
    height_scale: float = 1.0,
    shading_mode: ShadingMode = ShadingMode.SMOOTH,
    color_scheme: SchemeLike = ColorScheme.TERRAIN,
    *,
    use_field_colors: bool = False,
) -> TerrainMesh:
    """Generate a renderable mesh from terrain data.

    Parameters
    ----------
    field : HeightField
        Source height data
    height_scale : float, default 1.0
        Multiplier for height values (Y axis)
    shading_mode : ShadingMode, default SMOOTH
        Normal computation strategy
    color_scheme : ColorScheme or CustomGradient, default TERRAIN
        Gradient applied to normalized height
    use_field_colors : bool, default False
        Use the field's per-sample colors when it has them

    Returns
    -------
    TerrainMesh
        Vertices centered at the origin on X/Z, wireframe line pairs and
        triangles. A grid with zero width or height yields an empty mesh.
    """
    shading_mode = parse_shading_mode(shading_mode)
    if field.is_empty:
        return TerrainMesh.empty()

    w, h = field.width, field.height
    min_h, max_h = field.height_bounds()
    height_range = max_h - min_h
    if abs(height_range) < HEIGHT_RANGE_EPSILON:
        height_range = 1.0

    positions = _grid_positions(field, height_scale)

    if use_field_colors and field.colors is not None:
        colors = unpack_rgb_array(field.colors).reshape(-1, 3)
    else:
        t = (field.samples.astype(np.float64) - min_h) / height_range
        colors = heights_to_colors(t.reshape(-1), color_scheme)

    if shading_mode is ShadingMode.SMOOTH:
        normals = smooth_normals(positions, w, h)
    else:
        normals = flat_normals(positions[:, 1].reshape(h, w))

    mesh = TerrainMesh(
        positions=positions.astype(np.float32),
        colors=np.asarray(colors, dtype=np.float32),
        normals=normals.astype(np.float32),
        wireframe_indices=wireframe_indices(w, h),
        triangle_indices=triangle_indices(w, h),
        width=w,
        height=h,
    )
    logger.debug(
        f"Generated mesh: {mesh.vertex_count} vertices, {mesh.wireframe_index_count} line indices, "
        f"{mesh.triangle_index_count} triangle indices ({shading_mode.value})"
    )
    return mesh


def generate_mesh_from_config(field: HeightField, config: "RenderConfig") -> TerrainMesh:
    """Build a mesh using the settings of an explicit :class:`~lrle.config.RenderConfig`."""
    return generate_mesh(
        field,
        height_scale=config.height_scale,
        shading_mode=config.shading_mode,
        color_scheme=config.color_scheme,
        use_field_colors=config.use_field_colors,
    )
