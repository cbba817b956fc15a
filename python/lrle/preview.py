# python/lrle/preview.py
# CPU preview rasterizer for terrain meshes using Pillow
# Exists to produce a quick PNG of the camera view without a GPU renderer
# RELEVANT FILES: python/lrle/camera.py, python/lrle/mesh.py, python/lrle/cli.py, tests/test_preview.py

"""Headless previews of a :class:`TerrainMesh` through an :class:`OrbitalCamera`.

Wireframe edges are drawn as lines in vertex color; solid mode fills
triangles back to front (painter's order) with Lambert-lit colors. Any
primitive with a vertex outside the clip volume is skipped.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw

from .camera import OrbitalCamera
from .colors import hex_to_rgb
from .config import LightingParams, RenderMode, parse_render_mode
from .lighting import shade_colors
from .mesh import TerrainMesh
from .transforms import transform_points

logger = logging.getLogger(__name__)

_WIRE_OVERLAY = (20, 20, 20)


def project_vertices(positions: np.ndarray, view_proj: np.ndarray, width: int, height: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Project world positions to pixel coordinates.

    Returns
    -------
    pixels : np.ndarray
        (N, 2) float pixel coordinates, origin top-left
    depth : np.ndarray
        (N,) NDC depth, 0 at the near plane and 1 at the far plane
    visible : np.ndarray
        (N,) bool, True where the vertex lies inside the clip volume depth range
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")
    clip = transform_points(view_proj, positions)
    w = clip[:, 3]
    visible = w > 1e-9
    safe_w = np.where(visible, w, 1.0)
    ndc = clip[:, :3] / safe_w[:, None]
    visible &= (ndc[:, 2] >= 0.0) & (ndc[:, 2] <= 1.0)
    px = (ndc[:, 0] * 0.5 + 0.5) * width
    py = (1.0 - (ndc[:, 1] * 0.5 + 0.5)) * height
    return np.stack([px, py], axis=1), ndc[:, 2], visible


def _to_u8(colors: np.ndarray) -> np.ndarray:
    return (np.clip(colors, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)


def render_preview(
    mesh: TerrainMesh,
    camera: OrbitalCamera,
    width: int = 800,
    height: int = 600,
    *,
    render_mode: Union[str, RenderMode] = RenderMode.WIREFRAME,
    lighting: Optional[LightingParams] = None,
    background: str = "#101418",
) -> Image.Image:
    """Rasterize ``mesh`` as seen by ``camera`` into an RGB image."""
    mode = parse_render_mode(render_mode)
    image = Image.new("RGB", (int(width), int(height)), hex_to_rgb(background))
    if mesh.is_empty:
        return image

    draw = ImageDraw.Draw(image)
    view_proj = camera.view_projection_matrix(width / float(height))
    pixels, depth, visible = project_vertices(mesh.positions, view_proj, width, height)

    if mode in (RenderMode.SOLID, RenderMode.BOTH) and mesh.triangle_indices.size:
        lit = _to_u8(shade_colors(mesh, lighting if lighting is not None else LightingParams()))
        tris = mesh.triangle_indices.astype(np.int64)
        keep = visible[tris].all(axis=1)
        tris = tris[keep]
        order = np.argsort(-depth[tris].mean(axis=1), kind="stable")
        for tri in tris[order]:
            color = tuple(int(c) for c in lit[tri].mean(axis=0))
            draw.polygon([tuple(pixels[i]) for i in tri], fill=color)

    if mode in (RenderMode.WIREFRAME, RenderMode.BOTH) and mesh.wireframe_indices.size:
        colors = _to_u8(mesh.colors)
        edges = mesh.wireframe_indices.astype(np.int64)
        edges = edges[visible[edges].all(axis=1)]
        for a, b in edges:
            color = _WIRE_OVERLAY if mode is RenderMode.BOTH else tuple(int(c) for c in colors[a])
            draw.line([tuple(pixels[a]), tuple(pixels[b])], fill=color, width=1)

    return image


def save_preview(image: Image.Image, path: Union[str, Path]) -> Path:
    """Write a preview PNG and return its path."""
    path = Path(path)
    if path.suffix.lower() != ".png":
        raise ValueError(f"File must have .png extension, got {path}")
    if not path.parent.exists():
        raise ValueError(f"directory does not exist: {path.parent}")
    image.save(str(path))
    logger.info(f"Saved preview: {path} ({image.width}x{image.height})")
    return path
