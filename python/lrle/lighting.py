# python/lrle/lighting.py
# CPU Lambert shading for terrain vertex colors
# Exists to give previews and consumers without shaders a lit color buffer from mesh normals
# RELEVANT FILES: python/lrle/config.py, python/lrle/mesh.py, python/lrle/preview.py, tests/test_lighting.py

from __future__ import annotations

import math

import numpy as np

from .config import LightingParams
from .mesh import TerrainMesh


def sun_direction(azimuth_deg: float, elevation_deg: float) -> np.ndarray:
    """Unit vector pointing from the surface toward the sun.

    Azimuth is measured like the camera's: 0 points along +Z, 90 along +X.
    """
    az = math.radians(float(azimuth_deg))
    el = math.radians(float(elevation_deg))
    return np.array(
        [math.cos(el) * math.sin(az), math.sin(el), math.cos(el) * math.cos(az)],
        dtype=np.float32,
    )


def shade_colors(mesh: TerrainMesh, params: LightingParams) -> np.ndarray:
    """Return ``(N, 3)`` float32 colors lit by ``color * (ambient + intensity * max(0, n.l))``.

    The mesh is left untouched; with lighting disabled the unlit colors are
    returned as a copy.
    """
    colors = np.asarray(mesh.colors, dtype=np.float32)
    if not params.enabled or mesh.is_empty:
        return colors.copy()

    light = sun_direction(params.azimuth_deg, params.elevation_deg)
    lambert = np.clip(mesh.normals @ light, 0.0, None)
    factor = float(params.ambient) + float(params.intensity) * lambert
    return np.clip(colors * factor[:, None], 0.0, 1.0).astype(np.float32)
