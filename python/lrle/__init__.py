# python/lrle/__init__.py
# Public Python API for the lrle terrain viewer core
# Exists to re-export the loader, mesh generator, color schemes and camera under one namespace
# RELEVANT FILES: python/lrle/loader.py, python/lrle/mesh.py, python/lrle/camera.py, tests/test_api.py

__version__ = "0.3.0"

from .heightfield import HeightField
from .loader import (
    LoadError,
    FileNotFound,
    ParseError,
    InconsistentRow,
    EmptyFile,
    parse_fdf,
    load_fdf,
)
from .colors import (
    ColorScheme,
    CustomGradient,
    height_to_color,
    heights_to_colors,
    parse_color_scheme,
    available_schemes,
    unpack_rgb,
    pack_rgb,
)
from .mesh import (
    ShadingMode,
    TerrainMesh,
    Vertex,
    generate_mesh,
    generate_mesh_from_config,
)
from .camera import OrbitalCamera, ProjectionMode
from .transforms import look_at_rh, perspective_rh, orthographic_rh
from .config import (
    RenderMode,
    RenderConfig,
    LightingParams,
    CameraConfig,
    InputConfig,
    ViewerConfig,
    load_viewer_config,
)
from .controls import OrbitControls
from .lighting import sun_direction, shade_colors

__all__ = [
    "__version__",
    "HeightField",
    "LoadError",
    "FileNotFound",
    "ParseError",
    "InconsistentRow",
    "EmptyFile",
    "parse_fdf",
    "load_fdf",
    "ColorScheme",
    "CustomGradient",
    "height_to_color",
    "heights_to_colors",
    "parse_color_scheme",
    "available_schemes",
    "unpack_rgb",
    "pack_rgb",
    "ShadingMode",
    "TerrainMesh",
    "Vertex",
    "generate_mesh",
    "generate_mesh_from_config",
    "OrbitalCamera",
    "ProjectionMode",
    "look_at_rh",
    "perspective_rh",
    "orthographic_rh",
    "RenderMode",
    "RenderConfig",
    "LightingParams",
    "CameraConfig",
    "InputConfig",
    "ViewerConfig",
    "load_viewer_config",
    "OrbitControls",
    "sun_direction",
    "shade_colors",
]
