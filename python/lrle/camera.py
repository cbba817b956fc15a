"""
Orbital camera for 3D terrain viewing.

The camera rotates around a target point using spherical coordinates:

- ``azimuth``: horizontal rotation around +Y in radians, 0 places the eye on +Z
- ``elevation``: angle out of the XZ plane in radians
- ``distance``: distance from the target

Fields are public and mutated directly by input handling; the camera only
derives the eye position and the view/projection matrices from them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict

import numpy as np

from .transforms import look_at_rh, orthographic_rh, perspective_rh

if TYPE_CHECKING:
    from .config import CameraConfig

ISOMETRIC_AZIMUTH = math.radians(45.0)
ISOMETRIC_ELEVATION = math.atan(1.0 / math.sqrt(2.0))  # ~35.264 degrees

DEFAULT_DISTANCE = 50.0
DEFAULT_AZIMUTH = math.pi / 4.0
DEFAULT_ELEVATION = math.pi / 6.0
DEFAULT_FOV = 60.0
DEFAULT_NEAR = 0.1
DEFAULT_FAR = 1000.0

_WORLD_UP = (0.0, 1.0, 0.0)


class ProjectionMode(Enum):
    PERSPECTIVE = "perspective"
    ORTHOGRAPHIC = "orthographic"


def _origin() -> np.ndarray:
    return np.zeros(3, dtype=np.float32)


@dataclass
class OrbitalCamera:
    """Orbital camera that rotates around ``target``.

    Attributes
    ----------
    distance : float
        Distance from target point, > 0
    azimuth : float
        Horizontal rotation in radians
    elevation : float
        Vertical rotation in radians (0 = horizontal); callers clamp it away
        from +-pi/2
    target : np.ndarray
        Point the camera looks at (center of rotation)
    field_of_view : float
        Vertical field of view in degrees (perspective only)
    near, far : float
        Clipping plane distances, 0 < near < far
    projection_mode : ProjectionMode
    """

    distance: float = DEFAULT_DISTANCE
    azimuth: float = DEFAULT_AZIMUTH
    elevation: float = DEFAULT_ELEVATION
    target: np.ndarray = field(default_factory=_origin)
    field_of_view: float = DEFAULT_FOV
    near: float = DEFAULT_NEAR
    far: float = DEFAULT_FAR
    projection_mode: ProjectionMode = ProjectionMode.PERSPECTIVE

    def __post_init__(self) -> None:
        self.target = np.asarray(self.target, dtype=np.float32).reshape(3).copy()

    @classmethod
    def from_config(cls, config: "CameraConfig") -> "OrbitalCamera":
        return cls(
            distance=config.distance,
            azimuth=math.radians(config.azimuth_deg),
            elevation=math.radians(config.elevation_deg),
            target=np.asarray(config.target, dtype=np.float32),
            field_of_view=config.field_of_view,
            near=config.near,
            far=config.far,
            projection_mode=ProjectionMode.ORTHOGRAPHIC if config.orthographic else ProjectionMode.PERSPECTIVE,
        )

    def eye_position(self) -> np.ndarray:
        """World-space eye position from the orbital parameters."""
        ce = math.cos(self.elevation)
        offset = np.array(
            [
                self.distance * ce * math.sin(self.azimuth),
                self.distance * math.sin(self.elevation),
                self.distance * ce * math.cos(self.azimuth),
            ],
            dtype=np.float64,
        )
        return (np.asarray(self.target, dtype=np.float64) + offset).astype(np.float32)

    # Alias kept for callers using the shorter name
    position = eye_position

    def view_matrix(self) -> np.ndarray:
        """World-to-camera transform (right-handed look-at, +Y up)."""
        return look_at_rh(self.eye_position(), self.target, _WORLD_UP)

    def ortho_half_extents(self, aspect: float) -> tuple:
        half_height = self.distance * 0.5
        return half_height * float(aspect), half_height

    def projection_matrix(self, aspect: float) -> np.ndarray:
        """Projection for the current mode.

        Parameters
        ----------
        aspect : float
            Width/height aspect ratio of the viewport
        """
        if self.projection_mode is ProjectionMode.ORTHOGRAPHIC:
            half_width, half_height = self.ortho_half_extents(aspect)
            return orthographic_rh(-half_width, half_width, -half_height, half_height, self.near, self.far)
        return perspective_rh(self.field_of_view, aspect, self.near, self.far)

    def view_projection_matrix(self, aspect: float) -> np.ndarray:
        """Combined ``projection @ view``, world space to clip space."""
        return (self.projection_matrix(aspect).astype(np.float64) @ self.view_matrix().astype(np.float64)).astype(np.float32)

    def set_isometric(self) -> None:
        """Switch to an orthographic true-isometric view."""
        self.projection_mode = ProjectionMode.ORTHOGRAPHIC
        self.azimuth = ISOMETRIC_AZIMUTH
        self.elevation = ISOMETRIC_ELEVATION

    def toggle_projection(self) -> ProjectionMode:
        if self.projection_mode is ProjectionMode.PERSPECTIVE:
            self.projection_mode = ProjectionMode.ORTHOGRAPHIC
        else:
            self.projection_mode = ProjectionMode.PERSPECTIVE
        return self.projection_mode

    def reset(self) -> None:
        """Restore the default view in place."""
        defaults = OrbitalCamera()
        self.distance = defaults.distance
        self.azimuth = defaults.azimuth
        self.elevation = defaults.elevation
        self.target = defaults.target
        self.field_of_view = defaults.field_of_view
        self.near = defaults.near
        self.far = defaults.far
        self.projection_mode = defaults.projection_mode

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distance": float(self.distance),
            "azimuth_deg": math.degrees(self.azimuth),
            "elevation_deg": math.degrees(self.elevation),
            "target": [float(v) for v in self.target],
            "field_of_view": float(self.field_of_view),
            "near": float(self.near),
            "far": float(self.far),
            "projection": self.projection_mode.value,
            "eye": [float(v) for v in self.eye_position()],
        }
