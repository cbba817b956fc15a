# python/lrle/controls.py
# Orbit/pan/zoom camera math driven by pointer deltas
# Exists so event handlers only translate events and call into these methods
# RELEVANT FILES: python/lrle/camera.py, python/lrle/config.py, tests/test_controls.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from .camera import OrbitalCamera
from .config import InputConfig
from .transforms import normalize


@dataclass
class DragState:
    """Pointer button and modifier state for drag operations."""

    left_pressed: bool = False
    middle_pressed: bool = False
    right_pressed: bool = False
    shift_pressed: bool = False
    last_pointer: Optional[Tuple[float, float]] = None


@dataclass
class OrbitControls:
    """Applies rotate, pan and zoom gestures to an :class:`OrbitalCamera`.

    Left drag rotates, middle drag or shift+left drag pans, scroll zooms.
    Distance and elevation are clamped to the :class:`InputConfig` limits.
    """

    config: InputConfig = field(default_factory=InputConfig)
    state: DragState = field(default_factory=DragState)

    def is_rotating(self) -> bool:
        return self.state.left_pressed and not self.state.shift_pressed

    def is_panning(self) -> bool:
        return self.state.middle_pressed or (self.state.left_pressed and self.state.shift_pressed)

    def set_button(self, button: str, pressed: bool) -> None:
        attr = {"left": "left_pressed", "middle": "middle_pressed", "right": "right_pressed"}.get(button)
        if attr is None:
            raise ValueError(f"Unknown pointer button: {button!r}")
        setattr(self.state, attr, bool(pressed))

    def pointer_moved(self, x: float, y: float, camera: OrbitalCamera) -> bool:
        """Track the pointer; returns True when the camera changed."""
        updated = False
        if self.state.last_pointer is not None:
            dx = float(x) - self.state.last_pointer[0]
            dy = float(y) - self.state.last_pointer[1]
            if self.is_rotating():
                self.rotate(camera, dx, dy)
                updated = True
            elif self.is_panning():
                self.pan(camera, dx, dy)
                updated = True
        self.state.last_pointer = (float(x), float(y))
        return updated

    def rotate(self, camera: OrbitalCamera, dx: float, dy: float) -> None:
        camera.azimuth -= dx * self.config.rotate_sensitivity
        camera.elevation += dy * self.config.rotate_sensitivity
        camera.elevation = float(np.clip(camera.elevation, self.config.min_elevation, self.config.max_elevation))

    def pan(self, camera: OrbitalCamera, dx: float, dy: float) -> None:
        """Move the target in screen space, scaled by distance."""
        forward = normalize(
            np.asarray(camera.target, dtype=np.float64) - camera.eye_position().astype(np.float64),
            fallback=(0.0, 0.0, -1.0),
        )
        right = normalize(np.cross(forward, (0.0, 1.0, 0.0)), fallback=(1.0, 0.0, 0.0))
        up = normalize(np.cross(right, forward))

        scale = camera.distance * self.config.pan_sensitivity * 0.01
        target = np.asarray(camera.target, dtype=np.float64)
        target = target - right * dx * scale + up * dy * scale
        camera.target = target.astype(np.float32)

    def zoom(self, camera: OrbitalCamera, scroll: float) -> None:
        """Scale distance by ``1 - scroll * zoom_sensitivity``; positive scroll zooms in."""
        factor = 1.0 - float(scroll) * self.config.zoom_sensitivity
        camera.distance = float(np.clip(camera.distance * factor, self.config.min_distance, self.config.max_distance))

    def reset(self, camera: OrbitalCamera) -> None:
        camera.reset()
        self.state.last_pointer = None
