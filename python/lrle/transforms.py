# python/lrle/transforms.py
# Right-handed view and projection matrix helpers
# Exists to keep the camera's matrix math in one validated, numpy-only place
# RELEVANT FILES: python/lrle/camera.py, python/lrle/preview.py, tests/test_transforms.py

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

_EPS = 1e-12

# minimum NDC depth per clip-space convention; maximum is always 1
_NDC_DEPTH_MIN = {"wgpu": 0.0, "gl": -1.0}
_CLIP_SPACES = tuple(_NDC_DEPTH_MIN)


def _vec3(value: Sequence[float], label: str) -> np.ndarray:
    v = np.asarray(value, dtype=np.float64).reshape(-1)
    if v.shape != (3,):
        raise ValueError(f"{label} must have three components")
    if not np.all(np.isfinite(v)):
        raise ValueError(f"{label} components must be finite")
    return v


def _check_clip_space(clip_space: str) -> None:
    if clip_space not in _CLIP_SPACES:
        raise ValueError("clip_space must be 'wgpu' or 'gl'")


def normalize(v: np.ndarray, fallback: Sequence[float] = (0.0, 1.0, 0.0)) -> np.ndarray:
    """Return ``v`` scaled to unit length, or ``fallback`` for a zero vector."""
    n = float(np.linalg.norm(v))
    if n < _EPS:
        return np.asarray(fallback, dtype=np.float64)
    return np.asarray(v, dtype=np.float64) / n


def look_at_rh(eye, target, up=(0.0, 1.0, 0.0)) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` toward ``target``.

    The camera looks down its local -Z axis. When ``up`` is parallel to the
    view direction, +Z (or +X) is used as the up reference instead; when
    ``eye == target`` only the translation is applied.
    """
    eye_v = _vec3(eye, "eye")
    tgt_v = _vec3(target, "target")
    up_v = _vec3(up, "up")

    view = np.eye(4, dtype=np.float64)
    forward = tgt_v - eye_v
    if np.linalg.norm(forward) < _EPS:
        view[0:3, 3] = -eye_v
        return view.astype(np.float32)
    f = forward / np.linalg.norm(forward)

    s = np.cross(f, up_v)
    if np.linalg.norm(s) < 1e-9:
        for alt in ((0.0, 0.0, 1.0), (1.0, 0.0, 0.0)):
            s = np.cross(f, np.asarray(alt))
            if np.linalg.norm(s) >= 1e-9:
                break
    s = s / np.linalg.norm(s)
    u = np.cross(s, f)

    view[0, 0:3] = s
    view[1, 0:3] = u
    view[2, 0:3] = -f
    view[0, 3] = -np.dot(s, eye_v)
    view[1, 3] = -np.dot(u, eye_v)
    view[2, 3] = np.dot(f, eye_v)
    return view.astype(np.float32)


def _check_depth_range(znear: float, zfar: float) -> Tuple[float, float]:
    if not (np.isfinite(znear) and float(znear) > 0.0):
        raise ValueError("znear must be finite and > 0")
    if not (np.isfinite(zfar) and float(zfar) > float(znear)):
        raise ValueError("zfar must be finite and > znear")
    return float(znear), float(zfar)


_SPAN_UPPER = {"left": "right", "bottom": "top"}


def _check_span(lo: float, hi: float, label: str) -> Tuple[float, float]:
    if not (np.isfinite(lo) and np.isfinite(hi) and float(lo) < float(hi)):
        raise ValueError(f"{label} must be finite and < {_SPAN_UPPER[label]}")
    return float(lo), float(hi)


def perspective_rh(fovy_deg: float, aspect: float, znear: float, zfar: float, clip_space: str = "wgpu") -> np.ndarray:
    """Right-handed perspective projection.

    ``fovy_deg`` is the vertical field of view in degrees. View depth
    ``-znear`` lands on the clip space's minimum NDC depth (0 for ``"wgpu"``,
    -1 for ``"gl"``) and ``-zfar`` on 1.
    """
    if not (np.isfinite(fovy_deg) and 0.0 < float(fovy_deg) < 180.0):
        raise ValueError("fovy_deg must be finite and in (0, 180)")
    if not (np.isfinite(aspect) and float(aspect) > 0.0):
        raise ValueError("aspect must be finite and > 0")
    n, f = _check_depth_range(znear, zfar)
    _check_clip_space(clip_space)
    d_min = _NDC_DEPTH_MIN[clip_space]

    focal = 1.0 / np.tan(np.radians(float(fovy_deg)) * 0.5)
    proj = np.zeros((4, 4), dtype=np.float64)
    proj[0, 0] = focal / float(aspect)
    proj[1, 1] = focal
    # z_ndc = (a*z + b) / -z with z_ndc(-n) = d_min, z_ndc(-f) = 1
    proj[2, 2] = (f - d_min * n) / (n - f)
    proj[2, 3] = (1.0 - d_min) * f * n / (n - f)
    proj[3, 2] = -1.0
    return proj.astype(np.float32)


def orthographic_rh(left: float, right: float, bottom: float, top: float,
                    znear: float, zfar: float, clip_space: str = "wgpu") -> np.ndarray:
    """Right-handed orthographic projection of the box [left, right] x [bottom, top] x [znear, zfar]."""
    l, r = _check_span(left, right, "left")
    b, t = _check_span(bottom, top, "bottom")
    n, f = _check_depth_range(znear, zfar)
    _check_clip_space(clip_space)
    d_min = _NDC_DEPTH_MIN[clip_space]

    proj = np.eye(4, dtype=np.float64)
    proj[0, 0] = 2.0 / (r - l)
    proj[1, 1] = 2.0 / (t - b)
    proj[0, 3] = -(r + l) / (r - l)
    proj[1, 3] = -(t + b) / (t - b)
    # linear in z: z_ndc(-n) = d_min, z_ndc(-f) = 1
    proj[2, 2] = -(1.0 - d_min) / (f - n)
    proj[2, 3] = -(n - d_min * f) / (f - n)
    return proj.astype(np.float32)


def transform_points(matrix: np.ndarray, points: np.ndarray) -> np.ndarray:
    """Apply a 4x4 matrix to ``(N, 3)`` points; returns homogeneous ``(N, 4)`` clip coordinates."""
    m = np.asarray(matrix, dtype=np.float64)
    if m.shape != (4, 4):
        raise ValueError("Expected (4,4) matrix input")
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    homo = np.concatenate([pts, np.ones((pts.shape[0], 1))], axis=1)
    return homo @ m.T
