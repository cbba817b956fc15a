# python/lrle/config.py
# Viewer configuration parsing for rendering, lighting, camera and input limits
# Exists to pass explicit configuration structs into the mesh/render path instead of globals
# RELEVANT FILES: python/lrle/mesh.py, python/lrle/controls.py, python/lrle/cli.py, tests/test_config.py
from __future__ import annotations

import copy
import json
import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .colors import ColorScheme, CustomGradient, SchemeLike, parse_color_scheme
from .mesh import ShadingMode, parse_shading_mode

ConfigSource = Union["ViewerConfig", Mapping[str, Any], str, Path, None]


class RenderMode(Enum):
    WIREFRAME = "wireframe"
    SOLID = "solid"
    BOTH = "both"


_RENDER_MODES: Dict[str, RenderMode] = {
    "wireframe": RenderMode.WIREFRAME,
    "wire": RenderMode.WIREFRAME,
    "lines": RenderMode.WIREFRAME,
    "solid": RenderMode.SOLID,
    "filled": RenderMode.SOLID,
    "fill": RenderMode.SOLID,
    "both": RenderMode.BOTH,
    "solidwireframe": RenderMode.BOTH,
}


def _normalize_key(value: Any) -> str:
    return "".join(
        c
        for c in str(value).strip().lower()
        if c not in {"-", "_", " ", "."}
    )


def parse_render_mode(value: Union[str, RenderMode]) -> RenderMode:
    if isinstance(value, RenderMode):
        return value
    key = _normalize_key(value)
    if key not in _RENDER_MODES:
        raise ValueError(f"Unknown render mode: {value!r}")
    return _RENDER_MODES[key]


def _to_float3(value: Any, label: str) -> Tuple[float, float, float]:
    if value is None:
        raise ValueError(f"{label} requires three floats")
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return (float(value[0]), float(value[1]), float(value[2]))
    raise ValueError(f"{label} must be a sequence of three numeric values")


def _scheme_from_value(value: Any) -> SchemeLike:
    if isinstance(value, Mapping):
        stops = value.get("custom", value)
        try:
            return CustomGradient(stops["low"], stops["mid"], stops["high"])
        except KeyError as exc:
            raise ValueError(f"custom color scheme requires low/mid/high stops, missing {exc}") from exc
    return parse_color_scheme(value)


def _scheme_to_value(scheme: SchemeLike) -> Any:
    if isinstance(scheme, CustomGradient):
        return {"custom": {"low": list(scheme.low), "mid": list(scheme.mid), "high": list(scheme.high)}}
    return scheme.value


def _require_mapping(data: Any, label: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"{label} must be a mapping")
    return data


@dataclass
class RenderConfig:
    height_scale: float = 1.0
    shading_mode: ShadingMode = ShadingMode.SMOOTH
    color_scheme: SchemeLike = ColorScheme.TERRAIN
    use_field_colors: bool = False
    render_mode: RenderMode = RenderMode.WIREFRAME

    def to_dict(self) -> dict:
        return {
            "height_scale": self.height_scale,
            "shading_mode": self.shading_mode.value,
            "color_scheme": _scheme_to_value(self.color_scheme),
            "use_field_colors": self.use_field_colors,
            "render_mode": self.render_mode.value,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["RenderConfig"] = None) -> "RenderConfig":
        base = copy.deepcopy(default) if default is not None else cls()
        if "height_scale" in data:
            base.height_scale = float(data["height_scale"])
        if "shading_mode" in data:
            base.shading_mode = parse_shading_mode(data["shading_mode"])
        if "shading" in data and "shading_mode" not in data:
            base.shading_mode = parse_shading_mode(data["shading"])
        if "color_scheme" in data:
            base.color_scheme = _scheme_from_value(data["color_scheme"])
        if "use_field_colors" in data:
            base.use_field_colors = bool(data["use_field_colors"])
        if "render_mode" in data:
            base.render_mode = parse_render_mode(data["render_mode"])
        return base


@dataclass
class LightingParams:
    enabled: bool = True
    azimuth_deg: float = 315.0
    elevation_deg: float = 45.0
    ambient: float = 0.25
    intensity: float = 1.0

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "azimuth_deg": self.azimuth_deg,
            "elevation_deg": self.elevation_deg,
            "ambient": self.ambient,
            "intensity": self.intensity,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["LightingParams"] = None) -> "LightingParams":
        base = copy.deepcopy(default) if default is not None else cls()
        if "enabled" in data:
            base.enabled = bool(data["enabled"])
        if "azimuth_deg" in data:
            base.azimuth_deg = float(data["azimuth_deg"])
        if "azimuth" in data and "azimuth_deg" not in data:
            base.azimuth_deg = float(data["azimuth"])
        if "elevation_deg" in data:
            base.elevation_deg = float(data["elevation_deg"])
        if "elevation" in data and "elevation_deg" not in data:
            base.elevation_deg = float(data["elevation"])
        if "ambient" in data:
            base.ambient = float(data["ambient"])
        if "intensity" in data:
            base.intensity = float(data["intensity"])
        return base


@dataclass
class CameraConfig:
    distance: float = 50.0
    azimuth_deg: float = 45.0
    elevation_deg: float = 30.0
    target: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    field_of_view: float = 60.0
    near: float = 0.1
    far: float = 1000.0
    orthographic: bool = False

    def to_dict(self) -> dict:
        return {
            "distance": self.distance,
            "azimuth_deg": self.azimuth_deg,
            "elevation_deg": self.elevation_deg,
            "target": list(self.target),
            "field_of_view": self.field_of_view,
            "near": self.near,
            "far": self.far,
            "orthographic": self.orthographic,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["CameraConfig"] = None) -> "CameraConfig":
        base = copy.deepcopy(default) if default is not None else cls()
        if "distance" in data:
            base.distance = float(data["distance"])
        if "azimuth_deg" in data:
            base.azimuth_deg = float(data["azimuth_deg"])
        if "elevation_deg" in data:
            base.elevation_deg = float(data["elevation_deg"])
        if "target" in data:
            base.target = _to_float3(data["target"], "camera.target")
        if "field_of_view" in data:
            base.field_of_view = float(data["field_of_view"])
        if "fov" in data and "field_of_view" not in data:
            base.field_of_view = float(data["fov"])
        if "near" in data:
            base.near = float(data["near"])
        if "far" in data:
            base.far = float(data["far"])
        if "orthographic" in data:
            base.orthographic = bool(data["orthographic"])
        if "projection" in data:
            proj = _normalize_key(data["projection"])
            if proj in {"orthographic", "ortho"}:
                base.orthographic = True
            elif proj in {"perspective", "persp"}:
                base.orthographic = False
            else:
                raise ValueError(f"Unknown projection mode: {data['projection']!r}")
        return base


@dataclass
class InputConfig:
    """Sensitivities and limits applied by orbit controls."""

    rotate_sensitivity: float = 0.005  # radians per pixel
    pan_sensitivity: float = 0.1
    zoom_sensitivity: float = 0.1
    min_distance: float = 1.0
    max_distance: float = 500.0
    min_elevation: float = -math.pi / 2.0 + 0.1
    max_elevation: float = math.pi / 2.0 - 0.1

    def to_dict(self) -> dict:
        return {
            "rotate_sensitivity": self.rotate_sensitivity,
            "pan_sensitivity": self.pan_sensitivity,
            "zoom_sensitivity": self.zoom_sensitivity,
            "min_distance": self.min_distance,
            "max_distance": self.max_distance,
            "min_elevation": self.min_elevation,
            "max_elevation": self.max_elevation,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["InputConfig"] = None) -> "InputConfig":
        base = copy.deepcopy(default) if default is not None else cls()
        for key in (
            "rotate_sensitivity",
            "pan_sensitivity",
            "zoom_sensitivity",
            "min_distance",
            "max_distance",
            "min_elevation",
            "max_elevation",
        ):
            if key in data:
                setattr(base, key, float(data[key]))
        return base


@dataclass
class ViewerConfig:
    render: RenderConfig = field(default_factory=RenderConfig)
    lighting: LightingParams = field(default_factory=LightingParams)
    camera: CameraConfig = field(default_factory=CameraConfig)
    input: InputConfig = field(default_factory=InputConfig)

    def copy(self) -> "ViewerConfig":
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        return {
            "render": self.render.to_dict(),
            "lighting": self.lighting.to_dict(),
            "camera": self.camera.to_dict(),
            "input": self.input.to_dict(),
        }

    def validate(self) -> None:
        if not math.isfinite(self.render.height_scale):
            raise ValueError("render.height_scale must be finite")
        if not (0.0 <= self.lighting.ambient <= 1.0):
            raise ValueError("lighting.ambient must be within [0, 1]")
        if self.lighting.intensity < 0.0:
            raise ValueError("lighting.intensity must be non-negative")
        if not (-90.0 <= self.lighting.elevation_deg <= 90.0):
            raise ValueError("lighting.elevation_deg must be within [-90, 90]")
        cam = self.camera
        if cam.distance <= 0.0:
            raise ValueError("camera.distance must be positive")
        if not (0.0 < cam.near < cam.far):
            raise ValueError("camera.near and camera.far must satisfy 0 < near < far")
        if not (0.0 < cam.field_of_view < 180.0):
            raise ValueError("camera.field_of_view must be within (0, 180)")
        inp = self.input
        if not (0.0 < inp.min_distance <= inp.max_distance):
            raise ValueError("input.min_distance must be positive and <= input.max_distance")
        if inp.min_elevation > inp.max_elevation:
            raise ValueError("input.min_elevation must be <= input.max_elevation")
        if inp.min_elevation <= -math.pi / 2.0 or inp.max_elevation >= math.pi / 2.0:
            raise ValueError("input elevation limits must stay strictly within (-pi/2, pi/2)")
        for key in ("rotate_sensitivity", "pan_sensitivity", "zoom_sensitivity"):
            if getattr(inp, key) < 0.0:
                raise ValueError(f"input.{key} must be non-negative")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["ViewerConfig"] = None) -> "ViewerConfig":
        base = copy.deepcopy(default) if default is not None else cls()
        if "render" in data:
            base.render = RenderConfig.from_mapping(_require_mapping(data["render"], "render"), base.render)
        if "lighting" in data:
            base.lighting = LightingParams.from_mapping(_require_mapping(data["lighting"], "lighting"), base.lighting)
        if "camera" in data:
            base.camera = CameraConfig.from_mapping(_require_mapping(data["camera"], "camera"), base.camera)
        if "input" in data:
            base.input = InputConfig.from_mapping(_require_mapping(data["input"], "input"), base.input)
        return base


def _load_from_path(path: Path) -> Mapping[str, Any]:
    suffix = path.suffix.lower()
    if suffix not in {".json", ""}:
        raise ValueError(f"Unsupported viewer config file format: {path}")
    return _require_mapping(json.loads(path.read_text(encoding="utf-8")), "viewer config")


def _build_override_mapping(overrides: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    out: Dict[str, Dict[str, Any]] = {}
    for key, value in overrides.items():
        if value is None:
            continue
        if key in {"height_scale", "zscale"}:
            out.setdefault("render", {})["height_scale"] = value
        elif key in {"shading", "shading_mode"}:
            out.setdefault("render", {})["shading_mode"] = value
        elif key in {"color_scheme", "colors", "palette"}:
            out.setdefault("render", {})["color_scheme"] = value
        elif key in {"use_field_colors", "use_file_colors"}:
            out.setdefault("render", {})["use_field_colors"] = value
        elif key == "render_mode":
            out.setdefault("render", {})["render_mode"] = value
        elif key in {"sun_azimuth", "light_azimuth"}:
            out.setdefault("lighting", {})["azimuth_deg"] = value
        elif key in {"sun_elevation", "light_elevation"}:
            out.setdefault("lighting", {})["elevation_deg"] = value
        elif key == "ambient":
            out.setdefault("lighting", {})["ambient"] = value
        elif key == "lighting":
            out.setdefault("lighting", {})["enabled"] = value
        elif key in {"fov", "field_of_view"}:
            out.setdefault("camera", {})["field_of_view"] = value
        elif key in {"distance", "camera_distance"}:
            out.setdefault("camera", {})["distance"] = value
        elif key == "orthographic":
            out.setdefault("camera", {})["orthographic"] = value
        else:
            raise ValueError(f"Unknown viewer override: {key!r}")
    return out


def load_viewer_config(config: ConfigSource = None, overrides: Optional[Mapping[str, Any]] = None) -> ViewerConfig:
    """Resolve a :class:`ViewerConfig` from an object, mapping, JSON path or defaults.

    Flat ``overrides`` such as ``height_scale=2.0`` or ``shading="flat"`` are
    applied on top and the result is validated.
    """
    if isinstance(config, ViewerConfig):
        cfg = config.copy()
    elif isinstance(config, Mapping):
        cfg = ViewerConfig.from_mapping(config)
    elif isinstance(config, (str, Path)):
        cfg = ViewerConfig.from_mapping(_load_from_path(Path(config)))
    elif config is None:
        cfg = ViewerConfig()
    else:
        raise TypeError("config must be ViewerConfig, mapping, path, or None")

    if overrides:
        merged = _build_override_mapping(overrides)
        if merged:
            cfg = ViewerConfig.from_mapping(merged, cfg)
    cfg.validate()
    return cfg
