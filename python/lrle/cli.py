"""Command-line entry point.

Usage
-----
    lrle terrain.fdf                        # load with defaults
    lrle terrain.fdf --height-scale 2.0     # vertical exaggeration
    lrle terrain.fdf --color-scheme heatmap --shading flat --preview out.png
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from typing import Optional, Sequence, Tuple

from . import __version__
from .camera import OrbitalCamera
from .colors import available_schemes
from .config import load_viewer_config
from .loader import LoadError, load_fdf
from .mesh import generate_mesh_from_config
from .preview import render_preview, save_preview

logger = logging.getLogger("lrle")


def _parse_size(text: str) -> Tuple[int, int]:
    try:
        w_str, h_str = text.lower().split("x", 1)
        w, h = int(w_str), int(h_str)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"size must look like WIDTHxHEIGHT, got {text!r}") from exc
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError("width and height must be > 0")
    return w, h


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lrle", description="Terrain height-field viewer")
    parser.add_argument("file", help="Path to .fdf file to load")
    parser.add_argument("--height-scale", type=float, default=None, help="Height scale multiplier (default: 1.0)")
    parser.add_argument("--shading", choices=["smooth", "flat"], default=None, help="Normal computation mode")
    parser.add_argument("--color-scheme", default=None, help=f"Height coloring: {', '.join(available_schemes())}")
    parser.add_argument("--use-file-colors", action="store_true", default=None, help="Use colors embedded in the file")
    parser.add_argument("--render-mode", choices=["wireframe", "solid", "both"], default=None)
    parser.add_argument("--config", default=None, help="JSON viewer configuration")
    parser.add_argument("--isometric", action="store_true", help="Start in the isometric preset")
    parser.add_argument("--orthographic", action="store_true", default=None, help="Use orthographic projection")
    parser.add_argument("--preview", default=None, metavar="PNG", help="Write a CPU-rendered preview image")
    parser.add_argument("--size", type=_parse_size, default=(800, 600), metavar="WxH", help="Preview size")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _fit_distance(mesh, camera: OrbitalCamera) -> float:
    lo, hi = mesh.bounds()
    radius = 0.5 * float(((hi - lo) ** 2).sum()) ** 0.5
    half_fov = math.radians(camera.field_of_view) * 0.5
    return max(radius / max(math.sin(half_fov), 1e-3), 1.0)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING - 10 * min(int(args.verbose) + 1, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_viewer_config(
            args.config,
            overrides={
                "height_scale": args.height_scale,
                "shading": args.shading,
                "color_scheme": args.color_scheme,
                "use_field_colors": args.use_file_colors,
                "render_mode": args.render_mode,
                "orthographic": args.orthographic,
            },
        )
    except (ValueError, TypeError, OSError) as exc:
        parser.error(f"invalid configuration: {exc}")

    try:
        field = load_fdf(args.file)
    except LoadError as exc:
        logger.error(str(exc))
        return 1

    mesh = generate_mesh_from_config(field, config.render)
    logger.info(
        f"Generated mesh: {mesh.vertex_count} vertices, {mesh.wireframe_index_count} line indices, "
        f"{mesh.triangle_index_count} triangle indices"
    )

    camera = OrbitalCamera.from_config(config.camera)
    if args.isometric:
        camera.set_isometric()
    if args.config is None and not mesh.is_empty:
        camera.distance = _fit_distance(mesh, camera)
    logger.info(f"Camera: {camera.to_dict()}")

    if args.preview:
        width, height = args.size
        image = render_preview(
            mesh,
            camera,
            width,
            height,
            render_mode=config.render.render_mode,
            lighting=config.lighting,
        )
        try:
            save_preview(image, args.preview)
        except (ValueError, OSError) as exc:
            logger.error(f"Failed to write preview: {exc}")
            return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
