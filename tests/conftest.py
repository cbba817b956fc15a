# Ensure `import lrle` works from a fresh clone:
# put repo/python on sys.path so the package is importable without prior install.
# Set LRLE_NO_BOOTSTRAP=1 to skip this (e.g., in CI with an installed wheel).
import os
import sys
from pathlib import Path

import numpy as np
import pytest


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _ensure_python_path():
    repo = _repo_root()
    pkg_dir = repo / "python"
    if str(pkg_dir) not in sys.path:
        sys.path.insert(0, str(pkg_dir))


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "preview: tests that rasterize images with Pillow"
    )


def pytest_sessionstart(session):
    if os.environ.get("LRLE_NO_BOOTSTRAP") == "1":
        return
    _ensure_python_path()


SIMPLE_FDF = "0 1 2\n3 4 5\n"

COLORED_FDF = "0,0xFF0000 1,0x00FF00\n2,0x0000FF 3,0xFFFFFF\n"


@pytest.fixture
def simple_fdf_path(tmp_path: Path) -> Path:
    path = tmp_path / "simple.fdf"
    path.write_text(SIMPLE_FDF, encoding="utf-8")
    return path


@pytest.fixture
def hill_field():
    """9x7 smooth bump with its peak in the middle."""
    from lrle import HeightField

    zs, xs = np.meshgrid(np.linspace(-1.0, 1.0, 7), np.linspace(-1.0, 1.0, 9), indexing="ij")
    heights = 10.0 * np.exp(-(xs ** 2 + zs ** 2) * 2.0)
    return HeightField(heights.astype(np.float32))
