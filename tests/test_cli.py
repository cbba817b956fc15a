import json
import logging

import pytest
from PIL import Image

from lrle import __version__
from lrle.cli import _parse_size, build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args(["terrain.fdf"])
    assert args.file == "terrain.fdf"
    assert args.height_scale is None
    assert args.use_file_colors is None
    assert args.size == (800, 600)
    assert not args.isometric


def test_parse_size():
    assert _parse_size("320x240") == (320, 240)
    assert _parse_size("64X32") == (64, 32)


@pytest.mark.parametrize("text", ["320", "0x10", "axb", "-5x10"])
def test_parse_size_rejects(text):
    import argparse

    with pytest.raises(argparse.ArgumentTypeError):
        _parse_size(text)


def test_main_loads_file(simple_fdf_path, caplog):
    with caplog.at_level(logging.INFO):
        assert main([str(simple_fdf_path), "--height-scale", "2.0"]) == 0
    assert "Loaded terrain simple.fdf: 3x2" in caplog.text
    assert "Generated mesh: 6 vertices, 14 line indices, 12 triangle indices" in caplog.text


def test_main_missing_file(tmp_path, caplog):
    with caplog.at_level(logging.ERROR):
        assert main([str(tmp_path / "absent.fdf")]) == 1
    assert "Cannot open file" in caplog.text


def test_main_parse_error(tmp_path, caplog):
    path = tmp_path / "bad.fdf"
    path.write_text("1 2 3\n4 5\n", encoding="utf-8")
    with caplog.at_level(logging.ERROR):
        assert main([str(path)]) == 1
    assert "Row 2 has 2 values, expected 3" in caplog.text


@pytest.mark.preview
def test_main_writes_preview(simple_fdf_path, tmp_path):
    out = tmp_path / "preview.png"
    code = main(
        [
            str(simple_fdf_path),
            "--preview",
            str(out),
            "--size",
            "64x48",
            "--render-mode",
            "both",
            "--color-scheme",
            "heatmap",
            "--isometric",
        ]
    )
    assert code == 0
    with Image.open(out) as image:
        assert image.size == (64, 48)


@pytest.mark.preview
def test_main_bad_preview_path(simple_fdf_path, tmp_path):
    assert main([str(simple_fdf_path), "--preview", str(tmp_path / "out.bmp")]) == 1


def test_main_with_config_file(simple_fdf_path, tmp_path):
    config = tmp_path / "viewer.json"
    config.write_text(json.dumps({"render": {"shading_mode": "flat"}, "camera": {"distance": 30}}), encoding="utf-8")
    assert main([str(simple_fdf_path), "--config", str(config)]) == 0


def test_main_invalid_config_exits(simple_fdf_path, tmp_path):
    config = tmp_path / "viewer.json"
    config.write_text(json.dumps({"camera": {"distance": -1}}), encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        main([str(simple_fdf_path), "--config", str(config)])
    assert excinfo.value.code == 2


def test_unknown_color_scheme_exits(simple_fdf_path):
    with pytest.raises(SystemExit):
        main([str(simple_fdf_path), "--color-scheme", "viridis"])


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out
