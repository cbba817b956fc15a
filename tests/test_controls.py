import math

import numpy as np
import pytest

from lrle import InputConfig, OrbitalCamera
from lrle.controls import OrbitControls


def _camera(**kwargs):
    params = dict(distance=10.0, azimuth=0.0, elevation=0.0)
    params.update(kwargs)
    return OrbitalCamera(**params)


def test_rotate_applies_sensitivity():
    controls = OrbitControls()
    cam = _camera()
    controls.rotate(cam, 100.0, 20.0)
    assert cam.azimuth == pytest.approx(-0.5)
    assert cam.elevation == pytest.approx(0.1)


def test_rotate_clamps_elevation():
    controls = OrbitControls()
    cam = _camera()
    controls.rotate(cam, 0.0, 10_000.0)
    assert cam.elevation == pytest.approx(math.pi / 2 - 0.1)
    controls.rotate(cam, 0.0, -50_000.0)
    assert cam.elevation == pytest.approx(-math.pi / 2 + 0.1)


def test_zoom_in_and_out():
    controls = OrbitControls()
    cam = _camera(distance=50.0)
    controls.zoom(cam, 1.0)
    assert cam.distance == pytest.approx(45.0)
    controls.zoom(cam, -2.0)
    assert cam.distance == pytest.approx(54.0)


def test_zoom_clamped_to_limits():
    controls = OrbitControls(InputConfig(min_distance=2.0, max_distance=100.0))
    cam = _camera(distance=10.0)
    for _ in range(200):
        controls.zoom(cam, 1.0)
    assert cam.distance == pytest.approx(2.0)
    for _ in range(200):
        controls.zoom(cam, -1.0)
    assert cam.distance == pytest.approx(100.0)


def test_zoom_past_zero_factor_stays_positive():
    controls = OrbitControls()
    cam = _camera(distance=10.0)
    controls.zoom(cam, 50.0)
    assert cam.distance == 1.0


def test_pan_moves_target_in_screen_plane():
    controls = OrbitControls()
    cam = _camera(distance=100.0)
    # eye on +Z looking at -Z, screen right is +X
    controls.pan(cam, 10.0, 0.0)
    np.testing.assert_allclose(cam.target, [-1.0, 0.0, 0.0], atol=1e-5)

    controls.pan(cam, 0.0, 10.0)
    np.testing.assert_allclose(cam.target, [-1.0, 1.0, 0.0], atol=1e-5)


def test_pan_keeps_distance():
    controls = OrbitControls()
    cam = _camera(distance=30.0, azimuth=0.7, elevation=0.4)
    before = cam.eye_position() - cam.target
    controls.pan(cam, 25.0, -13.0)
    after = cam.eye_position() - cam.target
    np.testing.assert_allclose(before, after, atol=1e-4)


def test_pointer_drag_rotates():
    controls = OrbitControls()
    cam = _camera()

    assert controls.pointer_moved(100.0, 100.0, cam) is False
    controls.set_button("left", True)
    assert controls.is_rotating()
    assert controls.pointer_moved(110.0, 100.0, cam) is True
    assert cam.azimuth == pytest.approx(-0.05)

    controls.set_button("left", False)
    assert controls.pointer_moved(200.0, 100.0, cam) is False
    assert cam.azimuth == pytest.approx(-0.05)


def test_shift_drag_pans():
    controls = OrbitControls()
    cam = _camera()
    controls.state.shift_pressed = True
    controls.set_button("left", True)
    assert controls.is_panning()
    assert not controls.is_rotating()

    controls.pointer_moved(0.0, 0.0, cam)
    controls.pointer_moved(10.0, 0.0, cam)
    assert cam.azimuth == 0.0
    assert cam.target[0] < 0.0


def test_middle_drag_pans():
    controls = OrbitControls()
    controls.set_button("middle", True)
    assert controls.is_panning()


def test_unknown_button():
    with pytest.raises(ValueError, match="Unknown pointer button"):
        OrbitControls().set_button("back", True)


def test_reset():
    controls = OrbitControls()
    cam = _camera(distance=3.0)
    controls.pointer_moved(5.0, 5.0, cam)
    controls.reset(cam)
    assert cam.distance == 50.0
    assert cam.azimuth == pytest.approx(math.pi / 4)
    assert controls.state.last_pointer is None
