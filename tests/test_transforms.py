# tests/test_transforms.py
# View/projection matrix helper tests
# Exists to validate look-at orthonormality, clip-space depth conventions and argument checks
# RELEVANT FILES: python/lrle/transforms.py, python/lrle/camera.py

import numpy as np
import pytest

from lrle.transforms import look_at_rh, normalize, orthographic_rh, perspective_rh, transform_points


def test_look_at_is_rigid():
    view = look_at_rh((3.0, 4.0, 5.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0)).astype(np.float64)
    rot = view[:3, :3]
    np.testing.assert_allclose(rot @ rot.T, np.eye(3), atol=1e-6)
    assert np.linalg.det(rot) == pytest.approx(1.0, abs=1e-6)
    np.testing.assert_allclose(view[3], [0.0, 0.0, 0.0, 1.0])


def test_look_at_moves_eye_to_origin():
    eye = (3.0, 4.0, 5.0)
    view = look_at_rh(eye, (0.0, 1.0, 0.0))
    np.testing.assert_allclose(transform_points(view, [eye])[0, :3], [0.0, 0.0, 0.0], atol=1e-5)


def test_look_at_parallel_up_falls_back():
    view = look_at_rh((0.0, 10.0, 0.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    assert np.all(np.isfinite(view))
    target = transform_points(view, [(0.0, 0.0, 0.0)])[0]
    np.testing.assert_allclose(target[:3], [0.0, 0.0, -10.0], atol=1e-5)


def test_look_at_degenerate_eye_equals_target():
    view = look_at_rh((1.0, 2.0, 3.0), (1.0, 2.0, 3.0))
    expected = np.eye(4)
    expected[:3, 3] = [-1.0, -2.0, -3.0]
    np.testing.assert_allclose(view, expected)


def test_look_at_rejects_bad_vectors():
    with pytest.raises(ValueError, match="three components"):
        look_at_rh((0.0, 0.0), (0.0, 0.0, 0.0))
    with pytest.raises(ValueError, match="finite"):
        look_at_rh((np.nan, 0.0, 1.0), (0.0, 0.0, 0.0))


def test_perspective_wgpu_depth():
    proj = perspective_rh(60.0, 1.0, 0.5, 50.0)
    near = transform_points(proj, [(0.0, 0.0, -0.5)])[0]
    far = transform_points(proj, [(0.0, 0.0, -50.0)])[0]
    assert near[2] / near[3] == pytest.approx(0.0, abs=1e-6)
    assert far[2] / far[3] == pytest.approx(1.0, abs=1e-5)


def test_perspective_gl_depth():
    proj = perspective_rh(60.0, 1.0, 0.5, 50.0, clip_space="gl")
    near = transform_points(proj, [(0.0, 0.0, -0.5)])[0]
    far = transform_points(proj, [(0.0, 0.0, -50.0)])[0]
    assert near[2] / near[3] == pytest.approx(-1.0, abs=1e-5)
    assert far[2] / far[3] == pytest.approx(1.0, abs=1e-5)


def test_perspective_focal_scale():
    proj = perspective_rh(90.0, 2.0, 0.1, 10.0)
    assert proj[1, 1] == pytest.approx(1.0, abs=1e-6)
    assert proj[0, 0] == pytest.approx(0.5, abs=1e-6)
    assert proj[3, 2] == -1.0


@pytest.mark.parametrize(
    "args, message",
    [
        ((0.0, 1.0, 0.1, 10.0), "fovy_deg"),
        ((180.0, 1.0, 0.1, 10.0), "fovy_deg"),
        ((60.0, 0.0, 0.1, 10.0), "aspect"),
        ((60.0, 1.0, 0.0, 10.0), "znear"),
        ((60.0, 1.0, 1.0, 1.0), "zfar"),
    ],
)
def test_perspective_validation(args, message):
    with pytest.raises(ValueError, match=message):
        perspective_rh(*args)


def test_unknown_clip_space():
    with pytest.raises(ValueError, match="clip_space"):
        perspective_rh(60.0, 1.0, 0.1, 10.0, clip_space="dx")
    with pytest.raises(ValueError, match="clip_space"):
        orthographic_rh(-1.0, 1.0, -1.0, 1.0, 0.1, 10.0, clip_space="vulkan")


def test_orthographic_maps_box_to_ndc():
    proj = orthographic_rh(-4.0, 4.0, -2.0, 2.0, 1.0, 11.0)
    corners = transform_points(proj, [(-4.0, -2.0, -1.0), (4.0, 2.0, -11.0)])
    np.testing.assert_allclose(corners[:, 3], [1.0, 1.0])
    np.testing.assert_allclose(corners[0, :3], [-1.0, -1.0, 0.0], atol=1e-6)
    np.testing.assert_allclose(corners[1, :3], [1.0, 1.0, 1.0], atol=1e-6)


def test_orthographic_gl_depth():
    proj = orthographic_rh(-1.0, 1.0, -1.0, 1.0, 2.0, 12.0, clip_space="gl")
    depths = transform_points(proj, [(0.0, 0.0, -2.0), (0.0, 0.0, -7.0), (0.0, 0.0, -12.0)])[:, 2]
    np.testing.assert_allclose(depths, [-1.0, 0.0, 1.0], atol=1e-6)


@pytest.mark.parametrize("clip_space, near_depth", [("wgpu", 0.0), ("gl", -1.0)])
def test_perspective_depth_is_monotonic(clip_space, near_depth):
    proj = perspective_rh(45.0, 1.5, 0.25, 80.0, clip_space=clip_space)
    zs = -np.linspace(0.25, 80.0, 17)
    clip = transform_points(proj, np.stack([np.zeros_like(zs), np.zeros_like(zs), zs], axis=1))
    ndc_z = clip[:, 2] / clip[:, 3]
    assert ndc_z[0] == pytest.approx(near_depth, abs=1e-5)
    assert ndc_z[-1] == pytest.approx(1.0, abs=1e-5)
    assert np.all(np.diff(ndc_z) > 0.0)


def test_orthographic_validation():
    with pytest.raises(ValueError, match="left"):
        orthographic_rh(1.0, -1.0, -1.0, 1.0, 0.1, 10.0)
    with pytest.raises(ValueError, match="bottom"):
        orthographic_rh(-1.0, 1.0, 1.0, 1.0, 0.1, 10.0)


def test_transform_points_shape_check():
    with pytest.raises(ValueError):
        transform_points(np.eye(3), [(0.0, 0.0, 0.0)])


def test_normalize():
    np.testing.assert_allclose(normalize(np.array([3.0, 0.0, 4.0])), [0.6, 0.0, 0.8])
    np.testing.assert_allclose(normalize(np.zeros(3)), [0.0, 1.0, 0.0])
