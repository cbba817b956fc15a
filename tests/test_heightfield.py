"""
Tests for the HeightField container: derived dimensions, bounds and immutability.
"""

import numpy as np
import pytest

from lrle import HeightField


def test_from_rows_dimensions():
    field = HeightField.from_rows([[0.0, 1.0, 2.0], [3.0, 4.0, 5.0]])

    assert field.width == 3
    assert field.height == 2
    assert field.samples.dtype == np.float32
    assert field.colors is None
    assert not field.has_colors


def test_empty_field():
    field = HeightField.from_rows([])
    assert field.width == 0
    assert field.height == 0
    assert field.is_empty


def test_height_bounds():
    field = HeightField.from_rows([[0.0, 5.0, 2.0], [-3.0, 4.0, 10.0]])
    lo, hi = field.height_bounds()
    assert lo == -3.0
    assert hi == 10.0


def test_height_bounds_empty():
    assert HeightField.from_rows([]).height_bounds() == (0.0, 0.0)


def test_ragged_rows_rejected():
    with pytest.raises(ValueError, match="row 1 has 2 values, expected 3"):
        HeightField.from_rows([[0, 1, 2], [3, 4]])


def test_colors_shape_must_match():
    with pytest.raises(ValueError, match="does not match"):
        HeightField(np.zeros((2, 2)), np.zeros((2, 3), dtype=np.uint32))


def test_sample_and_color_access():
    field = HeightField.from_rows([[1.5, 2.5]], colors=[[0xFF0000, 0x00FF00]])
    assert field.sample(0, 1) == pytest.approx(2.5)
    assert field.color_at(0, 0) == 0xFF0000
    assert HeightField.from_rows([[1.0]]).color_at(0, 0) is None


def test_arrays_are_read_only():
    field = HeightField.from_rows([[1.0, 2.0]], colors=[[1, 2]])
    with pytest.raises(ValueError):
        field.samples[0, 0] = 9.0
    with pytest.raises(ValueError):
        field.colors[0, 0] = 9


def test_copy_is_equal_and_independent():
    field = HeightField.from_rows([[1.0, 2.0], [3.0, 4.0]])
    clone = field.copy()
    assert clone == field
    assert clone.samples is not field.samples
    assert clone != HeightField.from_rows([[1.0, 2.0], [3.0, 5.0]])
