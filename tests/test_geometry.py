"""Tests for array normalization, transforms and float formatting."""

import numpy as np
import pytest

from plyexport.geometry import (apply_transform, as_colors, as_positions,
                                as_triangles, format_float, to_right_handed)


class TestFormatFloat:

    @pytest.mark.parametrize("value, expected", [
        (0.0, "0"),
        (-0.0, "0"),
        (1.0, "1"),
        (-3.0, "-3"),
        (0.1, "0.1"),
        (2.5, "2.5"),
        (1e10, "10000000000"),
    ])
    def test_shortest(self, value, expected):
        assert format_float(value) == expected

    def test_never_scientific(self):
        assert "e" not in format_float(1e-8)
        assert "e" not in format_float(3e20)

    def test_precision_trims_zeros(self):
        assert format_float(1.5, precision=4) == "1.5"
        assert format_float(3.14159, precision=3) == "3.142"

    def test_precision_rounds_to_zero(self):
        assert format_float(-0.0001, precision=2) == "0"


class TestArrays:

    def test_positions_shape(self):
        assert as_positions([[1, 2, 3]]).shape == (1, 3)
        assert as_positions([]).shape == (0, 3)

    def test_positions_bad_shape(self):
        with pytest.raises(ValueError):
            as_positions([[1, 2]])

    def test_colors_clip_and_drop_alpha(self):
        cols = as_colors([[300, -5, 12, 99]], 1)
        assert cols.dtype == np.uint8
        assert cols.tolist() == [[255, 0, 12]]

    def test_colors_wrong_count(self):
        assert as_colors([[1, 2, 3]], 2) is None
        assert as_colors(None, 0) is None

    def test_triangles(self):
        assert as_triangles([0, 1, 2, 3]).tolist() == [[0, 1, 2]]
        assert as_triangles(None).shape == (0, 3)


class TestTransforms:

    def test_identity_when_none(self):
        pts = np.array([[1.0, 2.0, 3.0]])
        assert apply_transform(pts, None) is pts

    def test_matrix_rotation(self):
        # 90 degrees about z: x -> y
        matrix = np.array([[0, -1, 0, 0],
                           [1, 0, 0, 0],
                           [0, 0, 1, 0],
                           [0, 0, 0, 1]], dtype=float)
        out = apply_transform(np.array([[1.0, 0.0, 0.0]]), matrix)
        np.testing.assert_allclose(out, [[0.0, 1.0, 0.0]], atol=1e-12)

    def test_bad_matrix(self):
        with pytest.raises(ValueError):
            apply_transform(np.zeros((1, 3)), np.eye(3))

    def test_right_handed_flip(self):
        out = to_right_handed(np.array([[1.0, -2.0, 3.0], [0.0, 0.0, 0.0]]))
        assert out.dtype == np.float32
        assert out.tolist() == [[1.0, -2.0, -3.0], [0.0, 0.0, 0.0]]
        assert not np.signbit(out[1, 2])
