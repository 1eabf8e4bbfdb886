"""
Tests for the Grid data structure.
"""

import json

import numpy as np
import pytest

from py_mapgen.core.errors import ConfigurationError, NotNormalizedError
from py_mapgen.core.grid import Grid


class TestGridConstruction:
    """Test grid creation and validation."""

    def test_zero_initialized(self):
        grid = Grid(3, 5)
        assert grid.shape == (3, 5)
        assert grid.values.shape == (3, 5)
        assert np.all(grid.values == 0)
        assert grid.diagonal == pytest.approx(np.sqrt(34))
        assert not grid.normalized

    @pytest.mark.parametrize("height,width", [(0, 4), (4, 0), (-1, 3)])
    def test_rejects_non_positive_dimensions(self, height, width):
        with pytest.raises(ConfigurationError):
            Grid(height, width)

    def test_rejects_wrong_value_count(self):
        with pytest.raises(ConfigurationError):
            Grid(2, 2, [1.0, 2.0, 3.0])

    def test_values_are_copied(self):
        source = np.arange(6, dtype=float).reshape(2, 3)
        grid = Grid.from_array(source)
        source[0, 0] = 99
        assert grid.values[0, 0] == 0


class TestNormalize:
    """Test normalization."""

    def test_min_zero_max_one(self):
        grid = Grid.from_array(np.array([[-3.0, 1.0], [5.0, 2.0]]))
        grid.normalize()
        assert grid.values.min() == 0.0
        assert grid.values.max() == 1.0
        assert grid.normalized
        assert (grid.min_z, grid.max_z) == (0.0, 1.0)

    def test_flat_grid_becomes_all_ones(self):
        grid = Grid.from_array(np.full((4, 4), 7.0))
        grid.normalize()
        assert np.all(grid.values == 1.0)

    def test_idempotent(self):
        grid = Grid.from_array(np.array([[0.0, 3.0], [1.0, 2.0]]))
        grid.normalize()
        once = grid.values.copy()
        grid.normalize()
        np.testing.assert_array_equal(grid.values, once)


class TestTransforms:
    """Test rotate and shift."""

    @pytest.fixture
    def grid(self):
        return Grid.from_array(np.arange(12, dtype=float).reshape(3, 4))

    def test_rotate_swaps_dimensions(self, grid):
        original = grid.values.copy()
        grid.rotate()
        assert grid.shape == (4, 3)
        np.testing.assert_array_equal(grid.values, original.T)

    def test_rotate_twice_is_identity(self, grid):
        original = grid.values.copy()
        grid.rotate()
        grid.rotate()
        np.testing.assert_array_equal(grid.values, original)

    def test_shift_x_moves_columns(self, grid):
        original = grid.values.copy()
        grid.shift_x(1)
        np.testing.assert_array_equal(grid.values[:, 1], original[:, 0])
        np.testing.assert_array_equal(grid.values[:, 0], original[:, 3])

    def test_shift_y_moves_rows(self, grid):
        original = grid.values.copy()
        grid.shift_y(2)
        np.testing.assert_array_equal(grid.values[2], original[0])

    def test_full_shifts_are_identity(self, grid):
        original = grid.values.copy()
        grid.shift_x(grid.width)
        grid.shift_y(grid.height)
        np.testing.assert_array_equal(grid.values, original)
        grid.shift_x(-grid.width * 3)
        np.testing.assert_array_equal(grid.values, original)

    def test_shift_x_pct_moves_left(self):
        grid = Grid.from_array(np.arange(10, dtype=float).reshape(1, 10))
        grid.shift_x_pct(20)
        # -int(10 * 20 / 100) = -2
        np.testing.assert_array_equal(grid.values[0], np.roll(np.arange(10.0), -2))

    def test_shift_y_pct_moves_down(self):
        grid = Grid.from_array(np.arange(10, dtype=float).reshape(10, 1))
        grid.shift_y_pct(30)
        np.testing.assert_array_equal(grid.values[:, 0], np.roll(np.arange(10.0), 3))

    def test_zero_pct_is_noop(self, grid):
        original = grid.values.copy()
        grid.shift_x_pct(0)
        grid.shift_y_pct(0)
        np.testing.assert_array_equal(grid.values, original)


class TestHistogram:
    """Test elevation histograms."""

    def test_all_zero_grid_after_normalize(self):
        grid = Grid(8, 8)
        grid.normalize()
        hist = grid.histogram()
        assert len(hist) == 256
        assert hist[255] == 64
        assert hist.sum() == 64

    def test_counts_scaled_values(self):
        grid = Grid.from_array(np.array([[0.0, 0.5], [1.0, 1.0]]), normalized=True)
        hist = grid.histogram()
        assert hist[0] == 1
        assert hist[127] == 1
        assert hist[255] == 2

    def test_out_of_range_values_raise(self):
        grid = Grid.from_array(np.array([[0.0, 2.0]]))
        with pytest.raises(NotNormalizedError):
            grid.histogram()

    def test_non_finite_values_raise(self):
        grid = Grid.from_array(np.array([[0.0, np.nan]]))
        with pytest.raises(NotNormalizedError):
            grid.histogram()


class TestSerialization:
    """Test JSON persistence."""

    def test_round_trip(self):
        grid = Grid.from_array(np.array([[0.25, -1.5, 3.0], [4.0, 5.5, 6.125]]))
        restored = Grid.from_json(grid.to_json())
        assert restored.shape == grid.shape
        assert restored.normalized == grid.normalized
        np.testing.assert_array_equal(restored.values, grid.values)

    def test_accepts_points_key(self):
        payload = json.dumps({"height": 2, "width": 2, "points": [0, 1, 2, 3]})
        grid = Grid.from_json(payload)
        assert grid.values[1, 0] == 2.0
        assert not grid.normalized

    def test_rejects_mismatched_value_count(self):
        payload = json.dumps({"height": 2, "width": 2, "values": [0, 1, 2]})
        with pytest.raises(ValueError):
            Grid.from_json(payload)
