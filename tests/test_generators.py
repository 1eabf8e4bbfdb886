"""
Tests for the heightmap generators.
"""

import numpy as np
import pytest

from py_mapgen.core.circle_fracture import CircleFractureGenerator
from py_mapgen.core.diamond_square import DiamondSquareGenerator, is_power_of_two_plus_one
from py_mapgen.core.errors import ConfigurationError
from py_mapgen.core.generator_base import GeneratorKind, parse_kind
from py_mapgen.core.generators import create_generator, generate
from py_mapgen.core.great_circle import GreatCircleGenerator


class TestCircleFracture:
    """Test the circle-bump generator."""

    def test_deterministic_for_seed(self):
        a = generate("circle", 32, 48, 200, seed=42)
        b = generate("circle", 32, 48, 200, seed=42)
        np.testing.assert_array_equal(a.values, b.values)

    def test_seeds_differ(self):
        a = generate("circle", 32, 48, 200, seed=1)
        b = generate("circle", 32, 48, 200, seed=2)
        assert not np.array_equal(a.values, b.values)

    def test_produces_relief(self):
        grid = generate(GeneratorKind.CIRCLE, 40, 40, 300, seed="relief")
        assert grid.values.max() > grid.values.min()
        assert (grid.min_z, grid.max_z) == grid.min_max()
        # every bump is +-1, so values stay integral
        np.testing.assert_array_equal(grid.values, np.round(grid.values))

    def test_zero_iterations_gives_flat_grid(self):
        grid = generate("circle", 10, 10, 0, seed=3)
        assert np.all(grid.values == 0)

    def test_wrap_cells_in_bounds(self):
        generator = CircleFractureGenerator(20, 30, seed=5, wrap=True)
        py, px = generator.circle_cells(cx=1, cy=19, radius=8)
        assert len(py) > 0
        assert py.min() >= 0 and py.max() < 20
        assert px.min() >= 0 and px.max() < 30

    def test_wrap_reaches_opposite_edge(self):
        generator = CircleFractureGenerator(20, 30, seed=5, wrap=True)
        py, px = generator.circle_cells(cx=0, cy=10, radius=4)
        assert 29 in set(px.tolist())

    def test_clamp_clips_to_grid(self):
        generator = CircleFractureGenerator(20, 30, seed=5, wrap=False)
        py, px = generator.circle_cells(cx=0, cy=0, radius=5)
        assert py.min() >= 0 and px.min() >= 0
        assert 29 not in set(px.tolist())

    def test_strict_inside_test(self):
        generator = CircleFractureGenerator(20, 20, seed=5)
        py, px = generator.circle_cells(cx=10, cy=10, radius=3)
        cells = set(zip(py.tolist(), px.tolist()))
        assert (10, 12) in cells
        # distance exactly 3 is outside
        assert (10, 13) not in cells
        assert (13, 10) not in cells

    def test_wrap_mode_runs(self):
        grid = generate("circle", 24, 24, 200, seed=9, wrap=True)
        assert grid.values.shape == (24, 24)
        assert grid.values.max() > grid.values.min()

    def test_tiny_grid_rejected(self):
        with pytest.raises(ConfigurationError):
            CircleFractureGenerator(1, 1, seed=1)


class TestDiamondSquare:
    """Test the diamond-square generator."""

    @pytest.mark.parametrize("n,expected", [(3, True), (5, True), (33, True), (2, False), (4, False), (1, False)])
    def test_power_of_two_plus_one(self, n, expected):
        assert is_power_of_two_plus_one(n) is expected

    def test_corners_equal(self):
        grid = generate("diamond-square", 33, 33, 0, seed=11)
        v = grid.values
        assert v[0, 0] == v[0, 32] == v[32, 0] == v[32, 32]

    def test_edges_mirrored(self):
        grid = generate("fractal", 17, 17, 0, seed="edges")
        v = grid.values
        np.testing.assert_array_equal(v[0, :], v[16, :])
        np.testing.assert_array_equal(v[:, 0], v[:, 16])

    def test_deterministic(self):
        a = generate("diamond-square", 17, 17, 0, seed=4)
        b = generate("diamond-square", 17, 17, 0, seed=4)
        np.testing.assert_array_equal(a.values, b.values)

    def test_has_variation(self):
        grid = generate("diamond-square", 33, 33, 0, seed=4)
        assert grid.values.std() > 0

    @pytest.mark.parametrize("height,width", [(16, 16), (17, 33), (10, 10), (2, 2)])
    def test_rejects_bad_sizes(self, height, width):
        with pytest.raises(ConfigurationError):
            DiamondSquareGenerator(height, width, seed=1)

    def test_smallest_grid_is_displaced(self):
        grid = generate("diamond-square", 3, 3, 0, seed=2)
        assert grid.values[1, 1] != grid.values[0, 0]

    def test_rejects_non_positive_roughness(self):
        with pytest.raises(ConfigurationError):
            DiamondSquareGenerator(9, 9, seed=1, roughness=0)


@pytest.fixture(scope="module")
def great_circle_grid():
    """A small great-circle map shared by the band tests."""
    return generate("great-circle", 40, 80, 200, seed=21)


class TestGreatCircle:
    """Test the great-circle generator."""

    @pytest.fixture
    def grid(self, great_circle_grid):
        return great_circle_grid

    def test_reconstruct_mirrors_and_integrates(self):
        """East-half crossings mirror the west half, then columns are summed."""
        generator = GreatCircleGenerator(10, 20, seed=13)
        height, half = generator.height, generator.width // 2

        deltas = np.zeros((height, generator.width), dtype=np.int64)
        for _ in range(5):
            generator._cut(deltas)
        assert np.any(deltas[:, :half])
        assert not np.any(deltas[:, half:])
        west = deltas[:, :half].copy()

        elevations = generator._reconstruct(deltas)

        for i in range(1, height):
            np.testing.assert_array_equal(deltas[height - i, half:], west[i])
        # row 0 has no mirror partner
        assert not np.any(deltas[0, half:])
        np.testing.assert_array_equal(deltas[:, :half], west)
        np.testing.assert_array_equal(elevations, np.cumsum(deltas, axis=0))

    def test_band_range(self, grid):
        assert grid.values.min() >= 1
        assert grid.values.max() <= 31
        np.testing.assert_array_equal(grid.values, np.round(grid.values))

    def test_water_fraction_reaches_target(self, grid):
        # every bucket up to the one that passes 65% lies below sea level
        water = np.count_nonzero(grid.values <= 15) / grid.values.size
        assert 0.65 <= water < 1.0

    def test_default_size(self):
        generator = GreatCircleGenerator(seed=1)
        assert (generator.height, generator.width) == (160, 320)

    def test_sine_table_is_per_instance(self):
        a = GreatCircleGenerator(10, 20, seed=1)
        b = GreatCircleGenerator(10, 40, seed=1)
        assert len(a.sin_table) == 20
        assert len(b.sin_table) == 40

    def test_deterministic(self):
        a = generate("olsson", 20, 40, 50, seed=8)
        b = generate("olsson", 20, 40, 50, seed=8)
        np.testing.assert_array_equal(a.values, b.values)

    @pytest.mark.parametrize("height,width", [(10, 21), (10, 0), (1, 20)])
    def test_rejects_bad_sizes(self, height, width):
        with pytest.raises(ConfigurationError):
            GreatCircleGenerator(height, width, seed=1)


class TestDispatch:
    """Test generator selection and validation."""

    @pytest.mark.parametrize(
        "name,kind",
        [
            ("circle", GeneratorKind.CIRCLE),
            ("impact", GeneratorKind.CIRCLE),
            ("Impact-Wrap", GeneratorKind.CIRCLE),
            ("fractal", GeneratorKind.DIAMOND_SQUARE),
            ("olsson", GeneratorKind.GREAT_CIRCLE),
            (GeneratorKind.GREAT_CIRCLE, GeneratorKind.GREAT_CIRCLE),
        ],
    )
    def test_parse_kind(self, name, kind):
        assert parse_kind(name) is kind

    def test_unknown_kind(self):
        with pytest.raises(ConfigurationError):
            generate("perlin", 10, 10, 10, seed=1)

    def test_impact_wrap_alias_enables_wrap(self):
        generator = create_generator("impact-wrap", 10, 10, seed=1)
        assert isinstance(generator, CircleFractureGenerator)
        assert generator.wrap

    @pytest.mark.parametrize("height,width,iterations", [(0, 10, 1), (10, -1, 1), (10, 10, -1)])
    def test_invalid_parameters(self, height, width, iterations):
        with pytest.raises(ConfigurationError):
            generate("circle", height, width, iterations, seed=1)
