"""
Tests for the render pipeline and request models.
"""

import numpy as np
import pytest
from pydantic import ValidationError

from py_mapgen.core.generator_base import GeneratorKind
from py_mapgen.core.generators import generate
from py_mapgen.core.colormap import colorize
from py_mapgen.core.palette import Palette
from py_mapgen.core.render import rasterize
from py_mapgen.pipeline import MapRequest, RenderOptions, generate_map, render_map, render_png


class TestMapRequest:
    """Test request validation."""

    def test_defaults(self):
        request = MapRequest()
        assert request.generator is GeneratorKind.CIRCLE
        assert request.height == 640
        assert request.width == 1280

    def test_alias_resolved(self):
        request = MapRequest(generator="olsson", height=20, width=40)
        assert request.generator is GeneratorKind.GREAT_CIRCLE

    def test_impact_wrap_sets_wrap(self):
        request = MapRequest(generator="impact-wrap", height=10, width=10)
        assert request.generator is GeneratorKind.CIRCLE
        assert request.wrap

    @pytest.mark.parametrize(
        "fields",
        [
            {"generator": "perlin"},
            {"height": 0},
            {"width": 20000},
            {"iterations": -1},
            {"roughness": 0},
        ],
    )
    def test_invalid(self, fields):
        with pytest.raises(ValidationError):
            MapRequest(**fields)


class TestRenderOptions:
    """Test render option validation."""

    def test_defaults(self):
        options = RenderOptions()
        assert (options.pct_water, options.pct_ice) == (33, 8)
        assert options.flood_fill_depth == 12

    def test_percentages_must_fit(self):
        with pytest.raises(ValidationError):
            RenderOptions(pct_water=80, pct_ice=30)

    def test_shift_bounds(self):
        with pytest.raises(ValidationError):
            RenderOptions(shift_x=150)


class TestPipeline:
    """Test end-to-end generation and rendering."""

    @pytest.fixture
    def request_64(self):
        return MapRequest(seed=42, generator="circle", height=64, width=64, iterations=500)

    def test_generate_map_normalizes(self, request_64):
        grid = generate_map(request_64)
        assert grid.normalized
        assert grid.values.min() == 0.0
        assert grid.values.max() == 1.0

    def test_reference_render_is_deterministic(self, request_64):
        options = RenderOptions(pct_water=33, pct_ice=8)
        first, _ = render_map(generate_map(request_64), options)
        second, _ = render_map(generate_map(request_64), options)
        assert first.shape == (64, 64, 4)
        assert first.tobytes() == second.tobytes()

    def test_matches_manual_chain(self, request_64):
        grid = generate("circle", 64, 64, 500, seed=42, wrap=False)
        grid.normalize()
        palette = Palette.assemble()
        expected = rasterize(colorize(grid, 33, 8), palette)

        pixels, _ = render_map(generate_map(request_64), RenderOptions(pct_water=33, pct_ice=8))
        np.testing.assert_array_equal(pixels, expected)

    def test_render_leaves_grid_untouched(self, request_64):
        grid = generate_map(request_64)
        before = grid.values.copy()
        render_map(grid, RenderOptions(rotate=True, shift_x=25, shift_y=10))
        np.testing.assert_array_equal(grid.values, before)

    def test_rotate_swaps_output_dimensions(self):
        grid = generate_map(MapRequest(seed=1, height=16, width=32, iterations=50))
        pixels, _ = render_map(grid, RenderOptions(rotate=True))
        assert pixels.shape == (32, 16, 4)

    def test_render_png(self, request_64):
        data = render_png(generate_map(request_64))
        assert data.startswith(b"\x89PNG")

    def test_other_generators(self):
        for request in (
            MapRequest(seed=3, generator="diamond-square", height=33, width=33),
            MapRequest(seed=3, generator="great-circle", height=20, width=40, iterations=100),
        ):
            pixels, palette = render_map(generate_map(request))
            assert pixels.shape == (request.height, request.width, 4)
            assert len(palette) == 49
