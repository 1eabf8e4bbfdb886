"""
Map rendering pipeline.

Chains generation, normalization, the optional rotate and shift
transforms, coloring and rasterization. Request models carry the
validated parameters.
"""

import time
from typing import Optional, Tuple, Union

import numpy as np
import structlog
from pydantic import BaseModel, Field, field_validator, model_validator

from .config import settings
from .core.colormap import colorize
from .core.generator_base import GeneratorKind, parse_kind
from .core.generators import generate
from .core.grid import Grid
from .core.palette import ICE_COLORS, LAND_COLORS, WATER_COLORS, Palette
from .core.render import encode_png, rasterize

logger = structlog.get_logger()


class MapRequest(BaseModel):
    """Parameters for generating a heightmap."""

    seed: Union[int, str] = Field(default=0, description="Map seed")
    generator: GeneratorKind = Field(
        default=parse_kind(settings.default_generator),
        description="Heightmap generator",
    )
    height: int = Field(default=settings.default_height, ge=1, le=settings.max_map_size)
    width: int = Field(default=settings.default_width, ge=1, le=settings.max_map_size)
    iterations: int = Field(default=settings.default_iterations, ge=0)
    wrap: bool = Field(default=False, description="Wrap circle bumps around the edges")
    roughness: float = Field(default=settings.fractal_roughness, gt=0)
    pct_water: int = Field(
        default=settings.great_circle_pct_water,
        ge=0,
        le=100,
        description="Water share for the great-circle generator",
    )

    @model_validator(mode="before")
    @classmethod
    def _expand_wrap_alias(cls, data):
        # "impact-wrap" names the circle generator with wrapping on
        if isinstance(data, dict):
            generator = data.get("generator")
            if isinstance(generator, str) and generator.strip().lower() == "impact-wrap":
                data = {**data, "wrap": True}
        return data

    @field_validator("generator", mode="before")
    @classmethod
    def _resolve_generator(cls, value):
        return parse_kind(value)


class RenderOptions(BaseModel):
    """Parameters for coloring and rasterizing a grid."""

    pct_water: int = Field(default=settings.pct_water, ge=0, le=100)
    pct_ice: int = Field(default=settings.pct_ice, ge=0, le=100)
    shift_x: int = Field(default=0, ge=-100, le=100, description="Horizontal shift in percent")
    shift_y: int = Field(default=0, ge=-100, le=100, description="Vertical shift in percent")
    rotate: bool = Field(default=False, description="Transpose the map before coloring")
    flood_fill_depth: int = Field(default=settings.flood_fill_depth, ge=0)

    @model_validator(mode="after")
    def _check_percentages(self):
        if self.pct_water + self.pct_ice > 100:
            raise ValueError("pct_water + pct_ice must not exceed 100")
        return self


def generate_map(request: MapRequest) -> Grid:
    """Generate and normalize a grid for a request."""
    grid = generate(
        request.generator,
        request.height,
        request.width,
        request.iterations,
        seed=request.seed,
        wrap=request.wrap,
        roughness=request.roughness,
        pct_water=request.pct_water,
    )
    grid.normalize()
    return grid


def render_map(
    grid: Grid, options: Optional[RenderOptions] = None
) -> Tuple[np.ndarray, Palette]:
    """
    Color and rasterize a normalized grid.

    The grid itself is left untouched; rotation and shifts apply to a copy.

    Returns:
        (pixels, palette) where pixels is a (height, width, 4) uint8 array
    """
    options = options or RenderOptions()
    start = time.time()

    working = grid.copy()
    if options.rotate:
        working.rotate()
    working.shift_x_pct(options.shift_x)
    working.shift_y_pct(options.shift_y)

    palette = Palette.assemble(WATER_COLORS, LAND_COLORS, ICE_COLORS)
    indices = colorize(
        working,
        options.pct_water,
        options.pct_ice,
        palette.water,
        palette.land,
        palette.ice,
        flood_fill_depth=options.flood_fill_depth,
    )
    pixels = rasterize(indices, palette)

    logger.info(
        "Map rendered",
        height=working.height,
        width=working.width,
        pct_water=options.pct_water,
        pct_ice=options.pct_ice,
        elapsed_seconds=round(time.time() - start, 3),
    )
    return pixels, palette


def render_png(grid: Grid, options: Optional[RenderOptions] = None) -> bytes:
    pixels, _ = render_map(grid, options)
    return encode_png(pixels)
