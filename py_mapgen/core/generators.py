"""
Generator registry and dispatch.
"""

import time
from typing import Dict, Optional, Type

import structlog

from .circle_fracture import CircleFractureGenerator
from .diamond_square import DEFAULT_ROUGHNESS, DiamondSquareGenerator
from .generator_base import (
    FractureGenerator,
    GeneratorKind,
    parse_kind,
    validate_dimensions,
    validate_iterations,
)
from .great_circle import DEFAULT_PCT_WATER, GreatCircleGenerator
from .grid import Grid
from ..utils.random import Seed

logger = structlog.get_logger()

GENERATORS: Dict[GeneratorKind, Type[FractureGenerator]] = {
    GeneratorKind.CIRCLE: CircleFractureGenerator,
    GeneratorKind.DIAMOND_SQUARE: DiamondSquareGenerator,
    GeneratorKind.GREAT_CIRCLE: GreatCircleGenerator,
}


def create_generator(
    kind,
    height: int,
    width: int,
    seed: Optional[Seed] = None,
    wrap: bool = False,
    roughness: float = DEFAULT_ROUGHNESS,
    pct_water: int = DEFAULT_PCT_WATER,
) -> FractureGenerator:
    """Instantiate the generator for ``kind`` with its own PRNG."""
    resolved = parse_kind(kind)
    generator_class = GENERATORS[resolved]

    if resolved is GeneratorKind.CIRCLE:
        if isinstance(kind, str) and kind.strip().lower() == "impact-wrap":
            wrap = True
        return generator_class(height, width, seed=seed, wrap=wrap)
    if resolved is GeneratorKind.DIAMOND_SQUARE:
        return generator_class(height, width, seed=seed, roughness=roughness)
    return generator_class(height, width, seed=seed, pct_water=pct_water)


def generate(
    kind,
    height: int,
    width: int,
    iterations: int,
    seed: Optional[Seed] = None,
    wrap: bool = False,
    **options,
) -> Grid:
    """
    Generate an unnormalized heightmap.

    Args:
        kind: GeneratorKind, its string value, or a legacy alias
            ("impact", "impact-wrap", "fractal", "olsson")
        height: Grid rows
        width: Grid columns
        iterations: Number of fracture iterations (ignored by diamond-square)
        seed: Map seed; the same seed and parameters give the same grid
        wrap: Wrap circle bumps around the edges (circle generator only)
        **options: ``roughness`` for diamond-square, ``pct_water`` for
            great-circle

    Returns:
        The generated Grid

    Raises:
        ConfigurationError: for an unknown kind or invalid parameters
    """
    resolved = parse_kind(kind)
    validate_dimensions(height, width)
    validate_iterations(iterations)

    generator = create_generator(kind, height, width, seed=seed, wrap=wrap, **options)

    logger.info(
        "Generating heightmap",
        generator=resolved.value,
        height=height,
        width=width,
        iterations=iterations,
        seed=seed,
    )
    start = time.time()
    grid = generator.generate(iterations)
    elapsed = time.time() - start

    logger.info(
        "Heightmap generated",
        generator=resolved.value,
        elapsed_seconds=round(elapsed, 3),
        min_z=grid.min_z,
        max_z=grid.max_z,
    )
    return grid
