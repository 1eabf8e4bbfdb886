"""
Common machinery for the fracture generators.

Every generator repeatedly perturbs cells of a Grid by a small signed
delta, driven by its own seeded PRNG.
"""

from enum import Enum
from typing import Optional

from .alea_prng import AleaPRNG
from .errors import ConfigurationError
from .grid import Grid
from ..utils.random import Seed, make_prng


class GeneratorKind(str, Enum):
    """Available heightmap generators."""

    CIRCLE = "circle"
    DIAMOND_SQUARE = "diamond-square"
    GREAT_CIRCLE = "great-circle"


# Names the generators were known by in earlier releases.
KIND_ALIASES = {
    "impact": GeneratorKind.CIRCLE,
    "impact-wrap": GeneratorKind.CIRCLE,
    "fractal": GeneratorKind.DIAMOND_SQUARE,
    "olsson": GeneratorKind.GREAT_CIRCLE,
}


def parse_kind(kind) -> GeneratorKind:
    """Resolve a generator kind from an enum member, value, or alias."""
    if isinstance(kind, GeneratorKind):
        return kind
    name = str(kind).strip().lower()
    if name in KIND_ALIASES:
        return KIND_ALIASES[name]
    try:
        return GeneratorKind(name)
    except ValueError:
        known = sorted([k.value for k in GeneratorKind] + list(KIND_ALIASES))
        raise ConfigurationError(
            f"unknown generator {kind!r}; expected one of {', '.join(known)}"
        ) from None


def validate_dimensions(height: int, width: int) -> None:
    if height <= 0 or width <= 0:
        raise ConfigurationError(
            f"grid dimensions must be positive, got {height}x{width}"
        )


def validate_iterations(iterations: int) -> None:
    if iterations < 0:
        raise ConfigurationError(f"iterations must not be negative, got {iterations}")


class FractureGenerator:
    """
    Base class for heightmap generators.

    Subclasses validate their own parameters in ``__init__`` (before any
    random number is drawn) and implement ``generate``.
    """

    kind: GeneratorKind

    def __init__(
        self,
        height: int,
        width: int,
        seed: Optional[Seed] = None,
        prng: Optional[AleaPRNG] = None,
    ):
        """
        Initialize the generator.

        Args:
            height: Grid rows
            width: Grid columns
            seed: Seed for a fresh PRNG (ignored when prng is given)
            prng: Explicit PRNG instance to draw from
        """
        validate_dimensions(height, width)
        self.height = height
        self.width = width
        self.seed = seed
        self._prng = prng if prng is not None else make_prng(seed)

    def _random(self) -> float:
        """Get next random value in [0, 1)."""
        return self._prng.random()

    def _rand(self, n: int) -> int:
        """Get a random integer in [0, n)."""
        return self._prng.randint(n)

    def _uniform(self, lo: float, hi: float) -> float:
        return self._prng.uniform(lo, hi)

    def generate(self, iterations: int) -> Grid:
        raise NotImplementedError
