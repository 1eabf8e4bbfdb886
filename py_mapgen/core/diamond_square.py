"""
Diamond-square midpoint displacement.

Produces self-similar terrain on a (2^n+1) x (2^n+1) grid. The four
corners share one value and each value computed on the first row or
column is copied to the opposite edge, so the result tiles seamlessly.
"""

from typing import List, Optional

import structlog

from .alea_prng import AleaPRNG
from .errors import ConfigurationError
from .generator_base import FractureGenerator, GeneratorKind
from .grid import Grid
from ..utils.random import Seed

logger = structlog.get_logger()

# ratio = 2 ** -roughness; 0.001 keeps almost all detail at fine scales
DEFAULT_ROUGHNESS = 0.001


def is_power_of_two_plus_one(n: int) -> bool:
    m = n - 1
    return m >= 2 and (m & (m - 1)) == 0


class DiamondSquareGenerator(FractureGenerator):
    """Fills a square grid using the diamond-square algorithm."""

    kind = GeneratorKind.DIAMOND_SQUARE

    def __init__(
        self,
        height: int,
        width: int,
        seed: Optional[Seed] = None,
        roughness: float = DEFAULT_ROUGHNESS,
        prng: Optional[AleaPRNG] = None,
    ):
        super().__init__(height, width, seed=seed, prng=prng)
        if height != width or not is_power_of_two_plus_one(height):
            raise ConfigurationError(
                f"diamond-square needs a (2^n+1) square grid, got {height}x{width}"
            )
        if roughness <= 0:
            raise ConfigurationError(f"roughness must be positive, got {roughness}")

        self.size = height
        # subsize is the dimension in connected line segments
        self.subsize = height - 1
        self.ratio = 2.0 ** -roughness
        self._fa: List[float] = [0.0] * (self.size * self.size)

    def generate(self, iterations: int = 0) -> Grid:
        """
        Fill the grid.

        The grid size alone determines the number of passes, so
        ``iterations`` is accepted for interface compatibility and ignored.
        """
        self._fill(height_scale=1.0)
        return Grid(self.size, self.size, self._fa)

    def _index(self, i: int, j: int) -> int:
        return i * self.size + j

    def _wrap(self, k: int) -> int:
        if k < 0:
            return k + self.subsize
        if k > self.subsize:
            return k - self.subsize
        return k

    def _avg_square_vals(self, i: int, j: int, stride: int) -> float:
        """Average the four diagonal corners of the square centred on (i, j)."""
        fa, size = self._fa, self.size
        return (
            fa[(i - stride) * size + j - stride]
            + fa[(i - stride) * size + j + stride]
            + fa[(i + stride) * size + j - stride]
            + fa[(i + stride) * size + j + stride]
        ) * 0.25

    def _avg_diamond_vals(self, i: int, j: int, stride: int) -> float:
        """
        Average the four axis neighbours of the diamond centred on (i, j).

        Neighbours past an edge wrap to the opposite side, which is what
        keeps the tile seamless.
        """
        fa, size = self._fa, self.size
        return (
            fa[self._wrap(i - stride) * size + j]
            + fa[self._wrap(i + stride) * size + j]
            + fa[i * size + self._wrap(j - stride)]
            + fa[i * size + self._wrap(j + stride)]
        ) * 0.25

    def _fill(self, height_scale: float) -> None:
        fa, size, subsize = self._fa, self.size, self.subsize

        ratio = self.ratio
        scale = height_scale * ratio

        # all four corners share one value so tiles meet at the corners
        corner = self._uniform(-1.0, 1.0)
        for i, j in ((0, 0), (subsize, 0), (subsize, subsize), (0, subsize)):
            fa[self._index(i, j)] = corner

        stride = subsize // 2
        while stride != 0:
            # square step: centres at odd multiples of stride
            for i in range(stride, subsize, 2 * stride):
                for j in range(stride, subsize, 2 * stride):
                    fa[i * size + j] = (
                        scale * self._uniform(-0.5, 0.5)
                        + self._avg_square_vals(i, j, stride)
                    )

            # diamond step: odd rows start at stride, even rows at 0
            oddline = False
            for i in range(0, subsize, stride):
                oddline = not oddline
                start = stride if oddline else 0
                for j in range(start, subsize, 2 * stride):
                    value = scale * self._uniform(-0.5, 0.5) + self._avg_diamond_vals(
                        i, j, stride
                    )
                    fa[i * size + j] = value

                    # copy edge values to the opposite side
                    if i == 0:
                        fa[subsize * size + j] = value
                    if j == 0:
                        fa[i * size + subsize] = value

            scale *= ratio
            stride //= 2

        logger.debug("Diamond-square fill complete", size=size, final_scale=scale)
