"""
Circle-bump fracture generator.

Each iteration raises or lowers every cell inside a random circle by one.
Radii are biased toward small circles (r = floor(u^2 * diagonal / 2)), so
the map gets a few continent-sized bumps and many small ones.
"""

from typing import Optional, Tuple

import numpy as np
import structlog

from .alea_prng import AleaPRNG
from .errors import ConfigurationError
from .generator_base import FractureGenerator, GeneratorKind, validate_iterations
from .grid import Grid
from ..utils.random import Seed

logger = structlog.get_logger()


class CircleFractureGenerator(FractureGenerator):
    """
    Superimposes random circular bumps on a flat grid.

    Two boundary policies are supported, fixed at construction:

    - wrap: coordinates outside the grid are reduced modulo the dimension,
      so a circle near an edge continues on the opposite side (a torus).
    - clamp: the scanned rectangle is clipped to the grid, so circles near
      an edge are partial.
    """

    kind = GeneratorKind.CIRCLE

    def __init__(
        self,
        height: int,
        width: int,
        seed: Optional[Seed] = None,
        wrap: bool = False,
        prng: Optional[AleaPRNG] = None,
    ):
        super().__init__(height, width, seed=seed, prng=prng)
        self.wrap = wrap
        self.grid = Grid(height, width)

        # u < 1 always, so radius >= 1 needs diagonal / 2 > 1
        if self.grid.diagonal <= 2:
            raise ConfigurationError(
                f"grid {height}x{width} is too small for circle fractures"
            )

    def generate(self, iterations: int) -> Grid:
        """
        Apply the given number of fractures and return the grid.

        Args:
            iterations: Number of circles to add

        Returns:
            The (unnormalized) grid
        """
        validate_iterations(iterations)
        for _ in range(iterations):
            # decide whether this fracture raises or lowers
            bump = 1.0 if self._rand(2) == 0 else -1.0
            self.fracture(bump)

        self.grid.min_z, self.grid.max_z = self.grid.min_max()
        return self.grid

    def _random_radius(self) -> int:
        radius = 0
        while radius < 1:
            n = self._random()
            radius = int(n * n * self.grid.diagonal / 2)
        return radius

    def circle_cells(self, cx: int, cy: int, radius: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Return the (ys, xs) of every cell strictly inside the circle.

        Coordinates are already reduced into the grid in wrap mode. In wrap
        mode a circle wider than the grid may list a cell more than once;
        each listing receives the bump.
        """
        height, width = self.grid.height, self.grid.width

        # limit the x and y values that we look at
        miny, maxy = cy - radius - 1, cy + radius + 1
        minx, maxx = cx - radius - 1, cx + radius + 1
        if not self.wrap:
            miny, maxy = max(miny, 0), min(maxy, height)
            minx, maxx = max(minx, 0), min(maxx, width)

        ys = np.arange(miny, maxy)
        xs = np.arange(minx, maxx)
        dy = (ys - cy)[:, np.newaxis]
        dx = (xs - cx)[np.newaxis, :]
        rows, cols = np.nonzero(dx * dx + dy * dy < radius * radius)

        py, px = ys[rows], xs[cols]
        if self.wrap:
            py, px = py % height, px % width
        return py, px

    def fracture(self, bump: float) -> None:
        """Add ``bump`` to every cell inside one random circle."""
        radius = self._random_radius()
        cx, cy = self._rand(self.grid.width), self._rand(self.grid.height)

        py, px = self.circle_cells(cx, cy, radius)
        # add.at accumulates repeated indices
        np.add.at(self.grid.values, (py, px), bump)
