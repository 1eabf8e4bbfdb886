"""
Great-circle fracture generator.

Treats the grid as an equirectangular projection of a sphere. Each
iteration cuts the sphere along a random great circle and raises one
hemisphere relative to the other. Only the row where the circle crosses
each column is recorded; the full surface is reconstructed afterwards by
a prefix sum down every column.
"""

import math
from typing import Optional

import numpy as np
import structlog

from .alea_prng import AleaPRNG
from .errors import ConfigurationError
from .generator_base import FractureGenerator, GeneratorKind, validate_iterations
from .grid import Grid
from ..utils.random import Seed

logger = structlog.get_logger()

DEFAULT_HEIGHT = 160
DEFAULT_WIDTH = 320
DEFAULT_PCT_WATER = 65

# Elevations are bucketed into this many bands before finding sea level,
# then rescaled to 1..15 (water) and 16..31 (land).
BANDS = 30
MAX_BAND = 31


class GreatCircleGenerator(FractureGenerator):
    """
    Generates a spherical-looking heightmap from great-circle cuts.

    The resulting values are small integers in 1..31 stored as floats; the
    band boundary between 15 and 16 sits at the sea level chosen so that
    roughly ``pct_water`` percent of cells fall below it.
    """

    kind = GeneratorKind.GREAT_CIRCLE

    def __init__(
        self,
        height: int = DEFAULT_HEIGHT,
        width: int = DEFAULT_WIDTH,
        seed: Optional[Seed] = None,
        pct_water: int = DEFAULT_PCT_WATER,
        prng: Optional[AleaPRNG] = None,
    ):
        super().__init__(height, width, seed=seed, prng=prng)
        if width < 2 or width % 2 != 0:
            raise ConfigurationError(f"great-circle width must be even and >= 2, got {width}")
        if height < 2:
            raise ConfigurationError(f"great-circle height must be >= 2, got {height}")
        if not 0 <= pct_water <= 100:
            raise ConfigurationError(f"pct_water must be within 0..100, got {pct_water}")

        self.pct_water = pct_water
        self.sin_table = np.sin(2.0 * math.pi * np.arange(width) / width)

    def generate(self, iterations: int) -> Grid:
        validate_iterations(iterations)

        deltas = np.zeros((self.height, self.width), dtype=np.int64)
        for _ in range(iterations):
            self._cut(deltas)

        elevations = self._reconstruct(deltas)
        bands = self._to_bands(elevations)
        return Grid(self.height, self.width, bands)

    def _cut(self, deltas: np.ndarray) -> None:
        """Record where one random great circle crosses each column of the west half."""
        height, width = self.height, self.width
        raise_half = self._rand(2) == 1
        alpha = (self._random() - 0.5) * math.pi
        beta = (self._random() - 0.5) * math.pi

        tan_b = math.tan(math.acos(math.cos(alpha) * math.cos(beta)))
        xsi = int(width / 2 - (width / math.pi) * beta)

        phi = np.arange(width // 2)
        sines = self.sin_table[(xsi - phi) % width]
        theta = np.trunc((height / math.pi) * np.arctan(sines * tan_b)).astype(np.int64)
        theta += height // 2
        # atan stays inside (-pi/2, pi/2); the clip covers float rounding only
        np.clip(theta, 0, height - 1, out=theta)

        # theta is unique per column, so plain fancy assignment is safe
        deltas[theta, phi] += -1 if raise_half else 1

    def _reconstruct(self, deltas: np.ndarray) -> np.ndarray:
        """
        Mirror the west-half crossings onto the east half and integrate.

        A great circle that crosses column phi at row i crosses column
        phi + width/2 at row height - i. Row 0 has no mirror partner.
        """
        half = self.width // 2
        deltas[1:, half:] = deltas[:0:-1, :half]
        return np.cumsum(deltas, axis=0)

    def _to_bands(self, elevations: np.ndarray) -> np.ndarray:
        cells = elevations.size
        min_z = min(-1, int(elevations.min()))
        max_z = max(1, int(elevations.max()))
        span = max_z - min_z + 1

        buckets = ((elevations - min_z + 1) * BANDS // span + 1).astype(np.int64)
        hist = np.bincount(buckets.ravel(), minlength=BANDS + 2)

        # lowest band where the running count passes the water fraction
        target = self.pct_water * cells / 100
        running = np.cumsum(hist)
        passed = np.nonzero(running > target)[0]
        z = int(passed[0]) if passed.size else len(hist) - 1
        sea = z * span // BANDS + min_z

        below = elevations < sea
        water = np.trunc((elevations - min_z) / max(sea - min_z, 1) * 15) + 1
        land = np.trunc((elevations - sea) / max(max_z - sea, 1) * 15) + 16
        bands = np.where(below, water, land)
        np.clip(bands, 1, MAX_BAND, out=bands)

        logger.debug(
            "Great-circle bands computed",
            min_z=min_z,
            max_z=max_z,
            sea_level=sea,
            water_cells=int(below.sum()),
        )
        return bands.astype(np.float64)
