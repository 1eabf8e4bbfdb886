"""
Polar ice caps.

Grows ice from the top and bottom rows of a color-index map by flood
filling water and land regions, up to a per-pole cell budget.
"""

from typing import List, Tuple

import numpy as np
import structlog

from .palette import Palette

logger = structlog.get_logger()

DEFAULT_MAX_DEPTH = 12


class PolarIce:
    """
    Depth-bounded flood fill that turns polar cells into ice.

    Each fill replaces connected cells of the seed color. Horizontal
    neighbours wrap around the map; vertical ones stop at the poles.
    """

    def __init__(self, palette: Palette, max_depth: int = DEFAULT_MAX_DEPTH):
        self.palette = palette
        self.max_depth = max_depth

    def apply(self, indices: np.ndarray, pct_ice: int) -> int:
        """
        Freeze both poles in place.

        Args:
            indices: (height, width) color-index array
            pct_ice: Percent of the map to cover in ice, split between poles

        Returns:
            Number of cells changed
        """
        if pct_ice <= 0:
            return 0

        height, width = indices.shape
        budget = int(pct_ice / 2 * (height * width) / 100)

        north = self._freeze_pole(indices, range(height), budget)
        south = self._freeze_pole(indices, range(height - 1, -1, -1), budget)

        logger.debug("Polar ice applied", budget=budget, north=north, south=south)
        return north + south

    def _freeze_pole(self, indices: np.ndarray, rows, budget: int) -> int:
        ice_start = self.palette.ice_start
        width = indices.shape[1]
        filled = 0

        for y in rows:
            if filled >= budget:
                break
            for x in range(width):
                if filled >= budget:
                    break
                if indices[y, x] < ice_start:
                    filled += self._fill(indices, x, y, budget - filled)
        return filled

    def _fill(self, indices: np.ndarray, x: int, y: int, budget: int) -> int:
        """Flood fill from (x, y) changing at most ``budget`` cells."""
        height, width = indices.shape
        target = int(indices[y, x])
        replacement = self.palette.ice_index_for(target)

        changed = 0
        stack: List[Tuple[int, int, int]] = [(x, y, 0)]

        while stack and changed < budget:
            cx, cy, depth = stack.pop()
            if indices[cy, cx] != target:
                continue

            indices[cy, cx] = replacement
            changed += 1

            if depth >= self.max_depth:
                continue

            next_depth = depth + 1
            if cy - 1 >= 0:
                stack.append((cx, cy - 1, next_depth))
            if cy + 1 < height:
                stack.append((cx, cy + 1, next_depth))
            stack.append(((cx - 1) % width, cy, next_depth))
            stack.append(((cx + 1) % width, cy, next_depth))

        return changed
