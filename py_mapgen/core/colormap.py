"""
Quantile color mapping.

Assigns palette indices to scaled elevations so that the requested share
of the map is water and the requested share is ice, regardless of how the
elevations happen to be distributed. Histogram buckets are handed out to
water, land and ice in elevation order; each range then stretches its
sub-palette across the buckets it received.
"""

from typing import NamedTuple, Sequence

import numpy as np
import structlog

from .errors import ConfigurationError, NotNormalizedError
from .grid import HISTOGRAM_BUCKETS, Grid
from .palette import ICE_COLORS, LAND_COLORS, WATER_COLORS, Palette
from .polar_ice import DEFAULT_MAX_DEPTH, PolarIce

logger = structlog.get_logger()


class SlotAllocation(NamedTuple):
    """Number of histogram buckets given to each range, lowest first."""

    water: int
    land: int
    ice: int

    @property
    def total(self) -> int:
        return self.water + self.land + self.ice


def validate_percentages(pct_water: int, pct_ice: int) -> None:
    if not 0 <= pct_water <= 100:
        raise ConfigurationError(f"pct_water must be within 0..100, got {pct_water}")
    if not 0 <= pct_ice <= 100:
        raise ConfigurationError(f"pct_ice must be within 0..100, got {pct_ice}")
    if pct_water + pct_ice > 100:
        raise ConfigurationError(
            f"pct_water + pct_ice must not exceed 100, got {pct_water + pct_ice}"
        )


def allocate_slots(histogram: Sequence[int], pct_water: int, pct_ice: int) -> SlotAllocation:
    """
    Walk the histogram from the lowest bucket and split it into ranges.

    Water takes buckets until its cell budget is passed, land takes the
    next buckets up to ``(100 - pct_ice)`` percent of what is left, and ice
    takes every remaining populated bucket.
    """
    validate_percentages(pct_water, pct_ice)

    hist = [int(h) for h in histogram]
    buckets = len(hist)
    total = sum(hist)

    water_budget = min(max(pct_water * total // 100, 0), total)
    remaining = total - water_budget
    land_budget = min(max((100 - pct_ice) * remaining // 100, 0), remaining)

    z = 0
    filled = 0

    water = 0
    if water_budget > 0:
        while z < buckets and filled < total and filled <= water_budget:
            filled += hist[z]
            water += 1
            z += 1

    land = 0
    if land_budget > 0:
        threshold = water_budget + land_budget
        while z < buckets and filled < total and filled <= threshold:
            filled += hist[z]
            land += 1
            z += 1

    ice = 0
    while z < buckets and filled < total:
        filled += hist[z]
        ice += 1
        z += 1

    allocation = SlotAllocation(water, land, ice)
    logger.debug(
        "Histogram slots allocated",
        total_cells=total,
        water_budget=water_budget,
        land_budget=land_budget,
        slots=allocation._asdict(),
    )
    return allocation


def build_color_table(allocation: SlotAllocation, palette: Palette) -> np.ndarray:
    """
    Build the 256-entry scaled-elevation to palette-index table.

    Slot i of a range with n slots maps to entry ``i * len(sub) // n`` of
    that range's sub-palette. Buckets past the last slot repeat the last
    assigned index.
    """
    table = np.zeros(HISTOGRAM_BUCKETS, dtype=np.uint8)
    ranges = (
        (allocation.water, palette.water, 0),
        (allocation.land, palette.land, palette.land_start),
        (allocation.ice, palette.ice, palette.ice_start),
    )

    z = 0
    last = 0
    for slots, sub, start in ranges:
        for i in range(slots):
            last = start + i * len(sub) // slots
            table[z] = last
            z += 1
    table[z:] = last
    return table


def colorize(
    grid: Grid,
    pct_water: int,
    pct_ice: int,
    water: Sequence = WATER_COLORS,
    land: Sequence = LAND_COLORS,
    ice: Sequence = ICE_COLORS,
    flood_fill_depth: int = DEFAULT_MAX_DEPTH,
) -> np.ndarray:
    """
    Map a normalized grid to palette indices.

    Args:
        grid: Normalized grid
        pct_water: Percent of cells that should be water
        pct_ice: Percent of cells that should be ice
        water: Water sub-palette
        land: Land sub-palette
        ice: Ice sub-palette
        flood_fill_depth: Maximum depth of each polar ice fill

    Returns:
        (height, width) uint8 array of indices into the assembled palette

    Raises:
        ConfigurationError: for invalid percentages or palettes
        NotNormalizedError: if the grid has not been normalized
    """
    validate_percentages(pct_water, pct_ice)
    palette = Palette.assemble(water, land, ice)

    if not grid.normalized:
        raise NotNormalizedError("map not normalized: call normalize() before colorize()")

    scaled = grid.scaled_elevations()
    histogram = np.bincount(scaled.ravel(), minlength=HISTOGRAM_BUCKETS)

    allocation = allocate_slots(histogram, pct_water, pct_ice)
    table = build_color_table(allocation, palette)
    indices = table[scaled]

    changed = PolarIce(palette, max_depth=flood_fill_depth).apply(indices, pct_ice)
    logger.debug("Grid colorized", pct_water=pct_water, pct_ice=pct_ice, ice_cells=changed)
    return indices
