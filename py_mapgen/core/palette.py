"""
Map color palettes.

A palette is the concatenation of three sub-palettes: water, land and ice.
Indices into the assembled palette are what the color mapper writes and
the rasterizer reads.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError

RGBA = Tuple[int, int, int, int]

MAX_PALETTE_SIZE = 256


def _opaque(colors: Sequence[Tuple[int, int, int]]) -> List[RGBA]:
    return [(r, g, b, 255) for r, g, b in colors]


# Deep ocean to shallow coast
WATER_COLORS: List[RGBA] = _opaque([
    (0, 0, 0),
    (0, 0, 68),
    (0, 17, 102),
    (0, 51, 136),
    (0, 85, 170),
    (0, 119, 187),
    (0, 153, 221),
    (0, 204, 255),
    (34, 221, 255),
    (68, 238, 255),
    (102, 255, 255),
    (119, 255, 255),
    (136, 255, 255),
    (153, 255, 255),
    (170, 255, 255),
    (187, 255, 255),
])

# Lowland green to mountain brown
LAND_COLORS: List[RGBA] = _opaque([
    (0, 68, 0),
    (34, 102, 0),
    (34, 136, 0),
    (119, 170, 0),
    (187, 221, 0),
    (255, 187, 34),
    (238, 170, 34),
    (221, 136, 34),
    (204, 136, 34),
    (187, 102, 34),
    (170, 85, 34),
    (153, 85, 34),
    (136, 68, 34),
    (119, 51, 34),
    (85, 51, 17),
    (68, 34, 0),
])

# White pack ice down to grey glacier, 255..175 in steps of 5
ICE_COLORS: List[RGBA] = _opaque([(v, v, v) for v in range(255, 170, -5)])


@dataclass
class Palette:
    """Assembled water + land + ice palette."""

    water: List[RGBA]
    land: List[RGBA]
    ice: List[RGBA]
    colors: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        for name, sub in (("water", self.water), ("land", self.land), ("ice", self.ice)):
            if len(sub) == 0:
                raise ConfigurationError(f"{name} palette must not be empty")

        total = len(self.water) + len(self.land) + len(self.ice)
        if total > MAX_PALETTE_SIZE:
            raise ConfigurationError(
                f"palette has {total} entries; at most {MAX_PALETTE_SIZE} are allowed"
            )

        self.water = [_rgba(c) for c in self.water]
        self.land = [_rgba(c) for c in self.land]
        self.ice = [_rgba(c) for c in self.ice]
        self.colors = np.array(self.water + self.land + self.ice, dtype=np.uint8)

    @classmethod
    def assemble(
        cls,
        water: Sequence = WATER_COLORS,
        land: Sequence = LAND_COLORS,
        ice: Sequence = ICE_COLORS,
    ) -> "Palette":
        return cls(list(water), list(land), list(ice))

    @property
    def land_start(self) -> int:
        return len(self.water)

    @property
    def ice_start(self) -> int:
        return len(self.water) + len(self.land)

    def __len__(self) -> int:
        return len(self.colors)

    def ice_index_for(self, index: int) -> int:
        """
        Return the ice color that replaces a water or land index.

        Water becomes the first ice entry. Land entry k keeps its relative
        height within the ice range, skipping the first entry so frozen
        land stays distinguishable from frozen sea.
        """
        if index < self.land_start:
            return self.ice_start
        k = index - self.land_start
        n_ice, n_land = len(self.ice), len(self.land)
        return self.ice_start + min(n_ice - 1, 1 + k * (n_ice - 1) // n_land)


def _rgba(color) -> RGBA:
    """Accept RGB or RGBA tuples; RGB gets full alpha."""
    values = tuple(int(c) for c in color)
    if len(values) == 3:
        values = values + (255,)
    if len(values) != 4 or any(c < 0 or c > 255 for c in values):
        raise ConfigurationError(f"invalid color {color!r}; expected RGB or RGBA in 0..255")
    return values
