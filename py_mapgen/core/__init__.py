"""
Core map generation functionality.
"""

from .errors import (
    MapgenError,
    ConfigurationError,
    PreconditionError,
    NotNormalizedError,
    PaletteIndexError,
    GridNotFoundError,
)
from .alea_prng import AleaPRNG
from .grid import Grid, GridDocument
from .generator_base import GeneratorKind, FractureGenerator, parse_kind
from .circle_fracture import CircleFractureGenerator
from .diamond_square import DiamondSquareGenerator
from .great_circle import GreatCircleGenerator
from .generators import GENERATORS, create_generator, generate
from .palette import Palette, WATER_COLORS, LAND_COLORS, ICE_COLORS
from .colormap import SlotAllocation, allocate_slots, build_color_table, colorize
from .polar_ice import PolarIce
from .render import rasterize, to_image, encode_png

__all__ = ['MapgenError', 'ConfigurationError', 'PreconditionError', 'NotNormalizedError',
           'PaletteIndexError', 'GridNotFoundError', 'AleaPRNG', 'Grid', 'GridDocument',
           'GeneratorKind', 'FractureGenerator', 'parse_kind', 'CircleFractureGenerator',
           'DiamondSquareGenerator', 'GreatCircleGenerator', 'GENERATORS', 'create_generator',
           'generate', 'Palette', 'WATER_COLORS', 'LAND_COLORS', 'ICE_COLORS',
           'SlotAllocation', 'allocate_slots', 'build_color_table', 'colorize', 'PolarIce',
           'rasterize', 'to_image', 'encode_png']
