"""
py-mapgen: procedural heightmaps colored into water, land and ice.
"""

from .core import (
    Grid,
    GeneratorKind,
    Palette,
    generate,
    colorize,
    rasterize,
    encode_png,
)

__version__ = "0.1.0"

__all__ = ['Grid', 'GeneratorKind', 'Palette', 'generate', 'colorize', 'rasterize',
           'encode_png', '__version__']
