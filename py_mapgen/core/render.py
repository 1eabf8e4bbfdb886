"""
Rasterization of color-index maps into RGBA pixels and PNG images.
"""

import io

import numpy as np
import structlog
from PIL import Image

from .errors import PaletteIndexError
from .palette import Palette

logger = structlog.get_logger()


def rasterize(color_index: np.ndarray, palette: Palette) -> np.ndarray:
    """
    Convert palette indices to RGBA pixels.

    Args:
        color_index: (height, width) array of palette indices
        palette: Palette the indices refer to

    Returns:
        (height, width, 4) uint8 array

    Raises:
        PaletteIndexError: if any index is outside the palette
    """
    indices = np.asarray(color_index)
    if indices.ndim != 2:
        raise ValueError(f"expected a 2-D color index, got {indices.ndim} dimensions")

    if indices.size:
        lo, hi = int(indices.min()), int(indices.max())
        if lo < 0 or hi >= len(palette):
            logger.error(
                "Color index outside palette",
                min_index=lo,
                max_index=hi,
                palette_size=len(palette),
            )
            raise PaletteIndexError(
                f"color index range {lo}..{hi} outside palette of {len(palette)} colors"
            )

    return palette.colors[indices.astype(np.intp)]


def to_image(pixels: np.ndarray) -> Image.Image:
    """Wrap an RGBA pixel array in a PIL image."""
    return Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))


def encode_png(pixels: np.ndarray) -> bytes:
    """Encode an RGBA pixel array as PNG bytes."""
    buffer = io.BytesIO()
    to_image(pixels).save(buffer, format="PNG")
    return buffer.getvalue()
