"""
Dense elevation grid.

Values are stored row-major as ``values[y, x]`` with shape
``(height, width)``. Every generator, transform, color mapper and the
rasterizer use this orientation; mixing it with ``(x, y)`` silently
transposes the output.
"""

import math
from typing import List, Optional, Tuple

import numpy as np
import structlog
from pydantic import AliasChoices, BaseModel, Field, model_validator

from .errors import ConfigurationError, NotNormalizedError

logger = structlog.get_logger()

# Ranges narrower than this are treated as a perfectly flat map.
EPSILON = 1e-4

HISTOGRAM_BUCKETS = 256


class GridDocument(BaseModel):
    """Serialized form of a Grid used for persistence."""

    height: int = Field(gt=0, description="Number of rows")
    width: int = Field(gt=0, description="Number of columns")
    normalized: bool = Field(default=False, description="Values already rescaled to 0..1")
    values: List[float] = Field(
        validation_alias=AliasChoices("values", "points"),
        description="Row-major elevation values",
    )

    @model_validator(mode="after")
    def _check_value_count(self):
        if len(self.values) != self.height * self.width:
            raise ValueError(
                f"expected {self.height * self.width} values, got {len(self.values)}"
            )
        return self


class Grid:
    """
    A height*width field of float elevations.

    Grids are created by a generator, mutated in place by normalize,
    shift and rotate, and only read by the color mapper and rasterizer.
    """

    def __init__(
        self,
        height: int,
        width: int,
        values: Optional[np.ndarray] = None,
        normalized: bool = False,
    ):
        """
        Create a grid.

        Args:
            height: Number of rows (must be positive)
            width: Number of columns (must be positive)
            values: Optional initial values; anything with height*width
                elements, flat or 2-D. Copied, never aliased.
            normalized: Whether the values are already in 0..1
        """
        if height <= 0 or width <= 0:
            raise ConfigurationError(
                f"grid dimensions must be positive, got {height}x{width}"
            )

        self.height = int(height)
        self.width = int(width)
        self.diagonal = math.sqrt(self.height * self.height + self.width * self.width)

        if values is None:
            self.values = np.zeros((self.height, self.width), dtype=np.float64)
        else:
            data = np.asarray(values, dtype=np.float64)
            if data.size != self.height * self.width:
                raise ConfigurationError(
                    f"expected {self.height * self.width} values, got {data.size}"
                )
            self.values = data.reshape(self.height, self.width).copy()

        self.normalized = normalized
        self.min_z, self.max_z = (0.0, 1.0) if normalized else self.min_max()

    @classmethod
    def from_array(cls, values: np.ndarray, normalized: bool = False) -> "Grid":
        """Build a grid from a 2-D (height, width) array."""
        data = np.asarray(values, dtype=np.float64)
        if data.ndim != 2:
            raise ConfigurationError(f"expected a 2-D array, got {data.ndim} dimensions")
        return cls(data.shape[0], data.shape[1], data, normalized=normalized)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    def copy(self) -> "Grid":
        grid = Grid(self.height, self.width, self.values, normalized=self.normalized)
        grid.min_z, grid.max_z = self.min_z, self.max_z
        return grid

    def min_max(self) -> Tuple[float, float]:
        """Return the minimum and maximum values in the grid."""
        return float(self.values.min()), float(self.values.max())

    def normalize(self) -> None:
        """
        Rescale values to 0..1 in place.

        A perfectly flat grid (range below EPSILON) becomes all 1s, not
        0.5. Calling this twice gives the same result as calling it once.
        """
        min_value, max_value = self.min_max()
        delta = max_value - min_value

        if delta < EPSILON:
            self.values.fill(1.0)
        else:
            self.values -= min_value
            self.values /= delta

        self.min_z, self.max_z = 0.0, 1.0
        self.normalized = True
        logger.debug("Grid normalized", min=min_value, max=max_value, flat=delta < EPSILON)

    def rotate(self) -> None:
        """Transpose the grid in place: (x, y) moves to (y, x)."""
        self.values = np.ascontiguousarray(self.values.T)
        self.height, self.width = self.width, self.height

    def shift_x(self, dx: int) -> None:
        """Cyclically move column c to (c + dx) mod width."""
        dx %= self.width
        if dx == 0:
            return
        self.values = np.roll(self.values, dx, axis=1)

    def shift_y(self, dy: int) -> None:
        """Cyclically move row r to (r + dy) mod height."""
        dy %= self.height
        if dy == 0:
            return
        self.values = np.roll(self.values, dy, axis=0)

    def shift_x_pct(self, pct: int) -> None:
        """Shift columns by a percentage of the width (positive moves left)."""
        if pct != 0:
            self.shift_x(-int(self.width * pct / 100))

    def shift_y_pct(self, pct: int) -> None:
        """Shift rows by a percentage of the height (positive moves down)."""
        if pct != 0:
            self.shift_y(int(self.height * pct / 100))

    def scaled_elevations(self) -> np.ndarray:
        """
        Scale every value to an integer 0..255 via floor(v * 255).

        Raises:
            NotNormalizedError: if any scaled value is outside 0..255
        """
        if not np.all(np.isfinite(self.values)):
            raise NotNormalizedError("map not normalized: grid holds non-finite values")

        scaled = np.floor(self.values * 255).astype(np.int64)
        lo, hi = int(scaled.min()), int(scaled.max())
        if lo < 0 or hi > 255:
            raise NotNormalizedError(
                f"map not normalized: scaled elevations span {lo}..{hi}"
            )
        return scaled

    def histogram(self) -> np.ndarray:
        """Count cells per scaled elevation; returns 256 integer buckets."""
        return np.bincount(
            self.scaled_elevations().ravel(), minlength=HISTOGRAM_BUCKETS
        )

    def to_document(self) -> GridDocument:
        return GridDocument(
            height=self.height,
            width=self.width,
            normalized=self.normalized,
            values=self.values.ravel().tolist(),
        )

    @classmethod
    def from_document(cls, document: GridDocument) -> "Grid":
        return cls(
            document.height,
            document.width,
            np.array(document.values, dtype=np.float64),
            normalized=document.normalized,
        )

    def to_json(self) -> str:
        return self.to_document().model_dump_json()

    @classmethod
    def from_json(cls, data) -> "Grid":
        """Load a grid from JSON text or bytes."""
        return cls.from_document(GridDocument.model_validate_json(data))

    def __repr__(self) -> str:
        return (
            f"Grid(height={self.height}, width={self.width}, "
            f"normalized={self.normalized})"
        )
