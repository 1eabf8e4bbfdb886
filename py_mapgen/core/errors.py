"""Exception hierarchy for map generation."""


class MapgenError(Exception):
    """Base class for all map generation errors."""


class ConfigurationError(MapgenError, ValueError):
    """Invalid parameters detected before any computation starts."""


class PreconditionError(MapgenError, RuntimeError):
    """An operation was called out of order (caller misuse of the API)."""


class NotNormalizedError(PreconditionError):
    """The grid must be normalized to 0..1 before this operation."""


class PaletteIndexError(MapgenError, IndexError):
    """A color index fell outside the assembled palette."""


class GridNotFoundError(MapgenError, LookupError):
    """No cached grid exists for the requested seed."""
