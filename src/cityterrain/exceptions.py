"""Custom exceptions for the terrain subsystem."""


class TerrainError(Exception):
    """Base exception for terrain errors."""

    pass


class HeightmapSizeError(TerrainError):
    """Raised when a heightmap backend returns fewer samples than requested."""

    pass
