"""Terrain cell value types and elevation bounds."""

from enum import IntEnum

MIN_ELEVATION = -3
MAX_ELEVATION = 5

# Water may only sit at or below this elevation
WATER_MAX_ELEVATION = -2

# Beaches exist only at this elevation
BEACH_ELEVATION = -1


class WaterType(IntEnum):
    """Water body held by a cell. Values are the persisted integers."""

    NONE = 0
    POND = 1
    LAKE = 2
    RIVER = 3


class FeatureType(IntEnum):
    """Natural feature on a cell. Values are the persisted integers."""

    NONE = 0
    TREE_SPARSE = 1
    TREE_DENSE = 2
    ROCK_SMALL = 3
    ROCK_LARGE = 4
    BEACH = 5


def clamp_elevation(value: int) -> int:
    """Clamp an elevation into the valid range."""
    return max(MIN_ELEVATION, min(MAX_ELEVATION, int(value)))
