"""Shared finishing passes: default water fill and beach placement."""

import numpy as np
from numpy.typing import NDArray

from ..terrain_types import (
    BEACH_ELEVATION,
    MIN_ELEVATION,
    WATER_MAX_ELEVATION,
    FeatureType,
    WaterType,
)


def fill_default_water(
    elevation: NDArray[np.integer],
    water: NDArray[np.uint8],
) -> int:
    """Flood every dry basin: -3 becomes a Lake, -2 a Pond.

    Cells that already hold water keep it. Modifies ``water`` in place.

    Returns:
        Number of cells filled.
    """
    dry = water == WaterType.NONE
    lakes = dry & (elevation <= MIN_ELEVATION)
    ponds = dry & (elevation == WATER_MAX_ELEVATION)
    water[lakes] = WaterType.LAKE
    water[ponds] = WaterType.POND
    return int(np.sum(lakes) + np.sum(ponds))


def water_adjacency(water: NDArray[np.uint8]) -> NDArray[np.bool_]:
    """Mask of cells with at least one 4-neighbor holding water."""
    wet = water != WaterType.NONE
    adjacent = np.zeros_like(wet)
    adjacent[1:, :] |= wet[:-1, :]
    adjacent[:-1, :] |= wet[1:, :]
    adjacent[:, 1:] |= wet[:, :-1]
    adjacent[:, :-1] |= wet[:, 1:]
    return adjacent


def place_beaches(
    elevation: NDArray[np.integer],
    water: NDArray[np.uint8],
    features: NDArray[np.uint8],
) -> int:
    """Turn dry shoreline cells at elevation -1 or 0 into beach.

    Beach cells are forced to elevation -1. Modifies ``elevation`` and
    ``features`` in place.

    Returns:
        Number of beach cells placed.
    """
    shore = water_adjacency(water) & (water == WaterType.NONE)
    beach = shore & ((elevation == BEACH_ELEVATION) | (elevation == 0))
    elevation[beach] = BEACH_ELEVATION
    features[beach] = FeatureType.BEACH
    return int(np.sum(beach))
