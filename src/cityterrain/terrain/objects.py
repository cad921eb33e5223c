"""Feature scatter: trees on low ground, rocks on high ground."""

import numpy as np
from numpy.typing import NDArray

from ..terrain_types import FeatureType, WaterType

# Share of placements that get the lighter variant
_SPARSE_SHARE = 0.7


def _free_cells(
    elevation: NDArray[np.integer],
    water: NDArray[np.uint8],
    features: NDArray[np.uint8],
    low: int,
    high: int,
) -> NDArray[np.bool_]:
    """Cells in [low, high] elevation with no water and no feature."""
    return (
        (elevation >= low)
        & (elevation <= high)
        & (water == WaterType.NONE)
        & (features == FeatureType.NONE)
    )


def place_trees(
    elevation: NDArray[np.integer],
    water: NDArray[np.uint8],
    features: NDArray[np.uint8],
    rng: np.random.Generator,
    density: float,
) -> int:
    """Place trees on free cells at elevation 0–2.

    Each eligible cell becomes a tree with probability ``density``; placed
    trees split 70/30 between sparse and dense stands.

    Args:
        elevation: Elevation array.
        water: Water array.
        features: Feature array, modified in place.
        rng: Random number generator.
        density: Tree probability per cell.

    Returns:
        Number of trees placed.
    """
    draws = rng.random(elevation.shape)
    kinds = rng.random(elevation.shape)

    placed = _free_cells(elevation, water, features, 0, 2) & (draws < density)
    features[placed & (kinds < _SPARSE_SHARE)] = FeatureType.TREE_SPARSE
    features[placed & (kinds >= _SPARSE_SHARE)] = FeatureType.TREE_DENSE
    return int(np.sum(placed))


def place_rocks(
    elevation: NDArray[np.integer],
    water: NDArray[np.uint8],
    features: NDArray[np.uint8],
    rng: np.random.Generator,
    density: float,
) -> int:
    """Place rocks on free cells at elevation 2–4.

    Trees placed earlier block rocks. Placed rocks split 70/30 between small
    and large.

    Args:
        elevation: Elevation array.
        water: Water array.
        features: Feature array, modified in place.
        rng: Random number generator.
        density: Rock probability per cell.

    Returns:
        Number of rocks placed.
    """
    draws = rng.random(elevation.shape)
    kinds = rng.random(elevation.shape)

    placed = _free_cells(elevation, water, features, 2, 4) & (draws < density)
    features[placed & (kinds < _SPARSE_SHARE)] = FeatureType.ROCK_SMALL
    features[placed & (kinds >= _SPARSE_SHARE)] = FeatureType.ROCK_LARGE
    return int(np.sum(placed))


def scatter_features(
    elevation: NDArray[np.integer],
    water: NDArray[np.uint8],
    features: NDArray[np.uint8],
    seed: int,
    tree_density: float,
    rock_density: float,
) -> tuple[int, int]:
    """Place all natural features from a dedicated random stream.

    Args:
        elevation: Elevation array.
        water: Water array.
        features: Feature array, modified in place.
        seed: Seed for the scatter stream.
        tree_density: Tree probability per eligible cell.
        rock_density: Rock probability per eligible cell.

    Returns:
        Tuple of (trees placed, rocks placed).
    """
    rng = np.random.default_rng(seed)

    # Trees first (they block rocks on shared elevation 2)
    trees = place_trees(elevation, water, features, rng, tree_density)
    rocks = place_rocks(elevation, water, features, rng, rock_density)
    return trees, rocks
