"""Tests for feature scatter."""

import numpy as np

from cityterrain.terrain.objects import place_rocks, place_trees, scatter_features
from cityterrain.terrain_types import FeatureType, WaterType


def banded_elevation() -> np.ndarray:
    """40x90 elevation with ten-column bands from -3 to 5."""
    return np.repeat(np.arange(-3, 6, dtype=np.int16), 10)[np.newaxis, :].repeat(40, axis=0)


class TestPlaceTrees:
    """Tests for tree placement."""

    def test_trees_only_on_low_ground(self) -> None:
        """Trees land only on elevation 0-2."""
        elevation = banded_elevation()
        water = np.zeros_like(elevation, dtype=np.uint8)
        features = np.zeros_like(elevation, dtype=np.uint8)

        placed = place_trees(elevation, water, features, np.random.default_rng(0), 1.0)

        trees = np.isin(features, [FeatureType.TREE_SPARSE, FeatureType.TREE_DENSE])
        assert placed == 40 * 30
        assert np.all((elevation[trees] >= 0) & (elevation[trees] <= 2))

    def test_sparse_dense_split(self) -> None:
        """Roughly 70% of trees are sparse."""
        elevation = np.zeros((100, 100), dtype=np.int16)
        water = np.zeros((100, 100), dtype=np.uint8)
        features = np.zeros((100, 100), dtype=np.uint8)

        place_trees(elevation, water, features, np.random.default_rng(1), 1.0)

        sparse = np.mean(features == FeatureType.TREE_SPARSE)
        assert 0.65 < sparse < 0.75

    def test_zero_density(self) -> None:
        """Zero density places nothing."""
        elevation = np.zeros((10, 10), dtype=np.int16)
        features = np.zeros((10, 10), dtype=np.uint8)
        placed = place_trees(
            elevation, np.zeros((10, 10), dtype=np.uint8), features, np.random.default_rng(0), 0.0
        )
        assert placed == 0
        assert not features.any()


class TestPlaceRocks:
    """Tests for rock placement."""

    def test_rocks_only_on_high_ground(self) -> None:
        """Rocks land only on elevation 2-4."""
        elevation = banded_elevation()
        water = np.zeros_like(elevation, dtype=np.uint8)
        features = np.zeros_like(elevation, dtype=np.uint8)

        place_rocks(elevation, water, features, np.random.default_rng(0), 1.0)

        rocks = np.isin(features, [FeatureType.ROCK_SMALL, FeatureType.ROCK_LARGE])
        assert np.all((elevation[rocks] >= 2) & (elevation[rocks] <= 4))
        assert np.sum(rocks) == 40 * 30


class TestScatterFeatures:
    """Tests for the combined scatter pass."""

    def test_water_and_existing_features_skipped(self) -> None:
        """Water cells and cells with a feature are never touched."""
        elevation = np.zeros((20, 20), dtype=np.int16)
        water = np.zeros((20, 20), dtype=np.uint8)
        water[:, :5] = WaterType.POND
        features = np.zeros((20, 20), dtype=np.uint8)
        features[10, 10] = FeatureType.BEACH

        scatter_features(elevation, water, features, seed=3, tree_density=1.0, rock_density=1.0)

        assert not features[:, :5].any()
        assert features[10, 10] == FeatureType.BEACH

    def test_trees_block_rocks(self) -> None:
        """At elevation 2, cells taken by trees can't also get rocks."""
        elevation = np.full((10, 10), 2, dtype=np.int16)
        water = np.zeros((10, 10), dtype=np.uint8)
        features = np.zeros((10, 10), dtype=np.uint8)

        trees, rocks = scatter_features(
            elevation, water, features, seed=3, tree_density=1.0, rock_density=1.0
        )

        assert trees == 100
        assert rocks == 0

    def test_deterministic(self) -> None:
        """Same seed gives the same scatter."""
        elevation = banded_elevation()
        water = np.zeros_like(elevation, dtype=np.uint8)
        a = np.zeros_like(elevation, dtype=np.uint8)
        b = np.zeros_like(elevation, dtype=np.uint8)
        scatter_features(elevation, water, a, seed=11, tree_density=0.3, rock_density=0.3)
        scatter_features(elevation, water, b, seed=11, tree_density=0.3, rock_density=0.3)
        np.testing.assert_array_equal(a, b)
