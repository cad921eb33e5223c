"""Tests for generator selection and state population."""

import numpy as np

from cityterrain.biome import get_biome
from cityterrain.events import RuntimeHeightmapGenerated, TerrainReplaced
from cityterrain.state import TerrainState
from cityterrain.terrain.config import TerrainConfig
from cityterrain.terrain.generator import (
    create_terrain,
    generate_terrain,
    generate_world,
    select_generator,
)
from cityterrain.terrain.legacy import LegacyGenerator
from cityterrain.terrain.runtime import RuntimePipelineGenerator
from cityterrain.types import Position


class TestSelectGenerator:
    """Tests for strategy selection."""

    def test_legacy_by_default(self) -> None:
        """The default config selects the noise + overlay generator."""
        assert isinstance(select_generator(TerrainConfig()), LegacyGenerator)

    def test_runtime(self) -> None:
        """generator="runtime" selects the heightmap pipeline."""
        generator = select_generator(TerrainConfig(generator="runtime"))
        assert isinstance(generator, RuntimePipelineGenerator)

    def test_runtime_lod_distances_forwarded(self) -> None:
        """Configured LOD distances reach the bundled backend."""
        config = TerrainConfig.model_validate(
            {"generator": "runtime", "runtime": {"lod_distances": [10.0, 20.0]}}
        )
        generator = select_generator(config)
        assert generator.backend.lod_distances == (10.0, 20.0)

    def test_runtime_chunk_size_forwarded(self) -> None:
        """The configured chunk size becomes the generator's default."""
        config = TerrainConfig.model_validate(
            {"generator": "runtime", "runtime": {"chunk_size": 16}}
        )
        assert select_generator(config).chunk_size == 16


class TestGenerateWorld:
    """Tests for loading generated terrain into a state."""

    def test_publishes_replaced(self, small_config: TerrainConfig) -> None:
        """Generation is announced once as a wholesale replacement."""
        state = TerrainState(width=64, height=64)
        events: list = []
        state.events.subscribe(TerrainReplaced, events.append)
        generate_world(state, small_config, get_biome("mesa"))
        assert events == [TerrainReplaced(width=64, height=64, biome_id="mesa")]
        assert state.biome_id == "mesa"

    def test_state_matches_result(self, small_config: TerrainConfig) -> None:
        """The state holds exactly the generated maps."""
        state = TerrainState(width=64, height=64)
        result = generate_world(state, small_config)
        np.testing.assert_array_equal(state.elevation_array(), result.elevation)
        np.testing.assert_array_equal(state.water_array(), result.water)
        np.testing.assert_array_equal(state.feature_array(), result.features)

    def test_state_dimensions_win(self, small_config: TerrainConfig) -> None:
        """The state's size overrides the configured size."""
        state = TerrainState(width=20, height=12)
        result = generate_world(state, small_config)
        assert result.elevation.shape == (12, 20)
        assert (result.config.width, result.config.height) == (20, 12)

    def test_runtime_heightmap_published(self) -> None:
        """The pipeline generator shares its heightmap with listeners."""
        config = TerrainConfig(seed=3, width=32, height=32, generator="runtime")
        state = TerrainState(width=32, height=32)
        heightmaps: list[RuntimeHeightmapGenerated] = []
        state.events.subscribe(RuntimeHeightmapGenerated, heightmaps.append)

        generate_world(state, config)

        assert len(heightmaps) == 1
        assert heightmaps[0].size == 32
        assert heightmaps[0].heightmap.shape == (32 * 32,)
        assert heightmaps[0].sea_level == get_biome(None).sea_level

    def test_legacy_publishes_no_heightmap(self, small_config: TerrainConfig) -> None:
        """The legacy generator has no heightmap to share."""
        state = TerrainState(width=64, height=64)
        heightmaps: list = []
        state.events.subscribe(RuntimeHeightmapGenerated, heightmaps.append)
        generate_world(state, small_config)
        assert heightmaps == []


class TestCreateTerrain:
    """Tests for one-call terrain construction."""

    def test_matches_generate_terrain(self, small_config: TerrainConfig) -> None:
        """create_terrain loads the same maps generate_terrain returns."""
        state = create_terrain(small_config, get_biome("river"))
        result = generate_terrain(small_config, get_biome("river"))
        np.testing.assert_array_equal(state.elevation_array(), result.elevation)
        assert state.biome_id == "river"

    def test_occupancy_installed(self, small_config: TerrainConfig) -> None:
        """The occupancy query is wired into the new state."""
        state = create_terrain(small_config, occupancy=lambda p: p == Position(x=1, y=1))
        assert state.is_occupied(Position(x=1, y=1))
        assert not state.is_occupied(Position(x=2, y=1))
