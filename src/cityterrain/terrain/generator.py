"""Terrain generation orchestration: strategy selection and state population."""

import logging

from ..biome import BiomeDescriptor, get_biome
from ..events import RuntimeHeightmapGenerated
from ..state import OccupancyQuery, TerrainState
from .base import GenerationResult, TerrainGenerator
from .config import TerrainConfig
from .legacy import LegacyGenerator
from .runtime import NumpyHeightmapBackend, RuntimePipelineGenerator

logger = logging.getLogger(__name__)


def select_generator(config: TerrainConfig) -> TerrainGenerator:
    """Pick the generator strategy named by ``config.generator``."""
    if config.generator == "runtime":
        backend = NumpyHeightmapBackend(lod_distances=config.runtime.lod_distances)
        return RuntimePipelineGenerator(backend, chunk_size=config.runtime.chunk_size)
    return LegacyGenerator()


def generate_terrain(
    config: TerrainConfig,
    biome: BiomeDescriptor | None = None,
    generator: TerrainGenerator | None = None,
) -> GenerationResult:
    """Generate complete terrain maps from configuration.

    Args:
        config: Terrain generation configuration.
        biome: Biome descriptor; None selects the default biome.
        generator: Strategy override; chosen from ``config`` when omitted.

    Returns:
        GenerationResult with the three maps.
    """
    if biome is None:
        biome = get_biome(None)
    if generator is None:
        generator = select_generator(config)
    return generator.generate(config, biome)


def apply_result(state: TerrainState, result: GenerationResult) -> None:
    """Replace the state's maps with a generation result and notify listeners.

    Args:
        state: Terrain state to populate.
        result: Output of a generator.

    Raises:
        ValueError: If the result dimensions don't match the state.
    """
    state.replace_maps(
        result.elevation, result.water, result.features, biome_id=result.biome.id
    )
    if result.heightmap is not None:
        state.events.publish(
            RuntimeHeightmapGenerated(
                heightmap=result.heightmap,
                size=result.heightmap_size,
                sea_level=result.sea_level,
            )
        )


def generate_world(
    state: TerrainState,
    config: TerrainConfig,
    biome: BiomeDescriptor | None = None,
    generator: TerrainGenerator | None = None,
) -> GenerationResult:
    """Generate terrain sized to ``state`` and load it into the state.

    The state's dimensions win over ``config.width``/``config.height``.

    Args:
        state: Terrain state to populate.
        config: Terrain generation configuration.
        biome: Biome descriptor; None selects the default biome.
        generator: Strategy override.

    Returns:
        The GenerationResult applied to the state.
    """
    if (config.width, config.height) != (state.width, state.height):
        config = config.model_copy(update={"width": state.width, "height": state.height})

    result = generate_terrain(config, biome, generator)
    apply_result(state, result)
    logger.info(
        f"World terrain ready: {state.width}x{state.height}, biome '{state.biome_id}'"
    )
    return result


def create_terrain(
    config: TerrainConfig,
    biome: BiomeDescriptor | None = None,
    occupancy: OccupancyQuery | None = None,
) -> TerrainState:
    """Build a fresh TerrainState and populate it from configuration.

    Args:
        config: Terrain generation configuration.
        biome: Biome descriptor; None selects the default biome.
        occupancy: Building-occupancy query to install.

    Returns:
        Populated TerrainState.
    """
    state = TerrainState(width=config.width, height=config.height)
    state.set_occupancy(occupancy)
    generate_world(state, config, biome)
    return state
