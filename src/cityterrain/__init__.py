"""City-builder terrain core."""

from .biome import BIOME_PRESETS, BiomeDescriptor, get_biome
from .buildability import WATER_INFRASTRUCTURE, BuildabilityResult, is_buildable
from .events import (
    EventBus,
    RuntimeHeightmapGenerated,
    TerrainChanged,
    TerrainEvent,
    TerrainReplaced,
)
from .exceptions import HeightmapSizeError, TerrainError
from .persistence import (
    deserialize_terrain,
    load_terrain,
    save_terrain,
    serialize_terrain,
)
from .state import TerrainState
from .terrain_types import (
    BEACH_ELEVATION,
    MAX_ELEVATION,
    MIN_ELEVATION,
    WATER_MAX_ELEVATION,
    FeatureType,
    WaterType,
)
from .types import NEIGHBOR_DELTAS, Position

__all__ = [
    # Types
    "Position",
    "NEIGHBOR_DELTAS",
    "WaterType",
    "FeatureType",
    "MIN_ELEVATION",
    "MAX_ELEVATION",
    "WATER_MAX_ELEVATION",
    "BEACH_ELEVATION",
    # State
    "TerrainState",
    # Biomes
    "BiomeDescriptor",
    "BIOME_PRESETS",
    "get_biome",
    # Events
    "EventBus",
    "TerrainEvent",
    "TerrainChanged",
    "TerrainReplaced",
    "RuntimeHeightmapGenerated",
    # Buildability
    "BuildabilityResult",
    "WATER_INFRASTRUCTURE",
    "is_buildable",
    # Persistence
    "serialize_terrain",
    "deserialize_terrain",
    "save_terrain",
    "load_terrain",
    # Exceptions
    "TerrainError",
    "HeightmapSizeError",
]
