"""Procedural terrain generation package.

Two strategies populate a TerrainState: the legacy noise + biome overlay
generator (river, coastal, mesa) and the heightmap pipeline that rasterizes an
eroded float heightmap produced by a pluggable backend.
"""

from .base import GenerationResult, TerrainGenerator
from .config import TerrainConfig
from .generator import (
    apply_result,
    create_terrain,
    generate_terrain,
    generate_world,
    select_generator,
)
from .legacy import LegacyGenerator
from .runtime import (
    ChunkLOD,
    HeightmapBackend,
    HeightmapProfile,
    NumpyHeightmapBackend,
    RuntimePipelineGenerator,
)

__all__ = [
    "ChunkLOD",
    "GenerationResult",
    "HeightmapBackend",
    "HeightmapProfile",
    "LegacyGenerator",
    "NumpyHeightmapBackend",
    "RuntimePipelineGenerator",
    "TerrainConfig",
    "TerrainGenerator",
    "apply_result",
    "create_terrain",
    "generate_terrain",
    "generate_world",
    "select_generator",
]
