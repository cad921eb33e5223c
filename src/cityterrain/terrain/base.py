"""Shared generation result and the generator strategy interface."""

from typing import Protocol

import numpy as np
from numpy.typing import NDArray

from ..biome import BiomeDescriptor
from .config import TerrainConfig


def round_half_away(values: NDArray[np.floating]) -> NDArray[np.float64]:
    """Round to the nearest integer, ties away from zero (unlike ``np.rint``)."""
    values = np.asarray(values, dtype=np.float64)
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


class GenerationResult:
    """Result of terrain generation: the three maps plus pipeline extras."""

    def __init__(
        self,
        elevation: NDArray[np.int8],
        water: NDArray[np.uint8],
        features: NDArray[np.uint8],
        config: TerrainConfig,
        biome: BiomeDescriptor,
        heightmap: NDArray[np.float32] | None = None,
        heightmap_size: int = 0,
        sea_level: float = 0.0,
    ):
        self.elevation = elevation
        self.water = water
        self.features = features
        self.config = config
        self.biome = biome
        self.heightmap = heightmap
        self.heightmap_size = heightmap_size
        self.sea_level = sea_level


class TerrainGenerator(Protocol):
    """A strategy that synthesizes complete terrain maps."""

    def generate(self, config: TerrainConfig, biome: BiomeDescriptor) -> GenerationResult:
        ...
