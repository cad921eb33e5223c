"""Heightmap pipeline generator.

Heightmap synthesis, erosion and LOD planning are delegated to a
``HeightmapBackend``; this module only rasterizes the float heightmap onto the
integer terrain grid and runs the shared finishing passes. The bundled
``NumpyHeightmapBackend`` is used when no other backend is supplied.
"""

import logging
import math
from dataclasses import dataclass
from typing import Protocol

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, Field

from ..biome import BiomeDescriptor
from ..exceptions import HeightmapSizeError
from ..terrain_types import MAX_ELEVATION, MIN_ELEVATION, WATER_MAX_ELEVATION, WaterType
from .base import GenerationResult, round_half_away
from .config import TerrainConfig
from .noise import fbm_noise, ridged_multifractal
from .objects import scatter_features
from .shoreline import place_beaches

logger = logging.getLogger(__name__)


class HeightmapProfile(BaseModel, frozen=True):
    """Shape parameters handed to a heightmap backend."""

    name: str = "default"
    seed: int = 42
    wavelength_fraction: float = Field(
        default=0.4, description="Base wavelength as a fraction of heightmap size"
    )
    octaves: int = Field(default=5, description="fBm octaves")
    ridged_weight: float = Field(default=0.3, description="Ridged noise contribution")


PROFILES: dict[str, HeightmapProfile] = {
    "default": HeightmapProfile(),
    "flat": HeightmapProfile(name="flat", wavelength_fraction=0.6, octaves=4, ridged_weight=0.1),
    "mountainous": HeightmapProfile(
        name="mountainous", wavelength_fraction=0.3, octaves=6, ridged_weight=0.55
    ),
}


def resolve_profile(name: str, seed: int) -> HeightmapProfile:
    """Look up a named profile (unknown names fall back to default) and seed it."""
    base = PROFILES.get(name, PROFILES["default"])
    return base.model_copy(update={"seed": seed})


@dataclass(frozen=True)
class ChunkLOD:
    """A terrain chunk with the level of detail it should render at."""

    chunk_x: int
    chunk_y: int
    lod: int
    distance: float


class HeightmapBackend(Protocol):
    """Heightmap synthesis, erosion and LOD planning capabilities."""

    def generate(self, size: int, profile: HeightmapProfile) -> NDArray[np.float32]:
        """Return ``size * size`` height samples, row-major."""
        ...

    def erode(
        self, heightmap: NDArray[np.float32], size: int, iterations: int, seed: int
    ) -> None:
        """Erode ``heightmap`` in place."""
        ...

    def compute_visible_chunks(
        self, camera_pos: tuple[float, float], chunk_size: int
    ) -> list[ChunkLOD]:
        """Chunks relevant from ``camera_pos``, nearest first."""
        ...


class NumpyHeightmapBackend:
    """Default backend: fBm + ridged noise, thermal/rain erosion, banded LOD."""

    def __init__(
        self,
        lod_distances: tuple[float, ...] | list[float] = (48.0, 96.0, 160.0),
        talus: float = 0.02,
        rain_rate: float = 0.004,
    ):
        self.lod_distances = tuple(sorted(lod_distances))
        self.talus = talus
        self.rain_rate = rain_rate
        self.size = 0

    def generate(self, size: int, profile: HeightmapProfile) -> NDArray[np.float32]:
        """Blend fBm with ridged noise and normalize to [0, 1].

        Args:
            size: Heightmap edge length.
            profile: Shape parameters.

        Returns:
            Flat float32 array of ``size * size`` samples.
        """
        self.size = size
        wavelength = max(2.0, size * profile.wavelength_fraction)

        base = (fbm_noise(size, size, profile.seed, wavelength, octaves=profile.octaves) + 1.0) / 2.0
        ridged = ridged_multifractal(
            size, size, profile.seed + 100, wavelength * 1.25, octaves=4
        )
        blended = (1.0 - profile.ridged_weight) * base + profile.ridged_weight * ridged

        low, high = float(blended.min()), float(blended.max())
        if high > low:
            blended = (blended - low) / (high - low)
        else:
            blended = np.zeros_like(blended)
        return blended.astype(np.float32).ravel()

    def erode(
        self, heightmap: NDArray[np.float32], size: int, iterations: int, seed: int
    ) -> None:
        """Alternate thermal slumping with rain-driven smoothing, in place.

        Thermal: material above the talus threshold slides to lower
        4-neighbors. Rain: a seeded rainfall field scales how strongly each
        cell relaxes toward its neighborhood mean.

        Args:
            heightmap: Flat array of ``size * size`` samples, modified in place.
            size: Heightmap edge length.
            iterations: Erosion passes.
            seed: Seed for the rainfall fields.
        """
        if iterations <= 0 or size < 2:
            return

        rng = np.random.default_rng(seed)
        height = heightmap[: size * size].reshape(size, size).astype(np.float64)

        for _ in range(iterations):
            padded = np.pad(height, 1, mode="edge")
            neighbors = (
                padded[:-2, 1:-1],
                padded[2:, 1:-1],
                padded[1:-1, :-2],
                padded[1:-1, 2:],
            )

            # Thermal erosion: outflow to lower neighbors, inflow from higher ones
            height_delta = np.zeros_like(height)
            for neighbor in neighbors:
                height_delta -= np.maximum(height - neighbor - self.talus, 0.0) * 0.25
            for axis, shift in ((0, 1), (0, -1), (1, 1), (1, -1)):
                source = np.roll(height, shift, axis=axis)
                excess = np.maximum(source - height - self.talus, 0.0) * 0.25
                # Drop flow that wrapped around the border
                if axis == 0:
                    excess[0 if shift == 1 else -1, :] = 0.0
                else:
                    excess[:, 0 if shift == 1 else -1] = 0.0
                height_delta += excess
            height += 0.5 * height_delta

            # Rain-driven smoothing
            rain = rng.random(height.shape) * self.rain_rate
            padded = np.pad(height, 1, mode="edge")
            mean = (
                padded[:-2, 1:-1] + padded[2:, 1:-1] + padded[1:-1, :-2] + padded[1:-1, 2:]
            ) / 4.0
            height += rain * (mean - height) * 10.0

        heightmap[: size * size] = height.astype(np.float32).ravel()

    def compute_visible_chunks(
        self, camera_pos: tuple[float, float], chunk_size: int
    ) -> list[ChunkLOD]:
        """Chunks within the farthest LOD distance, tagged with their LOD band.

        Args:
            camera_pos: Camera (x, y) in tile coordinates.
            chunk_size: Chunk edge length in tiles.

        Returns:
            ChunkLOD list sorted by distance.
        """
        if self.size <= 0 or chunk_size <= 0 or not self.lod_distances:
            return []

        cam_x, cam_y = camera_pos
        count = (self.size + chunk_size - 1) // chunk_size
        max_distance = self.lod_distances[-1]

        chunks: list[ChunkLOD] = []
        for cy in range(count):
            for cx in range(count):
                center_x = (cx + 0.5) * chunk_size
                center_y = (cy + 0.5) * chunk_size
                distance = math.hypot(center_x - cam_x, center_y - cam_y)
                if distance > max_distance:
                    continue
                lod = next(
                    i for i, limit in enumerate(self.lod_distances) if distance <= limit
                )
                chunks.append(ChunkLOD(chunk_x=cx, chunk_y=cy, lod=lod, distance=distance))

        chunks.sort(key=lambda c: (c.distance, c.chunk_y, c.chunk_x))
        return chunks


def normalize_height(
    heights: NDArray[np.float32], sea_level: float, height_scale: float
) -> NDArray[np.float64]:
    """Map [sea_level, height_scale] linearly onto [0, 1], clamped."""
    span = height_scale - sea_level
    if span <= 0:
        return np.zeros(heights.shape, dtype=np.float64)
    return np.clip((heights.astype(np.float64) - sea_level) / span, 0.0, 1.0)


def rasterize_heightmap(
    heightmap: NDArray[np.float32],
    size: int,
    width: int,
    height: int,
    sea_level: float,
    height_scale: float,
    deep_water_fraction: float = 0.35,
) -> tuple[NDArray[np.int16], NDArray[np.uint8]]:
    """Convert float heights into integer elevation and water maps.

    Samples below sea level become Lake; those deeper than
    ``deep_water_fraction * sea_level`` sit at -3, the rest at -2. Dry samples
    map to ``round(normalize(h) * 5)`` with ties away from zero, clamped to
    [0, 5]. The heightmap is nearest-sampled when its size differs from the
    grid.

    Args:
        heightmap: Flat array with at least ``size * size`` samples.
        size: Heightmap edge length.
        width: Grid width.
        height: Grid height.
        sea_level: Water threshold.
        height_scale: Height mapped to the top elevation.
        deep_water_fraction: Depth share of sea level counted as deep.

    Returns:
        Tuple of (elevation, water) arrays, shape (height, width).
    """
    grid = heightmap[: size * size].reshape(size, size)
    rows = (np.arange(height) * size) // height
    cols = (np.arange(width) * size) // width
    samples = grid[np.ix_(rows, cols)]

    depth = sea_level - samples.astype(np.float64)
    wet = depth > 0
    deep = wet & (depth > deep_water_fraction * sea_level)

    elevation = np.clip(
        round_half_away(normalize_height(samples, sea_level, height_scale) * MAX_ELEVATION),
        0,
        MAX_ELEVATION,
    ).astype(np.int16)
    elevation[wet] = WATER_MAX_ELEVATION
    elevation[deep] = MIN_ELEVATION

    water = np.zeros((height, width), dtype=np.uint8)
    water[wet] = WaterType.LAKE
    return elevation, water


class RuntimePipelineGenerator:
    """Generator delegating heightmap work to a backend and rasterizing it."""

    def __init__(self, backend: HeightmapBackend | None = None, chunk_size: int = 32):
        self.backend: HeightmapBackend = backend if backend is not None else NumpyHeightmapBackend()
        self.chunk_size = chunk_size

    def generate(self, config: TerrainConfig, biome: BiomeDescriptor) -> GenerationResult:
        """Generate terrain through the heightmap pipeline.

        Args:
            config: Terrain generation configuration.
            biome: Biome supplying sea level and height scale.

        Returns:
            GenerationResult carrying the maps and the eroded heightmap.

        Raises:
            HeightmapSizeError: If the backend returns fewer than size² samples.
        """
        runtime = config.runtime
        width, height = config.width, config.height
        size = runtime.heightmap_size or max(width, height)
        profile = resolve_profile(runtime.profile, config.seed)

        logger.info(
            f"Generating runtime terrain {width}x{height} from {size}x{size} "
            f"heightmap, profile '{profile.name}', seed {config.seed}"
        )

        heightmap = np.asarray(self.backend.generate(size, profile), dtype=np.float32).ravel()
        if heightmap.size < size * size:
            raise HeightmapSizeError(
                f"Heightmap backend returned {heightmap.size} samples, "
                f"expected {size * size} for size {size}"
            )
        heightmap = np.ascontiguousarray(heightmap[: size * size])

        self.backend.erode(heightmap, size, runtime.erosion_iterations, config.seed)
        logger.info(f"Eroded heightmap with {runtime.erosion_iterations} iterations")

        elevation, water = rasterize_heightmap(
            heightmap,
            size,
            width,
            height,
            biome.sea_level,
            biome.height_scale,
            runtime.deep_water_fraction,
        )
        features = np.zeros((height, width), dtype=np.uint8)

        beaches = place_beaches(elevation, water, features)
        trees, rocks = scatter_features(
            elevation,
            water,
            features,
            config.seed + config.legacy.feature_seed_offset,
            runtime.tree_density,
            runtime.rock_density,
        )
        logger.info(
            f"Rasterized {int(np.sum(water != 0))} water cells, "
            f"{beaches} beach cells, {trees} trees, {rocks} rocks"
        )

        return GenerationResult(
            elevation=elevation.astype(np.int8),
            water=water,
            features=features,
            config=config,
            biome=biome,
            heightmap=heightmap,
            heightmap_size=size,
            sea_level=biome.sea_level,
        )

    def visible_chunks(
        self, camera_pos: tuple[float, float], chunk_size: int | None = None
    ) -> list[ChunkLOD]:
        """Renderer query passed through to the backend.

        ``chunk_size`` defaults to the generator's configured chunk size.
        """
        if chunk_size is None:
            chunk_size = self.chunk_size
        return self.backend.compute_visible_chunks(camera_pos, chunk_size)
