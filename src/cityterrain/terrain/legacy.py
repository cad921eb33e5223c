"""Noise + biome overlay terrain generator."""

import logging

import numpy as np
from numpy.typing import NDArray

from ..biome import COASTAL_BIOME, MESA_BIOME, RIVER_BIOME, BiomeDescriptor
from ..terrain_types import MAX_ELEVATION, MIN_ELEVATION
from .base import GenerationResult, round_half_away
from .coastal import apply_coastline
from .config import TerrainConfig
from .mesa import apply_mesas
from .noise import fbm_noise
from .objects import scatter_features
from .river import carve_river
from .shoreline import fill_default_water, place_beaches

logger = logging.getLogger(__name__)

# Biomes whose overlay lays down all of its own water
SELF_WATERED_BIOMES = frozenset({RIVER_BIOME, COASTAL_BIOME})


def make_base_elevation(
    noise: NDArray[np.float32],
    biome: BiomeDescriptor,
) -> NDArray[np.int16]:
    """Quantize a [-1, 1] noise field into integer elevation.

    ``elevation = clamp(base_elevation + round(noise * 4 * variation), -3, 5)``

    Args:
        noise: Noise field in [-1, 1].
        biome: Biome supplying elevation bias and variation.

    Returns:
        int16 elevation array (working precision for the overlays).
    """
    scaled = round_half_away(noise.astype(np.float64) * 4.0 * biome.elevation_variation)
    elevation = biome.base_elevation + scaled
    return np.clip(elevation, MIN_ELEVATION, MAX_ELEVATION).astype(np.int16)


class LegacyGenerator:
    """Seeded noise base terrain, one biome overlay, then shared finishing passes.

    Steps run in a fixed order: base elevation, overlay, default water fill,
    beach pass, feature scatter. Nothing but (seed, biome, grid size) feeds the
    random streams, so equal inputs reproduce identical maps.
    """

    def generate(self, config: TerrainConfig, biome: BiomeDescriptor) -> GenerationResult:
        """Generate complete terrain from configuration.

        Args:
            config: Terrain generation configuration.
            biome: Biome descriptor selecting the overlay and densities.

        Returns:
            GenerationResult with elevation, water and feature maps.
        """
        width, height = config.width, config.height
        legacy = config.legacy
        rng = np.random.default_rng(config.seed)

        logger.info(
            f"Generating legacy terrain {width}x{height} "
            f"with seed {config.seed}, biome '{biome.id}'"
        )

        # Step 1: Base elevation
        noise = fbm_noise(
            width,
            height,
            config.seed,
            legacy.noise.base_wavelength,
            octaves=legacy.noise.octaves,
            lacunarity=legacy.noise.lacunarity,
            gain=legacy.noise.gain,
        )
        elevation = make_base_elevation(noise, biome)
        water = np.zeros((height, width), dtype=np.uint8)
        features = np.zeros((height, width), dtype=np.uint8)

        # Step 2: Biome overlay
        if biome.id == RIVER_BIOME:
            channel = carve_river(elevation, water, rng, legacy.river)
            logger.info(
                f"River carved: start row {channel.start_y}, width {channel.width}"
            )
        elif biome.id == COASTAL_BIOME:
            coastline = apply_coastline(
                elevation, water, rng, config.seed + 200, legacy.coastal
            )
            logger.info(
                f"Coastline placed on {coastline.edge.value} edge, "
                f"base distance {coastline.base_distance}"
            )
        elif biome.id == MESA_BIOME:
            plateaus, arroyos = apply_mesas(elevation, rng, config.seed + 300, legacy.mesa)
            logger.info(f"Raised {len(plateaus)} plateaus, cut {len(arroyos)} arroyos")
        else:
            logger.debug(f"No overlay for biome '{biome.id}'")

        # Step 3: Default water fill
        if biome.id not in SELF_WATERED_BIOMES:
            filled = fill_default_water(elevation, water)
            logger.info(f"Filled {filled} basin cells with water")

        # Step 4: Beaches
        beaches = place_beaches(elevation, water, features)

        # Step 5: Features
        trees, rocks = scatter_features(
            elevation,
            water,
            features,
            config.seed + legacy.feature_seed_offset,
            biome.tree_density,
            biome.rock_density,
        )
        logger.info(f"Placed {beaches} beach cells, {trees} trees, {rocks} rocks")

        return GenerationResult(
            elevation=elevation.astype(np.int8),
            water=water,
            features=features,
            config=config,
            biome=biome,
        )
