"""Coastal overlay: ocean along one edge with depth bands and a rising shore."""

from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from ..terrain_types import (
    BEACH_ELEVATION,
    MAX_ELEVATION,
    MIN_ELEVATION,
    WATER_MAX_ELEVATION,
    WaterType,
)
from .config import CoastalConfig
from .noise import fbm_noise_1d


class OceanEdge(str, Enum):
    """Grid edge the ocean lies along."""

    LEFT = "left"
    BOTTOM = "bottom"


@dataclass
class Coastline:
    """Geometry of a generated coast."""

    edge: OceanEdge
    base_distance: int
    offsets: NDArray[np.float32]


def distance_from_edge(height: int, width: int, edge: OceanEdge) -> NDArray[np.float32]:
    """Distance of every cell from the ocean edge, in tiles.

    Args:
        height: Grid height.
        width: Grid width.
        edge: Ocean edge.

    Returns:
        Array of shape (height, width).
    """
    ys, xs = np.meshgrid(
        np.arange(height, dtype=np.float32),
        np.arange(width, dtype=np.float32),
        indexing="ij",
    )
    if edge == OceanEdge.LEFT:
        return xs
    return (height - 1) - ys


def apply_coastline(
    elevation: NDArray[np.int16],
    water: NDArray[np.uint8],
    rng: np.random.Generator,
    seed: int,
    config: CoastalConfig,
) -> Coastline:
    """Flood one edge with ocean behind a noised coastline.

    Seaward of the coastline cells fall into three bands by distance from it:
    deep ocean (-3, Lake), shallow ocean (-2, Lake) and a dry beach band (-1).
    Landward cells are lifted in proportion to their distance inland.

    Modifies ``elevation`` and ``water`` in place.

    Args:
        elevation: Elevation array, shape (height, width).
        water: Water array, shape (height, width).
        rng: Random number generator.
        seed: Seed for the coastline wobble noise.
        config: Coastal parameters.

    Returns:
        The coastline geometry.
    """
    height, width = elevation.shape

    edge = OceanEdge.LEFT if rng.random() < 0.5 else OceanEdge.BOTTOM
    base_distance = int(rng.integers(config.base_distance_min, config.base_distance_max + 1))

    along = height if edge == OceanEdge.LEFT else width
    offsets = fbm_noise_1d(along, seed, config.noise_wavelength) * config.noise_amplitude

    if edge == OceanEdge.LEFT:
        # Coastline position varies with the row
        coast = (base_distance + offsets)[:, np.newaxis]
    else:
        # Coastline position varies with the column
        coast = (base_distance + offsets)[np.newaxis, :]

    distance = distance_from_edge(height, width, edge)
    seaward = coast - distance

    deep = seaward > config.deep_band
    shallow = (seaward > config.beach_band) & ~deep
    beach = (seaward > 0) & ~deep & ~shallow
    inland = seaward <= 0

    elevation[deep] = MIN_ELEVATION
    water[deep] = WaterType.LAKE
    elevation[shallow] = WATER_MAX_ELEVATION
    water[shallow] = WaterType.LAKE
    elevation[beach] = BEACH_ELEVATION
    water[beach] = WaterType.NONE

    boost = np.floor(-seaward * config.inland_rise).astype(np.int16)
    elevation[inland] = np.clip(
        elevation[inland] + boost[inland], MIN_ELEVATION, MAX_ELEVATION
    )

    return Coastline(edge=edge, base_distance=base_distance, offsets=offsets)
