"""River overlay: a meandering full-width channel with flood plain and ponds."""

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..terrain_types import MIN_ELEVATION, WATER_MAX_ELEVATION, WaterType
from .config import RiverConfig


@dataclass
class RiverChannel:
    """Geometry of a carved river."""

    start_y: int
    width: int
    frequency: float
    amplitude: float
    centerline: list[int]


def meander_centerline(
    width: int,
    height: int,
    start_y: int,
    frequency: float,
    amplitude: float,
    jitter: float,
    rng: np.random.Generator,
) -> list[int]:
    """Compute the channel center row for every column.

    Args:
        width: Grid width (one entry per column).
        height: Grid height, used to clamp the center onto the grid.
        start_y: Row the meander oscillates around.
        frequency: Meander frequency in radians per column.
        amplitude: Meander amplitude in rows.
        jitter: Maximum random offset added per column.
        rng: Random number generator.

    Returns:
        List of center rows, one per column, each within [0, height).
    """
    centers: list[int] = []
    for x in range(width):
        offset = rng.uniform(-jitter, jitter) if jitter > 0 else 0.0
        center = int(round(start_y + math.sin(x * frequency) * amplitude + offset))
        centers.append(max(0, min(height - 1, center)))
    return centers


def carve_river(
    elevation: NDArray[np.int16],
    water: NDArray[np.uint8],
    rng: np.random.Generator,
    config: RiverConfig,
) -> RiverChannel:
    """Carve a meandering river from the left edge to the right edge.

    Every column gets a three-tier cross-section around its center row:
    deep channel (center ±1 row, elevation -3), mid band out to the channel
    width (elevation -2), both flagged as River, and a dry flood-plain band
    whose elevation is capped at -1.

    Modifies ``elevation`` and ``water`` in place.

    Args:
        elevation: Elevation array, shape (height, width).
        water: Water array, shape (height, width).
        rng: Random number generator.
        config: River parameters.

    Returns:
        The carved channel geometry.
    """
    height, width = elevation.shape

    start_y = int(rng.integers(height // 4, max(height // 4 + 1, 3 * height // 4)))
    channel_width = int(rng.integers(config.width_min, config.width_max + 1))
    frequency = float(rng.uniform(config.frequency_min, config.frequency_max))
    amplitude = float(rng.uniform(0.5, 1.0)) * config.amplitude_fraction * height

    centerline = meander_centerline(
        width, height, start_y, frequency, amplitude, config.jitter, rng
    )

    outer = channel_width + config.flood_plain_width
    for x, center in enumerate(centerline):
        for y in range(max(0, center - outer), min(height, center + outer + 1)):
            dy = abs(y - center)
            if dy <= 1:
                elevation[y, x] = MIN_ELEVATION
                water[y, x] = WaterType.RIVER
            elif dy <= channel_width:
                elevation[y, x] = min(int(elevation[y, x]), WATER_MAX_ELEVATION)
                water[y, x] = WaterType.RIVER
            elif water[y, x] == WaterType.NONE:
                elevation[y, x] = min(int(elevation[y, x]), -1)

    _scatter_ponds(elevation, water, centerline, channel_width, rng, config)

    return RiverChannel(
        start_y=start_y,
        width=channel_width,
        frequency=frequency,
        amplitude=amplitude,
        centerline=centerline,
    )


def _scatter_ponds(
    elevation: NDArray[np.int16],
    water: NDArray[np.uint8],
    centerline: list[int],
    channel_width: int,
    rng: np.random.Generator,
    config: RiverConfig,
) -> None:
    """Drop irregular ponds beside the channel.

    Each pond has a deep core (inner half of its radius, elevation -3) and a
    shallow rim (elevation -2). Existing river cells are left untouched and
    elevation is never raised.
    """
    height, width = elevation.shape
    count = int(rng.integers(config.pond_count_min, config.pond_count_max + 1))

    for _ in range(count):
        radius = int(rng.integers(config.pond_radius_min, config.pond_radius_max + 1))
        px = int(rng.integers(0, width))
        side = 1 if rng.random() < 0.5 else -1
        gap = channel_width + radius + int(rng.integers(0, radius + 1))
        py = centerline[px] + side * gap

        # Irregular outline: radius wobbles with angle
        lobes = int(rng.integers(2, 5))
        phase = float(rng.uniform(0.0, 2.0 * math.pi))

        for y in range(max(0, py - radius - 2), min(height, py + radius + 3)):
            for x in range(max(0, px - radius - 2), min(width, px + radius + 3)):
                if water[y, x] == WaterType.RIVER:
                    continue
                dx, dy = x - px, y - py
                angle = math.atan2(dy, dx)
                reach = radius * (1.0 + 0.25 * math.sin(lobes * angle + phase))
                dist = math.hypot(dx, dy)
                if dist > reach:
                    continue
                tier = MIN_ELEVATION if dist <= reach * 0.5 else WATER_MAX_ELEVATION
                elevation[y, x] = min(int(elevation[y, x]), tier)
                water[y, x] = WaterType.POND
