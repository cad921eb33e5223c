"""Mesa overlay: flat-topped plateaus ringed by cliffs and talus, cut by arroyos."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..terrain_types import MAX_ELEVATION
from .config import MesaConfig
from .noise import fbm_noise_1d

# Angular resolution of the plateau boundary noise
_BOUNDARY_SAMPLES = 64


@dataclass
class Plateau:
    """A placed plateau."""

    cx: int
    cy: int
    radius: int
    top: int


@dataclass
class Arroyo:
    """A carved dry wash."""

    path: list[tuple[int, int]]


def raise_plateau(
    elevation: NDArray[np.int16],
    plateau: Plateau,
    boundary: NDArray[np.float32],
    config: MesaConfig,
) -> None:
    """Stamp one plateau into the elevation field.

    The top is set flat to the plateau height. The cliff ring and talus ring
    outside it only ever raise existing elevation.

    Args:
        elevation: Elevation array, modified in place.
        plateau: Plateau placement.
        boundary: Radial wobble samples in [-1, 1], indexed by angle.
        config: Mesa parameters.
    """
    height, width = elevation.shape
    cliff_top = max(1, plateau.top - 2)
    talus_top = max(1, plateau.top - 3)

    reach = int(np.ceil(plateau.radius * (1 + config.boundary_noise))) + (
        config.cliff_width + config.talus_width
    )
    y0, y1 = max(0, plateau.cy - reach), min(height, plateau.cy + reach + 1)
    x0, x1 = max(0, plateau.cx - reach), min(width, plateau.cx + reach + 1)
    if y0 >= y1 or x0 >= x1:
        return

    ys, xs = np.meshgrid(np.arange(y0, y1), np.arange(x0, x1), indexing="ij")
    dx = xs - plateau.cx
    dy = ys - plateau.cy
    dist = np.hypot(dx, dy)

    angle = (np.arctan2(dy, dx) + np.pi) / (2 * np.pi)
    index = np.minimum((angle * len(boundary)).astype(np.int64), len(boundary) - 1)
    edge = plateau.radius * (1.0 + config.boundary_noise * boundary[index])

    top = dist <= edge
    cliff = ~top & (dist <= edge + config.cliff_width)
    talus = ~top & ~cliff & (dist <= edge + config.cliff_width + config.talus_width)

    region = elevation[y0:y1, x0:x1]
    region[top] = plateau.top
    region[cliff] = np.maximum(region[cliff], cliff_top)
    region[talus] = np.maximum(region[talus], talus_top)


def carve_arroyo(
    elevation: NDArray[np.int16],
    rng: np.random.Generator,
    config: MesaConfig,
) -> Arroyo:
    """Cut a one-cell-wide wash running east with a random walk in y.

    Elevation along the path drops by ``arroyo_depth``, clamped to a floor of 0.
    Cells already at or below 0 are left alone.

    Args:
        elevation: Elevation array, modified in place.
        rng: Random number generator.
        config: Mesa parameters.

    Returns:
        The carved path.
    """
    height, width = elevation.shape
    x = int(rng.integers(0, max(1, width // 2)))
    y = int(rng.integers(0, height))
    length = int(rng.integers(max(2, width // 4), max(3, width // 2) + 1))

    path: list[tuple[int, int]] = []
    for _ in range(length):
        if x >= width:
            break
        current = int(elevation[y, x])
        if current > 0:
            elevation[y, x] = max(0, current - config.arroyo_depth)
        path.append((x, y))
        x += 1
        y = max(0, min(height - 1, y + int(rng.integers(-1, 2))))

    return Arroyo(path=path)


def apply_mesas(
    elevation: NDArray[np.int16],
    rng: np.random.Generator,
    seed: int,
    config: MesaConfig,
) -> tuple[list[Plateau], list[Arroyo]]:
    """Place plateaus, then cut arroyos through the result.

    Args:
        elevation: Elevation array, shape (height, width), modified in place.
        rng: Random number generator.
        seed: Base seed for each plateau's boundary noise.
        config: Mesa parameters.

    Returns:
        Tuple of (plateaus, arroyos).
    """
    height, width = elevation.shape

    plateaus: list[Plateau] = []
    count = int(rng.integers(config.plateau_count_min, config.plateau_count_max + 1))
    for i in range(count):
        plateau = Plateau(
            cx=int(rng.integers(0, width)),
            cy=int(rng.integers(0, height)),
            radius=int(rng.integers(config.radius_min, config.radius_max + 1)),
            top=min(MAX_ELEVATION, int(rng.integers(config.height_min, config.height_max + 1))),
        )
        boundary = fbm_noise_1d(_BOUNDARY_SAMPLES, seed + 101 * (i + 1), _BOUNDARY_SAMPLES / 4)
        raise_plateau(elevation, plateau, boundary, config)
        plateaus.append(plateau)

    arroyos: list[Arroyo] = []
    count = int(rng.integers(config.arroyo_count_min, config.arroyo_count_max + 1))
    for _ in range(count):
        arroyos.append(carve_arroyo(elevation, rng, config))

    return plateaus, arroyos
