"""Terrain state management."""

from collections.abc import Callable

import numpy as np
import structlog
from numpy.typing import NDArray
from pydantic import BaseModel, PrivateAttr

from .biome import DEFAULT_BIOME
from .events import EventBus, TerrainChanged, TerrainReplaced
from .terrain_types import (
    BEACH_ELEVATION,
    MAX_ELEVATION,
    MIN_ELEVATION,
    WATER_MAX_ELEVATION,
    FeatureType,
    WaterType,
    clamp_elevation,
)
from .types import NEIGHBOR_DELTAS, Position

logger = structlog.get_logger()

OccupancyQuery = Callable[[Position], bool]


# Elevation -> base flood severity; anything at or below -2 is fully flooded
_FLOOD_BASE: dict[int, float] = {
    -1: 0.7,
    0: 0.3,
    1: 0.1,
}


class TerrainState(BaseModel):
    """
    Mutable per-cell terrain model.

    Elevation, water and feature maps are dense ``(height, width)`` arrays;
    water and feature use 0 as the "none" sentinel. Every mutator is a silent
    no-op on out-of-bounds or building-occupied cells, keeps the coupling
    invariants between the three maps, and publishes one ``TerrainChanged``
    event listing the cells it touched.
    """

    width: int
    height: int
    biome_id: str = DEFAULT_BIOME

    _elevation: NDArray[np.int8] = PrivateAttr()
    _water: NDArray[np.uint8] = PrivateAttr()
    _features: NDArray[np.uint8] = PrivateAttr()

    # Building-occupancy query; None means nothing is occupied
    _occupancy: OccupancyQuery | None = PrivateAttr(default=None)
    _events: EventBus = PrivateAttr(default_factory=EventBus)

    def model_post_init(self, __context: object) -> None:
        self.reset()

    # --- Collaborators ---

    @property
    def events(self) -> EventBus:
        """Event channel for terrain notifications."""
        return self._events

    def set_occupancy(self, query: OccupancyQuery | None) -> None:
        """Install the building-occupancy query gating every mutator."""
        self._occupancy = query

    def is_occupied(self, position: Position) -> bool:
        """Whether a building currently covers the cell."""
        if self._occupancy is None:
            return False
        return bool(self._occupancy(position))

    # --- Bulk operations ---

    def reset(self) -> None:
        """Initialize every cell to elevation 0, no water and no feature."""
        shape = (self.height, self.width)
        self._elevation = np.zeros(shape, dtype=np.int8)
        self._water = np.zeros(shape, dtype=np.uint8)
        self._features = np.zeros(shape, dtype=np.uint8)

    def replace_maps(
        self,
        elevation: NDArray[np.integer],
        water: NDArray[np.integer],
        features: NDArray[np.integer],
        biome_id: str | None = None,
    ) -> None:
        """Replace all three maps at once.

        Args:
            elevation: Elevation array, shape (height, width).
            water: WaterType values, shape (height, width).
            features: FeatureType values, shape (height, width).
            biome_id: Biome the maps were generated for.

        Raises:
            ValueError: If any array shape doesn't match the grid.
        """
        shape = (self.height, self.width)
        for name, array in (
            ("elevation", elevation),
            ("water", water),
            ("features", features),
        ):
            if array.shape != shape:
                raise ValueError(
                    f"{name} array shape {array.shape} doesn't match "
                    f"terrain dimensions {shape}"
                )

        self._elevation = np.clip(elevation, MIN_ELEVATION, MAX_ELEVATION).astype(np.int8)
        self._water = water.astype(np.uint8, copy=True)
        self._features = features.astype(np.uint8, copy=True)
        if biome_id is not None:
            self.biome_id = biome_id

        logger.debug(
            "terrain_replaced",
            width=self.width,
            height=self.height,
            biome_id=self.biome_id,
        )
        self._events.publish(
            TerrainReplaced(width=self.width, height=self.height, biome_id=self.biome_id)
        )

    def elevation_array(self) -> NDArray[np.int8]:
        """Return a copy of the elevation map."""
        return self._elevation.copy()

    def water_array(self) -> NDArray[np.uint8]:
        """Return a copy of the water map."""
        return self._water.copy()

    def feature_array(self) -> NDArray[np.uint8]:
        """Return a copy of the feature map."""
        return self._features.copy()

    # --- Queries ---

    def in_bounds(self, position: Position) -> bool:
        """Check if position is within grid bounds."""
        return 0 <= position.x < self.width and 0 <= position.y < self.height

    def get_elevation(self, position: Position) -> int:
        """Elevation at position (0 outside the grid)."""
        if not self.in_bounds(position):
            return 0
        return int(self._elevation[position.y, position.x])

    def get_water(self, position: Position) -> WaterType:
        """Water at position (NONE outside the grid)."""
        if not self.in_bounds(position):
            return WaterType.NONE
        return WaterType(int(self._water[position.y, position.x]))

    def get_feature(self, position: Position) -> FeatureType:
        """Feature at position (NONE outside the grid)."""
        if not self.in_bounds(position):
            return FeatureType.NONE
        return FeatureType(int(self._features[position.y, position.x]))

    def has_water_nearby(self, position: Position, radius: int) -> bool:
        """Whether any cell in the Chebyshev square of ``radius`` holds water."""
        x0 = max(0, position.x - radius)
        y0 = max(0, position.y - radius)
        x1 = min(self.width, position.x + radius + 1)
        y1 = min(self.height, position.y + radius + 1)
        if x0 >= x1 or y0 >= y1:
            return False
        return bool(np.any(self._water[y0:y1, x0:x1]))

    def is_flood_prone(self, position: Position) -> bool:
        """Low ground, or ground level near water."""
        elevation = self.get_elevation(position)
        if elevation <= -1:
            return True
        return elevation == 0 and self.has_water_nearby(position, 3)

    def flood_severity(self, position: Position) -> float:
        """Flood severity in [0, 1], amplified next to water."""
        elevation = self.get_elevation(position)
        if elevation <= WATER_MAX_ELEVATION:
            base = 1.0
        else:
            base = _FLOOD_BASE.get(elevation, 0.0)
        if base > 0 and self.has_water_nearby(position, 2):
            base = min(1.0, base * 1.3)
        return base

    # --- Mutators ---

    def set_elevation(self, position: Position, value: int) -> None:
        """Set elevation, clearing water lifted above -2 and features on big jumps."""
        if not self._editable(position):
            return
        x, y = position.x, position.y
        new = clamp_elevation(value)
        old = int(self._elevation[y, x])
        if new == old:
            return

        self._elevation[y, x] = new
        if abs(new - old) > 2:
            self._features[y, x] = FeatureType.NONE
        if new > WATER_MAX_ELEVATION and self._water[y, x] != WaterType.NONE:
            self._water[y, x] = WaterType.NONE

        self._commit(x, y)

    def raise_elevation(self, position: Position) -> None:
        """Raise elevation by one step."""
        self.set_elevation(position, self.get_elevation(position) + 1)

    def lower_elevation(self, position: Position) -> None:
        """Lower elevation by one step."""
        self.set_elevation(position, self.get_elevation(position) - 1)

    def flatten(self, position: Position) -> None:
        """Reset elevation to ground level."""
        self.set_elevation(position, 0)

    def set_water(self, position: Position, water: WaterType) -> None:
        """Place or remove water.

        Lakes sink the cell to -3, ponds and rivers to at most -2, and any
        feature is removed. Removing water lifts a negative cell back to 0.
        """
        if not self._editable(position):
            return
        x, y = position.x, position.y
        water = WaterType(water)
        if int(self._water[y, x]) == water:
            return

        elevation = int(self._elevation[y, x])
        if water == WaterType.NONE:
            self._water[y, x] = WaterType.NONE
            if elevation < 0:
                self._elevation[y, x] = 0
        else:
            self._water[y, x] = water
            if water == WaterType.LAKE:
                self._elevation[y, x] = MIN_ELEVATION
            else:
                self._elevation[y, x] = min(elevation, WATER_MAX_ELEVATION)
            self._features[y, x] = FeatureType.NONE

        self._commit(x, y)

    def toggle_water(self, position: Position) -> None:
        """Toggle between no water and a pond."""
        if self.get_water(position) == WaterType.NONE:
            self.set_water(position, WaterType.POND)
        else:
            self.set_water(position, WaterType.NONE)

    def set_feature(self, position: Position, feature: FeatureType) -> None:
        """Place or remove a natural feature.

        Beaches are accepted only at elevation -1, and nothing but NONE is
        accepted on a water cell.
        """
        if not self._editable(position):
            return
        x, y = position.x, position.y
        feature = FeatureType(feature)
        if int(self._features[y, x]) == feature:
            return
        if feature != FeatureType.NONE and self._water[y, x] != WaterType.NONE:
            return
        if feature == FeatureType.BEACH and self._elevation[y, x] != BEACH_ELEVATION:
            return

        self._features[y, x] = feature
        self._commit(x, y)

    def toggle_feature(self, position: Position, feature: FeatureType) -> None:
        """Place ``feature``, or clear it if already present."""
        if self.get_feature(position) == feature:
            self.set_feature(position, FeatureType.NONE)
        else:
            self.set_feature(position, feature)

    # --- Internals ---

    def _editable(self, position: Position) -> bool:
        return self.in_bounds(position) and not self.is_occupied(position)

    def _commit(self, x: int, y: int) -> None:
        """Refresh beaches on a mutated cell and its neighbors, then publish."""
        changed = [Position(x=x, y=y)]

        self._refresh_beach(x, y)
        for dx, dy in NEIGHBOR_DELTAS:
            nx, ny = x + dx, y + dy
            if not (0 <= nx < self.width and 0 <= ny < self.height):
                continue
            neighbor = Position(x=nx, y=ny)
            if self.is_occupied(neighbor):
                continue
            if self._refresh_beach(nx, ny):
                changed.append(neighbor)

        logger.debug("terrain_changed", cells=len(changed), x=x, y=y)
        self._events.publish(TerrainChanged(cells=tuple(changed)))

    def _adjacent_to_water(self, x: int, y: int) -> bool:
        for dx, dy in NEIGHBOR_DELTAS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height and self._water[ny, nx]:
                return True
        return False

    def _refresh_beach(self, x: int, y: int) -> bool:
        """Recompute Beach placement for one cell.

        Returns:
            True if the cell's elevation or feature changed.
        """
        if self._water[y, x] != WaterType.NONE:
            return False

        elevation = int(self._elevation[y, x])
        feature = int(self._features[y, x])
        adjacent = self._adjacent_to_water(x, y)
        changed = False

        if adjacent and elevation == 0:
            self._elevation[y, x] = BEACH_ELEVATION
            elevation = BEACH_ELEVATION
            changed = True

        if adjacent and elevation == BEACH_ELEVATION:
            # A pre-existing tree or rock survives the elevation override
            if feature == FeatureType.NONE:
                self._features[y, x] = FeatureType.BEACH
                changed = True
        elif feature == FeatureType.BEACH:
            self._features[y, x] = FeatureType.NONE
            changed = True

        return changed
