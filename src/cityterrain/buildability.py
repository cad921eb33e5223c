"""Footprint buildability rules."""

from dataclasses import dataclass

import structlog

from .state import TerrainState
from .terrain_types import (
    BEACH_ELEVATION,
    MAX_ELEVATION,
    MIN_ELEVATION,
    WATER_MAX_ELEVATION,
    WaterType,
)
from .types import Position

logger = structlog.get_logger()

# Building types allowed on shallow or open water
WATER_INFRASTRUCTURE = frozenset({
    "bridge",
    "dock",
    "water_pump",
    "large_water_pump",
    "desalination_plant",
})

REASON_OUTSIDE_BOUNDS = "outside bounds"
REASON_DEEP_WATER = "deep water"
REASON_WATER_ONLY = "water infrastructure only"
REASON_BEACH_TOO_LARGE = "beach/wetland too large"
REASON_MOUNTAIN_PEAK = "mountain peak"
REASON_STEEP_TOO_LARGE = "steep terrain too large"
REASON_HILLSIDE_TOO_LARGE = "hillside too large"
REASON_OCCUPIED = "occupied"
REASON_EMPTY_FOOTPRINT = "empty footprint"


@dataclass(frozen=True)
class BuildabilityResult:
    """Outcome of a footprint check."""

    buildable: bool
    reason: str | None = None
    cell: Position | None = None  # First failing cell


def _fits(width: int, height: int, limit: int) -> bool:
    return width <= limit and height <= limit


def check_cell(
    state: TerrainState,
    cell: Position,
    width: int,
    height: int,
    building_type: str,
) -> str | None:
    """Apply the per-cell terrain rules in order.

    Returns:
        The first failing reason, or None if the cell accepts the footprint.
    """
    if not state.in_bounds(cell):
        return REASON_OUTSIDE_BOUNDS

    elevation = state.get_elevation(cell)
    if elevation <= MIN_ELEVATION:
        return REASON_DEEP_WATER
    if elevation == WATER_MAX_ELEVATION or state.get_water(cell) != WaterType.NONE:
        if building_type not in WATER_INFRASTRUCTURE:
            return REASON_WATER_ONLY
        return None
    if elevation == BEACH_ELEVATION and not _fits(width, height, 2):
        return REASON_BEACH_TOO_LARGE
    if elevation >= MAX_ELEVATION:
        return REASON_MOUNTAIN_PEAK
    if elevation == 4 and not _fits(width, height, 2):
        return REASON_STEEP_TOO_LARGE
    if elevation == 3 and not _fits(width, height, 3):
        return REASON_HILLSIDE_TOO_LARGE
    return None


def is_buildable(
    state: TerrainState,
    anchor: Position,
    width: int,
    height: int,
    building_type: str,
) -> BuildabilityResult:
    """Check whether a building footprint may be placed.

    Cells are visited row by row from ``anchor`` (the top-left corner) and the
    first failing cell short-circuits. After a cell passes the terrain rules
    it must also be free of other buildings. The state is never modified.

    Args:
        state: Terrain to evaluate.
        anchor: Top-left footprint cell.
        width: Footprint width in cells.
        height: Footprint height in cells.
        building_type: Building type identifier, e.g. ``"dock"``.

    Returns:
        BuildabilityResult; ``reason`` and ``cell`` describe the first failure.
    """
    if width <= 0 or height <= 0:
        return BuildabilityResult(buildable=False, reason=REASON_EMPTY_FOOTPRINT)

    for dy in range(height):
        for dx in range(width):
            cell = Position(x=anchor.x + dx, y=anchor.y + dy)
            reason = check_cell(state, cell, width, height, building_type)
            if reason is None and state.is_occupied(cell):
                reason = REASON_OCCUPIED
            if reason is not None:
                logger.debug(
                    "footprint_rejected",
                    building_type=building_type,
                    anchor=str(anchor),
                    cell=str(cell),
                    reason=reason,
                )
                return BuildabilityResult(buildable=False, reason=reason, cell=cell)

    return BuildabilityResult(buildable=True)
