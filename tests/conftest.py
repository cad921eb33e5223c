"""Shared test fixtures for terrain tests."""

import pytest

from cityterrain.events import TerrainChanged, TerrainEvent, TerrainReplaced
from cityterrain.state import TerrainState
from cityterrain.terrain.config import TerrainConfig
from cityterrain.terrain_types import WaterType
from cityterrain.types import Position


@pytest.fixture
def flat_terrain() -> TerrainState:
    """10x10 terrain at elevation 0 with no water or features."""
    return TerrainState(width=10, height=10)


@pytest.fixture
def pond_terrain(flat_terrain: TerrainState) -> TerrainState:
    """10x10 terrain with a single pond at (5, 5).

    Its four neighbors are pulled down to beach level:
        . . . . B . .
        . . . B P B .
        . . . . B . .
    """
    flat_terrain.set_water(Position(x=5, y=5), WaterType.POND)
    return flat_terrain


@pytest.fixture
def occupied_cells() -> set[Position]:
    """Mutable set of building-occupied cells; install with ``set_occupancy``."""
    return set()


@pytest.fixture
def occupied_terrain(
    flat_terrain: TerrainState, occupied_cells: set[Position]
) -> TerrainState:
    """10x10 terrain whose occupancy is driven by ``occupied_cells``."""
    flat_terrain.set_occupancy(lambda position: position in occupied_cells)
    return flat_terrain


@pytest.fixture
def recorded_events(flat_terrain: TerrainState) -> list[TerrainEvent]:
    """Events published by ``flat_terrain`` from this point on."""
    events: list[TerrainEvent] = []
    flat_terrain.events.subscribe(TerrainChanged, events.append)
    flat_terrain.events.subscribe(TerrainReplaced, events.append)
    return events


@pytest.fixture
def small_config() -> TerrainConfig:
    """64x64 legacy generation config with a fixed seed."""
    return TerrainConfig(seed=42, width=64, height=64)
