"""Typed event channel for terrain notifications.

Neighboring subsystems (building placement, renderer, save orchestration)
subscribe to terrain events instead of polling the state. Handlers run
synchronously inside ``publish``; a handler must not mutate terrain.
"""

from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass

import numpy as np
import structlog
from numpy.typing import NDArray

from .types import Position

logger = structlog.get_logger()


@dataclass(frozen=True)
class TerrainEvent:
    """Base class for all terrain events."""

    pass


@dataclass(frozen=True)
class TerrainChanged(TerrainEvent):
    """One or more cells changed through an in-play mutation."""

    cells: tuple[Position, ...]


@dataclass(frozen=True)
class TerrainReplaced(TerrainEvent):
    """All maps were replaced at once (generation or load)."""

    width: int
    height: int
    biome_id: str


@dataclass(frozen=True, eq=False)
class RuntimeHeightmapGenerated(TerrainEvent):
    """Raw heightmap produced by the runtime pipeline, for LOD/render consumers."""

    heightmap: NDArray[np.float32]
    size: int
    sea_level: float


EventHandler = Callable[[TerrainEvent], None]


class EventBus:
    """Synchronous publish/subscribe channel keyed by event type."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[EventHandler]] = {}

    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: EventHandler) -> None:
        """Unsubscribe a handler from an event type."""
        if event_type in self._handlers:
            with suppress(ValueError):
                self._handlers[event_type].remove(handler)

    def publish(self, event: TerrainEvent) -> None:
        """Publish an event to all handlers subscribed to its exact type."""
        event_type = type(event)
        for handler in list(self._handlers.get(event_type, ())):
            try:
                handler(event)
            except Exception:
                logger.exception("event_handler_failed", event_type=event_type.__name__)
