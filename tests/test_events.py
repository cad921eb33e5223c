"""Tests for the terrain event channel."""

import numpy as np
from structlog.testing import capture_logs

from cityterrain.events import (
    EventBus,
    RuntimeHeightmapGenerated,
    TerrainChanged,
    TerrainEvent,
    TerrainReplaced,
)
from cityterrain.types import Position


class TestEventBus:
    """Tests for subscribe/unsubscribe/publish."""

    def test_handler_receives_subscribed_type(self) -> None:
        """Handlers get events of the type they subscribed to."""
        bus = EventBus()
        received: list[TerrainEvent] = []
        bus.subscribe(TerrainChanged, received.append)

        event = TerrainChanged(cells=(Position(x=1, y=1),))
        bus.publish(event)

        assert received == [event]

    def test_other_types_not_delivered(self) -> None:
        """Handlers don't see events of other types."""
        bus = EventBus()
        received: list[TerrainEvent] = []
        bus.subscribe(TerrainChanged, received.append)

        bus.publish(TerrainReplaced(width=4, height=4, biome_id="default"))

        assert received == []

    def test_unsubscribe_stops_delivery(self) -> None:
        """Unsubscribed handlers receive nothing."""
        bus = EventBus()
        received: list[TerrainEvent] = []
        bus.subscribe(TerrainChanged, received.append)
        bus.unsubscribe(TerrainChanged, received.append)

        bus.publish(TerrainChanged(cells=()))

        assert received == []

    def test_unsubscribe_unknown_handler_is_harmless(self) -> None:
        """Unsubscribing something never subscribed does nothing."""
        bus = EventBus()
        bus.unsubscribe(TerrainChanged, print)

    def test_failing_handler_does_not_block_others(self) -> None:
        """A raising handler is logged and later handlers still run."""
        bus = EventBus()
        received: list[TerrainEvent] = []

        def explode(event: TerrainEvent) -> None:
            raise RuntimeError("boom")

        bus.subscribe(TerrainChanged, explode)
        bus.subscribe(TerrainChanged, received.append)
        bus.publish(TerrainChanged(cells=()))

        assert len(received) == 1

    def test_handler_failure_logged_with_event_type(self) -> None:
        """The failure is logged under the type of the event being delivered."""
        bus = EventBus()

        def explode(event: TerrainEvent) -> None:
            raise RuntimeError("boom")

        bus.subscribe(TerrainChanged, explode)
        with capture_logs() as logs:
            bus.publish(TerrainChanged(cells=()))

        failures = [entry for entry in logs if entry["event"] == "event_handler_failed"]
        assert len(failures) == 1
        assert failures[0]["event_type"] == "TerrainChanged"

    def test_heightmap_event_carries_array(self) -> None:
        """The heightmap notification carries size and sea level."""
        bus = EventBus()
        received: list[TerrainEvent] = []
        bus.subscribe(RuntimeHeightmapGenerated, received.append)

        heightmap = np.zeros(16, dtype=np.float32)
        bus.publish(RuntimeHeightmapGenerated(heightmap=heightmap, size=4, sea_level=0.3))

        assert received[0].size == 4
        assert received[0].sea_level == 0.3
        assert received[0].heightmap is heightmap
