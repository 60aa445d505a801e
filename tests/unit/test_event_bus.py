"""
Unit tests for EventBus.

Tests subscription, priority ordering, and handler isolation.
"""

from typing import Any

import pytest

from arbcycle.core.event_bus import Event, EventBus, EventType


class TestEventBus:
    """Tests for EventBus."""

    def test_event_timestamped(self) -> None:
        event = Event(EventType.SHUTDOWN, None)
        assert event.timestamp_us > 0

    def test_publish_sync(self, event_bus: EventBus) -> None:
        received: list[Any] = []
        event_bus.subscribe_sync(EventType.ROUTE_FOUND, lambda e: received.append(e.payload))

        event_bus.publish_sync(Event(EventType.ROUTE_FOUND, "route"))
        event_bus.publish_sync(Event(EventType.SCAN_COMPLETE, "report"))

        assert received == ["route"]

    def test_priority_order(self, event_bus: EventBus) -> None:
        """Higher priority handlers run first."""
        order: list[str] = []
        event_bus.subscribe_sync(EventType.SCAN_COMPLETE, lambda e: order.append("low"), priority=0)
        event_bus.subscribe_sync(EventType.SCAN_COMPLETE, lambda e: order.append("high"), priority=10)

        event_bus.publish_sync(Event(EventType.SCAN_COMPLETE, None))

        assert order == ["high", "low"]

    def test_failing_handler_isolated(self, event_bus: EventBus) -> None:
        """A handler error does not stop delivery."""
        received: list[Any] = []

        def broken(event: Event[Any]) -> None:
            raise RuntimeError("boom")

        event_bus.subscribe_sync(EventType.ROUTE_FOUND, broken, priority=1)
        event_bus.subscribe_sync(EventType.ROUTE_FOUND, lambda e: received.append(e.payload))

        event_bus.publish_sync(Event(EventType.ROUTE_FOUND, 1))

        assert received == [1]

    def test_unsubscribe(self, event_bus: EventBus) -> None:
        received: list[Any] = []
        handler = received.append
        event_bus.subscribe_sync(EventType.ROUTE_FOUND, handler)

        assert event_bus.unsubscribe(EventType.ROUTE_FOUND, handler)
        assert not event_bus.unsubscribe(EventType.ROUTE_FOUND, handler)

        event_bus.publish_sync(Event(EventType.ROUTE_FOUND, 1))
        assert received == []
        assert event_bus.handler_count(EventType.ROUTE_FOUND) == 0

    @pytest.mark.asyncio
    async def test_publish_async(self, event_bus: EventBus) -> None:
        """Async publish runs sync handlers, then awaits async ones."""
        order: list[str] = []

        async def async_handler(event: Event[Any]) -> None:
            order.append("async")

        event_bus.subscribe(EventType.RATE_UPDATED, async_handler)
        event_bus.subscribe_sync(EventType.RATE_UPDATED, lambda e: order.append("sync"))

        await event_bus.publish(Event(EventType.RATE_UPDATED, None))

        assert order == ["sync", "async"]

    def test_clear(self, event_bus: EventBus) -> None:
        event_bus.subscribe_sync(EventType.ROUTE_FOUND, lambda e: None)
        event_bus.subscribe_sync(EventType.SCAN_FAILED, lambda e: None)

        event_bus.clear(EventType.ROUTE_FOUND)
        assert event_bus.handler_count(EventType.ROUTE_FOUND) == 0
        assert event_bus.handler_count(EventType.SCAN_FAILED) == 1

        event_bus.clear()
        assert event_bus.handler_count(EventType.SCAN_FAILED) == 0
