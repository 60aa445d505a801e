"""
Internal event bus for decoupled communication.

Connects the rate fetcher and scan driver to reporting sinks
without either side knowing about the other.
"""

import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Generic, TypeVar

from arbcycle.utils.time import get_timestamp_us


logger = logging.getLogger(__name__)


class EventType(Enum):
    """System event types."""

    # Rate graph events
    RATE_REQUESTED = auto()
    RATE_UPDATED = auto()
    RATE_FETCH_FAILED = auto()

    # Scan events
    ROUTE_FOUND = auto()
    SCAN_FAILED = auto()
    SCAN_COMPLETE = auto()

    # System events
    SHUTDOWN = auto()


T = TypeVar("T")


@dataclass
class Event(Generic[T]):
    """Generic event with typed payload."""

    type: EventType
    payload: T
    timestamp_us: int = 0
    source: str = ""

    def __post_init__(self) -> None:
        if not self.timestamp_us:
            self.timestamp_us = get_timestamp_us()


# Type alias for event handlers
EventHandler = Callable[[Event[Any]], Awaitable[None]]
SyncEventHandler = Callable[[Event[Any]], None]


class EventBus:
    """
    Event bus for internal messaging.

    Sync handlers run inline, which is what the synchronous scan path
    uses. Async handlers are awaited by publish(). A failing handler is
    logged and never stops delivery to the others.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[tuple[int, EventHandler]]] = defaultdict(list)
        self._sync_handlers: dict[EventType, list[tuple[int, SyncEventHandler]]] = defaultdict(list)

    def subscribe(
        self,
        event_type: EventType,
        handler: EventHandler,
        priority: int = 0,
    ) -> None:
        """
        Subscribe an async handler to an event type.

        Args:
            event_type: Event type to handle.
            handler: Async handler function.
            priority: Handler priority (higher = earlier execution).
        """
        self._handlers[event_type].append((priority, handler))
        self._handlers[event_type].sort(key=lambda x: x[0], reverse=True)

    def subscribe_sync(
        self,
        event_type: EventType,
        handler: SyncEventHandler,
        priority: int = 0,
    ) -> None:
        """Subscribe a sync handler to an event type."""
        self._sync_handlers[event_type].append((priority, handler))
        self._sync_handlers[event_type].sort(key=lambda x: x[0], reverse=True)

    def unsubscribe(
        self,
        event_type: EventType,
        handler: EventHandler | SyncEventHandler,
    ) -> bool:
        """
        Unsubscribe a handler.

        Returns:
            True if handler was found and removed.
        """
        for handlers in (self._handlers[event_type], self._sync_handlers[event_type]):
            for i, (_, h) in enumerate(handlers):
                if h is handler:
                    handlers.pop(i)
                    return True

        return False

    async def publish(self, event: Event[Any]) -> None:
        """Publish an event to sync handlers, then await async handlers."""
        self.publish_sync(event)

        for _, async_handler in self._handlers[event.type]:
            try:
                await async_handler(event)
            except Exception as e:
                logger.error(f"Async handler error for {event.type}: {e}")

    def publish_sync(self, event: Event[Any]) -> None:
        """
        Publish event synchronously (sync handlers only).

        Used from the search path, which must never await.
        """
        for _, handler in self._sync_handlers[event.type]:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Sync handler error for {event.type}: {e}")

    def clear(self, event_type: EventType | None = None) -> None:
        """Clear handlers for one type, or all of them."""
        if event_type:
            self._handlers[event_type].clear()
            self._sync_handlers[event_type].clear()
        else:
            self._handlers.clear()
            self._sync_handlers.clear()

    def handler_count(self, event_type: EventType) -> int:
        """Get number of handlers for an event type."""
        return len(self._handlers[event_type]) + len(self._sync_handlers[event_type])
