"""
In-Process Event Bus
====================

Async publish/subscribe used to surface session notifications
(queue changes, fetch failures, playback failures) to whatever UI or
collaborator layer sits on top of a session.

Delivery is sequential and in publish order on the running event loop.
A failing handler is logged and never prevents delivery to the others.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Deque, Dict, Iterable, List, Optional, Set
from uuid import uuid4

import structlog

from moodplay_core.core.scheduler import now_ms

logger = structlog.get_logger(__name__)

EventHandler = Callable[["Event"], Awaitable[None]]


class EventType(str, Enum):
    """Notification types"""

    # Session lifecycle
    SESSION_STARTED = "session.started"
    SESSION_STOPPED = "session.stopped"
    SESSION_RESET = "session.reset"

    # Music selection
    MUSIC_REPLACED = "music.replaced"
    MUSIC_APPENDED = "music.appended"
    NO_TRACKS_FOUND = "music.no_tracks_found"
    TRACK_FETCH_FAILED = "music.fetch_failed"
    STALE_FETCH_DISCARDED = "music.stale_fetch_discarded"

    # Playback
    TRACK_LOADED = "playback.track_loaded"
    PLAYBACK_FAILED = "playback.failed"


@dataclass
class Event:
    """A single notification"""

    type: EventType
    data: Dict[str, Any] = field(default_factory=dict)
    source: str = ""
    timestamp_ms: float = field(default_factory=now_ms)
    id: str = field(default_factory=lambda: uuid4().hex)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "data": self.data,
            "source": self.source,
            "timestamp_ms": self.timestamp_ms,
        }


@dataclass
class EventSubscriber:
    """Registered handler with an optional type filter"""

    id: str
    handler: EventHandler
    event_types: Optional[Set[EventType]] = None

    def accepts(self, event: Event) -> bool:
        return self.event_types is None or event.type in self.event_types


class EventBus:
    """
    Async in-memory event bus.

    Usage:
        bus = EventBus()

        async def on_failure(event: Event):
            print(event.data["message"])

        bus.subscribe(on_failure, [EventType.TRACK_FETCH_FAILED])
        await bus.emit(EventType.TRACK_FETCH_FAILED, {"message": "timeout"})
    """

    def __init__(self, history_size: int = 200):
        self._subscribers: Dict[str, EventSubscriber] = {}
        self._history: Deque[Event] = deque(maxlen=history_size)

    def subscribe(
        self,
        handler: EventHandler,
        event_types: Optional[Iterable[EventType]] = None,
    ) -> str:
        """Register a handler; returns the subscription id"""
        subscription_id = uuid4().hex
        self._subscribers[subscription_id] = EventSubscriber(
            id=subscription_id,
            handler=handler,
            event_types=set(event_types) if event_types is not None else None,
        )
        return subscription_id

    def unsubscribe(self, subscription_id: str) -> bool:
        return self._subscribers.pop(subscription_id, None) is not None

    async def publish(self, event: Event) -> None:
        """Deliver an event to every matching subscriber"""
        self._history.append(event)

        for subscriber in list(self._subscribers.values()):
            if not subscriber.accepts(event):
                continue
            try:
                await subscriber.handler(event)
            except Exception as e:
                logger.error(
                    "event_handler_failed",
                    event_type=event.type.value,
                    subscription_id=subscriber.id,
                    error=str(e),
                )

    async def emit(
        self,
        event_type: EventType,
        data: Optional[Dict[str, Any]] = None,
        source: str = "",
    ) -> Event:
        """Build and publish an event"""
        event = Event(type=event_type, data=data or {}, source=source)
        await self.publish(event)
        return event

    def get_history(self, event_type: Optional[EventType] = None) -> List[Event]:
        if event_type is None:
            return list(self._history)
        return [e for e in self._history if e.type == event_type]

    def clear_history(self) -> None:
        self._history.clear()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
