"""Unit tests for the event bus."""

import pytest

from moodplay_core.core.event_bus import EventBus, EventType


class TestEventBus:
    """Tests for EventBus."""

    @pytest.mark.asyncio
    async def test_publish_to_all_subscribers(self):
        """Test delivery to unfiltered subscribers."""
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event.type)

        bus.subscribe(handler)
        await bus.emit(EventType.SESSION_STARTED)
        await bus.emit(EventType.MUSIC_REPLACED, {"emotion": "happy"})

        assert received == [EventType.SESSION_STARTED, EventType.MUSIC_REPLACED]

    @pytest.mark.asyncio
    async def test_type_filter(self):
        """Test that filtered subscribers only see their types."""
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event.data["message"])

        bus.subscribe(handler, [EventType.TRACK_FETCH_FAILED])
        await bus.emit(EventType.SESSION_STARTED)
        await bus.emit(EventType.TRACK_FETCH_FAILED, {"message": "timeout"})

        assert received == ["timeout"]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_block_others(self):
        """Test handler isolation."""
        bus = EventBus()
        received = []

        async def broken(event):
            raise RuntimeError("handler bug")

        async def healthy(event):
            received.append(event.id)

        bus.subscribe(broken)
        bus.subscribe(healthy)
        event = await bus.emit(EventType.NO_TRACKS_FOUND, {"emotion": "sad"})

        assert received == [event.id]

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        """Test removing a subscription."""
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        subscription = bus.subscribe(handler)
        assert bus.unsubscribe(subscription) is True
        assert bus.unsubscribe(subscription) is False

        await bus.emit(EventType.SESSION_RESET)
        assert received == []
        assert bus.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_bounded_history(self):
        """Test history size and filtering."""
        bus = EventBus(history_size=3)
        for _ in range(4):
            await bus.emit(EventType.MUSIC_APPENDED)
        await bus.emit(EventType.SESSION_STOPPED)

        assert len(bus.get_history()) == 3
        assert len(bus.get_history(EventType.SESSION_STOPPED)) == 1

        bus.clear_history()
        assert bus.get_history() == []

    @pytest.mark.asyncio
    async def test_event_to_dict(self):
        """Test event serialization."""
        bus = EventBus()
        event = await bus.emit(EventType.PLAYBACK_FAILED, {"track_id": "t1"}, source="player")

        data = event.to_dict()
        assert data["type"] == "playback.failed"
        assert data["data"] == {"track_id": "t1"}
        assert data["source"] == "player"
