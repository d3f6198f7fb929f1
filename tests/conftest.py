"""Shared pytest fixtures for testing."""

import asyncio
from typing import List

import pytest

from moodplay_core.config import AnalyticsConfig, PlaybackConfig, Settings
from moodplay_core.core.event_bus import EventBus
from moodplay_core.emotion.base import Emotion
from moodplay_core.playback.base import Track
from moodplay_core.playback.controller import QueueController
from moodplay_core.playback.sinks import HeadlessAudioSink
from moodplay_core.session.service import MoodSession
from moodplay_core.tracks.static import StaticTrackProvider


# =============================================================================
# Helpers
# =============================================================================


def make_track(track_id: str, duration: float = 180.0) -> Track:
    return Track(
        id=track_id,
        title=f"Track {track_id}",
        artist="Test Artist",
        stream_url=f"memory://{track_id}",
        duration_seconds=duration,
    )


def make_tracks(prefix: str, count: int = 3) -> List[Track]:
    return [make_track(f"{prefix}-{i}") for i in range(count)]


class ManualClock:
    """Epoch-millisecond clock moved by the test."""

    def __init__(self, now_ms: float = 1_000_000.0):
        self.now_ms = now_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


class BlockingProvider(StaticTrackProvider):
    """Static provider whose fetches wait until the test releases them."""

    def __init__(self, catalogue=None):
        super().__init__(catalogue)
        self.release = asyncio.Event()

    async def fetch_tracks_for_mood(self, emotion, count):
        await self.release.wait()
        return await super().fetch_tracks_for_mood(emotion, count)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings with short timers."""
    return Settings(
        playback=PlaybackConfig(autoplay_delay_s=0.05, progress_interval_s=0.01),
        analytics=AnalyticsConfig(clock_interval_s=0.01),
    )


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def sink() -> HeadlessAudioSink:
    return HeadlessAudioSink()


@pytest.fixture
def player(sink, settings, bus) -> QueueController:
    return QueueController(sink, config=settings.playback, event_bus=bus)


@pytest.fixture
def catalogue():
    return {
        Emotion.HAPPY: make_tracks("happy"),
        Emotion.SAD: make_tracks("sad"),
        Emotion.ANGRY: make_tracks("angry"),
    }


@pytest.fixture
def track_factory():
    """Builds ``count`` tracks with ids ``<prefix>-0``, ``<prefix>-1``, ..."""
    return make_tracks


@pytest.fixture
def provider(catalogue) -> StaticTrackProvider:
    return StaticTrackProvider(catalogue)


@pytest.fixture
def blocking_provider(catalogue) -> BlockingProvider:
    return BlockingProvider(catalogue)


@pytest.fixture
def session(provider, sink, settings, bus, clock) -> MoodSession:
    return MoodSession(
        provider,
        sink,
        settings=settings,
        event_bus=bus,
        clock=clock,
        auto_clock=False,
    )
