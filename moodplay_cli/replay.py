"""Replay a recorded classifier feed through a headless mood session."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, TypeAdapter

from moodplay_core.analytics.reports import build_session_report
from moodplay_core.config import Settings
from moodplay_core.core.event_bus import Event, EventBus
from moodplay_core.emotion.base import Emotion, EmotionTick
from moodplay_core.playback.sinks import HeadlessAudioSink
from moodplay_core.session.service import MoodSession
from moodplay_core.tracks.base import TrackProvider


class TickRecord(BaseModel):
    """One line of a recorded feed."""

    emotion: Emotion
    confidence: float = Field(ge=0.0, le=100.0)
    timestamp_ms: Optional[float] = None


_records = TypeAdapter(List[TickRecord])


def load_ticks(path: Path, interval_ms: float = 500.0) -> List[EmotionTick]:
    """
    Read a JSON feed: either a list of ticks or ``{"ticks": [...]}``.

    Ticks without a timestamp are spaced ``interval_ms`` after the previous one.
    """
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("ticks", [])

    ticks: List[EmotionTick] = []
    last = 0.0
    for i, record in enumerate(_records.validate_python(payload)):
        if record.timestamp_ms is not None:
            timestamp = record.timestamp_ms
        else:
            timestamp = last + interval_ms if i else 0.0
        ticks.append(EmotionTick(record.emotion, record.confidence, timestamp))
        last = timestamp
    return ticks


class ReplayClock:
    """Session clock that only moves when the replay says so."""

    def __init__(self, start_ms: float = 0.0):
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms


async def replay_session(
    ticks: List[EmotionTick],
    provider: TrackProvider,
    settings: Settings,
) -> Dict[str, Any]:
    """Run every tick through a fresh session and summarize the result."""
    clock = ReplayClock(ticks[0].timestamp_ms if ticks else 0.0)
    bus = EventBus()
    notifications: List[Dict[str, Any]] = []

    async def collect(event: Event) -> None:
        notifications.append({"type": event.type.value, **event.data})

    bus.subscribe(collect)

    session = MoodSession(
        provider,
        HeadlessAudioSink(),
        settings=settings,
        event_bus=bus,
        clock=clock,
        auto_clock=False,
    )

    try:
        await session.start_session()
        for tick in ticks:
            clock.now_ms = tick.timestamp_ms
            await session.on_emotion_tick(tick)
            await session.wait_for_fetch()
            session.aggregator.update_duration()
        await session.stop_session()

        snapshot = session.get_snapshot()
        return {
            "queue": session.player.queue.to_dict(),
            "current_emotion": session.current_emotion.value if session.current_emotion else None,
            "notifications": notifications,
            "report": build_session_report(snapshot),
        }
    finally:
        await session.close()
