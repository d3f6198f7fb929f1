"""
Mood Session
============

Wires one classifier feed to the emotion gate, the playback queue and
the session aggregator.

    tick ──► aggregator (every tick, stats branch decides changes)
         └─► gate queue branch ──► track fetch ──► replace / append

A session object owns all of its mutable slots: the gate, the player,
the aggregator, the in-flight fetch flag and a generation token. Every
fetch remembers the generation it was dispatched in; results that come
back after a reset belong to an older generation and are dropped.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional, Set

import structlog

from ..analytics.aggregator import SessionAggregator
from ..analytics.base import Insight, SessionSnapshot
from ..analytics.insights import generate_insights
from ..config import Settings, get_settings
from ..core.event_bus import EventBus, EventType
from ..core.scheduler import now_ms
from ..emotion.base import Emotion, EmotionTick, QueueAction, QueueTrigger
from ..emotion.gate import EmotionGate
from ..playback.base import AudioSink, Track
from ..playback.controller import QueueController
from ..playback.sinks import HeadlessAudioSink
from ..tracks.base import TrackFetchError, TrackProvider

logger = structlog.get_logger(__name__)


class MoodSession:
    """
    One emotion-driven listening session.

    Usage:
        session = MoodSession(AudiusTrackProvider(), sink)
        await session.start_session()

        for tick in classifier_feed:
            await session.on_emotion_tick(tick)

        await session.stop_session()
        insights = session.generate_insights()
    """

    def __init__(
        self,
        provider: TrackProvider,
        sink: Optional[AudioSink] = None,
        settings: Optional[Settings] = None,
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], float] = now_ms,
        auto_clock: bool = True,
    ):
        self.settings = settings or get_settings()
        self.provider = provider
        self.event_bus = event_bus or EventBus()

        self.gate = EmotionGate(self.settings.gate)
        self.player = QueueController(
            sink or HeadlessAudioSink(),
            config=self.settings.playback,
            event_bus=self.event_bus,
        )
        self.aggregator = SessionAggregator(
            gate=self.gate,
            config=self.settings.analytics,
            clock=clock,
            auto_clock=auto_clock,
        )
        self.tracks_per_mood = self.settings.tracks.tracks_per_mood

        self.active = False
        self.generation = 0
        self.fetch_in_flight = False
        self._fetch_task: Optional[asyncio.Task] = None
        self._stale_tasks: Set[asyncio.Task] = set()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start_session(self) -> None:
        """
        Begin analysing.

        Statistics start from zero; the playback queue and the last
        queue-accepted emotion carry over until reset_session().
        """
        if self.active:
            return
        self.aggregator.start()
        self.active = True
        await self._publish(EventType.SESSION_STARTED, {"generation": self.generation})

    async def stop_session(self) -> None:
        """Pause analysis; music keeps playing."""
        if not self.active:
            return
        self.aggregator.stop()
        self.active = False
        await self._publish(
            EventType.SESSION_STOPPED,
            {"duration_ms": self.aggregator.duration_ms},
        )

    async def reset_session(self) -> None:
        """Discard statistics, the queue and any outstanding fetch result."""
        self.generation += 1
        self.fetch_in_flight = False
        self._retire_fetch()

        self.aggregator.reset()
        self.gate.reset()
        self.player.clear()
        self.active = False

        logger.info("mood_session_reset", generation=self.generation)
        await self._publish(EventType.SESSION_RESET, {"generation": self.generation})

    async def close(self) -> None:
        """Tear down timers and detach from the sink."""
        self.generation += 1
        self._retire_fetch()
        for task in list(self._stale_tasks):
            task.cancel()
        self._stale_tasks.clear()
        self.fetch_in_flight = False
        self.aggregator.stop()
        self.player.close()
        self.active = False

    def _retire_fetch(self) -> None:
        """Keep an outstanding fetch reachable so close() can cancel it."""
        task, self._fetch_task = self._fetch_task, None
        if task is not None and not task.done():
            self._stale_tasks.add(task)
            task.add_done_callback(self._stale_tasks.discard)

    # -------------------------------------------------------------------------
    # Tick Handling
    # -------------------------------------------------------------------------

    async def on_emotion_tick(self, tick: EmotionTick) -> Optional[asyncio.Task]:
        """
        Feed one classifier tick.

        Returns the background fetch task when the tick triggered one.
        """
        if not self.active:
            logger.debug("tick_dropped_inactive", emotion=tick.emotion.value)
            return None

        self.aggregator.add_entry(tick.emotion, tick.confidence, tick.timestamp_ms)

        trigger = self.gate.admit_for_queue(tick)
        if trigger is None:
            return None

        if self.fetch_in_flight:
            logger.info(
                "queue_trigger_dropped_fetch_in_flight",
                action=trigger.action.value,
                emotion=trigger.emotion.value,
            )
            return None

        self.fetch_in_flight = True
        self._fetch_task = asyncio.get_running_loop().create_task(
            self._fetch_and_apply(trigger, self.generation)
        )
        return self._fetch_task

    async def _fetch_and_apply(self, trigger: QueueTrigger, generation: int) -> None:
        emotion = trigger.emotion.value
        try:
            try:
                tracks = await self.provider.fetch_tracks_for_mood(
                    trigger.emotion, self.tracks_per_mood
                )
            except TrackFetchError as e:
                if generation != self.generation:
                    logger.info("stale_fetch_failure_ignored", emotion=emotion)
                    return
                logger.warning("track_fetch_failed", emotion=emotion, error=e.message)
                await self._publish(
                    EventType.TRACK_FETCH_FAILED,
                    {"emotion": emotion, "message": e.message},
                )
                return

            if generation != self.generation:
                logger.info(
                    "stale_fetch_discarded",
                    emotion=emotion,
                    fetch_generation=generation,
                    generation=self.generation,
                )
                await self._publish(
                    EventType.STALE_FETCH_DISCARDED,
                    {"emotion": emotion, "tracks": len(tracks)},
                )
                return

            if not tracks:
                await self._publish(EventType.NO_TRACKS_FOUND, {"emotion": emotion})
                return

            await self._apply(trigger, tracks)
        finally:
            if generation == self.generation:
                self.fetch_in_flight = False

    async def _apply(self, trigger: QueueTrigger, tracks: List[Track]) -> None:
        data = {
            "emotion": trigger.emotion.value,
            "count": len(tracks),
            "track_ids": [t.id for t in tracks],
        }

        if trigger.action == QueueAction.REPLACE:
            await self.player.replace_and_load(tracks)
            await self._publish(EventType.MUSIC_REPLACED, data)
        else:
            self.player.append_to_queue(tracks)
            await self._publish(EventType.MUSIC_APPENDED, data)

    async def wait_for_fetch(self) -> None:
        """Wait for the outstanding fetch, if any."""
        task = self._fetch_task
        if task is not None and not task.done():
            await task

    # -------------------------------------------------------------------------
    # Query
    # -------------------------------------------------------------------------

    @property
    def current_emotion(self) -> Optional[Emotion]:
        """Last emotion the queue branch accepted."""
        return self.gate.last_for_queue

    def get_snapshot(self) -> SessionSnapshot:
        return self.aggregator.snapshot()

    def generate_insights(self, snapshot: Optional[SessionSnapshot] = None) -> List[Insight]:
        if snapshot is None:
            snapshot = self.get_snapshot()
        return generate_insights(snapshot)

    def get_state(self) -> Dict[str, Any]:
        return {
            "active": self.active,
            "generation": self.generation,
            "fetch_in_flight": self.fetch_in_flight,
            "current_emotion": self.current_emotion.value if self.current_emotion else None,
            "player": self.player.get_state(),
            "snapshot": self.get_snapshot().to_dict(),
        }

    async def _publish(self, event_type: EventType, data: Dict[str, Any]) -> None:
        await self.event_bus.emit(event_type, data, source="session")
