"""
Playback Queue Controller
=========================

Owns the ordered track queue, the transport state and a single audio sink.

Sink signals drive transport flags through SINK_TRANSITIONS, a fixed
table of event -> state changes plus an optional follow-up action:

    loadstart   is_loading = True
    canplay     is_loading = False                      (track loaded)
    ended       is_playing = False                      -> advance
    error       is_loading = False, is_playing = False  -> report failure

Navigation is circular: next() from the last track wraps to the first,
previous() from the first wraps to the last.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import structlog

from ..config import PlaybackConfig
from ..core.event_bus import EventBus, EventType
from ..core.scheduler import DelayedCall, PeriodicTask
from .base import (
    AudioSink,
    PlaybackError,
    PlaybackQueue,
    SinkEvent,
    Track,
    TransportState,
)

logger = structlog.get_logger(__name__)


# =============================================================================
# Transition Table
# =============================================================================


ADVANCE = "advance"
REPORT_FAILURE = "report_failure"
ANNOUNCE_LOADED = "announce_loaded"


@dataclass(frozen=True)
class SinkTransition:
    """State changes applied when a sink signal arrives."""

    is_playing: Optional[bool] = None
    is_loading: Optional[bool] = None
    follow_up: Optional[str] = None

    def apply(self, transport: TransportState) -> None:
        if self.is_playing is not None:
            transport.is_playing = self.is_playing
        if self.is_loading is not None:
            transport.is_loading = self.is_loading


SINK_TRANSITIONS: Dict[SinkEvent, SinkTransition] = {
    SinkEvent.LOADSTART: SinkTransition(is_loading=True),
    SinkEvent.CANPLAY: SinkTransition(is_loading=False, follow_up=ANNOUNCE_LOADED),
    SinkEvent.ENDED: SinkTransition(is_playing=False, follow_up=ADVANCE),
    SinkEvent.ERROR: SinkTransition(
        is_playing=False, is_loading=False, follow_up=REPORT_FAILURE
    ),
}


# =============================================================================
# Controller
# =============================================================================


class QueueController:
    """
    Playback queue and transport for one session.

    Usage:
        player = QueueController(HeadlessAudioSink(), event_bus=bus)
        await player.replace_and_load(tracks)   # autoplays after a delay
        await player.next()
        player.seek(50)
    """

    def __init__(
        self,
        sink: AudioSink,
        config: Optional[PlaybackConfig] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.config = config or PlaybackConfig()
        self.sink = sink
        self.event_bus = event_bus

        self.queue = PlaybackQueue()
        self.transport = TransportState(volume=self.config.default_volume)
        self.current_track: Optional[Track] = None

        self._autoplay: Optional[DelayedCall] = None
        self._progress: Optional[PeriodicTask] = None

        self.sink.set_volume(self.transport.volume)
        self.sink.add_listener(self.handle_sink_event)

    # -------------------------------------------------------------------------
    # Queue
    # -------------------------------------------------------------------------

    async def replace_and_load(self, tracks: Iterable[Track]) -> None:
        """Swap in a new queue, load its first track and schedule autoplay."""
        tracks = list(tracks)

        self.pause()
        self._cancel_autoplay()
        self.queue = PlaybackQueue(tracks=tracks, current_index=0)
        self.current_track = None
        self.transport.position_percent = 0.0

        if not tracks:
            self.transport.is_loading = False
            logger.debug("queue_replaced_empty")
            return

        self._load(tracks[0])
        self._autoplay = DelayedCall(
            "autoplay", self.config.autoplay_delay_s, self.play
        ).start()

        logger.info("queue_replaced", tracks=len(tracks), first=tracks[0].id)
        self._check_invariants()

    def append_to_queue(self, tracks: Iterable[Track]) -> None:
        """Add tracks to the tail; the current track and transport are untouched."""
        tracks = list(tracks)
        if not tracks:
            return

        was_empty = self.queue.is_empty
        self.queue.tracks.extend(tracks)

        if was_empty:
            self.queue.current_index = 0
            if self.current_track is None:
                self._load(tracks[0])

        logger.info("queue_appended", added=len(tracks), size=len(self.queue))
        self._check_invariants()

    def clear(self) -> None:
        """Stop playback and empty the queue."""
        self.pause()
        self._cancel_autoplay()
        self.queue = PlaybackQueue()
        self.current_track = None
        self.transport.position_percent = 0.0
        self.transport.is_loading = False
        logger.debug("queue_cleared")

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def play(self) -> bool:
        """Start output; returns False when nothing played."""
        if self.current_track is None:
            logger.debug("play_ignored_no_track")
            return False

        try:
            await self.sink.play()
        except PlaybackError as e:
            self.transport.is_playing = False
            self._stop_progress()
            logger.warning(
                "playback_failed", track_id=self.current_track.id, error=e.message
            )
            await self._publish(
                EventType.PLAYBACK_FAILED,
                {"track_id": self.current_track.id, "message": e.message},
            )
            return False

        self.transport.is_playing = True
        self._start_progress()
        return True

    def pause(self) -> None:
        self.sink.pause()
        self.transport.is_playing = False
        self._stop_progress()

    async def toggle_play_pause(self) -> None:
        if self.transport.is_playing:
            self.pause()
        else:
            await self.play()

    async def next(self) -> None:
        if self.queue.is_empty:
            return
        await self._jump(self.queue.next_index())

    async def previous(self) -> None:
        if self.queue.is_empty:
            return
        await self._jump(self.queue.previous_index())

    async def _jump(self, index: int) -> None:
        was_playing = self.transport.is_playing
        self.queue.current_index = index
        self._check_invariants()

        self._load(self.queue.tracks[index])
        if was_playing:
            await self.play()

    def seek(self, percent: float) -> Optional[float]:
        """
        Move the play head to a percentage of the loaded track.

        Returns the target position in seconds, or None when nothing with
        a known duration is loaded.
        """
        if self.current_track is None:
            return None

        duration = self.sink.duration or self.current_track.duration_seconds
        if not duration:
            return None

        percent = min(max(float(percent), 0.0), 100.0)
        if percent >= 100.0:
            seconds = float(duration)
        else:
            seconds = duration * percent / 100.0

        self.sink.seek(seconds)
        self.transport.position_percent = percent
        return seconds

    def set_volume(self, level: float) -> float:
        level = min(max(float(level), 0.0), 1.0)
        self.transport.volume = level
        self.sink.set_volume(level)
        return level

    def refresh_progress(self) -> None:
        """Sample the sink play head into position_percent."""
        duration = self.sink.duration
        if not duration:
            return
        self.transport.position_percent = min(
            100.0, max(0.0, self.sink.current_time / duration * 100.0)
        )

    # -------------------------------------------------------------------------
    # Sink Events
    # -------------------------------------------------------------------------

    async def handle_sink_event(self, event: SinkEvent) -> None:
        transition = SINK_TRANSITIONS[event]
        was_playing = self.transport.is_playing

        transition.apply(self.transport)
        if not self.transport.is_playing:
            self._stop_progress()

        if transition.follow_up == ADVANCE:
            await self._advance_after_end(was_playing)
        elif transition.follow_up == REPORT_FAILURE:
            await self._report_sink_error()
        elif transition.follow_up == ANNOUNCE_LOADED and self.current_track is not None:
            await self._publish(EventType.TRACK_LOADED, self.current_track.to_dict())

    async def _advance_after_end(self, was_playing: bool) -> None:
        logger.debug(
            "track_ended",
            track_id=self.current_track.id if self.current_track else None,
            was_playing=was_playing,
        )
        await self.next()
        if was_playing and self.config.auto_advance_resumes:
            await self.play()

    async def _report_sink_error(self) -> None:
        track_id = self.current_track.id if self.current_track else None
        logger.warning("sink_error", track_id=track_id)
        await self._publish(
            EventType.PLAYBACK_FAILED,
            {"track_id": track_id, "message": "Audio device reported an error"},
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _load(self, track: Track) -> None:
        self.sink.load(track.stream_url, duration_hint=track.duration_seconds)
        self.current_track = track
        self.transport.position_percent = 0.0
        self.transport.is_loading = True
        logger.debug("track_loaded", track_id=track.id, title=track.title)

    def _cancel_autoplay(self) -> None:
        if self._autoplay is not None:
            self._autoplay.cancel()
            self._autoplay = None

    @property
    def autoplay_pending(self) -> bool:
        return self._autoplay is not None and self._autoplay.pending

    def _start_progress(self) -> None:
        if self._progress is None:
            self._progress = PeriodicTask(
                "playback_progress", self.config.progress_interval_s, self.refresh_progress
            ).start()

    def _stop_progress(self) -> None:
        if self._progress is not None:
            self._progress.cancel()
            self._progress = None

    def _check_invariants(self) -> None:
        self.queue.validate()
        if self.current_track is not None and not self.queue.is_empty:
            assert self.current_track in self.queue.tracks, "loaded track is not queued"

    async def _publish(self, event_type: EventType, data: dict) -> None:
        if self.event_bus is not None:
            await self.event_bus.emit(event_type, data, source="player")

    def get_state(self) -> dict:
        return {
            "current_track": self.current_track.to_dict() if self.current_track else None,
            "queue": self.queue.to_dict(),
            "transport": self.transport.to_dict(),
        }

    def close(self) -> None:
        """Stop everything and detach from the sink."""
        self.clear()
        self.sink.remove_listener(self.handle_sink_event)
