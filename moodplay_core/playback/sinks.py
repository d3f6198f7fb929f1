"""
Headless Audio Sink

Simulated output device with no audio hardware behind it. It keeps
position and volume, and lets the owner drive the four sink signals:
the CLI uses it to replay sessions and the tests use it to script
device behaviour.
"""

import asyncio
from typing import List, Optional

import structlog

from .base import AudioSink, PlaybackError, SinkEvent

logger = structlog.get_logger(__name__)


class HeadlessAudioSink(AudioSink):
    """
    Audio sink that plays nothing.

    Args:
        auto_ready: Emit loadstart then canplay on the event loop after each load
    """

    def __init__(self, auto_ready: bool = False):
        super().__init__()
        self.auto_ready = auto_ready

        self.stream_url: Optional[str] = None
        self.playing = False
        self.volume = 1.0
        self._position = 0.0
        self._duration: Optional[float] = None

        self.fail_next_play: Optional[str] = None
        self.load_history: List[str] = []
        self.play_calls = 0
        self._pending: List[asyncio.Task] = []

    # -------------------------------------------------------------------------
    # AudioSink
    # -------------------------------------------------------------------------

    def load(self, stream_url: str, duration_hint: Optional[float] = None) -> None:
        self.stream_url = stream_url
        self.playing = False
        self._position = 0.0
        self._duration = duration_hint
        self.load_history.append(stream_url)

        if self.auto_ready:
            self._pending = [task for task in self._pending if not task.done()]
            self._pending.append(asyncio.get_running_loop().create_task(self._announce_ready()))

    async def play(self) -> None:
        self.play_calls += 1
        if self.stream_url is None:
            raise PlaybackError("No stream loaded")
        if self.fail_next_play is not None:
            reason, self.fail_next_play = self.fail_next_play, None
            raise PlaybackError(reason)
        self.playing = True

    def pause(self) -> None:
        self.playing = False

    def seek(self, seconds: float) -> None:
        upper = self._duration if self._duration is not None else seconds
        self._position = min(max(0.0, seconds), upper)

    def set_volume(self, level: float) -> None:
        self.volume = level

    @property
    def current_time(self) -> float:
        return self._position

    @property
    def duration(self) -> Optional[float]:
        return self._duration

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    async def emit(self, event: SinkEvent) -> None:
        """Deliver a device signal to listeners."""
        logger.debug("sink_event", sink_event=event.value, stream_url=self.stream_url)
        if event in (SinkEvent.ENDED, SinkEvent.ERROR):
            self.playing = False
        await self._notify(event)

    async def advance(self, seconds: float) -> None:
        """Move the play head forward; emits ended when it reaches the end."""
        if not self.playing:
            return
        self._position += seconds
        if self._duration is not None and self._position >= self._duration:
            self._position = self._duration
            await self.emit(SinkEvent.ENDED)

    async def _announce_ready(self) -> None:
        await self.emit(SinkEvent.LOADSTART)
        await self.emit(SinkEvent.CANPLAY)

    async def drain(self) -> None:
        """Wait for scheduled ready announcements."""
        pending, self._pending = self._pending, []
        if pending:
            await asyncio.gather(*pending)
