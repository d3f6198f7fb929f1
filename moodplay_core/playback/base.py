"""
Playback Types and Interfaces

Tracks, the ordered playback queue, transport state, and the audio sink
capability interface the queue controller drives.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ..core.errors import MoodPlayError


# =============================================================================
# Tracks and Queue
# =============================================================================


@dataclass(frozen=True)
class Track:
    """A streamable track returned by a track provider."""

    id: str
    title: str
    artist: str
    stream_url: str
    duration_seconds: float
    artwork_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "stream_url": self.stream_url,
            "duration_seconds": self.duration_seconds,
            "artwork_url": self.artwork_url,
        }


@dataclass
class PlaybackQueue:
    """
    Ordered tracks plus the index of the current one.

    An empty queue keeps ``current_index`` at 0; the value carries no
    meaning until a track is added.
    """

    tracks: List[Track] = field(default_factory=list)
    current_index: int = 0

    def __len__(self) -> int:
        return len(self.tracks)

    @property
    def is_empty(self) -> bool:
        return not self.tracks

    @property
    def current(self) -> Optional[Track]:
        if self.is_empty:
            return None
        return self.tracks[self.current_index]

    def next_index(self) -> int:
        return (self.current_index + 1) % len(self.tracks)

    def previous_index(self) -> int:
        if self.current_index == 0:
            return len(self.tracks) - 1
        return self.current_index - 1

    def validate(self) -> None:
        """Halt on a broken index; reaching this is a programming error."""
        if self.tracks:
            assert 0 <= self.current_index < len(self.tracks), (
                f"queue index {self.current_index} outside 0..{len(self.tracks) - 1}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tracks": [t.to_dict() for t in self.tracks],
            "current_index": self.current_index,
        }


@dataclass
class TransportState:
    """Playback transport flags as the UI sees them."""

    is_playing: bool = False
    position_percent: float = 0.0  # 0 to 100
    volume: float = 0.7            # 0.0 to 1.0
    is_loading: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_playing": self.is_playing,
            "position_percent": round(self.position_percent, 2),
            "volume": round(self.volume, 3),
            "is_loading": self.is_loading,
        }


# =============================================================================
# Audio Sink
# =============================================================================


class SinkEvent(str, Enum):
    """Signals an audio sink emits."""

    LOADSTART = "loadstart"
    CANPLAY = "canplay"
    ENDED = "ended"
    ERROR = "error"


SinkListener = Callable[[SinkEvent], Awaitable[None]]


class PlaybackError(MoodPlayError):
    """The audio sink refused or failed to play."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="PLAYBACK_FAILED", **kwargs)


class AudioSink(ABC):
    """
    Audio output device.

    Accepts a stream reference, exposes transport controls and reports
    progress through ``current_time``/``duration``. Emits exactly the four
    SinkEvent signals to registered listeners.
    """

    def __init__(self):
        self._listeners: List[SinkListener] = []

    def add_listener(self, listener: SinkListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SinkListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def _notify(self, event: SinkEvent) -> None:
        for listener in list(self._listeners):
            await listener(event)

    @abstractmethod
    def load(self, stream_url: str, duration_hint: Optional[float] = None) -> None:
        """Point the sink at a new stream; playback position resets."""
        pass

    @abstractmethod
    async def play(self) -> None:
        """Start or resume output. Raises PlaybackError on failure."""
        pass

    @abstractmethod
    def pause(self) -> None:
        pass

    @abstractmethod
    def seek(self, seconds: float) -> None:
        pass

    @abstractmethod
    def set_volume(self, level: float) -> None:
        pass

    @property
    @abstractmethod
    def current_time(self) -> float:
        """Playback position in seconds."""
        pass

    @property
    @abstractmethod
    def duration(self) -> Optional[float]:
        """Length of the loaded stream in seconds, if known."""
        pass
