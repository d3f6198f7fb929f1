"""
Playback

Queue controller, transport state and audio sinks.
"""

from .base import (
    AudioSink,
    PlaybackError,
    PlaybackQueue,
    SinkEvent,
    Track,
    TransportState,
)
from .controller import SINK_TRANSITIONS, QueueController, SinkTransition
from .sinks import HeadlessAudioSink

__all__ = [
    "AudioSink",
    "PlaybackError",
    "PlaybackQueue",
    "SinkEvent",
    "Track",
    "TransportState",
    "SINK_TRANSITIONS",
    "QueueController",
    "SinkTransition",
    "HeadlessAudioSink",
]
