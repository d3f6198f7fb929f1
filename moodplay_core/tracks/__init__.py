"""
Track Providers

Mood-to-genre mapping and the sources the session pulls music from.
"""

from .audius import AudiusTrackProvider
from .base import MOOD_GENRES, TrackFetchError, TrackProvider, genres_for_mood
from .static import StaticTrackProvider

__all__ = [
    "AudiusTrackProvider",
    "MOOD_GENRES",
    "TrackFetchError",
    "TrackProvider",
    "genres_for_mood",
    "StaticTrackProvider",
]
