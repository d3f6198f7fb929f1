"""In-memory track catalogue for offline sessions and tests."""

from typing import Dict, Iterable, List, Optional

import structlog

from ..emotion.base import Emotion
from ..playback.base import Track
from .base import TrackFetchError, TrackProvider

logger = structlog.get_logger(__name__)


class StaticTrackProvider(TrackProvider):
    """
    Serves tracks from a fixed per-emotion catalogue.

    Tracks are returned in catalogue order. Every request is recorded in
    ``requests`` as ``(emotion, count)``. Setting ``fail_with`` makes the
    next request raise that error.
    """

    def __init__(self, catalogue: Optional[Dict[Emotion, Iterable[Track]]] = None):
        self.catalogue: Dict[Emotion, List[Track]] = {
            Emotion(emotion): list(tracks) for emotion, tracks in (catalogue or {}).items()
        }
        self.requests: List[tuple] = []
        self.fail_with: Optional[TrackFetchError] = None

    async def fetch_tracks_for_mood(self, emotion: Emotion, count: int) -> List[Track]:
        emotion = Emotion(emotion)
        self.requests.append((emotion, count))

        if self.fail_with is not None:
            error, self.fail_with = self.fail_with, None
            raise error

        tracks = self.catalogue.get(emotion, [])[:count]
        logger.debug("static_tracks_served", emotion=emotion.value, count=len(tracks))
        return tracks

    @classmethod
    def demo(cls, per_mood: int = 3) -> "StaticTrackProvider":
        """Catalogue of placeholder tracks for every mood."""
        catalogue = {}
        for emotion in Emotion:
            catalogue[emotion] = [
                Track(
                    id=f"{emotion.value}-{i}",
                    title=f"{emotion.value.title()} Track {i}",
                    artist="MoodPlay Demo",
                    stream_url=f"memory://{emotion.value}/{i}",
                    duration_seconds=180.0 + 15 * i,
                )
                for i in range(1, per_mood + 1)
            ]
        return cls(catalogue)
