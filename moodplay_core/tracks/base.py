"""
Track Provider Interface.

Maps moods to genre keywords and defines the contract every track
source implements.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple, Union

from ..core.errors import MoodPlayError
from ..emotion.base import Emotion
from ..playback.base import Track


MOOD_GENRES: Dict[Emotion, Tuple[str, ...]] = {
    Emotion.NEUTRAL: ("chill", "ambient", "soft pop", "indie"),
    Emotion.HAPPY: ("pop", "upbeat", "dance", "feel good"),
    Emotion.SAD: ("sad", "melancholy", "emotional", "acoustic"),
    Emotion.ANGRY: ("rock", "metal", "intense", "aggressive"),
    Emotion.SURPRISED: ("electronic", "experimental", "energetic"),
    Emotion.FEARFUL: ("dark ambient", "cinematic", "atmospheric"),
    Emotion.DISGUSTED: ("alternative", "grunge", "punk"),
}


def genres_for_mood(mood: Union[Emotion, str]) -> Tuple[str, ...]:
    """Genre keywords for a mood; unknown moods get the neutral set."""
    try:
        return MOOD_GENRES[Emotion(mood)]
    except ValueError:
        return MOOD_GENRES[Emotion.NEUTRAL]


class TrackFetchError(MoodPlayError):
    """Track lookup failed (network, timeout, bad status or malformed body)."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, code="TRACK_FETCH_FAILED", **kwargs)
        self.status_code = status_code


class TrackProvider(ABC):
    """Source of streamable tracks for a mood."""

    @abstractmethod
    async def fetch_tracks_for_mood(self, emotion: Emotion, count: int) -> List[Track]:
        """
        Return up to ``count`` tracks suited to the mood.

        An empty list means nothing matched. Raises TrackFetchError when
        the source could not be queried.
        """
        pass

    async def close(self) -> None:
        pass
