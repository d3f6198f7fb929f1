"""
Audius Track Provider

Searches the public Audius discovery API for tracks matching a mood.
Tracks stream straight from the discovery node; no API key is needed.
"""

import asyncio
import logging
import math
import random
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config import TrackProviderConfig
from ..emotion.base import Emotion
from ..playback.base import Track
from .base import TrackFetchError, TrackProvider, genres_for_mood

logger = logging.getLogger(__name__)


# =============================================================================
# Response Models
# =============================================================================


class AudiusUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class AudiusArtwork(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    size_480: Optional[str] = Field(default=None, alias="480x480")


class AudiusTrack(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    title: str
    user: AudiusUser
    artwork: Optional[AudiusArtwork] = None
    duration: float = 0.0


class AudiusTrackList(BaseModel):
    model_config = ConfigDict(extra="ignore")

    data: List[AudiusTrack] = Field(default_factory=list)


# =============================================================================
# Provider
# =============================================================================


class AudiusTrackProvider(TrackProvider):
    """
    Audius discovery API client.

    Usage:
        provider = AudiusTrackProvider()
        tracks = await provider.fetch_tracks_for_mood(Emotion.HAPPY, 3)
        await provider.close()
    """

    def __init__(
        self,
        config: Optional[TrackProviderConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or TrackProviderConfig()
        self.base_url = self.config.base_url.rstrip("/")
        self.timeout = self.config.timeout_s
        self._rng = rng or random.Random()
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Accept": "application/json"},
                timeout=httpx.Timeout(self.timeout),
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _request(self, path: str, params: Dict[str, Any]) -> AudiusTrackList:
        try:
            client = await self._get_client()
            response = await client.get(path, params=params)
        except httpx.TimeoutException:
            raise TrackFetchError(f"Audius request timed out after {self.timeout}s")
        except httpx.HTTPError as e:
            raise TrackFetchError(
                "Failed to reach Audius API", details={"error": str(e), "path": path}
            )

        if not response.is_success:
            raise TrackFetchError(
                f"Audius API error: {response.status_code}",
                status_code=response.status_code,
                details={"path": path},
            )

        try:
            return AudiusTrackList.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise TrackFetchError(
                "Malformed Audius response", details={"error": str(e), "path": path}
            )

    def _to_track(self, item: AudiusTrack) -> Track:
        return Track(
            id=item.id,
            title=item.title,
            artist=item.user.name,
            stream_url=f"{self.base_url}/v1/tracks/{item.id}/stream",
            duration_seconds=item.duration,
            artwork_url=item.artwork.size_480 if item.artwork else None,
        )

    async def search_tracks(self, query: str, limit: int = 10) -> List[Track]:
        """Full-text track search."""
        result = await self._request("/v1/tracks/search", {"query": query, "limit": limit})
        return [self._to_track(item) for item in result.data]

    async def get_trending_tracks(
        self,
        genre: Optional[str] = None,
        limit: int = 20,
    ) -> List[Track]:
        params: Dict[str, Any] = {"limit": limit}
        if genre:
            params["genre"] = genre
        result = await self._request("/v1/tracks/trending", params)
        return [self._to_track(item) for item in result.data]

    async def fetch_tracks_for_mood(self, emotion: Emotion, count: int) -> List[Track]:
        """
        Query several genre keywords for the mood at once, shuffle the
        combined results and keep ``count`` of them.
        """
        genres = genres_for_mood(emotion)[: self.config.genres_per_search]
        per_genre = max(1, math.ceil(count / 2))

        mood = getattr(emotion, "value", emotion)
        logger.info(f"Fetching {count} tracks for mood '{mood}' from {list(genres)}")

        results = await asyncio.gather(
            *(self.search_tracks(genre, per_genre) for genre in genres)
        )

        tracks = [track for batch in results for track in batch]
        self._rng.shuffle(tracks)
        return tracks[:count]
