"""
Data Models for Session Analytics.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from ..emotion.base import Emotion


class InsightKind(str, Enum):
    """Tone of an insight."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    CONCERN = "concern"


@dataclass(frozen=True)
class EmotionEntry:
    """One logged classification."""

    emotion: Emotion
    confidence: float
    timestamp_ms: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "emotion": self.emotion.value,
            "confidence": round(self.confidence, 1),
            "timestamp_ms": self.timestamp_ms,
        }


@dataclass(frozen=True)
class EmotionShare:
    """Share of the session taken by one emotion."""

    emotion: Emotion
    count: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "emotion": self.emotion.value,
            "count": self.count,
            "percentage": round(self.percentage, 1),
        }


@dataclass(frozen=True)
class SessionSnapshot:
    """
    Immutable point-in-time copy of a session's statistics.

    ``histogram`` keeps first-seen order of emotions.
    """

    start_time_ms: float = 0.0
    duration_ms: float = 0.0
    emotions: Tuple[EmotionEntry, ...] = ()
    histogram: Mapping[Emotion, int] = field(
        default_factory=lambda: MappingProxyType({})
    )
    change_count: int = 0

    @property
    def total_entries(self) -> int:
        return sum(self.histogram.values())

    @property
    def minutes(self) -> float:
        return self.duration_ms / 60000

    @property
    def is_empty(self) -> bool:
        return len(self.emotions) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_time_ms": self.start_time_ms,
            "duration_ms": self.duration_ms,
            "emotions": [e.to_dict() for e in self.emotions],
            "histogram": {e.value: count for e, count in self.histogram.items()},
            "change_count": self.change_count,
        }


@dataclass(frozen=True)
class Insight:
    """Human-readable observation about a session."""

    kind: InsightKind
    title: str
    description: str
    recommendation: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "kind": self.kind.value,
            "title": self.title,
            "description": self.description,
            "recommendation": self.recommendation,
        }


def emotion_percentages(histogram: Mapping[Emotion, int]) -> List[EmotionShare]:
    """Percentage of every emotion with a nonzero count, in histogram order."""
    total = sum(histogram.values())
    if total <= 0:
        return []

    return [
        EmotionShare(emotion=emotion, count=count, percentage=count / total * 100)
        for emotion, count in histogram.items()
        if count > 0
    ]
