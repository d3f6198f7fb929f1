"""
Emotion Types.

Labels produced by the external face classifier and the transition
records the gate hands to its consumers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from moodplay_core.core.scheduler import now_ms


class Emotion(str, Enum):
    """Facial expression categories reported by the classifier."""

    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    SURPRISED = "surprised"
    FEARFUL = "fearful"
    DISGUSTED = "disgusted"
    NEUTRAL = "neutral"


POSITIVE_EMOTIONS = frozenset({Emotion.HAPPY, Emotion.SURPRISED})
NEGATIVE_EMOTIONS = frozenset({
    Emotion.SAD,
    Emotion.ANGRY,
    Emotion.FEARFUL,
    Emotion.DISGUSTED,
})


class QueueAction(str, Enum):
    """What an accepted transition asks the playback queue to do."""

    REPLACE = "replace"  # first accepted emotion of the session
    APPEND = "append"    # emotion changed mid-session


@dataclass(frozen=True)
class EmotionTick:
    """One raw classification from the classifier feed."""

    emotion: Emotion
    confidence: float  # percent, 0 to 100
    timestamp_ms: float = field(default_factory=now_ms)

    def __post_init__(self):
        if not isinstance(self.emotion, Emotion):
            object.__setattr__(self, "emotion", Emotion(self.emotion))
        if not 0.0 <= self.confidence <= 100.0:
            raise ValueError(f"confidence must be within 0-100, got {self.confidence}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "emotion": self.emotion.value,
            "confidence": round(self.confidence, 1),
            "timestamp_ms": self.timestamp_ms,
        }


@dataclass(frozen=True)
class QueueTrigger:
    """Accepted transition for the playback queue."""

    action: QueueAction
    emotion: Emotion

    def to_dict(self) -> Dict[str, Any]:
        return {"action": self.action.value, "emotion": self.emotion.value}

