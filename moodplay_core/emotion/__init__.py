"""
Emotion input handling.

- Emotion / EmotionTick: classifier output
- EmotionGate: debounces ticks into queue triggers and change decisions
"""

from .base import (
    NEGATIVE_EMOTIONS,
    POSITIVE_EMOTIONS,
    Emotion,
    EmotionTick,
    QueueAction,
    QueueTrigger,
)
from .gate import EmotionGate

__all__ = [
    "Emotion",
    "EmotionTick",
    "EmotionGate",
    "QueueAction",
    "QueueTrigger",
    "POSITIVE_EMOTIONS",
    "NEGATIVE_EMOTIONS",
]
