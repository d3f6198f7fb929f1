"""
Emotion Gate.

Debounces raw classifier ticks into accepted transitions for two
independent consumers:

- the playback queue (strict threshold; emits Replace/Append triggers)
- session statistics (looser threshold; decides what counts as a change)

Each consumer has its own last-accepted slot. The branches never read
each other's slot.
"""

from typing import Optional

import structlog

from ..config import EmotionGateConfig
from .base import Emotion, EmotionTick, QueueAction, QueueTrigger

logger = structlog.get_logger(__name__)


class EmotionGate:
    """
    Per-session emotion debouncer.

    Usage:
        gate = EmotionGate()
        trigger = gate.admit_for_queue(EmotionTick(Emotion.HAPPY, 82.0))
        # QueueTrigger(action=REPLACE, emotion=HAPPY)
    """

    def __init__(self, config: Optional[EmotionGateConfig] = None):
        config = config or EmotionGateConfig()
        self.queue_threshold = config.queue_threshold
        self.stats_threshold = config.stats_threshold

        self.last_for_queue: Optional[Emotion] = None
        self.last_for_stats: Optional[Emotion] = None

    def admit_for_queue(self, tick: EmotionTick) -> Optional[QueueTrigger]:
        """
        Queue branch.

        Ticks under the queue threshold are ignored without touching any
        state. The first accepted tick replaces the queue; a later tick
        with a different emotion appends; a repeat emits nothing.
        """
        if tick.confidence < self.queue_threshold:
            return None

        previous = self.last_for_queue

        if previous is None:
            trigger = QueueTrigger(QueueAction.REPLACE, tick.emotion)
        elif previous != tick.emotion:
            trigger = QueueTrigger(QueueAction.APPEND, tick.emotion)
        else:
            return None

        self.last_for_queue = tick.emotion
        logger.debug(
            "queue_transition_accepted",
            action=trigger.action.value,
            from_emotion=previous.value if previous else None,
            to_emotion=tick.emotion.value,
            confidence=tick.confidence,
        )
        return trigger

    def admit_for_stats(self, emotion: Emotion, confidence: float) -> bool:
        """
        Stats branch.

        Returns True when the tick counts as an emotion change. Only ticks
        strictly above the stats threshold move the slot.
        """
        if confidence <= self.stats_threshold:
            return False

        is_change = self.last_for_stats is not None and self.last_for_stats != emotion
        self.last_for_stats = emotion
        return is_change

    def reset_queue(self) -> None:
        self.last_for_queue = None

    def reset_stats(self) -> None:
        self.last_for_stats = None

    def reset(self) -> None:
        self.reset_queue()
        self.reset_stats()
