"""
Session Aggregator.

Owns the running session clock, the emotion log and histogram, and the
emotion change counter. Every raw tick is logged regardless of
confidence; only ticks the gate's stats branch accepts can count as a
change.
"""

from types import MappingProxyType
from typing import Callable, Dict, List, Optional

import structlog

from ..config import AnalyticsConfig
from ..core.scheduler import PeriodicTask, now_ms
from ..emotion.base import Emotion
from ..emotion.gate import EmotionGate
from .base import EmotionEntry, SessionSnapshot

logger = structlog.get_logger(__name__)


class SessionAggregator:
    """
    Accumulates per-session emotion statistics.

    Usage:
        aggregator = SessionAggregator()
        aggregator.start()                  # inside a running event loop
        aggregator.add_entry(Emotion.HAPPY, 82.0)
        snapshot = aggregator.snapshot()
    """

    def __init__(
        self,
        gate: Optional[EmotionGate] = None,
        config: Optional[AnalyticsConfig] = None,
        clock: Callable[[], float] = now_ms,
        auto_clock: bool = True,
    ):
        """
        Args:
            gate: Gate whose stats branch decides emotion changes
            config: Analytics configuration
            clock: Epoch-millisecond time source
            auto_clock: Refresh duration on a background timer while active;
                when False the caller drives update_duration()
        """
        config = config or AnalyticsConfig()
        self._gate = gate or EmotionGate()
        self._clock = clock
        self._clock_interval_s = config.clock_interval_s
        self._auto_clock = auto_clock
        self._clock_task: Optional[PeriodicTask] = None

        self.active = False
        self._clear()

    def _clear(self) -> None:
        self._start_time_ms = 0.0
        self._duration_ms = 0.0
        self._entries: List[EmotionEntry] = []
        self._histogram: Dict[Emotion, int] = {}
        self._change_count = 0

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Begin a fresh session."""
        self._cancel_clock()
        self._clear()
        self._gate.reset_stats()

        self._start_time_ms = self._clock()
        self.active = True

        if self._auto_clock:
            self._clock_task = PeriodicTask(
                "session_clock", self._clock_interval_s, self.update_duration
            ).start()

        logger.info("session_started", start_time_ms=self._start_time_ms)

    def stop(self) -> None:
        """Freeze the clock; accumulated data is kept."""
        if not self.active:
            return

        self.update_duration()
        self.active = False
        self._cancel_clock()

        logger.info(
            "session_stopped",
            duration_ms=self._duration_ms,
            entries=len(self._entries),
            changes=self._change_count,
        )

    def reset(self) -> None:
        """Stop and discard everything."""
        self.stop()
        self._clear()
        self._gate.reset_stats()
        logger.info("session_reset")

    def update_duration(self) -> None:
        """One clock tick."""
        if not self.active:
            return
        self._duration_ms = max(0.0, self._clock() - self._start_time_ms)

    def _cancel_clock(self) -> None:
        if self._clock_task is not None:
            self._clock_task.cancel()
            self._clock_task = None

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    def add_entry(
        self,
        emotion: Emotion,
        confidence: float,
        timestamp_ms: Optional[float] = None,
    ) -> Optional[EmotionEntry]:
        """
        Log one raw tick.

        Entries arriving while the session is inactive are dropped.
        """
        if not self.active:
            logger.debug("entry_dropped_inactive", emotion=str(emotion))
            return None

        emotion = Emotion(emotion)
        entry = EmotionEntry(
            emotion=emotion,
            confidence=confidence,
            timestamp_ms=timestamp_ms if timestamp_ms is not None else self._clock(),
        )

        self._entries.append(entry)
        self._histogram[emotion] = self._histogram.get(emotion, 0) + 1

        if self._gate.admit_for_stats(emotion, confidence):
            self._change_count += 1
            logger.debug(
                "emotion_change_counted",
                emotion=emotion.value,
                confidence=confidence,
                changes=self._change_count,
            )

        return entry

    # -------------------------------------------------------------------------
    # Query
    # -------------------------------------------------------------------------

    @property
    def change_count(self) -> int:
        return self._change_count

    @property
    def duration_ms(self) -> float:
        return self._duration_ms

    def snapshot(self) -> SessionSnapshot:
        """Immutable copy of the current statistics."""
        return SessionSnapshot(
            start_time_ms=self._start_time_ms,
            duration_ms=self._duration_ms,
            emotions=tuple(self._entries),
            histogram=MappingProxyType(dict(self._histogram)),
            change_count=self._change_count,
        )
