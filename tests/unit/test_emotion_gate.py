"""Unit tests for the emotion gate."""

import pytest

from moodplay_core.config import EmotionGateConfig
from moodplay_core.emotion import Emotion, EmotionGate, EmotionTick, QueueAction


def tick(emotion: str, confidence: float) -> EmotionTick:
    return EmotionTick(Emotion(emotion), confidence, timestamp_ms=0.0)


class TestEmotionTick:
    """Tests for EmotionTick."""

    def test_string_emotion_is_coerced(self):
        """Test that raw labels become Emotion members."""
        t = EmotionTick("happy", 75.0)
        assert t.emotion is Emotion.HAPPY

    @pytest.mark.parametrize("confidence", [-1.0, 100.5])
    def test_confidence_out_of_range(self, confidence):
        """Test that confidence outside 0-100 is rejected."""
        with pytest.raises(ValueError):
            EmotionTick(Emotion.HAPPY, confidence)

    def test_unknown_label_rejected(self):
        """Test that unknown labels are rejected."""
        with pytest.raises(ValueError):
            EmotionTick("bored", 70.0)


class TestQueueBranch:
    """Tests for the queue branch of the gate."""

    def test_first_accepted_tick_replaces(self):
        """Test that the first confident tick asks for a fresh queue."""
        gate = EmotionGate()
        trigger = gate.admit_for_queue(tick("happy", 80))

        assert trigger.action == QueueAction.REPLACE
        assert trigger.emotion == Emotion.HAPPY
        assert gate.last_for_queue == Emotion.HAPPY

    def test_repeat_emits_nothing(self):
        """Test that the same emotion twice triggers once."""
        gate = EmotionGate()
        gate.admit_for_queue(tick("happy", 80))

        assert gate.admit_for_queue(tick("happy", 95)) is None

    def test_change_appends(self):
        """Test that a new emotion appends to the queue."""
        gate = EmotionGate()
        gate.admit_for_queue(tick("happy", 80))
        trigger = gate.admit_for_queue(tick("sad", 70))

        assert trigger.action == QueueAction.APPEND
        assert trigger.emotion == Emotion.SAD
        assert gate.last_for_queue == Emotion.SAD

    def test_low_confidence_leaves_slot_untouched(self):
        """Test that ticks under 60 never move the queue slot."""
        gate = EmotionGate()
        gate.admit_for_queue(tick("happy", 80))

        assert gate.admit_for_queue(tick("sad", 59.9)) is None
        assert gate.last_for_queue == Emotion.HAPPY

    def test_low_confidence_first_tick(self):
        """Test that a weak first tick does not start the queue."""
        gate = EmotionGate()

        assert gate.admit_for_queue(tick("happy", 30)) is None
        assert gate.last_for_queue is None

    def test_threshold_is_inclusive(self):
        """Test that confidence exactly at the threshold is accepted."""
        gate = EmotionGate()
        assert gate.admit_for_queue(tick("angry", 60)) is not None

    def test_custom_threshold(self):
        """Test thresholds from configuration."""
        gate = EmotionGate(EmotionGateConfig(queue_threshold=90, stats_threshold=10))

        assert gate.admit_for_queue(tick("happy", 85)) is None
        assert gate.admit_for_queue(tick("happy", 91)) is not None


class TestStatsBranch:
    """Tests for the stats branch of the gate."""

    def test_first_tick_is_not_a_change(self):
        """Test that the first accepted tick only seeds the slot."""
        gate = EmotionGate()

        assert gate.admit_for_stats(Emotion.HAPPY, 80) is False
        assert gate.last_for_stats == Emotion.HAPPY

    def test_change_detected(self):
        """Test that a different emotion counts as a change."""
        gate = EmotionGate()
        gate.admit_for_stats(Emotion.HAPPY, 80)

        assert gate.admit_for_stats(Emotion.SAD, 70) is True
        assert gate.admit_for_stats(Emotion.SAD, 55) is False

    def test_threshold_is_exclusive(self):
        """Test that confidence exactly at 50 is ignored."""
        gate = EmotionGate()
        gate.admit_for_stats(Emotion.HAPPY, 80)

        assert gate.admit_for_stats(Emotion.SAD, 50) is False
        assert gate.last_for_stats == Emotion.HAPPY
        assert gate.admit_for_stats(Emotion.SAD, 50.1) is True

    def test_branches_are_independent(self):
        """Test that a mid-confidence tick moves only the stats slot."""
        gate = EmotionGate()
        gate.admit_for_stats(Emotion.HAPPY, 80)
        gate.admit_for_queue(tick("happy", 80))

        assert gate.admit_for_stats(Emotion.SAD, 55) is True
        assert gate.admit_for_queue(tick("sad", 55)) is None
        assert gate.last_for_stats == Emotion.SAD
        assert gate.last_for_queue == Emotion.HAPPY

    def test_reset(self):
        """Test that reset clears both slots."""
        gate = EmotionGate()
        gate.admit_for_stats(Emotion.HAPPY, 80)
        gate.admit_for_queue(tick("happy", 80))
        gate.reset()

        assert gate.last_for_queue is None
        assert gate.last_for_stats is None
        assert gate.admit_for_queue(tick("sad", 80)).action == QueueAction.REPLACE
