"""Unit tests for session reports."""

from types import MappingProxyType

import pytest

from moodplay_core.analytics import (
    EmotionEntry,
    SessionSnapshot,
    build_session_report,
    format_duration,
    format_track_time,
)
from moodplay_core.emotion import Emotion


class TestFormatting:
    """Tests for duration formatting."""

    @pytest.mark.parametrize(
        "ms,expected",
        [
            (0, "0s"),
            (42_000, "42s"),
            (125_000, "2m 5s"),
            (3_723_000, "1h 2m 3s"),
            (59_999, "59s"),
        ],
    )
    def test_format_duration(self, ms, expected):
        """Test session duration text."""
        assert format_duration(ms) == expected

    @pytest.mark.parametrize(
        "seconds,expected",
        [(0, "0:00"), (7, "0:07"), (65.9, "1:05"), (600, "10:00"), (-3, "0:00")],
    )
    def test_format_track_time(self, seconds, expected):
        """Test play head text."""
        assert format_track_time(seconds) == expected


class TestSessionReport:
    """Tests for build_session_report."""

    def test_report(self):
        """Test the report contents."""
        entries = tuple(
            EmotionEntry(e, 80.0, 0.0)
            for e in [Emotion.HAPPY, Emotion.SAD, Emotion.SAD, Emotion.SAD]
        )
        snapshot = SessionSnapshot(
            start_time_ms=0.0,
            duration_ms=125_000,
            emotions=entries,
            histogram=MappingProxyType({Emotion.HAPPY: 1, Emotion.SAD: 3}),
            change_count=1,
        )

        report = build_session_report(snapshot)

        assert report["duration"] == "2m 5s"
        assert report["total_detections"] == 4
        assert report["emotion_changes"] == 1
        assert [row["emotion"] for row in report["distribution"]] == ["sad", "happy"]
        assert report["distribution"][0]["percentage"] == 75.0
        assert report["insights"][0]["kind"] == "concern"

    def test_empty_report(self):
        """Test the report for an empty session."""
        report = build_session_report(SessionSnapshot())

        assert report["distribution"] == []
        assert report["insights"][0]["title"] == "No Data Yet"
