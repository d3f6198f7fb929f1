"""
Session Analytics

Tracks what the classifier reported over a session and turns the
aggregate into insights and reports.
"""

from .aggregator import SessionAggregator
from .base import (
    EmotionEntry,
    EmotionShare,
    Insight,
    InsightKind,
    SessionSnapshot,
    emotion_percentages,
)
from .insights import NO_DATA_INSIGHT, dominant_emotion, generate_insights
from .reports import build_session_report, format_duration, format_track_time

__all__ = [
    "SessionAggregator",
    "EmotionEntry",
    "EmotionShare",
    "Insight",
    "InsightKind",
    "SessionSnapshot",
    "emotion_percentages",
    "NO_DATA_INSIGHT",
    "dominant_emotion",
    "generate_insights",
    "build_session_report",
    "format_duration",
    "format_track_time",
]
