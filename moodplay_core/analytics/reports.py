"""
Session Reports.

Rendering helpers for the session summary screen: human-readable
durations, the emotion distribution and the insight list bundled into a
single serializable report.
"""

import math
from typing import Any, Dict

from .base import SessionSnapshot, emotion_percentages
from .insights import generate_insights


def format_duration(duration_ms: float) -> str:
    """Format a session length as ``1h 2m 3s``, ``2m 5s`` or ``42s``."""
    seconds = int(max(0.0, duration_ms) // 1000)
    minutes = seconds // 60
    hours = minutes // 60

    if hours > 0:
        return f"{hours}h {minutes % 60}m {seconds % 60}s"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"


def format_track_time(seconds: float) -> str:
    """Format a playback position as ``m:ss``."""
    if seconds is None or math.isnan(seconds) or seconds < 0:
        seconds = 0
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"


def build_session_report(snapshot: SessionSnapshot) -> Dict[str, Any]:
    """
    Summarize a session.

    The distribution is sorted by percentage (highest first); equal shares
    keep the order in which the emotions first appeared.
    """
    shares = sorted(
        emotion_percentages(snapshot.histogram),
        key=lambda share: share.percentage,
        reverse=True,
    )

    return {
        "duration": format_duration(snapshot.duration_ms),
        "duration_ms": snapshot.duration_ms,
        "total_detections": snapshot.total_entries,
        "emotion_changes": snapshot.change_count,
        "distribution": [share.to_dict() for share in shares],
        "insights": [insight.to_dict() for insight in generate_insights(snapshot)],
    }
