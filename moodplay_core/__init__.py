"""
MoodPlay Core
=============

Emotion-driven music playback and session analytics.

This package turns a live stream of confidence-scored emotion
classifications into playback decisions and session statistics:
- Emotion gate (debounces raw ticks into queue/stats transitions)
- Playback queue controller with deferred autoplay
- Session aggregator (clock, histogram, change counter)
- Rule-based insight generation

Architecture:
    Emotion ticks
         │
         ▼
    ┌────────────────┐
    │ Emotion        │──► Replace / Append triggers
    │ Gate           │
    └────────────────┘
         │                      │
         ▼                      ▼
    ┌────────────────┐    ┌────────────────┐
    │ Queue          │    │ Session        │
    │ Controller     │    │ Aggregator     │──► Snapshot ──► Insights
    └────────────────┘    └────────────────┘
"""

__version__ = "1.0.0"
__author__ = "MoodPlay Team"
