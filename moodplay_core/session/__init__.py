"""Session orchestration."""

from .service import MoodSession

__all__ = ["MoodSession"]
