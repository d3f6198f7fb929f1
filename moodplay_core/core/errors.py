"""Base exception shared by every MoodPlay component."""

from typing import Any, Dict, Optional


class MoodPlayError(Exception):
    """Base exception for recoverable MoodPlay failures."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "MOODPLAY_ERROR"
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }
