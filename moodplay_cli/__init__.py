"""MoodPlay CLI - Command-line tools for mood sessions."""

__version__ = "1.0.0"
