# Core infrastructure: logging, timers, notifications

from moodplay_core.core.errors import MoodPlayError
from moodplay_core.core.event_bus import (
    Event,
    EventBus,
    EventSubscriber,
    EventType,
)
from moodplay_core.core.logging import (
    LogFormat,
    get_logger,
    setup_logging,
)
from moodplay_core.core.scheduler import (
    DelayedCall,
    PeriodicTask,
    now_ms,
)

__all__ = [
    "MoodPlayError",
    # Event Bus
    "Event",
    "EventBus",
    "EventSubscriber",
    "EventType",
    # Logging
    "LogFormat",
    "get_logger",
    "setup_logging",
    # Timers
    "DelayedCall",
    "PeriodicTask",
    "now_ms",
]
