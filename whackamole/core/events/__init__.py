"""Event system for publisher-subscriber communication.

This package contains the event-driven architecture used by the engine:
- event_bus.py: Synchronous publish/subscribe routing
- events.py: Event definitions, one frozen dataclass per event kind
"""

from .event_bus import EventBus, EventHandler
from .events import (
    GameEvent,
    EventType,
    MoleSpawned,
    MoleHit,
    MoleTimeout,
    ScoreUpdated,
    GameStarted,
    GamePaused,
    GameOver,
    TimeTick,
)

__all__ = [
    "EventBus",
    "EventHandler",
    "GameEvent",
    "EventType",
    "MoleSpawned",
    "MoleHit",
    "MoleTimeout",
    "ScoreUpdated",
    "GameStarted",
    "GamePaused",
    "GameOver",
    "TimeTick",
]
