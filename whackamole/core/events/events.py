"""Game events published by the engine.

Event Design Principles:
- Events are immutable dataclasses with minimal payloads
- All events include the scheduler time (``elapsed_ms``) they were published at
- The set of event kinds is closed: one ``EventType`` member per event class
"""

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum


class EventType(Enum):
    """Kinds of events published by the game engine."""
    # Mole lifecycle
    MOLE_SPAWNED = "mole-spawned"
    MOLE_HIT = "mole-hit"
    MOLE_TIMEOUT = "mole-timeout"

    # Scoring
    SCORE_UPDATED = "score-updated"

    # Session
    GAME_STARTED = "game-started"
    GAME_PAUSED = "game-paused"
    GAME_OVER = "game-over"

    # Countdown
    TIME_TICK = "time-tick"


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all game events."""
    elapsed_ms: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class MoleSpawned(GameEvent):
    """Event emitted when a mole appears on the board."""
    mole_id: str
    position: tuple[int, int]

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.MOLE_SPAWNED)


@dataclass(frozen=True)
class MoleHit(GameEvent):
    """Event emitted when an active mole is struck."""
    mole_id: str
    points: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.MOLE_HIT)


@dataclass(frozen=True)
class MoleTimeout(GameEvent):
    """Event emitted when a mole's lifetime elapses before it was hit."""
    mole_id: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.MOLE_TIMEOUT)


@dataclass(frozen=True)
class ScoreUpdated(GameEvent):
    """Event emitted after the score changes."""
    score: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.SCORE_UPDATED)


@dataclass(frozen=True)
class GameStarted(GameEvent):
    """Event emitted when a session starts or resumes."""
    difficulty: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.GAME_STARTED)


@dataclass(frozen=True)
class GamePaused(GameEvent):
    """Event emitted when a running session is paused."""
    score: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.GAME_PAUSED)


@dataclass(frozen=True)
class GameOver(GameEvent):
    """Event emitted when a session ends."""
    final_score: int
    difficulty: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.GAME_OVER)


@dataclass(frozen=True)
class TimeTick(GameEvent):
    """Event emitted once per countdown second."""
    time_remaining: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.TIME_TICK)
