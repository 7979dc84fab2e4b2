"""Core game engine components.

This package contains the fundamental engine systems:
- scheduler.py: Cooperative timer queue and virtual clock
- game_state.py: Session state, moles and immutable snapshots
- game_engine.py: Session state machine and spawn/expiry engine
"""

from .scheduler import Scheduler, TimerHandle
from .game_state import GamePhase, Mole, MoleSnapshot, SessionSnapshot, SessionState
from .game_engine import GameEngine

__all__ = [
    "Scheduler",
    "TimerHandle",
    "GamePhase",
    "Mole",
    "MoleSnapshot",
    "SessionSnapshot",
    "SessionState",
    "GameEngine",
]
