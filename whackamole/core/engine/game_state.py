"""Session state for a running game.

:class:`SessionState` is the mutable state owned by the engine. Consumers only
ever see :class:`SessionSnapshot`, a frozen copy produced by
:meth:`SessionState.snapshot`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

import numpy as np

from ..difficulty import DifficultyLevel


class GamePhase(Enum):
    """High level session phases."""

    IDLE = auto()
    RUNNING = auto()
    PAUSED = auto()
    ENDED = auto()


@dataclass
class Mole:
    """A mole on the board. Owned by the active session."""

    id: str
    position: tuple[int, int]  # (row, col)
    created_at_ms: int
    hit: bool = False

    def snapshot(self) -> MoleSnapshot:
        return MoleSnapshot(self.id, self.position, self.created_at_ms, self.hit)


@dataclass(frozen=True)
class MoleSnapshot:
    id: str
    position: tuple[int, int]
    created_at_ms: int
    hit: bool


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of the session returned to consumers."""

    score: int
    time_remaining_sec: int
    difficulty: DifficultyLevel
    running: bool
    paused: bool
    grid_size: int
    phase: GamePhase
    elapsed_ms: int
    active_moles: tuple[MoleSnapshot, ...] = ()

    def get_mole(self, mole_id: str) -> Optional[MoleSnapshot]:
        for mole in self.active_moles:
            if mole.id == mole_id:
                return mole
        return None

    def occupancy_grid(self) -> np.ndarray:
        """Count of active moles per cell as a (grid_size, grid_size) array."""
        grid = np.zeros((self.grid_size, self.grid_size), dtype=np.int16)
        for mole in self.active_moles:
            row, col = mole.position
            grid[row, col] += 1
        return grid


@dataclass
class SessionState:
    """Mutable per-session state owned by the game engine."""

    grid_size: int
    difficulty: DifficultyLevel
    session_seconds: int = 60
    score: int = 0
    time_remaining_sec: int = field(init=False)
    phase: GamePhase = GamePhase.IDLE
    # Insertion ordered by spawn
    active_moles: dict[str, Mole] = field(default_factory=dict)

    def __post_init__(self):
        if self.grid_size <= 0:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        if self.session_seconds <= 0:
            raise ValueError(f"session_seconds must be positive, got {self.session_seconds}")
        self.time_remaining_sec = self.session_seconds

    @property
    def running(self) -> bool:
        return self.phase in (GamePhase.RUNNING, GamePhase.PAUSED)

    @property
    def paused(self) -> bool:
        return self.phase == GamePhase.PAUSED

    def is_within_grid(self, position: tuple[int, int]) -> bool:
        row, col = position
        return 0 <= row < self.grid_size and 0 <= col < self.grid_size

    def reset(self) -> None:
        """Return to a fresh idle session."""
        self.score = 0
        self.time_remaining_sec = self.session_seconds
        self.active_moles.clear()
        self.phase = GamePhase.IDLE

    def snapshot(self, elapsed_ms: int) -> SessionSnapshot:
        return SessionSnapshot(
            score=self.score,
            time_remaining_sec=self.time_remaining_sec,
            difficulty=self.difficulty,
            running=self.running,
            paused=self.paused,
            grid_size=self.grid_size,
            phase=self.phase,
            elapsed_ms=elapsed_ms,
            active_moles=tuple(mole.snapshot() for mole in self.active_moles.values()),
        )
