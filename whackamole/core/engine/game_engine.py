"""Session state machine and timer-driven spawn/expiry engine.

The :class:`GameEngine` owns the session state, the active difficulty profile
and every timer of a session. It exposes a small command surface for a UI
adapter and announces every state transition on its :class:`EventBus`.

Phases::

    IDLE --start--> RUNNING --pause--> PAUSED --resume--> RUNNING
    RUNNING/PAUSED --countdown reaches zero / reset--> ENDED
    any --reset--> IDLE

Commands that do not apply to the current phase are ignored. All callbacks run
on the engine's scheduler, one at a time, and each one mutates state before it
publishes the matching event.
"""

from __future__ import annotations

from datetime import datetime
from functools import partial
from typing import Callable, Mapping, Optional

import numpy as np

from ..difficulty import (
    DifficultyLevel,
    DifficultyLike,
    DifficultyProfile,
    get_difficulty_profile,
    to_difficulty_level,
)
from ..events import (
    EventBus,
    GameEvent,
    GameOver,
    GamePaused,
    GameStarted,
    MoleHit,
    MoleSpawned,
    MoleTimeout,
    ScoreUpdated,
    TimeTick,
)
from ..metrics import GameMetrics
from .game_state import GamePhase, Mole, SessionSnapshot, SessionState
from .scheduler import Scheduler, TimerHandle

COUNTDOWN_INTERVAL_MS = 1000


class GameEngine:
    """Owns one game session and all of its timers."""

    def __init__(
        self,
        grid_size: int = 4,
        difficulty: DifficultyLike = DifficultyLevel.MEDIUM,
        scheduler: Optional[Scheduler] = None,
        event_bus: Optional[EventBus] = None,
        session_seconds: int = 60,
        profiles: Optional[Mapping[DifficultyLevel, DifficultyProfile]] = None,
        rng: Optional[np.random.Generator] = None,
        spawn_on_resume: bool = True,
    ):
        """Initialize the engine.

        Args:
            grid_size: Board edge length (4 gives a 4x4 board)
            difficulty: Starting difficulty level
            scheduler: Timer queue to run on; a private one is created if omitted
            event_bus: Bus to publish on; a private one is created if omitted
            session_seconds: Countdown length of a session
            profiles: Optional replacement profile table
            rng: Random source for mole positions
            spawn_on_resume: Whether resume performs an immediate spawn attempt
        """
        level = to_difficulty_level(difficulty)

        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self._profiles = dict(profiles) if profiles is not None else None
        self._profile = get_difficulty_profile(level, self._profiles)
        self._rng = rng if rng is not None else np.random.default_rng()
        self.spawn_on_resume = spawn_on_resume

        self.state = SessionState(grid_size=grid_size, difficulty=level,
                                  session_seconds=session_seconds)

        # Timer handles owned by this engine instance
        self._countdown_timer: Optional[TimerHandle] = None
        self._spawn_timer: Optional[TimerHandle] = None
        self._expiry_timers: dict[str, TimerHandle] = {}

        self._mole_counter = 0
        self._last_metrics: Optional[GameMetrics] = None
        self._debug_callback: Optional[Callable[[str], None]] = None

    # Queries

    @property
    def profile(self) -> DifficultyProfile:
        return self._profile

    def get_state(self) -> SessionSnapshot:
        """Immutable snapshot of the current session."""
        return self.state.snapshot(self.scheduler.now_ms)

    def get_event_bus(self) -> EventBus:
        return self.event_bus

    def get_last_metrics(self) -> Optional[GameMetrics]:
        """Metrics of the most recently ended session, if any."""
        return self._last_metrics

    def set_debug_callback(self, callback: Optional[Callable[[str], None]]) -> None:
        self._debug_callback = callback

    # Commands

    def start(self) -> None:
        """Start a session from the idle phase."""
        if self.state.phase != GamePhase.IDLE:
            self._debug_log(f"start ignored in {self.state.phase.name}")
            return

        self.state.phase = GamePhase.RUNNING
        self._publish(GameStarted(self.scheduler.now_ms, self.state.difficulty.value))
        # A game-started handler may already have paused or reset the session
        if self.state.phase == GamePhase.RUNNING:
            self._arm_session_timers(spawn_now=True)

    def pause(self) -> None:
        """Freeze the countdown and spawning. Moles on the board keep aging."""
        if self.state.phase != GamePhase.RUNNING:
            self._debug_log(f"pause ignored in {self.state.phase.name}")
            return

        self.state.phase = GamePhase.PAUSED
        self._disarm_session_timers()
        self._publish(GamePaused(self.scheduler.now_ms, self.state.score))

    def resume(self) -> None:
        """Continue a paused session.

        Publishes ``game-started`` again and re-arms the countdown and spawn
        timers. With ``spawn_on_resume`` the resume also makes one immediate
        spawn attempt, as a fresh start does.
        """
        if self.state.phase != GamePhase.PAUSED:
            self._debug_log(f"resume ignored in {self.state.phase.name}")
            return

        self.state.phase = GamePhase.RUNNING
        self._publish(GameStarted(self.scheduler.now_ms, self.state.difficulty.value))
        if self.state.phase == GamePhase.RUNNING:
            self._arm_session_timers(spawn_now=self.spawn_on_resume)

    def reset(self) -> None:
        """End any running session and return to a fresh idle state."""
        if self.state.running:
            self._end_session()
        self._cancel_all_timers()
        self.state.reset()
        self._debug_log("session reset")

    def set_difficulty(self, level: DifficultyLike) -> None:
        """Switch difficulty for future spawns and hits.

        Active moles keep their expiry timers. A running spawn timer keeps its
        period until the next start or resume.

        Raises:
            ValueError: if ``level`` is not a known difficulty
        """
        new_level = to_difficulty_level(level)
        self.state.difficulty = new_level
        self._profile = get_difficulty_profile(new_level, self._profiles)
        self._debug_log(f"difficulty set to {new_level.value}")

    def register_hit(self, mole_id: str) -> None:
        """Strike a mole. Unknown or already-hit ids are ignored."""
        mole = self.state.active_moles.get(mole_id)
        if mole is None or mole.hit:
            self._debug_log(f"hit ignored for {mole_id}")
            return

        points = self._profile.points_per_hit
        mole.hit = True
        self.state.score += points
        self._remove_mole(mole_id)

        now = self.scheduler.now_ms
        self._publish(MoleHit(now, mole_id, points))
        self._publish(ScoreUpdated(now, self.state.score))

    def dispose(self) -> None:
        """Tear the engine down: end the session, cancel timers, drop subscribers."""
        if self.state.running:
            self._end_session()
        self._cancel_all_timers()
        if self._owns_scheduler:
            self.scheduler.clear()
        self.event_bus.clear()

    # Timer callbacks

    def _on_countdown_tick(self) -> None:
        self.state.time_remaining_sec = max(0, self.state.time_remaining_sec - 1)
        self._publish(TimeTick(self.scheduler.now_ms, self.state.time_remaining_sec))

        if self.state.running and self.state.time_remaining_sec <= 0:
            self._end_session()

    def _spawn_attempt(self) -> None:
        if self.state.phase != GamePhase.RUNNING:
            return
        if len(self.state.active_moles) >= self._profile.max_concurrent_moles:
            return

        self._mole_counter += 1
        mole_id = f"mole-{self._mole_counter}"
        grid_size = self.state.grid_size
        position = (int(self._rng.integers(grid_size)), int(self._rng.integers(grid_size)))
        now = self.scheduler.now_ms

        self.state.active_moles[mole_id] = Mole(id=mole_id, position=position, created_at_ms=now)
        self._expiry_timers[mole_id] = self.scheduler.call_later(
            self._profile.mole_lifetime_ms,
            partial(self._expire_mole, mole_id),
            name=f"expire:{mole_id}",
        )
        self._publish(MoleSpawned(now, mole_id, position))

    def _expire_mole(self, mole_id: str) -> None:
        mole = self.state.active_moles.get(mole_id)
        if mole is None or mole.hit:
            self._expiry_timers.pop(mole_id, None)
            return

        self._remove_mole(mole_id)
        self._publish(MoleTimeout(self.scheduler.now_ms, mole_id))

    # Internals

    def _arm_session_timers(self, spawn_now: bool) -> None:
        self._disarm_session_timers()
        self._countdown_timer = self.scheduler.call_every(
            COUNTDOWN_INTERVAL_MS, self._on_countdown_tick, name="countdown"
        )
        if spawn_now:
            self._spawn_attempt()
            # A mole-spawned handler may have paused, reset or re-armed the session
            if self.state.phase != GamePhase.RUNNING or self._spawn_timer is not None:
                return
        self._spawn_timer = self.scheduler.call_every(
            self._profile.spawn_interval_ms, self._spawn_attempt, name="spawn"
        )

    def _disarm_session_timers(self) -> None:
        if self._countdown_timer is not None:
            self._countdown_timer.cancel()
            self._countdown_timer = None
        if self._spawn_timer is not None:
            self._spawn_timer.cancel()
            self._spawn_timer = None

    def _cancel_all_timers(self) -> None:
        self._disarm_session_timers()
        for handle in self._expiry_timers.values():
            handle.cancel()
        self._expiry_timers.clear()

    def _remove_mole(self, mole_id: str) -> None:
        self.state.active_moles.pop(mole_id, None)
        handle = self._expiry_timers.pop(mole_id, None)
        if handle is not None:
            handle.cancel()

    def _end_session(self) -> None:
        self.state.phase = GamePhase.ENDED
        self._cancel_all_timers()
        self.state.active_moles.clear()

        self._last_metrics = GameMetrics(
            final_score=self.state.score,
            difficulty=self.state.difficulty,
            played_at=datetime.now(),
            time_survived_sec=self.state.session_seconds - self.state.time_remaining_sec,
        )
        self._publish(GameOver(self.scheduler.now_ms, self.state.score,
                               self.state.difficulty.value))

    def _publish(self, event: GameEvent) -> None:
        self.event_bus.publish(event)

    def _debug_log(self, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(f"[ENGINE] {message}")
