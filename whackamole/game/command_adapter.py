"""
Bridge between a UI surface and the game engine.

The adapter receives command messages (plain dicts such as
``{"command": "hitMole", "moleId": "mole-3"}``), validates them and calls the
engine. In the other direction it turns engine events into outbound message
dicts and passes them to a ``send`` callable supplied by the host.
"""

from collections.abc import Mapping
from typing import Any, Callable, Optional, TYPE_CHECKING

from ..core.difficulty import DifficultyLevel
from ..core.events import (
    EventType,
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

if TYPE_CHECKING:
    from ..core.engine.game_engine import GameEngine


OutboundMessage = dict[str, Any]
MessageSender = Callable[[OutboundMessage], None]

VALID_DIFFICULTIES = frozenset(level.value for level in DifficultyLevel)


def event_to_message(event: GameEvent) -> Optional[OutboundMessage]:
    """Translate an engine event into an outbound UI message."""
    if isinstance(event, GameStarted):
        return {'type': 'gameStarted', 'difficulty': event.difficulty}
    if isinstance(event, MoleSpawned):
        return {'type': 'moleSpawned', 'moleId': event.mole_id, 'position': list(event.position)}
    if isinstance(event, MoleHit):
        return {'type': 'moleHit', 'moleId': event.mole_id, 'points': event.points}
    if isinstance(event, MoleTimeout):
        return {'type': 'moleTimeout', 'moleId': event.mole_id}
    if isinstance(event, ScoreUpdated):
        return {'type': 'scoreUpdated', 'score': event.score}
    if isinstance(event, GamePaused):
        return {'type': 'gamePaused', 'score': event.score}
    if isinstance(event, TimeTick):
        return {'type': 'timeTick', 'timeRemaining': event.time_remaining}
    if isinstance(event, GameOver):
        return {'type': 'gameOver', 'finalScore': event.final_score, 'difficulty': event.difficulty}
    return None


class CommandAdapter:
    """Routes UI commands into the engine and engine events out to the UI."""

    def __init__(self,
                 engine: "GameEngine",
                 send: MessageSender,
                 warn: Optional[Callable[[str], None]] = None):
        """Initialize the adapter.

        Args:
            engine: Engine to drive
            send: Receives every outbound message
            warn: Receives a line for each rejected command (e.g. ``LogManager.warning``)
        """
        self.engine = engine
        self.send = send
        self._warn = warn
        self._commands: dict[str, Callable[[Mapping[str, Any]], None]] = {
            'start': lambda message: self.engine.start(),
            'pause': lambda message: self.engine.pause(),
            'resume': lambda message: self.engine.resume(),
            'reset': lambda message: self.engine.reset(),
            'hitMole': self._hit_mole,
            'setDifficulty': self._set_difficulty,
        }

        self._event_bus = engine.get_event_bus()
        for event_type in EventType:
            self._event_bus.subscribe(event_type, self._forward_event)

    def handle_message(self, message: Mapping[str, Any]) -> bool:
        """Dispatch one inbound command message.

        Returns:
            True if the message named a known command with valid arguments
        """
        command = message.get('command') if isinstance(message, Mapping) else None
        handler = self._commands.get(command) if isinstance(command, str) else None
        if handler is None:
            self._warning(f"Unknown command: {command!r}")
            return False
        return handler(message) is not False

    def dispose(self) -> None:
        """Stop forwarding events and tear the engine down."""
        for event_type in EventType:
            self._event_bus.unsubscribe(event_type, self._forward_event)
        self.engine.dispose()

    def _hit_mole(self, message: Mapping[str, Any]) -> bool:
        mole_id = message.get('moleId')
        if not isinstance(mole_id, str) or not mole_id:
            self._warning(f"hitMole without a valid moleId: {mole_id!r}")
            return False
        self.engine.register_hit(mole_id)
        return True

    def _set_difficulty(self, message: Mapping[str, Any]) -> bool:
        difficulty = message.get('difficulty')
        if not isinstance(difficulty, str) or difficulty not in VALID_DIFFICULTIES:
            self._warning(f"Ignoring unknown difficulty: {difficulty!r}")
            return False
        self.engine.set_difficulty(difficulty)
        return True

    def _forward_event(self, event: GameEvent) -> None:
        message = event_to_message(event)
        if message is not None:
            self.send(message)

    def _warning(self, text: str) -> None:
        if self._warn:
            self._warn(f"[ADAPTER] {text}")
