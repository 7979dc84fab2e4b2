"""Hands finished-session metrics to an external reporter."""

from typing import Callable, Optional, TYPE_CHECKING

from ..core.events import EventType, GameEvent
from ..core.metrics import GameMetrics

if TYPE_CHECKING:
    from ..core.engine.game_engine import GameEngine


MetricsReporter = Callable[[GameMetrics], None]


class MetricsRecorder:
    """Calls ``reporter`` with the session metrics after every game over.

    The reporter owns its transport; an exception it raises is isolated by the
    event bus like any other handler failure.
    """

    def __init__(self, engine: "GameEngine", reporter: MetricsReporter):
        self.engine = engine
        self.reporter = reporter
        self.history: list[GameMetrics] = []
        engine.get_event_bus().subscribe(EventType.GAME_OVER, self._handle_game_over)

    @property
    def last(self) -> Optional[GameMetrics]:
        return self.history[-1] if self.history else None

    def detach(self) -> None:
        self.engine.get_event_bus().unsubscribe(EventType.GAME_OVER, self._handle_game_over)

    def _handle_game_over(self, event: GameEvent) -> None:
        metrics = self.engine.get_last_metrics()
        if metrics is None:
            return
        self.history.append(metrics)
        self.reporter(metrics)
