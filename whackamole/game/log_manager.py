"""
Log management system for game messages and debugging.

This module provides centralized logging with categorization, filtering,
and bounded storage. Messages come from engine events on the bus and from the
debug callbacks of the bus and the engine.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Optional, TYPE_CHECKING

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
    from ..core.events import EventBus


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()     # System messages (initialization, saving, etc.)
    SESSION = auto()    # Start, pause, game over
    SPAWN = auto()      # Mole appearances and timeouts
    HIT = auto()        # Hits and score changes
    TIMER = auto()      # Countdown ticks
    DEBUG = auto()      # Debug messages
    WARNING = auto()    # Warning messages
    ERROR = auto()      # Error messages


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.SESSION: "SES",
    LogCategory.SPAWN: "SPN",
    LogCategory.HIT: "HIT",
    LogCategory.TIMER: "TMR",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


@dataclass
class LogMessage:
    """A single log message with metadata."""
    text: str
    category: LogCategory
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """Format the message for display."""
        parts = []

        if include_timestamp:
            parts.append(f"[{self.timestamp.strftime('%H:%M:%S')}]")

        if include_category:
            parts.append(f"[{CATEGORY_TAGS.get(self.category, '???')}]")

        parts.append(self.text)
        return " ".join(parts)


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


class LogManager:
    """Manages game logging with categorization and filtering."""

    def __init__(
        self,
        event_bus: "EventBus",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO
    ):
        """Initialize the log manager.

        Args:
            event_bus: Bus carrying the engine's events (required)
            max_messages: Maximum number of messages to store in the buffer
            default_level: Default log level for filtering
        """
        self.messages: deque[LogMessage] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.enabled_categories = set(LogCategory)  # All categories enabled by default
        self.event_bus = event_bus

        self.category_levels = {
            # Debug-only categories
            LogCategory.DEBUG: LogLevel.DEBUG,
            LogCategory.SPAWN: LogLevel.DEBUG,
            LogCategory.TIMER: LogLevel.DEBUG,

            # Always visible categories
            LogCategory.WARNING: LogLevel.WARNING,
            LogCategory.ERROR: LogLevel.ERROR,

            # SYSTEM, SESSION, HIT default to INFO
        }

        self._setup_event_subscriptions()
        self.event_bus.set_debug_callback(self._handle_bus_debug)

    @classmethod
    def attach(cls, engine: "GameEngine", **kwargs) -> "LogManager":
        """Create a log manager wired to an engine's bus and debug output."""
        manager = cls(engine.get_event_bus(), **kwargs)
        engine.set_debug_callback(manager.debug)
        return manager

    def _setup_event_subscriptions(self) -> None:
        """Subscribe to every engine event for centralized logging."""
        self._subscriptions = {
            EventType.GAME_STARTED: self._handle_game_started,
            EventType.GAME_PAUSED: self._handle_game_paused,
            EventType.GAME_OVER: self._handle_game_over,
            EventType.MOLE_SPAWNED: self._handle_mole_spawned,
            EventType.MOLE_TIMEOUT: self._handle_mole_timeout,
            EventType.MOLE_HIT: self._handle_mole_hit,
            EventType.SCORE_UPDATED: self._handle_score_updated,
            EventType.TIME_TICK: self._handle_time_tick,
        }
        for event_type, handler in self._subscriptions.items():
            self.event_bus.subscribe(event_type, handler)

    def detach(self) -> None:
        """Stop listening to the bus."""
        for event_type, handler in self._subscriptions.items():
            self.event_bus.unsubscribe(event_type, handler)
        self.event_bus.set_debug_callback(None)

    def _handle_game_started(self, event: GameEvent) -> None:
        if isinstance(event, GameStarted):
            self.session(f"Game started on {event.difficulty}")

    def _handle_game_paused(self, event: GameEvent) -> None:
        if isinstance(event, GamePaused):
            self.session(f"Game paused at score {event.score}")

    def _handle_game_over(self, event: GameEvent) -> None:
        if isinstance(event, GameOver):
            self.session(f"Game over: final score {event.final_score} ({event.difficulty})")

    def _handle_mole_spawned(self, event: GameEvent) -> None:
        if isinstance(event, MoleSpawned):
            row, col = event.position
            self.spawn(f"{event.mole_id} appeared at ({row}, {col})")

    def _handle_mole_timeout(self, event: GameEvent) -> None:
        if isinstance(event, MoleTimeout):
            self.spawn(f"{event.mole_id} escaped")

    def _handle_mole_hit(self, event: GameEvent) -> None:
        if isinstance(event, MoleHit):
            self.hit(f"{event.mole_id} hit for {event.points} points")

    def _handle_score_updated(self, event: GameEvent) -> None:
        if isinstance(event, ScoreUpdated):
            self.hit(f"Score: {event.score}")

    def _handle_time_tick(self, event: GameEvent) -> None:
        if isinstance(event, TimeTick):
            self.timer(f"{event.time_remaining}s remaining")

    def _handle_bus_debug(self, text: str) -> None:
        if "Error in handler" in text:
            self.error(text)
        else:
            self.debug(text)

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM) -> None:
        """Add a message to the log.

        Args:
            text: The message text
            category: The category of the message
        """
        # Always store; filtering happens on read
        self.messages.append(LogMessage(text=text, category=category))

    # Convenience methods for common categories
    def system(self, text: str) -> None:
        self.log(text, LogCategory.SYSTEM)

    def session(self, text: str) -> None:
        self.log(text, LogCategory.SESSION)

    def spawn(self, text: str) -> None:
        self.log(text, LogCategory.SPAWN)

    def hit(self, text: str) -> None:
        self.log(text, LogCategory.HIT)

    def timer(self, text: str) -> None:
        self.log(text, LogCategory.TIMER)

    def debug(self, text: str) -> None:
        self.log(text, LogCategory.DEBUG)

    def warning(self, text: str) -> None:
        self.log(text, LogCategory.WARNING)

    def error(self, text: str) -> None:
        self.log(text, LogCategory.ERROR)

    def get_messages(self, count: Optional[int] = None,
                     categories: Optional[set[LogCategory]] = None) -> list[LogMessage]:
        """Get recent messages, optionally filtered by category.

        Args:
            count: Maximum number of messages to return (None for all)
            categories: Set of categories to include (None for all enabled)

        Returns:
            List of recent messages
        """
        if categories:
            filtered = [msg for msg in self.messages
                        if msg.category in categories and msg.category in self.enabled_categories]
        else:
            filtered = []
            for msg in self.messages:
                if msg.category not in self.enabled_categories:
                    continue

                message_level = self.category_levels.get(msg.category, LogLevel.INFO)
                if message_level.value < self.log_level.value:
                    continue

                filtered.append(msg)

        if count is not None and count < len(filtered):
            return filtered[-count:]
        return filtered

    def get_log_data(self) -> dict[str, Any]:
        """Formatted messages and status for display."""
        return {
            'messages': [msg.format(include_timestamp=False, include_category=True)
                         for msg in self.get_messages()],
            'debug_enabled': self.is_debug_enabled(),
            'total_messages': len(self.messages),
        }

    def clear(self) -> None:
        """Clear all messages from the log."""
        self.messages.clear()

    def enable_category(self, category: LogCategory) -> None:
        self.enabled_categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.enabled_categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        """Set the minimum log level."""
        self.log_level = level

    def is_debug_enabled(self) -> bool:
        """Check if debug messages are currently enabled."""
        return (LogCategory.DEBUG in self.enabled_categories and
                self.log_level == LogLevel.DEBUG)

    def toggle_debug(self) -> None:
        """Toggle debug message visibility."""
        if self.is_debug_enabled():
            self.disable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.INFO)
        else:
            self.enable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.DEBUG)

    def save_log_to_file(self, log_dir: str = "logs") -> Optional[str]:
        """Save all messages to a timestamped log file.

        Returns:
            Path of the written file, or None if saving failed
        """
        try:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            os.makedirs(log_dir, exist_ok=True)
            filepath = os.path.join(log_dir, f"log_{timestamp}.log")

            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("Whack-a-Mole - Game Log\n")
                f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")

                if not self.messages:
                    f.write("No messages to save.\n")
                else:
                    # Every buffered message, ignoring the current filters
                    for msg in self.messages:
                        timestamp_str = msg.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
                        f.write(f"[{timestamp_str}] [{msg.category.name}] {msg.text}\n")

            self.system(f"Game log saved to {filepath}")
            return filepath

        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return None
