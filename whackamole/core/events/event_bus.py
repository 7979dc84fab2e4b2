"""
Event bus for decoupled communication between the engine and its consumers.

This module provides an in-process publish/subscribe hub. Publication is a
synchronous fan-out: every handler registered for the event's type runs before
``publish`` returns. There is no queue and no backpressure.
"""

from collections import deque
from typing import Any, Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .events import GameEvent, EventType


EventHandler = Callable[["GameEvent"], None]


class EventBus:
    """Typed publish/subscribe hub keyed by event type."""

    def __init__(self, enable_debug_logging: bool = False, history_size: int = 200):
        """Initialize the event bus.

        Args:
            enable_debug_logging: Whether to report subscription changes and
                deliveries to the debug callback (handler failures are always
                reported)
            history_size: Number of recently published events kept for debugging
        """
        self.enable_debug_logging = enable_debug_logging

        # Handlers by event type; dict keys act as an insertion-ordered set
        self._handlers: dict["EventType", dict[EventHandler, None]] = {}

        # Universal handlers (receive all events)
        self._universal_handlers: dict[EventHandler, None] = {}

        self._events_published = 0
        self._handler_errors = 0
        self._event_history: deque["GameEvent"] = deque(maxlen=history_size)

        self._debug_callback: Optional[Callable[[str], None]] = None

    def set_debug_callback(self, callback: Optional[Callable[[str], None]]) -> None:
        """Set a callback function for debug logging."""
        self._debug_callback = callback

    def _debug_log(self, message: str, force: bool = False) -> None:
        if (force or self.enable_debug_logging) and self._debug_callback:
            self._debug_callback(f"[EVENT] {message}")

    def subscribe(self, event_type: "EventType", handler: EventHandler) -> None:
        """Subscribe a handler to events of a specific type.

        Registering the same handler twice for one type is a no-op.
        """
        handlers = self._handlers.setdefault(event_type, {})
        if handler in handlers:
            return
        handlers[handler] = None
        self._debug_log(f"Subscribed {_handler_name(handler)} to {event_type.value}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe a handler to every event type."""
        if handler in self._universal_handlers:
            return
        self._universal_handlers[handler] = None
        self._debug_log(f"Subscribed {_handler_name(handler)} to ALL events")

    def unsubscribe(self, event_type: "EventType", handler: EventHandler) -> bool:
        """Remove a handler from an event type.

        Returns:
            True if the handler was registered and has been removed
        """
        handlers = self._handlers.get(event_type)
        if not handlers or handler not in handlers:
            return False
        del handlers[handler]
        if not handlers:
            del self._handlers[event_type]
        self._debug_log(f"Unsubscribed {_handler_name(handler)} from {event_type.value}")
        return True

    def unsubscribe_all(self, handler: EventHandler) -> bool:
        """Remove a universal handler."""
        if handler not in self._universal_handlers:
            return False
        del self._universal_handlers[handler]
        self._debug_log(f"Unsubscribed {_handler_name(handler)} from ALL events")
        return True

    def publish(self, event: "GameEvent") -> None:
        """Deliver an event to every handler registered for its type.

        Handlers registered for the type run first, in registration order,
        followed by universal handlers. A handler that raises does not stop
        delivery to the remaining handlers.
        """
        self._events_published += 1
        self._event_history.append(event)

        # Copy so handlers may (un)subscribe during delivery
        handlers = list(self._handlers.get(event.event_type, ()))
        handlers.extend(self._universal_handlers)

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                self._handler_errors += 1
                self._debug_log(
                    f"Error in handler {_handler_name(handler)} for {event.event_type.value}: {e}",
                    force=True
                )

    def has_subscribers(self, event_type: "EventType") -> bool:
        return bool(self._handlers.get(event_type)) or bool(self._universal_handlers)

    def clear(self) -> None:
        """Remove every subscription."""
        self._handlers.clear()
        self._universal_handlers.clear()
        self._debug_log("Cleared all subscriptions")

    def get_statistics(self) -> dict[str, Any]:
        """Get event delivery statistics."""
        return {
            'events_published': self._events_published,
            'handler_errors': self._handler_errors,
            'subscribers_count': sum(len(handlers) for handlers in self._handlers.values()),
            'universal_subscribers_count': len(self._universal_handlers),
            'event_history_size': len(self._event_history),
        }

    def get_recent_events(self, count: int = 10) -> list[dict[str, Any]]:
        """Get recent events for debugging."""
        recent = list(self._event_history)[-count:]
        return [
            {
                'event_type': event.event_type.value,
                'elapsed_ms': event.elapsed_ms,
                'event_class': event.__class__.__name__,
            }
            for event in recent
        ]


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, '__qualname__', None) or getattr(handler, '__name__', 'anonymous')
