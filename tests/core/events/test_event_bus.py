"""
Unit tests for the EventBus.

Tests the synchronous publisher-subscriber hub the engine uses to announce
state transitions.
"""

from unittest.mock import Mock

from whackamole.core.events import (
    EventBus,
    EventType,
    GameOver,
    MoleSpawned,
    ScoreUpdated,
)


class TestSubscriptions:
    """Test subscribe/unsubscribe behaviour."""

    def test_event_bus_creation(self, event_bus):
        stats = event_bus.get_statistics()

        assert stats['events_published'] == 0
        assert stats['subscribers_count'] == 0
        assert stats['universal_subscribers_count'] == 0

    def test_publish_delivers_to_subscriber(self, event_bus):
        handler = Mock()
        event_bus.subscribe(EventType.SCORE_UPDATED, handler)

        event = ScoreUpdated(0, score=4)
        event_bus.publish(event)

        handler.assert_called_once_with(event)

    def test_duplicate_subscription_delivers_once(self, event_bus):
        handler = Mock()
        event_bus.subscribe(EventType.SCORE_UPDATED, handler)
        event_bus.subscribe(EventType.SCORE_UPDATED, handler)

        event_bus.publish(ScoreUpdated(0, score=1))

        assert handler.call_count == 1
        assert event_bus.get_statistics()['subscribers_count'] == 1

    def test_same_handler_on_two_kinds(self, event_bus):
        handler = Mock()
        event_bus.subscribe(EventType.SCORE_UPDATED, handler)
        event_bus.subscribe(EventType.GAME_OVER, handler)

        event_bus.publish(ScoreUpdated(0, score=1))
        event_bus.publish(GameOver(0, final_score=1, difficulty="easy"))

        assert handler.call_count == 2

    def test_only_matching_kind_is_delivered(self, event_bus):
        handler = Mock()
        event_bus.subscribe(EventType.GAME_OVER, handler)

        event_bus.publish(ScoreUpdated(0, score=1))

        handler.assert_not_called()

    def test_unsubscribe(self, event_bus):
        handler = Mock()
        event_bus.subscribe(EventType.SCORE_UPDATED, handler)

        assert event_bus.unsubscribe(EventType.SCORE_UPDATED, handler)
        event_bus.publish(ScoreUpdated(0, score=1))

        handler.assert_not_called()

    def test_unsubscribe_unknown_handler_is_noop(self, event_bus):
        assert not event_bus.unsubscribe(EventType.SCORE_UPDATED, Mock())

    def test_universal_subscriber_receives_everything(self, event_bus):
        handler = Mock()
        event_bus.subscribe_all(handler)

        event_bus.publish(ScoreUpdated(0, score=1))
        event_bus.publish(MoleSpawned(0, mole_id="mole-1", position=(0, 0)))

        assert handler.call_count == 2
        assert event_bus.unsubscribe_all(handler)
        assert not event_bus.unsubscribe_all(handler)

    def test_delivery_order_is_registration_order(self, event_bus):
        calls = []
        for name in ("first", "second", "third"):
            event_bus.subscribe(EventType.SCORE_UPDATED, lambda event, name=name: calls.append(name))
        event_bus.subscribe_all(lambda event: calls.append("universal"))

        event_bus.publish(ScoreUpdated(0, score=1))
        event_bus.publish(ScoreUpdated(0, score=2))

        assert calls == ["first", "second", "third", "universal"] * 2

    def test_clear_removes_everything(self, event_bus):
        handler = Mock()
        event_bus.subscribe(EventType.SCORE_UPDATED, handler)
        event_bus.subscribe_all(handler)

        event_bus.clear()
        event_bus.publish(ScoreUpdated(0, score=1))

        handler.assert_not_called()
        stats = event_bus.get_statistics()
        assert stats['subscribers_count'] == 0
        assert stats['universal_subscribers_count'] == 0


class TestHandlerIsolation:
    """Test that failing handlers do not break delivery."""

    def test_failing_handler_does_not_stop_others(self, event_bus):
        before = Mock()
        failing = Mock(side_effect=RuntimeError("boom"))
        after = Mock()
        event_bus.subscribe(EventType.SCORE_UPDATED, before)
        event_bus.subscribe(EventType.SCORE_UPDATED, failing)
        event_bus.subscribe(EventType.SCORE_UPDATED, after)

        event_bus.publish(ScoreUpdated(0, score=1))

        before.assert_called_once()
        failing.assert_called_once()
        after.assert_called_once()
        assert event_bus.get_statistics()['handler_errors'] == 1

    def test_failure_is_reported_to_debug_callback(self):
        bus = EventBus()
        messages = []
        bus.set_debug_callback(messages.append)
        bus.subscribe(EventType.SCORE_UPDATED, Mock(side_effect=ValueError("bad payload")))

        bus.publish(ScoreUpdated(0, score=1))

        assert len(messages) == 1
        assert "bad payload" in messages[0]
        assert "score-updated" in messages[0]

    def test_debug_logging_of_subscriptions(self):
        bus = EventBus(enable_debug_logging=True)
        messages = []
        bus.set_debug_callback(messages.append)

        bus.subscribe(EventType.GAME_OVER, Mock())

        assert any("game-over" in message for message in messages)

    def test_handler_may_unsubscribe_during_delivery(self, event_bus):
        later = Mock()

        def once(event):
            event_bus.unsubscribe(EventType.SCORE_UPDATED, once)

        event_bus.subscribe(EventType.SCORE_UPDATED, once)
        event_bus.subscribe(EventType.SCORE_UPDATED, later)

        event_bus.publish(ScoreUpdated(0, score=1))
        event_bus.publish(ScoreUpdated(0, score=2))

        assert later.call_count == 2
        assert event_bus.get_statistics()['subscribers_count'] == 1


class TestStatistics:

    def test_recent_events(self, event_bus):
        event_bus.publish(ScoreUpdated(100, score=1))
        event_bus.publish(GameOver(200, final_score=1, difficulty="hard"))

        recent = event_bus.get_recent_events(count=1)

        assert recent == [{'event_type': 'game-over', 'elapsed_ms': 200, 'event_class': 'GameOver'}]
        assert event_bus.get_statistics()['events_published'] == 2

    def test_has_subscribers(self, event_bus):
        assert not event_bus.has_subscribers(EventType.TIME_TICK)
        event_bus.subscribe(EventType.TIME_TICK, Mock())
        assert event_bus.has_subscribers(EventType.TIME_TICK)
