"""
Unit tests for the cooperative Scheduler.

Tests timer ordering, recurring timers, cancellation and the virtual clock.
"""

import pytest
from unittest.mock import Mock

from whackamole.core.engine.scheduler import Scheduler, TimerHandle


class TestTimerHandle:
    """Test TimerHandle ordering."""

    def test_ordering_by_due_time(self):
        early = TimerHandle(due_ms=5, sequence_id=2, callback=Mock())
        late = TimerHandle(due_ms=10, sequence_id=1, callback=Mock())

        assert early < late
        assert not late < early

    def test_ordering_by_sequence_id(self):
        first = TimerHandle(due_ms=10, sequence_id=1, callback=Mock())
        second = TimerHandle(due_ms=10, sequence_id=2, callback=Mock())

        assert first < second

    def test_cancel(self):
        handle = TimerHandle(due_ms=10, sequence_id=1, callback=Mock())

        handle.cancel()
        handle.cancel()

        assert not handle.active


class TestScheduler:
    """Test Scheduler functionality."""

    def test_scheduler_creation(self, scheduler):
        assert scheduler.now_ms == 0
        assert scheduler.pending_count == 0
        assert scheduler.peek_next_due() is None

    def test_call_later_fires_once_when_due(self, scheduler):
        callback = Mock()
        scheduler.call_later(500, callback)

        scheduler.advance(499)
        callback.assert_not_called()

        scheduler.advance(1)
        callback.assert_called_once()

        scheduler.advance(10_000)
        callback.assert_called_once()
        assert scheduler.now_ms == 10_500

    def test_one_shot_handle_inactive_after_firing(self, scheduler):
        handle = scheduler.call_later(100, Mock())

        scheduler.advance(100)

        assert not handle.active
        assert scheduler.pending_count == 0

    def test_call_every_repeats(self, scheduler):
        callback = Mock()
        scheduler.call_every(300, callback)

        fired = scheduler.advance(1000)

        assert fired == 3
        assert callback.call_count == 3
        assert scheduler.peek_next_due() == 1200

    def test_call_every_rejects_non_positive_interval(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.call_every(0, Mock())

    def test_cancelled_timer_never_fires(self, scheduler):
        callback = Mock()
        handle = scheduler.call_later(100, callback)

        handle.cancel()
        scheduler.advance(1000)

        callback.assert_not_called()

    def test_recurring_timer_cancelled_by_own_callback(self, scheduler):
        calls = []

        def tick():
            calls.append(scheduler.now_ms)
            if len(calls) == 2:
                handle.cancel()

        handle = scheduler.call_every(100, tick)
        scheduler.advance(1000)

        assert calls == [100, 200]

    def test_callbacks_see_their_due_time(self, scheduler):
        seen = []
        scheduler.call_later(250, lambda: seen.append(scheduler.now_ms))
        scheduler.call_later(700, lambda: seen.append(scheduler.now_ms))

        scheduler.advance(1000)

        assert seen == [250, 700]

    def test_same_due_time_fires_in_arming_order(self, scheduler):
        order = []
        scheduler.call_later(100, lambda: order.append("a"))
        scheduler.call_later(100, lambda: order.append("b"))
        scheduler.call_later(50, lambda: order.append("c"))

        scheduler.advance(100)

        assert order == ["c", "a", "b"]

    def test_timer_armed_during_advance_fires_in_window(self, scheduler):
        inner = Mock()
        scheduler.call_later(100, lambda: scheduler.call_later(100, inner))

        scheduler.advance(200)

        inner.assert_called_once()

    def test_run_next_ignores_due_time(self, scheduler):
        callback = Mock()
        scheduler.call_later(5000, callback)

        assert scheduler.run_next()
        callback.assert_called_once()
        assert scheduler.now_ms == 5000
        assert not scheduler.run_next()

    def test_clear_cancels_everything(self, scheduler):
        callback = Mock()
        handles = [scheduler.call_later(100, callback), scheduler.call_every(50, callback)]

        assert scheduler.clear() == 2
        scheduler.advance(1000)

        callback.assert_not_called()
        assert all(not handle.active for handle in handles)

    def test_stats(self, scheduler):
        scheduler.call_later(100, Mock()).cancel()
        scheduler.call_later(100, Mock())

        stats = scheduler.get_stats()

        assert stats['total_entries'] == 2
        assert stats['active_entries'] == 1


class TestRealtime:

    def test_run_realtime_stops_on_condition(self):
        scheduler = Scheduler()
        fired = []
        scheduler.call_later(20, lambda: fired.append(scheduler.now_ms))

        scheduler.run_realtime(lambda: bool(fired), poll_interval_sec=0.005, max_duration_sec=2.0)

        assert fired and fired[0] >= 20

    def test_run_realtime_honours_max_duration(self):
        scheduler = Scheduler()

        scheduler.run_realtime(lambda: False, poll_interval_sec=0.005, max_duration_sec=0.05)

        assert scheduler.pending_count == 0
