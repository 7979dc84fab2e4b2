"""Cooperative timer scheduling for the game engine.

This module implements a single-threaded timer queue. Timers are kept in a
min-heap ordered by due time, and every callback runs to completion before the
next one starts, so engine state never needs locking.

Core Concepts:
- Time is measured in integer milliseconds on a virtual clock
- ``advance`` moves the clock forward and fires due timers in order
- ``run_realtime`` drives the same queue against the wall clock
- Cancellation is lazy: cancelled entries are skipped when popped
"""

from __future__ import annotations

import heapq
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional


TimerCallback = Callable[[], None]


@dataclass
class TimerHandle:
    """A scheduled callback on the timer queue.

    The queue is ordered by ``due_ms``; ``sequence_id`` keeps timers due at
    the same instant in the order they were armed.
    """

    due_ms: int
    sequence_id: int
    callback: TimerCallback = field(compare=False)
    name: str = ""
    interval_ms: Optional[int] = None
    cancelled: bool = False

    def __lt__(self, other: "TimerHandle") -> bool:
        if self.due_ms != other.due_ms:
            return self.due_ms < other.due_ms
        return self.sequence_id < other.sequence_id

    @property
    def recurring(self) -> bool:
        return self.interval_ms is not None

    @property
    def active(self) -> bool:
        return not self.cancelled

    def cancel(self) -> None:
        """Cancel the timer. Cancelling twice is harmless."""
        self.cancelled = True


class Scheduler:
    """Owns the timer queue and the virtual clock for one engine."""

    def __init__(self):
        self._queue: list[TimerHandle] = []
        self._now_ms: int = 0
        self._sequence_counter: int = 0
        self._fired_count: int = 0

    @property
    def now_ms(self) -> int:
        """Current scheduler time in milliseconds."""
        return self._now_ms

    @property
    def pending_count(self) -> int:
        """Number of armed, uncancelled timers."""
        return sum(1 for handle in self._queue if not handle.cancelled)

    def call_later(self, delay_ms: int, callback: TimerCallback, name: str = "") -> TimerHandle:
        """Arm a one-shot timer firing ``delay_ms`` from now."""
        return self._push(self._now_ms + max(0, int(delay_ms)), callback, name, None)

    def call_every(self, interval_ms: int, callback: TimerCallback, name: str = "") -> TimerHandle:
        """Arm a recurring timer first firing ``interval_ms`` from now.

        Raises:
            ValueError: if ``interval_ms`` is not positive
        """
        interval_ms = int(interval_ms)
        if interval_ms <= 0:
            raise ValueError(f"Recurring interval must be positive, got {interval_ms}")
        return self._push(self._now_ms + interval_ms, callback, name, interval_ms)

    def peek_next_due(self) -> Optional[int]:
        """Due time of the next live timer, or None if nothing is armed."""
        while self._queue:
            handle = self._queue[0]
            if handle.cancelled:
                heapq.heappop(self._queue)
                continue
            return handle.due_ms
        return None

    def run_next(self) -> bool:
        """Fire the next live timer regardless of its due time.

        Returns:
            True if a timer fired
        """
        while self._queue:
            handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._fire(handle)
            return True
        return False

    def advance(self, ms: int) -> int:
        """Move the clock forward, firing every timer that falls due.

        Timers armed by callbacks during the advance also fire if they fall
        due within the window.

        Returns:
            Number of callbacks fired
        """
        return self.advance_to(self._now_ms + int(ms))

    def advance_to(self, target_ms: int) -> int:
        fired = 0
        while True:
            due = self.peek_next_due()
            if due is None or due > target_ms:
                break
            self._fire(heapq.heappop(self._queue))
            fired += 1
        self._now_ms = max(self._now_ms, target_ms)
        return fired

    def run_realtime(self,
                     stop_condition: Callable[[], bool],
                     poll_interval_sec: float = 0.01,
                     max_duration_sec: Optional[float] = None) -> None:
        """Drive the queue against the wall clock until ``stop_condition`` holds.

        Args:
            stop_condition: Checked between timer firings
            poll_interval_sec: Longest single sleep
            max_duration_sec: Optional hard stop
        """
        origin = time.monotonic() - self._now_ms / 1000.0
        started = time.monotonic()
        while not stop_condition():
            if max_duration_sec is not None and time.monotonic() - started >= max_duration_sec:
                break
            self.advance_to(int((time.monotonic() - origin) * 1000))
            due = self.peek_next_due()
            if due is None:
                time.sleep(poll_interval_sec)
                continue
            wait = (origin + due / 1000.0) - time.monotonic()
            if wait > 0:
                time.sleep(min(wait, poll_interval_sec))

    def clear(self) -> int:
        """Cancel and drop every armed timer.

        Returns:
            Number of live timers that were cancelled
        """
        count = 0
        for handle in self._queue:
            if not handle.cancelled:
                handle.cancel()
                count += 1
        self._queue.clear()
        return count

    def get_stats(self) -> dict[str, Any]:
        """Get scheduler statistics for debugging."""
        return {
            "now_ms": self._now_ms,
            "total_entries": len(self._queue),
            "active_entries": self.pending_count,
            "fired": self._fired_count,
            "sequence_counter": self._sequence_counter,
        }

    def _push(self,
              due_ms: int,
              callback: TimerCallback,
              name: str,
              interval_ms: Optional[int]) -> TimerHandle:
        self._sequence_counter += 1
        handle = TimerHandle(
            due_ms=due_ms,
            sequence_id=self._sequence_counter,
            callback=callback,
            name=name,
            interval_ms=interval_ms,
        )
        heapq.heappush(self._queue, handle)
        return handle

    def _fire(self, handle: TimerHandle) -> None:
        self._now_ms = max(self._now_ms, handle.due_ms)
        self._fired_count += 1
        handle.callback()

        # Reschedule recurring timers unless the callback cancelled them
        if handle.recurring and not handle.cancelled:
            self._sequence_counter += 1
            handle.due_ms += handle.interval_ms
            handle.sequence_id = self._sequence_counter
            heapq.heappush(self._queue, handle)
        else:
            handle.cancel()
