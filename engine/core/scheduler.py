"""
Cooperative tick scheduler.

The scheduler is the single source of time for everything that waits:
the host calls tick(dt) once per fixed update with the real elapsed
time, and the scheduler

1. polls every registered tick callback with dt, then
2. fires delayed calls whose due time has been reached.

Nothing blocks and nothing runs on another thread. Waiting is expressed
either as a tick callback that counts down on its own, or as a
call_later() handle that can be cancelled.

Usage:
    scheduler = Scheduler()
    scheduler.add_tick_callback(poll_input)
    handle = scheduler.call_later(1.0, advance)
    ...
    scheduler.tick(1 / 60)
    handle.cancel()
"""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)

TickCallback = Callable[[float], None]

# Tolerance for accumulated float error when comparing elapsed time
TIME_EPSILON = 1e-9


class ScheduledCall:
    """Handle for a delayed call created by Scheduler.call_later()."""

    __slots__ = ("due", "callback", "_cancelled", "_fired", "_order")

    def __init__(self, due: float, callback: Callable[[], None], order: int):
        self.due = due
        self.callback = callback
        self._cancelled = False
        self._fired = False
        self._order = order

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def pending(self) -> bool:
        return not (self._cancelled or self._fired)

    def cancel(self) -> None:
        """Cancel the call. Has no effect once it has fired."""
        self._cancelled = True


class Scheduler:
    """
    Drives per-tick callbacks and delayed calls from a single tick source.

    Re-entrancy rules:
    - Tick callbacks removed during a tick are not called later in that tick.
    - Tick callbacks added during a tick are first called on the next tick.
    - Delayed calls scheduled during a tick are due no earlier than the
      current time plus their delay.
    """

    def __init__(self):
        self._time = 0.0
        self._tick_callbacks: list[TickCallback] = []
        self._calls: list[ScheduledCall] = []
        self._call_counter = 0

    @property
    def time(self) -> float:
        """Total elapsed time in seconds."""
        return self._time

    @property
    def tick_callback_count(self) -> int:
        return len(self._tick_callbacks)

    @property
    def pending_call_count(self) -> int:
        return sum(1 for call in self._calls if call.pending)

    def add_tick_callback(self, callback: TickCallback) -> None:
        """Register a callback to be polled once per tick."""
        if callback not in self._tick_callbacks:
            self._tick_callbacks.append(callback)

    def remove_tick_callback(self, callback: TickCallback) -> None:
        """Deregister a tick callback. Unknown callbacks are ignored."""
        if callback in self._tick_callbacks:
            self._tick_callbacks.remove(callback)

    def has_tick_callback(self, callback: TickCallback) -> bool:
        return callback in self._tick_callbacks

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """
        Schedule callback to run after delay seconds of ticked time.

        Args:
            delay: Seconds to wait (negative values are treated as 0)
            callback: Zero-argument function

        Returns:
            Cancellable handle
        """
        self._call_counter += 1
        call = ScheduledCall(self._time + max(0.0, delay), callback, self._call_counter)
        self._calls.append(call)
        return call

    def tick(self, dt: float) -> None:
        """
        Advance time by dt and run everything that is due.

        Args:
            dt: Elapsed real time in seconds
        """
        self._time += dt

        for callback in list(self._tick_callbacks):
            if callback in self._tick_callbacks:
                callback(dt)

        self._run_due_calls()

    def clear(self) -> None:
        """Drop all tick callbacks and cancel all delayed calls."""
        self._tick_callbacks.clear()
        for call in self._calls:
            call.cancel()
        self._calls.clear()

    def _run_due_calls(self) -> None:
        """Fire due calls in due order, including ones scheduled meanwhile."""
        while True:
            due = [
                call for call in self._calls
                if call.pending and call.due <= self._time + TIME_EPSILON
            ]
            if not due:
                break

            call = min(due, key=lambda c: (c.due, c._order))
            call._fired = True
            call.callback()

        self._calls = [call for call in self._calls if call.pending]
