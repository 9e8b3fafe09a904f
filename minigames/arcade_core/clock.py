"""
Clock & Scheduler
=================

Cooperative fixed-cadence timers driven by an injectable clock.

Nothing here runs in the background: timers fire only when ``poll()`` is
called, which the engines do from their per-frame update. Tests and
headless drivers use ``ManualClock`` to step time explicitly.
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional

Clock = Callable[[], float]


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def __call__(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        """Move time forward and return the new reading."""
        if seconds < 0:
            raise ValueError(f"Cannot move clock backwards ({seconds}s)")
        self._now += seconds
        return self._now


class IntervalTimer:
    """Handle for a repeating timer registered with a Scheduler."""

    def __init__(self, period: float, callback: Callable[[], None], first_due: float):
        self.period = period
        self.callback = callback
        self.next_due = first_due
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Stop the timer. Safe to call more than once, including from its own callback."""
        self._active = False


class Scheduler:
    """
    Fixed-cadence timer registry.

    Due times accumulate by whole periods, so a timer polled late fires once
    for every period that elapsed and never drifts.
    """

    def __init__(self, clock: Optional[Clock] = None):
        """
        Args:
            clock: Zero-argument callable returning seconds. Defaults to
                ``time.monotonic``.
        """
        self._clock: Clock = clock if clock is not None else time.monotonic
        self._timers: List[IntervalTimer] = []

    @property
    def clock(self) -> Clock:
        return self._clock

    def now(self) -> float:
        return self._clock()

    @property
    def pending(self) -> int:
        """Number of active timers."""
        return sum(1 for t in self._timers if t.active)

    def call_every(self, period: float, callback: Callable[[], None]) -> IntervalTimer:
        """
        Register a repeating callback.

        Args:
            period: Seconds between calls (> 0).
            callback: Called with no arguments.

        Returns:
            Handle whose ``cancel()`` stops the timer.
        """
        if period <= 0:
            raise ValueError(f"Timer period must be positive, got {period}")
        timer = IntervalTimer(period, callback, self._clock() + period)
        self._timers.append(timer)
        return timer

    def poll(self) -> int:
        """
        Fire every due callback.

        Returns:
            Number of callbacks fired.
        """
        now = self._clock()
        fired = 0
        for timer in list(self._timers):
            while timer.active and timer.next_due <= now:
                timer.next_due += timer.period
                timer.callback()
                fired += 1
        self._timers = [t for t in self._timers if t.active]
        return fired

    def cancel_all(self) -> None:
        """Cancel every registered timer."""
        for timer in self._timers:
            timer.cancel()
        self._timers = []
