"""Cooperative timers on a virtual clock.

The game loop advances the scheduler with wall time once per frame; every
delayed or periodic action (treat expiry, speech hiding, the kitten's
decision cadence, wandering) is a callback registered here. Nothing runs on
its own thread, so callbacks never interleave mid-way.
"""
import heapq
import itertools


class Timer:
    """Handle for a scheduled callback."""

    def __init__(self, due, interval, callback, args):
        self.due = due
        self.interval = interval
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not self.cancelled and not (self.fired and self.interval is None)

    def cancel(self):
        self.cancelled = True


class Scheduler:
    def __init__(self, now: float = 0.0):
        self._now = now
        self._queue = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    def _push(self, timer: Timer):
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))

    def call_later(self, delay: float, callback, *args) -> Timer:
        timer = Timer(self._now + max(0.0, delay), None, callback, args)
        self._push(timer)
        return timer

    def call_every(self, interval: float, callback, *args) -> Timer:
        if interval <= 0:
            raise ValueError(f"repeat interval must be positive, got {interval}")
        timer = Timer(self._now + interval, interval, callback, args)
        self._push(timer)
        return timer

    def advance(self, dt: float):
        self.run_until(self._now + max(0.0, dt))

    def run_until(self, t: float):
        """Fire everything due up to time t in due order, then set the clock to t."""
        while self._queue and self._queue[0][0] <= t:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = max(self._now, due)
            timer.fired = True
            if timer.interval is not None:
                timer.due = due + timer.interval
                self._push(timer)
            timer.callback(*timer.args)
        self._now = max(self._now, t)

    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def cancel_all(self):
        for _, _, timer in self._queue:
            timer.cancel()
        self._queue.clear()
