"""
Timers for the page-side cart components.

Everything runs on one thread: callbacks are queued on an event loop and
never interleave with each other.
"""
import asyncio
import heapq
import itertools
import logging

logger = logging.getLogger(__name__)


class PeriodicHandle:

    def __init__(self, scheduler, interval, callback):
        self.scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self.cancelled = False
        self._pending = scheduler.call_later(interval, self._tick)

    def _tick(self):
        if self.cancelled:
            return
        self._pending = self.scheduler.call_later(self.interval, self._tick)
        self.callback()

    def cancel(self):
        self.cancelled = True
        self._pending.cancel()


class Scheduler:
    """call_later / call_every on top of an asyncio event loop."""

    def __init__(self, loop=None):
        self.loop = loop or asyncio.get_running_loop()

    def call_later(self, delay, callback):
        return self.loop.call_later(delay, _guarded, callback)

    def call_every(self, interval, callback):
        return PeriodicHandle(self, interval, callback)


class TimerHandle:

    def __init__(self, when, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler driven by advance(); time only moves when asked.
    """

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._counter = itertools.count()

    def call_later(self, delay, callback):
        handle = TimerHandle(self.now + delay, callback)
        heapq.heappush(self._queue, (handle.when, next(self._counter), handle))
        return handle

    def call_every(self, interval, callback):
        return PeriodicHandle(self, interval, callback)

    @property
    def pending(self):
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def advance(self, seconds):
        deadline = self.now + seconds
        while self._queue and self._queue[0][0] <= deadline:
            when, _, handle = heapq.heappop(self._queue)
            self.now = when
            if not handle.cancelled:
                _guarded(handle.callback)
        self.now = deadline


def _guarded(callback):
    try:
        callback()
    except Exception:
        logger.exception("Error in scheduled callback %r", callback)
