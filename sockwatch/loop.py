"""
Render loop: each iteration paints a frame, then races the refresh timer
against a bounded key poll and acts on whichever resolves first.
"""
import curses
import math
import time
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor

from .debuglog import debug_log
from . import ui

REFRESH = "refresh"
KEY = "key"
IDLE = "idle"

Stimulus = namedtuple("Stimulus", ["kind", "key"])

KEY_QUIT = ord('q')


class RefreshTimer:
    """Fixed-period ticker. Missed ticks collapse into one."""

    def __init__(self, period, clock=time.monotonic):
        self.period = period
        self._clock = clock
        self._deadline = clock() + period

    def remaining(self):
        return max(0.0, self._deadline - self._clock())

    def due(self):
        return self._clock() >= self._deadline

    def consume(self):
        now = self._clock()
        self._deadline += self.period
        if self._deadline <= now:
            self._deadline = now + self.period


class RefreshWorker:
    """
    Runs ``App.collect`` on a single background thread. At most one collection
    is in flight; the result comes back through its Future and is applied on
    the loop thread.
    """

    def __init__(self, app, executor=None):
        self.app = app
        self.executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="sockwatch-refresh")
        self._future = None

    @property
    def busy(self):
        return self._future is not None

    def start(self):
        if self._future is not None:
            debug_log("LOOP: Refresh still running, skipping tick")
            return False
        self._future = self.executor.submit(self.app.collect)
        return True

    def apply_finished(self):
        """Apply a finished collection to the app. Returns True if state changed."""
        if self._future is None or not self._future.done():
            return False
        future, self._future = self._future, None
        # anything but FetchError from the worker is a bug, let it propagate
        self.app.apply(future.result())
        return True

    def shutdown(self):
        self.executor.shutdown(wait=False)


def next_stimulus(stdscr, timer, poll_ms):
    """
    Wait for the first of: refresh due, a key press, or the poll timing out.

    The timer is checked first; a key typed meanwhile stays in the curses input
    buffer and wins the next iteration.
    """
    if timer.due():
        timer.consume()
        return Stimulus(REFRESH, None)

    wait_ms = min(poll_ms, max(1, math.ceil(timer.remaining() * 1000)))
    stdscr.timeout(wait_ms)
    k = stdscr.getch()
    if k != -1:
        return Stimulus(KEY, k)

    if timer.due():
        timer.consume()
        return Stimulus(REFRESH, None)
    return Stimulus(IDLE, None)


def handle_key(app, k):
    """Dispatch one key. Returns False when the loop should stop."""
    if k == KEY_QUIT:
        return False
    if k == curses.KEY_DOWN:
        app.select_next()
    elif k == curses.KEY_UP:
        app.select_previous()
    return True


def run_app(stdscr, app, refresh_interval=2.0, poll_ms=250, worker=None, timer=None, render=None):
    render = render or ui.draw
    timer = timer or RefreshTimer(refresh_interval)
    worker = worker or RefreshWorker(app)
    debug_log(f"LOOP: Started (refresh {refresh_interval}s, poll {poll_ms}ms)")
    try:
        while True:
            worker.apply_finished()
            render(stdscr, app)

            stimulus = next_stimulus(stdscr, timer, poll_ms)
            if stimulus.kind == REFRESH:
                worker.start()
            elif stimulus.kind == KEY:
                if not handle_key(app, stimulus.key):
                    debug_log("LOOP: Quit requested")
                    return
    finally:
        worker.shutdown()
