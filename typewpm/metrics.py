"""Live WPM/accuracy sampling on a background thread."""

import logging
import math
import threading
import time
from typing import NamedTuple

from .config import TEST_DURATION, TICK_INTERVAL

log = logging.getLogger(__name__)


class SessionFailure(RuntimeError):
    """The metrics clock thread died; the session state can't be trusted."""


class SessionCounters:
    """Typed and wrong character counts shared with the metrics clock.

    One lock guards both counts so a snapshot never pairs a new ``typed``
    with an old ``errors``.
    """

    def __init__(self):
        self._typed = 0
        self._errors = 0
        self._lock = threading.Lock()

    def add(self, typed=0, errors=0):
        with self._lock:
            self._typed += typed
            self._errors += errors

    def reset(self):
        with self._lock:
            self._typed = 0
            self._errors = 0

    def snapshot(self):
        """(typed, errors) as read right now."""
        with self._lock:
            return self._typed, self._errors


class ActiveFlag:
    """Cooperative cancellation: set while the session accepts input."""

    def __init__(self, active=True):
        self._active = threading.Event()
        self._cleared = threading.Event()
        self._lock = threading.Lock()
        if active:
            self._active.set()
        else:
            self._cleared.set()

    def is_active(self):
        return self._active.is_set()

    def deactivate(self):
        """Returns True only for the call that actually flipped the flag."""
        with self._lock:
            if not self._active.is_set():
                return False
            self._active.clear()
            self._cleared.set()
            return True

    def wait_cleared(self, timeout):
        """Sleep up to ``timeout`` seconds, waking early when deactivated."""
        return self._cleared.wait(timeout)


class Metrics(NamedTuple):
    wpm: int
    accuracy: int
    remaining: float
    typed: int = 0
    errors: int = 0


def compute_wpm(typed, elapsed_seconds):
    elapsed_minutes = elapsed_seconds / 60
    if elapsed_minutes == 0:
        return 0
    return math.floor(typed / 5 / elapsed_minutes)


def compute_accuracy(typed, errors):
    if typed == 0:
        return 100
    return max(0, math.floor(100 * (typed - errors) / typed))


def compute_metrics(typed, errors, elapsed_seconds, duration=TEST_DURATION):
    return Metrics(
        wpm=compute_wpm(typed, elapsed_seconds),
        accuracy=compute_accuracy(typed, errors),
        remaining=max(0.0, duration - elapsed_seconds),
        typed=typed,
        errors=errors,
    )


def format_remaining(seconds):
    """MM:SS of the whole seconds left."""
    whole = max(0, math.floor(seconds))
    return f"{whole // 60:02}:{whole % 60:02}"


class MetricsClock:
    """Samples the session counters every ``interval`` seconds for ``duration`` seconds.

    Each sample renders WPM, accuracy and the time left. When the duration is
    used up the clock clears the shared active flag and stops on that same
    tick; when someone else clears the flag first it simply stops.
    """

    def __init__(self, counters, active, renderer, duration=TEST_DURATION,
                 interval=TICK_INTERVAL, clock=time.monotonic):
        self.counters = counters
        self.active = active
        self.renderer = renderer
        self.duration = duration
        self.interval = interval
        self.clock = clock
        self.start_time = None
        self.expired = False
        self._thread = None
        self._error = None

    def elapsed(self):
        if self.start_time is None:
            return 0.0
        return self.clock() - self.start_time

    def snapshot(self):
        typed, errors = self.counters.snapshot()
        return compute_metrics(typed, errors, self.elapsed(), self.duration)

    def tick(self):
        """Take one sample. Returns False once the loop should stop."""
        if not self.active.is_active():
            return False

        elapsed = self.elapsed()
        if elapsed >= self.duration:
            self.expired = True
            self.active.deactivate()
            log.info("Session expired after %.1fs", elapsed)
            return False

        metrics = compute_metrics(*self.counters.snapshot(), elapsed, self.duration)
        self.renderer.draw_metrics(metrics.wpm, metrics.accuracy, metrics.remaining)
        return True

    def run(self):
        try:
            while self.tick():
                self.active.wait_cleared(self.interval)
        except Exception as e:
            self._error = e
            # Without a clock nobody would ever end the session
            self.active.deactivate()
            log.exception("Metrics clock crashed")

    def start(self):
        if self.start_time is None:
            self.start_time = self.clock()
        self._thread = threading.Thread(target=self.run, name="metrics-clock", daemon=True)
        self._thread.start()

    def join(self):
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        if self._error is not None:
            raise SessionFailure(f"Metrics clock failed: {self._error}") from self._error
