"""Shared fakes for the typing engine tests."""

import time

import pytest

from typewpm.events import IGNORED


class RecordingRenderer:
    """Stands in for NCursesUI's drawing side and remembers every call."""

    def __init__(self):
        self.full_redraws = []
        self.chars = []
        self.metrics = []
        self.results = []

    def draw_full(self, window, style_overrides, clear_all=False):
        self.full_redraws.append(
            ([list(line) for line in window], list(style_overrides or []), clear_all)
        )

    def draw_char(self, char, offset, style):
        self.chars.append((char, offset, style))

    def draw_metrics(self, wpm, accuracy, remaining):
        self.metrics.append((wpm, accuracy, remaining))

    def draw_results(self, metrics):
        self.results.append(metrics)


class ScriptedUI(RecordingRenderer):
    """Renderer plus an input source that replays a fixed list of key events."""

    def __init__(self, events, results_events=(), idle=0.005):
        super().__init__()
        self.events = list(events)
        # Replayed only once the results screen has been drawn
        self.results_events = list(results_events)
        self.idle = idle
        self.reads = 0
        self.log_lines = []

    def next_key_event(self):
        self.reads += 1
        if self.results and self.results_events:
            return self.results_events.pop(0)
        if self.events:
            return self.events.pop(0)
        time.sleep(self.idle)  # like a curses read timing out
        return IGNORED

    def log(self, message):
        self.log_lines.append(message)


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def fake_clock():
    return FakeClock()
