#!/usr/bin/env python3
"""
Timed typing test flow: input loop, metrics clock and results screen
"""

import logging

from .config import TEST_DURATION, TICK_INTERVAL
from .events import KeyKind, SessionResult
from .metrics import MetricsClock, compute_metrics
from .session import Session
from .words import WordBankError, load_word_bank

log = logging.getLogger(__name__)


def wait_for_choice(ui):
    """Block on the results screen until Tab (restart) or Esc (back)."""
    while True:
        event = ui.next_key_event()
        if event.kind is KeyKind.EXIT:
            return SessionResult.BACK
        if event.kind is KeyKind.RESTART:
            return SessionResult.RESTART


def run_typing_test(ui, word_bank, duration=TEST_DURATION, interval=TICK_INTERVAL, rng=None):
    """Run one timed test and return what the user wants next."""
    session = Session(word_bank, ui, rng=rng).initialize()
    clock = MetricsClock(session.counters, session.active, ui, duration=duration, interval=interval)
    clock.start()

    result = None
    try:
        while session.active.is_active():
            event = ui.next_key_event()
            # The clock may have expired while we were blocked on the read
            if not session.active.is_active():
                break
            result = session.handle_key(event)
            if result is not None:
                break
    finally:
        # Never leave a timer drawing over the next screen
        session.active.deactivate()
        clock.join()

    if result is not None:
        log.info("Test left early: %s", result.value)
        return result

    typed, errors = session.counters.snapshot()
    final = compute_metrics(typed, errors, min(clock.elapsed(), duration), duration)
    log.info("Test finished: %d WPM, %d%% accuracy, %d lines", final.wpm, final.accuracy, session.lines_completed)
    ui.draw_results(final)
    return wait_for_choice(ui)


def run_typing_practice(ui, word_bank=None):
    """Main entry point for typing practice: repeat tests until the user goes back."""
    ui.log("📝 Starting typing test...")

    if word_bank is None:
        try:
            word_bank = load_word_bank()
        except WordBankError as e:
            ui.log(f"❌ {e}")
            ui.log("💡 Put a words.txt next to you or set TYPEWPM_WORDS / TYPEWPM_WORDS_URL")
            return

    ui.log(f"📚 {len(word_bank)} words loaded")

    tests = 0
    try:
        while True:
            tests += 1
            result = run_typing_test(ui, word_bank)
            if result is SessionResult.BACK:
                break
    except WordBankError as e:
        ui.log(f"❌ {e}")
    finally:
        ui.log(f"✅ Typing practice ended after {tests} test(s)")
