"""Tests for typewpm.session – cursor model, error marks and line advance."""

import random

import pytest

from typewpm.events import BACKSPACE, EXIT, IGNORED, RESTART, KeyEvent, SessionResult, Style
from typewpm.metrics import compute_accuracy
from typewpm.session import Session
from typewpm.words import WordBankError

from conftest import RecordingRenderer

BANK = ("cat", "dog", "bird", "fish", "frog")


def make_session(renderer, bank=BANK, window_size=6, max_line_width=20, seed=0):
    return Session(bank, renderer, window_size=window_size,
                   max_line_width=max_line_width, rng=random.Random(seed)).initialize()


def with_current_line(session, line):
    """Force a known current line so expectations can be spelled out."""
    session.window[1] = list(line)
    return session


def state(session):
    return session.line_index, session.offset, list(session.line_errors), session.counters.snapshot()


def type_text(session, text):
    for ch in text:
        session.apply_character(ch)


# ---------------------------------------------------------------------------
# initialize
# ---------------------------------------------------------------------------

class TestInitialize:
    def test_window_layout(self, renderer):
        s = make_session(renderer)
        assert len(s.window) == 6
        assert s.window[0] == []
        assert all(len(" ".join(line)) >= 20 for line in list(s.window)[1:])

    def test_resets_cursor_and_counters(self, renderer):
        s = make_session(renderer)
        type_text(s, "zz")
        s.initialize()
        assert state(s) == ((0, 0), 0, [], (0, 0))

    def test_full_redraw_clears_everything(self, renderer):
        s = make_session(renderer)
        window, overrides, clear_all = renderer.full_redraws[-1]
        assert window == [list(line) for line in s.window]
        assert overrides == []
        assert clear_all is True

    def test_empty_bank_is_fatal(self, renderer):
        with pytest.raises(WordBankError):
            Session((), renderer).initialize()

    def test_window_too_small(self, renderer):
        with pytest.raises(ValueError):
            Session(BANK, renderer, window_size=2)


# ---------------------------------------------------------------------------
# apply_character / apply_backspace on a known line
# ---------------------------------------------------------------------------

class TestTyping:
    def test_match_then_mismatch(self, renderer):
        s = with_current_line(make_session(renderer), ["cat"])
        s.apply_character("c")
        assert s.counters.snapshot() == (1, 0)
        assert s.line_index == (0, 1)

        s.apply_character("x")
        assert s.counters.snapshot() == (2, 1)
        assert s.line_errors == [1]
        assert s.line_index == (0, 2)
        assert renderer.chars == [("c", 0, Style.CORRECT), ("a", 1, Style.INCORRECT)]

    def test_backspace_undoes_mismatch(self, renderer):
        s = with_current_line(make_session(renderer), ["cat"])
        type_text(s, "cx")
        s.apply_backspace()
        assert s.counters.snapshot() == (1, 0)
        assert s.line_errors == []
        assert s.line_index == (0, 1)
        assert renderer.chars[-1] == ("a", 1, Style.NEUTRAL)

    def test_wrong_space_shows_underscore(self, renderer):
        s = with_current_line(make_session(renderer), ["cat", "dog"])
        type_text(s, "catx")
        assert renderer.chars[-1] == ("_", 3, Style.INCORRECT)
        assert s.line_index == (1, 0)

    def test_backspace_across_word_boundary(self, renderer):
        s = with_current_line(make_session(renderer), ["cat", "dog"])
        type_text(s, "cat ")
        assert s.line_index == (1, 0)
        s.apply_backspace()
        assert s.line_index == (0, 3)
        assert s.offset == 3
        assert renderer.chars[-1] == (" ", 3, Style.NEUTRAL)

    def test_backspace_at_line_start_is_noop(self, renderer):
        s = with_current_line(make_session(renderer), ["cat"])
        before = state(s)
        drawn = len(renderer.chars)
        s.apply_backspace()
        assert state(s) == before
        assert len(renderer.chars) == drawn

    def test_each_keystroke_adds_at_most_one_mark(self, renderer):
        s = with_current_line(make_session(renderer), ["cat", "dog", "bird"])
        for ch in "xxxxxxxx":
            marks = len(s.line_errors)
            s.apply_character(ch)
            assert len(s.line_errors) - marks in (0, 1)

    @pytest.mark.parametrize("text", ["c", "cat", "cax dog", "xyz  ", "cat do"])
    def test_round_trip_restores_state(self, renderer, text):
        s = with_current_line(make_session(renderer), ["cat", "dog", "bird"])
        type_text(s, "ca")
        before = state(s)
        type_text(s, text)
        for _ in text:
            s.apply_backspace()
        assert state(s) == before

    def test_only_latest_mark_is_reconciled(self, renderer):
        s = with_current_line(make_session(renderer), ["cat", "dog"])
        type_text(s, "xat")      # mark at 0
        s.apply_backspace()      # offset 2, latest mark is 0 -> untouched
        assert s.line_errors == [0]
        assert s.counters.snapshot() == (2, 1)

    def test_counters_settled_before_drawing(self):
        # Whatever reads the counters while a key is being drawn sees both counts
        class SamplingRenderer(RecordingRenderer):
            counters = None

            def draw_char(self, char, offset, style):
                super().draw_char(char, offset, style)
                typed, errors = self.counters.snapshot()
                self.samples.append((typed, errors, compute_accuracy(typed, errors)))

        renderer = SamplingRenderer()
        renderer.samples = []
        s = with_current_line(make_session(renderer), ["cat", "dog"])
        renderer.counters = s.counters

        type_text(s, "xxxx")
        s.apply_backspace()

        assert all(acc >= 0 for _, _, acc in renderer.samples)
        assert renderer.samples[-1] == (3, 3, 0)
        assert s.counters.snapshot() == (3, 3)


# ---------------------------------------------------------------------------
# Line advance
# ---------------------------------------------------------------------------

class TestLineAdvance:
    def test_advance_fires_once_after_trailing_space(self, renderer):
        s = with_current_line(make_session(renderer), ["cat", "dog"])
        before = [list(line) for line in s.window]
        redraws = len(renderer.full_redraws)

        type_text(s, "cat do")
        s.apply_character("x")   # wrong last letter, offset 6
        assert len(renderer.full_redraws) == redraws
        s.apply_character(" ")

        assert len(renderer.full_redraws) == redraws + 1
        assert s.lines_completed == 1
        after = list(s.window)
        assert len(after) == len(before)
        assert after[0] == ["cat", "dog"]
        assert after[1:-1] == before[2:]
        assert state(s) == ((0, 0), 0, [], (8, 1))

    def test_finished_line_errors_go_to_redraw(self, renderer):
        s = with_current_line(make_session(renderer), ["cat"])
        type_text(s, "cxt ")
        window, overrides, clear_all = renderer.full_redraws[-1]
        assert overrides == [1]
        assert clear_all is False
        assert window[0] == ["cat"]

    def test_counters_survive_advance(self, renderer):
        s = with_current_line(make_session(renderer), ["cat"])
        type_text(s, "cat ")
        assert s.counters.snapshot() == (4, 0)

    def test_backspace_after_advance_stays_on_new_line(self, renderer):
        s = with_current_line(make_session(renderer), ["cat"])
        type_text(s, "cat ")
        s.apply_backspace()
        assert state(s) == ((0, 0), 0, [], (4, 0))


# ---------------------------------------------------------------------------
# Key dispatch
# ---------------------------------------------------------------------------

class TestHandleKey:
    def test_char_and_backspace(self, renderer):
        s = with_current_line(make_session(renderer), ["cat"])
        assert s.handle_key(KeyEvent.character("c")) is None
        assert s.handle_key(BACKSPACE) is None
        assert s.counters.snapshot() == (0, 0)

    def test_other_is_ignored(self, renderer):
        s = make_session(renderer)
        before = state(s)
        assert s.handle_key(IGNORED) is None
        assert state(s) == before

    def test_exit_and_restart_clear_flag(self, renderer):
        s = make_session(renderer)
        assert s.handle_key(EXIT) is SessionResult.BACK
        assert not s.active.is_active()

        s = make_session(renderer)
        assert s.handle_key(RESTART) is SessionResult.RESTART
        assert not s.active.is_active()
