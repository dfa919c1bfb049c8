"""Line window, cursor and per-keystroke correctness for one typing test."""

import logging
from collections import deque

from .config import WINDOW_SIZE, MAX_LINE_WIDTH
from .events import KeyKind, SessionResult, Style
from .metrics import ActiveFlag, SessionCounters
from .words import WordBankError, random_line

log = logging.getLogger(__name__)


class Session:
    """Typing state for one timed test.

    ``window[0]`` is the line just finished (empty at the start), ``window[1]``
    the line being typed and the rest are upcoming lines. The cursor is a
    ``(word_index, char_index)`` pair into ``window[1]``; a ``char_index``
    equal to the word length points at the space after the word. ``offset``
    is the same position as a column of the joined line, used for drawing.

    Setting up a test is split in two: the constructor takes the word bank,
    ``window_size`` and ``max_line_width``, and ``initialize()`` fills the
    window, resets cursor, marks and counters and draws the first screen.
    ``initialize()`` returns the session, so ``Session(...).initialize()``
    reads as a single call.
    """

    def __init__(self, word_bank, renderer, window_size=WINDOW_SIZE,
                 max_line_width=MAX_LINE_WIDTH, rng=None, counters=None, active=None):
        if window_size < 3:
            raise ValueError("window_size must hold a previous, current and next line")
        self.word_bank = word_bank
        self.renderer = renderer
        self.window_size = window_size
        self.max_line_width = max_line_width
        self.rng = rng
        self.counters = counters or SessionCounters()
        self.active = active or ActiveFlag()
        self.window = deque()
        self.line_index = (0, 0)
        self.offset = 0
        self.line_errors = []
        self.lines_completed = 0

    def new_line(self):
        return random_line(self.word_bank, self.max_line_width, self.rng)

    def initialize(self):
        if not self.word_bank:
            raise WordBankError("Cannot start a session with an empty word bank")

        self.window = deque([[]])
        for _ in range(self.window_size - 1):
            self.window.append(self.new_line())

        self.line_index = (0, 0)
        self.offset = 0
        self.line_errors = []
        self.lines_completed = 0
        self.counters.reset()
        self.renderer.draw_full(self.window, None, clear_all=True)
        return self

    @property
    def current_line(self):
        return self.window[1]

    def expected_char(self):
        word_idx, char_idx = self.line_index
        word = self.current_line[word_idx]
        return word[char_idx] if char_idx < len(word) else " "

    def handle_key(self, event):
        """Apply one key event. Returns a SessionResult for Esc/Tab, else None."""
        if event.kind is KeyKind.CHAR:
            self.apply_character(event.char)
        elif event.kind is KeyKind.BACKSPACE:
            self.apply_backspace()
        elif event.kind is KeyKind.EXIT:
            return self.request_exit()
        elif event.kind is KeyKind.RESTART:
            return self.request_restart()
        return None

    def apply_character(self, ch):
        expected = self.expected_char()
        wrong = ch != expected
        self.counters.add(typed=1, errors=1 if wrong else 0)

        if wrong:
            self.line_errors.append(self.offset)
            shown = "_" if expected == " " else expected
            self.renderer.draw_char(shown, self.offset, Style.INCORRECT)
        else:
            self.renderer.draw_char(ch, self.offset, Style.CORRECT)

        word_idx, char_idx = self.line_index
        self.offset += 1
        if char_idx < len(self.current_line[word_idx]):
            self.line_index = (word_idx, char_idx + 1)
        else:
            self.line_index = (word_idx + 1, 0)

        # The last word has no follower in this line, so compare against the word count
        if self.line_index[0] == len(self.current_line):
            self.advance_line()

    def apply_backspace(self):
        if self.line_index == (0, 0):
            return

        word_idx, char_idx = self.line_index
        self.offset -= 1
        if char_idx == 0:
            word_idx -= 1
            char_idx = len(self.current_line[word_idx])
            shown = " "
        else:
            char_idx -= 1
            shown = self.current_line[word_idx][char_idx]
        self.line_index = (word_idx, char_idx)

        # Only the most recent mark is reconciled
        undo_error = bool(self.line_errors) and self.line_errors[-1] == self.offset
        if undo_error:
            self.line_errors.pop()
        # One locked step for both counts
        self.counters.add(typed=-1, errors=-1 if undo_error else 0)

        self.renderer.draw_char(shown, self.offset, Style.NEUTRAL)

    def advance_line(self):
        self.window.append(self.new_line())
        self.window.popleft()
        self.lines_completed += 1

        self.renderer.draw_full(self.window, self.line_errors)

        self.line_errors = []
        self.line_index = (0, 0)
        self.offset = 0
        log.debug("Advanced to line %d", self.lines_completed)

    def request_exit(self):
        self.active.deactivate()
        return SessionResult.BACK

    def request_restart(self):
        self.active.deactivate()
        return SessionResult.RESTART
