"""Configuration and UI classes."""

import os
import curses
import logging
import tempfile
import threading
import unicodedata
from datetime import datetime

from .events import KeyEvent, Style, BACKSPACE, EXIT, RESTART, IGNORED


# Configuration constants
WINDOW_SIZE = 6           # previous line + five lookahead lines
MAX_LINE_WIDTH = 80
TEST_DURATION = 30        # seconds, fixed
TICK_INTERVAL = 0.5       # seconds between metrics samples
KEY_TIMEOUT_MS = 100      # curses read timeout so expiry is noticed without a keypress
CACHE_DAYS = 2

WORDS_PATH = os.environ.get("TYPEWPM_WORDS", "words.txt")
WORDS_URL = os.environ.get("TYPEWPM_WORDS_URL")
WORDS_CACHE = os.path.join(tempfile.gettempdir(), "typewpm_words_cache.txt")
LOG_FILE = os.path.join(tempfile.gettempdir(), "typewpm.log")

# Rows used by the typing screen (the lines themselves are centered vertically)
WPM_ROW = 1
ACC_ROW = 2
TIMER_ROW = 4

log = logging.getLogger("typewpm.ui")


def display_width(text):
    """Calculate the display width of text, accounting for Unicode characters"""
    width = 0
    for char in text:
        category = unicodedata.category(char)
        if category in ('Mn', 'Mc', 'Me'):  # Combining marks don't add width
            continue
        eaw = unicodedata.east_asian_width(char)
        if eaw in ('F', 'W'):  # Fullwidth or Wide
            width += 2
        elif category[0] == 'C':  # Control characters
            width += 0
        else:
            width += 1
    return width


def setup_logging(log_file=LOG_FILE, level=logging.INFO):
    """File-only logging; the terminal belongs to curses."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.FileHandler(log_file, encoding="utf-8")],
    )


class NCursesUI:
    def __init__(self):
        self.stdscr = None
        self.height = 0
        self.width = 0
        self.log_lines = []
        self.status = "Ready"
        self.line_padding = 0      # left column of the current line, set by draw_full
        self.max_line_width = MAX_LINE_WIDTH
        # Input thread and metrics thread both draw; curses itself is not thread safe
        self._draw_lock = threading.Lock()

    def init_colors(self):
        curses.start_color()
        curses.init_pair(1, curses.COLOR_WHITE, curses.COLOR_BLUE)    # Header
        curses.init_pair(2, curses.COLOR_GREEN, curses.COLOR_BLACK)   # Success
        curses.init_pair(3, curses.COLOR_RED, curses.COLOR_BLACK)     # Error / incorrect chars
        curses.init_pair(4, curses.COLOR_YELLOW, curses.COLOR_BLACK)  # Warning
        curses.init_pair(5, curses.COLOR_CYAN, curses.COLOR_BLACK)    # Info
        curses.init_pair(6, curses.COLOR_BLACK, curses.COLOR_WHITE)   # Menu selection
        curses.init_pair(7, curses.COLOR_WHITE, curses.COLOR_BLACK)   # Correct chars

    def setup_screen(self, stdscr):
        self.stdscr = stdscr
        self.height, self.width = stdscr.getmaxyx()
        curses.curs_set(0)  # Hide cursor
        stdscr.keypad(True)  # Enable special keys (arrow keys, function keys, etc.)
        stdscr.leaveok(True)  # Prevent cursor artifacts
        curses.set_escdelay(25)  # Esc exits a session, don't wait a full second for it
        self.init_colors()
        stdscr.clear()

    def style_attr(self, style):
        if style is Style.CORRECT:
            return curses.color_pair(7)
        if style is Style.INCORRECT:
            return curses.color_pair(3) | curses.A_BOLD
        # neutral and stale text are both "not typed yet"
        return curses.A_DIM

    # ------------------------------------------------------------------
    # Main screen: header, log panel, status line
    # ------------------------------------------------------------------

    def draw_header(self):
        title = "⌨️  TypeWPM"
        self.stdscr.attron(curses.color_pair(1) | curses.A_BOLD)
        self.stdscr.addstr(0, max(0, (self.width - display_width(title)) // 2), title)
        self.stdscr.attroff(curses.color_pair(1) | curses.A_BOLD)

    def draw_status(self):
        status_line = f"Status: {self.status}"
        try:
            self.stdscr.addstr(self.height - 1, 0, status_line[:self.width - 1])
        except curses.error:
            pass

    def draw_log_window(self, start_row=3, height=None):
        if height is None:
            height = self.height - 5
        if height < 2:
            return

        try:
            for i in range(height):
                self.stdscr.addstr(start_row + i, 0, "│")
                self.stdscr.addstr(start_row + i, self.width - 1, "│")
            self.stdscr.addstr(start_row - 1, 0, "┌" + "─" * (self.width - 2) + "┐")
            self.stdscr.addstr(start_row + height, 0, "└" + "─" * (self.width - 2) + "┘")
        except curses.error:
            pass

        visible_lines = height - 1
        recent_logs = self.log_lines[-visible_lines:]
        for i, line in enumerate(recent_logs):
            color = curses.color_pair(0)
            if line.startswith("✅"):
                color = curses.color_pair(2)
            elif line.startswith("❌") or line.startswith("⚠️"):
                color = curses.color_pair(3)
            try:
                self.stdscr.addstr(start_row + i + 1, 1, " " * (self.width - 2))
                self.stdscr.addstr(start_row + i + 1, 1, line[:self.width - 3], color)
            except curses.error:
                pass

    def log(self, message):
        timestamp = datetime.now().strftime("%H:%M:%S")
        self.log_lines.append(f"[{timestamp}] {message}")
        if len(self.log_lines) > 1000:  # Keep log manageable
            self.log_lines = self.log_lines[-500:]
        log.info(message)
        self.refresh_display()

    def set_status(self, status):
        self.status = status
        self.refresh_display()

    def refresh_display(self):
        if self.stdscr:
            self.height, self.width = self.stdscr.getmaxyx()
            self.stdscr.erase()
            self.draw_header()
            self.draw_log_window()
            self.draw_status()
            self.stdscr.refresh()

    def show_menu(self, title, options):
        menu_height = len(options) + 6  # Title + borders + instructions
        instructions = "↑↓/j/k: Navigate, Enter: Select, Esc/q: Back"
        menu_width = max(len(title), max(len(opt) for opt in options) + 4, len(instructions)) + 4
        start_y = max(0, (self.height - menu_height) // 2)
        start_x = max(0, (self.width - menu_width) // 2)

        menu_win = curses.newwin(menu_height, menu_width, start_y, start_x)
        menu_win.keypad(True)  # Enable arrow keys for this window

        current = 0

        def draw_menu():
            menu_win.erase()
            menu_win.box()
            menu_win.attron(curses.color_pair(1) | curses.A_BOLD)
            menu_win.addstr(1, (menu_width - len(title)) // 2, title)
            menu_win.attroff(curses.color_pair(1) | curses.A_BOLD)

            for i, option in enumerate(options):
                y = 3 + i
                if i == current:
                    menu_win.attron(curses.color_pair(6))
                    menu_win.addstr(y, 2, f"> {option}")
                    menu_win.attroff(curses.color_pair(6))
                else:
                    menu_win.addstr(y, 2, f"  {option}")

            menu_win.addstr(menu_height - 2, 2, instructions[:menu_width - 4])
            menu_win.refresh()

        while True:
            draw_menu()
            key = menu_win.getch()

            if key in (curses.KEY_UP, ord('k')):
                current = (current - 1) % len(options)
            elif key in (curses.KEY_DOWN, ord('j')):
                current = (current + 1) % len(options)
            elif key == 10 or key == 13 or key == curses.KEY_ENTER:
                del menu_win
                self.refresh_display()
                return current
            elif key == 27 or key == ord('q'):  # Escape
                del menu_win
                self.refresh_display()
                return -1

    # ------------------------------------------------------------------
    # Typing screen: renderer used by the session and the metrics clock
    # ------------------------------------------------------------------

    def get_padding(self, words):
        text_length = display_width(" ".join(words))
        return max(0, (self.width - text_length) // 2)

    def _print_centered_words(self, words, row, attr, errors=None):
        text = " ".join(words)
        padding = self.get_padding(words)
        try:
            self.stdscr.addstr(row, padding, text, attr)
        except curses.error:
            pass

        # Mistyped characters of a finished line, spaces shown as underscores
        for offset in errors or ():
            ch = text[offset] if offset < len(text) else "_"
            ch = "_" if ch == " " else ch
            try:
                self.stdscr.addstr(row, padding + offset, ch, self.style_attr(Style.INCORRECT))
            except curses.error:
                pass

    def draw_full(self, window, style_overrides, clear_all=False):
        """Redraw the previous, current and next lines.

        ``style_overrides`` holds error offsets for the previous line.
        With ``clear_all`` the metrics rows are wiped as well.
        """
        with self._draw_lock:
            self.height, self.width = self.stdscr.getmaxyx()
            if clear_all:
                self.stdscr.erase()
            else:
                self.stdscr.move(TIMER_ROW + 1, 0)
                self.stdscr.clrtobot()

            v_center = self.height // 2
            if window[0]:
                self._print_centered_words(
                    window[0], v_center - 1, self.style_attr(Style.CORRECT), style_overrides
                )
            for i in (1, 2):
                self._print_centered_words(window[i], v_center - 1 + i, self.style_attr(Style.STALE))

            self.line_padding = self.get_padding(window[1])
            self.stdscr.refresh()

    def draw_char(self, char, offset, style):
        with self._draw_lock:
            try:
                self.stdscr.addstr(self.height // 2, self.line_padding + offset, char, self.style_attr(style))
            except curses.error:
                pass
            self.stdscr.refresh()

    def draw_metrics(self, wpm, accuracy, remaining):
        from .metrics import format_remaining

        with self._draw_lock:
            timer_padding = max(0, (self.width - 5) // 2)
            metrics_padding = max(0, (self.width - self.max_line_width) // 2)
            try:
                attr = self.style_attr(Style.CORRECT)
                self.stdscr.addstr(WPM_ROW, metrics_padding, f"WPM {wpm:3}", attr)
                self.stdscr.addstr(ACC_ROW, metrics_padding, f"ACC {accuracy:3}%", attr)
                self.stdscr.addstr(TIMER_ROW, timer_padding, format_remaining(remaining), attr)
            except curses.error:
                pass
            self.stdscr.refresh()

    def draw_results(self, metrics):
        """Final score screen shown after the timer runs out."""
        lines = [
            "⏰ Time's Up!",
            "",
            f"WPM       {metrics.wpm}",
            f"Accuracy  {metrics.accuracy}%",
            f"Typed     {metrics.typed} chars ({metrics.errors} wrong)",
            "",
            "Tab: Restart    Esc: Back to menu",
        ]
        with self._draw_lock:
            self.stdscr.erase()
            top = max(0, (self.height - len(lines)) // 2)
            for i, line in enumerate(lines):
                try:
                    self.stdscr.addstr(top + i, max(0, (self.width - display_width(line)) // 2), line)
                except curses.error:
                    pass
            self.stdscr.refresh()

    def next_key_event(self):
        """Read one key, waiting at most KEY_TIMEOUT_MS.

        Timeouts and read errors come back as an ignored event so the
        caller's loop never hangs on a dead input channel.
        """
        self.stdscr.timeout(KEY_TIMEOUT_MS)
        try:
            key = self.stdscr.get_wch()
        except curses.error:
            return IGNORED

        if key in (curses.KEY_BACKSPACE, "\x7f", "\b"):
            return BACKSPACE
        if key == "\x1b":
            return EXIT
        if key == "\t":
            return RESTART
        if isinstance(key, str) and key.isprintable():
            return KeyEvent.character(key)
        return IGNORED


# Global UI instance
ui = NCursesUI()
