"""Main application logic and menu loop."""

import logging

from .config import ui
from .metrics import SessionFailure
from .typing_practice import run_typing_practice
from .words import WordBankError, load_word_bank

log = logging.getLogger(__name__)

MENU_OPTIONS = [
    "Single player",
    "Multiplayer",
    "Exit",
]


def main_app(stdscr, word_bank=None):
    """Main application loop with menu interface."""
    ui.setup_screen(stdscr)
    ui.log("⌨️  TypeWPM started")
    ui.log("💡 Tab restarts a test, Esc goes back to this menu")

    if word_bank is None:
        try:
            word_bank = load_word_bank()
        except WordBankError as e:
            # Single player retries the load and reports it again
            log.warning("Word bank not loaded at startup: %s", e)

    ui.refresh_display()

    try:
        while True:
            choice = ui.show_menu("Main Menu", MENU_OPTIONS)

            if choice in (0, 1):  # Single player; multiplayer plays the same solo test
                try:
                    run_typing_practice(ui, word_bank)
                except SessionFailure as e:
                    log.exception("Typing session failed")
                    ui.log(f"❌ Session aborted: {e}")
                ui.refresh_display()
            elif choice == 2 or choice == -1:  # Exit
                ui.log("👋 Goodbye!")
                break

    except KeyboardInterrupt:
        ui.log("🛑 Interrupted by user.")
