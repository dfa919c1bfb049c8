#!/usr/bin/env python3
"""
TypeWPM - Main executable entry point
Allows the module to be executed with: python -m typewpm
"""

import sys
import curses
import logging

from wasabi import msg

from .config import LOG_FILE, setup_logging
from .main_app import main_app


def main():
    setup_logging()
    try:
        curses.wrapper(main_app)
    except Exception as e:
        logging.getLogger("typewpm").exception("Fatal error")
        msg.fail(f"Fatal error: {e}", f"Details in {LOG_FILE}")
        sys.exit(1)

if __name__ == "__main__":
    main()
