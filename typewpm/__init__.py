"""
TypeWPM - terminal typing speed trainer.
Scrolling lines of random words, live WPM and accuracy under a 30 second timer.
"""

from .config import *
from .events import *
from .metrics import *
from .words import *
from .session import *
from .typing_practice import *
from .main_app import *

# Re-export the main symbols
__all__ = [
    # Configuration constants
    'WINDOW_SIZE',
    'MAX_LINE_WIDTH',
    'TEST_DURATION',
    'TICK_INTERVAL',
    'WORDS_PATH',
    'WORDS_URL',

    # UI class
    'NCursesUI',
    'ui',

    # Events and styles
    'KeyKind',
    'KeyEvent',
    'Style',
    'SessionResult',

    # Words
    'WordBankError',
    'load_word_bank',
    'random_line',

    # Engine
    'Session',
    'MetricsClock',
    'Metrics',
    'SessionCounters',
    'ActiveFlag',
    'SessionFailure',
    'compute_metrics',
    'format_remaining',

    # Application
    'run_typing_test',
    'run_typing_practice',
    'main_app',
]
