"""Key events, render styles and session outcomes shared by the UI and the engine."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class KeyKind(Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    EXIT = "exit"          # Esc
    RESTART = "restart"    # Tab
    OTHER = "other"        # timeouts, read errors, unmapped keys


@dataclass(frozen=True)
class KeyEvent:
    kind: KeyKind
    char: Optional[str] = None

    @classmethod
    def character(cls, ch):
        return cls(KeyKind.CHAR, ch)


# Reusable singletons for the payload-free kinds
BACKSPACE = KeyEvent(KeyKind.BACKSPACE)
EXIT = KeyEvent(KeyKind.EXIT)
RESTART = KeyEvent(KeyKind.RESTART)
IGNORED = KeyEvent(KeyKind.OTHER)


class Style(Enum):
    NEUTRAL = "neutral"      # untyped text under the cursor after a backspace
    CORRECT = "correct"
    INCORRECT = "incorrect"
    STALE = "stale"          # lines not reached yet


class SessionResult(Enum):
    BACK = "back"
    RESTART = "restart"
