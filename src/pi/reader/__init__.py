"""pi-reader: Interactive terminal line editing with history and completion."""

# Completion
from pi.reader.completer import Completer, CompletionEvent, CompletionHandler, Direction
from pi.reader.completions import Completions

# Configuration and errors
from pi.reader.config import DEFAULT_EXIT_KEYS, INTERRUPT_POLICIES, ReaderConfig
from pi.reader.errors import InputInterrupt

# Events
from pi.reader.events import EventBus, KeyListener

# History
from pi.reader.history import History, exclude_blank

# Keyboard input handling
from pi.reader.keys import Key, KeyEvent, KeyName, Modifier, classify

# Line buffer
from pi.reader.line import Line, LineMode

# Reader
from pi.reader.reader import Reader

__all__ = [
    # Completion
    "Completer",
    "CompletionEvent",
    "CompletionHandler",
    "Completions",
    "Direction",
    # Configuration and errors
    "DEFAULT_EXIT_KEYS",
    "INTERRUPT_POLICIES",
    "InputInterrupt",
    "ReaderConfig",
    # Events
    "EventBus",
    "KeyListener",
    # History
    "History",
    "exclude_blank",
    # Keyboard input handling
    "Key",
    "KeyEvent",
    "KeyName",
    "Modifier",
    "classify",
    # Line buffer
    "Line",
    "LineMode",
    # Reader
    "Reader",
]
