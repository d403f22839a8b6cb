"""pi-readline: Emacs-style line editing for console prompts."""

# Key bindings
from pi.readline.bindings import (
    ARGUMENT_DIGIT_KEYS,
    DEFAULT_KEY_BINDINGS,
    Binding,
    KeyBindingError,
    KeyBindingTable,
    Operation,
)

# Line buffer
from pi.readline.buffer import LineBuffer

# Completion
from pi.readline.completion import (
    CompletionEngine,
    CompletionSource,
    WordCompletionSource,
    find_anchor,
)

# Console port and terminal implementation
from pi.readline.console import Console, KeySource, ProcessConsole, TerminalConsole

# Key handler
from pi.readline.handler import KeyHandler

# History
from pi.readline.history import HistoryNavigator

# Keys
from pi.readline.keys import Key, KeyEvent, KeyId, describe_key

# Kill buffer
from pi.readline.kill_buffer import KillBuffer

# Driver
from pi.readline.reader import LineReader, ReadInterrupted

# Settings
from pi.readline.settings import ReadLineSettings, load_settings

# Terminal input decoding
from pi.readline.terminal_input import parse_input, split_sequences

# Undo
from pi.readline.undo_log import UndoLog

# Utilities
from pi.readline.utils import strip_ansi, visible_width

__all__ = [
    # Bindings
    "ARGUMENT_DIGIT_KEYS",
    "DEFAULT_KEY_BINDINGS",
    "Binding",
    "KeyBindingError",
    "KeyBindingTable",
    "Operation",
    # Buffer
    "LineBuffer",
    # Completion
    "CompletionEngine",
    "CompletionSource",
    "WordCompletionSource",
    "find_anchor",
    # Console
    "Console",
    "KeySource",
    "ProcessConsole",
    "TerminalConsole",
    # Handler
    "KeyHandler",
    # History
    "HistoryNavigator",
    # Keys
    "Key",
    "KeyEvent",
    "KeyId",
    "describe_key",
    # Kill buffer
    "KillBuffer",
    # Reader
    "LineReader",
    "ReadInterrupted",
    # Settings
    "ReadLineSettings",
    "load_settings",
    # Terminal input
    "parse_input",
    "split_sequences",
    # Undo
    "UndoLog",
    # Utilities
    "strip_ansi",
    "visible_width",
]
