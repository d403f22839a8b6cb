"""Console port used by the line editor, and its ANSI terminal implementation.

The editing core only needs a cursor it can query and place, the buffer
width, and a way to write text. ``ProcessConsole`` provides that on top of
``sys.stdin``/``sys.stdout``. It tracks the cursor itself (ANSI terminals
cannot be queried cheaply) and reads key events in raw mode.
"""

from __future__ import annotations

import contextlib
import logging
import os
import select
import sys
import termios
import tty
from collections import deque
from typing import Iterator, Protocol

from pi.readline.keys import KeyEvent
from pi.readline.terminal_input import parse_input, split_sequences
from pi.readline.utils import visible_width

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_CURSOR_UP_FMT = "\x1b[{}A"
_CURSOR_DOWN_FMT = "\x1b[{}B"
_CURSOR_FORWARD_FMT = "\x1b[{}C"

# Time to wait for the rest of an escape sequence after a lone ESC
_ESCAPE_TIMEOUT = 0.01


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


class Console(Protocol):
    """The console port the line editor renders through."""

    @property
    def cursor_left(self) -> int: ...

    @property
    def cursor_top(self) -> int: ...

    @property
    def buffer_width(self) -> int: ...

    password_mode: bool
    password_mask_char: str

    def set_cursor_position(self, left: int, top: int) -> None: ...

    def write(self, text: str) -> None:
        """Write line text, masked when password mode is active."""
        ...

    def write_raw(self, text: str) -> None:
        """Write text as-is (prompts, erase padding, newlines)."""
        ...


class KeySource(Protocol):
    """Where the line reader gets its key events from."""

    def read_key(self, timeout: float | None = None) -> KeyEvent | None:
        """Return the next key, or ``None`` if *timeout* expired or ``wake`` was called."""
        ...

    def wake(self) -> None:
        """Make a pending ``read_key`` return ``None`` promptly."""
        ...

    def raw_mode(self) -> contextlib.AbstractContextManager[None]: ...


class TerminalConsole(Console, KeySource, Protocol):
    """A console that is also a key source."""


# ---------------------------------------------------------------------------
# ProcessConsole implementation
# ---------------------------------------------------------------------------


class ProcessConsole:
    """Console backed by ``sys.stdin``/``sys.stdout``.

    The cursor position is relative to the row the console was created on.
    Writes that exactly fill the last column are followed by ``\\r\\n`` so the
    terminal's deferred wrap matches the tracked position.
    """

    def __init__(self) -> None:
        self._left = 0
        self._top = 0
        self.password_mode: bool = False
        self.password_mask_char: str = ""
        self._pending: deque[KeyEvent] = deque()
        self._wake_read, self._wake_write = os.pipe()

    # -- properties ---------------------------------------------------------

    @property
    def cursor_left(self) -> int:
        return self._left

    @property
    def cursor_top(self) -> int:
        return self._top

    @property
    def buffer_width(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    # -- output -------------------------------------------------------------

    def write(self, text: str) -> None:
        if self.password_mode:
            if not self.password_mask_char:
                return
            text = self.password_mask_char * len(text)
        self._emit(text)

    def write_raw(self, text: str) -> None:
        self._emit(text)

    def set_cursor_position(self, left: int, top: int) -> None:
        if self.password_mode and not self.password_mask_char:
            return
        moves = []
        if top < self._top:
            moves.append(_CURSOR_UP_FMT.format(self._top - top))
        elif top > self._top:
            moves.append(_CURSOR_DOWN_FMT.format(top - self._top))
        moves.append("\r")
        if left > 0:
            moves.append(_CURSOR_FORWARD_FMT.format(left))
        self._raw_write("".join(moves))
        self._left = left
        self._top = top

    def _emit(self, text: str) -> None:
        if not text:
            return
        width = self.buffer_width
        segments = text.split("\n")
        out = []
        for i, segment in enumerate(segments):
            if i:
                out.append("\r\n")
                self._left = 0
                self._top += 1
            if "\r" in segment:
                head, _, segment = segment.rpartition("\r")
                out.append(head + "\r")
                self._left = 0
            if not segment:
                continue
            out.append(segment)
            column = self._left + visible_width(segment)
            self._top += column // width
            self._left = column % width
            if column >= width and self._left == 0:
                out.append("\r\n")
        self._raw_write("".join(out))

    def _raw_write(self, data: str) -> None:
        try:
            sys.stdout.write(data)
            sys.stdout.flush()
        except OSError:
            pass

    # -- input --------------------------------------------------------------

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Put stdin into raw mode for the duration of a read."""
        fd = sys.stdin.fileno()
        try:
            original = termios.tcgetattr(fd)
        except termios.error:
            # Not a terminal (piped input): nothing to restore
            yield
            return
        tty.setraw(fd)
        try:
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, original)

    def read_key(self, timeout: float | None = None) -> KeyEvent | None:
        if self._pending:
            return self._pending.popleft()

        fd = sys.stdin.fileno()
        readable, _, _ = select.select([fd, self._wake_read], [], [], timeout)
        if self._wake_read in readable:
            os.read(self._wake_read, 512)
            return None
        if fd not in readable:
            return None

        data = os.read(fd, 4096).decode("utf-8", errors="replace")
        if not data:
            raise EOFError("stdin closed")
        if data.endswith("\x1b"):
            # A lone ESC may be the first byte of a sequence split across reads
            more, _, _ = select.select([fd], [], [], _ESCAPE_TIMEOUT)
            if more:
                data += os.read(fd, 4096).decode("utf-8", errors="replace")

        for sequence in split_sequences(data):
            event = parse_input(sequence)
            if event is not None:
                self._pending.append(event)
            else:
                logger.debug("Ignoring unrecognised input sequence %r", sequence)
        return self._pending.popleft() if self._pending else None

    def wake(self) -> None:
        os.write(self._wake_write, b"w")

    def close(self) -> None:
        for fd in (self._wake_read, self._wake_write):
            with contextlib.suppress(OSError):
                os.close(fd)
