"""Line reader: the driver loop around ``KeyHandler``.

``LineReader.read`` writes a prompt, feeds key events from the console to a
fresh ``KeyHandler`` until a terminator key arrives, and returns the line.
The reader owns the history list and the binding table, so both persist
across reads.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from typing import Callable

from pi.readline.bindings import CustomAction, KeyBindingTable
from pi.readline.completion import CompletionSource
from pi.readline.console import ProcessConsole, TerminalConsole
from pi.readline.handler import KeyHandler
from pi.readline.keys import KeyEvent, KeyId, describe_key
from pi.readline.settings import ReadLineSettings

logger = logging.getLogger(__name__)

# Held by every non-forced read
_read_lock = threading.Lock()

_ACCEPT_KEYS: frozenset[KeyId] = frozenset({"enter", "ctrl+j"})
_EOF_KEY: KeyId = "ctrl+d"
_ABORT_KEY: KeyId = "ctrl+c"


class ReadInterrupted(Exception):
    """Raised when ``LineReader.interrupt`` cancels a read.

    ``text`` holds whatever had been typed so far.
    """

    def __init__(self, text: str) -> None:
        super().__init__("line read was interrupted")
        self.text = text


class LineReader:
    """Reads lines from a terminal console with Emacs-style editing.

    Args:
        console: Console and key source. Defaults to a ``ProcessConsole`` that
            ``close()`` releases.
        settings: Subsystem toggles and limits.
        completion: Completion source used by ``read`` (never by ``read_password``).
        history: Initial history entries.
        write_prompt: Writes prompts. Defaults to ``console.write_raw``.
    """

    def __init__(
        self,
        console: TerminalConsole | None = None,
        *,
        settings: ReadLineSettings | None = None,
        completion: CompletionSource | None = None,
        history: list[str] | None = None,
        write_prompt: Callable[[str], None] | None = None,
    ) -> None:
        self._owns_console = console is None
        self._console: TerminalConsole = console or ProcessConsole()
        self.settings = settings or ReadLineSettings()
        self.completion = completion
        self._history: list[str] = list(history or [])
        self._bindings = KeyBindingTable()
        self._write_prompt = write_prompt or self._console.write_raw
        self._interrupted = threading.Event()
        self._key_handler: KeyHandler | None = None

    @property
    def console(self) -> TerminalConsole:
        return self._console

    def close(self) -> None:
        """Release the console if this reader created it.

        A console passed in by the caller stays open and remains the caller's to close.
        """
        if self._owns_console and isinstance(self._console, ProcessConsole):
            self._console.close()
            self._owns_console = False

    @property
    def key_handler(self) -> KeyHandler | None:
        """The handler of the read in progress, if any."""
        return self._key_handler

    # -- history ------------------------------------------------------------

    def add_history(self, *lines: str) -> None:
        self._history.extend(lines)
        max_size = self.settings.history_max_size
        if max_size is not None and len(self._history) > max_size:
            del self._history[: len(self._history) - max_size]

    def get_history(self) -> list[str]:
        return self._history

    def set_history(self, lines: list[str]) -> None:
        self._history.clear()
        self.add_history(*lines)

    def clear_history(self) -> None:
        self._history.clear()

    # -- custom bindings ----------------------------------------------------

    def add_custom_binding(self, key: KeyId, action: CustomAction) -> None:
        self._bindings.add_custom_binding(key, action)

    def change_custom_binding(self, key: KeyId, action: CustomAction) -> None:
        self._bindings.change_custom_binding(key, action)

    def remove_custom_binding(self, key: KeyId) -> None:
        self._bindings.remove_custom_binding(key)

    # -- reading ------------------------------------------------------------

    def read(self, prompt: str = "", default: str = "", *, force: bool = False) -> str:
        """Read one line.

        Returns *default* when the line is blank and *default* is not.
        Otherwise the line is returned and, with history enabled, appended
        to history.

        Raises:
            ReadInterrupted: ``interrupt()`` was called during an interruptible read.
            KeyboardInterrupt: Ctrl-C while ``ctrl_c_enabled`` is off.
            EOFError: The input stream closed.
        """
        with self._lock(force):
            self._write_prompt(prompt)
            handler = KeyHandler(
                self._console,
                self._history,
                self.completion,
                settings=self.settings,
                bindings=self._bindings,
                prompt=prompt,
                write_prompt=self._write_prompt,
            )
            text = self._read_text(handler)

        if not text.strip() and default.strip():
            return default
        if self.settings.history_enabled and text:
            handler.history.append(text)
        return text

    def read_password(self, prompt: str = "", mask: str = "", *, force: bool = False) -> str:
        """Read one line without echo (or echoing *mask* per character).

        History and completion are not available and the line is never
        added to history.
        """
        with self._lock(force):
            self._write_prompt(prompt)
            console = self._console
            saved = (console.password_mode, console.password_mask_char)
            console.password_mode = True
            console.password_mask_char = mask
            try:
                handler = KeyHandler(
                    console,
                    None,
                    None,
                    settings=self.settings,
                    bindings=self._bindings,
                    prompt=prompt,
                    write_prompt=self._write_prompt,
                )
                return self._read_text(handler)
            finally:
                console.password_mode, console.password_mask_char = saved

    def interrupt(self) -> None:
        """Cancel the interruptible read in progress. Safe to call from any thread."""
        self._interrupted.set()
        self._console.wake()

    def _lock(self, force: bool) -> contextlib.AbstractContextManager[object]:
        return contextlib.nullcontext() if force else _read_lock

    def _read_text(self, handler: KeyHandler) -> str:
        self._interrupted.clear()
        self._key_handler = handler
        try:
            with self._console.raw_mode():
                while True:
                    event = self._next_key()
                    if event is None:
                        logger.info("Line read interrupted")
                        raise ReadInterrupted(handler.text)

                    key = describe_key(event)
                    if key in _ACCEPT_KEYS:
                        break
                    if key == _EOF_KEY and not handler.text:
                        break
                    if key == _ABORT_KEY:
                        if not self.settings.ctrl_c_enabled:
                            raise KeyboardInterrupt
                        self._console.write_raw("^C\r\n")
                        return ""
                    handler.handle(event)
        finally:
            self._key_handler = None

        self._console.write_raw("\r\n")
        return handler.text

    def _next_key(self) -> KeyEvent | None:
        """Wait for a key. ``None`` means the read was interrupted."""
        interruptible = self.settings.interruptible
        timeout = self.settings.poll_interval if interruptible else None
        while True:
            if interruptible and self._interrupted.is_set():
                return None
            event = self._console.read_key(timeout)
            if event is not None:
                return event
