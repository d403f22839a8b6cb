"""Key handler: the Emacs-style editing state machine behind one prompt.

``KeyHandler.handle`` takes one ``KeyEvent``, resolves it through the
binding table, applies any pending numeric argument as a repeat count and
runs the bound operation against the line buffer. It also owns the kill
buffer, history navigation, the undo log and completion cycling.

Every operation invocation is one edit. An edit that changed the text
appends one undo snapshot, unless it was a replay (undo, undo-all, history
navigation, prompt rewrites).
"""

from __future__ import annotations

import contextlib
import functools
import logging
import os
from collections.abc import Iterator
from typing import Callable

from pi.readline.bindings import Binding, KeyBindingTable, Operation
from pi.readline.buffer import LineBuffer
from pi.readline.completion import CompletionEngine, CompletionSource, find_anchor
from pi.readline.console import Console
from pi.readline.history import HistoryNavigator
from pi.readline.keys import KeyEvent, describe_key, is_printable
from pi.readline.kill_buffer import KillBuffer
from pi.readline.settings import ReadLineSettings
from pi.readline.undo_log import UndoLog
from pi.readline.utils import visible_width

logger = logging.getLogger(__name__)

_CYCLING_OPERATIONS: frozenset[Operation] = frozenset({"complete", "completeReverse"})
_COMPLETION_OPERATIONS: frozenset[Operation] = frozenset({"complete", "completeReverse", "insertCompletions"})
_UNDO_OPERATIONS: frozenset[Operation] = frozenset({"undo", "undoAll"})


def _default_home_directory() -> str:
    return os.path.expanduser("~")


class KeyHandler:
    """Edits one line of input in response to key events.

    Args:
        console: Console port the line is rendered through.
        history: Caller-owned list of submitted lines. Appended to in place.
        completion: Optional completion source for Tab.
        settings: Subsystem toggles. Defaults to ``ReadLineSettings()``.
        bindings: Binding table. Defaults to the standard Emacs bindings.
        prompt: The prompt already written before the cursor. Needed to
            show and remove the ``(arg: N)`` indicator.
        write_prompt: Writes a prompt. Defaults to ``console.write_raw``.
        home_directory: Returns the home directory for ``~`` expansion.
    """

    def __init__(
        self,
        console: Console,
        history: list[str] | None = None,
        completion: CompletionSource | None = None,
        *,
        settings: ReadLineSettings | None = None,
        bindings: KeyBindingTable | None = None,
        prompt: str = "",
        write_prompt: Callable[[str], None] | None = None,
        home_directory: Callable[[], str] = _default_home_directory,
    ) -> None:
        self._console = console
        self._settings = settings or ReadLineSettings()
        self._bindings = bindings or KeyBindingTable()
        self._source = completion
        self._home_directory = home_directory
        self._write_prompt = write_prompt or console.write_raw

        self._buffer = LineBuffer(console, on_change=self._on_buffer_change)
        self._history = HistoryNavigator(history, max_size=self._settings.history_max_size)
        self._kill_buffer = KillBuffer()
        self._undo_log = UndoLog()
        self._completion = CompletionEngine()

        # Bookkeeping for the key being handled
        self._last_operation: str | None = None
        self._current_operation: str | None = None
        self._navigating = False
        self._replayed = False

        # Numeric argument being typed: "", "-", "12", "-3"
        self._argument_text = ""

        self._initial_prompt = prompt
        self._shown_prompt = prompt
        width = max(console.buffer_width, 1)
        offset = console.cursor_top * width + console.cursor_left - visible_width(prompt)
        top, left = divmod(offset, width)
        self._prompt_origin = (left, top)

        self._actions: dict[Operation, Callable[[], None]] = {
            "cursorLeft": self.move_cursor_left,
            "cursorRight": self.move_cursor_right,
            "cursorWordLeft": self.move_cursor_word_left,
            "cursorWordRight": self.move_cursor_word_right,
            "cursorLineStart": self.move_cursor_home,
            "cursorLineEnd": self.move_cursor_end,
            "deleteCharBackward": self.backspace,
            "deleteCharForward": self.delete,
            "clearLine": self.clear_line,
            "clearHorizontalSpace": self.clear_horizontal_space,
            "killToLineStart": self.kill_to_start,
            "killToLineEnd": self.kill_to_end,
            "killWordBackward": self.kill_word_backward,
            "killWordForward": self.kill_word_forward,
            "yank": self.yank,
            "historyPrevious": self.previous_history,
            "historyNext": self.next_history,
            "historyFirst": self.first_history,
            "historyCurrent": self.return_to_current_line,
            "insertLastArgument": self.insert_last_argument,
            "transposeChars": self.transpose_chars,
            "transposeWords": self.transpose_words,
            "complete": self.complete,
            "completeReverse": self.complete_reverse,
            "insertCompletions": self.insert_completions,
            "lowercaseWord": self.lowercase_word,
            "uppercaseWord": self.uppercase_word,
            "lowercaseCharToWordEnd": self.lowercase_char_move_to_end_of_word,
            "uppercaseCharToWordEnd": self.uppercase_char_move_to_end_of_word,
            "insertComment": self.insert_comment,
            "insertHomeDirectory": self.insert_home_directory,
            "insertTab": self.write_literal_tab,
            "undo": self.undo,
            "undoAll": self.undo_all,
        }

    # -- state --------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._buffer.text

    @property
    def current_line(self) -> str:
        """What the user typed, independent of history playback."""
        return self._history.current_line

    @property
    def kill_buffer(self) -> str:
        return self._kill_buffer.contents

    @property
    def cursor_pos(self) -> int:
        return self._buffer.cursor_pos

    @property
    def cursor_limit(self) -> int:
        return self._buffer.cursor_limit

    @property
    def history(self) -> HistoryNavigator:
        return self._history

    @property
    def bindings(self) -> KeyBindingTable:
        return self._bindings

    @property
    def undo_log(self) -> UndoLog:
        return self._undo_log

    @property
    def completion(self) -> CompletionEngine:
        return self._completion

    @property
    def prompt(self) -> str:
        """The prompt currently on screen (may be the ``(arg: N)`` indicator)."""
        return self._shown_prompt

    @property
    def argument(self) -> int | None:
        """The numeric argument being entered, or ``None``."""
        if not self._argument_text:
            return None
        if self._argument_text == "-":
            return -1
        return int(self._argument_text)

    # -- dispatch -----------------------------------------------------------

    def handle(self, event: KeyEvent) -> None:
        """Handle one key press."""
        key = describe_key(event)
        binding = self._bindings.resolve(key)
        operation = binding.operation

        if self._completion.is_active and operation not in _CYCLING_OPERATIONS:
            self._completion.reset()
            logger.debug("Completion reset by %s", operation)

        if operation == "argumentDigit":
            self._enter_argument(self._argument_text + str(binding.argument))
            self._last_operation = binding.identity
            return
        if operation == "argumentMinus" and not self._argument_text:
            self._enter_argument("-")
            self._last_operation = binding.identity
            return

        count = self._consume_argument()
        if operation == "argumentMinus":
            # A minus after digits is written once and ends argument entry
            count = 1
        action = self._action_for(binding, event)

        if not self._console.password_mode:
            logger.debug("Key %s -> %s (x%d)", key, operation, count)

        self._current_operation = binding.identity
        for _ in range(count):
            before = self._state()
            with self._edit():
                action()
            self._last_operation = binding.identity
            if self._state() == before:
                break

    def _state(self) -> tuple[str, int, int]:
        return self._buffer.text, self._buffer.cursor_pos, self._history.index

    def _action_for(self, binding: Binding, event: KeyEvent) -> Callable[[], None]:
        operation = binding.operation
        literal = functools.partial(self._insert_literal, event.char)

        if operation == "custom":
            assert binding.action is not None
            return binding.action
        if operation == "insertChar":
            return literal
        if operation == "argumentMinus":
            # A minus typed after digits ends argument entry as plain text
            return lambda: self._buffer.write_char("-")
        if operation in _COMPLETION_OPERATIONS and not self._settings.auto_completion_enabled:
            return literal
        if operation == "yank" and not self._settings.kill_buffer_enabled:
            return literal
        if operation in _UNDO_OPERATIONS and not self._settings.undo_enabled:
            return literal
        return self._actions[operation]

    @contextlib.contextmanager
    def _edit(self) -> Iterator[None]:
        before = self._buffer.text
        self._replayed = False
        yield
        after = self._buffer.text
        if not self._replayed and after != before:
            self._undo_log.record(after)

    def _on_buffer_change(self) -> None:
        if not self._navigating:
            self._history.current_line = self._buffer.text

    def _insert_literal(self, char: str) -> None:
        if is_printable(char):
            self._buffer.write_char(char)

    def write_new_string(self, text: str) -> None:
        """Replace the line with *text* without recording an undo snapshot."""
        self._replayed = True
        self._buffer.replace_all(text)

    def _navigate(self, text: str | None) -> None:
        if text is None:
            return
        self._navigating = True
        try:
            self.write_new_string(text)
        finally:
            self._navigating = False

    # -- numeric argument ---------------------------------------------------

    def _enter_argument(self, argument_text: str) -> None:
        self._argument_text = argument_text
        self._update_prompt(f"(arg: {self.argument}) ")

    def _consume_argument(self) -> int:
        if not self._argument_text:
            return 1
        count = abs(self.argument or 0)
        self._argument_text = ""
        self._update_prompt(self._initial_prompt)
        return count

    def _update_prompt(self, new_prompt: str) -> None:
        text = self._buffer.text
        pos = self._buffer.cursor_pos
        left, top = self._prompt_origin

        self._buffer.move_to_start()
        self._console.set_cursor_position(left, top)
        self._console.write_raw(" " * (visible_width(self._shown_prompt) + len(text)))
        self._console.set_cursor_position(left, top)
        self._write_prompt(new_prompt)
        self._shown_prompt = new_prompt

        self._buffer.reset()
        self._navigating = True
        try:
            self._buffer.insert(text)
        finally:
            self._navigating = False
        self._buffer.move_left(len(text) - pos)

    # -- cursor movement ----------------------------------------------------

    def move_cursor_left(self) -> None:
        self._buffer.move_left()

    def move_cursor_right(self) -> None:
        self._buffer.move_right()

    def move_cursor_word_left(self) -> None:
        self._buffer.move_word_left()

    def move_cursor_word_right(self) -> None:
        self._buffer.move_word_right()

    def move_cursor_home(self) -> None:
        self._buffer.move_to_start()

    def move_cursor_end(self) -> None:
        self._buffer.move_to_end()

    # -- deletion -----------------------------------------------------------

    def backspace(self) -> None:
        self._buffer.delete_backward(1)

    def delete(self) -> None:
        self._buffer.delete_forward(1)

    def backspace_or_delete(self) -> None:
        """Delete under the cursor, or behind it at end-of-line."""
        if self._buffer.is_end_of_line:
            self._buffer.delete_backward(1)
        else:
            self._buffer.delete_forward(1)

    def clear_line(self) -> None:
        self._buffer.clear()

    def clear_horizontal_space(self) -> None:
        """Delete all whitespace around the cursor."""
        text = self._buffer.text
        pos = self._buffer.cursor_pos
        end = pos
        while end < len(text) and text[end].isspace():
            end += 1
        start = pos
        while start > 0 and text[start - 1].isspace():
            start -= 1
        self._buffer.delete_forward(end - pos)
        self._buffer.delete_backward(pos - start)

    # -- kill and yank ------------------------------------------------------

    def _kill(self, text: str, *, prepend: bool) -> None:
        if not self._settings.kill_buffer_enabled:
            return
        accumulate = (
            self._current_operation is not None
            and self._last_operation == self._current_operation
        )
        self._kill_buffer.record(text, prepend=prepend, accumulate=accumulate)

    def kill_to_start(self) -> None:
        pos = self._buffer.cursor_pos
        self._kill(self._buffer.text[:pos], prepend=True)
        self._buffer.delete_backward(pos)

    def kill_to_end(self) -> None:
        pos = self._buffer.cursor_pos
        self._kill(self._buffer.text[pos:], prepend=False)
        self._buffer.delete_forward(len(self._buffer) - pos)

    def kill_word_backward(self) -> None:
        """Kill whitespace behind the cursor, then the word before it."""
        text = self._buffer.text
        end = self._buffer.cursor_pos
        start = end
        while start > 0 and text[start - 1].isspace():
            start -= 1
        while start > 0 and not text[start - 1].isspace():
            start -= 1
        self._kill(text[start:end], prepend=True)
        self._buffer.delete_backward(end - start)

    def kill_word_forward(self) -> None:
        """Kill whitespace under the cursor, then the word after it."""
        text = self._buffer.text
        start = self._buffer.cursor_pos
        end = start
        while end < len(text) and text[end].isspace():
            end += 1
        while end < len(text) and not text[end].isspace():
            end += 1
        self._kill(text[start:end], prepend=False)
        self._buffer.delete_forward(end - start)

    def yank(self) -> None:
        if not self._kill_buffer.is_empty:
            self._buffer.insert(self._kill_buffer.contents)

    # -- history ------------------------------------------------------------

    def previous_history(self) -> None:
        self._navigate(self._history.previous())

    def next_history(self) -> None:
        self._navigate(self._history.next())

    def first_history(self) -> None:
        self._navigate(self._history.first())

    def return_to_current_line(self) -> None:
        self._navigate(self._history.return_to_current())

    def insert_last_argument(self) -> None:
        """Insert the last word of the most recent history entry."""
        word = self._history.last_word()
        if word:
            self._buffer.insert(word)

    # -- transposition ------------------------------------------------------

    def transpose_chars(self) -> None:
        """Swap the characters around the cursor.

        At end-of-line the last two characters are swapped and the cursor
        stays at the end. Elsewhere the cursor ends past the swapped pair.
        """
        pos = self._buffer.cursor_pos
        length = len(self._buffer)
        if pos == 0:
            return
        at_end = pos == length
        first = pos - 2 if at_end else pos - 1
        if first < 0:
            return

        chars = list(self._buffer.text)
        chars[first], chars[first + 1] = chars[first + 1], chars[first]
        new_pos = pos if at_end else pos + 1

        self._buffer.replace_all("".join(chars))
        self._buffer.move_left(length - new_pos)

    def transpose_words(self) -> None:
        """Swap the words on either side of the space under the cursor."""
        text = self._buffer.text
        pos = self._buffer.cursor_pos
        if pos == len(text) or text[pos] != " ":
            return

        start = pos
        while start > 0 and text[start - 1] != " ":
            start -= 1
        end = pos + 1
        while end < len(text) and text[end] != " ":
            end += 1

        first_word = text[start:pos]
        second_word = text[pos + 1:end]
        if not first_word or not second_word:
            return

        self._buffer.move_left(len(first_word))
        self._buffer.delete_forward(end - start)
        self._buffer.insert(f"{second_word} {first_word}")
        self._buffer.move_left(self._buffer.cursor_pos - pos)

    # -- completion ---------------------------------------------------------

    def complete(self) -> None:
        if self._completion.is_active:
            self._write_candidate(self._completion.next())
            return
        self._start_completion()

    def complete_reverse(self) -> None:
        if self._completion.is_active:
            self._write_candidate(self._completion.previous())

    def insert_completions(self) -> None:
        """Write every candidate at the cursor, separated by single spaces."""
        found = self._suggestions()
        if found is None:
            return
        candidates, _ = found
        self._buffer.insert(" ".join(candidates))
        self._completion.reset()

    def _suggestions(self) -> tuple[list[str], int] | None:
        if self._source is None or not self._buffer.is_end_of_line:
            return None
        text = self._buffer.text
        anchor = find_anchor(text, self._source.separators)
        candidates = self._source.get_suggestions(text, anchor)
        if not candidates:
            logger.debug("No completions at %d", anchor)
            return None
        return list(candidates), anchor

    def _start_completion(self) -> None:
        found = self._suggestions()
        if found is not None:
            self._write_candidate(self._completion.start(*found))

    def _write_candidate(self, candidate: str) -> None:
        self._buffer.delete_backward(self._buffer.cursor_pos - self._completion.anchor)
        self._buffer.insert(candidate)

    # -- case ---------------------------------------------------------------

    def _recase_word(self, convert: Callable[[str], str]) -> None:
        while not self._buffer.is_end_of_line and self._buffer.char_at(self._buffer.cursor_pos).isspace():
            self._buffer.move_right()
        text = self._buffer.text
        start = self._buffer.cursor_pos
        end = start
        while end < len(text) and text[end] != " ":
            end += 1
        if end == start:
            return
        self._buffer.delete_forward(end - start)
        self._buffer.insert(convert(text[start:end]))

    def _recase_char(self, convert: Callable[[str], str]) -> None:
        if self._buffer.is_end_of_line:
            return
        char = self._buffer.char_at(self._buffer.cursor_pos)
        self._buffer.delete_forward(1)
        self._buffer.insert(convert(char))
        self._buffer.move_word_right()

    def uppercase_word(self) -> None:
        self._recase_word(str.upper)

    def lowercase_word(self) -> None:
        self._recase_word(str.lower)

    def uppercase_char_move_to_end_of_word(self) -> None:
        self._recase_char(str.upper)

    def lowercase_char_move_to_end_of_word(self) -> None:
        self._recase_char(str.lower)

    # -- insertion ----------------------------------------------------------

    def insert_comment(self) -> None:
        """Prepend ``#``, keeping the cursor on the same character."""
        pos = self._buffer.cursor_pos
        self._buffer.move_to_start()
        self._buffer.write_char("#")
        self._buffer.move_right(pos)

    def insert_home_directory(self) -> None:
        """Expand a ``~`` under or behind the cursor to the home directory."""
        length = len(self._buffer)
        if length == 0:
            return
        pos = self._buffer.cursor_pos
        on_cursor = self._buffer.char_at(pos) if pos < length else " "
        behind_cursor = self._buffer.char_at(pos - 1) if pos > 0 else on_cursor

        if on_cursor == "~":
            self._buffer.delete_forward(1)
        elif behind_cursor == "~":
            self._buffer.delete_backward(1)
        else:
            return
        self._buffer.insert(self._home_directory())

    def write_literal_tab(self) -> None:
        self._buffer.write_char("\t")

    # -- undo ---------------------------------------------------------------

    def undo(self) -> None:
        restored = self._undo_log.undo()
        if restored is not None:
            self.write_new_string(restored)

    def undo_all(self) -> None:
        if self._undo_log.length:
            self._undo_log.clear()
            self.write_new_string("")
