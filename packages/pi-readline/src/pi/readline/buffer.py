"""Line buffer: the text being edited, its logical cursor, and its rendering.

The logical cursor (``cursor_pos``) indexes into the text. The console cursor
mirrors it on screen and wraps across rows. It is never authoritative. Every
move replays single steps from the console's current position, wrapping at
``buffer_width - 1``.
"""

from __future__ import annotations

from typing import Callable

from pi.readline.console import Console

TAB_WIDTH = 8


class LineBuffer:
    """Owns the text, ``cursor_pos`` and ``cursor_limit`` of one prompt.

    ``0 <= cursor_pos <= cursor_limit == len(text)`` holds after every
    method. ``on_change`` is called after each primitive that changed the text.
    """

    def __init__(self, console: Console, on_change: Callable[[], None] | None = None) -> None:
        self._console = console
        self._chars: list[str] = []
        self._cursor_pos = 0
        self._cursor_limit = 0
        self.on_change = on_change

    # -- state --------------------------------------------------------------

    @property
    def text(self) -> str:
        return "".join(self._chars)

    @property
    def cursor_pos(self) -> int:
        return self._cursor_pos

    @property
    def cursor_limit(self) -> int:
        return self._cursor_limit

    @property
    def console(self) -> Console:
        return self._console

    @property
    def is_start_of_line(self) -> bool:
        return self._cursor_pos == 0

    @property
    def is_end_of_line(self) -> bool:
        return self._cursor_pos == self._cursor_limit

    def __len__(self) -> int:
        return self._cursor_limit

    def char_at(self, index: int) -> str:
        return self._chars[index]

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    # -- cursor movement ----------------------------------------------------

    def move_left(self, count: int = 1) -> None:
        left = self._console.cursor_left
        top = self._console.cursor_top
        width = self._console.buffer_width
        moved = False

        for _ in range(count):
            if self.is_start_of_line:
                break
            if left == 0:
                left = width - 1
                top -= 1
            else:
                left -= 1
            self._cursor_pos -= 1
            moved = True

        if moved:
            self._console.set_cursor_position(left, top)

    def move_right(self, count: int = 1) -> None:
        left = self._console.cursor_left
        top = self._console.cursor_top
        width = self._console.buffer_width
        moved = False

        for _ in range(count):
            if self.is_end_of_line:
                break
            if left == width - 1:
                left = 0
                top += 1
            else:
                left += 1
            self._cursor_pos += 1
            moved = True

        if moved:
            self._console.set_cursor_position(left, top)

    def move_to_start(self) -> None:
        self.move_left(self._cursor_pos)

    def move_to_end(self) -> None:
        self.move_right(self._cursor_limit - self._cursor_pos)

    def move_word_left(self) -> None:
        while not self.is_start_of_line and self._chars[self._cursor_pos - 1] == " ":
            self.move_left()
        while not self.is_start_of_line and self._chars[self._cursor_pos - 1] != " ":
            self.move_left()

    def move_word_right(self) -> None:
        while not self.is_end_of_line and self._chars[self._cursor_pos] == " ":
            self.move_right()
        while not self.is_end_of_line and self._chars[self._cursor_pos] != " ":
            self.move_right()

    # -- writing ------------------------------------------------------------

    def write_char(self, char: str) -> None:
        """Insert *char* at the cursor. Tabs expand to the next multiple of 8."""
        if not char or char == "\x00":
            return
        piece = char
        if char == "\t":
            piece = " " * (TAB_WIDTH - self._console.cursor_left % TAB_WIDTH)

        if self.is_end_of_line:
            self._chars.extend(piece)
            self._console.write(piece)
            self._cursor_pos += len(piece)
            self._cursor_limit += len(piece)
        else:
            left = self._console.cursor_left
            top = self._console.cursor_top
            tail = self.text[self._cursor_pos:]

            self._chars[self._cursor_pos:self._cursor_pos] = list(piece)
            self._cursor_limit += len(piece)

            # Rewrite the tail, then walk the cursor back over the new text
            self._console.write(piece + tail)
            self._console.set_cursor_position(left, top)
            self.move_right(len(piece))

        self._changed()

    def insert(self, text: str) -> None:
        """Insert *text* at the cursor, one character at a time."""
        for char in text:
            self.write_char(char)

    # -- deletion -----------------------------------------------------------

    def delete_forward(self, count: int = 1) -> None:
        """Delete up to *count* characters at the cursor."""
        count = min(count, self._cursor_limit - self._cursor_pos)
        if count <= 0:
            return

        index = self._cursor_pos
        del self._chars[index:index + count]
        self._cursor_limit -= count
        tail = self.text[index:]

        left = self._console.cursor_left
        top = self._console.cursor_top
        spaces = " " * count
        if self._console.password_mode and self._console.password_mask_char:
            # Padding must really erase the stale mask characters
            self._console.write(tail)
            self._console.write_raw(spaces)
        else:
            self._console.write(tail + spaces)
        self._console.set_cursor_position(left, top)

        self._changed()

    def delete_backward(self, count: int = 1) -> None:
        """Delete up to *count* characters before the cursor."""
        if self.is_start_of_line:
            return
        start = self._cursor_pos
        self.move_left(count)
        self.delete_forward(start - self._cursor_pos)

    def clear(self) -> None:
        """Erase the whole line."""
        self.move_to_end()
        self.delete_backward(self._cursor_pos)

    def replace_all(self, text: str) -> None:
        """Replace the line with *text*, leaving the cursor at its end."""
        self.clear()
        self.insert(text)

    def reset(self) -> None:
        """Forget the text without touching the console.

        Used after the caller has already erased the line on screen.
        """
        self._chars.clear()
        self._cursor_pos = 0
        self._cursor_limit = 0
