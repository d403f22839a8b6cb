"""History navigation for a single prompt.

The navigator walks a caller-owned list of submitted lines. Index
``len(entries)`` stands for the line being typed. That line is kept as a
separate snapshot so paging away and back restores it exactly.

Navigation methods return the text to display, or ``None`` when there is
nothing to do. Rendering is left to the key handler.
"""

from __future__ import annotations


class HistoryNavigator:
    """Position pointer over submitted lines plus the uncommitted line."""

    def __init__(self, entries: list[str] | None = None, *, max_size: int | None = None) -> None:
        self._entries: list[str] = entries if entries is not None else []
        self._max_size = max_size
        self._index = len(self._entries)
        self.current_line: str = ""

    @property
    def entries(self) -> list[str]:
        return self._entries

    @property
    def index(self) -> int:
        return self._index

    @property
    def is_at_current_line(self) -> bool:
        return self._index == len(self._entries)

    def previous(self) -> str | None:
        if self._index > 0:
            self._index -= 1
            return self._entries[self._index]
        return None

    def next(self) -> str | None:
        if self._index < len(self._entries):
            self._index += 1
            if self._index == len(self._entries):
                return self.current_line
            return self._entries[self._index]
        return None

    def first(self) -> str | None:
        if not self._entries:
            return None
        self._index = 0
        return self._entries[0]

    def return_to_current(self) -> str | None:
        if not self._entries:
            return None
        self._index = len(self._entries)
        return self.current_line

    def last_word(self) -> str | None:
        """Last space-separated token of the most recent entry."""
        if not self._entries:
            return None
        return self._entries[-1].split(" ")[-1]

    def append(self, line: str) -> None:
        """Add a submitted line, trimming the oldest entries past ``max_size``."""
        self._entries.append(line)
        if self._max_size is not None and len(self._entries) > self._max_size:
            del self._entries[: len(self._entries) - self._max_size]
        self._index = len(self._entries)
