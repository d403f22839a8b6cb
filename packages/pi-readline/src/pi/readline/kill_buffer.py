"""Single-slot kill buffer for Emacs-style kill/yank operations."""

from __future__ import annotations


class KillBuffer:
    """Holds the text removed by the most recent run of kill operations.

    A kill that continues a run (the same kill operation as the previous
    key) accumulates into the slot. Any other kill replaces it.
    """

    def __init__(self) -> None:
        self._text = ""

    def record(self, text: str, *, prepend: bool, accumulate: bool = False) -> None:
        """Store killed text.

        Args:
            text: The killed text, in left-to-right order.
            prepend: If accumulating, prepend (backward kill) or append (forward kill).
            accumulate: Merge with the current contents instead of replacing them.
        """
        if not accumulate:
            self._text = text
        elif prepend:
            self._text = text + self._text
        else:
            self._text = self._text + text

    @property
    def contents(self) -> str:
        return self._text

    @property
    def is_empty(self) -> bool:
        return not self._text

    def clear(self) -> None:
        self._text = ""
