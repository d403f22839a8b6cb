"""Per-line undo log of whole-text snapshots."""

from __future__ import annotations


class UndoLog:
    """Stores a snapshot of the line after every recorded edit.

    The newest snapshot is the current text, so undoing restores the one
    before it.
    """

    def __init__(self) -> None:
        self._snapshots: list[str] = []

    def record(self, text: str) -> None:
        """Append a snapshot of the line."""
        self._snapshots.append(text)

    def undo(self) -> str | None:
        """Drop the newest snapshot and return the text to restore.

        Returns the previous snapshot, ``""`` when the dropped snapshot was the
        only one (the line goes back to empty), or ``None`` if there is nothing
        to undo.
        """
        if not self._snapshots:
            return None
        self._snapshots.pop()
        return self._snapshots[-1] if self._snapshots else ""

    def clear(self) -> None:
        """Remove all snapshots."""
        self._snapshots.clear()

    @property
    def snapshots(self) -> list[str]:
        return list(self._snapshots)

    @property
    def length(self) -> int:
        return len(self._snapshots)
