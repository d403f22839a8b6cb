"""Tests for pi.readline.undo_log.UndoLog -- per-line text snapshots."""

from __future__ import annotations

from pi.readline.undo_log import UndoLog


class TestUndoLogRecord:
    """Snapshots are appended in order."""

    def test_starts_empty(self) -> None:
        log = UndoLog()
        assert log.length == 0
        assert log.snapshots == []

    def test_record_appends(self) -> None:
        log = UndoLog()
        log.record("H")
        log.record("He")
        assert log.snapshots == ["H", "He"]
        assert log.length == 2

    def test_snapshots_is_a_copy(self) -> None:
        log = UndoLog()
        log.record("a")
        log.snapshots.append("b")
        assert log.length == 1


class TestUndoLogUndo:
    """Undo returns the text to restore."""

    def test_undo_empty_returns_none(self) -> None:
        log = UndoLog()
        assert log.undo() is None

    def test_undo_returns_previous_snapshot(self) -> None:
        log = UndoLog()
        log.record("Hello")
        log.record("Hello World")
        assert log.undo() == "Hello"
        assert log.snapshots == ["Hello"]

    def test_undo_last_snapshot_returns_empty_line(self) -> None:
        log = UndoLog()
        log.record("Hello")
        assert log.undo() == ""
        assert log.length == 0

    def test_n_undos_drain_n_snapshots(self) -> None:
        log = UndoLog()
        for text in ["a", "ab", "abc"]:
            log.record(text)
        results = [log.undo() for _ in range(3)]
        assert results == ["ab", "a", ""]
        assert log.undo() is None


class TestUndoLogClear:
    """Clear drops every snapshot."""

    def test_clear(self) -> None:
        log = UndoLog()
        log.record("a")
        log.record("b")
        log.clear()
        assert log.length == 0
        assert log.undo() is None
