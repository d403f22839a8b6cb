"""Tests for pi.readline.history.HistoryNavigator."""

from __future__ import annotations

from pi.readline.history import HistoryNavigator

ENTRIES = ["dotnet run", "git init", "clear"]


def make_navigator(current: str = "typed") -> HistoryNavigator:
    nav = HistoryNavigator(list(ENTRIES))
    nav.current_line = current
    return nav


class TestHistoryNavigatorInitialState:
    """A new navigator points at the current line."""

    def test_index_starts_at_length(self) -> None:
        nav = make_navigator()
        assert nav.index == len(ENTRIES)
        assert nav.is_at_current_line

    def test_entries_list_is_shared(self) -> None:
        entries = list(ENTRIES)
        nav = HistoryNavigator(entries)
        nav.append("new")
        assert entries[-1] == "new"

    def test_default_entries_are_empty(self) -> None:
        nav = HistoryNavigator()
        assert nav.entries == []
        assert nav.index == 0


class TestHistoryNavigatorPrevious:
    """Previous walks towards the oldest entry and stops there."""

    def test_previous_returns_entries_newest_first(self) -> None:
        nav = make_navigator()
        assert [nav.previous() for _ in range(3)] == ["clear", "git init", "dotnet run"]

    def test_previous_at_oldest_returns_none(self) -> None:
        nav = make_navigator()
        for _ in range(3):
            nav.previous()
        assert nav.previous() is None
        assert nav.index == 0

    def test_previous_on_empty_history(self) -> None:
        nav = HistoryNavigator()
        assert nav.previous() is None
        assert nav.index == 0


class TestHistoryNavigatorNext:
    """Next walks back to the current line and stops there."""

    def test_next_returns_current_line_at_end(self) -> None:
        nav = make_navigator("draft")
        nav.previous()
        assert nav.next() == "draft"
        assert nav.is_at_current_line

    def test_next_walks_forward(self) -> None:
        nav = make_navigator()
        nav.first()
        assert nav.next() == "git init"
        assert nav.next() == "clear"

    def test_next_past_end_returns_none(self) -> None:
        nav = make_navigator()
        assert nav.next() is None
        assert nav.index == len(ENTRIES)


class TestHistoryNavigatorJumps:
    """First and return-to-current jump directly."""

    def test_first(self) -> None:
        nav = make_navigator()
        assert nav.first() == "dotnet run"
        assert nav.index == 0

    def test_return_to_current(self) -> None:
        nav = make_navigator("draft")
        nav.first()
        assert nav.return_to_current() == "draft"
        assert nav.is_at_current_line

    def test_jumps_on_empty_history_return_none(self) -> None:
        nav = HistoryNavigator()
        assert nav.first() is None
        assert nav.return_to_current() is None


class TestHistoryNavigatorLastWord:
    """Last word of the most recent entry."""

    def test_last_word(self) -> None:
        nav = HistoryNavigator(["git commit -m fix"])
        assert nav.last_word() == "fix"

    def test_last_word_single_word(self) -> None:
        nav = make_navigator()
        assert nav.last_word() == "clear"

    def test_last_word_empty_history(self) -> None:
        assert HistoryNavigator().last_word() is None


class TestHistoryNavigatorAppend:
    """Append adds entries and trims to max_size."""

    def test_append_moves_to_current_line(self) -> None:
        nav = make_navigator()
        nav.first()
        nav.append("ls")
        assert nav.entries[-1] == "ls"
        assert nav.is_at_current_line

    def test_append_trims_oldest(self) -> None:
        nav = HistoryNavigator(list(ENTRIES), max_size=3)
        nav.append("ls")
        assert nav.entries == ["git init", "clear", "ls"]
        assert nav.index == 3
