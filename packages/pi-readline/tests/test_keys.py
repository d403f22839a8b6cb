"""Tests for pi.readline.keys -- key events and descriptors."""

from __future__ import annotations

import pytest

from pi.readline.keys import Key, KeyEvent, describe_key, is_printable


class TestKeyHelper:
    """Key combinators build descriptors in ctrl, shift, alt order."""

    def test_single_modifiers(self) -> None:
        assert Key.ctrl("w") == "ctrl+w"
        assert Key.shift(Key.tab) == "shift+tab"
        assert Key.alt(Key.backspace) == "alt+backspace"

    def test_combined_modifiers(self) -> None:
        assert Key.ctrl_shift(Key.hyphen) == "ctrl+shift+-"
        assert Key.shift_alt(Key.period) == "shift+alt+."
        assert Key.ctrl_shift_alt("x") == "ctrl+shift+alt+x"


class TestKeyEventFromChar:
    """Plain character keys."""

    def test_lowercase_letter(self) -> None:
        event = KeyEvent.from_char("a")
        assert (event.key, event.char, event.shift) == ("a", "a", False)

    def test_uppercase_letter_sets_shift(self) -> None:
        event = KeyEvent.from_char("A")
        assert (event.key, event.shift) == ("a", True)

    def test_digit(self) -> None:
        assert KeyEvent.from_char("7").key == "7"

    def test_space_and_tab(self) -> None:
        assert KeyEvent.from_char(" ").key == Key.space
        assert KeyEvent.from_char("\t").key == Key.tab

    def test_punctuation_has_no_key(self) -> None:
        assert KeyEvent.from_char("!").key == ""

    def test_alt_flag(self) -> None:
        assert KeyEvent.from_char("b", alt=True).alt


class TestDescribeKey:
    """Canonical descriptors for key events."""

    @pytest.mark.parametrize(
        ("event", "expected"),
        [
            (KeyEvent(Key.left), "left"),
            (KeyEvent("w", "\x17", ctrl=True), "ctrl+w"),
            (KeyEvent.from_char("b", alt=True), "alt+b"),
            (KeyEvent.from_char("F", alt=True), "shift+alt+f"),
            (KeyEvent(Key.tab, "\t", shift=True), "shift+tab"),
            (KeyEvent(Key.backspace, "\b", alt=True), "alt+backspace"),
            (KeyEvent("x", "x", ctrl=True, shift=True, alt=True), "ctrl+shift+alt+x"),
        ],
    )
    def test_named_keys(self, event: KeyEvent, expected: str) -> None:
        assert describe_key(event) == expected

    @pytest.mark.parametrize(
        ("char", "expected"),
        [
            (".", "alt+."),
            (">", "shift+alt+."),
            (",", "alt+,"),
            ("<", "shift+alt+,"),
            ("\\", "alt+\\"),
            ("#", "shift+alt+3"),
            ("&", "shift+alt+7"),
            ("*", "shift+alt+8"),
            ("_", "shift+alt+-"),
        ],
    )
    def test_punctuation_fallback(self, char: str, expected: str) -> None:
        assert describe_key(KeyEvent.from_char(char, alt=True)) == expected

    def test_ctrl_shift_minus_control_char(self) -> None:
        assert describe_key(KeyEvent("", "\x1f")) == "ctrl+shift+-"

    def test_minus_char_forces_hyphen_key(self) -> None:
        assert describe_key(KeyEvent("subtract", "-", alt=True)) == "alt+-"
        assert describe_key(KeyEvent.from_char("-", alt=True)) == "alt+-"

    def test_unknown_punctuation_uses_char(self) -> None:
        assert describe_key(KeyEvent.from_char("!")) == "!"


class TestIsPrintable:
    """Only text may be inserted."""

    def test_letters_and_space(self) -> None:
        assert is_printable("a")
        assert is_printable(" ")
        assert is_printable("é")

    def test_tab_is_printable(self) -> None:
        assert is_printable("\t")

    def test_control_characters(self) -> None:
        assert not is_printable("")
        assert not is_printable("\x03")
        assert not is_printable("\x7f")
        assert not is_printable("\x1b")
