"""Tests for pi.readline.bindings -- base and custom key binding tables."""

from __future__ import annotations

import pytest

from pi.readline.bindings import (
    ARGUMENT_DIGIT_KEYS,
    DEFAULT_KEY_BINDINGS,
    Binding,
    KeyBindingError,
    KeyBindingTable,
)


def noop() -> None:
    pass


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class TestKeyBindingTableResolve:
    """Keys resolve custom first, then base, then literal insert."""

    @pytest.mark.parametrize(
        ("key", "operation"),
        [
            ("left", "cursorLeft"),
            ("ctrl+b", "cursorLeft"),
            ("ctrl+w", "killWordBackward"),
            ("alt+backspace", "killWordBackward"),
            ("shift+alt+,", "historyFirst"),
            ("alt+.", "insertLastArgument"),
            ("shift+tab", "completeReverse"),
            ("ctrl+shift+-", "undo"),
            ("alt+-", "argumentMinus"),
        ],
    )
    def test_default_keys(self, key: str, operation: str) -> None:
        assert KeyBindingTable().resolve(key) == Binding(key, operation)

    def test_digit_keys(self) -> None:
        table = KeyBindingTable()
        binding = table.resolve("alt+7")
        assert binding.operation == "argumentDigit"
        assert binding.argument == 7

    def test_every_digit_is_bound(self) -> None:
        assert sorted(ARGUMENT_DIGIT_KEYS.values()) == list(range(10))

    def test_unbound_key_inserts(self) -> None:
        binding = KeyBindingTable().resolve("a")
        assert binding.operation == "insertChar"
        assert binding.identity == "insertChar"

    def test_custom_binding_wins(self) -> None:
        table = KeyBindingTable(custom={"shift+alt+f": noop})
        binding = table.resolve("shift+alt+f")
        assert binding.operation == "custom"
        assert binding.action is noop
        assert binding.identity == "custom:shift+alt+f"


class TestKeyBindingTableConfig:
    """Caller config replaces the keys of an operation."""

    def test_get_keys_defaults(self) -> None:
        table = KeyBindingTable()
        assert table.get_keys("cursorLineStart") == ["home", "ctrl+a"]
        assert table.get_keys("yank") == ["ctrl+y"]

    def test_override(self) -> None:
        table = KeyBindingTable({"yank": ["ctrl+shift+y"]})
        assert table.get_keys("yank") == ["ctrl+shift+y"]
        assert table.resolve("ctrl+shift+y").operation == "yank"
        assert table.resolve("ctrl+y").operation == "insertChar"

    def test_defaults_are_not_mutated(self) -> None:
        KeyBindingTable({"yank": "ctrl+shift+y"})
        assert DEFAULT_KEY_BINDINGS["yank"] == "ctrl+y"

    def test_is_base_key(self) -> None:
        table = KeyBindingTable()
        assert table.is_base_key("ctrl+k")
        assert table.is_base_key("alt+0")
        assert not table.is_base_key("shift+alt+f")


# ---------------------------------------------------------------------------
# Custom bindings
# ---------------------------------------------------------------------------


class TestCustomBindings:
    """Custom bindings can be added, changed and removed."""

    def test_add(self) -> None:
        table = KeyBindingTable()
        table.add_custom_binding("shift+alt+f", noop)
        assert table.custom_bindings == {"shift+alt+f": noop}

    def test_add_base_key_raises(self) -> None:
        table = KeyBindingTable()
        with pytest.raises(KeyBindingError):
            table.add_custom_binding("ctrl+a", noop)
        with pytest.raises(KeyBindingError):
            table.add_custom_binding("alt+3", noop)

    def test_add_duplicate_raises(self) -> None:
        table = KeyBindingTable()
        table.add_custom_binding("shift+alt+f", noop)
        with pytest.raises(KeyBindingError):
            table.add_custom_binding("shift+alt+f", noop)

    def test_change(self) -> None:
        table = KeyBindingTable(custom={"shift+alt+f": noop})

        def other() -> None:
            pass

        table.change_custom_binding("shift+alt+f", other)
        assert table.resolve("shift+alt+f").action is other

    def test_change_missing_raises(self) -> None:
        with pytest.raises(KeyBindingError):
            KeyBindingTable().change_custom_binding("shift+alt+f", noop)

    def test_remove(self) -> None:
        table = KeyBindingTable(custom={"shift+alt+f": noop})
        table.remove_custom_binding("shift+alt+f")
        assert table.resolve("shift+alt+f").operation == "insertChar"

    def test_remove_missing_raises(self) -> None:
        with pytest.raises(KeyBindingError):
            KeyBindingTable().remove_custom_binding("shift+alt+f")

    def test_error_is_value_error(self) -> None:
        assert issubclass(KeyBindingError, ValueError)

    def test_custom_bindings_is_a_copy(self) -> None:
        table = KeyBindingTable()
        table.custom_bindings["x"] = noop
        assert table.custom_bindings == {}
