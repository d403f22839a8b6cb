"""Key binding tables for the line editor.

Each ``KeyBindingTable`` resolves a key descriptor to a ``Binding``. Custom
bindings are checked first, then base bindings. Unbound keys insert their
character. Base bindings are fixed once the table is built. Custom bindings
can be added, changed and removed, but may never take a base key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal

from pi.readline.keys import KeyId

logger = logging.getLogger(__name__)

Operation = Literal[
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    "cursorWordLeft",
    "cursorWordRight",
    "cursorLineStart",
    "cursorLineEnd",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    "clearLine",
    "clearHorizontalSpace",
    # Kill buffer
    "killToLineStart",
    "killToLineEnd",
    "killWordBackward",
    "killWordForward",
    "yank",
    # History
    "historyPrevious",
    "historyNext",
    "historyFirst",
    "historyCurrent",
    "insertLastArgument",
    # Transposition
    "transposeChars",
    "transposeWords",
    # Completion
    "complete",
    "completeReverse",
    "insertCompletions",
    # Case
    "lowercaseWord",
    "uppercaseWord",
    "lowercaseCharToWordEnd",
    "uppercaseCharToWordEnd",
    # Insertion
    "insertComment",
    "insertHomeDirectory",
    "insertTab",
    "insertChar",
    # Undo
    "undo",
    "undoAll",
    # Argument prefix
    "argumentDigit",
    "argumentMinus",
    # Caller-installed
    "custom",
]

KeyBindingsConfig = dict[Operation, KeyId | list[KeyId]]

CustomAction = Callable[[], None]

DEFAULT_KEY_BINDINGS: dict[Operation, KeyId | list[KeyId]] = {
    # Cursor movement
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "cursorWordLeft": "alt+b",
    "cursorWordRight": "alt+f",
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    # Deletion
    "deleteCharBackward": ["backspace", "ctrl+h"],
    "deleteCharForward": ["delete", "ctrl+d"],
    "clearLine": ["escape", "ctrl+l"],
    "clearHorizontalSpace": "alt+\\",
    # Kill buffer
    "killToLineStart": "ctrl+u",
    "killToLineEnd": "ctrl+k",
    "killWordBackward": ["ctrl+w", "alt+backspace"],
    "killWordForward": "alt+d",
    "yank": "ctrl+y",
    # History
    "historyPrevious": ["up", "ctrl+p"],
    "historyNext": ["down", "ctrl+n"],
    "historyFirst": "shift+alt+,",
    "historyCurrent": "shift+alt+.",
    "insertLastArgument": "alt+.",
    # Transposition
    "transposeChars": "ctrl+t",
    "transposeWords": "alt+t",
    # Completion
    "complete": ["tab", "ctrl+i"],
    "completeReverse": ["shift+tab", "ctrl+shift+i"],
    "insertCompletions": "shift+alt+8",
    # Case
    "lowercaseWord": "alt+l",
    "uppercaseWord": "alt+u",
    "lowercaseCharToWordEnd": "alt+v",
    "uppercaseCharToWordEnd": "alt+c",
    # Insertion
    "insertComment": "shift+alt+3",
    "insertHomeDirectory": "shift+alt+7",
    "insertTab": "alt+tab",
    # Undo
    "undo": "ctrl+shift+-",
    "undoAll": "alt+r",
    # Argument prefix
    "argumentMinus": "alt+-",
}

# One parametrised operation for all ten digit keys
ARGUMENT_DIGIT_KEYS: dict[KeyId, int] = {f"alt+{digit}": digit for digit in range(10)}


class KeyBindingError(ValueError):
    """Raised for custom binding registrations that are not allowed."""


@dataclass(frozen=True)
class Binding:
    """What a key resolves to.

    ``argument`` carries the digit for ``argumentDigit``. ``action`` is the
    callable of a custom binding.
    """

    key: KeyId
    operation: Operation
    argument: int | None = None
    action: CustomAction | None = None

    @property
    def identity(self) -> str:
        """Value compared against the previous key's binding (kill runs)."""
        if self.operation == "custom":
            return f"custom:{self.key}"
        return self.operation


class KeyBindingTable:
    """Base and custom key bindings for one line editor."""

    def __init__(
        self,
        config: KeyBindingsConfig | None = None,
        custom: dict[KeyId, CustomAction] | None = None,
    ) -> None:
        self._key_to_operation: dict[KeyId, Operation] = {}
        self._operation_to_keys: dict[Operation, list[KeyId]] = {}
        self._custom: dict[KeyId, CustomAction] = {}
        self._build_maps(config or {})
        for key, action in (custom or {}).items():
            self.add_custom_binding(key, action)

    def _build_maps(self, config: KeyBindingsConfig) -> None:
        # Start with defaults
        for operation, keys in DEFAULT_KEY_BINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._operation_to_keys[operation] = list(key_array)

        # Override with caller config
        for operation, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._operation_to_keys[operation] = list(key_array)

        for operation, keys in self._operation_to_keys.items():
            for key in keys:
                self._key_to_operation[key] = operation

    # -- lookup -------------------------------------------------------------

    def resolve(self, key: KeyId) -> Binding:
        """Resolve *key*: custom table, then base table, then ``insertChar``."""
        action = self._custom.get(key)
        if action is not None:
            return Binding(key, "custom", action=action)

        digit = ARGUMENT_DIGIT_KEYS.get(key)
        if digit is not None:
            return Binding(key, "argumentDigit", argument=digit)

        operation = self._key_to_operation.get(key)
        if operation is not None:
            return Binding(key, operation)

        return Binding(key, "insertChar")

    def get_keys(self, operation: Operation) -> list[KeyId]:
        """Get base keys bound to *operation*."""
        return list(self._operation_to_keys.get(operation, []))

    def is_base_key(self, key: KeyId) -> bool:
        return key in self._key_to_operation or key in ARGUMENT_DIGIT_KEYS

    @property
    def custom_bindings(self) -> dict[KeyId, CustomAction]:
        return dict(self._custom)

    # -- custom bindings ----------------------------------------------------

    def add_custom_binding(self, key: KeyId, action: CustomAction) -> None:
        if self.is_base_key(key):
            raise KeyBindingError(f"{key} is already bound to a built-in operation")
        if key in self._custom:
            raise KeyBindingError(f"{key} already has a custom binding")
        self._custom[key] = action
        logger.info("Added custom binding for %s", key)

    def change_custom_binding(self, key: KeyId, action: CustomAction) -> None:
        if key not in self._custom:
            raise KeyBindingError(f"{key} has no custom binding to change")
        self._custom[key] = action
        logger.info("Changed custom binding for %s", key)

    def remove_custom_binding(self, key: KeyId) -> None:
        if key not in self._custom:
            raise KeyBindingError(f"{key} has no custom binding to remove")
        del self._custom[key]
        logger.info("Removed custom binding for %s", key)
