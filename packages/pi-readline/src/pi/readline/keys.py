"""Key events and key descriptor normalisation.

A ``KeyEvent`` is one physical key press: the key name reported by the
platform, the character it produced, and the modifier flags. ``describe_key``
turns it into a canonical descriptor such as ``"ctrl+w"``,
``"shift+alt+."`` or ``"up"``. Binding tables are keyed on these
descriptors.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str

# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    # Special keys
    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    # Symbol keys
    backtick = "`"
    hyphen = "-"
    equals = "="
    open_bracket = "["
    close_bracket = "]"
    backslash = "\\"
    semicolon = ";"
    quote = "'"
    comma = ","
    period = "."
    slash = "/"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def shift(key: str) -> str:
        return f"shift+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"

    @staticmethod
    def ctrl_shift(key: str) -> str:
        return f"ctrl+shift+{key}"

    @staticmethod
    def ctrl_alt(key: str) -> str:
        return f"ctrl+alt+{key}"

    @staticmethod
    def shift_alt(key: str) -> str:
        return f"shift+alt+{key}"

    @staticmethod
    def ctrl_shift_alt(key: str) -> str:
        return f"ctrl+shift+alt+{key}"


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

CTRL_SHIFT_MINUS = "\x1f"

# Some platforms report no key name for punctuation. The character decides
# the key instead, and a shifted character implies Shift.
CHARACTER_KEY_FALLBACK: dict[str, tuple[str, int]] = {
    ".": (".", 0),
    ">": (".", MODIFIERS["shift"]),
    ",": (",", 0),
    "<": (",", MODIFIERS["shift"]),
    "_": ("-", MODIFIERS["shift"]),
    CTRL_SHIFT_MINUS: ("-", MODIFIERS["shift"] | MODIFIERS["ctrl"]),
    "\\": ("\\", 0),
    "#": ("3", MODIFIERS["shift"]),
    "&": ("7", MODIFIERS["shift"]),
    "*": ("8", MODIFIERS["shift"]),
}


# ---------------------------------------------------------------------------
# Key events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    """A single key press.

    ``key`` is the platform key name (``"a"``, ``"3"``, ``"enter"``,
    ``"left"`` ...) or ``""`` when the platform did not report one.
    ``char`` is the character the key produced, ``""`` for none.
    """

    key: str
    char: str = ""
    shift: bool = False
    alt: bool = False
    ctrl: bool = False

    @property
    def modifiers(self) -> int:
        bits = 0
        if self.shift:
            bits |= MODIFIERS["shift"]
        if self.alt:
            bits |= MODIFIERS["alt"]
        if self.ctrl:
            bits |= MODIFIERS["ctrl"]
        return bits

    @classmethod
    def from_char(cls, char: str, *, alt: bool = False) -> KeyEvent:
        """Build the event a plain character key (optionally with Alt) produces."""
        if char == " ":
            return cls(Key.space, char, alt=alt)
        if char == "\t":
            return cls(Key.tab, char, alt=alt)
        if char.isalpha() and char.isascii():
            return cls(char.lower(), char, shift=char.isupper(), alt=alt)
        if char.isdigit() and char.isascii():
            return cls(char, char, alt=alt)
        # Punctuation: leave the key unreported so describe_key derives it
        return cls("", char, alt=alt)


def _modifier_prefix(bits: int) -> str:
    parts = []
    if bits & MODIFIERS["ctrl"]:
        parts.append("ctrl")
    if bits & MODIFIERS["shift"]:
        parts.append("shift")
    if bits & MODIFIERS["alt"]:
        parts.append("alt")
    return "".join(f"{part}+" for part in parts)


def describe_key(event: KeyEvent) -> KeyId:
    """Return the canonical descriptor for *event*.

    Modifiers are listed in ``ctrl``, ``shift``, ``alt`` order, the same order
    the ``Key`` combinators use.
    """
    key = event.key
    bits = event.modifiers

    if not key:
        fallback = CHARACTER_KEY_FALLBACK.get(event.char)
        if fallback is not None:
            key, implied = fallback
            bits |= implied
        else:
            key = event.char
    elif event.char == "-":
        key = Key.hyphen

    return _modifier_prefix(bits) + key


def is_printable(char: str) -> bool:
    """True when *char* is text that may be inserted into the line."""
    if not char:
        return False
    return all(
        ch == "\t" or not (ord(ch) < 32 or ord(ch) == 0x7F or 0x80 <= ord(ch) <= 0x9F)
        for ch in char
    )
