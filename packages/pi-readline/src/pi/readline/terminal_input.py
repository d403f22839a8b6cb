"""Decoding of raw terminal input into key events.

Handles legacy terminal sequences (CSI / SS3), xterm-style modifier
parameters, control characters and ESC-prefixed Meta keys. Kitty keyboard
protocol sequences are not enabled by the console, so they are not decoded.
"""

from __future__ import annotations

import re

from pi.readline.keys import MODIFIERS, Key, KeyEvent

ESC = "\x1b"

# ---------------------------------------------------------------------------
# Legacy sequences
# ---------------------------------------------------------------------------

LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": Key.up,
    "\x1b[B": Key.down,
    "\x1b[C": Key.right,
    "\x1b[D": Key.left,
    "\x1b[H": Key.home,
    "\x1b[F": Key.end,
    "\x1bOA": Key.up,
    "\x1bOB": Key.down,
    "\x1bOC": Key.right,
    "\x1bOD": Key.left,
    "\x1bOH": Key.home,
    "\x1bOF": Key.end,
    "\x1b[2~": Key.insert,
    "\x1b[3~": Key.delete,
    "\x1b[5~": Key.page_up,
    "\x1b[6~": Key.page_down,
    "\x1b[1~": Key.home,
    "\x1b[4~": Key.end,
    "\x1b[7~": Key.home,
    "\x1b[8~": Key.end,
}

# Final byte of "ESC [ 1 ; <mod> <final>" sequences
_CSI_LETTER_KEYS: dict[str, str] = {
    "A": Key.up,
    "B": Key.down,
    "C": Key.right,
    "D": Key.left,
    "H": Key.home,
    "F": Key.end,
}

# Number of "ESC [ <n> ; <mod> ~" sequences
_CSI_TILDE_KEYS: dict[str, str] = {
    "1": Key.home,
    "2": Key.insert,
    "3": Key.delete,
    "4": Key.end,
    "5": Key.page_up,
    "6": Key.page_down,
    "7": Key.home,
    "8": Key.end,
}

_CSI_MODIFIED_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)([ABCDHF])$")
_CSI_MODIFIED_TILDE_RE = re.compile(r"^\x1b\[(\d+);(\d+)~$")

_SHIFT_TAB = "\x1b[Z"


def _modified(key: str, modifier_param: int) -> KeyEvent:
    # xterm encodes modifiers as 1 + bitmask
    bits = max(modifier_param - 1, 0)
    return KeyEvent(
        key,
        "",
        shift=bool(bits & MODIFIERS["shift"]),
        alt=bool(bits & MODIFIERS["alt"]),
        ctrl=bool(bits & MODIFIERS["ctrl"]),
    )


def _parse_single(char: str, *, alt: bool = False) -> KeyEvent | None:
    code = ord(char)
    if char == "\r":
        return KeyEvent(Key.enter, char, alt=alt)
    if char == "\t":
        return KeyEvent(Key.tab, char, alt=alt)
    if char == "\x7f":
        return KeyEvent(Key.backspace, "\b", alt=alt)
    if char == ESC:
        return KeyEvent(Key.escape, char, alt=alt)
    if char == "\x00":
        return KeyEvent(Key.space, "\x00", alt=alt, ctrl=True)
    if 1 <= code <= 26:
        # ctrl+a .. ctrl+z (ctrl+h, ctrl+j and ctrl+m arrive here as well)
        return KeyEvent(chr(code + 96), char, alt=alt, ctrl=True)
    if code < 32:
        # ctrl+\ ctrl+] ctrl+^ ctrl+_ have no reliable key name
        return KeyEvent("", char, alt=alt)
    return KeyEvent.from_char(char, alt=alt)


def parse_input(data: str) -> KeyEvent | None:
    """Decode one complete input sequence into a ``KeyEvent``.

    Returns ``None`` for sequences that do not map to a key.
    """
    if not data:
        return None

    legacy = LEGACY_KEY_SEQUENCES.get(data)
    if legacy is not None:
        return KeyEvent(legacy)

    if data == _SHIFT_TAB:
        return KeyEvent(Key.tab, "\t", shift=True)

    match = _CSI_MODIFIED_LETTER_RE.match(data)
    if match:
        return _modified(_CSI_LETTER_KEYS[match.group(2)], int(match.group(1)))

    match = _CSI_MODIFIED_TILDE_RE.match(data)
    if match:
        key = _CSI_TILDE_KEYS.get(match.group(1))
        return _modified(key, int(match.group(2))) if key else None

    if len(data) == 1:
        return _parse_single(data)

    # Meta keys: ESC followed by a single character
    if data.startswith(ESC) and len(data) == 2:
        return _parse_single(data[1], alt=True)

    return None


def _csi_end(data: str, start: int) -> int:
    """Return the index one past the CSI sequence starting at *start*."""
    i = start + 2
    while i < len(data):
        if 0x40 <= ord(data[i]) <= 0x7E:
            return i + 1
        i += 1
    return len(data)


def split_sequences(data: str) -> list[str]:
    """Split a chunk of raw input into individual key sequences."""
    sequences: list[str] = []
    i = 0
    while i < len(data):
        char = data[i]
        if char != ESC or i + 1 >= len(data):
            sequences.append(char)
            i += 1
            continue

        nxt = data[i + 1]
        if nxt == "[":
            end = _csi_end(data, i)
        elif nxt == "O" and i + 2 < len(data):
            end = i + 3
        else:
            # Meta key (ESC + char), including ESC ESC
            end = i + 2
        sequences.append(data[i:end])
        i = end
    return sequences
