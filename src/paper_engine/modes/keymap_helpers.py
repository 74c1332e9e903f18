"""Helper utilities for keymap-driven modes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

from paper_engine.buffer.marks import BACKSPACE, LINE_BREAK

if TYPE_CHECKING:  # pragma: no cover
    from .base_mode import KeyInput

ESC = "ESC"
ENTER = "ENTER"
TAB = "TAB"
BACKSPACE_KEY = "BACKSPACE"

# Named keys that stand for a character typed into a sketch or the buffer.
NAMED_CHARS: Dict[str, str] = {
    ENTER: LINE_BREAK,
    BACKSPACE_KEY: BACKSPACE,
    TAB: "\t",
}

# Raw terminal characters and their key names.
CHAR_KEYS: Dict[str, str] = {
    "\x1b": ESC,
    "\n": ENTER,
    "\r": ENTER,
    "\t": TAB,
    "\b": BACKSPACE_KEY,
    "\x7f": BACKSPACE_KEY,
}


def key_to_token(key: "KeyInput") -> str:
    if key.modifiers:
        modifier = "+".join(key.modifiers)
        return f"{modifier}+{key.key}"
    return key.key


def key_to_char(key: "KeyInput") -> Optional[str]:
    """Return the character ``key`` types, or ``None`` for non-text keys."""

    if key.modifiers:
        return None
    if key.key in NAMED_CHARS:
        return NAMED_CHARS[key.key]
    if key.text:
        return key.text
    if len(key.key) == 1:
        return key.key
    return None


__all__ = [
    "BACKSPACE_KEY",
    "CHAR_KEYS",
    "ENTER",
    "ESC",
    "NAMED_CHARS",
    "TAB",
    "key_to_char",
    "key_to_token",
]
