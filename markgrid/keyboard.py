"""Keyboard events decoded from raw terminal input."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    CTRL = "ctrl"
    SPECIAL = "special"


@dataclass(frozen=True)
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'q', 'up', 'page_down')
    raw: str  # The raw characters that produced it
    is_ctrl: bool = False
    is_sequence: bool = False


# CSI / SS3 sequences after ESC, as sent by xterm-compatible terminals
KEY_SEQUENCES: dict[str, str] = {
    "[A": "up",
    "[B": "down",
    "[C": "right",
    "[D": "left",
    "[H": "home",
    "[F": "end",
    "OA": "up",
    "OB": "down",
    "OC": "right",
    "OD": "left",
    "OH": "home",
    "OF": "end",
    "[1~": "home",
    "[4~": "end",
    "[7~": "home",
    "[8~": "end",
    "[2~": "insert",
    "[3~": "delete",
    "[5~": "page_up",
    "[6~": "page_down",
}


def parse_key_sequence(body: str) -> Optional[KeyEvent]:
    """Map the part of an escape sequence after ESC to a special key."""
    name = KEY_SEQUENCES.get(body)
    if name is None:
        return None
    return KeyEvent(key_type=KeyType.SPECIAL, value=name, raw="\x1b" + body, is_sequence=True)


def parse_key_char(ch: str) -> KeyEvent:
    """Parse a single decoded character into a KeyEvent."""
    if ch == "\x1b":
        return KeyEvent(key_type=KeyType.SPECIAL, value="escape", raw=ch)
    if ch in ("\r", "\n"):
        return KeyEvent(key_type=KeyType.SPECIAL, value="enter", raw=ch)
    if ch in ("\x7f", "\x08"):
        return KeyEvent(key_type=KeyType.SPECIAL, value="backspace", raw=ch)
    if ch == "\t":
        return KeyEvent(key_type=KeyType.REGULAR, value="\t", raw=ch)
    o = ord(ch)
    if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z
        return KeyEvent(key_type=KeyType.CTRL, value=chr(ord('a') + o - 1), raw=ch, is_ctrl=True)
    return KeyEvent(key_type=KeyType.REGULAR, value=ch, raw=ch)
