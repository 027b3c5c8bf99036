"""Byte-stream decoder for terminal input.

Raw bytes from the terminal are accumulated in a buffer; each step tries to
match one complete unit at the front of the buffer (an SGR mouse report, a
key escape sequence or a single character) and consumes it. Incomplete
sequences stay buffered until more bytes arrive or the caller flushes after
the escape timeout. Nothing here touches a real terminal, so the decoder can
be driven directly from tests.
"""

import codecs
import re
from typing import Union

from .constants import RendererConstants
from .keyboard import KeyEvent, parse_key_char, parse_key_sequence
from .mouse import SGR_MOUSE_RE, MouseEvent, decode_button

InputEvent = Union[KeyEvent, MouseEvent]

ESC = "\x1b"
_SGR_PARTIAL_RE = re.compile(r"\x1b\[<[\d;]*\Z")


def _is_final_byte(ch: str) -> bool:
    # CSI sequences end with a byte in 0x40-0x7E
    return "@" <= ch <= "~"


class InputDecoder:
    """Accumulate → try-match → consume scanner for key and mouse input."""

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> bool:
        """True while an incomplete sequence is waiting for more input."""
        return bool(self._buffer)

    def feed(self, data: bytes) -> list[InputEvent]:
        """Add raw bytes and return every event that is now complete."""
        self._buffer += self._decoder.decode(data)
        events = self._drain()
        # Keep the buffer from growing without bound on junk input
        if len(self._buffer) > RendererConstants.INPUT_BUFFER_LIMIT:
            self._buffer = self._buffer[-RendererConstants.INPUT_BUFFER_KEEP:]
        return events

    def flush(self) -> list[InputEvent]:
        """Resolve whatever is buffered once no more bytes are coming.

        A lone ESC becomes the Escape key; a truncated mouse report is
        dropped; any other leftover is decoded character by character.
        """
        events: list[InputEvent] = []
        if _SGR_PARTIAL_RE.match(self._buffer):
            self._buffer = ""
            return events
        while self._buffer:
            events.append(parse_key_char(self._buffer[0]))
            self._buffer = self._buffer[1:]
            events.extend(self._drain())
        return events

    def reset(self) -> None:
        self._buffer = ""
        self._decoder.reset()

    def _drain(self) -> list[InputEvent]:
        events: list[InputEvent] = []
        while self._buffer:
            event, consumed = self._match(self._buffer)
            if consumed == 0:
                # Incomplete; wait for more input
                break
            self._buffer = self._buffer[consumed:]
            if event is not None:
                events.append(event)
        return events

    def _match(self, buf: str) -> tuple[Union[InputEvent, None], int]:
        """Try to match one unit at the front of buf.

        Returns (event, consumed). consumed == 0 means the front of the
        buffer is an incomplete sequence; an event of None with consumed > 0
        means bytes were discarded.
        """
        if buf[0] != ESC:
            return (parse_key_char(buf[0]), 1)
        if len(buf) == 1:
            return (None, 0)

        introducer = buf[1]
        if introducer == "[":
            if buf.startswith("\x1b[<"):
                match = SGR_MOUSE_RE.match(buf)
                if match:
                    btn, x, y, action = match.groups()
                    return (decode_button(int(btn), int(x), int(y), action == "M"), match.end())
                if _SGR_PARTIAL_RE.match(buf):
                    return (None, 0)
                # Malformed report: drop the ESC and resync
                return (None, 1)
            for j in range(2, len(buf)):
                if _is_final_byte(buf[j]):
                    # Unknown sequences are consumed silently
                    return (parse_key_sequence(buf[1:j + 1]), j + 1)
            return (None, 0)

        if introducer == "O":
            if len(buf) < 3:
                return (None, 0)
            return (parse_key_sequence(buf[1:3]), 3)

        # ESC followed by an ordinary character: the Escape key, then that key
        return (parse_key_char(ESC), 1)
