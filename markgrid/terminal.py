"""Terminal interface using Blessed for display and raw reads for input."""

import os
import select
import sys
from typing import Optional

import blessed

from .constants import RendererConstants
from .model import RenderedLine, SegmentStyle

# No terminfo capability for strikethrough; plain SGR 9 is widely supported
STRIKETHROUGH = "\x1b[9m"


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self.mouse_enabled = False
        # Virtual screen state for minimal updates
        self._last_lines: list[str] | None = None
        self._last_status: str | None = None
        self._last_left_margin: int | None = None
        self._last_view_width: int | None = None

    def setup(self, mouse: bool = True):
        """Enter fullscreen mode, hide the cursor and start mouse reporting."""
        print(self.term.enter_fullscreen, end='')
        print(self.term.hide_cursor, end='')
        print(self.term.clear, end='')
        self.is_fullscreen = True
        if mouse:
            print(RendererConstants.MOUSE_ENABLE, end='', flush=True)
            self.mouse_enabled = True

    def cleanup(self):
        """Stop mouse reporting and restore the terminal."""
        if self.mouse_enabled:
            print(RendererConstants.MOUSE_DISABLE, end='')
            self.mouse_enabled = False
        if self.is_fullscreen:
            print(self.term.exit_fullscreen, end='')
            print(self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False

    def invalidate_frame(self) -> None:
        """Invalidate cached frame so next update does a full clear."""
        self._last_lines = None
        self._last_status = None
        self._last_left_margin = None
        self._last_view_width = None

    def style_sequence(self, style: SegmentStyle) -> str:
        """Blessed formatting for a segment style, starting from normal."""
        parts = [self.term.normal]
        if style.bold:
            parts.append(self.term.bold)
        if style.italic:
            parts.append(self.term.italic)
        if style.underline:
            parts.append(self.term.underline)
        if style.dim:
            parts.append(self.term.dim)
        if style.strikethrough and self.term.does_styling:
            parts.append(STRIKETHROUGH)
        if style.color:
            parts.append(getattr(self.term, style.color, ''))
        if style.background_color:
            parts.append(getattr(self.term, f"on_{style.background_color}", ''))
        return ''.join(str(p) for p in parts)

    def compose_line(self, line: RenderedLine, view_width: int) -> str:
        """Compose a rendered line with its styles, padded to the view width.

        Text past the view width is cut off; the rest of the row is filled
        with unstyled spaces.
        """
        out = [' ' * line.indent]
        used = line.indent
        for segment in line.segments:
            if used >= view_width:
                break
            text = segment.text[:view_width - used]
            if not text:
                continue
            out.append(self.style_sequence(segment.style) + text)
            used += len(text)
        out.append(str(self.term.normal))
        out.append(' ' * max(0, view_width - used))
        return ''.join(out)

    def update_frame(
        self,
        lines: list[RenderedLine],
        left_margin: int,
        view_width: int,
        top: int = 0,
        status: Optional[str] = None,
    ) -> None:
        """Diff against last frame and write only changes.

        Falls back to a full clear on first paint or when geometry changes.
        Rows past the end of the document are drawn blank so the frame
        always fills the viewport.
        """
        rows = self.height - top
        composed = []
        for y in range(rows):
            if y < len(lines):
                composed.append(self.compose_line(lines[y], view_width))
            else:
                composed.append(' ' * view_width)

        need_full_clear = (
            self._last_lines is None
            or self._last_left_margin != left_margin
            or self._last_view_width != view_width
            or len(self._last_lines) != len(composed)
        )
        if need_full_clear:
            print(self.term.home + self.term.clear, end='')
            self._last_lines = ["" for _ in range(len(composed))]
            self._last_status = None
            self._last_left_margin = left_margin
            self._last_view_width = view_width

        for y, new_disp in enumerate(composed):
            if new_disp != self._last_lines[y]:
                print(self.term.move(top + y, left_margin) + new_disp, end='')
                self._last_lines[y] = new_disp

        # Status line at bottom
        status_text = (status or "")[:self.term.width].ljust(self.term.width)
        if status_text != (self._last_status or ""):
            print(self.term.move(self.term.height - 1, 0) + self.term.reverse + status_text
                  + self.term.normal, end='')
            self._last_status = status_text
        print('', end='', flush=True)

    def draw_header(self, lines: list[RenderedLine], left_margin: int, view_width: int) -> None:
        """Draw the header rows above the document, starting at the top row."""
        for y, line in enumerate(lines):
            print(self.term.move(y, left_margin) + self.compose_line(line, view_width), end='')
        print('', end='', flush=True)

    def draw_error_message(self, message1: str, message2: str = ""):
        """Draw an error message in the center of the screen."""
        print(self.term.home + self.term.clear, end='')
        center_y = self.term.height // 2
        print(self.term.move(center_y - 1, 0) + message1.center(self.term.width), end='')
        if message2:
            print(self.term.move(center_y, 0) + message2.center(self.term.width), end='')
        print('', end='', flush=True)
        self.invalidate_frame()

    def read_input(self, timeout: Optional[float] = None) -> Optional[bytes]:
        """Read whatever input bytes are available.

        Args:
            timeout: Seconds to wait (None blocks, 0 polls)

        Returns:
            The bytes read, or None if nothing arrived in time.
        """
        fd = sys.stdin.fileno()
        ready, _, _ = select.select([fd], [], [], timeout)
        if not ready:
            return None
        return os.read(fd, 1024)

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows (excluding status line)."""
        return self.term.height - 1  # Reserve one line for status
