"""Interactive full-screen viewer for a markup document."""

import logging
import os
import select
import signal
import sys
import termios
from typing import Callable, Iterable, Optional

from .commands import CommandRegistry
from .constants import RendererConstants
from .input_decoder import InputDecoder, InputEvent
from .keyboard import KeyEvent
from .header import header_lines
from .model import DocumentDiff, DocumentSelection, EmailHeader
from .mouse import MouseEvent
from .selection import SelectionController
from .settings_persistence import SettingsPersistence
from .terminal import TerminalInterface
from .view import DocumentView

logger = logging.getLogger(__name__)

class DocumentViewer:
    """Scroll through a rendered document and select text with the mouse.

    The viewer owns the terminal while it runs. Keys are dispatched through
    the command registry; pointer events scroll (wheel) or drive the
    selection controller. `run()` returns the selection that was current
    when the viewer closed, or None.

    A title row, and the email header when one is given, sit above the
    document; the view starts on the row below them.
    """

    def __init__(self, content: str, path: Optional[str] = None,
                 diffs: Iterable[DocumentDiff] = (), width: Optional[int] = None,
                 read_only: bool = False, terminal: Optional[TerminalInterface] = None,
                 title: Optional[str] = None, email: Optional[EmailHeader] = None,
                 persistence: Optional[SettingsPersistence] = None,
                 on_selection_change: Optional[Callable[[Optional[DocumentSelection]], None]] = None):
        self.path = path
        self.persistence = persistence
        settings = persistence.load_settings(path) if persistence else {}

        self.terminal = terminal or TerminalInterface()
        self.requested_width = width or settings.get('width') or RendererConstants.DEFAULT_WIDTH
        self.read_only = read_only or bool(settings.get('read_only', False))
        self.title = title or (os.path.basename(path) if path else "markgrid")
        self.email = email
        # Header height does not depend on the width
        self.header_rows = len(header_lines(self.title, email))
        self.view = DocumentView(
            content,
            diffs,
            num_columns=self.requested_width,
            num_rows=max(1, self.terminal.height - self.header_rows),
            start_row=self.header_rows + 1,
        )
        self.view.scroll_offset = settings.get('scroll_offset') or 0
        self.controller = SelectionController(
            content,
            on_selection_change=self._selection_changed,
            enabled=not self.read_only,
        )
        self.on_selection_change = on_selection_change
        self.decoder = InputDecoder()
        self.command_registry = CommandRegistry()
        self.last_selection: Optional[DocumentSelection] = None
        self.running = False
        self.error_mode = False  # True when terminal is too narrow
        self._resize_pipe_r: Optional[int] = None
        self._resize_pipe_w: Optional[int] = None

    # --- Layout ---
    @property
    def view_width(self) -> int:
        return max(1, min(self.requested_width, self.terminal.width))

    @property
    def left_margin(self) -> int:
        return max(0, (self.terminal.width - self.view_width) // 2)

    def update_layout(self) -> None:
        """Fit the view to the current terminal size."""
        self.view.set_width(self.view_width)
        self.view.num_rows = max(1, self.terminal.height - self.header_rows)
        self.view.start_col = self.left_margin
        # Re-clamp after a resize
        self.view.scroll_to(self.view.scroll_offset)
        self.sync_selection_geometry()

    def sync_selection_geometry(self) -> None:
        """Hand the controller the map and offsets of what is on screen."""
        self.controller.update_geometry(
            content=self.view.content,
            position_index=self.view.position_index,
            scroll_offset=self.view.scroll_offset,
            start_col=self.view.start_col,
        )

    # --- Events ---
    def _selection_changed(self, selection: Optional[DocumentSelection]) -> None:
        self.last_selection = selection
        if self.on_selection_change is not None:
            self.on_selection_change(selection)

    def handle_event(self, event: InputEvent) -> bool:
        """Apply one decoded input event; returns True if a redraw is needed."""
        if isinstance(event, KeyEvent):
            if self.error_mode and event.value not in ('q', 'escape'):
                return False
            return self.command_registry.execute(self, event)
        if isinstance(event, MouseEvent):
            return self._handle_mouse_event(event)
        return False

    def _handle_mouse_event(self, event: MouseEvent) -> bool:
        if self.error_mode:
            return False
        if event.is_wheel:
            moved = self.view.scroll_by(event.wheel_delta * RendererConstants.WHEEL_SCROLL_LINES)
            if moved:
                self.sync_selection_geometry()
            return moved
        changed = self.controller.handle_mouse_event(event)
        if changed:
            self.view.selection = self.controller.range
        return changed

    def close(self) -> None:
        """Leave the viewer, dropping any in-progress drag."""
        self.running = False
        self.controller.reset()
        self.view.clear_selection()

    # --- Drawing ---
    def _status_text(self) -> str:
        base = RendererConstants.STATUS_READ_ONLY if self.read_only else RendererConstants.STATUS_HELP
        total = len(self.view.lines)
        if total:
            first = self.view.scroll_offset + 1
            last = min(total, self.view.scroll_offset + self.view.num_rows)
            base = f"{base} | {first}-{last}/{total}"
        if self.last_selection is not None:
            base = f"{base} | {len(self.last_selection.selected_text)} selected"
        return f" {base}"

    def _draw(self) -> None:
        if self.terminal.width < RendererConstants.MIN_WIDTH:
            self.error_mode = True
            self.terminal.draw_error_message(
                RendererConstants.TERMINAL_TOO_NARROW_MESSAGE.format(RendererConstants.MIN_WIDTH),
                f"Current width: {self.terminal.width}",
            )
            return
        self.error_mode = False
        self.update_layout()
        self.terminal.update_frame(
            self.view.render(),
            left_margin=self.left_margin,
            view_width=self.view_width,
            top=self.header_rows,
            status=self._status_text(),
        )
        self.terminal.draw_header(
            header_lines(self.title, self.email, self.view_width), self.left_margin, self.view_width)

    # --- Main loop ---
    def _handle_resize(self, signum, frame):
        del signum, frame  # Unused
        # Wake up select()
        os.write(self._resize_pipe_w, RendererConstants.RESIZE_PIPE_MARKER)

    def _read_events(self) -> tuple[list[InputEvent], bool]:
        """Wait for input; returns (events, resized)."""
        timeout = RendererConstants.ESCAPE_SEQUENCE_TIMEOUT if self.decoder.pending else None
        ready, _, _ = select.select([0, self._resize_pipe_r], [], [], timeout)
        if not ready:
            # Nothing followed a partial sequence; settle it
            return self.decoder.flush(), False
        if self._resize_pipe_r in ready:
            os.read(self._resize_pipe_r, 1024)
            return [], True
        data = self.terminal.read_input(timeout=0)
        if not data:
            return [], False
        return self.decoder.feed(data), False

    def run(self) -> Optional[DocumentSelection]:
        """Run until closed; returns the final selection."""
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        self.terminal.setup(mouse=not self.read_only)
        self.running = True
        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)

        try:
            with self.terminal.term.cbreak():
                old_settings = None
                try:
                    old_settings = termios.tcgetattr(sys.stdin)
                    new_settings = list(old_settings)
                    # Let Ctrl-Q and Ctrl-V reach us instead of the tty
                    new_settings[0] &= ~(termios.IXON | termios.IXOFF)
                    new_settings[3] &= ~termios.IEXTEN
                    termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
                except (termios.error, AttributeError, OSError):
                    old_settings = None

                need_draw = True
                while self.running:
                    if need_draw:
                        self._draw()
                        need_draw = False

                    events, resized = self._read_events()
                    if resized:
                        self.terminal.invalidate_frame()
                        need_draw = True
                    for event in events:
                        if self.handle_event(event):
                            need_draw = True
                        if not self.running:
                            break

                if old_settings:
                    try:
                        termios.tcsetattr(sys.stdin, termios.TCSANOW, old_settings)
                    except (termios.error, OSError):
                        pass

        except KeyboardInterrupt:
            self.close()
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self.terminal.cleanup()
            self.save_state()

        return self.last_selection

    def save_state(self) -> bool:
        """Remember scroll position and width for this document."""
        if self.persistence is None or self.path is None:
            return False
        saved = self.persistence.update_settings(
            self.path,
            scroll_offset=self.view.scroll_offset,
            width=self.requested_width,
        )
        if not saved:
            logger.warning(f"Could not save viewer state for {self.path}")
        return saved
