"""Pointer-driven text selection over a rendered document."""

import logging
from dataclasses import replace
from enum import Enum
from typing import Callable, Optional

from .model import DocumentSelection, SelectionState
from .mouse import LEFT_BUTTON, MouseEvent
from .position_map import PositionIndex, line_starts, offset_to_line_col

logger = logging.getLogger(__name__)

SelectionCallback = Callable[[Optional[DocumentSelection]], None]


class SelectionPhase(Enum):
    IDLE = "idle"
    PRESSED = "pressed"
    DRAGGING = "dragging"


class SelectionController:
    """Turns press / move / release events into a source-offset selection.

    Screen coordinates are adjusted for the content area (x minus the
    horizontal content offset, y plus the scroll offset) and resolved
    through the document's position index. The controller is the only
    writer of its SelectionState; renderers read `state` or `range`.
    """

    def __init__(self, content: str = "", position_index: Optional[PositionIndex] = None,
                 scroll_offset: int = 0, start_col: int = 0,
                 on_selection_change: Optional[SelectionCallback] = None,
                 enabled: bool = True):
        self.content = content
        self.position_index = position_index or PositionIndex()
        self.scroll_offset = scroll_offset
        self.start_col = start_col
        self.on_selection_change = on_selection_change
        self.enabled = enabled
        self.state = SelectionState()
        self.phase = SelectionPhase.IDLE
        self._line_starts = line_starts(content)
        self._emitted = False  # A non-empty selection went out during this drag

    def update_geometry(self, content: Optional[str] = None,
                        position_index: Optional[PositionIndex] = None,
                        scroll_offset: Optional[int] = None,
                        start_col: Optional[int] = None) -> None:
        """Take the latest render's content, map and viewport offsets."""
        if content is not None and content != self.content:
            self.content = content
            self._line_starts = line_starts(content)
        if position_index is not None:
            self.position_index = position_index
        if scroll_offset is not None:
            self.scroll_offset = scroll_offset
        if start_col is not None:
            self.start_col = start_col

    def _resolve(self, x: int, y: int) -> Optional[int]:
        return self.position_index.resolve(x - self.start_col, y + self.scroll_offset)

    @property
    def range(self) -> Optional[tuple[int, int]]:
        """Normalized (start, end) of a non-empty selection, else None."""
        if self.state.is_empty:
            return None
        return (self.state.start_offset, self.state.end_offset)

    @property
    def selection(self) -> Optional[DocumentSelection]:
        return self.selection_data(self.state)

    def selection_data(self, state: SelectionState) -> Optional[DocumentSelection]:
        """Describe a state as selected text plus line/column positions."""
        if state.is_empty:
            return None
        start, end = state.start_offset, state.end_offset
        start_line, start_column = offset_to_line_col(start, self.content, self._line_starts)
        end_line, end_column = offset_to_line_col(end, self.content, self._line_starts)
        return DocumentSelection(
            selected_text=self.content[start:end],
            start_offset=start,
            end_offset=end,
            start_line=start_line,
            end_line=end_line,
            start_column=start_column,
            end_column=end_column,
        )

    def _emit(self, data: Optional[DocumentSelection]) -> None:
        logger.debug("selection changed: %s", data)
        if self.on_selection_change is not None:
            self.on_selection_change(data)

    def press(self, x: int, y: int) -> bool:
        """Start a new selection at a screen position.

        Returns True if the state changed. An unresolvable position leaves
        the controller untouched.
        """
        if not self.enabled:
            return False
        offset = self._resolve(x, y)
        if offset is None:
            return False
        self.state = SelectionState(
            is_selecting=True,
            anchor_offset=offset,
            focus_offset=offset,
            start_offset=offset,
            end_offset=offset,
        )
        self.phase = SelectionPhase.PRESSED
        self._emitted = False
        return True

    def move(self, x: int, y: int) -> bool:
        """Extend the selection while the button is held."""
        if not self.enabled or self.phase == SelectionPhase.IDLE:
            return False
        offset = self._resolve(x, y)
        if offset is None:
            return False
        previous = self.state
        self.state = replace(previous.with_focus(offset), is_selecting=True)
        self.phase = SelectionPhase.DRAGGING
        changed = (self.state.start_offset, self.state.end_offset) != (
            previous.start_offset, previous.end_offset)
        if changed and not self.state.is_empty:
            self._emitted = True
            self._emit(self.selection)
        return self.state != previous

    def release(self, x: Optional[int] = None, y: Optional[int] = None) -> bool:
        """Finish the selection; emit it if it is non-empty.

        A click without a drag selects nothing and emits nothing. A drag
        that emitted a selection and then shrank back to nothing emits None
        so listeners can drop the stale selection.
        """
        if not self.enabled or self.phase == SelectionPhase.IDLE:
            return False
        self.state = replace(self.state, is_selecting=False)
        self.phase = SelectionPhase.IDLE
        data = self.selection
        if data is not None:
            self._emit(data)
        elif self._emitted:
            self._emit(None)
        self._emitted = False
        return True

    def reset(self) -> None:
        """Back to idle with no anchor or focus, e.g. when selection mode closes."""
        self.state = SelectionState()
        self.phase = SelectionPhase.IDLE
        self._emitted = False

    def handle_mouse_event(self, event: MouseEvent) -> bool:
        """Dispatch a decoded pointer event; returns True if the state changed."""
        if event.is_wheel:
            return False
        if event.is_motion:
            return self.move(event.x, event.y)
        if event.pressed:
            if event.button != LEFT_BUTTON:
                return False
            return self.press(event.x, event.y)
        return self.release(event.x, event.y)
