"""Tests for pointer-driven selection."""

import unittest

from markgrid.model import DocumentSelection
from markgrid.mouse import MouseEvent
from markgrid.selection import SelectionController, SelectionPhase
from markgrid.view import DocumentView


def make_controller(content, **kwargs):
    """Controller over a full-width render of content; records emissions."""
    view = DocumentView(content, num_columns=80, num_rows=20)
    emitted = []
    controller = SelectionController(
        content,
        view.position_index,
        on_selection_change=emitted.append,
        **kwargs,
    )
    return controller, emitted


class TestSelectionController(unittest.TestCase):

    def test_drag_across_bold_into_plain_text(self):
        content = "**bold** text"
        controller, emitted = make_controller(content)

        # Screen: "bold text"; column 2 is "o" (offset 3), column 7 is "e" (offset 10)
        self.assertTrue(controller.press(2, 1))
        self.assertTrue(controller.move(7, 1))
        self.assertTrue(controller.release(7, 1))

        selection = emitted[-1]
        self.assertIsInstance(selection, DocumentSelection)
        self.assertEqual(selection.selected_text, "old** t")
        self.assertEqual((selection.start_offset, selection.end_offset), (3, 10))
        self.assertEqual(selection.start_line, selection.end_line)
        self.assertEqual((selection.start_column, selection.end_column), (4, 11))

    def test_backwards_drag_is_normalized(self):
        controller, emitted = make_controller("**bold** text")
        controller.press(7, 1)
        controller.move(2, 1)

        state = controller.state
        self.assertEqual((state.anchor_offset, state.focus_offset), (10, 3))
        self.assertEqual((state.start_offset, state.end_offset), (3, 10))
        self.assertEqual(controller.range, (3, 10))
        self.assertTrue(state.is_selecting)

    def test_move_emits_while_dragging(self):
        controller, emitted = make_controller("hello world")
        controller.press(1, 1)
        controller.move(3, 1)
        controller.move(5, 1)
        self.assertEqual([s.selected_text for s in emitted], ["he", "hell"])
        self.assertEqual(controller.phase, SelectionPhase.DRAGGING)

    def test_move_to_same_offset_does_not_emit(self):
        controller, emitted = make_controller("hello world")
        controller.press(1, 1)
        controller.move(3, 1)
        controller.move(3, 1)
        self.assertEqual(len(emitted), 1)

    def test_click_without_drag_emits_nothing(self):
        controller, emitted = make_controller("hello world")
        controller.press(4, 1)
        controller.release(4, 1)
        self.assertEqual(emitted, [])
        self.assertIsNone(controller.range)
        self.assertEqual(controller.phase, SelectionPhase.IDLE)

    def test_drag_back_to_anchor_emits_none_on_release(self):
        controller, emitted = make_controller("hello world")
        controller.press(2, 1)
        controller.move(5, 1)
        controller.move(2, 1)
        controller.release()
        self.assertEqual(len(emitted), 2)
        self.assertIsNone(emitted[-1])

    def test_release_keeps_the_range(self):
        controller, emitted = make_controller("hello world")
        controller.press(1, 1)
        controller.move(6, 1)
        controller.release()
        self.assertEqual(controller.range, (0, 5))
        self.assertFalse(controller.state.is_selecting)

    def test_move_before_press_is_ignored(self):
        controller, emitted = make_controller("hello world")
        self.assertFalse(controller.move(3, 1))
        self.assertFalse(controller.release(3, 1))
        self.assertEqual(emitted, [])

    def test_multi_line_selection(self):
        content = "ab\n\ncd"
        controller, emitted = make_controller(content)
        controller.press(1, 1)
        controller.move(2, 3)
        controller.release()

        selection = emitted[-1]
        self.assertEqual(selection.selected_text, "ab\n\nc")
        self.assertEqual((selection.start_line, selection.end_line), (1, 3))
        self.assertEqual((selection.start_column, selection.end_column), (1, 2))

    def test_pointer_past_end_of_line_selects_to_last_character(self):
        controller, emitted = make_controller("hello")
        controller.press(1, 1)
        controller.move(60, 1)
        self.assertEqual(controller.range, (0, 4))

    def test_scroll_offset_is_applied(self):
        content = "# a\n# b\n# c"
        controller, emitted = make_controller(content, scroll_offset=1)
        controller.press(3, 1)
        # Screen row 1 shows the second heading
        self.assertEqual(controller.state.anchor_offset, 6)

    def test_content_column_offset_is_applied(self):
        controller, emitted = make_controller("hello", start_col=10)
        controller.press(13, 1)
        self.assertEqual(controller.state.anchor_offset, 2)

    def test_update_geometry(self):
        controller, emitted = make_controller("hello")
        view = DocumentView("abc\n\nxyz", start_row=2)
        controller.update_geometry("abc\n\nxyz", view.position_index, scroll_offset=0, start_col=0)
        controller.press(1, 4)
        self.assertEqual(controller.state.anchor_offset, 5)
        self.assertEqual(controller.content, "abc\n\nxyz")

    def test_empty_map_skips_update(self):
        controller = SelectionController("")
        self.assertFalse(controller.press(1, 1))
        self.assertEqual(controller.phase, SelectionPhase.IDLE)
        self.assertIsNone(controller.state.anchor_offset)

    def test_disabled_controller_ignores_input(self):
        controller, emitted = make_controller("hello", enabled=False)
        self.assertFalse(controller.press(1, 1))
        self.assertFalse(controller.move(3, 1))
        self.assertEqual(emitted, [])

    def test_reset(self):
        controller, emitted = make_controller("hello world")
        controller.press(1, 1)
        controller.move(4, 1)
        controller.reset()
        self.assertIsNone(controller.state.anchor_offset)
        self.assertIsNone(controller.state.focus_offset)
        self.assertIsNone(controller.range)
        self.assertEqual(controller.phase, SelectionPhase.IDLE)


class TestMouseEventDispatch(unittest.TestCase):

    def setUp(self):
        self.controller, self.emitted = make_controller("hello world")

    def test_press_drag_release(self):
        self.assertTrue(self.controller.handle_mouse_event(MouseEvent(x=1, y=1)))
        self.assertTrue(self.controller.handle_mouse_event(MouseEvent(x=5, y=1, is_motion=True)))
        self.assertTrue(self.controller.handle_mouse_event(MouseEvent(x=5, y=1, pressed=False)))
        self.assertEqual(self.emitted[-1].selected_text, "hell")

    def test_wheel_is_ignored(self):
        self.assertFalse(self.controller.handle_mouse_event(MouseEvent(x=1, y=1, button=0, is_wheel=True)))
        self.assertEqual(self.controller.phase, SelectionPhase.IDLE)

    def test_right_button_is_ignored(self):
        self.assertFalse(self.controller.handle_mouse_event(MouseEvent(x=1, y=1, button=2)))
        self.assertEqual(self.controller.phase, SelectionPhase.IDLE)

    def test_motion_without_press_is_ignored(self):
        self.assertFalse(self.controller.handle_mouse_event(MouseEvent(x=4, y=1, is_motion=True)))


if __name__ == '__main__':
    unittest.main()
