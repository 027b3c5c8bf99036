"""Command pattern implementation for viewer key bindings."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING
from .keyboard import KeyType

if TYPE_CHECKING:
    from .viewer import DocumentViewer
    from .keyboard import KeyEvent


class ViewerCommand(ABC):
    """Base class for viewer commands."""

    @abstractmethod
    def execute(self, viewer: 'DocumentViewer', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Args:
            viewer: DocumentViewer instance
            key_event: The key event that triggered this command

        Returns:
            True if the screen needs to be redrawn
        """
        pass


class ScrollCommand(ViewerCommand):
    """Base class for commands that move the viewport."""

    def execute(self, viewer: 'DocumentViewer', key_event: 'KeyEvent') -> bool:
        moved = self._scroll(viewer)
        if moved:
            viewer.sync_selection_geometry()
        return moved

    @abstractmethod
    def _scroll(self, viewer: 'DocumentViewer') -> bool:
        """Move the view; returns True if it moved."""
        pass


class LineDownCommand(ScrollCommand):
    def _scroll(self, viewer):
        return viewer.view.scroll_by(1)


class LineUpCommand(ScrollCommand):
    def _scroll(self, viewer):
        return viewer.view.scroll_by(-1)


class PageDownCommand(ScrollCommand):
    def _scroll(self, viewer):
        return viewer.view.scroll_page_down()


class PageUpCommand(ScrollCommand):
    def _scroll(self, viewer):
        return viewer.view.scroll_page_up()


class TopCommand(ScrollCommand):
    def _scroll(self, viewer):
        return viewer.view.scroll_to_top()


class BottomCommand(ScrollCommand):
    def _scroll(self, viewer):
        return viewer.view.scroll_to_bottom()


class CloseCommand(ViewerCommand):
    def execute(self, viewer, key_event):
        viewer.close()
        return False


class RedrawCommand(ViewerCommand):
    def execute(self, viewer, key_event):
        viewer.terminal.invalidate_frame()
        return True


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], ViewerCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Line scrolling
        self.register((KeyType.SPECIAL, 'down'), LineDownCommand())
        self.register((KeyType.SPECIAL, 'up'), LineUpCommand())
        self.register((KeyType.REGULAR, 'j'), LineDownCommand())
        self.register((KeyType.REGULAR, 'k'), LineUpCommand())
        self.register((KeyType.SPECIAL, 'enter'), LineDownCommand())

        # Paging
        self.register((KeyType.SPECIAL, 'page_down'), PageDownCommand())
        self.register((KeyType.SPECIAL, 'page_up'), PageUpCommand())
        self.register((KeyType.REGULAR, ' '), PageDownCommand())
        self.register((KeyType.REGULAR, 'b'), PageUpCommand())
        self.register((KeyType.CTRL, 'v'), PageDownCommand())

        # Document ends
        self.register((KeyType.SPECIAL, 'home'), TopCommand())
        self.register((KeyType.SPECIAL, 'end'), BottomCommand())
        self.register((KeyType.REGULAR, 'g'), TopCommand())
        self.register((KeyType.REGULAR, 'G'), BottomCommand())

        # System commands
        self.register((KeyType.SPECIAL, 'escape'), CloseCommand())
        self.register((KeyType.REGULAR, 'q'), CloseCommand())
        self.register((KeyType.CTRL, 'q'), CloseCommand())
        self.register((KeyType.CTRL, 'l'), RedrawCommand())

    def register(self, key: Tuple[KeyType, str], command: ViewerCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[ViewerCommand]:
        """Get the command for a key combination."""
        return self._commands.get((key_type, value))

    def execute(self, viewer: 'DocumentViewer', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if the screen needs to be redrawn
        """
        command = self.get_command(key_event.key_type, key_event.value)
        if command:
            return command.execute(viewer, key_event)
        return False
