"""Constants and style tables for the markgrid renderer."""

from .model import SegmentStyle, DiffType


class RendererConstants:
    """Central configuration constants for rendering and the viewer."""

    # Layout
    DEFAULT_WIDTH = 80  # Columns used when the caller gives no width
    MIN_WIDTH = 20  # Narrowest width the viewer will lay out
    MAX_WIDTH = 400
    RULE_MAX_WIDTH = 60  # Horizontal rules never grow past this
    RULE_MARGIN = 4
    HANGING_INDENT = 2  # Wrapped list items and quotes line up after "• " / "│ "
    EMAIL_LABEL_WIDTH = 9  # Widest label ("Subject:") plus a space

    # Scrolling
    WHEEL_SCROLL_LINES = 3
    CONTEXT_LINES = 2  # Overlap kept when paging

    # Input decoding
    ESCAPE_SEQUENCE_TIMEOUT = 0.05  # Seconds before a lone ESC counts as the Escape key
    INPUT_BUFFER_LIMIT = 100  # Pending undecodable bytes before trimming
    INPUT_BUFFER_KEEP = 50

    # SGR extended mouse mode: report all motion, SGR coordinates
    MOUSE_ENABLE = "\x1b[?1003h\x1b[?1006h"
    MOUSE_DISABLE = "\x1b[?1003l\x1b[?1006l"

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'

    # Status messages
    STATUS_HELP = "Drag to select | j/k scroll | q/Esc close"
    STATUS_READ_ONLY = "Read only | j/k scroll | q/Esc close"
    TERMINAL_TOO_NARROW_MESSAGE = "Terminal too narrow! Need at least {} columns."


MARKDOWN_STYLES: dict[str, SegmentStyle] = {
    "h1": SegmentStyle(bold=True, color="white", kind="h1"),
    "h2": SegmentStyle(bold=True, color="white", kind="h2"),
    "h3": SegmentStyle(bold=True, color="cyan", kind="h3"),
    "h4": SegmentStyle(color="cyan", kind="h4"),
    "bold": SegmentStyle(bold=True, kind="bold"),
    "italic": SegmentStyle(italic=True, kind="italic"),
    "code": SegmentStyle(color="yellow", kind="code"),
    "codeBlock": SegmentStyle(color="gray", kind="codeBlock"),
    "link": SegmentStyle(color="blue", underline=True, kind="link"),
    "listItem": SegmentStyle(kind="listItem"),
    "blockquote": SegmentStyle(color="gray", dim=True, kind="blockquote"),
    "body": SegmentStyle(kind="body"),
}

# Decorations drawn by the renderer, not taken from the source text
BULLET_STYLE = SegmentStyle(color="cyan")
QUOTE_BAR_STYLE = SegmentStyle(color="gray")
RULE_STYLE = SegmentStyle(color="gray", dim=True)

# Header rows above the document
TITLE_STYLE = SegmentStyle(bold=True)
EMAIL_LABEL_STYLE = SegmentStyle(color="gray")
EMAIL_FIELD_STYLES: dict[str, SegmentStyle] = {
    "from": SegmentStyle(color="cyan"),
    "to": SegmentStyle(color="white"),
    "cc": SegmentStyle(color="gray"),
    "bcc": SegmentStyle(color="gray"),
    "subject": SegmentStyle(bold=True),
}

DIFF_STYLES: dict[DiffType, SegmentStyle] = {
    DiffType.ADD: SegmentStyle(background_color="green"),
    DiffType.DELETE: SegmentStyle(background_color="red", strikethrough=True),
}

SELECTION_STYLE = SegmentStyle(background_color="blue")
